"""Composite key naming for kontrolle.

A (group, resource) pair collapses into one indexable string:

    encode("users", "manage")        -> "users:manage"
    decode("users:manage")           -> DecodedName("users", "manage")
    decode("a:b:c")                  -> DecodedName("a", "b:c")

Decoding splits at the first delimiter, so encode rejects groups that
contain it. Resources may contain it.
"""

from typing import NamedTuple

from ..errors import ConfigError

DEFAULT_DELIMITER = ":"


class DecodedName(NamedTuple):
    """A composite key split back into its parts."""
    group: str
    resource: str


def encode(group: str, resource: str, delimiter: str = DEFAULT_DELIMITER) -> str:
    """Build the composite key for a group and resource."""
    if not delimiter:
        raise ConfigError("Delimiter is not defined")
    if not group:
        raise ConfigError("Group is not defined")
    if delimiter in group:
        raise ConfigError(f"Group {group!r} must not contain the delimiter {delimiter!r}")
    if not resource:
        raise ConfigError("Resource is not defined")
    return f"{group}{delimiter}{resource}"


def decode(name: str, delimiter: str = DEFAULT_DELIMITER) -> DecodedName:
    """Split a composite key at the first occurrence of the delimiter."""
    if not delimiter:
        raise ConfigError("Delimiter is required")
    if not name:
        raise ConfigError("Name is required")

    group, found, resource = name.partition(delimiter)
    if not found:
        raise ConfigError(f"Invalid composite name: {name}")
    return DecodedName(group, resource)
