from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field, IPvAnyAddress, field_validator

from etchosts.constants import COMMENT_CHAR, NAME_SEPARATOR


def is_host_token(name) -> bool:
    """True for a non-empty name that stays a single token on disk."""
    return isinstance(name, str) and name.split() == [name] and COMMENT_CHAR not in name


class Record(BaseModel):
    """One address and the host names that resolve to it."""

    model_config = ConfigDict(frozen=True)

    address: IPvAnyAddress = Field(..., alias="address")  # Required field
    hosts: Tuple[str, ...] = Field(..., alias="hosts")  # Required, may be a string

    @field_validator("hosts", mode="before")
    @classmethod
    def split_hosts(cls, value):
        """Accepts "name1 name2" as well as a sequence of names."""
        if isinstance(value, str):
            return tuple(value.split())
        if isinstance(value, list):
            return tuple(value)
        return value

    @field_validator("hosts")
    @classmethod
    def check_hosts(cls, value):
        for name in value:
            if not is_host_token(name):
                raise ValueError(f"host name {name!r} must be a single token without whitespace or {COMMENT_CHAR!r}")
        return value

    @property
    def names(self) -> str:
        """The host-name field as written to disk."""
        return NAME_SEPARATOR.join(self.hosts)

    @property
    def is_ipv4(self) -> bool:
        return self.address.version == 4


# Entries every hosts file built from scratch starts with, in this order.
DEFAULT_RECORDS: Tuple[Record, ...] = (
    Record(address="127.0.0.1", hosts="localhost"),
    Record(address="::1", hosts="localhost ip6-localhost ip6-loopback"),
    Record(address="fe00::", hosts="ip6-localnet"),
    Record(address="ff00::", hosts="ip6-mcastprefix"),
    Record(address="ff02::1", hosts="ip6-allnodes"),
    Record(address="ff02::2", hosts="ip6-allrouters"),
)

DEFAULT_RECORDS_NO_IPV6: Tuple[Record, ...] = tuple(
    record for record in DEFAULT_RECORDS if record.is_ipv4
)
