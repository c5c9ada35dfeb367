"""Conversion between Records and hosts file lines.

A record line looks like ``<address>\\t<name> <name> ...\\n``. Anything else
(blank lines, comments, entries with an unparseable address) is a non-record
line: it is never matched and is passed through untouched by every operation.

Host names are always compared as whole whitespace-delimited tokens, so
``prefix`` never matches a line for ``prefixAndMore``.
"""

from typing import Iterable, Optional, Tuple

from pydantic import ValidationError

from etchosts.constants import COMMENT_CHAR, ENCODING, FIELD_SEPARATOR, LINE_TERMINATOR
from etchosts.errors import InvalidRecord
from etchosts.record import Record, is_host_token


def encode(record: Record) -> str:
    """Returns the line for a record, newline included."""
    if not record.hosts:
        raise InvalidRecord(f"Record for {record.address} has no host names.")
    bad = [name for name in record.hosts if not is_host_token(name)]
    if bad:
        raise InvalidRecord(f"Record for {record.address} has invalid host names {bad!r}.")
    return f"{record.address}{FIELD_SEPARATOR}{record.names}{LINE_TERMINATOR}"


def split_line(line: str) -> Optional[Tuple[str, str]]:
    """Splits a line into its address and host-name fields.

    Returns None when the line has no host-name field to speak of.
    """
    content = line.split(COMMENT_CHAR, 1)[0].strip()
    if not content:
        return None
    fields = content.split(None, 1)
    if len(fields) < 2:
        return None
    return fields[0], fields[1]


def decode(line: str) -> Optional[Record]:
    """Parses a line into a Record, or None for a non-record line."""
    fields = split_line(line)
    if fields is None:
        return None
    try:
        line.encode(ENCODING)
    except UnicodeEncodeError:
        # undecodable bytes, kept verbatim but never matched
        return None
    address, names = fields
    try:
        return Record(address=address, hosts=names)
    except ValidationError:
        return None


def matches_token(names_field: str, name: str) -> bool:
    """True if name is one of the whitespace-delimited tokens of names_field."""
    return name in names_field.split()


def matches_names(names_field: str, names: Iterable[str]) -> bool:
    """True if names_field holds exactly the given set of host names."""
    return set(names_field.split()) == set(names)


def replace_address(line: str, address) -> str:
    """Swaps the address field of a record line, keeping everything else."""
    stripped = line.lstrip()
    start = len(line) - len(stripped)
    old_address = stripped.split(None, 1)[0]
    return f"{line[:start]}{address}{line[start + len(old_address):]}"
