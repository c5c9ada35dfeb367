"""Pure transformations over the lines of a hosts file.

Each function takes the current lines (terminators included) plus its
arguments and yields the lines to write back. None of them touch the file.
"""

from typing import Iterable, Iterator, List, Sequence

from etchosts.codec import decode, encode, matches_names, matches_token, replace_address
from etchosts.constants import LINE_TERMINATOR
from etchosts.logger import logger
from etchosts.record import DEFAULT_RECORDS, DEFAULT_RECORDS_NO_IPV6, Record


def encode_all(records: Iterable[Record]) -> List[str]:
    """Encodes every record up front so an invalid one fails before any write."""
    return [encode(record) for record in records]


def build_lines(records: Sequence[Record] = ()) -> List[str]:
    return encode_all(DEFAULT_RECORDS) + encode_all(records)


def build_lines_no_ipv6(records: Sequence[Record] = ()) -> List[str]:
    """Like build_lines, dropping every IPv6 entry including the defaults."""
    return encode_all(DEFAULT_RECORDS_NO_IPV6) + encode_all(
        record for record in records if record.is_ipv4
    )


def append_records(lines: Iterable[str], encoded: Sequence[str]) -> Iterator[str]:
    """Yields the current lines followed by the already encoded new ones."""
    last = None
    for line in lines:
        if last is not None:
            yield last
        last = line
    if last is not None:
        if encoded and not last.endswith(LINE_TERMINATOR):
            last += LINE_TERMINATOR
        yield last
    yield from encoded


def update_address(lines: Iterable[str], address, hostname: str) -> Iterator[str]:
    """Points every line that lists hostname at address."""
    updated = 0
    for line in lines:
        record = decode(line)
        if record is not None and matches_token(record.names, hostname):
            updated += 1
            yield replace_address(line, address)
        else:
            yield line
    logger.debug(f"Updated {updated} lines for {hostname} to {address}")


def remove_records(lines: Iterable[str], records: Sequence[Record]) -> Iterator[str]:
    """Drops every line whose host names match one of the records."""
    targets = [record.hosts for record in records]
    removed = 0
    for line in lines:
        if targets:
            record = decode(line)
            if record is not None and any(matches_names(record.names, hosts) for hosts in targets):
                removed += 1
                continue
        yield line
    logger.debug(f"Removed {removed} lines")
