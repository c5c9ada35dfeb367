"""Operations on a hosts file shared by concurrent callers.

Each mutating call is one locked read-modify-write cycle (see etchosts.store),
so calls from different threads or processes never interleave.
"""

import ipaddress
from pathlib import Path
from typing import List, Optional, Sequence

from etchosts import mutations, store
from etchosts.codec import decode
from etchosts.errors import InvalidRecord
from etchosts.logger import logger
from etchosts.record import Record


def build(path: str | Path, records: Optional[Sequence[Record]] = None) -> None:
    """Overwrites path with the default entries followed by records."""
    lines = mutations.build_lines(records or ())
    logger.debug(f"Building {path} with {len(lines)} entries")
    store.with_lock(path, lambda _: lines)


def build_no_ipv6(path: str | Path, records: Optional[Sequence[Record]] = None) -> None:
    """Overwrites path with the IPv4 loopback entry and the IPv4 records."""
    lines = mutations.build_lines_no_ipv6(records or ())
    logger.debug(f"Building {path} without IPv6 with {len(lines)} entries")
    store.with_lock(path, lambda _: lines)


def add(path: str | Path, records: Sequence[Record]) -> None:
    """Appends records to path. Existing entries for the same names are kept."""
    encoded = mutations.encode_all(records)
    store.with_lock(path, lambda lines: mutations.append_records(lines, encoded))


def update(path: str | Path, address, hostname: str) -> None:
    """Points every entry listing hostname at address."""
    try:
        new_address = ipaddress.ip_address(str(address))
    except ValueError as e:
        raise InvalidRecord(f"Invalid address {address!r} for {hostname}.") from e
    store.with_lock(
        path, lambda lines: mutations.update_address(lines, new_address, hostname)
    )


def delete(path: str | Path, records: Sequence[Record]) -> None:
    """Removes the entries whose host names match one of records."""
    store.with_lock(path, lambda lines: mutations.remove_records(lines, records))


def read(path: str | Path) -> List[Record]:
    """Returns the records in path, skipping blank lines and comments."""
    return [record for record in map(decode, store.read(path)) if record is not None]
