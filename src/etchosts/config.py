import os
from pathlib import Path
from typing import List

import yaml
from pydantic import ValidationError

from etchosts.errors import InvalidRecord
from etchosts.record import Record

# Hosts file used when the caller does not name one.
HOSTS_FILE_PATH: str = os.environ.get("ETCHOSTS_HOSTS_FILE", "/etc/hosts")

# Appended to the hosts file path to name the sidecar lock file.
LOCK_SUFFIX: str = ".lock"


def load_records(records_file: str | Path) -> List[Record]:
    """Loads records from a YAML list of {address, hosts} mappings."""
    with open(records_file, "r") as f:
        entries = yaml.safe_load(f)
    if entries is None:
        return []
    if not isinstance(entries, list):
        raise InvalidRecord(f"Records file {records_file} must contain a list of entries.")
    records: List[Record] = []
    for entry in entries:
        if not isinstance(entry, dict):
            raise InvalidRecord(f"Invalid entry {entry!r} in {records_file}.")
        try:
            records.append(Record(**entry))
        except ValidationError as e:
            raise InvalidRecord(f"Invalid entry {entry!r} in {records_file}: {e}") from e
    return records
