import sys
from pathlib import Path
import pytest

# Add the src directory to PYTHONPATH
src_path = str(Path(__file__).parent.parent / "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from etchosts.record import Record  # noqa: E402

DEFAULT_CONTENT = (
    "127.0.0.1\tlocalhost\n"
    "::1\tlocalhost ip6-localhost ip6-loopback\n"
    "fe00::\tip6-localnet\n"
    "ff00::\tip6-mcastprefix\n"
    "ff02::1\tip6-allnodes\n"
    "ff02::2\tip6-allrouters\n"
)


@pytest.fixture
def default_content():
    """Content written by build with no extra records."""
    return DEFAULT_CONTENT


@pytest.fixture
def hosts_path(tmp_path):
    """Path to a hosts file that does not exist yet."""
    return tmp_path / "hosts"


@pytest.fixture
def record():
    """Builds a Record from an address and a space separated names string."""
    def make(address, hosts):
        return Record(address=address, hosts=hosts)
    return make
