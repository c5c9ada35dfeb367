"""
Tests for the locked read-modify-write cycle in etchosts.store.
"""

import gc
import multiprocessing
import os
import stat
import threading
from pathlib import Path
from unittest.mock import patch

import pytest

from etchosts import store


def test_with_lock_passes_current_lines(hosts_path):
    hosts_path.write_text("a\n\nb")
    seen = []

    def fn(lines):
        seen.extend(lines)
        return lines

    store.with_lock(hosts_path, fn)
    assert seen == ["a\n", "\n", "b"]
    assert hosts_path.read_text() == "a\n\nb"


def test_with_lock_writes_result(hosts_path):
    store.with_lock(hosts_path, lambda lines: ["1.1.1.1\thost\n"])
    assert hosts_path.read_text() == "1.1.1.1\thost\n"


def test_with_lock_creates_lock_file(hosts_path):
    store.with_lock(hosts_path, lambda lines: lines)
    assert store.lock_path_for(hosts_path.resolve()).exists()


def test_with_lock_releases_on_error(hosts_path):
    hosts_path.write_text("original\n")

    def boom(lines):
        raise RuntimeError("boom")

    with pytest.raises(RuntimeError):
        store.with_lock(hosts_path, boom)
    assert hosts_path.read_text() == "original\n"

    # The lock must be free again, otherwise this would block forever.
    store.with_lock(hosts_path, lambda lines: lines + ["next\n"])
    assert hosts_path.read_text() == "original\nnext\n"


def test_failed_replace_keeps_old_content(hosts_path):
    hosts_path.write_text("original\n")
    with patch("etchosts.store.os.replace", side_effect=OSError("disk full")):
        with pytest.raises(OSError, match="disk full"):
            store.with_lock(hosts_path, lambda lines: ["new\n"])
    assert hosts_path.read_text() == "original\n"
    # No temporary files are left behind.
    assert sorted(p.name for p in hosts_path.parent.iterdir()) == ["hosts", "hosts.lock"]


def test_write_preserves_mode(hosts_path):
    hosts_path.write_text("original\n")
    os.chmod(hosts_path, 0o644)
    store.with_lock(hosts_path, lambda lines: ["new\n"])
    assert stat.S_IMODE(os.stat(hosts_path).st_mode) == 0o644


def test_write_replaces_inode(hosts_path):
    """Readers holding the old file keep seeing complete old content."""
    hosts_path.write_text("old\n")
    with open(hosts_path) as reader:
        store.with_lock(hosts_path, lambda lines: ["new\n"])
        assert reader.read() == "old\n"
    assert hosts_path.read_text() == "new\n"


def test_missing_directory_raises_oserror(tmp_path):
    with pytest.raises(OSError):
        store.with_lock(tmp_path / "missing" / "hosts", lambda lines: lines)


def test_read_does_not_modify(hosts_path):
    hosts_path.write_text("x\ty\n")
    before = os.stat(hosts_path).st_ino
    assert store.read(hosts_path) == ["x\ty\n"]
    assert os.stat(hosts_path).st_ino == before


def test_lock_is_exclusive_between_threads(hosts_path):
    entered = threading.Event()
    release = threading.Event()
    order = []

    def holder():
        with store.locked(hosts_path):
            entered.set()
            release.wait(5)
            order.append("holder")

    thread = threading.Thread(target=holder)
    thread.start()
    assert entered.wait(5)

    def waiter():
        with store.locked(hosts_path):
            order.append("waiter")

    second = threading.Thread(target=waiter)
    second.start()
    second.join(0.2)
    assert order == []
    release.set()
    thread.join(5)
    second.join(5)
    assert order == ["holder", "waiter"]


def test_same_file_shares_lock(hosts_path, monkeypatch):
    monkeypatch.chdir(hosts_path.parent)
    assert store._thread_lock(hosts_path.resolve()) is store._thread_lock(
        Path("hosts").resolve()
    )


def test_lock_registry_does_not_grow(tmp_path):
    paths = [tmp_path / f"hosts{i}" for i in range(5)]
    for path in paths:
        store.with_lock(path, lambda lines: lines)
    gc.collect()
    assert not any(path.resolve() in store._path_locks for path in paths)


@pytest.mark.skipif(
    "fork" not in multiprocessing.get_all_start_methods(), reason="requires fork"
)
def test_forked_child_does_not_inherit_held_lock(hosts_path):
    """A lock held by the parent at fork time must not block the child."""
    ctx = multiprocessing.get_context("fork")
    held = store._thread_lock(hosts_path.resolve())
    with held:
        child = ctx.Process(
            target=store.with_lock, args=(hosts_path, lambda lines: ["from child\n"])
        )
        child.start()
        child.join(30)
        if child.is_alive():
            child.kill()
        assert child.exitcode == 0
    assert hosts_path.read_text() == "from child\n"


def test_write_syncs_directory(hosts_path):
    with patch("etchosts.store.os.fsync", wraps=os.fsync) as fsync:
        store.with_lock(hosts_path, lambda lines: ["new\n"])
    # once for the temp file, once for the directory holding the rename
    assert fsync.call_count == 2
