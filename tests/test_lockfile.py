import pytest

from msrvfind.errors import IoError, IoErrorSource
from msrvfind.lockfile import CARGO_LOCK_REPLACEMENT, LockfileHandler


@pytest.fixture
def lock_file(tmp_path):
    path = tmp_path / "Cargo.lock"
    path.write_text("# lock contents\n")
    return path


def test_move_lockfile_renames_to_replacement(lock_file):
    handler = LockfileHandler(lock_file).move_lockfile()
    assert not lock_file.exists()
    assert (lock_file.parent / CARGO_LOCK_REPLACEMENT).read_text() == "# lock contents\n"
    assert handler.is_moved


def test_move_back_restores_contents(lock_file):
    handler = LockfileHandler(lock_file).move_lockfile()
    handler.move_lockfile_back()
    assert lock_file.read_text() == "# lock contents\n"
    assert not handler.replacement.exists()
    assert not handler.is_moved


def test_context_manager_round_trip(lock_file):
    with LockfileHandler(lock_file) as handler:
        assert not lock_file.exists()
        assert handler.replacement.exists()
    assert lock_file.read_text() == "# lock contents\n"


def test_context_manager_restores_on_error(lock_file):
    with pytest.raises(KeyError):
        with LockfileHandler(lock_file):
            raise KeyError("boom")
    assert lock_file.exists()


def test_missing_lockfile_raises_rename_error(tmp_path):
    missing = tmp_path / "Cargo.lock"
    with pytest.raises(IoError) as info:
        LockfileHandler(missing).move_lockfile()
    assert info.value.source is IoErrorSource.RENAME_FILE
    assert info.value.subject == str(missing)


def test_cannot_move_twice(lock_file):
    handler = LockfileHandler(lock_file).move_lockfile()
    with pytest.raises(RuntimeError):
        handler.move_lockfile()


def test_cannot_move_back_before_moving(lock_file):
    with pytest.raises(RuntimeError):
        LockfileHandler(lock_file).move_lockfile_back()
    assert lock_file.exists()