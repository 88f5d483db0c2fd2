import os
from unittest.mock import Mock

from amp_core.workspace import WorkspaceWatcher


def _touch(path, mtime):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("x")
    os.utime(path, (mtime, mtime))
    return path


def test_newest_file_is_active(tmp_path):
    _touch(tmp_path / "old.py", 1000)
    newest = _touch(tmp_path / "src" / "new.ts", 2000)
    watcher = WorkspaceWatcher([tmp_path])
    assert watcher.find_newest_file() == str(newest.resolve())


def test_ignored_and_hidden_dirs_skipped(tmp_path):
    kept = _touch(tmp_path / "main.go", 1000)
    _touch(tmp_path / ".git" / "index", 5000)
    _touch(tmp_path / "node_modules" / "pkg" / "index.js", 5000)
    _touch(tmp_path / ".cache" / "blob", 5000)
    watcher = WorkspaceWatcher([tmp_path])
    assert watcher.find_newest_file() == str(kept.resolve())


def test_empty_workspace_has_no_document(tmp_path):
    watcher = WorkspaceWatcher([tmp_path])
    assert watcher.find_newest_file() is None
    assert WorkspaceWatcher([]).active_document_path() is None


def test_poll_fires_only_on_change(tmp_path):
    _touch(tmp_path / "a.py", 1000)
    tracker = Mock()
    watcher = WorkspaceWatcher([tmp_path])
    watcher.attach(tracker)

    assert watcher.poll() is True
    assert watcher.poll() is False
    tracker.on_active_document_changed.assert_called_once()

    _touch(tmp_path / "b.py", 2000)
    assert watcher.poll() is True
    assert watcher.active_document_path().endswith("b.py")
    assert tracker.on_active_document_changed.call_count == 2


def test_set_folders_fires_folder_event(tmp_path):
    other = tmp_path / "other"
    _touch(other / "readme.md", 1000)
    tracker = Mock()
    watcher = WorkspaceWatcher([])
    watcher.attach(tracker)
    watcher.set_folders([other])
    tracker.on_workspace_folders_changed.assert_called_once()
    assert watcher.workspace_folders() == [str(other.resolve())]
    assert watcher.active_document_path().endswith("readme.md")


def test_scan_limit_bounds_walk(tmp_path):
    for i in range(10):
        _touch(tmp_path / f"f{i}.txt", 1000 + i)
    watcher = WorkspaceWatcher([tmp_path], scan_limit=3)
    assert watcher.find_newest_file() is not None
