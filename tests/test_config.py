import json
import logging

from amp_core.config import WorkspaceSettings, setup_logging, workspace_key
from amp_core.constants import NO_WORKSPACE_KEY, SETTING_URL


def test_workspace_key_uses_first_folder(tmp_path):
    assert workspace_key([str(tmp_path), "/elsewhere"]) == str(tmp_path.resolve())
    assert workspace_key([]) == NO_WORKSPACE_KEY


def test_settings_missing_file_returns_default(tmp_path):
    settings = WorkspaceSettings(tmp_path / "settings.json", key="/w")
    assert settings.get(SETTING_URL) is None
    assert settings.get(SETTING_URL, "ws://x") == "ws://x"


def test_settings_update_round_trip(tmp_path):
    path = tmp_path / "nested" / "settings.json"
    WorkspaceSettings(path, key="/w").update(SETTING_URL, "ws://listener:8080")
    assert WorkspaceSettings(path, key="/w").get(SETTING_URL) == "ws://listener:8080"
    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"workspaces": {"/w": {SETTING_URL: "ws://listener:8080"}}}


def test_settings_are_scoped_per_workspace(tmp_path):
    path = tmp_path / "settings.json"
    WorkspaceSettings(path, key="/a").update(SETTING_URL, "ws://a")
    WorkspaceSettings(path, key="/b").update(SETTING_URL, "ws://b")
    assert WorkspaceSettings(path, key="/a").get(SETTING_URL) == "ws://a"
    assert WorkspaceSettings(path, key="/b").get(SETTING_URL) == "ws://b"
    assert WorkspaceSettings(path, key="/c").get(SETTING_URL) is None


def test_corrupt_settings_treated_as_empty(tmp_path):
    path = tmp_path / "settings.json"
    path.write_text("{not json", encoding="utf-8")
    settings = WorkspaceSettings(path, key="/w")
    assert settings.get(SETTING_URL) is None
    settings.update(SETTING_URL, "ws://fresh")
    assert settings.get(SETTING_URL) == "ws://fresh"


def test_setup_logging_truncates_large_log(tmp_path):
    log_file = tmp_path / "logs" / "amp.log"
    log_file.parent.mkdir()
    log_file.write_text("x" * 1_000_001)
    log = setup_logging(log_file)
    assert log.name == "amp"
    assert log_file.stat().st_size < 1_000_001
    assert any(isinstance(h, logging.StreamHandler) for h in log.handlers)
    for handler in list(log.handlers):
        log.removeHandler(handler)
