"""Tests for configuration hot reload"""

from unittest.mock import MagicMock

from smart_suspend.config import SuspendConfig
from smart_suspend.config_watcher import ConfigWatcher


def test_reload_applies_new_config(tmp_path, monkeypatch):
    monkeypatch.delenv("SMART_SUSPEND_IPS", raising=False)
    monkeypatch.delenv("SMART_SUSPEND_ENABLED", raising=False)
    config_file = tmp_path / "suspend.yaml"
    config_file.write_text("smart_suspend_enabled: true\nsmart_suspend_ips: 10.0.0.0/8\n")
    service = MagicMock()

    watcher = ConfigWatcher(service, config_file=config_file)
    watcher._on_config_change()

    applied = service.apply_config.call_args[0][0]
    assert isinstance(applied, SuspendConfig)
    assert applied.smart_suspend_enabled is True
    assert applied.smart_suspend_ips == "10.0.0.0/8"


def test_reload_failure_is_contained(tmp_path):
    service = MagicMock()
    service.apply_config.side_effect = RuntimeError("service stopped")

    watcher = ConfigWatcher(service, config_file=tmp_path / "suspend.yaml")
    watcher._on_config_change()

    service.apply_config.assert_called_once()


def test_start_and_stop(tmp_path):
    watcher = ConfigWatcher(MagicMock(), config_file=tmp_path / "suspend.yaml")

    watcher.start()
    assert watcher.watcher.running is True

    watcher.stop()
    assert watcher.watcher.running is False
