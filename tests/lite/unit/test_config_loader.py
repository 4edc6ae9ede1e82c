"""Tests for agenda_lite.config_loader module."""

import logging

import pytest

from agenda_lite.config_loader import Config, build_config_from_env, load_config
from agenda_lite.lite_models import CalendarFilterOptions

pytestmark = pytest.mark.unit


class TestConfigFromDict:
    def test_defaults(self):
        cfg = Config.from_dict(None)

        assert cfg.max_iterations == 700
        assert cfg.enable_expansion is True
        assert cfg.holidays_path is None
        assert cfg.default_filters == CalendarFilterOptions()
        assert cfg.log_level == "INFO"

    @pytest.mark.parametrize(
        ("raw", "expected", "warns"),
        [
            ("250", 250, False),
            (0, 1, True),
            (-5, 1, True),
            (50000, 10000, True),
            ("lots", 700, True),
            (None, 700, True),
        ],
    )
    def test_max_iterations_coerced(self, raw, expected, warns, caplog):
        with caplog.at_level(logging.WARNING, logger="agenda_lite.config_loader"):
            cfg = Config.from_dict({"max_iterations": raw})

        assert cfg.max_iterations == expected
        assert bool(caplog.records) is warns

    @pytest.mark.parametrize(
        ("raw", "expected", "warns"),
        [("false", False, True), ("yes", True, True), (0, False, True), (True, True, False)],
    )
    def test_enable_expansion_coerced(self, raw, expected, warns, caplog):
        with caplog.at_level(logging.WARNING, logger="agenda_lite.config_loader"):
            cfg = Config.from_dict({"enable_expansion": raw})

        assert cfg.enable_expansion is expected
        assert bool(caplog.records) is warns

    def test_quoted_filter_values_parsed(self, caplog):
        with caplog.at_level(logging.WARNING, logger="agenda_lite.config_loader"):
            cfg = Config.from_dict({"default_filters": {"show_tasks": "false", "show_events": "on"}})

        assert cfg.default_filters.show_tasks is False
        assert cfg.default_filters.show_events is True
        assert "show_tasks='false'" in caplog.text

    def test_filters_and_unknown_keys(self, caplog):
        with caplog.at_level(logging.WARNING, logger="agenda_lite.config_loader"):
            cfg = Config.from_dict({"default_filters": {"show_saint_days": False, "show_weather": True}})

        assert cfg.default_filters.show_saint_days is False
        assert cfg.default_filters.show_holidays is True
        assert "show_weather" in caplog.text

    def test_non_mapping_filters_ignored(self):
        cfg = Config.from_dict({"default_filters": ["show_events"]})

        assert cfg.default_filters == CalendarFilterOptions()

    def test_log_level_upper_cased(self):
        assert Config.from_dict({"log_level": "debug"}).log_level == "DEBUG"

    def test_holidays_path_stringified(self, tmp_path):
        assert Config.from_dict({"holidays_path": tmp_path}).holidays_path == str(tmp_path)


class TestBuildConfigFromEnv:
    def test_no_env_is_empty(self):
        assert build_config_from_env() == {}

    def test_env_values_mapped(self, monkeypatch):
        monkeypatch.setenv("AGENDA_MAX_ITERATIONS", "900")
        monkeypatch.setenv("AGENDA_LOG_LEVEL", "warning")
        monkeypatch.setenv("AGENDA_HOLIDAYS_PATH", "/tmp/h.yaml")

        assert build_config_from_env() == {
            "max_iterations": "900",
            "log_level": "warning",
            "holidays_path": "/tmp/h.yaml",
        }


class TestLoadConfig:
    def test_missing_file_returns_defaults(self, tmp_path):
        cfg = load_config(str(tmp_path / "missing.yaml"))

        assert cfg == Config()

    def test_yaml_file(self, tmp_path):
        path = tmp_path / "agenda.yaml"
        path.write_text(
            "max_iterations: 1200\nenable_expansion: false\ndefault_filters:\n  show_tasks: false\n",
            encoding="utf-8",
        )

        cfg = load_config(str(path))

        assert cfg.max_iterations == 1200
        assert cfg.enable_expansion is False
        assert cfg.default_filters.show_tasks is False

    def test_json_file(self, tmp_path):
        path = tmp_path / "agenda.json"
        path.write_text('{"max_iterations": 42, "log_level": "error"}', encoding="utf-8")

        cfg = load_config(str(path))

        assert cfg.max_iterations == 42
        assert cfg.log_level == "ERROR"

    def test_empty_file_returns_defaults(self, tmp_path):
        path = tmp_path / "agenda.yaml"
        path.write_text("", encoding="utf-8")

        assert load_config(str(path)) == Config()

    def test_non_mapping_raises(self, tmp_path):
        path = tmp_path / "agenda.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")

        with pytest.raises(ValueError, match="mapping"):
            load_config(str(path))

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "agenda.yaml"
        path.write_text("max_iterations: 1200\n", encoding="utf-8")
        monkeypatch.setenv("AGENDA_MAX_ITERATIONS", "300")

        assert load_config(str(path)).max_iterations == 300
        assert load_config(str(path), use_env=False).max_iterations == 1200

    def test_default_path_is_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "agenda.yaml").write_text("log_level: warning\n", encoding="utf-8")

        assert load_config().log_level == "WARNING"
