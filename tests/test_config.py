"""Tests for config parsing, environment loading and the JSON rc file."""

import json

import pytest
from selenium.webdriver.common.by import By

from webdriver_runtime.config import (
    ElementSettings,
    RuntimeConfig,
    WebDriverConfig,
    get_env_config,
    load_config_file,
    parse_duration,
    parse_locator,
)

ENV_VARS = [
    "WEBDRIVER_PATH",
    "WEBDRIVER_URL",
    "WEBDRIVER_TIMEOUT",
    "WEBDRIVER_MANUAL_START",
    "WEBDRIVER_LOG_LEVEL",
    "WEBDRIVER_SOFT_ASSERTS",
    "WEBDRIVER_RAISE_ERRORS_AUTOMATICALLY",
    "ELEMENT_POLL_INTERVAL",
    "ELEMENT_RETRY_TIMEOUT",
    "ELEMENT_IGNORE_NOT_FOUND",
    "ELEMENT_SELECTOR_TYPE",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestParsing:

    @pytest.mark.parametrize("raw,expected", [
        ("500ms", 0.5),
        ("10s", 10.0),
        ("1.5m", 90.0),
        ("1h", 3600.0),
        ("2", 2.0),
        (3, 3.0),
        (0.25, 0.25),
    ])
    def test_durations(self, raw, expected):
        assert parse_duration(raw) == pytest.approx(expected)

    @pytest.mark.parametrize("raw", ["fast", "10 parsecs", "-1s", -2, True])
    def test_bad_durations(self, raw):
        with pytest.raises(ValueError):
            parse_duration(raw)

    def test_locators(self):
        assert parse_locator("css") == By.CSS_SELECTOR
        assert parse_locator("XPath") == By.XPATH
        assert parse_locator("css selector") == By.CSS_SELECTOR
        with pytest.raises(ValueError):
            parse_locator("id")


class TestElementSettings:

    def test_defaults(self):
        s = ElementSettings()
        assert s.poll_interval == 0.5
        assert s.retry_timeout == 5.0
        assert s.ignore_not_found is False
        assert s.selector_type == By.CSS_SELECTOR

    @pytest.mark.parametrize("kwargs", [
        {"poll_interval": 0},
        {"retry_timeout": -1},
        {"selector_type": "link text"},
    ])
    def test_rejects_invalid_values(self, kwargs):
        with pytest.raises(ValueError):
            ElementSettings(**kwargs)

    def test_from_dict_accepts_suffixed_durations(self):
        s = ElementSettings.from_dict({"poll_interval": "100ms", "retry_timeout": "2s", "selector_type": "xpath"})
        assert s.poll_interval == pytest.approx(0.1)
        assert s.retry_timeout == 2.0
        assert s.selector_type == By.XPATH


class TestEnvConfig:

    def test_defaults_without_variables(self, clean_env):
        config = get_env_config(load_env_file=False)

        assert config.webdriver.path == "chromedriver"
        assert config.webdriver.url == "http://localhost:4444"
        assert config.webdriver.timeout == 10.0
        assert config.soft_asserts is False
        assert config.raise_errors_automatically is True

    def test_variables_override_defaults(self, clean_env):
        clean_env.setenv("WEBDRIVER_PATH", "/opt/geckodriver")
        clean_env.setenv("WEBDRIVER_URL", "http://127.0.0.1:9515")
        clean_env.setenv("WEBDRIVER_MANUAL_START", "true")
        clean_env.setenv("WEBDRIVER_SOFT_ASSERTS", "1")
        clean_env.setenv("ELEMENT_POLL_INTERVAL", "250ms")
        clean_env.setenv("ELEMENT_SELECTOR_TYPE", "xpath")

        config = get_env_config(load_env_file=False)

        assert config.webdriver.path == "/opt/geckodriver"
        assert config.webdriver.url == "http://127.0.0.1:9515"
        assert config.webdriver.manual_start is True
        assert config.soft_asserts is True
        assert config.element_settings.poll_interval == pytest.approx(0.25)
        assert config.element_settings.selector_type == By.XPATH

    def test_bad_duration_falls_back(self, clean_env):
        clean_env.setenv("ELEMENT_RETRY_TIMEOUT", "soon")
        assert get_env_config(load_env_file=False).element_settings.retry_timeout == 5.0

    def test_bad_selector_type(self, clean_env):
        clean_env.setenv("ELEMENT_SELECTOR_TYPE", "id")
        with pytest.raises(EnvironmentError):
            get_env_config(load_env_file=False)


class TestConfigFile:

    def test_missing_file_is_created_with_defaults(self, tmp_path):
        path = tmp_path / "webdriverrc.json"

        config = load_config_file(path)

        assert config == RuntimeConfig()
        written = json.loads(path.read_text())
        assert written["webdriver"]["path"] == "chromedriver"
        assert written["element_settings"]["selector_type"] == "css"

    def test_partial_file_is_completed_and_rewritten(self, tmp_path):
        path = tmp_path / "webdriverrc.json"
        path.write_text(json.dumps({
            "soft_asserts": True,
            "webdriver": {"url": "http://localhost:9515", "manual_start": True},
        }))

        config = load_config_file(path)

        assert config.soft_asserts is True
        assert config.webdriver == WebDriverConfig(url="http://localhost:9515", manual_start=True)
        assert config.element_settings == ElementSettings()
        written = json.loads(path.read_text())
        assert written["logging"] == "info"
        assert written["webdriver"]["timeout"] == "10s"
        assert written["element_settings"]["poll_interval"] == "0.5s"

    def test_round_trip_keeps_values(self, tmp_path):
        path = tmp_path / "webdriverrc.json"
        path.write_text(json.dumps({"element_settings": {"retry_timeout": "750ms", "selector_type": "xpath"}}))

        first = load_config_file(path)
        second = load_config_file(path)

        assert first == second
        assert second.element_settings.retry_timeout == pytest.approx(0.75)

    @pytest.mark.parametrize("content", ["{not json", "[1, 2]"])
    def test_invalid_file(self, tmp_path, content):
        path = tmp_path / "webdriverrc.json"
        path.write_text(content)
        with pytest.raises(ValueError):
            load_config_file(path)


class TestConfigValues:

    def test_zero_timeouts_are_kept(self, tmp_path):
        path = tmp_path / "webdriverrc.json"
        path.write_text(json.dumps({
            "element_settings": {"retry_timeout": 0},
            "webdriver": {"timeout": 0},
        }))

        config = load_config_file(path)

        assert config.element_settings.retry_timeout == 0
        assert config.webdriver.timeout == 0
        written = json.loads(path.read_text())
        assert written["element_settings"]["retry_timeout"] == "0s"
        assert written["webdriver"]["timeout"] == "0s"

    def test_zero_timeout_from_dict(self):
        assert WebDriverConfig.from_dict({"timeout": 0}).timeout == 0
        assert ElementSettings.from_dict({"retry_timeout": "0s"}).retry_timeout == 0

    @pytest.mark.parametrize("value", ["false", "true", 0, 1])
    def test_flags_must_be_json_booleans(self, value):
        with pytest.raises(ValueError):
            ElementSettings.from_dict({"ignore_not_found": value})
        with pytest.raises(ValueError):
            RuntimeConfig.from_dict({"soft_asserts": value})
        with pytest.raises(ValueError):
            WebDriverConfig.from_dict({"manual_start": value})

    def test_boolean_flags_are_read(self):
        config = RuntimeConfig.from_dict({
            "soft_asserts": True,
            "raise_errors_automatically": False,
            "element_settings": {"ignore_not_found": True},
        })

        assert config.soft_asserts is True
        assert config.raise_errors_automatically is False
        assert config.element_settings.ignore_not_found is True

    @pytest.mark.parametrize("section", ["element_settings", "webdriver"])
    def test_non_object_section_in_file(self, tmp_path, section):
        path = tmp_path / "webdriverrc.json"
        path.write_text(json.dumps({section: "fast"}))

        with pytest.raises(ValueError, match=section):
            load_config_file(path)

    def test_non_object_section_from_dict(self):
        with pytest.raises(ValueError):
            RuntimeConfig.from_dict({"webdriver": ["chromedriver"]})
