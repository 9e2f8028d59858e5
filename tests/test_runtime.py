"""Runtime lifecycle against the fake WebDriver HTTP server."""

from unittest.mock import MagicMock

import pytest
from selenium.common.exceptions import WebDriverException

from webdriver_runtime.browser.driver import Driver, DriverState
from webdriver_runtime.browser.process import get_free_port
from webdriver_runtime.config.settings import RuntimeConfig, WebDriverConfig
from webdriver_runtime.exceptions import DriverStartTimeoutError, SoftAssertionError
from webdriver_runtime.runtime import WebDriverRuntime


def fake_driver():
    driver = MagicMock(spec=Driver)
    driver.binary_path = "chromedriver"
    driver.remote_url = "http://localhost:4444"
    driver.state = DriverState.READY
    driver.pid = None
    driver.is_ready.return_value = True
    return driver


def manual_config(url, **overrides):
    webdriver = WebDriverConfig(url=url, manual_start=True, timeout=1, capabilities={"browserName": "chrome"})
    return RuntimeConfig(webdriver=webdriver, **overrides)


@pytest.fixture
def ready_server(wd_server):
    wd_server.route("GET", "/status", {"value": {"ready": True, "message": "ok"}})
    wd_server.route("POST", "/session", {"value": {"sessionId": "abc", "capabilities": {"browserName": "chrome"}}})
    wd_server.route("DELETE", "/session/abc", {"value": None})
    return wd_server


class TestRuntimeStart:

    def test_manual_start_creates_no_driver(self, ready_server):
        runtime = WebDriverRuntime(manual_config(ready_server.url))
        assert runtime.driver is None

    def test_start_creates_session_with_capabilities(self, ready_server):
        runtime = WebDriverRuntime(manual_config(ready_server.url, soft_asserts=True))

        session = runtime.start()

        assert session.id == "abc"
        assert session.soft_asserts is True
        assert ("POST", "/session", {"capabilities": {"alwaysMatch": {"browserName": "chrome"}}}) in ready_server.requests
        runtime.quit()
        assert ("DELETE", "/session/abc", None) in ready_server.requests

    def test_status(self, ready_server):
        status = WebDriverRuntime(manual_config(ready_server.url)).status()
        assert status.ready is True
        assert status.message == "ok"

    def test_not_ready_driver_times_out(self, wd_server):
        wd_server.route("GET", "/status", {"value": {"ready": False, "message": "busy"}})
        runtime = WebDriverRuntime(manual_config(wd_server.url))

        with pytest.raises(DriverStartTimeoutError) as excinfo:
            runtime.wait_until_ready(timeout=0.3)
        assert excinfo.value.timeout == 0.3

    def test_unreachable_driver_times_out(self):
        runtime = WebDriverRuntime(manual_config(f"http://127.0.0.1:{get_free_port()}"))
        with pytest.raises(DriverStartTimeoutError):
            runtime.wait_until_ready(timeout=0.3)

    def test_supervised_driver_is_started_and_stopped(self, ready_server):
        driver = fake_driver()
        runtime = WebDriverRuntime(manual_config(ready_server.url), driver=driver)

        with runtime as session:
            assert session.id == "abc"
            driver.start.assert_called_once()

        driver.stop.assert_called_once()

    def test_failed_start_stops_driver(self, wd_server):
        wd_server.route("GET", "/status", {"value": {"ready": True}})
        wd_server.route("POST", "/session", {
            "value": {"error": "session not created", "message": "no chrome binary", "stacktrace": ""}
        }, status=500)
        driver = fake_driver()
        runtime = WebDriverRuntime(manual_config(wd_server.url), driver=driver)

        with pytest.raises(WebDriverException) as excinfo:
            with runtime:
                pass

        assert "no chrome binary" in excinfo.value.msg
        driver.stop.assert_called_once()


class TestRuntimeQuit:

    def test_soft_errors_raise_on_quit(self, ready_server):
        ready_server.route("GET", "/session/abc/title", {"value": None})
        runtime = WebDriverRuntime(manual_config(ready_server.url, soft_asserts=True))

        with pytest.raises(SoftAssertionError) as excinfo:
            with runtime as session:
                assert session.get_title() == ""

        assert "failed to get page title: no value" in str(excinfo.value)
        assert ("DELETE", "/session/abc", None) in ready_server.requests

    def test_soft_errors_kept_quiet_when_disabled(self, ready_server):
        ready_server.route("GET", "/session/abc/title", {"value": None})
        config = manual_config(ready_server.url, soft_asserts=True, raise_errors_automatically=False)

        with WebDriverRuntime(config) as session:
            session.get_title()

        assert session.errors == ("failed to get page title: no value",)

    def test_quit_stops_driver_when_delete_fails(self, wd_server):
        wd_server.route("GET", "/status", {"value": {"ready": True}})
        wd_server.route("POST", "/session", {"value": {"sessionId": "abc", "capabilities": {}}})
        wd_server.route("DELETE", "/session/abc", {
            "value": {"error": "invalid session id", "message": "gone", "stacktrace": ""}
        }, status=404)
        driver = fake_driver()
        runtime = WebDriverRuntime(manual_config(wd_server.url), driver=driver)
        runtime.start()

        with pytest.raises(WebDriverException):
            runtime.quit()

        driver.stop.assert_called_once()
        assert runtime.session is None

    def test_quit_without_session(self):
        driver = fake_driver()
        WebDriverRuntime(manual_config("http://127.0.0.1:4444"), driver=driver).quit()
        driver.stop.assert_called_once()
