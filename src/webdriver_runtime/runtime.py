"""Top-level runtime: driver process + protocol client + session."""

import logging
from typing import Optional

from selenium.common.exceptions import WebDriverException

from .browser.driver import Driver
from .config.settings import RuntimeConfig
from .constants import STATUS_POLL_INTERVAL
from .exceptions import DriverStartTimeoutError, SoftAssertionError, TransportError
from .protocol.client import ProtocolClient
from .protocol.models import DriverStatus, NewSession
from .session import Session
from .utils.diagnostics import collect_diagnostics
from .utils.retry import poll_until

logger = logging.getLogger(__name__)

PACKAGE_LOGGER = "webdriver_runtime"


class WebDriverRuntime:
    """
    Owns one driver process (unless ``manual_start``), one protocol client and
    the session created on it.

    Usage:
        with WebDriverRuntime(load_config_file()) as session:
            session.open_url("https://example.org")
            session.element("h1").get_text()
    """

    def __init__(
        self,
        config: Optional[RuntimeConfig] = None,
        *,
        api: Optional[ProtocolClient] = None,
        driver: Optional[Driver] = None,
    ):
        self.config = config or RuntimeConfig()
        self.api = api or ProtocolClient(self.config.webdriver.url)
        if driver is None and not self.config.webdriver.manual_start:
            driver = Driver.from_config(self.config.webdriver)
        self.driver = driver
        self.session: Optional[Session] = None

    def start(self) -> Session:
        """
        Start the driver, wait for it to accept sessions and create one.

        Raises whatever the driver or protocol layer raised; the diagnostics
        are logged first.
        """
        logging.getLogger(PACKAGE_LOGGER).setLevel(self.config.log_level.upper())

        try:
            if self.driver is not None:
                self.driver.start()
            self.wait_until_ready()
            self.session = self.new_session()
        except WebDriverException as e:
            logger.error(f"Failed to start WebDriver runtime:\n{collect_diagnostics(self.driver, e, self.config)}")
            raise
        return self.session

    def status(self) -> DriverStatus:
        return self.api.execute_request_custom("GET", "/status", None, DriverStatus.from_value)

    def wait_until_ready(self, timeout: Optional[float] = None) -> None:
        """
        Probe ``/status`` until the driver reports ready.

        Connection errors are expected while the driver binds its port and are
        retried; the wait is bounded by the configured webdriver timeout.
        """
        wait_secs = self.config.webdriver.timeout if timeout is None else timeout

        def probe():
            ready = self.driver.is_ready(self.api) if self.driver is not None else self.status().ready
            return True if ready else None

        try:
            poll_until(probe, wait_secs, STATUS_POLL_INTERVAL, retry_on=(TransportError,))
        except TimeoutError as e:
            raise DriverStartTimeoutError(wait_secs) from e.__cause__

    def new_session(self) -> Session:
        body = {"capabilities": {"alwaysMatch": dict(self.config.webdriver.capabilities)}}
        created = self.api.execute_request_custom("POST", "/session", body, NewSession.from_value)
        logger.info(f"Session {created.session_id} created.")
        return Session(
            created.session_id,
            self.api,
            soft_asserts=self.config.soft_asserts,
            element_settings=self.config.element_settings,
        )

    def quit(self) -> None:
        """
        Delete the session and stop the driver.

        Raises:
            SoftAssertionError: ``raise_errors_automatically`` is on and the
                session recorded errors. Cleanup has finished by then.
            DriverError: the driver process could not be killed.
        """
        report = ""
        try:
            if self.session is not None:
                session, self.session = self.session, None
                session.delete()
                report = session.raise_errors()
        finally:
            if self.driver is not None:
                self.driver.stop()

        if report and self.config.raise_errors_automatically:
            raise SoftAssertionError(report)

    def __enter__(self) -> Session:
        try:
            return self.start()
        except BaseException:
            if self.driver is not None:
                self.driver.stop()
            raise

    def __exit__(self, exc_type, exc, tb) -> None:
        self.quit()


__all__ = ["WebDriverRuntime"]
