"""Browser-driver process supervision."""

import enum
import subprocess
import threading
from typing import IO, List, Optional

import psutil

from .process import _is_port_open, kill_process_tree, parse_port
from ..config.settings import WebDriverConfig
from ..constants import (
    DEFAULT_DRIVER_TIMEOUT,
    PORT_CONFLICT_MARKERS,
    STARTUP_MARKERS,
    STOP_WAIT_SECS,
)
from ..exceptions import (
    DriverError,
    DriverLaunchError,
    DriverPortInUseError,
    DriverStartTimeoutError,
)
from ..protocol.client import ProtocolClient
from ..protocol.models import DriverStatus

import logging
logger = logging.getLogger(__name__)


class DriverState(enum.Enum):
    NOT_STARTED = "not_started"
    STARTING = "starting"
    READY = "ready"
    FAILED = "failed"
    STOPPED = "stopped"


class _Outcome(enum.Enum):
    READY = "ready"
    PORT_CONFLICT = "port_conflict"
    EXITED = "exited"
    TIMED_OUT = "timed_out"


class _Handshake:
    """One-shot startup signal. The first ``fire`` wins; later calls return False."""

    def __init__(self):
        self._lock = threading.Lock()
        self._event = threading.Event()
        self.outcome: Optional[_Outcome] = None

    def fire(self, outcome: _Outcome) -> bool:
        with self._lock:
            if self.outcome is not None:
                return False
            self.outcome = outcome
            self._event.set()
            return True

    def wait(self, timeout: float) -> bool:
        return self._event.wait(timeout)


class Driver:
    """
    Supervises a local browser-driver process (chromedriver, geckodriver).

    ``start()`` launches ``<binary> --port=<N>`` and blocks until the driver
    prints a startup marker, reports a port conflict, exits, or the startup
    timeout elapses. A background thread reads the merged stdout/stderr for
    the whole life of the process and logs every line.

    State transitions are guarded by a lock that is never held while waiting
    on the process, so ``stop()`` can run while ``start()`` is waiting.
    """

    def __init__(self, binary_path: str, remote_url: str, timeout: float = DEFAULT_DRIVER_TIMEOUT):
        self.binary_path = binary_path
        self.remote_url = remote_url
        self.port = parse_port(remote_url)
        self.timeout = timeout

        self._lock = threading.Lock()
        self._state = DriverState.NOT_STARTED
        self._proc: Optional[subprocess.Popen] = None
        self._reader: Optional[threading.Thread] = None
        self._scan_done = threading.Event()
        self._scan_done.set()

    @classmethod
    def from_config(cls, conf: WebDriverConfig) -> "Driver":
        return cls(conf.path, conf.url, conf.timeout)

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def pid(self) -> Optional[int]:
        return self._proc.pid if self._proc is not None else None

    def is_running(self) -> bool:
        proc = self._proc
        return proc is not None and proc.poll() is None

    def build_command(self) -> List[str]:
        return [self.binary_path, f"--port={self.port}"]

    def start(self, timeout: Optional[float] = None) -> None:
        """
        Launch the driver and wait for it to report readiness.

        Raises:
            DriverLaunchError: the binary could not be spawned, or the process
                exited before printing a startup marker.
            DriverPortInUseError: the driver reported its port as taken; the
                process has been killed.
            DriverStartTimeoutError: no marker within ``timeout``. The process
                is left running; call ``stop()`` to get rid of it.
            DriverError: the driver is already started or starting, or the
                process of an earlier failed start is still running.
        """
        wait_secs = self.timeout if timeout is None else timeout

        with self._lock:
            if self.is_running():
                if self._state in (DriverState.STARTING, DriverState.READY):
                    raise DriverError(f"driver on port {self.port} is already {self._state.value}")
                # A timed-out start leaves its process running.
                raise DriverError(
                    f"driver process {self._proc.pid} is still running; call stop() first"
                )

            if _is_port_open("127.0.0.1", self.port):
                logger.warning(f"Port {self.port} already accepts connections before the driver was started.")

            cmd = self.build_command()
            logger.info(f"Starting browser driver: {' '.join(cmd)}")
            try:
                proc = subprocess.Popen(
                    cmd,
                    stdin=subprocess.DEVNULL,
                    stdout=subprocess.PIPE,
                    stderr=subprocess.STDOUT,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                    bufsize=1,
                )
            except OSError as e:
                self._state = DriverState.FAILED
                raise DriverLaunchError(f"failed to start {self.binary_path}: {e}") from e

            handshake = _Handshake()
            done = threading.Event()
            self._proc = proc
            self._scan_done = done
            self._state = DriverState.STARTING
            self._reader = threading.Thread(
                target=self._scan_output,
                args=(proc, proc.stdout, handshake, done),
                name=f"webdriver-output-{self.port}",
                daemon=True,
            )
            self._reader.start()

        if not handshake.wait(wait_secs):
            # Claim the handshake so a late marker cannot flip the outcome.
            handshake.fire(_Outcome.TIMED_OUT)

        with self._lock:
            if self._proc is not proc or self._state is DriverState.STOPPED:
                raise DriverError("driver was stopped while starting")

            outcome = handshake.outcome
            if outcome is _Outcome.READY:
                self._state = DriverState.READY
                logger.info(f"Browser driver ready on port {self.port} (pid {proc.pid}).")
                return

            self._state = DriverState.FAILED

        if outcome is _Outcome.TIMED_OUT:
            raise DriverStartTimeoutError(wait_secs)
        if outcome is _Outcome.PORT_CONFLICT:
            try:
                proc.wait(timeout=STOP_WAIT_SECS)
            except subprocess.TimeoutExpired:
                logger.warning(f"Browser driver (pid {proc.pid}) still running after port conflict.")
            raise DriverPortInUseError(self.port)
        try:
            code = proc.wait(timeout=STOP_WAIT_SECS)
        except subprocess.TimeoutExpired:
            # Output closed but the process lingers; report what we know.
            code = None
        raise DriverLaunchError(f"driver exited with code {code} before becoming ready")

    def _scan_output(self, proc: subprocess.Popen, stream: IO[str], handshake: _Handshake, done: threading.Event) -> None:
        """Reader thread: log driver output and fire the startup handshake."""
        try:
            for raw in stream:
                line = raw.rstrip("\r\n")
                logger.debug(f"[driver:{self.port}] {line}")

                lowered = line.lower()
                if any(marker in lowered for marker in PORT_CONFLICT_MARKERS):
                    logger.error(f"Cannot start browser driver. Port {self.port} is already in use.")
                    if handshake.fire(_Outcome.PORT_CONFLICT):
                        self._kill(proc)
                elif any(marker in line for marker in STARTUP_MARKERS):
                    if not handshake.fire(_Outcome.READY):
                        logger.debug(f"Ignoring repeated startup marker from driver on port {self.port}.")
        except (OSError, ValueError) as e:
            # ValueError: the stream was closed underneath us.
            logger.debug(f"Driver output reader stopped: {e}")
        finally:
            handshake.fire(_Outcome.EXITED)
            try:
                stream.close()
            except OSError:
                pass
            done.set()

    def _kill(self, proc: subprocess.Popen) -> None:
        try:
            kill_process_tree(proc.pid)
        except psutil.Error as e:
            logger.error(f"Failed to kill browser driver (pid {proc.pid}): {e}")

    def stop(self) -> None:
        """
        Kill the driver process tree. Safe to call repeatedly or before ``start()``.

        Raises:
            DriverError: the process exists but could not be killed.
        """
        with self._lock:
            proc = self._proc
            if proc is None or self._state is DriverState.STOPPED:
                self._state = DriverState.STOPPED
                return

            if proc.poll() is None:
                try:
                    kill_process_tree(proc.pid)
                except psutil.Error as e:
                    raise DriverError(f"failed to kill browser driver: {e}") from e
                try:
                    proc.wait(timeout=STOP_WAIT_SECS)
                except subprocess.TimeoutExpired:
                    logger.warning(f"Browser driver (pid {proc.pid}) did not exit within {STOP_WAIT_SECS:g}s.")

            self._state = DriverState.STOPPED
            done = self._scan_done

        if not done.wait(STOP_WAIT_SECS):
            logger.warning("Driver output reader did not finish after stop.")
        logger.info(f"Browser driver on port {self.port} stopped.")

    def is_ready(self, client: ProtocolClient) -> bool:
        """Ask the running driver whether it can create new sessions."""
        status = client.execute_request_custom("GET", "/status", None, DriverStatus.from_value)
        return status.ready

    def __enter__(self) -> "Driver":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


__all__ = ["Driver", "DriverState"]
