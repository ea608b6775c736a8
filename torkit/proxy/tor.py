"""
Tor process supervisor.

Starts the Tor binary from an installed bundle, waits for it to finish
bootstrapping by scanning its standard output, and terminates it on
teardown.

Usage:
    from torkit import Tor

    with Tor.setup() as tor:
        pid = tor.run()
        ...  # Tor is bootstrapped and serving
    # the process has been killed here
"""

import logging
import os
import queue
import signal
import subprocess
import threading
import time
from enum import Enum
from typing import Callable, List, Optional, Sequence

from torkit.bundle.downloader import Downloader, DownloadOptions, InstallationLayout
from torkit.bundle.versions import VersionResolver
from torkit.core.exceptions import (
    AlreadyRunningError,
    BootstrapTimeoutError,
    KillFailedError,
    NoActiveProcessError,
    NoProcessIdError,
    ProcessExitedEarlyError,
    SpawnFailedError,
    SupervisorError,
)
from torkit.core.platform import host_os
from torkit.core.platform_capabilities import supports_feature
from torkit.proxy.readiness import is_ready_line

logger = logging.getLogger(__name__)

# Seconds to wait for the exit status once the output stream has closed
EXIT_GRACE_SECONDS = 5

_EOF = object()


class TorState(Enum):
    """
    Lifecycle of a supervised Tor process.

    An instance only exists once the bundle is installed; the download
    phase before that is Tor.setup().
    """

    INSTALLED = "installed"
    STARTING = "starting"
    BOOTSTRAPPING = "bootstrapping"
    READY = "ready"
    TERMINATED = "terminated"


class Tor:
    """
    Supervises one Tor process started from an installed bundle.

    The instance owns the process identifier exclusively; at most one
    process is live per instance. Use it as a context manager (or call
    close()) so the process is killed on every exit path.
    """

    def __init__(
        self,
        layout: InstallationLayout,
        args: Optional[Sequence[str]] = None,
        is_ready: Callable[[str], bool] = is_ready_line,
    ):
        """
        Wrap an existing installation.

        Args:
            layout: Installation produced by Downloader.download()
            args: Extra command-line arguments for the Tor binary
            is_ready: Predicate marking the bootstrap-complete log line
        """
        self.layout = layout
        self.args: List[str] = list(args or [])
        self._is_ready = is_ready
        self._process: Optional[subprocess.Popen] = None
        self._pid: Optional[int] = None
        self._state = TorState.INSTALLED
        self._drain_thread: Optional[threading.Thread] = None
        self._signal_kill = supports_feature(host_os(), "supports_kill_signal")

    @classmethod
    def setup(
        cls,
        options: Optional[DownloadOptions] = None,
        resolver: Optional[VersionResolver] = None,
        args: Optional[Sequence[str]] = None,
        downloader: Optional[Downloader] = None,
    ) -> "Tor":
        """
        Download the Tor Expert Bundle and create an instance to run it.

        Args:
            options: Download options (defaults when None)
            resolver: Resolver for Latest/Stable selections
            args: Extra command-line arguments for the Tor binary
            downloader: Preconfigured downloader, used instead of options

        Raises:
            ResolutionError: If the version cannot be resolved
            DownloadError: If the bundle cannot be installed
        """
        if downloader is None:
            downloader = (options or DownloadOptions()).build(resolver)

        layout = downloader.download()
        return cls(layout, args=args)

    @property
    def pid(self) -> Optional[int]:
        return self._pid

    @property
    def version(self) -> str:
        return self.layout.version

    @property
    def state(self) -> TorState:
        if (
            self._state in (TorState.BOOTSTRAPPING, TorState.READY)
            and self._process is not None
            and self._process.poll() is not None
        ):
            return TorState.TERMINATED
        return self._state

    def is_running(self) -> bool:
        """Check whether the supervised process is alive."""
        return (
            self._pid is not None
            and self._process is not None
            and self._process.poll() is None
        )

    def run(self, timeout: Optional[float] = None) -> int:
        """
        Start Tor and block until it has bootstrapped.

        Args:
            timeout: Seconds to wait for bootstrapping. None waits forever.
                On expiry the process is killed.

        Returns:
            Process identifier of the started Tor process

        Raises:
            AlreadyRunningError: If this instance already owns a live process
            SpawnFailedError: If the binary is missing or not executable
            NoProcessIdError: If no process identifier is available
            ProcessExitedEarlyError: If Tor exits before bootstrapping
            BootstrapTimeoutError: If the timeout expires first
        """
        if self.is_running():
            raise AlreadyRunningError(f"Tor is already running with pid {self._pid}")

        binary_path = self.layout.binary_path
        self._state = TorState.STARTING

        try:
            process = subprocess.Popen(
                [str(binary_path), *self.args],
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except OSError as e:
            self._state = TorState.INSTALLED
            raise SpawnFailedError(f"Failed to spawn Tor process {binary_path}: {e}") from e

        pid = process.pid
        if not pid:
            process.kill()
            process.wait()
            self._state = TorState.INSTALLED
            raise NoProcessIdError("No process ID for Tor")

        self._process = process
        self._pid = pid
        logger.info(f"Started Tor {self.version} with pid {pid}")

        lines: queue.Queue = queue.Queue()
        forwarding = threading.Event()
        forwarding.set()

        self._drain_thread = threading.Thread(
            target=self._drain_output,
            args=(process, lines, forwarding),
            name=f"tor-output-{pid}",
            daemon=True,
        )
        self._drain_thread.start()
        self._state = TorState.BOOTSTRAPPING

        try:
            self._wait_for_bootstrap(process, lines, timeout)
        finally:
            forwarding.clear()

        self._state = TorState.READY
        logger.info(f"Tor bootstrapped (pid {pid})")
        return pid

    def _wait_for_bootstrap(
        self,
        process: subprocess.Popen,
        lines: queue.Queue,
        timeout: Optional[float],
    ) -> None:
        deadline = None if timeout is None else time.monotonic() + timeout

        while True:
            remaining = None
            if deadline is not None:
                remaining = max(0.0, deadline - time.monotonic())

            try:
                line = lines.get(timeout=remaining)
            except queue.Empty:
                logger.warning(f"Tor did not bootstrap within {timeout}s, killing it")
                self.close()
                raise BootstrapTimeoutError(timeout) from None

            if line is _EOF:
                returncode = self._collect_exit_status(process)
                self._clear_handle()
                raise ProcessExitedEarlyError(returncode)

            if self._is_ready(line):
                return

    def _collect_exit_status(self, process: subprocess.Popen) -> Optional[int]:
        try:
            return process.wait(timeout=EXIT_GRACE_SECONDS)
        except subprocess.TimeoutExpired:
            # Output closed but the process lingers
            process.kill()
            return process.wait()

    def _drain_output(
        self,
        process: subprocess.Popen,
        lines: queue.Queue,
        forwarding: threading.Event,
    ) -> None:
        """Read the process output until it closes, so the pipe never fills up."""
        pid = process.pid

        for raw in process.stdout:
            line = raw.rstrip("\r\n")
            logger.debug(f"[tor {pid}] {line}")
            if forwarding.is_set():
                lines.put(line)

        process.stdout.close()
        lines.put(_EOF)

        returncode = process.wait()
        logger.debug(f"Tor process {pid} exited with code {returncode}")

    def kill(self) -> None:
        """
        Forcefully terminate the supervised process.

        Delivers the kill signal without waiting for the process to be
        reaped. On Windows this is a no-op that still succeeds.

        Raises:
            NoActiveProcessError: If no process identifier is recorded
            KillFailedError: If the signal cannot be delivered
        """
        if self._pid is None:
            raise NoActiveProcessError("No process for Tor available.")

        if not self._signal_kill:
            logger.warning(
                f"Killing processes is not supported on this platform; "
                f"Tor (pid {self._pid}) left running"
            )
            return

        pid = self._pid

        if self._process is not None and self._process.poll() is not None:
            logger.debug(f"Tor process {pid} already exited")
            self._clear_handle()
            return

        try:
            os.kill(pid, signal.SIGKILL)
        except ProcessLookupError:
            logger.debug(f"Tor process {pid} already exited")
        except OSError as e:
            raise KillFailedError(f"Failed to kill Tor process {pid}: {e}") from e
        else:
            logger.info(f"Killed Tor process {pid}")

        self._clear_handle()

    def close(self) -> None:
        """Best-effort kill. Failures are logged and never raised."""
        try:
            self.kill()
        except (SupervisorError, OSError) as e:
            logger.debug(f"Ignoring Tor teardown failure: {e}")

    def _clear_handle(self) -> None:
        self._pid = None
        self._process = None
        self._state = TorState.TERMINATED

    def __enter__(self) -> "Tor":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


__all__ = ["Tor", "TorState", "EXIT_GRACE_SECONDS"]
