"""CommandExecutor - runs the device-control binary.

One call spawns one process with an argument vector (never a shell), waits
for it under a timeout and caps how much output it may produce.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Optional, Sequence

from mobilerobot.config_manager.config_manager import ExecutorConfig
from mobilerobot.config_manager.path_resolver import resolve_adb_path

logger = logging.getLogger("mobilerobot")

_READ_CHUNK = 64 * 1024


class CommandError(Exception):
    """The device tool failed: non-zero exit, missing binary, overflow."""

    def __init__(
        self,
        message: str,
        returncode: Optional[int] = None,
        stdout: bytes = b"",
        stderr: bytes = b"",
    ) -> None:
        super().__init__(message)
        self.returncode = returncode
        self.stdout = stdout
        self.stderr = stderr

    @property
    def output(self) -> str:
        """Captured stdout followed by stderr, decoded and stripped."""
        return (
            self.stdout.decode("utf-8", errors="replace")
            + self.stderr.decode("utf-8", errors="replace")
        ).strip()


class CommandTimeoutError(CommandError):
    """The device tool did not finish in time and was killed."""


class _OutputLimitExceeded(Exception):
    pass


async def _read_capped(stream: asyncio.StreamReader, limit: int) -> bytes:
    buf = bytearray()
    while True:
        chunk = await stream.read(_READ_CHUNK)
        if not chunk:
            return bytes(buf)
        buf.extend(chunk)
        if len(buf) > limit:
            raise _OutputLimitExceeded()


class CommandExecutor:
    """Invoke an external binary and return its raw stdout."""

    def __init__(
        self,
        config: Optional[ExecutorConfig] = None,
        binary_resolver: Optional[Callable[[], str]] = None,
    ) -> None:
        self.config = config or ExecutorConfig()
        if binary_resolver is None:
            if self.config.adb_path:
                adb_path = self.config.adb_path
                binary_resolver = lambda: adb_path  # noqa: E731
            else:
                binary_resolver = resolve_adb_path
        self._binary_resolver = binary_resolver
        self._lock: Optional[asyncio.Lock] = None
        self._lock_loop: Optional[asyncio.AbstractEventLoop] = None

    def _get_lock(self) -> asyncio.Lock:
        # a lock is bound to the loop it is first contended on; one per loop
        loop = asyncio.get_running_loop()
        if self._lock is None or self._lock_loop is not loop:
            self._lock = asyncio.Lock()
            self._lock_loop = loop
        return self._lock

    def _prefix(self) -> list[str]:
        return []

    async def execute(self, args: Sequence[str], silent: bool = False) -> bytes:
        """Run the binary with *args* and return stdout.

        Raises:
            CommandTimeoutError: the process outlived ``config.timeout``
            CommandError: non-zero exit, output over the cap, or spawn failure
        """
        binary = self._binary_resolver()
        argv = [*self._prefix(), *args]
        logger.debug(f"exec: {binary} {' '.join(argv)}")

        async with self._get_lock():
            try:
                proc = await asyncio.create_subprocess_exec(
                    binary,
                    *argv,
                    stdin=asyncio.subprocess.DEVNULL,
                    stdout=asyncio.subprocess.PIPE,
                    stderr=asyncio.subprocess.PIPE,
                )
            except OSError as e:
                raise CommandError(f"Failed to run {binary}: {e}") from e

            limit = self.config.max_buffer_size
            tasks = [
                asyncio.ensure_future(_read_capped(proc.stdout, limit)),
                asyncio.ensure_future(_read_capped(proc.stderr, limit)),
                asyncio.ensure_future(proc.wait()),
            ]
            try:
                stdout, stderr, _ = await asyncio.wait_for(
                    asyncio.gather(*tasks), timeout=self.config.timeout
                )
            except asyncio.TimeoutError:
                await self._kill(proc, tasks)
                raise CommandTimeoutError(
                    f"Command timed out after {self.config.timeout}s: "
                    f"{binary} {' '.join(argv)}"
                )
            except _OutputLimitExceeded:
                await self._kill(proc, tasks)
                raise CommandError(
                    f"Command output exceeded {limit} bytes: "
                    f"{binary} {' '.join(argv)}"
                )

        if stderr and not silent:
            logger.debug(stderr.decode("utf-8", errors="replace").rstrip())

        if proc.returncode != 0:
            raise CommandError(
                f"Command failed with exit code {proc.returncode}: "
                f"{binary} {' '.join(argv)}",
                returncode=proc.returncode,
                stdout=stdout,
                stderr=stderr,
            )

        return stdout

    @staticmethod
    async def _kill(
        proc: asyncio.subprocess.Process, tasks: List["asyncio.Future[Any]"]
    ) -> None:
        if proc.returncode is None:
            try:
                proc.kill()
            except ProcessLookupError:
                pass
        for task in tasks:
            task.cancel()
        # collect every outcome, a second overflow included
        await asyncio.gather(*tasks, return_exceptions=True)
        await proc.wait()


class AdbExecutor(CommandExecutor):
    """Executor bound to one device: every call is prefixed with ``-s <serial>``."""

    def __init__(
        self,
        serial: str,
        config: Optional[ExecutorConfig] = None,
        binary_resolver: Optional[Callable[[], str]] = None,
    ) -> None:
        super().__init__(config, binary_resolver)
        self.serial = serial

    def _prefix(self) -> list[str]:
        return ["-s", self.serial]
