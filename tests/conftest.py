"""
Shared fixtures: a scripted stand-in for the adb executor.
"""

from typing import Callable, Dict, List, Sequence, Tuple, Union

import pytest

from mobilerobot.config_manager import RetriesConfig, RetryConfig, RobotConfig
from mobilerobot.tools.android.executor import CommandError

Response = Union[bytes, str, Exception, Callable[[], Union[bytes, str]]]


class FakeAdb:
    """Records every argument vector and answers from a script.

    Responses are keyed by the argument tuple. A list of responses is consumed
    one per call, the last one repeating. Unknown commands return b"".
    """

    def __init__(self) -> None:
        self.calls: List[Tuple[str, ...]] = []
        self.silent_calls: List[Tuple[str, ...]] = []
        self.responses: Dict[Tuple[str, ...], List[Response]] = {}

    def on(self, *args: str, returns: Union[Response, Sequence[Response]] = b"") -> "FakeAdb":
        if isinstance(returns, list):
            self.responses[args] = list(returns)
        else:
            self.responses[args] = [returns]
        return self

    def fail(self, *args: str, message: str = "boom", stdout: bytes = b"", stderr: bytes = b"") -> "FakeAdb":
        return self.on(
            *args,
            returns=CommandError(message, returncode=1, stdout=stdout, stderr=stderr),
        )

    def shell_calls(self) -> List[Tuple[str, ...]]:
        return [call for call in self.calls if call and call[0] == "shell"]

    async def execute(self, args: Sequence[str], silent: bool = False) -> bytes:
        key = tuple(args)
        self.calls.append(key)
        if silent:
            self.silent_calls.append(key)

        queue = self.responses.get(key)
        if not queue:
            return b""
        response = queue.pop(0) if len(queue) > 1 else queue[0]

        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response()
        if isinstance(response, str):
            response = response.encode("utf-8")
        return response


@pytest.fixture
def adb() -> FakeAdb:
    return FakeAdb()


@pytest.fixture
def make_adb() -> Callable[[], FakeAdb]:
    """For tests that need one executor per device."""
    return FakeAdb


@pytest.fixture
def fast_config() -> RobotConfig:
    """Default config without pauses between retries."""
    config = RobotConfig()
    config.retries = RetriesConfig(
        ui_dump=RetryConfig(max_attempts=10, backoff_ms=0),
        elements=RetryConfig(max_attempts=3, backoff_ms=0),
    )
    config.gestures.double_tap_pause_ms = 0
    return config
