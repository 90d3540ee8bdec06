"""
Tests for UI extraction and its two retry layers.
"""
import asyncio

import pytest

from mobilerobot.config_manager import RetriesConfig, RetryConfig
from mobilerobot.tools.driver.base import ActionableError
from mobilerobot.tools.ui.provider import NULL_ROOT_NODE, AndroidElementProvider

DUMP = ("exec-out", "uiautomator", "dump", "/dev/tty")

EMPTY = "<?xml version='1.0' ?><hierarchy rotation=\"0\"><node class=\"android.widget.FrameLayout\" bounds=\"[0,0][1080,2400]\" /></hierarchy>UI hierchary dumped to: /dev/tty"
POPULATED = (
    "<?xml version='1.0' ?><hierarchy rotation=\"0\">"
    '<node class="android.widget.FrameLayout" bounds="[0,0][1080,2400]">'
    '<node class="android.widget.Button" text="OK" resource-id="android:id/button1" focused="true" bounds="[10,20][110,220]" />'
    "</node></hierarchy>UI hierchary dumped to: /dev/tty"
)


def provider(element_attempts=3, dump_attempts=10) -> AndroidElementProvider:
    return AndroidElementProvider(
        RetriesConfig(
            ui_dump=RetryConfig(max_attempts=dump_attempts, backoff_ms=0),
            elements=RetryConfig(max_attempts=element_attempts, backoff_ms=0),
        )
    )


def test_returns_elements_from_dump(adb):
    adb.on(*DUMP, returns=POPULATED)

    (element,) = asyncio.run(provider().get_elements(adb))

    assert element.type == "android.widget.Button"
    assert element.text == "OK"
    assert element.focused is True
    assert element.identifier == "android:id/button1"
    assert element.rect.width == 100 and element.rect.height == 200
    assert adb.calls == [DUMP]


def test_empty_then_populated_returns_populated(adb):
    adb.on(*DUMP, returns=[EMPTY, EMPTY, POPULATED])

    elements = asyncio.run(provider().get_elements(adb))

    assert [e.text for e in elements] == ["OK"]
    assert len(adb.calls) == 3


def test_empty_on_every_attempt_returns_empty_list(adb):
    adb.on(*DUMP, returns=EMPTY)

    assert asyncio.run(provider().get_elements(adb)) == []
    assert len(adb.calls) == 3


def test_waits_between_empty_attempts(adb, monkeypatch):
    adb.on(*DUMP, returns=EMPTY)
    pauses = []

    async def fake_sleep(seconds):
        pauses.append(seconds)

    monkeypatch.setattr("mobilerobot.tools.ui.provider.asyncio.sleep", fake_sleep)

    asyncio.run(AndroidElementProvider().get_elements(adb))

    assert pauses == [0.5, 0.5]


def test_null_root_node_is_retried(adb):
    adb.on(*DUMP, returns=[NULL_ROOT_NODE, NULL_ROOT_NODE, POPULATED])

    elements = asyncio.run(provider().get_elements(adb))

    assert len(elements) == 1
    assert len(adb.calls) == 3


def test_null_root_node_on_every_attempt_raises(adb):
    adb.on(*DUMP, returns=f"ERROR: {NULL_ROOT_NODE}")

    with pytest.raises(ActionableError, match="Failed to get UIAutomator XML"):
        asyncio.run(provider().get_elements(adb))
    assert len(adb.calls) == 10


def test_dump_without_nodes_counts_as_empty(adb):
    adb.on(*DUMP, returns="<?xml version='1.0' ?><hierarchy rotation=\"0\"></hierarchy>")

    assert asyncio.run(provider(element_attempts=2).get_elements(adb)) == []
    assert len(adb.calls) == 2
