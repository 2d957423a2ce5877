"""Tests for gamepad and touch adapters."""
import asyncio

import pytest

from nesbridge.input import (
    GamepadAdapter, GamepadSnapshot, InputBridge, Key, TouchOverlay, VirtualGamepadAdapter,
)
from nesbridge.models.input import InputSource


@pytest.fixture
def bridge(channel):
    return InputBridge(channel)


@pytest.fixture
def gamepad(bridge):
    return GamepadAdapter(bridge)


@pytest.fixture
def touch(bridge):
    return TouchOverlay(bridge)


def test_repeated_sample_presses_once(gamepad, channel):
    gamepad.update(GamepadSnapshot(up=True))
    gamepad.update(GamepadSnapshot(up=True))
    gamepad.update(GamepadSnapshot())

    assert channel.sent == [(38, "press"), (38, "release")]


def test_button_mapping(gamepad, channel):
    gamepad.update(GamepadSnapshot(a=True, b=True, left_shoulder=True, right_shoulder=True))

    assert sorted(code for code, _ in channel.sent) == [32, 65, 66, 83]


def test_from_axes_diagonal_is_two_events(gamepad, channel):
    events = gamepad.update(GamepadSnapshot.from_axes(0.9, 0.8))

    assert sorted(event.key_code for event in events) == [Key.UP, Key.RIGHT]
    assert len(channel.sent) == 2


def test_from_axes_dead_zone():
    snapshot = GamepadSnapshot.from_axes(0.2, -0.3)

    assert not (snapshot.up or snapshot.down or snapshot.left or snapshot.right)
    assert GamepadSnapshot.from_axes(-1.0, -1.0, a=True) == GamepadSnapshot(
        down=True, left=True, a=True)


def test_events_carry_source(bridge):
    virtual = VirtualGamepadAdapter(bridge)

    events = virtual.update(GamepadSnapshot(a=True))

    assert events[0].source is InputSource.VIRTUAL


def test_physical_and_touch_share_key_state(gamepad, touch, channel):
    gamepad.update(GamepadSnapshot(a=True))
    touch.touch_down(Key.A)
    touch.touch_up(Key.A)
    # The gamepad still holds A but the shared state already released it
    gamepad.update(GamepadSnapshot())

    assert channel.sent == [(65, "press"), (65, "release")]


def test_one_source_does_not_release_anothers_key(bridge, gamepad, channel):
    virtual = VirtualGamepadAdapter(bridge)

    gamepad.update(GamepadSnapshot(left=True))
    virtual.update(GamepadSnapshot())

    assert channel.sent == [(37, "press")]


def test_disconnect_releases_held_keys(gamepad, channel):
    gamepad.update(GamepadSnapshot(left=True, a=True))

    gamepad.disconnect()

    assert sorted(channel.sent) == [(37, "press"), (37, "release"), (65, "press"), (65, "release")]
    gamepad.update(GamepadSnapshot())
    assert len(channel.sent) == 4


@pytest.mark.asyncio
async def test_b_is_ignored_while_auto_sprint_is_on(bridge, gamepad, channel):
    bridge.set_auto_sprint(True)
    try:
        gamepad.update(GamepadSnapshot(b=True))
    finally:
        bridge.set_auto_sprint(False)

    assert channel.sent == []


@pytest.mark.asyncio
async def test_b_held_before_auto_sprint_still_releases(bridge, gamepad, channel):
    bridge.sprint.interval = 0.01
    gamepad.update(GamepadSnapshot(b=True))
    bridge.set_auto_sprint(True)
    try:
        gamepad.update(GamepadSnapshot(b=True))
        gamepad.update(GamepadSnapshot())
        await asyncio.sleep(0.05)

        assert channel.sent == [(66, "press"), (66, "release")]
        assert Key.B not in bridge.keys

        # B presses stay with auto sprint after the hand-over
        gamepad.update(GamepadSnapshot(b=True))
        assert channel.sent == [(66, "press"), (66, "release")]
    finally:
        bridge.set_auto_sprint(False)


@pytest.mark.asyncio
async def test_auto_sprint_takes_over_b_after_pad_release(bridge, gamepad, channel):
    bridge.sprint.interval = 0.01
    gamepad.update(GamepadSnapshot(b=True))
    bridge.set_auto_sprint(True)
    try:
        gamepad.update(GamepadSnapshot(b=True, right=True))
        gamepad.update(GamepadSnapshot(right=True))
        await asyncio.sleep(0.05)
        gamepad.update(GamepadSnapshot())
    finally:
        bridge.set_auto_sprint(False)

    assert channel.sent == [
        (66, "press"), (39, "press"), (66, "release"),
        (66, "press"), (39, "release"), (66, "release"),
    ]
    assert len(bridge.keys) == 0


def test_adapter_reset_forgets_levels(bridge, gamepad, channel):
    gamepad.update(GamepadSnapshot(up=True))

    bridge.reset()
    gamepad.update(GamepadSnapshot(up=True))

    assert channel.sent == [(38, "press"), (38, "press")]


def test_touch_press_and_release(touch, channel):
    touch.touch_down(touch.button("Start").key_code)
    touch.touch_down(touch.button("Start").key_code)
    touch.touch_up(touch.button("Start").key_code)

    assert channel.sent == [(32, "press"), (32, "release")]


@pytest.mark.parametrize("key_code", [0, -5])
def test_touch_ignores_unassigned_codes(touch, channel, key_code):
    assert touch.touch_down(key_code) is None
    assert touch.touch_up(key_code) is None
    assert channel.sent == []


def test_touch_release_without_press_is_ignored(touch, channel):
    assert touch.touch_up(Key.B) is None
    assert channel.sent == []


def test_touch_default_layout(touch):
    labels = [button.label for button in touch.buttons]

    assert labels == ["Up", "Down", "Left", "Right", "A", "B", "Start", "Select", "Reset"]
    assert touch.button("Reset").key_code == Key.RESET
    assert touch.button("Turbo") is None
