"""Tests for is_safe_rom_name."""
import pytest

from nesbridge.utils import is_safe_rom_name


@pytest.mark.parametrize("name", [
    "mario.nes",
    "Super Mario Bros. (World).nes",
    "zelda",
    ".hidden.nes",
])
def test_plain_names_are_safe(name):
    assert is_safe_rom_name(name)


@pytest.mark.parametrize("name", [
    "",
    ".",
    "..",
    "../mario.nes",
    "roms/mario.nes",
    "/etc/passwd",
    "..\\mario.nes",
    "mario\x00.nes",
])
def test_path_like_names_are_refused(name):
    assert not is_safe_rom_name(name)
