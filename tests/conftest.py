"""
Shared pytest fixtures for the death counter test suite.

This module provides reusable fixtures for:
- Synthetic save containers with chosen characters in chosen slots
- Save files on disk laid out like the default save directory
"""

import os
import struct
import sys

import pytest

# Ensure project root is in path
_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
sys.path.insert(0, _project_root)

from deathcounter.save.layout import (
    MIN_SAVE_SIZE,
    CHAR_NAME_LENGTH,
    CHAR_LEVEL_OFFSET,
    CHAR_PLAYTIME_OFFSET,
    DEATH_SENTINEL,
    SAVE_FILE_NAME,
    active_flag_offset,
    header_offset,
    slot_offset,
)


def build_save(characters=None, size=MIN_SAVE_SIZE):
    """
    Build a zeroed save container and fill in the given slots.

    characters maps slot index -> dict with keys:
        name, level, play_time, deaths (None = no sentinel),
        deaths_at (offset in slot region, default 120), active (default True)
    """
    buf = bytearray(size)
    for slot, char in (characters or {}).items():
        buf[active_flag_offset(slot)] = 1 if char.get("active", True) else 0

        h = header_offset(slot)
        name = char.get("name", "").encode("utf-16-le")[:CHAR_NAME_LENGTH]
        buf[h:h + len(name)] = name
        struct.pack_into("<H", buf, h + CHAR_LEVEL_OFFSET, char.get("level", 1))
        struct.pack_into("<I", buf, h + CHAR_PLAYTIME_OFFSET, char.get("play_time", 0))

        deaths = char.get("deaths")
        if deaths is not None:
            at = slot_offset(slot) + char.get("deaths_at", 120)
            buf[at:at + 12] = struct.pack("<I", deaths) + DEATH_SENTINEL
    return buf


# =============================================================================
# Save Container Fixtures
# =============================================================================


@pytest.fixture
def tarnished_save():
    """Slot 2 holds 'Tarnished', level 45, one hour played, 100 deaths."""
    return build_save({
        2: {"name": "Tarnished", "level": 45, "play_time": 3600, "deaths": 100},
    })


@pytest.fixture
def two_character_save():
    """Slots 0 and 3 in use, slot 1 flagged unused but with header bytes."""
    return build_save({
        0: {"name": "Melina", "level": 12, "play_time": 900, "deaths": 7},
        1: {"name": "Ghost", "level": 3, "deaths": 1, "active": False},
        3: {"name": "Ranni", "level": 150, "play_time": 360000, "deaths": 412},
    })


@pytest.fixture
def save_file(tmp_path, tarnished_save):
    """tarnished_save written to <tmp>/EldenRing/7656119/ER0000.sl2."""
    account = tmp_path / "EldenRing" / "7656119"
    account.mkdir(parents=True)
    path = account / SAVE_FILE_NAME
    path.write_bytes(tarnished_save)
    return path


def write_slot(path, slot, **char):
    """Rewrite a save file with a single character in `slot`."""
    path.write_bytes(build_save({slot: char}))


def set_mtime(path, ns):
    """Pin a file's modification time (nanoseconds)."""
    os.utime(path, ns=(ns, ns))
