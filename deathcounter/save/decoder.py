"""
Character record decoder.

Reads one character slot out of a save container: the in-use flag, the
header (name, level, playtime) and the death count found by scanning the
start of the slot region for a byte signature.

Two entry points share the same offset arithmetic:
- decode_slot_file: positioned reads on an open file (polling path, avoids
  loading the ~28 MB container every tick)
- decode_slot_buffer / parse_save_data: an in-memory copy of the container

A short or missing read is a normal outcome (the game may be mid-write), so
nothing here raises for bad data; decoders return None instead.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, asdict
from typing import BinaryIO, Callable, Dict, List, Optional

from .layout import (
    NUM_SLOTS,
    SLOT_SCAN_SIZE,
    SAVE_HEADER_LENGTH,
    CHAR_NAME_LENGTH,
    CHAR_LEVEL_OFFSET,
    CHAR_PLAYTIME_OFFSET,
    DEATH_SENTINEL,
    DEATH_VALUE_SIZE,
    active_flag_offset,
    header_offset,
    slot_offset,
)

# (offset, size) -> exactly `size` bytes, or None if they are not all there
ReadAt = Callable[[int, int], Optional[bytes]]


@dataclass
class Profile:
    """One decoded character slot. Recomputed on every successful read."""

    slot_index: int
    name: str
    level: int
    play_time: int  # seconds
    deaths: int  # 0 if the signature was not found
    active: bool = True

    def to_dict(self) -> Dict:
        return asdict(self)

    def format_play_time(self) -> str:
        """Playtime as H:MM:SS."""
        hours, rem = divmod(self.play_time, 3600)
        minutes, seconds = divmod(rem, 60)
        return f"{hours}:{minutes:02d}:{seconds:02d}"


# =============================================================================
# FIELD DECODING
# =============================================================================

def decode_name(raw: bytes) -> str:
    """
    Decode a NUL-padded UTF-16LE name field.

    Truncation happens after decoding so surrogate pairs are never split.
    """
    if len(raw) % 2:
        raw = raw[:-1]
    text = raw.decode("utf-16-le", errors="replace")
    return text.split("\x00", 1)[0]


def find_deaths(slot_data: bytes) -> int:
    """
    Find the death count in a slot region.

    The count is the uint32 LE directly before the first occurrence of
    DEATH_SENTINEL. This is a layout signature rather than a documented
    field, so a missing match returns 0 instead of failing.
    """
    idx = slot_data.find(DEATH_SENTINEL, DEATH_VALUE_SIZE)
    if idx < 0:
        return 0
    return struct.unpack_from("<I", slot_data, idx - DEATH_VALUE_SIZE)[0]


def _decode(read_at: ReadAt, slot_index: int) -> Optional[Profile]:
    if not 0 <= slot_index < NUM_SLOTS:
        return None

    # In-use flag first; nothing else is read for an empty slot
    flag = read_at(active_flag_offset(slot_index), 1)
    if flag is None or flag[0] != 1:
        return None

    header = read_at(header_offset(slot_index), SAVE_HEADER_LENGTH)
    if header is None:
        return None

    scan = read_at(slot_offset(slot_index), SLOT_SCAN_SIZE)
    if scan is None:
        return None

    return Profile(
        slot_index=slot_index,
        name=decode_name(header[:CHAR_NAME_LENGTH]),
        level=struct.unpack_from("<H", header, CHAR_LEVEL_OFFSET)[0],
        play_time=struct.unpack_from("<I", header, CHAR_PLAYTIME_OFFSET)[0],
        deaths=find_deaths(scan),
        active=True,
    )


# =============================================================================
# ENTRY POINTS
# =============================================================================

def decode_slot_file(f: BinaryIO, slot_index: int) -> Optional[Profile]:
    """
    Decode one slot from an open binary file using positioned reads.

    Args:
        f: File opened in binary mode
        slot_index: Character slot, 0 to NUM_SLOTS - 1

    Returns:
        Profile, or None if the slot is unused or the file is too short
    """
    def read_at(offset: int, size: int) -> Optional[bytes]:
        f.seek(offset)
        data = f.read(size)
        if len(data) != size:
            return None
        return data

    return _decode(read_at, slot_index)


def decode_slot_buffer(data: bytes, slot_index: int) -> Optional[Profile]:
    """Decode one slot from an in-memory save container."""
    view = memoryview(data)

    def read_at(offset: int, size: int) -> Optional[bytes]:
        if offset + size > len(view):
            return None
        return view[offset:offset + size].tobytes()

    return _decode(read_at, slot_index)


def parse_save_data(data: bytes) -> List[Profile]:
    """Decode every present slot in a save container, in slot order."""
    profiles = []
    for slot_index in range(NUM_SLOTS):
        profile = decode_slot_buffer(data, slot_index)
        if profile is not None:
            profiles.append(profile)
    return profiles
