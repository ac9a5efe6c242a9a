"""
Save container layout (ER0000.sl2).

Only the pieces needed to find one character's header and death count are
described here. Everything else in the container is opaque.

    CHAR_ACTIVE_STATUS_START + slot          -> 1 byte, 1 = slot in use
    SAVE_HEADER_START + slot * HEADER_LEN    -> name / level / playtime
    SLOT_START + slot * SLOT_LENGTH          -> character data, scanned for deaths
"""

# =============================================================================
# FILE NAMES
# =============================================================================

SAVE_FILE_NAME = "ER0000.sl2"
SAVE_DIR_NAME = "EldenRing"

# =============================================================================
# CONTAINER OFFSETS
# =============================================================================

NUM_SLOTS = 10

SLOT_START = 0x310
SLOT_LENGTH = 0x280000
# Deaths sit near the start of the slot; scanning the full 2.5 MB is wasted work.
SLOT_SCAN_SIZE = 0x40000

CHAR_ACTIVE_STATUS_START = 0x1901D04

SAVE_HEADER_START = 0x1901D0E
SAVE_HEADER_LENGTH = 0x24C

# Offsets inside one header
CHAR_NAME_LENGTH = 0x22  # 17 UTF-16LE code units, NUL padded
CHAR_LEVEL_OFFSET = 0x22  # uint16 LE
CHAR_PLAYTIME_OFFSET = 0x26  # uint32 LE, seconds

# Smallest container that holds every slot header
MIN_SAVE_SIZE = SAVE_HEADER_START + NUM_SLOTS * SAVE_HEADER_LENGTH

# =============================================================================
# DEATH COUNT SIGNATURE
# =============================================================================

# uint32 LE death count immediately followed by this tag
DEATH_SENTINEL = bytes([0xFF, 0xFF, 0xFF, 0xFF, 0x00, 0x08, 0x00, 0x00])
DEATH_VALUE_SIZE = 4


def active_flag_offset(slot_index: int) -> int:
    """Offset of the in-use byte for a slot."""
    return CHAR_ACTIVE_STATUS_START + slot_index


def header_offset(slot_index: int) -> int:
    """Offset of a slot's character header."""
    return SAVE_HEADER_START + slot_index * SAVE_HEADER_LENGTH


def slot_offset(slot_index: int) -> int:
    """Offset of a slot's character data region."""
    return SLOT_START + slot_index * SLOT_LENGTH
