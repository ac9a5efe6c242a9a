"""
Save container access.

Modules:
- layout: Fixed offsets and lengths of the save container
- decoder: Character record decoding (file and in-memory entry points)
- locator: Save file path resolution
"""

from .decoder import Profile, decode_slot_file, decode_slot_buffer, parse_save_data, find_deaths, decode_name
from .locator import resolve_save_path, default_save_dir

__all__ = [
    "Profile",
    "decode_slot_file",
    "decode_slot_buffer",
    "parse_save_data",
    "find_deaths",
    "decode_name",
    "resolve_save_path",
    "default_save_dir",
]
