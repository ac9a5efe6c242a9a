"""
First-run setup.

Finds the save file, lists the characters in it, asks which slot to follow
and how to publish the count, then writes config.json.
"""

from pathlib import Path
from typing import Callable, List, Optional, Union

from .config import Config, DEFAULT_PORT, save_config
from .errors import SaveNotFoundError
from .save.decoder import Profile, parse_save_data
from .save.layout import SAVE_FILE_NAME
from .save.locator import resolve_save_path


def _ask(input_fn: Callable[[str], str], prompt: str) -> Optional[str]:
    try:
        return input_fn(prompt).strip()
    except EOFError:
        return None


def format_profiles(profiles: List[Profile]) -> str:
    lines = []
    for p in profiles:
        lines.append(
            f"Slot {p.slot_index}: {p.name} (Level {p.level}, "
            f"{p.format_play_time()} played, {p.deaths} deaths)"
        )
    return "\n".join(lines)


def run_setup_wizard(
    config_path: Union[str, Path],
    input_fn: Callable[[str], str] = input,
    save_dir: Optional[Path] = None,
) -> bool:
    """
    Interactive setup.

    Args:
        config_path: Where to write the config
        input_fn: Prompt function (replaced in tests)
        save_dir: Directory to probe instead of the default save location

    Returns:
        True if a config was written, False if setup was aborted
    """
    print("Death Counter - Setup Wizard")
    print()

    try:
        save_path = resolve_save_path(None, base_dir=save_dir)
    except SaveNotFoundError as e:
        print(f"Could not auto-detect save file: {e}")
        answer = _ask(input_fn, f"Enter full path to {SAVE_FILE_NAME}: ")
        if not answer:
            return False
        if not Path(answer).is_file():
            print(f"File not found: {answer}")
            return False
        save_path = str(Path(answer).resolve())

    print(f"\nFound save file at: {save_path}")

    try:
        data = Path(save_path).read_bytes()
    except OSError as e:
        print(f"Error reading save file: {e}")
        return False

    profiles = parse_save_data(data)
    if not profiles:
        print("No active characters found in save file.")
        return False

    print("\nFound characters:")
    print(format_profiles(profiles))

    slots = {p.slot_index for p in profiles}
    while True:
        answer = _ask(input_fn, "\nEnter character slot number: ")
        if answer is None:
            return False
        try:
            slot = int(answer)
        except ValueError:
            print("Invalid input. Please enter a number.")
            continue
        if slot not in slots:
            print(f"Slot {slot} not found. Please choose from the list above.")
            continue
        break

    answer = _ask(input_fn, "\nEnable web overlay (Y/n): ")
    if answer is None:
        return False
    web_ui = answer.lower() != "n"

    # Without the overlay the text file is the only output
    text_file = not web_ui
    if text_file:
        print("Web overlay disabled. Text file output will be enabled.")

    port = DEFAULT_PORT
    if web_ui:
        answer = _ask(input_fn, f"Web server port (default {DEFAULT_PORT}): ")
        if answer:
            try:
                value = int(answer)
            except ValueError:
                value = 0
            if 0 < value <= 65535:
                port = value
            else:
                print(f"Invalid port, using {DEFAULT_PORT}.")

    config = Config(
        character_slot=slot,
        enable_web_ui=web_ui,
        enable_text_file=text_file,
        web_port=port,
        save_path=save_path,
    )

    try:
        save_config(config, config_path)
    except OSError as e:
        print(f"Error writing config: {e}")
        return False

    print(f"\nConfiguration saved to: {config_path}")
    print(f"Save path: {save_path}")
    print("Setup complete!")
    return True
