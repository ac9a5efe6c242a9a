"""
Save-file Death Counter

Watches a game save container for changes to a character's death count and
republishes the counter to a text file and a live web overlay.

Submodules:
- save: Save container layout, record decoder, save file locator
- counter: Broadcast hub holding the latest published count
- monitor: Polling change detector feeding the hub
- sinks: Flat-file output
- web: FastAPI overlay server (snapshot + Server-Sent Events)
- config, wizard: Config file model and first-run setup flow
- service: Process wiring and task supervision

Usage:
    from deathcounter import Config, DeathCounterService

    service = DeathCounterService(Config(character_slot=0), base_dir=".")
    service.run()
"""

from .errors import DeathCounterError, ConfigError, SaveNotFoundError, WebServerError
from .config import Config, load_config, save_config
from .counter import DeathCounter, Subscription
from .save.decoder import Profile, decode_slot_file, decode_slot_buffer, parse_save_data
from .monitor import SaveMonitor, TickResult
from .service import DeathCounterService

__version__ = "1.0.0"

__all__ = [
    "DeathCounterError",
    "ConfigError",
    "SaveNotFoundError",
    "WebServerError",
    "Config",
    "load_config",
    "save_config",
    "DeathCounter",
    "Subscription",
    "Profile",
    "decode_slot_file",
    "decode_slot_buffer",
    "parse_save_data",
    "SaveMonitor",
    "TickResult",
    "DeathCounterService",
]
