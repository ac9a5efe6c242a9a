"""Exception types raised across the death counter."""


class DeathCounterError(Exception):
    """Base class for death counter errors."""


class ConfigError(DeathCounterError):
    """Config file is missing, unreadable, or invalid."""


class SaveNotFoundError(DeathCounterError):
    """No save file could be located."""


class WebServerError(DeathCounterError):
    """The overlay web server could not start or stopped unexpectedly."""
