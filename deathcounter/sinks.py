"""Flat-file output for streaming software that reads a text source."""

import logging
from pathlib import Path
from typing import Union

logger = logging.getLogger(__name__)


class TextFileSink:
    """Overwrites a text file with the bare death count on every change."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def write(self, deaths: int) -> bool:
        """
        Replace the file contents with the decimal count (no newline).

        Returns:
            False if the write failed; the failure is logged, not raised
        """
        try:
            self.path.write_text(str(deaths), encoding="utf-8")
        except OSError as e:
            logger.warning(f"Could not write {self.path}: {e}")
            return False
        return True
