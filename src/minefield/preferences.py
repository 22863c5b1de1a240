"""
Player preferences.

A small JSON file next to the high-score table that remembers settings
between sessions, such as the last difficulty played.
"""
import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

logger = logging.getLogger(__name__)

DEFAULT_PREFERENCES: Dict[str, Any] = {
    "sounds_enabled": True,
    "theme": "light",
    "last_difficulty": "medium",
}


class JsonPreferenceStore:
    """
    Key/value preferences stored as a JSON object.

    Missing keys read as the defaults above. A missing, unreadable or
    corrupt file reads as the defaults alone.
    """

    def __init__(self, path: Union[str, Path]) -> None:
        self.path = Path(path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the stored value for ``key``, or ``default`` if unset."""
        return self._read_all().get(key, default)

    def set(self, key: str, value: Any) -> bool:
        """
        Store one preference.

        Returns:
            True if the file was written.
        """
        data = self._read_all()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.path, "w") as f:
                json.dump(data, f, indent=2)
        except OSError:
            logger.error("Could not write preferences to %s", self.path, exc_info=True)
            return False
        logger.debug("Preference %s set to %r", key, value)
        return True

    def _read_all(self) -> Dict[str, Any]:
        data = dict(DEFAULT_PREFERENCES)
        if not self.path.exists():
            return data
        try:
            with open(self.path) as f:
                stored = json.load(f)
        except (OSError, ValueError):
            logger.error("Could not read preferences from %s", self.path, exc_info=True)
            return data
        if not isinstance(stored, dict):
            logger.error("Ignoring malformed preferences file %s", self.path)
            return data
        data.update(stored)
        return data
