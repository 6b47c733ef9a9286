"""Settings persistence to JSON file."""

import json
import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from spendscope.domain.settings import AnalyticsSettings

logger = logging.getLogger(__name__)


class SettingsStore:
    """Persists analytics settings to a JSON file.

    Example:
        >>> store = SettingsStore()
        >>> settings = store.load()
        >>> settings.breakdown.top_n = 3
        >>> store.save(settings)
    """

    DEFAULT_PATH = Path.home() / ".spendscope_settings.json"

    def __init__(self, path: Optional[Path] = None):
        self._path = path or self.DEFAULT_PATH

    @property
    def path(self) -> Path:
        return self._path

    def exists(self) -> bool:
        return self._path.exists()

    def load(self) -> AnalyticsSettings:
        """Load settings from file.

        Returns:
            AnalyticsSettings instance. If the file doesn't exist or is
            invalid, returns default settings.
        """
        if not self._path.exists():
            return AnalyticsSettings()

        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
            return AnalyticsSettings.model_validate(data)
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Could not load settings from {self._path}: {e}")
            return AnalyticsSettings()

    def save(self, settings: AnalyticsSettings) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(settings.model_dump_json(indent=2), encoding="utf-8")

    def delete(self) -> bool:
        """Delete settings file.

        Returns:
            True if file was deleted, False if it didn't exist
        """
        if self._path.exists():
            self._path.unlink()
            return True
        return False
