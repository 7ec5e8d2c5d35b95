# utils/settings_manager.py
from typing import Optional

from PyQt5.QtCore import QSettings


class SettingsManager:
    """Preferências da própria janela (não confundir com os registros de projeto)."""

    _instance = None
    _settings = None

    LAST_PROVIDER_KEY = "project_settings/last_provider"
    LAST_PROJECT_ROOT_KEY = "project_settings/last_project_root"

    def __new__(cls, settings: Optional[QSettings] = None):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._settings = settings or QSettings('SettingsPanel', 'Preferences')
        return cls._instance

    def get(self, key: str, default=None):
        return self._settings.value(key, default)

    def set(self, key: str, value) -> None:
        self._settings.setValue(key, value)
        self._settings.sync()

    def last_provider(self) -> str:
        return str(self.get(self.LAST_PROVIDER_KEY, "") or "")

    def set_last_provider(self, path: str) -> None:
        self.set(self.LAST_PROVIDER_KEY, path or "")

    def last_project_root(self) -> str:
        return str(self.get(self.LAST_PROJECT_ROOT_KEY, "") or "")

    def set_last_project_root(self, path: str) -> None:
        self.set(self.LAST_PROJECT_ROOT_KEY, path or "")

    @classmethod
    def reset(cls) -> None:
        cls._instance = None
        cls._settings = None
