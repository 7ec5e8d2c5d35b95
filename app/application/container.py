from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Type, TypeVar

from app.core.record_codec import ensure_record_type
from app.core.settings_store import SettingsStore

logger = logging.getLogger("SettingsPanel")

T = TypeVar("T")

DEFAULT_NAMESPACE = "SettingsPanel"
CONFIG_DIRNAME = "ProjectSettings"
SETTINGS_EXTENSION = ".json"


class SettingsRegistry:
    """Registro de stores por tipo de registro: um store (e um cache) por tipo."""

    def __init__(self, config_root: Path, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._config_root = Path(config_root)
        self._namespace = namespace
        self._stores: Dict[type, SettingsStore[Any]] = {}

    @property
    def config_root(self) -> Path:
        return self._config_root

    @property
    def namespace(self) -> str:
        return self._namespace

    def default_path(self, record_type: type) -> Path:
        return self._config_root / self._namespace / f"{record_type.__name__}{SETTINGS_EXTENSION}"

    def store_for(self, record_type: Type[T], path: Optional[Path] = None) -> SettingsStore[T]:
        ensure_record_type(record_type)
        store = self._stores.get(record_type)
        if store is not None:
            if path is not None and Path(path) != store.path:
                logger.warning(
                    "Store de %s já registrado em %s; caminho %s ignorado",
                    record_type.__name__,
                    store.path,
                    path,
                )
            return store

        store = SettingsStore(record_type, Path(path) if path is not None else self.default_path(record_type))
        self._stores[record_type] = store
        logger.debug("Store registrado: %s -> %s", record_type.__name__, store.path)
        return store

    def stores(self) -> List[SettingsStore[Any]]:
        return list(self._stores.values())

    def clear(self) -> None:
        self._stores.clear()


class AppContext:
    """Container simples de DI manual: dono do registro de stores da sessão."""

    def __init__(self, project_root: Optional[Path] = None, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._project_root = Path(project_root) if project_root is not None else Path.cwd()
        self._namespace = namespace
        self._registry: Optional[SettingsRegistry] = None
        self._provider_factories: List[Callable[["AppContext"], Any]] = []

    @property
    def project_root(self) -> Path:
        return self._project_root

    @property
    def namespace(self) -> str:
        return self._namespace

    def set_project_root(self, path: Path) -> None:
        normalized = Path(path)
        if normalized == self._project_root:
            return
        if self._registry is not None:
            self._registry.clear()
        self._project_root = normalized
        self._registry = None

    def get_settings_registry(self) -> SettingsRegistry:
        if self._registry is None:
            self._registry = SettingsRegistry(self._project_root / CONFIG_DIRNAME, self._namespace)
        return self._registry

    def get_store(self, record_type: Type[T], path: Optional[Path] = None) -> SettingsStore[T]:
        return self.get_settings_registry().store_for(record_type, path)

    def register_provider_factory(self, factory: Callable[["AppContext"], Any]) -> Callable[["AppContext"], Any]:
        """Registra uma fábrica de provider; utilizável como decorator."""
        if factory not in self._provider_factories:
            self._provider_factories.append(factory)
        return factory

    def create_providers(self) -> List[Any]:
        return [factory(self) for factory in self._provider_factories]

    def shutdown(self) -> None:
        if self._registry is not None:
            self._registry.clear()
        self._registry = None
