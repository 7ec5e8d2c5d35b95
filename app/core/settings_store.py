# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - app/core/settings_store.py
# Cache de um único registro de configuração por tipo + persistência
# em arquivo quando o formulário detecta alteração
# ===================================================================

from __future__ import annotations

import logging
from contextlib import contextmanager
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, Generic, Iterator, Optional, Type, TypeVar

from app.core.record_codec import (
    LoadStatus,
    dump_record,
    ensure_record_type,
    read_record,
    records_differ,
    snapshot_record,
)
from utils.file_operations import write_text_file
from utils.observability import (
    Events,
    emit_event,
    record_cache_access,
    record_load_fallback,
    record_save,
)
from utils.structured_logger import StructuredLogger

logger = logging.getLogger("SettingsPanel")
structured_logger = StructuredLogger("SettingsPanel")

T = TypeVar("T")


class StoreState(str, Enum):
    UNLOADED = "unloaded"
    LOADED = "loaded"


class SettingsStore(Generic[T]):
    """Dono da única instância em memória de ``record_type``.

    O arquivo é a fonte de verdade no primeiro acesso; a partir daí vale a
    instância em memória, até ser gravada por :meth:`persist`.
    """

    def __init__(self, record_type: Type[T], path: Path) -> None:
        ensure_record_type(record_type)
        self._record_type = record_type
        self._path = Path(path)
        self._instance: Optional[T] = None

    @property
    def record_type(self) -> Type[T]:
        return self._record_type

    @property
    def path(self) -> Path:
        return self._path

    @property
    def state(self) -> StoreState:
        return StoreState.LOADED if self._instance is not None else StoreState.UNLOADED

    @property
    def is_loaded(self) -> bool:
        return self._instance is not None

    def get_or_create(self) -> T:
        """Retorna a instância em cache, lendo o arquivo apenas no primeiro acesso.

        Arquivo ausente ou inválido resulta em ``record_type()`` com valores
        padrão; nenhum erro de desserialização chega ao chamador.
        """
        if self._instance is not None:
            record_cache_access(hit=True)
            return self._instance

        record_cache_access(hit=False)
        type_name = self._record_type.__name__
        result = read_record(self._record_type, self._path)

        if result.status is LoadStatus.LOADED:
            self._instance = result.record
            logger.info("Configurações carregadas: %s (%s)", type_name, self._path)
            emit_event(
                structured_logger,
                Events.SETTINGS_LOADED,
                record_type=type_name,
                path=str(self._path),
            )
        elif result.status is LoadStatus.MALFORMED:
            self._instance = self._record_type()
            record_load_fallback()
            logger.warning(
                "Arquivo de configurações inválido, usando valores padrão: %s", result.error
            )
            emit_event(
                structured_logger,
                Events.SETTINGS_LOAD_FAILED,
                level="warning",
                record_type=type_name,
                path=str(self._path),
                error_type=type(result.error).__name__,
                error_message=str(result.error),
            )
        else:
            self._instance = self._record_type()
            logger.debug("Arquivo de configurações ausente: %s", self._path)
            emit_event(
                structured_logger,
                Events.SETTINGS_DEFAULTED,
                level="debug",
                record_type=type_name,
                path=str(self._path),
            )

        return self._instance

    def reload(self) -> T:
        """Descarta o cache e lê o arquivo novamente."""
        self._instance = None
        return self.get_or_create()

    def persist(self, instance: Optional[T] = None) -> Path:
        """Grava ``instance`` (ou a instância em cache) no caminho canônico.

        Diretórios pais são criados sob demanda e o arquivo existente é
        sobrescrito. Erros de escrita (``OSError``) são propagados; a
        instância em memória continua válida.
        """
        record = self.get_or_create() if instance is None else instance
        if not isinstance(record, self._record_type):
            raise TypeError(
                f"Esperado {self._record_type.__name__}, obtido {type(record).__name__}"
            )

        type_name = self._record_type.__name__
        try:
            write_text_file(self._path, dump_record(record))
        except OSError as e:
            record_save(success=False)
            logger.error("Falha ao salvar configurações %s em %s: %s", type_name, self._path, e)
            emit_event(
                structured_logger,
                Events.SETTINGS_SAVE_FAILED,
                level="error",
                record_type=type_name,
                path=str(self._path),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            raise

        record_save(success=True)
        emit_event(
            structured_logger,
            Events.SETTINGS_SAVED,
            record_type=type_name,
            path=str(self._path),
        )
        return self._path

    def bind_form(self, on_change: Optional[Callable[[T], None]] = None) -> "FormHandle[T]":
        self.get_or_create()
        return FormHandle(self, on_change)


class ChangeScope:
    """Estado de um passe de edição; ``changed`` é preenchido ao sair."""

    def __init__(self, before: Dict[str, Any]) -> None:
        self.before = before
        self.changed = False


class FormHandle(Generic[T]):
    """Detecção de alterações em duas fases: ``snapshot`` antes, ``diff`` depois."""

    def __init__(self, store: SettingsStore[T], on_change: Optional[Callable[[T], None]] = None) -> None:
        self._store = store
        self._on_change = on_change

    @property
    def store(self) -> SettingsStore[T]:
        return self._store

    @property
    def record(self) -> T:
        return self._store.get_or_create()

    def snapshot(self) -> Dict[str, Any]:
        return snapshot_record(self.record)

    @staticmethod
    def diff(old: Dict[str, Any], new: Dict[str, Any]) -> bool:
        return records_differ(old, new)

    def commit(self, before: Dict[str, Any]) -> bool:
        """Compara com ``before`` e persiste somente se algo mudou."""
        changed = self.diff(before, self.snapshot())
        if not changed:
            return False
        self._store.persist(self.record)
        if self._on_change is not None:
            self._on_change(self.record)
        return True

    @contextmanager
    def change_scope(self) -> Iterator[ChangeScope]:
        scope = ChangeScope(self.snapshot())
        yield scope
        scope.changed = self.commit(scope.before)
