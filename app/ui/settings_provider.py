# -*- coding: utf-8 -*-
"""Provider de uma página da janela Project Settings (caminho, busca e formulário)."""

from __future__ import annotations

from dataclasses import fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Callable, List, Optional, Type

from PyQt5.QtWidgets import QWidget

from app.application.container import AppContext
from app.core.settings_store import FormHandle, SettingsStore
from app.ui.settings_form import RecordForm, field_label


class SettingsScope(str, Enum):
    PROJECT = "project"
    USER = "user"


def search_keywords(record_type: type) -> List[str]:
    """Palavras-chave de busca: nomes de campo e seus rótulos (inclui aninhados)."""
    keywords: List[str] = []

    def walk(obj: Any) -> None:
        for f in fields(obj):
            for word in (f.name, field_label(f.name)):
                if word not in keywords:
                    keywords.append(word)
            value = getattr(obj, f.name)
            if is_dataclass(value):
                walk(value)

    walk(record_type())
    return keywords


class SettingsProvider:
    """Entrada registrada na janela: caminho ``A/B``, palavras-chave e formulário."""

    def __init__(
        self,
        path: str,
        store: SettingsStore,
        handle: FormHandle,
        keywords: List[str],
        on_gui: Optional[Callable[[RecordForm], None]] = None,
        scope: SettingsScope = SettingsScope.PROJECT,
    ) -> None:
        self.path = path
        self.store = store
        self.handle = handle
        self.keywords = list(keywords)
        self.on_gui = on_gui
        self.scope = scope

    @property
    def label(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    def matches(self, query: str) -> bool:
        q = (query or "").strip().lower()
        if not q:
            return True
        if q in self.path.lower():
            return True
        return any(q in k.lower() for k in self.keywords)

    def create_widget(self, parent: Optional[QWidget] = None) -> RecordForm:
        return RecordForm(self.handle, self.on_gui, parent)

    def __repr__(self) -> str:
        return f"SettingsProvider(path={self.path!r}, store={self.store.path})"


def create_settings_provider(
    context: AppContext,
    record_type: Type[Any],
    settings_path: Optional[str] = None,
    asset_path: Optional[Path] = None,
    on_gui: Optional[Callable[[RecordForm], None]] = None,
    on_change: Optional[Callable[[Any], None]] = None,
) -> SettingsProvider:
    """Cria o provider de ``record_type`` carregando (ou criando) a instância.

    Sem ``settings_path`` usa ``<namespace>/<TipoDoRegistro>``; sem
    ``asset_path`` usa o caminho padrão do registro de stores.
    """
    if settings_path is None:
        settings_path = f"{context.namespace}/{record_type.__name__}"

    store = context.get_store(record_type, asset_path)
    handle = store.bind_form(on_change)
    return SettingsProvider(
        path=settings_path,
        store=store,
        handle=handle,
        keywords=search_keywords(record_type),
        on_gui=on_gui,
    )
