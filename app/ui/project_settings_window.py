# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - app/ui/project_settings_window.py
# Janela "Project Settings": árvore de providers, busca e formulários
#
# - Busca filtra por caminho do provider e por palavras-chave dos campos
# - Formulários são criados sob demanda na primeira seleção
# - Último provider selecionado é lembrado (QSettings via SettingsManager)
# - "Reverter" descarta o cache e relê o arquivo do disco
# ===================================================================

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PyQt5.QtCore import QTimer, Qt
from PyQt5.QtGui import QCloseEvent
from PyQt5.QtWidgets import (
    QDialog,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QPushButton,
    QSplitter,
    QStackedWidget,
    QTreeWidget,
    QTreeWidgetItem,
    QVBoxLayout,
    QWidget,
)

from app.ui.design_system import DSFeedback, DSStyles
from app.ui.settings_form import RecordForm
from app.ui.settings_provider import SettingsProvider
from utils.notification_bus import notification_bus, notify_info
from utils.observability import Events, emit_event
from utils.settings_manager import SettingsManager
from utils.structured_logger import StructuredLogger

logger = logging.getLogger("SettingsPanel")
structured_logger = StructuredLogger("SettingsPanel")

PROVIDER_ROLE = Qt.UserRole


class _Toast(QLabel):
    """Toast não-bloqueante no rodapé da janela."""

    def __init__(self, parent: QWidget) -> None:
        super().__init__(parent)
        self.setWordWrap(True)
        self.setAlignment(Qt.AlignCenter)
        self.setMargin(8)
        self.setAttribute(Qt.WA_ShowWithoutActivating, True)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self.hide)
        self.hide()

    def show_toast(self, level: str, message: str, timeout_ms: int) -> None:
        styles = DSFeedback.TOAST_LEVEL_STYLES
        self.setStyleSheet(f"border-radius:8px; padding:6px; {styles.get(level, styles['info'])}")
        self.setText(message or "")

        parent = self.parentWidget()
        if parent is not None:
            self.setMaximumWidth(max(240, int(parent.width() * 0.6)))
            self.adjustSize()
            self.move(
                max(8, (parent.width() - self.width()) // 2),
                max(8, parent.height() - self.height() - 12),
            )

        self.raise_()
        self.show()
        self._timer.start(max(800, int(timeout_ms or 0)))


class ProjectSettingsWindow(QDialog):
    """Janela que lista providers em árvore e mostra o formulário selecionado."""

    def __init__(
        self,
        providers: Optional[List[SettingsProvider]] = None,
        preferences: Optional[SettingsManager] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self.setWindowTitle("Project Settings")
        self.resize(820, 520)

        self._preferences = preferences if preferences is not None else SettingsManager()
        self._providers: Dict[str, SettingsProvider] = {}
        self._items: Dict[str, QTreeWidgetItem] = {}
        self._forms: Dict[str, RecordForm] = {}
        self._current_path = ""

        self._build_ui()
        notification_bus.notified.connect(self._on_notification)

        for provider in providers or []:
            self.add_provider(provider)

        last = self._preferences.last_provider()
        if not (last and self.select_provider(last)) and self._providers:
            self.select_provider(sorted(self._providers)[0])

    def _build_ui(self) -> None:
        root = QVBoxLayout(self)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Buscar configurações...")
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self.apply_filter)
        root.addWidget(self.search_edit)

        splitter = QSplitter(Qt.Horizontal)

        self.tree = QTreeWidget()
        self.tree.setHeaderHidden(True)
        self.tree.currentItemChanged.connect(self._on_current_item_changed)
        splitter.addWidget(self.tree)

        right = QWidget()
        right_layout = QVBoxLayout(right)
        right_layout.setContentsMargins(0, 0, 0, 0)

        self.title_label = QLabel("")
        self.title_label.setStyleSheet("font-weight:600; font-size:15px;")
        right_layout.addWidget(self.title_label)

        self.stack = QStackedWidget()
        self.placeholder = QLabel("Selecione uma categoria à esquerda.")
        self.placeholder.setAlignment(Qt.AlignCenter)
        self.placeholder.setStyleSheet(DSStyles.PANEL_DASHED_PLACEHOLDER)
        self.stack.addWidget(self.placeholder)
        right_layout.addWidget(self.stack, 1)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        self.btn_revert = QPushButton("Reverter")
        self.btn_revert.setToolTip("Descarta as alterações em memória e relê o arquivo")
        self.btn_revert.setEnabled(False)
        self.btn_revert.clicked.connect(self.revert_current)
        buttons.addWidget(self.btn_revert)
        right_layout.addLayout(buttons)

        splitter.addWidget(right)
        splitter.setStretchFactor(0, 1)
        splitter.setStretchFactor(1, 3)
        root.addWidget(splitter, 1)

        self.toast = _Toast(self)

    # ------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------
    def add_provider(self, provider: SettingsProvider) -> None:
        if provider.path in self._providers:
            logger.warning("Provider duplicado ignorado: %s", provider.path)
            return
        self._providers[provider.path] = provider

        parent: Optional[QTreeWidgetItem] = None
        prefix = ""
        for part in provider.path.split("/"):
            prefix = f"{prefix}/{part}" if prefix else part
            item = self._items.get(prefix)
            if item is None:
                item = QTreeWidgetItem([part])
                if parent is None:
                    self.tree.addTopLevelItem(item)
                else:
                    parent.addChild(item)
                self._items[prefix] = item
            parent = item

        parent.setData(0, PROVIDER_ROLE, provider.path)
        self.tree.expandAll()

    def providers(self) -> List[SettingsProvider]:
        return [self._providers[p] for p in sorted(self._providers)]

    def current_provider(self) -> Optional[SettingsProvider]:
        return self._providers.get(self._current_path)

    def current_form(self) -> Optional[RecordForm]:
        return self._forms.get(self._current_path)

    def select_provider(self, path: str) -> bool:
        item = self._items.get(path)
        if item is None or path not in self._providers:
            return False
        self.tree.setCurrentItem(item)
        return True

    def _on_current_item_changed(self, current: Optional[QTreeWidgetItem], _previous) -> None:
        path = current.data(0, PROVIDER_ROLE) if current is not None else None
        if not path or path not in self._providers:
            self._current_path = ""
            self.title_label.setText(current.text(0) if current is not None else "")
            self.stack.setCurrentWidget(self.placeholder)
            self.btn_revert.setEnabled(False)
            return

        provider = self._providers[path]
        form = self._forms.get(path)
        if form is None:
            form = provider.create_widget(self.stack)
            self._forms[path] = form
            self.stack.addWidget(form)

        self._current_path = path
        self.title_label.setText(provider.label)
        self.stack.setCurrentWidget(form)
        self.btn_revert.setEnabled(True)
        self._preferences.set_last_provider(path)
        emit_event(structured_logger, Events.PROVIDER_OPENED, provider_path=path)

    # ------------------------------------------------------------------
    # Busca
    # ------------------------------------------------------------------
    def apply_filter(self, query: str) -> None:
        # Do mais profundo para a raiz: um nó fica visível se casar com a
        # busca ou se algum descendente estiver visível
        for path in sorted(self._items, key=lambda p: p.count("/"), reverse=True):
            item = self._items[path]
            provider = self._providers.get(path)
            visible = provider is not None and provider.matches(query)
            if not visible:
                visible = any(not item.child(i).isHidden() for i in range(item.childCount()))
            item.setHidden(not visible)

    def visible_provider_paths(self) -> List[str]:
        return sorted(p for p in self._providers if not self._items[p].isHidden())

    # ------------------------------------------------------------------
    # Ações
    # ------------------------------------------------------------------
    def revert_current(self) -> None:
        provider = self.current_provider()
        if provider is None:
            return
        provider.store.reload()
        form = self._forms.get(provider.path)
        if form is not None:
            form.refresh()
        logger.info("Configurações revertidas para o conteúdo de %s", provider.store.path)
        notify_info(f"{provider.label}: valores relidos do disco.")

    def _on_notification(self, level: str, message: str, timeout_ms: int) -> None:
        self.toast.show_toast(level, message, timeout_ms)

    def _disconnect_bus(self) -> None:
        try:
            notification_bus.notified.disconnect(self._on_notification)
        except TypeError:
            pass

    def done(self, result: int) -> None:
        # Esc, reject() e accept() não passam por closeEvent
        self._disconnect_bus()
        super().done(result)
        self.deleteLater()

    def closeEvent(self, event: QCloseEvent) -> None:
        self._disconnect_bus()
        super().closeEvent(event)
