# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - app/ui/main_window.py
# Janela principal: menu "Editar > Project Settings..." e pasta do projeto
#
# - Ação de abrir projeto (Ctrl+O) troca a raiz do AppContext
# - Persistência da última pasta de projeto (QSettings)
# ===================================================================

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from PyQt5.QtGui import QCloseEvent, QKeySequence
from PyQt5.QtWidgets import QAction, QFileDialog, QLabel, QMainWindow, QWidget

from app.application.container import AppContext
from app.ui.project_settings_window import ProjectSettingsWindow
from utils.settings_manager import SettingsManager

logger = logging.getLogger("SettingsPanel")


class MainWindow(QMainWindow):
    """Janela hospedeira que registra a entrada de menu das configurações."""

    def __init__(
        self,
        context: AppContext,
        preferences: Optional[SettingsManager] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._context = context
        self._preferences = preferences if preferences is not None else SettingsManager()
        self._settings_window: Optional[ProjectSettingsWindow] = None

        self.setWindowTitle("Settings Panel")
        self.resize(640, 360)

        self.path_label = QLabel()
        self.path_label.setMargin(12)
        self.setCentralWidget(self.path_label)
        self._update_path_label()

        self.action_open_project = QAction("Abrir projeto...", self)
        self.action_open_project.setShortcut(QKeySequence("Ctrl+O"))
        self.action_open_project.triggered.connect(self._select_project_root)

        self.action_project_settings = QAction("Project Settings...", self)
        self.action_project_settings.setShortcut(QKeySequence("Ctrl+,"))
        self.action_project_settings.triggered.connect(self.open_project_settings)

        file_menu = self.menuBar().addMenu("&Arquivo")
        file_menu.addAction(self.action_open_project)
        edit_menu = self.menuBar().addMenu("&Editar")
        edit_menu.addAction(self.action_project_settings)

    def _update_path_label(self) -> None:
        self.path_label.setText(f"Projeto: {self._context.project_root}")

    def _select_project_root(self) -> None:
        folder = QFileDialog.getExistingDirectory(
            self, "Selecionar pasta do projeto", str(self._context.project_root)
        )
        if folder:
            self.set_project_root(Path(folder))

    def set_project_root(self, path: Path) -> None:
        self._close_settings_window()
        self._context.set_project_root(path)
        self._preferences.set_last_project_root(str(path))
        self._update_path_label()
        logger.info("Projeto selecionado: %s", path)

    def open_project_settings(self) -> ProjectSettingsWindow:
        if self._settings_window is None:
            self._settings_window = ProjectSettingsWindow(
                self._context.create_providers(),
                preferences=self._preferences,
                parent=self,
            )
            self._settings_window.finished.connect(self._on_settings_window_finished)
        self._settings_window.show()
        self._settings_window.raise_()
        return self._settings_window

    def _on_settings_window_finished(self, _result: int) -> None:
        self._settings_window = None

    def _close_settings_window(self) -> None:
        if self._settings_window is not None:
            self._settings_window.reject()
            self._settings_window = None

    def closeEvent(self, event: QCloseEvent) -> None:
        self._close_settings_window()
        self._context.shutdown()
        super().closeEvent(event)
