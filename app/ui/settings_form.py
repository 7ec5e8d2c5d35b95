# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - app/ui/settings_form.py
# Formulário (inspector) gerado a partir dos campos de um registro
#
# Cada edição do usuário roda dentro de FormHandle.change_scope():
# o arquivo só é regravado quando algum valor realmente mudou.
# ===================================================================

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple

from PyQt5.QtCore import pyqtSignal
from PyQt5.QtWidgets import (
    QCheckBox,
    QComboBox,
    QFormLayout,
    QGroupBox,
    QLabel,
    QLineEdit,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from app.core.settings_store import FormHandle
from app.ui.design_system import DSStyles, apply_section_group
from app.ui.error_feedback import persist_failure_text
from utils.notification_bus import notify_error

logger = logging.getLogger("SettingsPanel")

INT_MIN = -(2 ** 31)
INT_MAX = 2 ** 31 - 1

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def field_label(name: str) -> str:
    """Nome amigável: ``max_retries`` / ``maxRetries`` -> ``Max Retries``."""
    words = _CAMEL_BOUNDARY.sub(" ", name).replace("_", " ").split()
    return " ".join(w[:1].upper() + w[1:] for w in words)


def _resolve(record: Any, path: str) -> Tuple[Any, str]:
    """Retorna (objeto dono, nome do campo) para um caminho pontilhado."""
    parts = path.split(".")
    owner = record
    for part in parts[:-1]:
        owner = getattr(owner, part)
    if not hasattr(owner, parts[-1]):
        raise KeyError(f"Campo não encontrado: {path}")
    return owner, parts[-1]


@dataclass
class _FieldBinding:
    path: str
    widget: QWidget
    apply: Callable[[Any], None]


class RecordForm(QWidget):
    """Inspector de um registro ligado a um :class:`FormHandle`.

    Sem ``on_gui``, desenha um editor por campo. Com ``on_gui``, delega o
    desenho ao chamador, que pode usar :meth:`add_field` e
    :meth:`set_field_value`.
    """

    value_committed = pyqtSignal(str)
    persist_failed = pyqtSignal(str)

    def __init__(
        self,
        handle: FormHandle,
        on_gui: Optional[Callable[["RecordForm"], None]] = None,
        parent: Optional[QWidget] = None,
    ) -> None:
        super().__init__(parent)
        self._handle = handle
        self._bindings: Dict[str, _FieldBinding] = {}

        root = QVBoxLayout(self)
        self.form_layout = QFormLayout()
        root.addLayout(self.form_layout)

        self.status_label = QLabel("")
        self.status_label.setWordWrap(True)
        self.status_label.setStyleSheet(DSStyles.STATE_ERROR)
        self.status_label.hide()
        root.addWidget(self.status_label)
        root.addStretch(1)

        if on_gui is not None:
            on_gui(self)
        else:
            self.draw_default_inspector()

    @property
    def handle(self) -> FormHandle:
        return self._handle

    @property
    def record(self) -> Any:
        return self._handle.record

    def field_paths(self) -> List[str]:
        return list(self._bindings.keys())

    def editor(self, path: str) -> QWidget:
        return self._bindings[path].widget

    def draw_default_inspector(self) -> None:
        for f in fields(self.record):
            self.add_field(f.name)

    def add_field(self, path: str, layout: Optional[QFormLayout] = None) -> QWidget:
        """Cria o editor padrão do campo ``path`` e o adiciona ao layout."""
        target = layout if layout is not None else self.form_layout
        value = self.field_value(path)
        label = field_label(path.rsplit(".", 1)[-1])

        if is_dataclass(value):
            group = QGroupBox(label)
            apply_section_group(group)
            nested = QFormLayout(group)
            for f in fields(value):
                self.add_field(f"{path}.{f.name}", nested)
            target.addRow(group)
            return group

        widget = self._create_editor(path, value)
        target.addRow(label, widget)
        return widget

    def _create_editor(self, path: str, value: Any) -> QWidget:
        if isinstance(value, bool):
            box = QCheckBox()
            box.setChecked(value)
            box.toggled.connect(lambda checked, p=path: self.set_field_value(p, bool(checked)))
            self._bind(path, box, box.setChecked)
            return box

        if isinstance(value, Enum):
            members = list(type(value))
            combo = QComboBox()
            combo.addItems([field_label(m.name.lower()) for m in members])
            combo.setCurrentIndex(members.index(value))
            combo.currentIndexChanged.connect(
                lambda idx, p=path, ms=members: self.set_field_value(p, ms[idx])
            )
            self._bind(path, combo, lambda v, c=combo, ms=members: c.setCurrentIndex(ms.index(v)))
            return combo

        if isinstance(value, int) and INT_MIN <= value <= INT_MAX:
            spin = QSpinBox()
            spin.setRange(INT_MIN, INT_MAX)
            spin.setValue(value)
            spin.valueChanged.connect(lambda v, p=path: self.set_field_value(p, int(v)))
            self._bind(path, spin, lambda v, s=spin: self._apply_spin_value(s, v))
            return spin

        if isinstance(value, (int, float)):
            # Inteiros fora de 32 bits e floats: texto livre, sem clamp nem arredondamento
            return self._create_number_line(path, type(value))

        if isinstance(value, str):
            line = QLineEdit(value)
            line.textEdited.connect(lambda text, p=path: self.set_field_value(p, text))
            self._bind(path, line, line.setText)
            return line

        # Listas, dicts e afins: somente leitura no inspector padrão
        label = QLabel(json.dumps(value, ensure_ascii=False, default=str))
        label.setWordWrap(True)
        self._bind(
            path,
            label,
            lambda v, w=label: w.setText(json.dumps(v, ensure_ascii=False, default=str)),
        )
        return label

    def _bind(self, path: str, widget: QWidget, apply: Callable[[Any], None]) -> None:
        self._bindings[path] = _FieldBinding(path, widget, apply)

    @staticmethod
    def _apply_spin_value(spin: QSpinBox, value: int) -> None:
        in_range = INT_MIN <= value <= INT_MAX
        # Fora do alcance do QSpinBox o campo fica bloqueado em vez de truncado
        spin.setEnabled(in_range)
        if in_range:
            spin.setValue(value)

    def _create_number_line(self, path: str, kind: type) -> QLineEdit:
        line = QLineEdit(repr(self.field_value(path)))

        def commit() -> None:
            try:
                value = kind(line.text().strip())
            except ValueError:
                line.setText(repr(self.field_value(path)))
                return
            self.set_field_value(path, value)
            line.setText(repr(self.field_value(path)))

        line.editingFinished.connect(commit)
        self._bind(path, line, lambda v, w=line: w.setText(repr(v)))
        return line

    def field_value(self, path: str) -> Any:
        owner, name = _resolve(self.record, path)
        return getattr(owner, name)

    def set_field_value(self, path: str, value: Any) -> bool:
        """Atribui ``value`` ao campo dentro de um change scope.

        Retorna True quando o valor mudou e foi persistido. Falha de escrita
        é reportada ao usuário; o valor permanece em memória.
        """
        try:
            with self._handle.change_scope() as scope:
                owner, name = _resolve(self.record, path)
                setattr(owner, name, value)
        except OSError as e:
            logger.warning("Alteração de '%s' mantida apenas em memória", path)
            self._report_persist_failure(e)
            return False

        if scope.changed:
            self.status_label.hide()
            self.value_committed.emit(path)
        return scope.changed

    def refresh(self) -> None:
        """Sincroniza os widgets com os valores atuais do registro."""
        for binding in self._bindings.values():
            binding.widget.blockSignals(True)
            try:
                binding.apply(self.field_value(binding.path))
            finally:
                binding.widget.blockSignals(False)

    def _report_persist_failure(self, error: OSError) -> None:
        text = persist_failure_text(error, str(self._handle.store.path))
        self.status_label.setText(text)
        self.status_label.show()
        notify_error(text.splitlines()[0])
        self.persist_failed.emit(text)
