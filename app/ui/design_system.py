# -*- coding: utf-8 -*-
"""Design system mínimo para tokens visuais reutilizáveis em PyQt."""

from __future__ import annotations

from PyQt5.QtWidgets import QGroupBox


class DSColors:
    TEXT_MUTED = "#888"
    BORDER_DASHED = "#666"


class DSStyles:
    PANEL_DASHED_PLACEHOLDER = (
        f"color:{DSColors.TEXT_MUTED}; border:1px dashed {DSColors.BORDER_DASHED};"
    )
    STATE_ERROR = "color:#ffd6d6; background:#3a1f1f; border:1px solid #7a2e2e; padding:6px;"


class DSFeedback:
    """Tokens de design para componentes de feedback operacional."""

    TOAST_LEVEL_STYLES = {
        "info": "background:#2d3748; color:#fff;",
        "warning": "background:#744210; color:#fff;",
        "error": "background:#742a2a; color:#fff;",
        "success": "background:#1f3a1f; color:#fff;",
    }


def apply_section_group(group: QGroupBox) -> None:
    group.setFlat(False)
