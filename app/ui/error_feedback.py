# -*- coding: utf-8 -*-
"""Utilitários de feedback de erro orientado ao usuário."""

from __future__ import annotations

from typing import Optional


def build_actionable_error_text(
    summary: str,
    action_hint: str,
    file_path: Optional[str] = None,
) -> str:
    lines = [summary]
    if file_path:
        lines.append(f"Arquivo: {file_path}")
    lines.append(f"Ação sugerida: {action_hint}")
    return "\n".join(lines)


def persist_failure_text(error: OSError, file_path: Optional[str] = None) -> str:
    reason = error.strerror or str(error)
    return build_actionable_error_text(
        summary=f"Não foi possível salvar as configurações: {reason}",
        action_hint="Verifique permissões e espaço em disco; a alteração continua em memória.",
        file_path=file_path,
    )
