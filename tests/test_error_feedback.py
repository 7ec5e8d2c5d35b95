import errno
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from app.ui.error_feedback import build_actionable_error_text, persist_failure_text


def test_build_actionable_error_text_includes_file_and_hint():
    text = build_actionable_error_text(
        summary="Falha ao processar",
        action_hint="Tente novamente",
        file_path="/tmp/a.json",
    )

    assert "Falha ao processar" in text
    assert "Arquivo: /tmp/a.json" in text
    assert "Ação sugerida: Tente novamente" in text


def test_persist_failure_text_uses_os_error_reason():
    error = OSError(errno.ENOSPC, "No space left on device")

    text = persist_failure_text(error, "/proj/ProjectSettings/SettingsPanel/P.json")

    assert text.splitlines()[0] == "Não foi possível salvar as configurações: No space left on device"
    assert "Arquivo: /proj/ProjectSettings/SettingsPanel/P.json" in text
