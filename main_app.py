# ===================================================================
# Settings Panel - main_app.py (entrada da aplicação)
# ===================================================================

import sys
import logging
import logging.handlers
from datetime import datetime
from pathlib import Path

from PyQt5.QtCore import Qt
from PyQt5.QtWidgets import QApplication, QLabel

from app.application.container import AppContext
from app.ui.main_window import MainWindow
from app.ui.settings_form import RecordForm
from app.ui.settings_provider import create_settings_provider
from models.build_settings import BuildSettings
from models.pokemon_settings import PokemonSettings
from utils.observability import metrics_snapshot
from utils.settings_manager import SettingsManager
from utils.structured_logger import StructuredLogger


def _setup_logging(level: int = logging.INFO) -> logging.Logger:
    logger_name = "SettingsPanel"
    logger = logging.getLogger(logger_name)
    if logger.handlers:
        return logger

    logger.setLevel(level)
    formatter = logging.Formatter('%(asctime)s - %(levelname)s - %(name)s - %(message)s')

    sh = logging.StreamHandler(sys.stdout)
    sh.setLevel(level)
    sh.setFormatter(formatter)
    logger.addHandler(sh)

    try:
        logs_dir = Path(__file__).resolve().parent / "logs"
        logs_dir.mkdir(parents=True, exist_ok=True)
        log_filename = logs_dir / f"settings_panel_{datetime.now():%Y%m%d}.log"

        fh = logging.handlers.RotatingFileHandler(
            filename=str(log_filename),
            maxBytes=5 * 1024 * 1024,
            backupCount=7,
            encoding='utf-8'
        )
        fh.setLevel(logging.DEBUG)
        fh.setFormatter(formatter)
        logger.addHandler(fh)
    except OSError as e:
        logger.warning(f"Não foi possível inicializar arquivo de log: {e}")

    logger.propagate = False
    return logger


logger: logging.Logger = _setup_logging(logging.INFO)
structured_logger = StructuredLogger("SettingsPanel")


def _draw_build_settings(form: RecordForm) -> None:
    """Inspector customizado: campos padrão + versão calculada somente leitura."""
    for name in ("product_name", "version", "build_number", "development_build", "compression", "splash"):
        form.add_field(name)

    preview = QLabel(form.record.display_version)
    form.form_layout.addRow("Versão exibida", preview)
    form.value_committed.connect(lambda _path: preview.setText(form.record.display_version))


def register_builtin_providers(context: AppContext) -> None:
    @context.register_provider_factory
    def pokemon_provider(ctx: AppContext):
        return create_settings_provider(ctx, PokemonSettings)

    @context.register_provider_factory
    def build_provider(ctx: AppContext):
        return create_settings_provider(
            ctx,
            BuildSettings,
            settings_path=f"{ctx.namespace}/Build/{BuildSettings.__name__}",
            on_gui=_draw_build_settings,
        )


def _initial_project_root(preferences: SettingsManager) -> Path:
    if len(sys.argv) > 1 and not sys.argv[1].startswith("-"):
        return Path(sys.argv[1]).resolve()
    last = preferences.last_project_root()
    if last and Path(last).is_dir():
        return Path(last)
    return Path.cwd()


if __name__ == '__main__':
    try:
        QApplication.setAttribute(Qt.AA_EnableHighDpiScaling, True)
    except AttributeError:
        # Atributo não disponível nesta versão do Qt
        pass

    app: QApplication = QApplication(sys.argv)
    app.setApplicationName("Settings Panel")
    app.setOrganizationName("SettingsPanel")

    preferences = SettingsManager()
    context = AppContext(_initial_project_root(preferences))
    register_builtin_providers(context)
    logger.info("Projeto: %s", context.project_root)

    try:
        win: MainWindow = MainWindow(context, preferences=preferences)
        win.show()
        exit_code: int = app.exec_()
    except RuntimeError as e:
        logger.exception(f"Falha ao inicializar a interface: {e}")
        exit_code = 1
    finally:
        structured_logger.info("session_metrics", **metrics_snapshot())
        context.shutdown()

    sys.exit(exit_code)
