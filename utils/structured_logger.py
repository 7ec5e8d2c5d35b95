# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - utils/structured_logger.py
# Sistema de logging estruturado para análise automatizada
# ===================================================================

import logging
import json
from datetime import datetime, timezone
from typing import Any


class StructuredLogger:
    """Logger estruturado que gera logs em formato JSON para fácil parsing.

    Attributes:
        logger: Instância do logger padrão do Python
    """

    def __init__(self, name: str):
        """Inicializa o logger estruturado.

        Args:
            name: Nome do logger (geralmente o logger da aplicação)
        """
        self.logger = logging.getLogger(name)

    def log(self, level: str, message: str, **context: Any) -> None:
        """Registra uma mensagem de log estruturada em formato JSON.

        Args:
            level: Nível do log (DEBUG, INFO, WARNING, ERROR, CRITICAL)
            message: Mensagem principal do log
            **context: Contexto adicional como keyword arguments

        Example:
            >>> logger = StructuredLogger('SettingsPanel')
            >>> logger.log('warning', 'Arquivo de configurações inválido',
            ...           record_type='PokemonSettings', error_type='DeserializeError')
        """
        log_entry = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': level.upper(),
            'message': message,
            'context': context
        }

        log_level = getattr(logging, level.upper(), logging.INFO)
        self.logger.log(log_level, json.dumps(log_entry, ensure_ascii=False, default=str))

    def debug(self, message: str, **context: Any) -> None:
        """Atalho para log de nível DEBUG."""
        self.log('debug', message, **context)

    def info(self, message: str, **context: Any) -> None:
        """Atalho para log de nível INFO."""
        self.log('info', message, **context)

    def warning(self, message: str, **context: Any) -> None:
        """Atalho para log de nível WARNING."""
        self.log('warning', message, **context)

    def error(self, message: str, **context: Any) -> None:
        """Atalho para log de nível ERROR."""
        self.log('error', message, **context)
