# -*- coding: utf-8 -*-
"""Eventos estruturados e contadores do ciclo carregar/cachear/persistir."""

from __future__ import annotations

import uuid
from typing import Any

from utils.structured_logger import StructuredLogger


class Events:
    SETTINGS_LOADED = "settings_loaded"
    SETTINGS_DEFAULTED = "settings_defaulted"
    SETTINGS_LOAD_FAILED = "settings_load_failed"
    SETTINGS_SAVED = "settings_saved"
    SETTINGS_SAVE_FAILED = "settings_save_failed"
    PROVIDER_OPENED = "provider_opened"


class _MetricsState:
    def __init__(self) -> None:
        self.cache_hits: int = 0
        self.cache_misses: int = 0
        self.load_fallbacks: int = 0
        self.saves_total: int = 0
        self.saves_failed: int = 0

    def snapshot(self) -> dict[str, float]:
        cache_total = self.cache_hits + self.cache_misses
        cache_hit_rate = (self.cache_hits / cache_total) if cache_total else 0.0
        save_error_rate = (self.saves_failed / self.saves_total) if self.saves_total else 0.0
        return {
            "cache_hit_rate": round(cache_hit_rate, 4),
            "save_error_rate": round(save_error_rate, 4),
            "cache_hits": float(self.cache_hits),
            "cache_misses": float(self.cache_misses),
            "load_fallbacks": float(self.load_fallbacks),
            "saves_total": float(self.saves_total),
            "saves_failed": float(self.saves_failed),
        }


_SESSION_ID = uuid.uuid4().hex
_METRICS = _MetricsState()


def get_session_id() -> str:
    return _SESSION_ID


def emit_event(logger: StructuredLogger, event: str, level: str = "info", **context: Any) -> None:
    logger.log(level, event, event=event, session_id=get_session_id(), **context)


def record_cache_access(hit: bool) -> None:
    if hit:
        _METRICS.cache_hits += 1
    else:
        _METRICS.cache_misses += 1


def record_load_fallback() -> None:
    _METRICS.load_fallbacks += 1


def record_save(success: bool) -> None:
    _METRICS.saves_total += 1
    if not success:
        _METRICS.saves_failed += 1


def metrics_snapshot() -> dict[str, float]:
    return _METRICS.snapshot()


def reset_metrics() -> None:
    global _METRICS
    _METRICS = _MetricsState()
