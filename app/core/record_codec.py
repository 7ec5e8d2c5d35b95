# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - app/core/record_codec.py
# Serialização JSON de registros de configuração (dataclasses)
#
# Formato: UTF-8, indentação de 4 espaços, chaves na ordem de declaração
# dos campos, caracteres não-ASCII preservados, sem newline final.
# ===================================================================

from __future__ import annotations

import json
from dataclasses import dataclass, fields, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from utils.file_operations import read_text_file

T = TypeVar("T")

JSON_INDENT = 4


class DeserializeError(ValueError):
    """Conteúdo do arquivo de configurações não pôde virar um registro."""

    def __init__(self, reason: str, path: Optional[Path] = None) -> None:
        self.reason = reason
        self.path = path
        where = f" ({path})" if path is not None else ""
        super().__init__(f"{reason}{where}")


class LoadStatus(str, Enum):
    LOADED = "loaded"
    MISSING = "missing"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class LoadResult(Generic[T]):
    """Resultado explícito de leitura: o chamador decide o fallback."""

    status: LoadStatus
    record: Optional[T] = None
    error: Optional[DeserializeError] = None

    @property
    def ok(self) -> bool:
        return self.status is LoadStatus.LOADED


def ensure_record_type(record_type: Any) -> None:
    if not (isinstance(record_type, type) and is_dataclass(record_type)):
        raise TypeError(f"Tipo de registro precisa ser uma dataclass: {record_type!r}")


def record_fields(record_type: type) -> List[str]:
    ensure_record_type(record_type)
    return [f.name for f in fields(record_type)]


def _to_jsonable(value: Any) -> Any:
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: _to_jsonable(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return _to_jsonable(value.value)
    if isinstance(value, (list, tuple)):
        return [_to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(k): _to_jsonable(v) for k, v in value.items()}
    return value


def snapshot_record(record: Any) -> Dict[str, Any]:
    """Cópia profunda dos valores de campo, desacoplada do registro."""
    return _to_jsonable(record)


def records_differ(old: Dict[str, Any], new: Dict[str, Any]) -> bool:
    return old != new


def dump_record(record: Any) -> str:
    if not is_dataclass(record) or isinstance(record, type):
        raise TypeError(f"Esperada instância de dataclass, obtido {type(record).__name__}")
    return json.dumps(snapshot_record(record), indent=JSON_INDENT, ensure_ascii=False)


def _coerce(name: str, value: Any, default: Any) -> Any:
    """Converte ``value`` para o tipo do valor padrão do campo ``name``."""
    if default is None:
        return value
    if is_dataclass(default):
        if not isinstance(value, dict):
            raise DeserializeError(f"Campo '{name}' deveria ser um objeto")
        return _overwrite(type(default)(), value)
    if isinstance(default, Enum):
        try:
            return type(default)(value)
        except ValueError:
            raise DeserializeError(f"Valor inválido para '{name}': {value!r}") from None
    if isinstance(default, bool):
        if not isinstance(value, bool):
            raise DeserializeError(f"Campo '{name}' deveria ser booleano")
        return value
    if isinstance(default, int):
        if isinstance(value, bool) or not isinstance(value, int):
            raise DeserializeError(f"Campo '{name}' deveria ser inteiro")
        return value
    if isinstance(default, float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise DeserializeError(f"Campo '{name}' deveria ser numérico")
        return float(value)
    if isinstance(default, str):
        if not isinstance(value, str):
            raise DeserializeError(f"Campo '{name}' deveria ser texto")
        return value
    if isinstance(default, (list, tuple)):
        if not isinstance(value, list):
            raise DeserializeError(f"Campo '{name}' deveria ser uma lista")
        return type(default)(value)
    if isinstance(default, dict):
        if not isinstance(value, dict):
            raise DeserializeError(f"Campo '{name}' deveria ser um objeto")
        return value
    return value


def _overwrite(record: T, data: Dict[str, Any]) -> T:
    # Campos ausentes mantêm o padrão; chaves desconhecidas são ignoradas
    for f in fields(record):
        if f.name in data:
            setattr(record, f.name, _coerce(f.name, data[f.name], getattr(record, f.name)))
    return record


def parse_record(record_type: Type[T], text: str) -> T:
    ensure_record_type(record_type)
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DeserializeError(f"JSON inválido: {e.msg} (linha {e.lineno})") from e
    except (ValueError, RecursionError) as e:
        # Inteiros acima do limite de dígitos e aninhamento profundo demais
        raise DeserializeError(f"JSON inválido: {e}") from e
    if not isinstance(data, dict):
        raise DeserializeError("Conteúdo raiz deveria ser um objeto JSON")
    return _overwrite(record_type(), data)


def read_record(record_type: Type[T], path: Path) -> LoadResult[T]:
    """Lê ``path`` sem nunca lançar: ausência e corrupção viram status."""
    try:
        text = read_text_file(path)
    except (FileNotFoundError, NotADirectoryError):
        return LoadResult(LoadStatus.MISSING)
    except (OSError, UnicodeDecodeError) as e:
        return LoadResult(
            LoadStatus.MALFORMED,
            error=DeserializeError(f"Falha de leitura: {e}", path),
        )

    try:
        record = parse_record(record_type, text)
    except DeserializeError as e:
        return LoadResult(LoadStatus.MALFORMED, error=DeserializeError(e.reason, path))
    return LoadResult(LoadStatus.LOADED, record=record)
