# -*- coding: utf-8 -*-
# ===================================================================
# Settings Panel - utils/file_operations.py
# Utilitários para operações de arquivo com escrita atômica
# ===================================================================

import os
import tempfile
from pathlib import Path
from contextlib import contextmanager
from typing import Iterator, TextIO


def ensure_dir(directory: Path) -> Path:
    """Garante que um diretório existe, criando a árvore se necessário.

    Diferente de uma checagem silenciosa, erros de sistema de arquivos
    (permissão negada, caminho inválido) são propagados ao chamador.

    Args:
        directory: Caminho do diretório

    Returns:
        O próprio diretório, já existente

    Example:
        >>> ensure_dir(Path("ProjectSettings/SettingsPanel"))
    """
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def _temp_prefix(filepath: Path) -> str:
    return f'.tmp_{filepath.stem}_'


def remove_stale_temp_files(filepath: Path) -> int:
    """Remove temporários de escritas anteriores de ``filepath`` interrompidas.

    Só casa arquivos criados por :func:`atomic_write` para o mesmo destino.

    Returns:
        Quantidade de arquivos removidos
    """
    removed = 0
    for stale in filepath.parent.glob(f'{_temp_prefix(filepath)}*{filepath.suffix}'):
        try:
            stale.unlink()
            removed += 1
        except OSError:
            pass
    return removed


@contextmanager
def atomic_write(filepath: Path, encoding: str = 'utf-8') -> Iterator[TextIO]:
    """Context manager para escrita atômica de arquivos de texto.

    O conteúdo é escrito em arquivo temporário no mesmo diretório e só então
    substitui o destino via ``os.replace``. Se algo falhar, o temporário é
    removido e o arquivo anterior permanece intacto.

    Args:
        filepath: Caminho do arquivo de destino (o diretório precisa existir)
        encoding: Encoding do arquivo (padrão: utf-8)

    Yields:
        File handle para escrita

    Raises:
        OSError: Se houver falha na escrita ou renomeação do arquivo

    Example:
        >>> with atomic_write(Path("data.json")) as f:
        ...     f.write('{"id": 25}')
    """
    tmp_fd, tmp_path = tempfile.mkstemp(
        dir=filepath.parent,
        prefix=_temp_prefix(filepath),
        suffix=filepath.suffix
    )
    tmp_file = Path(tmp_path)

    try:
        # newline='' evita tradução de '\n' no Windows: o conteúdo é bit-exato
        with os.fdopen(tmp_fd, 'w', encoding=encoding, newline='') as f:
            yield f
            f.flush()
            os.fsync(f.fileno())

        os.replace(str(tmp_file), str(filepath))

    except Exception:
        if tmp_file.exists():
            try:
                tmp_file.unlink()
            except OSError:
                pass
        raise


def write_text_file(filepath: Path, content: str, encoding: str = 'utf-8') -> Path:
    """Cria o diretório pai (se preciso) e grava ``content`` atomicamente."""
    ensure_dir(filepath.parent)
    remove_stale_temp_files(filepath)
    with atomic_write(filepath, encoding=encoding) as f:
        f.write(content)
    return filepath


def read_text_file(filepath: Path, encoding: str = 'utf-8') -> str:
    """Lê o arquivo inteiro sem tradução de quebras de linha.

    Raises:
        OSError: arquivo ausente ou ilegível
        UnicodeDecodeError: bytes inválidos para o encoding
    """
    with open(filepath, 'r', encoding=encoding, newline='') as f:
        return f.read()
