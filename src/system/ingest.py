"""Leitura resiliente de notificações gNMI em arquivos JSONL.

Cada linha do arquivo é uma notificação no formato JSON do gNMI (ver
``src.telemetry.notification``). Suporta arquivos gzip e um modo
"tail -f" para acompanhar um coletor que ainda está escrevendo.

APIs públicas:
- iter_jsonl(path, follow=False, max_retries=3, retry_delay=0.1)
  -> gerador de dicts para cada linha JSON válida encontrada.
- iter_notifications(path, follow=False)
  -> gerador de ``Notification``; linhas que não decodificam são ignoradas.
"""

from __future__ import annotations

import gzip
import io
import json
import logging
import time
from pathlib import Path
from typing import Generator

from ..core.errors import NotificationDecodeError
from ..telemetry.notification import Notification

logger = logging.getLogger(__name__)


def _open_maybe_gzip(path: Path):
    """Abre um arquivo suportando gzip por extensão .gz (modo texto)."""
    if str(path).endswith(".gz"):
        return gzip.open(path, mode="rt", encoding="utf-8", errors="replace")
    return open(path, mode="r", encoding="utf-8", errors="replace")


def iter_jsonl(
    path: str | Path,
    follow: bool = False,
    max_retries: int = 3,
    retry_delay: float = 0.1,
) -> Generator[dict, None, None]:
    """Itera sobre um arquivo JSONL e produz objetos Python.

    Args:
        path: caminho para arquivo .jsonl ou .jsonl.gz
        follow: se True, fica aguardando novas linhas (similar a tail -f)
        max_retries: tentativas no EOF antes de encerrar com follow=False
        retry_delay: intervalo entre tentativas (segundos)

    Notas:
        - Linhas vazias ou que não decodificam como JSON são ignoradas.
        - Com follow=True uma linha sem "\\n" final (escrita parcial) é relida
          após ``retry_delay``; uma linha completa inválida é ignorada.

    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(str(p))

    retries = 0
    with _open_maybe_gzip(p) as fh:
        while True:
            pos = fh.tell() if follow else None
            line = fh.readline()
            if not line:
                if follow:
                    time.sleep(retry_delay)
                    continue
                if retries < max_retries:
                    retries += 1
                    time.sleep(retry_delay)
                    continue
                break

            retries = 0
            complete = line.endswith("\n")
            line = line.strip()
            if not line:
                continue
            try:
                obj = json.loads(line)
            except json.JSONDecodeError:
                if follow and not complete:
                    # escrita parcial (sem "\n"): voltar e reler depois
                    time.sleep(retry_delay)
                    try:
                        fh.seek(pos)
                    except (OSError, io.UnsupportedOperation):
                        logger.debug("iter_jsonl: seek indisponível em %s; linha descartada", p)
                    continue
                logger.debug("iter_jsonl: linha JSON inválida ignorada em %s", p)
                continue
            if isinstance(obj, dict):
                yield obj


def iter_notifications(
    path: str | Path,
    follow: bool = False,
    retry_delay: float = 0.1,
) -> Generator[Notification, None, None]:
    """Itera sobre as notificações válidas de um arquivo JSONL."""
    for obj in iter_jsonl(path, follow=follow, retry_delay=retry_delay):
        try:
            yield Notification.from_dict(obj)
        except NotificationDecodeError as exc:
            logger.warning("Notificação inválida ignorada: %s", exc)


__all__ = ["iter_jsonl", "iter_notifications"]
