"""Helpers de escrita do feed JSONL de auditoria.

Cada linha é gravada sob lock exclusivo (``portalocker``), para que vários
processos de sincronização possam compartilhar o mesmo arquivo do dia.
"""

import json as _json
import logging
import os
import re
from datetime import date
from pathlib import Path

import portalocker

logger = logging.getLogger(__name__)

# fsync após cada linha; desligável com SYNC_LOGS_DURABLE_WRITES=0
DURABLE_WRITES = os.environ.get("SYNC_LOGS_DURABLE_WRITES", "1").lower() in ("1", "true", "yes", "on")

_UNSAFE_NAME = re.compile(r"[^A-Za-z0-9._-]+")
_MAX_NAME = 200


def append_line(path: Path, line: str) -> None:
    """Anexa ``line`` a ``path`` sob lock exclusivo.

    Falhas de I/O são registradas e não propagadas: a auditoria nunca
    interrompe a sincronização.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("a", encoding="utf-8") as fh:
            locked = False
            try:
                try:
                    portalocker.lock(fh, portalocker.LOCK_EX)
                    locked = True
                except portalocker.exceptions.LockException as exc:
                    logger.debug("append_line: lock indisponível em %s: %s", path, exc)
                fh.write(line)
                fh.flush()
                if DURABLE_WRITES:
                    os.fsync(fh.fileno())
            finally:
                if locked:
                    portalocker.unlock(fh)
    except OSError as exc:
        logger.error("append_line: falhou em %s: %s", path, exc, exc_info=True)


def append_json(path: Path, entry: dict) -> None:
    """Serializa ``entry`` como uma linha JSONL; valores exóticos viram ``str``."""
    try:
        line = _json.dumps(entry, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        logger.warning("append_json: fallback default=str em %s: %s", path, exc)
        line = _json.dumps(entry, ensure_ascii=False, default=str)
    append_line(path, line + "\n")


def audit_entry(ts: str, level: str, msg: str, extra: dict | None = None) -> dict:
    """Monta a entrada de auditoria; chaves de ``extra`` que colidem ganham prefixo ``extra_``."""
    entry = {"ts": ts, "level": level, "msg": msg}
    for key, value in (extra or {}).items():
        entry[key if key not in entry else f"extra_{key}"] = value
    return entry


def safe_log_name(raw_name: str, fallback: str) -> str:
    name = _UNSAFE_NAME.sub("_", Path(raw_name or fallback).name.lstrip("."))
    return name[:_MAX_NAME] or fallback


def log_date() -> str:
    """Data local no formato YYYY-MM-DD, usada nos nomes dos arquivos."""
    return date.today().isoformat()


def ensure_dir(p: Path) -> None:
    try:
        p.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        logger.error("ensure_dir: falhou para %s: %s", p, exc)
