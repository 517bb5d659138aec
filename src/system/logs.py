"""Subsistema de logs: caminhos e escrita do feed JSONL de auditoria.

Cada tentativa de sincronização pode ser registrada como uma linha JSON em
``<root>/json/<nome>-<data>.jsonl``. O arquivo de debug diário fica em
``<root>/debug/debug_log-<data>.txt`` e é usado pelo handler de ``main``.
A raiz vem de ``SYNC_LOG_ROOT`` (padrão ``logs``).
"""

import os
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from .log_helpers import append_json, audit_entry, ensure_dir, log_date, safe_log_name

logger = logging.getLogger(__name__)

# ========================
# 0. Configuração padrão
# ========================

LOG_ROOT = (os.getenv("SYNC_LOG_ROOT") or "logs").strip() or "logs"
DEBUG_LOG_FILENAME = "debug_log"


# ========================
# 1. Diretórios e Paths
# ========================


@dataclass(frozen=True)
class LogPaths:
    """Agrupa caminhos usados pelo subsistema de logging."""

    root: Path
    json_dir: Path
    debug_dir: Path


def get_log_paths(root: str | Path | None = None) -> LogPaths:
    """Resolve raiz de logs e garante diretórios criados e graváveis.

    Prioridade: argumento ``root``, variável ``SYNC_LOG_ROOT``, ``LOG_ROOT``.
    """
    env_root = os.getenv("SYNC_LOG_ROOT")
    log_root = Path(root if root else (env_root or LOG_ROOT))

    json_dir = log_root / "json"
    debug_dir = log_root / "debug"
    for d in (log_root, json_dir, debug_dir):
        ensure_dir(d)
    return LogPaths(log_root, json_dir, debug_dir)


# Gera o nome base para arquivos de log; consumido por write_log
def _resolve_filename(name: str) -> str:
    """Gera nome base de arquivo de log com a data do dia."""
    base = safe_log_name(name, DEBUG_LOG_FILENAME)
    return f"{base}-{log_date()}"


# ========================
# 2. Escrita de Logs
# ========================


def write_log(name: str, level: str, message: str, extra: dict | None = None, root: str | Path | None = None) -> Path:
    """Anexa uma entrada ao feed JSONL ``name`` e retorna o caminho do arquivo."""
    lp = get_log_paths(root)
    jsonl_path = lp.json_dir / f"{_resolve_filename(name)}.jsonl"
    ts = datetime.now(timezone.utc).isoformat()
    append_json(jsonl_path, audit_entry(ts, level, message, extra))
    return jsonl_path


# Retorna o caminho do arquivo de debug do dia; usado por debug logging
def get_debug_file_path() -> Path:
    """Retorna caminho do arquivo de debug diário."""
    date_str = log_date()
    return get_log_paths().debug_dir / f"{DEBUG_LOG_FILENAME}-{date_str}.txt"
