"""Pacote system: estado das interfaces, leitura de JSONL e logs.

Re-exports úteis para o exporter e para o loop principal.
"""

from .state import InterfaceState, InterfaceStateStore
from .logs import write_log

__all__ = ["InterfaceState", "InterfaceStateStore", "write_log"]
