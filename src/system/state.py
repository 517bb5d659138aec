"""Estado operacional/administrativo das interfaces.

Mantém em memória o mapeamento ``endpoint -> InterfaceState``. Os campos
chegam separadamente (admin e oper vêm em notificações distintas) e são
mesclados um a um. Registros nunca são removidos.

Um único lock serializa ``merge`` e ``snapshot``; chamadas concorrentes de
``export`` para o mesmo endpoint não perdem atualizações.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from threading import Lock
from typing import Optional

FIELD_ADMIN = "admin"
FIELD_OPER = "oper"
_FIELDS = (FIELD_ADMIN, FIELD_OPER)


@dataclass
class InterfaceState:
    admin: Optional[str] = None
    oper: Optional[str] = None


class InterfaceStateStore:
    """Armazena o último status conhecido de cada interface."""

    def __init__(self) -> None:
        self._states: dict[str, InterfaceState] = {}
        self._lock = Lock()

    def merge(self, endpoint: str, field: str, value: str) -> InterfaceState:
        """Atualiza apenas ``field`` do endpoint e retorna uma cópia do estado.

        Cria o registro no primeiro acesso. ``field`` deve ser 'admin' ou 'oper'.
        """
        if field not in _FIELDS:
            raise ValueError(f"campo de estado desconhecido: {field!r}")
        with self._lock:
            state = self._states.get(endpoint)
            if state is None:
                state = InterfaceState()
                self._states[endpoint] = state
            setattr(state, field, value)
            return replace(state)

    def snapshot(self, endpoint: str) -> InterfaceState | None:
        """Retorna uma cópia do estado atual ou None se o endpoint nunca foi visto."""
        with self._lock:
            state = self._states.get(endpoint)
            return None if state is None else replace(state)

    def endpoints(self) -> list[str]:
        with self._lock:
            return list(self._states)

    def __len__(self) -> int:
        with self._lock:
            return len(self._states)
