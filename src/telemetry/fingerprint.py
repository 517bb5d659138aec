"""Fingerprint de métricas e cache de séries já exportadas.

``fingerprint(name, labels)`` é determinístico e independe da ordem de
inserção dos labels. ``MetricCache`` usa o fingerprint como chave e guarda o
último valor visto de cada série, com limite de entradas (remove a série
atualizada há mais tempo).
"""

from __future__ import annotations

import hashlib
import logging
import threading
import time
from collections import OrderedDict
from dataclasses import dataclass, field

from .translator import MetricIdentity

logger = logging.getLogger(__name__)

# separadores fora do intervalo imprimível evitam colisões do tipo
# {"a": "b_c"} vs {"a_b": "c"}
_FIELD_SEP = b"\x1f"
_PAIR_SEP = b"\x1e"


def fingerprint(name: str, labels: dict[str, str] | None) -> int:
    """Retorne um hash de 64 bits sobre ``name`` e o conteúdo de ``labels``."""
    h = hashlib.blake2b(digest_size=8)
    h.update(name.encode("utf-8"))
    for key, value in sorted((labels or {}).items()):
        h.update(_PAIR_SEP)
        h.update(str(key).encode("utf-8"))
        h.update(_FIELD_SEP)
        h.update(str(value).encode("utf-8"))
    return int.from_bytes(h.digest(), "big")


@dataclass
class CachedMetric:
    name: str
    labels: dict[str, str]
    value: str
    updated_at: float = field(default_factory=time.time)


class MetricCache:
    """Cache thread-safe de séries exportadas, indexado por fingerprint.

    - ``remember(identity, value)`` grava o valor e retorna True quando a
      série é nova ou o valor mudou.
    - ``lookup(name, labels)`` retorna a entrada ou None.
    - Ao ultrapassar ``max_entries`` remove a série menos recentemente
      atualizada.
    """

    def __init__(self, max_entries: int = 10000):
        if max_entries <= 0:
            raise ValueError("max_entries deve ser > 0")
        self.max_entries = int(max_entries)
        self._entries: OrderedDict[int, CachedMetric] = OrderedDict()
        self._lock = threading.Lock()

    def remember(self, identity: MetricIdentity, value: str) -> bool:
        key = fingerprint(identity.name, identity.labels)
        with self._lock:
            current = self._entries.get(key)
            changed = current is None or current.value != value
            self._entries[key] = CachedMetric(identity.name, dict(identity.labels), value)
            self._entries.move_to_end(key)
            while len(self._entries) > self.max_entries:
                evicted_key, evicted = self._entries.popitem(last=False)
                logger.debug("MetricCache: série removida por limite %s (%d)", evicted.name, evicted_key)
        return changed

    def lookup(self, name: str, labels: dict[str, str]) -> CachedMetric | None:
        with self._lock:
            return self._entries.get(fingerprint(name, labels))

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
