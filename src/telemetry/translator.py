"""Tradução de caminho gNMI para nome de métrica e labels.

Exemplo: prefixo ``target=R2`` e caminho
``interfaces/interface[name=Management1]/state/oper-status`` produzem::

    name   = "interfaces_interface_state_oper_status"
    labels = {"target": "R2", "interfaces_interface_name": "Management1"}

O label de cada chave usa o nome acumulado até o elemento que a contém.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from .notification import PathElem


@dataclass
class MetricIdentity:
    name: str
    labels: dict[str, str] = field(default_factory=dict)


def _underscore(value: str) -> str:
    return value.replace("-", "_")


def update_to_metric(prefix_target: str | None, path: Iterable[PathElem]) -> MetricIdentity:
    """Converte o caminho de um update em ``MetricIdentity``.

    Nunca falha: caminho vazio produz nome vazio. Labels repetidos seguem
    last-write-wins.
    """
    metric_name = ""
    labels: dict[str, str] = {}

    if prefix_target:
        labels["target"] = prefix_target

    for elem in path:
        elem_name = _underscore(elem.name)
        metric_name = elem_name if not metric_name else f"{metric_name}_{elem_name}"
        for key, value in (elem.key or {}).items():
            labels[f"{metric_name}_{_underscore(key)}"] = value

    return MetricIdentity(metric_name, labels)
