"""Modelo de notificações de telemetria no formato gNMI.

Uma ``Notification`` carrega um prefixo opcional (com ``target`` que
identifica o dispositivo) e uma sequência ordenada de ``Update``. Cada
update tem um caminho hierárquico (elementos com nome e chaves opcionais)
e um ``TypedValue``.

``Notification.from_dict`` decodifica o mapeamento JSON do gNMI aceitando
chaves camelCase (JSON do protobuf) e snake_case. O caminho também pode vir
como string, por exemplo ``interfaces/interface[name=Ethernet1]/state/oper-status``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..core.errors import NotificationDecodeError

STRING_KINDS = ("string_val", "ascii_val")
NUMBER_KINDS = ("int_val", "uint_val", "float_val", "double_val", "decimal_val")
OTHER_KINDS = (
    "bool_val",
    "bytes_val",
    "json_val",
    "json_ietf_val",
    "leaflist_val",
    "any_val",
    "proto_bytes",
)
_ALL_KINDS = STRING_KINDS + NUMBER_KINDS + OTHER_KINDS


def _snake(key: str) -> str:
    """Converte ``stringVal`` -> ``string_val``; chaves snake_case passam intactas."""
    out = []
    for ch in key:
        if ch.isupper():
            out.append("_")
            out.append(ch.lower())
        else:
            out.append(ch)
    return "".join(out)


@dataclass
class PathElem:
    """Elemento de caminho: nome e chaves (ex.: ``interface[name=Ethernet1]``)."""

    name: str
    key: dict[str, str] = field(default_factory=dict)


@dataclass
class TypedValue:
    """Valor tipado de um update; ``kind`` é o nome do campo oneof do gNMI."""

    kind: str
    value: Any = None

    @property
    def is_number(self) -> bool:
        return self.kind in NUMBER_KINDS

    @property
    def is_string(self) -> bool:
        return self.kind in STRING_KINDS

    @classmethod
    def from_obj(cls, raw: Any) -> "TypedValue":
        """Constrói a partir do JSON gNMI (``{"stringVal": "UP"}``) ou de um escalar."""
        if isinstance(raw, TypedValue):
            return raw
        if isinstance(raw, dict):
            if len(raw) != 1:
                raise NotificationDecodeError(f"TypedValue deve ter exatamente um campo: {raw!r}")
            (key, value), = raw.items()
            kind = _snake(key)
            if kind not in _ALL_KINDS:
                raise NotificationDecodeError(f"tipo de valor desconhecido: {key}")
            return cls(kind, value)
        # escalares soltos, comuns em feeds JSONL simplificados
        if isinstance(raw, bool):
            return cls("bool_val", raw)
        if isinstance(raw, int):
            return cls("int_val", raw)
        if isinstance(raw, float):
            return cls("double_val", raw)
        if isinstance(raw, str):
            return cls("string_val", raw)
        raise NotificationDecodeError(f"valor não suportado: {raw!r}")


def number_value(value: TypedValue | None) -> float | None:
    """Retorne o valor numérico de ``value`` ou None quando não for numérico.

    ``decimal_val`` segue o formato gNMI ``{"digits": d, "precision": p}``.
    """
    if value is None or not value.is_number:
        return None
    raw = value.value
    try:
        if value.kind == "decimal_val":
            digits = int(raw.get("digits", 0))
            precision = int(raw.get("precision", 0))
            return digits / (10**precision)
        # int64/uint64 chegam como string no JSON do protobuf
        return float(raw)
    except (TypeError, ValueError, AttributeError):
        return None


def string_value(value: TypedValue | None) -> str | None:
    """Retorne o valor textual de ``value`` ou None quando não for string."""
    if value is None or not value.is_string or value.value is None:
        return None
    return str(value.value)


def _split_path(path: str) -> list[str]:
    # '/' dentro de colchetes faz parte do valor da chave (ex.: Ethernet1/1)
    parts: list[str] = []
    buf: list[str] = []
    depth = 0
    for ch in path:
        if ch == "[":
            depth += 1
        elif ch == "]":
            depth = max(0, depth - 1)
        if ch == "/" and depth == 0:
            if buf:
                parts.append("".join(buf))
            buf = []
            continue
        buf.append(ch)
    if depth:
        raise NotificationDecodeError(f"colchetes não balanceados em {path!r}")
    if buf:
        parts.append("".join(buf))
    return parts


def parse_path(path: str) -> list[PathElem]:
    """Converte ``a/b[k=v][k2=v2]/c`` em lista de ``PathElem``."""
    elems: list[PathElem] = []
    for part in _split_path(path):
        name, sep, rest = part.partition("[")
        key: dict[str, str] = {}
        rest = sep + rest
        while rest:
            if not rest.startswith("[") or "]" not in rest:
                raise NotificationDecodeError(f"elemento de caminho inválido: {part!r}")
            body, _, rest = rest[1:].partition("]")
            k, eq, v = body.partition("=")
            if not eq or not k:
                raise NotificationDecodeError(f"chave inválida em {part!r}")
            key[k] = v
        if not name:
            raise NotificationDecodeError(f"elemento sem nome em {path!r}")
        elems.append(PathElem(name, key))
    return elems


def _decode_elems(raw: Any) -> list[PathElem]:
    if raw is None:
        return []
    if isinstance(raw, str):
        return parse_path(raw)
    if isinstance(raw, dict):
        raw = raw.get("elem", [])
    if not isinstance(raw, list):
        raise NotificationDecodeError(f"caminho inválido: {raw!r}")
    elems = []
    for item in raw:
        if isinstance(item, PathElem):
            elems.append(item)
            continue
        if not isinstance(item, dict) or "name" not in item:
            raise NotificationDecodeError(f"elemento de caminho inválido: {item!r}")
        key = item.get("key") or {}
        elems.append(PathElem(str(item["name"]), {str(k): str(v) for k, v in key.items()}))
    return elems


@dataclass
class Prefix:
    """Prefixo comum às atualizações de uma notificação."""

    target: str = ""
    origin: str = ""
    elem: list[PathElem] = field(default_factory=list)


@dataclass
class Update:
    path: list[PathElem]
    val: TypedValue | None = None

    @classmethod
    def from_dict(cls, obj: dict) -> "Update":
        if not isinstance(obj, dict):
            raise NotificationDecodeError(f"update deve ser um objeto: {obj!r}")
        raw_val = obj.get("val", obj.get("value"))
        val = None if raw_val is None else TypedValue.from_obj(raw_val)
        return cls(_decode_elems(obj.get("path")), val)


@dataclass
class Notification:
    """Um evento de telemetria: prefixo opcional e updates ordenados."""

    update: list[Update] = field(default_factory=list)
    prefix: Prefix | None = None
    timestamp: int = 0

    @property
    def target(self) -> str:
        return self.prefix.target if self.prefix is not None else ""

    @classmethod
    def from_dict(cls, obj: dict) -> "Notification":
        """Decodifica o mapeamento JSON de uma notificação gNMI.

        Aceita também o envelope ``{"update": {...notification...}}`` emitido
        por ``SubscribeResponse``.
        """
        if not isinstance(obj, dict):
            raise NotificationDecodeError(f"notificação deve ser um objeto: {obj!r}")
        if isinstance(obj.get("update"), dict):
            obj = obj["update"]

        prefix = None
        raw_prefix = obj.get("prefix")
        if isinstance(raw_prefix, dict):
            prefix = Prefix(
                target=str(raw_prefix.get("target") or ""),
                origin=str(raw_prefix.get("origin") or ""),
                elem=_decode_elems(raw_prefix.get("elem")),
            )
        elif raw_prefix is not None:
            raise NotificationDecodeError(f"prefixo inválido: {raw_prefix!r}")

        updates = obj.get("update") or []
        if not isinstance(updates, list):
            raise NotificationDecodeError(f"lista de updates inválida: {updates!r}")
        try:
            timestamp = int(obj.get("timestamp") or 0)
        except (TypeError, ValueError) as exc:
            raise NotificationDecodeError(f"timestamp inválido: {obj.get('timestamp')!r}") from exc
        return cls([Update.from_dict(u) for u in updates], prefix, timestamp)
