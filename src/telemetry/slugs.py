"""Normalização de identidades (slugs) e chave de sincronização.

O slug é seguro para URL: minúsculas, transliterado para ASCII
(``python-slugify``/``text-unidecode``, ex.: ``"Роутер-1"`` -> ``"router-1"``),
com cada sequência de caracteres não alfanuméricos trocada por um hífen.
O endpoint combina os slugs do dispositivo e da interface:
``<device>__<interface>``.
"""

from __future__ import annotations

from slugify import slugify as _slugify

from ..core.errors import MissingLabelError

DEVICE_LABEL = "target"
INTERFACE_LABEL = "interfaces_interface_name"

# underscore é preservado, como no slug do Nautobot
_DISALLOWED = r"[^-a-z0-9_]+"
_REPLACEMENTS = [["&", " and "], ["@", " at "]]


def slugify(value: str) -> str:
    """Retorna o slug de ``value`` (ex.: ``"Management1/0"`` -> ``"management1-0"``)."""
    text = _slugify(str(value), regex_pattern=_DISALLOWED, replacements=_REPLACEMENTS)
    return text.strip("-_")


def get_slug(labels: dict[str, str], key: str) -> str:
    """Retorna o slug do label ``key``; levanta ``MissingLabelError`` se ausente."""
    if key not in labels:
        raise MissingLabelError(key)
    return slugify(labels[key])


def make_endpoint(labels: dict[str, str]) -> str:
    """Compõe a chave ``<device-slug>__<interface-slug>`` a partir dos labels."""
    device_slug = get_slug(labels, DEVICE_LABEL)
    interface_slug = get_slug(labels, INTERFACE_LABEL)
    return f"{device_slug}__{interface_slug}"
