"""Carregador mínimo de módulos de schema (YANG/OpenConfig).

Usado apenas no ``start`` do exporter para validar que o diretório
configurado contém módulos utilizáveis. Registra o nome de cada módulo
declarado (``module <nome> {``) nos arquivos ``*.yang`` encontrados.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from ..core.errors import SchemaLoadError

logger = logging.getLogger(__name__)

_MODULE_RE = re.compile(r"^\s*module\s+([A-Za-z_][\w.-]*)\s*\{", re.MULTILINE)


class TypeLookup:
    """Índice de módulos de schema carregados, por nome."""

    def __init__(self) -> None:
        self._modules: dict[str, Path] = {}

    @property
    def modules(self) -> dict[str, Path]:
        return dict(self._modules)

    def has_module(self, name: str) -> bool:
        return name in self._modules

    def load_all_modules(self, directory: str | Path) -> int:
        """Carrega todos os módulos ``*.yang`` de ``directory`` (recursivo).

        Retorna a quantidade de módulos registrados. Levanta
        ``SchemaLoadError`` se o diretório não existir, se algum arquivo não
        puder ser lido ou se nenhum módulo for encontrado.
        """
        root = Path(directory)
        if not root.is_dir():
            raise SchemaLoadError(f"diretório de módulos inexistente: {root}")

        loaded = 0
        for path in sorted(root.rglob("*.yang")):
            try:
                text = path.read_text(encoding="utf-8", errors="replace")
            except OSError as exc:
                raise SchemaLoadError(f"falha ao ler {path}: {exc}") from exc
            match = _MODULE_RE.search(text)
            if match is None:
                # submodules e arquivos sem 'module' não definem tipos próprios
                logger.debug("TypeLookup: %s não declara module; ignorado", path)
                continue
            self._modules[match.group(1)] = path
            loaded += 1

        if not loaded:
            raise SchemaLoadError(f"nenhum módulo YANG encontrado em {root}")
        logger.info("TypeLookup: %d módulos carregados de %s", loaded, root)
        return loaded
