"""Taxonomia de erros do sincronizador.

Separamos os tipos para que cada chamador reaja corretamente:

- ``MissingLabelError``: label esperado ausente; a atualização é ignorada.
- ``ConfigurationError``: configuração obrigatória ausente; fatal para ``start``.
- ``InventoryNotFoundError``: interface inexistente no inventário; dispara a
  criação compensatória, mas a chamada original continua reportada como falha.
- ``InventoryRequestError`` / ``InventoryTransportError``: demais falhas do
  cliente; propagadas sem compensação.
- ``ServerBindError``: falha do servidor de métricas; reiniciado até o limite.
"""

from __future__ import annotations


class SyncError(Exception):
    """Base para todas as exceções do sincronizador."""


class MissingLabelError(SyncError):
    """Label obrigatório ausente no mapeamento de labels."""

    def __init__(self, label: str):
        super().__init__(f"No label: {label}")
        self.label = label


class ConfigurationError(SyncError):
    """Configuração obrigatória ausente ou inválida."""


class SchemaLoadError(SyncError):
    """Falha ao carregar os módulos de schema (OpenConfig)."""


class NotificationDecodeError(SyncError, ValueError):
    """Notificação recebida em formato inesperado."""


class InventoryError(SyncError):
    """Falha retornada pelo cliente do inventário.

    Carrega ``message``, ``status_code`` (quando houver resposta HTTP) e a
    flag explícita ``not_found``.
    """

    not_found = False

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class InventoryNotFoundError(InventoryError):
    """O inventário respondeu 'detail not found' para o endpoint."""

    not_found = True


class InventoryRequestError(InventoryError):
    """Resposta HTTP de erro que não é 'not found' (ex.: autenticação)."""


class InventoryTransportError(InventoryError):
    """Falha de transporte: conexão recusada, timeout, DNS."""


class ServerBindError(SyncError):
    """Falha ao associar ou servir o endpoint de métricas."""
