"""Pacote core: taxonomia de erros, argumentos de linha de comando e loop principal.

Re-exports das exceções usadas em todo o projeto.
"""

from .errors import (
    ConfigurationError,
    InventoryError,
    InventoryNotFoundError,
    InventoryRequestError,
    InventoryTransportError,
    MissingLabelError,
    NotificationDecodeError,
    SchemaLoadError,
    ServerBindError,
    SyncError,
)

__all__ = [
    "ConfigurationError",
    "InventoryError",
    "InventoryNotFoundError",
    "InventoryRequestError",
    "InventoryTransportError",
    "MissingLabelError",
    "NotificationDecodeError",
    "SchemaLoadError",
    "ServerBindError",
    "SyncError",
]
