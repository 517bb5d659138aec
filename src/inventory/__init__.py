"""Pacote inventory: cliente do Nautobot e sincronização de status."""

from .client import NautobotClient
from .sync import build_payload, sync_interface_status

__all__ = ["NautobotClient", "build_payload", "sync_interface_status"]
