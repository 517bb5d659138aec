"""Sincronização (upsert) do status de interfaces com o inventário.

Fluxo de ``sync_interface_status``:

1. PATCH do status no endpoint.
2. Sucesso -> True.
3. ``InventoryNotFoundError`` -> cria a interface com POST (lote de um item)
   e relança o erro original, mesmo que a criação funcione: a criação
   corrige a próxima sincronização, não a atual.
4. Qualquer outra falha do cliente é propagada sem compensação.
"""

from __future__ import annotations

import logging
import time
from typing import Any

from ..core.errors import InventoryError, InventoryNotFoundError
from ..system.state import InterfaceState
from ..telemetry.slugs import DEVICE_LABEL, INTERFACE_LABEL

logger = logging.getLogger(__name__)

SYNC_TIMEOUT_SECONDS = 30.0


def build_payload(labels: dict[str, str], state: InterfaceState | None) -> dict[str, str]:
    """Monta o corpo da requisição a partir dos labels e do estado atual.

    Os campos de status só entram quando conhecidos.
    """
    payload = {
        "device_name": labels.get(DEVICE_LABEL, ""),
        "interface_name": labels.get(INTERFACE_LABEL, ""),
    }
    if state is not None:
        if state.admin is not None:
            payload["interface_admin_status"] = state.admin
        if state.oper is not None:
            payload["interface_oper_status"] = state.oper
    return payload


def sync_interface_status(
    client: Any,
    payload: dict[str, str],
    endpoint: str,
    timeout: float = SYNC_TIMEOUT_SECONDS,
) -> bool:
    """Atualiza o status de ``endpoint``; retorna True quando o PATCH funciona.

    ``timeout`` vale para a tentativa inteira: o POST de criação recebe apenas
    o que sobrou do PATCH e é omitido quando o prazo já se esgotou.

    Levanta ``InventoryNotFoundError`` (após tentar criar a interface) ou a
    exceção original do cliente nos demais casos.
    """
    deadline = time.monotonic() + timeout
    try:
        client.patch_interface_status(endpoint, payload, timeout=timeout)
    except InventoryNotFoundError as exc:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            logger.warning("Prazo de %.1fs esgotado; interface %s não foi criada", timeout, endpoint)
            raise
        logger.info("Interface %s não existe no Nautobot (%s); criando", endpoint, exc.message)
        try:
            client.post_interfaces_status([payload], timeout=remaining)
            logger.info("Interface %s criada no Nautobot", endpoint)
        except InventoryError as create_exc:
            logger.warning("Não foi possível criar a interface %s no Nautobot: %s", endpoint, create_exc)
        raise
    logger.info("Interface %s atualizada no Nautobot", endpoint)
    return True
