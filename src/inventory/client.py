"""Cliente HTTP do Nautobot para o status das interfaces.

Funções principais:
- ``NautobotClient.patch_interface_status``: atualiza o status de uma interface
- ``NautobotClient.post_interfaces_status``: cria registros de status em lote

Configuração via variáveis de ambiente ``NAUTOBOT_URL`` e ``NAUTOBOT_TOKEN``.
Valores ausentes não são validados aqui: aparecem como falha de
autenticação (``InventoryRequestError``) na primeira chamada.

As falhas são convertidas na taxonomia de ``src.core.errors``: 404 com
``detail`` "not found" vira ``InventoryNotFoundError`` (flag ``not_found``),
outros status HTTP (inclusive 404 sem esse corpo) viram
``InventoryRequestError`` e erros de conexão/timeout viram
``InventoryTransportError``.
"""

from __future__ import annotations

import logging
import os

import requests  # type: ignore[import-untyped]

from ..core.errors import (
    InventoryNotFoundError,
    InventoryRequestError,
    InventoryTransportError,
)

DEFAULT_INTERFACE_STATUS_PATH = "/api/plugins/interface-status/interfaces/"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


def _is_detail_not_found(resp) -> bool:
    """True quando o corpo JSON traz o ``detail`` de objeto inexistente do DRF.

    Um 404 sem esse corpo (URL base ou caminho do plugin errados) não é
    tratado como interface inexistente.
    """
    try:
        body = resp.json()
    except ValueError:
        return False
    if not isinstance(body, dict) or not isinstance(body.get("detail"), str):
        return False
    detail = body["detail"].lower()
    return "not found" in detail or "matches the given query" in detail


def _error_message(resp) -> str:
    """Extrai a mensagem de erro da resposta (campo ``detail`` do DRF quando existir)."""
    try:
        body = resp.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("detail"):
        return str(body["detail"])
    if body:
        return str(body)
    text = getattr(resp, "text", "") or ""
    return text.strip() or f"HTTP {resp.status_code}"


class NautobotClient:
    """Cliente mínimo da API de status de interfaces do Nautobot."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        *,
        interface_status_path: str = DEFAULT_INTERFACE_STATUS_PATH,
        session=None,
    ):
        self.base_url = (base_url if base_url is not None else os.getenv("NAUTOBOT_URL", "")).rstrip("/")
        self.token = token if token is not None else os.getenv("NAUTOBOT_TOKEN", "")
        self.interface_status_path = "/" + interface_status_path.strip("/") + "/"
        self.session = session if session is not None else requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Token {self.token}",
                "Accept": "application/json",
                "Content-Type": "application/json",
            }
        )

    def _url(self, endpoint: str | None = None) -> str:
        url = f"{self.base_url}{self.interface_status_path}"
        if endpoint:
            url = f"{url}{endpoint}/"
        return url

    def _request(self, method: str, url: str, body, timeout: float):
        logger.debug("Nautobot %s %s: %s", method, url, body)
        try:
            resp = self.session.request(method, url, json=body, timeout=timeout)
        except requests.RequestException as exc:
            raise InventoryTransportError(f"{method} {url} falhou: {exc}") from exc

        if resp.status_code == 404 and _is_detail_not_found(resp):
            raise InventoryNotFoundError(_error_message(resp), status_code=404)
        if resp.status_code >= 400:
            raise InventoryRequestError(_error_message(resp), status_code=resp.status_code)
        if resp.status_code == 204 or not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def patch_interface_status(self, endpoint: str, payload: dict[str, str], timeout: float = DEFAULT_TIMEOUT):
        """Atualiza o status da interface identificada por ``endpoint``."""
        return self._request("PATCH", self._url(endpoint), payload, timeout)

    def post_interfaces_status(self, payloads: list[dict[str, str]], timeout: float = DEFAULT_TIMEOUT):
        """Cria registros de status para as interfaces em ``payloads``."""
        return self._request("POST", self._url(), list(payloads), timeout)
