"""Exporter Nautobot: ponto de entrada chamado pelo pipeline de telemetria.

- ``start(cache)``: valida o diretório OpenConfig, carrega os módulos de
  schema, guarda o handle do cache e inicia o servidor de métricas em
  background.
- ``export(notification)``: para cada update, deriva a identidade da
  métrica, atualiza o estado da interface e sincroniza com o Nautobot.

Cada update é isolado: uma falha é registrada em log e o próximo update da
mesma notificação é processado normalmente.
"""

import logging
from typing import Any, Optional

from prometheus_client import CollectorRegistry, Counter, Gauge

from ..config.settings import DEFAULT_SETTINGS
from ..core.errors import ConfigurationError, InventoryError, MissingLabelError
from ..inventory.client import NautobotClient
from ..inventory.sync import build_payload, sync_interface_status
from ..system.logs import write_log
from ..system.state import FIELD_ADMIN, FIELD_OPER, InterfaceStateStore
from ..telemetry.fingerprint import MetricCache
from ..telemetry.notification import Notification, string_value
from ..telemetry.schema import TypeLookup
from ..telemetry.slugs import make_endpoint
from ..telemetry.translator import update_to_metric
from .main_http import MetricsServer

logger = logging.getLogger(__name__)

NAME = "nautobot"

OPER_STATUS_METRIC = "interfaces_interface_state_oper_status"
ADMIN_STATUS_METRIC = "interfaces_interface_state_admin_status"
STATUS_FIELDS = {OPER_STATUS_METRIC: FIELD_OPER, ADMIN_STATUS_METRIC: FIELD_ADMIN}

AUDIT_LOG_NAME = "nautobot-sync"


class NautobotExporter:
    """Sincroniza o status das interfaces recebido via gNMI com o Nautobot."""

    name = NAME

    def __init__(
        self,
        settings: Optional[dict] = None,
        *,
        client: Any = None,
        store: Optional[InterfaceStateStore] = None,
        type_lookup: Optional[TypeLookup] = None,
        metrics_server: Optional[MetricsServer] = None,
        registry: Optional[CollectorRegistry] = None,
    ):
        self.settings = {**DEFAULT_SETTINGS, **(settings or {})}
        self.client = client if client is not None else NautobotClient(
            self.settings["nautobot_url"] or None,
            self.settings["nautobot_token"] or None,
            interface_status_path=self.settings["interface_status_path"],
        )
        self.store = store if store is not None else InterfaceStateStore()
        self.type_lookup = type_lookup if type_lookup is not None else TypeLookup()
        self.metric_cache = MetricCache(int(self.settings["metric_cache_size"]))
        self.cache = None

        self.registry = registry if registry is not None else CollectorRegistry()
        self._updates = Counter(
            "nautobot_sync_updates",
            "Updates de telemetria processados, por resultado",
            ["result"],
            registry=self.registry,
        )
        self._interfaces = Gauge(
            "nautobot_sync_interfaces",
            "Interfaces com estado conhecido",
            registry=self.registry,
        )
        self._interfaces.set_function(lambda: len(self.store))
        self._cached_series = Gauge(
            "nautobot_sync_cached_series",
            "Séries de telemetria em cache (por fingerprint)",
            registry=self.registry,
        )
        self._cached_series.set_function(lambda: len(self.metric_cache))

        self.metrics_server = metrics_server if metrics_server is not None else MetricsServer(
            int(self.settings["metrics_port"]),
            self.settings["metrics_addr"],
            registry=self.registry,
            health_provider=self._health,
            max_failures=int(self.settings["server_max_failures"]),
            retry_delay=float(self.settings["server_retry_delay"]),
        )

    def _health(self) -> dict:
        return {"interfaces": len(self.store), "cached_series": len(self.metric_cache)}

    # ========================
    # Ciclo de vida
    # ========================

    def start(self, cache: Any) -> None:
        """Inicializa o exporter; levanta ``ConfigurationError`` ou erro do loader."""
        logger.info("Iniciando exporter Nautobot")
        directory = self.settings.get("openconfig_dir") or ""
        if not directory:
            raise ConfigurationError("value is not set for OpenConfigDirectory configuration")
        self.cache = cache
        try:
            self.type_lookup.load_all_modules(directory)
        except Exception as exc:
            logger.error("Não foi possível carregar os módulos OpenConfig em %s: %s", directory, exc)
            raise
        self.metrics_server.start_in_background()

    def export(self, notification: Notification) -> None:
        """Processa os updates da notificação em ordem; nunca propaga falhas."""
        target = notification.target
        for update in notification.update:
            try:
                self._export_update(target, update)
            except Exception as exc:
                self._updates.labels(result="failed").inc()
                logger.error("Falha inesperada ao processar update: %s", exc, exc_info=True)

    # ========================
    # Auxiliares
    # ========================

    def _export_update(self, target: str, update) -> None:
        if update.val is not None and update.val.is_number:
            self._updates.labels(result="skipped").inc()
            return

        identity = update_to_metric(target, update.path)
        try:
            endpoint = make_endpoint(identity.labels)
        except MissingLabelError as exc:
            logger.debug("Update %s ignorado: %s", identity.name, exc)
            self._updates.labels(result="skipped").inc()
            return

        status = string_value(update.val)
        if status is None:
            self._updates.labels(result="skipped").inc()
            return

        self.metric_cache.remember(identity, status)

        field = STATUS_FIELDS.get(identity.name)
        if field is not None:
            self.store.merge(endpoint, field, status)
            logger.debug("%s %s: %s", endpoint, field, status)

        payload = build_payload(identity.labels, self.store.snapshot(endpoint))
        timeout = float(self.settings["request_timeout"])
        try:
            sync_interface_status(self.client, payload, endpoint, timeout=timeout)
        except InventoryError as exc:
            result = "not_found" if exc.not_found else "failed"
            self._updates.labels(result=result).inc()
            logger.warning("Sincronização de %s falhou: %s", endpoint, exc)
            self._audit("WARNING", endpoint, payload, result, str(exc))
            return

        self._updates.labels(result="updated").inc()
        self._audit("INFO", endpoint, payload, "updated")

    def _audit(self, level: str, endpoint: str, payload: dict, result: str, error: str | None = None) -> None:
        if not self.settings.get("audit_log_enable"):
            return
        extra = {"endpoint": endpoint, "result": result, "payload": payload}
        if error:
            extra["error"] = error
        write_log(AUDIT_LOG_NAME, level, f"{endpoint} {result}", extra=extra)
