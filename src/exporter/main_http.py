"""Servidor HTTP de métricas: expõe /metrics (Prometheus) e /health.

O servidor deve ficar disponível durante toda a vida do processo. Estados:

- ``serving``: porta associada e atendendo requisições;
- ``failed``: bind/serve falhou; a mensagem é comparada com a anterior;
- ``fatal``: ``max_failures`` falhas idênticas consecutivas; o callback
  ``on_fatal`` é chamado (padrão: encerra o processo).

Uma falha com mensagem diferente da anterior reinicia a contagem em 1.
``sleep`` e ``on_fatal`` são injetáveis para testes.
"""

import json
import logging
import os
import threading
import time
from http.server import BaseHTTPRequestHandler, HTTPServer
from typing import Callable, Optional

import psutil
from prometheus_client import CONTENT_TYPE_LATEST, REGISTRY, CollectorRegistry, generate_latest

from ..core.errors import ServerBindError

logger = logging.getLogger(__name__)

DEFAULT_METRICS_PORT = 59100
DEFAULT_MAX_FAILURES = 3

STATE_STOPPED = "stopped"
STATE_SERVING = "serving"
STATE_FAILED = "failed"
STATE_FATAL = "fatal"


class MetricsHandler(BaseHTTPRequestHandler):
    """Handler HTTP para /metrics e /health.

    ``registry`` e ``health_provider`` são definidos na subclasse criada por
    ``make_handler``.
    """

    registry: CollectorRegistry = REGISTRY
    health_provider: Optional[Callable[[], dict]] = None

    def do_GET(self):
        """Trata requisições GET para /metrics, /health e demais caminhos (404)."""
        path = self.path.split("?", 1)[0]
        if path == "/metrics":
            output = generate_latest(self.registry)
            self.send_response(200)
            self.send_header("Content-type", CONTENT_TYPE_LATEST)
            self.end_headers()
            self.wfile.write(output)
        elif path == "/health":
            status = {"status": "ok", "process": self._get_process_metrics()}
            provider = type(self).health_provider
            if provider is not None:
                try:
                    status.update(provider())
                except Exception as exc:
                    logger.debug("health_provider falhou: %s", exc, exc_info=True)
            body = json.dumps(status).encode("utf-8")
            self.send_response(200)
            self.send_header("Content-type", "application/json")
            self.end_headers()
            self.wfile.write(body)
        else:
            self.send_response(404)
            self.end_headers()

    def _get_process_metrics(self) -> dict:
        """Coleta métricas do processo em tempo real."""
        proc = psutil.Process()
        metrics = {
            "process_cpu_percent": proc.cpu_percent(interval=0.0),
            "process_memory_rss_bytes": getattr(proc.memory_info(), "rss", 0),
            "process_uptime_seconds": float(max(0, (time.time() - proc.create_time()))),
            "process_num_threads": proc.num_threads(),
        }
        num_fds_fn = getattr(proc, "num_fds", None)
        if callable(num_fds_fn):
            try:
                metrics["process_num_fds"] = num_fds_fn()
            except psutil.Error as exc:
                logger.debug("Falha ao obter número de descritores de arquivos: %s", exc, exc_info=True)
        return metrics

    def log_message(self, format, *args):
        """Silencia logs de requisições HTTP no console."""
        pass


def make_handler(registry: CollectorRegistry, health_provider: Optional[Callable[[], dict]] = None):
    """Cria uma subclasse de ``MetricsHandler`` ligada a ``registry``."""
    attrs = {"registry": registry, "health_provider": staticmethod(health_provider) if health_provider else None}
    return type("BoundMetricsHandler", (MetricsHandler,), attrs)


def _terminate_process(exc: BaseException) -> None:
    logger.critical("Servidor de métricas falhou repetidamente; encerrando processo: %s", exc)
    logging.shutdown()
    os._exit(1)


class MetricsServer:
    """Servidor de métricas com reinício limitado por falhas idênticas consecutivas."""

    def __init__(
        self,
        port: int = DEFAULT_METRICS_PORT,
        addr: str = "0.0.0.0",  # nosec B104
        *,
        registry: Optional[CollectorRegistry] = None,
        health_provider: Optional[Callable[[], dict]] = None,
        max_failures: int = DEFAULT_MAX_FAILURES,
        retry_delay: float = 2.0,
        server_factory=HTTPServer,
        sleep: Callable[[float], None] = time.sleep,
        on_fatal: Optional[Callable[[BaseException], None]] = None,
    ):
        self.port = int(port)
        self.addr = addr
        self.registry = registry if registry is not None else REGISTRY
        self.handler = make_handler(self.registry, health_provider)
        self.max_failures = int(max_failures)
        self.retry_delay = float(retry_delay)
        self.server_factory = server_factory
        self.sleep = sleep
        self.on_fatal = on_fatal or _terminate_process

        self.state = STATE_STOPPED
        self.last_error: Optional[str] = None
        self.failure_count = 0
        self._server = None
        self._thread: Optional[threading.Thread] = None

    def record_failure(self, message: str) -> int:
        """Registra uma falha e retorna o número de falhas idênticas consecutivas."""
        if message == self.last_error:
            self.failure_count += 1
        else:
            self.last_error = message
            self.failure_count = 1
        return self.failure_count

    def _serve_once(self) -> None:
        try:
            server = self.server_factory((self.addr, self.port), self.handler)
        except Exception as exc:
            raise ServerBindError(f"bind {self.addr}:{self.port} falhou: {exc}") from exc
        self._server = server
        self.state = STATE_SERVING
        logger.info("Servidor de métricas em http://%s:%d (/metrics, /health)", self.addr, self.port)
        try:
            server.serve_forever()
        except Exception as exc:
            raise ServerBindError(f"serve {self.addr}:{self.port} falhou: {exc}") from exc
        finally:
            self._server = None
            server.server_close()

    def run(self) -> None:
        """Atende até ``shutdown()`` ou até a falha fatal."""
        while True:
            try:
                self._serve_once()
            except ServerBindError as exc:
                self.state = STATE_FAILED
                count = self.record_failure(str(exc))
                logger.error("Servidor de métricas falhou (%d/%d): %s", count, self.max_failures, exc)
                if count >= self.max_failures:
                    self.state = STATE_FATAL
                    self.on_fatal(exc)
                    return
                self.sleep(self.retry_delay)
                continue
            self.state = STATE_STOPPED
            return

    def start_in_background(self) -> threading.Thread:
        """Executa ``run`` em uma thread daemon que nunca é aguardada."""
        self._thread = threading.Thread(target=self.run, name="metrics-server", daemon=True)
        self._thread.start()
        return self._thread

    def shutdown(self) -> None:
        server = self._server
        if server is not None:
            server.shutdown()
