"""Loop principal: lê notificações gNMI e entrega ao exporter.

O exporter é iniciado uma vez (``start``) e cada notificação lida do
arquivo JSONL é passada para ``export``. Falhas de um update nunca param o
loop; falhas do ``start`` são fatais e propagadas ao chamador.
"""

import logging

from ..exporter.exporter import NautobotExporter
from ..system.ingest import iter_notifications

logger = logging.getLogger(__name__)


# ========================
# 1. Loop principal
# ========================


# Função principal do módulo; inicia o exporter e consome as notificações
def run_loop(exporter: NautobotExporter, input_path: str, follow: bool = False, cache=None) -> int:
    """Inicia ``exporter`` e processa as notificações de ``input_path``.

    Retorna o número de notificações entregues ao exporter.
    """
    exporter.start(cache)
    processed = 0
    try:
        for notification in iter_notifications(input_path, follow=follow):
            exporter.export(notification)
            processed += 1
    except KeyboardInterrupt:
        logger.info("Recebido KeyboardInterrupt, saindo...")
    logger.info("%d notificações processadas de %s", processed, input_path)
    return processed
