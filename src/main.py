"""Ponto de entrada do sincronizador de status de interfaces.

Este módulo realiza a inicialização da aplicação: parsing de argumentos CLI,
configuração de logging, carregamento das configurações e execução do loop
principal. Mantemos a lógica de runtime em `core` e `exporter` para
facilitar testes e reutilização.
"""

import json as _json
import logging as _logging
import os
import sys

from .config.settings import load_settings, validate_settings
from .core.args import get_log_config, parse_args
from .core.core import run_loop
from .core.errors import ConfigurationError, SchemaLoadError
from .exporter.exporter import NautobotExporter
from .system.logs import get_debug_file_path


def main(argv: list[str] | None = None) -> int:
    """Inicializa a aplicação e processa as notificações.

    Args:
        argv: Lista de argumentos (usada em testes). Quando ``None`` a função
            utiliza os argumentos de linha de comando do processo.

    Returns:
        Número de notificações processadas.

    """
    args = parse_args(argv)
    settings = validate_settings(load_settings())
    log_conf = get_log_config(args, settings["log_level"])
    if log_conf.get("root"):
        os.environ["SYNC_LOG_ROOT"] = str(log_conf["root"])

    level = getattr(_logging, log_conf.get("level", "WARNING"), _logging.WARNING)
    _logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    _setup_debug_file_handler()

    exporter = NautobotExporter(settings)
    try:
        return run_loop(exporter, args.input, follow=args.follow)
    except (ConfigurationError, SchemaLoadError) as exc:
        _logging.getLogger(__name__).error("Falha ao iniciar exporter: %s", exc)
        raise SystemExit(2) from exc


def _setup_debug_file_handler() -> None:
    """Instala handlers de ficheiro para debug e hook global de exceções.

    Adiciona ao logger root um handler texto e um JSONL (uma linha de JSON
    por evento) no arquivo de debug do dia. Evita duplicar handlers quando
    chamada mais de uma vez. Também instala um ``sys.excepthook`` que envia
    exceções não tratadas para o logger root.
    """
    debug_path = get_debug_file_path()

    fh = _logging.FileHandler(str(debug_path), encoding="utf-8")
    fh.setLevel(_logging.INFO)
    fh.setFormatter(_logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))

    jfh = _logging.FileHandler(str(debug_path.with_suffix(".jsonl")), encoding="utf-8")
    jfh.setLevel(_logging.INFO)
    jfh.setFormatter(_JSONFormatter())

    root = _logging.getLogger()
    if _has_existing_file_handler(root, fh, jfh):
        fh.close()
        jfh.close()
    else:
        root.addHandler(fh)
        root.addHandler(jfh)

    def _exc_hook(exc_type, exc_value, exc_tb):
        root.error("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

    sys.excepthook = _exc_hook


class _JSONFormatter(_logging.Formatter):
    def format(self, record):
        obj = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%SZ"),
            "level": record.levelname,
            "name": record.name,
            "msg": record.getMessage(),
        }
        if record.exc_info:
            obj["exc"] = self.formatException(record.exc_info)
        return _json.dumps(obj, ensure_ascii=False)


def _has_existing_file_handler(root, fh, jfh) -> bool:
    bases = (fh.baseFilename, jfh.baseFilename)
    return any(isinstance(h, _logging.FileHandler) and h.baseFilename in bases for h in root.handlers)


if __name__ == "__main__":
    main()
