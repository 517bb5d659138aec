"""Configurações do sincronizador de status de interfaces.

Este módulo centraliza endereço do Nautobot, diretório OpenConfig, porta do
servidor de métricas e políticas de reinício/timeout. Carrega valores a
partir de ``DEFAULT_SETTINGS`` e permite overrides via arquivo ``.env`` ou
variáveis de ambiente. As funções públicas principais são:

- ``load_settings()`` -> dicionário com as chaves de ``DEFAULT_SETTINGS``.
- ``validate_settings()`` -> valida e normaliza o dicionário.

Comentários e mensagens de log estão em português.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

# ========================
# Constantes e padrões globais
# ========================

DEFAULT_SETTINGS = {
    "openconfig_dir": "",
    "nautobot_url": "",
    "nautobot_token": "",
    "interface_status_path": "/api/plugins/interface-status/interfaces/",
    "request_timeout": 30.0,
    "metrics_port": 59100,
    "metrics_addr": "0.0.0.0",  # nosec B104
    "server_max_failures": 3,
    "server_retry_delay": 2.0,
    "metric_cache_size": 10000,
    "audit_log_enable": True,
    "log_level": "INFO",
}

# chave -> variável de ambiente
ENV_MAP = {
    "openconfig_dir": "SYNC_OPENCONFIG_DIR",
    "nautobot_url": "NAUTOBOT_URL",
    "nautobot_token": "NAUTOBOT_TOKEN",
    "interface_status_path": "NAUTOBOT_INTERFACE_STATUS_PATH",
    "request_timeout": "SYNC_REQUEST_TIMEOUT",
    "metrics_port": "SYNC_METRICS_PORT",
    "metrics_addr": "SYNC_METRICS_ADDR",
    "server_max_failures": "SYNC_SERVER_MAX_FAILURES",
    "server_retry_delay": "SYNC_SERVER_RETRY_DELAY",
    "metric_cache_size": "SYNC_METRIC_CACHE_SIZE",
    "audit_log_enable": "SYNC_AUDIT_LOG_ENABLE",
    "log_level": "SYNC_LOG_LEVEL",
}

_TRUE_VALUES = ("1", "true", "yes", "on")


# ========================
# 1. Carregamento das configurações
# ========================


# Função principal do módulo; carrega todas as configurações do ambiente
def load_settings() -> dict:
    """Carrega configurações combinando DEFAULTS + .env + ambiente.

    As variáveis em ambiente sobrescrevem valores do arquivo `.env`. Valores
    numéricos inválidos geram warning e mantêm o padrão.
    """
    settings = DEFAULT_SETTINGS.copy()

    project_root = Path(__file__).resolve().parents[2]
    env_path = Path(os.getenv("SYNC_ENV_FILE", project_root / ".env"))

    env_items = _merge_env_items(env_path)
    _apply_overrides(env_items, settings)
    return settings


# ========================
# 2. Funções auxiliares para ambiente e overrides
# ========================


# Auxilia load_settings; criado para centralizar leitura do .env
def _read_env_file(path: Path | str) -> dict:
    """Lê um arquivo `.env` e devolve um dicionário chave->valor.

    Linhas vazias e comentários (começando com '#') são ignorados.
    """
    result: dict[str, str] = {}
    p = Path(path)
    if not p.exists():
        return result
    try:
        with p.open("r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#"):
                    continue
                if "=" not in line:
                    continue
                key, val = line.split("=", 1)
                key = key.strip()
                val = val.strip().strip('"').strip("'")
                result[key] = val
    except OSError as exc:
        logger.debug("Falha ao ler .env em %s: %s", p, exc)
        return {}
    return result


# Auxilia load_settings; criado para unir variáveis do ambiente e .env
def _merge_env_items(env_path: Path) -> dict:
    """Retorna um mapeamento combinado de `.env` e env vars do processo.

    As variáveis do processo sobrescrevem o arquivo `.env`.
    """
    env_items = _read_env_file(env_path)
    if env_items == {} and env_path.exists():
        logger.warning("Erro ou ficheiro .env vazio em %s", env_path)
    env_items.update(os.environ)
    return env_items


# Auxilia load_settings; converte cada valor para o tipo do padrão
def _apply_overrides(env_items: dict, settings: dict) -> None:
    for key, env_var in ENV_MAP.items():
        if env_var not in env_items:
            continue
        raw_val = env_items[env_var]
        default = DEFAULT_SETTINGS[key]
        try:
            if isinstance(default, bool):
                settings[key] = str(raw_val).strip().lower() in _TRUE_VALUES
            elif isinstance(default, int):
                settings[key] = int(raw_val)
            elif isinstance(default, float):
                settings[key] = float(raw_val)
            else:
                settings[key] = str(raw_val)
        except (TypeError, ValueError):
            logger.warning("Valor inválido para %s: %s", env_var, raw_val)


# ========================
# 3. Validação
# ========================


# Função principal de validação; normaliza e valida configurações
def validate_settings(settings: dict) -> dict:
    """Normaliza e valida o dicionário de configurações.

    Preenche chaves ausentes com os padrões e levanta ``ValueError`` para
    porta, timeouts e limites fora da faixa.
    """
    if not isinstance(settings, dict):
        raise TypeError("settings deve ser um dict")

    for key, default in DEFAULT_SETTINGS.items():
        settings.setdefault(key, default)

    port = int(settings["metrics_port"])
    if not 0 < port < 65536:
        raise ValueError(f"metrics_port fora da faixa: {port}")
    if float(settings["request_timeout"]) <= 0:
        raise ValueError("request_timeout deve ser > 0")
    if int(settings["server_max_failures"]) < 1:
        raise ValueError("server_max_failures deve ser >= 1")
    if float(settings["server_retry_delay"]) < 0:
        raise ValueError("server_retry_delay deve ser >= 0")
    if int(settings["metric_cache_size"]) < 1:
        raise ValueError("metric_cache_size deve ser >= 1")

    settings["log_level"] = str(settings["log_level"]).upper()
    logger.debug("Configurações validadas e normalizadas")
    return settings
