"""Parser de argumentos do sincronizador.

Docstrings e mensagens em português.

Este módulo fornece um parser simples que expõe:
- arquivo JSONL de notificações gNMI (-i / --input)
- modo follow (--follow), para acompanhar um arquivo em escrita
- verbosidade (-v)
- opções de logging (nivel e caminho raiz)

A CLI tem precedência sobre as variáveis de ambiente ``SYNC_*``.
"""

import argparse
import logging
import os
from typing import Sequence

# ========================
# 0. Configuração do parser e argumentos padrão
# ========================


# Função principal do módulo; cria e retorna o ArgumentParser configurado
def configure_argparser() -> argparse.ArgumentParser:
    """Cria e retorna ArgumentParser configurado para o sincronizador."""
    parser = argparse.ArgumentParser(
        prog="nautobot-sync",
        description="Sincroniza status de interfaces (telemetria gNMI) com o Nautobot",
    )

    parser.add_argument(
        "-i",
        "--input",
        dest="input",
        type=str,
        default=None,
        help="Arquivo JSONL (.jsonl ou .jsonl.gz) com notificações gNMI",
    )
    parser.add_argument(
        "--follow",
        action="store_true",
        default=False,
        help="Continua lendo o arquivo à medida que novas linhas chegam (tail -f)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Aumenta a verbosidade (-v, -vv)",
    )
    parser.add_argument(
        "--log-root",
        dest="log_root",
        type=str,
        default=None,
        help="Caminho raiz para os logs (substitui SYNC_LOG_ROOT)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        type=str,
        default=None,
        help="Nível de logging (DEBUG/INFO/WARNING/ERROR). Se ausente, definido por -v",
    )

    return parser


# ========================
# 1. Funções auxiliares para análise e validação de argumentos
# ========================


# Auxilia src.main; criado para analisar argv e validar argumentos
def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Analisa argv e retorna Namespace validado para uso no programa."""
    parser = configure_argparser()
    ns = parser.parse_args(argv)
    env_map = {
        "input": "SYNC_INPUT",
        "log_root": "SYNC_LOG_ROOT",
        "log_level": "SYNC_LOG_LEVEL",
    }
    # aplica o ambiente SOMENTE quando o argumento não veio da CLI
    for arg, env_var in env_map.items():
        env_val = os.getenv(env_var)
        if env_val is None or getattr(ns, arg, None) is not None:
            continue
        setattr(ns, arg, env_val)
    if not ns.follow and os.getenv("SYNC_FOLLOW", "0").lower() in ("1", "true", "yes"):
        ns.follow = True
    validate_args(ns)
    return ns


# Auxilia parse_args; criado para garantir valores corretos e seguros
def validate_args(args: argparse.Namespace) -> None:
    """Valida argumentos: o arquivo de entrada é obrigatório."""
    if not getattr(args, "input", None):
        raise ValueError("arquivo de entrada não informado (--input ou SYNC_INPUT)")
    level = getattr(args, "log_level", None)
    if level and not isinstance(logging.getLevelName(str(level).upper()), int):
        raise ValueError(f"nível de log inválido: {level}")


# ========================
# 2. Função auxiliar para configuração de logging
# ========================


# Auxilia src.main; criado para extrair configuração de logging dos argumentos
def get_log_config(args: argparse.Namespace, default_level: str | None = None) -> dict:
    """Retorna dict com configuração de logging ('level' e 'root').

    Prioridade: ``--log-level``/``SYNC_LOG_LEVEL``, depois ``-v``, depois
    ``default_level`` (o ``log_level`` das configurações) e por fim WARNING.
    """
    if getattr(args, "log_level", None):
        level = str(args.log_level).upper()
    else:
        v = getattr(args, "verbose", 0) or 0
        if v >= 2:
            level = "DEBUG"
        elif v == 1:
            level = "INFO"
        else:
            level = str(default_level).upper() if default_level else "WARNING"

    return {"level": level, "root": getattr(args, "log_root", None)}
