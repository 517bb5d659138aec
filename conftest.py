# conftest.py
# Configuração global para pytest: garante a raiz do projeto no sys.path para imports "src.*"
# e isola a raiz de logs de cada teste em um diretório temporário.
import sys
from pathlib import Path

import pytest

ROOT_PATH = Path(__file__).parent
if str(ROOT_PATH) not in sys.path:
    sys.path.insert(0, str(ROOT_PATH))


@pytest.fixture(autouse=True)
def _isolated_log_root(tmp_path, monkeypatch):
    monkeypatch.setenv("SYNC_LOG_ROOT", str(tmp_path / "logs"))
