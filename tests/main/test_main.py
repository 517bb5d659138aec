import json
import logging
import sys

import pytest


@pytest.fixture
def restore_logging(monkeypatch):
    monkeypatch.setattr(sys, "excepthook", sys.excepthook)
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def sync_env(tmp_path, monkeypatch):
    monkeypatch.setenv("SYNC_ENV_FILE", str(tmp_path / "absent.env"))
    monkeypatch.setenv("SYNC_LOG_ROOT", str(tmp_path / "logs"))
    monkeypatch.setenv("SYNC_AUDIT_LOG_ENABLE", "0")
    for var in ("SYNC_INPUT", "SYNC_LOG_LEVEL", "SYNC_FOLLOW", "SYNC_OPENCONFIG_DIR"):
        monkeypatch.delenv(var, raising=False)
    return tmp_path


def test_main_processes_feed(monkeypatch, sync_env, restore_logging):
    """Main deve carregar settings, iniciar o exporter e processar o arquivo."""
    yang_dir = sync_env / "yang"
    yang_dir.mkdir()
    (yang_dir / "openconfig-interfaces.yang").write_text("module openconfig-interfaces {\n}\n", encoding="utf-8")
    monkeypatch.setenv("SYNC_OPENCONFIG_DIR", str(yang_dir))

    feed = sync_env / "feed.jsonl"
    feed.write_text(json.dumps({"prefix": {"target": "R2"}, "update": []}) + "\n", encoding="utf-8")

    started = []
    monkeypatch.setattr("src.exporter.main_http.MetricsServer.start_in_background", lambda self: started.append(self))

    from src.main import main

    assert main(["-i", str(feed)]) == 1
    assert len(started) == 1


def test_main_exits_on_missing_openconfig_dir(monkeypatch, sync_env, restore_logging):
    """Sem SYNC_OPENCONFIG_DIR o processo sai com código 2."""
    feed = sync_env / "feed.jsonl"
    feed.write_text("", encoding="utf-8")
    from src.main import main

    with pytest.raises(SystemExit) as exc:
        main(["-i", str(feed)])
    assert exc.value.code == 2


def test_setup_debug_file_handler_sets_handler_and_hook(monkeypatch, tmp_path, restore_logging):
    """_setup_debug_file_handler deve adicionar FileHandler e configurar exceção global sem erro."""
    import src.main as main_mod

    monkeypatch.setattr(main_mod, "get_debug_file_path", lambda: tmp_path / "debug.log")
    restore_logging.handlers = []

    main_mod._setup_debug_file_handler()
    main_mod._setup_debug_file_handler()

    file_handlers = [h for h in restore_logging.handlers if isinstance(h, logging.FileHandler)]
    assert len(file_handlers) == 2
    assert main_mod.sys.excepthook.__name__ == "_exc_hook"


def test_json_formatter_includes_exception():
    from src.main import _JSONFormatter

    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("x", logging.ERROR, __file__, 1, "falha %s", ("a",), sys.exc_info())
    obj = json.loads(_JSONFormatter().format(record))
    assert obj["msg"] == "falha a"
    assert obj["level"] == "ERROR"
    assert "RuntimeError" in obj["exc"]


def test_log_level_from_env_file(monkeypatch, sync_env, restore_logging):
    """SYNC_LOG_LEVEL definido apenas no .env define o nível do logging."""
    env_file = sync_env / "sync.env"
    env_file.write_text("SYNC_LOG_LEVEL=debug\n", encoding="utf-8")
    monkeypatch.setenv("SYNC_ENV_FILE", str(env_file))
    feed = sync_env / "feed.jsonl"
    feed.write_text("", encoding="utf-8")

    levels = []
    monkeypatch.setattr(logging, "basicConfig", lambda **kw: levels.append(kw["level"]))
    from src.main import main

    with pytest.raises(SystemExit):
        main(["-i", str(feed)])
    assert levels == [logging.DEBUG]
