import gzip
import json
from pathlib import Path
from types import SimpleNamespace

import pytest


def _write_text(path: Path, text: str):
    path.write_text(text, encoding="utf-8")


def _write_gzip(path: Path, text: str):
    with gzip.open(path, "wt", encoding="utf-8") as fh:
        fh.write(text)


def _notification_line(target: str, status: str) -> str:
    return json.dumps(
        {
            "prefix": {"target": target},
            "update": [
                {"path": "interfaces/interface[name=Ethernet1]/state/oper-status", "val": {"stringVal": status}}
            ],
        }
    )


def test_iter_jsonl_plain(tmp_path):
    """Plain JSONL with an invalid line and an empty line should yield valid items."""
    p = tmp_path / "data.jsonl"
    content = '{"a": 1}\n\ninvalid json\n[1, 2]\n{"b": 2}\n'
    _write_text(p, content)

    from src.system.ingest import iter_jsonl

    items = list(iter_jsonl(p, retry_delay=0))
    assert items == [{"a": 1}, {"b": 2}]


def test_iter_jsonl_gzip(tmp_path):
    """Gzipped JSONL should be decoded transparently."""
    p = tmp_path / "data.jsonl.gz"
    _write_gzip(p, '{"x": 10}\n{"y": 20}\n')

    from src.system.ingest import iter_jsonl

    items = list(iter_jsonl(p, retry_delay=0))
    assert items == [{"x": 10}, {"y": 20}]


def test_iter_jsonl_missing(tmp_path):
    """Missing file should raise FileNotFoundError immediately."""
    p = tmp_path / "does_not_exist.jsonl"
    from src.system.ingest import iter_jsonl

    with pytest.raises(FileNotFoundError):
        next(iter_jsonl(p))


def test_iter_notifications_skips_invalid(tmp_path, caplog):
    """Notificações que não decodificam são ignoradas com aviso."""
    p = tmp_path / "feed.jsonl"
    bad = json.dumps({"update": [{"path": "a/b[k=v", "val": {"stringVal": "UP"}}]})
    _write_text(p, "\n".join([_notification_line("R1", "UP"), bad, _notification_line("R2", "DOWN")]) + "\n")

    from src.system.ingest import iter_notifications

    with caplog.at_level("WARNING"):
        notes = list(iter_notifications(p, retry_delay=0))
    assert [n.target for n in notes] == ["R1", "R2"]
    assert "Notificação inválida ignorada" in caplog.text


def test_iter_jsonl_follow_skips_complete_invalid_line(tmp_path):
    """Em follow, uma linha completa inválida não bloqueia as seguintes."""
    p = tmp_path / "feed.jsonl"
    _write_text(p, '{"a": 1}\nnot json at all\n{"b": 2}\n')

    from src.system.ingest import iter_jsonl

    gen = iter_jsonl(p, follow=True, retry_delay=0)
    try:
        assert next(gen) == {"a": 1}
        assert next(gen) == {"b": 2}
    finally:
        gen.close()


def test_iter_jsonl_follow_rereads_partial_line(tmp_path, monkeypatch):
    """Em follow, uma linha sem quebra final é relida quando o escritor termina."""
    p = tmp_path / "feed.jsonl"
    _write_text(p, '{"a": 1}\n{"b": ')

    from src.system import ingest

    def _finish_write(_delay):
        with p.open("a", encoding="utf-8") as fh:
            fh.write('2}\n')
        monkeypatch.setattr(ingest, "time", SimpleNamespace(sleep=lambda d: None))

    monkeypatch.setattr(ingest, "time", SimpleNamespace(sleep=_finish_write))

    gen = ingest.iter_jsonl(p, follow=True, retry_delay=0)
    try:
        assert next(gen) == {"a": 1}
        assert next(gen) == {"b": 2}
    finally:
        gen.close()
