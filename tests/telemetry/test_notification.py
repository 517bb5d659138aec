import pytest

from src.core.errors import NotificationDecodeError
from src.telemetry.notification import (
    Notification,
    PathElem,
    TypedValue,
    number_value,
    parse_path,
    string_value,
)


def test_from_dict_camel_case():
    """Teste para from_dict com JSON do protobuf (camelCase)."""
    raw = {
        "timestamp": "1700000000000000000",
        "prefix": {"target": "R2"},
        "update": [
            {
                "path": {
                    "elem": [
                        {"name": "interfaces"},
                        {"name": "interface", "key": {"name": "Management1"}},
                        {"name": "state"},
                        {"name": "oper-status"},
                    ]
                },
                "val": {"stringVal": "UP"},
            }
        ],
    }
    n = Notification.from_dict(raw)
    assert n.target == "R2"
    assert n.timestamp == 1700000000000000000
    assert len(n.update) == 1
    upd = n.update[0]
    assert upd.path[1] == PathElem("interface", {"name": "Management1"})
    assert upd.val == TypedValue("string_val", "UP")


def test_from_dict_envelope_and_string_path():
    """Aceita o envelope SubscribeResponse e caminho em string."""
    raw = {
        "update": {
            "prefix": {"target": "R1"},
            "update": [{"path": "interfaces/interface[name=Ethernet1/1]/state/admin-status", "value": "DOWN"}],
        }
    }
    n = Notification.from_dict(raw)
    assert n.target == "R1"
    assert n.update[0].path[1].key == {"name": "Ethernet1/1"}
    assert string_value(n.update[0].val) == "DOWN"


def test_missing_prefix_has_empty_target():
    n = Notification.from_dict({"update": []})
    assert n.prefix is None
    assert n.target == ""


def test_parse_path_multiple_keys():
    elems = parse_path("/a/b[k=v][k2=v2]/c")
    assert elems == [PathElem("a"), PathElem("b", {"k": "v", "k2": "v2"}), PathElem("c")]


@pytest.mark.parametrize("bad", ["a/b[k=v", "a/[k=v]", "a/b[novalue]"])
def test_parse_path_invalid(bad):
    with pytest.raises(NotificationDecodeError):
        parse_path(bad)


def test_typed_value_unknown_kind():
    """Tipo desconhecido é erro de decodificação (também ValueError)."""
    with pytest.raises(ValueError):
        TypedValue.from_obj({"weirdVal": 1})


def test_number_and_string_helpers():
    assert number_value(TypedValue("int_val", "42")) == 42.0
    assert number_value(TypedValue("decimal_val", {"digits": 1234, "precision": 2})) == 12.34
    assert number_value(TypedValue("string_val", "UP")) is None
    assert string_value(TypedValue("ascii_val", "ok")) == "ok"
    assert string_value(TypedValue("int_val", 1)) is None
    assert string_value(None) is None


def test_scalar_values():
    """Escalares soltos são mapeados para o tipo gNMI correspondente."""
    assert TypedValue.from_obj(True).kind == "bool_val"
    assert TypedValue.from_obj(3).is_number
    assert TypedValue.from_obj(2.5).kind == "double_val"
    assert TypedValue.from_obj("UP").is_string
