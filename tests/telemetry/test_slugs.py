import pytest

from src.core.errors import MissingLabelError
from src.telemetry.slugs import get_slug, make_endpoint, slugify


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Management1/0", "management1-0"),
        ("Ethernet 1/1", "ethernet-1-1"),
        ("R&D-Core", "r-and-d-core"),
        ("Café", "cafe"),
        ("  __edge__  ", "edge"),
        ("eth_0.100", "eth_0-100"),
        ("Роутер-1", "router-1"),
        ("Straße", "strasse"),
        ("Ø-core", "o-core"),
    ],
)
def test_slugify_examples(value, expected):
    """Teste para slugify: minúsculas, ASCII e hífens no lugar de separadores."""
    assert slugify(value) == expected


def test_get_slug_missing_label_raises():
    """Label ausente levanta MissingLabelError com a mensagem 'No label: <key>'."""
    with pytest.raises(MissingLabelError) as exc:
        get_slug({"target": "R2"}, "interfaces_interface_name")
    assert str(exc.value) == "No label: interfaces_interface_name"
    assert exc.value.label == "interfaces_interface_name"


def test_make_endpoint_joins_device_and_interface():
    labels = {"target": "R2", "interfaces_interface_name": "Management1"}
    assert make_endpoint(labels) == "r2__management1"


def test_make_endpoint_without_target_fails():
    """Sem o label 'target' não há endpoint."""
    with pytest.raises(MissingLabelError):
        make_endpoint({"interfaces_interface_name": "Management1"})


def test_non_latin_devices_get_distinct_endpoints():
    """Nomes não latinos são transliterados; dispositivos diferentes não colidem."""
    a = make_endpoint({"target": "Роутер", "interfaces_interface_name": "eth0"})
    b = make_endpoint({"target": "Маршрутизатор", "interfaces_interface_name": "eth0"})
    assert a == "router__eth0"
    assert a != b
    assert not b.startswith("__")
