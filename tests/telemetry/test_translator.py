from src.telemetry.notification import PathElem, parse_path
from src.telemetry.translator import update_to_metric


def test_name_is_underscore_join_of_elements():
    """Sem chaves, o nome é a junção dos elementos com '-' trocado por '_'."""
    path = [PathElem("interfaces"), PathElem("interface"), PathElem("state"), PathElem("oper-status")]
    identity = update_to_metric(None, path)
    assert identity.name == "interfaces_interface_state_oper_status"
    assert identity.labels == {}


def test_keyed_element_label_uses_name_so_far():
    """Cada chave vira um label prefixado pelo nome acumulado até o elemento."""
    path = parse_path("interfaces/interface[name=Management1]/state/oper-status")
    identity = update_to_metric("R2", path)
    assert identity.name == "interfaces_interface_state_oper_status"
    assert identity.labels == {"target": "R2", "interfaces_interface_name": "Management1"}


def test_hyphenated_keys_and_multiple_keys():
    """Hífens nas chaves viram underline; todas as chaves do elemento geram labels."""
    path = [
        PathElem("network-instances"),
        PathElem("network-instance", {"name": "default"}),
        PathElem("protocols"),
        PathElem("protocol", {"identifier": "BGP", "instance-name": "bgp1"}),
    ]
    identity = update_to_metric("", path)
    assert identity.name == "network_instances_network_instance_protocols_protocol"
    assert identity.labels == {
        "network_instances_network_instance_name": "default",
        "network_instances_network_instance_protocols_protocol_identifier": "BGP",
        "network_instances_network_instance_protocols_protocol_instance_name": "bgp1",
    }


def test_empty_target_is_not_recorded():
    """Prefixo sem target não cria o label 'target'."""
    identity = update_to_metric("", [PathElem("system")])
    assert "target" not in identity.labels


def test_repeated_label_key_last_write_wins():
    """Chave repetida sobrescreve o valor anterior sem erro."""
    # 'b_c' e 'b-c' geram o mesmo label
    identity = update_to_metric(None, [PathElem("a", {"b_c": "first", "b-c": "second"})])
    assert identity.labels == {"a_b_c": "second"}


def test_empty_path_gives_empty_name():
    """Caminho vazio não falha e produz nome vazio."""
    identity = update_to_metric("R1", [])
    assert identity.name == ""
    assert identity.labels == {"target": "R1"}
