import io
import socket
import pytest

from struct import pack

from vplslink.iplink.vpls import USAGE
from vplslink.nlmanager.nlpacket import AttributeList, Link

from .conftest import assert_identical_json


def tb_from(**kwargs):
    """ {IFLA_VPLS_*: payload} from keyword arguments """
    tags = {
        "id": Link.IFLA_VPLS_ID,
        "vlan": Link.IFLA_VPLS_VLANID,
        "oif": Link.IFLA_VPLS_OIF,
        "ttl": Link.IFLA_VPLS_TTL,
        "label_in": Link.IFLA_VPLS_IN_LABEL,
        "label_out": Link.IFLA_VPLS_OUT_LABEL,
        "nh": Link.IFLA_VPLS_NH,
        "nh6": Link.IFLA_VPLS_NH6,
    }
    return {tags[key]: value for key, value in kwargs.items()}


def print_opt(vpls, tb):
    f = io.StringIO()
    assert vpls.print_opt(tb, f) is None
    return f.getvalue()


def test_round_trip(encode, render):
    info_data = encode("id 100 vlan 5 ttl 10 input 20 output 30 via 10.0.0.1")

    assert render(info_data) == "id 100 label in 20 out 30 vlan 5 via inet 10.0.0.1 ttl 10 "


def test_round_trip_all_fields(encode, render):
    info_data = encode("output 30 dev swp1 via 2001:db8::1 id 0x10 hoplimit 255 in 1048575 vlan 255")

    assert render(info_data) == "id 16 label in 1048575 out 30 vlan 255 via inet6 2001:db8::1 dev swp1 ttl 255 "


def test_round_trip_duplicate_keeps_first(encode, render):
    assert render(encode("id 1 id 2 vlan 3 vlan 4")) == "id 1 vlan 3 "


@pytest.mark.parametrize("tb", [
    None,
    {},
    tb_from(vlan=pack("=B", 5), ttl=pack("=B", 64), nh=socket.inet_aton("10.0.0.1")),
    tb_from(label_in=pack("=L", 1), label_out=pack("=L", 2), oif=pack("=L", 2)),
    tb_from(id=pack("=H", 100), vlan=pack("=B", 5)),
    tb_from(id=b""),
])
def test_no_id_renders_nothing(vpls, tb):
    assert print_opt(vpls, tb) == ""


@pytest.mark.parametrize("key", ["vlan", "ttl"])
def test_u8_zero_omitted(vpls, key):
    assert print_opt(vpls, tb_from(id=pack("=L", 1), **{key: pack("=B", 0)})) == "id 1 "


@pytest.mark.parametrize("key", ["label_in", "label_out"])
def test_label_zero_omitted(vpls, key):
    assert print_opt(vpls, tb_from(id=pack("=L", 1), **{key: pack("=L", 0)})) == "id 1 "


def test_id_zero_is_rendered(vpls):
    assert print_opt(vpls, tb_from(id=pack("=L", 0))) == "id 0 "


def test_ipv4_next_hop_preferred(vpls):
    tb = tb_from(
        id=pack("=L", 1),
        nh=socket.inet_aton("192.0.2.1"),
        nh6=socket.inet_pton(socket.AF_INET6, "2001:db8::1"),
    )

    assert print_opt(vpls, tb) == "id 1 via inet 192.0.2.1 "


def test_zero_ipv4_next_hop_falls_back_to_ipv6(vpls):
    tb = tb_from(
        id=pack("=L", 1),
        nh=socket.inet_aton("0.0.0.0"),
        nh6=socket.inet_pton(socket.AF_INET6, "2001:db8::1"),
    )

    assert print_opt(vpls, tb) == "id 1 via inet6 2001:db8::1 "


@pytest.mark.parametrize("tb", [
    tb_from(id=pack("=L", 1), nh=socket.inet_aton("0.0.0.0")),
    tb_from(id=pack("=L", 1), nh6=bytes(16)),
    tb_from(id=pack("=L", 1), nh=b"\x0a\x00"),
    tb_from(id=pack("=L", 1), nh6=bytes(8)),
])
def test_unset_next_hop(vpls, tb):
    assert print_opt(vpls, tb) == "id 1 "


@pytest.mark.parametrize("ifindex, expected", [
    (7, "dev swp1 "),
    (42, "dev 42 "),
    (0, "dev 0 "),
])
def test_dev(vpls, ifindex, expected):
    assert print_opt(vpls, tb_from(id=pack("=L", 1), oif=pack("=L", ifindex))) == "id 1 " + expected


def test_field_order(vpls):
    tb = tb_from(
        ttl=pack("=B", 10),
        oif=pack("=L", 2),
        nh=socket.inet_aton("10.0.0.1"),
        vlan=pack("=B", 5),
        label_out=pack("=L", 30),
        label_in=pack("=L", 20),
        id=pack("=L", 100),
    )

    assert print_opt(vpls, tb) == "id 100 label in 20 out 30 vlan 5 via inet 10.0.0.1 dev eth0 ttl 10 "


def test_unknown_tags_are_ignored(vpls, render):
    info_data = AttributeList()
    info_data.addattr32(Link.IFLA_VPLS_ID, 9)
    info_data.addattr32(Link.IFLA_VPLS_MAX + 1, 1)

    assert render(info_data) == "id 9 "


def test_get_info_data_dict(vpls, encode, get_json):
    info_data = encode("id 100 vlan 5 ttl 10 input 20 output 30 via 10.0.0.1 dev swp1")

    assert_identical_json(vpls.get_info_data_dict(vpls.parse_info_data(info_data)), get_json("vpls.info_data.json"))


def test_get_info_data_dict_ipv6(vpls, get_json):
    tb = tb_from(
        id=pack("=L", 16777215),
        nh6=socket.inet_pton(socket.AF_INET6, "2001:db8::1"),
        oif=pack("=L", 42),
        ttl=pack("=B", 0),
    )

    assert_identical_json(vpls.get_info_data_dict(tb), get_json("vpls.info_data.v6.json"))


def test_get_info_data_dict_without_id(vpls):
    assert vpls.get_info_data_dict(tb_from(vlan=pack("=B", 5))) == {}


def test_parse_info_data(vpls, encode):
    info_data = encode("id 5 vlan 6")

    assert vpls.parse_info_data(info_data) == vpls.parse_info_data(info_data.encode())
    assert vpls.parse_info_data(None) == {}


def test_print_help(vpls):
    f = io.StringIO()
    vpls.print_help([], f)

    assert f.getvalue() == USAGE
    assert f.getvalue().splitlines() == [
        "Usage: ... vpls id ID [ output LABEL ] [ input LABEL ]",
        "                 [ ttl TTL ] [ via ADDR ][ dev PHYS_DEV ]",
        "                 [ vlan ID ]",
        "",
        "Where: ID    := 0-16777215",
        "       TTL   := { 1..255 | inherit }",
        "       LABEL := 0-1048575",
    ]
