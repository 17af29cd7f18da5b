import socket
import logging
import pytest

from struct import pack, unpack

from vplslink.nlmanager.nlpacket import (
    AttributeList,
    AttributeListFull,
    Link,
    NetlinkDecodeError,
    NLA_F_NESTED,
    NLM_F_ACK,
    NLM_F_CREATE,
    NLM_F_EXCL,
    NLM_F_REQUEST,
    RTM_DELLINK,
    RTM_NEWLINK,
    decode_message,
    parse_rtattr,
)
from vplslink.nlmanager.ipnetwork import IPv4Address, IPv6Address, ip_address, format_host


def tlv(atype, payload):
    length = 4 + len(payload)
    return pack("=HH", length, atype) + payload + b"\0" * ((4 - length % 4) % 4)


class TestAttributeList:

    def test_addattr8_is_padded(self):
        attrs = AttributeList()
        attrs.addattr8(Link.IFLA_VPLS_VLANID, 5)

        assert attrs.encode() == pack("=HH", 5, Link.IFLA_VPLS_VLANID) + b"\x05\0\0\0"
        assert attrs.length == 8

    def test_addattr32(self):
        attrs = AttributeList()
        attrs.addattr32(Link.IFLA_VPLS_ID, 100)

        assert attrs.encode() == pack("=HHL", 8, Link.IFLA_VPLS_ID, 100)

    def test_addattr_l(self):
        attrs = AttributeList()
        attrs.addattr_l(Link.IFLA_VPLS_NH6, socket.inet_pton(socket.AF_INET6, "fe80::1"))

        raw = attrs.encode()
        assert len(raw) == 20
        assert unpack("=HH", raw[:4]) == (20, Link.IFLA_VPLS_NH6)

    def test_maxattr(self):
        attrs = AttributeList(maxattr=Link.IFLA_VPLS_MAX)

        with pytest.raises(ValueError):
            attrs.addattr32(Link.IFLA_VPLS_MAX + 1, 1)

        assert len(attrs) == 0

    def test_maxlen(self):
        attrs = AttributeList(maxlen=1024)

        for _ in range(128):
            attrs.addattr32(Link.IFLA_VPLS_ID, 1)

        with pytest.raises(AttributeListFull):
            attrs.addattr8(Link.IFLA_VPLS_TTL, 1)

        assert attrs.length == 1024
        assert len(attrs) == 128

    def test_decode_keeps_duplicates_in_order(self):
        attrs = AttributeList()
        attrs.addattr32(Link.IFLA_VPLS_ID, 1)
        attrs.addattr8(Link.IFLA_VPLS_TTL, 64)
        attrs.addattr32(Link.IFLA_VPLS_ID, 2)

        decoded = AttributeList.decode(attrs.encode())

        assert list(decoded) == list(attrs)
        assert decoded.length == attrs.length

    def test_to_table(self):
        attrs = AttributeList()
        attrs.addattr32(Link.IFLA_VPLS_ID, 1)
        attrs.addattr32(Link.IFLA_VPLS_ID, 2)
        attrs.addattr32(12, 3)

        assert attrs.to_table() == {Link.IFLA_VPLS_ID: pack("=L", 1), 12: pack("=L", 3)}
        assert attrs.to_table(Link.IFLA_VPLS_MAX) == {Link.IFLA_VPLS_ID: pack("=L", 1)}


class TestParseRtattr:

    def test_first_wins(self):
        data = tlv(1, pack("=L", 10)) + tlv(1, pack("=L", 20))

        assert parse_rtattr(data, 8) == {1: pack("=L", 10)}

    def test_maxattr(self):
        data = tlv(9, pack("=L", 10)) + tlv(2, b"\x05")

        assert parse_rtattr(data, 8) == {2: b"\x05"}

    def test_flags_are_masked(self):
        assert parse_rtattr(tlv(NLA_F_NESTED | 1, pack("=L", 10)), 8) == {1: pack("=L", 10)}

    def test_unpadded_last_attribute(self):
        data = tlv(1, pack("=L", 10)) + pack("=HH", 5, 4) + b"\x40"

        assert parse_rtattr(data, 8) == {1: pack("=L", 10), 4: b"\x40"}

    @pytest.mark.parametrize("garbage", [
        pack("=HH", 0, 2),
        pack("=HH", 2, 2),
        pack("=HH", 64, 2) + b"\0" * 4,
    ])
    def test_invalid_length_stops_parsing(self, garbage, caplog):
        data = tlv(1, pack("=L", 10)) + garbage + tlv(4, b"\x40")

        with caplog.at_level(logging.ERROR):
            assert parse_rtattr(data, 8) == {1: pack("=L", 10)}

        assert caplog.records

    def test_empty(self):
        assert parse_rtattr(b"", 8) == {}


class TestLinkMessage:

    def test_build(self, vpls):
        link = vpls.build_link_message(["id", "100", "via", "10.0.0.1"], ifname="vpls0", seq=3, pid=42)
        raw = link.message

        (length, msgtype, flags, seq, pid) = unpack("=LHHLL", raw[:16])

        assert length == len(raw)
        assert len(raw) % 4 == 0
        assert msgtype == RTM_NEWLINK
        assert flags == NLM_F_REQUEST | NLM_F_CREATE | NLM_F_EXCL | NLM_F_ACK
        assert (seq, pid) == (3, 42)
        assert raw[16:32] == pack("=BxHiII", socket.AF_UNSPEC, 0, 0, 0, 0)

    def test_round_trip(self, vpls):
        raw = vpls.build_link_message(["id", "100", "vlan", "5", "via", "fe80::1"], ifname="vpls0").message
        msg = decode_message(raw)

        assert msg.msgtype == RTM_NEWLINK
        assert msg.get_attribute_value(Link.IFLA_IFNAME) == "vpls0"
        assert msg.get_link_kind() == "vpls"
        assert vpls.parse_info_data(msg.get_info_data()) == {
            Link.IFLA_VPLS_ID: pack("=L", 100),
            Link.IFLA_VPLS_VLANID: b"\x05",
            Link.IFLA_VPLS_NH6: socket.inet_pton(socket.AF_INET6, "fe80::1"),
        }

    def test_linkinfo_is_nested(self, vpls):
        raw = vpls.build_link_message(["id", "1"]).message
        (length, atype) = unpack("=HH", raw[32:36])

        assert atype == Link.IFLA_LINKINFO | NLA_F_NESTED
        assert length == len(raw) - 32
        assert raw[36:44] == pack("=HH", 8, Link.IFLA_INFO_KIND) + b"vpls"
        assert unpack("=HH", raw[44:48])[1] == Link.IFLA_INFO_DATA | NLA_F_NESTED

    def test_without_ifname(self, vpls):
        msg = decode_message(vpls.build_link_message(["id", "1"]).message)

        assert msg.get_attribute_value(Link.IFLA_IFNAME) is None
        assert msg.get_link_kind() == "vpls"

    def test_ifname_too_long(self, vpls):
        with pytest.raises(ValueError):
            vpls.build_link_message(["id", "1"], ifname="v" * 16)

    def test_debug_dump(self, vpls, caplog):
        with caplog.at_level(logging.DEBUG):
            raw = vpls.build_link_message(["id", "1", "ttl", "5"], ifname="vpls0", debug=True).message
            decode_message(raw, debug=True, use_color=True)

        assert "Attributes Summary" in caplog.text
        assert "IFLA_LINKINFO" in caplog.text
        assert "TXed RTM_NEWLINK" in caplog.text

    def test_decode_dellink(self, vpls):
        raw = bytearray(vpls.build_link_message(["id", "1"]).message)
        raw[4:6] = pack("=H", RTM_DELLINK)

        assert str(decode_message(bytes(raw))) == "RTM_DELLINK"

    @pytest.mark.parametrize("raw", [
        b"",
        b"\0" * 16,
        pack("=LHHLL", 32, 0x18, 0, 0, 0) + b"\0" * 16,
        pack("=LHHLL", 64, RTM_NEWLINK, 0, 0, 0) + b"\0" * 16,
        pack("=LHHLL", 38, RTM_NEWLINK, 0, 0, 0) + b"\0" * 16 + pack("=HH", 6, Link.IFLA_MTU) + b"\0\0",
    ])
    def test_decode_invalid(self, raw):
        with pytest.raises(NetlinkDecodeError):
            decode_message(raw)


class TestIPNetwork:

    def test_ipv4(self):
        addr = IPv4Address("10.0.0.1")

        assert addr.packed == b"\x0a\x00\x00\x01"
        assert addr.family == socket.AF_INET
        assert not addr.is_unspecified
        assert int(addr) == 0x0a000001
        assert addr == IPv4Address(b"\x0a\x00\x00\x01")

    def test_ip_address(self):
        assert ip_address("fe80::1").version == 6
        assert ip_address("192.0.2.1").version == 4
        assert ip_address("::").is_unspecified

    @pytest.mark.parametrize("ip", ["10.0.0.0/8", "fe80::1%2", "", "localhost"])
    def test_invalid(self, ip):
        with pytest.raises(ValueError):
            ip_address(ip)

    def test_ipv6_rejects_ipv4(self):
        with pytest.raises(ValueError):
            IPv6Address("10.0.0.1")

    def test_format_host(self):
        assert format_host(socket.AF_INET, b"\xc0\x00\x02\x01") == "192.0.2.1"
        assert format_host(socket.AF_INET6, socket.inet_pton(socket.AF_INET6, "2001:db8::2")) == "2001:db8::2"
        assert format_host(socket.AF_INET, b"\x01") is None
