import pytest

from pgpkeydump.exceptions import PacketDecodeError
from pgpkeydump.models.packets import Identity, KeyPacket, RawPacket, Signature
from pgpkeydump.openpgp.decoder import decode_packet
from pgpkeydump.openpgp.identity import decode_user_attribute, decode_user_id, user_id_text
from pgpkeydump.tests.utils.material import rsa_numbers
from pgpkeydump.tests.utils.packets import rsa_key_body, signature_body


@pytest.mark.parametrize("tag", [6, 14])
def test_decode_packet_decodes_key_packets(tag: int) -> None:
    n, e = rsa_numbers()

    result = decode_packet(RawPacket(tag=tag, body=rsa_key_body(n, e)))

    assert isinstance(result, KeyPacket)


def test_decode_packet_decodes_user_id() -> None:
    result = decode_packet(RawPacket(tag=13, body=b"Alice <alice@example.org>"))

    assert result == Identity(user_id=b"Alice <alice@example.org>")


def test_decode_packet_decodes_user_attribute() -> None:
    result = decode_packet(RawPacket(tag=17, body=b"\x10\x01jpeg"))

    assert isinstance(result, Identity)
    assert result.user_attribute == b"\x10\x01jpeg"
    assert result.is_user_id is False


def test_decode_packet_decodes_signature() -> None:
    result = decode_packet(RawPacket(tag=2, body=signature_body(0x13)))

    assert isinstance(result, Signature)


@pytest.mark.parametrize("tag", [5, 10, 12, 21, 60])
def test_decode_packet_returns_other_packets_unchanged(tag: int) -> None:
    raw = RawPacket(tag=tag, body=b"opaque")

    assert decode_packet(raw) is raw


def test_decode_packet_attaches_tag_to_errors() -> None:
    with pytest.raises(PacketDecodeError) as exc_info:
        decode_packet(RawPacket(tag=14, body=b"\x04"))

    assert exc_info.value.tag == 14
    assert "tag=14" in str(exc_info.value)


def test_decode_user_id_is_byte_exact() -> None:
    raw = b"Caf\xe9 <cafe@example.org>"

    assert decode_user_id(raw).user_id == raw


def test_decode_user_attribute_is_byte_exact() -> None:
    assert decode_user_attribute(b"\x00\x01").user_attribute == b"\x00\x01"


def test_user_id_text_replaces_invalid_utf8_by_default() -> None:
    assert user_id_text(b"Caf\xe9") == "Caf\ufffd"


def test_user_id_text_supports_other_policies() -> None:
    assert user_id_text(b"Caf\xe9", "backslashreplace") == "Caf\\xe9"
    assert user_id_text("Café".encode(), "strict") == "Café"


def test_user_id_text_raises_in_strict_mode() -> None:
    with pytest.raises(PacketDecodeError, match="not valid UTF-8 at byte 3"):
        user_id_text(b"Caf\xe9", "strict")
