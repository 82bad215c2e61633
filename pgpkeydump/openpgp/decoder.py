"""
Packet body dispatch.

Routes a framed packet to the body decoder for its tag. Packets the key
assembler has no use for are returned as they were framed.
"""

from pgpkeydump.exceptions import PacketDecodeError
from pgpkeydump.models.packets import Identity, KeyPacket, PacketTag, RawPacket, Signature
from pgpkeydump.openpgp.identity import decode_user_attribute, decode_user_id
from pgpkeydump.openpgp.public_key import decode_public_key
from pgpkeydump.openpgp.signature import decode_signature

DecodedPacket = KeyPacket | Identity | Signature | RawPacket


def decode_packet(raw: RawPacket) -> DecodedPacket:
    """
    Decode the body of a framed packet.

    Args:
        raw: Framed packet.

    Returns:
        KeyPacket for (sub)key packets, Identity for user IDs and user
        attributes, Signature for signatures, and ``raw`` itself for any
        other tag.

    Raises:
        PacketDecodeError: If the body is malformed; ``tag`` is set to the
            packet tag.
    """
    try:
        match raw.tag:
            case PacketTag.PUBLIC_KEY | PacketTag.PUBLIC_SUBKEY:
                return decode_public_key(raw.body)
            case PacketTag.USER_ID:
                return decode_user_id(raw.body)
            case PacketTag.USER_ATTRIBUTE:
                return decode_user_attribute(raw.body)
            case PacketTag.SIGNATURE:
                return decode_signature(raw.body)
            case _:
                return raw
    except PacketDecodeError as e:
        if e.tag is not None:
            raise
        raise PacketDecodeError(e.message, tag=raw.tag) from e
