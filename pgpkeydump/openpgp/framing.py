"""
OpenPGP packet framing.

Splits a binary packet stream into packets, handling both the legacy and the
current header formats and reassembling partial body lengths.
"""

from collections.abc import Iterator

import structlog

from pgpkeydump.exceptions import FramingError
from pgpkeydump.models.packets import RawPacket

logger = structlog.get_logger(__name__)

_PARTIAL = -1
_INDETERMINATE = -2


def iter_packets(data: bytes) -> Iterator[RawPacket]:
    """
    Lazily yield the packets of a binary packet stream.

    Args:
        data: Binary packet stream.

    Yields:
        RawPacket for each packet, in stream order.

    Raises:
        FramingError: On an invalid header, a truncated header or a declared
            length exceeding the remaining input.
    """
    data = bytes(data)
    offset = 0
    while offset < len(data):
        packet, offset = read_packet(data, offset)
        logger.debug(
            "Framed packet",
            tag=packet.tag_name,
            offset=packet.offset,
            length=len(packet.body),
        )
        yield packet


def read_packet(data: bytes, offset: int) -> tuple[RawPacket, int]:
    """
    Read one packet starting at ``offset``.

    Returns:
        Tuple of (packet, offset of the next packet).
    """
    first_byte = data[offset]

    if _is_new_format_packet(first_byte):
        tag = first_byte & 0x3F
        _validate_tag(tag, offset)
        body, next_offset = _read_new_format_body(data, offset + 1)
        return RawPacket(tag=tag, body=body, new_format=True, offset=offset), next_offset

    if _is_old_format_packet(first_byte):
        tag = (first_byte & 0x3C) >> 2
        _validate_tag(tag, offset)
        body, next_offset = _read_old_format_body(data, offset + 1, first_byte & 0x03)
        return RawPacket(tag=tag, body=body, new_format=False, offset=offset), next_offset

    msg = f"Invalid packet header: 0x{first_byte:02x}"
    raise FramingError(msg, offset=offset)


def _is_new_format_packet(first_byte: int) -> bool:
    return (first_byte & 0xC0) == 0xC0


def _is_old_format_packet(first_byte: int) -> bool:
    return (first_byte & 0x80) == 0x80


def _validate_tag(tag: int, offset: int) -> None:
    if tag != 0:
        return
    msg = "Reserved packet tag 0"
    raise FramingError(msg, offset=offset)


def _read_new_format_body(data: bytes, offset: int) -> tuple[bytes, int]:
    chunks: list[bytes] = []
    while True:
        length, length_bytes = parse_new_format_length(data, offset)
        offset += length_bytes
        if length == _PARTIAL:
            chunk_length = 1 << (data[offset - 1] & 0x1F)
            chunks.append(_take(data, offset, chunk_length))
            offset += chunk_length
            continue
        chunks.append(_take(data, offset, length))
        return b"".join(chunks), offset + length


def parse_new_format_length(data: bytes, offset: int) -> tuple[int, int]:
    """
    Parse a current-format length field at ``offset``.

    Returns:
        Tuple of (length, length field size). The length is negative for a
        partial body length; the chunk size is then encoded in the field itself.
    """
    if offset >= len(data):
        msg = "Missing length byte"
        raise FramingError(msg, offset=offset)

    first_byte = data[offset]

    if first_byte < 192:
        return first_byte, 1

    if first_byte < 224:
        if offset + 2 > len(data):
            msg = "Incomplete two-byte length"
            raise FramingError(msg, offset=offset)
        length = ((first_byte - 192) << 8) + data[offset + 1] + 192
        return length, 2

    if first_byte == 255:
        if offset + 5 > len(data):
            msg = "Incomplete five-byte length"
            raise FramingError(msg, offset=offset)
        length = int.from_bytes(data[offset + 1 : offset + 5], "big")
        return length, 5

    return _PARTIAL, 1


def _read_old_format_body(data: bytes, offset: int, length_type: int) -> tuple[bytes, int]:
    length, length_bytes = _parse_old_format_length(data, offset, length_type)
    offset += length_bytes
    if length == _INDETERMINATE:
        return data[offset:], len(data)
    return _take(data, offset, length), offset + length


def _parse_old_format_length(data: bytes, offset: int, length_type: int) -> tuple[int, int]:
    if length_type == 3:
        return _INDETERMINATE, 0

    length_bytes = 1 << length_type
    if offset + length_bytes > len(data):
        msg = f"Incomplete {length_bytes}-byte length"
        raise FramingError(msg, offset=offset)
    return int.from_bytes(data[offset : offset + length_bytes], "big"), length_bytes


def _take(data: bytes, offset: int, length: int) -> bytes:
    remaining = len(data) - offset
    if length > remaining:
        msg = f"Packet body length {length} exceeds remaining input ({remaining} bytes)"
        raise FramingError(msg, offset=offset)
    return data[offset : offset + length]
