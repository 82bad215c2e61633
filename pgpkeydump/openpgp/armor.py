"""
ASCII armor decoding.

Strips the ``-----BEGIN PGP ...-----`` framing, surfaces the armor headers and
validates the optional CRC24 checksum of the base64 payload.
"""

import base64
import binascii
import re
from dataclasses import dataclass

import structlog

from pgpkeydump.exceptions import ArmorError

logger = structlog.get_logger(__name__)

_BEGIN_RE = re.compile(rb"^-----BEGIN PGP ([A-Z0-9 ,/]+)-----[ \t\r]*$", re.MULTILINE)
_END_RE = re.compile(r"^-----END PGP ([A-Z0-9 ,/]+)-----\s*$")
_CHECKSUM_RE = re.compile(r"^=([A-Za-z0-9+/]{4})$")
_HEADER_RE = re.compile(r"^([A-Za-z0-9-]+): (.*)$")

_CRC24_INIT = 0xB704CE
_CRC24_POLY = 0x1864CFB


@dataclass(frozen=True, kw_only=True)
class ArmoredData:
    """
    Result of armor decoding.

    Attributes:
        data: Binary packet stream.
        headers: Armor header values in input order.
        label: Armor label (e.g. "PUBLIC KEY BLOCK"), None for binary input.
    """

    data: bytes
    headers: tuple[str, ...] = ()
    label: str | None = None

    @property
    def is_armored(self) -> bool:
        return self.label is not None


def crc24(data: bytes) -> int:
    """CRC-24 as used by OpenPGP radix-64 armor."""
    crc = _CRC24_INIT
    for byte in data:
        crc ^= byte << 16
        for _ in range(8):
            crc <<= 1
            if crc & 0x1000000:
                crc ^= _CRC24_POLY
    return crc & 0xFFFFFF


def is_binary(data: bytes) -> bool:
    """Binary packet streams start with a header octet that has bit 7 set."""
    return bool(data) and bool(data[0] & 0x80)


def decode_armor(data: bytes) -> ArmoredData:
    """
    Decode ASCII armor, passing binary input through unchanged.

    Args:
        data: Raw input, armored or binary.

    Returns:
        ArmoredData with the binary payload and armor headers.

    Raises:
        ArmorError: If the armor is malformed or the checksum does not match.
    """
    if is_binary(data):
        return ArmoredData(data=data)

    match = _BEGIN_RE.search(data)
    if match is None:
        return ArmoredData(data=data)

    label = match.group(1).decode("ascii")
    lines = _armor_lines(data[match.end() :])
    headers, body_lines = _split_headers(lines)
    payload_lines, checksum = _split_body(body_lines, label)

    payload = _decode_base64("".join(payload_lines))
    if not payload:
        msg = "Armor contains no data"
        raise ArmorError(msg, label=label)
    if checksum is not None:
        _verify_checksum(payload, checksum)

    logger.debug("Decoded armor", label=label, headers=len(headers), size=len(payload))
    return ArmoredData(data=payload, headers=tuple(headers), label=label)


def _armor_lines(data: bytes) -> list[str]:
    try:
        text = data.decode("ascii")
    except UnicodeDecodeError as e:
        msg = f"Armor contains non-ASCII data at offset {e.start}"
        raise ArmorError(msg) from None
    # the remainder of the BEGIN line is the first element
    return [line.strip() for line in text.splitlines()[1:]]


def _split_headers(lines: list[str]) -> tuple[list[str], list[str]]:
    for index, line in enumerate(lines):
        if not line:
            return [_header_value(h) for h in lines[:index]], lines[index + 1 :]
        if line.startswith("-----"):
            break

    # no blank line before the end marker: some producers omit it when there are no headers
    if lines and _HEADER_RE.match(lines[0]):
        msg = "Missing blank line after armor headers"
        raise ArmorError(msg)
    return [], lines


def _header_value(line: str) -> str:
    match = _HEADER_RE.match(line)
    if match is not None:
        return match.group(2)
    return line


def _split_body(lines: list[str], label: str) -> tuple[list[str], str | None]:
    payload: list[str] = []
    checksum: str | None = None
    for line in lines:
        end = _END_RE.match(line)
        if end is not None:
            if end.group(1) != label:
                msg = f"Armor end marker does not match: expected {label!r}, got {end.group(1)!r}"
                raise ArmorError(msg)
            return payload, checksum
        if not line:
            continue
        if line.startswith("="):
            checksum = _parse_checksum(line)
            continue
        if checksum is not None:
            msg = "Armor data after checksum line"
            raise ArmorError(msg)
        payload.append(line)

    msg = f"Missing armor end marker for {label!r}"
    raise ArmorError(msg)


def _parse_checksum(line: str) -> str:
    match = _CHECKSUM_RE.match(line)
    if match is None:
        msg = f"Malformed armor checksum line: {line!r}"
        raise ArmorError(msg)
    return match.group(1)


def _decode_base64(text: str) -> bytes:
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as e:
        msg = f"Invalid base64 in armor: {e}"
        raise ArmorError(msg) from e


def _verify_checksum(payload: bytes, checksum: str) -> None:
    expected = int.from_bytes(_decode_base64(checksum), "big")
    actual = crc24(payload)
    if expected == actual:
        return
    msg = f"Armor checksum mismatch: expected 0x{expected:06x}, got 0x{actual:06x}"
    raise ArmorError(msg)


def encode_armor(data: bytes, *, label: str = "PUBLIC KEY BLOCK", headers: tuple[str, ...] = ()) -> str:
    """
    Wrap a binary packet stream in ASCII armor with a CRC24 checksum.

    Header entries are emitted verbatim, so pass them as ``"Key: value"``.
    """
    encoded = base64.b64encode(data).decode("ascii")
    body = [encoded[i : i + 64] for i in range(0, len(encoded), 64)]
    checksum = base64.b64encode(crc24(data).to_bytes(3, "big")).decode("ascii")
    lines = [
        f"-----BEGIN PGP {label}-----",
        *headers,
        "",
        *body,
        f"={checksum}",
        f"-----END PGP {label}-----",
    ]
    return "\n".join(lines) + "\n"
