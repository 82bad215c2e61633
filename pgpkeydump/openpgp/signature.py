"""
Signature packet decoding.

Signatures are classified, never verified: the subpacket areas are scanned for
the fields needed to attribute and describe the signature, and the signature
value itself is skipped.
"""

from dataclasses import dataclass, field

from pgpkeydump.exceptions import PacketDecodeError
from pgpkeydump.models.packets import Signature
from pgpkeydump.openpgp.mpi import read_bytes, read_octet, read_uint

_SUBPACKET_CRITICAL_MASK = 0x7F

SUBPACKET_CREATION_TIME = 2
SUBPACKET_EXPIRATION_TIME = 3
SUBPACKET_EXPORTABLE = 4
SUBPACKET_TRUST = 5
SUBPACKET_KEY_EXPIRATION_TIME = 9
SUBPACKET_KEY_FLAGS = 27
SUBPACKET_INTENDED_RECIPIENT = 35

# Only primary key binding signatures are embedded, and they embed nothing.
_MAX_EMBEDDING_DEPTH = 1

# Fields only trusted when they are covered by the signature hash.
_HASHED_ONLY = frozenset(
    {
        SUBPACKET_CREATION_TIME,
        SUBPACKET_EXPIRATION_TIME,
        SUBPACKET_EXPORTABLE,
        SUBPACKET_TRUST,
        SUBPACKET_KEY_EXPIRATION_TIME,
        SUBPACKET_KEY_FLAGS,
        SUBPACKET_INTENDED_RECIPIENT,
    }
)


@dataclass
class _SubpacketFields:
    creation_time: int | None = None
    expiration_seconds: int | None = None
    key_expiration_seconds: int | None = None
    key_flags: int | None = None
    exportable: bool = True
    trust_level: int = 0
    issuer_key_ids: list[bytes] = field(default_factory=list)
    issuer_fingerprints: list[bytes] = field(default_factory=list)
    intended_recipients: list[bytes] = field(default_factory=list)
    embedded_signatures: list[Signature] = field(default_factory=list)


def decode_signature(body: bytes, *, depth: int = 0) -> Signature:
    """
    Decode the body of a Signature packet.

    Args:
        body: Packet body.
        depth: Embedding level, 0 for a signature packet.

    Returns:
        Signature with its type, algorithms and issuer information.

    Raises:
        PacketDecodeError: If the body is truncated, uses an unsupported
            signature version or nests embedded signatures too deeply.
    """
    version, offset = read_octet(body, 0, "signature version")

    match version:
        case 2 | 3:
            return _decode_v3(body, offset, version)
        case 4 | 5 | 6:
            return _decode_v4(body, offset, version, depth)
        case _:
            msg = f"Unsupported signature packet version: {version}"
            raise PacketDecodeError(msg)


def _decode_v3(body: bytes, offset: int, version: int) -> Signature:
    # 00 01 02 03 04 05 06 07 08 09 0a 0b 0c 0d 0e 0f 10 11 12
    # |  |  |  [  ctime  ] [ key_id              ] |  |  [hash2]
    # |  |  |-type                        pub_algo-|  |-hash_algo
    # |  |-hashed material length (always 5)
    # |-version
    hashed_length, offset = read_octet(body, offset, "v3 hashed material length")
    if hashed_length != 5:
        msg = f"Invalid v3 signature hashed material length: {hashed_length}"
        raise PacketDecodeError(msg)

    sig_type, offset = read_octet(body, offset, "signature type")
    creation_time, offset = read_uint(body, offset, 4, "signature creation time")
    issuer, offset = read_bytes(body, offset, 8, "issuer key ID")
    pk_algorithm, offset = read_octet(body, offset, "public key algorithm")
    hash_algorithm, offset = read_octet(body, offset, "hash algorithm")
    digest_prefix, offset = read_bytes(body, offset, 2, "digest prefix")

    return Signature(
        version=version,
        sig_type=sig_type,
        pk_algorithm=pk_algorithm,
        hash_algorithm=hash_algorithm,
        digest_prefix=digest_prefix,
        creation_time=creation_time,
        issuer_key_ids=(issuer,),
    )


def _decode_v4(body: bytes, offset: int, version: int, depth: int) -> Signature:
    # v6 widens the subpacket area lengths to four octets
    area_length_size = 4 if version == 6 else 2

    sig_type, offset = read_octet(body, offset, "signature type")
    pk_algorithm, offset = read_octet(body, offset, "public key algorithm")
    hash_algorithm, offset = read_octet(body, offset, "hash algorithm")

    fields = _SubpacketFields()

    length, offset = read_uint(body, offset, area_length_size, "hashed subpacket length")
    hashed, offset = read_bytes(body, offset, length, "hashed subpackets")
    _scan_subpackets(hashed, fields, hashed=True, depth=depth)

    length, offset = read_uint(body, offset, area_length_size, "unhashed subpacket length")
    unhashed, offset = read_bytes(body, offset, length, "unhashed subpackets")
    _scan_subpackets(unhashed, fields, hashed=False, depth=depth)

    digest_prefix, offset = read_bytes(body, offset, 2, "digest prefix")
    if version == 6:
        salt_length, offset = read_octet(body, offset, "salt length")
        _, offset = read_bytes(body, offset, salt_length, "salt")

    # the remainder is the signature value, which is never used

    return Signature(
        version=version,
        sig_type=sig_type,
        pk_algorithm=pk_algorithm,
        hash_algorithm=hash_algorithm,
        digest_prefix=digest_prefix,
        creation_time=fields.creation_time,
        expiration_seconds=fields.expiration_seconds,
        key_expiration_seconds=fields.key_expiration_seconds,
        key_flags=fields.key_flags,
        exportable=fields.exportable,
        trust_level=fields.trust_level,
        issuer_key_ids=tuple(fields.issuer_key_ids),
        issuer_fingerprints=tuple(fields.issuer_fingerprints),
        intended_recipients=tuple(fields.intended_recipients),
        embedded_signatures=tuple(fields.embedded_signatures),
    )


def _scan_subpackets(area: bytes, fields: _SubpacketFields, *, hashed: bool, depth: int) -> None:
    offset = 0
    while offset < len(area):
        length, offset = _read_subpacket_length(area, offset)
        if length == 0:
            msg = "Zero-length signature subpacket"
            raise PacketDecodeError(msg)
        data, offset = read_bytes(area, offset, length, "signature subpacket")
        subtype = data[0] & _SUBPACKET_CRITICAL_MASK
        if subtype in _HASHED_ONLY and not hashed:
            continue
        _apply_subpacket(subtype, data[1:], fields, depth)


def _read_subpacket_length(area: bytes, offset: int) -> tuple[int, int]:
    first_byte, offset = read_octet(area, offset, "subpacket length")
    if first_byte < 192:
        return first_byte, offset
    if first_byte < 255:
        second_byte, offset = read_octet(area, offset, "subpacket length")
        return ((first_byte - 192) << 8) + second_byte + 192, offset
    return read_uint(area, offset, 4, "subpacket length")


def _apply_subpacket(subtype: int, data: bytes, fields: _SubpacketFields, depth: int) -> None:
    match subtype:
        case 2:
            fields.creation_time = _fixed_uint(data, 4, "signature creation time")
        case 3:
            fields.expiration_seconds = _fixed_uint(data, 4, "signature expiration time")
        case 4:
            fields.exportable = bool(_fixed_uint(data, 1, "exportable certification"))
        case 5:
            fields.trust_level = _fixed_bytes(data, 2, "trust signature")[0]
        case 9:
            fields.key_expiration_seconds = _fixed_uint(data, 4, "key expiration time")
        case 16:  # issuer
            fields.issuer_key_ids.append(_fixed_bytes(data, 8, "issuer key ID"))
        case 27:
            fields.key_flags = data[0] if data else 0
        case 32:  # embedded signature
            if depth >= _MAX_EMBEDDING_DEPTH:
                msg = "Embedded signatures nested too deeply"
                raise PacketDecodeError(msg)
            fields.embedded_signatures.append(decode_signature(data, depth=depth + 1))
        case 33:  # issuer fingerprint
            fields.issuer_fingerprints.append(_versioned_fingerprint(data, "issuer fingerprint"))
        case 35:
            fields.intended_recipients.append(_versioned_fingerprint(data, "intended recipient"))


def _fixed_bytes(data: bytes, size: int, what: str) -> bytes:
    if len(data) != size:
        msg = f"Invalid {what} subpacket: expected {size} bytes, got {len(data)}"
        raise PacketDecodeError(msg)
    return data


def _fixed_uint(data: bytes, size: int, what: str) -> int:
    return int.from_bytes(_fixed_bytes(data, size, what), "big")


def _versioned_fingerprint(data: bytes, what: str) -> bytes:
    # one octet key version, then the fingerprint (20 bytes for v4, 32 for v5/v6)
    if len(data) < 2:
        msg = f"Invalid {what} subpacket: {len(data)} bytes"
        raise PacketDecodeError(msg)
    return data[1:]
