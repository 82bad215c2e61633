"""
Packet-level domain models.

These are immutable (frozen) dataclasses produced by the packet framer and the
packet body decoders.
"""

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import IntEnum

from pgpkeydump.models.algorithms import (
    SignatureType,
    curve_name,
    hash_algorithm_name,
    public_key_algorithm_name,
    signature_type_name,
    symmetric_algorithm_name,
)


class PacketTag(IntEnum):
    """OpenPGP packet tags."""

    PKESK = 1
    SIGNATURE = 2
    SKESK = 3
    ONE_PASS_SIGNATURE = 4
    SECRET_KEY = 5
    PUBLIC_KEY = 6
    SECRET_SUBKEY = 7
    COMPRESSED_DATA = 8
    SYMMETRICALLY_ENCRYPTED_DATA = 9
    MARKER = 10
    LITERAL_DATA = 11
    TRUST = 12
    USER_ID = 13
    PUBLIC_SUBKEY = 14
    USER_ATTRIBUTE = 17
    SEIPD = 18
    MDC = 19
    PADDING = 21


@dataclass(frozen=True, kw_only=True)
class RawPacket:
    """
    A framed packet: its tag and its (reassembled) body.

    Attributes:
        tag: Packet tag code, not necessarily a known PacketTag.
        body: Packet body with partial-length chunks concatenated.
        new_format: Whether the header used the current (RFC 4880 "new") format.
        offset: Offset of the packet header in the framed stream.
    """

    tag: int
    body: bytes
    new_format: bool = True
    offset: int = 0

    @property
    def tag_name(self) -> str:
        try:
            return PacketTag(self.tag).name
        except ValueError:
            return f"Unknown({self.tag})"


@dataclass(frozen=True, kw_only=True)
class MPI:
    """
    A multi-precision integer as encoded on the wire.

    Attributes:
        bits: Declared bit count (kept even when the value has leading zero bits).
        value: Big-endian value bytes, ceil(bits / 8) long.
    """

    bits: int
    value: bytes

    @property
    def encoded(self) -> bytes:
        return self.bits.to_bytes(2, "big") + self.value

    def __int__(self) -> int:
        return int.from_bytes(self.value, "big")


@dataclass(frozen=True, kw_only=True)
class KDFParameters:
    """ECDH key derivation parameters, kept verbatim."""

    raw: bytes

    @property
    def hash_id(self) -> int | None:
        if len(self.raw) == 3 and self.raw[0] == 0x01:
            return self.raw[1]
        return None

    @property
    def sym_id(self) -> int | None:
        if len(self.raw) == 3 and self.raw[0] == 0x01:
            return self.raw[2]
        return None

    @property
    def hash_name(self) -> str:
        return "Unknown" if self.hash_id is None else hash_algorithm_name(self.hash_id)

    @property
    def sym_name(self) -> str:
        return "Unknown" if self.sym_id is None else symmetric_algorithm_name(self.sym_id)


@dataclass(frozen=True, kw_only=True)
class RSAMaterial:
    n: MPI
    e: MPI

    @property
    def encoded(self) -> bytes:
        return self.n.encoded + self.e.encoded


@dataclass(frozen=True, kw_only=True)
class DSAMaterial:
    p: MPI
    q: MPI
    g: MPI
    y: MPI

    @property
    def encoded(self) -> bytes:
        return self.p.encoded + self.q.encoded + self.g.encoded + self.y.encoded


@dataclass(frozen=True, kw_only=True)
class ElGamalMaterial:
    p: MPI
    g: MPI
    y: MPI

    @property
    def encoded(self) -> bytes:
        return self.p.encoded + self.g.encoded + self.y.encoded


@dataclass(frozen=True, kw_only=True)
class _CurveMaterial:
    curve_oid: bytes
    q: MPI

    @property
    def curve(self) -> str:
        return curve_name(self.curve_oid)

    @property
    def encoded(self) -> bytes:
        return bytes([len(self.curve_oid)]) + self.curve_oid + self.q.encoded


@dataclass(frozen=True, kw_only=True)
class ECDSAMaterial(_CurveMaterial):
    pass


@dataclass(frozen=True, kw_only=True)
class EdDSAMaterial(_CurveMaterial):
    pass


@dataclass(frozen=True, kw_only=True)
class ECDHMaterial(_CurveMaterial):
    kdf: KDFParameters

    @property
    def encoded(self) -> bytes:
        return super().encoded + bytes([len(self.kdf.raw)]) + self.kdf.raw


@dataclass(frozen=True, kw_only=True)
class NativeECMaterial:
    """Fixed-length X25519, X448, Ed25519 or Ed448 public key."""

    q: bytes

    @property
    def encoded(self) -> bytes:
        return self.q


@dataclass(frozen=True, kw_only=True)
class UnsupportedMaterial:
    """Parameters of an algorithm without a decoder, kept as raw bytes."""

    code: int
    raw: bytes

    @property
    def encoded(self) -> bytes:
        return self.raw


KeyMaterial = (
    RSAMaterial
    | DSAMaterial
    | ElGamalMaterial
    | ECDSAMaterial
    | EdDSAMaterial
    | ECDHMaterial
    | NativeECMaterial
    | UnsupportedMaterial
)


@dataclass(frozen=True, kw_only=True)
class KeyPacket:
    """
    A decoded Public-Key or Public-Subkey packet.

    The fingerprint and key ID are derived from the other fields when the
    packet is decoded.
    """

    version: int
    creation_time: int
    algorithm: int
    material: KeyMaterial
    fingerprint: bytes
    keyid: bytes

    @property
    def algorithm_name(self) -> str:
        return public_key_algorithm_name(self.algorithm)

    @property
    def created_at(self) -> datetime:
        return datetime.fromtimestamp(self.creation_time, tz=UTC)

    @property
    def fingerprint_hex(self) -> str:
        return self.fingerprint.hex().upper()

    @property
    def keyid_hex(self) -> str:
        return self.keyid.hex().upper()

    @property
    def is_supported(self) -> bool:
        return not isinstance(self.material, UnsupportedMaterial)


@dataclass(frozen=True, kw_only=True)
class Signature:
    """
    A signature packet, classified but never verified.

    Attributes:
        version: Signature packet version.
        sig_type: Signature type code (see SignatureType).
        pk_algorithm: Public key algorithm code of the issuer.
        hash_algorithm: Hash algorithm code.
        digest_prefix: Left 16 bits of the signed hash.
        creation_time: Signature creation time (Unix seconds), if present.
        expiration_seconds: Signature validity period, if present.
        key_expiration_seconds: Key validity period, if present.
        key_flags: First octet of the key flags subpacket, if present.
        exportable: False only when an Exportable Certification subpacket says so.
        trust_level: Trust signature depth, 0 when absent.
        issuer_key_ids: Issuer key IDs from issuer subpackets (or the v3 header).
        issuer_fingerprints: Issuer fingerprints from issuer fingerprint subpackets.
        intended_recipients: Fingerprints from intended recipient subpackets.
        embedded_signatures: Signatures carried in embedded signature subpackets.
    """

    version: int
    sig_type: int
    pk_algorithm: int
    hash_algorithm: int
    digest_prefix: bytes
    creation_time: int | None = None
    expiration_seconds: int | None = None
    key_expiration_seconds: int | None = None
    key_flags: int | None = None
    exportable: bool = True
    trust_level: int = 0
    issuer_key_ids: tuple[bytes, ...] = ()
    issuer_fingerprints: tuple[bytes, ...] = ()
    intended_recipients: tuple[bytes, ...] = ()
    embedded_signatures: tuple["Signature", ...] = ()

    @property
    def type_name(self) -> str:
        return signature_type_name(self.sig_type)

    @property
    def signature_type(self) -> SignatureType | None:
        try:
            return SignatureType(self.sig_type)
        except ValueError:
            return None

    def is_issued_by(self, key: KeyPacket) -> bool | None:
        """
        Whether the issuer subpackets name ``key``.

        Returns None when the signature carries no issuer information at all.
        """
        if not self.issuer_key_ids and not self.issuer_fingerprints:
            return None
        if key.fingerprint in self.issuer_fingerprints:
            return True
        return key.keyid in self.issuer_key_ids


@dataclass(frozen=True, kw_only=True)
class Identity:
    """A User ID or User Attribute with the signatures that follow it."""

    user_id: bytes | None = None
    user_attribute: bytes | None = None
    signatures: tuple[Signature, ...] = ()

    @property
    def is_user_id(self) -> bool:
        return self.user_id is not None
