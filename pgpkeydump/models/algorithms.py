"""
OpenPGP algorithm and type identifiers.
"""

from enum import IntEnum, IntFlag


class PublicKeyAlgorithm(IntEnum):
    """OpenPGP public key algorithm identifiers."""

    RSA_ENCRYPT_OR_SIGN = 1
    RSA_ENCRYPT_ONLY = 2
    RSA_SIGN_ONLY = 3
    ELGAMAL_ENCRYPT_ONLY = 16
    DSA = 17
    ECDH = 18
    ECDSA = 19
    ELGAMAL_ENCRYPT_OR_SIGN = 20
    EDDSA = 22
    X25519 = 25
    X448 = 26
    ED25519 = 27
    ED448 = 28

    @property
    def label(self) -> str:
        """Short display name, shared by every variant of an algorithm family."""
        match self:
            case self.RSA_ENCRYPT_OR_SIGN | self.RSA_ENCRYPT_ONLY | self.RSA_SIGN_ONLY:
                return "RSA"
            case self.ELGAMAL_ENCRYPT_ONLY | self.ELGAMAL_ENCRYPT_OR_SIGN:
                return "ElGamal"
            case self.DSA:
                return "DSA"
            case self.ECDH:
                return "ECDH"
            case self.ECDSA:
                return "ECDSA"
            case self.EDDSA:
                return "EdDSA"
            case self.X25519:
                return "X25519"
            case self.X448:
                return "X448"
            case self.ED25519:
                return "Ed25519"
            case self.ED448:
                return "Ed448"

    @property
    def native_key_size(self) -> int:
        """Size in bytes of the fixed-length public key, 0 for MPI based algorithms."""
        match self:
            case self.X25519 | self.ED25519:
                return 32
            case self.X448:
                return 56
            case self.ED448:
                return 57
            case _:
                return 0


def public_key_algorithm_name(code: int) -> str:
    """Display name for any public key algorithm code, known or not."""
    try:
        return PublicKeyAlgorithm(code).label
    except ValueError:
        pass
    if 100 <= code <= 110:
        return f"Private algo {code}"
    return f"Unknown algo {code}"


class HashAlgorithm(IntEnum):
    """OpenPGP hash algorithm identifiers."""

    MD5 = 1
    SHA1 = 2
    RIPEMD160 = 3
    SHA256 = 8
    SHA384 = 9
    SHA512 = 10
    SHA224 = 11
    SHA3_256 = 12
    SHA3_512 = 14

    @property
    def label(self) -> str:
        return self.name.replace("_", "-")


def hash_algorithm_name(code: int) -> str:
    try:
        return HashAlgorithm(code).label
    except ValueError:
        return f"Unknown hash {code}"


class SymmetricAlgorithm(IntEnum):
    """OpenPGP symmetric algorithm identifiers."""

    PLAINTEXT = 0
    IDEA = 1
    TRIPLE_DES = 2
    CAST5 = 3
    BLOWFISH = 4
    AES_128 = 7
    AES_192 = 8
    AES_256 = 9
    TWOFISH = 10
    CAMELLIA_128 = 11
    CAMELLIA_192 = 12
    CAMELLIA_256 = 13

    @property
    def label(self) -> str:
        match self:
            case self.PLAINTEXT:
                return "Unencrypted"
            case self.TRIPLE_DES:
                return "TripleDES"
            case self.BLOWFISH | self.TWOFISH:
                return self.name.capitalize()
            case self.AES_128 | self.AES_192 | self.AES_256:
                return self.name.replace("_", "")
            case self.CAMELLIA_128 | self.CAMELLIA_192 | self.CAMELLIA_256:
                return "Camellia" + self.name.rsplit("_", 1)[1]
            case _:
                return self.name


def symmetric_algorithm_name(code: int) -> str:
    try:
        return SymmetricAlgorithm(code).label
    except ValueError:
        return f"Unknown cipher {code}"


class SignatureType(IntEnum):
    """OpenPGP signature type identifiers."""

    BINARY = 0x00
    TEXT = 0x01
    STANDALONE = 0x02
    GENERIC_CERTIFICATION = 0x10
    PERSONA_CERTIFICATION = 0x11
    CASUAL_CERTIFICATION = 0x12
    POSITIVE_CERTIFICATION = 0x13
    ATTESTATION = 0x16
    SUBKEY_BINDING = 0x18
    PRIMARY_KEY_BINDING = 0x19
    DIRECT_KEY = 0x1F
    KEY_REVOCATION = 0x20
    SUBKEY_REVOCATION = 0x28
    CERTIFICATION_REVOCATION = 0x30
    TIMESTAMP = 0x40
    CONFIRMATION = 0x50

    @property
    def label(self) -> str:
        """CamelCase display name, e.g. PositiveCertification."""
        return "".join(part.capitalize() for part in self.name.split("_"))

    @property
    def is_certification(self) -> bool:
        """Whether the signature binds to a user ID or user attribute."""
        match self:
            case (
                self.GENERIC_CERTIFICATION
                | self.PERSONA_CERTIFICATION
                | self.CASUAL_CERTIFICATION
                | self.POSITIVE_CERTIFICATION
                | self.ATTESTATION
                | self.CERTIFICATION_REVOCATION
            ):
                return True
            case _:
                return False


def signature_type_name(code: int) -> str:
    try:
        return SignatureType(code).label
    except ValueError:
        return f"Unknown({code:#04x})"


class KeyFlags(IntFlag):
    """Key usage flags from the Key Flags signature subpacket (first octet)."""

    CERTIFY = 0x01
    SIGN = 0x02
    ENCRYPT_COMMUNICATIONS = 0x04
    ENCRYPT_STORAGE = 0x08
    SPLIT = 0x10
    AUTHENTICATE = 0x20
    GROUP = 0x80


_CURVE_NAMES: dict[bytes, str] = {
    bytes.fromhex("2a8648ce3d030107"): "NIST P-256",
    bytes.fromhex("2b81040022"): "NIST P-384",
    bytes.fromhex("2b81040023"): "NIST P-521",
    bytes.fromhex("2b2403030208010107"): "brainpoolP256r1",
    bytes.fromhex("2b240303020801010b"): "brainpoolP384r1",
    bytes.fromhex("2b240303020801010d"): "brainpoolP512r1",
    bytes.fromhex("2b06010401da470f01"): "Ed25519",
    bytes.fromhex("2b060104019755010501"): "Curve25519",
    bytes.fromhex("2b8104000a"): "secp256k1",
}


def oid_to_dotted(oid: bytes) -> str:
    """
    Render a DER-encoded OID body (without tag and length) in dotted form.

    Malformed encodings (a dangling continuation octet) are rendered as hex.
    """
    if not oid or oid[-1] & 0x80:
        return oid.hex()

    arcs: list[int] = []
    value = 0
    for byte in oid:
        value = (value << 7) | (byte & 0x7F)
        if not byte & 0x80:
            arcs.append(value)
            value = 0

    first = arcs[0]
    if first < 80:
        head = [first // 40, first % 40]
    else:
        head = [2, first - 80]
    return ".".join(str(arc) for arc in head + arcs[1:])


def curve_name(oid: bytes) -> str:
    """Display name for a curve OID, known or not."""
    name = _CURVE_NAMES.get(oid)
    if name is not None:
        return name
    return f"Unknown curve {oid_to_dotted(oid)}"
