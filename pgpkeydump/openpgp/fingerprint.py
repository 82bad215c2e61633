"""
Fingerprint and key ID derivation.

The fingerprint is a hash over a canonical serialization of the public key
packet; which hash and which framing depend on the key version:

- v3: MD5 over the RSA modulus and exponent value bytes. The key ID is the low
  64 bits of the modulus.
- v4: SHA-1 over ``0x99 || len16 || body``. The key ID is the last 8 bytes.
- v5: SHA-256 over ``0x9A || len32 || body``. The key ID is the first 8 bytes.
- v6: SHA-256 over ``0x9B || len32 || body``. The key ID is the first 8 bytes.

``body`` is the packet body rebuilt from its decoded fields, so this module
never needs the raw packet bytes.
"""

import hashlib

from pgpkeydump.exceptions import PacketDecodeError
from pgpkeydump.models.packets import KeyMaterial, RSAMaterial

_KEYID_SIZE = 8


def key_body(version: int, creation_time: int, algorithm: int, material: KeyMaterial) -> bytes:
    """Rebuild the public key packet body for v4, v5 and v6 keys."""
    header = bytes([version]) + creation_time.to_bytes(4, "big") + bytes([algorithm])
    encoded = material.encoded
    if version in (5, 6):
        return header + len(encoded).to_bytes(4, "big") + encoded
    return header + encoded


def derive_fingerprint(
    version: int, creation_time: int, algorithm: int, material: KeyMaterial
) -> tuple[bytes, bytes]:
    """
    Compute the fingerprint and key ID of a public key.

    Args:
        version: Key packet version.
        creation_time: Key creation time (Unix seconds).
        algorithm: Public key algorithm code.
        material: Decoded public key parameters.

    Returns:
        Tuple of (fingerprint, key ID) as raw bytes.

    Raises:
        PacketDecodeError: If the version has no fingerprint scheme or a v3
            key is not RSA.
    """
    match version:
        case 2 | 3:
            return _derive_v3(material)
        case 4:
            body = key_body(version, creation_time, algorithm, material)
            if len(body) > 0xFFFF:
                msg = f"v4 key packet too large for fingerprinting: {len(body)} bytes"
                raise PacketDecodeError(msg)
            digest = hashlib.sha1(b"\x99" + len(body).to_bytes(2, "big") + body).digest()
            return digest, digest[-_KEYID_SIZE:]
        case 5 | 6:
            body = key_body(version, creation_time, algorithm, material)
            prefix = b"\x9a" if version == 5 else b"\x9b"
            digest = hashlib.sha256(prefix + len(body).to_bytes(4, "big") + body).digest()
            return digest, digest[:_KEYID_SIZE]
        case _:
            msg = f"Unsupported public key packet version: {version}"
            raise PacketDecodeError(msg)


def _derive_v3(material: KeyMaterial) -> tuple[bytes, bytes]:
    if not isinstance(material, RSAMaterial):
        msg = "Version 3 keys must be RSA"
        raise PacketDecodeError(msg)

    digest = hashlib.md5(material.n.value + material.e.value, usedforsecurity=False).digest()
    keyid = material.n.value[-_KEYID_SIZE:].rjust(_KEYID_SIZE, b"\x00")
    return digest, keyid
