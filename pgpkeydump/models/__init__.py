"""
Domain models for pgpkeydump.

These are immutable (frozen) dataclasses representing the core domain concepts.
"""

from pgpkeydump.models.algorithms import (
    HashAlgorithm,
    KeyFlags,
    PublicKeyAlgorithm,
    SignatureType,
    SymmetricAlgorithm,
)
from pgpkeydump.models.keys import AssembledKey, PrimaryKey, Subkey
from pgpkeydump.models.packets import (
    MPI,
    DSAMaterial,
    ECDHMaterial,
    ECDSAMaterial,
    EdDSAMaterial,
    ElGamalMaterial,
    Identity,
    KDFParameters,
    KeyMaterial,
    KeyPacket,
    NativeECMaterial,
    PacketTag,
    RawPacket,
    RSAMaterial,
    Signature,
    UnsupportedMaterial,
)

__all__ = [
    # Identifiers
    "PublicKeyAlgorithm",
    "HashAlgorithm",
    "SymmetricAlgorithm",
    "SignatureType",
    "KeyFlags",
    "PacketTag",
    # Packets
    "RawPacket",
    "MPI",
    "KDFParameters",
    "RSAMaterial",
    "DSAMaterial",
    "ElGamalMaterial",
    "ECDSAMaterial",
    "EdDSAMaterial",
    "ECDHMaterial",
    "NativeECMaterial",
    "UnsupportedMaterial",
    "KeyMaterial",
    "KeyPacket",
    "Signature",
    "Identity",
    # Keys
    "PrimaryKey",
    "Subkey",
    "AssembledKey",
]
