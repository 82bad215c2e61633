"""
OpenPGP wire format decoding.

This module provides:
- ASCII armor removal and checksum validation
- Packet framing (legacy and current headers, partial lengths)
- Packet body decoders for keys, identities and signatures
- Fingerprint and key ID derivation
"""

from pgpkeydump.openpgp.armor import ArmoredData, crc24, decode_armor, encode_armor
from pgpkeydump.openpgp.decoder import DecodedPacket, decode_packet
from pgpkeydump.openpgp.fingerprint import derive_fingerprint
from pgpkeydump.openpgp.framing import iter_packets
from pgpkeydump.openpgp.identity import decode_user_attribute, decode_user_id, user_id_text
from pgpkeydump.openpgp.mpi import decode_mpi
from pgpkeydump.openpgp.public_key import decode_key_material, decode_public_key
from pgpkeydump.openpgp.signature import decode_signature

__all__ = [
    "ArmoredData",
    "decode_armor",
    "encode_armor",
    "crc24",
    "iter_packets",
    "DecodedPacket",
    "decode_packet",
    "decode_mpi",
    "decode_public_key",
    "decode_key_material",
    "decode_user_id",
    "decode_user_attribute",
    "user_id_text",
    "decode_signature",
    "derive_fingerprint",
]
