"""
Public-Key and Public-Subkey packet decoding.
"""

import structlog

from pgpkeydump.exceptions import PacketDecodeError, UnsupportedAlgorithmError
from pgpkeydump.models.algorithms import PublicKeyAlgorithm
from pgpkeydump.models.packets import (
    DSAMaterial,
    ECDHMaterial,
    ECDSAMaterial,
    EdDSAMaterial,
    ElGamalMaterial,
    KDFParameters,
    KeyMaterial,
    KeyPacket,
    NativeECMaterial,
    RSAMaterial,
    UnsupportedMaterial,
)
from pgpkeydump.openpgp.fingerprint import derive_fingerprint
from pgpkeydump.openpgp.mpi import decode_mpi, read_bytes, read_octet, read_uint

logger = structlog.get_logger(__name__)


def decode_public_key(body: bytes) -> KeyPacket:
    """
    Decode the body of a Public-Key or Public-Subkey packet.

    Args:
        body: Packet body.

    Returns:
        KeyPacket with its fingerprint and key ID derived.

    Raises:
        PacketDecodeError: If the body is truncated, has trailing data, uses an
            unsupported version, or is a non-RSA v3 key.
    """
    version, offset = read_octet(body, 0, "key version")

    match version:
        case 2 | 3:
            creation_time, offset = read_uint(body, offset, 4, "creation time")
            _, offset = read_uint(body, offset, 2, "validity period")
            algorithm, offset = read_octet(body, offset, "public key algorithm")
            params = body[offset:]
        case 4:
            creation_time, offset = read_uint(body, offset, 4, "creation time")
            algorithm, offset = read_octet(body, offset, "public key algorithm")
            params = body[offset:]
        case 5 | 6:
            creation_time, offset = read_uint(body, offset, 4, "creation time")
            algorithm, offset = read_octet(body, offset, "public key algorithm")
            count, offset = read_uint(body, offset, 4, "key material length")
            params, offset = read_bytes(body, offset, count, "key material")
            if offset != len(body):
                msg = f"Trailing data after v{version} key material: {len(body) - offset} bytes"
                raise PacketDecodeError(msg)
        case _:
            msg = f"Unsupported public key packet version: {version}"
            raise PacketDecodeError(msg)

    material = _decode_material_or_placeholder(algorithm, params)
    fingerprint, keyid = derive_fingerprint(version, creation_time, algorithm, material)

    return KeyPacket(
        version=version,
        creation_time=creation_time,
        algorithm=algorithm,
        material=material,
        fingerprint=fingerprint,
        keyid=keyid,
    )


def _decode_material_or_placeholder(algorithm: int, params: bytes) -> KeyMaterial:
    try:
        return decode_key_material(algorithm, params)
    except UnsupportedAlgorithmError as e:
        logger.warning("Unsupported public key algorithm", algorithm=e.algorithm)
        return UnsupportedMaterial(code=algorithm, raw=params)


def decode_key_material(algorithm: int, params: bytes) -> KeyMaterial:
    """
    Decode algorithm-specific public key parameters.

    Args:
        algorithm: Public key algorithm code.
        params: The parameter area; it must be consumed exactly.

    Returns:
        The decoded key material.

    Raises:
        UnsupportedAlgorithmError: If the algorithm has no decoder.
        PacketDecodeError: If the parameters are truncated or followed by
            trailing data.
    """
    try:
        algo = PublicKeyAlgorithm(algorithm)
    except ValueError:
        msg = f"Unknown public key algorithm: {algorithm}"
        raise UnsupportedAlgorithmError(msg, algorithm=algorithm) from None

    material, offset = _decode_algorithm_params(algo, params)
    if offset != len(params):
        msg = f"Trailing data after {algo.label} key material: {len(params) - offset} bytes"
        raise PacketDecodeError(msg)
    return material


def _decode_algorithm_params(algo: PublicKeyAlgorithm, params: bytes) -> tuple[KeyMaterial, int]:
    match algo:
        case (
            PublicKeyAlgorithm.RSA_ENCRYPT_OR_SIGN
            | PublicKeyAlgorithm.RSA_ENCRYPT_ONLY
            | PublicKeyAlgorithm.RSA_SIGN_ONLY
        ):
            n, offset = decode_mpi(params, 0, "RSA n")
            e, offset = decode_mpi(params, offset, "RSA e")
            return RSAMaterial(n=n, e=e), offset
        case PublicKeyAlgorithm.DSA:
            p, offset = decode_mpi(params, 0, "DSA p")
            q, offset = decode_mpi(params, offset, "DSA q")
            g, offset = decode_mpi(params, offset, "DSA g")
            y, offset = decode_mpi(params, offset, "DSA y")
            return DSAMaterial(p=p, q=q, g=g, y=y), offset
        case PublicKeyAlgorithm.ELGAMAL_ENCRYPT_ONLY | PublicKeyAlgorithm.ELGAMAL_ENCRYPT_OR_SIGN:
            p, offset = decode_mpi(params, 0, "ElGamal p")
            g, offset = decode_mpi(params, offset, "ElGamal g")
            y, offset = decode_mpi(params, offset, "ElGamal y")
            return ElGamalMaterial(p=p, g=g, y=y), offset
        case PublicKeyAlgorithm.ECDSA:
            oid, offset = _read_curve_oid(params, 0)
            q, offset = decode_mpi(params, offset, "ECDSA point")
            return ECDSAMaterial(curve_oid=oid, q=q), offset
        case PublicKeyAlgorithm.EDDSA:
            oid, offset = _read_curve_oid(params, 0)
            q, offset = decode_mpi(params, offset, "EdDSA point")
            return EdDSAMaterial(curve_oid=oid, q=q), offset
        case PublicKeyAlgorithm.ECDH:
            oid, offset = _read_curve_oid(params, 0)
            q, offset = decode_mpi(params, offset, "ECDH point")
            kdf_length, offset = read_octet(params, offset, "ECDH KDF length")
            kdf, offset = read_bytes(params, offset, kdf_length, "ECDH KDF parameters")
            return ECDHMaterial(curve_oid=oid, q=q, kdf=KDFParameters(raw=kdf)), offset
        case _:
            q, offset = read_bytes(params, 0, algo.native_key_size, f"{algo.label} key")
            return NativeECMaterial(q=q), offset


def _read_curve_oid(params: bytes, offset: int) -> tuple[bytes, int]:
    oid_length, offset = read_octet(params, offset, "curve OID length")
    if oid_length in (0, 0xFF):
        msg = f"Reserved curve OID length: {oid_length}"
        raise PacketDecodeError(msg)
    return read_bytes(params, offset, oid_length, "curve OID")
