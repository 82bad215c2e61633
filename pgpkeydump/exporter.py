"""
Structured exporter.

Turns an assembled key into the JSON-ready document printed by the CLI. This
is a pure transformation: every value is already decoded.
"""

from datetime import UTC, datetime, timedelta

from pgpkeydump.config import DumpConfig
from pgpkeydump.models.algorithms import (
    KeyFlags,
    SignatureType,
    hash_algorithm_name,
    public_key_algorithm_name,
)
from pgpkeydump.models.keys import AssembledKey
from pgpkeydump.models.packets import (
    MPI,
    DSAMaterial,
    ECDHMaterial,
    ECDSAMaterial,
    EdDSAMaterial,
    ElGamalMaterial,
    Identity,
    KeyMaterial,
    KeyPacket,
    NativeECMaterial,
    RSAMaterial,
    Signature,
    UnsupportedMaterial,
)
from pgpkeydump.openpgp.identity import user_id_text

_REVOCATIONS = frozenset(
    {
        SignatureType.KEY_REVOCATION,
        SignatureType.SUBKEY_REVOCATION,
        SignatureType.CERTIFICATION_REVOCATION,
    }
)


def export_key(key: AssembledKey, config: DumpConfig | None = None) -> dict[str, object]:
    """
    Convert an assembled key to its document representation.

    Args:
        key: The assembled key.
        config: Output options; defaults to ``DumpConfig()``.

    Returns:
        Dictionary with the keys ``armor_headers``, ``fingerprint``, ``keyid``,
        ``userids``, ``primary_key``, ``subkeys`` and ``revocation_keys`` (plus
        ``identities`` when signatures are included).

    Raises:
        PacketDecodeError: If a user ID is not valid UTF-8 and the user ID
            policy is "strict".
    """
    config = config or DumpConfig()
    with_signatures = config.include_signatures
    primary = key.primary.key

    result: dict[str, object] = {
        "armor_headers": list(key.armor_headers),
        "fingerprint": key.fingerprint,
        "keyid": key.keyid,
        "userids": [user_id_text(uid, config.userid_errors) for uid in key.primary.user_ids],
        "primary_key": export_key_packet(
            primary, key.primary.signatures, with_signatures=with_signatures
        ),
        "subkeys": [
            export_key_packet(s.key, s.signatures, primary=primary, with_signatures=with_signatures)
            for s in key.subkeys
        ],
        "revocation_keys": [export_signature(sig) for sig in key.revocation_keys],
    }
    if with_signatures:
        result["identities"] = [
            _export_identity(identity, config.userid_errors) for identity in key.primary.identities
        ]
    return result


def export_key_packet(
    key: KeyPacket,
    signatures: tuple[Signature, ...] = (),
    *,
    primary: KeyPacket | None = None,
    with_signatures: bool = False,
) -> dict[str, object]:
    """
    Describe one key packet.

    With ``with_signatures`` the result also carries the creation time and the
    signatures attached to the key, sorted by who issued them relative to
    ``primary`` (the key itself when omitted).
    """
    result: dict[str, object] = {
        "algorithm": key.algorithm_name,
        "parameters": export_material(key.material, key.algorithm),
        "fingerprint": key.fingerprint_hex,
        "keyid": key.keyid_hex,
    }
    if with_signatures:
        result["creation"] = _timestamp(key.creation_time)
        result.update(_classify_signatures(signatures, primary or key))
    return result


def export_material(material: KeyMaterial, algorithm: int) -> dict[str, object]:
    """Algorithm parameters, with every number rendered as ``{bitness, value}``."""
    match material:
        case RSAMaterial(n=n, e=e):
            return {"algorithm": "RSA", "e": _mpi(e), "n": _mpi(n)}
        case DSAMaterial(p=p, q=q, g=g, y=y):
            return {"algorithm": "DSA", "p": _mpi(p), "q": _mpi(q), "g": _mpi(g), "y": _mpi(y)}
        case ElGamalMaterial(p=p, g=g, y=y):
            return {"algorithm": "ElGamal", "p": _mpi(p), "g": _mpi(g), "y": _mpi(y)}
        case ECDHMaterial():
            return {
                "algorithm": "ECDH",
                "curve": material.curve,
                "q": _mpi(material.q),
                "hash": material.kdf.hash_name,
                "sym": material.kdf.sym_name,
            }
        case ECDSAMaterial():
            return {"algorithm": "ECDSA", "curve": material.curve, "q": _mpi(material.q)}
        case EdDSAMaterial():
            return {"algorithm": "EdDSA", "curve": material.curve, "q": _mpi(material.q)}
        case NativeECMaterial(q=q):
            return {
                "algorithm": public_key_algorithm_name(algorithm),
                "q": {"bitness": len(q) * 8, "value": q.hex()},
            }
        case UnsupportedMaterial(code=code, raw=raw):
            return {"algorithm": "Unknown", "code": code, "raw": raw.hex()}


def export_signature(sig: Signature) -> dict[str, object]:
    """Summary of a signature packet; nothing here implies it was verified."""
    expiration = None
    if sig.creation_time is not None and sig.expiration_seconds:
        expiration = _timestamp(sig.creation_time + sig.expiration_seconds)

    return {
        "version": sig.version,
        "type": sig.type_name,
        "algorithm": public_key_algorithm_name(sig.pk_algorithm),
        "hash_algorithm": hash_algorithm_name(sig.hash_algorithm),
        "digest_prefix": sig.digest_prefix.hex(),
        "creation": None if sig.creation_time is None else _timestamp(sig.creation_time),
        "expiration": expiration,
        "key_validity_period": sig.key_expiration_seconds,
        "key_flags": None if sig.key_flags is None else _key_flags(sig.key_flags),
        "exportable": sig.exportable,
        "level": sig.trust_level,
        "issuer_key_ids": [k.hex().upper() for k in sig.issuer_key_ids],
        "issuer_fingerprints": [fp.hex().upper() for fp in sig.issuer_fingerprints],
        "embedded_signatures": [export_signature(s) for s in sig.embedded_signatures],
        "intended_recipients": [fp.hex().upper() for fp in sig.intended_recipients],
    }


def _classify_signatures(
    signatures: tuple[Signature, ...], primary: KeyPacket
) -> dict[str, list[dict[str, object]]]:
    groups: dict[str, list[dict[str, object]]] = {
        "self_signatures": [],
        "attestations": [],
        "certifications": [],
        "self_revocations": [],
        "other_revocations": [],
    }
    for sig in signatures:
        # Signatures without issuer subpackets count as issued by the primary key.
        by_primary = sig.is_issued_by(primary) is not False
        sig_type = sig.signature_type
        if sig_type in _REVOCATIONS:
            group = "self_revocations" if by_primary else "other_revocations"
        elif sig_type is SignatureType.ATTESTATION:
            group = "attestations"
        else:
            group = "self_signatures" if by_primary else "certifications"
        groups[group].append(export_signature(sig))
    return groups


def _export_identity(identity: Identity, userid_errors: str) -> dict[str, object]:
    result: dict[str, object]
    if identity.user_id is not None:
        result = {"userid": user_id_text(identity.user_id, userid_errors)}
    else:
        result = {"user_attribute": (identity.user_attribute or b"").hex()}
    result["signatures"] = [export_signature(sig) for sig in identity.signatures]
    return result


def _mpi(mpi: MPI) -> dict[str, object]:
    return {"bitness": mpi.bits, "value": mpi.value.hex()}


def _key_flags(flags: int) -> dict[str, bool]:
    key_flags = KeyFlags(flags & 0xFF)
    return {
        "authentication": KeyFlags.AUTHENTICATE in key_flags,
        "certification": KeyFlags.CERTIFY in key_flags,
        "signing": KeyFlags.SIGN in key_flags,
        "storage_encryption": KeyFlags.ENCRYPT_STORAGE in key_flags,
        "transport_encryption": KeyFlags.ENCRYPT_COMMUNICATIONS in key_flags,
    }


def _timestamp(seconds: int) -> str:
    moment = datetime(1970, 1, 1, tzinfo=UTC) + timedelta(seconds=seconds)
    return moment.isoformat().replace("+00:00", "Z")
