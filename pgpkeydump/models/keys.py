"""
Assembled key structure.
"""

from dataclasses import dataclass

from pgpkeydump.models.packets import Identity, KeyPacket, Signature


@dataclass(frozen=True, kw_only=True)
class PrimaryKey:
    """
    The primary key with its identities.

    Attributes:
        key: The decoded Public-Key packet.
        identities: User IDs and user attributes in stream order.
        signatures: Signatures made directly over the key (direct key,
            self revocation) in stream order.
    """

    key: KeyPacket
    identities: tuple[Identity, ...] = ()
    signatures: tuple[Signature, ...] = ()

    @property
    def user_ids(self) -> tuple[bytes, ...]:
        return tuple(i.user_id for i in self.identities if i.user_id is not None)


@dataclass(frozen=True, kw_only=True)
class Subkey:
    """A subkey with its binding and revocation signatures."""

    key: KeyPacket
    signatures: tuple[Signature, ...] = ()


@dataclass(frozen=True, kw_only=True)
class AssembledKey:
    """
    A transferable public key.

    Attributes:
        armor_headers: Armor header values in input order, empty for binary input.
        primary: The primary key and its identities.
        subkeys: Subkeys in stream order.
        revocation_keys: Revocation signatures not attached to a specific key.
    """

    armor_headers: tuple[str, ...]
    primary: PrimaryKey
    subkeys: tuple[Subkey, ...] = ()
    revocation_keys: tuple[Signature, ...] = ()

    @property
    def fingerprint(self) -> str:
        return self.primary.key.fingerprint_hex

    @property
    def keyid(self) -> str:
        return self.primary.key.keyid_hex
