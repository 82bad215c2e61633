"""
Key assembler.

Groups the decoded packets of a transferable public key into a primary key,
its identities and its subkeys. Grouping is positional: identities and
signatures belong to the most recent key (and, for certifications, to the most
recent identity).
"""

from collections.abc import Iterable
from dataclasses import dataclass, field

import structlog

from pgpkeydump.exceptions import PacketDecodeError, StructureError
from pgpkeydump.models.algorithms import SignatureType
from pgpkeydump.models.keys import AssembledKey, PrimaryKey, Subkey
from pgpkeydump.models.packets import Identity, KeyPacket, PacketTag, RawPacket, Signature
from pgpkeydump.openpgp.decoder import decode_packet

logger = structlog.get_logger(__name__)

_KEY_TAGS = frozenset({PacketTag.PUBLIC_KEY, PacketTag.PUBLIC_SUBKEY})
_IDENTITY_TAGS = frozenset({PacketTag.USER_ID, PacketTag.USER_ATTRIBUTE})
_HANDLED_TAGS = _KEY_TAGS | _IDENTITY_TAGS | {PacketTag.SIGNATURE}


@dataclass
class _KeyBuilder:
    key: KeyPacket
    signatures: list[Signature] = field(default_factory=list)


@dataclass
class _IdentityBuilder:
    identity: Identity
    signatures: list[Signature] = field(default_factory=list)

    def build(self) -> Identity:
        return Identity(
            user_id=self.identity.user_id,
            user_attribute=self.identity.user_attribute,
            signatures=tuple(self.signatures),
        )


class KeyAssembler:
    """
    Single forward pass over the packets of one key.

    State is the primary key, the current key and the current identity; the
    result is only built, and frozen, by ``build()``.
    """

    def __init__(self) -> None:
        self._primary: _KeyBuilder | None = None
        self._identities: list[_IdentityBuilder] = []
        self._subkeys: list[_KeyBuilder] = []
        self._revocation_keys: list[Signature] = []
        self._current_key: _KeyBuilder | None = None
        self._current_identity: _IdentityBuilder | None = None
        self._skipping_subkey = False

    def feed(self, raw: RawPacket) -> None:
        """
        Consume one framed packet.

        Raises:
            StructureError: If the packet cannot appear at this position.
            PacketDecodeError: If the primary key packet is malformed.
        """
        if raw.tag not in _HANDLED_TAGS:
            logger.debug("Skipping packet", tag=raw.tag_name, offset=raw.offset)
            return

        self._check_position(raw.tag)

        if raw.tag == PacketTag.SIGNATURE and self._skipping_subkey:
            logger.warning("Skipping signature of malformed subkey", offset=raw.offset)
            return

        try:
            decoded = decode_packet(raw)
        except PacketDecodeError as e:
            self._recover(raw, e)
            return

        match decoded:
            case KeyPacket() if raw.tag == PacketTag.PUBLIC_KEY:
                self._add_primary(decoded)
            case KeyPacket():
                self._add_subkey(decoded)
            case Identity():
                self._add_identity(decoded)
            case Signature():
                self._add_signature(decoded)

    def build(self, armor_headers: tuple[str, ...] = ()) -> AssembledKey:
        """
        Freeze the collected packets.

        Raises:
            StructureError: If no primary key was seen.
        """
        if self._primary is None:
            msg = "not a key message"
            raise StructureError(msg)

        primary = PrimaryKey(
            key=self._primary.key,
            identities=tuple(i.build() for i in self._identities),
            signatures=tuple(self._primary.signatures),
        )
        subkeys = tuple(Subkey(key=s.key, signatures=tuple(s.signatures)) for s in self._subkeys)

        return AssembledKey(
            armor_headers=armor_headers,
            primary=primary,
            subkeys=subkeys,
            revocation_keys=tuple(self._revocation_keys),
        )

    def _check_position(self, tag: int) -> None:
        if tag == PacketTag.PUBLIC_KEY:
            if self._primary is not None:
                msg = "More than one primary key in the message"
                raise StructureError(msg)
            return

        if self._primary is None:
            msg = f"{PacketTag(tag).name} packet before any key"
            raise StructureError(msg)

    def _recover(self, raw: RawPacket, error: PacketDecodeError) -> None:
        match raw.tag:
            case PacketTag.PUBLIC_KEY:
                raise error
            case PacketTag.PUBLIC_SUBKEY:
                logger.warning("Skipping malformed subkey", offset=raw.offset, error=error.message)
                self._current_key = None
                self._current_identity = None
                self._skipping_subkey = True
            case _:
                logger.warning(
                    "Skipping malformed packet",
                    tag=raw.tag_name,
                    offset=raw.offset,
                    error=error.message,
                )

    def _add_primary(self, key: KeyPacket) -> None:
        self._primary = _KeyBuilder(key=key)
        self._current_key = self._primary
        self._current_identity = None
        logger.debug("Primary key", keyid=key.keyid_hex, algorithm=key.algorithm_name)

    def _add_subkey(self, key: KeyPacket) -> None:
        subkey = _KeyBuilder(key=key)
        self._subkeys.append(subkey)
        self._current_key = subkey
        self._current_identity = None
        self._skipping_subkey = False
        logger.debug("Subkey", keyid=key.keyid_hex, algorithm=key.algorithm_name)

    def _add_identity(self, identity: Identity) -> None:
        if self._current_key is not self._primary:
            logger.warning("Identity after a subkey, attaching it to the primary key")
        builder = _IdentityBuilder(identity=identity)
        self._identities.append(builder)
        self._current_identity = builder
        self._skipping_subkey = False

    def _add_signature(self, sig: Signature) -> None:
        primary = self._primary
        current = self._current_key or primary

        match sig.signature_type:
            case SignatureType.KEY_REVOCATION:
                if current is primary and not self._identities and _issued_by(sig, primary):
                    primary.signatures.append(sig)
                else:
                    self._revocation_keys.append(sig)
            case SignatureType.SUBKEY_REVOCATION:
                if current is not primary and _issued_by(sig, primary):
                    current.signatures.append(sig)
                else:
                    self._revocation_keys.append(sig)
            case SignatureType.SUBKEY_BINDING:
                if self._subkeys:
                    self._subkeys[-1].signatures.append(sig)
                else:
                    logger.warning("Subkey binding signature without a subkey")
                    primary.signatures.append(sig)
            case sig_type if sig_type is not None and sig_type.is_certification:
                if self._current_identity is not None:
                    self._current_identity.signatures.append(sig)
                else:
                    current.signatures.append(sig)
            case _:
                current.signatures.append(sig)


def _issued_by(sig: Signature, builder: _KeyBuilder) -> bool:
    # no issuer information at all is not evidence against the key
    return sig.is_issued_by(builder.key) is not False


def assemble(packets: Iterable[RawPacket], armor_headers: tuple[str, ...] = ()) -> AssembledKey:
    """
    Assemble a transferable public key from framed packets.

    Args:
        packets: Framed packets in stream order.
        armor_headers: Armor header values to carry into the result.

    Returns:
        The assembled key.

    Raises:
        StructureError: If the packet sequence is not a public key.
        PacketDecodeError: If the primary key packet is malformed.
        FramingError: If ``packets`` is a framer that hits a framing error.
    """
    assembler = KeyAssembler()
    for raw in packets:
        assembler.feed(raw)
    return assembler.build(armor_headers)
