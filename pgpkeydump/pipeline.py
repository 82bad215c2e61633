"""
Decoding pipeline.

armor -> framing -> body decoding -> assembly -> export, in one forward pass
over an immutable buffer. Nothing is emitted unless every stage succeeds.
"""

import json

import structlog

from pgpkeydump.assembler import assemble
from pgpkeydump.config import DumpConfig
from pgpkeydump.exceptions import InputTooLargeError
from pgpkeydump.exporter import export_key
from pgpkeydump.models.keys import AssembledKey
from pgpkeydump.openpgp.armor import decode_armor
from pgpkeydump.openpgp.framing import iter_packets

logger = structlog.get_logger(__name__)


def load_key(data: bytes, config: DumpConfig | None = None) -> AssembledKey:
    """
    Decode a transferable public key.

    Args:
        data: Binary or ASCII-armored key.
        config: Options; ``max_input_size`` bounds the accepted input.

    Returns:
        The assembled key.

    Raises:
        InputTooLargeError: If the input exceeds ``max_input_size``.
        ArmorError: If the armor is malformed.
        FramingError: If the packet stream is malformed.
        PacketDecodeError: If the primary key packet is malformed.
        StructureError: If the packets do not form a public key.
    """
    config = config or DumpConfig()
    if len(data) > config.max_input_size:
        msg = "Input too large"
        raise InputTooLargeError(msg, size=len(data), limit=config.max_input_size)

    armored = decode_armor(bytes(data))
    key = assemble(iter_packets(armored.data), armored.headers)
    logger.debug(
        "Key loaded",
        fingerprint=key.fingerprint,
        armored=armored.is_armored,
        identities=len(key.primary.identities),
        subkeys=len(key.subkeys),
        revocations=len(key.revocation_keys),
    )
    return key


def dump_key(data: bytes, config: DumpConfig | None = None) -> dict[str, object]:
    """Decode a key and return its document representation."""
    config = config or DumpConfig()
    return export_key(load_key(data, config), config)


def dump_json(data: bytes, config: DumpConfig | None = None) -> str:
    """Decode a key and render its document as JSON."""
    config = config or DumpConfig()
    return json.dumps(dump_key(data, config), indent=config.indent)
