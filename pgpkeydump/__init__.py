"""
pgpkeydump: decode OpenPGP public keys into structured JSON.

Example:
    ```python
    from pgpkeydump import dump_json

    with open("key.asc", "rb") as f:
        print(dump_json(f.read()))
    ```
"""

from pgpkeydump.config import DumpConfig
from pgpkeydump.exceptions import (
    ArmorError,
    FramingError,
    InputTooLargeError,
    PacketDecodeError,
    PgpKeyDumpError,
    StructureError,
    UnsupportedAlgorithmError,
)
from pgpkeydump.models.keys import AssembledKey, PrimaryKey, Subkey
from pgpkeydump.pipeline import dump_json, dump_key, load_key

__version__ = "0.1.0"

__all__ = [
    # Pipeline
    "load_key",
    "dump_key",
    "dump_json",
    # Config
    "DumpConfig",
    # Models
    "AssembledKey",
    "PrimaryKey",
    "Subkey",
    # Exceptions
    "PgpKeyDumpError",
    "ArmorError",
    "FramingError",
    "PacketDecodeError",
    "UnsupportedAlgorithmError",
    "StructureError",
    "InputTooLargeError",
]
