"""
pgpkeydump exception hierarchy.

All exceptions inherit from PgpKeyDumpError for easy catching.
"""

from typing import Any


class PgpKeyDumpError(Exception):
    """Base exception for all pgpkeydump errors."""

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class ArmorError(PgpKeyDumpError):
    """ASCII armor is malformed (markers, base64 or checksum)."""


class FramingError(PgpKeyDumpError):
    """Packet header is invalid or a declared length overruns the input."""

    def __init__(self, message: str, *, offset: int | None = None) -> None:
        super().__init__(message, offset=offset)
        self.offset = offset


class PacketDecodeError(PgpKeyDumpError):
    """Packet body is malformed for its packet type or algorithm."""

    def __init__(self, message: str, *, tag: int | None = None) -> None:
        super().__init__(message, tag=tag)
        self.tag = tag


class UnsupportedAlgorithmError(PgpKeyDumpError):
    """Public key algorithm has no parameter decoder."""

    def __init__(self, message: str, *, algorithm: int) -> None:
        super().__init__(message, algorithm=algorithm)
        self.algorithm = algorithm


class StructureError(PgpKeyDumpError):
    """Packets do not form a transferable public key."""


class InputTooLargeError(PgpKeyDumpError):
    """Input exceeds the configured maximum size."""

    def __init__(self, message: str, *, size: int, limit: int) -> None:
        super().__init__(message, size=size, limit=limit)
        self.size = size
        self.limit = limit
