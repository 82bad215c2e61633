"""
Multi-precision integers and fixed-size fields of packet bodies.

Every reader takes the body and an offset and returns the decoded value with
the offset just past it.
"""

from pgpkeydump.exceptions import PacketDecodeError
from pgpkeydump.models.packets import MPI


def read_bytes(body: bytes, offset: int, count: int, what: str) -> tuple[bytes, int]:
    """Read ``count`` raw bytes."""
    end = offset + count
    if count < 0 or end > len(body):
        msg = f"Truncated {what}: need {count} bytes, have {max(len(body) - offset, 0)}"
        raise PacketDecodeError(msg)
    return body[offset:end], end


def read_uint(body: bytes, offset: int, size: int, what: str) -> tuple[int, int]:
    """Read a big-endian unsigned integer of ``size`` bytes."""
    raw, offset = read_bytes(body, offset, size, what)
    return int.from_bytes(raw, "big"), offset


def read_octet(body: bytes, offset: int, what: str) -> tuple[int, int]:
    if offset >= len(body):
        msg = f"Truncated {what}: need 1 byte, have 0"
        raise PacketDecodeError(msg)
    return body[offset], offset + 1


def decode_mpi(body: bytes, offset: int, what: str = "MPI") -> tuple[MPI, int]:
    """
    Parse an MPI (Multi-Precision Integer) from OpenPGP format.

    MPI format: [bit_count(2 bytes)] + [ceil(bit_count / 8) bytes, big-endian]

    The declared bit count is kept as is: leading zero bits are tolerated, but
    a value with more significant bits than declared is rejected.

    Returns:
        Tuple of (MPI, offset past the MPI).

    Raises:
        PacketDecodeError: If the MPI overruns the body or its value does not
            fit the declared bit count.
    """
    bits, offset = read_uint(body, offset, 2, f"{what} length")
    byte_count = (bits + 7) // 8

    if offset + byte_count > len(body):
        msg = f"{what} data incomplete: need {byte_count}, have {len(body) - offset}"
        raise PacketDecodeError(msg)

    value = body[offset : offset + byte_count]
    if int.from_bytes(value, "big").bit_length() > bits:
        msg = f"{what} value exceeds its declared {bits} bits"
        raise PacketDecodeError(msg)

    return MPI(bits=bits, value=value), offset + byte_count
