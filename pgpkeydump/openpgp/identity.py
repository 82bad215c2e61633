"""
User ID and User Attribute packet decoding.

Both are stored byte for byte; text decoding of user IDs happens on export.
"""

from pgpkeydump.exceptions import PacketDecodeError
from pgpkeydump.models.packets import Identity


def decode_user_id(body: bytes) -> Identity:
    return Identity(user_id=bytes(body))


def decode_user_attribute(body: bytes) -> Identity:
    return Identity(user_attribute=bytes(body))


def user_id_text(user_id: bytes, errors: str = "replace") -> str:
    """
    Render a user ID as text.

    Args:
        user_id: Raw user ID bytes.
        errors: Codec error handler applied to invalid UTF-8.

    Raises:
        PacketDecodeError: If ``errors`` is "strict" and the user ID is not
            valid UTF-8.
    """
    try:
        return user_id.decode("utf-8", errors=errors)
    except UnicodeDecodeError as e:
        msg = f"User ID is not valid UTF-8 at byte {e.start}"
        raise PacketDecodeError(msg, tag=13) from e
