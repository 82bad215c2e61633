from collections.abc import Callable
from pathlib import Path

import pytest

from pgpkeydump.tests.utils.material import rsa_numbers
from pgpkeydump.tests.utils.packets import (
    creation_subpacket,
    issuer_subpacket,
    packet,
    rsa_key_body,
    signature_body,
    user_id_packet,
    v4_fingerprint,
)

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def read_fixture() -> Callable[[str], bytes]:
    def _read(name: str) -> bytes:
        return (DATA_DIR / name).read_bytes()

    return _read


@pytest.fixture(scope="session")
def primary_body() -> bytes:
    n, e = rsa_numbers()
    return rsa_key_body(n, e)


@pytest.fixture(scope="session")
def primary_keyid(primary_body: bytes) -> bytes:
    return v4_fingerprint(primary_body)[-8:]


@pytest.fixture
def make_signature(primary_keyid: bytes) -> Callable[..., bytes]:
    """Signature packet issued by the primary key unless ``issuer`` says otherwise."""

    def _make(sig_type: int, *, issuer: bytes | None = None) -> bytes:
        issuer = primary_keyid if issuer is None else issuer
        body = signature_body(
            sig_type,
            hashed=creation_subpacket(1_600_000_100),
            unhashed=issuer_subpacket(issuer) if issuer else b"",
        )
        return packet(2, body)

    return _make


@pytest.fixture
def make_subkey() -> Callable[..., bytes]:
    def _make(bits: int = 1024) -> bytes:
        n, e = rsa_numbers(bits)
        return packet(14, rsa_key_body(n, e, creation_time=1_600_000_050))

    return _make


@pytest.fixture
def make_key_stream(primary_body: bytes, make_signature: Callable[..., bytes]) -> Callable[..., bytes]:
    """Primary key followed by one self-certified user ID, then ``extra`` packets."""

    def _make(*extra: bytes, user_id: str = "Test User <test@example.com>") -> bytes:
        return packet(6, primary_body) + user_id_packet(user_id) + make_signature(0x13) + b"".join(extra)

    return _make
