import json
from collections.abc import Callable

import pytest

from pgpkeydump.config import DumpConfig
from pgpkeydump.exceptions import ArmorError, FramingError, InputTooLargeError, StructureError
from pgpkeydump.pipeline import dump_json, dump_key, load_key

BOB_FINGERPRINT = "CD2FA96EAAE7222AF644AF08627E1E8CA3B1F8EF"
ALICE_FINGERPRINT = "0CDEB235AD581F21E3DCEBB2D8693E36DA58A793"


def test_dump_key_harm(read_fixture: Callable[[str], bytes]) -> None:
    result = dump_key(read_fixture("harm.asc"))

    assert result["armor_headers"] == ["GnuPG v1.4.11 (GNU/Linux)"]
    assert result["fingerprint"] == "312B1995FDBDE794CC60EB35B7C32F6760E5CEC0"
    assert result["keyid"] == "B7C32F6760E5CEC0"
    assert result["userids"] == ["Harm Geerts (TEST) <harm@example.com>"]
    primary = result["primary_key"]
    assert primary["algorithm"] == "RSA"
    assert primary["parameters"]["n"]["bitness"] == 1024
    assert primary["parameters"]["e"] == {"bitness": 17, "value": "010001"}
    (subkey,) = result["subkeys"]
    assert subkey["fingerprint"] == "AB933A9DF55AA0313450C524DD070DB4AF37FBFF"
    assert subkey["keyid"] == "DD070DB4AF37FBFF"
    assert result["revocation_keys"] == []


def test_dump_key_bob_has_two_subkeys(read_fixture: Callable[[str], bytes]) -> None:
    """Same shape as key 46C39716...33B3C (RSA-4096, two RSA-2048 subkeys), which is not shipped."""
    result = dump_key(read_fixture("bob.asc"))

    assert result["armor_headers"] == []
    assert result["fingerprint"] == BOB_FINGERPRINT
    assert result["keyid"] == "627E1E8CA3B1F8EF"
    assert result["userids"] == ["Bob Builder <bob@example.net>"]
    parameters = result["primary_key"]["parameters"]
    assert parameters["n"]["bitness"] == 4096
    assert len(parameters["n"]["value"]) == 1024
    assert parameters["e"] == {"bitness": 17, "value": "010001"}
    assert [s["fingerprint"] for s in result["subkeys"]] == [
        "A01071AD07B9FECD581E9F59581DF98B6B1661BC",
        "305DF90E9D6120F3C9425B626B837AD6D0284021",
    ]
    assert [s["parameters"]["n"]["bitness"] for s in result["subkeys"]] == [2048, 2048]
    assert result["revocation_keys"] == []


def test_dump_key_binary_matches_armored(read_fixture: Callable[[str], bytes]) -> None:
    config = DumpConfig(include_signatures=True)

    assert dump_key(read_fixture("bob.gpg"), config) == dump_key(read_fixture("bob.asc"), config)


def test_dump_key_bob_signatures(read_fixture: Callable[[str], bytes]) -> None:
    result = dump_key(read_fixture("bob.gpg"), DumpConfig(include_signatures=True))

    primary = result["primary_key"]
    assert primary["creation"] == "2023-06-15T12:00:00Z"
    assert [primary[name] for name in list(primary)[5:]] == [[], [], [], [], []]
    (identity,) = result["identities"]
    (certification,) = identity["signatures"]
    assert certification["type"] == "PositiveCertification"
    assert certification["hash_algorithm"] == "SHA512"
    assert certification["digest_prefix"] == "d807"
    assert certification["issuer_fingerprints"] == [BOB_FINGERPRINT]

    encryption, signing = result["subkeys"]
    (binding,) = encryption["self_signatures"]
    assert encryption["certifications"] == []
    assert binding["digest_prefix"] == "b2dd"
    assert binding["key_flags"]["storage_encryption"] is True
    assert binding["embedded_signatures"] == []
    (binding,) = signing["self_signatures"]
    assert binding["digest_prefix"] == "6fe8"
    assert binding["key_flags"]["signing"] is True
    (back_signature,) = binding["embedded_signatures"]
    assert back_signature["type"] == "PrimaryKeyBinding"
    assert back_signature["issuer_key_ids"] == ["6B837AD6D0284021"]


def test_dump_key_alice_curves(read_fixture: Callable[[str], bytes]) -> None:
    result = dump_key(read_fixture("alice.asc"))

    assert result["fingerprint"] == ALICE_FINGERPRINT
    assert result["keyid"] == "D8693E36DA58A793"
    assert result["userids"] == ["Alice Example <alice@example.org>"]
    assert result["primary_key"]["algorithm"] == "EdDSA"
    assert result["primary_key"]["parameters"] == {
        "algorithm": "EdDSA",
        "curve": "Ed25519",
        "q": {
            "bitness": 263,
            "value": "403b236a4a13c25a85d1bcc246225f6e8b3809a0c3e5cdba26f40d89da9c826b7b",
        },
    }
    (subkey,) = result["subkeys"]
    assert subkey["algorithm"] == "ECDH"
    assert subkey["fingerprint"] == "137A076CDDFF009BEB3EA2DF7BDE3C1307FD3089"
    parameters = subkey["parameters"]
    assert parameters["curve"] == "Curve25519"
    assert parameters["q"]["bitness"] == 263
    assert (parameters["hash"], parameters["sym"]) == ("SHA256", "AES128")


def test_dump_key_alice_certification(read_fixture: Callable[[str], bytes]) -> None:
    result = dump_key(read_fixture("alice.asc"), DumpConfig(include_signatures=True))

    (certification,) = result["identities"][0]["signatures"]
    assert certification["creation"] == "2024-01-02T03:04:05Z"
    assert certification["algorithm"] == "EdDSA"
    assert certification["hash_algorithm"] == "SHA256"
    assert certification["digest_prefix"] == "f920"
    assert certification["key_flags"] == {
        "authentication": False,
        "certification": True,
        "signing": True,
        "storage_encryption": False,
        "transport_encryption": False,
    }
    assert certification["issuer_key_ids"] == ["D8693E36DA58A793"]
    assert certification["issuer_fingerprints"] == [ALICE_FINGERPRINT]
    assert certification["expiration"] is None


def test_dump_key_attaches_self_revocation_to_primary(read_fixture: Callable[[str], bytes]) -> None:
    result = dump_key(read_fixture("alice-revoked.asc"), DumpConfig(include_signatures=True))

    primary = result["primary_key"]
    (revocation,) = primary["self_revocations"]
    assert primary["other_revocations"] == []
    assert primary["self_signatures"] == []
    assert revocation["type"] == "KeyRevocation"
    assert revocation["digest_prefix"] == "96df"
    assert result["revocation_keys"] == []
    assert result["userids"] == ["Alice Example <alice@example.org>"]


def test_dump_key_is_idempotent(read_fixture: Callable[[str], bytes]) -> None:
    data = read_fixture("harm.asc")

    assert dump_json(data) == dump_json(data)


def test_dump_json_indents_by_default(read_fixture: Callable[[str], bytes]) -> None:
    text = dump_json(read_fixture("harm.asc"))

    assert text.startswith('{\n  "armor_headers"')
    assert json.loads(text)["keyid"] == "B7C32F6760E5CEC0"


def test_dump_json_compact(read_fixture: Callable[[str], bytes]) -> None:
    text = dump_json(read_fixture("harm.asc"), DumpConfig(indent=None))

    assert "\n" not in text


def test_load_key_accepts_crlf_armor(read_fixture: Callable[[str], bytes]) -> None:
    data = read_fixture("alice.asc").replace(b"\n", b"\r\n")

    assert load_key(data).fingerprint == ALICE_FINGERPRINT


def test_load_key_rejects_oversized_input(read_fixture: Callable[[str], bytes]) -> None:
    data = read_fixture("bob.gpg")

    with pytest.raises(InputTooLargeError) as exc_info:
        load_key(data, DumpConfig(max_input_size=1024))

    assert exc_info.value.context == {"size": len(data), "limit": 1024}


def test_load_key_rejects_corrupted_armor(read_fixture: Callable[[str], bytes]) -> None:
    data = read_fixture("harm.asc").replace(b"=pxFX", b"=AAAA")

    with pytest.raises(ArmorError, match="checksum mismatch"):
        load_key(data)


def test_load_key_rejects_truncated_binary(read_fixture: Callable[[str], bytes]) -> None:
    with pytest.raises(FramingError, match="exceeds remaining input"):
        load_key(read_fixture("bob.gpg")[:600])


def test_load_key_rejects_garbage() -> None:
    with pytest.raises(FramingError, match="Invalid packet header"):
        load_key(b"hello, world")


def test_load_key_rejects_empty_input() -> None:
    with pytest.raises(StructureError, match="not a key message"):
        load_key(b"")
