"""Unit tests for the sealbox command line front end."""

import hashlib
import stat

import pytest

from sealbox.frontend.cli import app

NONCE = "00112233445566778899aabbccddeeff"


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("SEALBOX_CURVE", "SEALBOX_MAC_SIZE", "SEALBOX_DIGEST", "SEALBOX_KDF_HASH"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def keys(tmp_path, capsys):
    """Key files for alice and bob generated through the CLI."""
    paths = {}
    for who in ("alice", "bob"):
        pub = tmp_path / f"{who}.pub"
        priv = tmp_path / f"{who}.key"
        assert app.main(["keygen", "--public-out", str(pub), "--private-out", str(priv)]) == 0
        paths[who] = (pub, priv)
    capsys.readouterr()
    return paths


def test_keygen_writes_raw_keys(keys, tmp_path):
    pub, priv = keys["alice"]
    assert len(pub.read_bytes()) == 65
    assert len(priv.read_bytes()) == 32
    assert stat.S_IMODE(priv.stat().st_mode) == 0o600


def test_keygen_prints_public_key(tmp_path, capsys):
    pub = tmp_path / "k.pub"
    app.main(["keygen", "--public-out", str(pub), "--private-out", str(tmp_path / "k.key")])
    assert capsys.readouterr().out.strip() == pub.read_bytes().hex()


def test_encrypt_decrypt_roundtrip(keys, tmp_path):
    alice_pub, alice_priv = keys["alice"]
    bob_pub, bob_priv = keys["bob"]
    plain = tmp_path / "msg.txt"
    aad = tmp_path / "msg.aad"
    plain.write_bytes(b"meet me at the usual place")
    aad.write_bytes(b"header")

    rc = app.main([
        "encrypt", str(plain), str(tmp_path / "msg.enc"),
        "--private", str(alice_priv), "--peer-public", str(bob_pub),
        "--nonce", NONCE, "--aad", str(aad),
    ])
    assert rc == 0

    rc = app.main([
        "decrypt", str(tmp_path / "msg.enc"), str(tmp_path / "msg.out"),
        "--private", str(bob_priv), "--peer-public", str(alice_pub),
        "--nonce", NONCE, "--aad", str(aad),
    ])
    assert rc == 0
    assert (tmp_path / "msg.out").read_bytes() == plain.read_bytes()


def test_decrypt_failure_returns_1(keys, tmp_path, caplog):
    alice_pub, alice_priv = keys["alice"]
    bob_pub, _ = keys["bob"]
    plain = tmp_path / "msg.txt"
    plain.write_bytes(b"secret")
    app.main([
        "encrypt", str(plain), str(tmp_path / "msg.enc"),
        "--private", str(alice_priv), "--peer-public", str(bob_pub), "--nonce", NONCE,
    ])

    # alice cannot decrypt with her own public key as the peer
    rc = app.main([
        "decrypt", str(tmp_path / "msg.enc"), str(tmp_path / "msg.out"),
        "--private", str(alice_priv), "--peer-public", str(alice_pub), "--nonce", NONCE,
    ])
    assert rc == 1
    assert not (tmp_path / "msg.out").exists()
    assert "decrypt failed" in caplog.text


def test_missing_key_file_returns_1(tmp_path):
    plain = tmp_path / "msg.txt"
    plain.write_bytes(b"x")
    rc = app.main([
        "encrypt", str(plain), str(tmp_path / "msg.enc"),
        "--private", str(tmp_path / "nope.key"), "--peer-public", str(tmp_path / "nope.pub"),
        "--nonce", NONCE,
    ])
    assert rc == 1


def test_bad_nonce_hex_is_usage_error(tmp_path):
    with pytest.raises(SystemExit) as exc:
        app.main([
            "encrypt", "a", "b", "--private", "k", "--peer-public", "p", "--nonce", "zz",
        ])
    assert exc.value.code == 2


def test_digest_and_verify(tmp_path, capsys):
    f1 = tmp_path / "a.bin"
    f2 = tmp_path / "b.bin"
    f1.write_bytes(b"aaa")
    f2.write_bytes(b"bbb")
    out = tmp_path / "files.sha512"

    assert app.main(["digest", str(f1), str(f2), "--output", str(out)]) == 0
    assert capsys.readouterr().out.strip() == hashlib.sha512(b"aaabbb").hexdigest()

    assert app.main(["verify", str(f1), str(f2), "--digest", str(out)]) == 0
    assert capsys.readouterr().out.strip() == "OK"

    assert app.main(["verify", str(f2), str(f1), "--digest", str(out)]) == 1


def test_invalid_env_config_returns_1(tmp_path, monkeypatch):
    monkeypatch.setenv("SEALBOX_MAC_SIZE", "7")
    f1 = tmp_path / "a.bin"
    f1.write_bytes(b"aaa")
    assert app.main(["digest", str(f1), "--output", str(tmp_path / "d")]) == 1
