import io
import json

import pytest

from asymctl.main import build_parser, main


def run(capsys, *argv):
    code = main(list(argv))
    captured = capsys.readouterr()
    return code, captured.out.strip(), captured.err.strip()


def keygen(capsys, *extra):
    code, out, _ = run(capsys, *extra, "keygen")
    assert code == 0
    pair = json.loads(out)
    return pair["publicKey"], pair["privateKey"]


@pytest.mark.parametrize("curve", ["secp256k1", "ed25519"])
def test_encrypt_decrypt(capsys, curve):
    public_key, private_key = keygen(capsys, "--curve", curve)

    code, envelope, _ = run(capsys, "--curve", curve, "encrypt", public_key, "Hello!")
    assert code == 0
    assert json.loads(envelope)["publicKey"] == public_key

    code, out, _ = run(capsys, "--curve", curve, "decrypt", private_key, envelope)
    assert code == 0
    assert out == "Hello!"


def test_decrypt_from_stdin(capsys, monkeypatch):
    public_key, private_key = keygen(capsys)
    _, envelope, _ = run(capsys, "encrypt", public_key, "piped")

    monkeypatch.setattr("sys.stdin", io.StringIO(envelope + "\n"))
    code, out, _ = run(capsys, "decrypt", private_key, "-")
    assert code == 0
    assert out == "piped"


def test_scheme_option(capsys):
    public_key, private_key = keygen(capsys)
    _, envelope, _ = run(capsys, "encrypt", public_key, "hi", "--scheme", "my.scheme")
    assert json.loads(envelope)["scheme"] == "my.scheme"

    code, _, err = run(capsys, "decrypt", private_key, envelope)
    assert code == 1
    assert err.startswith("Error:")

    code, out, _ = run(capsys, "decrypt", private_key, envelope, "--scheme", "my.scheme")
    assert code == 0
    assert out == "hi"


def test_cipher_option(capsys):
    public_key, private_key = keygen(capsys)
    _, envelope, _ = run(capsys, "--cipher", "aes-128-ctr", "encrypt", public_key, "ctr")
    assert json.loads(envelope)["iv"] == "00" * 16

    code, out, _ = run(capsys, "--cipher", "aes-128-ctr", "decrypt", private_key, envelope)
    assert code == 0
    assert out == "ctr"


def test_onion(capsys):
    pairs = [keygen(capsys) for _ in range(3)]
    public_keys = [p[0] for p in pairs]
    private_keys = [p[1] for p in pairs]

    code, envelope, _ = run(capsys, "encrypt-multi", "layered", *public_keys)
    assert code == 0

    code, out, _ = run(capsys, "decrypt-multi", envelope, *private_keys)
    assert code == 0
    assert out == "layered"


def test_onion_show_all(capsys):
    pairs = [keygen(capsys) for _ in range(2)]
    code, out, _ = run(capsys, "encrypt-multi", "layered", "--all", *[p[0] for p in pairs])
    assert code == 0
    layers = json.loads(out)
    assert [layer["publicKey"] for layer in layers] == [p[0] for p in pairs]


def test_sign_verify(capsys):
    public_key, private_key = keygen(capsys)
    code, signature, _ = run(capsys, "sign", private_key, "message")
    assert code == 0
    assert len(signature) == 128

    assert run(capsys, "verify", public_key, "message", signature)[:2] == (0, "valid")
    assert run(capsys, "verify", public_key, "other", signature)[:2] == (1, "invalid")


def test_decrypt_with_wrong_key(capsys):
    public_key, _ = keygen(capsys)
    _, other_private = keygen(capsys)
    _, envelope, _ = run(capsys, "encrypt", public_key, "hi")

    code, out, err = run(capsys, "decrypt", other_private, envelope)
    assert code == 1
    assert out == ""
    assert "MAC" in err


def test_bad_config_value(capsys):
    code, _, err = run(capsys, "--curve", "p256", "keygen")
    assert code == 1
    assert err.startswith("Configuration error:")


def test_config_file(capsys, tmp_path):
    path = tmp_path / "config.toml"
    path.write_text('[ecies]\ncurve_type = "ed25519"\n')
    public_key, _ = keygen(capsys, "-c", str(path))
    # X25519 public keys are 32 bytes
    assert len(public_key) == 64


def test_no_command(capsys):
    assert main([]) == 1


def test_parser_commands():
    parser = build_parser()
    args = parser.parse_args(["encrypt-multi", "msg", "a", "b", "--all"])
    assert args.command == "encrypt-multi"
    assert args.public_keys == ["a", "b"]
    assert args.all
