import pytest

from asymcrypt.crypto import CurveType, generate_key_pair


@pytest.fixture
def secp_pair():
    return generate_key_pair(CurveType.SECP256K1)


@pytest.fixture
def ed_pair():
    return generate_key_pair(CurveType.ED25519)


@pytest.fixture(params=[CurveType.SECP256K1, CurveType.ED25519], ids=lambda c: c.value)
def curve_and_pair(request):
    return request.param, generate_key_pair(request.param)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    monkeypatch.setenv("ASYMCRYPT_CONFIG", str(tmp_path / "missing-config.toml"))
