"""Tests for client configuration profiles."""

import stat

import pytest

from conftest import FakeTransport

import s3kit.config as config_module
from s3kit import AddressingStyle, Client, ClientConfig, ConfigurationError, StaticProvider


@pytest.fixture
def profiles_dir(tmp_path, monkeypatch):
    path = tmp_path / "profiles"
    monkeypatch.setattr(config_module, "PROFILES_DIR", path)
    return path


def test_minimal_config():
    config = ClientConfig(endpoint="localhost:9000", region="us-east-1")
    assert config.secure is True
    assert config.timeout == 60.0
    assert config.access_key is None


def test_validation():
    with pytest.raises(ValueError, match="endpoint"):
        ClientConfig(endpoint="  ")
    with pytest.raises(ValueError, match="timeout"):
        ClientConfig(endpoint="localhost", timeout=0)
    with pytest.raises(ValueError, match="log_level"):
        ClientConfig(endpoint="localhost", log_level="LOUD")
    with pytest.raises(ValueError):
        ClientConfig(endpoint="localhost", bucket="extra")

    assert ClientConfig(endpoint="localhost", log_level="debug").log_level == "DEBUG"


def test_from_yaml_string():
    config = ClientConfig.from_yaml_string(
        "endpoint: https://play.min.io\n"
        "region: us-east-1\n"
        "access_key: Q3AM3UQ867SPQQA43P2F\n"
        "secret_key: zuf+tfteSlswRu7BJ86wekitnifILbZam1KYY3TG\n"
        "timeout: 30\n"
    )
    assert config.endpoint == "https://play.min.io"
    assert config.timeout == 30


@pytest.mark.parametrize("text", [
    "endpoint: [unclosed",
    "- just\n- a list\n",
    "region: us-east-1\n",
    "endpoint: localhost\nunknown_field: 1\n",
])
def test_from_yaml_string_errors(text):
    with pytest.raises(ConfigurationError):
        ClientConfig.from_yaml_string(text)


def test_to_yaml_string_hides_secrets():
    config = ClientConfig(
        endpoint="localhost:9000",
        region="us-east-1",
        access_key="AKIAEXAMPLE",
        secret_key="very-secret",
        session_token="token",
    )
    text = config.to_yaml_string()
    assert "AKIAEXAMPLE" in text
    assert "very-secret" not in text
    assert "token" not in text
    assert "very-secret" in config.to_yaml_string(include_secrets=True)


def test_save_and_load_profile(profiles_dir):
    config = ClientConfig(
        endpoint="localhost:9000", region="us-east-1", secure=False,
        access_key="AKIAEXAMPLE", secret_key="very-secret",
    )

    path = config.save("local")

    assert path == profiles_dir / "local.yaml"
    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert ClientConfig.load("local") == config
    assert ClientConfig.list_profiles() == ["local"]


def test_list_profiles_skips_invalid(profiles_dir):
    profiles_dir.mkdir(parents=True)
    (profiles_dir / "broken.yaml").write_text("endpoint: [")
    ClientConfig(endpoint="localhost", region="us-east-1").save("ok")

    assert ClientConfig.list_profiles() == ["ok"]


def test_load_missing_profile(profiles_dir):
    with pytest.raises(FileNotFoundError, match="No s3kit profiles"):
        ClientConfig.load("missing")

    ClientConfig(endpoint="localhost", region="us-east-1").save("other")
    with pytest.raises(FileNotFoundError, match="Available: other"):
        ClientConfig.load("missing")


def test_build_endpoint():
    endpoint = ClientConfig(endpoint="s3.eu-west-1.amazonaws.com").build_endpoint()
    assert endpoint.region == "eu-west-1"
    assert endpoint.addressing_style is AddressingStyle.VIRTUAL_HOST

    endpoint = ClientConfig(endpoint="localhost:9000", region="us-east-1", secure=False).build_endpoint()
    assert endpoint.scheme == "http"

    with pytest.raises(ConfigurationError, match="cannot determine region"):
        ClientConfig(endpoint="minio.internal").build_endpoint()


def test_build_client():
    config = ClientConfig(
        endpoint="localhost:9000", region="us-east-1", secure=False,
        access_key="AKIAEXAMPLE", secret_key="very-secret", timeout=5,
    )
    client = config.build_client(transport=FakeTransport())

    assert isinstance(client, Client)
    assert client.endpoint.netloc == "localhost:9000"
    assert client.provider.retrieve().access_key == "AKIAEXAMPLE"


def test_build_client_without_keys():
    config = ClientConfig(endpoint="localhost:9000", region="us-east-1")
    with pytest.raises(ConfigurationError, match="access_key"):
        config.build_client(transport=FakeTransport())

    provider = StaticProvider("AKIAOTHER", "secret")
    client = config.build_client(provider=provider, transport=FakeTransport())
    assert client.provider is provider
