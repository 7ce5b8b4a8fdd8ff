from pathlib import Path

import pytest

from core.exceptions import ConfigurationError
from core.settings import Settings, StorageSettings, get_settings
from core.storage.factory import create_drawing_storage, create_storage
from core.storage.local import LocalStorage


def _write_config(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_match_retry_policy():
    settings = Settings()
    assert settings.storage.backend == "local"
    assert settings.storage.bucket == "excalidraw-drawings"
    policy = settings.retry.policy()
    assert policy.max_attempts == 3
    assert policy.base_delay == 1.0


def test_load_from_yaml(tmp_path):
    path = _write_config(
        tmp_path,
        "storage:\n  backend: s3\n  bucket: sketches\n  region: eu-west-1\nretry:\n  base_delay_seconds: 0.5\n",
    )
    settings = Settings.load(path)
    assert settings.storage.backend == "s3"
    assert settings.storage.bucket == "sketches"
    assert settings.retry.policy().delay_for(2) == 1.0


def test_get_settings_uses_env_path(tmp_path, monkeypatch):
    path = _write_config(tmp_path, "storage:\n  bucket: from-env\n")
    monkeypatch.setenv("SKETCHVAULT_CONFIG", str(path))
    assert get_settings().storage.bucket == "from-env"


def test_missing_file_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        Settings.load(tmp_path / "nope.yaml")


@pytest.mark.parametrize(
    "body",
    ["retry:\n  max_attempts: 0\n", "storage:\n  backend: ftp\n", "storage:\n  bucket: '  '\n"],
)
def test_invalid_config_raises_value_error(tmp_path, body):
    with pytest.raises(ValueError, match="Invalid configuration"):
        Settings.load(_write_config(tmp_path, body))


def test_s3_requires_credentials(monkeypatch):
    monkeypatch.delenv("STORAGE_ACCESS_KEY_ID", raising=False)
    monkeypatch.delenv("STORAGE_SECRET_ACCESS_KEY", raising=False)
    settings = Settings(storage=StorageSettings(backend="s3"))
    assert settings.storage.missing_requirements() == ["STORAGE_ACCESS_KEY_ID", "STORAGE_SECRET_ACCESS_KEY"]

    with pytest.raises(ConfigurationError) as excinfo:
        create_storage(settings)
    assert "STORAGE_ACCESS_KEY_ID" in excinfo.value.message
    assert "STORAGE_SECRET_ACCESS_KEY" in excinfo.value.message


def test_s3_backend_is_built_when_configured(monkeypatch):
    pytest.importorskip("boto3")
    monkeypatch.setenv("STORAGE_ACCESS_KEY_ID", "key")
    monkeypatch.setenv("STORAGE_SECRET_ACCESS_KEY", "secret")
    settings = Settings(
        storage=StorageSettings(backend="s3", bucket="sketches", endpoint_url="http://minio:9000", region="us-east-1")
    )
    backend = create_storage(settings)
    assert backend.public_url("drawings/a/data.json") == "http://minio:9000/sketches/drawings/a/data.json"


def test_local_backend_and_client(tmp_path):
    settings = Settings(storage=StorageSettings(local_root=tmp_path / "files"), retry={"max_attempts": 2})
    backend = create_storage(settings)
    assert isinstance(backend, LocalStorage)
    assert (tmp_path / "files").is_dir()

    client = create_drawing_storage(settings)
    assert client.policy.max_attempts == 2
