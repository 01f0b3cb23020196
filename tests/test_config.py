"""Tests for settings loading (YAML file and environment variables)."""

import pytest
import yaml

from cloudport.api_client import SERVICE_VPC
from cloudport.config import load_settings

_ENV_VARS = (
    "APP_CONFIG_FILE",
    "CLOUD_PROJECT_ID",
    "CLOUD_REGION_ID",
    "CLOUD_VPC_ENDPOINT",
    "CLOUD_API_TOKEN",
    "CLOUD_API_TOKEN_FILE",
    "CLOUD_TIMEOUT",
    "CLOUD_VERIFY_SSL",
    "LOG_LEVEL",
    "DATA_DIR",
    "DEVICE_ID",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write_yaml(tmp_path, data) -> str:
    path = tmp_path / "cloudport.yaml"
    path.write_text(yaml.safe_dump(data), encoding="utf-8")
    return str(path)


def _base_config(tmp_path) -> dict:
    return {
        "cloud": {
            "endpoints": {SERVICE_VPC: "https://vpc.{region_id}.example.com/v1/{project_id}/"},
            "project_id": "proj-1",
            "region_id": "region-1",
            "api_token": "tok-123",
        },
        "runtime": {"data_dir": str(tmp_path / "data")},
    }


class TestYamlSettings:
    def test_load_from_yaml(self, tmp_path, monkeypatch):
        cfg = _base_config(tmp_path)
        cfg["cloud"]["timeout"] = 45
        cfg["cloud"]["verify_ssl"] = False
        cfg["runtime"].update({"log_level": "DEBUG", "device_id": " vm-1 "})
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, cfg))

        settings = load_settings()

        assert settings.endpoints == {SERVICE_VPC: "https://vpc.region-1.example.com/v1/proj-1"}
        assert settings.project_id == "proj-1"
        assert settings.region_id == "region-1"
        assert settings.api_token == "tok-123"
        assert settings.timeout == 45
        assert settings.verify_ssl is False
        assert settings.log_level == "DEBUG"
        assert settings.device_id == "vm-1"
        assert settings.data_dir.is_dir()

    def test_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, _base_config(tmp_path)))
        settings = load_settings()
        assert settings.timeout == 30
        assert settings.verify_ssl is True
        assert settings.log_level == "INFO"
        assert settings.device_id is None

    def test_token_file(self, tmp_path, monkeypatch):
        token_file = tmp_path / "token"
        token_file.write_text("from-file\n", encoding="utf-8")
        cfg = _base_config(tmp_path)
        del cfg["cloud"]["api_token"]
        cfg["cloud"]["api_token_file"] = str(token_file)
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, cfg))

        assert load_settings().api_token == "from-file"

    def test_missing_file(self, tmp_path, monkeypatch):
        monkeypatch.setenv("APP_CONFIG_FILE", str(tmp_path / "nope.yaml"))
        with pytest.raises(RuntimeError, match="not found"):
            load_settings()

    def test_missing_vpc_endpoint(self, tmp_path, monkeypatch):
        cfg = _base_config(tmp_path)
        cfg["cloud"]["endpoints"] = {"ecs": "https://ecs.example.com"}
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, cfg))
        with pytest.raises(RuntimeError, match="endpoints.vpc"):
            load_settings()

    def test_endpoint_without_host(self, tmp_path, monkeypatch):
        cfg = _base_config(tmp_path)
        cfg["cloud"]["endpoints"] = {SERVICE_VPC: "/v1/proj-1"}
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, cfg))
        with pytest.raises(RuntimeError, match="no host"):
            load_settings()

    def test_missing_token(self, tmp_path, monkeypatch):
        cfg = _base_config(tmp_path)
        del cfg["cloud"]["api_token"]
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, cfg))
        with pytest.raises(RuntimeError, match="api_token"):
            load_settings()

    def test_bad_timeout(self, tmp_path, monkeypatch):
        cfg = _base_config(tmp_path)
        cfg["cloud"]["timeout"] = "soon"
        monkeypatch.setenv("APP_CONFIG_FILE", _write_yaml(tmp_path, cfg))
        with pytest.raises(RuntimeError, match="timeout"):
            load_settings()


class TestEnvSettings:
    def _set_required(self, monkeypatch, tmp_path):
        monkeypatch.setenv("CLOUD_PROJECT_ID", "proj-1")
        monkeypatch.setenv("CLOUD_REGION_ID", "region-1")
        monkeypatch.setenv("CLOUD_VPC_ENDPOINT", "https:///vpc.{region_id}.example.com/v1/{project_id}")
        monkeypatch.setenv("CLOUD_API_TOKEN", "tok-env")
        monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))

    def test_load_from_env(self, tmp_path, monkeypatch):
        self._set_required(monkeypatch, tmp_path)
        monkeypatch.setenv("CLOUD_VERIFY_SSL", "no")
        monkeypatch.setenv("DEVICE_ID", "vm-9")

        settings = load_settings()

        assert settings.endpoints == {SERVICE_VPC: "https://vpc.region-1.example.com/v1/proj-1"}
        assert settings.api_token == "tok-env"
        assert settings.verify_ssl is False
        assert settings.device_id == "vm-9"
        assert settings.timeout == 30

    def test_missing_project(self, tmp_path, monkeypatch):
        self._set_required(monkeypatch, tmp_path)
        monkeypatch.delenv("CLOUD_PROJECT_ID")
        with pytest.raises(RuntimeError, match="CLOUD_PROJECT_ID"):
            load_settings()

    def test_invalid_bool(self, tmp_path, monkeypatch):
        self._set_required(monkeypatch, tmp_path)
        monkeypatch.setenv("CLOUD_VERIFY_SSL", "maybe")
        with pytest.raises(RuntimeError, match="CLOUD_VERIFY_SSL"):
            load_settings()

    def test_invalid_timeout(self, tmp_path, monkeypatch):
        self._set_required(monkeypatch, tmp_path)
        monkeypatch.setenv("CLOUD_TIMEOUT", "abc")
        with pytest.raises(RuntimeError, match="CLOUD_TIMEOUT"):
            load_settings()

    def test_missing_token(self, tmp_path, monkeypatch):
        self._set_required(monkeypatch, tmp_path)
        monkeypatch.delenv("CLOUD_API_TOKEN")
        monkeypatch.setenv("CLOUD_API_TOKEN_FILE", str(tmp_path / "missing-token"))
        with pytest.raises(RuntimeError, match="token"):
            load_settings()

    def test_data_dir_under_a_file(self, tmp_path, monkeypatch):
        self._set_required(monkeypatch, tmp_path)
        blocker = tmp_path / "blocker"
        blocker.write_text("x", encoding="utf-8")
        monkeypatch.setenv("DATA_DIR", str(blocker / "data"))
        with pytest.raises(RuntimeError, match="DATA_DIR is not a usable directory") as excinfo:
            load_settings()
        assert isinstance(excinfo.value.__cause__, OSError)
