import logging
import os
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
from urllib.parse import urlparse

import yaml

from .api_client import SERVICE_VPC

logger = logging.getLogger(__name__)


def _normalize_endpoint_url(url: str) -> str:
    """Normalize an API endpoint URL and ensure it has a host."""
    u = url.strip().rstrip("/")
    # Collapse extra slashes after :// (e.g. https:///host -> https://host)
    u = re.sub(r"(https?):///+", r"\1://", u)
    parsed = urlparse(u)
    if not parsed.netloc:
        raise RuntimeError(
            f"Endpoint URL has no host: {url!r}. "
            "Use e.g. https://vpc.example.com/v1/{project_id} (no extra slashes)."
        )
    return u


def _env_bool(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip().lower()
    if v in {"1", "true", "yes", "y", "on"}:
        return True
    if v in {"0", "false", "no", "n", "off"}:
        return False
    raise RuntimeError(f"Invalid boolean value for {name}={raw!r} (expected true/false).")


@dataclass
class Settings:
    endpoints: Dict[str, str]  # service scope -> base URL
    project_id: str
    region_id: str
    api_token: Optional[str]
    timeout: int
    verify_ssl: bool
    data_dir: Path
    log_level: str = "INFO"
    device_id: Optional[str] = None


def _read_secret_file(path: Optional[str]) -> Optional[str]:
    if not path:
        return None
    p = Path(path)
    if not p.is_file():
        logger.warning("Secret file %s does not exist", p)
        return None
    return p.read_text(encoding="utf-8").strip()


def _ensure_dir(path: Path, source: str) -> Path:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RuntimeError(f"{source} is not a usable directory: {path} ({exc})") from exc
    return path


def _expand_endpoints(raw: Dict[str, str], project_id: str, region_id: str) -> Dict[str, str]:
    """Substitute {project_id}/{region_id} placeholders and normalize each URL."""
    out: Dict[str, str] = {}
    for service, url in raw.items():
        expanded = url.replace("{project_id}", project_id).replace("{region_id}", region_id)
        out[service] = _normalize_endpoint_url(expanded)
    return out


def _parse_endpoints(raw: object) -> Dict[str, str]:
    """Parse cloud.endpoints from YAML (mapping of service -> URL)."""
    if not isinstance(raw, dict) or not raw:
        raise RuntimeError("cloud.endpoints must be a non-empty mapping of service -> URL")
    out: Dict[str, str] = {}
    for k, v in raw.items():
        if not isinstance(k, str) or not isinstance(v, str) or not v.strip():
            raise RuntimeError(f"cloud.endpoints.{k} must be a non-empty URL string")
        out[k] = v
    return out


def _load_settings_from_yaml(path: str) -> Settings:
    """Load settings from a single YAML config file."""
    p = Path(path)
    if not p.is_file():
        raise RuntimeError(f"APP_CONFIG_FILE not found: {path}")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8"))
    except Exception as exc:
        raise RuntimeError(f"Failed to read YAML config: {path}") from exc

    if not isinstance(raw, dict):
        raise RuntimeError("YAML config root must be a mapping/object")

    cloud = raw.get("cloud") or {}
    if not isinstance(cloud, dict):
        raise RuntimeError("cloud must be a mapping/object")

    project_id = cloud.get("project_id")
    if not isinstance(project_id, str) or not project_id.strip():
        raise RuntimeError("cloud.project_id is required")
    region_id = cloud.get("region_id")
    if not isinstance(region_id, str) or not region_id.strip():
        raise RuntimeError("cloud.region_id is required")
    project_id = project_id.strip()
    region_id = region_id.strip()

    endpoints = _expand_endpoints(_parse_endpoints(cloud.get("endpoints")), project_id, region_id)
    if SERVICE_VPC not in endpoints:
        raise RuntimeError(f"cloud.endpoints.{SERVICE_VPC} is required")

    timeout = cloud.get("timeout", 30)
    try:
        timeout = int(timeout)
    except Exception as exc:
        raise RuntimeError("cloud.timeout must be an integer (seconds)") from exc

    api_token: Optional[str] = None
    if isinstance(cloud.get("api_token"), str) and cloud["api_token"].strip():
        api_token = cloud["api_token"].strip()
    elif isinstance(cloud.get("api_token_file"), str) and cloud["api_token_file"].strip():
        api_token = _read_secret_file(cloud["api_token_file"].strip())
    if not api_token:
        raise RuntimeError("cloud.api_token (or cloud.api_token_file) is required")

    verify_ssl = cloud.get("verify_ssl", True)
    if not isinstance(verify_ssl, bool):
        raise RuntimeError("cloud.verify_ssl must be boolean")

    runtime = raw.get("runtime") or {}
    if not isinstance(runtime, dict):
        raise RuntimeError("runtime must be a mapping/object")

    log_level = str(runtime.get("log_level", "INFO"))
    device_id = runtime.get("device_id")
    if device_id is not None and not isinstance(device_id, str):
        raise RuntimeError("runtime.device_id must be a string or null")

    data_dir = _ensure_dir(Path(str(runtime.get("data_dir", "/app/data"))), "runtime.data_dir")

    return Settings(
        endpoints=endpoints,
        project_id=project_id,
        region_id=region_id,
        api_token=api_token,
        timeout=timeout,
        verify_ssl=verify_ssl,
        data_dir=data_dir,
        log_level=log_level,
        device_id=device_id.strip() if isinstance(device_id, str) and device_id.strip() else None,
    )


def load_settings() -> Settings:
    """Load settings from a YAML file (APP_CONFIG_FILE) or from environment variables."""

    # YAML-first mode (single source of truth)
    app_config_file = os.getenv("APP_CONFIG_FILE")
    if app_config_file:
        return _load_settings_from_yaml(app_config_file)

    project_id = (os.getenv("CLOUD_PROJECT_ID") or "").strip()
    region_id = (os.getenv("CLOUD_REGION_ID") or "").strip()
    if not project_id or not region_id:
        raise RuntimeError("CLOUD_PROJECT_ID and CLOUD_REGION_ID must both be set.")

    vpc_endpoint = os.getenv("CLOUD_VPC_ENDPOINT")
    if not vpc_endpoint:
        raise RuntimeError(
            "CLOUD_VPC_ENDPOINT not set. Use the format: "
            "CLOUD_VPC_ENDPOINT=https://vpc.{region_id}.example.com/v1/{project_id}"
        )
    endpoints = _expand_endpoints({SERVICE_VPC: vpc_endpoint}, project_id, region_id)

    # Prioritize direct env var over file-based token
    api_token = os.getenv("CLOUD_API_TOKEN")
    if not api_token:
        api_token_file = os.getenv("CLOUD_API_TOKEN_FILE", "secrets/cloud_api_token")
        api_token = _read_secret_file(api_token_file)
    if not api_token:
        raise RuntimeError(
            "Cloud API token not configured. Set CLOUD_API_TOKEN or "
            "CLOUD_API_TOKEN_FILE (default: secrets/cloud_api_token)."
        )

    try:
        timeout = int(os.getenv("CLOUD_TIMEOUT", "30"))
    except ValueError as exc:
        raise RuntimeError("CLOUD_TIMEOUT must be an integer (seconds).") from exc

    data_dir = _ensure_dir(Path(os.getenv("DATA_DIR", "/app/data")), "DATA_DIR")

    return Settings(
        endpoints=endpoints,
        project_id=project_id,
        region_id=region_id,
        api_token=api_token,
        timeout=timeout,
        verify_ssl=_env_bool("CLOUD_VERIFY_SSL", default=True),
        data_dir=data_dir,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        device_id=os.getenv("DEVICE_ID") or None,
    )
