import json
import logging
from pathlib import Path
from typing import Any, Dict, List

from .models import Port

logger = logging.getLogger(__name__)


def port_to_dict(port: Port) -> Dict[str, Any]:
    """Normalized, provider-agnostic view of a port, as stored in snapshots."""
    return {
        "id": port.get_global_id(),
        "name": port.get_name(),
        "status": str(port.get_status()),
        "mac_address": port.get_mac_address(),
        "associate_type": str(port.get_associate_type()),
        "associate_id": port.get_associate_id(),
        "addresses": [
            {
                "ip": addr.get_ip(),
                "network_id": addr.get_network_id(),
                "primary": addr.is_primary(),
            }
            for addr in port.get_interface_addresses()
        ],
    }


def save_ports(data_dir: Path, region_id: str, ports: List[Port]) -> Path:
    """
    Persist the normalized ports of one region to JSON.

    File naming convention: <region_id>_ports.json
    """
    data_dir.mkdir(parents=True, exist_ok=True)
    file_path = data_dir / f"{region_id}_ports.json"
    logger.info("Saving %s port(s) for %s to %s", len(ports), region_id, file_path)

    payload = [port_to_dict(p) for p in ports]

    with open(file_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, sort_keys=True)

    return file_path


def load_ports(data_dir: Path) -> List[dict]:
    """Load all stored port snapshots from the data directory as a flat list of dicts."""
    ports: List[dict] = []
    if not data_dir.exists():
        logger.warning("Data directory %s does not exist when loading ports.", data_dir)
        return ports

    for file_path in sorted(data_dir.glob("*_ports.json")):
        logger.info("Loading ports from %s", file_path)
        with open(file_path, "r", encoding="utf-8") as fh:
            try:
                data = json.load(fh)
            except json.JSONDecodeError as exc:
                logger.error("Failed to parse %s: %s", file_path, exc)
                continue
        if not isinstance(data, list):
            logger.error("Skipping %s: expected a list of ports, got %s", file_path, type(data).__name__)
            continue
        ports.extend(data)

    return ports
