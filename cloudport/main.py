import logging
import os
import sys
from collections import Counter

from .api_client import ApiClient
from .config import load_settings
from .logging_config import configure_logging
from .region import Region
from .storage import save_ports

logger = logging.getLogger(__name__)


def main() -> int:
    # Configure logging early so load_settings() warnings/errors are visible.
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    try:
        settings = load_settings()
    except RuntimeError as exc:
        logger.error("Configuration error: %s", exc)
        return 1

    # YAML runtime.log_level may differ from the environment.
    configure_logging(settings.log_level)

    client = ApiClient(
        endpoints=settings.endpoints,
        token=settings.api_token,
        timeout=settings.timeout,
        verify_ssl=settings.verify_ssl,
    )
    region = Region(settings.region_id, client)

    if settings.device_id:
        logger.info("Listing ports of device %s in region %s", settings.device_id, settings.region_id)
    else:
        logger.info("Listing all ports in region %s", settings.region_id)

    try:
        ports = region.get_ports(settings.device_id or "")
    except RuntimeError as exc:
        logger.error("Failed to list ports in region %s: %s", settings.region_id, exc)
        return 1

    try:
        save_ports(settings.data_dir, settings.region_id, ports)
    except OSError as exc:
        logger.error("Failed to save ports snapshot under %s: %s", settings.data_dir, exc)
        return 1

    by_status = Counter(str(p.get_status()) for p in ports)
    for status, count in sorted(by_status.items()):
        logger.info("  %s: %s port(s)", status, count)

    return 0


if __name__ == "__main__":
    sys.exit(main())
