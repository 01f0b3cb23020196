import logging
from typing import Dict, Iterator, List

from .api_client import SERVICE_VPC, CloudApiError
from .cloudprovider import CloudApi, CloudNetworkInterface
from .models import Port, UpdatePortOpts

logger = logging.getLogger(__name__)


class Region:
    """Port operations for one provider region."""

    def __init__(self, region_id: str, client: CloudApi):
        self.region_id = region_id
        self.client = client
        self.logger = logging.getLogger(f"{__name__}.{region_id}")

    def get_network_interfaces(self) -> List[CloudNetworkInterface]:
        """
        Standalone network interfaces of this region: always empty.

        Changing a port's device_owner on this provider makes subnet IPs
        sync twice downstream, so elastic NIC enumeration is skipped and
        ports are only reached through their owning resources.
        """
        return []

    # https://console.huaweicloud.com/apiexplorer/#/openapi/VPC/doc?version=v2&api=ShowPort
    def get_port(self, port_id: str) -> Port:
        if not port_id:
            raise ValueError("port_id must be non-empty")

        try:
            resp = self.client.list(SERVICE_VPC, f"ports/{port_id}", None)
            return Port.from_dict(resp.unmarshal("port"), region=self)
        except Exception as exc:  # noqa: BLE001
            raise CloudApiError(f"get port: {exc}") from exc

    # https://console.huaweicloud.com/apiexplorer/#/openapi/VPC/doc?version=v2&api=ListPorts
    def iter_port_pages(self, device_id: str = "") -> Iterator[List[Port]]:
        """
        Yield pages of ports using marker pagination.

        The marker for the next request is the id of the last port of the
        page just fetched; an empty page ends the listing.
        """
        query: Dict[str, str] = {}
        if device_id:
            query["device_id"] = device_id

        page_no = 0
        while True:
            page_no += 1
            try:
                resp = self.client.list(SERVICE_VPC, "ports", dict(query))
                raw = resp.unmarshal("ports")
                if not isinstance(raw, list):
                    raise TypeError(f"ports must be a list, got {type(raw).__name__}")
                page = [Port.from_dict(p, region=self) for p in raw]
            except Exception as exc:  # noqa: BLE001
                raise CloudApiError(f"list ports (page {page_no}): {exc}") from exc

            self.logger.debug("Fetched ports page %s: %s item(s), marker=%s", page_no, len(page), query.get("marker"))
            if not page:
                return
            # marker must advance
            if page[-1].id == query.get("marker"):
                raise CloudApiError(f"list ports (page {page_no}): marker {page[-1].id} did not advance")
            yield page
            query["marker"] = page[-1].id

    def get_ports(self, device_id: str = "") -> List[Port]:
        """Return every port of the region, optionally only those of ``device_id``."""
        ports: List[Port] = []
        for page in self.iter_port_pages(device_id):
            ports.extend(page)

        self.logger.info("Fetched %s port(s) in region %s", len(ports), self.region_id)
        return ports

    # https://console.huaweicloud.com/apiexplorer/#/openapi/VPC/doc?version=v2&api=UpdatePort
    def update_port(self, port_id: str, opts: UpdatePortOpts) -> None:
        if not port_id:
            raise ValueError("port_id must be non-empty")

        params = {"port": opts.to_dict()}
        self.logger.warning("Updating port %s: %s", port_id, params["port"])
        try:
            self.client.put(SERVICE_VPC, f"ports/{port_id}", params)
        except Exception as exc:  # noqa: BLE001
            raise CloudApiError(f"update port {port_id}: {exc}") from exc
