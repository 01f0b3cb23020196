"""
Interfaces shared with the multi-cloud management layer.

CloudApi is what a Region needs from the transport; the other two are what
the management layer reads from a Region's ports. Protocols keep the
structural typing: Port and FixedIP satisfy them without inheriting.
"""

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable


@runtime_checkable
class ApiResponse(Protocol):
    def unmarshal(self, key: str) -> Any:
        """Return the named top-level field of the decoded JSON body."""
        ...


@runtime_checkable
class CloudApi(Protocol):
    """Authenticated access to a provider's REST services."""

    def list(self, service: str, resource: str, query: Optional[Dict[str, str]] = None) -> ApiResponse:
        ...

    def put(self, service: str, resource: str, body: Dict[str, Any]) -> ApiResponse:
        ...


@runtime_checkable
class CloudInterfaceAddress(Protocol):
    def get_global_id(self) -> str:
        ...

    def get_ip(self) -> str:
        ...

    def get_network_id(self) -> str:
        ...

    def is_primary(self) -> bool:
        ...


@runtime_checkable
class CloudNetworkInterface(Protocol):
    def get_id(self) -> str:
        ...

    def get_global_id(self) -> str:
        ...

    def get_name(self) -> str:
        ...

    def get_mac_address(self) -> str:
        ...

    def get_associate_type(self) -> str:
        ...

    def get_associate_id(self) -> str:
        ...

    def get_status(self) -> str:
        ...

    def get_interface_addresses(self) -> List[CloudInterfaceAddress]:
        ...
