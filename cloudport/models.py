from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from .normalize import AssociateType, NetworkInterfaceStatus, classify_association, normalize_status

if TYPE_CHECKING:
    from .region import Region


def _str(value: object) -> str:
    return "" if value is None else str(value)


def _bool(value: object) -> Optional[bool]:
    """Decode a boolean sent either as JSON bool or as "true"/"false"."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        v = value.strip().lower()
        if v == "true":
            return True
        if v == "false":
            return False
    return None


@dataclass(frozen=True)
class FixedIP:
    """
    One IP address statically bound to a port.

    network_id is not part of the per-IP payload; it is copied in from the
    owning Port when addresses are read (see Port.get_interface_addresses).
    """

    ip_address: str
    subnet_id: str = ""
    network_id: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FixedIP":
        return cls(
            ip_address=_str(data.get("ip_address")),
            subnet_id=_str(data.get("subnet_id")),
        )

    def get_global_id(self) -> str:
        return self.ip_address

    def get_ip(self) -> str:
        return self.ip_address

    def get_network_id(self) -> str:
        return self.network_id

    def is_primary(self) -> bool:
        return True


@dataclass
class Port:
    """Normalized representation of a provider VPC port (virtual NIC attachment)."""

    id: str
    name: str = ""
    status: str = ""
    admin_state_up: Optional[bool] = None
    dns_name: str = ""
    mac_address: str = ""
    network_id: str = ""
    tenant_id: str = ""
    device_id: str = ""
    device_owner: str = ""
    binding_vnic_type: str = ""
    fixed_ips: List[FixedIP] = field(default_factory=list)
    region: Optional["Region"] = field(default=None, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], region: Optional["Region"] = None) -> "Port":
        """Decode a single ``port`` object as returned by the ports API."""
        if not isinstance(data, dict):
            raise TypeError(f"port payload must be an object, got {type(data).__name__}")

        fixed_ips = [
            FixedIP.from_dict(ip) for ip in data.get("fixed_ips") or [] if isinstance(ip, dict)
        ]

        return cls(
            id=_str(data.get("id")),
            name=_str(data.get("name")),
            status=_str(data.get("status")),
            admin_state_up=_bool(data.get("admin_state_up")),
            dns_name=_str(data.get("dns_name")),
            mac_address=_str(data.get("mac_address")),
            network_id=_str(data.get("network_id")),
            tenant_id=_str(data.get("tenant_id")),
            device_id=_str(data.get("device_id")),
            device_owner=_str(data.get("device_owner")),
            binding_vnic_type=_str(data.get("binding:vnic_type")),
            fixed_ips=fixed_ips,
            region=region,
        )

    def get_id(self) -> str:
        return self.id

    def get_global_id(self) -> str:
        return self.id

    def get_name(self) -> str:
        if self.name:
            return self.name
        return self.id

    def get_mac_address(self) -> str:
        return self.mac_address

    def get_associate_type(self) -> Union[AssociateType, str]:
        return classify_association(self.device_owner)

    def get_associate_id(self) -> str:
        return self.device_id

    def get_status(self) -> Union[NetworkInterfaceStatus, str]:
        return normalize_status(self.status)

    def get_interface_addresses(self) -> List[FixedIP]:
        """Return one address record per fixed IP, in API order.

        Each FixedIP is replaced by a copy carrying this port's network_id.
        """
        self.fixed_ips = [replace(ip, network_id=self.network_id) for ip in self.fixed_ips]
        return list(self.fixed_ips)


@dataclass(frozen=True)
class AllowedAddressPair:
    ip_address: str
    mac_address: str = ""

    def to_dict(self) -> Dict[str, str]:
        payload = {"ip_address": self.ip_address}
        if self.mac_address:
            payload["mac_address"] = self.mac_address
        return payload


@dataclass(frozen=True)
class ExtraDhcpOpt:
    opt_name: str
    opt_value: str

    def to_dict(self) -> Dict[str, str]:
        return {"opt_name": self.opt_name, "opt_value": self.opt_value}


@dataclass
class UpdatePortOpts:
    """
    Partial update for a port.

    Fields left empty are not sent to the provider, so an unset name
    never clears the existing one.
    """

    name: str = ""
    security_groups: List[str] = field(default_factory=list)
    allowed_address_pairs: List[AllowedAddressPair] = field(default_factory=list)
    extra_dhcp_opts: List[ExtraDhcpOpt] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {}
        if self.name:
            body["name"] = self.name
        if self.security_groups:
            body["security_groups"] = list(self.security_groups)
        if self.allowed_address_pairs:
            body["allowed_address_pairs"] = [p.to_dict() for p in self.allowed_address_pairs]
        if self.extra_dhcp_opts:
            body["extra_dhcp_opts"] = [o.to_dict() for o in self.extra_dhcp_opts]
        return body
