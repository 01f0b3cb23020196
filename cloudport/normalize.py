from enum import Enum
from typing import Union


class _CanonicalValue(str, Enum):
    def __str__(self) -> str:
        return self.value


class NetworkInterfaceStatus(_CanonicalValue):
    AVAILABLE = "available"
    CREATING = "creating"


class AssociateType(_CanonicalValue):
    SERVER = "server"
    RESERVED = "reserved"
    DHCP = "dhcp"
    LOADBALANCER = "loadbalancer"
    VIP = "vip"


_STATUS_MAP = {
    "ACTIVE": NetworkInterfaceStatus.AVAILABLE,
    "DOWN": NetworkInterfaceStatus.AVAILABLE,
    "BUILD": NetworkInterfaceStatus.CREATING,
}

# https://support.huaweicloud.com/api-vpc/zh-cn_topic_0133195888.html
_DEVICE_OWNER_MAP = {
    "compute:nova": AssociateType.SERVER,
    "network:router_gateway": AssociateType.RESERVED,
    "network:router_interface": AssociateType.RESERVED,
    "network:router_interface_distributed": AssociateType.RESERVED,
    "network:dhcp": AssociateType.DHCP,
    "neutron:LOADBALANCERV2": AssociateType.LOADBALANCER,
    "neutron:VIP_PORT": AssociateType.VIP,
}


def normalize_status(raw_status: str) -> Union[NetworkInterfaceStatus, str]:
    """Map a provider port status to the canonical interface status.

    Unknown codes are returned verbatim.
    """
    return _STATUS_MAP.get(raw_status, raw_status)


def classify_association(device_owner: str) -> Union[AssociateType, str]:
    """Map a port's device_owner tag to the canonical association type.

    Any ``compute:*`` owner is a server. Unrecognized owners are returned
    unchanged so they still show up in reports.
    """
    mapped = _DEVICE_OWNER_MAP.get(device_owner)
    if mapped is not None:
        return mapped
    if device_owner and device_owner.startswith("compute:"):
        return AssociateType.SERVER
    return device_owner
