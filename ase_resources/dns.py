"""Private DNS for an internally load balanced App Service Environment.

Apps in an ILB ASE are served under ``<ase-name>.appserviceenvironment.net``.
The zone is linked to the VNet so the jumpbox (and anything else in the VNet)
resolves the apps and their Kudu (``scm``) sites to the ILB address.
"""

from dataclasses import dataclass
from typing import Dict

from pulumi_azure_native import network

ASE_DNS_SUFFIX = "appserviceenvironment.net"
ASE_RECORD_NAMES = ("*", "@", "*.scm")
RECORD_TTL = 3600


@dataclass
class PrivateDns:
    zone: network.PrivateZone
    link: network.VirtualNetworkLink
    records: Dict[str, network.PrivateRecordSet]


def ase_zone_name(ase_name: str) -> str:
    return f"{ase_name}.{ASE_DNS_SUFFIX}"


def _record_resource_name(record_name: str) -> str:
    if record_name == "@":
        return "ase-dns-record-apex"
    return "ase-dns-record-" + record_name.replace("*", "wildcard").replace(".", "-")


def create_private_dns(settings, resource_group, vnet, ilb_ip) -> PrivateDns:
    zone_name = ase_zone_name(settings.ase_name)

    zone = network.PrivateZone(
        "ase-private-dns-zone",
        resource_group_name=resource_group.name,
        location="global",
        private_zone_name=zone_name,
        tags=settings.tags,
    )

    # Link the DNS zone to the virtual network
    link = network.VirtualNetworkLink(
        "ase-dns-zone-link",
        resource_group_name=resource_group.name,
        private_zone_name=zone.name,
        virtual_network_link_name=f"{settings.vnet_name}-link",
        virtual_network=network.SubResourceArgs(
            id=vnet.id,
        ),
        registration_enabled=False,
        location="global",
        tags=settings.tags,
    )

    records = {}
    for record_name in ASE_RECORD_NAMES:
        records[record_name] = network.PrivateRecordSet(
            _record_resource_name(record_name),
            resource_group_name=resource_group.name,
            private_zone_name=zone.name,
            record_type="A",
            relative_record_set_name=record_name,
            ttl=RECORD_TTL,
            a_records=[
                network.ARecordArgs(
                    ipv4_address=ilb_ip,
                )
            ],
        )

    return PrivateDns(zone=zone, link=link, records=records)
