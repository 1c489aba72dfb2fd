from dataclasses import dataclass

import pulumi
from pulumi_azure_native import network, resources

ASE_DELEGATION_SERVICE = "Microsoft.Web/hostingEnvironments"


@dataclass
class Network:
    vnet: network.VirtualNetwork
    ase_subnet: network.Subnet
    jumpbox_subnet: network.Subnet
    jumpbox_security_group: network.NetworkSecurityGroup


def create_resource_group(settings):
    return resources.ResourceGroup(
        "resource-group",
        resource_group_name=settings.resource_group_name,
        location=settings.location,
        tags=settings.tags,
    )


def warn_about_open_ssh(settings):
    if settings.ssh_source_prefix != "*":
        return False
    pulumi.log.warn(
        f"{settings.jumpbox_name} accepts SSH from any address, set sshSourcePrefix to narrow it"
    )
    return True


def create_jumpbox_security_group(settings, resource_group):
    warn_about_open_ssh(settings)

    security_group = network.NetworkSecurityGroup(
        "jumpbox-nsg",
        network_security_group_name=f"{settings.jumpbox_name}-nsg",
        resource_group_name=resource_group.name,
        location=resource_group.location,
        tags=settings.tags,
    )

    network.SecurityRule(
        "jumpbox-ssh-rule",
        name="allow-22-inbound",
        network_security_group_name=security_group.name,
        resource_group_name=resource_group.name,
        priority=100,
        source_address_prefix=settings.ssh_source_prefix,
        source_port_range="*",
        destination_address_prefix="*",
        destination_port_range="22",
        access=network.SecurityRuleAccess.ALLOW,
        direction=network.SecurityRuleDirection.INBOUND,
        protocol=network.SecurityRuleProtocol.TCP,
    )

    return security_group


def create_network(settings, resource_group) -> Network:
    # Create the VNet holding the ASE and the jumpbox
    vnet = network.VirtualNetwork(
        "v-net",
        resource_group_name=resource_group.name,
        virtual_network_name=settings.vnet_name,
        location=resource_group.location,
        address_space=network.AddressSpaceArgs(
            address_prefixes=[settings.vnet_address_space],
        ),
        tags=settings.tags,
    )

    # The ASE subnet is handed over to the hosting environment
    ase_subnet = network.Subnet(
        "ase-subnet",
        resource_group_name=resource_group.name,
        virtual_network_name=vnet.name,
        subnet_name=f"{settings.ase_name}-subnet",
        address_prefix=settings.ase_subnet_prefix,
        delegations=[
            network.DelegationArgs(
                name="ase-delegation",
                service_name=ASE_DELEGATION_SERVICE,
            )
        ],
    )

    jumpbox_security_group = create_jumpbox_security_group(settings, resource_group)

    jumpbox_subnet = network.Subnet(
        "jumpbox-subnet",
        resource_group_name=resource_group.name,
        virtual_network_name=vnet.name,
        subnet_name=f"{settings.jumpbox_name}-subnet",
        address_prefix=settings.jumpbox_subnet_prefix,
        network_security_group=network.NetworkSecurityGroupArgs(
            id=jumpbox_security_group.id,
        ),
        # Subnet writes on one VNet must not run in parallel
        opts=pulumi.ResourceOptions(depends_on=[ase_subnet]),
    )

    return Network(
        vnet=vnet,
        ase_subnet=ase_subnet,
        jumpbox_subnet=jumpbox_subnet,
        jumpbox_security_group=jumpbox_security_group,
    )
