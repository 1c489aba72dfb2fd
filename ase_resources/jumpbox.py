"""Jumpbox VM used to reach the internal App Service Environment"""

from dataclasses import dataclass

from pulumi_azure_native import compute, network


@dataclass
class Jumpbox:
    public_ip: network.PublicIPAddress
    nic: network.NetworkInterface
    vm: compute.VirtualMachine


def create_jumpbox(settings, resource_group, subnet, security_group) -> Jumpbox:
    public_ip = network.PublicIPAddress(
        "jumpbox-public-ip",
        resource_group_name=resource_group.name,
        public_ip_address_name=f"{settings.jumpbox_name}-pip",
        location=resource_group.location,
        sku=network.PublicIPAddressSkuArgs(
            name=network.PublicIPAddressSkuName.STANDARD,
        ),
        public_ip_allocation_method=network.IpAllocationMethod.STATIC,
        tags=settings.tags,
    )

    nic = network.NetworkInterface(
        "jumpbox-nic",
        resource_group_name=resource_group.name,
        network_interface_name=f"{settings.jumpbox_name}-nic",
        location=resource_group.location,
        ip_configurations=[
            network.NetworkInterfaceIPConfigurationArgs(
                name="ipconfig-1",
                subnet=network.SubnetArgs(
                    id=subnet.id,
                ),
                private_ip_allocation_method=network.IpAllocationMethod.DYNAMIC,
                public_ip_address=network.PublicIPAddressArgs(
                    id=public_ip.id,
                ),
            )
        ],
        network_security_group=network.NetworkSecurityGroupArgs(
            id=security_group.id,
        ),
        tags=settings.tags,
    )

    vm = compute.VirtualMachine(
        "jumpbox-vm",
        resource_group_name=resource_group.name,
        vm_name=settings.jumpbox_name,
        location=resource_group.location,
        network_profile=compute.NetworkProfileArgs(
            network_interfaces=[
                compute.NetworkInterfaceReferenceArgs(
                    id=nic.id,
                    primary=True,
                )
            ],
        ),
        hardware_profile=compute.HardwareProfileArgs(
            vm_size=settings.jumpbox_vm_size,
        ),
        storage_profile=compute.StorageProfileArgs(
            image_reference=compute.ImageReferenceArgs(
                publisher="Canonical",
                offer="0001-com-ubuntu-server-jammy",
                sku="22_04-lts",
                version="latest",
            ),
            os_disk=compute.OSDiskArgs(
                name=f"{settings.jumpbox_name}-osdisk",
                create_option=compute.DiskCreateOptionTypes.FROM_IMAGE,
                delete_option=compute.DiskDeleteOptionTypes.DELETE,
                managed_disk=compute.ManagedDiskParametersArgs(
                    storage_account_type=compute.StorageAccountTypes.STANDARD_SS_D_LRS,
                ),
            ),
        ),
        os_profile=compute.OSProfileArgs(
            computer_name=settings.jumpbox_name,
            admin_username=settings.jumpbox_admin_username,
            admin_password=settings.jumpbox_admin_password,
            linux_configuration=compute.LinuxConfigurationArgs(
                disable_password_authentication=False,
            ),
        ),
        tags=settings.tags,
    )

    return Jumpbox(public_ip=public_ip, nic=nic, vm=vm)
