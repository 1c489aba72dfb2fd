import pulumi
from pulumi_azure_native import web


def create_app_service_environment(settings, resource_group, subnet):
    """Create an App Service Environment v3 inside the delegated subnet."""
    return web.AppServiceEnvironment(
        "app-service-environment",
        name=settings.ase_name,
        resource_group_name=resource_group.name,
        location=resource_group.location,
        kind="ASEV3",
        virtual_network=web.VirtualNetworkProfileArgs(
            id=subnet.id,
        ),
        internal_load_balancing_mode=settings.internal_load_balancing_mode,
        zone_redundant=settings.zone_redundant,
        cluster_settings=[
            web.NameValuePairArgs(
                name="DisableTls1.0",
                value="1",
            ),
        ],
        tags=settings.tags,
        opts=pulumi.ResourceOptions(
            # Provisioning an ASE regularly takes over an hour
            custom_timeouts=pulumi.CustomTimeouts(create="6h", delete="6h"),
        ),
    )


def _first_address(addresses):
    if not addresses:
        raise pulumi.RunError(
            "App Service Environment reported no internal inbound IP address"
        )
    return addresses[0]


def _internal_addresses(networking_configuration):
    if networking_configuration is None:
        return None
    if isinstance(networking_configuration, dict):
        return networking_configuration.get(
            "internal_inbound_ip_addresses",
            networking_configuration.get("internalInboundIpAddresses"),
        )
    return networking_configuration.internal_inbound_ip_addresses


def internal_inbound_ip(ase):
    """The ILB address, read from the ASE's networking configuration."""
    return ase.networking_configuration.apply(
        lambda configuration: _first_address(_internal_addresses(configuration))
    )
