import pulumi

from ase_resources.apps import create_app_service_plan, create_web_apps
from ase_resources.dns import create_private_dns
from ase_resources.environment import (
    create_app_service_environment,
    internal_inbound_ip,
)
from ase_resources.jumpbox import create_jumpbox
from ase_resources.network import create_network, create_resource_group
from ase_resources.settings import load_settings, uses_internal_load_balancer


def attach_private_dns(settings, resource_group, vnet, ase):
    """Point private DNS at the ILB address.

    Returns ``(ilb_ip, private_dns)``, both None for an externally load
    balanced ASE.
    """
    if not uses_internal_load_balancer(settings.internal_load_balancing_mode):
        pulumi.log.warn(
            f"{settings.ase_name} is externally load balanced, skipping the private DNS zone"
        )
        return None, None

    ilb_ip = internal_inbound_ip(ase)
    return ilb_ip, create_private_dns(settings, resource_group, vnet, ilb_ip)


settings = load_settings()

pulumi.log.info(
    f"Deploying App Service Environment {settings.ase_name} "
    f"for {settings.environment} in {settings.location}"
)

resource_group = create_resource_group(settings)

vnet_resources = create_network(settings, resource_group)

app_service_environment = create_app_service_environment(
    settings,
    resource_group,
    vnet_resources.ase_subnet,
)

app_service_plan = create_app_service_plan(
    settings,
    resource_group,
    app_service_environment,
)

web_apps = create_web_apps(
    settings,
    resource_group,
    app_service_environment,
    app_service_plan,
)

jumpbox = create_jumpbox(
    settings,
    resource_group,
    vnet_resources.jumpbox_subnet,
    vnet_resources.jumpbox_security_group,
)

ilb_ip, private_dns = attach_private_dns(
    settings,
    resource_group,
    vnet_resources.vnet,
    app_service_environment,
)
