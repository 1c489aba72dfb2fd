"""Stack settings for the App Service Environment deployment"""

import ipaddress
from dataclasses import dataclass, field
from typing import Dict, List, Optional

import pulumi

INTERNAL_LOAD_BALANCING_MODE = "Web, Publishing"
EXTERNAL_LOAD_BALANCING_MODE = "None"
LOAD_BALANCING_MODES = (INTERNAL_LOAD_BALANCING_MODE, EXTERNAL_LOAD_BALANCING_MODE)

# ASE v3 needs at least a /27, a /24 leaves room to scale out
MAX_ASE_SUBNET_PREFIX_LENGTH = 27


@dataclass
class WebAppSpec:
    name: str
    linux_fx_version: str = "PYTHON|3.12"
    app_settings: Dict[str, str] = field(default_factory=dict)


@dataclass
class StackSettings:
    environment: str
    location: str
    resource_group_name: str
    vnet_name: str
    vnet_address_space: str
    ase_subnet_prefix: str
    jumpbox_subnet_prefix: str
    ase_name: str
    internal_load_balancing_mode: str
    zone_redundant: bool
    plan_name: str
    plan_sku_name: str
    plan_sku_tier: str
    plan_capacity: int
    web_apps: List[WebAppSpec]
    jumpbox_name: str
    jumpbox_vm_size: str
    jumpbox_admin_username: str
    jumpbox_admin_password: pulumi.Output
    ssh_source_prefix: str
    tags: Dict[str, str]


def resource_tags(environment: str, extra: Optional[Dict[str, str]] = None):
    tags = {
        "environment": environment,
        "managed-by": "pulumi",
    }
    tags.update(extra or {})
    return tags


def uses_internal_load_balancer(mode: str) -> bool:
    return mode == INTERNAL_LOAD_BALANCING_MODE


def _parse_network(cidr: str, label: str):
    try:
        return ipaddress.ip_network(cidr)
    except ValueError as e:
        raise pulumi.RunError(f"{label} is not a valid CIDR block: {cidr!r}") from e


def validate_network(vnet_cidr: str, subnet_cidrs: Dict[str, str]):
    """Check that every subnet fits in the VNet and that no two subnets overlap.

    ``subnet_cidrs`` maps a subnet label to its prefix. The label ``ase`` marks
    the subnet delegated to the App Service Environment, which has a minimum
    size.
    """
    vnet = _parse_network(vnet_cidr, "vnetAddressSpace")
    subnets = {
        label: _parse_network(cidr, f"{label} subnet")
        for label, cidr in subnet_cidrs.items()
    }

    for label, subnet in subnets.items():
        if subnet.version != vnet.version:
            raise pulumi.RunError(
                f"{label} subnet {subnet} is IPv{subnet.version} "
                f"but the VNet address space {vnet} is IPv{vnet.version}"
            )
        if not subnet.subnet_of(vnet):
            raise pulumi.RunError(
                f"{label} subnet {subnet} is outside the VNet address space {vnet}"
            )

    labels = list(subnets)
    for i, first in enumerate(labels):
        for second in labels[i + 1 :]:
            if subnets[first].overlaps(subnets[second]):
                raise pulumi.RunError(
                    f"{first} subnet {subnets[first]} overlaps "
                    f"{second} subnet {subnets[second]}"
                )

    ase_subnet = subnets.get("ase")
    if ase_subnet is not None and ase_subnet.prefixlen > MAX_ASE_SUBNET_PREFIX_LENGTH:
        raise pulumi.RunError(
            f"ase subnet {ase_subnet} is too small, "
            f"App Service Environment v3 needs at least a /{MAX_ASE_SUBNET_PREFIX_LENGTH}"
        )


def validate_web_apps(apps: List[WebAppSpec]):
    if not apps:
        raise pulumi.RunError("webApps must name at least one web app")

    seen = set()
    for app in apps:
        if app.name in seen:
            raise pulumi.RunError(f"web app name {app.name!r} is used twice")
        seen.add(app.name)


def _web_app_specs(raw, environment: str) -> List[WebAppSpec]:
    if raw is None:
        return [WebAppSpec(name=f"app-{environment}-{i}") for i in range(1, 3)]

    specs = []
    for item in raw:
        if isinstance(item, str):
            specs.append(WebAppSpec(name=item))
            continue
        if not item.get("name"):
            raise pulumi.RunError("webApps entries need a name")
        specs.append(
            WebAppSpec(
                name=item["name"],
                linux_fx_version=item.get("linuxFxVersion", "PYTHON|3.12"),
                app_settings=dict(item.get("appSettings", {})),
            )
        )
    return specs


def load_settings(config: Optional[pulumi.Config] = None) -> StackSettings:
    if config is None:
        config = pulumi.Config()

    environment = config.get("environment") or pulumi.get_stack()

    location = config.get("location")
    if location is None:
        location = "westeurope"

    ilb_mode = config.get("internalLoadBalancingMode")
    if ilb_mode is None:
        ilb_mode = INTERNAL_LOAD_BALANCING_MODE
    if ilb_mode not in LOAD_BALANCING_MODES:
        raise pulumi.RunError(
            f"internalLoadBalancingMode must be one of {LOAD_BALANCING_MODES}, got {ilb_mode!r}"
        )

    zone_redundant = config.get_bool("zoneRedundant")
    if zone_redundant is None:
        zone_redundant = False

    plan_capacity = config.get_int("appServicePlanCapacity")
    if plan_capacity is None:
        plan_capacity = 1
    if plan_capacity < 1:
        raise pulumi.RunError(
            f"appServicePlanCapacity must be at least 1, got {plan_capacity}"
        )

    settings = StackSettings(
        environment=environment,
        location=location,
        resource_group_name=config.get("resourceGroupName") or f"rg-ase-{environment}",
        vnet_name=config.get("vnetName") or f"vnet-ase-{environment}",
        vnet_address_space=config.get("vnetAddressSpace") or "10.0.0.0/16",
        ase_subnet_prefix=config.get("aseSubnetPrefix") or "10.0.1.0/24",
        jumpbox_subnet_prefix=config.get("jumpboxSubnetPrefix") or "10.0.2.0/24",
        ase_name=config.get("aseName") or f"ase-{environment}",
        internal_load_balancing_mode=ilb_mode,
        zone_redundant=zone_redundant,
        plan_name=config.get("appServicePlanName") or f"asp-ase-{environment}",
        plan_sku_name=config.get("appServicePlanSku") or "I1v2",
        plan_sku_tier=config.get("appServicePlanTier") or "IsolatedV2",
        plan_capacity=plan_capacity,
        web_apps=_web_app_specs(config.get_object("webApps"), environment),
        jumpbox_name=config.get("jumpboxName") or f"vm-jumpbox-{environment}",
        jumpbox_vm_size=config.get("jumpboxVmSize") or "Standard_B2s",
        jumpbox_admin_username=config.get("jumpboxAdminUsername") or "azureuser",
        jumpbox_admin_password=config.require_secret("jumpboxAdminPassword"),
        ssh_source_prefix=config.get("sshSourcePrefix") or "*",
        tags=resource_tags(environment, config.get_object("tags")),
    )

    validate_network(
        settings.vnet_address_space,
        {
            "ase": settings.ase_subnet_prefix,
            "jumpbox": settings.jumpbox_subnet_prefix,
        },
    )
    validate_web_apps(settings.web_apps)

    return settings
