"""App Service Environment v3 with private DNS and a jumpbox"""

import pulumi

from ase_resources.stack import (
    app_service_environment,
    app_service_plan,
    ilb_ip,
    jumpbox,
    private_dns,
    resource_group,
    vnet_resources,
    web_apps,
)

pulumi.export("resourceGroup", resource_group.name)
pulumi.export("vnetId", vnet_resources.vnet.id)
pulumi.export("appServiceEnvironmentId", app_service_environment.id)
pulumi.export("appServicePlanId", app_service_plan.id)
pulumi.export(
    "webAppUrls",
    {
        name: web_app.default_host_name.apply(
            lambda default_host_name: f"https://{default_host_name}"
        )
        for name, web_app in web_apps.items()
    },
)
pulumi.export("jumpboxPublicIp", jumpbox.public_ip.ip_address)

if private_dns is not None:
    pulumi.export("internalLoadBalancerIp", ilb_ip)
    pulumi.export("privateDnsZone", private_dns.zone.name)
