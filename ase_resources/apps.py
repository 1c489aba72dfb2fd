from pulumi_azure_native import web


def create_app_service_plan(settings, resource_group, ase):
    # Create a service plan for the web apps, isolated in the ASE
    return web.AppServicePlan(
        "app-service-plan",
        name=settings.plan_name,
        resource_group_name=resource_group.name,
        location=resource_group.location,
        hosting_environment_profile=web.HostingEnvironmentProfileArgs(
            id=ase.id,
        ),
        sku=web.SkuDescriptionArgs(
            name=settings.plan_sku_name,
            tier=settings.plan_sku_tier,
            capacity=settings.plan_capacity,
        ),
        kind="linux",
        reserved=True,
        tags=settings.tags,
    )


def create_web_apps(settings, resource_group, ase, plan):
    web_apps = {}

    for spec in settings.web_apps:
        web_apps[spec.name] = web.WebApp(
            spec.name,
            name=spec.name,
            resource_group_name=resource_group.name,
            location=resource_group.location,
            server_farm_id=plan.id,
            hosting_environment_profile=web.HostingEnvironmentProfileArgs(
                id=ase.id,
            ),
            https_only=True,
            client_affinity_enabled=False,
            kind="app,linux",
            site_config=web.SiteConfigArgs(
                linux_fx_version=spec.linux_fx_version,
                app_settings=[
                    web.NameValuePairArgs(name=name, value=value)
                    for name, value in sorted(spec.app_settings.items())
                ],
                always_on=True,
                ftps_state=web.FtpsState.DISABLED,
                min_tls_version="1.2",
            ),
            tags=settings.tags,
        )

    return web_apps
