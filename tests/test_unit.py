import json
import unittest
from types import SimpleNamespace
from unittest import mock

import pulumi

from ase_resources.dns import ase_zone_name
from ase_resources.environment import _first_address, _internal_addresses
from ase_resources.network import warn_about_open_ssh
from ase_resources.settings import (
    WebAppSpec,
    _web_app_specs,
    load_settings,
    resource_tags,
    uses_internal_load_balancer,
    validate_network,
    validate_web_apps,
)


class TestValidateNetwork(unittest.TestCase):
    def test_accepts_disjoint_subnets_inside_vnet(self):
        validate_network(
            "10.0.0.0/16",
            {"ase": "10.0.1.0/24", "jumpbox": "10.0.2.0/24"},
        )

    def test_rejects_subnet_outside_vnet(self):
        with self.assertRaisesRegex(pulumi.RunError, "outside the VNet"):
            validate_network(
                "10.0.0.0/16",
                {"ase": "10.1.1.0/24", "jumpbox": "10.0.2.0/24"},
            )

    def test_rejects_overlapping_subnets(self):
        with self.assertRaisesRegex(pulumi.RunError, "overlaps"):
            validate_network(
                "10.0.0.0/16",
                {"ase": "10.0.0.0/23", "jumpbox": "10.0.1.0/24"},
            )

    def test_rejects_ase_subnet_smaller_than_27(self):
        with self.assertRaisesRegex(pulumi.RunError, "too small"):
            validate_network(
                "10.0.0.0/16",
                {"ase": "10.0.1.0/28", "jumpbox": "10.0.2.0/24"},
            )

    def test_rejects_malformed_cidr(self):
        with self.assertRaisesRegex(pulumi.RunError, "not a valid CIDR"):
            validate_network("10.0.0.0/33", {"ase": "10.0.1.0/24"})

    def test_rejects_mixed_ip_versions(self):
        with self.assertRaisesRegex(pulumi.RunError, "IPv6"):
            validate_network("10.0.0.0/16", {"ase": "fd00:1::/64"})


class TestValidateWebApps(unittest.TestCase):
    def test_rejects_empty_list(self):
        with self.assertRaises(pulumi.RunError):
            validate_web_apps([])

    def test_rejects_duplicate_names(self):
        with self.assertRaisesRegex(pulumi.RunError, "used twice"):
            validate_web_apps([WebAppSpec(name="app"), WebAppSpec(name="app")])

    def test_rejects_entry_without_name(self):
        with self.assertRaisesRegex(pulumi.RunError, "need a name"):
            _web_app_specs([{"linuxFxVersion": "PYTHON|3.12"}], "dev")

    def test_plain_names_get_default_runtime(self):
        specs = _web_app_specs(["frontend"], "dev")
        self.assertEqual(specs, [WebAppSpec(name="frontend")])


class TestHelpers(unittest.TestCase):
    def test_resource_tags_merge_extra_tags(self):
        tags = resource_tags("prod", {"owner": "platform-team"})
        self.assertEqual(
            tags,
            {
                "environment": "prod",
                "managed-by": "pulumi",
                "owner": "platform-team",
            },
        )

    def test_only_web_publishing_is_internal(self):
        self.assertTrue(uses_internal_load_balancer("Web, Publishing"))
        self.assertFalse(uses_internal_load_balancer("None"))

    def test_ase_zone_name(self):
        self.assertEqual(ase_zone_name("ase-dev"), "ase-dev.appserviceenvironment.net")


class TestLoadSettings(unittest.TestCase):
    @pulumi.runtime.test
    def test_defaults_follow_stack_name(self):
        settings = load_settings()

        self.assertEqual(settings.environment, "dev")
        self.assertEqual(settings.location, "westeurope")
        self.assertEqual(settings.resource_group_name, "rg-ase-dev")
        self.assertEqual(settings.ase_name, "ase-dev")
        self.assertEqual(settings.internal_load_balancing_mode, "Web, Publishing")
        self.assertEqual(settings.plan_sku_name, "I1v2")
        self.assertEqual(settings.plan_sku_tier, "IsolatedV2")
        self.assertEqual(
            [app.name for app in settings.web_apps],
            ["app-dev-1", "app-dev-2"],
        )

        def check_password(args):
            self.assertEqual(args[0], "Password@secure1234!")

        return pulumi.Output.all(settings.jumpbox_admin_password).apply(check_password)

    @pulumi.runtime.test
    def test_reads_environment_overrides(self):
        pulumi.runtime.set_all_config(
            {
                "ase-prod:environment": "prod",
                "ase-prod:location": "northeurope",
                "ase-prod:vnetAddressSpace": "10.20.0.0/16",
                "ase-prod:aseSubnetPrefix": "10.20.0.0/23",
                "ase-prod:jumpboxSubnetPrefix": "10.20.2.0/24",
                "ase-prod:zoneRedundant": "true",
                "ase-prod:appServicePlanCapacity": "3",
                "ase-prod:jumpboxAdminPassword": "Another@secure1234!",
                "ase-prod:webApps": json.dumps(
                    [
                        {"name": "frontend"},
                        {
                            "name": "api",
                            "linuxFxVersion": "NODE|20-lts",
                            "appSettings": {"WEBSITES_PORT": "8000"},
                        },
                    ]
                ),
                "ase-prod:tags": json.dumps({"owner": "platform-team"}),
            }
        )

        settings = load_settings(pulumi.Config("ase-prod"))

        self.assertEqual(settings.environment, "prod")
        self.assertEqual(settings.location, "northeurope")
        self.assertEqual(settings.resource_group_name, "rg-ase-prod")
        self.assertTrue(settings.zone_redundant)
        self.assertEqual(settings.plan_capacity, 3)
        self.assertEqual(settings.web_apps[1].linux_fx_version, "NODE|20-lts")
        self.assertEqual(settings.web_apps[1].app_settings, {"WEBSITES_PORT": "8000"})
        self.assertEqual(settings.tags["owner"], "platform-team")
        self.assertEqual(settings.tags["environment"], "prod")

        return settings.jumpbox_admin_password.apply(
            lambda password: self.assertEqual(password, "Another@secure1234!")
        )

    def test_rejects_unknown_load_balancing_mode(self):
        pulumi.runtime.set_all_config(
            {"ase-bogus:internalLoadBalancingMode": "Publishing"}
        )

        with self.assertRaisesRegex(pulumi.RunError, "internalLoadBalancingMode"):
            load_settings(pulumi.Config("ase-bogus"))

    def test_requires_jumpbox_password(self):
        with self.assertRaises(pulumi.ConfigMissingError):
            load_settings(pulumi.Config("ase-without-password"))

    def test_keeps_explicit_zero_capacity_and_rejects_it(self):
        pulumi.runtime.set_all_config(
            {"ase-zero:appServicePlanCapacity": "0"}
        )

        with self.assertRaisesRegex(pulumi.RunError, "at least 1, got 0"):
            load_settings(pulumi.Config("ase-zero"))


class TestInternalInboundIp(unittest.TestCase):
    def test_first_address_rejects_empty_list(self):
        with self.assertRaisesRegex(pulumi.RunError, "no internal inbound IP"):
            _first_address([])

    def test_first_address_rejects_missing_configuration(self):
        with self.assertRaises(pulumi.RunError):
            _first_address(_internal_addresses(None))

    def test_first_address_picks_the_first_ip(self):
        self.assertEqual(_first_address(["10.0.1.11", "10.0.1.12"]), "10.0.1.11")

    def test_reads_addresses_from_either_key_style(self):
        self.assertEqual(
            _internal_addresses({"internalInboundIpAddresses": ["10.0.1.11"]}),
            ["10.0.1.11"],
        )
        self.assertEqual(
            _internal_addresses({"internal_inbound_ip_addresses": ["10.0.1.12"]}),
            ["10.0.1.12"],
        )


class TestWarnings(unittest.TestCase):
    def test_open_ssh_is_reported(self):
        settings = SimpleNamespace(ssh_source_prefix="*", jumpbox_name="vm-jumpbox-dev")

        with mock.patch.object(pulumi.log, "warn") as warn:
            self.assertTrue(warn_about_open_ssh(settings))

        warn.assert_called_once()
        self.assertIn("vm-jumpbox-dev", warn.call_args[0][0])

    def test_restricted_ssh_is_quiet(self):
        settings = SimpleNamespace(
            ssh_source_prefix="203.0.113.0/24", jumpbox_name="vm-jumpbox-dev"
        )

        with mock.patch.object(pulumi.log, "warn") as warn:
            self.assertFalse(warn_about_open_ssh(settings))

        warn.assert_not_called()


if __name__ == "__main__":
    unittest.main()
