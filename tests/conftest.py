import pulumi
import pytest

PROJECT = "ase-environment"
STACK = "dev"
ILB_IP = "10.0.1.11"
STORAGE_KEY = "c3RhdGUta2V5LWZvci10ZXN0cw=="

BASE_CONFIG = {
    f"{PROJECT}:jumpboxAdminPassword": "Password@secure1234!",
}


class MyMocks(pulumi.runtime.Mocks):
    def new_resource(self, args: pulumi.runtime.MockResourceArgs):
        outputs = dict(args.inputs)
        outputs.setdefault("name", args.name)
        if args.typ == "azure-native:web:AppServiceEnvironment":
            outputs["networkingConfiguration"] = {
                "internalInboundIpAddresses": [ILB_IP],
                "externalInboundIpAddresses": [],
            }
        return [args.name + "_id", outputs]

    def call(self, args: pulumi.runtime.MockCallArgs):
        if args.token == "azure-native:storage:listStorageAccountKeys":
            return {
                "keys": [
                    {
                        "keyName": "key1",
                        "permissions": "Full",
                        "value": STORAGE_KEY,
                    }
                ],
            }
        return {}


pulumi.runtime.set_mocks(
    MyMocks(),
    project=PROJECT,
    stack=STACK,
    preview=False,  # Sets the flag `dry_run`, which is true at runtime during a preview.
)

pulumi.runtime.set_all_config(BASE_CONFIG)


@pytest.fixture(autouse=True)
def base_config():
    # set_all_config replaces the whole config, so tests that add keys start
    # from the base config and leave it behind them
    pulumi.runtime.set_all_config(BASE_CONFIG)
    yield
    pulumi.runtime.set_all_config(BASE_CONFIG)
