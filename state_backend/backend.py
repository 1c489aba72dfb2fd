"""Remote state storage for the ASE stacks.

Pulumi keeps stack state in the ``state`` blob container once the main project
is logged in with ``pulumi login azblob://state`` and
``AZURE_STORAGE_ACCOUNT`` points at the account created here.
"""

from dataclasses import dataclass
from typing import Optional

import pulumi
from pulumi_azure_native import resources, storage

STATE_CONTAINER_NAME = "state"


@dataclass
class BackendSettings:
    location: str
    resource_group_name: str
    storage_account_name: str
    storage_sku: str
    container_name: str
    retention_days: int


def load_backend_settings(config: Optional[pulumi.Config] = None) -> BackendSettings:
    if config is None:
        config = pulumi.Config()

    storage_account_name = config.get("storageAccountName")
    if storage_account_name is None:
        storage_account_name = "sapulumiasestate"
    if not (3 <= len(storage_account_name) <= 24) or not (
        storage_account_name.isalnum() and storage_account_name.islower()
    ):
        raise pulumi.RunError(
            "storageAccountName must be 3-24 lowercase letters and digits, "
            f"got {storage_account_name!r}"
        )

    return BackendSettings(
        location=config.get("location") or "westeurope",
        resource_group_name=config.get("resourceGroupName") or "rg-pulumi-state",
        storage_account_name=storage_account_name,
        storage_sku=config.get("storageSku") or "Standard_ZRS",
        container_name=config.get("containerName") or STATE_CONTAINER_NAME,
        retention_days=config.get_int("retentionDays") or 30,
    )


@dataclass
class StateBackend:
    resource_group: resources.ResourceGroup
    account: storage.StorageAccount
    container: storage.BlobContainer
    backend_url: str
    primary_key: pulumi.Output


def create_state_backend(settings: BackendSettings) -> StateBackend:
    resource_group = resources.ResourceGroup(
        "state-resource-group",
        resource_group_name=settings.resource_group_name,
        location=settings.location,
    )

    account = storage.StorageAccount(
        "state-storage-account",
        resource_group_name=resource_group.name,
        location=resource_group.location,
        account_name=settings.storage_account_name,
        sku=storage.SkuArgs(
            name=settings.storage_sku,
        ),
        kind=storage.Kind.STORAGE_V2,
        allow_blob_public_access=False,
        minimum_tls_version=storage.MinimumTlsVersion.TLS1_2,
        enable_https_traffic_only=True,
        opts=pulumi.ResourceOptions(protect=True),
    )

    # Keep old state versions around so a bad update can be rolled back
    storage.BlobServiceProperties(
        "state-blob-service",
        resource_group_name=resource_group.name,
        account_name=account.name,
        blob_services_name="default",
        is_versioning_enabled=True,
        delete_retention_policy=storage.DeleteRetentionPolicyArgs(
            enabled=True,
            days=settings.retention_days,
        ),
        container_delete_retention_policy=storage.DeleteRetentionPolicyArgs(
            enabled=True,
            days=settings.retention_days,
        ),
    )

    container = storage.BlobContainer(
        "state-container",
        resource_group_name=resource_group.name,
        account_name=account.name,
        container_name=settings.container_name,
        public_access=storage.PublicAccess.NONE,
    )

    account_keys = storage.list_storage_account_keys_output(
        resource_group_name=resource_group.name,
        account_name=account.name,
    )

    return StateBackend(
        resource_group=resource_group,
        account=account,
        container=container,
        backend_url=f"azblob://{settings.container_name}",
        primary_key=pulumi.Output.secret(account_keys.keys[0].value),
    )
