"""Remote state backend for the ase-environment project.

Runs against a local login (``pulumi login --local``) since the backend it
creates does not exist yet.
"""

import pulumi

from backend import create_state_backend, load_backend_settings

state_backend = create_state_backend(load_backend_settings())

pulumi.export("storageAccountName", state_backend.account.name)
pulumi.export("backendUrl", state_backend.backend_url)
pulumi.export("primaryStorageKey", state_backend.primary_key)
pulumi.export("resourceGroup", state_backend.resource_group.name)
