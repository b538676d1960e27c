"""
Auto-provisioning of pattern dependencies.

- ProvisionOutcome / OutcomeKind: tagged result of one provisioning attempt
- ServiceProvisioner: collaborator contract
- AutoProvisioner: classifies outcomes over a resolved dependency list
- StoreServiceProvisioner: records services in the device store
- KubernetesServiceProvisioner: records services as ConfigMaps
"""

from .outcome import OutcomeKind, ProvisionOutcome, ServiceProvisioner
from .provisioner import AutoProvisioner, make_service_name, service_spec_for
from .services import StoreServiceProvisioner

__all__ = [
    "OutcomeKind",
    "ProvisionOutcome",
    "ServiceProvisioner",
    "AutoProvisioner",
    "make_service_name",
    "service_spec_for",
    "StoreServiceProvisioner",
]
