"""
Service provisioner backed by Kubernetes ConfigMaps.

Each provisioned service is recorded as a ConfigMap named after the service
in the controller's namespace. The API server's 409 Conflict is the
already-present signal.
"""

import re
import time
from typing import Any, Callable, Dict, Optional

from kubernetes import client

from ..core.canonical import canonical_json_str
from ..core.errors import RegistryError
from ..core.events import policy_created
from ..core.ids import stable_id
from ..core.models import ServiceSpec
from ..logging_config import get_logger
from ..registry.client import Registry
from .outcome import ProvisionOutcome, ServiceProvisioner

logger = get_logger(__name__)

CONFIGMAP_PREFIX = "nodecfg-svc-"
MAX_NAME_LENGTH = 253
MANAGED_BY_LABEL = {"app.kubernetes.io/managed-by": "nodecfg"}


def configmap_name(service_name: str) -> str:
    """
    DNS-1123 subdomain name for a service ConfigMap.

    Over-long names are truncated and suffixed with a stable hash.
    """
    body = re.sub(r"[^a-z0-9.-]+", "-", service_name.lower()).strip("-.")
    name = f"{CONFIGMAP_PREFIX}{body}"
    if len(name) <= MAX_NAME_LENGTH:
        return name
    suffix = stable_id(service_name)[:10]
    return f"{name[:MAX_NAME_LENGTH - len(suffix) - 1].rstrip('-.')}-{suffix}"


class KubernetesServiceProvisioner(ServiceProvisioner):
    """
    Provisions services as ConfigMaps in one namespace.

    Args:
        core_api: CoreV1Api client (created from loaded kube config when None)
        namespace: Namespace owning the service ConfigMaps
        registry: Registry providing service definitions
        arch: Node hardware architecture
        attributes: Values the node user supplied for service user inputs
    """

    def __init__(
        self,
        namespace: str,
        registry: Registry,
        arch: str,
        core_api: Optional[client.CoreV1Api] = None,
        attributes: Optional[Dict[str, Any]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.namespace = namespace
        self.registry = registry
        self.arch = arch
        self.core_api = core_api if core_api is not None else client.CoreV1Api()
        self.attributes = dict(attributes or {})
        self.clock = clock

    def create_service(self, service: ServiceSpec) -> ProvisionOutcome:
        try:
            definition = self.registry.get_service_definition(
                service.spec_ref, service.org, service.version, self.arch
            )
        except RegistryError as ex:
            return ProvisionOutcome.fatal(service, f"unable to read service definition: {ex}")

        missing = definition.missing_inputs(self.attributes)
        if missing:
            return ProvisionOutcome.needs_manual_config(
                service, f"variables {', '.join(missing)} must be configured"
            )

        name = configmap_name(service.name)
        cm = client.V1ConfigMap(
            metadata=client.V1ObjectMeta(name=name, namespace=self.namespace, labels=dict(MANAGED_BY_LABEL)),
            data={"service.json": canonical_json_str(service.to_dict())},
        )

        try:
            self.core_api.create_namespaced_config_map(self.namespace, cm)
        except client.exceptions.ApiException as e:
            if e.status == 409:  # Already exists
                logger.info(f"ConfigMap {self.namespace}/{name} already exists")
                return ProvisionOutcome.already_present(service, f"ConfigMap {self.namespace}/{name} exists")
            return ProvisionOutcome.fatal(
                service, f"ConfigMap {self.namespace}/{name} create failed: {e.status} {e.reason}"
            )

        logger.info(f"Created ConfigMap {self.namespace}/{name}")
        notification = policy_created(
            service.name, service.spec_ref, service.org, service.version, int(self.clock())
        )
        return ProvisionOutcome.created(service, notification)
