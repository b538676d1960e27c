"""
Collaborator wiring shared by CLI commands.
"""

from typing import Dict, List, Optional

import kubernetes
import typer

from nodecfg.config import ControllerConfig
from nodecfg.core.errors import DeviceStoreError, InvalidInputError, NotFoundError, RegistryError, SystemicError
from nodecfg.provision import ServiceProvisioner, StoreServiceProvisioner
from nodecfg.provision.k8s import KubernetesServiceProvisioner
from nodecfg.registry import FileRegistry, Registry
from nodecfg.store import DeviceStore, FileDeviceStore

EXIT_SYSTEMIC = 1
EXIT_INVALID_INPUT = 2
EXIT_NOT_FOUND = 4


def exit_code_for(err: Exception) -> int:
    if isinstance(err, NotFoundError):
        return EXIT_NOT_FOUND
    if isinstance(err, InvalidInputError):
        return EXIT_INVALID_INPUT
    return EXIT_SYSTEMIC


def parse_attributes(pairs: Optional[List[str]]) -> Dict[str, str]:
    """Parse repeated --attr name=value options."""
    attributes = {}
    for pair in pairs or []:
        name, sep, value = pair.partition("=")
        if not sep or not name:
            raise typer.BadParameter(f"expected name=value, got {pair!r}", param_hint="--attr")
        attributes[name] = value
    return attributes


def open_store(config: ControllerConfig) -> DeviceStore:
    try:
        return FileDeviceStore(config.store_path)
    except DeviceStoreError as ex:
        raise SystemicError(str(ex)) from ex


def open_registry(config: ControllerConfig) -> Registry:
    try:
        return FileRegistry(path=config.registry_path)
    except RegistryError as ex:
        raise SystemicError(str(ex)) from ex


def build_provisioner(
    config: ControllerConfig, store: DeviceStore, registry: Registry, attributes: Dict[str, str]
) -> ServiceProvisioner:
    if config.provisioner == "kubernetes":
        # Try in-cluster config first, fallback to kubeconfig for local development
        try:
            kubernetes.config.load_incluster_config()
        except kubernetes.config.ConfigException:
            try:
                kubernetes.config.load_kube_config()
            except (kubernetes.config.ConfigException, OSError) as ex:
                raise SystemicError(f"unable to load Kubernetes configuration: {ex}") from ex
        return KubernetesServiceProvisioner(
            namespace=config.namespace,
            registry=registry,
            arch=config.arch,
            attributes=attributes,
        )
    return StoreServiceProvisioner(store, registry, config.arch, attributes=attributes)
