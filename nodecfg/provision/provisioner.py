"""
Auto-provisioning of resolved pattern dependencies.

Iterates the resolved list in order. ALREADY_PRESENT is absorbed locally;
the first NEEDS_MANUAL_CONFIG or FATAL outcome stops the pass. Services
created earlier in the pass are kept (no rollback).
"""

from typing import List, Optional, Sequence

from ..core.apispec import APISpec
from ..core.errors import InvalidInputError, SystemicError
from ..core.events import Event
from ..core.models import ServiceSpec
from ..logging_config import get_logger
from ..metrics import track_provision_outcome
from .outcome import OutcomeKind, ProvisionOutcome, ServiceProvisioner


def make_service_name(spec_ref: str, org: str, version: str) -> str:
    """
    Derive the local service name for a dependency.

    Example:
        make_service_name("https://bluehorizon.network/microservices/gps", "e2edev", "2.0.3")
        -> "bluehorizon.network-microservices-gps_e2edev_2.0.3"
    """
    url = ""
    pieces = spec_ref.split("/", 2)
    if len(pieces) >= 3:
        url = pieces[2]
        if url.endswith("/"):
            url = url[:-1]
        url = url.replace("/", "-")
    return f"{url}_{org}_{version}"


def service_spec_for(api_spec: APISpec) -> ServiceSpec:
    return ServiceSpec(
        spec_ref=api_spec.spec_ref,
        org=api_spec.org,
        name=make_service_name(api_spec.spec_ref, api_spec.org, api_spec.version),
        version=api_spec.version,
    )


class AutoProvisioner:
    """
    Provisions every resolved dependency through a ServiceProvisioner.

    Responsibilities:
    - Derive the service request for each dependency
    - Classify each outcome and collect PolicyCreated notifications

    NOT responsible for:
    - Resolution (that's in resolve.resolver)
    - Persisting the configuration state (that's in controller)
    """

    def __init__(self, provisioner: ServiceProvisioner, trace_id: Optional[str] = None) -> None:
        self.provisioner = provisioner
        self.logger = get_logger(__name__, trace_id=trace_id)

    def provision(self, api_specs: Sequence[APISpec]) -> List[Event]:
        """
        Provision all dependencies.

        Returns:
            PolicyCreated notifications, in dependency order

        Raises:
            InvalidInputError: A dependency needs configuration the node user must supply
            SystemicError: A dependency could not be provisioned for any other reason
        """
        notifications = []

        for api_spec in api_specs:
            service = service_spec_for(api_spec)
            outcome = self._create(service)
            track_provision_outcome(outcome.kind.value)

            if outcome.kind is OutcomeKind.CREATED:
                self.logger.debug(f"Configstate autoconfig created service {service.name}")
                if outcome.notification is not None:
                    notifications.append(outcome.notification)
            elif outcome.kind is OutcomeKind.ALREADY_PRESENT:
                # The node user may configure any dependency before asking for configured.
                self.logger.debug(f"Service {service.spec_ref} {service.org} already provisioned")
            elif outcome.kind is OutcomeKind.NEEDS_MANUAL_CONFIG:
                raise InvalidInputError(
                    f"Configstate autoconfig, service {api_spec.spec_ref} {api_spec.org} "
                    f"{api_spec.version}, {outcome.detail}",
                    "configstate.state",
                )
            elif outcome.kind is OutcomeKind.FATAL:
                raise SystemicError(
                    f"unexpected error returned from service create for {service.name}: {outcome.detail}"
                )
            else:
                raise SystemicError(f"unknown provisioning outcome {outcome.kind!r} for {service.name}")

        return notifications

    def _create(self, service: ServiceSpec) -> ProvisionOutcome:
        try:
            return self.provisioner.create_service(service)
        except Exception as ex:
            self.logger.error(f"Service provisioner raised for {service.name}: {ex}")
            return ProvisionOutcome.fatal(service, f"({type(ex).__name__}) {ex}")
