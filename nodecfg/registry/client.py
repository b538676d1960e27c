"""
Registry abstract interface.

The registry answers three questions for the controller: what a pattern
contains, which dependencies a workload version needs, and which user inputs
a service version declares.
"""

from abc import ABC, abstractmethod
from typing import Dict, List

from ..core.apispec import APISpec
from ..core.models import Pattern, ServiceDefinition


class Registry(ABC):
    """
    Abstract registry client.

    Implementations raise RegistryError on any failure, and own their
    timeout and retry policy.
    """

    @abstractmethod
    def get_patterns(self, org: str, pattern_name: str, requester_id: str, token: str) -> Dict[str, Pattern]:
        """
        Fetch pattern definitions keyed by "org/name".

        A well-behaved registry returns exactly one entry for the key.
        """
        ...

    @abstractmethod
    def resolve_workload(
        self, url: str, org: str, version: str, arch: str, requester_id: str, token: str
    ) -> List[APISpec]:
        """Return the fully resolved dependency list of one workload version."""
        ...

    @abstractmethod
    def get_service_definition(self, spec_ref: str, org: str, version: str, arch: str) -> ServiceDefinition:
        """Return the definition of one service version."""
        ...
