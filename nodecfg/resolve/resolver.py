"""
Pattern resolution: pattern -> workloads -> deduplicated dependency list.

Resolution is a fold over the pattern's workload version choices. Each step
produces a new list; nothing is accumulated in place.
"""

from functools import reduce
from typing import List, Tuple

from ..core.apispec import APISpec, resolve_into
from ..core.errors import InvalidVersionError, SystemicError
from ..core.models import Pattern, Workload
from ..logging_config import get_logger
from ..metrics import track_resolve_duration
from ..registry.client import Registry


class PatternResolver:
    """
    Resolves a node's pattern into the services it must run.

    Responsibilities:
    - Fetch exactly one pattern definition
    - Skip workloads built for another architecture
    - Resolve every workload version choice and fold the results

    NOT responsible for:
    - Provisioning (that's in provision.provisioner)
    """

    def __init__(self, registry: Registry, arch: str) -> None:
        self.registry = registry
        self.arch = arch

    def resolve(self, org: str, pattern_name: str, requester_id: str, token: str) -> List[APISpec]:
        """
        Produce the resolved dependency list for org/pattern_name.

        Raises:
            SystemicError: On any registry failure, wrong pattern count,
                unexpected pattern key or malformed dependency version
        """
        logger = get_logger(__name__, trace_id=requester_id)

        with track_resolve_duration():
            pattern = self._fetch_pattern(org, pattern_name, requester_id, token)
            logger.debug(f"Resolving pattern {pattern.key} with {len(pattern.workloads)} workloads")

            choices = self._workload_choices(pattern, logger)
            try:
                resolved = reduce(
                    lambda total, choice: resolve_into(total, self._resolve_choice(choice, requester_id, token)),
                    choices,
                    [],
                )
            except InvalidVersionError as ex:
                raise SystemicError(f"Unable to order dependency versions of pattern {pattern.key}: {ex}") from ex

        logger.debug(f"Pattern {pattern.key} resolved to {[s.key for s in resolved]}")
        return resolved

    def _fetch_pattern(self, org: str, pattern_name: str, requester_id: str, token: str) -> Pattern:
        try:
            patterns = self.registry.get_patterns(org, pattern_name, requester_id, token)
        except Exception as ex:
            raise SystemicError(f"Unable to read pattern object {pattern_name} from registry, error {ex}") from ex

        if len(patterns) != 1:
            raise SystemicError(f"Expected only 1 pattern from registry, received {len(patterns)}")

        key = f"{org}/{pattern_name}"
        if key not in patterns:
            raise SystemicError(f"Expected pattern id {key} not found in registry response: {sorted(patterns)}")
        return patterns[key]

    def _workload_choices(self, pattern: Pattern, logger) -> List[Tuple[Workload, str]]:
        choices = []
        for workload in pattern.workloads:
            if workload.arch != self.arch:
                logger.debug(f"Skipping workload {workload.url} built for {workload.arch}")
                continue
            for choice in workload.versions:
                choices.append((workload, choice.version))
        return choices

    def _resolve_choice(self, choice: Tuple[Workload, str], requester_id: str, token: str) -> List[APISpec]:
        workload, version = choice
        try:
            return list(
                self.registry.resolve_workload(workload.url, workload.org, version, self.arch, requester_id, token)
            )
        except Exception as ex:
            raise SystemicError(
                f"Error resolving workload {workload.url} {workload.org} {version} {self.arch}, error {ex}"
            ) from ex
