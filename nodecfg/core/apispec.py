"""
Dependency references (API specs) and the list algebra used to combine them.

All functions are pure: inputs are never mutated, new lists are returned.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .versions import compare_versions


@dataclass(frozen=True)
class APISpec:
    """
    Resolved, versioned dependency required by a workload.

    Fields:
        spec_ref: Service URL
        org: Organization owning the service
        version: Concrete version
        singleton: Only one version may run on a node at a time
        arch: Hardware architecture
    """
    spec_ref: str
    org: str
    version: str
    singleton: bool = False
    arch: str = ""

    @property
    def key(self) -> Tuple[str, str, str]:
        return (self.spec_ref, self.org, self.version)

    def same_service(self, other: "APISpec") -> bool:
        return self.spec_ref == other.spec_ref and self.org == other.org

    def to_dict(self) -> Dict[str, Any]:
        return {
            "spec_ref": self.spec_ref,
            "org": self.org,
            "version": self.version,
            "singleton": self.singleton,
            "arch": self.arch,
        }

    @staticmethod
    def from_dict(data: Dict[str, Any]) -> "APISpec":
        return APISpec(
            spec_ref=data["spec_ref"],
            org=data["org"],
            version=data["version"],
            singleton=bool(data.get("singleton", False)),
            arch=data.get("arch", ""),
        )


def merge_without_duplicates(base: Sequence[APISpec], incoming: Sequence[APISpec]) -> List[APISpec]:
    """
    Append incoming entries to base, omitting exact duplicates.

    Two entries are duplicates when spec_ref, org and version all match.
    """
    merged = list(base)
    seen = {spec.key for spec in merged}
    for spec in incoming:
        if spec.key in seen:
            continue
        seen.add(spec.key)
        merged.append(spec)
    return merged


def _singleton_rival(specs: Sequence[APISpec], spec: APISpec) -> Optional[APISpec]:
    for candidate in specs:
        if candidate.singleton and candidate.same_service(spec):
            return candidate
    return None


def replace_higher_singleton(
    base: Sequence[APISpec], incoming: Sequence[APISpec]
) -> Tuple[List[APISpec], List[APISpec]]:
    """
    Resolve singleton conflicts between base and incoming.

    For each singleton in incoming, a singleton of the same service already
    in base (or accepted earlier from incoming) with a lower version is
    removed; if the existing one is at the same or a higher version the
    incoming entry is dropped instead. Non-singletons pass through.

    Returns:
        (kept_base, accepted_incoming) ready to be merged

    Raises:
        InvalidVersionError: If a conflicting pair carries a malformed version
    """
    kept = list(base)
    accepted: List[APISpec] = []

    for spec in incoming:
        if not spec.singleton:
            accepted.append(spec)
            continue

        rival = _singleton_rival(kept, spec)
        pool = kept
        if rival is None:
            rival = _singleton_rival(accepted, spec)
            pool = accepted

        if rival is not None:
            if compare_versions(rival.version, spec.version) >= 0:
                continue
            pool.remove(rival)

        accepted.append(spec)

    return kept, accepted


def resolve_into(total: Sequence[APISpec], incoming: Sequence[APISpec]) -> List[APISpec]:
    """Fold one resolved sub-list into the running total."""
    kept, accepted = replace_higher_singleton(total, incoming)
    return merge_without_duplicates(kept, accepted)
