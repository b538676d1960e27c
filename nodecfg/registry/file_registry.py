"""
Read-only registry backed by a local JSON document.

Document layout:
    {
      "patterns": {
        "e2edev/netspeed": {
          "workloads": [
            {"url": "...", "org": "...", "arch": "amd64",
             "versions": [{"version": "1.0.0"}]}
          ]
        }
      },
      "workloads": [
        {"url": "...", "org": "...", "version": "1.0.0", "arch": "amd64",
         "api_specs": [{"spec_ref": "...", "org": "...", "version": "2.0.3",
                        "singleton": true, "arch": "amd64"}]}
      ],
      "services": [
        {"spec_ref": "...", "org": "...", "version": "2.0.3", "arch": "amd64",
         "user_inputs": [{"name": "HZN_LAT", "type": "float", "default": null}]}
      ]
    }

Versions are matched exactly.
"""

import json
import logging
from typing import Any, Dict, List, Optional

from ..core.apispec import APISpec
from ..core.errors import RegistryError
from ..core.models import Pattern, ServiceDefinition, UserInput, Workload
from .client import Registry

logger = logging.getLogger(__name__)


class FileRegistry(Registry):
    """Registry answering from a JSON document loaded once at construction."""

    def __init__(self, path: Optional[str] = None, document: Optional[Dict[str, Any]] = None) -> None:
        """
        Args:
            path: Path to the registry JSON document
            document: Already-parsed document (takes precedence over path)

        Raises:
            RegistryError: If the document cannot be read or parsed
        """
        if document is None:
            if path is None:
                raise RegistryError("either path or document is required")
            try:
                with open(path, "r") as f:
                    document = json.load(f)
            except (OSError, ValueError) as ex:
                raise RegistryError(f"cannot load registry document {path}: {ex}") from ex

        self.path = path
        self.document = document

    def get_patterns(self, org: str, pattern_name: str, requester_id: str, token: str) -> Dict[str, Pattern]:
        key = f"{org}/{pattern_name}"
        logger.debug(f"Registry lookup of pattern {key} for {requester_id}")

        raw = self.document.get("patterns", {}).get(key)
        if raw is None:
            return {}
        try:
            workloads = [Workload.from_dict(w) for w in raw.get("workloads", [])]
        except (KeyError, TypeError) as ex:
            raise RegistryError(f"malformed pattern {key}: {ex}") from ex
        return {key: Pattern(org=org, name=pattern_name, workloads=workloads)}

    def resolve_workload(
        self, url: str, org: str, version: str, arch: str, requester_id: str, token: str
    ) -> List[APISpec]:
        for entry in self.document.get("workloads", []):
            if (
                entry.get("url") == url
                and entry.get("org") == org
                and entry.get("version") == version
                and entry.get("arch") == arch
            ):
                try:
                    return [APISpec.from_dict(s) for s in entry.get("api_specs", [])]
                except (KeyError, TypeError) as ex:
                    raise RegistryError(f"malformed workload {url} {org} {version}: {ex}") from ex
        raise RegistryError(f"workload {url} {org} {version} {arch} not found")

    def get_service_definition(self, spec_ref: str, org: str, version: str, arch: str) -> ServiceDefinition:
        for entry in self.document.get("services", []):
            if (
                entry.get("spec_ref") == spec_ref
                and entry.get("org") == org
                and entry.get("version") == version
                and entry.get("arch") == arch
            ):
                try:
                    user_inputs = [
                        UserInput(name=ui["name"], type=ui.get("type", "string"), default=ui.get("default"))
                        for ui in entry.get("user_inputs", [])
                    ]
                except (KeyError, TypeError) as ex:
                    raise RegistryError(f"malformed service {spec_ref} {org} {version}: {ex}") from ex
                return ServiceDefinition(
                    spec_ref=spec_ref, org=org, version=version, arch=arch, user_inputs=user_inputs
                )
        raise RegistryError(f"service {spec_ref} {org} {version} {arch} not found")
