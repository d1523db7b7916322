"""
clusterkube/models/kubeconfig.py

Pydantic models for a kubeconfig document plus the parse/render pair used to
display a fetched admin.conf. Only the outer structure is modelled; the
per-cluster, per-context and per-user payloads are kept as plain mappings
and unknown keys are preserved, so rendering never drops data.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from clusterkube.errors import ParseError


class NamedCluster(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    cluster: Dict[str, Any] = Field(default_factory=dict)


class NamedContext(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    context: Dict[str, Any] = Field(default_factory=dict)


class NamedUser(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    user: Dict[str, Any] = Field(default_factory=dict)


class KubeconfigDocument(BaseModel):
    """
    A parsed kubeconfig (clientcmd v1 Config). Field names follow the
    document's own keys through aliases, e.g. `current-context`.
    """

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    api_version: str = Field(default="v1", alias="apiVersion")
    kind: str = "Config"
    clusters: List[NamedCluster] = Field(default_factory=list)
    contexts: List[NamedContext] = Field(default_factory=list)
    users: List[NamedUser] = Field(default_factory=list)
    current_context: Optional[str] = Field(default=None, alias="current-context")
    preferences: Dict[str, Any] = Field(default_factory=dict)

    def server_urls(self) -> List[str]:
        """API server URLs of every cluster entry, in order."""
        return [
            str(entry.cluster["server"])
            for entry in self.clusters
            if "server" in entry.cluster
        ]


def parse_kubeconfig(content: str) -> KubeconfigDocument:
    """
    Parse kubeconfig text into a KubeconfigDocument.

    Raises:
        ParseError: if the text is not YAML, not a mapping, or does not match
            the kubeconfig structure.
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as exc:
        raise ParseError(f"kubeconfig is not valid YAML: {exc}") from exc

    if not isinstance(data, dict):
        raise ParseError(
            f"kubeconfig must be a mapping, got {type(data).__name__}"
        )

    try:
        return KubeconfigDocument.model_validate(data)
    except ValidationError as exc:
        raise ParseError(f"kubeconfig has an unexpected structure: {exc}") from exc


def render_kubeconfig(doc: KubeconfigDocument) -> str:
    """
    Render a KubeconfigDocument as block-style YAML, keeping key order.
    """
    return yaml.safe_dump(
        doc.model_dump(by_alias=True, exclude_none=True),
        sort_keys=False,
        default_flow_style=False,
    )
