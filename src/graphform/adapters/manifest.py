"""TOML manifest declaring the desired graphs and tokens.

Each table ``[<kind>.<key>]`` declares one resource at address ``<kind>.<key>``.
"""

from __future__ import annotations

import tomllib
from logging import getLogger
from typing import TYPE_CHECKING, Annotated, Any

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StringConstraints

from graphform.domain.convergence import DeclaredResource
from graphform.domain.errors import ValidationError
from graphform.domain.model import (
    DEFAULT_NAMESPACE,
    FederatedGraph,
    Monograph,
    ResourceKind,
    RouterToken,
    SubscriptionProtocol,
    WebsocketSubprotocol,
)

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)

KEY_PATTERN = r"^[A-Za-z0-9_-]+$"


class ManifestError(ValidationError):
    """The manifest cannot be read or does not describe valid resources."""


class ManifestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


def _namespace(value: str | None) -> str:
    return value if value and value.strip() else DEFAULT_NAMESPACE


class FederatedGraphDeclaration(ManifestModel):
    name: str = Field(min_length=1)
    namespace: str | None = None
    routing_url: str = Field(min_length=1)
    readme: str | None = None
    admission_webhook_url: str | None = None
    admission_webhook_secret: str | None = None
    label_matchers: list[str] = Field(default_factory=list)

    def to_state(self) -> FederatedGraph:
        return FederatedGraph(
            name=self.name,
            namespace=_namespace(self.namespace),
            routing_url=self.routing_url,
            readme=self.readme,
            admission_webhook_url=self.admission_webhook_url,
            admission_webhook_secret=self.admission_webhook_secret,
            label_matchers=tuple(self.label_matchers),
        )


class MonographDeclaration(ManifestModel):
    name: str = Field(min_length=1)
    namespace: str | None = None
    routing_url: str = Field(min_length=1)
    graph_url: str = Field(min_length=1)
    subscription_url: str | None = None
    subscription_protocol: SubscriptionProtocol | None = None
    websocket_subprotocol: WebsocketSubprotocol | None = None
    readme: str | None = None
    admission_webhook_url: str | None = None
    admission_webhook_secret: str | None = None

    def to_state(self) -> Monograph:
        return Monograph(
            name=self.name,
            namespace=_namespace(self.namespace),
            routing_url=self.routing_url,
            graph_url=self.graph_url,
            subscription_url=self.subscription_url,
            subscription_protocol=self.subscription_protocol,
            websocket_subprotocol=self.websocket_subprotocol,
            readme=self.readme,
            admission_webhook_url=self.admission_webhook_url,
            admission_webhook_secret=self.admission_webhook_secret,
        )


class RouterTokenDeclaration(ManifestModel):
    name: str = Field(min_length=1)
    graph_name: str = Field(min_length=1)
    namespace: str | None = None

    def to_state(self) -> RouterToken:
        return RouterToken(
            name=self.name,
            graph_name=self.graph_name,
            namespace=_namespace(self.namespace),
        )


ResourceKey = Annotated[str, StringConstraints(pattern=KEY_PATTERN)]


class ManifestDocument(ManifestModel):
    federated_graph: dict[ResourceKey, FederatedGraphDeclaration] = Field(default_factory=dict)
    monograph: dict[ResourceKey, MonographDeclaration] = Field(default_factory=dict)
    router_token: dict[ResourceKey, RouterTokenDeclaration] = Field(default_factory=dict)

    def declared_resources(self) -> list[DeclaredResource]:
        sections: tuple[tuple[ResourceKind, dict[str, Any]], ...] = (
            (ResourceKind.FEDERATED_GRAPH, self.federated_graph),
            (ResourceKind.MONOGRAPH, self.monograph),
            (ResourceKind.ROUTER_TOKEN, self.router_token),
        )
        return [
            DeclaredResource(address=f"{kind}.{key}", kind=kind, state=declaration.to_state())
            for kind, section in sections
            for key, declaration in section.items()
        ]


def parse_manifest(text: str) -> list[DeclaredResource]:
    try:
        raw = tomllib.loads(text)
    except tomllib.TOMLDecodeError as exc:
        raise ManifestError(f"Manifest is not valid TOML: {exc}") from exc
    try:
        document = ManifestDocument.model_validate(raw)
    except pydantic.ValidationError as exc:
        raise ManifestError(f"Manifest is invalid:\n{exc}") from exc
    return document.declared_resources()


def load_manifest(path: Path) -> list[DeclaredResource]:
    """Read ``path`` and return one declaration per resource table."""

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ManifestError(f"Cannot read manifest {path}: {exc}") from exc
    declared = parse_manifest(text)
    log.debug("Loaded %s declaration(s) from %s", len(declared), path)
    return declared
