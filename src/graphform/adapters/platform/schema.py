"""Pydantic models for the control-plane RPC payloads (protobuf JSON mapping)."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field

SERVICE_PATH = "/wg.cosmo.platform.v1.PlatformService"


class StatusCode(StrEnum):
    OK = "OK"
    ERR = "ERR"
    ERR_NOT_FOUND = "ERR_NOT_FOUND"
    ERR_ALREADY_EXISTS = "ERR_ALREADY_EXISTS"
    ERR_INVALID_LABELS = "ERR_INVALID_LABELS"
    ERR_SUBGRAPH_COMPOSITION_FAILED = "ERR_SUBGRAPH_COMPOSITION_FAILED"
    ERR_DEPLOYMENT_FAILED = "ERR_DEPLOYMENT_FAILED"


class PlatformBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class RequestModel(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    def to_body(self) -> dict[str, object]:
        # absent optionals are left out instead of being sent as null
        return self.model_dump(by_alias=True, exclude_none=True)


# --- responses ------------------------------------------------------------------


class StatusEnvelope(PlatformBaseModel):
    # proto3 JSON omits enum zero values, so a missing code is OK
    code: str = StatusCode.OK
    details: str | None = None


class ConnectErrorBody(PlatformBaseModel):
    code: str
    message: str | None = None


class CompositionErrorPayload(PlatformBaseModel):
    message: str
    federated_graph_name: str | None = Field(default=None, alias="federatedGraphName")
    namespace: str | None = None
    feature_flag: str | None = Field(default=None, alias="featureFlag")


class DeploymentErrorPayload(PlatformBaseModel):
    message: str
    federated_graph_name: str | None = Field(default=None, alias="federatedGraphName")
    namespace: str | None = None


class StatusResponse(PlatformBaseModel):
    response: StatusEnvelope | None = None


class MutationResponse(StatusResponse):
    composition_errors: list[CompositionErrorPayload] = Field(
        default_factory=list, alias="compositionErrors"
    )
    deployment_errors: list[DeploymentErrorPayload] = Field(
        default_factory=list, alias="deploymentErrors"
    )


class FederatedGraphPayload(PlatformBaseModel):
    id: str
    name: str
    namespace: str
    routing_url: str = Field(default="", alias="routingURL")
    label_matchers: list[str] = Field(default_factory=list, alias="labelMatchers")
    readme: str | None = None
    admission_webhook_url: str | None = Field(default=None, alias="admissionWebhookUrl")


class GetFederatedGraphByNameResponse(StatusResponse):
    graph: FederatedGraphPayload | None = None


class CreateTokenResponse(StatusResponse):
    token: str = ""


# --- requests -------------------------------------------------------------------


class FederatedGraphRequest(RequestModel):
    """Body of ``CreateFederatedGraph`` and ``UpdateFederatedGraph``."""

    name: str
    namespace: str
    routing_url: str = Field(alias="routingUrl")
    label_matchers: list[str] = Field(default_factory=list, alias="labelMatchers")
    readme: str | None = None
    admission_webhook_url: str | None = Field(default=None, alias="admissionWebhookURL")
    admission_webhook_secret: str | None = Field(default=None, alias="admissionWebhookSecret")


class MonographRequest(RequestModel):
    """Body of ``CreateMonograph`` and ``UpdateMonograph``."""

    name: str
    namespace: str
    routing_url: str = Field(alias="routingUrl")
    graph_url: str = Field(alias="graphUrl")
    subscription_url: str | None = Field(default=None, alias="subscriptionUrl")
    subscription_protocol: str | None = Field(default=None, alias="subscriptionProtocol")
    websocket_subprotocol: str | None = Field(default=None, alias="websocketSubprotocol")
    readme: str | None = None
    admission_webhook_url: str | None = Field(default=None, alias="admissionWebhookURL")
    admission_webhook_secret: str | None = Field(default=None, alias="admissionWebhookSecret")


class GraphLookupRequest(RequestModel):
    """Body of the by-name read and delete calls."""

    name: str
    namespace: str


class CreateTokenRequest(RequestModel):
    token_name: str = Field(alias="tokenName")
    graph_name: str = Field(alias="graphName")
    namespace: str


class DeleteTokenRequest(RequestModel):
    token_name: str = Field(alias="tokenName")
    namespace: str
