"""Connect/JSON client for the control-plane PlatformService."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

import httpx
import pydantic

from graphform.adapters.http_resilience import ResilientClient, build_limiter
from graphform.domain.errors import CompositionFailedError, GenericApiError, NotFoundError
from graphform.domain.ports.platform import CallResult

from .schema import (
    SERVICE_PATH,
    ConnectErrorBody,
    CreateTokenRequest,
    CreateTokenResponse,
    DeleteTokenRequest,
    GetFederatedGraphByNameResponse,
    GraphLookupRequest,
    MutationResponse,
    StatusCode,
    StatusResponse,
)
from .translator import (
    graph_request,
    monograph_request,
    parse_graph_snapshot,
    parse_mutation_summary,
)

if TYPE_CHECKING:
    from graphform.adapters.http_resilience import ClientFactory
    from graphform.config.platform import PlatformConfig
    from graphform.domain.errors import ApiError
    from graphform.domain.model import FederatedGraph, GraphSnapshot, Monograph, MutationSummary

    from .schema import RequestModel

log = getLogger(__name__)

CONNECT_NOT_FOUND = "not_found"
NIL_RESPONSE = "the server response is nil"


class PlatformClient:
    """One POST per capability; failures come back classified inside a ``CallResult``.

    Nothing here raises for remote trouble: transport errors, error statuses and
    malformed bodies all become ``GenericApiError`` values. Only cancellation
    escapes.
    """

    def __init__(
        self,
        *,
        config: PlatformConfig,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._config = config
        self._resilience = config.resilience
        self._client_factory = client_factory or ResilientClient
        self._limiter = build_limiter(config.resilience)

    # --- federated graphs -------------------------------------------------------

    async def create_federated_graph(self, graph: FederatedGraph) -> CallResult[MutationSummary]:
        return await self._mutate("CreateFederatedGraph", graph_request(graph))

    async def read_federated_graph(self, name: str, namespace: str) -> CallResult[GraphSnapshot]:
        return await self._read_graph(name, namespace, reason="GetFederatedGraphByName")

    async def update_federated_graph(self, graph: FederatedGraph) -> CallResult[MutationSummary]:
        return await self._mutate("UpdateFederatedGraph", graph_request(graph))

    async def delete_federated_graph(self, name: str, namespace: str) -> CallResult[None]:
        return await self._delete(
            "DeleteFederatedGraph", GraphLookupRequest(name=name, namespace=namespace)
        )

    # --- monographs -------------------------------------------------------------

    async def create_monograph(self, monograph: Monograph) -> CallResult[MutationSummary]:
        return await self._mutate("CreateMonograph", monograph_request(monograph))

    async def read_monograph(self, name: str, namespace: str) -> CallResult[GraphSnapshot]:
        return await self._read_graph(name, namespace, reason="GetMonograph")

    async def update_monograph(self, monograph: Monograph) -> CallResult[MutationSummary]:
        return await self._mutate("UpdateMonograph", monograph_request(monograph))

    async def delete_monograph(self, name: str, namespace: str) -> CallResult[None]:
        return await self._delete(
            "DeleteMonograph", GraphLookupRequest(name=name, namespace=namespace)
        )

    # --- router tokens ----------------------------------------------------------

    async def create_token(self, name: str, graph_name: str, namespace: str) -> CallResult[str]:
        request = CreateTokenRequest(token_name=name, graph_name=graph_name, namespace=namespace)
        payload, error = await self._call(
            "CreateFederatedGraphToken", request, CreateTokenResponse
        )
        if error is not None or payload is None:
            return CallResult(error=error)
        return CallResult(value=payload.token or None)

    async def delete_token(self, name: str, namespace: str) -> CallResult[None]:
        return await self._delete(
            "DeleteRouterToken", DeleteTokenRequest(token_name=name, namespace=namespace)
        )

    # --- helpers ----------------------------------------------------------------

    async def _mutate(self, method: str, request: RequestModel) -> CallResult[MutationSummary]:
        payload, error = await self._call(method, request, MutationResponse)
        summary = parse_mutation_summary(payload) if payload is not None else None
        return CallResult(value=summary, error=error)

    async def _read_graph(
        self, name: str, namespace: str, *, reason: str
    ) -> CallResult[GraphSnapshot]:
        payload, error = await self._call(
            "GetFederatedGraphByName",
            GraphLookupRequest(name=name, namespace=namespace),
            GetFederatedGraphByNameResponse,
            reason=reason,
            reading=True,
        )
        if error is not None or payload is None:
            return CallResult(error=error)
        if payload.graph is None:
            return CallResult(
                error=GenericApiError("graph missing from response", reason=reason, status="OK")
            )
        return CallResult(value=parse_graph_snapshot(payload.graph))

    async def _delete(self, method: str, request: RequestModel) -> CallResult[None]:
        _, error = await self._call(method, request, StatusResponse)
        return CallResult(error=error)

    async def _call[ResponseT: StatusResponse](
        self,
        method: str,
        request: RequestModel,
        response_model: type[ResponseT],
        *,
        reason: str | None = None,
        reading: bool = False,
    ) -> tuple[ResponseT | None, ApiError | None]:
        """Send one request and classify the answer.

        The payload is returned next to a ``CompositionFailedError`` because the
        mutation itself went through.
        """

        reason = reason or method
        log.debug("POST %s/%s", SERVICE_PATH, method)
        try:
            async with self._client_factory(self._resilience, limiter=self._limiter) as client:
                response = await client.post(f"{SERVICE_PATH}/{method}", json=request.to_body())
        except httpx.HTTPError as exc:
            log.warning("%s: transport error: %s", reason, exc)
            return None, GenericApiError(exc, reason=reason, status=StatusCode.ERR)

        if response.status_code != httpx.codes.OK:
            return None, self._connect_error(response, reason=reason, reading=reading)

        try:
            payload = response_model.model_validate_json(response.content)
        except pydantic.ValidationError as exc:
            log.warning("%s: malformed response body", reason)
            return None, GenericApiError(exc, reason=reason, status=StatusCode.ERR)

        envelope = payload.response
        if envelope is None:
            return None, GenericApiError(NIL_RESPONSE, reason=reason, status=StatusCode.ERR)

        code = envelope.code
        if code == StatusCode.OK:
            return payload, None

        detail = envelope.details or code
        log.debug("%s answered %s: %s", reason, code, detail)
        if code == StatusCode.ERR_SUBGRAPH_COMPOSITION_FAILED:
            return payload, CompositionFailedError(detail, reason=reason, status=code)
        if reading and code == StatusCode.ERR_NOT_FOUND:
            return None, NotFoundError(detail, reason=reason, status=code)
        return None, GenericApiError(detail, reason=reason, status=code)

    @staticmethod
    def _connect_error(response: httpx.Response, *, reason: str, reading: bool) -> ApiError:
        try:
            body = ConnectErrorBody.model_validate_json(response.content)
        except pydantic.ValidationError:
            detail = f"HTTP {response.status_code}"
            return GenericApiError(detail, reason=reason, status=str(response.status_code))

        detail = body.message or body.code
        if reading and body.code == CONNECT_NOT_FOUND:
            return NotFoundError(detail, reason=reason, status=body.code)
        return GenericApiError(detail, reason=reason, status=body.code)
