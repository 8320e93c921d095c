from __future__ import annotations

import asyncio
import json
from collections.abc import Awaitable, Callable  # noqa: TC003

import httpx
import pytest
from aiolimiter import AsyncLimiter  # noqa: TC002

from graphform.adapters.http_resilience import ClientFactory, ResilientClient
from graphform.adapters.platform import PlatformClient
from graphform.config.http_resilience import RateLimit, ResilienceConfig
from graphform.config.platform import PlatformConfig, build_platform_resilience
from graphform.domain.errors import CompositionFailedError, GenericApiError, NotFoundError
from graphform.domain.model import FederatedGraph, Monograph, MutationSummary

API_URL = "https://cp.example.test"
SERVICE = "/wg.cosmo.platform.v1.PlatformService"

GRAPH_PAYLOAD = {
    "id": "graph-1",
    "name": "orders",
    "namespace": "default",
    "routingURL": "http://svc/routing",
    "labelMatchers": ["team=payments", "env=prod"],
    "readme": "docs",
    "isComposable": True,
}


type AsyncHandler = Callable[[httpx.Request], Awaitable[httpx.Response]]


def _make_client_factory(
    async_handler: AsyncHandler,
    *,
    limiters: list[AsyncLimiter | None] | None = None,
) -> ClientFactory:
    def factory(
        resilience: ResilienceConfig, *, limiter: AsyncLimiter | None = None
    ) -> ResilientClient:
        if limiters is not None:
            limiters.append(limiter)
        client = ResilientClient(resilience, limiter=limiter)
        client._client = httpx.AsyncClient(  # noqa: SLF001  # type: ignore[reportPrivateUsage]
            base_url=resilience.base_url or "",
            headers=dict(resilience.default_headers or {}),
            transport=httpx.MockTransport(async_handler),
        )
        return client

    return factory


def _platform_client(
    handler: Callable[[httpx.Request], httpx.Response],
    *,
    ratelimit: RateLimit | None = None,
    limiters: list[AsyncLimiter | None] | None = None,
) -> PlatformClient:
    async def async_handler(request: httpx.Request) -> httpx.Response:
        return handler(request)

    return _async_platform_client(async_handler, ratelimit=ratelimit, limiters=limiters)


def _async_platform_client(
    async_handler: AsyncHandler,
    *,
    ratelimit: RateLimit | None = None,
    limiters: list[AsyncLimiter | None] | None = None,
) -> PlatformClient:
    config = PlatformConfig(
        api_key="test-key",
        api_url=API_URL,
        resilience=build_platform_resilience(
            api_key="test-key", api_url=API_URL, ratelimit=ratelimit
        ),
    )
    factory = _make_client_factory(async_handler, limiters=limiters)
    return PlatformClient(config=config, client_factory=factory)


def _ok(**payload: object) -> httpx.Response:
    return httpx.Response(200, json={"response": {"code": "OK"}, **payload})


def test_create_federated_graph_posts_connect_request() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return _ok(compositionErrors=[], deploymentErrors=[])

    client = _platform_client(handler)
    graph = FederatedGraph(
        name="orders",
        routing_url="http://svc/routing",
        label_matchers=("team=payments", "env=prod"),
        admission_webhook_url="http://hooks/admit",
    )

    result = asyncio.run(client.create_federated_graph(graph))

    assert result.ok
    assert result.value == MutationSummary()
    request = seen[0]
    assert request.method == "POST"
    assert request.url == f"{API_URL}{SERVICE}/CreateFederatedGraph"
    assert request.headers["Authorization"] == "Bearer test-key"
    assert request.headers["Connect-Protocol-Version"] == "1"
    assert request.headers["Content-Type"] == "application/json"
    body = json.loads(request.content)
    assert body == {
        "name": "orders",
        "namespace": "default",
        "routingUrl": "http://svc/routing",
        "labelMatchers": ["team=payments", "env=prod"],
        "admissionWebhookURL": "http://hooks/admit",
    }


def test_admission_webhook_secret_sent_only_when_present() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return _ok()

    client = _platform_client(handler)
    graph = FederatedGraph(name="orders", routing_url="http://svc/routing")

    asyncio.run(client.update_federated_graph(graph))
    asyncio.run(client.update_federated_graph(FederatedGraph(
        name="orders", routing_url="http://svc/routing", admission_webhook_secret="s3cret"
    )))

    assert "admissionWebhookSecret" not in bodies[0]
    assert bodies[1]["admissionWebhookSecret"] == "s3cret"


def test_missing_status_code_means_ok() -> None:
    client = _platform_client(lambda _: httpx.Response(200, json={"response": {}}))

    result = asyncio.run(client.delete_federated_graph("orders", "default"))

    assert result.ok


def test_read_federated_graph_translates_payload() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == f"{SERVICE}/GetFederatedGraphByName"
        assert json.loads(request.content) == {"name": "orders", "namespace": "default"}
        return _ok(graph=GRAPH_PAYLOAD, subgraphs=[])

    result = asyncio.run(_platform_client(handler).read_federated_graph("orders", "default"))

    assert result.value is not None
    assert result.value.id == "graph-1"
    assert result.value.routing_url == "http://svc/routing"
    assert result.value.label_matchers == ("team=payments", "env=prod")
    assert result.value.readme == "docs"


def test_composition_failure_is_soft_and_keeps_payload() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200,
            json={
                "response": {
                    "code": "ERR_SUBGRAPH_COMPOSITION_FAILED",
                    "details": "composition failed",
                },
                "compositionErrors": [{"message": "field conflict", "federatedGraphName": "x"}],
            },
        )

    result = asyncio.run(
        _platform_client(handler).create_federated_graph(
            FederatedGraph(name="orders", routing_url="http://svc/routing")
        )
    )

    assert result.composition_failed
    assert isinstance(result.error, CompositionFailedError)
    assert result.error.reason == "CreateFederatedGraph"
    assert result.value == MutationSummary(composition_errors=("field conflict",))


def test_not_found_on_read_is_classified() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": {"code": "ERR_NOT_FOUND", "details": "nope"}})

    result = asyncio.run(_platform_client(handler).read_monograph("users", "default"))

    assert result.not_found
    assert isinstance(result.error, NotFoundError)
    assert result.error.reason == "GetMonograph"
    assert str(result.error) == "GetMonograph failed (ERR_NOT_FOUND): nope"


def test_connect_not_found_error_body_on_read() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(404, json={"code": "not_found", "message": "graph not found"})

    result = asyncio.run(_platform_client(handler).read_federated_graph("orders", "default"))

    assert result.not_found


def test_not_found_on_delete_is_generic() -> None:
    def handler(_: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"response": {"code": "ERR_NOT_FOUND"}})

    result = asyncio.run(_platform_client(handler).delete_monograph("users", "default"))

    assert isinstance(result.error, GenericApiError)
    assert result.error.status == "ERR_NOT_FOUND"


@pytest.mark.parametrize(
    "response",
    [
        httpx.Response(200, json={"response": {"code": "ERR", "details": "boom"}}),
        httpx.Response(200, json={}),
        httpx.Response(200, content=b"<html>not json</html>"),
        httpx.Response(200, json={"response": {"code": "OK"}, "graph": {"name": 3}}),
        httpx.Response(503, text="upstream unavailable"),
        httpx.Response(500, json={"code": "internal", "message": "boom"}),
    ],
    ids=["error-code", "nil-envelope", "invalid-json", "schema-invalid", "http-503", "connect"],
)
def test_other_failures_are_generic(response: httpx.Response) -> None:
    result = asyncio.run(
        _platform_client(lambda _: response).read_federated_graph("orders", "default")
    )

    assert isinstance(result.error, GenericApiError)
    assert result.value is None


def test_nil_envelope_message() -> None:
    result = asyncio.run(
        _platform_client(lambda _: httpx.Response(200, json={})).create_token(
            "orders-router", "orders", "default"
        )
    )

    assert isinstance(result.error, GenericApiError)
    assert "the server response is nil" in str(result.error)
    assert result.error.reason == "CreateFederatedGraphToken"


def test_transport_error_is_generic() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(_platform_client(handler).delete_token("orders-router", "default"))

    assert isinstance(result.error, GenericApiError)
    assert isinstance(result.error.__cause__, httpx.ConnectError)


def test_create_token_returns_secret() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert json.loads(request.content) == {
            "tokenName": "orders-router",
            "graphName": "orders",
            "namespace": "default",
        }
        return _ok(token="t0k3n")

    result = asyncio.run(
        _platform_client(handler).create_token("orders-router", "orders", "default")
    )

    assert result.value == "t0k3n"


def test_delete_token_body() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return _ok()

    asyncio.run(_platform_client(handler).delete_token("orders-router", "default"))

    assert bodies == [{"tokenName": "orders-router", "namespace": "default"}]


def test_monograph_request_body() -> None:
    bodies: list[dict[str, object]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return _ok()

    monograph = Monograph(
        name="users",
        routing_url="http://router/users",
        graph_url="http://users/graphql",
        readme="",
    )
    asyncio.run(_platform_client(handler).create_monograph(monograph))

    assert bodies == [
        {
            "name": "users",
            "namespace": "default",
            "routingUrl": "http://router/users",
            "graphUrl": "http://users/graphql",
            "readme": "",
        }
    ]


def test_cancellation_propagates() -> None:
    started = asyncio.Event()

    async def slow_handler(_: httpx.Request) -> httpx.Response:
        started.set()
        await asyncio.sleep(3600)
        return httpx.Response(200)

    client = _async_platform_client(slow_handler)

    async def scenario() -> None:
        task = asyncio.create_task(client.read_federated_graph("orders", "default"))
        await started.wait()
        task.cancel()
        await task

    with pytest.raises(asyncio.CancelledError):
        asyncio.run(scenario())


def test_calls_share_one_limiter() -> None:
    limiters: list[AsyncLimiter | None] = []
    client = _platform_client(
        lambda _: _ok(graph=GRAPH_PAYLOAD),
        ratelimit=RateLimit(max_calls=5),
        limiters=limiters,
    )

    asyncio.run(client.read_federated_graph("orders", "default"))
    asyncio.run(client.read_federated_graph("orders", "default"))

    assert len(limiters) == 2
    assert limiters[0] is not None
    assert limiters[0] is limiters[1]
    assert limiters[0].max_rate == 5


def test_no_limiter_without_ratelimit() -> None:
    limiters: list[AsyncLimiter | None] = []
    client = _platform_client(lambda _: _ok(graph=GRAPH_PAYLOAD), limiters=limiters)

    asyncio.run(client.read_federated_graph("orders", "default"))

    assert limiters == [None]
