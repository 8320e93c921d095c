"""Translate between domain states and control-plane payloads."""

from __future__ import annotations

from typing import TYPE_CHECKING

from graphform.domain.model import GraphSnapshot, MutationSummary

from .schema import FederatedGraphRequest, MonographRequest

if TYPE_CHECKING:
    from graphform.domain.model import FederatedGraph, Monograph

    from .schema import FederatedGraphPayload, MutationResponse


def graph_request(graph: FederatedGraph) -> FederatedGraphRequest:
    return FederatedGraphRequest(
        name=graph.name,
        namespace=graph.namespace,
        routing_url=graph.routing_url,
        label_matchers=list(graph.label_matchers),
        readme=graph.readme,
        admission_webhook_url=graph.admission_webhook_url,
        admission_webhook_secret=graph.admission_webhook_secret,
    )


def monograph_request(monograph: Monograph) -> MonographRequest:
    return MonographRequest(
        name=monograph.name,
        namespace=monograph.namespace,
        routing_url=monograph.routing_url,
        graph_url=monograph.graph_url,
        subscription_url=monograph.subscription_url,
        subscription_protocol=monograph.subscription_protocol,
        websocket_subprotocol=monograph.websocket_subprotocol,
        readme=monograph.readme,
        admission_webhook_url=monograph.admission_webhook_url,
        admission_webhook_secret=monograph.admission_webhook_secret,
    )


def parse_graph_snapshot(payload: FederatedGraphPayload) -> GraphSnapshot:
    return GraphSnapshot(
        id=payload.id,
        name=payload.name,
        namespace=payload.namespace,
        routing_url=payload.routing_url,
        readme=payload.readme,
        admission_webhook_url=payload.admission_webhook_url,
        label_matchers=tuple(payload.label_matchers),
    )


def parse_mutation_summary(payload: MutationResponse) -> MutationSummary:
    return MutationSummary(
        composition_errors=tuple(error.message for error in payload.composition_errors),
        deployment_errors=tuple(error.message for error in payload.deployment_errors),
    )
