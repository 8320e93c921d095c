"""Reconciler for federated graphs."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from graphform.domain.diagnostics import Diagnostics
from graphform.domain.errors import LabelMatcherError
from graphform.domain.labels import format_label_matchers, validate_label_matchers
from graphform.domain.model import (
    DEFAULT_NAMESPACE,
    FederatedGraph,
    ResourceKind,
    default_namespace,
    has_identifier,
)

from .base import Resource, missing_identifier
from .schema import Attribute, AttributeType, ResourceSchema

if TYPE_CHECKING:
    from graphform.domain.diagnostics import ReconcileOutcome

log = getLogger(__name__)

ERR_CREATING_GRAPH = "Error Creating Federated Graph"
ERR_READING_GRAPH = "Error Reading Federated Graph"
ERR_UPDATING_GRAPH = "Error Updating Federated Graph"
ERR_DELETING_GRAPH = "Error Deleting Federated Graph"
ERR_INVALID_LABEL_MATCHERS = "Invalid Label Matchers"
ERR_COMPOSITION = "Composition Error"
WARN_GRAPH_NOT_FOUND = "Graph not found"

FEDERATED_GRAPH_SCHEMA = ResourceSchema(
    type_name=ResourceKind.FEDERATED_GRAPH,
    description=(
        "A single, unified data graph composed of the subgraphs selected by its label "
        "matchers."
    ),
    attributes=(
        Attribute(
            name="id",
            description="Unique identifier, generated by the control plane.",
            computed=True,
        ),
        Attribute(
            name="name",
            description="Name of the graph, unique within the namespace.",
            required=True,
            requires_replace=True,
        ),
        Attribute(
            name="namespace",
            description="Namespace of the graph.",
            optional=True,
            computed=True,
            requires_replace=True,
            default=DEFAULT_NAMESPACE,
        ),
        Attribute(
            name="routing_url",
            description="URL of the router serving the graph.",
            required=True,
        ),
        Attribute(name="readme", description="Readme content.", optional=True),
        Attribute(
            name="admission_webhook_url",
            description="Admission webhook triggered during graph operations.",
            optional=True,
        ),
        Attribute(
            name="admission_webhook_secret",
            description="Secret used to sign admission webhook requests.",
            optional=True,
            sensitive=True,
        ),
        Attribute(
            name="label_matchers",
            description="Label matchers selecting the subgraphs that form the graph.",
            type=AttributeType.STRING_LIST,
            optional=True,
            computed=True,
            default=(),
        ),
    ),
)


class FederatedGraphResource(Resource[FederatedGraph]):
    KIND = ResourceKind.FEDERATED_GRAPH

    def describe_schema(self) -> ResourceSchema:
        return FEDERATED_GRAPH_SCHEMA

    async def create(self, planned: FederatedGraph) -> ReconcileOutcome[FederatedGraph]:
        diagnostics = Diagnostics()
        try:
            label_matchers = validate_label_matchers(planned.label_matchers)
        except LabelMatcherError as exc:
            return diagnostics.fail(ERR_INVALID_LABEL_MATCHERS, str(exc), cause=exc)

        graph = replace(
            planned,
            id=None,
            namespace=default_namespace(planned.namespace),
            label_matchers=label_matchers,
        )
        log.debug(
            "Creating federated graph %s/%s: routing_url=%s, admission_webhook_url=%s, "
            "label_matchers=%s",
            graph.namespace,
            graph.name,
            graph.routing_url,
            graph.admission_webhook_url,
            format_label_matchers(graph.label_matchers),
        )

        created = await self.client.create_federated_graph(graph)
        if created.error is not None and not diagnostics.soften(created.error, ERR_COMPOSITION):
            return diagnostics.fail(ERR_CREATING_GRAPH, str(created.error), cause=created.error)

        # the graph exists even when composition failed; take the remote view as truth
        fetched = await self.client.read_federated_graph(graph.name, graph.namespace)
        if fetched.error is not None or fetched.value is None:
            detail = str(fetched.error) if fetched.error else "empty read response"
            return diagnostics.fail(ERR_CREATING_GRAPH, detail, cause=fetched.error)

        snapshot = fetched.value
        state = replace(
            graph,
            id=snapshot.id,
            name=snapshot.name,
            namespace=snapshot.namespace,
            routing_url=snapshot.routing_url,
        )
        log.info(
            "created federated graph: id=%s, name=%s, namespace=%s",
            state.id,
            state.name,
            state.namespace,
        )
        return diagnostics.complete(state)

    async def read(self, current: FederatedGraph) -> ReconcileOutcome[FederatedGraph]:
        diagnostics = Diagnostics()
        if not has_identifier(current.id):
            return missing_identifier(diagnostics, "Cannot read federated graph without an ID.")

        namespace = default_namespace(current.namespace)
        fetched = await self.client.read_federated_graph(current.name, namespace)
        if fetched.not_found:
            diagnostics.warn(
                WARN_GRAPH_NOT_FOUND, f"Graph '{current.name}' not found will be recreated"
            )
            log.warning(
                "federated graph %s/%s disappeared remotely; dropping it from state",
                namespace,
                current.name,
            )
            return diagnostics.complete(None)
        if fetched.error is not None or fetched.value is None:
            detail = f"Could not fetch federated graph '{current.name}': {fetched.error}"
            return diagnostics.fail(ERR_READING_GRAPH, detail, cause=fetched.error)

        snapshot = fetched.value
        state = replace(
            current,
            id=snapshot.id,
            name=snapshot.name,
            namespace=snapshot.namespace,
            routing_url=snapshot.routing_url,
            label_matchers=snapshot.label_matchers,
        )
        log.info(
            "read federated graph: id=%s, name=%s, namespace=%s",
            state.id,
            state.name,
            state.namespace,
        )
        return diagnostics.complete(state)

    async def update(
        self, prior: FederatedGraph, planned: FederatedGraph
    ) -> ReconcileOutcome[FederatedGraph]:
        diagnostics = Diagnostics()
        identifier = prior.id if has_identifier(prior.id) else planned.id
        if not has_identifier(identifier):
            return missing_identifier(
                diagnostics,
                "Cannot update federated graph because the resource ID is missing. "
                f"Graph name: {planned.name}, graph namespace: {planned.namespace}",
            )

        try:
            label_matchers = validate_label_matchers(planned.label_matchers)
        except LabelMatcherError as exc:
            return diagnostics.fail(ERR_INVALID_LABEL_MATCHERS, str(exc), cause=exc)

        graph = replace(
            planned,
            id=identifier,
            namespace=default_namespace(planned.namespace),
            label_matchers=label_matchers,
        )
        log.debug(
            "Updating federated graph %s/%s: routing_url=%s, label_matchers=%s",
            graph.namespace,
            graph.name,
            graph.routing_url,
            format_label_matchers(graph.label_matchers),
        )

        updated = await self.client.update_federated_graph(graph)
        if updated.error is not None and not diagnostics.soften(updated.error, ERR_COMPOSITION):
            return diagnostics.fail(ERR_UPDATING_GRAPH, str(updated.error), cause=updated.error)

        summary = updated.value
        if summary is not None and summary.composition_errors:
            diagnostics.warn(
                ERR_COMPOSITION,
                f"Composition errors: {list(summary.composition_errors)}, "
                f"graph name: {graph.name}, graph namespace: {graph.namespace}",
            )
            return diagnostics.complete(prior)

        # TODO: re-read after update once the control plane documents which fields it
        # normalises; until then the submitted payload is taken as the new state.
        log.info(
            "updated federated graph: id=%s, name=%s, namespace=%s",
            graph.id,
            graph.name,
            graph.namespace,
        )
        return diagnostics.complete(graph)

    async def delete(self, current: FederatedGraph) -> ReconcileOutcome[FederatedGraph]:
        diagnostics = Diagnostics()
        if not has_identifier(current.id):
            return missing_identifier(
                diagnostics,
                "Cannot delete the federated graph because the resource ID is missing. "
                f"Graph name: {current.name}, graph namespace: {current.namespace}",
            )

        namespace = default_namespace(current.namespace)
        deleted = await self.client.delete_federated_graph(current.name, namespace)
        if deleted.error is not None:
            detail = (
                f"Could not delete federated graph: {deleted.error}, graph name: "
                f"{current.name}, graph namespace: {namespace}"
            )
            return diagnostics.fail(ERR_DELETING_GRAPH, detail, cause=deleted.error)

        log.info(
            "deleted federated graph: id=%s, name=%s, namespace=%s",
            current.id,
            current.name,
            namespace,
        )
        return diagnostics.complete(None)

    def import_state(self, identifier: str) -> FederatedGraph:
        return FederatedGraph(id=identifier)
