"""Reconciler for monographs: single-subgraph graphs without a composition step."""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from graphform.domain.diagnostics import Diagnostics
from graphform.domain.model import (
    DEFAULT_NAMESPACE,
    Monograph,
    ResourceKind,
    default_namespace,
    has_identifier,
)

from .base import Resource, missing_identifier
from .schema import Attribute, ResourceSchema

if TYPE_CHECKING:
    from graphform.domain.diagnostics import ReconcileOutcome

log = getLogger(__name__)

ERR_CREATING_MONOGRAPH = "Error Creating Monograph"
ERR_READING_MONOGRAPH = "Error Reading Monograph"
ERR_UPDATING_MONOGRAPH = "Error Updating Monograph"
ERR_DELETING_MONOGRAPH = "Error Deleting Monograph"
ERR_COMPOSITION = "Composition Error"
WARN_MONOGRAPH_NOT_FOUND = "Monograph not found"

MONOGRAPH_SCHEMA = ResourceSchema(
    type_name=ResourceKind.MONOGRAPH,
    description="A graph served by exactly one subgraph.",
    attributes=(
        Attribute(
            name="id",
            description="Unique identifier, generated by the control plane.",
            computed=True,
        ),
        Attribute(
            name="name",
            description="Name of the monograph, unique within the namespace.",
            required=True,
            requires_replace=True,
        ),
        Attribute(
            name="namespace",
            description="Namespace of the monograph.",
            optional=True,
            computed=True,
            requires_replace=True,
            default=DEFAULT_NAMESPACE,
        ),
        Attribute(
            name="routing_url",
            description="URL of the router serving the monograph.",
            required=True,
        ),
        Attribute(
            name="graph_url",
            description="URL of the subgraph behind the monograph.",
            required=True,
        ),
        Attribute(
            name="subscription_url",
            description="URL used for subscriptions.",
            optional=True,
        ),
        Attribute(
            name="subscription_protocol",
            description="Subscription transport: ws, sse or sse_post.",
            optional=True,
        ),
        Attribute(
            name="websocket_subprotocol",
            description="Websocket subprotocol: auto, graphql-ws or graphql-transport-ws.",
            optional=True,
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
    ),
)


class MonographResource(Resource[Monograph]):
    KIND = ResourceKind.MONOGRAPH

    def describe_schema(self) -> ResourceSchema:
        return MONOGRAPH_SCHEMA

    async def create(self, planned: Monograph) -> ReconcileOutcome[Monograph]:
        diagnostics = Diagnostics()
        monograph = replace(planned, id=None, namespace=default_namespace(planned.namespace))
        log.debug(
            "Creating monograph %s/%s: routing_url=%s, graph_url=%s",
            monograph.namespace,
            monograph.name,
            monograph.routing_url,
            monograph.graph_url,
        )

        created = await self.client.create_monograph(monograph)
        if created.error is not None and not diagnostics.soften(created.error, ERR_COMPOSITION):
            return diagnostics.fail(
                ERR_CREATING_MONOGRAPH, str(created.error), cause=created.error
            )

        fetched = await self.client.read_monograph(monograph.name, monograph.namespace)
        if fetched.error is not None or fetched.value is None:
            detail = str(fetched.error) if fetched.error else "empty read response"
            return diagnostics.fail(ERR_CREATING_MONOGRAPH, detail, cause=fetched.error)

        snapshot = fetched.value
        state = replace(
            monograph,
            id=snapshot.id,
            name=snapshot.name,
            namespace=snapshot.namespace,
            routing_url=snapshot.routing_url,
        )
        log.info(
            "created monograph: id=%s, name=%s, namespace=%s", state.id, state.name, state.namespace
        )
        return diagnostics.complete(state)

    async def read(self, current: Monograph) -> ReconcileOutcome[Monograph]:
        diagnostics = Diagnostics()
        if not has_identifier(current.id):
            return missing_identifier(diagnostics, "Cannot read monograph without an ID.")

        namespace = default_namespace(current.namespace)
        fetched = await self.client.read_monograph(current.name, namespace)
        if fetched.not_found:
            diagnostics.warn(
                WARN_MONOGRAPH_NOT_FOUND,
                f"Monograph '{current.name}' not found will be recreated",
            )
            return diagnostics.complete(None)
        if fetched.error is not None or fetched.value is None:
            detail = f"Could not fetch monograph '{current.name}': {fetched.error}"
            return diagnostics.fail(ERR_READING_MONOGRAPH, detail, cause=fetched.error)

        snapshot = fetched.value
        state = replace(
            current,
            id=snapshot.id,
            name=snapshot.name,
            namespace=snapshot.namespace,
            routing_url=snapshot.routing_url,
        )
        log.info(
            "read monograph: id=%s, name=%s, namespace=%s", state.id, state.name, state.namespace
        )
        return diagnostics.complete(state)

    async def update(self, prior: Monograph, planned: Monograph) -> ReconcileOutcome[Monograph]:
        diagnostics = Diagnostics()
        identifier = prior.id if has_identifier(prior.id) else planned.id
        if not has_identifier(identifier):
            return missing_identifier(
                diagnostics,
                "Cannot update monograph because the resource ID is missing. "
                f"Monograph name: {planned.name}, namespace: {planned.namespace}",
            )

        monograph = replace(planned, id=identifier, namespace=default_namespace(planned.namespace))
        updated = await self.client.update_monograph(monograph)
        if updated.error is not None and not diagnostics.soften(updated.error, ERR_COMPOSITION):
            return diagnostics.fail(
                ERR_UPDATING_MONOGRAPH, str(updated.error), cause=updated.error
            )

        summary = updated.value
        if summary is not None and summary.composition_errors:
            diagnostics.warn(
                ERR_COMPOSITION,
                f"Composition errors: {list(summary.composition_errors)}, "
                f"monograph name: {monograph.name}, namespace: {monograph.namespace}",
            )
            return diagnostics.complete(prior)

        log.info(
            "updated monograph: id=%s, name=%s, namespace=%s",
            monograph.id,
            monograph.name,
            monograph.namespace,
        )
        return diagnostics.complete(monograph)

    async def delete(self, current: Monograph) -> ReconcileOutcome[Monograph]:
        diagnostics = Diagnostics()
        if not has_identifier(current.id):
            return missing_identifier(
                diagnostics,
                "Cannot delete the monograph because the resource ID is missing. "
                f"Monograph name: {current.name}, namespace: {current.namespace}",
            )

        namespace = default_namespace(current.namespace)
        deleted = await self.client.delete_monograph(current.name, namespace)
        if deleted.error is not None:
            detail = (
                f"Could not delete monograph: {deleted.error}, name: {current.name}, "
                f"namespace: {namespace}"
            )
            return diagnostics.fail(ERR_DELETING_MONOGRAPH, detail, cause=deleted.error)

        log.info(
            "deleted monograph: id=%s, name=%s, namespace=%s",
            current.id,
            current.name,
            namespace,
        )
        return diagnostics.complete(None)

    def import_state(self, identifier: str) -> Monograph:
        return Monograph(id=identifier)
