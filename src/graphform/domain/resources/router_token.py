"""Reconciler for router tokens.

The control plane only hands the token secret out once, on creation, and has no
read call for tokens: reads keep the tracked state and every declared attribute
forces replacement.
"""

from __future__ import annotations

from dataclasses import replace
from logging import getLogger
from typing import TYPE_CHECKING

from graphform.domain.diagnostics import Diagnostics
from graphform.domain.model import (
    DEFAULT_NAMESPACE,
    ResourceKind,
    RouterToken,
    default_namespace,
    has_identifier,
)

from .base import Resource, missing_identifier
from .schema import Attribute, ResourceSchema

if TYPE_CHECKING:
    from graphform.domain.diagnostics import ReconcileOutcome

log = getLogger(__name__)

ERR_CREATING_TOKEN = "Error Creating Router Token"
ERR_DELETING_TOKEN = "Error Deleting Router Token"

ROUTER_TOKEN_SCHEMA = ResourceSchema(
    type_name=ResourceKind.ROUTER_TOKEN,
    description="A token the router uses to fetch its configuration for one graph.",
    attributes=(
        Attribute(
            name="id",
            description="Identifier of the token (its name).",
            computed=True,
        ),
        Attribute(
            name="name",
            description="Name of the token.",
            required=True,
            requires_replace=True,
        ),
        Attribute(
            name="graph_name",
            description="Federated graph the token is issued for.",
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
            name="token",
            description="The token secret.",
            computed=True,
            sensitive=True,
        ),
    ),
)


class RouterTokenResource(Resource[RouterToken]):
    KIND = ResourceKind.ROUTER_TOKEN

    def describe_schema(self) -> ResourceSchema:
        return ROUTER_TOKEN_SCHEMA

    async def create(self, planned: RouterToken) -> ReconcileOutcome[RouterToken]:
        diagnostics = Diagnostics()
        namespace = default_namespace(planned.namespace)
        created = await self.client.create_token(planned.name, planned.graph_name, namespace)
        if created.error is not None or created.value is None:
            detail = str(created.error) if created.error else "empty token in response"
            return diagnostics.fail(ERR_CREATING_TOKEN, detail, cause=created.error)

        state = replace(planned, id=planned.name, namespace=namespace, token=created.value)
        log.info(
            "created router token: name=%s, graph=%s, namespace=%s",
            state.name,
            state.graph_name,
            state.namespace,
        )
        return diagnostics.complete(state)

    async def read(self, current: RouterToken) -> ReconcileOutcome[RouterToken]:
        diagnostics = Diagnostics()
        if not has_identifier(current.id):
            return missing_identifier(diagnostics, "Cannot read router token without an ID.")
        state = replace(current, namespace=default_namespace(current.namespace))
        return diagnostics.complete(state)

    async def update(
        self, prior: RouterToken, planned: RouterToken
    ) -> ReconcileOutcome[RouterToken]:
        diagnostics = Diagnostics()
        if not has_identifier(prior.id):
            return missing_identifier(
                diagnostics,
                "Cannot update router token because the resource ID is missing. "
                f"Token name: {planned.name}, namespace: {planned.namespace}",
            )
        state = replace(
            planned,
            id=prior.id,
            namespace=default_namespace(planned.namespace),
            token=prior.token,
        )
        return diagnostics.complete(state)

    async def delete(self, current: RouterToken) -> ReconcileOutcome[RouterToken]:
        diagnostics = Diagnostics()
        if not has_identifier(current.id):
            return missing_identifier(
                diagnostics,
                "Cannot delete router token because the resource ID is missing. "
                f"Token name: {current.name}, namespace: {current.namespace}",
            )

        namespace = default_namespace(current.namespace)
        deleted = await self.client.delete_token(current.name, namespace)
        if deleted.error is not None:
            detail = f"Failed to delete token: {deleted.error}"
            return diagnostics.fail(ERR_DELETING_TOKEN, detail, cause=deleted.error)

        log.info("deleted router token: name=%s, namespace=%s", current.name, namespace)
        return diagnostics.complete(None)

    def import_state(self, identifier: str) -> RouterToken:
        return RouterToken(id=identifier, name=identifier)
