"""Read-only lookup of an existing monograph by name."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from graphform.domain.diagnostics import Diagnostics
from graphform.domain.errors import ValidationError
from graphform.domain.model import default_namespace

from .base import PlatformClientMixin
from .schema import Attribute, AttributeType, ResourceSchema

if TYPE_CHECKING:
    from graphform.domain.diagnostics import ReconcileOutcome
    from graphform.domain.model import GraphSnapshot

log = getLogger(__name__)

ERR_INVALID_MONOGRAPH_NAME = "Invalid Monograph Name"
ERR_READING_MONOGRAPH = "Error Reading Monograph"

MONOGRAPH_LOOKUP_SCHEMA = ResourceSchema(
    type_name="monograph",
    description="Look up a monograph managed elsewhere.",
    attributes=(
        Attribute(name="id", description="Unique identifier.", computed=True),
        Attribute(name="name", description="Name of the monograph.", required=True),
        Attribute(name="namespace", description="Namespace of the monograph.", optional=True),
        Attribute(name="routing_url", description="Routing URL.", computed=True),
        Attribute(name="readme", description="Readme content.", computed=True),
        Attribute(
            name="admission_webhook_url",
            description="Admission webhook URL.",
            computed=True,
        ),
        Attribute(
            name="label_matchers",
            description="Label matchers of the graph.",
            type=AttributeType.STRING_LIST,
            computed=True,
        ),
    ),
)


class MonographLookup(PlatformClientMixin):
    """Data source counterpart of ``MonographResource``; never mutates anything."""

    def describe_schema(self) -> ResourceSchema:
        return MONOGRAPH_LOOKUP_SCHEMA

    async def read(self, name: str, namespace: str | None = None) -> ReconcileOutcome[GraphSnapshot]:
        diagnostics = Diagnostics()
        resolved_namespace = default_namespace(namespace)
        if not name.strip():
            error = ValidationError(
                f"The 'name' attribute is required for monograph in namespace: "
                f"{resolved_namespace}"
            )
            return diagnostics.fail(ERR_INVALID_MONOGRAPH_NAME, str(error), cause=error)

        fetched = await self.client.read_monograph(name, resolved_namespace)
        if fetched.error is not None or fetched.value is None:
            detail = (
                f"Could not read monograph: {fetched.error}, name: {name}, "
                f"namespace: {resolved_namespace}"
            )
            return diagnostics.fail(ERR_READING_MONOGRAPH, detail, cause=fetched.error)

        log.debug("Read monograph data source: id=%s", fetched.value.id)
        return diagnostics.complete(fetched.value)
