"""Attribute-level description of a resource kind.

The schema is what makes mutability rules enforceable: attributes flagged
``requires_replace`` are never changed in place, ``computed`` attributes are owned
by the remote system and ``sensitive`` ones are write-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class AttributeType(StrEnum):
    STRING = "string"
    STRING_LIST = "list[string]"


@dataclass(frozen=True, slots=True, kw_only=True)
class Attribute:
    name: str
    description: str
    type: AttributeType = AttributeType.STRING
    required: bool = False
    optional: bool = False
    computed: bool = False
    sensitive: bool = False
    requires_replace: bool = False
    default: object = None

    def __post_init__(self) -> None:
        if self.required and (self.optional or self.computed):
            raise ValueError(f"Attribute {self.name!r} cannot be required and optional/computed")
        if not (self.required or self.optional or self.computed):
            raise ValueError(f"Attribute {self.name!r} must be required, optional or computed")

    @property
    def declared(self) -> bool:
        """Whether the operator can set this attribute in a manifest."""

        return self.required or self.optional


@dataclass(frozen=True, slots=True)
class ResourceSchema:
    type_name: str
    description: str
    attributes: tuple[Attribute, ...]

    def attribute(self, name: str) -> Attribute:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        raise KeyError(name)

    def declared_names(self) -> tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes if attribute.declared)

    def required_names(self) -> tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes if attribute.required)

    def replace_names(self) -> tuple[str, ...]:
        return tuple(
            attribute.name for attribute in self.attributes if attribute.requires_replace
        )

    def computed_names(self) -> tuple[str, ...]:
        """Attributes only the remote system sets (never declared)."""

        return tuple(
            attribute.name
            for attribute in self.attributes
            if attribute.computed and not attribute.declared
        )

    def sensitive_names(self) -> tuple[str, ...]:
        return tuple(attribute.name for attribute in self.attributes if attribute.sensitive)
