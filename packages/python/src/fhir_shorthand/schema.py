"""
Schema collaborators: element definitions, structure definitions,
per-resource configuration and the registry of schema generations.

All objects here are immutable once built.  A ``SchemaRegistry`` is
populated during setup and then shared, read-only, by any number of
conversions.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Iterable, Mapping, Optional

from fhir_shorthand._constants import (
    CHOICE_SUFFIX,
    VERSION_PATTERNS,
)
from fhir_shorthand.errors import UnsupportedVersionError


_EMPTY: Mapping[str, Any] = MappingProxyType({})


def _freeze(mapping: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
    if not mapping:
        return _EMPTY
    return MappingProxyType(dict(mapping))


def _upper_first(code: str) -> str:
    return code[:1].upper() + code[1:]


# ── Element Definitions ────────────────────────────────────────────


@dataclass(frozen=True)
class TypeRef:
    """One declared type of an element (``ElementDefinition.type[i]``)."""
    code: str


@dataclass(frozen=True)
class ElementDefinition:
    """One schema entry: dotted path, allowed types, cardinality."""
    path: str
    types: tuple[TypeRef, ...] = ()
    min: int = 0
    max: str = "*"

    @property
    def is_choice(self) -> bool:
        """True for ``value[x]``-style union elements."""
        return self.path.endswith(CHOICE_SUFFIX)

    @property
    def type_code(self) -> Optional[str]:
        """The single declared type code, or ``None`` if ambiguous."""
        if len(self.types) == 1:
            return self.types[0].code
        return None

    def choice_path(self, type_ref: TypeRef) -> str:
        """Concrete path for one realisation of a choice element.

        ``Observation.value[x]`` + ``Quantity`` → ``Observation.valueQuantity``
        """
        return self.path[: -len(CHOICE_SUFFIX)] + _upper_first(type_ref.code)

    def narrowed(self, type_ref: TypeRef) -> ElementDefinition:
        """Copy of this element restricted to a single type."""
        return replace(self, types=(type_ref,))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ElementDefinition:
        """Build from a FHIR ``ElementDefinition`` JSON object."""
        if "path" not in data:
            raise ValueError("ElementDefinition must contain a 'path' field")
        types = tuple(
            TypeRef(code=t["code"]) for t in data.get("type") or () if "code" in t
        )
        max_value = data.get("max", "*")
        return cls(
            path=data["path"],
            types=types,
            min=int(data.get("min", 0)),
            max=str(max_value),
        )


@dataclass(frozen=True)
class StructureDefinition:
    """Ordered element definitions of a resource or complex type."""
    id: str
    type: str
    kind: str
    elements: tuple[ElementDefinition, ...] = ()

    @property
    def is_resource(self) -> bool:
        return self.kind == "resource"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> StructureDefinition:
        """Build from a FHIR ``StructureDefinition`` JSON object.

        Only ``snapshot.element`` is read; differential-only profiles
        produce a definition with no elements.
        """
        if data.get("resourceType", "StructureDefinition") != "StructureDefinition":
            raise ValueError(
                f"Expected a StructureDefinition, got '{data.get('resourceType')}'"
            )
        sd_id = data.get("id") or data.get("type")
        if not sd_id:
            raise ValueError("StructureDefinition must contain an 'id' or 'type' field")
        snapshot = data.get("snapshot") or {}
        elements = tuple(
            ElementDefinition.from_dict(e) for e in snapshot.get("element", ())
        )
        return cls(
            id=sd_id,
            type=data.get("type", sd_id),
            kind=data.get("kind", "resource"),
            elements=elements,
        )


# ── Resource Configuration ─────────────────────────────────────────


@dataclass(frozen=True)
class ResourceConfig:
    """Per-resource-kind aliases, defaults and subject-reference field."""
    aliases: Mapping[str, str] = field(default_factory=lambda: _EMPTY)
    defaults: Mapping[str, Any] = field(default_factory=lambda: _EMPTY)
    patient: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ResourceConfig:
        return cls(
            aliases=_freeze(data.get("aliases")),
            defaults=_freeze(data.get("defaults")),
            patient=data.get("patient"),
        )


# ── Schema Generations ─────────────────────────────────────────────


@dataclass(frozen=True)
class SchemaGeneration:
    """All definitions and configuration for one FHIR generation."""
    version: str
    definitions: Mapping[str, StructureDefinition] = field(default_factory=lambda: _EMPTY)
    configs: Mapping[str, ResourceConfig] = field(default_factory=lambda: _EMPTY)

    def __post_init__(self) -> None:
        object.__setattr__(self, "version", self.version.upper())

    def find_resource(self, name: str) -> Optional[StructureDefinition]:
        """Top-level definition for a resource kind."""
        sd = self.definitions.get(name)
        if sd is not None and sd.is_resource:
            return sd
        return None

    def find_type(self, code: Optional[str]) -> Optional[StructureDefinition]:
        """Definition of any type (resource, complex or primitive) by code."""
        if code is None:
            return None
        return self.definitions.get(code)

    def find_config(self, name: str) -> Optional[ResourceConfig]:
        return self.configs.get(name)

    @classmethod
    def from_definitions(
        cls,
        version: str,
        structure_definitions: Iterable[Mapping[str, Any] | StructureDefinition],
        configs: Optional[Mapping[str, Mapping[str, Any] | ResourceConfig]] = None,
    ) -> SchemaGeneration:
        """Build a generation from StructureDefinition JSON objects.

        Args:
            version: Generation tag (e.g. ``"STU3"``).
            structure_definitions: Parsed StructureDefinition dicts (or
                already-built ``StructureDefinition`` objects).
            configs: Resource kind → configuration dict with optional
                ``aliases``, ``defaults`` and ``patient`` keys.
        """
        definitions: dict[str, StructureDefinition] = {}
        for raw in structure_definitions:
            sd = raw if isinstance(raw, StructureDefinition) else StructureDefinition.from_dict(raw)
            definitions[sd.id] = sd
        resource_configs = {
            name: cfg if isinstance(cfg, ResourceConfig) else ResourceConfig.from_dict(cfg)
            for name, cfg in (configs or {}).items()
        }
        return cls(
            version=version.upper(),
            definitions=MappingProxyType(definitions),
            configs=MappingProxyType(resource_configs),
        )

    @classmethod
    def from_bundle(
        cls,
        version: str,
        bundle: Mapping[str, Any],
        configs: Optional[Mapping[str, Mapping[str, Any] | ResourceConfig]] = None,
    ) -> SchemaGeneration:
        """Build a generation from a FHIR Bundle of StructureDefinitions.

        This is the layout of the published ``profiles-resources.json``
        and ``profiles-types.json`` files.  Entries that are not
        StructureDefinitions (SearchParameters, etc.) are skipped.
        """
        if bundle.get("resourceType") != "Bundle":
            raise ValueError(
                f"Expected a Bundle, got '{bundle.get('resourceType')}'"
            )
        resources = [
            entry["resource"]
            for entry in bundle.get("entry", [])
            if (entry.get("resource") or {}).get("resourceType") == "StructureDefinition"
        ]
        return cls.from_definitions(version, resources, configs)


def resolve_schema_generation(fhir_version: str) -> str:
    """Normalise a FHIR release or tag to a generation tag.

    ``"1.0.2"`` → ``"DSTU2"``, ``"3.0.1"`` → ``"STU3"``,
    ``"4.0.1"`` → ``"R4"``; anything else is upper-cased.
    """
    for pattern, tag in VERSION_PATTERNS:
        if pattern.match(fhir_version):
            return tag
    return fhir_version.upper()


class SchemaRegistry:
    """Schema generations available to the converter, keyed by tag."""

    def __init__(self, generations: Iterable[SchemaGeneration] = ()):
        self._generations: dict[str, SchemaGeneration] = {}
        for generation in generations:
            self.register(generation)

    def register(self, generation: SchemaGeneration) -> None:
        self._generations[generation.version.upper()] = generation

    def get(self, tag: str) -> Optional[SchemaGeneration]:
        return self._generations.get(tag.upper())

    @property
    def versions(self) -> tuple[str, ...]:
        return tuple(sorted(self._generations))

    def resolve(self, fhir_version: str) -> SchemaGeneration:
        """Generation for a FHIR release or tag.

        Raises:
            UnsupportedVersionError: If no registered generation matches.
        """
        if not isinstance(fhir_version, str):
            raise UnsupportedVersionError(str(fhir_version))
        generation = self._generations.get(resolve_schema_generation(fhir_version))
        if generation is None:
            raise UnsupportedVersionError(fhir_version)
        return generation
