"""
Shorthand document → FHIR resource conversion.

Contains ``convert()`` and the ``Transformer`` wrapper that binds a
``SchemaRegistry`` once for repeated conversions.
"""

from __future__ import annotations

import uuid
from typing import Any, Mapping, Optional

from fhir_shorthand._constants import (
    ID_KEY,
    RESOURCE_TYPE_KEY,
    SUBJECT_RESOURCE_TYPE,
)
from fhir_shorthand._dispatch import ConversionState, assign_properties
from fhir_shorthand.errors import (
    MissingResourceTypeError,
    UnsupportedResourceTypeError,
)
from fhir_shorthand.report import ConversionReport
from fhir_shorthand.schema import SchemaRegistry


def _new_id(subject_id: Optional[str] = None) -> str:
    return subject_id if subject_id else str(uuid.uuid4())


def subject_reference(subject_id: str) -> dict[str, str]:
    """Reference to the conversion subject, e.g. ``Patient/123``."""
    return {"reference": f"{SUBJECT_RESOURCE_TYPE}/{subject_id}"}


def convert(
    document: Mapping[str, Any],
    registry: SchemaRegistry,
    *,
    subject_id: Optional[str] = None,
    fhir_version: str = "R4",
) -> tuple[dict[str, Any], ConversionReport]:
    """Convert a shorthand document into a FHIR resource.

    The document's ``resourceType`` selects the top-level
    StructureDefinition.  Configured defaults are merged underneath the
    document (document fields win), then the record is seeded with
    ``resourceType`` and ``id`` and every remaining field is converted
    by walking the schema.

    Args:
        document: Field name → value mapping with a ``resourceType``.
        registry: Schema generations and per-resource configuration.
        subject_id: Identifier of the conversion subject.  Reused as
            the ``id`` of a ``Patient`` and referenced from the
            configured subject field of other resources.
        fhir_version: FHIR release (``"3.0.1"``) or generation tag
            (``"STU3"``).

    Returns:
        A tuple of ``(resource, ConversionReport)``.

    Raises:
        UnsupportedVersionError: If ``fhir_version`` has no generation.
        MissingResourceTypeError: If ``document`` lacks ``resourceType``.
        UnsupportedResourceTypeError: If the resource kind is unknown.
        ConversionError: Any field-level error (path, cardinality,
            type, parse) aborts the whole conversion.
    """
    generation = registry.resolve(fhir_version)

    resource_type = document.get(RESOURCE_TYPE_KEY)
    if resource_type is None:
        raise MissingResourceTypeError()

    definition = generation.find_resource(resource_type)
    if definition is None or not definition.elements:
        raise UnsupportedResourceTypeError(resource_type)

    config = generation.find_config(resource_type)
    source: Mapping[str, Any] = document
    if config is not None and config.defaults:
        source = {**config.defaults, **document}

    result: dict[str, Any] = {
        RESOURCE_TYPE_KEY: definition.id,
        ID_KEY: _new_id(subject_id) if definition.id == SUBJECT_RESOURCE_TYPE else _new_id(),
    }
    if config is not None and config.patient and subject_id:
        result[config.patient] = subject_reference(subject_id)

    state = ConversionState(generation=generation, root=document)
    assign_properties(
        state,
        source,
        definition.elements,
        aliases=config.aliases if config is not None else None,
        result=result,
    )

    report = ConversionReport(
        success=True,
        resource_type=definition.id,
        fhir_version=generation.version,
        nodes_converted=state.nodes_converted,
        warnings=state.warnings,
    )
    return result, report


class Transformer:
    """Converter bound to one immutable ``SchemaRegistry``."""

    def __init__(self, registry: SchemaRegistry):
        self._registry = registry

    @property
    def registry(self) -> SchemaRegistry:
        return self._registry

    def convert(
        self,
        document: Mapping[str, Any],
        *,
        subject_id: Optional[str] = None,
        fhir_version: str = "R4",
    ) -> tuple[dict[str, Any], ConversionReport]:
        """Convert one document.  See ``convert()``."""
        return convert(
            document,
            self._registry,
            subject_id=subject_id,
            fhir_version=fhir_version,
        )
