"""
Schema-driven value dispatch.

``assign_properties()`` walks the fields of one structure and
``convert_value()`` converts one field value; the two recurse into each
other for nested structures.  Each value is classified in a fixed
order:

  1. ``None``                       → ``None``
  2. cardinality                    → list expansion / violations
  3. conditional construct          → ``$then`` / ``$else`` branch
  4. mapping                        → inline backbone or nested type
  5. anything else                  → leaf converter by type code
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, Optional, Sequence

from fhir_shorthand._constants import (
    BOOLEAN_TYPES,
    CARDINALITY_FORBIDDEN,
    CARDINALITY_SINGLE,
    DATE_TIME_TYPES,
    DATE_TYPES,
    DECIMAL_TYPES,
    ELSE_KEY,
    IF_PRESENT_KEY,
    INTEGER_TYPES,
    RESOURCE_TYPE_KEY,
    STRING_TYPES,
    THEN_KEY,
    TIME_TYPES,
)
from fhir_shorthand._literals import (
    parse_annotation,
    parse_codeable_concept,
    parse_coding,
    parse_human_name,
    parse_period,
    parse_quantity,
)
from fhir_shorthand._primitives import (
    to_boolean,
    to_date,
    to_date_time,
    to_decimal,
    to_integer,
    to_string,
    to_time,
)
from fhir_shorthand._resolver import find_element
from fhir_shorthand.errors import (
    CardinalityViolationError,
    UnsupportedCardinalityError,
    UnsupportedTypeError,
)
from fhir_shorthand.schema import ElementDefinition, SchemaGeneration


@dataclass
class ConversionState:
    """Per-call context threaded through the recursion.

    ``generation`` is shared and read-only; ``root`` is the caller's
    original document (conditional constructs test presence against
    it); ``warnings`` and ``nodes_converted`` are owned by this call.
    """
    generation: SchemaGeneration
    root: Mapping[str, Any]
    warnings: list[str] = field(default_factory=list)
    nodes_converted: int = 0


def _is_sequence(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def _is_conditional(value: Any) -> bool:
    return isinstance(value, Mapping) and value.get(IF_PRESENT_KEY) is not None


# ── Field-by-field assignment ─────────────────────────────────────


def assign_properties(
    state: ConversionState,
    source: Mapping[str, Any],
    scoped_elements: Sequence[ElementDefinition],
    aliases: Optional[Mapping[str, str]] = None,
    result: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    """Convert every field of ``source`` into ``result``.

    Field names are first mapped through ``aliases`` (top level only),
    then resolved against ``scoped_elements``.  ``resourceType`` is
    skipped; it is seeded by the caller.

    Raises:
        PathNotFoundError: If a field resolves to no element.
    """
    if result is None:
        result = {}
    for key, raw_value in source.items():
        if key == RESOURCE_TYPE_KEY:
            continue
        field_name = aliases.get(key, key) if aliases else key
        element = find_element(scoped_elements, field_name)
        result[field_name] = convert_value(state, raw_value, element, scoped_elements)
        state.nodes_converted += 1
    return result


# ── Single value conversion ───────────────────────────────────────


def convert_value(
    state: ConversionState,
    raw_value: Any,
    element: ElementDefinition,
    scoped_elements: Sequence[ElementDefinition],
    skip_cardinality: bool = False,
) -> Any:
    """Convert one raw value according to its element definition.

    Args:
        state: Conversion context for this call.
        raw_value: The value as authored.
        element: Resolved element (already narrowed for choice types).
        scoped_elements: Elements of the enclosing scope, used to find
            inline children of backbone elements.
        skip_cardinality: ``True`` while converting the items of an
            already-expanded list.

    Raises:
        UnsupportedCardinalityError: If the element's max is ``"0"``.
        CardinalityViolationError: If a single-valued element is given
            a list.
        UnsupportedTypeError: If the leaf type has no converter.
        ParseError: If a shorthand literal is malformed.
    """
    if raw_value is None:
        return None

    if not skip_cardinality:
        if element.max == CARDINALITY_FORBIDDEN:
            raise UnsupportedCardinalityError(element.path)
        if element.max != CARDINALITY_SINGLE:
            items = raw_value if _is_sequence(raw_value) else [raw_value]
            return [
                convert_value(state, item, element, scoped_elements, skip_cardinality=True)
                for item in items
            ]
        if _is_sequence(raw_value):
            raise CardinalityViolationError(element.path)

    if _is_conditional(raw_value):
        return _convert_conditional(state, raw_value, element, scoped_elements, skip_cardinality)

    if isinstance(raw_value, Mapping):
        nested = _convert_structure(state, raw_value, element, scoped_elements)
        if nested is not None:
            return nested

    return _convert_leaf(state, raw_value, element)


def _convert_conditional(
    state: ConversionState,
    construct: Mapping[str, Any],
    element: ElementDefinition,
    scoped_elements: Sequence[ElementDefinition],
    skip_cardinality: bool,
) -> Any:
    # Presence is tested on the root document, not the local structure.
    field_to_check = construct[IF_PRESENT_KEY]
    if state.root.get(field_to_check) is not None:
        branch = construct.get(THEN_KEY)
    elif ELSE_KEY in construct:
        branch = construct[ELSE_KEY]
    else:
        return None
    return convert_value(state, branch, element, scoped_elements, skip_cardinality)


def _convert_structure(
    state: ConversionState,
    raw_value: Mapping[str, Any],
    element: ElementDefinition,
    scoped_elements: Sequence[ElementDefinition],
) -> Optional[dict[str, Any]]:
    """Recurse into a mapping value, or return ``None`` to fall through.

    Inline children (backbone elements) take precedence over the
    nested type's own definition.
    """
    prefix = f"{element.path}."
    inline = [
        e for e in scoped_elements
        if e.path == element.path or e.path.startswith(prefix)
    ]
    if len(inline) > 1:
        return assign_properties(state, raw_value, inline)

    type_definition = state.generation.find_type(element.type_code)
    if type_definition is not None and type_definition.elements:
        return assign_properties(state, raw_value, type_definition.elements)
    return None


# ── Leaf converters ───────────────────────────────────────────────

_PRIMITIVE_CONVERTERS: tuple[tuple[frozenset[str], Callable[[Any], Any]], ...] = (
    (BOOLEAN_TYPES, to_boolean),
    (INTEGER_TYPES, to_integer),
    (DECIMAL_TYPES, to_decimal),
    (DATE_TIME_TYPES, to_date_time),
    (DATE_TYPES, to_date),
    (TIME_TYPES, to_time),
    (STRING_TYPES, to_string),
)


def _convert_leaf(
    state: ConversionState,
    raw_value: Any,
    element: ElementDefinition,
) -> Any:
    type_code = element.type_code

    for codes, converter in _PRIMITIVE_CONVERTERS:
        if type_code in codes:
            return converter(raw_value)

    if type_code == "Annotation":
        return parse_annotation(raw_value)
    if type_code == "CodeableConcept":
        return parse_codeable_concept(raw_value, warnings=state.warnings)
    if type_code == "Coding":
        return parse_coding(raw_value, warnings=state.warnings)
    if type_code == "HumanName":
        return parse_human_name(raw_value, state.generation.version)
    if type_code == "Quantity":
        return parse_quantity(raw_value)
    if type_code == "Period":
        return parse_period(raw_value)

    # Address, Attachment, BackboneElement, ContactPoint, Element,
    # Identifier, Range, Ratio, Repeat, SampledData, Signature, Timing
    # and anything unrecognised.
    if type_code is None:
        type_code = "|".join(t.code for t in element.types) or None
    raise UnsupportedTypeError(type_code, element.path)
