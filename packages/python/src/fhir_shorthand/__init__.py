"""
fhir-shorthand: schema-driven conversion of shorthand documents to FHIR.

Turns loosely-typed, human-authored documents (typically parsed from
YAML) into FHIR resources.  Nothing about individual resources is
hard-coded: the legal fields, their cardinality and their types all
come from StructureDefinitions supplied by the caller.

    >>> registry = SchemaRegistry([SchemaGeneration.from_bundle("R4", bundle)])
    >>> resource, report = convert(
    ...     {"resourceType": "Observation", "status": "final",
    ...      "code": "LOINC#29463-7 Body weight", "valueQuantity": "70 kg"},
    ...     registry,
    ...     subject_id="123",
    ... )

Conversion rules:
  - Field names resolve against element paths, including choice
    elements (``valueQuantity`` → ``Observation.value[x]``).
  - Elements with max ``"*"`` always produce lists; single-valued
    elements reject lists; max ``"0"`` elements reject any value.
  - Mappings recurse into backbone children or the nested type's own
    StructureDefinition.
  - Leaf values go through primitive codecs or shorthand grammars for
    Coding, CodeableConcept, Quantity, Period, HumanName, Annotation.
  - ``{"$if-present": field, "$then": ..., "$else": ...}`` chooses a
    value based on whether ``field`` is set in the document.

References:
  - HL7 FHIR StructureDefinition: https://hl7.org/fhir/structuredefinition.html
  - HL7 FHIR Data Types: https://hl7.org/fhir/datatypes.html
"""

__version__ = "0.3.0"

from fhir_shorthand._constants import (
    CODE_SYSTEM_ALIASES,
    LEGACY_GENERATION,
    SUBJECT_RESOURCE_TYPE,
    SUPPORTED_FHIR_VERSIONS,
)
from fhir_shorthand.errors import (
    ConversionError,
    UnsupportedVersionError,
    MissingResourceTypeError,
    UnsupportedResourceTypeError,
    PathNotFoundError,
    UnsupportedCardinalityError,
    CardinalityViolationError,
    UnsupportedTypeError,
    ParseError,
)
from fhir_shorthand.report import ConversionReport
from fhir_shorthand.schema import (
    TypeRef,
    ElementDefinition,
    StructureDefinition,
    ResourceConfig,
    SchemaGeneration,
    SchemaRegistry,
    resolve_schema_generation,
)
from fhir_shorthand._primitives import (
    to_boolean,
    to_integer,
    to_decimal,
    to_date_time,
    to_date,
    to_time,
    to_string,
    to_iso_timestamp,
)
from fhir_shorthand._literals import (
    parse_coding,
    parse_codeable_concept,
    parse_annotation,
    parse_human_name,
    parse_quantity,
    parse_period,
)
from fhir_shorthand._resolver import find_element
from fhir_shorthand._dispatch import (
    ConversionState,
    assign_properties,
    convert_value,
)
from fhir_shorthand._transformer import (
    Transformer,
    convert,
    subject_reference,
)

__all__ = [
    # Core conversion
    "convert",
    "Transformer",
    "subject_reference",
    "find_element",
    "assign_properties",
    "convert_value",
    "ConversionState",
    "ConversionReport",
    # Schema collaborators
    "TypeRef",
    "ElementDefinition",
    "StructureDefinition",
    "ResourceConfig",
    "SchemaGeneration",
    "SchemaRegistry",
    "resolve_schema_generation",
    # Primitive codecs
    "to_boolean",
    "to_integer",
    "to_decimal",
    "to_date_time",
    "to_date",
    "to_time",
    "to_string",
    "to_iso_timestamp",
    # Shorthand grammars
    "parse_coding",
    "parse_codeable_concept",
    "parse_annotation",
    "parse_human_name",
    "parse_quantity",
    "parse_period",
    # Constants
    "CODE_SYSTEM_ALIASES",
    "LEGACY_GENERATION",
    "SUBJECT_RESOURCE_TYPE",
    "SUPPORTED_FHIR_VERSIONS",
    # Errors
    "ConversionError",
    "UnsupportedVersionError",
    "MissingResourceTypeError",
    "UnsupportedResourceTypeError",
    "PathNotFoundError",
    "UnsupportedCardinalityError",
    "CardinalityViolationError",
    "UnsupportedTypeError",
    "ParseError",
]
