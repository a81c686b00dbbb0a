"""
Example 01: Shorthand Basics: Patient, Observation and Condition
=================================================================

Converts three hand-written shorthand documents into FHIR R4 resources
using a small set of StructureDefinitions.  In practice the definitions
come from the published ``profiles-resources.json`` /
``profiles-types.json`` bundles; they are inlined here so the example
runs on its own.

Shows: choice elements, coded-value / quantity / name literals,
per-resource aliases and defaults, and the conditional construct.
"""

import json
from datetime import date

from fhir_shorthand import (
    ConversionError,
    SchemaGeneration,
    SchemaRegistry,
    Transformer,
)


def element(path, *codes, max="1"):
    el = {"path": path, "min": 0, "max": max}
    if codes:
        el["type"] = [{"code": c} for c in codes]
    return el


def structure(sd_id, kind, *elements):
    return {
        "resourceType": "StructureDefinition",
        "id": sd_id,
        "type": sd_id,
        "kind": kind,
        "snapshot": {"element": list(elements)},
    }


# ── 1. Schema generation and configuration ───────────────────────

print("=== 1. Schema Setup ===\n")

definitions = [
    structure(
        "Patient", "resource",
        element("Patient", max="*"),
        element("Patient.name", "HumanName", max="*"),
        element("Patient.gender", "code"),
        element("Patient.birthDate", "date"),
    ),
    structure(
        "Observation", "resource",
        element("Observation", max="*"),
        element("Observation.status", "code"),
        element("Observation.code", "CodeableConcept"),
        element("Observation.subject", "Reference"),
        element("Observation.effective[x]", "dateTime", "Period"),
        element("Observation.value[x]", "Quantity", "CodeableConcept", "string"),
    ),
    structure(
        "Condition", "resource",
        element("Condition", max="*"),
        element("Condition.clinicalStatus", "code"),
        element("Condition.code", "CodeableConcept"),
        element("Condition.subject", "Reference"),
        element("Condition.onset[x]", "dateTime", "Period"),
        element("Condition.abatement[x]", "dateTime", "boolean"),
    ),
    structure(
        "Reference", "complex-type",
        element("Reference"),
        element("Reference.reference", "string"),
    ),
]

configs = {
    "Observation": {
        "patient": "subject",
        "aliases": {"effective": "effectiveDateTime", "value": "valueQuantity"},
        "defaults": {"status": "final"},
    },
    "Condition": {
        "patient": "subject",
        "aliases": {"onset": "onsetDateTime", "abatement": "abatementDateTime"},
        "defaults": {
            "clinicalStatus": {
                "$if-present": "abatement",
                "$then": "resolved",
                "$else": "active",
            },
        },
    },
}

registry = SchemaRegistry([
    SchemaGeneration.from_definitions("R4", definitions, configs),
])
transformer = Transformer(registry)
print(f"Registered generations: {registry.versions}")

# ── 2. Convert shorthand documents ───────────────────────────────

print("\n=== 2. Conversion ===\n")

documents = [
    {
        "resourceType": "Patient",
        "name": "John Q Public",
        "gender": "male",
        "birthDate": date(1974, 12, 25),
    },
    {
        "resourceType": "Observation",
        "code": "LOINC#29463-7 Body weight",
        "value": "70 kg",
        "effective": "2020-01-01T09:30:00Z",
    },
    {
        "resourceType": "Condition",
        "code": "SNOMED#44054006 Diabetes mellitus type 2",
        "onset": "2010-03-01",
    },
]

for document in documents:
    resource, report = transformer.convert(document, subject_id="example-patient")
    print(json.dumps(resource, indent=2))
    print(f"  fields converted: {report.nodes_converted}, warnings: {report.warnings}\n")

# ── 3. Errors abort the whole conversion ─────────────────────────

print("=== 3. Errors ===\n")

for bad in (
    {"resourceType": "Patient", "nickname": "Jack"},
    {"resourceType": "Observation", "status": ["final", "amended"]},
    {"resourceType": "Observation", "value": "seventy kg"},
):
    try:
        transformer.convert(bad)
    except ConversionError as exc:
        print(f"{exc.code}: {exc.message}")
