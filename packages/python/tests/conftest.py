"""Shared StructureDefinition fixtures.

A trimmed-down slice of the FHIR core definitions: just enough
elements of Patient, Observation and Condition (plus a few complex
types) to exercise every conversion path.
"""

import pytest

from fhir_shorthand import SchemaGeneration, SchemaRegistry


def _el(path, *codes, min=0, max="1"):
    element = {"id": path, "path": path, "min": min, "max": max}
    if codes:
        element["type"] = [{"code": c} for c in codes]
    return element


def _sd(sd_id, kind, elements):
    return {
        "resourceType": "StructureDefinition",
        "id": sd_id,
        "url": f"http://hl7.org/fhir/StructureDefinition/{sd_id}",
        "type": sd_id,
        "kind": kind,
        "snapshot": {"element": elements},
    }


PATIENT = _sd("Patient", "resource", [
    _el("Patient", max="*"),
    _el("Patient.id", "id"),
    _el("Patient.active", "boolean"),
    _el("Patient.name", "HumanName", max="*"),
    _el("Patient.gender", "code"),
    _el("Patient.birthDate", "date"),
    _el("Patient.deceased[x]", "boolean", "dateTime"),
    _el("Patient.multipleBirth[x]", "boolean", "integer"),
    _el("Patient.photo", "Attachment", max="0"),
    _el("Patient.address", "Address", max="*"),
    _el("Patient.contact", "BackboneElement", max="*"),
    _el("Patient.contact.name", "HumanName"),
    _el("Patient.contact.gender", "code"),
])

OBSERVATION = _sd("Observation", "resource", [
    _el("Observation", max="*"),
    _el("Observation.id", "id"),
    _el("Observation.status", "code", min=1),
    _el("Observation.category", "CodeableConcept", max="*"),
    _el("Observation.code", "CodeableConcept", min=1),
    _el("Observation.subject", "Reference"),
    _el("Observation.effective[x]", "dateTime", "Period", "Timing", "instant"),
    _el("Observation.issued", "instant"),
    _el(
        "Observation.value[x]",
        "Quantity", "CodeableConcept", "string", "boolean", "integer",
        "time", "Period", "SampledData",
    ),
    _el("Observation.note", "Annotation", max="*"),
    _el("Observation.component", "BackboneElement", max="*"),
    _el("Observation.component.code", "CodeableConcept", min=1),
    _el("Observation.component.value[x]", "Quantity", "string"),
])

CONDITION = _sd("Condition", "resource", [
    _el("Condition", max="*"),
    _el("Condition.id", "id"),
    _el("Condition.clinicalStatus", "code"),
    _el("Condition.verificationStatus", "code"),
    _el("Condition.code", "CodeableConcept"),
    _el("Condition.subject", "Reference", min=1),
    _el("Condition.onset[x]", "dateTime", "Period", "string"),
    _el("Condition.abatement[x]", "dateTime", "boolean"),
    _el("Condition.note", "Annotation", max="*"),
])

REFERENCE = _sd("Reference", "complex-type", [
    _el("Reference"),
    _el("Reference.reference", "string"),
    _el("Reference.display", "string"),
])

CODING = _sd("Coding", "complex-type", [
    _el("Coding"),
    _el("Coding.system", "uri"),
    _el("Coding.code", "code"),
    _el("Coding.display", "string"),
])

QUANTITY = _sd("Quantity", "complex-type", [
    _el("Quantity"),
    _el("Quantity.value", "decimal"),
    _el("Quantity.unit", "string"),
    _el("Quantity.system", "uri"),
    _el("Quantity.code", "code"),
])

PERIOD = _sd("Period", "complex-type", [
    _el("Period"),
    _el("Period.start", "dateTime"),
    _el("Period.end", "dateTime"),
])

# Differential-only: known type, but no elements to expand into.
TIMING = {
    "resourceType": "StructureDefinition",
    "id": "Timing",
    "type": "Timing",
    "kind": "complex-type",
    "differential": {"element": [_el("Timing")]},
}

DEFINITIONS = [
    PATIENT, OBSERVATION, CONDITION,
    REFERENCE, CODING, QUANTITY, PERIOD, TIMING,
]

CONFIGS = {
    "Observation": {
        "patient": "subject",
        "aliases": {"effective": "effectiveDateTime"},
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
            "verificationStatus": "confirmed",
        },
    },
}


def as_bundle(resources):
    return {
        "resourceType": "Bundle",
        "type": "collection",
        "entry": [{"fullUrl": r.get("url"), "resource": r} for r in resources]
        + [{"resource": {"resourceType": "SearchParameter", "id": "ignored"}}],
    }


@pytest.fixture
def r4():
    return SchemaGeneration.from_definitions("R4", DEFINITIONS, CONFIGS)


@pytest.fixture
def registry(r4):
    return SchemaRegistry([
        SchemaGeneration.from_bundle("DSTU2", as_bundle(DEFINITIONS), CONFIGS),
        SchemaGeneration.from_definitions("stu3", DEFINITIONS, CONFIGS),
        r4,
    ])


@pytest.fixture
def definitions():
    return DEFINITIONS


@pytest.fixture
def bundle():
    return as_bundle(DEFINITIONS)
