"""
Shared constants for shorthand-to-FHIR conversion.

Reserved document keys, generation tags, type-code groups and the
coding-system alias table are centralised here so that the resolver,
dispatcher and literal parsers agree on them.
"""

from __future__ import annotations

import re

# ── Document & Record Keys ─────────────────────────────────────────

RESOURCE_TYPE_KEY = "resourceType"
"""Discriminator field carried by every source document and record."""

ID_KEY = "id"

SUBJECT_RESOURCE_TYPE = "Patient"
"""Resource kind whose identifier may be supplied by the caller."""

# Conditional construct: {"$if-present": field, "$then": v, "$else": v}
IF_PRESENT_KEY = "$if-present"
THEN_KEY = "$then"
ELSE_KEY = "$else"

CHOICE_SUFFIX = "[x]"

# ── Schema Generations ─────────────────────────────────────────────

DSTU2 = "DSTU2"
STU3 = "STU3"
R4 = "R4"

SUPPORTED_FHIR_VERSIONS = (DSTU2, STU3, R4)
"""Generation tags with known normalisation rules."""

LEGACY_GENERATION = DSTU2
"""Generation in which ``HumanName.family`` is a list."""

# Numeric release → generation tag.  Anything else is used verbatim
# (upper-cased) as the tag.
VERSION_PATTERNS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"^1\.0\.\d+$"), DSTU2),
    (re.compile(r"^3\.0\.\d+$"), STU3),
    (re.compile(r"^4\.0\.\d+$"), R4),
)

# ── Type Codes ─────────────────────────────────────────────────────

CARDINALITY_FORBIDDEN = "0"
CARDINALITY_SINGLE = "1"

BOOLEAN_TYPES = frozenset({"boolean"})
INTEGER_TYPES = frozenset({"integer", "unsignedInt", "positiveInt"})
DECIMAL_TYPES = frozenset({"decimal"})
DATE_TIME_TYPES = frozenset({"instant", "dateTime"})
DATE_TYPES = frozenset({"date"})
TIME_TYPES = frozenset({"time"})
STRING_TYPES = frozenset({
    "string", "code", "id", "markdown", "uri", "oid", "base64Binary",
})


# ── Coding Systems ─────────────────────────────────────────────────

SNOMED_CT = "http://snomed.info/sct"
LOINC = "http://loinc.org"
RXNORM = "http://www.nlm.nih.gov/research/umls/rxnorm"
UCUM = "http://unitsofmeasure.org"

CODE_SYSTEM_ALIASES: dict[str, str] = {
    "SNOMED": SNOMED_CT,
    "SNOMEDCT": SNOMED_CT,
    "SNOMED-CT": SNOMED_CT,
    "SCT": SNOMED_CT,
    "LOINC": LOINC,
    "RXNORM": RXNORM,
    "RXN": RXNORM,
    "RX": RXNORM,
    "UCUM": UCUM,
    "CPT": "http://www.ama-assn.org/go/cpt",
    "CVX": "http://hl7.org/fhir/sid/cvx",
    "ICD-10": "http://hl7.org/fhir/sid/icd-10",
    "ICD10": "http://hl7.org/fhir/sid/icd-10",
    "ICD-10-CM": "http://hl7.org/fhir/sid/icd-10-cm",
    "ICD10CM": "http://hl7.org/fhir/sid/icd-10-cm",
    "ICD-10-PCS": "http://www.icd10data.com/icd10pcs",
    "ICD10PCS": "http://www.icd10data.com/icd10pcs",
    "ICD-9-D": "http://hl7.org/fhir/sid/icd-9-cm/diagnosis",
    "ICD9D": "http://hl7.org/fhir/sid/icd-9-cm/diagnosis",
    "ICD-9-CM-D": "http://hl7.org/fhir/sid/icd-9-cm/diagnosis",
    "ICD9CMD": "http://hl7.org/fhir/sid/icd-9-cm/diagnosis",
    "ICD-9-P": "http://hl7.org/fhir/sid/icd-9-cm/procedure",
    "ICD9P": "http://hl7.org/fhir/sid/icd-9-cm/procedure",
    "ICD-9-CM-P": "http://hl7.org/fhir/sid/icd-9-cm/procedure",
    "ICD9CMP": "http://hl7.org/fhir/sid/icd-9-cm/procedure",
    "OBS-CAT": "http://hl7.org/fhir/observation-category",
    "OBSCAT": "http://hl7.org/fhir/observation-category",
    "V3-ROLE-CODE": "http://hl7.org/fhir/v3/RoleCode",
    "V3-RACE": "http://hl7.org/fhir/v3/Race",
    "V3-ETHNICITY": "http://hl7.org/fhir/v3/Ethnicity",
}
"""Upper-cased shorthand system token → canonical system URI."""
