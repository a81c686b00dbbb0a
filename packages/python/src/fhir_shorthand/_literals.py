"""
Shorthand literal grammars for FHIR complex types.

Each parser turns a compact, human-friendly literal into the FHIR
structure for its type:

  Coding           ``[SYSTEM] [#CODE] [DISPLAY]``   e.g. ``LOINC#8302-2 Body height``
  CodeableConcept  same grammar as Coding
  Quantity         ``VALUE [UNIT]``                 e.g. ``70 kg``
  Period           ``START [- END]``                e.g. ``2020-01-01 - 2020-01-05``
  HumanName        ``GIVEN... FAMILY``              e.g. ``John Q Public``
  Annotation       ``{author, time, text}`` or bare text

Components absent from the literal are omitted from the result rather
than emitted as ``None``.
"""

from __future__ import annotations

import logging
import re
from datetime import date
from typing import Any, Mapping, Optional

from fhir_shorthand._constants import CODE_SYSTEM_ALIASES, LEGACY_GENERATION
from fhir_shorthand._primitives import to_date_time, to_string
from fhir_shorthand.errors import ParseError

logger = logging.getLogger(__name__)

# Coding grammar.  The system/code group is optional as a whole, and
# within it the system is optional:
#   SYSTEM#CODE DISPLAY | #CODE DISPLAY | DISPLAY | (empty)
# "#" may be surrounded by whitespace; the code itself cannot contain
# "#" or whitespace.  Display is the rest of the line.
_CODING = re.compile(
    r"(?:(?P<system>\S+)?\s*#\s*(?P<code>[^#\s]+))?\s*(?P<display>.*)"
)

# Quantity grammar: numeric magnitude at the start, then an optional
# unit running to the end of the first line.  Later lines are ignored.
_QUANTITY = re.compile(
    r"\s*(?P<value>[+-]?\d+(?:\.\d+)?(?:[eE][+-]?\d+)?)[ \t]*(?P<unit>\S[^\n]*?)?\s*(?:\n.*)?",
    re.DOTALL,
)

# Period separator: a dash with whitespace on both sides, so the
# hyphens inside ISO dates never split.
_PERIOD_SEPARATOR = re.compile(r"\s+-\s+")


def _warn(warnings: Optional[list[str]], message: str) -> None:
    logger.warning(message)
    if warnings is not None:
        warnings.append(message)


def _is_system_uri(system: str) -> bool:
    return "://" in system or system.startswith("urn:")


def parse_coding(
    literal: Any,
    *,
    warnings: Optional[list[str]] = None,
) -> dict[str, str]:
    """Parse ``[SYSTEM] [#CODE] [DISPLAY]`` into a FHIR Coding.

    System aliases (``LOINC``, ``SNOMED``, ``RXNORM``, ...) are matched
    case-insensitively and replaced by their canonical URI.  A system
    that is neither an alias nor URI/URN-shaped is kept as written and
    reported as a warning.

    Args:
        literal: The shorthand text.  Non-strings are converted with
            ``str()``.
        warnings: Optional list that receives non-fatal diagnostics.

    Raises:
        ParseError: If the literal does not fit the grammar (e.g. the
            display spans several lines).
    """
    text = to_string(literal)
    match = _CODING.fullmatch(text)
    if match is None:
        raise ParseError("code", literal)

    coding: dict[str, str] = {}
    system = match.group("system")
    if system:
        system = CODE_SYSTEM_ALIASES.get(system.upper(), system)
        if not _is_system_uri(system):
            _warn(warnings, f"Unrecognized code system: {system}")
        coding["system"] = system
    if match.group("code"):
        coding["code"] = match.group("code")
    if match.group("display"):
        coding["display"] = match.group("display")
    return coding


def parse_codeable_concept(
    literal: Any,
    *,
    warnings: Optional[list[str]] = None,
) -> dict[str, Any]:
    """Parse the Coding grammar into a CodeableConcept.

    With a code: ``{"coding": [coding], "text": display}``; with only
    display text: ``{"text": display}``.
    """
    coding = parse_coding(literal, warnings=warnings)
    concept: dict[str, Any] = {}
    if "code" in coding:
        concept["coding"] = [coding]
    if "display" in coding:
        concept["text"] = coding["display"]
    return concept


def parse_annotation(value: Any) -> dict[str, Any]:
    """Build an Annotation from ``{author, time, text}`` or bare text."""
    if not isinstance(value, Mapping):
        return {"text": to_string(value, "")}
    annotation: dict[str, Any] = {}
    author = to_string(value.get("author"))
    if author is not None:
        annotation["authorString"] = author
    if value.get("time") is not None:
        annotation["time"] = to_date_time(value["time"])
    annotation["text"] = to_string(value.get("text"), "")
    return annotation


def parse_human_name(literal: Any, fhir_version: str) -> dict[str, Any]:
    """Split ``GIVEN... FAMILY`` into a HumanName.

    The last whitespace-separated token is the family name; every other
    token is a given name.  A single token is treated as a given name.
    In the legacy generation ``family`` is a one-element list.
    """
    parts = to_string(literal).split()
    name: dict[str, Any] = {}
    if len(parts) == 1:
        name["given"] = parts
    elif len(parts) > 1:
        name["given"] = parts[:-1]
        family = parts[-1]
        name["family"] = [family] if fhir_version.upper() == LEGACY_GENERATION else family
    return name


def parse_quantity(literal: Any) -> dict[str, Any]:
    """Parse ``VALUE [UNIT]`` into a Quantity.

    A number is taken as the value with no unit.  For text, only the
    first line is read.

    Raises:
        ParseError: If the literal has no leading numeric value.
    """
    if isinstance(literal, (int, float)) and not isinstance(literal, bool):
        return {"value": literal}
    match = _QUANTITY.fullmatch(to_string(literal))
    if match is None:
        raise ParseError("quantity", literal)
    raw_value = match.group("value")
    is_integral = raw_value.lstrip("+-").isdigit()
    quantity: dict[str, Any] = {
        "value": int(raw_value) if is_integral else float(raw_value),
    }
    if match.group("unit"):
        quantity["unit"] = match.group("unit")
    return quantity


def parse_period(value: Any) -> dict[str, str]:
    """Parse a temporal value or ``START - END`` literal into a Period."""
    if isinstance(value, date):
        return {"start": to_date_time(value)}
    tokens = [t.strip() for t in _PERIOD_SEPARATOR.split(to_string(value))]
    period = {"start": to_date_time(tokens[0])}
    if len(tokens) > 1 and tokens[1]:
        period["end"] = to_date_time(tokens[1])
    return period
