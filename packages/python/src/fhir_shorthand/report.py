"""Conversion report returned alongside every converted record."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class ConversionReport:
    """Report from a conversion operation.

    ``warnings`` collects non-fatal diagnostics (e.g. unrecognised
    coding systems).  They never change the converted value.

    Conversion failures raise a ``ConversionError`` instead of being
    recorded, so a returned report always has ``success=True`` and an
    empty ``errors`` list.
    """
    success: bool
    resource_type: str = ""
    fhir_version: str = ""
    nodes_converted: int = 0
    warnings: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)
