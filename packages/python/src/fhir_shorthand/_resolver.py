"""
Element resolution: map an input field name to its element definition.
"""

from __future__ import annotations

from typing import Sequence

from fhir_shorthand.errors import PathNotFoundError
from fhir_shorthand.schema import ElementDefinition


def find_element(
    scoped_elements: Sequence[ElementDefinition],
    field_name: str,
) -> ElementDefinition:
    """Resolve ``field_name`` against the elements of one scope.

    The wanted path is the scope's root path (its first element) plus
    the field name.  An exact path match wins.  Otherwise every choice
    element (``...[x]``) is tried in scan order, and within it every
    declared type in order; the first type whose capitalised code
    completes the path (``value[x]`` + ``Quantity`` → ``valueQuantity``)
    is selected, and a copy of the element narrowed to that type is
    returned.

    Raises:
        PathNotFoundError: If neither an exact nor a choice match exists.
    """
    wanted_path = f"{scoped_elements[0].path}.{field_name}"

    for element in scoped_elements:
        if element.path == wanted_path:
            return element

    for element in scoped_elements:
        if not element.is_choice:
            continue
        for type_ref in element.types:
            if element.choice_path(type_ref) == wanted_path:
                return element.narrowed(type_ref)

    raise PathNotFoundError(wanted_path)
