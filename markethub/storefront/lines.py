# markethub/storefront/lines.py
"""
Operations on a list of cart lines.

Every function returns a new list and never mutates the LineItem objects it
was given, so a caller can throw the result away and keep its old state.

Matching rule: a line matches (product_id, variant) when the product ids are
equal and, if `variant` is given, the option sets are equal. Without a
variant every line of the product matches.
"""
import uuid
from typing import Sequence

from markethub.schemas.cart import LineItem


def matches(line: LineItem, product_id: uuid.UUID, variant: dict[str, str] | None = None) -> bool:
    if line.product_id != product_id:
        return False
    return not variant or line.variant == variant


def find_lines(
    items: Sequence[LineItem],
    product_id: uuid.UUID,
    variant: dict[str, str] | None = None,
) -> list[LineItem]:
    return [it for it in items if matches(it, product_id, variant)]


def product_quantity(items: Sequence[LineItem], product_id: uuid.UUID) -> int:
    """Units of a product across all of its variants."""
    return sum(it.quantity for it in items if it.product_id == product_id)


def add_line(items: Sequence[LineItem], line: LineItem) -> list[LineItem]:
    """
    Append `line`, or increment the line with the same (product id, variant).

    An incremented line keeps the snapshot it was created with.
    """
    result: list[LineItem] = []
    merged = False
    for it in items:
        if not merged and it.product_id == line.product_id and it.variant == line.variant:
            result.append(it.model_copy(update={"quantity": it.quantity + line.quantity}))
            merged = True
        else:
            result.append(it)
    if not merged:
        result.append(line)
    return result


def set_quantity(
    items: Sequence[LineItem],
    product_id: uuid.UUID,
    quantity: int,
    variant: dict[str, str] | None = None,
) -> list[LineItem]:
    return [
        it.model_copy(update={"quantity": quantity}) if matches(it, product_id, variant) else it
        for it in items
    ]


def remove_lines(
    items: Sequence[LineItem],
    product_id: uuid.UUID,
    variant: dict[str, str] | None = None,
) -> list[LineItem]:
    return [it for it in items if not matches(it, product_id, variant)]
