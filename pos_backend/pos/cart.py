# pos/cart.py

"""
CART MODEL (IN-MEMORY)

Purpose:
- The cashier's working list of lines before checkout.

Rules:
- One line per product: adding the same product again increases its quantity.
- Quantity is always a positive integer; setting it to 0 or less removes the line.
- unit_price and name are snapshots taken when the product was first added.
- added_since_last_view counts units added since the operator last looked at
  the line ("+N new" badge) and never goes below zero.
- All mutation goes through Cart methods; lines are exposed read-only.
- total() is the plain sum of unit_price * quantity (no rounding here).
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, replace
from decimal import Decimal

ZERO = Decimal("0.00")


class CartLineNotFound(LookupError):
    pass


@dataclass(frozen=True)
class CartLine:
    id: str
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int
    note: str = ""
    added_since_last_view: int = 0

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "product_id": self.product_id,
            "name": self.name,
            "unit_price": str(self.unit_price),
            "quantity": self.quantity,
            "note": self.note,
            "added_since_last_view": self.added_since_last_view,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CartLine":
        return cls(
            id=str(data["id"]),
            product_id=str(data["product_id"]),
            name=str(data.get("name") or ""),
            unit_price=Decimal(str(data["unit_price"])),
            quantity=int(data["quantity"]),
            note=str(data.get("note") or ""),
            added_since_last_view=int(data.get("added_since_last_view") or 0),
        )


class Cart:
    """
    Usage:
        cart = Cart()
        line = cart.add_item(get_product(business_id=b, product_id=p), quantity=2)
        cart.set_quantity(line.id, 5)
        cart.total()
    """

    def __init__(self, lines=None):
        self._lines: list[CartLine] = list(lines or [])

    # ---------------------------
    # Read
    # ---------------------------

    @property
    def lines(self) -> tuple[CartLine, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines)

    def total(self) -> Decimal:
        return sum((line.line_total for line in self._lines), ZERO)

    def get_line(self, line_id: str) -> CartLine:
        return self._lines[self._index(line_id)]

    def _index(self, line_id: str) -> int:
        for idx, line in enumerate(self._lines):
            if line.id == str(line_id):
                return idx
        raise CartLineNotFound(f"Cart line {line_id} not found")

    # ---------------------------
    # Mutations
    # ---------------------------

    def add_item(self, product, quantity: int = 1) -> CartLine:
        """product: anything with id, name and price (ProductSnapshot)."""
        qty = max(1, int(quantity or 1))
        product_id = str(product.id)

        for idx, line in enumerate(self._lines):
            if line.product_id == product_id:
                updated = replace(
                    line,
                    quantity=line.quantity + qty,
                    added_since_last_view=line.added_since_last_view + qty,
                )
                self._lines[idx] = updated
                return updated

        line = CartLine(
            id=str(uuid.uuid4()),
            product_id=product_id,
            name=product.name,
            unit_price=Decimal(str(product.price)),
            quantity=qty,
            added_since_last_view=qty,
        )
        self._lines.append(line)
        return line

    def set_quantity(self, line_id: str, quantity: int) -> CartLine | None:
        idx = self._index(line_id)
        qty = int(quantity)
        if qty <= 0:
            del self._lines[idx]
            return None

        line = self._lines[idx]
        delta = qty - line.quantity
        updated = replace(
            line,
            quantity=qty,
            added_since_last_view=max(0, line.added_since_last_view + delta),
        )
        self._lines[idx] = updated
        return updated

    def set_note(self, line_id: str, text: str) -> CartLine:
        idx = self._index(line_id)
        updated = replace(self._lines[idx], note=text or "")
        self._lines[idx] = updated
        return updated

    def remove_item(self, line_id: str) -> None:
        del self._lines[self._index(line_id)]

    def clear(self) -> None:
        self._lines.clear()

    def acknowledge_new_items(self) -> None:
        self._lines = [replace(line, added_since_last_view=0) for line in self._lines]

    # ---------------------------
    # Storage
    # ---------------------------

    def to_dict(self) -> dict:
        return {"lines": [line.to_dict() for line in self._lines]}

    @classmethod
    def from_dict(cls, data: dict | None) -> "Cart":
        data = data or {}
        return cls(CartLine.from_dict(d) for d in data.get("lines") or [])
