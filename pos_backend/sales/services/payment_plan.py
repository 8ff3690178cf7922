# sales/services/payment_plan.py

"""
PAYMENT PLAN VALIDATOR

Purpose:
- Decide whether a single-method or split payment covers the cart total.
- Produce the PaymentBreakdown persisted with the sale.

Rules:
- Monetary inputs are sanitized to at most two decimals and parsed with
  ROUND_HALF_UP to cents.
- No amount (total, received, slot) may exceed MAX_AMOUNT; larger values are
  plan errors, never exceptions.
- Validity is derived on every access (no cached "valid" flag across edits).
- The plan itself never raises for an invalid state; it exposes can_complete.
  to_breakdown() is the only call that raises, and only the checkout
  pipeline calls it.

SPLIT PAYMENT:
- N slots (N >= 2), each slot needs a known method and an amount > 0.
- sum(amounts) >= total; overpayment is allowed and recorded as entered.

NON-SPLIT PAYMENT:
- Tendered (cash-like) methods: amount_received >= total, change = received - total.
- Other methods: amount is implicitly the full total.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Iterable, Sequence

from businesses.models import PaymentMethod

from .exceptions import CheckoutValidationError

TWOPLACES = Decimal("0.01")
ZERO = Decimal("0.00")

MIN_SPLIT_SLOTS = 2

# largest value a money column (12 digits, 2 decimals) can store
MAX_AMOUNT = Decimal("9999999999.99")

_NOT_AMOUNT_CHARS = re.compile(r"[^\d.]")
_NOT_DIGITS = re.compile(r"\D")


# ============================================================
# MONEY INPUT HELPERS
# ============================================================

def sanitize_amount_input(value) -> str:
    """
    Keep digits and a single decimal point with at most 2 decimals.

    "1a2.345" -> "12.34", "5." -> "5.", "1.2.3" -> "1.2"
    """
    text = _NOT_AMOUNT_CHARS.sub("", str(value or ""))
    parts = text.split(".")
    if len(parts) == 1:
        return parts[0]

    integer_part = parts[0]
    decimal_part = _NOT_DIGITS.sub("", parts[1])[:2]
    if decimal_part:
        return f"{integer_part}.{decimal_part}"
    return f"{integer_part}."


def parse_amount(value) -> Decimal:
    if value is None or value == "":
        return ZERO

    if isinstance(value, Decimal):
        d = value
    else:
        try:
            d = Decimal(str(value).strip().replace(",", "."))
        except InvalidOperation:
            return ZERO

    if not d.is_finite():
        return ZERO

    try:
        return d.quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    except InvalidOperation:
        # more digits than the decimal context can hold
        return ZERO


def to_money(value) -> Decimal:
    return parse_amount(value)


# ============================================================
# PAYMENT METHODS (TAGGED VARIANT + CAPABILITIES)
# ============================================================

@dataclass(frozen=True)
class MethodCapability:
    # operator types the amount handed over; change is given back
    accepts_tender: bool


METHOD_CAPABILITIES: dict[str, MethodCapability] = {
    PaymentMethod.KIND_CASH: MethodCapability(accepts_tender=True),
    PaymentMethod.KIND_CARD: MethodCapability(accepts_tender=False),
    PaymentMethod.KIND_TRANSFER: MethodCapability(accepts_tender=False),
    PaymentMethod.KIND_OTHER: MethodCapability(accepts_tender=False),
}


def capability_for(kind: str) -> MethodCapability:
    return METHOD_CAPABILITIES.get(kind, METHOD_CAPABILITIES[PaymentMethod.KIND_OTHER])


@dataclass(frozen=True)
class PaymentMethodOption:
    code: str
    name: str
    kind: str = PaymentMethod.KIND_OTHER
    color: str = ""
    icon: str = ""

    @property
    def capability(self) -> MethodCapability:
        return capability_for(self.kind)


# ============================================================
# BREAKDOWN (PERSISTED SHAPE)
# ============================================================

@dataclass(frozen=True)
class MethodAmount:
    code: str
    amount: Decimal


@dataclass(frozen=True)
class PaymentBreakdown:
    split: bool
    methods: tuple[MethodAmount, ...]

    @property
    def primary_code(self) -> str:
        return self.methods[0].code if self.methods else "cash"

    @property
    def total_paid(self) -> Decimal:
        return sum((m.amount for m in self.methods), ZERO)

    def to_dict(self) -> dict:
        return {
            "split": self.split,
            "methods": [
                {"code": m.code, "amount": f"{m.amount:.2f}"} for m in self.methods
            ],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentBreakdown":
        return cls(
            split=bool(data.get("split")),
            methods=tuple(
                MethodAmount(code=str(m["code"]), amount=parse_amount(m["amount"]))
                for m in data.get("methods") or []
            ),
        )


# ============================================================
# PLAN (OPERATOR STATE)
# ============================================================

@dataclass
class SplitSlot:
    method_code: str = ""
    amount: str = ""


@dataclass
class PaymentPlan:
    """
    Operator-side payment state for one checkout.

    Usage:
        plan = PaymentPlan(total=cart.total(), methods=list_active_methods(...))
        plan.set_amount_received("30")
        plan.can_complete  # derived, recomputed on every access
    """

    total: Decimal
    methods: Sequence[PaymentMethodOption] = ()
    split_slots: int = MIN_SPLIT_SLOTS

    split: bool = field(default=False, init=False)
    selected_method_code: str = field(default="", init=False)
    amount_received: str = field(default="", init=False)
    slots: list[SplitSlot] = field(default_factory=list, init=False)

    def __post_init__(self):
        self.total = to_money(self.total)
        self.methods = tuple(self.methods)
        self._methods_by_code = {m.code: m for m in self.methods}

        count = max(MIN_SPLIT_SLOTS, int(self.split_slots or 0))
        self.split_slots = count

        first = self.methods[0].code if self.methods else ""
        self.selected_method_code = first
        self.slots = [
            SplitSlot(method_code=self.methods[i].code if i < len(self.methods) else first)
            for i in range(count)
        ]

    # ---------------------------
    # Edits
    # ---------------------------

    def set_split(self, enabled: bool) -> None:
        self.split = bool(enabled)

    def select_method(self, code: str) -> None:
        self.selected_method_code = (code or "").strip()

    def set_amount_received(self, value) -> None:
        self.amount_received = sanitize_amount_input(value)

    def set_slot(self, index: int, *, method_code: str | None = None, amount=None) -> None:
        slot = self.slots[index]
        if method_code is not None:
            slot.method_code = (method_code or "").strip()
        if amount is not None:
            slot.amount = sanitize_amount_input(amount)

    def add_slot(self) -> int:
        self.slots.append(SplitSlot(method_code=self.selected_method_code))
        return len(self.slots) - 1

    def remove_slot(self, index: int) -> None:
        if len(self.slots) <= MIN_SPLIT_SLOTS:
            return
        del self.slots[index]

    # ---------------------------
    # Derived state
    # ---------------------------

    def method(self, code: str) -> PaymentMethodOption | None:
        return self._methods_by_code.get(code)

    @property
    def selected_method(self) -> PaymentMethodOption | None:
        return self.method(self.selected_method_code)

    @property
    def amount_received_value(self) -> Decimal:
        return parse_amount(self.amount_received)

    @property
    def is_tendered(self) -> bool:
        m = self.selected_method
        return bool(m and m.capability.accepts_tender)

    @property
    def change(self) -> Decimal:
        if self.split:
            return max(ZERO, self.split_total_entered - self.total)
        if not self.is_tendered:
            return ZERO
        return max(ZERO, self.amount_received_value - self.total)

    @property
    def split_total_entered(self) -> Decimal:
        return sum((parse_amount(s.amount) for s in self.slots), ZERO)

    def errors(self) -> list[str]:
        if self.total > MAX_AMOUNT:
            return [f"Total exceeds the maximum of {MAX_AMOUNT:.2f}."]
        if self.split:
            return self._split_errors()
        return self._single_errors()

    def _single_errors(self) -> list[str]:
        method = self.selected_method
        if method is None:
            return ["Select a payment method."]
        if self.amount_received_value > MAX_AMOUNT:
            return [f"Amount received exceeds the maximum of {MAX_AMOUNT:.2f}."]
        if method.capability.accepts_tender and self.amount_received_value < self.total:
            return [
                f"Amount received {self.amount_received_value:.2f} "
                f"is less than the total {self.total:.2f}."
            ]
        return []

    def _split_errors(self) -> list[str]:
        out = []
        for idx, slot in enumerate(self.slots):
            if self.method(slot.method_code) is None:
                out.append(f"Payment {idx + 1}: select a payment method.")
            amount = parse_amount(slot.amount)
            if amount <= ZERO:
                out.append(f"Payment {idx + 1}: amount must be greater than zero.")
            elif amount > MAX_AMOUNT:
                out.append(f"Payment {idx + 1}: amount exceeds the maximum of {MAX_AMOUNT:.2f}.")

        entered = self.split_total_entered
        if entered < self.total:
            out.append(
                f"Split payments add up to {entered:.2f}, "
                f"less than the total {self.total:.2f}."
            )
        elif entered > MAX_AMOUNT:
            out.append(f"Split payments exceed the maximum of {MAX_AMOUNT:.2f}.")
        return out

    @property
    def can_complete(self) -> bool:
        return not self.errors()

    # ---------------------------
    # Output
    # ---------------------------

    def to_breakdown(self) -> PaymentBreakdown:
        problems = self.errors()
        if problems:
            raise CheckoutValidationError(" ".join(problems))

        if self.split:
            return PaymentBreakdown(
                split=True,
                methods=tuple(
                    MethodAmount(code=s.method_code, amount=parse_amount(s.amount))
                    for s in self.slots
                ),
            )

        return PaymentBreakdown(
            split=False,
            methods=(MethodAmount(code=self.selected_method_code, amount=self.total),),
        )

    # ---------------------------
    # API payload
    # ---------------------------

    @classmethod
    def from_payload(
        cls,
        *,
        total,
        methods: Iterable[PaymentMethodOption],
        payload: dict,
        split_slots: int = MIN_SPLIT_SLOTS,
    ) -> "PaymentPlan":
        """
        payload:
            {"split": false, "method_code": "cash", "amount_received": "30.00"}
            {"split": true, "slots": [{"method_code": "cash", "amount": "15"}, ...]}
        """
        slots = list(payload.get("slots") or [])
        plan = cls(
            total=total,
            methods=list(methods),
            split_slots=max(split_slots, len(slots)),
        )

        plan.set_split(bool(payload.get("split")))

        code = payload.get("method_code")
        if code:
            plan.select_method(code)
        plan.set_amount_received(payload.get("amount_received") or "")

        for idx, slot in enumerate(slots):
            plan.set_slot(
                idx,
                method_code=slot.get("method_code") or "",
                amount=slot.get("amount") or "",
            )
        return plan
