"""State and logic of a simple calculator."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from decimal import Decimal

from widgetcore.data import Data

MINUS = "\u2212"
PLUS = "+"
TIMES = "\u00d7"
DIVIDE = "\u00f7"
EQUALS = "="
PLUS_MINUS = "\u00b1"
POINT = "."
CLEAR_ENTRY = "c"
CLEAR = "C"
BACKSPACE = "\u232b"

_FLOAT_RE = re.compile(
    r"[+-]?(?:(?i:inf|infinity|nan)|(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)


def _parse_float(text: str) -> float:
    """Parse a plain float literal; 0.0 when the text is not one."""
    if not _FLOAT_RE.fullmatch(text):
        return 0.0
    return float(text)


def _format_float(value: float) -> str:
    """Shortest decimal form without exponent, dropping a trailing '.0'."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def _divide(a: float, b: float) -> float:
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)


@dataclass
class CalcState(Data):
    """The display and pending operation of a calculator."""

    value: str = "0"
    operand: float = 0.0
    operator: str = CLEAR
    in_num: bool = False

    def digit(self, digit: int) -> None:
        """Append a digit to the number being entered."""
        if not 0 <= digit <= 0xFF - ord("0"):
            raise ValueError(f"digit out of range: {digit}")
        if not self.in_num:
            self.value = ""
            self.in_num = True
        self.value += chr(ord("0") + digit)

    def display(self) -> None:
        """Show the operand."""
        self.value = _format_float(self.operand)

    def compute(self) -> None:
        """Apply the pending operator to the operand and the entered number."""
        if not self.in_num:
            return
        operand2 = _parse_float(self.value)
        if self.operator == PLUS:
            result = self.operand + operand2
        elif self.operator == MINUS:
            result = self.operand - operand2
        elif self.operator == TIMES:
            result = self.operand * operand2
        elif self.operator == DIVIDE:
            result = _divide(self.operand, operand2)
        else:
            return
        self.operand = result
        self.display()
        self.in_num = False

    def op(self, op: str) -> None:
        """Press an operator or function key."""
        if op in (PLUS, MINUS, TIMES, DIVIDE, EQUALS):
            self.compute()
            self.operand = _parse_float(self.value)
            self.operator = op
            self.in_num = False
        elif op == PLUS_MINUS:
            if self.in_num:
                if self.value.startswith(MINUS):
                    self.value = self.value[1:]
                else:
                    self.value = MINUS + self.value
            else:
                self.operand = -self.operand
                self.display()
        elif op == POINT:
            if not self.in_num:
                self.value = "0"
                self.in_num = True
            if "." not in self.value:
                self.value += "."
        elif op == CLEAR_ENTRY:
            self.value = "0"
            self.in_num = False
        elif op == CLEAR:
            self.value = "0"
            self.operator = CLEAR
            self.in_num = False
        elif op == BACKSPACE:
            if self.in_num:
                self.value = self.value[:-1]
                if self.value in ("", MINUS):
                    self.value = "0"
                    self.in_num = False
        else:
            raise ValueError(f"unknown operator: {op!r}")