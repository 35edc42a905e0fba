"""
Utilities module for the Calc interpreter
Number handling shared by the evaluator, the symbol table listing and the REPL
"""

from typing import Callable, Dict
from decimal import Decimal
import math
import operator
import sys


# ==================== ARITHMETIC ====================

def divide(x: float, y: float) -> float:
  """
  IEEE 754 division

  Python raises ZeroDivisionError for float division by zero; Calc has no
  runtime errors, so a zero divisor produces an infinity or NaN instead.

  Examples:
    divide(1.0, 0.0) -> inf
    divide(-1.0, 0.0) -> -inf
    divide(0.0, 0.0) -> nan
  """
  if y != 0.0:
    return x / y
  if x == 0.0 or math.isnan(x):
    return math.nan
  return math.copysign(math.inf, x) * math.copysign(1.0, y)


ARITHMETIC_OPERATORS: Dict[str, Callable[[float, float], float]] = {
  '+': operator.add,
  '-': operator.sub,
  '*': operator.mul,
  '/': divide,
}


def apply_operator(op: str, x: float, y: float) -> float:
  return ARITHMETIC_OPERATORS[op](x, y)


# ==================== CONVERSION ====================

def parse_number(text: str, default: float = 0.0) -> float:
  """
  Parse a line of user input as a float

  Anything that is not a number yields `default`.

  Examples:
    parse_number(" 2.5\\n") -> 2.5
    parse_number("abc") -> 0.0
  """
  try:
    return float(text.strip())
  except ValueError:
    return default


def format_number(value: float) -> str:
  """
  Render a value the way Calc prints it

  Integral values have no fractional part and nothing is ever printed in
  scientific notation.

  Examples:
    format_number(8.0) -> "8"
    format_number(0.5) -> "0.5"
    format_number(1e-07) -> "0.0000001"
    format_number(float("inf")) -> "inf"
  """
  if math.isnan(value):
    return "NaN"
  if math.isinf(value):
    return "inf" if value > 0 else "-inf"
  # repr gives the shortest digits that round-trip; 'f' spells them out positionally
  text = format(Decimal(repr(value)), 'f')
  if value.is_integer():
    text = text.split('.')[0]
  return text


# ==================== DIAGNOSTICS ====================

def debug_print(debug: bool, message: str) -> None:
  """Trace line for --debug runs; stderr keeps program output clean"""
  if debug:
    print(f"DEBUG: {message}", file=sys.stderr)
