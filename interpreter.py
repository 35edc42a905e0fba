"""
Calc Interpreter
Tree-walking evaluator over the resolved tree; knows slots, never names
Side effects (console I/O) happen only in Input and Output statements
"""

import sys

from semantics import (
  ResolvedAssignment, ResolvedDeclaration, ResolvedExpression, ResolvedFactor,
  ResolvedIdentifier, ResolvedInput, ResolvedLiteral, ResolvedOutput,
  ResolvedProgram, ResolvedStatement, ResolvedSubExpression, ResolvedTerm
)
from symbol_table import SymbolTable
from utilities import apply_operator, debug_print, format_number, parse_number


INPUT_PROMPT = "? "


# ============================================================================
# EXPRESSION EVALUATION
# ============================================================================

def eval_factor(symbols: SymbolTable, factor: ResolvedFactor) -> float:
  if isinstance(factor, ResolvedLiteral):
    return factor.value
  elif isinstance(factor, ResolvedIdentifier):
    return symbols.get(factor.slot)
  elif isinstance(factor, ResolvedSubExpression):
    return eval_expression(symbols, factor.expression)
  else:
    raise ValueError(f"Unknown factor: {factor!r}")


def eval_term(symbols: SymbolTable, term: ResolvedTerm) -> float:
  result = eval_factor(symbols, term.first)
  for op, factor in term.rest:
    result = apply_operator(op, result, eval_factor(symbols, factor))
  return result


def eval_expression(symbols: SymbolTable, expression: ResolvedExpression) -> float:
  """Left fold: first term, then each (operator, term) pair in order"""
  result = eval_term(symbols, expression.first)
  for op, term in expression.rest:
    result = apply_operator(op, result, eval_term(symbols, term))
  return result


# ============================================================================
# STATEMENT EXECUTION
# ============================================================================

def read_input_value() -> float:
  """Prompt on stderr and read one line; unreadable input counts as 0"""
  print(INPUT_PROMPT, end='', file=sys.stderr, flush=True)
  return parse_number(sys.stdin.readline())


def execute_statement(symbols: SymbolTable, statement: ResolvedStatement, debug: bool = False) -> None:
  debug_print(debug, f"Executing: {statement!r}")

  if isinstance(statement, ResolvedAssignment):
    symbols.set(statement.slot, eval_expression(symbols, statement.expression))
  elif isinstance(statement, ResolvedDeclaration):
    # Slot was allocated (value 0.0) during analysis
    pass
  elif isinstance(statement, ResolvedInput):
    symbols.set(statement.slot, read_input_value())
  elif isinstance(statement, ResolvedOutput):
    print(format_number(eval_expression(symbols, statement.expression)))
  else:
    raise ValueError(f"Unknown statement: {statement!r}")


def execute(symbols: SymbolTable, program: ResolvedProgram, debug: bool = False) -> None:
  """Run every statement in source order against `symbols`"""
  for statement in program:
    execute_statement(symbols, statement, debug)


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

class CalcInterpreter:
  """Interpreter bound to a debug setting"""

  def __init__(self, debug: bool = False):
    self.debug = debug

  def execute(self, symbols: SymbolTable, program: ResolvedProgram) -> None:
    execute(symbols, program, self.debug)


def create_interpreter(debug: bool = False) -> CalcInterpreter:
  """Create a Calc interpreter"""
  return CalcInterpreter(debug=debug)


def create_debug_interpreter() -> CalcInterpreter:
  """Create a Calc interpreter with debug enabled"""
  return CalcInterpreter(debug=True)
