"""
Calc Semantic Analysis
Resolves every name against the symbol table and emits the slot-indexed tree
"""

from dataclasses import dataclass
from typing import List, Tuple, Union

from parsing import (
  Assignment, Declaration, Expression, Factor, Identifier, Input, Literal,
  Output, Program, Statement, SubExpression, Term
)
from symbol_table import SymbolTable
from utilities import debug_print


# ============================================================================
# RESOLVED TREE
# ============================================================================

@dataclass(frozen=True)
class ResolvedIdentifier:
  slot: int


@dataclass(frozen=True)
class ResolvedLiteral:
  value: float


@dataclass(frozen=True)
class ResolvedSubExpression:
  expression: 'ResolvedExpression'


ResolvedFactor = Union[ResolvedIdentifier, ResolvedLiteral, ResolvedSubExpression]


@dataclass(frozen=True)
class ResolvedTerm:
  first: ResolvedFactor
  rest: Tuple[Tuple[str, ResolvedFactor], ...] = ()


@dataclass(frozen=True)
class ResolvedExpression:
  first: ResolvedTerm
  rest: Tuple[Tuple[str, ResolvedTerm], ...] = ()


@dataclass(frozen=True)
class ResolvedDeclaration:
  slot: int


@dataclass(frozen=True)
class ResolvedInput:
  slot: int


@dataclass(frozen=True)
class ResolvedOutput:
  expression: ResolvedExpression


@dataclass(frozen=True)
class ResolvedAssignment:
  slot: int
  expression: ResolvedExpression


ResolvedStatement = Union[ResolvedDeclaration, ResolvedInput, ResolvedOutput, ResolvedAssignment]
ResolvedProgram = List[ResolvedStatement]


# ============================================================================
# EXPRESSION ANALYSIS
# ============================================================================

def analyze_factor(symbols: SymbolTable, factor: Factor) -> ResolvedFactor:
  if isinstance(factor, Literal):
    return ResolvedLiteral(factor.value)
  elif isinstance(factor, Identifier):
    return ResolvedIdentifier(symbols.index_of_symbol(factor.name))
  elif isinstance(factor, SubExpression):
    return ResolvedSubExpression(analyze_expression(symbols, factor.expression))
  else:
    raise ValueError(f"Unable to analyze factor: {factor!r}")


def analyze_term(symbols: SymbolTable, term: Term) -> ResolvedTerm:
  first = analyze_factor(symbols, term.first)
  rest = tuple((op, analyze_factor(symbols, factor)) for op, factor in term.rest)
  return ResolvedTerm(first, rest)


def analyze_expression(symbols: SymbolTable, expression: Expression) -> ResolvedExpression:
  """Resolve the first term, then each (operator, term) pair in source order"""
  first = analyze_term(symbols, expression.first)
  rest = tuple((op, analyze_term(symbols, term)) for op, term in expression.rest)
  return ResolvedExpression(first, rest)


# ============================================================================
# STATEMENT ANALYSIS
# ============================================================================

def analyze_statement(symbols: SymbolTable, statement: Statement) -> ResolvedStatement:
  """
  Resolve one statement

  Declarations allocate a slot; every other name must already have one.
  """
  if isinstance(statement, Declaration):
    return ResolvedDeclaration(symbols.insert_symbol(statement.name))
  elif isinstance(statement, Input):
    return ResolvedInput(symbols.index_of_symbol(statement.name))
  elif isinstance(statement, Output):
    return ResolvedOutput(analyze_expression(symbols, statement.expression))
  elif isinstance(statement, Assignment):
    slot = symbols.index_of_symbol(statement.name)
    return ResolvedAssignment(slot, analyze_expression(symbols, statement.expression))
  else:
    raise ValueError(f"Unable to analyze statement: {statement!r}")


# ============================================================================
# MAIN ANALYSIS FUNCTION
# ============================================================================

def analyze_program(symbols: SymbolTable, program: Program, debug: bool = False) -> ResolvedProgram:
  """
  Analyze a program statement by statement, threading the symbol table.
  The first CalcSemanticsError aborts the analysis; nothing is returned for
  the statements that did resolve.
  """
  resolved = []

  for statement in program:
    resolved_statement = analyze_statement(symbols, statement)
    debug_print(debug, f"Resolved {statement!r} -> {resolved_statement!r}")
    resolved.append(resolved_statement)

  return resolved


# ============================================================================
# FACTORY FUNCTIONS
# ============================================================================

class CalcAnalyzer:
  """Analyzer bound to a debug setting"""

  def __init__(self, debug: bool = False):
    self.debug = debug

  def analyze(self, symbols: SymbolTable, program: Program) -> ResolvedProgram:
    return analyze_program(symbols, program, self.debug)


def create_analyzer(debug: bool = False) -> CalcAnalyzer:
  """Create a Calc analyzer"""
  return CalcAnalyzer(debug=debug)


def create_debug_analyzer() -> CalcAnalyzer:
  """Create a Calc analyzer with debug enabled"""
  return CalcAnalyzer(debug=True)
