"""
Calc pipeline entry points
parse -> analyze -> execute, for whole programs and for interactive turns
"""

from typing import Optional

from parsing import create_parser, create_debug_parser
from semantics import create_analyzer, create_debug_analyzer
from interpreter import create_interpreter, create_debug_interpreter
from symbol_table import SymbolTable
from error_handling import CalcSemanticsError


def run_source(source: str, debug: bool = False) -> SymbolTable:
  """
  Run a complete program against a fresh symbol table.
  Unparsed trailing text is an error; nothing executes unless the whole
  program parses and resolves. Returns the final symbol table.
  """
  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  program = parser.parse_complete(source)
  symbols = SymbolTable()
  resolved = analyzer.analyze(symbols, program)
  interpreter.execute(symbols, resolved)
  return symbols


def run_file(filepath: str, debug: bool = False) -> SymbolTable:
  """Run a Calc source file"""
  with open(filepath, 'r', encoding='utf-8') as f:
    source = f.read()
  return run_source(source, debug)


def run_interactive(symbols: SymbolTable, fragment: str, debug: bool = False) -> None:
  """
  Run one interactive turn against the caller's persistent symbol table.
  The fragment must parse completely; it may hold several statements. On a
  semantic failure the table is rolled back to where the turn found it.
  """
  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  interpreter = create_debug_interpreter() if debug else create_interpreter()

  program = parser.parse_complete(fragment)

  size_before = len(symbols)
  try:
    resolved = analyzer.analyze(symbols, program)
  except CalcSemanticsError:
    symbols.truncate(size_before)
    raise

  interpreter.execute(symbols, resolved)


class Session:
  """Variables that survive across interactive turns"""

  def __init__(self, debug: bool = False, symbols: Optional[SymbolTable] = None):
    self.debug = debug
    self.symbols = symbols if symbols is not None else SymbolTable()

  def run(self, fragment: str) -> None:
    run_interactive(self.symbols, fragment, self.debug)

  def clear(self) -> None:
    self.symbols = SymbolTable()

  def format_variables(self) -> str:
    return self.symbols.format_variables()
