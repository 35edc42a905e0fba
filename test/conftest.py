"""
Test configuration for Calc tests
"""

import io
import sys
from pathlib import Path

import pytest

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import parse
from semantics import analyze_program
from symbol_table import SymbolTable


@pytest.fixture
def symbols():
  """Provide a fresh symbol table for each test"""
  return SymbolTable()


@pytest.fixture
def resolve(symbols):
  """Parse and analyze source against the test's symbol table"""
  def resolve_source(source):
    remainder, program = parse(source)
    assert remainder.strip() == ""
    return analyze_program(symbols, program)
  return resolve_source


@pytest.fixture
def stdin(monkeypatch):
  """Replace standard input with the given lines"""
  def feed(text):
    monkeypatch.setattr(sys, 'stdin', io.StringIO(text))
  return feed
