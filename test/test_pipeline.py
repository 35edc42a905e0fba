"""
End-to-end tests: batch programs and interactive sessions
"""

import pytest
from pipeline import Session, run_file, run_interactive, run_source
from symbol_table import SymbolTable
from error_handling import (
  CalcParseError, DuplicateDeclarationError, UndefinedIdentifierError
)


class TestScenarios:
  """Whole programs from source text to printed output"""

  def test_declare_assign_and_print(self, capsys):
    run_source("@a\n@b\n\na := 2\nb := 3\n< a + b * 2")
    assert capsys.readouterr().out == "8\n"

  def test_parenthesized_assignment_then_print(self, capsys):
    session = Session()
    session.run("@x\nx := (1 + 2) * 3")
    session.run("< x")
    assert capsys.readouterr().out == "9\n"

  def test_declared_variable_defaults_to_zero(self, capsys):
    run_source("@y\n< y")
    assert capsys.readouterr().out == "0\n"

  def test_undeclared_output_fails_without_output(self, capsys):
    with pytest.raises(UndefinedIdentifierError) as excinfo:
      run_source("< z")
    assert excinfo.value.name == "z"
    assert capsys.readouterr().out == ""

  def test_duplicate_declaration_fails(self):
    with pytest.raises(DuplicateDeclarationError) as excinfo:
      run_source("@v\n@v")
    assert excinfo.value.name == "v"

  def test_non_numeric_input_stores_zero(self, stdin, capsys):
    stdin("not a number\n")
    symbols = run_source("@q\nq := 5\n> q\n< q + 1")
    assert symbols.get(0) == 0.0
    assert capsys.readouterr().out == "1\n"


class TestBatch:

  def test_returns_final_table(self):
    symbols = run_source("@price @quantity\nprice := 14.99\nquantity := 3")
    assert list(symbols) == [("price", 14.99), ("quantity", 3.0)]

  def test_read_two_values_and_sum(self, stdin, capsys):
    stdin("1.5\n2\n")
    run_source("@a @b\n\n> a\n> b\n\n< a + b\n")
    assert capsys.readouterr().out == "3.5\n"

  def test_trailing_text_is_an_error(self, capsys):
    with pytest.raises(CalcParseError) as excinfo:
      run_source("@a\n< 1\na = 2")
    assert excinfo.value.line == 3
    assert capsys.readouterr().out == ""

  def test_semantic_error_prevents_any_execution(self, capsys):
    with pytest.raises(UndefinedIdentifierError):
      run_source("< 1\n< missing")
    assert capsys.readouterr().out == ""

  def test_run_file(self, tmp_path, capsys):
    script = tmp_path / "total.calc"
    script.write_text("@t\nt := 2 * 21\n< t\n")
    run_file(str(script))
    assert capsys.readouterr().out == "42\n"

  def test_deeply_nested_program(self, capsys):
    depth = 300
    run_source("@a a := " + "(" * depth + "2 * 3" + ")" * depth + "\n< a / 2")
    assert capsys.readouterr().out == "3\n"

  def test_debug_traces_every_stage(self, capsys):
    run_source("@a < a", debug=True)
    captured = capsys.readouterr()
    assert captured.out == "0\n"
    assert "DEBUG: Parsed 2 statements" in captured.err
    assert "DEBUG: Resolved Declaration" in captured.err
    assert "DEBUG: Executing: ResolvedOutput" in captured.err

  def test_each_run_starts_empty(self):
    run_source("@a")
    assert list(run_source("@b")) == [("b", 0.0)]


class TestInteractive:
  """Turns share one symbol table until it is cleared"""

  @pytest.fixture
  def session(self):
    return Session()

  def test_declarations_persist_between_turns(self, session, capsys):
    session.run("@a")
    session.run("a := 4")
    session.run("< a / 8")
    assert capsys.readouterr().out == "0.5\n"

  def test_several_statements_in_one_turn(self, session):
    session.run("@a @b a := 1 b := a + 1")
    assert list(session.symbols) == [("a", 1.0), ("b", 2.0)]

  def test_leftover_text_rejected(self, session, capsys):
    session.run("@a")
    with pytest.raises(CalcParseError) as excinfo:
      session.run("a := 1 +")
    assert excinfo.value.remaining == " +"
    assert session.symbols.get(0) == 0.0
    assert capsys.readouterr().out == ""

  def test_failed_turn_leaves_table_unchanged(self, session, capsys):
    session.run("@a a := 7")
    with pytest.raises(UndefinedIdentifierError):
      session.run("@b b := 1 < c")

    assert list(session.symbols) == [("a", 7.0)]
    assert capsys.readouterr().out == ""
    session.run("@b")
    assert session.symbols.index_of_symbol("b") == 1

  def test_duplicate_in_later_turn(self, session):
    session.run("@a")
    with pytest.raises(DuplicateDeclarationError):
      session.run("@a")
    assert len(session.symbols) == 1

  def test_clear(self, session):
    session.run("@a")
    session.clear()
    assert session.format_variables() == "No variables assigned yet"
    session.run("@a")

  def test_format_variables(self, session):
    session.run("@a @b b := 1 / 4")
    assert session.format_variables() == "Variables:\na: 0\nb: 0.25"

  def test_run_interactive_with_caller_table(self, capsys):
    symbols = SymbolTable()
    run_interactive(symbols, "@n")
    run_interactive(symbols, "n := n + 1")
    run_interactive(symbols, "< n")
    assert capsys.readouterr().out == "1\n"

  def test_blank_fragment_is_accepted(self, session):
    session.run("   ")
    assert len(session.symbols) == 0
