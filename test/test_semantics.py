"""
Semantic analysis tests
Name resolution, slot numbering and fail-fast errors
"""

import pytest
from parsing import parse
from semantics import (
  ResolvedAssignment, ResolvedDeclaration, ResolvedExpression,
  ResolvedIdentifier, ResolvedInput, ResolvedLiteral, ResolvedOutput,
  ResolvedSubExpression, ResolvedTerm, analyze_program, create_analyzer
)
from error_handling import (
  CalcSemanticsError, DuplicateDeclarationError, UndefinedIdentifierError
)


class TestDeclarations:

  def test_slots_match_declaration_order(self, resolve, symbols):
    resolved = resolve("@first @second @third")
    assert resolved == [ResolvedDeclaration(0), ResolvedDeclaration(1), ResolvedDeclaration(2)]
    assert [name for name, _ in symbols] == ["first", "second", "third"]

  def test_duplicate_declaration(self, resolve, symbols):
    with pytest.raises(DuplicateDeclarationError) as excinfo:
      resolve("@v\n@v")

    assert excinfo.value.name == "v"
    assert str(excinfo.value) == "Identifier 'v' already declared"
    assert list(symbols) == [("v", 0.0)]

  def test_declaration_visible_to_later_statements(self, resolve):
    resolved = resolve("@a a := 1 > a < a")
    assert resolved[1] == ResolvedAssignment(0, ResolvedExpression(ResolvedTerm(ResolvedLiteral(1.0))))
    assert resolved[2] == ResolvedInput(0)

  def test_existing_table_is_extended(self, resolve, symbols):
    symbols.insert_symbol("kept")
    assert resolve("@added") == [ResolvedDeclaration(1)]


class TestUndefinedIdentifiers:

  @pytest.mark.parametrize("source", [
      "> z",
      "z := 1",
      "< z",
      "@a a := 1 + z",
      "@a < a * (2 - (z))",
  ])
  def test_undefined_reference(self, resolve, source):
    with pytest.raises(UndefinedIdentifierError) as excinfo:
      resolve(source)
    assert excinfo.value.name == "z"

  def test_assignment_target_resolved_before_value(self, resolve):
    with pytest.raises(UndefinedIdentifierError) as excinfo:
      resolve("x := y")
    assert excinfo.value.name == "x"

  def test_first_failure_stops_analysis(self, resolve, symbols):
    with pytest.raises(CalcSemanticsError) as excinfo:
      resolve("@a < b @c < d")
    assert excinfo.value.name == "b"
    assert "c" not in symbols


class TestResolvedTree:
  """The resolved tree mirrors the named tree with slots for names"""

  def test_expression_shape(self, resolve):
    resolved = resolve("@a\n@b\n< a + b * 2")
    assert resolved[2] == ResolvedOutput(ResolvedExpression(
        ResolvedTerm(ResolvedIdentifier(0)),
        (("+", ResolvedTerm(ResolvedIdentifier(1), (("*", ResolvedLiteral(2.0)),))),)
    ))

  def test_sub_expression(self, resolve):
    resolved = resolve("@x x := (1 + x) / 2")
    factor = resolved[1].expression.first.first
    assert isinstance(factor, ResolvedSubExpression)
    assert factor.expression.rest == (("+", ResolvedTerm(ResolvedIdentifier(0))),)

  def test_no_constant_folding(self, resolve):
    resolved = resolve("< 1 + 2")
    assert resolved[0].expression.rest == (("+", ResolvedTerm(ResolvedLiteral(2.0))),)

  def test_empty_program(self, resolve):
    assert resolve("") == []


class TestAnalyzerFactory:

  def test_analyzer_object(self, symbols):
    _, program = parse("@a < a")
    assert len(create_analyzer().analyze(symbols, program)) == 2

  def test_debug_trace(self, symbols, capsys):
    _, program = parse("@a")
    analyze_program(symbols, program, debug=True)
    assert "DEBUG: Resolved Declaration(name='a')" in capsys.readouterr().err
