"""
Calc Language Parser
Context free grammar for Calc built with pyparsing; produces the named syntax tree
"""

import sys
from typing import Any, List, Tuple, Union
from dataclasses import dataclass, fields, is_dataclass
from functools import lru_cache

from pyparsing import (
    Word, alphas, Regex, Literal as PyParsingLiteral, Suppress, Forward,
    Group, Located, ZeroOrMore, ParserElement
)

from error_handling import CalcParseError, parse_error_from_remainder
from utilities import debug_print

# Enable packrat parsing for performance
ParserElement.enable_packrat()

# Each level of parentheses costs pyparsing a dozen or more Python frames
RECURSION_LIMIT = 10000
sys.setrecursionlimit(max(sys.getrecursionlimit(), RECURSION_LIMIT))


ASSIGNMENT_OPERATOR_TAG = ":="
DECLARATION_STATEMENT_TOKEN = "@"
INPUT_STATEMENT_TOKEN = ">"
OUTPUT_STATEMENT_TOKEN = "<"
EXPRESSION_OPERATORS = "+-"
TERM_OPERATORS = "*/"
WHITESPACE = " \t\r\n"

# Optional sign, integer and/or fractional part, optional exponent
FLOAT_PATTERN = r'[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?'


# ============================================================================
# NAMED SYNTAX TREE
# ============================================================================

@dataclass(frozen=True)
class Identifier:
    name: str


@dataclass(frozen=True)
class Literal:
    value: float


@dataclass(frozen=True)
class SubExpression:
    """Parenthesized expression; precedence starts over inside"""
    expression: 'Expression'


Factor = Union[Identifier, Literal, SubExpression]


@dataclass(frozen=True)
class Term:
    """First factor followed by (operator, factor) pairs, folded left to right"""
    first: Factor
    rest: Tuple[Tuple[str, Factor], ...] = ()


@dataclass(frozen=True)
class Expression:
    """First term followed by (operator, term) pairs, folded left to right"""
    first: Term
    rest: Tuple[Tuple[str, Term], ...] = ()


@dataclass(frozen=True)
class Declaration:
    name: str


@dataclass(frozen=True)
class Input:
    name: str


@dataclass(frozen=True)
class Output:
    expression: Expression


@dataclass(frozen=True)
class Assignment:
    name: str
    expression: Expression


Statement = Union[Declaration, Input, Output, Assignment]
Program = List[Statement]


def make_chain(node_type):
    """Parse action folding `first op x op y ...` into a node with pairs"""
    def build(tokens):
        items = list(tokens)
        return node_type(items[0], tuple(zip(items[1::2], items[2::2])))
    return build


# ============================================================================
# GRAMMAR
# ============================================================================

class CalcGrammar:
    """Calc grammar definition using pyparsing"""

    def __init__(self):
        self._setup_grammar()

    def _setup_grammar(self):
        """Setup the grammar, lowest precedence last"""

        # Forward declaration for parenthesized sub-expressions
        expression = Forward()

        # Identifiers are alphabetic only: no digits, no underscores
        identifier = Word(alphas)

        number = Regex(FLOAT_PATTERN).set_parse_action(lambda t: Literal(float(t[0])))
        variable = identifier.copy().set_parse_action(lambda t: Identifier(t[0]))

        sub_expression = (
            Suppress("(") + expression + Suppress(")")
        ).set_parse_action(lambda t: SubExpression(t[0]))

        # Factor alternatives are tried in this order
        factor = variable | number | sub_expression

        term_operator = Regex(f"[{TERM_OPERATORS}]")
        expression_operator = Regex(f"[{EXPRESSION_OPERATORS}]")

        term = (factor + ZeroOrMore(term_operator + factor)).set_parse_action(make_chain(Term))
        expression <<= (term + ZeroOrMore(expression_operator + term)).set_parse_action(make_chain(Expression))

        declaration = (
            Suppress(DECLARATION_STATEMENT_TOKEN) + identifier
        ).set_parse_action(lambda t: Declaration(t[0]))

        input_statement = (
            Suppress(INPUT_STATEMENT_TOKEN) + identifier
        ).set_parse_action(lambda t: Input(t[0]))

        output_statement = (
            Suppress(OUTPUT_STATEMENT_TOKEN) + expression
        ).set_parse_action(lambda t: Output(t[0]))

        assignment = (
            identifier + Suppress(PyParsingLiteral(ASSIGNMENT_OPERATOR_TAG)) + expression
        ).set_parse_action(lambda t: Assignment(t[0], t[1]))

        # The leading token selects the alternative, so order only matters for speed
        statement = declaration | input_statement | output_statement | assignment

        # Each statement keeps its end offset so the unparsed remainder can be recovered
        program = ZeroOrMore(Group(Located(statement))).parse_with_tabs()

        # Store the main parsers
        self.program = program
        self.number = number

    def parse_program(self, text: str) -> Tuple[str, Program]:
        """Match as many statements as possible; return (remainder, statements)"""
        try:
            results = self.program.parse_string(text)
        except RecursionError:
            raise CalcParseError(
                "Expression nested too deeply",
                remaining=text
            ) from None

        statements = [located["value"][0] for located in results]
        end = results[-1]["locn_end"] if statements else 0
        # A failed trailing operator match may have skipped whitespace past the statement
        end = len(text[:end].rstrip(WHITESPACE))
        return text[end:], statements


class CalcParser:
    """Main Calc parser"""

    def __init__(self, debug: bool = False):
        self.debug = debug
        self.grammar = default_grammar()

    def parse(self, text: str) -> Tuple[str, Program]:
        """Parse the longest well-formed prefix; never fails on trailing input"""
        remainder, program = self.grammar.parse_program(text)
        debug_print(self.debug, f"Parsed {len(program)} statements, {len(remainder)} characters left")
        return remainder, program

    def parse_complete(self, text: str) -> Program:
        """Parse text that must consist of statements only (trailing whitespace allowed)"""
        remainder, program = self.parse(text)
        if remainder.strip():
            raise parse_error_from_remainder(text, remainder)
        return program

    def parse_file(self, filepath: str) -> Program:
        """Parse a Calc source file"""
        with open(filepath, 'r', encoding='utf-8') as f:
            content = f.read()
        return self.parse_complete(content)


@lru_cache(maxsize=None)
def default_grammar() -> CalcGrammar:
    return CalcGrammar()


def parse(text: str) -> Tuple[str, Program]:
    """Parse `text` into (unconsumed remainder, program)"""
    return default_grammar().parse_program(text)


# Factory functions for creating parsers
def create_parser(debug: bool = False) -> CalcParser:
    """Create a Calc parser"""
    return CalcParser(debug=debug)


def create_debug_parser() -> CalcParser:
    """Create a Calc parser with debug enabled"""
    return CalcParser(debug=True)


# ============================================================================
# DEBUG OUTPUT
# ============================================================================

def pretty_print_node(node: Any, indent: int = 0, label: str = "") -> str:
    """Pretty print a tree node (named or resolved) for debugging"""
    scalars = []
    children = []

    for node_field in fields(node):
        value = getattr(node, node_field.name)
        if is_dataclass(value):
            children.append(("", value))
        elif isinstance(value, tuple):
            children.extend((f"{op} ", child) for op, child in value)
        else:
            scalars.append(repr(value))

    result = "  " * indent + label + type(node).__name__
    if scalars:
        result += f"({', '.join(scalars)})"
    result += "\n"

    for child_label, child in children:
        result += pretty_print_node(child, indent + 1, child_label)

    return result


def pretty_print_program(program: List[Any]) -> str:
    """Pretty print every statement of a program"""
    return "".join(pretty_print_node(statement) for statement in program)
