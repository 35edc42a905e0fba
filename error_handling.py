"""
Error handling for the Calc language pipeline
Parse failures carry position and context; semantic failures carry the name
"""

from typing import Dict, Optional, Tuple


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    remaining: str = "",
    context: Optional[str] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'remaining': remaining,
        'context': context
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at line {error['line']}, column {error['column']}: {error['message']}"

    if error['remaining']:
        error_msg += f"\n  Got: {summarize_remaining(error['remaining'])}"

    if error['context']:
        error_msg += f"\n{error['context']}"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

def line_and_column(source_text: str, location: int) -> Tuple[int, int]:
    """1-based line and column of an offset into the source"""
    line = source_text.count('\n', 0, location) + 1
    line_start = source_text.rfind('\n', 0, location) + 1
    return line, location - line_start + 1


def get_context_lines(source_text: str, line_num: int, col_num: int, context_lines: int = 2) -> str:
    """Get context lines around the error"""
    lines = source_text.split('\n')
    start_line = max(0, line_num - context_lines - 1)
    end_line = min(len(lines), line_num + context_lines)

    context_parts = []
    for i in range(start_line, end_line):
        line_prefix = f"{i+1:4d}: "
        context_parts.append(f"{line_prefix}{lines[i]}")
        if i == line_num - 1:
            context_parts.append(f"{'':6}{' ' * (col_num - 1)}^ Error here")

    return '\n'.join(context_parts)


def summarize_remaining(remaining: str, limit: int = 30) -> str:
    """First line of the unparsed text, clipped for display"""
    first_line = remaining.strip().split('\n')[0]
    if len(first_line) > limit:
        first_line = first_line[:limit - 3] + "..."
    return f"'{first_line}'"


def parse_error_from_remainder(source_text: str, remainder: str) -> 'CalcParseError':
    """Build a parse error pointing at the first unparsed token"""
    consumed = len(source_text) - len(remainder)
    location = consumed + (len(remainder) - len(remainder.lstrip()))
    line, column = line_and_column(source_text, location)

    return CalcParseError(
        message="Statement not recognized as a valid Calc statement",
        location=location,
        line=line,
        column=column,
        remaining=remainder,
        context=get_context_lines(source_text, line, column, context_lines=0)
    )


# ============================================================================
# EXCEPTION CLASSES
# ============================================================================

class CalcParseError(Exception):
    """Input that does not match any statement of the grammar"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 remaining: str = "", context: Optional[str] = None):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.remaining = remaining
        self.context = context
        super().__init__(message)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.remaining, self.context
        )
        return format_parse_error(error_dict)


class CalcSemanticsError(Exception):
    """Name resolution failure"""

    def __init__(self, message: str, name: str):
        self.message = message
        self.name = name
        super().__init__(message)


class DuplicateDeclarationError(CalcSemanticsError):
    """A declaration names a variable that already has a slot"""

    def __init__(self, name: str):
        super().__init__(f"Identifier '{name}' already declared", name)


class UndefinedIdentifierError(CalcSemanticsError):
    """A reference names a variable that was never declared"""

    def __init__(self, name: str):
        super().__init__(f"Undefined identifier '{name}'", name)
