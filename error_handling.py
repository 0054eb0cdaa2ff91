"""
Error taxonomy for UIRE
Evaluation errors, reader errors with detailed context, and analyzer errors
"""

from typing import Any, List, Optional, Dict
from pyparsing import ParseException
import re


# ============================================================================
# BASE ERROR
# ============================================================================

class UIREError(Exception):
    """Base class for every error UIRE reports to its caller"""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


# ============================================================================
# EVALUATION ERRORS
# ============================================================================

class EvalError(UIREError):
    """An evaluation failure; aborts the whole enclosing evaluation"""


class UndefinedVariable(EvalError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"undefined variable: {name}")


class UIRETypeError(EvalError):
    """Operand or condition of the wrong value kind"""


class UnknownOperator(EvalError):
    def __init__(self, op: str):
        self.op = op
        super().__init__(f"unknown operator: {op}")


class NotCallable(EvalError):
    def __init__(self, kind: str = "value"):
        self.kind = kind
        super().__init__(f"application of a non-procedure ({kind})")


class ArityMismatch(EvalError):
    def __init__(self, expected: int, actual: int):
        self.expected = expected
        self.actual = actual
        super().__init__(f"arity mismatch: expected {expected} argument(s), got {actual}")


class DivisionByZero(EvalError):
    def __init__(self):
        super().__init__("division by zero")


class EvaluationTimeout(UIREError):
    """Raised by the time-bounded worker when no result arrives in time"""

    def __init__(self, timeout: float):
        self.timeout = timeout
        super().__init__(f"evaluation exceeded {timeout:g} second(s)")


# ============================================================================
# ANALYZER ERRORS
# ============================================================================

class UIRESemanticsError(UIREError):
    """Malformed special form or illegal name found while building the AST"""

    def __init__(self, message: str, span: Optional[Any] = None):
        self.span = span
        super().__init__(message)

    def __str__(self) -> str:
        if self.span:
            return f"Semantics error at {self.span}: {self.message}"
        return f"Semantics error: {self.message}"


# ============================================================================
# PARSE ERROR STRUCTURES
# ============================================================================

def make_parse_error(
    message: str,
    location: int,
    line: int,
    column: int,
    expected: Optional[List[str]] = None,
    got: Optional[str] = None,
    context: Optional[str] = None,
    suggestions: Optional[List[str]] = None
) -> Dict:
    """Create an immutable parse error structure"""
    return {
        'message': message,
        'location': location,
        'line': line,
        'column': column,
        'expected': expected or [],
        'got': got,
        'context': context,
        'suggestions': suggestions or []
    }


def format_parse_error(error: Dict) -> str:
    """Format parse error as string"""
    error_msg = f"Parse error at line {error['line']}, column {error['column']}:\n"
    error_msg += f"  {error['message']}\n"

    if error['expected']:
        error_msg += f"  Expected: {', '.join(error['expected'])}\n"

    if error['got']:
        error_msg += f"  Got: {error['got']}\n"

    if error['context']:
        error_msg += f"  Context:\n{error['context']}\n"

    if error['suggestions']:
        error_msg += "  Suggestions:\n"
        for suggestion in error['suggestions']:
            error_msg += f"    - {suggestion}\n"

    return error_msg


# ============================================================================
# PURE FUNCTIONS
# ============================================================================

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


def extract_expected(exc: ParseException) -> List[str]:
    """Extract expected tokens from exception message"""
    msg = str(exc)
    expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", msg)
    if expected_match:
        return [expected_match.group(1)]
    return ["valid syntax"]


def extract_got(source_text: str, line_num: int, col_num: int) -> str:
    """Extract what was actually found at the error location"""
    lines = source_text.split('\n')

    if 0 < line_num <= len(lines):
        error_line = lines[line_num - 1]
        if col_num <= len(error_line):
            start = max(0, col_num - 1)
            end = min(len(error_line), col_num + 10)
            got_text = error_line[start:end].strip()
            if got_text:
                return f"'{got_text}'"
        return "end of line"
    return "end of input"


def count_unbalanced(source_text: str) -> int:
    """Opening brackets minus closing brackets, ignoring ; comments"""
    depth = 0
    for line in source_text.split('\n'):
        code = line.split(';', 1)[0]
        depth += sum(code.count(c) for c in "({[")
        depth -= sum(code.count(c) for c in ")}]")
    return depth


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate helpful suggestions based on the error"""
    suggestions = []

    depth = count_unbalanced(source_text)
    if depth > 0:
        suggestions.append(f"{depth} bracket(s) left open - add the matching closer")
    elif depth < 0:
        suggestions.append(f"{-depth} extra closing bracket(s) - remove them or add an opener")

    if any(c in got for c in ")}]"):
        suggestions.append("Brackets must match: { with }, ( with ), [ with ]")

    if got in ("end of input", "end of line") and depth == 0:
        suggestions.append("An expression is missing here")

    return suggestions


def enhance_parse_exception_dict(exc: ParseException, source_text: str) -> Dict:
    """Convert pyparsing exception to enhanced UIRE error dict"""
    line_num = exc.lineno
    col_num = exc.column

    context = get_context_lines(source_text, line_num, col_num)
    expected = extract_expected(exc)
    got = extract_got(source_text, line_num, col_num)
    suggestions = generate_suggestions(source_text, got)

    return make_parse_error(
        message=exc.msg,
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=expected,
        got=got,
        context=context,
        suggestions=suggestions
    )


# ============================================================================
# PARSE ERROR EXCEPTION
# ============================================================================

class UIREParseError(UIREError):
    """Reader error carrying source position and hints"""

    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None,
                 filename: str = "<input>"):
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        self.filename = filename
        super().__init__(message)

    def __str__(self) -> str:
        if not self.line:
            return f"Parse error: {self.message}"
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        return format_parse_error(error_dict).rstrip('\n')

    @classmethod
    def from_parse_exception(cls, exc: ParseException, source_text: str,
                             filename: str = "<input>") -> 'UIREParseError':
        error_dict = enhance_parse_exception_dict(exc, source_text)
        return cls(filename=filename, **error_dict)
