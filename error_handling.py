"""
Error taxonomy for the Chiffre language
Runtime failures raised by the evaluator and detailed parse errors
built from pyparsing exceptions
"""

from typing import List, Optional, Dict
from pyparsing import ParseBaseException
import re

from values import show_value


# ============================================================================
# RUNTIME ERRORS
# ============================================================================

class ChiffreRuntimeError(Exception):
    """Base class for every evaluation failure"""
    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class UnboundVariableError(ChiffreRuntimeError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unbound variable {name}")


class NotAFunctionError(ChiffreRuntimeError):
    """Application target is neither a closure nor an intrinsic"""
    def __init__(self, value: Dict):
        self.value = value
        super().__init__(f"{show_value(value)} is not a function")


class NonBooleanConditionError(ChiffreRuntimeError):
    def __init__(self, value: Dict):
        self.value = value
        super().__init__(f"Expected a boolean condition, but got {show_value(value)}")


class IncompatibleOperandsError(ChiffreRuntimeError):
    """Operator applied to operands of the wrong runtime types"""
    def __init__(self, operator: str, left: Dict, right: Dict, message: str):
        self.operator = operator
        self.left = left
        self.right = right
        super().__init__(message)


class DivisionByZeroError(ChiffreRuntimeError):
    def __init__(self, operator: str, left: Dict, right: Dict):
        self.operator = operator
        self.left = left
        self.right = right
        verb = "modulo" if operator == "Mod" else "divide"
        super().__init__(f"Can't {verb} {show_value(left)} by zero")


class IntrinsicError(ChiffreRuntimeError):
    """Host intrinsic given an argument it cannot handle"""
    def __init__(self, name: str, argument: Dict, reason: str):
        self.name = name
        self.argument = argument
        self.reason = reason
        super().__init__(f"{name} {show_value(argument)}: {reason}")


# ============================================================================
# PARSE ERRORS (Immutable Dictionaries)
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


def extract_expected(exc: ParseBaseException) -> List[str]:
    """Extract expected tokens from the pyparsing message"""
    expected = []
    expected_match = re.search(r"Expected\s+(.+?)(?:,\s+found|\s+\(|$)", str(exc))
    if expected_match:
        expected.append(expected_match.group(1))
    return expected if expected else ["valid syntax"]


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


def generate_suggestions(source_text: str, got: str) -> List[str]:
    """Generate hints for the mistakes people make most often"""
    suggestions = []

    if ";" in got:
        suggestions.append("Chiffre doesn't use semicolons - try removing them")

    if "{" in got or "}" in got:
        suggestions.append("Use parentheses () instead of braces {} for grouping")

    if "->" in got:
        suggestions.append("Lambdas are written \\x => body, with '=>' not '->'")

    if "'" in got:
        suggestions.append("String literals use double quotes")

    words = re.findall(r"[A-Za-z_]\w*", source_text)
    if words.count("let") > words.count("in"):
        suggestions.append("Every 'let' needs a matching 'in'")
    if words.count("if") > words.count("else"):
        suggestions.append("Every 'if' needs both 'then' and 'else' branches")

    return suggestions


def enhance_parse_exception_dict(exc: ParseBaseException, source_text: str) -> Dict:
    """Convert pyparsing exception to an enhanced Chiffre error dict"""
    line_num = exc.lineno
    col_num = exc.column
    got = extract_got(source_text, line_num, col_num)

    return make_parse_error(
        message=str(exc),
        location=exc.loc,
        line=line_num,
        column=col_num,
        expected=extract_expected(exc),
        got=got,
        context=get_context_lines(source_text, line_num, col_num),
        suggestions=generate_suggestions(source_text, got)
    )


class ChiffreParseError(Exception):
    """Syntax error with location, context and suggestions"""
    def __init__(self, message: str, location: int = 0, line: int = 0, column: int = 0,
                 expected: Optional[List[str]] = None, got: Optional[str] = None,
                 context: Optional[str] = None, suggestions: Optional[List[str]] = None):
        self.message = message
        self.location = location
        self.line = line
        self.column = column
        self.expected = expected or []
        self.got = got
        self.context = context
        self.suggestions = suggestions or []
        super().__init__(message)

    def __str__(self) -> str:
        error_dict = make_parse_error(
            self.message, self.location, self.line, self.column,
            self.expected, self.got, self.context, self.suggestions
        )
        return format_parse_error(error_dict)

    @classmethod
    def from_parse_exception(cls, exc: ParseBaseException, source_text: str) -> 'ChiffreParseError':
        error_dict = enhance_parse_exception_dict(exc, source_text)
        return cls(**error_dict)
