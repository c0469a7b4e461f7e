"""
Chiffre Standard Library
Binary operator semantics and the host intrinsics bound in every program
"""

from typing import Dict, List
import operator

from error_handling import ChiffreRuntimeError, DivisionByZeroError, IntrinsicError
from syntax import (
  ADD, SUBTRACT, MULTIPLY, DIVIDE, MOD, HIGHER, LOWER, EQUALITY, CONCAT
)
from utilities import (
  binary_arithmetic_op,
  binary_comparison_op,
  both_of_type,
  incompatible_values_error,
  intrinsic_type_error,
  non_string_error
)
from values import is_int, is_string, make_bool, make_int, make_intrinsic, make_string


# ============================================================================
# ARITHMETIC FUNCTIONS
# ============================================================================

def truncating_div(x: int, y: int) -> int:
  """Integer division rounding toward zero"""
  quotient = abs(x) // abs(y)
  return quotient if (x >= 0) == (y >= 0) else -quotient


def truncating_mod(x: int, y: int) -> int:
  """Remainder taking the sign of the dividend"""
  return x - y * truncating_div(x, y)


chiffre_add = binary_arithmetic_op(ADD, operator.add)
chiffre_sub = binary_arithmetic_op(SUBTRACT, operator.sub)
chiffre_mul = binary_arithmetic_op(MULTIPLY, operator.mul)
_chiffre_div_impl = binary_arithmetic_op(DIVIDE, truncating_div)
_chiffre_mod_impl = binary_arithmetic_op(MOD, truncating_mod)


def chiffre_div(x: Dict, y: Dict) -> Dict:
  """Division"""
  if both_of_type(x, y, ["Int"]) and y['value'] == 0:
    raise DivisionByZeroError(DIVIDE, x, y)
  return _chiffre_div_impl(x, y)


def chiffre_mod(x: Dict, y: Dict) -> Dict:
  """Modulo"""
  if both_of_type(x, y, ["Int"]) and y['value'] == 0:
    raise DivisionByZeroError(MOD, x, y)
  return _chiffre_mod_impl(x, y)


# ============================================================================
# COMPARISON FUNCTIONS
# ============================================================================

chiffre_gt = binary_comparison_op(HIGHER, operator.gt)
chiffre_lt = binary_comparison_op(LOWER, operator.lt)


def chiffre_eq(x: Dict, y: Dict) -> Dict:
  """Structural equality on two Ints, two Bools or two Strings"""
  if not both_of_type(x, y, ["Int", "Bool", "String"]):
    raise incompatible_values_error(EQUALITY, x, y)
  return make_bool(x['value'] == y['value'])


# ============================================================================
# STRING FUNCTIONS
# ============================================================================

def chiffre_concat(x: Dict, y: Dict) -> Dict:
  """String concatenation (# operator)"""
  if not both_of_type(x, y, ["String"]):
    raise non_string_error(CONCAT, x, y)
  return make_string(x['value'] + y['value'])


# ============================================================================
# OPERATOR TABLE
# ============================================================================

BUILTIN_OPERATORS = {
    ADD: chiffre_add,
    SUBTRACT: chiffre_sub,
    MULTIPLY: chiffre_mul,
    DIVIDE: chiffre_div,
    MOD: chiffre_mod,
    HIGHER: chiffre_gt,
    LOWER: chiffre_lt,
    EQUALITY: chiffre_eq,
    CONCAT: chiffre_concat,
}


def apply_operator(op: str, left: Dict, right: Dict) -> Dict:
  """Apply the operator tagged op to two evaluated operands"""
  if op not in BUILTIN_OPERATORS:
    raise ChiffreRuntimeError(f"Unknown operation: {op}")
  return BUILTIN_OPERATORS[op](left, right)


# ============================================================================
# INTRINSICS
# ============================================================================

def _non_empty_string(name: str, s: Dict) -> str:
  if not is_string(s):
    raise intrinsic_type_error(name, "String", s)
  if not s['value']:
    raise IntrinsicError(name, s, "empty string")
  return s['value']


def chiffre_first_char(s: Dict) -> Dict:
  """First character of a string, as a one character string"""
  return make_string(_non_empty_string("firstChar", s)[0])


def chiffre_remaining_chars(s: Dict) -> Dict:
  """Everything but the first character"""
  return make_string(_non_empty_string("remainingChars", s)[1:])


def chiffre_char_code(s: Dict) -> Dict:
  """Code point of the first character"""
  return make_int(ord(_non_empty_string("charCode", s)[0]))


def chiffre_code_char(code: Dict) -> Dict:
  """One character string for a code point"""
  if not is_int(code):
    raise intrinsic_type_error("codeChar", "Int", code)
  if not 0 <= code['value'] <= 0x10FFFF:
    raise IntrinsicError("codeChar", code, "code point out of range")
  if 0xD800 <= code['value'] <= 0xDFFF:
    raise IntrinsicError("codeChar", code, "surrogate code point")
  return make_string(chr(code['value']))


# ============================================================================
# INTRINSIC REGISTRY
# ============================================================================

INTRINSICS: Dict[str, Dict] = {
    "firstChar": make_intrinsic("firstChar", chiffre_first_char, "String -> String"),
    "remainingChars": make_intrinsic("remainingChars", chiffre_remaining_chars, "String -> String"),
    "charCode": make_intrinsic("charCode", chiffre_char_code, "String -> Int"),
    "codeChar": make_intrinsic("codeChar", chiffre_code_char, "Int -> String"),
}


def get_intrinsic(name: str) -> Dict:
  """Get an intrinsic by name"""
  if name in INTRINSICS:
    return INTRINSICS[name]
  raise ChiffreRuntimeError(f"Unknown intrinsic: {name}")


def list_intrinsics() -> List[str]:
  """List all available intrinsics"""
  return list(INTRINSICS.keys())
