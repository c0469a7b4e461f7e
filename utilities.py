"""
Utilities module for the Chiffre interpreter
Error builders and factories for the binary operator table
"""

from typing import Callable, Dict, List

from error_handling import IncompatibleOperandsError, IntrinsicError
from syntax import name_for_operator
from values import make_bool, make_int, show_value


BinaryOp = Callable[[Dict, Dict], Dict]


# ==================== ERROR MESSAGE BUILDERS ====================

def non_numeric_error(op: str, left: Dict, right: Dict) -> IncompatibleOperandsError:
  """
  Error for an arithmetic or comparison operator given non-Int operands

  Args:
    op: Operator tag
    left: Left operand value
    right: Right operand value

  Returns:
    IncompatibleOperandsError with formatted message
  """
  return IncompatibleOperandsError(
    op, left, right,
    f"Can't {name_for_operator(op)} non-numbers, {show_value(left)}, {show_value(right)}"
  )


def incompatible_values_error(op: str, left: Dict, right: Dict) -> IncompatibleOperandsError:
  return IncompatibleOperandsError(
    op, left, right,
    f"Comparing incompatible values: {show_value(left)} and {show_value(right)}"
  )


def non_string_error(op: str, left: Dict, right: Dict) -> IncompatibleOperandsError:
  return IncompatibleOperandsError(
    op, left, right,
    f"Can't concatenate non-string values: {show_value(left)} and {show_value(right)}"
  )


def intrinsic_type_error(name: str, expected: str, argument: Dict) -> IntrinsicError:
  """
  Error for an intrinsic called with the wrong argument type

  Args:
    name: Intrinsic name
    expected: Expected runtime type
    argument: Actual argument value
  """
  return IntrinsicError(name, argument, f"expected {expected}, got {argument['type']}")


# ==================== VALIDATION UTILITIES ====================

def both_of_type(left: Dict, right: Dict, type_names: List[str]) -> bool:
  """True when both operands carry the same tag and it is one of type_names"""
  return left['type'] == right['type'] and left['type'] in type_names


# ==================== BINARY OPERATION FACTORIES ====================

def binary_arithmetic_op(op_tag: str, op: Callable[[int, int], int]) -> BinaryOp:
  """
  Factory for Int x Int -> Int operations

  Args:
    op_tag: Operator tag, used in error messages
    op: Python function on the raw integers (e.g., operator.add)

  Returns:
    Function that checks operand types and performs the operation

  Examples:
    chiffre_add = binary_arithmetic_op(ADD, operator.add)
    chiffre_add(make_int(1), make_int(2)) -> {'value': 3, 'type': 'Int'}
  """
  def arithmetic(left: Dict, right: Dict) -> Dict:
    if not both_of_type(left, right, ["Int"]):
      raise non_numeric_error(op_tag, left, right)
    return make_int(op(left['value'], right['value']))

  return arithmetic


def binary_comparison_op(op_tag: str, op: Callable[[int, int], bool]) -> BinaryOp:
  """
  Factory for Int x Int -> Bool comparisons

  Args:
    op_tag: Operator tag, used in error messages
    op: Python comparison (e.g., operator.gt)

  Returns:
    Function that checks operand types and performs the comparison
  """
  def comparison(left: Dict, right: Dict) -> Dict:
    if not both_of_type(left, right, ["Int"]):
      raise non_numeric_error(op_tag, left, right)
    return make_bool(op(left['value'], right['value']))

  return comparison
