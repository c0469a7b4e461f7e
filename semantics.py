"""
Chiffre Semantics Analysis - Pure Functional Style
Lowers the parser's CST tuples into the expression tree evaluated by
interpreter.py. No type checking happens here.
"""

from typing import Any, Dict, Optional, Tuple

from syntax import (
  SYMBOL_TO_OPERATOR,
  make_apps,
  make_binary,
  make_bool_literal,
  make_if,
  make_int_literal,
  make_lambda,
  make_let,
  make_string_literal,
  make_var,
  pretty_print_expr
)


# ============================================================================
# EXCEPTION CLASS
# ============================================================================

class ChiffreSemanticsError(Exception):
  """Malformed CST handed to the analyzer"""

  def __init__(self, message: str):
    self.message = message
    super().__init__(f"Semantics error: {message}")


# ============================================================================
# ANALYSIS (Pure Functions)
# ============================================================================

def analyze_type_expr(type_data: Optional[Tuple]) -> Optional[Dict]:
  """Lower a parameter annotation; kept for display only"""
  if type_data is None:
    return None
  tag, value = type_data
  if tag == "TYPE_NAME":
    return {'type': 'TYPE_NAME', 'name': value}
  if tag == "TYPE_ARROW":
    return {
        'type': 'TYPE_ARROW',
        'arg': analyze_type_expr(value['arg']),
        'result': analyze_type_expr(value['result'])
    }
  raise ChiffreSemanticsError(f"Invalid type annotation: {type_data}")


def analyze_operation(operation_data: Dict, debug: bool = False) -> Dict:
  """Analyze binary operation (e.g., n == 0, s # "!")"""
  symbol = operation_data['op']
  if symbol not in SYMBOL_TO_OPERATOR:
    raise ChiffreSemanticsError(f"Unknown operator: {symbol}")

  return make_binary(
      analyze_cst(operation_data['left'], debug),
      SYMBOL_TO_OPERATOR[symbol],
      analyze_cst(operation_data['right'], debug)
  )


def analyze_application(items: list, debug: bool = False) -> Dict:
  """f a b is curried application ((f a) b)"""
  if len(items) < 2:
    raise ChiffreSemanticsError(f"Application needs a function and an argument: {items}")
  func = analyze_cst(items[0], debug)
  return make_apps(func, [analyze_cst(item, debug) for item in items[1:]])


def analyze_cst(cst: Any, debug: bool = False) -> Dict:
  """Lower one CST tuple (and everything below it) to an expression"""
  if not (isinstance(cst, tuple) and len(cst) == 2):
    raise ChiffreSemanticsError(f"Invalid CST node: {cst!r}")

  tag, value = cst
  if debug:
    print(f"Analyzing: {tag}")

  if tag == "INT":
    return make_int_literal(value)
  elif tag == "BOOL":
    return make_bool_literal(value)
  elif tag == "STRING":
    return make_string_literal(value)
  elif tag == "IDENTIFIER":
    return make_var(value)
  elif tag == "PARENTHESIZED":
    return analyze_cst(value, debug)
  elif tag == "APPLICATION":
    return analyze_application(value, debug)
  elif tag == "OPERATION":
    return analyze_operation(value, debug)
  elif tag == "LAMBDA":
    return make_lambda(
        value['binder'],
        analyze_cst(value['body'], debug),
        analyze_type_expr(value['type_annotation'])
    )
  elif tag == "LET":
    return make_let(
        value['recursive'],
        value['binder'],
        analyze_cst(value['expr'], debug),
        analyze_cst(value['body'], debug)
    )
  elif tag == "IF":
    return make_if(
        analyze_cst(value['condition'], debug),
        analyze_cst(value['then_branch'], debug),
        analyze_cst(value['else_branch'], debug)
    )
  else:
    raise ChiffreSemanticsError(f"Unknown node type: {tag}")


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_analyzer(debug: bool = False):
  """Factory function returning an analyzer"""
  def analyze(cst):
    expr = analyze_cst(cst, debug)
    if debug:
      print(f"Expression: {pretty_print_expr(expr)}")
    return expr

  return type('Analyzer', (), {
      'analyze': lambda self, cst: analyze(cst),
      'debug': debug
  })()
