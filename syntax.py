"""
Chiffre Expression Tree
Tagged dictionaries for every syntactic form of the language
Pure functional style - constructors only, the evaluator never mutates a node
"""

from typing import Dict, Optional, List


# ============================================================================
# OPERATORS
# ============================================================================

ADD = "Add"
SUBTRACT = "Subtract"
MULTIPLY = "Multiply"
DIVIDE = "Divide"
MOD = "Mod"
HIGHER = "Higher"
LOWER = "Lower"
EQUALITY = "Equality"
CONCAT = "Concat"

OPERATORS = (ADD, SUBTRACT, MULTIPLY, DIVIDE, MOD, HIGHER, LOWER, EQUALITY, CONCAT)

# Surface symbol for each operator tag
OPERATOR_SYMBOLS: Dict[str, str] = {
    ADD: "+",
    SUBTRACT: "-",
    MULTIPLY: "*",
    DIVIDE: "/",
    MOD: "%",
    HIGHER: ">",
    LOWER: "<",
    EQUALITY: "==",
    CONCAT: "#",
}

SYMBOL_TO_OPERATOR: Dict[str, str] = {
    symbol: tag for tag, symbol in OPERATOR_SYMBOLS.items()}

# Verb used in error messages ("Can't add non-numbers")
OPERATOR_NAMES: Dict[str, str] = {
    ADD: "add",
    SUBTRACT: "subtract",
    MULTIPLY: "multiply",
    DIVIDE: "divide",
    MOD: "modulo",
    HIGHER: "higher",
    LOWER: "lower",
    EQUALITY: "compare",
    CONCAT: "concat",
}


def name_for_operator(op: str) -> str:
  """Human readable verb for an operator tag"""
  return OPERATOR_NAMES.get(op, op)


# ============================================================================
# EXPRESSION CONSTRUCTORS
# ============================================================================

def make_var(name: str) -> Dict:
  """Variable reference"""
  return {'type': 'VAR', 'name': name}


def make_lambda(binder: str, body: Dict, type_annotation: Optional[Dict] = None) -> Dict:
  """Single parameter function. The annotation is carried but never evaluated."""
  return {
      'type': 'LAMBDA',
      'binder': binder,
      'type_annotation': type_annotation,
      'body': body
  }


def make_app(func: Dict, arg: Dict) -> Dict:
  """Application of func to a single argument"""
  return {'type': 'APP', 'func': func, 'arg': arg}


def make_if(condition: Dict, then_branch: Dict, else_branch: Dict) -> Dict:
  return {
      'type': 'IF',
      'condition': condition,
      'then_branch': then_branch,
      'else_branch': else_branch
  }


def make_binary(left: Dict, op: str, right: Dict) -> Dict:
  """Binary operation with an operator tag from OPERATORS"""
  if op not in OPERATORS:
    raise ValueError(f"Unknown operator: {op}")
  return {'type': 'BINARY', 'left': left, 'op': op, 'right': right}


def make_let(recursive: bool, binder: str, expr: Dict, body: Dict) -> Dict:
  return {
      'type': 'LET',
      'recursive': recursive,
      'binder': binder,
      'expr': expr,
      'body': body
  }


def make_int_literal(num: int) -> Dict:
  return {'type': 'INT', 'value': num}


def make_bool_literal(flag: bool) -> Dict:
  return {'type': 'BOOL', 'value': flag}


def make_string_literal(string: str) -> Dict:
  return {'type': 'STRING', 'value': string}


def make_apps(func: Dict, args: List[Dict]) -> Dict:
  """Left-nested application: f a b c == ((f a) b) c"""
  result = func
  for arg in args:
    result = make_app(result, arg)
  return result


# ============================================================================
# PRETTY PRINTING
# ============================================================================

def format_type_annotation(type_annotation: Optional[Dict]) -> str:
  """Render a lambda parameter annotation (TYPE_NAME / TYPE_ARROW dicts)"""
  if type_annotation is None:
    return ""
  if type_annotation['type'] == 'TYPE_ARROW':
    arg = format_type_annotation(type_annotation['arg'])
    if type_annotation['arg']['type'] == 'TYPE_ARROW':
      arg = f"({arg})"
    return f"{arg} -> {format_type_annotation(type_annotation['result'])}"
  return type_annotation['name']


def pretty_print_expr(expr: Dict) -> str:
  """Render an expression back to (fully parenthesized) surface syntax"""
  node_type = expr['type']

  if node_type == 'INT':
    return str(expr['value'])
  elif node_type == 'BOOL':
    return "true" if expr['value'] else "false"
  elif node_type == 'STRING':
    escaped = expr['value'].replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'
  elif node_type == 'VAR':
    return expr['name']
  elif node_type == 'LAMBDA':
    annotation = format_type_annotation(expr['type_annotation'])
    binder = f"{expr['binder']} : {annotation}" if annotation else expr['binder']
    return f"(\\{binder} => {pretty_print_expr(expr['body'])})"
  elif node_type == 'APP':
    return f"({pretty_print_expr(expr['func'])} {pretty_print_expr(expr['arg'])})"
  elif node_type == 'IF':
    return (f"(if {pretty_print_expr(expr['condition'])}"
            f" then {pretty_print_expr(expr['then_branch'])}"
            f" else {pretty_print_expr(expr['else_branch'])})")
  elif node_type == 'BINARY':
    symbol = OPERATOR_SYMBOLS[expr['op']]
    return f"({pretty_print_expr(expr['left'])} {symbol} {pretty_print_expr(expr['right'])})"
  elif node_type == 'LET':
    rec = "rec " if expr['recursive'] else ""
    return (f"(let {rec}{expr['binder']} = {pretty_print_expr(expr['expr'])}"
            f" in {pretty_print_expr(expr['body'])})")
  else:
    raise ValueError(f"Unknown expression type: {node_type}")
