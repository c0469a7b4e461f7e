"""
Chiffre Interpreter - Pure Functional Style
Strict call-by-value tree walker over the tagged expression dictionaries.
The environment is threaded explicitly; nothing here keeps global state.
"""

from typing import Dict, Optional

from environment import EMPTY_ENV, env_extend, env_extend_many, env_lookup
from error_handling import (
  ChiffreRuntimeError,
  NonBooleanConditionError,
  NotAFunctionError,
  UnboundVariableError
)
from stdlib import apply_operator, get_intrinsic, list_intrinsics
from values import (
  is_bool,
  is_closure,
  is_function,
  is_intrinsic,
  make_bool,
  make_closure,
  make_int,
  make_string,
  show_value
)


# ============================================================================
# INITIAL ENVIRONMENT
# ============================================================================

def create_initial_env() -> Dict:
  """Fresh environment holding the four intrinsics"""
  return env_extend_many(EMPTY_ENV, [(name, get_intrinsic(name)) for name in list_intrinsics()])


# ============================================================================
# EVALUATION
# ============================================================================

def eval_expr(env: Dict, expr: Dict, debug: bool = False) -> Dict:
  """
  Evaluate an expression in env and return its value.
  Raises a ChiffreRuntimeError subclass on any runtime inconsistency.
  """
  if debug:
    print(f"Evaluating: {expr['type']}")

  node_type = expr['type']

  if node_type == "INT":
    return make_int(expr['value'])
  elif node_type == "BOOL":
    return make_bool(expr['value'])
  elif node_type == "STRING":
    return make_string(expr['value'])
  elif node_type == "BINARY":
    return eval_binary(env, expr, debug)
  elif node_type == "IF":
    return eval_if(env, expr, debug)
  elif node_type == "LET":
    return eval_let(env, expr, debug)
  elif node_type == "LAMBDA":
    return make_closure(env, expr['binder'], expr['body'])
  elif node_type == "VAR":
    return eval_var(env, expr, debug)
  elif node_type == "APP":
    return eval_app(env, expr, debug)
  else:
    raise ChiffreRuntimeError(f"Unknown expression type: {node_type}")


def eval_binary(env: Dict, expr: Dict, debug: bool = False) -> Dict:
  """Both operands are always evaluated, left first"""
  left = eval_expr(env, expr['left'], debug)
  right = eval_expr(env, expr['right'], debug)
  return apply_operator(expr['op'], left, right)


def eval_if(env: Dict, expr: Dict, debug: bool = False) -> Dict:
  """Only the selected branch is evaluated"""
  condition = eval_expr(env, expr['condition'], debug)
  if not is_bool(condition):
    raise NonBooleanConditionError(condition)

  if condition['value']:
    return eval_expr(env, expr['then_branch'], debug)
  return eval_expr(env, expr['else_branch'], debug)


def tie_recursive_knot(closure: Dict, binder: str) -> Dict:
  """
  Return a copy of closure whose captured environment also binds binder
  to the copy itself. The copy's env is assigned once, here, before the
  copy is reachable from anything else; the original closure is untouched.
  """
  recursive = make_closure(None, closure['binder'], closure['body'])
  recursive['env'] = env_extend(closure['env'], binder, recursive)
  return recursive


def eval_let(env: Dict, expr: Dict, debug: bool = False) -> Dict:
  bound = eval_expr(env, expr['expr'], debug)

  # rec only matters for function values
  if expr['recursive'] and is_closure(bound):
    if debug:
      print(f"DEBUG: let rec {expr['binder']}")
    bound = tie_recursive_knot(bound, expr['binder'])

  return eval_expr(env_extend(env, expr['binder'], bound), expr['body'], debug)


def eval_var(env: Dict, expr: Dict, debug: bool = False) -> Dict:
  value = env_lookup(env, expr['name'])
  if value is None:
    raise UnboundVariableError(expr['name'])
  return value


def eval_app(env: Dict, expr: Dict, debug: bool = False) -> Dict:
  """Argument is evaluated in the caller's env, the body in the closure's"""
  func = eval_expr(env, expr['func'], debug)
  if not is_function(func):
    raise NotAFunctionError(func)

  arg = eval_expr(env, expr['arg'], debug)
  if debug:
    print(f"DEBUG: apply {show_value(func)} to {show_value(arg)}")

  if is_intrinsic(func):
    return func['func'](arg)

  call_env = env_extend(func['env'], func['binder'], arg)
  return eval_expr(call_env, func['body'], debug)


# ============================================================================
# FACTORY FUNCTIONS (for main.py)
# ============================================================================

def create_interpreter(debug: bool = False):
  """Factory returning an interpreter bound to a fresh initial environment"""
  initial_env = create_initial_env()

  def evaluate(expr: Dict, env: Optional[Dict] = None) -> Dict:
    return eval_expr(initial_env if env is None else env, expr, debug)

  return type('Interpreter', (), {
      'evaluate': lambda self, expr, env=None: evaluate(expr, env),
      'global_env': initial_env,
      'debug': debug
  })()
