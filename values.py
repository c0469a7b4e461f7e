"""
Chiffre Runtime Values
Self-describing dictionaries tagged with their runtime type
"""

from typing import Any, Callable, Dict, Optional


# ============================================================================
# DATA STRUCTURES (Immutable Dictionaries)
# ============================================================================

def make_value(value: Any, type_name: str) -> Dict:
  """Create an immutable runtime value"""
  return {
      'value': value,
      'type': type_name
  }


def make_int(num: int) -> Dict:
  return make_value(num, "Int")


def make_bool(flag: bool) -> Dict:
  return make_value(flag, "Bool")


def make_string(string: str) -> Dict:
  return make_value(string, "String")


def make_closure(env: Optional[Dict], binder: str, body: Dict) -> Dict:
  """Create a function value capturing env.

  env is None only while a recursive closure is being built; see
  tie_recursive_knot in interpreter.py.
  """
  return {
      'type': 'Closure',
      'env': env,
      'binder': binder,
      'body': body
  }


def make_intrinsic(name: str, func: Callable[[Dict], Dict], type_signature: str = "") -> Dict:
  """Create a host-implemented single argument function value"""
  return {
      'type': 'Intrinsic',
      'name': name,
      'func': func,
      'type_signature': type_signature
  }


# ============================================================================
# TYPE TESTS
# ============================================================================

def is_int(val: Dict) -> bool:
  return val['type'] == "Int"


def is_bool(val: Dict) -> bool:
  return val['type'] == "Bool"


def is_string(val: Dict) -> bool:
  return val['type'] == "String"


def is_closure(val: Dict) -> bool:
  return val['type'] == "Closure"


def is_intrinsic(val: Dict) -> bool:
  return val['type'] == "Intrinsic"


def is_function(val: Dict) -> bool:
  """Anything an application can call"""
  return is_closure(val) or is_intrinsic(val)


# ============================================================================
# DISPLAY
# ============================================================================

def show_value(val: Dict) -> str:
  """Render a value for display, distinct for each variant"""
  value_type = val['type']
  if value_type == "Int":
    return str(val['value'])
  elif value_type == "Bool":
    return "true" if val['value'] else "false"
  elif value_type == "String":
    escaped = val['value'].replace('\\', '\\\\').replace('"', '\\"')
    return f'"{escaped}"'
  elif value_type == "Closure":
    return f"<closure \\{val['binder']}>"
  elif value_type == "Intrinsic":
    return f"<intrinsic {val['name']}>"
  return f"<{value_type}>"


def value_type_name(val: Dict) -> str:
  """Name of the value's type as shown in the REPL"""
  if is_function(val):
    return "Function"
  return val['type']


def unwrap_value(val: Dict) -> Any:
  """Extract the raw Python value of an Int, Bool or String"""
  if is_function(val):
    raise ValueError(f"Cannot unwrap function value {show_value(val)}")
  return val['value']
