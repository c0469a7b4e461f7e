"""
Chiffre Runtime Environment
Persistent parent-linked frames: extending never copies or mutates a parent
"""

from typing import Dict, Iterable, List, Optional, Tuple


def make_runtime_env(parent: Optional[Dict] = None, bindings: Optional[Dict] = None) -> Dict:
  """Create an immutable runtime environment"""
  return {
      'parent': parent,
      'bindings': bindings or {}
  }


EMPTY_ENV = make_runtime_env()


# ============================================================================
# ENVIRONMENT OPERATIONS
# ============================================================================

def env_extend(env: Dict, name: str, value: Dict) -> Dict:
  """Return new environment with name bound to value, sharing env as parent"""
  return make_runtime_env(env, {name: value})


def env_extend_many(env: Dict, bindings: Iterable[Tuple[str, Dict]]) -> Dict:
  """Bind several names in a single new frame; later pairs win"""
  return make_runtime_env(env, dict(bindings))


def env_lookup(env: Optional[Dict], name: str) -> Optional[Dict]:
  """Look up the most recent binding of name, or None if unbound"""
  while env is not None:
    if name in env['bindings']:
      return env['bindings'][name]
    env = env['parent']
  return None


def env_names(env: Optional[Dict]) -> List[str]:
  """Every visible name, innermost binding first, shadowed names once"""
  seen = []
  while env is not None:
    for name in env['bindings']:
      if name not in seen:
        seen.append(name)
    env = env['parent']
  return seen
