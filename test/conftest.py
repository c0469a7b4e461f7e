"""
Test configuration for Chiffre tests
"""

import pytest
import sys
from pathlib import Path

# Add the project root to Python path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from parsing import create_parser
from semantics import create_analyzer
from interpreter import create_interpreter
from main import DEFAULT_RECURSION_LIMIT

# Same host limit the command line sets
sys.setrecursionlimit(max(DEFAULT_RECURSION_LIMIT, sys.getrecursionlimit()))


@pytest.fixture
def pipeline():
  """Parser, analyzer and interpreter for end-to-end tests"""
  return create_parser(), create_analyzer(), create_interpreter()


@pytest.fixture
def run(pipeline):
  """Evaluate source text and return the resulting value"""
  parser, analyzer, interpreter = pipeline

  def run_source(source):
    return interpreter.evaluate(analyzer.analyze(parser.parse_string(source)))

  return run_source


@pytest.fixture
def small_recursion_limit():
  """Run a test under a small host recursion limit, restored afterwards"""
  previous = sys.getrecursionlimit()
  sys.setrecursionlimit(1500)
  yield 1500
  sys.setrecursionlimit(previous)
