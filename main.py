"""
Chiffre Programming Language - Main Entry Point
A small call-by-value functional language with closures and recursive let
"""

import sys
import argparse
from pathlib import Path
from typing import Dict, List, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from ciphers import CIPHERS, cipher_program
from environment import env_names, env_lookup
from error_handling import ChiffreParseError, ChiffreRuntimeError
from interpreter import create_interpreter
from parsing import create_parser, pretty_print_cst, KEYWORDS
from semantics import create_analyzer, ChiffreSemanticsError
from stdlib import list_intrinsics
from syntax import pretty_print_expr
from values import show_value, unwrap_value, value_type_name


VERSION = "Chiffre v0.3.0"
DEFAULT_RECURSION_LIMIT = 20000


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='chiffre',
      description='Chiffre - a small call-by-value functional language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.chf                       # Evaluate a script
  %(prog)s -e 'let x = 2 in x * 21'         # Evaluate one expression
  %(prog)s -i                               # Interactive mode
  %(prog)s --parse script.chf               # Parse and show CST
  %(prog)s --analyze script.chf             # Show the expression tree
  %(prog)s --cipher caesar-encrypt --text Hello --key 3
  %(prog)s --menu                           # Cipher menu (CV/CE/VV/VE)
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Chiffre script file to evaluate'
  )

  parser.add_argument(
      '-e', '--expression',
      help='Evaluate the given expression'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse and show CST (for debugging)'
  )

  parser.add_argument(
      '--analyze',
      action='store_true',
      help='Parse and analyze, show the expression tree (for debugging)'
  )

  parser.add_argument(
      '--cipher',
      choices=sorted(CIPHERS),
      help='Run one of the cipher demo programs'
  )

  parser.add_argument(
      '--text',
      help='Text for --cipher'
  )

  parser.add_argument(
      '--key',
      help='Shift (Caesar) or password (Vigenere) for --cipher'
  )

  parser.add_argument(
      '--menu',
      action='store_true',
      help='Interactive cipher menu'
  )

  parser.add_argument(
      '--recursion-limit',
      type=int,
      default=DEFAULT_RECURSION_LIMIT,
      help=f'Host recursion limit for deeply recursive programs (default: {DEFAULT_RECURSION_LIMIT})'
  )

  parser.add_argument(
      '--debug',
      action='store_true',
      help='Enable debug output for all stages'
  )

  parser.add_argument(
      '--version',
      action='version',
      version=VERSION
  )

  return parser


# ============================================================================
# PIPELINE
# ============================================================================

def run_source(source: str, filename: str = "<input>", debug: bool = False) -> Dict:
  """Parse, analyze and evaluate source text, returning the value"""
  parser = create_parser(debug)
  analyzer = create_analyzer(debug)
  interpreter = create_interpreter(debug)

  cst = parser.parse_string(source, filename)
  expr = analyzer.analyze(cst)
  return interpreter.evaluate(expr)


def report_error(error: Exception, where: str, debug: bool = False) -> None:
  """Print an error from any pipeline stage"""
  if isinstance(error, ChiffreParseError):
    print(f"Parse error in {where}:\n{error}")
  elif isinstance(error, ChiffreSemanticsError):
    print(f"Semantic analysis error in {where}: {error.message}")
  elif isinstance(error, ChiffreRuntimeError):
    print(f"\n{'='*70}")
    print(f"Runtime Error in {where} ({type(error).__name__})")
    print(f"{'='*70}")
    print(f"\nError: {error.message}")
    print(f"\n{'='*70}\n")
  elif isinstance(error, RecursionError):
    print(f"Recursion too deep in {where}")
    print("  Hint: raise the limit with --recursion-limit")
  else:
    print(f"Unexpected error while processing {where}: {error}")
    if debug:
      import traceback
      traceback.print_exc()


def read_script(script_path: str) -> str:
  try:
    with open(script_path, 'r', encoding='utf-8') as f:
      return f.read()
  except FileNotFoundError:
    print(f"Error: Script file '{script_path}' not found")
    print("  Hint: Check the file path and make sure the file exists")
    sys.exit(1)
  except PermissionError:
    print(f"Error: Permission denied reading '{script_path}'")
    sys.exit(1)
  except UnicodeDecodeError as e:
    print(f"Error: Cannot decode file '{script_path}': {e}")
    print("  Hint: Make sure the file is a text file with UTF-8 encoding")
    sys.exit(1)


def parse_source(source: str, where: str, debug: bool = False) -> None:
  """Parse source and show the CST"""
  try:
    cst = create_parser(debug).parse_string(source, where)
    print(pretty_print_cst(cst), end='')
  except ChiffreParseError as e:
    report_error(e, where, debug)
    sys.exit(1)


def analyze_source(source: str, where: str, debug: bool = False) -> None:
  """Parse and analyze source and show the expression tree"""
  try:
    cst = create_parser(debug).parse_string(source, where)
    expr = create_analyzer(debug).analyze(cst)
    print(pretty_print_expr(expr))
  except (ChiffreParseError, ChiffreSemanticsError) as e:
    report_error(e, where, debug)
    sys.exit(1)


def evaluate_source(source: str, where: str, debug: bool = False) -> None:
  """Evaluate source and print the resulting value"""
  try:
    value = run_source(source, where, debug)
  except (ChiffreParseError, ChiffreSemanticsError, ChiffreRuntimeError, RecursionError) as e:
    report_error(e, where, debug)
    sys.exit(1)
  print(show_value(value))


# ============================================================================
# CIPHER DEMOS
# ============================================================================

def run_cipher(name: str, text: str, key: str, debug: bool = False) -> Optional[str]:
  """Run a cipher demo program and return the resulting text"""
  try:
    source = cipher_program(name, text, key)
  except ValueError as e:
    print(f"Error: {e}")
    return None

  try:
    value = run_source(source, f"<{name}>", debug)
  except (ChiffreParseError, ChiffreSemanticsError, ChiffreRuntimeError, RecursionError) as e:
    report_error(e, f"<{name}>", debug)
    return None
  return unwrap_value(value)


def run_menu(debug: bool = False) -> None:
  """Cipher menu: CV / CE Caesar, VV / VE Vigenere; anything else repeats"""
  by_code = {entry['menu']: name for name, entry in CIPHERS.items()}
  while True:
    print("Menu:")
    for name, entry in CIPHERS.items():
      print(f"  {entry['menu']}: {entry['label']}")
    print("  Q: quit")

    try:
      choice = input("> ").strip().upper()
      if choice == "Q":
        return
      if choice not in by_code:
        print("Please enter one of the listed commands")
        continue

      name = by_code[choice]
      print(CIPHERS[name]['label'])
      text = input("Text: ")
      key = input("Shift: " if CIPHERS[name]['key_is_shift'] else "Password: ")
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      return

    result = run_cipher(name, text, key, debug)
    if result is not None:
      print(result)


# ============================================================================
# INTERACTIVE MODE
# ============================================================================

REPL_COMMANDS = [":parse", ":analyze", ":env", ":help", ":quit"]


def save_history(history_file: str) -> None:
  """Write REPL history; an unwritable history file is not an error"""
  try:
    readline.write_history_file(history_file)
  except OSError:
    pass


def setup_readline():
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser("~/.chiffre_history")
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied
  readline.set_history_length(1000)

  completions = list(KEYWORDS) + list_intrinsics() + REPL_COMMANDS

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(save_history, history_file)


def show_repl_help() -> None:
  print("Enter an expression to evaluate it.")
  print("  :parse <expr>    show the CST")
  print("  :analyze <expr>  show the expression tree")
  print("  :env             list the initial bindings")
  print("  :help            this message")
  print("  :quit            leave")


def run_interactive_mode(debug: bool = False) -> None:
  """Run Chiffre in interactive mode"""
  print(f"{VERSION} - Interactive Mode")
  print("Type ':quit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_parser(debug)
  analyzer = create_analyzer(debug)
  interpreter = create_interpreter(debug)

  while True:
    try:
      code = input("chiffre> ").strip()
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if not code:
      continue
    if code in (":quit", ":q"):
      break
    if code == ":help":
      show_repl_help()
      continue
    if code == ":env":
      for name in env_names(interpreter.global_env):
        value = env_lookup(interpreter.global_env, name)
        print(f"  {name} = {show_value(value)} : {value.get('type_signature', value_type_name(value))}")
      continue

    try:
      if code.startswith(":parse "):
        print(pretty_print_cst(parser.parse_string(code[len(":parse "):])), end='')
      elif code.startswith(":analyze "):
        print(pretty_print_expr(analyzer.analyze(parser.parse_string(code[len(":analyze "):]))))
      else:
        value = interpreter.evaluate(analyzer.analyze(parser.parse_string(code)))
        print(f"=> {show_value(value)} : {value_type_name(value)}")
    except (ChiffreParseError, ChiffreSemanticsError, ChiffreRuntimeError, RecursionError) as e:
      report_error(e, "<repl>", debug)


def show_language_info() -> None:
  """Show Chiffre language information"""
  print("Chiffre Programming Language")
  print("=" * 50)
  print("A small call-by-value functional language with:")
  print("• Lambdas and lexical closures")
  print("• let and let rec bindings")
  print("• Int, Bool and String values")
  print(f"• Intrinsics: {', '.join(list_intrinsics())}")
  print()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Chiffre"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  sys.setrecursionlimit(args.recursion_limit)

  if args.cipher:
    if args.text is None or args.key is None:
      arg_parser.error("--cipher requires --text and --key")
    result = run_cipher(args.cipher, args.text, args.key, debug=args.debug)
    if result is None:
      sys.exit(1)
    print(result)
    return

  if args.menu:
    run_menu(debug=args.debug)
    return

  if args.expression is not None or args.script:
    if args.expression is not None:
      source, where = args.expression, "<expression>"
    else:
      if not Path(args.script).exists():
        print(f"Error: Script file '{args.script}' does not exist")
        sys.exit(1)
      source, where = read_script(args.script), f"'{args.script}'"

    if args.parse:
      parse_source(source, where, debug=args.debug)
    elif args.analyze:
      analyze_source(source, where, debug=args.debug)
    else:
      evaluate_source(source, where, debug=args.debug)
    return

  if args.interactive:
    run_interactive_mode(debug=args.debug)
    return

  # No arguments - show info and start interactive mode
  show_language_info()
  print("Use 'chiffre --help' for command line options")
  print()
  run_interactive_mode(debug=args.debug)


if __name__ == "__main__":
  main()
