"""
UIRE - Main Entry Point
A small Scheme-like expression language: read, analyze, evaluate, print
"""

import sys
import argparse
from pathlib import Path
from typing import List, Optional
import os

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from error_handling import EvaluationTimeout, UIREError, UIREParseError, UIRESemanticsError
from interpreter import UIREInterpreter, create_debug_interpreter, create_interpreter
from parsing import CSTNode, create_debug_parser, create_parser, pretty_print_cst
from printer import serialize_error, serialize_outcome
from semantics import create_analyzer, create_debug_analyzer
from syntax import pretty_print_expr, show_expr


VERSION = "UIRE v0.3.0"
TIMEOUT_ENV_VAR = "UIRE_TIMEOUT"
HISTORY_FILE = "~/.uire_history"
RECURSION_LIMIT_MESSAGE = "UIRE: maximum recursion depth exceeded"


def default_timeout() -> Optional[float]:
  """Deadline from the UIRE_TIMEOUT environment variable, if set"""
  raw = os.environ.get(TIMEOUT_ENV_VAR)
  if not raw:
    return None
  try:
    return float(raw)
  except ValueError:
    print(f"Warning: ignoring {TIMEOUT_ENV_VAR}={raw!r} (not a number)", file=sys.stderr)
    return None


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      description='UIRE - a small Scheme-like expression language',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.uire              # Evaluate every form in a script
  %(prog)s -e "{+ 1 2}"             # Evaluate one expression
  %(prog)s -i                       # Interactive mode
  %(prog)s --parse script.uire      # Parse and show CST
  %(prog)s --analyze script.uire    # Parse, analyze and show AST
  %(prog)s --timeout 2 script.uire  # Give up on any form after 2 seconds
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='UIRE script file to execute'
  )

  parser.add_argument(
      '-e', '--eval',
      metavar='EXPR',
      help='Evaluate a single expression and print the result'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show CST (for debugging)'
  )

  parser.add_argument(
      '--analyze',
      action='store_true',
      help='Parse and analyze file, show AST (for debugging)'
  )

  parser.add_argument(
      '--timeout',
      type=float,
      default=default_timeout(),
      metavar='SECONDS',
      help=f'Abandon an evaluation after this many seconds (default: ${TIMEOUT_ENV_VAR} or none)'
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


def parse_file(script_path: str, debug: bool = False) -> int:
  """Parse a UIRE script file and show the CST"""
  parser = create_debug_parser() if debug else create_parser()
  cst_nodes = parser.parse_file(script_path)

  print(f"Parsed {len(cst_nodes)} top-level form(s):")
  print("=" * 50)
  for i, node in enumerate(cst_nodes, 1):
    print(f"\nForm {i}:")
    print(pretty_print_cst(node), end='')
  return 0


def analyze_file(script_path: str, debug: bool = False) -> int:
  """Parse and analyze a UIRE script file and show the AST"""
  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  cst_nodes = parser.parse_file(script_path)

  print(f"Analyzed {len(cst_nodes)} top-level form(s):")
  print("=" * 50)
  for i, cst_node in enumerate(cst_nodes, 1):
    expr = analyzer.analyze_expression(cst_node)
    print(f"\nForm {i}: {show_expr(expr)}")
    print(pretty_print_expr(expr), end='')
  return 0


def evaluate_forms(cst_nodes: List[CSTNode], interpreter: UIREInterpreter,
                   debug: bool = False) -> int:
  """
  Analyze and evaluate parsed forms, printing one line per form.
  Returns the exit status: 1 if any form failed, else 0.
  """
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  exprs = analyzer.analyze(cst_nodes)

  status = 0
  for expr in exprs:
    try:
      outcome = interpreter.run(expr)
    except EvaluationTimeout as e:
      outcome = e
    except RecursionError:
      print(RECURSION_LIMIT_MESSAGE)
      status = 1
      continue
    print(serialize_outcome(outcome))
    if isinstance(outcome, UIREError):
      status = 1
  return status


def run_script_file(script_path: str, timeout: Optional[float] = None, debug: bool = False) -> int:
  """Run a UIRE script file"""
  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter(timeout) if debug else create_interpreter(timeout=timeout)
  return evaluate_forms(parser.parse_file(script_path), interpreter, debug)


def run_expression(source: str, timeout: Optional[float] = None, debug: bool = False) -> int:
  """Evaluate source given with -e"""
  parser = create_debug_parser() if debug else create_parser()
  interpreter = create_debug_interpreter(timeout) if debug else create_interpreter(timeout=timeout)
  return evaluate_forms(parser.parse_string(source, "<command line>"), interpreter, debug)


def setup_readline() -> None:
  """Setup readline with history and auto-completion"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet

  readline.set_history_length(1000)

  completions = [
      # Keywords
      "if", "lam", "lambda", "true", "false",
      # Operators
      "equal?",
      # REPL commands
      ":parse", ":analyze", ":help", "exit",
  ]

  def completer(text, state):
    options = [cmd for cmd in completions if cmd.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def show_repl_help() -> None:
  print("REPL Commands:")
  print("  :parse <expr>     - Show parsed CST")
  print("  :analyze <expr>   - Show analyzed AST")
  print("  :help             - Show this help")
  print("  exit              - Exit REPL")
  print()
  print("Language:")
  print("  {+ 1 2}                          - Operators: + - * / <= equal?")
  print("  {if {<= 1 2} true false}         - Conditional")
  print("  {{lam {x y} {* x y}} 6 7}        - Function literal and application")


def run_interactive_mode(timeout: Optional[float] = None, debug: bool = False) -> None:
  """Run UIRE in interactive mode"""
  print(f"{VERSION} - Interactive Mode")
  print("Type 'exit' to quit, ':help' for commands")
  if debug:
    print("Debug mode enabled")
  print()

  setup_readline()

  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  interpreter = create_debug_interpreter(timeout) if debug else create_interpreter(timeout=timeout)

  while True:
    try:
      code = input("uire> ").strip()
    except (KeyboardInterrupt, EOFError):
      print("\nGoodbye!")
      break

    if code == "exit":
      break
    if not code:
      continue

    try:
      if code == ":help":
        show_repl_help()
      elif code.startswith(":parse "):
        print(pretty_print_cst(parser.parse_expression(code[len(":parse "):])), end='')
      elif code.startswith(":analyze "):
        cst = parser.parse_expression(code[len(":analyze "):])
        print(pretty_print_expr(analyzer.analyze_expression(cst)), end='')
      else:
        for expr in analyzer.analyze(parser.parse_string(code)):
          print(interpreter.interpret(expr))
    except (UIREParseError, UIRESemanticsError, EvaluationTimeout) as e:
      print(e if debug else serialize_error(e))
    except RecursionError:
      print(RECURSION_LIMIT_MESSAGE)


def main(argv: Optional[List[str]] = None) -> int:
  """Main entry point for UIRE"""
  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  try:
    if args.eval is not None:
      return run_expression(args.eval, args.timeout, args.debug)

    if args.script:
      if not Path(args.script).exists():
        print(f"Error: Script file '{args.script}' does not exist")
        return 1
      if args.parse:
        return parse_file(args.script, args.debug)
      if args.analyze:
        return analyze_file(args.script, args.debug)
      return run_script_file(args.script, args.timeout, args.debug)

    if args.interactive:
      run_interactive_mode(args.timeout, args.debug)
      return 0

    arg_parser.print_help()
    return 0

  except UIREParseError as e:
    print(str(e))
    return 1
  except UIRESemanticsError as e:
    print(str(e))
    return 1
  except RecursionError:
    print(RECURSION_LIMIT_MESSAGE)
    return 1
  except OSError as e:
    print(f"Error: cannot read '{args.script}': {e}")
    return 1
  except Exception as e:
    print(f"Unexpected error: {e}")
    if args.debug:
      import traceback
      traceback.print_exc()
    return 1


if __name__ == "__main__":
  sys.exit(main())
