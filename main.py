"""
Calc Language - Main Entry Point
Run Calc scripts, inspect their syntax trees, or use the interactive shell
"""

import sys
import argparse
import os
from pathlib import Path
from typing import List, Optional

# Readline support for history and auto-completion
try:
  import readline
  READLINE_AVAILABLE = True
except ImportError:
  READLINE_AVAILABLE = False

from parsing import create_parser, create_debug_parser, pretty_print_program
from semantics import create_analyzer, create_debug_analyzer
from symbol_table import SymbolTable
from pipeline import Session, run_file
from error_handling import CalcParseError, CalcSemanticsError


VERSION = "Calc v0.1.0"
PROMPT = "calc> "
HISTORY_FILE = "~/.calc_history"

QUIT_COMMAND = "q"
CLEAR_COMMAND = "c"
VARIABLES_COMMAND = "v"


def create_arg_parser() -> argparse.ArgumentParser:
  """Create command line argument parser"""
  parser = argparse.ArgumentParser(
      prog='calc',
      description='Calc - declare, read, compute and print floating point variables',
      formatter_class=argparse.RawDescriptionHelpFormatter,
      epilog="""
Examples:
  %(prog)s script.calc            # Run a Calc script
  %(prog)s -i                     # Interactive mode
  %(prog)s --parse script.calc    # Parse and show the syntax tree
  %(prog)s --analyze script.calc  # Parse, resolve names and show the resolved tree
  %(prog)s --debug script.calc    # Run with debug output on stderr
        """
  )

  parser.add_argument(
      'script',
      nargs='?',
      help='Calc script file to execute'
  )

  parser.add_argument(
      '-i', '--interactive',
      action='store_true',
      help='Start interactive mode'
  )

  parser.add_argument(
      '--parse',
      action='store_true',
      help='Parse file and show the syntax tree (for debugging)'
  )

  parser.add_argument(
      '--analyze',
      action='store_true',
      help='Parse and analyze file, show the resolved tree (for debugging)'
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


def report_error(message: str) -> None:
  print(message, file=sys.stderr)


def fail(message: str, debug: bool = False) -> None:
  """Report a batch failure and terminate"""
  report_error(message)
  if debug:
    import traceback
    traceback.print_exc()
  sys.exit(1)


def parse_file(script_path: str, debug: bool = False) -> None:
  """Parse a Calc script file and show the syntax tree"""
  parser = create_debug_parser() if debug else create_parser()
  try:
    program = parser.parse_file(script_path)
  except CalcParseError as e:
    fail(f"Parse error in '{script_path}': {e}", debug)
  except (OSError, UnicodeDecodeError) as e:
    fail(f"Error: Cannot read '{script_path}': {e}", debug)

  print(f"Parsed {len(program)} statements:")
  print(pretty_print_program(program), end='')


def analyze_file(script_path: str, debug: bool = False) -> None:
  """Parse and analyze a Calc script file and show the resolved tree"""
  parser = create_debug_parser() if debug else create_parser()
  analyzer = create_debug_analyzer() if debug else create_analyzer()
  symbols = SymbolTable()
  try:
    program = parser.parse_file(script_path)
    resolved = analyzer.analyze(symbols, program)
  except CalcParseError as e:
    fail(f"Parse error in '{script_path}': {e}", debug)
  except CalcSemanticsError as e:
    fail(f"Semantic analysis error in '{script_path}': {e}", debug)
  except (OSError, UnicodeDecodeError) as e:
    fail(f"Error: Cannot read '{script_path}': {e}", debug)

  print(f"Resolved {len(resolved)} statements:")
  print(pretty_print_program(resolved), end='')
  print(f"Slots ({len(symbols)}):")
  for slot, (name, _) in enumerate(symbols):
    print(f"  {slot}: {name}")


def run_script_file(script_path: str, debug: bool = False) -> None:
  """Run a Calc script file"""
  try:
    symbols = run_file(script_path, debug)
  except CalcParseError as e:
    fail(f"Parse error in '{script_path}': {e}", debug)
  except CalcSemanticsError as e:
    fail(f"Semantic analysis error in '{script_path}': {e}", debug)
  except FileNotFoundError:
    fail(f"Error: Script file '{script_path}' not found", debug)
  except PermissionError:
    fail(f"Error: Permission denied reading '{script_path}'", debug)
  except UnicodeDecodeError as e:
    fail(f"Error: Cannot decode file '{script_path}': {e}", debug)

  if debug:
    report_error(symbols.format_variables())


def setup_readline(session: Session) -> None:
  """Setup readline with history and completion of commands and variable names"""
  if not READLINE_AVAILABLE:
    return

  history_file = os.path.expanduser(HISTORY_FILE)
  try:
    readline.read_history_file(history_file)
  except OSError:
    pass  # First time, no history yet, or permission denied

  readline.set_history_length(1000)

  def completer(text, state):
    names = [name for name, _ in session.symbols]
    options = [name for name in names if name.startswith(text)]
    if state < len(options):
      return options[state]
    return None

  readline.set_completer(completer)
  readline.parse_and_bind("tab: complete")

  import atexit
  atexit.register(readline.write_history_file, history_file)


def print_help() -> None:
  report_error("Commands:")
  report_error(f"  {QUIT_COMMAND}: Quit current REPL instance")
  report_error(f"  {CLEAR_COMMAND}: Clear variables")
  report_error(f"  {VARIABLES_COMMAND}: Print context variables")
  report_error("Statements: @x (declare), > x (read), < x + 1 (print), x := 2 * x (assign)")


def handle_repl_line(session: Session, code: str) -> bool:
  """Process one line of interactive input; returns False when the user quits"""
  command = code.strip()

  if not command:
    return True

  if command == QUIT_COMMAND:
    report_error("Exiting Calc Interactive")
    return False

  if command == CLEAR_COMMAND:
    session.clear()
    report_error("Variables cleared")
    return True

  if command == VARIABLES_COMMAND:
    print(session.format_variables())
    return True

  # Any other input is treated as a Calc program
  try:
    session.run(command)
  except (CalcParseError, CalcSemanticsError) as e:
    report_error(str(e))

  return True


def run_interactive_mode(debug: bool = False) -> None:
  """Run Calc in interactive mode; variables persist until cleared"""
  print("Calc Language - Interactive")
  if debug:
    print("Debug mode enabled")
  print_help()

  session = Session(debug=debug)
  setup_readline(session)

  while True:
    try:
      code = input(PROMPT)
    except (KeyboardInterrupt, EOFError):
      report_error("\nGoodbye!")
      break

    try:
      if not handle_repl_line(session, code):
        break
    except Exception as e:
      report_error(f"Unexpected error: {e}")
      if debug:
        import traceback
        traceback.print_exc()


def main(argv: Optional[List[str]] = None) -> None:
  """Main entry point for Calc"""
  if argv is None:
    argv = sys.argv[1:]

  arg_parser = create_arg_parser()
  args = arg_parser.parse_args(argv)

  # No arguments - start interactive mode
  if not argv:
    run_interactive_mode(debug=False)
    return

  if args.script:
    if not Path(args.script).exists():
      fail(f"Error: Script file '{args.script}' does not exist")

    if args.parse:
      parse_file(args.script, debug=args.debug)
    elif args.analyze:
      analyze_file(args.script, debug=args.debug)
    else:
      run_script_file(args.script, debug=args.debug)

  elif args.interactive:
    run_interactive_mode(debug=args.debug)

  else:
    arg_parser.print_help()


if __name__ == "__main__":
  main()
