"""Demo CLI for flaggroups.

Shows the help layout on a realistic set of flag groups and prints the
values it parsed. Logging flags are handled in two passes:
  1. First pass: extract --verbose, --quiet, --show and --trace with a plain
     argparse parser so the output system is configured before anything else
  2. Second pass: the full Program parse, which also renders --help

  flaggroups-demo --help
  flaggroups-demo --show layout:2 --help
  flaggroups-demo -v --db-host db.example.com --tags a,b
"""

import argparse
import sys

from flaggroups._version import VERSION
from flaggroups.core import ParseError, Program
from flaggroups.lib.log_lib import format_channel_list, get_output, init_output


PROG = "myapp"


# ---------------------------------------------------------------------------
# Logging flags (read in the first pass, shown in help by the second)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--verbose": {"aliases": ["-v"], "action": "store_true", "default": False},
    "--quiet": {"aliases": ["-q"], "action": "store_true", "default": False},
    "--show": {"action": "append", "default": []},
    "--trace": {"action": "store_true", "default": False},
}


def _extract_global_flags(argv):
    """First pass: pull the logging flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    parser = argparse.ArgumentParser(add_help=False, allow_abbrev=False)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)
    return parser.parse_known_args(argv)


def _channel_specs(global_args):
    """Flatten repeated and comma-separated --show values."""
    specs = []
    for value in global_args.show or []:
        specs.extend(s for s in value.split(",") if s)
    if global_args.trace:
        specs.append("trace:3")
    return specs


# ---------------------------------------------------------------------------
# Program definition
# ---------------------------------------------------------------------------
EXAMPLES = f"""# Basic usage with verbose mode
{PROG} --verbose

# Specifying database connection parameters
{PROG} --db-host db.example.com --db-port 3306 --db-user admin --db-password secret --db-ssl

# Using output options with tags
{PROG} -f json -o output.json --tags frontend,backend,testing

# Dry run with advanced options
{PROG} --dry-run --timeout 30 --retry 5 --factor 2.0

# Using a configuration file
{PROG} -c /etc/{PROG}/config.yaml"""


def build_program(output=None):
    """Build the demo Program with all of its Sections."""
    program = Program(
        name=PROG,
        version=f"v{VERSION}",
        description=("A demonstration of the flaggroups package capabilities.\n"
                     "This program shows how to organize flags into logical groups."),
        output=output,
    )

    general = program.new_section("General Options")
    general.description = "This is a description for the General Options group."
    general.add_bool("verbose", False, "Enable verbose output", shorthand="v")
    general.add_string("config", "", "Path to configuration file", shorthand="c")
    general.add_bool("dry-run", False, "Perform a trial run with no changes made")

    log_opts = program.new_section("Logging Options")
    log_opts.add_bool("quiet", False, "Only show errors", shorthand="q")
    log_opts.add_string_list("show", [], "Show output channel (CHANNEL[:LEVEL])\n"
                                        "Use 'list' to print the available channels")

    database = program.new_section("Database Options")
    database.add_string("db-host", "localhost", "Database server hostname")
    database.add_int("db-port", 5432, "Database server port")
    database.add_string("db-user", "postgres", "Database username")
    database.add_string("db-password", "", "Database password")
    database.add_string("db-name", PROG, "Database name")
    database.add_bool("db-ssl", False, "Use SSL for database connection")

    output_opts = program.new_section("Output Options")
    output_opts.add_string("format", "text", "Output format (text, json, yaml)", shorthand="f")
    output_opts.add_string("output", "-", "Output file (- for stdout)", shorthand="o")
    output_opts.add_bool("color", True, "Enable colorized output")
    output_opts.add_int("indent", 2, "Indentation level for structured output")

    advanced = program.new_section("Advanced Options")
    advanced.sort_flags = True
    advanced.add_uint("timeout", 0, "Operation timeout in seconds (0 for no timeout)")
    advanced.add_int("retry", 3, "Number of retry attempts")
    advanced.add_float("factor", 1.5, "Exponential backoff factor")
    advanced.add_string_list("tags", [], "List of tags to apply")
    advanced.footer = "The previous flags are sorted alphabetically."

    debug = program.new_section("Debug")
    debug.add_bool("trace", False, "Enable tracing")
    debug.mark_hidden("trace")

    examples = program.new_section("Examples")
    examples.footer = EXAMPLES

    return program


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for the demo.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success, 1 = bad arguments).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: configure output before building anything
    global_args, _ = _extract_global_flags(argv)
    specs = _channel_specs(global_args)
    if "list" in specs:
        print(format_channel_list())
        return 0

    verbosity = -3 if global_args.quiet else int(global_args.verbose)
    try:
        init_output(verbosity=verbosity, channels=specs)
    except ValueError as e:
        get_output().error(f"Error: {e}")
        return 1
    out = get_output()

    # Pass 2: full parse; --help exits from here
    program = build_program()
    try:
        program.parse(argv)
    except ParseError as e:
        out.error(f"Error: {e.message}")
        out.error(f"Run '{PROG} --help' to see the available flags.")
        return 1

    def value(name):
        return program.lookup(name).value

    if value("verbose"):
        print("Verbose mode enabled")

    if value("config"):
        print(f"Using configuration file: {value('config')}")

    print(f"Database connection: {value('db-user')}@{value('db-host')}:"
          f"{value('db-port')}/{value('db-name')} (SSL: {value('db-ssl')})")

    if value("db-password"):
        print("Database password is set")
    else:
        print("No database password provided")

    if value("tags"):
        print(f"Tags: {', '.join(value('tags'))}")

    if program.args:
        print(f"Arguments: {' '.join(program.args)}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
