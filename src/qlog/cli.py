"""Command-line front end for qlog.

Emits one line on a qlog channel from a shell script, with the same
rendering, trace flags and sink attachments a Python caller gets:

    qlog note "backup finished"
    qlog --trace date --attach combined:file:run.log warn "disk at 91%"
    qlog critical "cannot continue"      # exits with status 1

Implements a two-pass argument parser:
  1. First pass: extract global flags (--trace, --attach, --config, ...)
  2. Second pass: parse CHANNEL and MESSAGE from what is left

Lines carry no trace suffix unless --trace (or a config file) sets one.

Global flags can appear before OR after the channel:
  qlog --trace line error "bad input"     # works
  qlog error "bad input" --trace line     # also works
"""

import argparse
import sys

from qlog._version import PIP_VERSION, VERSION
from qlog.channels import SEVERITY_CHANNELS, format_channel_list
from qlog.config import Switches, apply_config, init_switches, resolve_config
from qlog.errors import QlogError
from qlog.log import Log, init_none, init_stdout
from qlog import output


# ---------------------------------------------------------------------------
# Global flags (can appear anywhere in argv)
# ---------------------------------------------------------------------------
GLOBAL_FLAGS = {
    "--trace": {"aliases": ["-t"], "metavar": "FLAGS", "default": None,
                "help": "Trace flags for severity channels (e.g. file|line, date, 15)"},
    "--attach": {"aliases": ["-a"], "action": "append", "metavar": "SPEC",
                 "default": None,
                 "help": "Attach a sink: CHANNEL:DEST[:LOCATION] (repeatable)"},
    "--disable": {"action": "append", "metavar": "CHANNEL", "default": None,
                  "help": "Switch a channel off ('log' = debug+note+warn)"},
    "--no-stdout": {"action": "store_true", "default": False,
                    "help": "Do not attach stdout to the combined channel"},
    "--show": {"action": "store_true", "default": False,
               "help": "List channels and exit"},
    "--config": {"metavar": "PATH", "default": None,
                 "help": "Path to config file (default: ~/.qlog/config.json)"},
}

# Channel name -> call-site function
EMITTERS = {
    'debug': output.debug,
    'note': output.note,
    'warn': output.warn,
    'error': output.error,
    'critical': output.log_and_exit,
    'fatal': output.log_and_abort,
    'info': output.info,
}


def _extract_global_flags(argv):
    """Two-pass parse: pull global flags from anywhere in argv.

    Returns (global_namespace, remaining_argv).
    """
    global_parser = argparse.ArgumentParser(add_help=False)
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        global_parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    global_args, remaining = global_parser.parse_known_args(argv)
    return global_args, remaining


def _build_parser():
    """Build the main argparse parser (global flags shown in --help)."""
    parser = argparse.ArgumentParser(
        prog="qlog",
        description="qlog — write one line to a qlog channel",
        epilog=format_channel_list(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"qlog {VERSION} ({PIP_VERSION})",
    )
    for flag, kwargs in GLOBAL_FLAGS.items():
        kw = {k: v for k, v in kwargs.items() if k != "aliases"}
        parser.add_argument(flag, *kwargs.get("aliases", []), **kw)

    parser.add_argument("channel", choices=SEVERITY_CHANNELS,
                        help="Channel to write to")
    parser.add_argument("message", nargs="+",
                        help="Message words (joined with spaces)")
    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv=None):
    """Main entry point for the qlog CLI.

    Args:
        argv: Command-line arguments. None means sys.argv[1:].

    Returns:
        Exit code (0 = success, 1 = critical, 2 = usage/config error).
    """
    if argv is None:
        argv = sys.argv[1:]

    # Pass 1: extract global flags from anywhere in the arg list
    global_args, remaining = _extract_global_flags(argv)

    if global_args.show:
        print(format_channel_list())
        return 0

    # Pass 2: channel + message
    parser = _build_parser()
    if not remaining:
        parser.print_help()
        return 0
    args = parser.parse_args(remaining)

    cfg = resolve_config(global_args)
    init_func = init_none if global_args.no_stdout else init_stdout
    log = Log(init_func=init_func)
    # Every line's call site is main(); trace only when asked to
    log.set_trace_flags(0)
    try:
        init_switches(Switches.from_env().disable(cfg["disable"] or []))
        opened = apply_config(log, trace=cfg["trace"], attach=cfg["attach"])
    except (QlogError, OSError) as e:
        print(f"qlog: error: {e}", file=sys.stderr)
        return 2

    # Dispatch
    try:
        EMITTERS[args.channel](" ".join(args.message), log=log)
        return 0
    except SystemExit as e:
        return e.code if isinstance(e.code, int) else 1
    finally:
        for f in opened:
            f.close()


if __name__ == "__main__":
    sys.exit(main())
