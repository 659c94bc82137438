"""Call-site logging functions for qlog.

Each function renders one complete line and writes it into its channel
with a single write, then flushes the channel:

    prefix + message + trace suffix + "\\n"

The trace suffix uses the channel's current trace flags and the
caller's file, line and function. Message parts are converted with
str() and concatenated with no separator, the way chained insertion
works::

    note("2+2 is ", 2 + 2)         # "Note: 2+2 is 4\\n"

Termination is explicit in the name: log_and_exit() writes on the
critical channel and then calls sys.exit(1); log_and_abort() writes on
the fatal channel and then calls os.abort(). The line is flushed to
every attached sink before either happens.

Every function returns immediately when its switch is off (see
qlog.config.Switches); disabled exit/abort functions do not terminate.
"""

import os
import sys
from typing import Any, Optional

from .channels import CHANNEL_PREFIXES
from .config import get_switches
from .log import Log, get_log
from .trace import render


def _call_site(stacklevel: int):
    """Return (file, line, function) of the frame stacklevel above our caller."""
    # +2 skips this helper and _emit; stacklevel 1 is the public function's caller
    frame = sys._getframe(stacklevel + 2)
    code = frame.f_code
    return code.co_filename, frame.f_lineno, code.co_name


def _emit(channel: str, parts, log: Optional[Log], stacklevel: int) -> bool:
    """Write one rendered line into channel. Returns False when switched off."""
    if not get_switches().enabled(channel):
        return False
    if log is None:
        log = get_log()
    stream = log.stream(channel)
    file, line, function = _call_site(stacklevel)
    message = "".join(str(p) for p in parts)
    suffix = render(stream.trace_flags, file, line, function, now=log.clock())
    stream.write(f"{CHANNEL_PREFIXES[channel]}{message}{suffix}\n")
    stream.flush()
    return True


def debug(*parts: Any, log: Optional[Log] = None, stacklevel: int = 1) -> None:
    """Development diagnostics on the debug channel ("Debug message: ")."""
    _emit('debug', parts, log, stacklevel)


def note(*parts: Any, log: Optional[Log] = None, stacklevel: int = 1) -> None:
    """Notable event on the note channel ("Note: ")."""
    _emit('note', parts, log, stacklevel)


def warn(*parts: Any, log: Optional[Log] = None, stacklevel: int = 1) -> None:
    """Warning on the warn channel ("Warning: ")."""
    _emit('warn', parts, log, stacklevel)


def error(*parts: Any, log: Optional[Log] = None, stacklevel: int = 1) -> None:
    """Error on the error channel ("Error: ")."""
    _emit('error', parts, log, stacklevel)


def info(*parts: Any, log: Optional[Log] = None, stacklevel: int = 1) -> None:
    """Plain output on the info channel. No prefix."""
    _emit('info', parts, log, stacklevel)


def log_and_exit(*parts: Any, log: Optional[Log] = None,
                 stacklevel: int = 1) -> None:
    """Write a critical error, then exit the process with status 1.

    Exits through sys.exit(), so finally blocks, context managers and
    atexit handlers still run.
    """
    if _emit('critical', parts, log, stacklevel):
        sys.exit(1)


def log_and_abort(*parts: Any, log: Optional[Log] = None,
                  stacklevel: int = 1) -> None:
    """Write a fatal error, then abort the process.

    os.abort() raises SIGABRT: no cleanup handlers run and a core is
    dumped where enabled.
    """
    if _emit('fatal', parts, log, stacklevel):
        os.abort()


def assert_that(condition: Any, message: Any = '', *,
                log: Optional[Log] = None, stacklevel: int = 1) -> None:
    """Abort with a fatal error when condition is false.

    Emits "assertion failed, <message>" on the fatal channel. Skipped
    entirely when assertions are switched off (python -O by default).
    """
    if not get_switches().assertions or condition:
        return
    log_and_abort("assertion failed, ", message, log=log,
                  stacklevel=stacklevel + 1)
