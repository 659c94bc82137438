"""
qlog — severity channels over a stream-multiplexing engine.

A Log holds seven severity channels (debug, note, warn, error,
critical, fatal, info) that all forward into one combined channel.
Every channel is a LogStream: attach any number of sinks (files,
sys.stdout, io.StringIO, other LogStreams) and each write reaches all
of them, in attachment order.

Public API:
    Log              — channel registry
    LogStream        — fan-out stream
    init_log         — install the process-default Log
    get_log          — access the process-default Log
    init_none        — init hook, no attachment
    init_stdout      — init hook, sys.stdout on combined
    debug, note, warn, error, info
                     — call-site functions
    log_and_exit     — critical error, then sys.exit(1)
    log_and_abort    — fatal error, then os.abort()
    assert_that      — fatal error when a condition is false
    Trace, TraceFlag — trace metadata and its flag bits
    FILE, LINE, FUNCTION, DATE
    render           — trace suffix formatter
    Switches         — per-function on/off switches
"""

from qlog._version import __version__, __app_name__
from qlog.errors import (
    QlogError, AttachmentCycleError, UnknownChannelError, SinkSpecError,
)
from qlog.trace import Trace, TraceFlag, FILE, LINE, FUNCTION, DATE, render
from qlog.stream import LogStream
from qlog.log import Log, init_log, get_log, init_none, init_stdout
from qlog.config import Switches, init_switches, get_switches
from qlog.output import (
    debug, note, warn, error, info,
    log_and_exit, log_and_abort, assert_that,
)

__all__ = [
    "__version__", "__app_name__",
    "QlogError", "AttachmentCycleError", "UnknownChannelError", "SinkSpecError",
    "Trace", "TraceFlag", "FILE", "LINE", "FUNCTION", "DATE", "render",
    "LogStream",
    "Log", "init_log", "get_log", "init_none", "init_stdout",
    "Switches", "init_switches", "get_switches",
    "debug", "note", "warn", "error", "info",
    "log_and_exit", "log_and_abort", "assert_that",
]
