"""
Log — the channel registry.

A Log owns eight LogStreams with fixed names. Each of the seven
severity channels has the ``combined`` stream attached to it at
construction, so attaching one physical sink to ``combined`` collects
everything:

    debug ────┐
    note  ────┤
    warn  ────┤
    error ────┼──► combined ──► sys.stdout, log files, ...
    critical ─┤
    fatal ────┤
    info  ────┘

Construction runs one optional init hook that makes the first external
attachment (init_stdout attaches sys.stdout to combined).

Composition: ``a.attach_log(b)`` forwards each of a's severity channels
into b's same-named channel, so a library's Log can feed the
application's Log. combined is never linked across registries.

Explicit construction is preferred::

    log = Log(init_func=init_stdout)
    note("ready", log=log)

The process default (init_log / get_log) exists for the outermost
composition root and for call sites that do not pass a Log.
"""

import sys
from datetime import datetime
from typing import Callable, Dict, Optional

from .channels import CHANNELS, SEVERITY_CHANNELS, TRACED_CHANNELS
from .errors import UnknownChannelError
from .stream import LogStream
from .trace import DEFAULT_FLAGS


InitFunc = Callable[['Log'], None]


class Log:
    """Registry of the eight named channel streams.

    The six traced severity channels start with FILE | LINE | FUNCTION;
    info and combined start at 0.

    Args:
        init_func: Hook called once with the new Log after wiring.
            None makes no external attachment.
        clock: Zero-argument callable returning the current datetime,
            used for the DATE trace field. Defaults to datetime.now.
    """

    def __init__(self, init_func: Optional[InitFunc] = None,
                 clock: Optional[Callable[[], datetime]] = None):
        self.clock = clock if clock is not None else datetime.now
        self._streams: Dict[str, LogStream] = {
            name: LogStream(name) for name in CHANNELS
        }
        for name in TRACED_CHANNELS:
            self._streams[name].set_trace_flags(DEFAULT_FLAGS)
        combined = self._streams['combined']
        for name in SEVERITY_CHANNELS:
            self._streams[name].attach(combined)
        if init_func is not None:
            init_func(self)

    # ------------------------------------------------------------------
    # Stream accessors
    # ------------------------------------------------------------------
    def stream(self, name: str) -> LogStream:
        """Look up a channel stream by name.

        Raises:
            UnknownChannelError: name is not one of the eight channels
        """
        try:
            return self._streams[name]
        except KeyError:
            raise UnknownChannelError(name) from None

    @property
    def streams(self) -> Dict[str, LogStream]:
        """All channel streams keyed by name, in registry order."""
        return dict(self._streams)

    @property
    def debug_stream(self) -> LogStream:
        return self._streams['debug']

    @property
    def note_stream(self) -> LogStream:
        return self._streams['note']

    @property
    def warn_stream(self) -> LogStream:
        return self._streams['warn']

    @property
    def error_stream(self) -> LogStream:
        return self._streams['error']

    @property
    def critical_stream(self) -> LogStream:
        return self._streams['critical']

    @property
    def fatal_stream(self) -> LogStream:
        return self._streams['fatal']

    @property
    def info_stream(self) -> LogStream:
        return self._streams['info']

    @property
    def combined_stream(self) -> LogStream:
        """Shared downstream node; attach physical sinks here."""
        return self._streams['combined']

    # ------------------------------------------------------------------
    # Composition
    # ------------------------------------------------------------------
    def attach_log(self, other: 'Log') -> None:
        """Forward this log's severity channels into other's.

        Each call adds one edge per channel, so calling twice doubles
        delivery. combined is left out on both sides.
        """
        for name in SEVERITY_CHANNELS:
            self._streams[name].attach(other.stream(name))

    def detach_log(self, other: 'Log') -> None:
        """Remove one forwarding edge per channel added by attach_log()."""
        for name in SEVERITY_CHANNELS:
            self._streams[name].detach(other.stream(name))

    def set_trace_flags(self, flags: int) -> None:
        """Set trace flags on debug, note, warn, error, critical and fatal.

        info and combined keep their own flags.
        """
        for name in TRACED_CHANNELS:
            self._streams[name].set_trace_flags(flags)

    def __repr__(self) -> str:
        return f"Log(combined_sinks={len(self.combined_stream.sinks)})"


# =============================================================================
# Init hooks
# =============================================================================

def init_none(log: Log) -> None:
    """Init hook that attaches nothing."""


def init_stdout(log: Log) -> None:
    """Init hook that attaches sys.stdout to the combined stream."""
    log.combined_stream.attach(sys.stdout)


# =============================================================================
# Module-level default
# =============================================================================

_log: Optional[Log] = None


def init_log(init_func: Optional[InitFunc] = init_stdout,
             clock: Optional[Callable[[], datetime]] = None) -> Log:
    """Construct the process-default Log and install it.

    Call once at program startup. Replaces any existing default; the
    previous Log's sinks are left untouched.

    Args:
        init_func: Init hook for the new Log (default: init_stdout)
        clock: Clock for DATE trace fields (default: datetime.now)

    Returns:
        The installed Log
    """
    global _log
    _log = Log(init_func=init_func, clock=clock)
    return _log


def get_log() -> Log:
    """Get the process-default Log, creating one with init_stdout if needed."""
    global _log
    if _log is None:
        _log = Log(init_func=init_stdout)
    return _log


def reset_log() -> None:
    """Forget the process-default Log. The next get_log() builds a new one."""
    global _log
    _log = None
