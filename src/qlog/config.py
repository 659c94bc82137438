"""Configuration for qlog.

Two concerns live here:

Switches — which call-site functions are live. These replace build-time
macro stripping: a disabled function returns immediately without
formatting, writing or terminating. Read from the environment:

    QLOG_NO_DEBUG, QLOG_NO_NOTE, QLOG_NO_WARN, QLOG_NO_ERROR,
    QLOG_NO_CRITICAL, QLOG_NO_FATAL, QLOG_NO_INFO
    QLOG_NO_LOG      turns off debug, note and warn together

Sink/trace config — three-layer resolution (highest priority wins):
  1. CLI flags — explicit on the command line
  2. Project config — .qlog.json in the working directory or a parent
  3. Global config — ~/.qlog/config.json (or the --config path)

Config file keys:
    {
      "trace": "file|line",              # trace flag spec
      "attach": ["combined:file:app.log"], # sink specs
      "disable": ["debug"]               # channels to switch off ("log" = debug+note+warn)
    }
"""

import json
import os
import sys
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Iterable, List, Mapping, Optional

from .channels import SEVERITY_CHANNELS, parse_sink_spec
from .errors import SinkSpecError
from .trace import TraceFlag


# ---------------------------------------------------------------------------
# Switches
# ---------------------------------------------------------------------------
# Channels turned off by QLOG_NO_LOG / "log"
NO_LOG_CHANNELS = ('debug', 'note', 'warn')


def _env_flag(environ, key):
    value = environ.get(key, '')
    return bool(value) and value.strip() != '0'


@dataclass
class Switches:
    """Which call-site functions are enabled.

    Attributes:
        debug .. info: True when the matching function emits
        assertions: True when assert_that() checks its condition
            (defaults to __debug__, so ``python -O`` disables it)
    """
    debug: bool = True
    note: bool = True
    warn: bool = True
    error: bool = True
    critical: bool = True
    fatal: bool = True
    info: bool = True
    assertions: bool = __debug__

    def enabled(self, channel: str) -> bool:
        """True if the call-site function for channel is live."""
        return getattr(self, channel, False)

    def disable(self, names: Iterable[str]) -> 'Switches':
        """Turn off the named switches in place.

        Args:
            names: Channel names, 'log' (debug+note+warn) or 'assertions'

        Returns:
            self, for chaining

        Raises:
            SinkSpecError: A name is not a switchable channel
        """
        if isinstance(names, str):
            names = [names]
        valid = {f.name for f in fields(self)}
        for name in names:
            key = name.strip().lower()
            if key == 'log':
                for ch in NO_LOG_CHANNELS:
                    setattr(self, ch, False)
            elif key in valid:
                setattr(self, key, False)
            else:
                raise SinkSpecError(f"cannot disable unknown channel {name!r}")
        return self

    @classmethod
    def disabling(cls, names: Iterable[str]) -> 'Switches':
        """Build default switches with the named ones turned off."""
        return cls().disable(names)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> 'Switches':
        """Read QLOG_NO_* variables. Any non-empty value other than '0' disables."""
        if environ is None:
            environ = os.environ
        names = [ch for ch in SEVERITY_CHANNELS
                 if _env_flag(environ, f"QLOG_NO_{ch.upper()}")]
        if _env_flag(environ, 'QLOG_NO_LOG'):
            names.append('log')
        return cls.disabling(names)


_switches: Optional[Switches] = None


def init_switches(switches: Optional[Switches] = None) -> Switches:
    """Install the process-wide switches.

    Args:
        switches: Switches to install. None reads the environment.

    Returns:
        The installed Switches
    """
    global _switches
    _switches = switches if switches is not None else Switches.from_env()
    return _switches


def get_switches() -> Switches:
    """Get the process-wide switches, reading the environment on first use."""
    global _switches
    if _switches is None:
        _switches = Switches.from_env()
    return _switches


# ---------------------------------------------------------------------------
# Trace flag specs
# ---------------------------------------------------------------------------
def parse_trace_flags(spec) -> int:
    """Parse a trace flag spec into a bitmask.

    Accepts an int, an integer string ("3"), or flag names separated by
    '|' or ',' ("file|line", "FUNCTION,date"). "" and "none" give 0.

    Raises:
        SinkSpecError: Unknown flag name
    """
    if spec is None:
        return 0
    if isinstance(spec, int):
        return int(spec)
    text = str(spec).strip()
    if text.isdigit():
        return int(text)

    flags = 0
    for token in text.replace(',', '|').split('|'):
        token = token.strip().upper()
        if not token or token == 'NONE':
            continue
        try:
            flags |= TraceFlag[token]
        except KeyError:
            raise SinkSpecError(f"unknown trace flag {token.lower()!r}") from None
    return int(flags)


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
PROJECT_CONFIG_NAME = ".qlog.json"


def get_global_config_dir():
    """Return ~/.qlog, the per-user config directory."""
    return Path.home() / ".qlog"


def get_global_config_path():
    """Return ~/.qlog/config.json, the lowest-priority config layer.

    resolve_config() reads an explicit --config path instead when one is
    given; this default is not consulted in that case.
    """
    return get_global_config_dir() / "config.json"


def find_project_config(start_dir=None):
    """Find the project layer: the nearest .qlog.json at or above start_dir.

    Starts at start_dir (default: the working directory) and climbs at most
    20 levels, stopping early at the filesystem root. Only regular files
    count, so a directory named .qlog.json is skipped.

    Returns:
        Path to the file, or None when no ancestor has one
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Read one config layer.

    A missing file, malformed JSON, or a top-level value that is not an
    object all count as an empty layer, so a broken file never stops a
    log line from being written.
    """
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (FileNotFoundError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_global_config(path=None):
    """Load the global layer from path (the --config value) or ~/.qlog/config.json."""
    return load_json(path or get_global_config_path())


def load_project_config(start_dir=None):
    """Load the project layer.

    Returns:
        (config dict, path) for the nearest .qlog.json, or ({}, None)
    """
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
CONFIG_KEYS = ("trace", "attach", "disable")


def resolve_config(args=None, start_dir=None):
    """Resolve config values using three-layer precedence.

    For each of trace/attach/disable, checks (in order):
      1. CLI args (attributes on the argparse namespace)
      2. Project .qlog.json
      3. Global ~/.qlog/config.json, or args.config when given

    List values are not merged across layers; the first layer that
    sets a key wins.

    Returns a dict with resolved values (None when unset everywhere).
    """
    project_cfg, _ = load_project_config(start_dir)
    global_cfg = load_global_config(getattr(args, "config", None))

    resolved = {}
    for key in CONFIG_KEYS:
        cli_val = getattr(args, key, None)
        if cli_val is not None:
            resolved[key] = cli_val
        elif project_cfg.get(key) is not None:
            resolved[key] = project_cfg[key]
        else:
            resolved[key] = global_cfg.get(key)
    return resolved


# ---------------------------------------------------------------------------
# Applying config to a Log
# ---------------------------------------------------------------------------
def open_sink(spec):
    """Open the destination named by a SinkSpec.

    stdout/stderr return the current sys streams. 'file' opens the
    location for appending; the caller owns the returned file.
    """
    if spec.destination == 'stdout':
        return sys.stdout
    if spec.destination == 'stderr':
        return sys.stderr
    return open(spec.location, "a", encoding="utf-8")


def apply_config(log, trace=None, attach=()) -> List:
    """Apply trace flags and sink attachments to a Log.

    Args:
        log: Log to configure
        trace: Trace flag spec for the severity channels (None leaves flags alone)
        attach: Sink spec strings

    Returns:
        Files opened for 'file' destinations. qlog never closes them;
        the caller does once logging is finished.

    Raises:
        SinkSpecError: A spec could not be parsed
        OSError: A file destination could not be opened
    """
    if trace is not None:
        log.set_trace_flags(parse_trace_flags(trace))

    if isinstance(attach, str):
        attach = [attach]
    specs = [parse_sink_spec(s) for s in (attach or ())]
    opened = []
    attached = []
    try:
        for spec in specs:
            sink = open_sink(spec)
            if spec.destination == 'file':
                opened.append(sink)
            log.stream(spec.channel).attach(sink)
            attached.append((spec.channel, sink))
    except OSError:
        # Roll back partial attachments so no closed file stays in the graph
        for channel, sink in attached:
            log.stream(channel).detach(sink)
        for f in opened:
            f.close()
        raise
    return opened
