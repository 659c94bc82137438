"""
Channel names, prefixes and sink spec parsing.

The registry has a fixed topology: seven severity channels, each wired
into one shared ``combined`` channel. This module holds the static
description of that topology plus the parser for sink specs used by
the config layer and the CLI.

Sink spec syntax (compact, positional):
    CHANNEL:DEST[:LOCATION]

    Examples:
        combined:stdout         # combined channel to stdout
        error:stderr            # error channel to stderr
        combined:file:app.log   # combined channel appended to app.log
        warn:file:C:\\logs\\w.log  # Windows paths keep their drive letter
"""

from dataclasses import dataclass
from typing import Optional

from .errors import SinkSpecError


# Registry channel order. combined comes last: it is the downstream node.
CHANNELS = (
    'debug',
    'note',
    'warn',
    'error',
    'critical',
    'fatal',
    'info',
    'combined',
)

# Channels written by call-site functions (everything but combined)
SEVERITY_CHANNELS = CHANNELS[:-1]

# Channels affected by Log.set_trace_flags(); info stays metadata-free
TRACED_CHANNELS = tuple(c for c in SEVERITY_CHANNELS if c != 'info')

CHANNEL_PREFIXES = {
    'debug':    'Debug message: ',
    'note':     'Note: ',
    'warn':     'Warning: ',
    'error':    'Error: ',
    'critical': 'Critical error: ',
    'fatal':    'Fatal error: ',
    'info':     '',
}

CHANNEL_DESCRIPTIONS = {
    'debug':    'Development diagnostics',
    'note':     'Notable events',
    'warn':     'Serious conditions that should not be omitted',
    'error':    'Conditions requiring user reaction',
    'critical': 'Unrecoverable errors (exits with status 1)',
    'fatal':    'Unrecoverable errors (aborts the process)',
    'info':     'Plain informational output, never traced',
    'combined': 'Receives everything written to the other channels',
}

SINK_DESTINATIONS = {'stdout', 'stderr', 'file'}


@dataclass
class SinkSpec:
    """A parsed sink attachment request.

    Attributes:
        channel: Registry channel the sink is attached to
        destination: 'stdout', 'stderr' or 'file'
        location: File path for the 'file' destination
    """
    channel: str
    destination: str
    location: Optional[str] = None


def parse_sink_spec(spec: str) -> SinkSpec:
    """Parse a sink spec string into a SinkSpec.

    Handles the compact positional syntax CHANNEL:DEST[:LOCATION].
    Everything after the second colon is the location, so drive
    letters and colons inside paths survive.

    Args:
        spec: Sink spec string like "combined:stdout" or "error:file:err.log"

    Returns:
        SinkSpec with parsed values

    Raises:
        SinkSpecError: Unknown channel or destination, or a file
            destination without a location
    """
    parts = spec.split(':', 2)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise SinkSpecError(f"expected CHANNEL:DEST[:LOCATION], got {spec!r}")

    channel = parts[0].strip().lower()
    dest = parts[1].strip().lower()
    location = parts[2] if len(parts) > 2 and parts[2] else None

    if channel not in CHANNELS:
        raise SinkSpecError(f"unknown channel {channel!r} in {spec!r}")
    if dest not in SINK_DESTINATIONS:
        raise SinkSpecError(
            f"unknown destination {dest!r} in {spec!r} "
            f"(expected one of: {', '.join(sorted(SINK_DESTINATIONS))})")
    if dest == 'file' and location is None:
        raise SinkSpecError(f"file destination needs a location: {spec!r}")

    return SinkSpec(channel=channel, destination=dest, location=location)


def format_channel_list() -> str:
    """Format the list of channels for display.

    Returns:
        Formatted string listing all channels in registry order
        with their descriptions.
    """
    lines = ["Available channels:"]
    max_name = max(len(name) for name in CHANNELS)
    for name in CHANNELS:
        desc = CHANNEL_DESCRIPTIONS.get(name, '')
        lines.append(f"  {name:<{max_name}}  {desc}")
    return "\n".join(lines)
