"""Exception types raised by qlog.

Sink write failures are never wrapped; they propagate from the sink
unchanged. These types cover qlog's own validation paths only.
"""


class QlogError(Exception):
    """Base class for qlog errors."""


class AttachmentCycleError(QlogError):
    """Attaching a sink would close a forwarding cycle.

    Only raised when the cycle check is requested explicitly; plain
    attach() never inspects the graph.

    Attributes:
        cycle: Streams forming the cycle, starting and ending at the same stream
    """

    def __init__(self, cycle):
        self.cycle = list(cycle)
        path = " -> ".join(getattr(s, "name", repr(s)) for s in self.cycle)
        super().__init__(f"attachment would create a cycle: {path}")


class UnknownChannelError(QlogError, KeyError):
    """A channel name is not one of the registry's eight streams."""

    def __init__(self, name):
        self.name = name
        super().__init__(name)

    def __str__(self):
        return f"unknown channel: {self.name!r}"


class SinkSpecError(QlogError, ValueError):
    """A sink spec or trace-flag spec string could not be parsed."""
