"""
LogStream — the stream-multiplexing engine.

A LogStream forwards every write, synchronously and verbatim, to each
currently attached sink in attachment order. A sink is anything with a
``write(str)`` method: a text file, sys.stdout, io.StringIO, or another
LogStream. Attaching streams to streams builds a directed forwarding
graph; a single write fans out transitively across it.

Usage::

    buf = io.StringIO()
    s = LogStream('note')
    s.attach(buf)
    s.attach(sys.stdout)
    s.write("hello\\n")              # reaches buf, then stdout
    s << "2+2 is " << 4 << "\\n"     # chained insertion
    print("also works", file=s)

Ownership: streams never own their sinks. Detaching, or dropping the
stream entirely, does not close anything.

Cycles: attaching a stream to itself or forming A -> B -> A makes the
next write recurse until RecursionError. attach() does not look at the
graph unless check_cycles=True is passed.

Threading: none. Concurrent writers need external locking.
"""

from typing import Any, List, Optional, Sequence

from .errors import AttachmentCycleError


class LogStream:
    """Fan-out text stream with a per-stream trace flag bitmask.

    Attributes:
        name: Label used in repr() and cycle reports only
    """

    def __init__(self, name: str = '', trace_flags: int = 0):
        self.name = name
        self._sinks: List[Any] = []
        self._trace_flags = int(trace_flags)

    # ------------------------------------------------------------------
    # Attachment
    # ------------------------------------------------------------------
    def attach(self, sink: Any, check_cycles: bool = False) -> None:
        """Append a sink. Duplicates are allowed and each gets its own copy.

        Args:
            sink: Object with a write(str) method
            check_cycles: Walk the graph first and refuse an edge that
                would close a cycle

        Raises:
            AttachmentCycleError: check_cycles is set and sink can
                already reach this stream
        """
        if check_cycles:
            path = _find_path(sink, self)
            if path is not None:
                raise AttachmentCycleError([self] + path)
        self._sinks.append(sink)

    def detach(self, sink: Any) -> None:
        """Remove the first attachment of sink, matched by identity.

        One occurrence per call. Unattached sinks are ignored.
        """
        for i, attached in enumerate(self._sinks):
            if attached is sink:
                del self._sinks[i]
                return

    @property
    def sinks(self) -> tuple:
        """Snapshot of attached sinks in attachment order."""
        return tuple(self._sinks)

    # ------------------------------------------------------------------
    # Trace flags
    # ------------------------------------------------------------------
    @property
    def trace_flags(self) -> int:
        """Trace metadata bitmask applied to lines emitted on this stream."""
        return self._trace_flags

    @trace_flags.setter
    def trace_flags(self, flags: int) -> None:
        self._trace_flags = int(flags)

    def set_trace_flags(self, flags: int) -> None:
        self.trace_flags = flags

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def write(self, text: str) -> int:
        """Write text to every attached sink, in attachment order.

        A sink that raises stops the fan-out: sinks after it in the list
        do not receive this write. The exception propagates.

        Returns:
            Number of characters written (file-object protocol)
        """
        for sink in self._sinks:
            sink.write(text)
        return len(text)

    def flush(self) -> None:
        """Flush every attached sink that supports it."""
        for sink in self._sinks:
            flush = getattr(sink, 'flush', None)
            if flush is not None:
                flush()

    def __lshift__(self, value: Any) -> 'LogStream':
        self.write(str(value))
        return self

    # ------------------------------------------------------------------
    # Graph inspection
    # ------------------------------------------------------------------
    def find_cycle(self) -> Optional[List['LogStream']]:
        """Find a forwarding cycle reachable from this stream.

        Returns:
            Streams along the cycle, first and last being the same stream,
            or None if the reachable graph is acyclic
        """
        return _find_cycle_from(self, [], set())

    def __repr__(self) -> str:
        return (f"LogStream({self.name!r}, sinks={len(self._sinks)}, "
                f"trace_flags={self._trace_flags})")


# =============================================================================
# Graph helpers
# =============================================================================

def _find_path(start: Any, target: 'LogStream') -> Optional[List[Any]]:
    """Depth-first search for a forwarding path from start to target.

    Returns the nodes on the path (start ... target) or None.
    """
    stack = [(start, [start])]
    seen = set()
    while stack:
        node, path = stack.pop()
        if node is target:
            return path
        if not isinstance(node, LogStream) or id(node) in seen:
            continue
        seen.add(id(node))
        for sink in reversed(node._sinks):
            stack.append((sink, path + [sink]))
    return None


def _find_cycle_from(node: 'LogStream', path: Sequence['LogStream'],
                     done: set) -> Optional[List['LogStream']]:
    # done holds streams whose whole subgraph is known to be acyclic
    for i, visited in enumerate(path):
        if visited is node:
            return list(path[i:]) + [node]
    if id(node) in done:
        return None
    path = list(path) + [node]
    for sink in node._sinks:
        if isinstance(sink, LogStream):
            cycle = _find_cycle_from(sink, path, done)
            if cycle is not None:
                return cycle
    done.add(id(node))
    return None
