"""
Trace suffix — call-site metadata appended to emitted lines.

A Trace is a plain value object (flags + file/line/function) that is
rendered on demand into a suffix string. Nothing here touches a stream.

Flag bits (combine with |):
    FILE      1   source file of the call site
    LINE      2   line number of the call site
    FUNCTION  4   enclosing function name
    DATE      8   local wall-clock time, YYYY-MM-DD HH:MM:SS

Rendering:
    render(0, ...)                       -> ""
    render(FILE | LINE, "a.c", 10, "f")  -> " [file: a.c line: 10]"
"""

from dataclasses import dataclass
from datetime import datetime
from enum import IntFlag
from typing import Optional


DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class TraceFlag(IntFlag):
    """Metadata bits selecting which fields a trace suffix carries."""
    FILE = 1
    LINE = 2
    FUNCTION = 4
    DATE = 8


FILE = TraceFlag.FILE
LINE = TraceFlag.LINE
FUNCTION = TraceFlag.FUNCTION
DATE = TraceFlag.DATE

# Every bit, in rendering order
ALL = FILE | LINE | FUNCTION | DATE

# Flags a new Log gives its six traced severity channels
DEFAULT_FLAGS = FILE | LINE | FUNCTION


def render(flags: int, file: str, line: int, function: str,
           now: Optional[datetime] = None) -> str:
    """Render a trace suffix for the given flags and call site.

    Fields are tested in fixed order FILE, LINE, FUNCTION, DATE and only
    the ones whose bit is set are emitted, each as ``label: value``.

    Args:
        flags: Bitmask of TraceFlag values (0 renders nothing)
        file: Source file name of the call site
        line: Line number of the call site
        function: Function name of the call site
        now: Time to render for DATE. None reads the local clock at call time.

    Returns:
        Suffix string with one leading space, or "" when flags is 0
    """
    if not flags:
        return ""

    fields = []
    if flags & FILE:
        fields.append(f"file: {file}")
    if flags & LINE:
        fields.append(f"line: {line}")
    if flags & FUNCTION:
        fields.append(f"function: {function}")
    if flags & DATE:
        if now is None:
            now = datetime.now()
        fields.append(f"date: {now.strftime(DATE_FORMAT)}")
    return " [" + " ".join(fields) + "]"


@dataclass(frozen=True)
class Trace:
    """Call-site metadata for one emitted line.

    Attributes:
        flags: TraceFlag bitmask selecting rendered fields
        file: Source file name
        line: Line number
        function: Function name
    """
    flags: int
    file: str
    line: int
    function: str

    def render(self, now: Optional[datetime] = None) -> str:
        """Render this trace as a suffix string. See module render()."""
        return render(self.flags, self.file, self.line, self.function, now=now)

    def __str__(self) -> str:
        return self.render()
