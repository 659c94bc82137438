"""Tests for qlog.output — call-site functions, switches and termination."""

import inspect
import io
import os
import subprocess
import sys
from datetime import datetime

import pytest

from qlog import output
from qlog.config import Switches, init_switches
from qlog.log import Log, init_log
from qlog.output import (
    assert_that, debug, error, info, log_and_abort, log_and_exit, note, warn,
)
from qlog.trace import DATE, FILE, FUNCTION, LINE


def _next_line():
    """Line number of the statement after the caller's current line."""
    return inspect.currentframe().f_back.f_lineno + 1


@pytest.fixture
def aborts(monkeypatch):
    """Replace os.abort with a recorder for the duration of a test."""
    calls = []
    monkeypatch.setattr(output.os, "abort", lambda: calls.append(True))
    return calls


# =============================================================================
# Rendering
# =============================================================================

class TestPrefixes:
    """Each function writes its fixed prefix and a newline."""

    @pytest.mark.parametrize("func, expected", [
        (debug, "Debug message: x\n"),
        (note, "Note: x\n"),
        (warn, "Warning: x\n"),
        (error, "Error: x\n"),
        (info, "x\n"),
    ])
    def test_prefix(self, log_with_buf, buf, func, expected):
        func("x", log=log_with_buf)
        assert buf.getvalue() == expected

    def test_note_scenario(self, buf):
        """Fresh Log, in-memory sink on combined, flags zero on note."""
        log = Log()
        log.note_stream.set_trace_flags(0)
        log.combined_stream.attach(buf)
        note("x", log=log)
        assert buf.getvalue() == "Note: x\n"

    def test_parts_concatenated(self, log_with_buf, buf):
        note("2+2 is ", 2 + 2, log=log_with_buf)
        assert buf.getvalue() == "Note: 2+2 is 4\n"

    def test_no_parts(self, log_with_buf, buf):
        warn(log=log_with_buf)
        assert buf.getvalue() == "Warning: \n"

    def test_single_write_per_line(self, log):
        """Sinks get the whole line in one write() call."""
        writes = []

        class Recorder:
            def write(self, text):
                writes.append(text)

        log.combined_stream.attach(Recorder())
        error("a", "b", "c", log=log)
        assert writes == ["Error: abc\n"]

    def test_every_sink_gets_line_in_order(self, log):
        sinks = [io.StringIO() for _ in range(3)]
        for sink in sinks:
            log.error_stream.attach(sink)
        error("boom", log=log)
        for sink in sinks:
            assert sink.getvalue() == "Error: boom\n"

    def test_flushes_sinks(self, log):
        flushed = []

        class Flushing(io.StringIO):
            def flush(self):
                flushed.append(True)
                super().flush()

        log.combined_stream.attach(Flushing())
        note("x", log=log)
        assert flushed


class TestTraceSuffix:
    """The suffix uses the channel's flags and the caller's location."""

    def test_line_flag_on_error(self, log_with_buf, buf):
        log_with_buf.set_trace_flags(LINE)
        expected = _next_line()
        error("bad", log=log_with_buf)
        assert buf.getvalue() == f"Error: bad [line: {expected}]\n"

    def test_info_never_traced_by_registry_flags(self, log_with_buf, buf):
        log_with_buf.set_trace_flags(LINE | FILE | FUNCTION | DATE)
        info("plain", log=log_with_buf)
        assert buf.getvalue() == "plain\n"

    def test_function_name(self, log_with_buf, buf):
        log_with_buf.set_trace_flags(FUNCTION)
        note("x", log=log_with_buf)
        assert buf.getvalue() == "Note: x [function: test_function_name]\n"

    def test_file_name(self, log_with_buf, buf):
        log_with_buf.set_trace_flags(FILE)
        warn("x", log=log_with_buf)
        out = buf.getvalue()
        assert out.startswith("Warning: x [file: ")
        assert "test_output.py]" in out

    def test_date_uses_log_clock(self, log_with_buf, buf):
        log_with_buf.set_trace_flags(DATE)
        debug("x", log=log_with_buf)
        assert buf.getvalue() == "Debug message: x [date: 2024-03-09 14:05:07]\n"

    def test_date_read_per_line(self, buf):
        """The clock is consulted on every emission, not once per Log."""
        instants = iter([datetime(2024, 3, 9, 14, 5, 7),
                         datetime(2024, 3, 9, 14, 5, 9)])
        log = Log(clock=lambda: next(instants))
        log.set_trace_flags(DATE)
        log.combined_stream.attach(buf)
        note("first", log=log)
        note("second", log=log)
        assert buf.getvalue() == (
            "Note: first [date: 2024-03-09 14:05:07]\n"
            "Note: second [date: 2024-03-09 14:05:09]\n"
        )

    def test_per_channel_flags(self, log_with_buf, buf):
        log_with_buf.error_stream.set_trace_flags(FUNCTION)
        note("n", log=log_with_buf)
        error("e", log=log_with_buf)
        assert buf.getvalue() == (
            "Note: n\n"
            "Error: e [function: test_per_channel_flags]\n"
        )

    def test_stacklevel_reports_wrapper_caller(self, log_with_buf, buf):
        """stacklevel=2 attributes the line to the wrapper's caller."""
        log_with_buf.set_trace_flags(FUNCTION)

        def report(msg):
            warn(msg, log=log_with_buf, stacklevel=2)

        report("wrapped")
        assert buf.getvalue() == (
            "Warning: wrapped [function: test_stacklevel_reports_wrapper_caller]\n"
        )


class TestDefaultLog:
    """Without log=, functions use the process-default Log."""

    def test_uses_default(self, buf):
        log = init_log(init_func=None)
        log.set_trace_flags(0)
        log.combined_stream.attach(buf)
        note("via default")
        assert buf.getvalue() == "Note: via default\n"

    def test_lazy_default_writes_stdout(self, capsys):
        info("hello")
        assert capsys.readouterr().out == "hello\n"


# =============================================================================
# Switches
# =============================================================================

class TestSwitches:
    """Disabled functions are no-ops."""

    def test_disabled_channel_writes_nothing(self, log_with_buf, buf):
        init_switches(Switches.disabling(["note"]))
        note("hidden", log=log_with_buf)
        warn("shown", log=log_with_buf)
        assert buf.getvalue() == "Warning: shown\n"

    def test_no_log_disables_debug_note_warn(self, log_with_buf, buf):
        init_switches(Switches.disabling(["log"]))
        debug("d", log=log_with_buf)
        note("n", log=log_with_buf)
        warn("w", log=log_with_buf)
        error("e", log=log_with_buf)
        info("i", log=log_with_buf)
        assert buf.getvalue() == "Error: e\ni\n"

    def test_disabled_critical_does_not_exit(self, log_with_buf, buf):
        init_switches(Switches.disabling(["critical"]))
        log_and_exit("ignored", log=log_with_buf)
        assert buf.getvalue() == ""

    def test_disabled_fatal_does_not_abort(self, log_with_buf, buf, aborts):
        init_switches(Switches.disabling(["fatal"]))
        log_and_abort("ignored", log=log_with_buf)
        assert buf.getvalue() == ""
        assert aborts == []


# =============================================================================
# Termination
# =============================================================================

class TestLogAndExit:

    def test_writes_then_exits_1(self, log_with_buf, buf):
        with pytest.raises(SystemExit) as exc:
            log_and_exit("Could not create a log file.", log=log_with_buf)
        assert exc.value.code == 1
        assert buf.getvalue() == "Critical error: Could not create a log file.\n"

    def test_finally_blocks_run(self, log_with_buf):
        ran = []
        with pytest.raises(SystemExit):
            try:
                log_and_exit("x", log=log_with_buf)
            finally:
                ran.append(True)
        assert ran == [True]


class TestLogAndAbort:

    def test_writes_then_aborts(self, log_with_buf, buf, aborts):
        log_and_abort("Fatal exit.", log=log_with_buf)
        assert buf.getvalue() == "Fatal error: Fatal exit.\n"
        assert aborts == [True]

    def test_traced(self, log_with_buf, buf, aborts):
        log_with_buf.set_trace_flags(LINE)
        expected = _next_line()
        log_and_abort("f", log=log_with_buf)
        assert buf.getvalue() == f"Fatal error: f [line: {expected}]\n"


class TestAssertThat:

    def test_true_condition_is_silent(self, log_with_buf, buf, aborts):
        assert_that(1 + 1 == 2, "math works", log=log_with_buf)
        assert buf.getvalue() == ""
        assert aborts == []

    def test_false_condition_aborts(self, log_with_buf, buf, aborts):
        assert_that(False, "x must be positive", log=log_with_buf)
        assert buf.getvalue() == "Fatal error: assertion failed, x must be positive\n"
        assert aborts == [True]

    def test_reports_caller(self, log_with_buf, buf, aborts):
        log_with_buf.set_trace_flags(FUNCTION | LINE)
        expected = _next_line()
        assert_that([], "empty", log=log_with_buf)
        assert buf.getvalue() == (
            f"Fatal error: assertion failed, empty "
            f"[line: {expected} function: test_reports_caller]\n"
        )

    def test_disabled_assertions(self, log_with_buf, buf, aborts):
        init_switches(Switches(assertions=False))
        assert_that(False, "skipped", log=log_with_buf)
        assert buf.getvalue() == ""
        assert aborts == []


# =============================================================================
# Real process termination
# =============================================================================

def _run(code):
    return subprocess.run([sys.executable, "-c", code],
                          capture_output=True, text=True, timeout=60)


@pytest.mark.slow
class TestProcessTermination:
    """Run a child interpreter to observe exit status and abort."""

    def test_log_and_exit_status(self):
        result = _run(
            "from qlog import get_log, log_and_exit\n"
            "get_log().set_trace_flags(0)\n"
            "import atexit\n"
            "atexit.register(lambda: print('cleanup'))\n"
            "log_and_exit('stop')\n"
        )
        assert result.returncode == 1
        assert result.stdout == "Critical error: stop\ncleanup\n"

    @pytest.mark.skipif(os.name == "nt", reason="SIGABRT semantics are POSIX")
    def test_log_and_abort_signal(self):
        result = _run(
            "from qlog import get_log, log_and_abort\n"
            "get_log().set_trace_flags(0)\n"
            "import atexit\n"
            "atexit.register(lambda: print('cleanup'))\n"
            "log_and_abort('stop')\n"
        )
        assert result.returncode != 0
        assert result.stdout == "Fatal error: stop\n"
