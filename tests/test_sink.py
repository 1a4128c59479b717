"""Tests for src.staleness.sink diagnostics.

Run with:
    pytest tests/test_sink.py --maxfail=1 -v --cov=src.staleness.sink --cov-report=term-missing
"""

from src.staleness import sink


def test_console_sink_hides_debug_unless_verbose(capsys):
    quiet = sink.ConsoleSink()
    quiet.debug("hidden")
    quiet.warning("careful")
    assert capsys.readouterr().out == "[warn] careful\n"

    loud = sink.ConsoleSink(verbose=True)
    loud.debug("shown")
    loud.error("broken")
    assert capsys.readouterr().out == "[debug] shown\n[error] broken\n"


def test_recording_sink_filters_by_level():
    recorder = sink.RecordingSink()
    recorder.debug("a")
    recorder.warning("b")
    assert recorder.messages() == ["a", "b"]
    assert recorder.messages("warning") == ["b"]


def test_debug_enabled_reads_runner_flags():
    assert sink.debug_enabled({"RUNNER_DEBUG": "1"})
    assert sink.debug_enabled({"ACTIONS_STEP_DEBUG": "TRUE"})
    assert not sink.debug_enabled({})


def test_info_is_always_printed_and_recorded(capsys):
    sink.ConsoleSink().info("summary line")
    assert capsys.readouterr().out == "summary line\n"

    recorder = sink.RecordingSink()
    recorder.info("summary line")
    assert recorder.records == [("info", "summary line")]
