from __future__ import annotations

"""Reporter backends and the task() helper."""
import io

import pytest

from gamedat.logging import configure_logging, get_logger, step
from gamedat.reporting import (
    JsonLinesReporter,
    PlainReporter,
    RichReporter,
    TaskStatus,
    set_reporter,
    set_verbosity,
    task,
)


def test_plain_reporter_task_lines():
    stream = io.StringIO()
    rep = PlainReporter(stream=stream, use_color=False)
    rep.start_task("t", "Extract entries", total=2)
    rep.advance("t", current_item="a.bin")
    rep.advance("t")
    rep.end_task("t", entries=2)
    out = stream.getvalue().splitlines()
    assert out[0] == "   · Extract entries: a.bin (1/2)"
    assert out[1] == "   · Extract entries: item#2 (2/2)"
    assert out[2].startswith(" ✔ Extract entries 2/2 (")
    assert out[2].endswith("[entries=2]")


def test_task_marks_failure():
    stream = io.StringIO()
    set_reporter(PlainReporter(stream=stream, use_color=False))
    with pytest.raises(RuntimeError):
        with task("t", "Create archive", total=1):
            raise RuntimeError("boom")
    assert "✖ Create archive" in stream.getvalue()


def test_jsonl_task_events():
    stream = io.StringIO()
    set_reporter(JsonLinesReporter(stream=stream))
    with task("t", "Create archive", total=1) as stats:
        stats["bytes"] = 10
    out = stream.getvalue()
    assert '"event": "task_end"' in out
    assert '"bytes": 10' in out


def test_logging_routes_through_reporter():
    stream = io.StringIO()
    set_reporter(PlainReporter(stream=stream, use_color=False))
    set_verbosity(1)
    configure_logging(1)
    step("inspecting")
    get_logger().info("opened archive")
    get_logger().debug("layout details")
    get_logger().warning("odd entry")
    out = stream.getvalue()
    assert "  -> inspecting" in out
    assert "INFO: opened archive" in out
    assert "VERB1: layout details" in out
    assert "WARN: odd entry" in out


def test_rich_reporter_progress():
    from rich.console import Console

    console = Console(file=io.StringIO(), force_terminal=False, width=100)
    rep = RichReporter(console=console, transient=False)
    rep.start_task("t", "Create archive", total=2)
    rep.advance("t", current_item="a.bin")
    rep.advance("t", current_item="b.bin")
    rep.end_task("t", TaskStatus.SUCCESS, entries=2)
    assert rep.progress is None
    assert "Create archive 2/2" in console.file.getvalue()
