"""
Tests for pipeline.progress
"""

import logging

import pytest

from storyboard_toolkit.pipeline.progress import (
    FileOutputHandoff,
    LoggingProgressSink,
    RecordingProgressSink,
)


def test_recording_sink_keeps_messages_and_warnings():
    sink = RecordingProgressSink()
    assert sink.last is None

    sink.report("Loading .osz file...")
    sink.report("Warning: Missing referenced image sb/a.png")
    sink.report("Done!")

    assert sink.messages == [
        "Loading .osz file...",
        "Warning: Missing referenced image sb/a.png",
        "Done!",
    ]
    assert sink.warnings == ["Warning: Missing referenced image sb/a.png"]
    assert sink.last == "Done!"


def test_logging_sink_logs_warnings_at_warning(caplog):
    sink = LoggingProgressSink(logging.getLogger("test.progress"))
    with caplog.at_level(logging.INFO, logger="test.progress"):
        sink.report("Done!")
        sink.report("Warning: Missing referenced image sb/a.png")

    levels = [(r.levelno, r.getMessage()) for r in caplog.records]
    assert levels == [
        (logging.INFO, "Done!"),
        (logging.WARNING, "Warning: Missing referenced image sb/a.png"),
    ]


def test_file_handoff_writes_into_output_dir(tmp_path):
    handoff = FileOutputHandoff(tmp_path / "out")
    handoff.deliver(b"zip bytes", "song.osz")

    target = tmp_path / "out" / "song.osz"
    assert target.read_bytes() == b"zip bytes"
    assert handoff.written == [(target, 9)]


def test_file_handoff_strips_directories_from_name(tmp_path):
    handoff = FileOutputHandoff(tmp_path)
    handoff.deliver(b"x", "../escape.osz")
    assert (tmp_path / "escape.osz").exists()


def test_file_handoff_refuses_existing_file(tmp_path):
    (tmp_path / "song.osz").write_bytes(b"old")
    handoff = FileOutputHandoff(tmp_path)
    with pytest.raises(FileExistsError):
        handoff.deliver(b"new", "song.osz")
    assert (tmp_path / "song.osz").read_bytes() == b"old"


def test_file_handoff_overwrite(tmp_path):
    (tmp_path / "song.osz").write_bytes(b"old")
    FileOutputHandoff(tmp_path, overwrite=True).deliver(b"new", "song.osz")
    assert (tmp_path / "song.osz").read_bytes() == b"new"
