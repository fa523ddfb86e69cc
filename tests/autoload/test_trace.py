"""Tests for call trace formatting."""

from nsloader.autoload.trace import format_call_trace


def _outer():
    return _inner()


def _inner():
    return format_call_trace()


def test_innermost_frame_first():
    lines = _outer().splitlines()

    assert lines[0].endswith("\t_inner")
    assert lines[1].endswith("\t_outer")
    assert lines[2].endswith("\ttest_innermost_frame_first")


def test_depth_markers_grow():
    lines = _outer().splitlines()

    assert lines[0].startswith(" |")
    assert lines[1].startswith(" ||")
    assert lines[2].startswith(" |||")
    assert __file__ in lines[0]


def test_skip_drops_innermost_frames():
    def helper():
        return format_call_trace(skip=1)

    lines = helper().splitlines()

    assert lines[0].endswith("\ttest_skip_drops_innermost_frames")


def test_line_numbers_included():
    line = format_call_trace().splitlines()[0]

    filename, lineno, function = line.strip().split("\t")
    assert lineno.startswith("[") and lineno.endswith("]")
    assert int(lineno[1:-1]) > 0
    assert function == "test_line_numbers_included"
