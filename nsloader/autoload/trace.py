"""Call trace formatting for autoload diagnostics."""

import traceback

# Frames from these files carry no information for the reader of a diagnostic
_SKIPPED_FILES = ("<frozen importlib._bootstrap>", "<frozen importlib._bootstrap_external>")


def format_call_trace(skip: int = 0) -> str:
    """Format the current call stack, innermost caller first.

    Each frame is one line of ``file\\t[line]\\tfunction``, indented by one
    more ``|`` per level of depth.

    Args:
        skip: Additional innermost frames to drop (the caller of this function
              is always included unless skipped here)
    """
    frames = traceback.extract_stack()[:-1]
    if skip:
        frames = frames[:-skip]

    lines = []
    depth = "|"
    for frame in reversed(frames):
        if frame.filename in _SKIPPED_FILES:
            continue
        lines.append(f" {depth}{frame.filename}\t[{frame.lineno}]\t{frame.name}")
        depth += "|"
    return "\n".join(lines)
