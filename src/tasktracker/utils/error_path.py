"""Get the path to the error handler module."""

import traceback

__all__ = ["get_error_path"]


def get_error_path(err: Exception) -> str:
    """Extract formatted source location from an exception traceback.

    Args:
        err: The exception containing traceback information

    Returns:
        A string in the format "filename:line (fn:function_name)", with the
        filename relative to the tasktracker package when possible.
    """
    frames = traceback.extract_tb(err.__traceback__)
    if not frames:
        return "unknown"
    filename, line, func, _ = frames[-1]

    if "tasktracker" in filename:
        filename = "tasktracker" + filename.split("tasktracker")[-1]
    return f"{filename}:{line} (fn:{func})"
