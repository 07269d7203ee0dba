"""Scoped capture of process standard output."""

import io
from contextlib import redirect_stdout


class OutputCapture:
    """Redirects ``sys.stdout`` into a buffer for the life of a ``with`` block.

    The previous stream is restored on every exit path, including when the
    block raises. Only writes that go through ``sys.stdout`` are captured:
    child processes and C extensions writing straight to file descriptor 1,
    and anything written to ``sys.stderr``, pass through.
    """

    def __init__(self):
        self._buffer = io.StringIO()
        self._redirect = None

    def __enter__(self) -> "OutputCapture":
        self._redirect = redirect_stdout(self._buffer)
        self._redirect.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._redirect.__exit__(exc_type, exc, tb)
        self._redirect = None
        return False

    @property
    def output(self) -> str:
        return self._buffer.getvalue()
