"""Named-pipe helpers shared by the cooperating processes."""

from __future__ import annotations

import errno
import os
import threading
from collections.abc import Iterator

READ_CHUNK = 1023
POLL_INTERVAL = 0.1


def ensure_fifo(path: str | os.PathLike) -> None:
    """Create a FIFO at ``path`` unless one already exists."""
    try:
        os.mkfifo(path, 0o666)
    except FileExistsError:
        pass


def _encode(data: str | bytes) -> bytes:
    return data.encode("utf-8") if isinstance(data, str) else data


def _send(path: str | os.PathLike, data: str | bytes, flags: int) -> bool:
    try:
        fd = os.open(path, os.O_WRONLY | flags)
    except OSError:
        return False
    try:
        os.write(fd, _encode(data))
    except OSError as exc:
        if exc.errno not in (errno.EAGAIN, errno.EPIPE):
            raise
        return False
    finally:
        os.close(fd)
    return True


def send_nonblocking(path: str | os.PathLike, data: str | bytes) -> bool:
    """Write ``data`` to the pipe if a reader is present.

    Returns False when the pipe cannot be opened, e.g. nobody reads it.
    """
    return _send(path, data, os.O_NONBLOCK)


def send_blocking(path: str | os.PathLike, data: str | bytes) -> bool:
    """Write ``data`` to the pipe, waiting for a reader to open it.

    Returns False when the pipe cannot be opened.
    """
    return _send(path, data, 0)


def read_messages(path: str | os.PathLike, stop: threading.Event) -> Iterator[str]:
    """Yield each chunk of text read from the pipe until ``stop`` is set."""
    fd = os.open(path, os.O_RDONLY | os.O_NONBLOCK)
    try:
        while not stop.is_set():
            try:
                chunk = os.read(fd, READ_CHUNK)
            except BlockingIOError:
                chunk = b""
            if chunk:
                yield chunk.decode("utf-8", errors="replace")
            else:
                stop.wait(POLL_INTERVAL)
    finally:
        os.close(fd)