"""Transports that retrieve one URL into one file.

A fetcher is any callable ``fetcher(url, dest) -> int``. Zero means the
response body is on disk; it says nothing about the body being a grib file.
Non-zero statuses follow curl's exit codes so both transports share one
fault table for log messages.
"""

from __future__ import annotations

import errno
import shutil
import subprocess
from enum import IntEnum
from typing import TYPE_CHECKING, Protocol

from aiohttp import (
    ClientConnectorError,
    ClientPayloadError,
    ConnectionTimeoutError,
    ServerDisconnectedError,
)
from tiny_retriever import download
from tiny_retriever.exceptions import ServiceError

from nomads_fetch.utils.logging import logger

if TYPE_CHECKING:
    from pathlib import Path

__all__ = [
    "KNOWN_FAULTS",
    "CurlFetcher",
    "FetchStatus",
    "Fetcher",
    "TinyRetrieverFetcher",
    "classify_error",
    "describe_status",
    "make_fetcher",
]


class Fetcher(Protocol):
    def __call__(self, url: str, dest: Path) -> int: ...


class FetchStatus(IntEnum):
    """Fetch results, numbered after the matching curl exit codes."""

    OK = 0
    ERROR = 1
    CONNECT_FAILED = 7
    PARTIAL_FILE = 18
    TIMED_OUT = 28
    RECV_ERROR = 56


KNOWN_FAULTS: dict[int, str] = {
    FetchStatus.CONNECT_FAILED: "connection timed out",
    FetchStatus.PARTIAL_FILE: "connection closed with data remaining",
    FetchStatus.TIMED_OUT: "operation timed out",
    FetchStatus.RECV_ERROR: "connection reset",
}


def describe_status(status: int) -> str:
    """Human readable fault class of a non-zero fetch status."""
    return KNOWN_FAULTS.get(status, "unexpected fault")


def classify_error(error: BaseException) -> FetchStatus:
    """Map a failed :func:`tiny_retriever.download` to its curl-numbered status.

    tiny_retriever wraps the transport errors it retries (``OSError``,
    timeouts, HTTP status errors) in a ``ServiceError`` chained to the
    original, so the cause is classified when there is one. Disconnects and
    payload errors are not wrapped and arrive as they are.
    """
    cause = error.__cause__ if isinstance(error, ServiceError) else None
    cause = cause or error
    if isinstance(cause, (ClientConnectorError, ConnectionTimeoutError)):
        return FetchStatus.CONNECT_FAILED
    if isinstance(cause, TimeoutError):
        return FetchStatus.TIMED_OUT
    if isinstance(cause, (ServerDisconnectedError, ConnectionResetError)) or (
        isinstance(cause, OSError) and cause.errno == errno.ECONNRESET
    ):
        return FetchStatus.RECV_ERROR
    if isinstance(cause, ClientPayloadError):
        return FetchStatus.PARTIAL_FILE
    # raised by tiny_retriever itself when Content-Length is not met
    if isinstance(cause, ServiceError) and "does not match expected size" in str(cause):
        return FetchStatus.PARTIAL_FILE
    if isinstance(cause, ConnectionError):
        return FetchStatus.CONNECT_FAILED
    return FetchStatus.ERROR


class TinyRetrieverFetcher:
    """Fetch with :func:`tiny_retriever.download`.

    Each call makes a single request (``retries=1``); the worker pool owns
    the retry budget.

    Parameters
    ----------
    timeout : int, optional
        Per-request timeout in seconds, defaults to 300.
    chunk_size : int, optional
        Streaming chunk size in bytes, defaults to 1 MiB.
    """

    def __init__(self, timeout: int = 300, chunk_size: int = 1024 * 1024) -> None:
        self.timeout = timeout
        self.chunk_size = chunk_size

    def __call__(self, url: str, dest: Path) -> int:
        try:
            download(
                [url],
                [dest],
                timeout=self.timeout,
                raise_status=True,
                chunk_size=self.chunk_size,
                retries=1,
            )
        except Exception as e:
            logger.debug("Download of %s failed: %s", dest.name, e)
            return classify_error(e)

        if not dest.exists() or dest.stat().st_size == 0:
            return FetchStatus.PARTIAL_FILE
        return FetchStatus.OK


class CurlFetcher:
    """Fetch by running the ``curl`` executable.

    Parameters
    ----------
    timeout : int, optional
        Passed to ``curl --max-time``, defaults to 300 seconds.
    executable : str, optional
        Name or path of the curl binary.
    """

    def __init__(self, timeout: int = 300, executable: str = "curl") -> None:
        self.timeout = timeout
        self.executable = executable

    def __call__(self, url: str, dest: Path) -> int:
        cmd = [
            self.executable,
            "--silent",
            "--show-error",
            "--max-time",
            str(self.timeout),
            "-o",
            str(dest),
            url,
        ]
        result = subprocess.run(cmd, capture_output=True, text=True, check=False)
        if result.returncode != 0 and result.stderr:
            logger.debug("curl: %s", result.stderr.strip())
        return result.returncode


def make_fetcher(backend: str, timeout: int = 300) -> Fetcher:
    """Build the fetcher named by a ``backend`` config value.

    Raises
    ------
    ValueError
        If ``backend`` is unknown or the curl executable is missing.
    """
    if backend == "tiny_retriever":
        return TinyRetrieverFetcher(timeout=timeout)
    if backend == "curl":
        if shutil.which("curl") is None:
            raise ValueError("backend 'curl' requires the curl executable on PATH")
        return CurlFetcher(timeout=timeout)
    raise ValueError(f"Unknown fetch backend: {backend!r}")
