"""Raw LZMA1 compression backends.

PAY by square streams carry no LZMA header, so every producer and scanner
shares the same fixed filter settings. Both backends here emit identical
bytes for identical input; which one runs is a deployment choice, never a
fallback.
"""
from __future__ import annotations

import logging
import lzma
import os
import shutil
import subprocess
import threading
from typing import TYPE_CHECKING, Protocol

from .services.errors import err_compression_failed, err_compression_unavailable, err_invalid_configuration

if TYPE_CHECKING:
    from .config import Settings

logger = logging.getLogger("paybysquare.compression")

LZMA_LITERAL_CONTEXT_BITS = 3
LZMA_LITERAL_POSITION_BITS = 0
LZMA_POSITION_BITS = 2
LZMA_DICT_SIZE = 128 * 1024

LZMA_FILTERS = [
    {
        "id": lzma.FILTER_LZMA1,
        "lc": LZMA_LITERAL_CONTEXT_BITS,
        "lp": LZMA_LITERAL_POSITION_BITS,
        "pb": LZMA_POSITION_BITS,
        "dict_size": LZMA_DICT_SIZE,
    }
]

XZ_ARGUMENTS = ("--format=raw", "--lzma1=lc=3,lp=0,pb=2,dict=128KiB", "-c", "-")

COMMON_XZ_PATHS = (
    "/usr/bin/xz",
    "/usr/local/bin/xz",
    "/opt/homebrew/bin/xz",
    "/opt/local/bin/xz",
    "/bin/xz",
)


class Compressor(Protocol):
    name: str

    def compress(self, data: bytes) -> bytes:
        ...


def _is_executable(path: str) -> bool:
    return os.path.isfile(path) and os.access(path, os.X_OK)


def locate_xz() -> str:
    """Find an xz binary in the usual install locations or on ``PATH``."""

    for candidate in COMMON_XZ_PATHS:
        if _is_executable(candidate):
            return candidate
    found = shutil.which("xz")
    if found:
        return found
    raise err_compression_unavailable(
        "xz binary not found; install xz or set XZ_PATH to the binary location"
    )


class LzmaCompressor:
    """In-process compression through liblzma."""

    name = "lzma"

    def compress(self, data: bytes) -> bytes:
        try:
            return lzma.compress(data, format=lzma.FORMAT_RAW, filters=LZMA_FILTERS)
        except lzma.LZMAError as exc:
            raise err_compression_failed(f"lzma compression failed: {exc}") from exc


class XzCompressor:
    """Compression by piping through an external ``xz`` process."""

    name = "xz"

    def __init__(self, binary_path: str | None = None, timeout: float | None = None):
        if binary_path is not None and not _is_executable(binary_path):
            raise err_invalid_configuration(f"Configured xz binary not found or not executable: {binary_path}")
        self._binary_path = binary_path
        self._lock = threading.Lock()
        self.timeout = timeout

    def resolve_binary(self) -> str:
        """Return the xz path, looking it up on first use only."""

        path = self._binary_path
        if path is not None:
            return path
        with self._lock:
            if self._binary_path is None:
                self._binary_path = locate_xz()
                logger.info("xz binary resolved", extra={"xz_path": self._binary_path})
            return self._binary_path

    def compress(self, data: bytes) -> bytes:
        binary = self.resolve_binary()
        try:
            completed = subprocess.run(
                [binary, *XZ_ARGUMENTS],
                input=data,
                capture_output=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise err_compression_failed(f"xz did not finish within {self.timeout} seconds") from exc
        except OSError as exc:
            raise err_compression_unavailable(f"Failed to execute xz binary {binary}: {exc}") from exc

        diagnostics = completed.stderr.decode("utf-8", errors="replace").strip()
        if completed.returncode != 0:
            raise err_compression_failed(f"xz exited with status {completed.returncode}: {diagnostics}")
        if not completed.stdout and diagnostics:
            raise err_compression_failed(f"xz compression failed: {diagnostics}")
        return completed.stdout


def build_compressor(settings: Settings) -> Compressor:
    """Create the compression backend named by configuration."""

    if settings.compression_backend == "xz":
        return XzCompressor(settings.xz_path, timeout=settings.xz_timeout_seconds)
    return LzmaCompressor()
