"""File handler module: directory listing, encoding-aware read/write.

Provides the file I/O infrastructure for the sync core.  All sync
functions are plain blocking calls; async wrappers compose them via
run_sync() so the engine can await each filesystem step.
"""

from pathlib import Path

from charset_normalizer import from_bytes

from context_sync.core.async_utils import run_sync

MARKDOWN_SUFFIX = ".md"

# =============================================================================
# Directory listing
# =============================================================================


def list_markdown_files(directory: Path) -> list[str]:
    """Return the names of ``.md`` files directly inside *directory*.

    The listing is non-recursive: subdirectories and their contents are
    ignored.  Names are sorted so results are deterministic.

    Args:
        directory: Directory to scan.

    Returns:
        Sorted list of filenames.  Empty if *directory* does not exist.
    """
    if not directory.is_dir():
        return []
    return sorted(
        entry.name
        for entry in directory.iterdir()
        if entry.is_file() and entry.name.endswith(MARKDOWN_SUFFIX)
    )


def count_markdown_files(directory: Path) -> int:
    """Return the number of ``.md`` files directly inside *directory*."""
    return len(list_markdown_files(directory))


# =============================================================================
# File Read/Write
# =============================================================================


def decode_bytes(raw: bytes) -> tuple[str, str]:
    """Decode raw bytes with automatic encoding detection.

    Uses charset-normalizer to detect encoding.  Defaults to UTF-8 for
    empty input or when detection fails.

    Args:
        raw: Bytes to decode.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    if not raw:
        return ("", "utf-8")

    result = from_bytes(raw).best()
    if result is None:
        encoding = "utf-8"
        content = raw.decode(encoding, errors="replace")
    else:
        encoding = result.encoding
        # ascii is a strict subset of utf-8
        if encoding == "ascii":
            encoding = "utf-8"
        content = str(result)
    return (content, encoding)


def read_file_with_encoding(path: Path) -> tuple[str, str]:
    """Read a file with automatic encoding detection.

    Args:
        path: Path to the file to read.

    Returns:
        Tuple of (content_string, detected_encoding).
    """
    return decode_bytes(path.read_bytes())


def read_file_bytes(path: Path) -> bytes | None:
    """Return the raw bytes of *path*, or ``None`` if it is not a file."""
    if not path.is_file():
        return None
    return path.read_bytes()


def write_file(
    path: Path, content: str | bytes, encoding: str = "utf-8"
) -> int:
    """Write content to a file, creating parent directories as needed.

    Args:
        path: Path to the output file.
        content: String or bytes to write.  Bytes are written verbatim.
        encoding: Encoding used for string content (default: utf-8).

    Returns:
        Number of bytes written.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = content if isinstance(content, bytes) else content.encode(encoding)
    path.write_bytes(encoded)
    return len(encoded)


# =============================================================================
# Async Wrappers
# =============================================================================


async def list_markdown_files_async(directory: Path) -> list[str]:
    """Async wrapper around list_markdown_files()."""
    return await run_sync(list_markdown_files, directory)


async def read_file_bytes_async(path: Path) -> bytes | None:
    """Async wrapper around read_file_bytes()."""
    return await run_sync(read_file_bytes, path)


async def write_file_async(
    path: Path, content: str | bytes, encoding: str = "utf-8"
) -> int:
    """Async wrapper: write file, creating parent directories.

    Args:
        path: Path to the output file.
        content: String or bytes to write.
        encoding: Encoding for string content (default: utf-8).

    Returns:
        Number of bytes written.
    """
    return await run_sync(write_file, path, content, encoding)


async def path_exists_async(path: Path) -> bool:
    """Async wrapper around Path.exists()."""
    return await run_sync(path.exists)
