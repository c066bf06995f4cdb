"""Sandboxed file access - ensures stored files stay within their data directory."""

from pathlib import Path

MAX_FILENAME_BYTES = 255


class SandboxError(Exception):
    pass


def resolve_sandboxed_path(base_dir: Path, relative_path: str) -> Path:
    """Resolve a relative path within base_dir. Raises SandboxError if path escapes."""
    root = base_dir.resolve()
    try:
        resolved = (root / relative_path).resolve()
    except (ValueError, OSError) as e:
        raise SandboxError(f"Path {relative_path!r} cannot be resolved: {e}") from e

    if resolved == root or not resolved.is_relative_to(root):
        raise SandboxError(f"Path '{relative_path}' escapes the sandbox")

    return resolved


def resolve_sandboxed_file(base_dir: Path, filename: str) -> Path:
    """Resolve a file name that must sit directly inside base_dir."""
    if len(filename.encode("utf-8", errors="replace")) > MAX_FILENAME_BYTES:
        raise SandboxError("File name is too long")
    resolved = resolve_sandboxed_path(base_dir, filename)
    if resolved.parent != base_dir.resolve():
        raise SandboxError(f"'{filename}' is not a plain file name")
    return resolved
