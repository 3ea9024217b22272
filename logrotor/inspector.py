"""Inspector logic: list, read, and search a log file and its archives."""

import os

from logrotor.enumerator import list_archives


def list_rotation_files(target_path: str) -> list[str]:
    """Return the target (if present) followed by its archives, newest first."""
    target_path = os.path.abspath(target_path)
    files = [target_path] if os.path.isfile(target_path) else []
    files.extend(reversed(list_archives(target_path)))
    return files


def read_file(path: str, encoding: str = "utf-8") -> str:
    """Read a log or archive file."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, "r", encoding=encoding, errors="replace") as f:
        return f.read()


def search_files(target_path: str, text: str) -> list[tuple[str, int, str]]:
    """Search for text across the target and its archives. Returns (path, line_num, line) tuples."""
    results = []
    for path in list_rotation_files(target_path):
        try:
            with open(path, "r", encoding="utf-8", errors="replace") as f:
                for line_num, line in enumerate(f, 1):
                    if text in line:
                        results.append((path, line_num, line.rstrip("\n")))
        except OSError:
            continue
    return results


def human_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
