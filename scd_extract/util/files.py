"""
File utility functions.
"""

from pathlib import Path


def ensure_dir(path: str | Path) -> Path:
    """Ensure directory exists, creating if necessary."""
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def read_bytes(path: str | Path) -> bytes:
    """Read a document as raw bytes so the parser honours its declared encoding."""
    return Path(path).read_bytes()


def write_text(path: str | Path, content: str) -> None:
    """Write UTF-8 text with LF line endings, creating parent directories if needed."""
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with open(p, "w", encoding="utf-8", newline="\n") as f:
        f.write(content)
