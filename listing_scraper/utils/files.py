"""
File I/O helpers for the runner: start-URL lists and JSON-lines batches.
"""

import json
from pathlib import Path
from typing import Any, Dict, Iterable, List, TextIO


def read_urls_from_file(path: Path) -> List[str]:
    """
    Read URLs from a text file, one per line.

    Filters out comments (lines starting with #) and duplicates, keeping
    first-seen order.

    Example:
        >>> urls = read_urls_from_file(Path("configs/urls.txt"))
        >>> urls[0]
        'https://www.linkedin.com/jobs/search/?keywords=python'
    """
    out: List[str] = []
    seen = set()
    for line in Path(path).read_text("utf-8").splitlines():
        s = line.strip()
        if not s or s.startswith("#") or s in seen:
            continue
        seen.add(s)
        out.append(s)
    return out


def write_jsonl(stream: TextIO, rows: Iterable[Dict[str, Any]]) -> int:
    """Write rows as JSON lines; returns the number written."""
    count = 0
    for row in rows:
        stream.write(json.dumps(row, ensure_ascii=False))
        stream.write("\n")
        count += 1
    stream.flush()
    return count
