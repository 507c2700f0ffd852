from __future__ import annotations

"""Fail-fast grep keeping the trade finder engine deterministic.

Engine code must not read the host clock or draw randomness: identical
inputs have to produce identical candidate lists in identical order.

Run:
  python -m tools.check_determinism [path ...]

Exit code:
  0 - clean
  1 - forbidden pattern found
"""

import os
import re
import sys
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple


FORBIDDEN_PATTERNS = [
    # datetime/date
    r"\bdate\.today\s*\(",
    r"\bdatetime\.now\s*\(",
    r"\bdatetime\.utcnow\s*\(",
    # time
    r"\btime\.time\s*\(",
    r"\btime\.monotonic\s*\(",
    r"\btime\.perf_counter\s*\(",
    # randomness
    r"^\s*import\s+random\b",
    r"^\s*from\s+random\s+import\b",
    r"\buuid\.uuid[14]\s*\(",
    r"\bsecrets\.",
]

EXCLUDE_DIRS = {
    ".git",
    "__pycache__",
    ".venv",
    "venv",
    "dist",
    "build",
}

DEFAULT_TARGETS = ("trade_finder",)


def iter_py_files(root: Path) -> Iterable[Path]:
    if root.is_file():
        if root.suffix == ".py":
            yield root
        return
    for dirpath, dirnames, filenames in os.walk(root):
        dn = Path(dirpath)
        dirnames[:] = sorted(d for d in dirnames if d not in EXCLUDE_DIRS)
        for fn in sorted(filenames):
            if fn.endswith(".py"):
                yield dn / fn


def scan(paths: Sequence[Path]) -> List[Tuple[Path, int, str, str]]:
    compiled = [re.compile(p) for p in FORBIDDEN_PATTERNS]
    hits: List[Tuple[Path, int, str, str]] = []
    for base in paths:
        for fp in iter_py_files(base):
            text = fp.read_text(encoding="utf-8")
            for i, line in enumerate(text.splitlines(), start=1):
                for rx in compiled:
                    if rx.search(line):
                        hits.append((fp, i, line.strip(), rx.pattern))
    return hits


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = list(sys.argv[1:] if argv is None else argv)
    repo_root = Path(__file__).resolve().parents[1]
    paths = [Path(a) for a in args] if args else [repo_root / t for t in DEFAULT_TARGETS]

    hits = scan(paths)
    if not hits:
        print("[OK] No clock or randomness usage found.")
        return 0

    print("[FAIL] Non-deterministic calls found:\n")
    for fp, ln, line, pat in hits:
        print(f"- {fp}:{ln}: {line}")
        print(f"  matched: {pat}")
    print("\nFix: pass dates (e.g. current_year) in explicitly; break ties by input order.")
    return 1


if __name__ == "__main__":
    raise SystemExit(main())
