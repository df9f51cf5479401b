"""core/tuning.py — Data-driven tuning constants.

All gameplay numbers live in ``data/tuning.toml`` and are loaded once
at startup.  Any system can read a value with::

    from core.tuning import get
    speed = get("ai.wolf", "chase_speed", 0.04)

The default passed to ``get`` is authoritative when the file or the key
is missing, so headless tests work without loading anything.

Hot-reload: call ``reload()`` to re-read the file.  In the viewer, F4.
"""

from __future__ import annotations
from pathlib import Path

try:
    import tomllib                         # Python 3.11+
except ModuleNotFoundError:
    import tomli as tomllib                # pip install tomli


_data: dict = {}
_path: Path | None = None


def load(path: str | Path | None = None) -> None:
    """Load (or reload) tuning constants from *path*.

    If *path* is ``None``, default to ``data/tuning.toml`` relative to
    the project root (one level above ``core/``).
    """
    global _data, _path

    if path is None:
        root = Path(__file__).resolve().parent.parent
        path = root / "data" / "tuning.toml"
    else:
        path = Path(path)

    _path = path

    if not path.exists():
        print(f"[TUNING] {path} not found, using defaults")
        _data = {}
        return

    with open(path, "rb") as f:
        _data = tomllib.load(f)

    count = _count_leaves(_data)
    print(f"[TUNING] Loaded {count} values from {path}")


def reload() -> None:
    """Re-read the tuning file from disk (hot-reload)."""
    load(_path)


def clear() -> None:
    """Forget every loaded value so only in-code defaults apply."""
    global _data
    _data = {}


def get(section: str, key: str, default=None):
    """Read a tuning value.

    *section* uses dot-notation to traverse nested tables, e.g.
    ``"ai.wolf"`` looks up ``[ai.wolf]``.

    >>> get("ai.wolf", "kill_distance", 0.5)
    0.5
    """
    node = _data
    for part in section.split("."):
        if isinstance(node, dict):
            node = node.get(part)
        else:
            return default
        if node is None:
            return default
    if isinstance(node, dict):
        return node.get(key, default)
    return default


def section(section_path: str) -> dict:
    """Return an entire section dict (shallow copy), or empty dict.

    Nested sub-tables are left out so the result can be splatted into a
    settings dataclass.
    """
    node = _data
    for part in section_path.split("."):
        if isinstance(node, dict):
            node = node.get(part)
        else:
            return {}
        if node is None:
            return {}
    if isinstance(node, dict):
        return {k: v for k, v in node.items() if not isinstance(v, dict)}
    return {}


def _count_leaves(d: dict, _n: int = 0) -> int:
    for v in d.values():
        if isinstance(v, dict):
            _n = _count_leaves(v, _n)
        else:
            _n += 1
    return _n
