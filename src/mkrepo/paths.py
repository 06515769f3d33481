from __future__ import annotations

import os
from pathlib import Path

HOME_SHORTHAND = "~"


def normalize(path: str) -> str:
    """Rewrite every separator the host recognizes to ``os.sep``."""
    if os.altsep:
        path = path.replace(os.altsep, os.sep)
    return path


def expand_home(value: str, home: Path) -> Path:
    """Expand a leading ``~/`` against ``home``.

    Only the ``~/rest`` form is supported. A bare ``~`` and the ``~user``
    form raise ``ValueError``.
    """
    if not value.startswith(HOME_SHORTHAND):
        return Path(value)
    rest = normalize(value[len(HOME_SHORTHAND) :])
    if not rest.startswith(os.sep) or not rest.strip(os.sep):
        raise ValueError(f"Unsupported home directory shorthand: {value!r}")
    return home / rest.lstrip(os.sep)
