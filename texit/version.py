from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import NamedTuple, Optional

from .constants import EditorConstants


class BuildInfo(NamedTuple):
    commit: Optional[str]
    dirty: bool


def _run_git(args: list[str], cwd: Path) -> Optional[str]:
    try:
        out = subprocess.check_output(["git", *args], cwd=str(cwd), stderr=subprocess.DEVNULL)
        return out.decode().strip() or None
    except (subprocess.CalledProcessError, FileNotFoundError, OSError):
        return None


def _from_git_repo() -> Optional[BuildInfo]:
    here = Path(__file__).resolve().parent
    root = _run_git(["rev-parse", "--show-toplevel"], cwd=here)
    if not root or not os.path.isdir(root):
        return None
    commit = _run_git(["rev-parse", "HEAD"], cwd=Path(root))
    status = _run_git(["status", "--porcelain"], cwd=Path(root))
    return BuildInfo(commit=commit, dirty=bool(status))


def _from_embedded_file() -> Optional[BuildInfo]:
    # Generated at build time by the hatch build hook
    try:
        from . import _build_info  # type: ignore
    except ImportError:
        return None
    commit = getattr(_build_info, "COMMIT", None)
    return BuildInfo(commit=commit, dirty=False) if commit else None


def get_build_info() -> BuildInfo:
    # Priority: live git repo -> embedded file -> unknown
    for getter in (_from_git_repo, _from_embedded_file):
        info = getter()
        if info and info.commit:
            return info
    return BuildInfo(commit=None, dirty=False)


def get_version_string() -> str:
    info = get_build_info()
    if not info.commit:
        return EditorConstants.VERSION
    dirty_suffix = "-dirty" if info.dirty else ""
    return f"{EditorConstants.VERSION} ({info.commit[:7]}{dirty_suffix})"
