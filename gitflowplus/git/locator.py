"""Locate the git executable on the host machine."""

from __future__ import annotations

import os
import shutil
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

from gitflowplus.exceptions import GitNotFoundError
from gitflowplus.logging import get_logger

logger = get_logger("git.locator")

_VERSION_PREFIX = "git version "


@dataclass(frozen=True)
class GitExecutable:
    """A located git binary and its self-reported version."""

    path: str
    version: str


def parse_version(raw: str) -> str:
    """Strip the ``git version`` prefix from ``git --version`` output."""
    return raw.strip().removeprefix(_VERSION_PREFIX)


def find_specific_git(path: str, timeout: int = 10) -> GitExecutable:
    """Probe ``path`` by running ``<path> --version``.

    Raises:
        GitNotFoundError: If the binary cannot be run or exits non-zero
    """
    try:
        result = subprocess.run(
            [path, "--version"],
            capture_output=True,
            text=True,
            timeout=timeout,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise GitNotFoundError(f"git not found at {path}", {"path": path}) from e

    if result.returncode != 0:
        raise GitNotFoundError(f"git not found at {path}", {"path": path})

    return GitExecutable(path=path, version=parse_version(result.stdout))


def _find_git_darwin() -> GitExecutable:
    path = shutil.which("git")
    if not path:
        raise GitNotFoundError("git not found")

    if path == "/usr/bin/git":
        # /usr/bin/git is a shim that prompts for Xcode tools when they are missing
        try:
            xcode = subprocess.run(["xcode-select", "-p"], capture_output=True, timeout=10)
        except (OSError, subprocess.TimeoutExpired) as e:
            raise GitNotFoundError("git not found") from e
        if xcode.returncode == 2:
            raise GitNotFoundError("git not found")

    return find_specific_git(path)


def _find_system_git_win32(base: str | None) -> GitExecutable:
    if not base:
        raise GitNotFoundError("git not found")
    return find_specific_git(str(Path(base) / "Git" / "cmd" / "git.exe"))


def _find_github_git_win32() -> GitExecutable:
    local_app_data = os.environ.get("LOCALAPPDATA")
    if not local_app_data:
        raise GitNotFoundError("git not found")

    github = Path(local_app_data) / "GitHub"
    try:
        children = sorted(p.name for p in github.iterdir())
    except OSError as e:
        raise GitNotFoundError("git not found") from e

    portable = [c for c in children if c.startswith("PortableGit")]
    if not portable:
        raise GitNotFoundError("git not found")
    return find_specific_git(str(github / portable[0] / "cmd" / "git.exe"))


def _find_git_win32() -> GitExecutable:
    candidates = [
        lambda: _find_system_git_win32(os.environ.get("ProgramW6432")),
        lambda: _find_system_git_win32(os.environ.get("ProgramFiles(x86)")),
        lambda: _find_system_git_win32(os.environ.get("ProgramFiles")),
        lambda: find_specific_git("git"),
        _find_github_git_win32,
    ]
    for candidate in candidates:
        try:
            return candidate()
        except GitNotFoundError:
            continue
    raise GitNotFoundError("git not found")


def find_git(hint: str | None = None) -> GitExecutable:
    """Locate git, trying ``hint`` first and then platform-specific locations.

    Args:
        hint: Optional path to a git binary (e.g. from settings)

    Returns:
        The located executable

    Raises:
        GitNotFoundError: If no git binary could be found
    """
    if hint:
        try:
            found = find_specific_git(hint)
            logger.debug(f"Using git from hint {hint}")
            return found
        except GitNotFoundError:
            logger.warning(f"git path hint {hint} is not usable, searching system")

    if sys.platform == "darwin":
        found = _find_git_darwin()
    elif sys.platform == "win32":
        found = _find_git_win32()
    else:
        found = find_specific_git("git")

    logger.debug(f"Found git {found.version} at {found.path}")
    return found
