"""Value types naming branches, tags and remotes."""

from __future__ import annotations

from dataclasses import dataclass

# Markers some git versions print instead of a branch name when HEAD is detached
_DETACHED_MARKERS = ("no branch", "(no branch)")


def _listing_lines(output: str) -> list[str]:
    """Split git listing output into stripped, de-duplicated, non-empty lines."""
    seen: dict[str, None] = {}
    for line in output.replace("\r\n", "\n").split("\n"):
        name = line.strip()
        if name and name not in seen:
            seen[name] = None
    return list(seen)


@dataclass(frozen=True)
class RemoteRef:
    """A git remote."""

    name: str

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class BranchRef:
    """A branch by name, either local (``feature/x``) or remote-qualified (``origin/feature/x``)."""

    name: str

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Branch name must not be empty")

    def remote_at(self, remote: RemoteRef) -> BranchRef:
        """Return the remote-qualified ref for this local branch."""
        return BranchRef(f"{remote.name}/{self.name}")

    def strip_prefix(self, prefix: str) -> str:
        return self.name.removeprefix(prefix)

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse_listing(cls, output: str) -> list[BranchRef]:
        """Parse ``git branch`` / ``git branch -r`` output.

        Strips the current-branch marker, drops detached-HEAD placeholders and
        symbolic ``origin/HEAD -> origin/master`` entries, and de-duplicates
        while preserving first-seen order.
        """
        names: dict[str, None] = {}
        for line in _listing_lines(output):
            name = line.removeprefix("* ").strip()
            if name in _DETACHED_MARKERS or name.startswith("(HEAD detached"):
                continue
            if " -> " in name:
                continue
            names.setdefault(name, None)
        return [cls(name) for name in names]


@dataclass(frozen=True)
class TagRef:
    """A tag by name."""

    name: str

    def __str__(self) -> str:
        return self.name

    @classmethod
    def parse_listing(cls, output: str) -> list[TagRef]:
        """Parse ``git tag -l`` output."""
        return [cls(name) for name in _listing_lines(output)]


@dataclass(frozen=True)
class Branch:
    """A branch resolved against the live repository.

    Never cached: callers re-query whenever consistency must be checked.
    """

    ref: BranchRef
    commit: str
    upstream: str | None = None

    @property
    def name(self) -> str:
        return self.ref.name
