"""get_git_info(): sha and branch of the repository holding the site sources."""

from __future__ import annotations

import logging
import subprocess
from dataclasses import dataclass
from pathlib import Path

__all__ = ["GitInfo", "get_git_info"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GitInfo:
    """Revision of the site sources.  Both fields are None outside a repository."""

    sha: str | None = None
    branch: str | None = None

    def to_dict(self) -> dict[str, str | None]:
        return {"sha": self.sha, "branch": self.branch}


def _git(path: Path, *args: str) -> str | None:
    try:
        result = subprocess.run(
            ["git", *args],
            cwd=str(path),
            capture_output=True,
            text=True,
            check=True,
            timeout=10,
        )
    except (OSError, subprocess.SubprocessError) as exc:
        logger.warning("git %s failed in %s: %s", " ".join(args), path, exc)
        return None
    return result.stdout.strip() or None


def get_git_info(path: str | Path) -> GitInfo:
    """Return the HEAD sha and branch of the repository containing ``path``.

    A detached HEAD reports ``branch=None``.  Missing ``git`` binaries and
    paths outside a repository are logged and yield an empty GitInfo.
    """
    path = Path(path)
    logger.debug("Fetching Git info of %s", path)

    sha = _git(path, "rev-parse", "HEAD")
    if sha is None:
        return GitInfo()

    branch = _git(path, "rev-parse", "--abbrev-ref", "HEAD")
    if branch == "HEAD":
        branch = None
    return GitInfo(sha=sha, branch=branch)
