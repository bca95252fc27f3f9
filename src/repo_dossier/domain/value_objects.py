"""Value objects: self-validating domain primitives."""

from __future__ import annotations

import re
from dataclasses import dataclass

from repo_dossier.domain.exceptions import InvalidRepositoryError

_NAME_RE = re.compile(r"^[A-Za-z0-9\-_.]+$")


@dataclass(frozen=True, slots=True)
class RepoRef:
    """Validated ``owner/repo`` pair.

    Rejects names GitHub would never accept (empty, slashes, spaces) so
    they never reach an API URL.
    """

    owner: str
    repo: str

    @classmethod
    def from_parts(cls, owner: str, repo: str) -> RepoRef:
        """Strip and validate the two path parameters."""
        owner = owner.strip()
        repo = repo.strip()
        for label, value in (("owner", owner), ("repository", repo)):
            if not _NAME_RE.match(value):
                raise InvalidRepositoryError(f"Invalid {label} name: '{value}'.")
        return cls(owner=owner, repo=repo)

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


def normalize_repo_path(path: str) -> str:
    """Strip surrounding slashes and empty segments from a repository path."""
    return "/".join(part for part in path.split("/") if part)
