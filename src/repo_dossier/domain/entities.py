"""Domain entities: pure data structures with no external dependencies."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Mapping

from repo_dossier.domain.exceptions import InvalidInputError

NodeType = Literal["file", "dir"]


@dataclass(frozen=True, slots=True)
class ContentEntry:
    """A single entry from the GitHub contents API (file, dir, symlink, submodule)."""

    path: str
    type: str
    size: int = 0


@dataclass(frozen=True, slots=True)
class RepoNode:
    """A node of the flattened repository tree."""

    path: str
    type: NodeType
    size: int | None = None


@dataclass(frozen=True, slots=True)
class TreeWalkResult:
    """Nodes produced by a tree walk, in pre-order."""

    nodes: list[RepoNode] = field(default_factory=list)
    truncated: bool = False


@dataclass(frozen=True, slots=True)
class DossierMeta:
    """Repository facts shown at the top of a dossier."""

    owner: str
    repo: str
    description: str | None = None
    default_branch: str | None = None
    languages: tuple[str, ...] = ()
    tech_stack_extra: tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


@dataclass(frozen=True, slots=True)
class SelectedFile:
    """A file chosen for inclusion in the dossier, with its full text."""

    path: str
    content: str


@dataclass(frozen=True, slots=True)
class CommitReview:
    """Stored review of one commit, produced by an upstream analysis step."""

    sha: str
    message: str
    date: datetime
    url: str
    additions: int = 0
    deletions: int = 0
    files_changed: int = 0
    flags: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class PackageSummary:
    """Name, version and dependency maps of a ``package.json``."""

    name: str | None = None
    version: str | None = None
    dependencies: Mapping[str, str] = field(default_factory=dict)
    dev_dependencies: Mapping[str, str] = field(default_factory=dict)

    @classmethod
    def from_package_json(cls, text: str) -> PackageSummary:
        """Parse the raw content of a ``package.json`` file."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"package.json is not valid JSON: {exc}") from exc

        if not isinstance(data, dict):
            raise InvalidInputError("package.json must contain a JSON object.")

        return cls(
            name=data.get("name"),
            version=data.get("version"),
            dependencies=_string_map(data.get("dependencies")),
            dev_dependencies=_string_map(data.get("devDependencies")),
        )


def _string_map(raw: object) -> dict[str, str]:
    if not isinstance(raw, dict):
        return {}
    return {str(k): str(v) for k, v in raw.items()}


@dataclass(frozen=True, slots=True)
class PdfDocument:
    """A rendered PDF ready to be sent as an attachment."""

    filename: str
    content: bytes
