"""Static content for dossiers: headings, anchors, placeholders, lookup tables.

Everything that is fixed text rather than data lives here so a caller can
swap in another wording (or another language) by passing a different
:class:`DossierTemplate` to the builder.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

# Extension (lower-case, without dot) → fenced-code language tag.
DEFAULT_LANGUAGE_TAGS: Mapping[str, str] = MappingProxyType(
    {
        "ts": "ts",
        "mts": "ts",
        "cts": "ts",
        "tsx": "tsx",
        "js": "js",
        "mjs": "js",
        "cjs": "js",
        "jsx": "jsx",
        "py": "python",
        "json": "json",
        "md": "md",
        "markdown": "md",
        "yml": "yaml",
        "yaml": "yaml",
        "toml": "toml",
        "env": "dotenv",
        "css": "css",
        "html": "html",
        "sql": "sql",
        "sh": "bash",
    }
)

DEFAULT_CHECKLIST: tuple[str, ...] = (
    "Improve file organization and remove duplication.",
    "Refactor critical components and standardize patterns.",
    "Performance optimizations (lazy loading, caching, memoization).",
    "Ensure full responsiveness (mobile-first).",
    "Review error handling and user-facing error messages.",
    "Cover critical flows with automated tests.",
    "Reinforce good practices: granular, descriptive commits.",
)


@dataclass(frozen=True, slots=True)
class Section:
    """A numbered dossier section and the anchor it is linked by."""

    title: str
    anchor: str


DEFAULT_SECTIONS: tuple[Section, ...] = (
    Section("General Information", "general-information"),
    Section("Folder and File Structure", "folder-and-file-structure"),
    Section("Selected Source Files", "selected-source-files"),
    Section("Commit History", "commit-history"),
    Section("Technologies", "technologies"),
    Section("Environment Variables (.env.example)", "environment-variables-envexample"),
    Section("Dependencies (package.json)", "dependencies-packagejson"),
    Section(
        "Open Questions, Critical Points and Improvements",
        "open-questions-critical-points-and-improvements",
    ),
)


@dataclass(frozen=True)
class DossierTemplate:
    """Wording and lookup tables used by ``build_dossier_markdown``."""

    title: str = "Project Dossier: {full_name}"
    generated_at_label: str = "Generated at"
    description_label: str = "Description"
    default_branch_label: str = "Default branch"
    technologies_label: str = "Languages/Technologies"
    repository_label: str = "Repository"
    contents_heading: str = "Contents"
    sections: tuple[Section, ...] = DEFAULT_SECTIONS

    empty_value: str = "—"
    no_files: str = "_No files selected._"
    no_commits: str = "_No commits included in this range._"
    not_provided: str = "_Not found or not selected._"

    commit_columns: tuple[str, ...] = ("Date", "SHA", "Message", "+/-", "Files", "Flags")
    package_name_label: str = "Name"
    package_version_label: str = "Version"
    dependency_columns: tuple[str, str] = ("Package", "Version")
    runtime_dependencies_title: str = "Dependencies"
    dev_dependencies_title: str = "DevDependencies"

    default_branch: str = "main"
    base_technologies: tuple[str, ...] = ()
    checklist: tuple[str, ...] = DEFAULT_CHECKLIST
    language_tags: Mapping[str, str] = field(default_factory=lambda: DEFAULT_LANGUAGE_TAGS)

    generated_at_format: str = "%Y-%m-%d %H:%M:%S"
    commit_date_format: str = "%Y-%m-%d %H:%M"

    def __post_init__(self) -> None:
        if len(self.sections) != 8:
            raise ValueError("a dossier template needs exactly 8 sections")
        if len(self.commit_columns) != 6:
            raise ValueError("commit_columns needs exactly 6 headers")


DEFAULT_TEMPLATE = DossierTemplate()
