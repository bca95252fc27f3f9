"""Dossier assembler: render a repository dossier as Markdown.

Pure string templating: the only input that is not a parameter is the
wall clock, used for the "generated at" line (and injectable via *now*).
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Mapping, Sequence

from repo_dossier.domain.entities import (
    CommitReview,
    DossierMeta,
    PackageSummary,
    SelectedFile,
)
from repo_dossier.services.dossier_template import DEFAULT_TEMPLATE, DossierTemplate

BRANCH = "┣"
LAST_BRANCH = "┗"
_PIPE_INDENT = "┃  "
_BLANK_INDENT = "   "

_SLUG_RE = re.compile(r"[^a-z0-9]+")
_BACKTICKS_RE = re.compile(r"`+")

_TrieNode = dict[str, "_TrieNode"]


# ── Public API ──────────────────────────────────────────────────────────────


def build_dossier_markdown(
    meta: DossierMeta,
    files: Sequence[SelectedFile],
    commits: Sequence[CommitReview] | None = None,
    all_paths: Sequence[str] | None = None,
    package_summary: PackageSummary | None = None,
    env_example: str | None = None,
    *,
    template: DossierTemplate = DEFAULT_TEMPLATE,
    now: datetime | None = None,
) -> str:
    """Assemble the full dossier document.

    Parameters
    ----------
    meta:
        Owner, name, description, branch and technology labels.
    files:
        Files to embed, in the order they should be numbered.
    commits:
        Commit reviews for the history table; ``None`` or empty renders a
        placeholder.
    all_paths:
        Flat path list for the structure tree.  Falls back to the paths of
        *files* when ``None``.
    package_summary:
        Parsed ``package.json`` summary, if one was selected.
    env_example:
        Raw ``.env.example`` content, if one was selected.
    template:
        Static wording and lookup tables.
    now:
        Timestamp for the "generated at" line; defaults to the local time.
    """
    t = template
    generated_at = (now or datetime.now()).strftime(t.generated_at_format)

    description = meta.description or t.empty_value
    branch = meta.default_branch or t.default_branch
    technologies = [*meta.languages, *t.base_technologies, *meta.tech_stack_extra]

    tree_paths = sorted(
        all_paths if all_paths is not None else [f.path for f in files], key=name_order
    )
    tree_text = build_ascii_tree(tree_paths)

    file_sections = "\n\n".join(
        render_file_section(i, f, t.language_tags) for i, f in enumerate(files, start=1)
    )

    bodies = [
        "\n".join(
            [
                f"- {t.repository_label}: **{meta.full_name}**",
                f"- {t.description_label}: {description}",
                f"- {t.default_branch_label}: {branch}",
            ]
        ),
        fence("text", tree_text or t.empty_value),
        file_sections or t.no_files,
        render_commit_table(commits, t) if commits else t.no_commits,
        "\n".join(f"- {tech}" for tech in technologies) or f"- {t.empty_value}",
        fence("dotenv", env_example) if env_example else t.not_provided,
        render_package_summary(package_summary, t) if package_summary else t.not_provided,
        "\n".join(f"- {item}" for item in t.checklist),
    ]

    header = "\n".join(
        [
            f"# {t.title.format(full_name=meta.full_name, owner=meta.owner, repo=meta.repo)}",
            "",
            f"**{t.generated_at_label}:** {generated_at}",
            "",
            f"> **{t.description_label}:** {description}",
            ">",
            f"> **{t.default_branch_label}:** {branch}",
            ">",
            f"> **{t.technologies_label}:** {', '.join(technologies) or t.empty_value}",
        ]
    )

    toc = f"## {t.contents_heading}\n\n" + "\n".join(
        f"- [{n}. {s.title}](#{s.anchor})" for n, s in enumerate(t.sections, start=1)
    )

    sections = [
        f"## {n}. {s.title}  <a id=\"{s.anchor}\"></a>\n\n{body}"
        for n, (s, body) in enumerate(zip(t.sections, bodies), start=1)
    ]

    return "\n\n---\n\n".join([header, toc, *sections]) + "\n"


def build_ascii_tree(paths: Iterable[str]) -> str:
    """Render slash-delimited *paths* as a box-drawing tree.

    Children are sorted at every level; the last child of each level gets
    ``┗`` and its siblings ``┣``.
    """
    root: _TrieNode = {}
    for path in paths:
        node = root
        for part in path.split("/"):
            if part:
                node = node.setdefault(part, {})

    lines: list[str] = []
    _render_level(root, "", lines)
    return "\n".join(lines)


def name_order(name: str) -> tuple[str, str]:
    """Sort key: case-insensitive first, the raw name breaks ties."""
    return name.casefold(), name


def slug(text: str) -> str:
    """Lower-case *text* and collapse every non-alphanumeric run into ``-``."""
    return _SLUG_RE.sub("-", text.lower())


def guess_language(path: str, table: Mapping[str, str]) -> str:
    """Fence language tag for *path*, or ``""`` when the extension is unknown."""
    name = path.rsplit("/", maxsplit=1)[-1]
    if "." not in name:
        return ""
    return table.get(name.rsplit(".", maxsplit=1)[-1].lower(), "")


def fence(lang: str, content: str) -> str:
    """Wrap *content* in a code fence longer than any backtick run inside it."""
    longest = max((len(run) for run in _BACKTICKS_RE.findall(content)), default=0)
    ticks = "`" * max(3, longest + 1)
    body = content[:-1] if content.endswith("\n") else content
    return f"{ticks}{lang}\n{body}\n{ticks}"


def render_file_section(
    index: int, file: SelectedFile, language_tags: Mapping[str, str]
) -> str:
    return "\n\n".join(
        [
            f"### {index}. {file.path}",
            f'<a id="{slug(file.path)}"></a>',
            fence(guess_language(file.path, language_tags), file.content),
        ]
    )


def render_commit_table(
    commits: Sequence[CommitReview], template: DossierTemplate = DEFAULT_TEMPLATE
) -> str:
    """One Markdown table row per commit, in input order."""
    header = "| " + " | ".join(template.commit_columns) + " |"
    rows = [header, "|---|---|---|---:|---:|---|"]
    for c in commits:
        first_line = next(iter(c.message.splitlines()), "")
        message = first_line.replace("|", "\\|")
        flags = ", ".join(c.flags) or template.empty_value
        rows.append(
            f"| {c.date.strftime(template.commit_date_format)} "
            f"| [{c.sha[:7]}]({c.url}) "
            f"| {message} "
            f"| +{c.additions}/-{c.deletions} "
            f"| {c.files_changed} "
            f"| {flags} |"
        )
    return "\n".join(rows)


def render_package_summary(
    pkg: PackageSummary, template: DossierTemplate = DEFAULT_TEMPLATE
) -> str:
    t = template
    return "\n\n".join(
        [
            f"**{t.package_name_label}:** {pkg.name or t.empty_value}  \n"
            f"**{t.package_version_label}:** {pkg.version or t.empty_value}",
            _dependency_table(t.runtime_dependencies_title, pkg.dependencies, t),
            _dependency_table(t.dev_dependencies_title, pkg.dev_dependencies, t),
        ]
    )


# ── Helpers ─────────────────────────────────────────────────────────────────


def _render_level(children: _TrieNode, prefix: str, lines: list[str]) -> None:
    names = sorted(children, key=name_order)
    for idx, name in enumerate(names):
        is_last = idx == len(names) - 1
        lines.append(f"{prefix}{LAST_BRANCH if is_last else BRANCH} {name}")
        if children[name]:
            _render_level(
                children[name],
                prefix + (_BLANK_INDENT if is_last else _PIPE_INDENT),
                lines,
            )


def _dependency_table(
    title: str, deps: Mapping[str, str], template: DossierTemplate
) -> str:
    if not deps:
        return f"**{title}**\n\n_{template.empty_value}_"
    package_col, version_col = template.dependency_columns
    rows = [f"| {package_col} | {version_col} |", "|---|---|"]
    rows.extend(f"| {name} | {deps[name]} |" for name in sorted(deps, key=name_order))
    return f"**{title}**\n\n" + "\n".join(rows)
