"""Repository tree walk: flatten a GitHub directory hierarchy.

Directories are listed one at a time through the :class:`ContentsFetcher`
port.  Traversal uses an explicit stack of entry iterators rather than
recursion so deep repositories cannot exhaust the call stack; output is
pre-order (a directory precedes its descendants, siblings keep API order).
"""

from __future__ import annotations

import logging
from typing import Iterator

from repo_dossier.domain.entities import ContentEntry, RepoNode, TreeWalkResult
from repo_dossier.domain.ports.contents_fetcher import ContentsFetcher
from repo_dossier.domain.value_objects import RepoRef, normalize_repo_path

logger = logging.getLogger(__name__)

DEFAULT_MAX_DEPTH = 6


class TreeWalker:
    """Walk a repository from a starting path down to ``max_depth`` levels.

    Parameters
    ----------
    fetcher:
        Adapter that lists a single directory.
    max_depth:
        Deepest directory level that is still listed (the starting path is
        level 0).  Directories below it appear as nodes but are not expanded.
    """

    def __init__(self, fetcher: ContentsFetcher, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self._fetcher = fetcher
        self._max_depth = max_depth

    async def walk(self, owner: str, repo: str, path: str = "") -> TreeWalkResult:
        """Return every file and directory reachable from *path*."""
        ref = RepoRef.from_parts(owner, repo)
        start = normalize_repo_path(path)
        logger.info("Walking %s from '%s'", ref.full_name, start or "/")

        nodes: list[RepoNode] = []
        truncated = False

        root_entries = await self._fetcher.list_directory(ref, start)
        stack: list[tuple[Iterator[ContentEntry], int]] = [(iter(root_entries), 0)]

        while stack:
            entries, depth = stack[-1]
            entry = next(entries, None)
            if entry is None:
                stack.pop()
                continue

            if entry.type == "dir":
                nodes.append(RepoNode(path=entry.path, type="dir"))
                if depth + 1 > self._max_depth:
                    truncated = True
                    continue
                children = await self._fetcher.list_directory(ref, entry.path)
                stack.append((iter(children), depth + 1))
            elif entry.type == "file":
                nodes.append(RepoNode(path=entry.path, type="file", size=entry.size))

        if truncated:
            logger.warning(
                "Tree of %s truncated at depth %d", ref.full_name, self._max_depth
            )

        return TreeWalkResult(nodes=nodes, truncated=truncated)
