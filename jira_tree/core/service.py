"""TreeService: orchestrates fetching the root issue and resolving its hierarchy."""

from __future__ import annotations

import logging
from collections.abc import Callable

from .config import DEFAULT_SEARCH_LIMIT, DEFAULT_TREE_DEPTH, SEARCH_RESULT_FIELDS
from .errors import QueryFailure
from .hierarchy import build_tree, fetch_ancestors, fetch_issue
from .jira_client import JiraAPI
from .mappers import map_issue, map_project
from .models import IssueModel, IssueTree, ProjectModel

ProgressCallback = Callable[[str, int | None, int | None], None]

logger = logging.getLogger(__name__)


class TreeService:
    def __init__(self, api: JiraAPI):
        self.api = api

    def fetch_issue(self, issue_key: str) -> IssueModel:
        """Fetch a single issue with its full field set."""
        return fetch_issue(self.api, issue_key.strip().upper())

    def search_issues(self, jql: str, limit: int | None = DEFAULT_SEARCH_LIMIT) -> list[IssueModel]:
        """Run an ad-hoc JQL query; ``limit`` of ``None`` or ``0`` returns every match."""
        jql = jql.strip()
        if not jql:
            raise ValueError("JQL query cannot be empty")
        raw = self.api.search(jql, fields=list(SEARCH_RESULT_FIELDS), limit=limit or None)
        try:
            issues = [map_issue(item) for item in raw]
        except ValueError as exc:
            raise QueryFailure(jql, f"malformed issue in results: {exc}") from exc
        logger.info("JQL %r matched %s issue(s)", jql, len(issues))
        return issues

    def fetch_project(self, project_key: str) -> ProjectModel:
        return map_project(self.api.fetch_project_raw(project_key.strip().upper()))

    def build_tree(
        self,
        root_key: str,
        max_depth: int = DEFAULT_TREE_DEPTH,
        *,
        with_ancestors: bool = False,
        progress: ProgressCallback | None = None,
    ) -> IssueTree:
        """Fetch ``root_key`` and expand its descendants down to ``max_depth``.

        Parameters
        ----------
        root_key : str
            Key of the issue at the root of the tree.
        max_depth : int
            Levels of children to expand; ``0`` returns the bare root.
        with_ancestors : bool
            Also walk up to ``max_depth`` levels of parents, for reverse views.
        progress : callback, optional
            Progress reporter.

        Any failure aborts the whole build; no partial tree is returned.
        """
        if progress:
            progress(f"Fetching {root_key}", None, None)
        root = self.fetch_issue(root_key)

        ancestors: list[IssueModel] = []
        if with_ancestors:
            if progress:
                progress(f"Walking up the hierarchy above {root.key}", None, None)
            ancestors = fetch_ancestors(self.api, root, max_depth)

        if progress:
            progress(f"Resolving children of {root.key} (depth {max_depth})", None, None)
        build_tree(self.api, root, max_depth)

        tree = IssueTree(root=root, ancestors=ancestors, max_depth=max_depth)
        logger.info(
            "Built tree for %s: %s node(s), %s ancestor(s), depth %s",
            root.key,
            tree.node_count(),
            len(ancestors),
            max_depth,
        )
        return tree
