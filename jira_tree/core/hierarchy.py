"""Child resolution and depth-bounded tree construction for Jira issues.

Children of an issue come from three places:

* inline subtasks declared on the issue itself (batch fetched with ``key IN``)
* issues whose ``parent`` is the issue
* issues whose ``"Epic Link"`` is the issue

The last two are asked for in a single JQL query. Results are merged in
discovery order with duplicates dropped.
"""

from __future__ import annotations

import logging

from .config import CHILDREN_SEARCH_FIELDS, EPIC_LINK_FIELD_NAME
from .errors import JiraTreeError, QueryFailure, TransportFailure
from .jira_client import JiraAPI
from .mappers import map_issue
from .models import IssueModel

logger = logging.getLogger(__name__)


def subtask_jql(keys: list[str]) -> str:
    return f"key IN ({','.join(keys)})"


def children_jql(parent_key: str) -> str:
    return f'parent = {parent_key} OR "{EPIC_LINK_FIELD_NAME}" = {parent_key}'


def _search(api: JiraAPI, jql: str, parent_key: str) -> list[IssueModel]:
    logger.debug("Resolving children of %s with %s", parent_key, jql)
    try:
        return [map_issue(item) for item in api.search(jql, fields=list(CHILDREN_SEARCH_FIELDS))]
    except JiraTreeError as exc:
        raise QueryFailure(jql, str(exc), issue_key=parent_key) from exc
    except ValueError as exc:
        raise QueryFailure(jql, f"malformed issue in results: {exc}", issue_key=parent_key) from exc


def fetch_issue(api: JiraAPI, issue_key: str) -> IssueModel:
    """Fetch and map one issue; a payload that cannot be mapped is a transport failure."""
    raw = api.fetch_issue_raw(issue_key)
    try:
        return map_issue(raw)
    except ValueError as exc:
        raise TransportFailure(f"Malformed payload for {issue_key}: {exc}") from exc


def resolve_children(api: JiraAPI, parent: IssueModel) -> list[IssueModel]:
    """Return the direct children of ``parent``, subtasks first, each key once.

    Any failed query aborts resolution; no partial list is returned.
    """
    children: list[IssueModel] = []
    found: set[str] = set()

    subtask_keys = parent.subtask_keys
    if subtask_keys:
        found.update(subtask_keys)
        children.extend(_search(api, subtask_jql(subtask_keys), parent.key))

    for issue in _search(api, children_jql(parent.key), parent.key):
        if issue.key in found:
            continue
        children.append(issue)
        found.add(issue.key)

    return children


def build_tree(api: JiraAPI, issue: IssueModel, max_depth: int) -> None:
    """Expand ``issue`` in place down to ``max_depth`` levels of children.

    Issues reachable through several parents are expanded once per parent.
    """
    if max_depth <= 0:
        issue.children = []
        return

    children = resolve_children(api, issue)
    issue.children = []
    for child in children:
        build_tree(api, child, max_depth - 1)
        issue.children.append(child)


def fetch_ancestors(api: JiraAPI, issue: IssueModel, max_depth: int) -> list[IssueModel]:
    """Walk the parent (or epic) references upward, nearest ancestor first.

    Stops after ``max_depth`` levels, which also bounds the walk if the
    hierarchy loops back on itself.
    """
    ancestors: list[IssueModel] = []
    current = issue
    while len(ancestors) < max_depth:
        key = current.ancestor_key
        if not key:
            break
        logger.debug("Fetching ancestor %s of %s", key, current.key)
        current = fetch_issue(api, key)
        ancestors.append(current)
    return ancestors
