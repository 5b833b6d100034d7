"""ASCII tree rendering for resolved issue hierarchies."""

from __future__ import annotations

from collections.abc import Callable

from jira_tree.core.config import (
    BRANCH,
    LABEL_STYLE_COMPACT,
    LABEL_STYLE_VERBOSE,
    LAST_BRANCH,
    PIPE_INDENT,
    SPACE_INDENT,
    UNASSIGNED,
)
from jira_tree.core.models import IssueModel, IssueTree

LabelFormatter = Callable[[IssueModel], str]


def format_compact(issue: IssueModel) -> str:
    """``KEY: summary [status]``, dropping the bracket when status is empty."""
    status = f" [{issue.status}]" if issue.status else ""
    return f"{issue.key}: {issue.summary or ''}{status}"


def format_verbose(issue: IssueModel) -> str:
    return (
        f"{issue.key}: {issue.summary or ''} [{issue.status or ''}] "
        f"({issue.issuetype or ''}) - {issue.assignee or UNASSIGNED}"
    )


LABEL_STYLES: dict[str, LabelFormatter] = {
    LABEL_STYLE_COMPACT: format_compact,
    LABEL_STYLE_VERBOSE: format_verbose,
}


def label_formatter(verbose: bool = False) -> LabelFormatter:
    return LABEL_STYLES[LABEL_STYLE_VERBOSE if verbose else LABEL_STYLE_COMPACT]


def _split(tree: IssueTree | IssueModel | None) -> tuple[IssueModel | None, list[IssueModel]]:
    if tree is None:
        return None, []
    if isinstance(tree, IssueTree):
        return tree.root, list(tree.ancestors)
    return tree, []


def _child_prefix(prefix: str, depth: int, is_last: bool) -> str:
    if depth <= 0:
        return ""
    return prefix + (SPACE_INDENT if is_last else PIPE_INDENT)


def _connector(depth: int, is_last: bool) -> str:
    if depth <= 0:
        return ""
    return LAST_BRANCH if is_last else BRANCH


def render_forward(tree: IssueTree | IssueModel | None, verbose: bool = False) -> str:
    """Render the descendant tree top-down, root first::

        EPIC-1: Checkout revamp [In Progress]
        ├── STORY-1: Cart page [Open]
        │   └── SUB-1: Button copy [Done]
        └── STORY-2: Payment page [Open]
    """
    root, _ = _split(tree)
    if root is None:
        return ""
    fmt = label_formatter(verbose)
    lines: list[str] = []

    def walk(issue: IssueModel, prefix: str, depth: int, is_last: bool) -> None:
        lines.append(prefix + _connector(depth, is_last) + fmt(issue))
        child_prefix = _child_prefix(prefix, depth, is_last)
        for i, child in enumerate(issue.children):
            walk(child, child_prefix, depth + 1, i == len(issue.children) - 1)

    walk(root, "", 0, True)
    return "\n".join(lines)


def render_reverse(tree: IssueTree | IssueModel | None, verbose: bool = False) -> str:
    """Render bottom-up: descendants first, then the issue, then its ancestors.

    Within the descendant subtree each node's children come before the node
    itself. Ancestors follow nearest first, as bare labels.
    """
    root, ancestors = _split(tree)
    if root is None:
        return ""
    fmt = label_formatter(verbose)
    lines: list[str] = []

    def walk(issue: IssueModel, prefix: str, depth: int, is_last: bool) -> None:
        child_prefix = _child_prefix(prefix, depth, is_last)
        for i, child in enumerate(issue.children):
            walk(child, child_prefix, depth + 1, i == len(issue.children) - 1)
        lines.append(prefix + _connector(depth, is_last) + fmt(issue))

    walk(root, "", 0, True)
    lines.extend(fmt(ancestor) for ancestor in ancestors)
    return "\n".join(lines)
