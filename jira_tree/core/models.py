"""Domain data models for Jira issues, their references, and resolved trees."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime


@dataclass(slots=True)
class IssueRef:
    """Inline reference to another issue as embedded in a raw payload."""

    key: str
    summary: str | None = None
    status: str | None = None
    issuetype: str | None = None


@dataclass(slots=True)
class IssueLinkModel:
    id: str | None
    type_name: str | None
    inward: str | None
    outward: str | None
    inward_issue: IssueRef | None = None
    outward_issue: IssueRef | None = None


@dataclass(slots=True)
class IssueModel:
    key: str
    summary: str | None = None
    id: str | None = None
    description: str | None = None
    issuetype: str | None = None
    status: str | None = None
    priority: str | None = None
    assignee: str | None = None
    reporter: str | None = None
    project_key: str | None = None
    project_name: str | None = None
    created: datetime | None = None
    updated: datetime | None = None

    # Relationships declared by Jira
    parent: IssueRef | None = None
    epic_key: str | None = None
    subtasks: list[IssueRef] = field(default_factory=list)
    links: list[IssueLinkModel] = field(default_factory=list)

    # Populated by the tree builder
    children: list[IssueModel] = field(default_factory=list)

    @property
    def subtask_keys(self) -> list[str]:
        return [ref.key for ref in self.subtasks if ref.key]

    @property
    def ancestor_key(self) -> str | None:
        """Key of the next issue up the hierarchy (parent first, then epic)."""
        if self.parent is not None and self.parent.key:
            return self.parent.key
        return self.epic_key or None

    def node_count(self) -> int:
        return 1 + sum(child.node_count() for child in self.children)

    def depth(self) -> int:
        if not self.children:
            return 0
        return 1 + max(child.depth() for child in self.children)


@dataclass(slots=True)
class IssueTree:
    """A resolved descendant tree plus the optional chain of ancestors above it.

    ``ancestors`` is ordered nearest first and is never linked from the nodes
    themselves; the root owns its children, nothing owns the ancestors.
    """

    root: IssueModel
    ancestors: list[IssueModel] = field(default_factory=list)
    max_depth: int = 0

    def node_count(self) -> int:
        return self.root.node_count()


@dataclass(slots=True)
class ProjectModel:
    key: str
    name: str | None = None
    id: str | None = None
    lead: str | None = None
    project_type: str | None = None
