"""Mapping raw Jira issue JSON into IssueModel instances and back to plain dicts."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import datetime
from typing import Any

import pandas as pd

from .config import FIELD_IDS
from .models import IssueLinkModel, IssueModel, IssueRef, IssueTree, ProjectModel

# Jira format: "2025-05-12T06:54:41.542+0000"
_JIRA_TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%f%z"
# %f and %z also accept 1-6 digit fractions and "+HH:MM"; only the
# millisecond, colon-free layout has this width.
_JIRA_TIMESTAMP_WIDTH = len("2025-05-12T06:54:41.542+0000")


def parse_jira_timestamp(value: str | None) -> datetime | None:
    """Parse a Jira timestamp (``YYYY-MM-DDTHH:MM:SS.mmm±HHMM``).

    Empty values map to ``None``; anything else that does not match the exact
    layout raises ``ValueError``.
    """
    if not value:
        return None
    text = str(value).strip()
    if len(text) != _JIRA_TIMESTAMP_WIDTH:
        raise ValueError(f"failed to parse Jira timestamp {text!r}")
    try:
        ts = pd.to_datetime(text, format=_JIRA_TIMESTAMP_FORMAT, exact=True, errors="raise")
    except (ValueError, TypeError) as exc:
        raise ValueError(f"failed to parse Jira timestamp {text!r}") from exc
    return ts.to_pydatetime()


def _name(value: Any, attr: str = "name") -> str | None:
    if isinstance(value, dict):
        return value.get(attr)
    return None


def _adf_to_text(body: Any) -> str | None:
    """Flatten an Atlassian Document Format body (or plain string) to text."""
    if body is None:
        return None
    if isinstance(body, str):
        return body

    def _walk(node: Any) -> Iterator[str]:
        if isinstance(node, str):
            yield node
        elif isinstance(node, list):
            for item in node:
                yield from _walk(item)
        elif isinstance(node, dict):
            node_type = node.get("type")
            if node_type == "text":
                yield node.get("text", "")
            elif node_type == "mention":
                attrs = node.get("attrs") or {}
                mention_text = attrs.get("text") or attrs.get("id")
                if mention_text:
                    yield f"@{mention_text}"
            elif node_type == "hardBreak":
                yield "\n"
            for child in node.get("content", []):
                yield from _walk(child)
            if node_type in {"paragraph", "heading", "listItem"}:
                yield "\n"

    return "".join(_walk(body)).strip()


def _map_ref(raw: dict[str, Any] | None) -> IssueRef | None:
    if not raw or not raw.get("key"):
        return None
    fields = raw.get("fields") or {}
    return IssueRef(
        key=raw["key"],
        summary=fields.get("summary"),
        status=_name(fields.get("status")),
        issuetype=_name(fields.get("issuetype")),
    )


def _map_link(raw: dict[str, Any]) -> IssueLinkModel:
    link_type = raw.get("type") or {}
    return IssueLinkModel(
        id=raw.get("id"),
        type_name=link_type.get("name"),
        inward=link_type.get("inward"),
        outward=link_type.get("outward"),
        inward_issue=_map_ref(raw.get("inwardIssue")),
        outward_issue=_map_ref(raw.get("outwardIssue")),
    )


def map_issue(raw: dict[str, Any]) -> IssueModel:
    fields = raw.get("fields") or {}
    project = fields.get("project") or {}
    epic_value = fields.get(FIELD_IDS["epic_link"]) if FIELD_IDS.get("epic_link") else None
    subtasks = [ref for ref in (_map_ref(s) for s in fields.get("subtasks") or []) if ref is not None]
    return IssueModel(
        key=raw.get("key"),
        id=raw.get("id"),
        summary=fields.get("summary"),
        description=_adf_to_text(fields.get("description")),
        issuetype=_name(fields.get("issuetype")),
        status=_name(fields.get("status")),
        priority=_name(fields.get("priority")),
        assignee=_name(fields.get("assignee"), "displayName"),
        reporter=_name(fields.get("reporter"), "displayName"),
        project_key=project.get("key"),
        project_name=project.get("name"),
        created=parse_jira_timestamp(fields.get("created")),
        updated=parse_jira_timestamp(fields.get("updated")),
        parent=_map_ref(fields.get("parent")),
        epic_key=epic_value if isinstance(epic_value, str) and epic_value else None,
        subtasks=subtasks,
        links=[_map_link(link) for link in fields.get("issuelinks") or []],
    )


def map_project(raw: dict[str, Any]) -> ProjectModel:
    return ProjectModel(
        key=raw.get("key"),
        name=raw.get("name"),
        id=raw.get("id"),
        lead=_name(raw.get("lead"), "displayName"),
        project_type=raw.get("projectTypeKey"),
    )


def _ref_to_dict(ref: IssueRef | None) -> dict[str, Any] | None:
    if ref is None:
        return None
    return {"key": ref.key, "summary": ref.summary, "status": ref.status, "issuetype": ref.issuetype}


def issue_to_dict(issue: IssueModel) -> dict[str, Any]:
    return {
        "key": issue.key,
        "id": issue.id,
        "summary": issue.summary,
        "description": issue.description,
        "issuetype": issue.issuetype,
        "status": issue.status,
        "priority": issue.priority,
        "assignee": issue.assignee,
        "reporter": issue.reporter,
        "project": {"key": issue.project_key, "name": issue.project_name} if issue.project_key else None,
        "created": issue.created.isoformat() if issue.created else None,
        "updated": issue.updated.isoformat() if issue.updated else None,
        "parent": _ref_to_dict(issue.parent),
        "subtasks": [_ref_to_dict(s) for s in issue.subtasks],
        "issuelinks": [
            {
                "id": link.id,
                "type": link.type_name,
                "inward": link.inward,
                "outward": link.outward,
                "inwardIssue": _ref_to_dict(link.inward_issue),
                "outwardIssue": _ref_to_dict(link.outward_issue),
            }
            for link in issue.links
        ],
        "children": [issue_to_dict(child) for child in issue.children],
    }


def tree_to_dict(tree: IssueTree) -> dict[str, Any]:
    """Plain-dict form of a tree, ready for ``json.dumps`` / ``yaml.safe_dump``."""
    return {
        "max_depth": tree.max_depth,
        "node_count": tree.node_count(),
        "ancestors": [issue_to_dict(a) for a in tree.ancestors],
        "tree": issue_to_dict(tree.root),
    }


def project_to_dict(project: ProjectModel) -> dict[str, Any]:
    return {
        "key": project.key,
        "name": project.name,
        "id": project.id,
        "lead": project.lead,
        "projectTypeKey": project.project_type,
    }
