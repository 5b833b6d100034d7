"""In-memory stand-in for JiraAPI plus raw payload builders shared by the tests."""

from __future__ import annotations

from jira_tree.core.errors import IssueNotFound, ProjectNotFound
from jira_tree.core.jira_client import JiraAPI


def raw_issue(
    key,
    summary=None,
    status="Open",
    issuetype="Story",
    *,
    subtasks=(),
    parent=None,
    assignee=None,
    priority="Medium",
    created="2024-09-01T10:00:00.000+0000",
    updated="2024-09-02T10:00:00.000+0000",
    **extra_fields,
):
    fields = {
        "summary": summary if summary is not None else f"{key} summary",
        "status": {"name": status} if status is not None else None,
        "issuetype": {"name": issuetype},
        "priority": {"name": priority},
        "assignee": {"displayName": assignee} if assignee else None,
        "reporter": {"displayName": "Bob"},
        "created": created,
        "updated": updated,
        "subtasks": [{"key": k, "fields": {"summary": f"{k} summary"}} for k in subtasks],
    }
    if parent:
        fields["parent"] = {"key": parent, "fields": {"summary": f"{parent} summary"}}
    fields.update(extra_fields)
    return {"key": key, "id": key.rsplit("-", 1)[-1], "fields": fields}


class FakeJiraAPI(JiraAPI):
    def __init__(self, issues=None, searches=None, failures=None, projects=None):
        self.server = "https://example.atlassian.net"
        self.issues = {i["key"]: i for i in (issues or [])}
        self.searches = searches or {}
        self.failures = failures or {}
        self.projects = {p["key"]: p for p in (projects or [])}
        self.queries: list[tuple[str, list[str]]] = []
        self.fetched: list[str] = []

    def search(self, jql, fields=None, page_size=100, limit=None):
        self.queries.append((jql, list(fields or [])))
        if jql in self.failures:
            raise self.failures[jql]
        found = list(self.searches.get(jql, []))
        return found[:limit] if limit else found

    def fetch_issue_raw(self, issue_key):
        self.fetched.append(issue_key)
        if issue_key not in self.issues:
            raise IssueNotFound(issue_key)
        return self.issues[issue_key]

    def fetch_project_raw(self, project_key):
        if project_key not in self.projects:
            raise ProjectNotFound(project_key)
        return self.projects[project_key]
