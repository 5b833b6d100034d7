"""Exceptions raised while talking to Jira and resolving issue hierarchies."""

from __future__ import annotations


class JiraTreeError(RuntimeError):
    """Base class for every failure surfaced by the hierarchy pipeline."""


class QueryFailure(JiraTreeError):
    """A JQL search was rejected or could not be completed.

    The offending query text is kept on ``jql`` so the operator can rerun it
    by hand in the Jira issue navigator.
    """

    def __init__(self, jql: str, message: str, *, issue_key: str | None = None):
        self.jql = jql
        self.issue_key = issue_key
        prefix = f"JQL search failed for '{jql}'"
        if issue_key:
            prefix = f"{prefix} while resolving children of {issue_key}"
        super().__init__(f"{prefix}: {message}")


class IssueNotFound(JiraTreeError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Issue {key} does not exist or is not visible")


class ProjectNotFound(JiraTreeError):
    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Project {key} does not exist or is not visible")


class TransportFailure(JiraTreeError):
    def __init__(self, message: str, *, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class AuthenticationFailure(TransportFailure):
    pass
