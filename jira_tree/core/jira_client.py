"""Jira API client wrapper (REST v3 + enhanced search pagination)."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

import requests
from jira import JIRA, JIRAError

from .config import JIRA_REST_API_VERSION, SEARCH_PAGE_SIZE
from .errors import (
    AuthenticationFailure,
    IssueNotFound,
    ProjectNotFound,
    QueryFailure,
    TransportFailure,
)

logger = logging.getLogger(__name__)


def _failure_for_status(status_code: int | None, message: str) -> TransportFailure:
    if status_code in (401, 403):
        return AuthenticationFailure(
            f"Jira rejected the credentials ({status_code}): {message}", status_code=status_code
        )
    return TransportFailure(f"Jira request failed ({status_code}): {message}", status_code=status_code)


class JiraAPI:
    def __init__(self, server: str, email: str, token: str):
        if not server:
            raise ValueError("Jira server URL cannot be empty")
        if not token:
            raise ValueError("Jira API token cannot be empty")
        server = server.rstrip("/")
        if not server.startswith(("http://", "https://")):
            server = f"https://{server}"
        self.server = server
        self.client = JIRA(
            basic_auth=(email, token),
            options={"server": self.server, "rest_api_version": JIRA_REST_API_VERSION},
        )

    def search(
        self,
        jql: str,
        fields: Sequence[str] | None = None,
        page_size: int = SEARCH_PAGE_SIZE,
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Run ``jql`` and return every matching raw issue, following page tokens.

        Results keep the order Jira returns them in. ``limit`` stops paging
        once that many issues have been collected. A rejected query raises
        :class:`QueryFailure` carrying the JQL text; a connection that never
        produced a response raises :class:`TransportFailure`.
        """
        session = getattr(self.client, "_session", None)
        if session is None:
            raise TransportFailure("JIRA session unavailable")
        url = f"{self.server}/rest/api/3/search/jql"
        if limit:
            page_size = min(page_size, limit)
        params: dict[str, Any] = {"jql": jql, "maxResults": page_size}
        if fields:
            params["fields"] = ",".join(fields)
        out: list[dict[str, Any]] = []
        token = None
        while True:
            qp = dict(params)
            if token:
                qp["nextPageToken"] = token
            try:
                resp = session.get(url, params=qp)
            except JIRAError as exc:
                raise self._search_failure(jql, exc.status_code, exc.text or str(exc)) from exc
            except requests.RequestException as exc:
                raise TransportFailure(f"Jira search {jql!r} failed: {exc}") from exc
            if resp.status_code >= 400:
                raise self._search_failure(jql, resp.status_code, resp.text[:200])
            data = resp.json()
            out.extend(data.get("issues", []))
            if limit and len(out) >= limit:
                del out[limit:]
                break
            token = data.get("nextPageToken")
            if not token or data.get("isLast") is True:
                break
        logger.debug("JQL %r returned %s issue(s)", jql, len(out))
        return out

    @staticmethod
    def _search_failure(jql: str, status_code: int | None, message: str) -> Exception:
        if status_code == 400:
            return QueryFailure(jql, message)
        return _failure_for_status(status_code, message)

    def fetch_issue_raw(self, issue_key: str) -> dict[str, Any]:
        try:
            issue = self.client.issue(issue_key)
        except JIRAError as exc:
            if exc.status_code == 404:
                raise IssueNotFound(issue_key) from exc
            raise _failure_for_status(exc.status_code, f"fetching {issue_key}: {exc.text or exc}") from exc
        except requests.RequestException as exc:
            raise TransportFailure(f"Fetching {issue_key} failed: {exc}") from exc
        if hasattr(issue, "raw"):
            return issue.raw
        if isinstance(issue, dict):
            return issue
        raise TransportFailure(f"Unexpected issue payload type for {issue_key}: {type(issue)!r}")

    def fetch_project_raw(self, project_key: str) -> dict[str, Any]:
        try:
            project = self.client.project(project_key)
        except JIRAError as exc:
            if exc.status_code == 404:
                raise ProjectNotFound(project_key) from exc
            raise _failure_for_status(exc.status_code, f"fetching project {project_key}: {exc.text or exc}") from exc
        except requests.RequestException as exc:
            raise TransportFailure(f"Fetching project {project_key} failed: {exc}") from exc
        return getattr(project, "raw", None) or {}
