"""Tabular view of ad-hoc JQL search results."""

from __future__ import annotations

import pandas as pd

from jira_tree.core.config import SEARCH_SUMMARY_WIDTH, SEARCH_TABLE_HEADERS, UNASSIGNED
from jira_tree.core.models import IssueModel
from jira_tree.core.strings import truncate


def search_row(issue: IssueModel, server: str, truncate_summary: bool = True) -> dict[str, str]:
    summary = issue.summary or ""
    return {
        "Key": issue.key,
        "Type": issue.issuetype or "",
        "URL": f"{server.rstrip('/')}/browse/{issue.key}",
        "Summary": truncate(summary, SEARCH_SUMMARY_WIDTH) if truncate_summary else summary,
        "Status": issue.status or "",
        "Assignee": issue.assignee or UNASSIGNED,
        "Reporter": issue.reporter or "",
    }


def search_frame(issues: list[IssueModel], server: str, truncate_summary: bool = True) -> pd.DataFrame:
    """One row per issue in result order.

    The on-screen table truncates summaries; pass ``truncate_summary=False``
    for exports so the CSV keeps the full text.
    """
    rows = [search_row(issue, server, truncate_summary) for issue in issues]
    return pd.DataFrame(rows, columns=list(SEARCH_TABLE_HEADERS))
