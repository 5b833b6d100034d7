"""Single issue page: field overview, wrapped description, exports and project lookup."""

from __future__ import annotations

import json
import logging

import pandas as pd
import streamlit as st
import yaml

from jira_tree.app import register_page
from jira_tree.core.config import (
    DESCRIPTION_PREVIEW_WIDTH,
    DESCRIPTION_WRAP_WIDTH,
    DETAIL_DATETIME_FORMAT,
    PAGE_DETAIL,
    SETTINGS,
    UNASSIGNED,
)
from jira_tree.core.errors import JiraTreeError
from jira_tree.core.mappers import issue_to_dict, project_to_dict
from jira_tree.core.models import IssueModel, ProjectModel
from jira_tree.core.service import TreeService
from jira_tree.core.strings import truncate, wrap_text

logger = logging.getLogger(__name__)


def _fmt_dt(value) -> str:
    return value.strftime(DETAIL_DATETIME_FORMAT) if value else ""


def detail_frame(issue: IssueModel) -> pd.DataFrame:
    rows = [
        ("Key", issue.key),
        ("Summary", issue.summary or ""),
        ("Status", issue.status or ""),
        ("Type", issue.issuetype or ""),
        ("Priority", issue.priority or ""),
        ("Project", issue.project_name or ""),
        ("Assignee", issue.assignee or UNASSIGNED),
        ("Reporter", issue.reporter or ""),
        ("Created", _fmt_dt(issue.created)),
        ("Updated", _fmt_dt(issue.updated)),
        ("Parent", issue.parent.key if issue.parent else ""),
        ("Subtasks", ", ".join(issue.subtask_keys)),
        ("Description", truncate(issue.description, DESCRIPTION_PREVIEW_WIDTH)),
    ]
    return pd.DataFrame(rows, columns=["Field", "Value"])


def links_frame(issue: IssueModel) -> pd.DataFrame:
    rows = []
    for link in issue.links:
        if link.outward_issue is not None:
            rows.append({"Relation": link.outward, "Issue": link.outward_issue.key})
        if link.inward_issue is not None:
            rows.append({"Relation": link.inward, "Issue": link.inward_issue.key})
    return pd.DataFrame(rows, columns=["Relation", "Issue"])


def project_frame(project: ProjectModel) -> pd.DataFrame:
    rows = [
        ("Key", project.key),
        ("Name", project.name or ""),
        ("ID", project.id or ""),
        ("Lead", project.lead or ""),
        ("Type", project.project_type or ""),
    ]
    return pd.DataFrame(rows, columns=["Field", "Value"])


def export_issue(issue: IssueModel) -> tuple[str, str]:
    data = issue_to_dict(issue)
    return (
        json.dumps(data, indent=2, ensure_ascii=False),
        yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
    )


@register_page(PAGE_DETAIL)
def issue_detail_page():
    st.title("Issue Detail")
    service: TreeService | None = st.session_state.get("tree_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    issue_key = st.text_input("Issue key", value=st.session_state.get("tree_issue_key", ""))
    if st.button("Fetch issue", type="primary") and issue_key.strip():
        key = issue_key.strip().upper()
        try:
            st.session_state["detail_issue"] = service.fetch_issue(key)
        except JiraTreeError as exc:
            logger.error("Failed to fetch %s: %s", key, exc)
            st.error(str(exc))
            return

    issue: IssueModel | None = st.session_state.get("detail_issue")
    if issue is None:
        _project_section(service, "")
        return

    st.dataframe(detail_frame(issue), hide_index=True, width="stretch")
    links = links_frame(issue)
    if not links.empty:
        st.markdown("#### Links")
        st.dataframe(links, hide_index=True, width="stretch")
    if issue.description:
        st.markdown("#### Description")
        st.text("\n".join(wrap_text(issue.description, DESCRIPTION_WRAP_WIDTH)))

    json_doc, yaml_doc = export_issue(issue)
    col_json, col_yaml = st.columns(2)
    col_json.download_button(
        "Download JSON",
        data=json_doc.encode(SETTINGS.download_encoding),
        file_name=f"{issue.key}.json",
        mime="application/json",
    )
    col_yaml.download_button(
        "Download YAML",
        data=yaml_doc.encode(SETTINGS.download_encoding),
        file_name=f"{issue.key}.yaml",
        mime="application/x-yaml",
    )

    _project_section(service, issue.project_key or "")


def _project_section(service: TreeService, default_key: str) -> None:
    st.markdown("#### Project")
    project_key = st.text_input("Project key", value=default_key, key="detail_project_key")
    if st.button("Look up project") and project_key.strip():
        try:
            st.session_state["detail_project"] = service.fetch_project(project_key)
        except JiraTreeError as exc:
            logger.error("Failed to fetch project %s: %s", project_key, exc)
            st.error(str(exc))
            return
    project: ProjectModel | None = st.session_state.get("detail_project")
    if project is None:
        return
    st.dataframe(project_frame(project), hide_index=True, width="stretch")
    st.download_button(
        "Download project JSON",
        data=json.dumps(project_to_dict(project), indent=2, ensure_ascii=False).encode(SETTINGS.download_encoding),
        file_name=f"{project.key}_project.json",
        mime="application/json",
    )
