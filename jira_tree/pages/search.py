"""Search page: run a JQL query and list the matching issues."""

from __future__ import annotations

import json
import logging

import streamlit as st
import yaml

from jira_tree.app import register_page
from jira_tree.core.config import DEFAULT_SEARCH_LIMIT, PAGE_SEARCH, SETTINGS
from jira_tree.core.errors import JiraTreeError
from jira_tree.core.mappers import issue_to_dict
from jira_tree.core.models import IssueModel
from jira_tree.core.service import TreeService
from jira_tree.visual.search_table import search_frame
from jira_tree.visual.tree_table import style_table

logger = logging.getLogger(__name__)


def export_search(jql: str, issues: list[IssueModel], server: str) -> tuple[str, str, str]:
    """CSV, JSON and YAML documents for the download buttons."""
    csv_doc = search_frame(issues, server, truncate_summary=False).to_csv(index=False)
    data = {
        "jql": jql,
        "total": len(issues),
        "issues": [issue_to_dict(issue) for issue in issues],
    }
    return (
        csv_doc,
        json.dumps(data, indent=2, ensure_ascii=False),
        yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
    )


@register_page(PAGE_SEARCH)
def search_page():
    st.title("Search")
    service: TreeService | None = st.session_state.get("tree_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    jql = st.text_area("JQL", value=st.session_state.get("search_jql", ""), placeholder="project = PROJ AND status = Open")
    limit = st.number_input(
        "Maximum results (0 = all)",
        min_value=0,
        value=DEFAULT_SEARCH_LIMIT,
        step=50,
    )
    if st.button("Search", type="primary") and jql.strip():
        query = jql.strip()
        st.session_state["search_jql"] = query
        try:
            with st.spinner("Searching..."):
                issues = service.search_issues(query, int(limit))
        except JiraTreeError as exc:
            logger.error("Search failed: %s", exc)
            st.error(str(exc))
            return
        st.session_state["search_results"] = (query, issues)

    results = st.session_state.get("search_results")
    if not results:
        st.info("No search run yet.")
        return
    query, issues = results
    st.caption(f"{len(issues)} issue(s) for `{query}`")
    if not issues:
        return

    df = search_frame(issues, service.api.server).head(SETTINGS.max_table_rows)
    st.dataframe(
        style_table(df),
        hide_index=True,
        width="stretch",
        column_config={"URL": st.column_config.LinkColumn("URL")},
    )

    csv_doc, json_doc, yaml_doc = export_search(query, issues, service.api.server)
    col_csv, col_json, col_yaml = st.columns(3)
    col_csv.download_button(
        "Download CSV",
        data=csv_doc.encode(SETTINGS.download_encoding),
        file_name="search_results.csv",
        mime="text/csv",
    )
    col_json.download_button(
        "Download JSON",
        data=json_doc.encode(SETTINGS.download_encoding),
        file_name="search_results.json",
        mime="application/json",
    )
    col_yaml.download_button(
        "Download YAML",
        data=yaml_doc.encode(SETTINGS.download_encoding),
        file_name="search_results.yaml",
        mime="application/x-yaml",
    )
