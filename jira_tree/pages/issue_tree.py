"""Issue Tree page.

Fetches an issue, expands its children through subtasks, parent links and
Epic Links, and shows the hierarchy as a tree, a reverse tree or a table.
"""

from __future__ import annotations

import json
import logging

import streamlit as st
import yaml

from jira_tree.app import register_page
from jira_tree.core.config import MAX_TREE_DEPTH, PAGE_TREE, SETTINGS
from jira_tree.core.errors import JiraTreeError
from jira_tree.core.mappers import tree_to_dict
from jira_tree.core.models import IssueTree
from jira_tree.core.service import TreeService
from jira_tree.pages.setup import load_page_settings
from jira_tree.visual.progress import ProgressReporter
from jira_tree.visual.tree_table import flatten, rows_to_dataframe, style_table
from jira_tree.visual.tree_text import render_forward, render_reverse

logger = logging.getLogger(__name__)

MODE_TREE = "Tree"
MODE_REVERSE = "Reverse tree"
MODE_TABLE = "Table"
MODES = (MODE_TREE, MODE_REVERSE, MODE_TABLE)


def export_payloads(tree: IssueTree) -> tuple[str, str]:
    """JSON and YAML documents for the download buttons."""
    data = tree_to_dict(tree)
    return (
        json.dumps(data, indent=2, ensure_ascii=False),
        yaml.safe_dump(data, sort_keys=False, allow_unicode=True),
    )


def needs_ancestors(mode: str, include_ancestors: bool) -> bool:
    return mode == MODE_REVERSE or (mode == MODE_TABLE and include_ancestors)


@register_page(PAGE_TREE)
def issue_tree_page():
    st.title("Issue Tree")
    st.caption("Children come from subtasks, parent links and Epic Links; each issue is listed once per parent.")
    service: TreeService | None = st.session_state.get("tree_service")
    if service is None:
        st.warning("Initialize connection on Setup page first.")
        return

    defaults = load_page_settings().tree
    issue_key = st.text_input("Issue key", value=st.session_state.get("tree_issue_key", ""))
    depth = st.number_input(
        "Maximum depth",
        min_value=0,
        max_value=MAX_TREE_DEPTH,
        value=min(max(defaults.depth, 0), MAX_TREE_DEPTH),
        step=1,
    )
    mode = st.radio("View", MODES, horizontal=True)
    verbose = st.checkbox("Show all fields", value=defaults.verbose)
    include_ancestors = False
    if mode == MODE_TABLE:
        include_ancestors = st.checkbox("Include ancestors", value=False)
    build = st.button("Build Tree", type="primary")

    if build and issue_key.strip():
        key = issue_key.strip().upper()
        st.session_state["tree_issue_key"] = key
        reporter = ProgressReporter(f"Resolving hierarchy of {key}")
        try:
            tree = service.build_tree(
                key,
                int(depth),
                with_ancestors=needs_ancestors(mode, include_ancestors),
                progress=reporter.callback,
            )
        except JiraTreeError as exc:
            logger.error("Failed to build tree for %s: %s", key, exc)
            reporter.error(f"Failed to build tree for {key}")
            st.error(str(exc))
            return
        reporter.complete(f"Resolved {tree.node_count()} issue(s) under {key}.")
        st.session_state["issue_tree"] = tree

    tree: IssueTree | None = st.session_state.get("issue_tree")
    if tree is None:
        st.info("No tree built yet.")
        return

    st.markdown("---")
    if mode == MODE_TABLE:
        rows = flatten(tree, verbose, timezone=defaults.timezone)
        df = rows_to_dataframe(rows, verbose).head(SETTINGS.max_table_rows)
        st.dataframe(style_table(df), hide_index=True, width="stretch")
    elif mode == MODE_REVERSE:
        if not tree.ancestors and tree.root.ancestor_key:
            st.caption("Rebuild the tree in this view to load the issues above the root.")
        st.code(render_reverse(tree, verbose), language=None)
    else:
        st.code(render_forward(tree, verbose), language=None)

    json_doc, yaml_doc = export_payloads(tree)
    col_json, col_yaml = st.columns(2)
    col_json.download_button(
        "Download JSON",
        data=json_doc.encode(SETTINGS.download_encoding),
        file_name=f"{tree.root.key}_tree.json",
        mime="application/json",
    )
    col_yaml.download_button(
        "Download YAML",
        data=yaml_doc.encode(SETTINGS.download_encoding),
        file_name=f"{tree.root.key}_tree.yaml",
        mime="application/x-yaml",
    )
