"""Convenience launcher for the Streamlit app.

Usage:
  streamlit run run_dashboard.py

Automatically imports every module in ``jira_tree/pages`` so each page
decorated with ``@register_page`` registers itself without manual edits here.
"""

import logging
from importlib import import_module
from pathlib import Path

import streamlit as st

from jira_tree.app import main

logger = logging.getLogger(__name__)

st.set_page_config(layout="wide")

PAGES_DIR = Path(__file__).parent / "jira_tree" / "pages"
for py in sorted(PAGES_DIR.glob("[!_]*.py")):
    mod_name = f"jira_tree.pages.{py.stem}"
    try:
        import_module(mod_name)
    except Exception as e:  # pragma: no cover - defensive
        logger.error("Failed importing page %s: %s", mod_name, e)


def _auto_init_tree_service():
    """Connect from Streamlit secrets or the settings file when both are complete."""
    if "tree_service" in st.session_state:
        return
    from jira_tree.pages.setup import connect, load_page_settings

    jira = load_page_settings().jira
    if not jira.complete:
        st.sidebar.warning("Jira credentials not found. Please use the Setup page.")
        return
    try:
        connect(jira.server, jira.email, jira.token)
        st.sidebar.success("Jira connection successful!")
    except Exception as e:
        st.sidebar.error(f"Jira connection failed: {e}")
        st.session_state.pop("tree_service", None)


_auto_init_tree_service()

if __name__ == "__main__":
    main()
