"""Connection setup page: collect Jira credentials and initialize TreeService."""

from __future__ import annotations

import logging

import streamlit as st
from streamlit.errors import StreamlitAPIException

from jira_tree.app import register_page
from jira_tree.core.config import PAGE_SETUP
from jira_tree.core.jira_client import JiraAPI
from jira_tree.core.service import TreeService
from jira_tree.core.settings import JiraSettings, Settings, TreeSettings, load_settings

logger = logging.getLogger(__name__)


def _secrets() -> dict:
    try:
        jira_secrets = dict(st.secrets.get("jira", {}))
        for name in ("JIRA_SERVER", "JIRA_EMAIL", "JIRA_API_TOKEN", "JIRA_TOKEN"):
            if name not in jira_secrets and name in st.secrets:
                jira_secrets[name] = st.secrets[name]
        return jira_secrets
    except (FileNotFoundError, StreamlitAPIException):
        return {}


def load_page_settings() -> Settings:
    """Settings file + environment, with Streamlit secrets taking precedence."""
    try:
        settings = load_settings()
    except ValueError as exc:
        logger.error("Ignoring unreadable settings: %s", exc)
        settings = Settings(jira=JiraSettings(), tree=TreeSettings())
    secrets = _secrets()
    settings.jira = JiraSettings(
        server=secrets.get("JIRA_SERVER") or settings.jira.server,
        email=secrets.get("JIRA_EMAIL") or settings.jira.email,
        token=secrets.get("JIRA_API_TOKEN") or secrets.get("JIRA_TOKEN") or settings.jira.token,
    )
    return settings


def connect(server: str, email: str, token: str) -> TreeService:
    service = TreeService(JiraAPI(server, email, token))
    st.session_state["jira_server"] = service.api.server
    st.session_state["jira_email"] = email
    st.session_state["tree_service"] = service
    return service


@register_page(PAGE_SETUP)
def setup_page():
    st.title("Jira Connection Setup")
    st.caption("Enter credentials (use Streamlit secrets or the config file in production).")

    defaults = load_page_settings().jira
    server = st.text_input(
        "Jira Server URL",
        value=st.session_state.get("jira_server") or defaults.server,
    )
    email = st.text_input(
        "Email / Username",
        value=st.session_state.get("jira_email") or defaults.email,
    )
    token = st.text_input(
        "API Token",
        type="password",
        value=defaults.token,
    )
    init_btn = st.button("Initialize Connection", type="primary")

    if init_btn:
        if not (server and email and token):
            st.error("All fields required.")
            return
        try:
            connect(server, email, token)
            st.success("Connection initialized.")
        except Exception as e:  # pragma: no cover - network / auth errors
            logger.error("Failed to initialize Jira client: %s", e)
            st.error(f"Failed to initialize Jira client: {e}")

    if "tree_service" in st.session_state:
        st.info("TreeService ready.")
