"""Streamlit router: pages register a label, the sidebar picks one."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

import streamlit as st

from jira_tree.core.config import PAGE_ORDER, PAGE_SETUP

PageFunc = Callable[[], None]

PAGES: dict[str, PageFunc] = {}


def register_page(label: str):
    """Decorator adding a page function to the sidebar under ``label``."""

    def decorator(func: PageFunc) -> PageFunc:
        PAGES[label] = func
        return func

    return decorator


def page_labels(registered: Iterable[str], order: Sequence[str] = PAGE_ORDER) -> list[str]:
    registered = set(registered)
    return [label for label in order if label in registered] + sorted(registered.difference(order))


def landing_index(labels: Sequence[str], connected: bool) -> int:
    # Nothing but the setup page works before a connection exists
    if not connected and PAGE_SETUP in labels:
        return labels.index(PAGE_SETUP)
    return 0


def main():
    st.sidebar.title("Jira Issue Tree")
    labels = page_labels(PAGES)
    if not labels:
        st.write("No pages registered yet.")
        return
    service = st.session_state.get("tree_service")
    if service is not None:
        st.sidebar.caption(f"Connected to {service.api.server}")
    else:
        st.sidebar.caption("Not connected")
    choice = st.sidebar.selectbox("Page", labels, index=landing_index(labels, service is not None))
    PAGES[choice]()


if __name__ == "__main__":
    main()
