"""Progress reporting for Streamlit pages that walk a Jira hierarchy."""

from __future__ import annotations

import streamlit as st


class ProgressReporter:
    """Collapsible status box listing each step of a tree build.

    Hierarchy expansion has no known total up front, so steps are listed as
    they happen instead of driving a progress bar.
    """

    def __init__(self, title: str):
        self._status = st.status(title, expanded=False)
        self._finalized: bool = False

    def callback(self, message: str, current: int | None = None, total: int | None = None) -> None:
        """Signature compatible with TreeService progress callbacks."""
        if current is not None and total:
            message = f"{message} ({current}/{total})"
        self.update(message)

    def update(self, message: str) -> None:
        if self._finalized:
            return
        self._status.write(message)

    def complete(self, message: str) -> None:
        if self._finalized:
            return
        self._status.update(label=message, state="complete")
        self._finalized = True

    def error(self, message: str) -> None:
        if self._finalized:
            return
        self._status.update(label=message, state="error", expanded=True)
        self._finalized = True
