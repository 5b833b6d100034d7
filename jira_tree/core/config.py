"""Central configuration, constants, and shared column definitions."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

# =============================================================================
# Jira Connection Settings
# =============================================================================
JIRA_REST_API_VERSION = "3"
SEARCH_PAGE_SIZE = 100

# =============================================================================
# Hierarchy Resolution
# =============================================================================
# Field projection requested for every child discovered through search.
# Children never carry description or link data.
CHILDREN_SEARCH_FIELDS: Sequence[str] = (
    "summary",
    "status",
    "issuetype",
    "priority",
    "assignee",
    "reporter",
    "created",
    "updated",
    "parent",
)

# JQL name of the Epic Link field (quoted in queries because of the space)
EPIC_LINK_FIELD_NAME = "Epic Link"

# Custom field carrying the Epic Link value on the raw issue payload.
# Used only when walking ancestors upward.
FIELD_IDS = {
    "epic_link": "customfield_10014",
}

# Projection and defaults for ad-hoc JQL searches
SEARCH_RESULT_FIELDS: Sequence[str] = ("summary", "status", "assignee", "reporter", "issuetype")
DEFAULT_SEARCH_LIMIT: int = 100

DEFAULT_TREE_DEPTH: int = 3
MAX_TREE_DEPTH: int = 10

# =============================================================================
# Rendering
# =============================================================================
BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_INDENT = "│   "
SPACE_INDENT = "    "

LABEL_STYLE_COMPACT = "compact"
LABEL_STYLE_VERBOSE = "verbose"

UNASSIGNED = "Unassigned"

# Summary column width in the flattened table
SUMMARY_WIDTH_COMPACT: int = 50
SUMMARY_WIDTH_VERBOSE: int = 40
DESCRIPTION_PREVIEW_WIDTH: int = 100
DESCRIPTION_WRAP_WIDTH: int = 100

SEARCH_SUMMARY_WIDTH: int = 60

TABLE_DATE_FORMAT = "%Y-%m-%d"
DETAIL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

TREE_TABLE_HEADERS_COMPACT: Sequence[str] = ("Key", "Type", "Summary", "Status", "Assignee")
TREE_TABLE_HEADERS_VERBOSE: Sequence[str] = (
    "Key",
    "Type",
    "Summary",
    "Status",
    "Priority",
    "Assignee",
    "Created",
    "Updated",
)

SEARCH_TABLE_HEADERS: Sequence[str] = ("Key", "Type", "URL", "Summary", "Status", "Assignee", "Reporter")

# Status -> CSS color used when styling the Status column
STATUS_COLORS: dict[str, str] = {
    "Resolved": "green",
    "In Progress": "blue",
    "New": "red",
}


# =============================================================================
# Navigation
# =============================================================================
PAGE_SETUP = "Setup / Connection"
PAGE_TREE = "Issue Tree"
PAGE_DETAIL = "Issue Detail"
PAGE_SEARCH = "Search"

# Sidebar order; pages registered under other labels follow alphabetically
PAGE_ORDER: Sequence[str] = (PAGE_TREE, PAGE_DETAIL, PAGE_SEARCH, PAGE_SETUP)


@dataclass(slots=True)
class AppSettings:
    max_table_rows: int = 1000
    download_encoding: str = "utf-8"


SETTINGS = AppSettings()
