"""Flatten an issue tree into indented table rows for tabular display."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
from datetime import datetime
from typing import Any

import pandas as pd
import pytz
from pandas.io.formats.style import Styler

from jira_tree.core.config import (
    BRANCH,
    PIPE_INDENT,
    STATUS_COLORS,
    SUMMARY_WIDTH_COMPACT,
    SUMMARY_WIDTH_VERBOSE,
    TABLE_DATE_FORMAT,
    TREE_TABLE_HEADERS_COMPACT,
    TREE_TABLE_HEADERS_VERBOSE,
    UNASSIGNED,
)
from jira_tree.core.models import IssueModel, IssueTree
from jira_tree.core.strings import truncate

TreeRow = dict[str, str]
ColumnStyle = Callable[[Any], str]


def headers(verbose: bool = False) -> list[str]:
    return list(TREE_TABLE_HEADERS_VERBOSE if verbose else TREE_TABLE_HEADERS_COMPACT)


def hierarchy_key(key: str, depth: int) -> str:
    """Key column text: bare key at and above the root, tree glyphs below it.

    Every descendant gets the non-last branch glyph; a flat table has no
    notion of the last sibling.
    """
    if depth <= 0:
        return key
    return PIPE_INDENT * (depth - 1) + BRANCH + key


def format_date(value: datetime | None, timezone: str | None = None) -> str:
    if value is None:
        return ""
    if timezone:
        value = value.astimezone(pytz.timezone(timezone))
    return value.strftime(TABLE_DATE_FORMAT)


def build_row(issue: IssueModel, depth: int, verbose: bool = False, timezone: str | None = None) -> TreeRow:
    key_column = hierarchy_key(issue.key, depth)
    assignee = issue.assignee or UNASSIGNED
    if verbose:
        return {
            "Key": key_column,
            "Type": issue.issuetype or "",
            "Summary": truncate(issue.summary, SUMMARY_WIDTH_VERBOSE),
            "Status": issue.status or "",
            "Priority": issue.priority or "",
            "Assignee": assignee,
            "Created": format_date(issue.created, timezone),
            "Updated": format_date(issue.updated, timezone),
        }
    return {
        "Key": key_column,
        "Type": issue.issuetype or "",
        "Summary": truncate(issue.summary, SUMMARY_WIDTH_COMPACT),
        "Status": issue.status or "",
        "Assignee": assignee,
    }


def flatten(
    tree: IssueTree | IssueModel | None,
    verbose: bool = False,
    *,
    timezone: str | None = None,
) -> list[TreeRow]:
    """Pre-order rows for the tree, preceded by any ancestors (farthest first)."""
    if tree is None:
        return []
    if isinstance(tree, IssueTree):
        root, ancestors = tree.root, tree.ancestors
    else:
        root, ancestors = tree, []

    rows: list[TreeRow] = []
    # ancestors are nearest first; the farthest sits at the most negative depth
    for offset, ancestor in enumerate(reversed(ancestors)):
        rows.append(build_row(ancestor, offset - len(ancestors), verbose, timezone))

    def walk(issue: IssueModel, depth: int) -> None:
        rows.append(build_row(issue, depth, verbose, timezone))
        for child in issue.children:
            walk(child, depth + 1)

    walk(root, 0)
    return rows


def rows_to_dataframe(rows: list[TreeRow], verbose: bool = False) -> pd.DataFrame:
    return pd.DataFrame(rows, columns=headers(verbose))


# ------------------ Column styles ------------------
def status_style(value: Any) -> str:
    color = STATUS_COLORS.get(str(value)) if value is not None else None
    return f"color: {color}" if color else ""


# Read-only defaults shared by every session; extend per call with with_column_style
COLUMN_STYLES: Mapping[str, ColumnStyle] = MappingProxyType({"Status": status_style})


def with_column_style(
    column: str, func: ColumnStyle, styles: Mapping[str, ColumnStyle] = COLUMN_STYLES
) -> dict[str, ColumnStyle]:
    """Copy of ``styles`` with ``func`` styling ``column``."""
    return {**styles, column: func}


def style_table(df: pd.DataFrame, styles: Mapping[str, ColumnStyle] | None = None) -> Styler:
    """Attach per-column CSS styles; the frame itself is left untouched."""
    styler = df.style
    for column, func in (COLUMN_STYLES if styles is None else styles).items():
        if column in df.columns:
            styler = styler.map(func, subset=[column])
    return styler
