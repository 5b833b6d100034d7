import json
from datetime import UTC, datetime, timedelta

import pytest
import yaml
from fake_jira import raw_issue

from jira_tree.core.config import FIELD_IDS
from jira_tree.core.mappers import (
    issue_to_dict,
    map_issue,
    map_project,
    parse_jira_timestamp,
    project_to_dict,
    tree_to_dict,
)
from jira_tree.core.models import IssueModel, IssueTree


def test_parse_jira_timestamp():
    ts = parse_jira_timestamp("2025-05-12T06:54:41.542+0000")
    assert ts == datetime(2025, 5, 12, 6, 54, 41, 542000, tzinfo=UTC)
    offset = parse_jira_timestamp("2025-05-12T06:54:41.000-0300")
    assert offset.utcoffset() == timedelta(hours=-3)


@pytest.mark.parametrize(
    "value",
    [
        "2025-05-12T06:54:41Z",
        "2025-05-12 06:54:41.542+0000",
        "2025-05-12T06:54:41.542+00:00",
        "2025-05-12T06:54:41.5421+0000",
        "yesterday",
    ],
)
def test_parse_jira_timestamp_rejects_other_layouts(value):
    with pytest.raises(ValueError, match="Jira timestamp"):
        parse_jira_timestamp(value)


def test_parse_jira_timestamp_empty():
    assert parse_jira_timestamp(None) is None
    assert parse_jira_timestamp("") is None


def test_map_issue_full_payload():
    raw = raw_issue(
        "PROJ-1",
        "Login fails",
        "In Progress",
        "Bug",
        subtasks=["PROJ-2", "PROJ-3"],
        parent="PROJ-0",
        assignee="Alice",
        priority="High",
        project={"key": "PROJ", "name": "Project"},
        description={
            "type": "doc",
            "content": [
                {"type": "paragraph", "content": [{"type": "text", "text": "Steps to reproduce"}]},
                {"type": "paragraph", "content": [{"type": "mention", "attrs": {"text": "Bob"}}]},
            ],
        },
        issuelinks=[
            {
                "id": "10",
                "type": {"name": "Blocks", "inward": "is blocked by", "outward": "blocks"},
                "outwardIssue": {"key": "PROJ-9", "fields": {"status": {"name": "Open"}}},
            }
        ],
    )
    issue = map_issue(raw)
    assert issue.key == "PROJ-1"
    assert (issue.summary, issue.status, issue.issuetype, issue.priority) == (
        "Login fails",
        "In Progress",
        "Bug",
        "High",
    )
    assert issue.assignee == "Alice"
    assert issue.reporter == "Bob"
    assert (issue.project_key, issue.project_name) == ("PROJ", "Project")
    assert issue.subtask_keys == ["PROJ-2", "PROJ-3"]
    assert issue.parent.key == "PROJ-0"
    assert issue.ancestor_key == "PROJ-0"
    assert issue.description == "Steps to reproduce\n@Bob"
    assert issue.links[0].outward == "blocks"
    assert issue.links[0].outward_issue.key == "PROJ-9"
    assert issue.links[0].outward_issue.status == "Open"
    assert issue.links[0].inward_issue is None
    assert issue.created == datetime(2024, 9, 1, 10, tzinfo=UTC)
    assert issue.children == []


def test_map_issue_projected_child():
    raw = {"key": "C-1", "fields": {"summary": "child", "status": {"name": "Open"}, "assignee": None}}
    issue = map_issue(raw)
    assert issue.assignee is None
    assert issue.description is None
    assert issue.subtasks == [] and issue.links == []
    assert issue.created is None
    assert issue.ancestor_key is None


def test_epic_link_used_when_no_parent():
    issue = map_issue(raw_issue("S-1", **{FIELD_IDS["epic_link"]: "EPIC-4"}))
    assert issue.epic_key == "EPIC-4"
    assert issue.ancestor_key == "EPIC-4"


def test_plain_string_description():
    assert map_issue(raw_issue("S-1", description="plain text")).description == "plain text"


def test_tree_to_dict_serializes():
    root = map_issue(raw_issue("EPIC-1"))
    root.children = [map_issue(raw_issue("STORY-1"))]
    tree = IssueTree(root=root, ancestors=[IssueModel(key="INIT-1")], max_depth=2)
    data = tree_to_dict(tree)
    assert data["node_count"] == 2
    assert data["tree"]["children"][0]["key"] == "STORY-1"
    assert data["ancestors"][0]["key"] == "INIT-1"
    assert data["tree"]["created"] == "2024-09-01T10:00:00+00:00"
    assert json.loads(json.dumps(data)) == data
    assert yaml.safe_load(yaml.safe_dump(data)) == data


def test_issue_to_dict_without_project():
    assert issue_to_dict(IssueModel(key="X-1"))["project"] is None


def test_parse_jira_timestamp_returns_plain_datetime():
    ts = parse_jira_timestamp("2025-05-12T06:54:41.542+0000")
    assert type(ts) is datetime
    assert ts.utcoffset() == timedelta(0)


def test_map_project():
    project = map_project(
        {
            "key": "PROJ",
            "id": "10000",
            "name": "Project One",
            "lead": {"displayName": "Alice"},
            "projectTypeKey": "software",
        }
    )
    assert project_to_dict(project) == {
        "key": "PROJ",
        "name": "Project One",
        "id": "10000",
        "lead": "Alice",
        "projectTypeKey": "software",
    }
    assert map_project({"key": "BARE"}).lead is None
