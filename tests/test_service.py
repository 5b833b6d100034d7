import pytest
from fake_jira import FakeJiraAPI, raw_issue

from jira_tree.core.config import SEARCH_RESULT_FIELDS
from jira_tree.core.errors import IssueNotFound, ProjectNotFound, QueryFailure, TransportFailure
from jira_tree.core.hierarchy import children_jql
from jira_tree.core.service import TreeService


def _api():
    return FakeJiraAPI(
        issues=[raw_issue("STORY-1", parent="EPIC-1"), raw_issue("EPIC-1")],
        searches={children_jql("STORY-1"): [raw_issue("TASK-1"), raw_issue("TASK-2")]},
    )


def test_build_tree_without_ancestors_skips_upward_fetch():
    api = _api()
    tree = TreeService(api).build_tree("story-1", 1)
    assert tree.root.key == "STORY-1"
    assert [c.key for c in tree.root.children] == ["TASK-1", "TASK-2"]
    assert tree.ancestors == []
    assert tree.max_depth == 1
    assert api.fetched == ["STORY-1"]


def test_build_tree_with_ancestors():
    api = _api()
    tree = TreeService(api).build_tree("STORY-1", 1, with_ancestors=True)
    assert [a.key for a in tree.ancestors] == ["EPIC-1"]
    assert tree.ancestors[0].children == []
    assert tree.node_count() == 3


def test_progress_messages_reported():
    messages = []
    TreeService(_api()).build_tree(
        "STORY-1", 1, with_ancestors=True, progress=lambda msg, cur, tot: messages.append(msg)
    )
    assert messages[0] == "Fetching STORY-1"
    assert any("Walking up" in m for m in messages)
    assert any("Resolving children" in m for m in messages)


def test_missing_root_raises_not_found():
    with pytest.raises(IssueNotFound, match="NOPE-1"):
        TreeService(_api()).build_tree("NOPE-1", 2)


def test_zero_depth_returns_bare_root():
    api = _api()
    tree = TreeService(api).build_tree("STORY-1", 0)
    assert tree.root.children == []
    assert api.queries == []


def test_fetch_issue_with_malformed_payload_raises_jira_error():
    api = FakeJiraAPI(issues=[raw_issue("BAD-1", created="2024-09-01 10:00:00")])
    with pytest.raises(TransportFailure, match="Malformed payload for BAD-1"):
        TreeService(api).fetch_issue("bad-1")


def test_search_issues_uses_result_projection_and_limit():
    jql = "project = PROJ"
    api = FakeJiraAPI(searches={jql: [raw_issue("PROJ-1"), raw_issue("PROJ-2"), raw_issue("PROJ-3")]})
    issues = TreeService(api).search_issues(f"  {jql} ", limit=2)
    assert [i.key for i in issues] == ["PROJ-1", "PROJ-2"]
    assert api.queries == [(jql, list(SEARCH_RESULT_FIELDS))]


def test_search_issues_zero_limit_returns_everything():
    jql = "project = PROJ"
    api = FakeJiraAPI(searches={jql: [raw_issue(f"PROJ-{n}") for n in range(1, 6)]})
    assert len(TreeService(api).search_issues(jql, limit=0)) == 5


def test_search_issues_rejects_blank_query():
    with pytest.raises(ValueError):
        TreeService(FakeJiraAPI()).search_issues("   ")


def test_search_issues_malformed_result_keeps_jql():
    jql = "assignee = currentUser()"
    api = FakeJiraAPI(searches={jql: [raw_issue("PROJ-1", created="yesterday")]})
    with pytest.raises(QueryFailure) as excinfo:
        TreeService(api).search_issues(jql)
    assert excinfo.value.jql == jql


def test_fetch_project():
    api = FakeJiraAPI(
        projects=[
            {
                "key": "PROJ",
                "id": "10000",
                "name": "Project One",
                "lead": {"displayName": "Alice"},
                "projectTypeKey": "software",
            }
        ]
    )
    project = TreeService(api).fetch_project(" proj ")
    assert (project.key, project.name, project.id, project.lead, project.project_type) == (
        "PROJ",
        "Project One",
        "10000",
        "Alice",
        "software",
    )


def test_fetch_missing_project():
    with pytest.raises(ProjectNotFound) as excinfo:
        TreeService(FakeJiraAPI()).fetch_project("NOPE")
    assert excinfo.value.key == "NOPE"
