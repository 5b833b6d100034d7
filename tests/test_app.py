from jira_tree import app
from jira_tree.core.config import PAGE_DETAIL, PAGE_SEARCH, PAGE_SETUP, PAGE_TREE


def test_page_labels_follow_configured_order():
    labels = app.page_labels(["Zeta", PAGE_SETUP, "Alpha", PAGE_SEARCH, PAGE_TREE, PAGE_DETAIL])
    assert labels == [PAGE_TREE, PAGE_DETAIL, PAGE_SEARCH, PAGE_SETUP, "Alpha", "Zeta"]


def test_page_labels_skip_unregistered_pages():
    assert app.page_labels([PAGE_SETUP], order=(PAGE_TREE, PAGE_SETUP)) == [PAGE_SETUP]
    assert app.page_labels([]) == []


def test_landing_page_is_setup_until_connected():
    labels = [PAGE_TREE, PAGE_DETAIL, PAGE_SETUP]
    assert app.landing_index(labels, connected=False) == 2
    assert app.landing_index(labels, connected=True) == 0
    assert app.landing_index([PAGE_TREE], connected=False) == 0


def test_register_page_adds_to_registry(monkeypatch):
    monkeypatch.setattr(app, "PAGES", {})

    @app.register_page("Scratch")
    def scratch():
        return None

    assert app.PAGES == {"Scratch": scratch}
