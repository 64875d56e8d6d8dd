"""Tests for console state transitions and the catalog."""

import pytest

from app.console.catalog import CLIMATE_ISSUES, issues_for, list_cities
from app.console.state import ConsoleState
from app.core.result_types import ImageResult


def test_catalog_order():
    assert list_cities() == ["New York", "London", "Tokyo", "Mumbai"]
    assert issues_for("Tokyo") == ["Typhoons", "Urban Flooding", "Heat Stress"]
    assert issues_for("Paris") == []


def test_every_city_has_three_issues():
    assert all(len(issues) == 3 for issues in CLIMATE_ISSUES.values())


def test_changing_city_resets_issue():
    state = ConsoleState()
    state.select_city("Tokyo")
    state.select_issue("Typhoons")

    state.select_city("London")

    assert state.city == "London"
    assert state.issue == ""
    assert state.available_issues == ["Flooding", "Air Quality", "Heat Waves"]


def test_issue_requires_city():
    state = ConsoleState()

    with pytest.raises(ValueError):
        state.select_issue("Typhoons")


def test_issue_must_belong_to_city():
    state = ConsoleState()
    state.select_city("London")

    with pytest.raises(ValueError):
        state.select_issue("Typhoons")


def test_unknown_city_rejected():
    with pytest.raises(ValueError):
        ConsoleState().select_city("Atlantis")


def test_can_generate():
    state = ConsoleState()
    assert not state.can_generate

    state.select_city("Mumbai")
    assert not state.can_generate

    state.select_issue("Monsoon Flooding")
    assert state.can_generate

    state.loading = True
    assert not state.can_generate


def test_generation_lifecycle_replaces_results():
    state = ConsoleState(images=[ImageResult(url="data:image/png;base64,old", provider="A")])

    state.begin_generation()
    assert state.loading
    assert state.images == []

    new = [ImageResult(url="data:image/png;base64,new", provider="B")]
    state.finish_generation(new)
    assert not state.loading
    assert state.images == new


def test_finish_without_results_keeps_list_empty():
    state = ConsoleState()
    state.begin_generation()

    state.finish_generation()

    assert state.images == []
    assert not state.loading
