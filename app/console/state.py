"""Explicit UI state for the generation console.

State machine:
    Idle -> (trigger) -> Loading -> (response received or aborted) -> Idle.
    Results are populated only on the success path of that transition.

Invariants:
    - The issue is reset whenever the city changes.
    - A selected issue always belongs to the selected city's catalog entry.
    - Each trigger replaces the held image list wholesale.
"""

from dataclasses import dataclass, field
from typing import Iterable

from app.console.catalog import CLIMATE_ISSUES, issues_for
from app.core.result_types import ImageResult


@dataclass
class ConsoleState:
    city: str = ""
    issue: str = ""
    images: list[ImageResult] = field(default_factory=list)
    loading: bool = False

    @property
    def available_issues(self) -> list[str]:
        return issues_for(self.city) if self.city else []

    @property
    def can_generate(self) -> bool:
        return bool(self.city and self.issue and not self.loading)

    def select_city(self, city: str) -> None:
        """Select a catalog city and clear the dependent issue.

        Raises:
            ValueError: `city` is not in the catalog.
        """
        if city not in CLIMATE_ISSUES:
            raise ValueError(f"Unknown city: {city}")
        self.city = city
        self.issue = ""

    def select_issue(self, issue: str) -> None:
        """Select an issue from the current city's list.

        Raises:
            ValueError: No city selected, or the issue is not listed for it.
        """
        if not self.city:
            raise ValueError("Select a city first")
        if issue not in self.available_issues:
            raise ValueError(f"Unknown issue for {self.city}: {issue}")
        self.issue = issue

    def begin_generation(self) -> None:
        self.images = []
        self.loading = True

    def finish_generation(self, images: Iterable[ImageResult] | None = None) -> None:
        if images is not None:
            self.images = list(images)
        self.loading = False
