"""Fixed city -> climate issue catalog offered by the console."""

CLIMATE_ISSUES: dict[str, list[str]] = {
    "New York": ["Sea Level Rise", "Urban Heat Island", "Air Pollution"],
    "London": ["Flooding", "Air Quality", "Heat Waves"],
    "Tokyo": ["Typhoons", "Urban Flooding", "Heat Stress"],
    "Mumbai": ["Monsoon Flooding", "Coastal Erosion", "Air Pollution"],
}


def list_cities() -> list[str]:
    """Return catalog cities in display order."""
    return list(CLIMATE_ISSUES)


def issues_for(city: str) -> list[str]:
    """Return the issues for `city`, or an empty list for unknown cities."""
    return list(CLIMATE_ISSUES.get(city, []))
