"""Prompt assembly for awareness image generation.

This module is intentionally narrow: it only builds the prompt string from an
already validated city/issue pair. Validation and provider invocation happen
outside this module.

Design constraints:
    - Deterministic construction for identical inputs.
    - One prompt per request, shared by every provider.
    - No hidden side effects (no I/O, no global state mutation).

Prompt safety model:
    - City and issue are interpolated as raw strings. The console only offers
      catalog values, but the server does not enforce the catalog.
"""


# =========================================================
# AWARENESS PROMPT
# =========================================================
# Prompt component order:
#   1) Subject: impact of the issue in the city
#   2) Style directive

AWARENESS_TEMPLATE = (
    "Create a climate change awareness image showing the impact of {issue} in {city}."
)

STYLE_DIRECTIVE = "Style: realistic, dramatic lighting, emotional impact"


def build_awareness_prompt(city: str, issue: str) -> str:
    """Build the text-to-image prompt for a city/issue pair.

    Args:
        city: Selected city name.
        issue: Climate issue belonging to that city.

    Returns:
        Prompt string sent unchanged to every provider.
    """
    return AWARENESS_TEMPLATE.format(issue=issue, city=city) + " " + STYLE_DIRECTIVE
