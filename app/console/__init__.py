"""Generation console package (client side).

Architectural role:
- Holds the console's explicit UI state and the fixed city/issue catalog.
- Talks to the API over HTTP with a cancellation-token timeout.
- Implements generate, download and share handlers that report through
  notifications.

Presentation is not part of this package; `app.api.cli` renders it in a
terminal.
"""
