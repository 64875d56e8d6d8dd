"""GreenGitch API adapter package.

Architectural role:
- Defines the external interaction boundary: the HTTP API, its server
  entrypoint and the terminal console.
- Performs transport-level validation and response shaping.
- Delegates orchestration to the core layer and console handlers.
"""
