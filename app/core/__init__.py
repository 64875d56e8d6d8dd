"""Core orchestration package.

Architectural role:
    Exposes the request-orchestration layer that sits between the HTTP API and
    the image provider adapters.

Composition:
    - `engine`: Validation, provider iteration and result normalization.
    - `result_types`: Request/response envelopes shared with the console.

Determinism and side effects:
    Package import itself is deterministic and side-effect free. Provider calls
    are performed by `engine` during request processing.
"""
