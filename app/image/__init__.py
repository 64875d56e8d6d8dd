"""Image generation adapter package.

Scope:
    Provides text-to-image provider clients (DALL-E through the OpenAI SDK,
    Stability AI over HTTP), their configuration, and the provider capability
    iterated by core orchestration.

Non-goals:
    - No Base64 decoding; payloads are passed through as returned.
    - No image caching or storage.
    - No retry/backoff.
"""
