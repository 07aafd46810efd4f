"""Upstream image generation adapter package.

Module split:
    - `client`: blocking HTTP transport and response classification.
    - `service`: async wrapper used by the HTTP handlers.

Non-goals:
    - No retries, backoff, or multi-provider routing.
    - No base64 decoding or image validation.
"""
