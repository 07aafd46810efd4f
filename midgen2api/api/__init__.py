"""Midgen AI 2 API adapter package.

Architectural role:
- Defines the external HTTP boundary (`http_api`).
- Performs transport-level validation (`schemas`) and response shaping
  (`shapers`).
- Delegates upstream calls to `midgen2api.image`.
"""
