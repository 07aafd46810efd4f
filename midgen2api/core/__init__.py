"""Core contracts package.

Composition:
    - `results`: Tagged union describing one upstream generation outcome.
    - `errors`: Error taxonomy mapped to HTTP responses at the router boundary.

Package import is side-effect free.
"""
