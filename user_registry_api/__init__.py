"""
Top‑level package for the User Registry API.

All functionality lives in submodules under ``app``; the HTTP client
for the API is in ``client``.
"""

__all__ = []
