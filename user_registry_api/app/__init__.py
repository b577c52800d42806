"""
Application package initializer.

This package contains the main entrypoint for the API and its
submodules.  Request handling lives in ``api/v1/endpoints``, business
rules in ``services``, payload models in ``schemas`` and process
wiring (configuration, logging, database) in ``core``.
"""

from .main import app, create_app  # noqa: F401
