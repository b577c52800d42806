"""
Process wiring: settings, logging and the SQLite connection helpers.
"""
