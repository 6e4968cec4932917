"""
Logging subsystem: handler setup and a viewer for application logging.

Modules:

- :mod:`UniApp.log.log` – Log handler integrating with Python logging.
- :mod:`UniApp.log.view` – Qt widget for browsing and filtering in-memory logs.
"""
