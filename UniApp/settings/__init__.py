"""
Settings package: configuration store and locale helpers.

This package provides:

- :mod:`UniApp.settings.lib` – The versioned configuration record and its durable store.
- :mod:`UniApp.settings.locale` – Locale lookup and Babel-backed number and time formatting.
"""
