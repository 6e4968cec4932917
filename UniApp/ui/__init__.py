"""
UI package: application actions, main application setup, theming, and the main window.

This package provides:

- :mod:`UniApp.ui.actions` – Application-wide Qt signals and utility slots.
- :mod:`UniApp.ui.app` – QApplication subclass.
- :mod:`UniApp.ui.main` – Main window with page navigation.
- :mod:`UniApp.ui.ui` – Styling constants for sizes and colors, and the style sheet.
"""
