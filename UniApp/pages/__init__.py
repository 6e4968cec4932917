"""
Pages package: the closed set of navigable pages.

- :mod:`UniApp.pages.about_pc` – Host OS, architecture and current system time.
- :mod:`UniApp.pages.clock` – A ticking clock.
- :mod:`UniApp.pages.preferences` – User preferences backed by the config store.
- :mod:`UniApp.pages.paid_entries` – The paid-entries controller and its view.
"""
import enum


class Page(enum.StrEnum):
    """Navigable pages, in navigation order."""
    AboutPc = 'about_pc'
    Clock = 'clock'
    Preferences = 'preferences'
    PaidEntries = 'paid_entries'


PAGE_TITLES = {
    Page.AboutPc: 'About PC',
    Page.Clock: 'Clock',
    Page.Preferences: 'Preferences',
    Page.PaidEntries: 'Paid entries',
}
