"""Paid-entries page.

- :mod:`UniApp.pages.paid_entries.controller` – The state machine driving ingestion and price fetches.
- :mod:`UniApp.pages.paid_entries.view` – State projection and the page widget.
"""
