"""
Core package for UniApp providing the paid-entries services.

This package includes:

- :mod:`UniApp.core.models` – Purchase-entry and quote records.
- :mod:`UniApp.core.ingestion` – Reading and parsing the ledger JSON file.
- :mod:`UniApp.core.prices` – Batched quote requests against the remote price service.
- :mod:`UniApp.core.worker` – Background workers that report success or failure as data.
"""
