"""Reading the paid-entries ledger from a user-chosen JSON file.

The file is a JSON object mapping asset symbols to arrays of purchase-entry objects::

    {"BTC": [{"amount": 0.5, "price": 30000.0, "date": "2023-01-01"}], "ETH": []}

The whole file is read and parsed at once; either the entire ledger is accepted or
an exception is raised and nothing is.
"""
import json
import logging
import pathlib
from typing import Any, Dict, List, Union

from .models import Ledger, PurchaseEntry
from ..status import status


def parse_ledger(data: Any) -> Ledger:
    """Convert decoded JSON into a :data:`Ledger`.

    Args:
        data: The decoded JSON document.

    Returns:
        Ledger: Mapping of asset symbol to its purchase entries, in file order.

    Raises:
        TypeError: If the document, a symbol's value, or an entry has the wrong type.
    """
    if not isinstance(data, dict):
        raise TypeError(f'The ledger must be a JSON object, got {type(data).__name__}.')

    ledger: Ledger = {}
    for symbol, entries in data.items():
        if not isinstance(entries, list):
            raise TypeError(f'Entries of "{symbol}" must be an array, got {type(entries).__name__}.')
        ledger[symbol] = [
            PurchaseEntry.from_dict(entry, where=f'{symbol}[{idx}]')
            for idx, entry in enumerate(entries)
        ]
    return ledger


def ledger_to_json(ledger: Ledger) -> Dict[str, List[Dict[str, Any]]]:
    """Convert a :data:`Ledger` back into its JSON file shape."""
    return {symbol: [entry.to_dict() for entry in entries] for symbol, entries in ledger.items()}


def read_ledger(path: Union[str, pathlib.Path]) -> Ledger:
    """Read and parse a ledger file.

    Args:
        path: Path to the JSON file.

    Returns:
        Ledger: The parsed ledger.

    Raises:
        status.IoException: If the file is missing, is not a file, or cannot be read as text.
        status.ParseException: If the file is not valid JSON or does not have the ledger shape.
    """
    path = pathlib.Path(path)
    logging.debug(f'Reading ledger from "{path}"')

    try:
        text: str = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError) as ex:
        raise status.IoException(f'"{path}": {ex}') from ex

    try:
        data = json.loads(text)
    except json.JSONDecodeError as ex:
        raise status.ParseException(f'"{path}" is not valid JSON: {ex}') from ex

    try:
        ledger = parse_ledger(data)
    except (TypeError, ValueError) as ex:
        raise status.ParseException(f'"{path}": {ex}') from ex

    logging.debug(f'Loaded {len(ledger)} assets from "{path}"')
    return ledger
