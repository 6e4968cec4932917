"""Latest quotes from the remote price service.

One batched request is made per call: the symbols are joined into a single ``symbol``
query parameter and the API key travels in the ``X-API-KEY`` header. The key is never
logged and never included in exception messages.

No retry and no timeout are configured here; a hung request blocks its worker thread
until the connection is dropped.
"""
import logging
from typing import Any, Dict, Iterable, List

import requests

from .models import QuoteRecord, QuoteTable
from ..status import status

ENDPOINT: str = 'https://pro-api.coinmarketcap.com/v2/cryptocurrency/quotes/latest'
API_KEY_HEADER: str = 'X-API-KEY'


def normalize_symbols(symbols: Iterable[str]) -> List[str]:
    """Deduplicate and sort symbols. Order carries no meaning for the service."""
    return sorted(set(symbols))


def parse_quote_table(data: Any) -> QuoteTable:
    """Convert a decoded ``{"data": {...}}`` response body into a :data:`QuoteTable`.

    Raises:
        TypeError: If the body or one of its records has the wrong type.
        ValueError: If a required key is missing.
    """
    if not isinstance(data, dict):
        raise TypeError(f'Response must be a JSON object, got {type(data).__name__}.')
    if 'data' not in data:
        raise ValueError('Response is missing "data".')

    body = data['data']
    if not isinstance(body, dict):
        raise TypeError(f'"data" must be an object, got {type(body).__name__}.')

    table: QuoteTable = {}
    for symbol, records in body.items():
        if not isinstance(records, list):
            raise TypeError(f'Quotes of "{symbol}" must be an array, got {type(records).__name__}.')
        table[symbol] = [
            QuoteRecord.from_dict(record, where=f'{symbol}[{idx}]')
            for idx, record in enumerate(records)
        ]
    return table


def _error_message(response: requests.Response) -> str:
    """Extract the service's own error message from a failed response, if it sent one."""
    try:
        body: Dict[str, Any] = response.json()
        msg = body.get('status', {}).get('error_message')
    except (ValueError, AttributeError):
        msg = None
    return msg or response.reason or 'Request failed'


def fetch_quotes(api_key: str, symbols: Iterable[str], endpoint: str = ENDPOINT) -> QuoteTable:
    """Fetch the latest quotes for a set of asset symbols.

    Args:
        api_key: Credential for the price service.
        symbols: Asset symbols. Duplicates are collapsed.
        endpoint: Service URL.

    Returns:
        QuoteTable: Mapping of symbol to the records the service returned for it.

    Raises:
        status.NetworkException: On transport failure or a non-success HTTP status.
        status.ParseException: If the body is not JSON or does not have the expected shape.
    """
    symbols = normalize_symbols(symbols)
    if not symbols:
        logging.debug('No symbols to fetch quotes for.')
        return {}

    logging.debug(f'Fetching quotes for {len(symbols)} symbols: [{",".join(symbols)}]')
    try:
        response = requests.get(
            endpoint,
            params={'symbol': ','.join(symbols)},
            headers={API_KEY_HEADER: api_key, 'Accept': 'application/json'},
        )
    except requests.RequestException as ex:
        raise status.NetworkException(f'Request failed: {ex}') from ex

    if not response.ok:
        raise status.NetworkException(f'HTTP {response.status_code}: {_error_message(response)}')

    try:
        data = response.json()
    except ValueError as ex:
        raise status.ParseException(f'Response is not valid JSON: {ex}') from ex

    try:
        table = parse_quote_table(data)
    except (TypeError, ValueError) as ex:
        raise status.ParseException(str(ex)) from ex

    logging.debug(f'Fetched quotes for {len(table)} symbols.')
    return table
