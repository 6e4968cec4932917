"""
Module for resolving the user's locale and formatting prices and times using Babel.

"""
import datetime
import logging
import os
from typing import Optional

from babel import Locale, UnknownLocaleError, numbers
from babel.dates import format_time

DEFAULT_LOCALE: str = 'en_US'


def get_locale() -> str:
    """
    Resolve the locale from the ``LC_TIME`` or ``LANG`` environment variables.

    The encoding suffix is dropped ('hu_HU.UTF-8' becomes 'hu_HU'). Values Babel does not
    know, and the 'C'/'POSIX' locales, fall back to DEFAULT_LOCALE.

    Returns:
        str: Locale identifier, e.g. 'en_US'.
    """
    v = os.environ.get('LC_TIME') or os.environ.get('LANG') or ''
    v = v.split('.')[0].split('@')[0]
    if not v or v in ('C', 'POSIX'):
        return DEFAULT_LOCALE

    try:
        Locale.parse(v)
    except (ValueError, UnknownLocaleError):
        logging.debug(f'Unknown locale "{v}", using {DEFAULT_LOCALE}')
        return DEFAULT_LOCALE
    return v


def format_price(value: Optional[float], locale: str, currency: str = 'USD') -> str:
    """
    Format a quote price as a currency string.

    Args:
        value (float, optional): The price. None is rendered as 'n/a'.
        locale (str): Locale string, e.g. 'en_US'.
        currency (str): ISO currency code. Quotes are always in USD.

    Returns:
        str: The formatted currency string.
    """
    if value is None:
        return 'n/a'
    try:
        return numbers.format_currency(value, currency, locale=Locale.parse(locale))
    except (ValueError, UnknownLocaleError) as e:
        logging.debug(f'Error formatting price: {e}')
        return f'{value} {currency}'


def format_system_time(value: Optional[datetime.datetime], locale: str) -> str:
    """
    Format a time of day for the About PC and Clock pages.

    Args:
        value (datetime.datetime, optional): The time to format. None renders as 'System time N/A'.
        locale (str): Locale string.

    Returns:
        str: The formatted time, e.g. '3:04:05 PM'.
    """
    if value is None:
        return 'System time N/A'
    try:
        return format_time(value, format='medium', locale=Locale.parse(locale))
    except (ValueError, UnknownLocaleError) as e:
        logging.debug(f'Error formatting time: {e}')
        return value.strftime('%H:%M:%S')
