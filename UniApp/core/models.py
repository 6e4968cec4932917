"""Data records for the paid-entries ledger and the price service.

Provides:
    - :class:`PurchaseEntry` and the :data:`Ledger` mapping read from the user's JSON file.
    - :class:`QuoteRecord` and its parts, and the :data:`QuoteTable` mapping returned by the
      price service.

The ``from_dict`` constructors raise ``TypeError``/``ValueError`` on shape mismatch; the
ingestion and price modules turn these into :class:`~UniApp.status.status.ParseException`.
"""
import dataclasses
from typing import Any, Dict, List, Optional

PURCHASE_ENTRY_SCHEMA: Dict[str, Any] = {
    'amount': {'type': (int, float)},
    'price': {'type': (int, float)},
    'date': {'type': (str,)},
    'note': {'type': (str,)},
}


def _is_number(v: Any) -> bool:
    return isinstance(v, (int, float)) and not isinstance(v, bool)


def _require(data: Dict[str, Any], key: str, _type: type, where: str) -> Any:
    if key not in data:
        raise ValueError(f'{where}: missing "{key}".')
    v = data[key]
    if _type is int:
        ok = isinstance(v, int) and not isinstance(v, bool)
    else:
        ok = isinstance(v, _type)
    if not ok:
        raise TypeError(f'{where}: "{key}" must be {_type.__name__}, got {type(v).__name__}.')
    return v


@dataclasses.dataclass(frozen=True)
class PurchaseEntry:
    """A single historical buy of an asset.

    Known fields are optional. Keys the application does not model are kept in
    ``extra`` so that a ledger survives a read/write cycle unchanged.
    """
    amount: Optional[float] = None
    price: Optional[float] = None
    date: Optional[str] = None
    note: Optional[str] = None
    extra: Dict[str, Any] = dataclasses.field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any, where: str = 'entry') -> 'PurchaseEntry':
        if not isinstance(data, dict):
            raise TypeError(f'{where} must be an object, got {type(data).__name__}.')

        values: Dict[str, Any] = {}
        extra: Dict[str, Any] = {}
        for k, v in data.items():
            if k not in PURCHASE_ENTRY_SCHEMA:
                extra[k] = v
                continue
            if v is None:
                values[k] = None
                continue
            _types = PURCHASE_ENTRY_SCHEMA[k]['type']
            if str in _types:
                if not isinstance(v, str):
                    raise TypeError(f'{where}: "{k}" must be a string, got {type(v).__name__}.')
            elif not _is_number(v):
                raise TypeError(f'{where}: "{k}" must be a number, got {type(v).__name__}.')
            values[k] = v

        return cls(extra=extra, **values)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        for k in PURCHASE_ENTRY_SCHEMA:
            v = getattr(self, k)
            if v is not None:
                data[k] = v
        data.update(self.extra)
        return data


Ledger = Dict[str, List[PurchaseEntry]]


@dataclasses.dataclass(frozen=True)
class Platform:
    """The platform (parent chain) a token is issued on."""
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Any, where: str = 'platform') -> 'Platform':
        if not isinstance(data, dict):
            raise TypeError(f'{where} must be an object or null, got {type(data).__name__}.')
        return cls(
            id=_require(data, 'id', int, where),
            name=_require(data, 'name', str, where),
        )


@dataclasses.dataclass(frozen=True)
class UsdQuote:
    price: Optional[float] = None


@dataclasses.dataclass(frozen=True)
class Quote:
    usd: Optional[UsdQuote] = None

    @classmethod
    def from_dict(cls, data: Any, where: str = 'quote') -> 'Quote':
        if not isinstance(data, dict):
            raise TypeError(f'{where} must be an object, got {type(data).__name__}.')

        usd = data.get('USD')
        if usd is None:
            return cls()
        if not isinstance(usd, dict):
            raise TypeError(f'{where}: "USD" must be an object, got {type(usd).__name__}.')

        price = usd.get('price')
        if price is not None and not _is_number(price):
            raise TypeError(f'{where}: "USD.price" must be a number or null, got {type(price).__name__}.')
        return cls(usd=UsdQuote(price=price))


@dataclasses.dataclass(frozen=True)
class QuoteRecord:
    """A price record returned by the price service for one asset symbol."""
    id: int
    name: str
    symbol: str
    platform: Optional[Platform]
    quote: Quote

    @property
    def price(self) -> Optional[float]:
        """The USD price, or None when the service has none."""
        return self.quote.usd.price if self.quote.usd else None

    @classmethod
    def from_dict(cls, data: Any, where: str = 'record') -> 'QuoteRecord':
        if not isinstance(data, dict):
            raise TypeError(f'{where} must be an object, got {type(data).__name__}.')

        platform = data.get('platform')
        return cls(
            id=_require(data, 'id', int, where),
            name=_require(data, 'name', str, where),
            symbol=_require(data, 'symbol', str, where),
            platform=Platform.from_dict(platform, f'{where}.platform') if platform is not None else None,
            quote=Quote.from_dict(_require(data, 'quote', dict, where), f'{where}.quote'),
        )


QuoteTable = Dict[str, List[QuoteRecord]]
