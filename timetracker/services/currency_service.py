"""
Currency conversion and locale-specific money formatting.

Formatting profiles:
  PL  "1 234,56 zł"   space grouping, comma decimal, suffix
  UA  "1 234,56 ₴"    space grouping, comma decimal, suffix
  EN  "$1,234.56"     comma grouping, dot decimal, prefix
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union
import logging

from timetracker.core.config import RateConfig, rate_config
from timetracker.core.exceptions import parse_enum
from timetracker.models.user import Language

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


class Currency(str, Enum):
    PLN = "PLN"
    UAH = "UAH"
    USD = "USD"


@dataclass(frozen=True)
class LocaleProfile:
    grouping: str
    decimal: str
    prefix: str = ""
    suffix: str = ""


PROFILES = {
    Language.PL: LocaleProfile(grouping=" ", decimal=",", suffix=" zł"),
    Language.UA: LocaleProfile(grouping=" ", decimal=",", suffix=" ₴"),
    Language.EN: LocaleProfile(grouping=",", decimal=".", prefix="$"),
}

_CURRENCY_LANGUAGE = {
    Currency.UAH.value: Language.UA,
    Currency.USD.value: Language.EN,
}


def currency_language(currency: Optional[str]) -> Language:
    """UAH formats as UA, USD as EN, anything else as PL."""
    key = (currency or "").strip().upper()
    return _CURRENCY_LANGUAGE.get(key, Language.PL)


def _resolve_language(language_or_currency: Union[Language, str, None]) -> Language:
    if isinstance(language_or_currency, Language):
        return language_or_currency
    key = (language_or_currency or "").strip().upper()
    for language in Language:
        if language.value == key:
            return language
    return currency_language(key)


def _group(digits: str, separator: str) -> str:
    """Insert *separator* every three digits counting from the right."""
    groups = []
    while len(digits) > 3:
        groups.insert(0, digits[-3:])
        digits = digits[:-3]
    groups.insert(0, digits)
    return separator.join(groups)


class CurrencyService:
    """Converts base-currency amounts and renders them per locale."""

    def __init__(self, rates: Optional[RateConfig] = None) -> None:
        self._rates = rates or rate_config

    @property
    def rates(self) -> RateConfig:
        return self._rates

    def parse_currency(self, raw: Union[Currency, str, None]) -> Currency:
        """Parse a currency code; a missing code means the base currency."""
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return parse_enum(Currency, self._rates.base_currency, "currency")
        return parse_enum(Currency, raw, "currency")

    def convert(self, amount: Decimal, target_currency: Union[Currency, str, None]) -> Decimal:
        """Convert a base-currency amount into *target_currency*."""
        target = self.parse_currency(target_currency)
        if target.value == self._rates.base_currency:
            return amount
        if target == Currency.UAH:
            converted = (amount * self._rates.pln_to_uah_rate).quantize(
                CENT, rounding=ROUND_HALF_UP
            )
        elif target == Currency.USD:
            converted = (amount / self._rates.usd_divisor).quantize(
                CENT, rounding=ROUND_HALF_UP
            )
        else:
            converted = amount
        logger.info("Converted %s %s -> %s %s", amount, self._rates.base_currency, converted, target.value)
        return converted

    def format(self, amount: Decimal, language_or_currency: Union[Language, str, None]) -> str:
        """Render *amount* with exactly two fractional digits in the locale profile."""
        profile = PROFILES[_resolve_language(language_or_currency)]
        rounded = amount.quantize(CENT, rounding=ROUND_HALF_UP)
        sign = "-" if rounded < 0 else ""
        integer_part, fraction_part = f"{abs(rounded):f}".split(".")
        body = f"{_group(integer_part, profile.grouping)}{profile.decimal}{fraction_part}"
        return f"{profile.prefix}{sign}{body}{profile.suffix}"
