from __future__ import annotations

import re
from decimal import Decimal, InvalidOperation
from typing import Iterable, Sequence, Union

from splitledger.services.errors import InvalidAmount

OCTAS_PER_UNIT = 100_000_000
MAX_FRACTION_DIGITS = 8

_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]*$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{1,64}$")

MemoInput = Union[bytes, bytearray, Sequence[int], str]


def parse_amount(text: str) -> int:
    """
    Переводит сумму в базовых единицах (например, ``"1.5"``) в целые octas.

    Допускается не больше 8 знаков после запятой, сумма должна быть больше нуля.
    """
    cleaned = str(text).strip().replace(",", ".")
    try:
        amount = Decimal(cleaned)
    except InvalidOperation as exc:
        raise InvalidAmount("Некорректная сумма") from exc

    if not amount.is_finite():
        raise InvalidAmount("Некорректная сумма")
    if amount <= 0:
        raise InvalidAmount("Сумма должна быть больше нуля")

    exponent = amount.normalize().as_tuple().exponent
    if isinstance(exponent, int) and -exponent > MAX_FRACTION_DIGITS:
        raise InvalidAmount("Не больше 8 знаков после запятой")

    return int(amount * OCTAS_PER_UNIT)


def format_amount(octas: int, decimals: int = 4) -> str:
    value = Decimal(octas) / OCTAS_PER_UNIT
    return f"{value:.{decimals}f}"


def normalize_address(address: str) -> str:
    return address.strip().lower()


def is_valid_address(address: str) -> bool:
    return bool(_ADDRESS_RE.match(address.strip()))


def short_address(address: str) -> str:
    if len(address) <= 10:
        return address
    return f"{address[:6]}...{address[-4:]}"


def memo_to_bytes(value: MemoInput) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        if value.startswith("0x") or (value and _HEX_RE.match(value)):
            clean = value[2:] if value.startswith("0x") else value
            if _HEX_RE.match(clean):
                if len(clean) % 2:
                    clean += "0"
                return bytes.fromhex(clean)
        return value.encode("utf-8")
    return bytes(value)


def encode_memo(text: str) -> bytes:
    return text.strip().encode("utf-8")


def decode_memo(value: MemoInput) -> str:
    return memo_to_bytes(value).decode("utf-8", errors="replace")


def parse_weight_tokens(tokens: Iterable[str]) -> list[tuple[str, Decimal]]:
    """Разбирает токены вида ``0xabc=2`` или ``0xabc=33.34``."""
    result: list[tuple[str, Decimal]] = []
    for token in tokens:
        address, sep, raw_value = token.partition("=")
        if not sep or not address.strip():
            raise ValueError(f"Ожидается формат адрес=значение: {token}")
        try:
            value = Decimal(raw_value.strip().replace(",", "."))
        except InvalidOperation as exc:
            raise ValueError(f"Некорректное значение для {address}") from exc
        result.append((normalize_address(address), value))
    return result
