from __future__ import annotations


class SplitLedgerError(ValueError):
    """Локальная ошибка валидации: до леджера такие данные не доходят."""


class NoValidWeights(SplitLedgerError):
    pass


class InvalidSplitSum(SplitLedgerError):
    pass


class InvalidAmount(SplitLedgerError):
    pass


class StaleOrMissingGroup(SplitLedgerError, LookupError):
    pass


class NothingToSettle(SplitLedgerError):
    pass
