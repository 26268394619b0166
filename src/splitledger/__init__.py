"""SplitLedger: точные разбивки общих расходов и балансы по счетам из леджера."""

__version__ = "0.1.0"
