"""PredPool - scoring and tiered payout allocation for prediction pools."""

__version__ = "0.1.0"
