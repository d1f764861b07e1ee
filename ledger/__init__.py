"""Investment ledger: accounts, bonuses, contributions and their projection."""

__version__ = "0.1.0"
