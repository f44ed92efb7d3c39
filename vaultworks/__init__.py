"""In-memory resource ledger with token creation, token sales, transit tickets, a name service and utility-token services."""

__version__ = "0.1.0"