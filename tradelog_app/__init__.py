"""
Tradelog App - Trade Journal Entry Core

Trade-entry core for a personal trading journal. Validates and normalizes
user-entered trades, derives duration and estimated P&L, associates trades
with user strategies, persists them, and broadcasts a trade-created event
to every other open view of the application.
"""

__version__ = "0.1.0"
__author__ = "Tradelog Team"
