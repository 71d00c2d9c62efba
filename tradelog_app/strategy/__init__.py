"""Strategy association for the trade-entry form."""

from .association import StrategyAssociation

__all__ = ["StrategyAssociation"]
