"""Domain models."""

from rank_store.models.rank import RankEntry

__all__ = ["RankEntry"]
