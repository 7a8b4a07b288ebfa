"""Leaderboard entry model."""

from pydantic import BaseModel, ConfigDict

from rank_store.db.columns import Record


class RankEntry(BaseModel):
    """One leaderboard row: a player name and their score."""

    model_config = ConfigDict(frozen=True, strict=True)

    name: str
    score: int

    @classmethod
    def from_record(cls, record: Record) -> "RankEntry":
        """Build from a decoded (name, score) record."""
        name, score = record
        return cls(name=name, score=score)
