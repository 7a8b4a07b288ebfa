"""Plain-text leaderboard formatting."""

from rank_store.models.rank import RankEntry


def format_rank_line(position: int, entry: RankEntry) -> str:
    """Format: #1 alice 42."""
    return f"#{position} {entry.name} {entry.score}"


def format_leaderboard(entries: list[RankEntry]) -> str:
    """One line per entry, in the order given."""
    if not entries:
        return "No ranks recorded."
    return "\n".join(format_rank_line(i, entry) for i, entry in enumerate(entries, start=1))
