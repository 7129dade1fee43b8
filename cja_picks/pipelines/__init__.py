"""Season standings pipelines."""

from .standings import StandingsPipeline, build_standings, build_user_history

__all__ = ["StandingsPipeline", "build_standings", "build_user_history"]
