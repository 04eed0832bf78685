"""
Exceptions raised by the scoring engine.
"""

from paddock_picks.models.score import RejectedPrediction


class ScoringError(Exception):
    """Base exception for scoring errors."""
    pass


class MissingPrerequisiteError(ScoringError):
    """Raised when results are requested before they exist.

    Fatal for the run: callers must not proceed to write-back.
    """
    pass


class IncompleteRuleTableError(ScoringError):
    """Raised by ScoringRuleTable.require() when a rule is absent.

    Normal lookups never raise this; a missing rule scores zero.
    """
    pass


class MalformedPredictionError(ScoringError):
    """Raised for a single bad prediction record (e.g. a duplicate slot)."""

    def __init__(self, user_id: str, context_id: str, key: str, reason: str):
        super().__init__(f"{reason} (user={user_id}, context={context_id}, key={key})")
        self.user_id = user_id
        self.context_id = context_id
        self.key = key
        self.reason = reason

    def to_rejected(self) -> RejectedPrediction:
        return RejectedPrediction(
            user_id=self.user_id, context_id=self.context_id, key=self.key, reason=self.reason
        )
