"""
ScoringRuleTable - lookup over the configurable point rules.

Absence of a rule is a valid "no bonus" state: lookups fall back to zero
and log a warning.
"""

import logging
from typing import Iterable, Optional

from paddock_picks.models.scoring_rule import ScoringRule
from paddock_picks.scoring.errors import IncompleteRuleTableError

logger = logging.getLogger(__name__)

PODIUM = "podium"
MANUFACTURER = "manufacturer"

EXACT = "exact"
ON_PODIUM = "on_podium"
TOP_5 = "top_5"
OFF_1 = "off_1"
OFF_2 = "off_2"


class ScoringRuleTable:
    def __init__(self, rules: Iterable[ScoringRule]):
        self._rules: dict[tuple[str, Optional[int], str], int] = {}
        for rule in rules:
            key = (rule.category, rule.prediction_position, rule.result_type)
            if key in self._rules:
                logger.warning(f"⚠️ Duplicate scoring rule {key}, keeping the first one")
                continue
            self._rules[key] = rule.points

    def __len__(self) -> int:
        return len(self._rules)

    def _find(self, category: str, position: Optional[int], result_type: str) -> Optional[int]:
        # Position-specific rule first, then the generic one for the category
        points = self._rules.get((category, position, result_type))
        if points is None and position is not None:
            points = self._rules.get((category, None, result_type))
        return points

    def points_for(
        self,
        category: str,
        result_type: str,
        position: Optional[int] = None
    ) -> int:
        """Points for a (category, position, result_type) combination, 0 if absent."""
        points = self._find(category, position, result_type)
        if points is None:
            logger.warning(f"⚠️ No scoring rule for {(category, position, result_type)}, scoring 0 points")
            return 0
        return points

    def require(
        self,
        category: str,
        result_type: str,
        position: Optional[int] = None
    ) -> int:
        """Strict lookup for callers that treat a missing rule as a setup error."""
        points = self._find(category, position, result_type)
        if points is None:
            raise IncompleteRuleTableError(
                f"No scoring rule for category={category} position={position} result_type={result_type}"
            )
        return points

    def missing_rules(
        self,
        combinations: Iterable[tuple[str, Optional[int], str]]
    ) -> list[tuple[str, Optional[int], str]]:
        """(category, position, result_type) combinations the table does not cover."""
        missing = []
        for category, position, result_type in combinations:
            try:
                self.require(category, result_type, position)
            except IncompleteRuleTableError:
                missing.append((category, position, result_type))
        return missing
