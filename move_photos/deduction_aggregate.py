"""
Collects the deductions every strategy made for a single file.
"""
from typing import List, Sequence

from .datestamp import Datestamp
from .datestamp_deduction import (
    CONFIDENCE_TIERS, ConfidenceLevel, DatestampDeduction, DeductionFailure,
    DeductionSuccess, is_failed_deduction, is_successful_deduction,
)


class DatestampDeductionAggregate:
    """
    Ordered deductions for one source file (one per strategy, in strategy order).
    """

    def __init__(self, deductions: Sequence[DatestampDeduction] = ()):
        self._deductions: List[DatestampDeduction] = list(deductions)

    @property
    def deductions(self) -> tuple:
        return tuple(self._deductions)

    def push(self, deduction: DatestampDeduction) -> None:
        self._deductions.append(deduction)

    def has_successful_deductions(self) -> bool:
        return any(is_successful_deduction(d) for d in self._deductions)

    def get_successful_deductions(self) -> List[DeductionSuccess]:
        return [d for d in self._deductions if is_successful_deduction(d)]

    def get_failed_deduction_explanations(self) -> List[str]:
        failed: List[DeductionFailure] = [d for d in self._deductions if is_failed_deduction(d)]
        return [d.explanation for d in failed]

    def is_conflicted(self) -> bool:
        """
        Check whether the successful deductions disagree on the date.

        Raises:
            ValueError: If there are no successful deductions. Check
                has_successful_deductions() first.
        """
        successful = self.get_successful_deductions()
        if not successful:
            raise ValueError(
                "is_conflicted() called with no successful deductions. "
                "Test to see if this aggregate is successful first."
            )

        first = successful[0].datestamp
        return not all(d.datestamp == first for d in successful)

    def get_highest_confidence_deductions(self) -> List[DeductionSuccess]:
        """
        Get every successful deduction in the highest populated confidence tier.

        Tiers are examined in order HIGH, MEDIUM, LOW.
        """
        successful = self.get_successful_deductions()
        if not successful:
            return []

        for tier in CONFIDENCE_TIERS:
            group = [d for d in successful if d.confidence == tier]
            if group:
                return group
        return []

    def distinct_datestamps(self) -> List[Datestamp]:
        """Datestamps of the successful deductions, first-seen order."""
        seen: List[Datestamp] = []
        for deduction in self.get_successful_deductions():
            if deduction.datestamp not in seen:
                seen.append(deduction.datestamp)
        return seen

    def is_high_confidence(self, minimum: int = ConfidenceLevel.MEDIUM) -> bool:
        """True when the file can be placed without asking anybody."""
        highest = self.get_highest_confidence_deductions()
        return (
            len(highest) > 0
            and not self.is_conflicted()
            and highest[0].confidence >= minimum
        )

    def __len__(self) -> int:
        return len(self._deductions)

    def __repr__(self) -> str:
        return f"DatestampDeductionAggregate({self._deductions!r})"
