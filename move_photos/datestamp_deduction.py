"""
Datestamp deductions: the outcome of one strategy applied to one file.

A deduction is either a DeductionSuccess (a date with a confidence and the
destination it implies) or a DeductionFailure (no clue, just an explanation).
"""
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import Union

from .datestamp import Datestamp


class ConfidenceLevel(IntEnum):
    """How much a deduction can be trusted."""
    NO_CLUE = 0
    LOW = 3
    MEDIUM = 6
    HIGH = 10


# Order in which confidence tiers are examined
CONFIDENCE_TIERS = (ConfidenceLevel.HIGH, ConfidenceLevel.MEDIUM, ConfidenceLevel.LOW)


@dataclass(frozen=True)
class DeductionSuccess:
    """A strategy found a date for the file."""
    confidence: ConfidenceLevel
    datestamp: Datestamp
    explanation: str
    dest_file: Path

    def __post_init__(self):
        if self.confidence == ConfidenceLevel.NO_CLUE:
            raise ValueError("A successful deduction cannot have NO_CLUE confidence")


@dataclass(frozen=True)
class DeductionFailure:
    """A strategy could not find a date for the file."""
    explanation: str

    @property
    def confidence(self) -> ConfidenceLevel:
        return ConfidenceLevel.NO_CLUE


DatestampDeduction = Union[DeductionSuccess, DeductionFailure]


def is_successful_deduction(deduction: DatestampDeduction) -> bool:
    if isinstance(deduction, DeductionSuccess):
        return True
    if isinstance(deduction, DeductionFailure):
        return False
    raise TypeError(f"Not a datestamp deduction: {deduction!r}")


def is_failed_deduction(deduction: DatestampDeduction) -> bool:
    return not is_successful_deduction(deduction)
