"""
Datestamp strategies.

A strategy is an async callable taking (source file, destination root) and
returning a DatestampDeduction. Strategies always return; "no date found",
unreadable metadata and similar cases come back as a DeductionFailure.
New strategies only need to follow that signature to be used by
apply_datestamp_strategies().
"""
import asyncio
import functools
import logging
import re
from collections import Counter
from pathlib import Path
from typing import Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from PIL import Image

from .config import Config, config
from .datestamp import Datestamp
from .datestamp_deduction import (
    ConfidenceLevel, DatestampDeduction, DeductionFailure, DeductionSuccess,
)
from .deduction_aggregate import DatestampDeductionAggregate


logger = logging.getLogger(__name__)

DatestampStrategy = Callable[[Path, Path], Awaitable[DatestampDeduction]]

# Built-in strategies also take an optional cfg keyword; None means the global config

# YYYY[-_]MM[-_]DD with optional separators, e.g. 2012-08-06, 2012_08_06, 20120806
DATE_PATTERN = re.compile(
    r'(?P<date>(?P<year>(?:19|20)\d\d)[-_]?(?P<month>[01]\d)[-_]?(?P<day>[0123]\d))'
)

# EXIF tag ids
EXIF_IFD_POINTER = 0x8769
TAG_DATETIME_ORIGINAL = 0x9003
TAG_DATETIME = 0x0132

EXIF_DATE_PATTERN = re.compile(r'^\s*(\d{4})[:\-](\d{2})[:\-](\d{2})')


def destination_for(datestamp: Datestamp, source: Path, dest_root: Path) -> Path:
    """Where a file with this datestamp belongs: <root>/<YYYY>/<YYYY_MM_DD>/<name>."""
    return Path(dest_root) / datestamp.year_string() / str(datestamp) / source.name


def find_path_datestamp(text: str, year_window: Optional[int] = None
                        ) -> Tuple[Optional[Datestamp], Optional[str], List[str]]:
    """
    Find the first valid datestamp in a string.

    Returns:
        Tuple of (datestamp, matched text, rejection messages). The datestamp
        is None when nothing matched or every match failed validation.
    """
    rejections = []
    for m in DATE_PATTERN.finditer(text):
        result = Datestamp.from_strings(m.group('year'), m.group('month'), m.group('day'),
                                        year_window=year_window)
        if result.succeeded:
            return result.value, m.group('date'), rejections
        rejections.append(f"'{m.group('date')}': {result.error}")
    return None, None, rejections


async def datestamp_strategy_file_path(source: Path, dest_root: Path,
                                      cfg: Optional[Config] = None) -> DatestampDeduction:
    """Deduce the date from a date-shaped substring of the file's full path."""
    cfg = cfg or config
    abs_path = str(Path(source).absolute())

    datestamp, date_str, rejections = find_path_datestamp(abs_path, cfg.year_window)
    if datestamp is None:
        if rejections:
            return DeductionFailure(
                explanation=f"The file path '{abs_path}' contains date-like text that "
                            f"is not a valid date ({'; '.join(rejections)})."
            )
        return DeductionFailure(
            explanation=f"The file path '{abs_path}' does not contain a datestamp."
        )

    return DeductionSuccess(
        confidence=ConfidenceLevel.MEDIUM,
        datestamp=datestamp,
        explanation=f"The file path '{abs_path}' contains the date '{date_str}'.",
        dest_file=destination_for(datestamp, Path(source), dest_root),
    )


def read_exif_dates(path: Path) -> Tuple[Optional[str], Optional[str]]:
    """
    Read the raw EXIF date strings of an image.

    Returns:
        Tuple of (DateTimeOriginal, DateTime); either may be None

    Raises:
        OSError: If the file cannot be opened as an image
    """
    with Image.open(path) as img:
        exif = img.getexif()
        exif_ifd = exif.get_ifd(EXIF_IFD_POINTER)
        original = exif_ifd.get(TAG_DATETIME_ORIGINAL) or exif.get(TAG_DATETIME_ORIGINAL)
        modified = exif.get(TAG_DATETIME)
    return original, modified


def _parse_exif_date(value, year_window: Optional[int] = None) -> Optional[Datestamp]:
    if isinstance(value, bytes):
        value = value.decode('ascii', errors='ignore')
    if not isinstance(value, str):
        return None
    m = EXIF_DATE_PATTERN.match(value)
    if not m:
        return None
    result = Datestamp.from_strings(m.group(1), m.group(2), m.group(3), year_window=year_window)
    return result.value if result.succeeded else None


async def datestamp_strategy_exif(source: Path, dest_root: Path,
                                  cfg: Optional[Config] = None) -> DatestampDeduction:
    """Deduce the date from the image's embedded EXIF metadata."""
    cfg = cfg or config
    source = Path(source)
    if source.suffix.lower() not in cfg.image_with_metadata:
        return DeductionFailure(
            explanation=f"'{source}' is not an image type that carries EXIF metadata."
        )

    try:
        original, modified = await asyncio.to_thread(read_exif_dates, source)
    except (OSError, ValueError, SyntaxError) as e:
        logger.debug(f"Could not read EXIF from {source}: {e}")
        return DeductionFailure(explanation=f"Could not read EXIF metadata from '{source}': {e}")

    datestamp = _parse_exif_date(original, cfg.year_window)
    if datestamp is not None:
        return DeductionSuccess(
            confidence=ConfidenceLevel.HIGH,
            datestamp=datestamp,
            explanation=f"The EXIF DateTimeOriginal of '{source}' is '{original}'.",
            dest_file=destination_for(datestamp, source, dest_root),
        )

    datestamp = _parse_exif_date(modified, cfg.year_window)
    if datestamp is not None:
        return DeductionSuccess(
            confidence=ConfidenceLevel.MEDIUM,
            datestamp=datestamp,
            explanation=f"The EXIF DateTime of '{source}' is '{modified}'.",
            dest_file=destination_for(datestamp, source, dest_root),
        )

    return DeductionFailure(explanation=f"'{source}' has no usable EXIF date.")


def _list_siblings(source: Path) -> List[Path]:
    return [p for p in source.parent.iterdir() if p.is_file() and p.name != source.name]


async def datestamp_strategy_siblings(source: Path, dest_root: Path,
                                      cfg: Optional[Config] = None) -> DatestampDeduction:
    """
    Deduce the date from the names of the other files in the same folder.

    Useful for videos and edited images whose own names carry no date but
    sit next to camera files that do.
    """
    cfg = cfg or config
    source = Path(source)
    try:
        siblings = await asyncio.to_thread(_list_siblings, source)
    except OSError as e:
        return DeductionFailure(explanation=f"Could not list the folder of '{source}': {e}")

    votes: Counter = Counter()
    for sibling in siblings:
        datestamp, _, _ = find_path_datestamp(sibling.name, cfg.year_window)
        if datestamp is not None:
            votes[datestamp] += 1

    dated = sum(votes.values())
    if dated < cfg.sibling_min_dated:
        return DeductionFailure(
            explanation=f"Only {dated} sibling(s) of '{source}' have a datestamp in their name."
        )

    datestamp, count = votes.most_common(1)[0]
    if count * 2 <= dated:
        return DeductionFailure(
            explanation=f"No date holds a majority among the {dated} dated siblings of '{source}'."
        )

    return DeductionSuccess(
        confidence=ConfidenceLevel.LOW,
        datestamp=datestamp,
        explanation=f"{count} of {dated} dated siblings of '{source}' are from {datestamp}.",
        dest_file=destination_for(datestamp, source, dest_root),
    )


# Strategies selectable by name (CLI)
STRATEGIES: Dict[str, DatestampStrategy] = {
    'path': datestamp_strategy_file_path,
    'exif': datestamp_strategy_exif,
    'siblings': datestamp_strategy_siblings,
}

DEFAULT_STRATEGIES: List[DatestampStrategy] = [datestamp_strategy_file_path]


def get_strategies(names: Sequence[str]) -> List[DatestampStrategy]:
    """
    Look up strategies by name, keeping the given order.

    Raises:
        ValueError: For an unknown strategy name
    """
    strategies = []
    for name in names:
        if name not in STRATEGIES:
            raise ValueError(f"Unknown datestamp strategy '{name}'. Choose from: {', '.join(STRATEGIES)}")
        strategies.append(STRATEGIES[name])
    return strategies


def bind_config(strategies: Sequence[DatestampStrategy], cfg: Config) -> List[DatestampStrategy]:
    """Bind cfg to the built-in strategies; other strategies are kept as they are."""
    builtin = set(STRATEGIES.values())
    return [
        functools.partial(strategy, cfg=cfg) if strategy in builtin else strategy
        for strategy in strategies
    ]


async def apply_datestamp_strategies(
    source: Path,
    dest_root: Path,
    strategies: Sequence[DatestampStrategy],
) -> DatestampDeductionAggregate:
    """
    Run every strategy against a file concurrently.

    The aggregate keeps the deductions in strategy order, whatever order
    the strategies finish in.
    """
    deductions = await asyncio.gather(*(strategy(source, dest_root) for strategy in strategies))

    aggregate = DatestampDeductionAggregate()
    for deduction in deductions:
        aggregate.push(deduction)
    return aggregate
