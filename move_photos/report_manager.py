"""
Report files for the photo mover.
Writes the manual-review list and the transfer plan of a batch.
"""
from pathlib import Path
from datetime import datetime
from typing import List, Optional
from dataclasses import dataclass, field, asdict
import pandas as pd

from .config import config


@dataclass
class UnresolvedRecord:
    """A file that needs a human to decide where it goes."""
    source_path: str
    reason: str                            # no_date, conflict, low_confidence, collision, error
    detail: Optional[str] = None
    candidate_dates: Optional[str] = None  # Comma separated YYYY_MM_DD
    proposed_dest: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class MoveRecord:
    """A planned (or enacted) transfer."""
    source_path: str
    dest_path: str
    datestamp: str
    confidence: str
    status: str                            # planned, moved, copied, already_present, skipped, failed
    detail: Optional[str] = None
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())


class ReportManager:
    """
    Collects report records in memory and writes them as CSV or Excel.
    """

    def __init__(self, report_dir: Path, report_format: Optional[str] = None):
        """
        Initialize the report manager.

        Args:
            report_dir: Directory where report files are written
            report_format: "csv" or "xlsx" (default: config.report_format)
        """
        self.report_dir = Path(report_dir)
        self.report_format = report_format or config.report_format

        self.unresolved: List[UnresolvedRecord] = []
        self.moves: List[MoveRecord] = []

    @property
    def unresolved_path(self) -> Path:
        return self.report_dir / f"unresolved.{self.report_format}"

    @property
    def moves_path(self) -> Path:
        return self.report_dir / f"moves.{self.report_format}"

    def add_unresolved(self, record: UnresolvedRecord):
        self.unresolved.append(record)

    def add_move(self, record: MoveRecord):
        self.moves.append(record)

    def unresolved_dataframe(self) -> pd.DataFrame:
        columns = list(UnresolvedRecord.__dataclass_fields__.keys())
        return pd.DataFrame([asdict(r) for r in self.unresolved], columns=columns)

    def moves_dataframe(self) -> pd.DataFrame:
        columns = list(MoveRecord.__dataclass_fields__.keys())
        return pd.DataFrame([asdict(r) for r in self.moves], columns=columns)

    def _write(self, df: pd.DataFrame, path: Path):
        if self.report_format == 'xlsx':
            df.to_excel(path, index=False)
        else:
            df.to_csv(path, index=False, encoding='utf-8')

    def save(self) -> List[Path]:
        """
        Write every report.

        Returns:
            Paths of the files written
        """
        self.report_dir.mkdir(parents=True, exist_ok=True)
        self._write(self.unresolved_dataframe(), self.unresolved_path)
        self._write(self.moves_dataframe(), self.moves_path)
        return [self.unresolved_path, self.moves_path]

    def get_reason_counts(self) -> dict:
        """Number of unresolved files per reason."""
        df = self.unresolved_dataframe()
        if df.empty:
            return {}
        return {str(k): int(v) for k, v in df['reason'].value_counts().items()}
