"""
Photo Mover
===========

Sorts photos and videos into a <root>/<YYYY>/<YYYY_MM_DD>/ destination tree,
deducing each file's date with pluggable strategies.

Modules:
- config: Configuration settings
- logger_module: Structured session logging
- result: Success/failure value used by validating constructors
- datestamp: Validated calendar dates
- datestamp_deduction: Outcome of one strategy applied to one file
- deduction_aggregate: All deductions made for one file
- datestamp_strategy: File path, EXIF and sibling date strategies
- file_utils: Directory listing, unwanted-file filtering, transfers
- file_comparer: Content comparison of source and destination
- interaction_manager: Operator confirmations and choices
- report_manager: Review and transfer reports (CSV/Excel)
- main_orchestrator: Batch orchestrator
"""

from .config import Config, config
from .logger_module import MovePhotosLogger, LogAction
from .result import Result
from .datestamp import Datestamp
from .datestamp_deduction import (
    ConfidenceLevel, DeductionSuccess, DeductionFailure, DatestampDeduction,
    is_successful_deduction, is_failed_deduction
)
from .deduction_aggregate import DatestampDeductionAggregate
from .datestamp_strategy import (
    DatestampStrategy, STRATEGIES, DEFAULT_STRATEGIES,
    datestamp_strategy_file_path, datestamp_strategy_exif, datestamp_strategy_siblings,
    apply_datestamp_strategies, get_strategies, destination_for
)
from .file_utils import DirectoryWalker, FileOperations, partition_unwanted
from .file_comparer import FileComparer, FileComparisonError, compute_file_hash
from .interaction_manager import (
    InteractionManager, InteractionMode, DecisionType, DecisionOutcome,
    DecisionRequest, DecisionResult
)
from .report_manager import ReportManager, UnresolvedRecord, MoveRecord
from .main_orchestrator import (
    MovePhotosOrchestrator, BatchSummary, ProcessedFile, PipelineStage,
    UnresolvedReason, run_move_photos
)

__version__ = "0.3.0"
__all__ = [
    'Config', 'config',
    'MovePhotosLogger', 'LogAction',
    'Result',
    'Datestamp',
    'ConfidenceLevel', 'DeductionSuccess', 'DeductionFailure', 'DatestampDeduction',
    'is_successful_deduction', 'is_failed_deduction',
    'DatestampDeductionAggregate',
    'DatestampStrategy', 'STRATEGIES', 'DEFAULT_STRATEGIES',
    'datestamp_strategy_file_path', 'datestamp_strategy_exif', 'datestamp_strategy_siblings',
    'apply_datestamp_strategies', 'get_strategies', 'destination_for',
    'DirectoryWalker', 'FileOperations', 'partition_unwanted',
    'FileComparer', 'FileComparisonError', 'compute_file_hash',
    'InteractionManager', 'InteractionMode', 'DecisionType', 'DecisionOutcome',
    'DecisionRequest', 'DecisionResult',
    'ReportManager', 'UnresolvedRecord', 'MoveRecord',
    'MovePhotosOrchestrator', 'BatchSummary', 'ProcessedFile', 'PipelineStage',
    'UnresolvedReason', 'run_move_photos',
]
