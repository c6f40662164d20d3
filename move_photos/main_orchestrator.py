"""
Main Orchestrator Module for the photo mover.
Coordinates all modules to execute one batch:
scan -> remove unwanted -> deduce dates -> classify -> check duplicates ->
remove redundant sources -> transfer -> report
"""
import asyncio
import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from .config import Config, config as default_config
from .datestamp import Datestamp
from .datestamp_deduction import ConfidenceLevel
from .datestamp_strategy import (
    DEFAULT_STRATEGIES, DatestampStrategy, apply_datestamp_strategies, bind_config,
    destination_for,
)
from .deduction_aggregate import DatestampDeductionAggregate
from .file_comparer import FileComparer, FileComparisonError
from .file_utils import DirectoryWalker, FileOperations, partition_unwanted
from .interaction_manager import (
    DecisionOutcome, DecisionType, InteractionManager, InteractionMode,
)
from .logger_module import MovePhotosLogger
from .report_manager import MoveRecord, ReportManager, UnresolvedRecord


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERRORS = 1
EXIT_ABORTED = 3


class PipelineStage(Enum):
    """Stages of one batch."""
    INIT = "init"
    SCANNING = "scanning"
    UNWANTED_CLEANUP = "unwanted_cleanup"
    DEDUCTION = "deduction"
    CLASSIFICATION = "classification"
    DUPLICATE_CHECK = "duplicate_check"
    REDUNDANT_CLEANUP = "redundant_cleanup"
    TRANSFER = "transfer"
    REPORTING = "reporting"
    COMPLETED = "completed"
    FAILED = "failed"


class UnresolvedReason(Enum):
    """Why a file was left for manual review."""
    NO_DATE = "no_date"
    CONFLICT = "conflict"
    LOW_CONFIDENCE = "low_confidence"
    COLLISION = "collision"
    ERROR = "error"


@dataclass
class ProcessedFile:
    """A wanted source file and what the batch decided about it."""
    source: Path
    aggregate: Optional[DatestampDeductionAggregate] = None

    # Set once the file is placed
    datestamp: Optional[Datestamp] = None
    confidence: Optional[ConfidenceLevel] = None
    dest_file: Optional[Path] = None
    chosen_by_operator: bool = False

    # Set when the file needs review
    unresolved_reason: Optional[UnresolvedReason] = None
    detail: Optional[str] = None

    def candidate_dates(self) -> List[Datestamp]:
        if self.aggregate is None or not self.aggregate.has_successful_deductions():
            return []
        return self.aggregate.distinct_datestamps()


@dataclass
class BatchSummary:
    """Outcome of one batch."""
    source_dir: Path
    dest_root: Path
    dry_run: bool = False
    total_files: int = 0
    unwanted: List[Path] = field(default_factory=list)
    unwanted_deleted: int = 0
    high_confidence: List[ProcessedFile] = field(default_factory=list)
    already_present: List[ProcessedFile] = field(default_factory=list)
    in_place: List[ProcessedFile] = field(default_factory=list)   # source is its own destination
    redundant_deleted: int = 0
    transferred: List[ProcessedFile] = field(default_factory=list)
    planned: List[ProcessedFile] = field(default_factory=list)   # dry run only
    unresolved: List[ProcessedFile] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    aborted_steps: List[str] = field(default_factory=list)
    report_files: List[Path] = field(default_factory=list)

    @property
    def aborted(self) -> bool:
        return len(self.aborted_steps) > 0

    @property
    def exit_code(self) -> int:
        if self.aborted:
            return EXIT_ABORTED
        if self.errors:
            return EXIT_ERRORS
        return EXIT_OK

    def to_dict(self) -> dict:
        return {
            'source_dir': str(self.source_dir),
            'dest_root': str(self.dest_root),
            'dry_run': self.dry_run,
            'total_files': self.total_files,
            'unwanted': len(self.unwanted),
            'unwanted_deleted': self.unwanted_deleted,
            'high_confidence': len(self.high_confidence),
            'already_present': len(self.already_present),
            'in_place': len(self.in_place),
            'redundant_deleted': self.redundant_deleted,
            'transferred': len(self.transferred),
            'planned': len(self.planned),
            'unresolved': len(self.unresolved),
            'errors': len(self.errors),
            'aborted_steps': list(self.aborted_steps),
        }


class MovePhotosOrchestrator:
    """
    Moves a batch of source files into a date-organised destination tree.

    Batch stages:
    1. SCANNING: List every file under the source directory
    2. UNWANTED_CLEANUP: Offer OS junk files (Thumbs.db, .DS_Store...) for deletion
    3. DEDUCTION: Run every datestamp strategy on every remaining file
    4. CLASSIFICATION: Split into high confidence files and files needing review
       (optionally letting the operator pick a date for conflicted files)
    5. DUPLICATE_CHECK: Compare each high confidence file with its destination
    6. REDUNDANT_CLEANUP: Offer sources already present at the destination for deletion
    7. TRANSFER: Preview, confirm, then move/copy the remaining files one at a time
    8. REPORTING: Write the review and transfer reports

    Every deletion and transfer goes through a batch-level confirmation.
    """

    def __init__(
        self,
        source_dir: Path,
        dest_root: Path,
        strategies: Optional[Sequence[DatestampStrategy]] = None,
        interaction_manager: Optional[InteractionManager] = None,
        cfg: Optional[Config] = None,
        dry_run: bool = False,
        resolve_conflicts: bool = False,
        output_func: Callable[[str], None] = print,
        console_log_level: int = logging.INFO,
    ):
        """
        Initialize the orchestrator.

        Args:
            source_dir: Directory holding the files to sort
            dest_root: Root of the date-organised destination tree
            strategies: Ordered datestamp strategies (default: file path only)
            interaction_manager: Answers the confirmation prompts
            cfg: Configuration (default: global config)
            dry_run: If True, preview every deletion and transfer without enacting it
            resolve_conflicts: Ask the operator to pick a date for conflicted files
            output_func: Writes one line of operator-facing text
            console_log_level: Minimum level of session log lines echoed to the console

        Raises:
            NotADirectoryError: If the source or destination directory does not exist
            ValueError: If the source is the destination or lies inside it
        """
        self.source_dir = Path(source_dir)
        self.dest_root = Path(dest_root)
        if not self.source_dir.is_dir():
            raise NotADirectoryError(f"Source directory not found: {self.source_dir}")
        if not self.dest_root.is_dir():
            raise NotADirectoryError(f"Destination directory not found: {self.dest_root}")
        resolved_source = self.source_dir.resolve()
        resolved_dest = self.dest_root.resolve()
        if resolved_source == resolved_dest or resolved_dest in resolved_source.parents:
            raise ValueError(
                f"Source {self.source_dir} must not be the destination or lie inside it ({self.dest_root})"
            )

        self.config = cfg or default_config
        self.strategies = list(strategies) if strategies else list(DEFAULT_STRATEGIES)
        self._bound_strategies = bind_config(self.strategies, self.config)
        self.interaction_manager = interaction_manager or InteractionManager(InteractionMode.INTERACTIVE)
        self.dry_run = dry_run
        self.resolve_conflicts = resolve_conflicts
        self.output = output_func

        self.walker = DirectoryWalker()
        self.stage = PipelineStage.INIT
        self.summary = BatchSummary(self.source_dir, self.dest_root, dry_run=dry_run)

        self.log_dir = self.config.get_log_dir(self.dest_root)
        self.report_dir = self.config.get_report_dir(self.dest_root)
        self.report_manager = ReportManager(self.report_dir, self.config.report_format)
        self.action_logger = MovePhotosLogger(self.log_dir, console_level=console_log_level)

        self._semaphore: Optional[asyncio.Semaphore] = None

    @property
    def prefix(self) -> str:
        return "[DRY RUN] " if self.dry_run else ""

    async def run(self) -> BatchSummary:
        """
        Run the whole batch.

        Returns:
            BatchSummary with counts and the files behind them
        """
        self._semaphore = asyncio.Semaphore(self.config.max_concurrency)
        self.action_logger.info(
            f"{self.prefix}Source: {self.source_dir} | Destination: {self.dest_root} | "
            f"Strategies: {', '.join(getattr(s, '__name__', repr(s)) for s in self.strategies)}"
        )

        try:
            files = await self._run_scanning()
            wanted = await self._run_unwanted_cleanup(files)
            processed = await self._run_deduction(wanted)
            high_confidence = self._run_classification(processed)
            to_transfer = await self._run_duplicate_check(high_confidence)
            await self._run_redundant_cleanup(list(self.summary.already_present))
            await self._run_transfer(to_transfer)
            self._run_reporting()

            self.stage = PipelineStage.COMPLETED
            logger.info("Batch completed")

        except Exception as e:
            failed_stage = self.stage
            self.stage = PipelineStage.FAILED
            self.action_logger.error(f"Batch failed during {failed_stage.value}", e)
            raise

        return self.summary

    def close(self):
        self.action_logger.close()

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    def _skip_dirs(self) -> List[Path]:
        """Destination and bookkeeping folders that may sit inside the source."""
        return [self.dest_root, self.log_dir, self.report_dir]

    async def _run_scanning(self) -> List[Path]:
        """Stage 1: List every file under the source."""
        self.stage = PipelineStage.SCANNING
        self.action_logger.stage_start("SCANNING", str(self.source_dir))
        self.output(f"Finding all files in {self.source_dir}...")

        files, _ = await asyncio.to_thread(
            self.walker.list_files, self.source_dir, True, self._skip_dirs()
        )
        for f in files:
            self.action_logger.file_scanned(f)

        self.summary.total_files = len(files)
        self.output(f"Source files found: {len(files)}")
        self.action_logger.stage_end("SCANNING", f"{len(files)} files")
        return files

    async def _run_unwanted_cleanup(self, files: List[Path]) -> List[Path]:
        """Stage 2: Set OS junk files aside and offer them for deletion."""
        self.stage = PipelineStage.UNWANTED_CLEANUP
        self.action_logger.stage_start("UNWANTED_CLEANUP")

        unwanted, wanted = partition_unwanted(files, self.config.unwanted_patterns)
        self.summary.unwanted = unwanted
        self.output(f"Unwanted files: {len(unwanted)}")
        for f in unwanted:
            self.action_logger.unwanted_found(f)

        if unwanted:
            self.summary.unwanted_deleted = await self._delete_batch(
                DecisionType.DELETE_UNWANTED,
                f"Delete {len(unwanted)} unwanted files?",
                [(f, "unwanted") for f in unwanted],
                verify_identical_to=None,
            )

        self.action_logger.stage_end(
            "UNWANTED_CLEANUP",
            f"Unwanted: {len(unwanted)} | Deleted: {self.summary.unwanted_deleted}"
        )
        return wanted

    async def _run_deduction(self, files: List[Path]) -> List[ProcessedFile]:
        """Stage 3: Apply the datestamp strategies to every file."""
        self.stage = PipelineStage.DEDUCTION
        self.action_logger.stage_start("DEDUCTION", f"{len(files)} files, {len(self.strategies)} strategies")
        self.output(f"Deducing dates for {len(files)} files...")

        async def _deduce(path: Path) -> ProcessedFile:
            async with self._semaphore:
                try:
                    aggregate = await apply_datestamp_strategies(path, self.dest_root, self._bound_strategies)
                except Exception as e:
                    # Strategies should never raise; keep the file out of automatic action
                    self._record_error(path, f"Date deduction failed: {type(e).__name__}: {e}")
                    return ProcessedFile(
                        source=path,
                        unresolved_reason=UnresolvedReason.ERROR,
                        detail=f"Date deduction failed: {e}",
                    )
                return ProcessedFile(source=path, aggregate=aggregate)

        processed = list(await asyncio.gather(*(_deduce(p) for p in files)))

        self.action_logger.stage_end("DEDUCTION", f"{len(processed)} files")
        return processed

    def _run_classification(self, processed: List[ProcessedFile]) -> List[ProcessedFile]:
        """Stage 4: Decide which files can be placed without review."""
        self.stage = PipelineStage.CLASSIFICATION
        self.action_logger.stage_start("CLASSIFICATION")

        high_confidence: List[ProcessedFile] = []
        conflicted: List[ProcessedFile] = []

        for pf in processed:
            if pf.unresolved_reason is not None:
                self._queue_review(pf, pf.unresolved_reason, pf.detail or "")
                continue

            aggregate = pf.aggregate
            if not aggregate.has_successful_deductions():
                explanations = aggregate.get_failed_deduction_explanations()
                self.action_logger.date_missing(pf.source, explanations)
                self._queue_review(pf, UnresolvedReason.NO_DATE, "; ".join(explanations))
            elif aggregate.is_conflicted():
                self.action_logger.date_conflict(pf.source, aggregate.distinct_datestamps())
                conflicted.append(pf)
            elif aggregate.is_high_confidence(self.config.min_move_confidence):
                best = aggregate.get_highest_confidence_deductions()[0]
                pf.datestamp = best.datestamp
                pf.confidence = best.confidence
                pf.dest_file = best.dest_file
                self.action_logger.date_deduced(
                    pf.source, str(best.datestamp), best.confidence.name,
                    len(aggregate.get_successful_deductions())
                )
                high_confidence.append(pf)
            else:
                best = aggregate.get_highest_confidence_deductions()[0]
                self._queue_review(
                    pf, UnresolvedReason.LOW_CONFIDENCE,
                    f"Best guess {best.datestamp} ({best.confidence.name}): {best.explanation}"
                )

        if conflicted:
            high_confidence.extend(self._resolve_conflicts(conflicted))

        self.summary.high_confidence = high_confidence
        self.output(f"High confidence files: {len(high_confidence)}")
        self.output(f"Files still unaccounted for: {len(self.summary.unresolved)}")
        self.action_logger.stage_end(
            "CLASSIFICATION",
            f"High confidence: {len(high_confidence)} | Unresolved: {len(self.summary.unresolved)}"
        )
        return high_confidence

    def _resolve_conflicts(self, conflicted: List[ProcessedFile]) -> List[ProcessedFile]:
        """
        Let the operator pick the date of conflicted files, one file at a time.

        Without resolve_conflicts (or outside interactive mode) every
        conflicted file goes to review; no date is picked automatically.
        """
        resolved: List[ProcessedFile] = []
        ask = self.resolve_conflicts and self.interaction_manager.is_interactive()
        aborted = False

        for pf in conflicted:
            candidates = pf.candidate_dates()
            detail = self._conflict_detail(pf)

            if not ask or aborted:
                self._queue_review(pf, UnresolvedReason.CONFLICT, detail)
                continue

            options = [(self._candidate_label(pf, d), d) for d in candidates]
            options.append(("Skip (leave for manual review)", None))
            result = self.interaction_manager.choose(
                DecisionType.RESOLVE_CONFLICT,
                f"The datestamp strategies disagree about {pf.source}:\n{detail}",
                options,
            )
            self.action_logger.decision(f"RESOLVE_CONFLICT {pf.source.name}", result.outcome.value)

            if result.outcome == DecisionOutcome.ABORT:
                aborted = True
                self._mark_aborted("RESOLVE_CONFLICTS")
                self._queue_review(pf, UnresolvedReason.CONFLICT, detail)
            elif result.outcome == DecisionOutcome.SELECTED and result.value is not None:
                chosen: Datestamp = result.value
                agreeing = [d for d in pf.aggregate.get_successful_deductions() if d.datestamp == chosen]
                pf.datestamp = chosen
                pf.confidence = max(d.confidence for d in agreeing)
                pf.dest_file = destination_for(chosen, pf.source, self.dest_root)
                pf.chosen_by_operator = True
                resolved.append(pf)
            else:
                self._queue_review(pf, UnresolvedReason.CONFLICT, detail)

        return resolved

    async def _run_duplicate_check(self, high_confidence: List[ProcessedFile]) -> List[ProcessedFile]:
        """Stage 5: Compare each placed file with what its destination already holds."""
        self.stage = PipelineStage.DUPLICATE_CHECK
        self.action_logger.stage_start("DUPLICATE_CHECK", f"{len(high_confidence)} files")

        async def _check(pf: ProcessedFile) -> Tuple[ProcessedFile, Optional[str], Optional[str]]:
            async with self._semaphore:
                try:
                    status = await self._destination_status(pf)
                except FileComparisonError as e:
                    return pf, None, str(e)
                return pf, status, None

        results = await asyncio.gather(*(_check(pf) for pf in high_confidence))

        to_transfer: List[ProcessedFile] = []
        for pf, status, error in results:
            if error is not None:
                self.action_logger.hash_error(pf.source.name, error)
                self._record_error(pf.source, error)
                self._queue_review(pf, UnresolvedReason.ERROR, error)
            elif status == "in_place":
                self._keep_in_place(pf)
            elif status == "identical":
                self.action_logger.duplicate_found(pf.source, pf.dest_file)
                self.summary.already_present.append(pf)
                self._record_move(pf, "already_present")
            elif status == "collision":
                self.action_logger.collision_found(pf.source, pf.dest_file)
                self._queue_review(pf, UnresolvedReason.COLLISION,
                                   f"{pf.dest_file} exists with different content")
            else:
                to_transfer.append(pf)

        self.output(f"Already present at destination: {len(self.summary.already_present)}")
        self.action_logger.stage_end(
            "DUPLICATE_CHECK",
            f"Identical: {len(self.summary.already_present)} | To transfer: {len(to_transfer)}"
        )
        return to_transfer

    async def _run_redundant_cleanup(self, present: List[ProcessedFile]):
        """Stage 6: Offer sources that already exist at the destination for deletion."""
        self.stage = PipelineStage.REDUNDANT_CLEANUP
        if not present:
            return

        self.action_logger.stage_start("REDUNDANT_CLEANUP", f"{len(present)} files")
        deleted = await self._delete_batch(
            DecisionType.DELETE_REDUNDANT,
            f"{len(present)} source files are identical to files already at the destination. Delete them?",
            [(pf.source, f"identical to {pf.dest_file}") for pf in present],
            verify_identical_to={pf.source: pf.dest_file for pf in present},
        )
        self.summary.redundant_deleted += deleted
        self.action_logger.stage_end("REDUNDANT_CLEANUP", f"Deleted: {deleted}")

    async def _run_transfer(self, to_transfer: List[ProcessedFile]):
        """Stage 7: Preview, confirm, then transfer the files one at a time."""
        self.stage = PipelineStage.TRANSFER
        if not to_transfer:
            self.output("No files to transfer.")
            return

        mode = self.config.transfer_mode
        self.action_logger.stage_start("TRANSFER", f"{len(to_transfer)} files ({mode})")
        plan = [
            f"{pf.source} -> {pf.dest_file} [{pf.datestamp}, {pf.confidence.name}]"
            for pf in to_transfer
        ]

        if self.dry_run:
            self.output(f"\n{self.prefix}Would {mode} {len(to_transfer)} files:")
            for line in plan:
                self.output(f"  [WOULD {mode.upper()}] {line}")
            for pf in to_transfer:
                self._record_move(pf, "planned")
            self.summary.planned = list(to_transfer)
            self.action_logger.stage_end("TRANSFER", "dry run")
            return

        outcome = self.interaction_manager.confirm(
            DecisionType.TRANSFER_FILES,
            f"{mode.capitalize()} {len(to_transfer)} files into {self.dest_root}?",
            plan,
        )
        self.action_logger.decision("TRANSFER_FILES", outcome.value)

        if outcome != DecisionOutcome.YES:
            if outcome == DecisionOutcome.ABORT:
                self._mark_aborted("TRANSFER")
            for pf in to_transfer:
                self._record_move(pf, "skipped", f"operator answered {outcome.value}")
            self.action_logger.stage_end("TRANSFER", f"not confirmed ({outcome.value})")
            return

        # Sequential so every transfer sees the destination as left by the previous one
        present_before = len(self.summary.already_present)
        for pf in to_transfer:
            await self._transfer_one(pf, mode)

        self.output(f"Transferred: {len(self.summary.transferred)}")
        self.action_logger.stage_end("TRANSFER", f"Transferred: {len(self.summary.transferred)}")

        # Sources that turned out identical to an earlier transfer of this batch
        late_present = self.summary.already_present[present_before:]
        if late_present:
            self.output(f"Already present at destination: {len(self.summary.already_present)}")
            await self._run_redundant_cleanup(late_present)
            self.stage = PipelineStage.TRANSFER

    async def _transfer_one(self, pf: ProcessedFile, mode: str):
        try:
            status = await self._destination_status(pf)
            if status == "in_place":
                self._keep_in_place(pf)
                return
            if status == "identical":
                self.action_logger.duplicate_found(pf.source, pf.dest_file)
                self.summary.already_present.append(pf)
                self._record_move(pf, "already_present")
                return
            if status == "collision":
                self.action_logger.collision_found(pf.source, pf.dest_file)
                self._queue_review(pf, UnresolvedReason.COLLISION,
                                   f"{pf.dest_file} exists with different content")
                self._record_move(pf, "skipped", "destination collision")
                return

            if mode == 'copy':
                await asyncio.to_thread(FileOperations.copy_file, pf.source, pf.dest_file)
                self.action_logger.file_copied(pf.source, pf.dest_file, reason=str(pf.datestamp))
                self._record_move(pf, "copied")
            else:
                await asyncio.to_thread(FileOperations.move_file, pf.source, pf.dest_file)
                self.action_logger.file_moved(pf.source, pf.dest_file, reason=str(pf.datestamp))
                self._record_move(pf, "moved")
            self.summary.transferred.append(pf)

        except (FileComparisonError, OSError) as e:
            message = f"Could not {mode} {pf.source} -> {pf.dest_file}: {e}"
            self._record_error(pf.source, message)
            self._queue_review(pf, UnresolvedReason.ERROR, message)
            self._record_move(pf, "failed", str(e))

    def _run_reporting(self):
        """Stage 8: Write the review and transfer reports."""
        self.stage = PipelineStage.REPORTING
        self.action_logger.stage_start("REPORTING")
        try:
            self.summary.report_files = self.report_manager.save()
        except OSError as e:
            self.action_logger.error("Could not write reports", e)
            self.summary.errors.append(f"Could not write reports to {self.report_dir}: {e}")
        self.action_logger.stage_end(
            "REPORTING",
            " | ".join(f"{k}={v}" for k, v in self.summary.to_dict().items())
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _comparer(self, source: Path, dest: Path) -> FileComparer:
        return FileComparer(source, dest, self.config.hash_algorithm, self.config.hash_chunk_size)

    async def _destination_status(self, pf: ProcessedFile) -> str:
        """
        Returns:
            "in_place" when the source already is its destination file,
            otherwise "identical", "collision" or "clear"

        Raises:
            FileComparisonError: If either file cannot be read
        """
        if await asyncio.to_thread(_same_file, pf.source, pf.dest_file):
            return "in_place"
        comparer = self._comparer(pf.source, pf.dest_file)
        if await comparer.both_exist_and_identical():
            return "identical"
        if await asyncio.to_thread(pf.dest_file.exists):
            return "collision"
        return "clear"

    async def _delete_batch(self, decision_type: DecisionType, question: str,
                            items: List[Tuple[Path, str]],
                            verify_identical_to: Optional[dict]) -> int:
        """
        Confirm once, then delete every file of the batch.

        Args:
            decision_type: Kind of deletion
            question: Confirmation question
            items: (file, reason) pairs
            verify_identical_to: source -> destination map; when given, each
                source is compared again right before it is deleted

        Returns:
            Number of files deleted
        """
        details = [f"{path} ({reason})" for path, reason in items]

        if self.dry_run:
            self.output(f"\n{self.prefix}{question}")
            for line in details:
                self.output(f"  [WOULD DELETE] {line}")
            return 0

        outcome = self.interaction_manager.confirm(decision_type, question, details)
        self.action_logger.decision(decision_type.value, outcome.value)
        if outcome == DecisionOutcome.ABORT:
            self._mark_aborted(decision_type.value.upper())
            return 0
        if outcome != DecisionOutcome.YES:
            return 0

        deleted = 0
        for path, reason in items:
            try:
                if verify_identical_to is not None:
                    comparer = self._comparer(path, verify_identical_to[path])
                    if not await comparer.both_exist_and_identical():
                        self._record_error(path, f"No longer identical to {verify_identical_to[path]}; kept")
                        continue
                await asyncio.to_thread(FileOperations.delete_file, path, self.config.use_trash)
                self.action_logger.file_deleted(path, reason=reason, trashed=self.config.use_trash)
                deleted += 1
            except (FileComparisonError, OSError) as e:
                self._record_error(path, f"Could not delete {path}: {e}")
        return deleted

    def _queue_review(self, pf: ProcessedFile, reason: UnresolvedReason, detail: str):
        pf.unresolved_reason = reason
        pf.detail = detail
        self.summary.unresolved.append(pf)
        candidates = pf.candidate_dates()
        self.report_manager.add_unresolved(UnresolvedRecord(
            source_path=str(pf.source),
            reason=reason.value,
            detail=detail,
            candidate_dates=", ".join(str(d) for d in candidates) or None,
            proposed_dest=str(pf.dest_file) if pf.dest_file else None,
        ))
        self.action_logger.manual_review_queued(pf.source, reason.value, detail)

    def _record_move(self, pf: ProcessedFile, status: str, detail: Optional[str] = None):
        if pf.chosen_by_operator:
            detail = f"date chosen by operator; {detail}" if detail else "date chosen by operator"
        self.report_manager.add_move(MoveRecord(
            source_path=str(pf.source),
            dest_path=str(pf.dest_file),
            datestamp=str(pf.datestamp),
            confidence=pf.confidence.name if pf.confidence is not None else "",
            status=status,
            detail=detail,
        ))

    def _keep_in_place(self, pf: ProcessedFile):
        # Never offered for deletion: it is the only copy
        self.action_logger.info(f"Already in place: {pf.source}")
        self.summary.in_place.append(pf)
        self._record_move(pf, "in_place")

    def _record_error(self, path: Path, message: str):
        self.summary.errors.append(message)
        self.action_logger.error(f"{path}: {message}")

    def _mark_aborted(self, step: str):
        self.summary.aborted_steps.append(step)
        self.action_logger.step_aborted(step)

    @staticmethod
    def _candidate_label(pf: ProcessedFile, datestamp: Datestamp) -> str:
        names = [
            f"{d.confidence.name}"
            for d in pf.aggregate.get_successful_deductions() if d.datestamp == datestamp
        ]
        return f"{datestamp} ({', '.join(names)})"

    @staticmethod
    def _conflict_detail(pf: ProcessedFile) -> str:
        return "; ".join(
            f"{d.datestamp} [{d.confidence.name}] {d.explanation}"
            for d in pf.aggregate.get_successful_deductions()
        )


def _same_file(source: Path, dest: Path) -> bool:
    try:
        return os.path.samefile(source, dest)
    except OSError:
        return False


def run_move_photos(
    source_dir: Path,
    dest_root: Path,
    strategies: Optional[Sequence[DatestampStrategy]] = None,
    interaction_manager: Optional[InteractionManager] = None,
    cfg: Optional[Config] = None,
    dry_run: bool = False,
    resolve_conflicts: bool = False,
    output_func: Callable[[str], None] = print,
) -> BatchSummary:
    """
    Convenience function to run one batch synchronously.

    Returns:
        BatchSummary of the batch
    """
    orchestrator = MovePhotosOrchestrator(
        source_dir=Path(source_dir),
        dest_root=Path(dest_root),
        strategies=strategies,
        interaction_manager=interaction_manager,
        cfg=cfg,
        dry_run=dry_run,
        resolve_conflicts=resolve_conflicts,
        output_func=output_func,
    )
    try:
        return asyncio.run(orchestrator.run())
    finally:
        orchestrator.close()
