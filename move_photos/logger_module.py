"""
Logging module for the photo mover.
Provides structured logging to both console and file.
"""
import logging
from pathlib import Path
from datetime import datetime
from typing import Optional
from enum import Enum


class LogAction(Enum):
    """Types of actions that can be logged."""
    # Pipeline stage transitions
    STAGE_START = "STAGE_START"
    STAGE_END = "STAGE_END"

    # File operations
    FILE_SCANNED = "FILE_SCANNED"
    FILE_MOVED = "FILE_MOVED"
    FILE_COPIED = "FILE_COPIED"
    FILE_DELETED = "FILE_DELETED"

    # Unwanted files
    UNWANTED_FOUND = "UNWANTED_FOUND"

    # Date deduction
    DATE_DEDUCED = "DATE_DEDUCED"
    DATE_MISSING = "DATE_MISSING"
    DATE_CONFLICT = "DATE_CONFLICT"

    # Duplicate detection
    DUPLICATE_FOUND = "DUPLICATE_FOUND"
    COLLISION_FOUND = "COLLISION_FOUND"
    HASH_ERROR = "HASH_ERROR"

    # Operator decisions
    DECISION = "DECISION"
    STEP_ABORTED = "STEP_ABORTED"

    # Manual review
    MANUAL_REVIEW_QUEUED = "MANUAL_REVIEW_QUEUED"

    # Errors and warnings
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"


class MovePhotosLogger:
    """
    Logger for a photo moving session.
    Logs to both console and a timestamped file.
    """

    def __init__(self, log_dir: Path, session_name: Optional[str] = None,
                 console_level: int = logging.INFO):
        """
        Initialize the logger.

        Args:
            log_dir: Directory where log files will be stored
            session_name: Optional name for this session (default: timestamp)
            console_level: Minimum level echoed to the console
        """
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.session_name = session_name or timestamp
        self.log_file = self.log_dir / f"session_{self.session_name}.log"

        self.logger = logging.getLogger(f"move_photos.session.{self.session_name}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False

        # Prevent duplicate handlers
        if self.logger.handlers:
            self.logger.handlers.clear()

        # File handler - detailed
        file_handler = logging.FileHandler(self.log_file, encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)-8s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))
        self.logger.addHandler(file_handler)

        # Console handler - less verbose
        console_handler = logging.StreamHandler()
        console_handler.setLevel(console_level)
        console_handler.setFormatter(logging.Formatter('%(levelname)-8s | %(message)s'))
        self.logger.addHandler(console_handler)

        self.log(LogAction.INFO, f"Session started: {self.session_name}")
        self.log(LogAction.INFO, f"Log file: {self.log_file}")

    def log(self, action: LogAction, message: str, **kwargs):
        """
        Log an action with optional extra data.

        Args:
            action: The type of action being logged
            message: Human-readable message
            **kwargs: Additional data to include in the log
        """
        extra_str = ""
        if kwargs:
            extra_parts = [f"{k}={v}" for k, v in kwargs.items()]
            extra_str = " | " + " | ".join(extra_parts)

        full_message = f"[{action.value}] {message}{extra_str}"

        if action == LogAction.ERROR or action == LogAction.HASH_ERROR:
            self.logger.error(full_message)
        elif action in (LogAction.WARNING, LogAction.STEP_ABORTED, LogAction.COLLISION_FOUND):
            self.logger.warning(full_message)
        elif action in (LogAction.FILE_SCANNED, LogAction.DATE_DEDUCED, LogAction.DATE_MISSING):
            # Per-file chatter stays in the file log
            self.logger.debug(full_message)
        else:
            self.logger.info(full_message)

    def stage_start(self, stage_name: str, detail: str = ""):
        """Log the start of a pipeline stage."""
        self.log(LogAction.STAGE_START, f"=== STAGE START: {stage_name} === {detail}")

    def stage_end(self, stage_name: str, detail: str = ""):
        """Log the end of a pipeline stage."""
        self.log(LogAction.STAGE_END, f"=== STAGE END: {stage_name} === {detail}")

    def file_scanned(self, path: Path):
        self.log(LogAction.FILE_SCANNED, f"Scanned: {path}")

    def unwanted_found(self, path: Path):
        self.log(LogAction.UNWANTED_FOUND, f"Unwanted: {path}")

    def file_deleted(self, path: Path, reason: str = "", trashed: bool = True):
        self.log(LogAction.FILE_DELETED, f"Deleted: {path}", reason=reason, trashed=trashed)

    def file_moved(self, source: Path, dest: Path, reason: str = ""):
        """Log file movement."""
        self.log(LogAction.FILE_MOVED, f"{source} -> {dest}", reason=reason)

    def file_copied(self, source: Path, dest: Path, reason: str = ""):
        """Log file copy."""
        self.log(LogAction.FILE_COPIED, f"{source} -> {dest}", reason=reason)

    def date_deduced(self, path: Path, datestamp: str, confidence: str, strategies: int):
        self.log(LogAction.DATE_DEDUCED, f"{path.name}: {datestamp}",
                 confidence=confidence, agreeing=strategies)

    def date_missing(self, path: Path, explanations: list):
        self.log(LogAction.DATE_MISSING, f"No date: {path}",
                 explanations="; ".join(explanations))

    def date_conflict(self, path: Path, datestamps: list):
        self.log(LogAction.DATE_CONFLICT, f"Conflicting dates: {path}",
                 candidates=", ".join(str(d) for d in datestamps))

    def duplicate_found(self, source: Path, dest: Path):
        """Log an identical copy already present at the destination."""
        self.log(LogAction.DUPLICATE_FOUND, "Already present at destination",
                 source=str(source), dest=str(dest))

    def collision_found(self, source: Path, dest: Path):
        self.log(LogAction.COLLISION_FOUND, "Destination holds a different file",
                 source=str(source), dest=str(dest))

    def hash_error(self, filename: str, error: str):
        """Log hash computation failure."""
        self.log(LogAction.HASH_ERROR, f"Hash failed: {filename}", error=error)

    def decision(self, step: str, outcome: str):
        self.log(LogAction.DECISION, f"{step} -> {outcome}")

    def step_aborted(self, step: str):
        self.log(LogAction.STEP_ABORTED, f"Operator aborted step: {step}")

    def manual_review_queued(self, path: Path, reason: str, detail: str = ""):
        """Log item queued for manual review."""
        self.log(LogAction.MANUAL_REVIEW_QUEUED, str(path), reason=reason, detail=detail)

    def error(self, message: str, exception: Optional[Exception] = None):
        """Log an error."""
        if exception:
            self.log(LogAction.ERROR, f"{message}: {type(exception).__name__}: {exception}")
        else:
            self.log(LogAction.ERROR, message)

    def warning(self, message: str):
        """Log a warning."""
        self.log(LogAction.WARNING, message)

    def info(self, message: str):
        """Log info message."""
        self.log(LogAction.INFO, message)

    def close(self):
        """Close the logger and finalize the session."""
        self.log(LogAction.INFO, "Session ended")
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
