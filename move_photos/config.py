"""
Configuration for the photo mover.
"""
import os
from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional

from dotenv import load_dotenv

# Load .env file from the working directory (values already in the environment win)
_env_path = Path.cwd() / '.env'
if _env_path.exists():
    load_dotenv(_env_path)


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


def _env_int(name: str, default: int) -> int:
    value = os.environ.get(name)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _env_path_value(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value) if value else None


# === File extension sets ===
IMAGE_WITH_METADATA_SUPPORT = {
    '.jpg', '.jpeg', '.jpe', '.tiff', '.tif', '.webp', '.heic', '.png',
}

# OS-generated thumbnail/metadata files that never belong in a photo library
UNWANTED_FILE_PATTERNS = [
    r'(^|[\\/])Thumbs\.db$',
    r'(^|[\\/])\.DS_Store$',
    r'(^|[\\/])desktop\.ini$',
    r'(^|[\\/])\._[^\\/]+$',     # AppleDouble resource forks
]

# Lowest confidence (datestamp_deduction.ConfidenceLevel.MEDIUM) that is moved without review
CONFIDENCE_MEDIUM = 6

TRANSFER_MODES = ('move', 'copy')
REPORT_FORMATS = ('csv', 'xlsx')


@dataclass
class Config:
    """Main configuration class."""

    # === Unwanted files ===
    unwanted_patterns: List[str] = field(default_factory=lambda: list(UNWANTED_FILE_PATTERNS))
    use_trash: bool = field(default_factory=lambda: _env_bool('MOVE_PHOTOS_USE_TRASH', True))

    # === Date deduction ===
    image_with_metadata: set = field(default_factory=lambda: IMAGE_WITH_METADATA_SUPPORT.copy())
    year_window: int = 100               # Oldest accepted year is current year minus this
    min_move_confidence: int = CONFIDENCE_MEDIUM
    sibling_min_dated: int = 2           # Siblings needed before a majority vote counts

    # === Duplicate detection ===
    hash_algorithm: str = field(default_factory=lambda: os.environ.get('MOVE_PHOTOS_HASH_ALGORITHM', 'sha256'))
    hash_chunk_size: int = 1024 * 1024

    # === Batch processing ===
    max_concurrency: int = field(default_factory=lambda: _env_int('MOVE_PHOTOS_MAX_CONCURRENCY', 16))
    transfer_mode: str = field(default_factory=lambda: os.environ.get('MOVE_PHOTOS_TRANSFER_MODE', 'move'))

    # === Reports & logging ===
    report_format: str = field(default_factory=lambda: os.environ.get('MOVE_PHOTOS_REPORT_FORMAT', 'csv'))
    log_dir: Optional[Path] = field(default_factory=lambda: _env_path_value('MOVE_PHOTOS_LOG_DIR'))
    report_dir: Optional[Path] = field(default_factory=lambda: _env_path_value('MOVE_PHOTOS_REPORT_DIR'))

    def __post_init__(self):
        if self.transfer_mode not in TRANSFER_MODES:
            raise ValueError(
                f"transfer_mode must be one of {TRANSFER_MODES}, got '{self.transfer_mode}'"
            )
        if self.report_format not in REPORT_FORMATS:
            raise ValueError(
                f"report_format must be one of {REPORT_FORMATS}, got '{self.report_format}'"
            )
        if self.max_concurrency < 1:
            self.max_concurrency = 1

    def get_log_dir(self, dest_root: Path) -> Path:
        """Session logs go next to the destination unless configured."""
        return self.log_dir if self.log_dir else dest_root / "_move_photos" / "logs"

    def get_report_dir(self, dest_root: Path) -> Path:
        """Reports go next to the destination unless configured."""
        return self.report_dir if self.report_dir else dest_root / "_move_photos" / "reports"


# Global config instance
config = Config()
