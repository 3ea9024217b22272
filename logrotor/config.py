"""Configuration module — frozen dataclasses loaded from YAML, env vars, and CLI flags."""

import argparse
import enum
import logging
import os
from dataclasses import dataclass, field

import yaml

from logrotor.levels import LogLevel, parse_level

logger = logging.getLogger(__name__)

MAX_FILE_SIZE_LIMIT = 2 ** 64
MAX_ARCHIVED_FILES_LIMIT = 255


class SuffixExtension(str, enum.Enum):
    """How archived files are named."""

    NUMBERING = "numbering"
    DATE_UUID = "date_uuid"

    @classmethod
    def parse(cls, value) -> "SuffixExtension":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(
                f"Unknown suffix extension {value!r}, expected 'numbering' or 'date_uuid'"
            ) from None


def _parse_bool(value: str) -> bool:
    return str(value).strip().lower() in ("true", "1", "yes")


@dataclass(frozen=True)
class RotationConfig:
    suffix_extension: SuffixExtension = SuffixExtension.NUMBERING
    max_file_size: int = 10 * 1024 * 1024  # 10 MB
    max_archived_files_count: int = 5

    def __post_init__(self):
        if not 0 <= self.max_file_size < MAX_FILE_SIZE_LIMIT:
            raise ValueError(f"max_file_size out of range: {self.max_file_size}")
        if not 0 <= self.max_archived_files_count <= MAX_ARCHIVED_FILES_LIMIT:
            raise ValueError(
                f"max_archived_files_count must be within 0..{MAX_ARCHIVED_FILES_LIMIT}, "
                f"got {self.max_archived_files_count}"
            )


@dataclass(frozen=True)
class SinkConfig:
    file_path: str = "./logs/application.log"
    file_permission: str = "640"
    rotation: RotationConfig = field(default_factory=RotationConfig)
    min_level: LogLevel = LogLevel.TRACE
    check_frequency: int = 50_000
    check_interval: float = 60 * 8  # seconds
    flush_threshold: int = 200
    fsync: bool = True
    encoding: str = "utf-8"
    label: str = ""


def load_yaml_config(path: str | None) -> dict:
    """Load settings from a YAML file. Returns empty dict if no path or file missing."""
    if not path:
        return {}
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning("Config file %s is not a mapping (got %s), using defaults",
                           path, type(data).__name__)
            return {}
        logger.info("Loaded YAML config from %s", path)
        return data
    except FileNotFoundError:
        logger.warning("Config file %s not found, using defaults", path)
        return {}


def build_cli_parser(description: str = "Rotating file log sink") -> argparse.ArgumentParser:
    """Parser with the sink's flags. Every flag defaults to None so unset flags
    fall through to env vars, the YAML file, and finally dataclass defaults."""
    parser = argparse.ArgumentParser(description=description)
    parser.add_argument("--config", default=None, help="Path to YAML config file")
    parser.add_argument("--log-file", default=None, help="Target log file path")
    parser.add_argument("--file-permission", default=None, help="Octal permission, e.g. 640")
    parser.add_argument("--suffix", choices=[s.value for s in SuffixExtension], default=None,
                        help="Archive naming policy")
    parser.add_argument("--max-file-size", type=int, default=None,
                        help="Rotate once the target exceeds this many bytes")
    parser.add_argument("--max-archives", type=int, default=None,
                        help="Number of archived files to keep")
    parser.add_argument("--min-level", default=None, help="Drop lines below this level")
    parser.add_argument("--flush-threshold", type=int, default=None,
                        help="Sync to disk after this many writes")
    parser.add_argument("--no-fsync", action="store_true", default=False,
                        help="Skip fsync on flush")
    return parser


def _max_file_size(yaml_rotation: dict, default: int) -> int:
    # MAX_FILE_SIZE_BYTES takes precedence over MAX_FILE_SIZE_MB
    raw_bytes = os.environ.get("MAX_FILE_SIZE_BYTES")
    raw_mb = os.environ.get("MAX_FILE_SIZE_MB")
    if raw_bytes is not None:
        return int(raw_bytes)
    if raw_mb is not None:
        return int(float(raw_mb) * 1024 * 1024)
    return int(yaml_rotation.get("max_file_size", default))


def config_from_args(args: argparse.Namespace) -> SinkConfig:
    """Build SinkConfig from parsed CLI args layered over env vars and YAML."""
    yaml_data = load_yaml_config(args.config or os.environ.get("CONFIG_PATH"))
    yaml_rotation = yaml_data.get("rotation", {}) or {}
    yaml_throttle = yaml_data.get("throttle", {}) or {}

    defaults = SinkConfig()
    default_rotation = defaults.rotation

    file_path = os.environ.get("LOG_FILE", yaml_data.get("file_path", defaults.file_path))
    file_permission = os.environ.get(
        "FILE_PERMISSION", yaml_data.get("file_permission", defaults.file_permission)
    )
    suffix = os.environ.get(
        "SUFFIX_EXTENSION", yaml_rotation.get("suffix_extension", default_rotation.suffix_extension)
    )
    max_file_size = _max_file_size(yaml_rotation, default_rotation.max_file_size)
    max_archives = int(os.environ.get(
        "MAX_ARCHIVED_FILES",
        yaml_rotation.get("max_archived_files_count", default_rotation.max_archived_files_count),
    ))
    min_level = os.environ.get("MIN_LEVEL", yaml_data.get("min_level", defaults.min_level))
    check_frequency = int(os.environ.get(
        "ROTATION_CHECK_FREQUENCY", yaml_throttle.get("check_frequency", defaults.check_frequency)
    ))
    check_interval = float(os.environ.get(
        "ROTATION_CHECK_INTERVAL_SECONDS",
        yaml_throttle.get("check_interval_seconds", defaults.check_interval),
    ))
    flush_threshold = int(os.environ.get(
        "FLUSH_THRESHOLD", yaml_data.get("flush_threshold", defaults.flush_threshold)
    ))
    fsync = _parse_bool(os.environ.get("FSYNC", str(yaml_data.get("fsync", defaults.fsync))))

    # CLI flags override everything else
    if args.log_file is not None:
        file_path = args.log_file
    if args.file_permission is not None:
        file_permission = args.file_permission
    if args.suffix is not None:
        suffix = args.suffix
    if args.max_file_size is not None:
        max_file_size = args.max_file_size
    if args.max_archives is not None:
        max_archives = args.max_archives
    if args.min_level is not None:
        min_level = args.min_level
    if args.flush_threshold is not None:
        flush_threshold = args.flush_threshold
    if args.no_fsync:
        fsync = False

    return SinkConfig(
        file_path=str(file_path),
        file_permission=str(file_permission),
        rotation=RotationConfig(
            suffix_extension=SuffixExtension.parse(suffix),
            max_file_size=max_file_size,
            max_archived_files_count=max_archives,
        ),
        min_level=parse_level(min_level),
        check_frequency=check_frequency,
        check_interval=check_interval,
        flush_threshold=flush_threshold,
        fsync=fsync,
        label=str(yaml_data.get("label", defaults.label)),
    )


def load_config(argv=None) -> SinkConfig:
    """Build SinkConfig from defaults, YAML, env vars, then CLI args.

    Pass argv for testability; when None, argparse reads sys.argv.
    """
    args = build_cli_parser().parse_args(argv)
    return config_from_args(args)
