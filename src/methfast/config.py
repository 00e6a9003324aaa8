"""Configuration management for methfast."""

from __future__ import annotations

from dataclasses import dataclass, field, asdict, fields, replace
from pathlib import Path
from typing import Optional, Dict, Any
import yaml
from methfast.core.batch import DEFAULT_CHUNKSIZE
from methfast.core.intervals import ColumnConfig
from methfast.exceptions import ConfigurationError


def _is_int(value: Any) -> bool:
    # bool is an int subclass; YAML true/false must not pass as an index
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class RuntimeConfig:
    """Runtime configuration."""

    log_level: str = "WARNING"
    log_file: Optional[Path] = None
    # Show a tqdm bar on stderr while targets are aggregated
    enable_progress: bool = False
    # Targets handed to a worker per task
    chunksize: int = DEFAULT_CHUNKSIZE


@dataclass
class PerformanceConfig:
    """Performance-related configuration."""

    # 0 means one worker per available CPU
    threads: int = 0


@dataclass
class Config:
    """Main configuration class."""

    methylation_bed: Optional[Path] = None
    target_bed: Optional[Path] = None
    # None writes to stdout
    output: Optional[Path] = None

    columns: ColumnConfig = field(default_factory=ColumnConfig)
    runtime: RuntimeConfig = field(default_factory=RuntimeConfig)
    performance: PerformanceConfig = field(default_factory=PerformanceConfig)

    @property
    def threads(self) -> int:
        return self.performance.threads

    @threads.setter
    def threads(self, value: int):
        self.performance.threads = value

    def validate(self) -> None:
        """Validate configuration."""
        if not self.methylation_bed:
            raise ConfigurationError("Methylation BED file is required")
        if not self.target_bed:
            raise ConfigurationError("Target BED file is required")
        if not self.methylation_bed.exists():
            raise ConfigurationError(f"Methylation BED file not found: {self.methylation_bed}")
        if not self.target_bed.exists():
            raise ConfigurationError(f"Target BED file not found: {self.target_bed}")

        for f in fields(self.columns):
            value = getattr(self.columns, f.name)
            if not _is_int(value) or value < 0:
                raise ConfigurationError(f"Column index {f.name} must be an integer >= 0")

        if not _is_int(self.performance.threads) or self.performance.threads < 0:
            raise ConfigurationError("Threads must be an integer >= 0")
        if not _is_int(self.runtime.chunksize) or self.runtime.chunksize < 1:
            raise ConfigurationError("Chunk size must be an integer >= 1")

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""

        def path_to_str(obj):
            if isinstance(obj, Path):
                return str(obj)
            elif isinstance(obj, dict):
                return {k: path_to_str(v) for k, v in obj.items()}
            elif isinstance(obj, (list, tuple)):
                return [path_to_str(item) for item in obj]
            return obj

        return path_to_str(asdict(self))


def build_config(data: Dict[str, Any]) -> Config:
    """Build a Config from a plain mapping (as parsed from YAML)."""
    cfg = Config()

    for section in ("columns", "runtime", "performance"):
        if data.get(section) is not None and not isinstance(data[section], dict):
            raise ConfigurationError(f"Configuration section '{section}' must be a mapping")

    for key in ("methylation_bed", "target_bed", "output"):
        if data.get(key) is not None:
            setattr(cfg, key, Path(data[key]))
    if data.get("threads") is not None:
        cfg.performance.threads = data["threads"]

    # Column indices
    if data.get("columns"):
        known = {f.name for f in fields(ColumnConfig)}
        unknown = sorted(set(data["columns"]) - known)
        if unknown:
            raise ConfigurationError("Unsupported column option(s): " + ", ".join(unknown))
        cfg.columns = replace(cfg.columns, **data["columns"])

    # Runtime config
    if "runtime" in data:
        for key, value in (data["runtime"] or {}).items():
            if hasattr(cfg.runtime, key):
                if key == "log_file" and value:
                    value = Path(value)
                setattr(cfg.runtime, key, value)

    # Performance config
    if "performance" in data:
        for key, value in (data["performance"] or {}).items():
            if hasattr(cfg.performance, key):
                setattr(cfg.performance, key, value)

    return cfg


def load_config(path: Path) -> Config:
    """Load configuration from YAML file."""
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Configuration file must contain a mapping: {path}")
    return build_config(data)


def save_config(cfg: Config, path: Path) -> None:
    """Save configuration to YAML file."""
    data = cfg.to_dict()
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)
