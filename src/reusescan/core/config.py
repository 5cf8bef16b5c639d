# config.py
# SPDX-License-Identifier: MIT
"""Configuration models and helpers for reusescan runs.

A :class:`ScanConfig` is a tree of plain dataclasses (listing, REUSE file
locations, decoding, the worker pool, logging) that can be saved as JSON
and loaded back from JSON or TOML. Each file section maps onto one nested
dataclass; unknown keys are errors.
"""
from __future__ import annotations

import json
import tomllib
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Optional, Tuple, get_args, get_origin, get_type_hints

from .log import DEFAULT_FORMAT, PACKAGE_LOGGER_NAME, configure_logging

__all__ = [
    "ListingConfig",
    "ReuseConfig",
    "DecodeConfig",
    "PipelineConfig",
    "LoggingConfig",
    "ScanConfig",
    "load_config_from_path",
]


@dataclass(slots=True)
class ListingConfig:
    """Options for enumerating candidate files.

    Attributes:
        respect_gitignore (bool): Skip paths matched by ``.gitignore`` files.
        follow_symlinks (bool): Whether to traverse symlinks that stay
            inside the root.
        skip_dirs (tuple[str, ...]): Directory names never descended into.
            Version-control metadata lives here.
    """
    respect_gitignore: bool = True
    follow_symlinks: bool = False
    skip_dirs: Tuple[str, ...] = (".git",)


@dataclass(slots=True)
class ReuseConfig:
    """Locations of REUSE metadata relative to the scanned root.

    Attributes:
        dep5_path (str): Root-relative path of the override file.
        sidecar_suffix (str): Suffix appended to a file name to find its
            sidecar.
    """
    dep5_path: str = ".reuse/dep5"
    sidecar_suffix: str = ".license"


@dataclass(slots=True)
class DecodeConfig:
    """File reading options.

    Attributes:
        max_bytes (int | None): Read at most this many bytes per file when
            looking for tags. None reads whole files.
    """
    max_bytes: Optional[int] = None


@dataclass(slots=True)
class PipelineConfig:
    """Worker pool settings for per-file resolution.

    Attributes:
        max_workers (int | None): Thread count; None sizes the pool from
            the host CPU count.
        submit_window (int | None): Maximum in-flight tasks; None uses
            four times ``max_workers``.
    """
    max_workers: Optional[int] = None
    submit_window: Optional[int] = None


@dataclass(slots=True)
class LoggingConfig:
    """Package logger settings used by the CLI when a config file is given.

    Host applications that route reusescan records through their own
    handlers set ``propagate=True``.
    """
    level: int | str = "INFO"
    propagate: bool = False
    fmt: Optional[str] = DEFAULT_FORMAT
    logger_name: str = PACKAGE_LOGGER_NAME

    def apply(self) -> None:
        """Configure the named logger from these settings."""
        configure_logging(
            level=self.level,
            propagate=self.propagate,
            fmt=self.fmt,
            logger_name=self.logger_name or PACKAGE_LOGGER_NAME,
        )


@dataclass(slots=True)
class ScanConfig:
    """Declarative settings for a scan.

    Holds only plain values; resolvers, pools and sinks are built from it
    at run time.
    """
    listing: ListingConfig = field(default_factory=ListingConfig)
    reuse: ReuseConfig = field(default_factory=ReuseConfig)
    decode: DecodeConfig = field(default_factory=DecodeConfig)
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def validate(self) -> None:
        """Check values for internal consistency.

        Raises:
            ValueError: On non-positive worker, window or byte counts, an
                empty sidecar suffix, or an absolute dep5 path.
        """
        positive = (
            ("pipeline.max_workers", self.pipeline.max_workers),
            ("pipeline.submit_window", self.pipeline.submit_window),
            ("decode.max_bytes", self.decode.max_bytes),
        )
        for name, value in positive:
            if value is not None and value < 1:
                raise ValueError(f"{name} must be >= 1 when set (got {value}).")
        if not self.reuse.sidecar_suffix:
            raise ValueError("reuse.sidecar_suffix must not be empty.")
        if Path(self.reuse.dep5_path).is_absolute():
            raise ValueError("reuse.dep5_path must be relative to the scanned root.")

    def to_dict(self) -> dict[str, Any]:
        """Return nested plain dicts; unset (None) options are left out."""
        return {
            section: {k: list(v) if isinstance(v, tuple) else v for k, v in values.items() if v is not None}
            for section, values in asdict(self).items()
        }

    def to_json(self, path: Path | str, *, indent: int = 2) -> str:
        """Write :meth:`to_dict` as JSON and return the path written."""
        target = Path(path)
        target.write_text(json.dumps(self.to_dict(), indent=indent, sort_keys=True), encoding="utf-8")
        return str(target)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> ScanConfig:
        """Build a config from nested mappings, one per section.

        Raises:
            ValueError: On unknown sections or options.
            TypeError: When a section is not a mapping.
        """
        hints = get_type_hints(cls)
        sections = _check_keys(cls, data)
        return cls(**{name: _load_section(hints[name], raw) for name, raw in sections.items()})

    @classmethod
    def from_json(cls, path: Path | str) -> ScanConfig:
        return cls.from_dict(json.loads(Path(path).read_text(encoding="utf-8")))

    @classmethod
    def from_toml(cls, path: Path | str) -> ScanConfig:
        """Load a config from TOML with [listing], [reuse], [decode],
        [pipeline] and [logging] tables.
        """
        with open(path, "rb") as fh:
            return cls.from_dict(tomllib.load(fh))


def load_config_from_path(path: str | Path) -> ScanConfig:
    """Load a ScanConfig from a ``.toml`` or ``.json`` file.

    Raises:
        ValueError: For any other file extension.
    """
    p = Path(path)
    loaders = {".toml": ScanConfig.from_toml, ".json": ScanConfig.from_json}
    loader = loaders.get(p.suffix.lower())
    if loader is None:
        raise ValueError(f"Unsupported config extension {p.suffix!r}; expected .toml or .json.")
    return loader(p)


def _check_keys(cls: type, data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise TypeError(f"{cls.__name__} expects a mapping; got {type(data).__name__}.")
    unknown = sorted(set(data) - {f.name for f in fields(cls)})
    if unknown:
        raise ValueError(f"Unknown {cls.__name__} option(s): {', '.join(unknown)}")
    return data


def _load_section(cls: type, data: Any) -> Any:
    if data is None:
        return cls()
    hints = get_type_hints(cls)
    values = _check_keys(cls, data)
    return cls(**{name: _coerce(hints[name], value) for name, value in values.items()})


def _coerce(annotation: Any, value: Any) -> Any:
    # only shapes used by the config sections: scalars, Optional scalars,
    # int | str and homogeneous tuples
    if value is None:
        return None
    origin = get_origin(annotation)
    if origin is tuple:
        return tuple(value)
    if annotation in (bool, int, str):
        return annotation(value)
    args = [a for a in get_args(annotation) if a is not type(None)]
    if len(args) == 1:
        return _coerce(args[0], value)
    return value
