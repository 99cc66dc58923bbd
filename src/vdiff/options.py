"""Comparison tuning options.

Every value here is policy, not an invariant: out-of-range inputs are
clamped to the nearest valid value instead of being rejected.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

log = logging.getLogger(__name__)

CONFIG_ENV_VAR = "VDIFF_CONFIG"

RGB = tuple[int, int, int]
RGBA = tuple[int, int, int, int]


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def _channel(value: Any) -> int:
    return int(_clamp(int(value), 0, 255))


@dataclass(frozen=True)
class SeverityThresholds:
    """Pixel counts above which a hotspot is major / critical."""

    major: int = 300
    critical: int = 1000

    def __post_init__(self) -> None:
        major = max(0, int(self.major))
        critical = max(major, int(self.critical))
        object.__setattr__(self, "major", major)
        object.__setattr__(self, "critical", critical)


@dataclass(frozen=True)
class VerdictThresholds:
    """Minimum match percentage for a pass / review verdict."""

    pass_at: float = 99.9
    review_at: float = 95.0

    def __post_init__(self) -> None:
        pass_at = _clamp(float(self.pass_at), 0.0, 100.0)
        review_at = min(_clamp(float(self.review_at), 0.0, 100.0), pass_at)
        object.__setattr__(self, "pass_at", pass_at)
        object.__setattr__(self, "review_at", review_at)


@dataclass(frozen=True)
class DiffOptions:
    """Options for one comparison.

    Attributes:
        threshold: Perceptual colour distance tolerance in [0, 1]; lower is stricter.
        include_anti_aliasing: Count anti-aliased edge pixels as differences.
        diff_marker_color: RGB painted into the mask where pixels differ.
        match_color: RGBA painted into the mask where pixels match.
        minimum_cluster_size: Clusters with this many pixels or fewer are noise.
        severity: Hotspot severity thresholds.
        verdict: Report verdict thresholds.
    """

    threshold: float = 0.1
    include_anti_aliasing: bool = False
    diff_marker_color: RGB = (255, 0, 0)
    match_color: RGBA = (0, 0, 0, 0)
    minimum_cluster_size: int = 50
    severity: SeverityThresholds = field(default_factory=SeverityThresholds)
    verdict: VerdictThresholds = field(default_factory=VerdictThresholds)

    def __post_init__(self) -> None:
        object.__setattr__(self, "threshold", _clamp(float(self.threshold), 0.0, 1.0))
        object.__setattr__(self, "include_anti_aliasing", bool(self.include_anti_aliasing))
        r, g, b = self.diff_marker_color
        object.__setattr__(self, "diff_marker_color", (_channel(r), _channel(g), _channel(b)))
        mr, mg, mb, ma = self.match_color
        object.__setattr__(
            self, "match_color", (_channel(mr), _channel(mg), _channel(mb), _channel(ma))
        )
        object.__setattr__(self, "minimum_cluster_size", max(0, int(self.minimum_cluster_size)))

    def with_overrides(self, **overrides: Any) -> DiffOptions:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> DiffOptions:
        """Build options from a config mapping.

        Accepts snake_case names or the camelCase names used by report
        configs (``includeAntiAliasing``, ``severityThresholds``, ...).
        Unknown keys are ignored.
        """
        kwargs: dict[str, Any] = {}
        for key, value in data.items():
            name = _ALIASES.get(key, key)
            if name == "severity":
                kwargs[name] = _severity_from(value)
            elif name == "verdict":
                kwargs[name] = _verdict_from(value)
            elif name in ("diff_marker_color", "match_color"):
                kwargs[name] = tuple(value)
            elif name in _FIELDS:
                kwargs[name] = value
            else:
                log.warning("ignoring unknown option %r", key)
        return cls(**kwargs)

    def to_dict(self) -> dict[str, Any]:
        return {
            "threshold": self.threshold,
            "include_anti_aliasing": self.include_anti_aliasing,
            "diff_marker_color": list(self.diff_marker_color),
            "match_color": list(self.match_color),
            "minimum_cluster_size": self.minimum_cluster_size,
            "severity": {"major": self.severity.major, "critical": self.severity.critical},
            "verdict": {"pass": self.verdict.pass_at, "review": self.verdict.review_at},
        }


_FIELDS = {
    "threshold",
    "include_anti_aliasing",
    "diff_marker_color",
    "match_color",
    "minimum_cluster_size",
}

_ALIASES = {
    "includeAntiAliasing": "include_anti_aliasing",
    "diffMarkerColor": "diff_marker_color",
    "matchColor": "match_color",
    "minimumClusterSize": "minimum_cluster_size",
    "severityThresholds": "severity",
    "severity_thresholds": "severity",
    "verdictThresholds": "verdict",
    "verdict_thresholds": "verdict",
}


def _severity_from(value: Any) -> SeverityThresholds:
    if isinstance(value, SeverityThresholds):
        return value
    defaults = SeverityThresholds()
    return SeverityThresholds(
        major=value.get("major", defaults.major),
        critical=value.get("critical", defaults.critical),
    )


def _verdict_from(value: Any) -> VerdictThresholds:
    if isinstance(value, VerdictThresholds):
        return value
    defaults = VerdictThresholds()
    return VerdictThresholds(
        pass_at=value.get("pass", value.get("pass_at", defaults.pass_at)),
        review_at=value.get("review", value.get("review_at", defaults.review_at)),
    )


def load_options(path: str | Path) -> DiffOptions:
    """Load options from a JSON config file.

    Raises:
        FileNotFoundError: If the file does not exist.
        ValueError: If the file is not a JSON object of valid option values.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text())
    except json.JSONDecodeError as exc:
        raise ValueError(f"invalid config {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ValueError(f"invalid config {path}: expected a JSON object")
    try:
        options = DiffOptions.from_mapping(data)
    except (TypeError, ValueError, AttributeError) as exc:
        raise ValueError(f"invalid config {path}: {exc}") from exc
    log.debug("loaded options from %s", path)
    return options


def default_config_path() -> Path | None:
    """Return the config file named by $VDIFF_CONFIG, if set."""
    value = os.environ.get(CONFIG_ENV_VAR)
    return Path(value) if value else None
