"""Validation of advisory commentary attached to a diff report.

Commentary comes from an external, non-deterministic reviewer (for example
a vision model) and is untrusted. Nothing in the comparison pipeline reads
it; callers pass it through ``parse_annotations`` before showing it next to
a report.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from typing import Any

from vdiff.report import DiffReport

log = logging.getLogger(__name__)

MAX_SUMMARY_CHARS = 2000
MAX_MESSAGE_CHARS = 500
VALID_CATEGORIES = {"layout", "color", "typography", "content", "image", "rendering", "other"}


@dataclass(frozen=True)
class Finding:
    hotspot: int
    message: str
    category: str = "other"


@dataclass(frozen=True)
class Annotations:
    summary: str = ""
    fidelity_score: float | None = None
    findings: tuple[Finding, ...] = field(default_factory=tuple)


def _truncate(text: str, limit: int) -> str:
    text = text.strip()
    return text if len(text) <= limit else text[: limit - 1] + "…"


def _parse_finding(i: int, raw: Any, hotspot_count: int, errors: list[str]) -> Finding | None:
    if not isinstance(raw, dict):
        errors.append(f"finding {i}: expected an object")
        return None
    idx = raw.get("hotspot")
    if isinstance(idx, bool) or not isinstance(idx, int):
        errors.append(f"finding {i}: hotspot must be an integer index")
        return None
    if not 0 <= idx < hotspot_count:
        errors.append(f"finding {i}: hotspot {idx} out of range ({hotspot_count} hotspots)")
        return None
    message = raw.get("message")
    if not isinstance(message, str) or not message.strip():
        errors.append(f"finding {i}: message must be a non-empty string")
        return None
    category = raw.get("category", "other")
    if not isinstance(category, str) or category not in VALID_CATEGORIES:
        errors.append(f"finding {i}: invalid category {category!r}, using 'other'")
        category = "other"
    return Finding(hotspot=idx, message=_truncate(message, MAX_MESSAGE_CHARS), category=category)


def parse_annotations(
    raw: str | bytes | dict[str, Any], report: DiffReport
) -> tuple[Annotations, list[str]]:
    """Validate reviewer commentary against a report.

    Invalid findings are dropped; each problem is returned as a message.

    Raises:
        ValueError: If ``raw`` is not JSON or its top level is not an object.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValueError(f"annotations are not valid JSON: {exc}") from exc
    if not isinstance(raw, dict):
        raise ValueError("annotations must be a JSON object")

    errors: list[str] = []

    summary = raw.get("summary", "")
    if not isinstance(summary, str):
        errors.append("summary must be a string")
        summary = ""

    score = raw.get("fidelity_score")
    if score is not None:
        if isinstance(score, bool) or not isinstance(score, (int, float)):
            errors.append("fidelity_score must be a number")
            score = None
        else:
            score = max(0.0, min(100.0, float(score)))

    findings: list[Finding] = []
    raw_findings = raw.get("findings", [])
    if not isinstance(raw_findings, list):
        errors.append("findings must be a list")
        raw_findings = []
    for i, item in enumerate(raw_findings):
        finding = _parse_finding(i, item, len(report.hotspots), errors)
        if finding is not None:
            findings.append(finding)

    for err in errors:
        log.warning("annotation: %s", err)
    return (
        Annotations(
            summary=_truncate(summary, MAX_SUMMARY_CHARS),
            fidelity_score=score,
            findings=tuple(findings),
        ),
        errors,
    )
