"""
JSON report schemas for the CLI `report` and `scan` commands.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from pydantic import BaseModel, ConfigDict

from .engine import RenderResources
from .scanner import Placeholder
from .version import tool_version


class PlaceholderInfo(BaseModel):
    model_config = ConfigDict(extra="forbid")

    text: str
    directive: str
    kind: str
    start: int
    end: int
    closed: bool = True


class ScanReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    placeholders: List[PlaceholderInfo]


class RenderReport(BaseModel):
    model_config = ConfigDict(extra="forbid")

    version: str
    output: str
    errors: List[str]
    placeholders: Dict[str, str]
    map: Dict[str, str]


def build_scan_report(placeholders: List[Placeholder]) -> ScanReport:
    return ScanReport(
        version=tool_version(),
        placeholders=[
            PlaceholderInfo(
                text=p.text,
                directive=p.directive,
                kind=p.kind.value,
                start=p.start,
                end=p.end,
                closed=p.closed,
            )
            for p in placeholders
        ],
    )


def build_render_report(output: str, errors: List[str], resources: RenderResources) -> RenderReport:
    return RenderReport(
        version=tool_version(),
        output=output,
        errors=list(errors),
        placeholders=dict(resources.placeholders),
        map=dict(resources.map),
    )


def dumps(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


__all__ = [
    "PlaceholderInfo",
    "ScanReport",
    "RenderReport",
    "build_scan_report",
    "build_render_report",
    "dumps",
]
