from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

import click

from coach_advisor.core.models import AdvisorContext, Suggestion


def mask_secret(value: str | None) -> str:
    if not value:
        return "(unset)"
    return (value[:4] + "..." + value[-4:]) if len(value) > 8 else "***"


def load_json_file(path: str | Path) -> Any:
    with open(Path(path), "r", encoding="utf-8") as handle:
        return json.load(handle)


def to_jsonable(obj: Any) -> Any:
    if isinstance(obj, Suggestion):
        return obj.to_dict()
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {k: to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [to_jsonable(v) for v in obj]
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, datetime):
        return obj.isoformat()
    return obj


def echo_json(payload: Any) -> None:
    click.echo(json.dumps(to_jsonable(payload), indent=2, ensure_ascii=False))


def advisor_context_options(func):
    """Attach the shared --coach-id/--business-id/--user-id/--industry/--state options."""
    for option in reversed(
        (
            click.option("--coach-id", type=str, default=None, help="Coach whose benchmarks apply."),
            click.option("--business-id", type=str, default=None),
            click.option("--user-id", type=str, default=None),
            click.option("--industry", type=str, default=None, help="Business industry, e.g. trades."),
            click.option("--revenue-range", type=str, default=None),
            click.option("--state", type=str, default=None, help="Australian state, e.g. NSW."),
        )
    ):
        func = option(func)
    return func


def build_advisor_context(**options: Any) -> AdvisorContext:
    return AdvisorContext(
        business_id=options.get("business_id"),
        user_id=options.get("user_id"),
        coach_id=options.get("coach_id"),
        industry=options.get("industry"),
        revenue_range=options.get("revenue_range"),
        state=options.get("state"),
    )
