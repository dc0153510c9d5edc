"""Coach library endpoints: manage benchmarks and review logged suggestions."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query, status

from coach_advisor.api.deps import StoresDep
from coach_advisor.api.exceptions import (
    BenchmarkNotFoundError,
    InteractionNotFoundError,
    InvalidRequestError,
)
from coach_advisor.api.library.schemas import (
    BenchmarkCreateRequest,
    BenchmarkListResponse,
    BenchmarkSchema,
    InteractionListResponse,
    InteractionSchema,
    PromoteRequest,
)
from coach_advisor.core.models import QuestionType
from coach_advisor.db.stores import promote_interaction_to_benchmark

logger = logging.getLogger("coach_advisor.api.library")

router = APIRouter()


@router.get("/benchmarks", response_model=BenchmarkListResponse)
def list_benchmarks(
    stores: StoresDep,
    coach_id: Optional[str] = Query(default=None, alias="coachId"),
) -> BenchmarkListResponse:
    items = stores.benchmarks.list_benchmarks(coach_id)
    return BenchmarkListResponse(
        benchmarks=[BenchmarkSchema.from_benchmark(b) for b in items],
        total=len(items),
    )


@router.post("/benchmarks", response_model=BenchmarkSchema, status_code=status.HTTP_201_CREATED)
def add_benchmark(request: BenchmarkCreateRequest, stores: StoresDep) -> BenchmarkSchema:
    """Add or replace a coach benchmark. The category is stored in key form."""
    stored = stores.benchmarks.add_benchmark(request.to_benchmark())
    logger.info(
        "Stored %s benchmark '%s' for coach %s",
        stored.benchmark_type.value,
        stored.category,
        stored.coach_id,
    )
    return BenchmarkSchema.from_benchmark(stored)


@router.delete("/benchmarks/{benchmark_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_benchmark(benchmark_id: str, stores: StoresDep) -> None:
    if not stores.benchmarks.delete_benchmark(benchmark_id):
        raise BenchmarkNotFoundError(benchmark_id)


@router.get("/interactions", response_model=InteractionListResponse)
def list_interactions(
    stores: StoresDep,
    question_type: Optional[QuestionType] = Query(default=None, alias="questionType"),
    search: Optional[str] = Query(default=None, max_length=200),
    limit: int = Query(default=100, ge=1, le=500),
) -> InteractionListResponse:
    """Logged suggestions, newest first."""
    items = stores.interactions.list_interactions(question_type, search, limit)
    return InteractionListResponse(
        interactions=[InteractionSchema.from_interaction(i) for i in items],
        total=len(items),
    )


@router.get("/interactions/{interaction_id}", response_model=InteractionSchema)
def get_interaction(interaction_id: str, stores: StoresDep) -> InteractionSchema:
    interaction = stores.interactions.get_interaction(interaction_id)
    if interaction is None:
        raise InteractionNotFoundError(interaction_id)
    return InteractionSchema.from_interaction(interaction)


@router.post("/interactions/{interaction_id}/review", response_model=InteractionSchema)
def review_interaction(interaction_id: str, stores: StoresDep) -> InteractionSchema:
    if not stores.interactions.mark_reviewed(interaction_id):
        raise InteractionNotFoundError(interaction_id)
    return get_interaction(interaction_id, stores)


@router.post(
    "/interactions/{interaction_id}/promote",
    response_model=BenchmarkSchema,
    status_code=status.HTTP_201_CREATED,
)
def promote_interaction(
    interaction_id: str,
    request: PromoteRequest,
    stores: StoresDep,
) -> BenchmarkSchema:
    """Copy a logged estimate into the coach's benchmark library."""
    interaction = stores.interactions.get_interaction(interaction_id)
    if interaction is None:
        raise InteractionNotFoundError(interaction_id)
    coach_id = request.coach_id or interaction.coach_id
    stored = promote_interaction_to_benchmark(
        stores.interactions, stores.benchmarks, interaction_id, coach_id
    )
    if stored is None:
        raise InvalidRequestError(
            "Interaction has no typical value to promote",
            detail=f"interaction_id={interaction_id}",
        )
    return BenchmarkSchema.from_benchmark(stored)
