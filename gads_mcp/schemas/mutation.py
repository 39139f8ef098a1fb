"""Mutation result Pydantic schemas."""

from __future__ import annotations

from pydantic import BaseModel, Field


class OperationSuccess(BaseModel):
    """An operation Google Ads accepted (or, in dry-run, validated)."""

    index: int
    resource_name: str | None = None


class OperationFailure(BaseModel):
    """An operation rejected by Google Ads under partial-failure mode."""

    index: int
    message: str
    error_code: str | None = None


class MutationOutcome(BaseModel):
    """Per-operation breakdown of a GoogleAdsService.Mutate call."""

    dry_run: bool
    partial_failure: bool
    operations_count: int
    successful: list[OperationSuccess] = Field(default_factory=list)
    failed: list[OperationFailure] = Field(default_factory=list)

    @property
    def all_succeeded(self) -> bool:
        return not self.failed
