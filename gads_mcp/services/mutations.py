"""Turn a raw GoogleAdsService.Mutate response into a ``MutationOutcome``."""

from __future__ import annotations

from typing import Any, Mapping, Sequence

from gads_mcp.schemas.mutation import MutationOutcome, OperationFailure, OperationSuccess


def summarize_mutation(
    operations: Sequence[Any],
    response: Mapping[str, Any],
    *,
    dry_run: bool,
    partial_failure: bool,
) -> MutationOutcome:
    """Split *response* into successful and failed operations.

    An operation counts as successful when the API returned a resource name
    for it and no partial-failure entry points at its index.  In dry-run
    mode Google Ads returns no resource names, so every operation that did
    not fail is reported as validated with ``resource_name=None``.
    """
    failed = [OperationFailure(**f) for f in response.get("partial_failures") or []]
    failed_indexes = {f.index for f in failed}
    results = list(response.get("results") or [])

    successful: list[OperationSuccess] = []
    for index in range(len(operations)):
        if index in failed_indexes:
            continue
        resource_name = results[index] if index < len(results) else None
        if resource_name or dry_run:
            successful.append(OperationSuccess(index=index, resource_name=resource_name))

    return MutationOutcome(
        dry_run=dry_run,
        partial_failure=partial_failure,
        operations_count=len(operations),
        successful=successful,
        failed=failed,
    )
