"""Two-phase renumbering of poll option ``sort_order`` values."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import get_settings
from app.domain.entities import ActionResult, PollOption
from app.infrastructure.repositories import PollOptionRepository, PollRepository

from ..operation_logs import OperationLog, elapsed_ms, start_timer

logger = logging.getLogger(__name__)

DEFAULT_TEMP_OFFSET = 1000
POLL_NOT_FOUND = "Poll not found"


class SortOrderStore(Protocol):
    def list_for_poll(self, poll_id: str) -> list[PollOption]: ...

    def update_sort_order(
        self,
        option_id: str,
        *,
        poll_id: str,
        sort_order: int,
        expected_sort_order: int | None = None,
    ) -> int: ...


class _ReorderAborted(Exception):
    pass


class ReorderCoordinator:
    """Apply a caller-supplied option order under a unique ``(poll_id, sort_order)``.

    Rows are first parked at ``max(sort_order) + temp_offset + i`` and then
    moved to their final ``i``, so no two rows of a poll ever share a value.
    Every update is conditioned on the value the row is expected to hold;
    an update that matches no row aborts the call and leaves the rows
    already moved where they are.
    """

    def __init__(
        self,
        options: SortOrderStore,
        operation_log: OperationLog,
        *,
        temp_offset: int = DEFAULT_TEMP_OFFSET,
    ) -> None:
        if temp_offset <= 0:
            raise ValueError("temp_offset must be positive")
        self._options = options
        self._operation_log = operation_log
        self._temp_offset = temp_offset

    def reorder(self, poll_id: str, ordered_ids: Sequence[str]) -> ActionResult[None]:
        started = start_timer()
        ordered = [str(option_id) for option_id in ordered_ids]
        payload = {"poll_id": poll_id, "ordered_ids": ordered}

        try:
            existing = self._options.list_for_poll(poll_id)
        except SQLAlchemyError as exc:
            return self._fail(str(exc), started, payload)

        current = {option.id: option.sort_order for option in existing}
        if len(ordered) != len(current) or set(ordered) != set(current):
            return self._fail(
                "Ordered ids must match the existing options of the poll exactly",
                started,
                payload,
            )

        if current:
            temp_base = max(current.values()) + self._temp_offset
            try:
                self._apply(
                    poll_id,
                    [(option_id, current[option_id], temp_base + index)
                     for index, option_id in enumerate(ordered)],
                    phase=1,
                )
                self._apply(
                    poll_id,
                    [(option_id, temp_base + index, index)
                     for index, option_id in enumerate(ordered)],
                    phase=2,
                )
            except (_ReorderAborted, SQLAlchemyError) as exc:
                return self._fail(str(exc), started, payload)

        self._operation_log.success(
            "reorderPollOptions", duration_ms=elapsed_ms(started), payload=payload
        )
        return ActionResult.ok(None)

    def _apply(self, poll_id: str, moves: list[tuple[str, int, int]], *, phase: int) -> None:
        for option_id, expected, target in moves:
            affected = self._options.update_sort_order(
                option_id,
                poll_id=poll_id,
                sort_order=target,
                expected_sort_order=expected,
            )
            if affected != 1:
                raise _ReorderAborted(
                    f"Phase {phase} update of option {option_id} affected {affected} rows"
                )

    def _fail(self, error: str, started: float, payload: dict) -> ActionResult[None]:
        logger.warning("Reorder of poll %s failed: %s", payload["poll_id"], error)
        self._operation_log.failure(
            "reorderPollOptions",
            error=error,
            duration_ms=elapsed_ms(started),
            payload=payload,
        )
        return ActionResult.fail(error)


def reorder_poll_options(
    session: Session,
    *,
    poll_id: str,
    ordered_ids: Sequence[str],
    operation_log: OperationLog,
) -> ActionResult[list[PollOption]]:
    """Reorder the options of an existing poll and return them in their new order."""

    try:
        poll = PollRepository(session).get(poll_id)
    except SQLAlchemyError as exc:
        return ActionResult.fail(str(exc))
    if poll is None:
        return ActionResult.fail(POLL_NOT_FOUND)

    options = PollOptionRepository(session)
    coordinator = ReorderCoordinator(
        options, operation_log, temp_offset=get_settings().reorder_temp_offset
    )
    result = coordinator.reorder(poll_id, ordered_ids)
    if not result.success:
        return ActionResult.fail(result.error)
    try:
        return ActionResult.ok(options.list_for_poll(poll_id))
    except SQLAlchemyError as exc:
        logger.error("Reordered poll %s but could not reload its options: %s", poll_id, exc)
        return ActionResult.fail(str(exc))


__all__ = [
    "DEFAULT_TEMP_OFFSET",
    "POLL_NOT_FOUND",
    "ReorderCoordinator",
    "SortOrderStore",
    "reorder_poll_options",
]
