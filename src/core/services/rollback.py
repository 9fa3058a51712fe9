"""Compensating rollback for multi-step write pipelines."""

from collections.abc import Callable
from types import TracebackType
from typing import Any

from aws_lambda_powertools import Logger

logger = Logger(UTC=True)


class RollbackPlan:
    """Ordered list of undo actions accumulated during a forward pipeline.

    Usage:

        with RollbackPlan("upload_photo", owner_id=owner_id) as plan:
            storage.put(key=key, ...)
            plan.add("delete processed object", storage.delete, key=key)
            ...
            plan.commit()

    If the block exits with any exception (cancellation included) before
    `commit()`, the actions run newest first. Undo failures are logged and
    swallowed; the original exception always propagates unchanged.
    """

    def __init__(self, operation: str, **context: Any) -> None:
        self._operation = operation
        self._context = context
        self._actions: list[tuple[str, Callable[..., Any], dict[str, Any]]] = []
        self._committed = False

    def add(self, description: str, action: Callable[..., Any], **kwargs: Any) -> None:
        """Register an undo action; it runs only if the pipeline fails."""
        self._actions.append((description, action, kwargs))

    def commit(self) -> None:
        """Mark the pipeline successful and forget every undo action."""
        self._committed = True
        self._actions.clear()

    @property
    def pending(self) -> int:
        return len(self._actions)

    def rollback(self) -> list[str]:
        """Run undo actions in reverse order, returning descriptions of the failed ones."""
        failed: list[str] = []

        while self._actions:
            description, action, kwargs = self._actions.pop()
            try:
                action(**kwargs)
            except Exception:
                failed.append(description)
                logger.exception(
                    "Rollback action failed",
                    extra={"operation": self._operation, "action": description, **self._context},
                )
            else:
                logger.info(
                    "Rollback action completed",
                    extra={"operation": self._operation, "action": description, **self._context},
                )

        return failed

    def __enter__(self) -> "RollbackPlan":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool:
        if exc_type is None or self._committed:
            return False

        logger.warning(
            "Pipeline failed, rolling back",
            extra={
                "operation": self._operation,
                "error_type": exc_type.__name__,
                "pending_actions": len(self._actions),
                **self._context,
            },
        )
        self.rollback()
        return False
