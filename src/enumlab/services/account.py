"""AccountService — replay a sequence of balance changes on an Account.

Starts from the configured opening balance (``[account] opening_funds``)
unless the caller passes one, applies signed amounts in order and stops
at the first overdraft. Nothing is stored between calls.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from enumlab.domain.account import Overdraft, add_funds, open_account, remaining_funds
from enumlab.domain.union import TaggedValue
from enumlab.services.base import BaseService
from enumlab.services.result import ServiceResult
from enumlab.services.telemetry import annotate, trace_span, traced

logger = logging.getLogger(__name__)


def _state_dict(state: TaggedValue) -> dict[str, Any]:
    return {"state": repr(state), "variant": state.tag, "remaining": remaining_funds(state)}


class AccountService(BaseService):
    """Drives the Account state machine for the CLI."""

    @traced("account.replay")
    def replay(self, amounts: Sequence[int], *, opening: int | None = None) -> ServiceResult:
        """Apply *amounts* one by one (positive adds, negative removes).

        On success ``data`` holds the final state and one entry per step.
        On overdraft the result fails with code ``OVERDRAFT``; its detail
        carries the shortfall, the 1-based step that failed, and the
        balance as it was before that step.
        """
        op = "replay"
        account_cfg = self._settings.account
        start = account_cfg.opening_funds if opening is None else opening
        if start < 0:
            return ServiceResult.failure(
                op,
                "INVALID_OPENING",
                f"Opening funds must not be negative, got {start}",
                opening=start,
            )

        state = open_account(start)
        steps: list[dict[str, Any]] = []
        for index, amount in enumerate(amounts, start=1):
            with trace_span(f"step_{index}"):
                try:
                    new_state = add_funds(state, amount)
                except Overdraft as exc:
                    logger.debug("Overdraft at step %d: short by %d", index, exc.amount)
                    annotate(overdraft=exc.amount)
                    return ServiceResult.failure(
                        op,
                        "OVERDRAFT",
                        f"Step {index} ({amount:+d}) would overdraw the account by "
                        f"{exc.amount} {account_cfg.currency}",
                        shortfall=exc.amount,
                        step=index,
                        amount=amount,
                        steps=steps,
                        **_state_dict(state),
                    )
                annotate(transition=f"{state.tag} -> {new_state.tag}")
            logger.debug("Step %d: %r -> %r", index, state, new_state)
            steps.append(
                {
                    "step": index,
                    "amount": amount,
                    "from": repr(state),
                    "to": repr(new_state),
                    "remaining": remaining_funds(new_state),
                }
            )
            state = new_state

        return ServiceResult.success(
            op,
            {
                **_state_dict(state),
                "opening": start,
                "currency": account_cfg.currency,
                "steps": steps,
            },
        )
