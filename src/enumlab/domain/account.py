"""Account state machine built on the tagged union engine.

Two states:
- ``Empty``: no payload.
- ``Funds(remaining)``: ``remaining`` is a strictly positive int.

Transitions are pure functions ``old state -> new state``; the caller
reassigns its own variable. The next state is fully determined by the
sign of ``remaining + amount``:

- negative: :class:`Overdraft`, nothing changes
- zero: ``Empty``
- positive: ``Funds(remaining + amount)``

INVARIANT: a balance is never negative and never ``Funds(0)``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from enumlab.domain.union import Field, TaggedValue, UnionType, Variant, register_union

Account = register_union(
    UnionType(
        "Account",
        Variant("Empty", doc="No funds at all."),
        Variant(
            "Funds",
            Field("remaining", int),
            invariant=lambda remaining: remaining > 0,
            doc="A strictly positive balance.",
        ),
        doc="A monetary balance that can never go negative.",
    )
)


class Overdraft(Exception):
    """A balance change would leave the account below zero.

    Attributes:
        amount: Magnitude of the shortfall, always positive.
    """

    def __init__(self, amount: int) -> None:
        if amount <= 0:
            msg = f"Overdraft amount must be positive, got {amount}"
            raise ValueError(msg)
        self.amount = amount
        super().__init__(f"Overdraft by {amount}")


_remaining = Account.matcher(Empty=0, Funds=lambda remaining: remaining)


def _check_amount(amount: object) -> int:
    if isinstance(amount, bool) or not isinstance(amount, int):
        msg = f"amount must be an int, got {type(amount).__name__}"
        raise TypeError(msg)
    return amount


def remaining_funds(account: TaggedValue) -> int:
    """0 for ``Empty``, otherwise the stored ``remaining``."""
    return _remaining(account)


def add_funds(account: TaggedValue, amount: int) -> TaggedValue:
    """Return the state after adding *amount* (which may be negative).

    Raises:
        Overdraft: the result would be below zero. *account* is a value,
            so the caller's state is untouched.
    """
    new_amount = remaining_funds(account) + _check_amount(amount)
    if new_amount < 0:
        raise Overdraft(-new_amount)
    if new_amount == 0:
        return Account.Empty
    return Account.Funds(remaining=new_amount)


def remove_funds(account: TaggedValue, amount: int) -> TaggedValue:
    """Same as ``add_funds(account, -amount)``."""
    return add_funds(account, -_check_amount(amount))


def open_account(opening: int = 0) -> TaggedValue:
    """A new account holding *opening* funds (``Empty`` when 0)."""
    return add_funds(Account.Empty, opening)


@runtime_checkable
class AccountCompatible(Protocol):
    """Anything that holds a balance and changes it with checked operations."""

    @property
    def remaining_funds(self) -> int: ...

    def add_funds(self, amount: int) -> None: ...

    def remove_funds(self, amount: int) -> None: ...


class Wallet:
    """Single-owner holder of an :data:`Account` value.

    Reassigns its state only when a transition succeeds. Not thread-safe:
    a Wallet shared between threads needs external locking around each
    call.
    """

    def __init__(self, state: TaggedValue | None = None) -> None:
        if state is None:
            state = Account.Empty
        if not Account.accepts(state):
            msg = f"Wallet state must be an Account, got {state!r}"
            raise TypeError(msg)
        self._state = state

    @property
    def state(self) -> TaggedValue:
        return self._state

    @property
    def remaining_funds(self) -> int:
        return remaining_funds(self._state)

    def add_funds(self, amount: int) -> None:
        self._state = add_funds(self._state, amount)

    def remove_funds(self, amount: int) -> None:
        self._state = remove_funds(self._state, amount)

    def __repr__(self) -> str:
        return f"Wallet({self._state!r})"
