"""BaseService — shared foundation for enumlab services.

Every service receives the resolved :class:`EnumlabSettings` at
construction time and reads its own config section from it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from enumlab.config.settings import EnumlabSettings


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class AccountService(BaseService):
            def replay(self, amounts: list[int]) -> ServiceResult:
                opening = self._settings.account.opening_funds
                ...
    """

    def __init__(self, settings: EnumlabSettings) -> None:
        self._settings = settings
