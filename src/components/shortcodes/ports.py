"""
Shortcodes component - Port interfaces.
"""

from __future__ import annotations

from typing import Protocol

from src.domain.entities import MonetizationCategory, MonetizationLevel


class IdentifierRegistryPort(Protocol):
    """Lookup of monetization identifiers referenced by shortcodes."""

    def get_category(
        self, category_id: int, concentration_id: int
    ) -> MonetizationCategory | None:
        """Category/concentration pair, or None when it does not exist."""
        ...

    def get_level(self, level_code: int) -> MonetizationLevel | None:
        """Degree level, or None when it does not exist."""
        ...
