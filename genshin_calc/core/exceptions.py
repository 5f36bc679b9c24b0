"""
Genshin Calc - Exceptions
=========================
All library errors derive from GenshinCalcError. Each one also derives from
the builtin it specialises, so callers that only know about ValueError or
IndexError still catch them.
"""

from typing import Sequence


class GenshinCalcError(Exception):
    """Base class for library errors."""

    def __init__(self, message: str = "Unknown calculation error"):
        self.message = message
        super().__init__(self.message)


# =============================================================================
# Attribute graph
# =============================================================================

class AttributeCycleError(GenshinCalcError, ValueError):
    """Edges form a dependency cycle between attributes."""

    def __init__(self, labels: Sequence[str]):
        self.labels = list(labels)
        super().__init__(
            "Attribute dependency cycle through edges: " + " -> ".join(self.labels)
        )


# =============================================================================
# Static tables
# =============================================================================

class SkillLevelError(GenshinCalcError, IndexError):
    """Talent level index falls outside a skill table."""

    def __init__(self, index: int, table_size: int):
        self.index = index
        self.table_size = table_size
        super().__init__(
            f"Talent index {index} outside table of {table_size} entries "
            f"(talent levels are 1-{table_size})"
        )
