"""
Genshin Calc - Item Configuration
=================================
Metadata describing the small named toggles a character, weapon, artifact
set or target function accepts, and coercion of loose input dicts against it.

Usage:
    IneffaConfig(**config_from_dict(IneffaConfig.CONFIG_DATA, {"em_bonus_active": "false"}))
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Sequence

logger = logging.getLogger(__name__)


class ItemConfigType(Enum):
    BOOL = "bool"
    FLOAT = "float"
    INT = "int"


@dataclass(frozen=True)
class ItemConfig:
    """One named configuration value with its type, default and range."""
    name: str
    title: str
    config_type: ItemConfigType
    default: Any
    min_value: Optional[float] = None
    max_value: Optional[float] = None

    def coerce(self, value: Any) -> Any:
        """
        Convert a loose value (CSV string, JSON number, bool) to this item's type.

        Numbers are clamped to [min_value, max_value]. Values that cannot be
        parsed fall back to the default.
        """
        if self.config_type == ItemConfigType.BOOL:
            if isinstance(value, str):
                lowered = value.strip().lower()
                if lowered in ('true', '1', 'yes', 'on'):
                    return True
                if lowered in ('false', '0', 'no', 'off', ''):
                    return False
                logger.warning("Config %s: cannot parse %r as bool, using %r", self.name, value, self.default)
                return self.default
            return bool(value)

        try:
            number = float(value)
        except (TypeError, ValueError):
            logger.warning("Config %s: cannot parse %r as number, using %r", self.name, value, self.default)
            return self.default

        if self.min_value is not None:
            number = max(number, self.min_value)
        if self.max_value is not None:
            number = min(number, self.max_value)
        if self.config_type == ItemConfigType.INT:
            return int(number)
        return number


def bool_config(name: str, title: str, default: bool = True) -> ItemConfig:
    return ItemConfig(name, title, ItemConfigType.BOOL, default)


def float_config(name: str, title: str, min_value: float, max_value: float, default: float) -> ItemConfig:
    return ItemConfig(name, title, ItemConfigType.FLOAT, default, min_value, max_value)


def int_config(name: str, title: str, min_value: int, max_value: int, default: int) -> ItemConfig:
    return ItemConfig(name, title, ItemConfigType.INT, default, min_value, max_value)


def config_from_dict(items: Sequence[ItemConfig], data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """
    Build keyword arguments for a config dataclass from loose input.

    Missing keys take the item default. Unknown keys are ignored with a warning.

    Args:
        items: Metadata for every accepted key
        data: Raw values, e.g. a row loaded from CSV

    Returns:
        {name: coerced value} for every item
    """
    data = data or {}
    known = {item.name for item in items}
    for key in data:
        if key not in known:
            logger.warning("Ignoring unknown config key %r", key)

    return {
        item.name: item.coerce(data[item.name]) if item.name in data else item.default
        for item in items
    }


__all__ = [
    'ItemConfigType',
    'ItemConfig',
    'bool_config',
    'float_config',
    'int_config',
    'config_from_dict',
]
