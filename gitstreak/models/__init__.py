"""Domain models"""

from gitstreak.models.contribution import ContributionDay, StreakSnapshot
from gitstreak.models.display import (
    CUSTOM_TEMPLATE_MAX_LENGTH,
    PLACEHOLDERS,
    BuiltinFormat,
    BuiltinTemplate,
    CustomTemplate,
    DisplayTemplate,
)

__all__ = [
    "ContributionDay",
    "StreakSnapshot",
    "CUSTOM_TEMPLATE_MAX_LENGTH",
    "PLACEHOLDERS",
    "BuiltinFormat",
    "BuiltinTemplate",
    "CustomTemplate",
    "DisplayTemplate",
]
