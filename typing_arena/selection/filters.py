from enum import StrEnum

from pydantic import BaseModel, ConfigDict, field_validator

ALL = "all"


class DifficultyFilter(StrEnum):
    ALL = "all"
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class FilterContext(BaseModel):
    """User-controlled filter dimensions.

    Read when a passage is picked and when a score is saved. The copy taken at
    save time is frozen into the record so later filter changes cannot leak
    into an in-flight save.

    Attributes:
        difficulty: all | easy | normal | hard
        category: Category name or "all"
        theme: Theme name or "all"
        daily_theme_active: Whether the daily-theme toggle is on
        daily_theme: Today's theme, resolved by the game context
    """

    model_config = ConfigDict(validate_assignment=True)

    difficulty: DifficultyFilter = DifficultyFilter.ALL
    category: str = ALL
    theme: str = ALL
    daily_theme_active: bool = False
    daily_theme: str | None = None

    @field_validator("category", "theme")
    @classmethod
    def default_to_all(cls, value: str) -> str:
        value = value.strip()
        return value or ALL

    def snapshot(self) -> "FrozenFilterContext":
        return FrozenFilterContext(**self.model_dump())


class FrozenFilterContext(FilterContext):
    """Immutable snapshot of a FilterContext."""

    model_config = ConfigDict(frozen=True)
