"""Diet plan models."""

from pydantic import BaseModel, Field

MEAL_SECTIONS = ("breakfast", "lunch", "snacks", "dinner")


class MealEntry(BaseModel):
    """One meal of the plan with its macros."""

    meal: str
    calories: float = Field(ge=0)
    protein: float = Field(ge=0)
    carbs: float = Field(ge=0)
    fat: float = Field(ge=0)


class Hydration(BaseModel):
    """Daily water target."""

    amount: float = Field(gt=0)
    schedule: str


class DietPlan(BaseModel):
    """Structured daily diet plan."""

    breakfast: MealEntry
    lunch: MealEntry
    snacks: MealEntry
    dinner: MealEntry
    hydration: Hydration
    special_note: str | None = None

    @property
    def total_calories(self) -> float:
        """Return the sum of calories across the four meals."""
        return sum(getattr(self, section).calories for section in MEAL_SECTIONS)


class GenerateDietPlanRequest(BaseModel):
    """Request body for diet plan generation."""

    userId: str | None = None  # noqa: N815
