from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


class PairingType(str, Enum):
    wine = "wine"
    food = "food"


class Course(str, Enum):
    starter = "starter"
    main = "main"
    dessert = "dessert"


class CategoryFilter(str, Enum):
    all = "all"
    wine = "wine"
    food = "food"
    starter = "starter"
    main = "main"
    dessert = "dessert"


TYPE_CATEGORIES = {CategoryFilter.wine, CategoryFilter.food}
COURSE_CATEGORIES = {CategoryFilter.starter, CategoryFilter.main, CategoryFilter.dessert}


class CatalogPairing(BaseModel):
    """A curated pairing shipped with the app. Restaurant entries also carry a course."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: Literal["catalog"] = "catalog"
    name: str = Field(..., min_length=1)
    type: PairingType
    matches: tuple[str, ...] = Field(..., min_length=1)
    description: str
    course: Course | None = None
    restaurant: str | None = None
    is_ai_generated: Literal[False] = False

    @computed_field
    @property
    def tag(self) -> str:
        """Label shown on the pairing card."""
        if self.type == PairingType.wine:
            return "Wine"
        return self.restaurant or "Food"

    @computed_field
    @property
    def course_badge(self) -> str | None:
        # Only restaurant dishes show their course.
        if self.restaurant and self.course:
            return self.course.value
        return None


class AIPairing(BaseModel):
    """A suggestion synthesized by the generative model."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    source: Literal["ai"] = "ai"
    name: str = Field(..., min_length=1)
    type: PairingType = PairingType.wine
    matches: tuple[str, ...] = Field(..., min_length=1)
    description: str = ""
    is_ai_generated: Literal[True] = True

    @computed_field
    @property
    def tag(self) -> str:
        return "Wine"


PairingItem = Annotated[Union[CatalogPairing, AIPairing], Field(discriminator="source")]
