"""
symptom.py — Read-only view of a logged symptom.

The web app stores symptoms with `body_part` / `body_coordinates` keys;
both those names and the `region_id` / `coordinates` field names are
accepted on input. Records are frozen — aggregation never mutates them.

No range checks are applied here: region ids and severities come from
free-text AI extraction and user edits, and the body-map core degrades
gracefully instead of rejecting them.
"""

from datetime import datetime
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class BodyCoordinates(BaseModel):
    """A stored marker position, tagged with the view it was placed on."""

    model_config = ConfigDict(frozen=True)

    x: float
    y: float
    view: str  # "front" | "back" (anything else simply never matches a view)


class SymptomRecord(BaseModel):
    """A single symptom as seen by the body-map core."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    region_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("region_id", "body_part"),
    )
    coordinates: Optional[BodyCoordinates] = Field(
        default=None,
        validation_alias=AliasChoices("coordinates", "body_coordinates"),
    )
    severity: Optional[int] = None  # 1–10, None → treated as 5
    symptom_type: Optional[str] = None
    description: Optional[str] = None
    created_at: Optional[datetime] = None
