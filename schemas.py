"""
Database Schemas for the civic portal

Each submission kind maps to its own MongoDB collection:
- Volunteer -> "volunteer"
- Opinion -> "your_opinion"
- Suggestion -> "your_suggest"
- DevelopmentIdea -> "development_idea"

``createdAt`` / ``updatedAt`` are set by the server, never by the client.
"""

from datetime import date, datetime, time, timezone
from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class Submission(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        data = self.model_dump(exclude_unset=partial, exclude_none=True)
        for key, value in list(data.items()):
            # bson has no bare date type
            if isinstance(value, date) and not isinstance(value, datetime):
                data[key] = datetime.combine(value, time.min, tzinfo=timezone.utc)
        return data


class VolunteerCreate(Submission):
    fullname: str = Field(..., min_length=1, description="Full name")
    fathername: str = Field(..., min_length=1, description="Father's name")
    mothername: str = Field(..., min_length=1, description="Mother's name")
    dateofbirth: date = Field(..., description="Date of birth, YYYY-MM-DD")
    mobile: str = Field(..., min_length=1, description="Mobile number")
    education: str = Field(..., min_length=1, description="Highest education")
    area: str = Field(..., min_length=1, description="Area / locality")
    media: Optional[str] = Field(None, description="URL of an uploaded photo")
    agree: bool = Field(..., description="Consent to the volunteer terms")

    @field_validator("agree")
    @classmethod
    def _must_agree(cls, agree: bool) -> bool:
        if agree is not True:
            raise ValueError("You must agree to the terms")
        return agree

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        data = super().to_document(partial)
        data["viewed"] = False
        return data


class VolunteerUpdate(Submission):
    fullname: Optional[str] = Field(None, min_length=1)
    fathername: Optional[str] = Field(None, min_length=1)
    mothername: Optional[str] = Field(None, min_length=1)
    dateofbirth: Optional[date] = None
    mobile: Optional[str] = Field(None, min_length=1)
    education: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = Field(None, min_length=1)
    media: Optional[str] = None
    agree: Optional[bool] = None


class OpinionCreate(Submission):
    fullname: str = Field(..., min_length=1, description="Full name")
    mobile: str = Field(..., min_length=1, description="Mobile number")
    area: str = Field(..., min_length=1, description="Area / locality")
    typeOfOpinion: str = Field(..., min_length=1, description="Opinion category")
    comment: str = Field(..., min_length=1, description="Free-text opinion")


class OpinionUpdate(Submission):
    fullname: Optional[str] = Field(None, min_length=1)
    mobile: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = Field(None, min_length=1)
    typeOfOpinion: Optional[str] = Field(None, min_length=1)
    comment: Optional[str] = Field(None, min_length=1)


class SuggestionCreate(Submission):
    fullname: str = Field(..., min_length=1, description="Full name")
    mobile: str = Field(..., min_length=1, description="Mobile number")
    area: str = Field(..., min_length=1, description="Area / locality")
    typeOfSuggest: str = Field(..., min_length=1, description="Suggestion category")
    comment: str = Field(..., min_length=1, description="Free-text suggestion")
    media: Optional[str] = Field(None, description="URL of an uploaded image or video")
    mediaType: Optional[Literal["image", "video"]] = Field(None, description="Kind of the uploaded media")

    @model_validator(mode="after")
    def _media_type_needs_media(self):
        if self.mediaType is not None and not self.media:
            raise ValueError("mediaType requires media")
        return self

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        data = super().to_document(partial)
        data["viewed"] = False
        return data


class SuggestionUpdate(Submission):
    fullname: Optional[str] = Field(None, min_length=1)
    mobile: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = Field(None, min_length=1)
    typeOfSuggest: Optional[str] = Field(None, min_length=1)
    comment: Optional[str] = Field(None, min_length=1)
    media: Optional[str] = None
    mediaType: Optional[Literal["image", "video"]] = None

    @model_validator(mode="after")
    def _media_type_needs_media(self):
        if self.mediaType is not None and not self.media:
            raise ValueError("mediaType requires media")
        return self


class DevelopmentIdeaCreate(Submission):
    fullname: str = Field(..., min_length=1, description="Full name")
    mobile: str = Field(..., min_length=1, description="Mobile number")
    area: str = Field(..., min_length=1, description="Area / locality")
    comment: str = Field(..., min_length=1, description="Description of the idea")
    typeOfIdea: str = Field(..., min_length=1, description="Idea category")

    def to_document(self, partial: bool = False) -> Dict[str, Any]:
        data = super().to_document(partial)
        data["viewed"] = False
        return data


class DevelopmentIdeaUpdate(Submission):
    fullname: Optional[str] = Field(None, min_length=1)
    mobile: Optional[str] = Field(None, min_length=1)
    area: Optional[str] = Field(None, min_length=1)
    comment: Optional[str] = Field(None, min_length=1)
    typeOfIdea: Optional[str] = Field(None, min_length=1)


class TypeSelector(BaseModel):
    """Body of the dashboard mark-viewed / delete calls."""

    type: Optional[str] = Field(None, description="volunteer, opinion, suggestion or developmentIdea")
