from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional


# Model output

class ExtractedPerson(BaseModel):
    first_name: str = ""
    last_name: str = ""
    company: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def null_name_to_empty(cls, value):
        return value or ""

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags_to_empty(cls, value):
        return value or []


class NoteExtraction(BaseModel):
    people: list[ExtractedPerson] = Field(default_factory=list)
    summary: str = ""


class ContactDraft(BaseModel):
    """Single-contact preview for quick capture. Never persisted as is."""
    first_name: str = ""
    last_name: str = ""
    role: Optional[str] = None
    company: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    interests: list[str] = Field(default_factory=list)
    notes: str = ""


# API Request/Response models

class IngestTextRequest(BaseModel):
    text: str = Field(..., description="Free-form note about people you met")


class IngestVoiceRequest(BaseModel):
    audio_base64: Optional[str] = Field(None, description="Base64 audio, data URL prefix allowed")
    storage_path: Optional[str] = Field(None, description="Path to audio file in voice-notes bucket")
    mime_type: str = "audio/webm"

    @model_validator(mode="after")
    def exactly_one_source(self):
        if bool(self.audio_base64) == bool(self.storage_path):
            raise ValueError("Provide exactly one of audio_base64 or storage_path")
        return self


class IngestData(BaseModel):
    summary: str = ""
    contacts_processed: int
    contact_ids: list[str]
    created_count: int
    matched_count: int
    interaction_id: Optional[str] = None
    transcript: Optional[str] = None


class IngestResponse(BaseModel):
    success: bool = True
    data: IngestData


class DraftRequest(BaseModel):
    text: str = Field(..., description="Note describing a single person")


class SearchRequest(BaseModel):
    query: str = Field(..., description="Question about your network in natural language")


class ContactCard(BaseModel):
    id: str
    first_name: str
    last_name: str = ""
    company: Optional[str] = None
    role: Optional[str] = None
    tags: list[str] = Field(default_factory=list)

    @field_validator("last_name", mode="before")
    @classmethod
    def null_last_name(cls, value):
        return value or ""

    @field_validator("tags", mode="before")
    @classmethod
    def null_tags(cls, value):
        return value or []


class SearchResponse(BaseModel):
    answer: str
    contacts: list[ContactCard]


class Contact(ContactCard):
    email: Optional[str] = None
    phone: Optional[str] = None
    status: str = "active"
    last_interaction_at: Optional[str] = None
    created_at: Optional[str] = None


class ContactUpdate(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    company: Optional[str] = None
    role: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    tags: Optional[list[str]] = None
    status: Optional[str] = Field(None, pattern="^(active|incomplete)$")


class Interaction(BaseModel):
    id: str
    raw_text: str
    summary: Optional[str] = None
    source: Optional[str] = None
    created_at: Optional[str] = None
