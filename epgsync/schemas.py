from pydantic import BaseModel, Field, field_validator

from epgsync.models import CanonicalProgram
from epgsync.utils.timezone import parse_date_label, DateFormatError


class ChannelMappingRequest(BaseModel):
    """Provider channel paired with the caller's channel id"""
    provider_channel_id: str = Field(..., min_length=1, description="Channel ID in the provider's namespace")
    channel_id: str = Field(..., min_length=1, description="Channel ID in the caller's namespace")


class EPGFetchRequest(BaseModel):
    """Batch EPG fetch request"""
    date: str = Field(..., description="Calendar day to fetch (YYYY-MM-DD) in the provider's timezone")
    channels: list[ChannelMappingRequest] = Field(..., min_length=1, description="Channels to fetch")

    @field_validator('date')
    @classmethod
    def validate_date_format(cls, v: str) -> str:
        """Validate date label format using centralized parser"""
        try:
            parse_date_label(v)
            return v
        except DateFormatError:
            raise ValueError(f"Invalid date format: {v}. Must be YYYY-MM-DD (e.g., '2024-03-01')")


class ProgramResponse(BaseModel):
    """Single program data"""
    channel_id: str
    title: str
    start_time: str
    end_time: str
    source_timezone: str
    provider_id: str

    @classmethod
    def from_program(cls, program: CanonicalProgram) -> "ProgramResponse":
        return cls(**program.to_dict())


class EPGResponse(BaseModel):
    """EPG data response"""
    timestamp: str
    provider_id: str
    date: str
    channels_requested: int
    total_programs: int
    programs: list[ProgramResponse] = Field(..., description="Programs in fetch order")


class ChannelResponse(BaseModel):
    """Provider catalog entry"""
    id: str
    name: str


class ProviderHealthResponse(BaseModel):
    """Result of a provider health check"""
    provider_id: str
    healthy: bool
    message: str
    checked_at: str
