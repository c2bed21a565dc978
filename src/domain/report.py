"""Generated report domain models."""

from pydantic import BaseModel, Field


class GeneratedReport(BaseModel):
    """A rendered report kept in the report log."""

    id: str = Field(..., description="Unique report ID")
    name: str = Field(..., description="Report name shown in the report list")
    generated_at: str = Field(..., description="Generation timestamp (ISO format)")
    data: bytes = Field(..., description="Rendered document payload")
