from pydantic import BaseModel, Field
from typing import Optional


class VisionExtractRequest(BaseModel):
    """Photo or drawing of a question to transcribe."""
    image_base64: Optional[str] = Field(None, alias="imageBase64", description="Base64 image, optionally a data URI")
    mime_type: Optional[str] = Field(None, alias="mimeType")

    class Config:
        populate_by_name = True


class VisionExtractResponse(BaseModel):
    text: str
