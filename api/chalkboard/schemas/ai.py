"""
Hint and evaluation schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, List, Optional


class ImageSubmissionRequest(BaseModel):
    """Whiteboard snapshot submitted for a hint or an image evaluation."""
    question: str = Field(..., min_length=1, description="Question the student is working on")
    image_base64: str = Field(..., alias="imageBase64", description="Base64 PNG/JPEG, optionally a data URI")
    mime_type: Optional[str] = Field(None, alias="mimeType", description="MIME type of the image")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "question": "Solve 2x + 5 = 13",
                "imageBase64": "data:image/png;base64,iVBORw0KGgo...",
                "mimeType": "image/png"
            }
        }


class CanvasEvaluationRequest(BaseModel):
    """Stroke-list canvas submitted for a text-only evaluation."""
    question: str = Field(..., min_length=1, description="Question the student is working on")
    canvas_state: Optional[Any] = Field(None, alias="canvasState", description="Canvas payload ({strokes: [...]}) or its JSON string")

    class Config:
        populate_by_name = True


class FeedbackResult(BaseModel):
    """Structured hint or evaluation parsed from model text."""
    title: str
    explanation: str
    next_steps: List[str] = Field(default_factory=list, alias="nextSteps")
    is_correct: Optional[bool] = Field(None, alias="isCorrect")
    is_blank: Optional[bool] = Field(None, alias="isBlank")

    class Config:
        populate_by_name = True

    def to_response(self) -> dict:
        """camelCase dict without unset verdict fields."""
        return self.model_dump(by_alias=True, exclude_none=True)
