"""
Practice schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, Dict, List, Optional
from datetime import datetime


class SubmitPracticeRequest(BaseModel):
    """Whiteboard attempt at a practice question."""
    user_id: Optional[int] = Field(None, alias="userId", description="Owner; omitted for anonymous attempts")
    question: str = Field(..., min_length=1, description="Question text")
    canvas: Optional[Dict[str, Any]] = Field(None, description="Canvas payload ({strokes: [...]})")

    class Config:
        populate_by_name = True


class PracticeAttemptResponse(BaseModel):
    """Stored practice attempt."""
    id: int
    user_id: Optional[int] = Field(None, alias="userId")
    question: str
    canvas: Dict[str, Any]
    created_at: datetime = Field(..., alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class GenerateQuestionRequest(BaseModel):
    """Parameters of a generated practice question."""
    class_level: str = Field(..., min_length=1, alias="classLevel", description="e.g. 'Class 10'")
    subject: str = Field(..., min_length=1)
    curriculum: str = Field(..., min_length=1, description="e.g. 'CBSE'")
    topic: str = Field(..., min_length=1)
    subtopic: Optional[str] = Field(None, description="Subtopic to target")
    subtopics: Optional[List[str]] = Field(None, description="Candidates to pick one from when no subtopic is given")

    class Config:
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "classLevel": "Class 10",
                "subject": "Mathematics",
                "curriculum": "CBSE",
                "topic": "Quadratic Equations",
                "subtopics": ["Factorisation", "Discriminant"]
            }
        }
