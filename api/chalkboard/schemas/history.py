"""
History schemas.
"""
from pydantic import BaseModel, Field
from typing import Any, List, Optional
from datetime import datetime


class SaveHistoryRequest(BaseModel):
    """Request to save a question and its canvas to the user's history."""
    user_id: Optional[int] = Field(None, alias="userId", description="Owner of the entry")
    question_data: Optional[Any] = Field(None, alias="questionData", description="Question as shown to the student")
    canvas_data: Optional[Any] = Field(None, alias="canvasData", description="Canvas payload")
    status: Optional[str] = Field(None, description="Solve status (e.g. 'solved', 'attempted')")
    subject: Optional[str] = Field(None, description="Subject of the question")

    class Config:
        populate_by_name = True


class UpdateHistoryRequest(BaseModel):
    """Partial update of a history entry. Only provided fields change."""
    status: Optional[str] = None
    canvas_data: Optional[Any] = Field(None, alias="canvasData")

    class Config:
        populate_by_name = True


class HistoryResponse(BaseModel):
    """History entry."""
    id: int
    user_id: int = Field(..., alias="userId")
    question_data: Optional[Any] = Field(None, alias="questionData")
    canvas_data: Optional[Any] = Field(None, alias="canvasData")
    status: Optional[str] = None
    subject: Optional[str] = None
    created_at: datetime = Field(..., alias="createdAt")
    updated_at: datetime = Field(..., alias="updatedAt")

    class Config:
        from_attributes = True
        populate_by_name = True


class Pagination(BaseModel):
    """Pagination block of a history listing."""
    page: int
    limit: int
    total: int
    total_pages: int = Field(..., alias="totalPages")

    class Config:
        populate_by_name = True


class HistoryPage(BaseModel):
    """One page of history entries."""
    items: List[HistoryResponse]
    pagination: Pagination
