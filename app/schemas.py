from pydantic import BaseModel, Field
from typing import Optional

class FeedbackRequest(BaseModel):
    participant_id: Optional[str] = Field(None, alias="participantId", description="Participant identifier from the experiment frontend")
    group: str = Field(..., description="Experiment arm: 'heuristic' or 'instructive'")
    input_text: str = Field(..., alias="inputText", description="The student's writing")

class FeedbackResponse(BaseModel):
    feedback: str

class ErrorResponse(BaseModel):
    error: str
