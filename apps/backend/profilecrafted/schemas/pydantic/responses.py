from datetime import datetime
from typing import Any, Dict, List, Optional

from .base import CamelModel
from .resume import UploadedResume
from .scorecard import Scorecard


class HealthResponse(CamelModel):
    status: str = "OK"
    timestamp: datetime
    environment: str
    services: Dict[str, str]
    version: str


class UploadResponse(CamelModel):
    success: bool = True
    data: UploadedResume
    analysis: Scorecard
    message: str = "Resume parsed successfully"


class ScorecardResponse(CamelModel):
    success: bool = True
    scorecard: Scorecard
    message: str = "Scorecard generated successfully"


class EssayResponse(CamelModel):
    success: bool = True
    essay: str
    word_count: int
    fallback_used: bool = False
    provider: Optional[str] = None
    session_id: Optional[str] = None
    message: str = "Essay generated successfully"


class ExportResponse(CamelModel):
    success: bool = True
    message: str
    filename: Optional[str] = None
    content: Optional[str] = None


class EmailResponse(CamelModel):
    success: bool = True
    message: str
    recipient: str
    word_count: int
    sent_at: datetime
    simulated: bool = False


class StatusResponse(CamelModel):
    ready: bool
    issues: List[str]
    config: Dict[str, Any]


class PromptResponse(CamelModel):
    success: bool = True
    prompt: str
    note: str = "Development endpoint: send this prompt to your own LLM"
