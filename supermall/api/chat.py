"""
API endpoint for the SuperMall shopping assistant

Endpoint:
- POST /api/v1/chat - Answer one message of a chat session
"""
import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from supermall.core.auth import TokenUser, get_current_user_optional
from supermall.services.chatbot_service import ChatbotService

logger = logging.getLogger(__name__)

# ============================================================================
# ROUTER
# ============================================================================

router = APIRouter(prefix="/api/v1", tags=["Chat"])


# ============================================================================
# REQUEST/RESPONSE MODELS
# ============================================================================

class ChatRequest(BaseModel):
    """Request body for chat endpoint"""
    message: str = Field(..., min_length=1, max_length=1000, description="User's message")
    session_id: Optional[str] = Field(None, max_length=100, description="Omit to start a new session")


class ChatResponse(BaseModel):
    """Response from chat endpoint"""
    success: bool
    session_id: str
    intent: str
    text: str
    cards: List[Dict[str, Any]]
    timestamp: str


# ============================================================================
# ENDPOINT: POST /api/v1/chat
# ============================================================================

@router.post("/chat", response_model=ChatResponse)
async def chat(request: ChatRequest, user: Optional[TokenUser] = Depends(get_current_user_optional)):
    """
    Send a message to the assistant

    Guests can ask for recommendations; order tracking needs a signed-in user.
    """
    session_id = request.session_id or f"chat-{uuid.uuid4().hex[:12]}"
    logger.info(f"Chat request ({session_id}): {request.message[:100]}")

    try:
        reply = ChatbotService().handle_message(session_id, request.message, user.id if user else None)
        return ChatResponse(
            success=True,
            timestamp=datetime.now(timezone.utc).isoformat(),
            **reply.to_dict(),
        )
    except Exception as e:
        logger.error(f"Chat error ({session_id}): {e}", exc_info=True)
        raise HTTPException(
            status_code=500,
            detail="Sorry, something went wrong. Please try again later."
        )
