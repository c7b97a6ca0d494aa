from fastapi import APIRouter

from app.ai.config import load_ai_config

router = APIRouter()


@router.get("/health", summary="Health Check", description="Check the health status of the application.")
async def health_check():
    ai = load_ai_config()
    return {
        "status": "healthy",
        "draftAssistant": ai.provider if ai.enabled else "none",
    }
