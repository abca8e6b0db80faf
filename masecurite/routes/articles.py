import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from masecurite.core.config import Settings, get_settings
from masecurite.services.article_generator import (
    SourceItemNotFound,
    generate_post_for_item,
    get_openai_client,
    mark_item_failed,
)
from masecurite.services.supabase_client import get_supabase

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/articles", tags=["Content Generation"])


class GenerateArticleRequest(BaseModel):
    source_item_id: Optional[Any] = None


@router.post("/generate")
def generate_article_from_source(
    payload: GenerateArticleRequest,
    settings: Settings = Depends(get_settings),
):
    if not payload.source_item_id:
        return JSONResponse(status_code=400, content={"error": "source_item_id required"})

    if not settings.openai_api_key:
        return JSONResponse(status_code=400, content={"error": "OpenAI API key not configured"})

    try:
        supabase = get_supabase(settings)
    except RuntimeError:
        logger.error("article_generation supabase_not_configured")
        return JSONResponse(status_code=500, content={"error": "Content store not configured"})

    client = get_openai_client(settings.openai_api_key)

    try:
        outcome = generate_post_for_item(
            supabase,
            client,
            payload.source_item_id,
            default_model=settings.openai_model,
        )
    except SourceItemNotFound:
        return JSONResponse(status_code=404, content={"error": "Source item not found"})
    except Exception:
        logger.exception("article_generation_failed item_id=%s", payload.source_item_id)
        mark_item_failed(supabase, payload.source_item_id)
        return JSONResponse(status_code=500, content={"error": "Generation failed"})

    return outcome.to_dict()
