"""Parameter extraction route — datasheet text → sparse {fs, qts, vas}."""

import logging
import os
from typing import Optional

from anthropic import Anthropic, APIError
from fastapi import APIRouter, Header, HTTPException

from backend.ai.extraction import DEFAULT_MODEL, ExtractionError, extract_parameters
from backend.models import ExtractParametersRequest, ExtractParametersResponse

logger = logging.getLogger(__name__)

router = APIRouter()

client = None


def get_client(api_key: Optional[str] = None) -> Anthropic:
    """Client for a caller-supplied key, or the shared one from ANTHROPIC_API_KEY."""
    global client
    if api_key:
        return Anthropic(api_key=api_key)
    if client is None:
        env_key = os.getenv("ANTHROPIC_API_KEY")
        if not env_key:
            raise HTTPException(
                status_code=400,
                detail="No API key provided. Enter your Anthropic API key or configure ANTHROPIC_API_KEY.",
            )
        client = Anthropic(api_key=env_key)
    return client


@router.post("/extract-parameters", response_model=ExtractParametersResponse)
async def extract_parameters_endpoint(
    request: ExtractParametersRequest,
    x_api_key: Optional[str] = Header(None),
):
    """Extract Thiele-Small parameters from pasted specification text."""
    text = request.text.strip()
    if not text:
        raise HTTPException(status_code=400, detail="Please paste some text to parse.")

    try:
        ai_client = get_client((request.api_key or x_api_key or "").strip() or None)
        model = os.getenv("EXTRACTION_MODEL", DEFAULT_MODEL)
        params = extract_parameters(text, ai_client, model=model)
    except HTTPException:
        raise
    except ExtractionError as e:
        raise HTTPException(status_code=502, detail=f"Error parsing text: {e}")
    except APIError:
        logger.warning("Parameter extraction request failed", exc_info=True)
        raise HTTPException(status_code=502, detail="AI request failed. Check your API key and try again.")
    except Exception:
        logger.exception("Unexpected error during parameter extraction")
        raise HTTPException(status_code=500, detail="Parameter extraction failed. Please try again.")

    return ExtractParametersResponse(**params, found=list(params.keys()))
