"""
Analyze Router
==============
Endpoints for analyzing contract source.
"""
import logging
from typing import List

from fastapi import APIRouter, HTTPException

from contract_audit import api as core_api
from contract_audit.web_api.config import settings
from contract_audit.web_api.schemas.analyze import (
    AnalyzeRequest,
    AnalyzeResponse,
    RuleInfo,
)

router = APIRouter()

_logger = logging.getLogger(__name__)


@router.post("/analyze", response_model=AnalyzeResponse, response_model_exclude_none=True)
def analyze_contract(request: AnalyzeRequest):
    """
    Analyze a contract.

    - **code**: Contract source text (required, non-empty)
    - **config.enabled_rules**: Rule IDs to run (default: all)
    - **config.custom_weights**: Category weight overrides
    """
    if not request.code:
        raise HTTPException(status_code=400, detail="Contract code is required")
    if len(request.code.encode("utf-8")) > settings.MAX_SOURCE_BYTES:
        raise HTTPException(
            status_code=400,
            detail=f"Contract code exceeds {settings.MAX_SOURCE_BYTES} bytes",
        )

    payload = {"code": request.code}
    if request.config is not None:
        payload["config"] = request.config.model_dump(exclude_none=True)

    try:
        return core_api.analyze_request(
            payload, max_workers=settings.ANALYZER_WORKERS or None
        )
    except core_api.RequestError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception:
        _logger.exception("analysis failed")
        raise HTTPException(status_code=500, detail="Failed to analyze contract")


@router.get("/rules", response_model=List[RuleInfo])
async def list_rules(include_experimental: bool = False):
    """
    List the rule catalog.

    - **include_experimental**: Also list opt-in rules
    """
    return core_api.describe_rules(include_experimental=include_experimental)
