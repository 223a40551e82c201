"""
Health Check Router
==================
Liveness and readiness probes.
"""
from fastapi import APIRouter, HTTPException

from contract_audit import __version__
from contract_audit.analyzers import get_default_rules
from contract_audit.contracts.load import REQUEST_SCHEMA, RESULT_SCHEMA, load_schema

router = APIRouter()


@router.get("/health")
async def health_check():
    """Process is up."""
    return {"status": "ok", "version": __version__}


@router.get("/ready")
async def readiness_check():
    """
    Ready once the rule catalog instantiates and the bundled
    request/result schemas load.
    """
    try:
        load_schema(REQUEST_SCHEMA)
        load_schema(RESULT_SCHEMA)
    except FileNotFoundError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return {"status": "ready", "rules": len(get_default_rules())}
