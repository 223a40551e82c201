"""
Contract Audit Web API
======================
FastAPI-based REST API for contract analysis.

Quick Start:
    uvicorn contract_audit.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
