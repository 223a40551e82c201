"""
Pydantic Schemas
===============
Request and response models for the API.
"""
from .analyze import (
    AnalyzeConfig,
    AnalyzeRequest,
    AnalyzeResponse,
    IssueModel,
    MetricsModel,
    RuleInfo,
)

__all__ = [
    "AnalyzeConfig",
    "AnalyzeRequest",
    "AnalyzeResponse",
    "IssueModel",
    "MetricsModel",
    "RuleInfo",
]
