"""
Analyze Schemas
===============
Request and response models for the analyze endpoint.
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Literal, Optional


class AnalyzeConfig(BaseModel):
    """Rule selection and category weights"""

    enabled_rules: Optional[List[str]] = Field(
        default=None, description="Rule IDs to run; omit or ['all'] for the full catalog"
    )
    custom_weights: Optional[Dict[str, float]] = Field(
        default=None, description="Per-category weight overrides"
    )


class AnalyzeRequest(BaseModel):
    """Request to analyze contract source"""

    code: Optional[str] = Field(default=None, description="Contract source text")
    config: Optional[AnalyzeConfig] = Field(default=None)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "code": "pragma solidity ^0.8.0;\ncontract A { }",
                "config": {
                    "enabled_rules": ["reentrancy", "floating_pragma"],
                    "custom_weights": {"security": 0.5},
                },
            }
        }
    )


class IssueModel(BaseModel):
    """One finding"""

    severity: Literal["high", "medium", "low"]
    message: str
    line: Optional[int] = None
    recommendation: Optional[str] = None


class MetricsModel(BaseModel):
    """Per-category sub-scores, 0-100"""

    performance: int
    security: int
    gas_efficiency: int
    code_quality: int


class AnalyzeResponse(BaseModel):
    """Analysis outcome"""

    score: int = Field(..., ge=0, le=100)
    metrics: MetricsModel
    issues: List[IssueModel] = Field(default_factory=list)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "score": 77,
                "metrics": {
                    "performance": 100,
                    "security": 85,
                    "gas_efficiency": 100,
                    "code_quality": 95,
                },
                "issues": [
                    {
                        "severity": "high",
                        "message": "Potential reentrancy vulnerability: state is modified after an external call",
                        "line": 4,
                        "recommendation": "Implement checks-effects-interactions pattern: perform all state changes before making external calls",
                    }
                ],
            }
        }
    )


class RuleInfo(BaseModel):
    """Catalog entry"""

    id: str
    category: str
    description: str
    stability: str
