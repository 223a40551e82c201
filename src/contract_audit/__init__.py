"""contract_audit: heuristic smart-contract linter with weighted scoring."""

__all__ = [
    "__version__",
    "Analyzer",
    "AnalyzerConfig",
    "AnalysisResults",
    "Category",
    "Issue",
    "Metrics",
    "Severity",
    "analyze_contract",
    "analyze_source",
    "process_request",
]
__version__ = "0.1.0"

from contract_audit.api import analyze_source, process_request  # noqa: E402, F401
from contract_audit.core.config import AnalyzerConfig  # noqa: E402, F401
from contract_audit.core.registry import Analyzer, analyze_contract  # noqa: E402, F401
from contract_audit.model import Category, Severity  # noqa: E402, F401
from contract_audit.model.analysis_result import AnalysisResults, Metrics  # noqa: E402, F401
from contract_audit.model.issue import Issue  # noqa: E402, F401
