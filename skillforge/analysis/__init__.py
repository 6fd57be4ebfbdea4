from skillforge.analysis.gateway import (
    AnalysisResult,
    GeminiAnalysisGateway,
    IAnalysisGateway,
    parse_package_response,
)

__all__ = [
    "AnalysisResult",
    "GeminiAnalysisGateway",
    "IAnalysisGateway",
    "parse_package_response",
]
