from .analysis import (
    FeedbackAnalysis,
    PerformanceMetric,
    SECTION_LIMIT,
    build_feedback_analysis_prompt,
    synthesize_feedback,
)

__all__ = [
    "FeedbackAnalysis",
    "PerformanceMetric",
    "SECTION_LIMIT",
    "build_feedback_analysis_prompt",
    "synthesize_feedback",
]
