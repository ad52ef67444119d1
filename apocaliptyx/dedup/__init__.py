"""Scenario duplicate detection.

Exact content-hash lookups run first; when they miss, the candidate is scored
against every active scenario with combined Jaccard/Levenshtein similarity.
"""

from apocaliptyx.dedup.result import DuplicateCheckResult, SimilarScenario
from apocaliptyx.dedup.detector import DuplicateDetector
from apocaliptyx.dedup.service import DuplicateDetectionService

__all__ = [
    "DuplicateCheckResult",
    "SimilarScenario",
    "DuplicateDetector",
    "DuplicateDetectionService",
]
