from .scan_service import ScanService
from .similarity_service import SimilarityService, SimilarityEdge
from .report_service import ReportService


__all__ = [
    'ScanService',
    'SimilarityService',
    'SimilarityEdge',
    'ReportService',
]
