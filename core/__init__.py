"""Core package for recap enhancer.

Экспортирует:
- BaseHandler, ExtractorHandler, AnalyzerHandler: базовые классы handlers
- CancellationToken: внешний запрос на отмену прогона

EnhancementPipeline импортируется напрямую из core.pipeline: он зависит
от features, которые сами импортируют core.base_handler.
"""

from core.base_handler import BaseHandler, ExtractorHandler, AnalyzerHandler
from core.cancellation import CancellationToken

__all__ = [
    # Handlers
    "BaseHandler",
    "ExtractorHandler",
    "AnalyzerHandler",
    # Cancellation
    "CancellationToken",
]
