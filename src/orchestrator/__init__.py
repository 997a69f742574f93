"""
Reelview Orchestrator Module
============================

Orchestration layer for product analysis.

Components:
    - ProductAnalysisPipeline: search, transcripts, aggregation, persistence
    - CLI: Command-line interface
    - setup_logging: logging configuration shared by CLI and API

Usage:
    from src.orchestrator import ProductAnalysisPipeline

    analysis = ProductAnalysisPipeline().run("Pixel 9")
"""

from .logging_config import setup_logging
from .product_analysis import (
    AnalysisError,
    PipelineStage,
    ProductAnalysisPipeline,
    build_aggregator,
)

__all__ = [
    "AnalysisError",
    "PipelineStage",
    "ProductAnalysisPipeline",
    "build_aggregator",
    "setup_logging",
]
