"""
Reelview Review Feature Analysis
================================

Deterministic classification of video reviews into product features
(camera, battery, design, ...) and aggregation into per-feature summaries.
No ML required.

Modules:
    review_models   - Data models (ReviewRecord, FeatureSummary, ProductSummary)
    review_signals  - Keyword lexicon and per-review classifier
    review_insights - Per-product aggregation into feature summaries
    review_store    - PostgreSQL persistence of a ProductAnalysis
"""

from .review_models import (
    ClassifiedReview,
    FeatureCategory,
    FeatureSummary,
    ProductAnalysis,
    ProductSummary,
    Quote,
    ReviewRecord,
    Sentiment,
)
from .review_signals import (
    DEFAULT_LEXICON,
    CategoryRule,
    FeatureLexicon,
    ReviewClassifier,
    classify_review,
    estimate_rating,
)
from .review_insights import FeatureAggregator, aggregate
from .review_store import ReviewAnalysisStore
