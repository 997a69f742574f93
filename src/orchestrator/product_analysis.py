"""
Reelview Product Analysis Pipeline
==================================

Runs one product request end to end:
1. Cache lookup (stored analysis for the same product name)
2. Video search (YouTube Data API)
3. Transcript retrieval (optional, failures degrade to "")
4. Normalisation into ReviewRecords + rating
5. Feature aggregation and product summary
6. Persistence

All I/O happens in stages 1-3 and 6. Stage 5 is pure.

Usage:
    from src.orchestrator.product_analysis import ProductAnalysisPipeline

    pipeline = ProductAnalysisPipeline()
    analysis = pipeline.run("Pixel 9")
"""

import dataclasses
import logging
import time
from contextlib import contextmanager
from enum import Enum
from typing import Callable, Dict, List, Optional

from ..data.config import get_settings
from ..data.youtube_client import TranscriptClient, VideoItem, YouTubeClient
from ..reviews.review_insights import FeatureAggregator
from ..reviews.review_models import ProductAnalysis, ReviewRecord
from ..reviews.review_signals import ReviewClassifier
from ..reviews.review_store import ReviewAnalysisStore

logger = logging.getLogger(__name__)


class PipelineStage(Enum):
    """Pipeline execution stages."""
    CACHE = "cache"
    SEARCH = "search"
    TRANSCRIPTS = "transcripts"
    AGGREGATION = "aggregation"
    PERSISTENCE = "persistence"


class AnalysisError(Exception):
    """The product could not be analyzed (e.g. no review videos found)."""
    pass


def build_aggregator(classifier: Optional[ReviewClassifier] = None) -> FeatureAggregator:
    """FeatureAggregator with the caps from settings.analysis."""
    caps = get_settings().analysis
    return FeatureAggregator(
        classifier=classifier or ReviewClassifier(),
        max_pros=caps.max_pros,
        max_cons=caps.max_cons,
        max_quotes=caps.max_quotes,
    )


class ProductAnalysisPipeline:
    """
    Orchestrates search, transcripts, aggregation and persistence for one product.

    Every collaborator can be injected; defaults are built from settings.
    """

    def __init__(
        self,
        youtube: Optional[YouTubeClient] = None,
        transcripts: Optional[TranscriptClient] = None,
        store: Optional[ReviewAnalysisStore] = None,
        aggregator: Optional[FeatureAggregator] = None,
        rating_fn: Optional[Callable[[ReviewRecord], float]] = None,
    ):
        settings = get_settings()
        self._youtube = youtube
        self.transcripts = transcripts or TranscriptClient(settings.transcript)
        self.store = store
        self.aggregator = aggregator or build_aggregator()
        self.rating_fn = rating_fn or self.aggregator.classifier.estimate_rating
        self.stage_durations: Dict[PipelineStage, float] = {}

    @property
    def youtube(self) -> YouTubeClient:
        """YouTube client (created on first use, needs an API key)."""
        if self._youtube is None:
            self._youtube = YouTubeClient(get_settings().youtube)
        return self._youtube

    @contextmanager
    def _stage(self, stage: PipelineStage, product_name: str):
        start = time.monotonic()
        try:
            yield
        finally:
            duration = round(time.monotonic() - start, 3)
            self.stage_durations[stage] = duration
            logger.debug(
                f"{stage.value} finished in {duration:.3f}s",
                extra={"product": product_name, "stage": stage.value, "duration": duration},
            )

    def run(self, product_name: str, force: bool = False) -> ProductAnalysis:
        """
        Analyze a product.

        Args:
            product_name: Free-text product name
            force: Recompute even if a stored analysis exists

        Raises:
            AnalysisError: No review videos were found
            YouTubeError: Video search failed
        """
        product_name = product_name.strip()
        if not product_name:
            raise AnalysisError("Product name is required")

        self.stage_durations = {}
        logger.info(f"Analyzing product: {product_name}", extra={"product": product_name})

        if self.store is not None and not force:
            with self._stage(PipelineStage.CACHE, product_name):
                cached = self.store.load_analysis(product_name)
            if cached is not None:
                logger.info(f"Found existing analysis for {product_name}")
                return cached

        with self._stage(PipelineStage.SEARCH, product_name):
            videos = self.youtube.search_reviews(product_name)
        if not videos:
            raise AnalysisError(f"No YouTube videos found for {product_name}")

        with self._stage(PipelineStage.TRANSCRIPTS, product_name):
            reviews = self.build_records(videos)

        with self._stage(PipelineStage.AGGREGATION, product_name):
            features = self.aggregator.aggregate(reviews)
            summary = self.aggregator.build_product_summary(product_name, reviews, features)

        analysis = ProductAnalysis(
            product_name=product_name,
            features=features,
            summary=summary,
            reviews=reviews,
            image_url=videos[0].thumbnail_url,
        )

        if self.store is not None:
            with self._stage(PipelineStage.PERSISTENCE, product_name):
                analysis.product_id = self.store.save_analysis(
                    analysis, classifier=self.aggregator.classifier
                )

        logger.info(
            f"Analysis complete for {product_name}: {len(reviews)} reviews, "
            f"{len(features)} features, overall {summary.overall_rating}/5",
            extra={"product": product_name},
        )
        return analysis

    def build_records(self, videos: List[VideoItem]) -> List[ReviewRecord]:
        """Normalise videos into rated ReviewRecords, fetching transcripts."""
        reviews = []
        for video in videos:
            transcript = self.transcripts.fetch_transcript(video.video_id)
            record = ReviewRecord(
                title=video.title,
                rating=0.0,
                description=video.description,
                transcript=transcript,
                channel_name=video.channel_name,
                source_url=video.url,
                video_id=video.video_id,
                published_at=video.published_at,
            )
            rating = min(5.0, max(0.0, float(self.rating_fn(record))))
            reviews.append(dataclasses.replace(record, rating=rating))
        return reviews
