"""
Review Analysis Data Models
===========================

Structured inputs and outputs of the feature analysis pipeline.
ReviewRecord is normalised once at the boundary; everything downstream
of it is total and side-effect free.
"""

import math
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Tuple
from enum import Enum


class FeatureCategory(str, Enum):
    """Feature categories, declared in matching priority order."""
    CAMERA = "camera"
    BATTERY = "battery"
    DESIGN = "design"
    PERFORMANCE = "performance"
    DISPLAY = "display"
    AUDIO = "audio"
    SOFTWARE = "software"
    CONNECTIVITY = "connectivity"
    OTHER = "other"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"

    @classmethod
    def from_rating(cls, rating: float) -> "Sentiment":
        """positive >= 4.0, neutral >= 3.0, negative below."""
        if rating >= 4.0:
            return cls.POSITIVE
        if rating >= 3.0:
            return cls.NEUTRAL
        return cls.NEGATIVE


def round_rating(value: float) -> float:
    """Round half-up to one decimal (4.25 -> 4.3)."""
    return float(Decimal(str(value)).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _text(raw: Dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = raw.get(key)
        if value is not None:
            return str(value)
    return ""


@dataclass(frozen=True)
class ReviewRecord:
    """One video review, as seen by the classifier."""
    title: str
    rating: float               # 0.0 to 5.0
    description: str = ""
    transcript: str = ""
    channel_name: str = ""
    source_url: str = ""
    video_id: Optional[str] = None
    published_at: Optional[str] = None

    @property
    def search_text(self) -> str:
        """Lowercased title + description + transcript."""
        parts = (self.title or "", self.description or "", self.transcript or "")
        return " ".join(parts).lower()

    @classmethod
    def from_raw(cls, raw: Dict[str, Any]) -> "ReviewRecord":
        """
        Build a record from a loosely-typed dict (API payload, JSON file, DB row).

        Accepts camelCase or snake_case keys. Missing text becomes "".
        Ratings are clamped into [0, 5].

        Raises:
            ValueError: If rating is missing or not numeric.
        """
        rating = raw.get("rating")
        if rating is None or isinstance(rating, bool):
            raise ValueError(f"Review rating is required, got: {rating!r}")
        try:
            rating = float(rating)
        except (TypeError, ValueError):
            raise ValueError(f"Review rating must be numeric, got: {rating!r}")
        if math.isnan(rating):
            raise ValueError("Review rating must be numeric, got: nan")

        return cls(
            title=_text(raw, "title"),
            rating=min(5.0, max(0.0, rating)),
            description=_text(raw, "description"),
            transcript=_text(raw, "transcript"),
            channel_name=_text(raw, "channel_name", "channelName"),
            source_url=_text(raw, "source_url", "sourceUrl", "video_url"),
            video_id=raw.get("video_id") or raw.get("videoId") or raw.get("youtube_video_id"),
            published_at=raw.get("published_at") or raw.get("publishedAt"),
        )


@dataclass(frozen=True)
class Quote:
    """A title quoted from a review, attributed to its channel."""
    text: str
    reviewer: str

    def to_dict(self) -> Dict[str, str]:
        return {"text": self.text, "reviewer": self.reviewer}


@dataclass(frozen=True)
class ClassifiedReview:
    """Classifier output for one review."""
    review: ReviewRecord
    category: FeatureCategory
    pros: Tuple[str, ...] = ()
    cons: Tuple[str, ...] = ()


@dataclass(frozen=True)
class FeatureSummary:
    """Aggregated view of every review assigned to one feature category."""
    name: str
    rating: float               # mean, 1 decimal
    sentiment: Sentiment
    pros: Tuple[str, ...] = ()  # max 3
    cons: Tuple[str, ...] = ()  # max 3
    quotes: Tuple[Quote, ...] = ()  # max 2
    category: Optional[FeatureCategory] = None
    review_count: int = 0

    @property
    def has_signal(self) -> bool:
        """True if keyword hits were found for this feature."""
        return bool(self.pros or self.cons)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "rating": self.rating,
            "sentiment": self.sentiment.value,
            "pros": list(self.pros),
            "cons": list(self.cons),
            "quotes": [q.to_dict() for q in self.quotes],
        }


@dataclass
class ProductSummary:
    """Product-level roll-up stored alongside the feature summaries."""
    overall_rating: float
    overall_sentiment: Sentiment
    total_videos_analyzed: int
    summary_text: str
    key_points: List[str] = field(default_factory=list)
    pros_summary: List[str] = field(default_factory=list)
    cons_summary: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_rating": self.overall_rating,
            "overall_sentiment": self.overall_sentiment.value,
            "total_videos_analyzed": self.total_videos_analyzed,
            "summary_text": self.summary_text,
            "key_points": list(self.key_points),
            "pros_summary": list(self.pros_summary),
            "cons_summary": list(self.cons_summary),
        }


@dataclass
class ProductAnalysis:
    """Everything produced for one product request."""
    product_name: str
    features: List[FeatureSummary]
    summary: ProductSummary
    reviews: List[ReviewRecord] = field(default_factory=list)
    product_id: Optional[str] = None
    image_url: Optional[str] = None
    cached: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "image_url": self.image_url,
            "cached": self.cached,
            "summary": self.summary.to_dict(),
            "features": [f.to_dict() for f in self.features],
            "reviews": [
                {
                    "title": r.title,
                    "channel_name": r.channel_name,
                    "source_url": r.source_url,
                    "rating": r.rating,
                    "video_id": r.video_id,
                    "published_at": r.published_at,
                }
                for r in self.reviews
            ],
        }
