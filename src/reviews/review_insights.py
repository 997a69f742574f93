"""
Review Feature Aggregator
=========================

Groups classified reviews by feature and rolls each group up into a
FeatureSummary (mean rating, sentiment, top pros/cons, quotes), plus a
product-level ProductSummary.

Single pass, no I/O. Each call builds fresh output objects.

Usage:
    aggregator = FeatureAggregator()
    features = aggregator.aggregate(reviews)
    summary = aggregator.build_product_summary("Pixel 9", reviews, features)
"""

import logging
from typing import Dict, Iterable, List, Optional, Sequence

from .review_models import (
    ClassifiedReview,
    FeatureCategory,
    FeatureSummary,
    ProductSummary,
    Quote,
    ReviewRecord,
    Sentiment,
    round_rating,
)
from .review_signals import ReviewClassifier

logger = logging.getLogger(__name__)

OVERALL_NAME = "Overall"


def first_distinct(values: Iterable[str], limit: int) -> List[str]:
    """First `limit` distinct values, order preserved."""
    out: List[str] = []
    if limit <= 0:
        return out
    for value in values:
        if value not in out:
            out.append(value)
            if len(out) >= limit:
                break
    return out


class FeatureAggregator:
    """
    Aggregates reviews into ordered per-feature summaries.

    Output order is the order in which categories are first seen in the
    input. Groups with no pros and no cons are dropped; if nothing is
    left, a single "Overall" summary covers every review.
    """

    def __init__(
        self,
        classifier: Optional[ReviewClassifier] = None,
        max_pros: int = 3,
        max_cons: int = 3,
        max_quotes: int = 2,
    ):
        self.classifier = classifier or ReviewClassifier()
        self.max_pros = max_pros
        self.max_cons = max_cons
        self.max_quotes = max_quotes

    @staticmethod
    def group(classified: Iterable[ClassifiedReview]) -> Dict[FeatureCategory, List[ClassifiedReview]]:
        """Group by category, keeping first-seen category order and input order."""
        groups: Dict[FeatureCategory, List[ClassifiedReview]] = {}
        for item in classified:
            groups.setdefault(item.category, []).append(item)
        return groups

    def summarize(
        self,
        name: str,
        items: Sequence[ClassifiedReview],
        category: Optional[FeatureCategory] = None,
    ) -> FeatureSummary:
        """Roll one non-empty group up into a FeatureSummary."""
        mean = sum(c.review.rating for c in items) / len(items)

        pros = first_distinct((p for c in items for p in c.pros), self.max_pros)
        cons = first_distinct((p for c in items for p in c.cons), self.max_cons)
        quotes = tuple(
            Quote(text=c.review.title, reviewer=c.review.channel_name)
            for c in items[:self.max_quotes]
        )

        return FeatureSummary(
            name=name,
            rating=round_rating(mean),
            sentiment=Sentiment.from_rating(mean),
            pros=tuple(pros),
            cons=tuple(cons),
            quotes=quotes,
            category=category,
            review_count=len(items),
        )

    def aggregate(self, reviews: Sequence[ReviewRecord]) -> List[FeatureSummary]:
        """
        Build the feature summaries for one product.

        Args:
            reviews: All reviews for the product, in retrieval order.

        Returns:
            FeatureSummary list in first-seen category order. Empty input
            gives an empty list.
        """
        if not reviews:
            return []

        classified = [self.classifier.classify(r) for r in reviews]
        groups = self.group(classified)
        lexicon = self.classifier.lexicon

        features = []
        for category, items in groups.items():
            summary = self.summarize(lexicon.display_name(category), items, category)
            if not summary.has_signal:
                logger.debug(
                    f"Dropping {summary.name}: no pros/cons in {len(items)} reviews",
                    extra={"category": category.value},
                )
                continue
            logger.debug(
                f"Keeping {summary.name}: {summary.rating}/5 from {len(items)} reviews",
                extra={"category": category.value},
            )
            features.append(summary)

        if not features:
            logger.debug(f"No feature had pros/cons, falling back to {OVERALL_NAME}")
            features = [self.summarize(OVERALL_NAME, classified)]

        logger.info(
            f"Aggregated {len(reviews)} reviews into {len(features)} features: "
            f"{', '.join(f.name for f in features)}"
        )
        return features

    def build_product_summary(
        self,
        product_name: str,
        reviews: Sequence[ReviewRecord],
        features: Sequence[FeatureSummary],
    ) -> ProductSummary:
        """
        Product-level roll-up.

        overall_rating is the mean over every review, not over features.
        """
        if not reviews:
            return ProductSummary(
                overall_rating=0.0,
                overall_sentiment=Sentiment.NEGATIVE,
                total_videos_analyzed=0,
                summary_text=f"No video reviews were analyzed for {product_name}.",
            )

        mean = sum(r.rating for r in reviews) / len(reviews)
        overall_rating = round_rating(mean)

        key_points = [
            f"{f.name}: {f.sentiment.value} ({f.rating}/5 from {f.review_count} reviews)"
            for f in features
        ]

        text = (
            f"Based on {len(reviews)} YouTube reviews, the {product_name} "
            f"averages {overall_rating}/5."
        )
        if len(features) > 1:
            best = max(features, key=lambda f: f.rating)
            worst = min(features, key=lambda f: f.rating)
            if best.rating != worst.rating:
                text += (
                    f" Reviewers rate {best.name} highest ({best.rating}/5)"
                    f" and {worst.name} lowest ({worst.rating}/5)."
                )

        return ProductSummary(
            overall_rating=overall_rating,
            overall_sentiment=Sentiment.from_rating(mean),
            total_videos_analyzed=len(reviews),
            summary_text=text,
            key_points=key_points,
            pros_summary=first_distinct((p for f in features for p in f.pros), 3),
            cons_summary=first_distinct((c for f in features for c in f.cons), 3),
        )


def aggregate(reviews: Sequence[ReviewRecord]) -> List[FeatureSummary]:
    """Aggregate with the bundled lexicon and default caps."""
    return FeatureAggregator().aggregate(reviews)
