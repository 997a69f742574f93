"""
Review Analysis Store
=====================

Persists a ProductAnalysis into PostgreSQL and reads it back.

Tables:
    products           - one row per analyzed product name
    reviews            - one row per video review (with per-review pros/cons)
    summaries          - product-level roll-up
    feature_summaries  - ordered per-feature summaries (quotes as JSON)

Usage:
    store = ReviewAnalysisStore(conn)
    product_id = store.save_analysis(analysis)
    cached = store.load_analysis("Pixel 9")
"""

import json
import logging
from typing import List, Optional

from .review_models import (
    FeatureCategory,
    FeatureSummary,
    ProductAnalysis,
    ProductSummary,
    Quote,
    ReviewRecord,
    Sentiment,
)
from .review_signals import ReviewClassifier

logger = logging.getLogger(__name__)

PRODUCT_CATEGORY = "Electronics"


class ReviewAnalysisStore:
    """Row-level persistence over a DB-API connection (psycopg2)."""

    def __init__(self, conn, classifier: Optional[ReviewClassifier] = None):
        self.conn = conn
        self.classifier = classifier or ReviewClassifier()

    def save_analysis(
        self,
        analysis: ProductAnalysis,
        classifier: Optional[ReviewClassifier] = None,
    ) -> str:
        """
        Insert product, reviews, summary and features in one transaction.

        Per-review pros/cons come from `classifier` (the store's own when
        omitted); pass the aggregator's classifier so they match the features.

        Returns:
            The new product id.
        """
        classifier = classifier or self.classifier
        try:
            with self.conn.cursor() as cur:
                cur.execute("""
                    INSERT INTO products (
                        name, description, category, image_url,
                        overall_rating, total_reviews
                    ) VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id
                """, (
                    analysis.product_name,
                    f"Product analysis for {analysis.product_name}",
                    PRODUCT_CATEGORY,
                    analysis.image_url,
                    analysis.summary.overall_rating,
                    len(analysis.reviews),
                ))
                product_id = str(cur.fetchone()[0])

                for review in analysis.reviews:
                    classified = classifier.classify(review)
                    cur.execute("""
                        INSERT INTO reviews (
                            product_id, youtube_video_id, title, channel_name,
                            video_url, rating, sentiment_score, published_at,
                            pros, cons, transcript
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """, (
                        product_id,
                        review.video_id,
                        review.title,
                        review.channel_name,
                        review.source_url,
                        review.rating,
                        round(review.rating - 3.0, 2),  # -3 to +2 scale
                        review.published_at,
                        list(classified.pros),
                        list(classified.cons),
                        review.transcript or None,
                    ))

                summary = analysis.summary
                cur.execute("""
                    INSERT INTO summaries (
                        product_id, summary_text, overall_sentiment,
                        total_videos_analyzed, key_points, pros_summary, cons_summary
                    ) VALUES (%s, %s, %s, %s, %s, %s, %s)
                """, (
                    product_id,
                    summary.summary_text,
                    summary.overall_sentiment.value,
                    summary.total_videos_analyzed,
                    summary.key_points,
                    summary.pros_summary,
                    summary.cons_summary,
                ))

                for position, feature in enumerate(analysis.features):
                    cur.execute("""
                        INSERT INTO feature_summaries (
                            product_id, position, name, category, rating,
                            sentiment, pros, cons, quotes, review_count
                        ) VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    """, (
                        product_id,
                        position,
                        feature.name,
                        feature.category.value if feature.category else None,
                        feature.rating,
                        feature.sentiment.value,
                        list(feature.pros),
                        list(feature.cons),
                        json.dumps([q.to_dict() for q in feature.quotes]),
                        feature.review_count,
                    ))

                self.conn.commit()

            logger.info(
                f"Saved analysis for {analysis.product_name}: id={product_id}, "
                f"{len(analysis.reviews)} reviews, {len(analysis.features)} features"
            )
            return product_id

        except Exception as e:
            self.conn.rollback()
            logger.error(f"Failed to save analysis for {analysis.product_name}: {e}")
            raise

    def load_analysis(self, product_name: str) -> Optional[ProductAnalysis]:
        """Latest stored analysis for a product name, or None."""
        with self.conn.cursor() as cur:
            cur.execute("""
                SELECT id, name, image_url, overall_rating
                FROM products
                WHERE name = %s
                ORDER BY created_at DESC
                LIMIT 1
            """, (product_name,))
            product = cur.fetchone()
            if not product:
                return None
            product_id = str(product[0])

            cur.execute("""
                SELECT summary_text, overall_sentiment, total_videos_analyzed,
                       key_points, pros_summary, cons_summary
                FROM summaries
                WHERE product_id = %s
                ORDER BY created_at DESC
                LIMIT 1
            """, (product_id,))
            summary_row = cur.fetchone()

            cur.execute("""
                SELECT name, category, rating, sentiment, pros, cons,
                       quotes, review_count
                FROM feature_summaries
                WHERE product_id = %s
                ORDER BY position
            """, (product_id,))
            feature_rows = cur.fetchall()

            cur.execute("""
                SELECT title, rating, channel_name, video_url,
                       youtube_video_id, published_at
                FROM reviews
                WHERE product_id = %s
                ORDER BY created_at
            """, (product_id,))
            review_rows = cur.fetchall()

        overall_rating = float(product[3]) if product[3] is not None else 0.0
        if summary_row:
            summary = ProductSummary(
                overall_rating=overall_rating,
                overall_sentiment=Sentiment(summary_row[1] or Sentiment.from_rating(overall_rating).value),
                total_videos_analyzed=summary_row[2] or 0,
                summary_text=summary_row[0],
                key_points=list(summary_row[3] or []),
                pros_summary=list(summary_row[4] or []),
                cons_summary=list(summary_row[5] or []),
            )
        else:
            summary = ProductSummary(
                overall_rating=overall_rating,
                overall_sentiment=Sentiment.from_rating(overall_rating),
                total_videos_analyzed=len(review_rows),
                summary_text="",
            )

        return ProductAnalysis(
            product_name=product[1],
            features=[self._feature_from_row(row) for row in feature_rows],
            summary=summary,
            reviews=[
                ReviewRecord(
                    title=r[0] or "",
                    rating=float(r[1]) if r[1] is not None else 0.0,
                    channel_name=r[2] or "",
                    source_url=r[3] or "",
                    video_id=r[4],
                    published_at=r[5].isoformat() if hasattr(r[5], "isoformat") else r[5],
                )
                for r in review_rows
            ],
            product_id=product_id,
            image_url=product[2],
            cached=True,
        )

    @staticmethod
    def _feature_from_row(row) -> FeatureSummary:
        quotes_raw = row[6] if isinstance(row[6], list) else json.loads(row[6] or "[]")
        quotes: List[Quote] = [
            Quote(text=q.get("text", ""), reviewer=q.get("reviewer", ""))
            for q in quotes_raw
        ]
        return FeatureSummary(
            name=row[0],
            category=FeatureCategory(row[1]) if row[1] else None,
            rating=float(row[2]),
            sentiment=Sentiment(row[3]),
            pros=tuple(row[4] or ()),
            cons=tuple(row[5] or ()),
            quotes=tuple(quotes),
            review_count=row[7] or 0,
        )
