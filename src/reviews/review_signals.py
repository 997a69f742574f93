"""
Review Feature Classifier (Deterministic)
==========================================

Assigns each review to one product feature and extracts short pros/cons
phrases using a keyword lexicon. No LLM required: fast, explainable,
reproducible.

Usage:
    classifier = ReviewClassifier()
    classified = classifier.classify(review)
    rating = classifier.estimate_rating(review)
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from .review_models import ClassifiedReview, FeatureCategory, ReviewRecord

logger = logging.getLogger(__name__)

MAX_PROS_PER_REVIEW = 3
MAX_CONS_PER_REVIEW = 3


@dataclass(frozen=True)
class CategoryRule:
    """Keyword triggers for one feature category."""
    category: FeatureCategory
    display_name: str
    keywords: Tuple[str, ...]


@dataclass(frozen=True)
class FeatureLexicon:
    """
    Immutable keyword configuration for the classifier.

    rules are checked in declaration order: the first rule with a hit wins.
    Keywords are matched case-insensitively as substrings.
    """
    rules: Tuple[CategoryRule, ...]
    positive: Tuple[str, ...]
    negative: Tuple[str, ...]
    other_name: str = "Other"

    def display_name(self, category: FeatureCategory) -> str:
        for rule in self.rules:
            if rule.category == category:
                return rule.display_name
        return self.other_name


# =============================================================================
# FEATURE LEXICON - consumer electronics video reviews
# =============================================================================
# Beware short keywords: "lag" is inside "flagship", "app" inside
# "disappointing", "ram" inside "program", "expensive" inside "inexpensive"
# and "slow" inside "slow motion". Prefer full words or phrases.

DEFAULT_LEXICON = FeatureLexicon(
    rules=(
        CategoryRule(
            FeatureCategory.CAMERA, "Camera Quality",
            (
                "camera", "photo", "lens", "zoom", "selfie", "megapixel",
                "low light", "low-light", "portrait", "night mode",
                "video quality", "stabilization",
            ),
        ),
        CategoryRule(
            FeatureCategory.BATTERY, "Battery Life",
            (
                "battery", "charging", "charger", "mah", "drains",
                "standby", "screen on time", "screen-on time",
            ),
        ),
        CategoryRule(
            FeatureCategory.DESIGN, "Design & Build",
            (
                "design", "build quality", "titanium", "aluminum", "aluminium",
                "premium feel", "ergonomic", "weight", "lightweight",
                "form factor", "in the hand", "fingerprint", "colorway",
            ),
        ),
        CategoryRule(
            FeatureCategory.PERFORMANCE, "Performance",
            (
                "performance", "processor", "chip", "snapdragon", "benchmark",
                "gaming", "laggy", "multitasking", "speed", "thermal",
                "throttling",
            ),
        ),
        CategoryRule(
            FeatureCategory.DISPLAY, "Display",
            (
                "display", "screen", "oled", "amoled", "brightness",
                "refresh rate", "resolution", "hdr", "120hz", "bezel",
            ),
        ),
        CategoryRule(
            FeatureCategory.AUDIO, "Audio",
            (
                "speaker", "audio", "sound", "microphone", "headphone",
                "volume", "bass", "earpiece",
            ),
        ),
        CategoryRule(
            FeatureCategory.SOFTWARE, "Software",
            (
                "software", "update", "android", "firmware", "bloatware",
                "user interface", "operating system", "apps", "one ui",
            ),
        ),
        CategoryRule(
            FeatureCategory.CONNECTIVITY, "Connectivity",
            (
                "connectivity", "5g", "wifi", "wi-fi", "bluetooth", "signal",
                "reception", "nfc", "usb-c", "cellular", "hotspot",
            ),
        ),
    ),
    positive=(
        "excellent", "amazing", "great", "fast", "smooth", "impressive",
        "stunning", "premium", "reliable", "durable", "crisp", "solid",
        "long-lasting", "good", "best", "love", "worth it", "sharp",
        "vibrant", "responsive", "clear",
    ),
    negative=(
        "disappointing", "drains quickly", "dies quickly", "overheating",
        "overheats", "buggy", "sluggish", "slow to", "laggy", "stutter",
        "too expensive", "pricey", "overpriced", "not worth", "poor", "bad",
        "worst", "fragile", "flimsy", "heavy", "grainy", "blurry", "noisy",
        "weak", "issues", "problem",
    ),
)


def find_keywords(text: str, vocabulary: Iterable[str]) -> List[str]:
    """Distinct vocabulary entries found in text, in vocabulary order."""
    hits: List[str] = []
    for keyword in vocabulary:
        kw = keyword.lower()
        if kw and kw in text and kw not in hits:
            hits.append(kw)
    return hits


class ReviewClassifier:
    """
    Deterministic feature classifier using keyword matching.

    Stateless apart from its lexicon; safe to share between requests.
    """

    def __init__(
        self,
        lexicon: Optional[FeatureLexicon] = None,
        max_pros: int = MAX_PROS_PER_REVIEW,
        max_cons: int = MAX_CONS_PER_REVIEW,
    ):
        self.lexicon = lexicon or DEFAULT_LEXICON
        self.max_pros = max_pros
        self.max_cons = max_cons

    def match_category(self, text: str) -> FeatureCategory:
        """First category in priority order with a keyword in text."""
        for rule in self.lexicon.rules:
            if any(kw.lower() in text for kw in rule.keywords if kw):
                return rule.category
        return FeatureCategory.OTHER

    def classify(self, review: ReviewRecord) -> ClassifiedReview:
        """
        Classify one review.

        Never raises: empty text yields (other, [], []).
        """
        text = review.search_text
        if not text.strip():
            return ClassifiedReview(review=review, category=FeatureCategory.OTHER)

        category = self.match_category(text)
        pros = find_keywords(text, self.lexicon.positive)[:self.max_pros]
        cons = find_keywords(text, self.lexicon.negative)[:self.max_cons]

        return ClassifiedReview(
            review=review,
            category=category,
            pros=tuple(pros),
            cons=tuple(cons),
        )

    def estimate_rating(self, review: ReviewRecord) -> float:
        """
        Lexicon-based rating for reviews that come without one.

        3.0 + 2.0 * (pos - neg) / (pos + neg), or 3.0 with no hits.
        Always within [1.0, 5.0].
        """
        text = review.search_text
        pos = len(find_keywords(text, self.lexicon.positive))
        neg = len(find_keywords(text, self.lexicon.negative))
        if pos + neg == 0:
            return 3.0
        return round(3.0 + 2.0 * (pos - neg) / (pos + neg), 2)


_default_classifier = ReviewClassifier()


def classify_review(review: ReviewRecord) -> ClassifiedReview:
    """Classify with the bundled lexicon."""
    return _default_classifier.classify(review)


def estimate_rating(review: ReviewRecord) -> float:
    """Estimate a rating with the bundled lexicon."""
    return _default_classifier.estimate_rating(review)
