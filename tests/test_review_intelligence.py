"""
Tests for Reelview review feature analysis.

Tests the deterministic classification and aggregation:
- Classification: category priority, pros/cons extraction, empty input
- Aggregation: mean/sentiment, caps, ordering, filtering, Overall fallback
- Product summary roll-up
- Lexicon injection

Usage:
    pytest tests/test_review_intelligence.py -v
"""

import pytest
from src.reviews.review_models import (
    FeatureCategory, ReviewRecord, Sentiment, round_rating,
)
from src.reviews.review_signals import (
    ReviewClassifier, FeatureLexicon, CategoryRule, DEFAULT_LEXICON,
    classify_review, estimate_rating, find_keywords,
)
from src.reviews.review_insights import FeatureAggregator, aggregate, first_distinct


# ============================================================================
# TEST DATA
# ============================================================================

def make_review(title: str, rating: float = 4.0, channel: str = "Channel",
                description: str = "", transcript: str = "") -> ReviewRecord:
    """Helper to create a review record."""
    return ReviewRecord(
        title=title, rating=rating, description=description,
        transcript=transcript, channel_name=channel,
        source_url="https://www.youtube.com/watch?v=test",
    )


SCENARIO_REVIEWS = [
    make_review("Amazing camera and great zoom", 4.5, "MKBHD"),
    make_review("Battery drains quickly, disappointing", 2.8, "Dave2D"),
    make_review("Excellent performance, fast chip", 4.2, "iJustine"),
]

GENERIC_REVIEWS = [
    make_review("nice video", 3.0, "A"),
    make_review("my honest thoughts", 4.0, "B"),
    make_review("watch before you buy", 5.0, "C"),
]


# ============================================================================
# CLASSIFICATION TESTS
# ============================================================================

class TestClassification:
    """Tests for ReviewClassifier.classify()."""

    def setup_method(self):
        self.classifier = ReviewClassifier()

    def test_camera_review(self):
        result = self.classifier.classify(SCENARIO_REVIEWS[0])
        assert result.category == FeatureCategory.CAMERA
        assert result.pros == ("amazing", "great")
        assert result.cons == ()

    def test_battery_review(self):
        result = self.classifier.classify(SCENARIO_REVIEWS[1])
        assert result.category == FeatureCategory.BATTERY
        assert result.pros == ()
        assert "drains quickly" in result.cons
        assert "disappointing" in result.cons

    def test_performance_review(self):
        result = self.classifier.classify(SCENARIO_REVIEWS[2])
        assert result.category == FeatureCategory.PERFORMANCE
        assert result.pros == ("excellent", "fast")

    def test_camera_beats_battery(self):
        """Camera precedes battery in priority order."""
        result = self.classifier.classify(make_review("Battery life and camera test"))
        assert result.category == FeatureCategory.CAMERA

    def test_title_only(self):
        """Empty description and transcript fall back to the title."""
        result = self.classifier.classify(make_review("Battery test"))
        assert result.category == FeatureCategory.BATTERY

    def test_all_fields_empty(self):
        result = self.classifier.classify(ReviewRecord(title="", rating=3.0))
        assert result.category == FeatureCategory.OTHER
        assert result.pros == ()
        assert result.cons == ()

    def test_none_fields_do_not_fail(self):
        review = ReviewRecord(title=None, rating=3.0, description=None, transcript=None)
        result = self.classifier.classify(review)
        assert result.category == FeatureCategory.OTHER

    def test_transcript_contributes(self):
        review = make_review("My review", transcript="The display is stunning outdoors")
        result = self.classifier.classify(review)
        assert result.category == FeatureCategory.DISPLAY
        assert result.pros == ("stunning",)

    def test_description_contributes(self):
        review = make_review("Week two", description="Speakers are noisy")
        result = self.classifier.classify(review)
        assert result.category == FeatureCategory.AUDIO
        assert result.cons == ("noisy",)

    def test_case_insensitive(self):
        result = self.classifier.classify(make_review("CAMERA IS EXCELLENT"))
        assert result.category == FeatureCategory.CAMERA
        assert result.pros == ("excellent",)

    def test_pros_and_cons_from_same_review(self):
        result = self.classifier.classify(make_review("Great screen but buggy"))
        assert result.category == FeatureCategory.DISPLAY
        assert result.pros == ("great",)
        assert result.cons == ("buggy",)

    def test_unmatched_is_other(self):
        result = self.classifier.classify(make_review("nice video"))
        assert result.category == FeatureCategory.OTHER
        assert result.pros == ()
        assert result.cons == ()

    def test_pros_in_vocabulary_order(self):
        """Hits follow declaration order, not text order."""
        result = self.classifier.classify(make_review("great and amazing and excellent camera"))
        assert result.pros == ("excellent", "amazing", "great")

    def test_pros_capped_at_3(self):
        result = self.classifier.classify(
            make_review("camera excellent amazing great fast smooth impressive")
        )
        assert len(result.pros) == 3

    def test_cons_capped_at_3(self):
        result = self.classifier.classify(
            make_review("camera disappointing buggy slow poor blurry grainy")
        )
        assert len(result.cons) == 3

    def test_deterministic(self):
        review = make_review("Great screen, buggy software")
        assert self.classifier.classify(review) == self.classifier.classify(review)

    def test_module_level_classify(self):
        assert classify_review(SCENARIO_REVIEWS[0]).category == FeatureCategory.CAMERA

    def test_short_keyword_traps(self):
        """'flagship' must not trigger a lag keyword, 'disappointing' must not hit apps."""
        result = self.classifier.classify(make_review("flagship disappointing"))
        assert result.category == FeatureCategory.OTHER

    def test_price_and_speed_phrases(self):
        """'inexpensive' and 'slow motion' are not complaints."""
        result = self.classifier.classify(
            make_review("Inexpensive phone with a great camera, slow motion is stunning")
        )
        assert result.category == FeatureCategory.CAMERA
        assert result.pros == ("great", "stunning")
        assert result.cons == ()

    def test_price_and_speed_complaints(self):
        result = self.classifier.classify(make_review("Sluggish chip, slow to launch and too expensive"))
        assert result.cons == ("sluggish", "slow to", "too expensive")


class TestFindKeywords:

    def test_distinct_hits(self):
        assert find_keywords("great great great", ["great"]) == ["great"]

    def test_empty_text(self):
        assert find_keywords("", DEFAULT_LEXICON.positive) == []


# ============================================================================
# RATING ESTIMATION TESTS
# ============================================================================

class TestEstimateRating:

    def test_no_hits_is_neutral(self):
        assert estimate_rating(make_review("nice video")) == 3.0

    def test_all_positive(self):
        assert estimate_rating(make_review("excellent and amazing")) == 5.0

    def test_all_negative(self):
        assert estimate_rating(make_review("buggy and slow")) == 1.0

    def test_balanced(self):
        assert estimate_rating(make_review("great but buggy")) == 3.0

    def test_within_range(self):
        for review in SCENARIO_REVIEWS + GENERIC_REVIEWS:
            assert 1.0 <= estimate_rating(review) <= 5.0


# ============================================================================
# AGGREGATION TESTS
# ============================================================================

class TestFeatureAggregator:
    """Tests for FeatureAggregator.aggregate()."""

    def setup_method(self):
        self.aggregator = FeatureAggregator()

    def test_end_to_end_three_features(self):
        features = self.aggregator.aggregate(SCENARIO_REVIEWS)
        assert [f.name for f in features] == ["Camera Quality", "Battery Life", "Performance"]

        camera, battery, performance = features
        assert camera.rating == 4.5
        assert camera.sentiment == Sentiment.POSITIVE
        assert {"amazing", "great"} <= set(camera.pros)

        assert battery.rating == 2.8
        assert battery.sentiment == Sentiment.NEGATIVE
        assert {"drains quickly", "disappointing"} <= set(battery.cons)

        assert performance.rating == 4.2
        assert performance.sentiment == Sentiment.POSITIVE
        assert {"excellent", "fast"} <= set(performance.pros)

    def test_quotes_from_titles(self):
        features = self.aggregator.aggregate(SCENARIO_REVIEWS)
        quote = features[0].quotes[0]
        assert quote.text == "Amazing camera and great zoom"
        assert quote.reviewer == "MKBHD"

    def test_generic_reviews_fall_back_to_overall(self):
        features = self.aggregator.aggregate(GENERIC_REVIEWS)
        assert len(features) == 1
        overall = features[0]
        assert overall.name == "Overall"
        assert overall.rating == 4.0
        assert overall.sentiment == Sentiment.POSITIVE
        assert overall.pros == ()
        assert overall.cons == ()
        assert [q.text for q in overall.quotes] == ["nice video", "my honest thoughts"]
        assert overall.review_count == 3

    def test_empty_input_returns_empty(self):
        assert self.aggregator.aggregate([]) == []

    def test_mean_is_exact(self):
        reviews = [
            make_review("great camera", 3.0),
            make_review("good photo", 4.0),
            make_review("sharp lens", 5.0),
        ]
        features = self.aggregator.aggregate(reviews)
        assert len(features) == 1
        assert features[0].rating == 4.0
        assert features[0].sentiment == Sentiment.POSITIVE

    @pytest.mark.parametrize("rating,expected", [
        (4.0, Sentiment.POSITIVE),
        (3.0, Sentiment.NEUTRAL),
        (2.999, Sentiment.NEGATIVE),
    ])
    def test_sentiment_boundaries(self, rating, expected):
        features = self.aggregator.aggregate([make_review("great camera", rating)])
        assert features[0].sentiment == expected

    def test_sentiment_uses_unrounded_mean(self):
        """2.999 displays as 3.0 but stays negative."""
        features = self.aggregator.aggregate([make_review("great camera", 2.999)])
        assert features[0].rating == 3.0
        assert features[0].sentiment == Sentiment.NEGATIVE

    def test_rounding_half_up(self):
        reviews = [make_review("great camera", 4.0), make_review("great camera", 4.5)]
        features = self.aggregator.aggregate(reviews)
        assert features[0].rating == 4.3

    def test_caps_hold_for_large_groups(self):
        reviews = [
            make_review(f"camera {i} excellent amazing great fast smooth, disappointing buggy slow poor", 4.0)
            for i in range(10)
        ]
        features = self.aggregator.aggregate(reviews)
        assert len(features) == 1
        assert len(features[0].pros) == 3
        assert len(features[0].cons) == 3
        assert len(features[0].quotes) == 2

    def test_pros_distinct_across_group(self):
        reviews = [
            make_review("camera great", 4.0),
            make_review("camera great excellent", 4.0),
        ]
        features = self.aggregator.aggregate(reviews)
        assert features[0].pros == ("great", "excellent")

    def test_first_seen_order(self):
        reviews = [
            make_review("battery is great", 4.0),
            make_review("camera is great", 4.0),
            make_review("battery is bad", 2.0),
        ]
        features = self.aggregator.aggregate(reviews)
        assert [f.name for f in features] == ["Battery Life", "Camera Quality"]
        assert features[0].rating == 3.0

    def test_no_resorting_by_rating(self):
        reviews = [
            make_review("camera is bad", 1.0),
            make_review("battery is great", 5.0),
        ]
        features = self.aggregator.aggregate(reviews)
        assert [f.name for f in features] == ["Camera Quality", "Battery Life"]

    def test_signal_less_group_dropped(self):
        """Unmatched reviews are dropped when other features survive (no Overall)."""
        reviews = [make_review("great camera", 5.0), make_review("nice video", 1.0)]
        features = self.aggregator.aggregate(reviews)
        assert [f.name for f in features] == ["Camera Quality"]
        assert features[0].rating == 5.0

    def test_other_with_pros_is_kept(self):
        features = self.aggregator.aggregate([make_review("great video", 4.0)])
        assert features[0].name == "Other"
        assert features[0].category == FeatureCategory.OTHER

    def test_review_count(self):
        reviews = [make_review("camera great", 4.0)] * 4
        features = self.aggregator.aggregate(reviews)
        assert features[0].review_count == 4

    def test_custom_caps(self):
        aggregator = FeatureAggregator(max_pros=1, max_cons=1, max_quotes=1)
        reviews = [
            make_review("camera excellent amazing buggy slow", 4.0),
            make_review("camera great", 4.0),
        ]
        feature = aggregator.aggregate(reviews)[0]
        assert feature.pros == ("excellent",)
        assert feature.cons == ("buggy",)
        assert len(feature.quotes) == 1

    def test_output_is_fresh(self):
        reviews = list(SCENARIO_REVIEWS)
        first = self.aggregator.aggregate(reviews)
        second = self.aggregator.aggregate(reviews)
        assert first == second
        assert first is not second
        assert reviews == SCENARIO_REVIEWS

    def test_module_level_aggregate(self):
        assert len(aggregate(SCENARIO_REVIEWS)) == 3

    def test_to_dict_shape(self):
        feature = self.aggregator.aggregate(SCENARIO_REVIEWS)[0]
        data = feature.to_dict()
        assert data == {
            "name": "Camera Quality",
            "rating": 4.5,
            "sentiment": "positive",
            "pros": ["amazing", "great"],
            "cons": [],
            "quotes": [{"text": "Amazing camera and great zoom", "reviewer": "MKBHD"}],
        }


class TestFirstDistinct:

    def test_order_and_limit(self):
        assert first_distinct(["a", "b", "a", "c", "d"], 3) == ["a", "b", "c"]

    def test_zero_limit(self):
        assert first_distinct(["a"], 0) == []


# ============================================================================
# PRODUCT SUMMARY TESTS
# ============================================================================

class TestProductSummary:

    def setup_method(self):
        self.aggregator = FeatureAggregator()

    def test_overall_rating_over_all_reviews(self):
        features = self.aggregator.aggregate(SCENARIO_REVIEWS)
        summary = self.aggregator.build_product_summary("Pixel 9", SCENARIO_REVIEWS, features)
        # (4.5 + 2.8 + 4.2) / 3 = 3.833
        assert summary.overall_rating == 3.8
        assert summary.overall_sentiment == Sentiment.NEUTRAL
        assert summary.total_videos_analyzed == 3

    def test_summary_text_names_best_and_worst(self):
        features = self.aggregator.aggregate(SCENARIO_REVIEWS)
        summary = self.aggregator.build_product_summary("Pixel 9", SCENARIO_REVIEWS, features)
        assert "Pixel 9" in summary.summary_text
        assert "Camera Quality highest" in summary.summary_text
        assert "Battery Life lowest" in summary.summary_text

    def test_pros_and_cons_summary(self):
        features = self.aggregator.aggregate(SCENARIO_REVIEWS)
        summary = self.aggregator.build_product_summary("Pixel 9", SCENARIO_REVIEWS, features)
        assert summary.pros_summary == ["amazing", "great", "excellent"]
        assert set(summary.cons_summary) == {"disappointing", "drains quickly"}
        assert len(summary.key_points) == 3
        assert summary.key_points[0].startswith("Camera Quality: positive")

    def test_no_reviews(self):
        summary = self.aggregator.build_product_summary("Pixel 9", [], [])
        assert summary.overall_rating == 0.0
        assert summary.total_videos_analyzed == 0
        assert "No video reviews" in summary.summary_text


# ============================================================================
# LEXICON TESTS
# ============================================================================

class TestLexicon:

    def test_priority_order(self):
        order = [rule.category for rule in DEFAULT_LEXICON.rules]
        assert order == [
            FeatureCategory.CAMERA, FeatureCategory.BATTERY, FeatureCategory.DESIGN,
            FeatureCategory.PERFORMANCE, FeatureCategory.DISPLAY, FeatureCategory.AUDIO,
            FeatureCategory.SOFTWARE, FeatureCategory.CONNECTIVITY,
        ]

    def test_other_has_no_rule(self):
        assert all(rule.category != FeatureCategory.OTHER for rule in DEFAULT_LEXICON.rules)

    def test_all_rules_have_keywords(self):
        for rule in DEFAULT_LEXICON.rules:
            assert len(rule.keywords) > 0, f"{rule.category} has no keywords"

    def test_lexicon_is_immutable(self):
        with pytest.raises(Exception):
            DEFAULT_LEXICON.positive = ("changed",)

    def test_injected_lexicon(self):
        lexicon = FeatureLexicon(
            rules=(CategoryRule(FeatureCategory.AUDIO, "Sound", ("beep",)),),
            positive=("yay",),
            negative=("boo",),
        )
        aggregator = FeatureAggregator(classifier=ReviewClassifier(lexicon=lexicon))
        features = aggregator.aggregate([
            make_review("beep yay", 4.0),
            make_review("camera great", 2.0),
        ])
        # "camera great" matches nothing in this lexicon
        assert [f.name for f in features] == ["Sound"]
        assert features[0].pros == ("yay",)

    def test_display_name_fallback(self):
        assert DEFAULT_LEXICON.display_name(FeatureCategory.OTHER) == "Other"
        assert DEFAULT_LEXICON.display_name(FeatureCategory.DESIGN) == "Design & Build"


# ============================================================================
# MODEL TESTS
# ============================================================================

class TestReviewModels:

    def test_sentiment_from_rating(self):
        assert Sentiment.from_rating(4.0) == Sentiment.POSITIVE
        assert Sentiment.from_rating(3.99) == Sentiment.NEUTRAL
        assert Sentiment.from_rating(0.0) == Sentiment.NEGATIVE

    def test_round_rating(self):
        assert round_rating(4.25) == 4.3
        assert round_rating(3.8333) == 3.8

    def test_from_raw_camel_case(self):
        review = ReviewRecord.from_raw({
            "title": "Pixel 9 review", "rating": "4.5",
            "channelName": "MKBHD", "sourceUrl": "https://youtu.be/x",
            "description": None,
        })
        assert review.rating == 4.5
        assert review.channel_name == "MKBHD"
        assert review.source_url == "https://youtu.be/x"
        assert review.description == ""

    def test_from_raw_snake_case(self):
        review = ReviewRecord.from_raw({
            "title": "t", "rating": 3, "channel_name": "c", "video_id": "abc",
        })
        assert review.channel_name == "c"
        assert review.video_id == "abc"

    def test_from_raw_clamps_rating(self):
        assert ReviewRecord.from_raw({"title": "t", "rating": 7}).rating == 5.0
        assert ReviewRecord.from_raw({"title": "t", "rating": -1}).rating == 0.0

    def test_from_raw_requires_rating(self):
        with pytest.raises(ValueError):
            ReviewRecord.from_raw({"title": "t"})

    def test_from_raw_rejects_non_numeric(self):
        with pytest.raises(ValueError):
            ReviewRecord.from_raw({"title": "t", "rating": "great"})
        with pytest.raises(ValueError):
            ReviewRecord.from_raw({"title": "t", "rating": float("nan")})

    def test_search_text(self):
        review = make_review("Title", description="Desc", transcript="Words")
        assert review.search_text == "title desc words"
