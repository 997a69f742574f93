"""
Reelview API Models
===================

Pydantic models for API request/response serialization.
Field names follow the frontend's feature card shape.
"""

from pydantic import BaseModel, Field
from typing import List, Optional


class AnalyzeRequest(BaseModel):
    """POST /api/analyze body."""
    productName: str = Field(min_length=1, max_length=200)
    force: bool = False


class ReviewInput(BaseModel):
    """One caller-supplied review for POST /api/features. Null text fields become ""."""
    title: str
    description: Optional[str] = None
    transcript: Optional[str] = None
    rating: float = Field(ge=0.0, le=5.0)
    channelName: Optional[str] = None
    sourceUrl: Optional[str] = None


class FeaturesRequest(BaseModel):
    reviews: List[ReviewInput]


class QuoteModel(BaseModel):
    text: str
    reviewer: str


class FeatureSummaryModel(BaseModel):
    """One feature card."""
    name: str
    rating: float
    sentiment: str
    pros: List[str]
    cons: List[str]
    quotes: List[QuoteModel]


class FeaturesResponse(BaseModel):
    features: List[FeatureSummaryModel]


class ProductSummaryModel(BaseModel):
    overall_rating: float
    overall_sentiment: str
    total_videos_analyzed: int
    summary_text: str
    key_points: List[str] = []
    pros_summary: List[str] = []
    cons_summary: List[str] = []


class ReviewModel(BaseModel):
    title: str
    channel_name: str
    source_url: str
    rating: float
    video_id: Optional[str] = None
    published_at: Optional[str] = None


class ProductAnalysisResponse(BaseModel):
    product_id: Optional[str] = None
    product_name: str
    image_url: Optional[str] = None
    cached: bool = False
    summary: ProductSummaryModel
    features: List[FeatureSummaryModel]
    reviews: List[ReviewModel] = []


class HealthResponse(BaseModel):
    status: str
    version: str
    database: str
    database_version: Optional[str] = None
    youtube: str
