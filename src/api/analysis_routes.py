"""
Product Analysis API Routes
===========================

POST /api/analyze           - run (or load) the analysis for a product name.
POST /api/features          - aggregate caller-supplied reviews, no I/O.
GET  /api/products/{name}   - stored analysis for a product.
"""

import logging
from fastapi import APIRouter, HTTPException

from . import db
from .models import (
    AnalyzeRequest,
    FeaturesRequest,
    FeaturesResponse,
    ProductAnalysisResponse,
)
from ..data.youtube_client import YouTubeError
from ..orchestrator.product_analysis import (
    AnalysisError,
    ProductAnalysisPipeline,
    build_aggregator,
)
from ..reviews.review_models import ReviewRecord
from ..reviews.review_store import ReviewAnalysisStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


def _run_analysis(product_name: str, force: bool):
    if db.get_pool() is None:
        logger.warning("Database not available, analysis will not be stored")
        return ProductAnalysisPipeline().run(product_name, force=force)

    with db.get_connection() as conn:
        pipeline = ProductAnalysisPipeline(store=ReviewAnalysisStore(conn))
        return pipeline.run(product_name, force=force)


@router.post("/analyze", response_model=ProductAnalysisResponse)
def analyze_product(request: AnalyzeRequest):
    """Analyze YouTube reviews for a product (stored result unless force=true)."""
    try:
        analysis = _run_analysis(request.productName, request.force)
    except AnalysisError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except YouTubeError as e:
        logger.error(f"YouTube failure for {request.productName}: {e}")
        raise HTTPException(status_code=502, detail=str(e))
    except Exception as e:
        logger.error(f"Error in analyze-product for {request.productName}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    return ProductAnalysisResponse(**analysis.to_dict())


@router.post("/features", response_model=FeaturesResponse)
def aggregate_features(request: FeaturesRequest):
    """Per-feature summaries for the given reviews."""
    reviews = [ReviewRecord.from_raw(r.model_dump()) for r in request.reviews]
    features = build_aggregator().aggregate(reviews)
    return FeaturesResponse(features=[f.to_dict() for f in features])


@router.get("/products/{product_name}", response_model=ProductAnalysisResponse)
def get_product(product_name: str):
    """Returns the stored analysis for a product name."""
    try:
        with db.get_connection() as conn:
            analysis = ReviewAnalysisStore(conn).load_analysis(product_name)
    except ConnectionError as e:
        raise HTTPException(status_code=503, detail=str(e))
    except Exception as e:
        logger.error(f"Product fetch failed for {product_name}: {e}")
        raise HTTPException(status_code=500, detail=str(e))

    if analysis is None:
        raise HTTPException(status_code=404, detail=f"No analysis for {product_name}.")
    return ProductAnalysisResponse(**analysis.to_dict())
