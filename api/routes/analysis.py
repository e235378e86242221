"""
Narrative Analysis Endpoint

Rule-based insights and recommendations for a snapshot, optionally
compared with generated history.
"""

import logging

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_generator
from api.models import AnalysisRequest, AnalysisResponse
from api.rate_limit import limiter
from api.settings import get_analysis_rate_limit
from core.insights import InsightAnalyzer
from engine.generator import TelemetryGenerator

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/analysis", tags=["Analysis"])

analyzer = InsightAnalyzer()


@router.post(
    "",
    response_model=AnalysisResponse,
    summary="Analyze a snapshot",
    description="""
    Produce insights, anomalies and recommendations for a snapshot.

    **Options:**
    - `current_data`: Snapshot to analyze (defaults to a fresh one)
    - `include_history`: Compare against generated history
    - `history_hours`: Size of that history window
    """
)
@limiter.limit(get_analysis_rate_limit)
def analyze_snapshot(
    request: Request,
    body: AnalysisRequest,
    generator: TelemetryGenerator = Depends(get_generator),
):
    """Run the rule-based analysis."""
    if body.current_data is not None:
        current = body.current_data.to_snapshot()
    else:
        current = generator.generate_current_snapshot()

    history = None
    if body.include_history:
        history = generator.generate_history(body.history_hours)

    analysis = analyzer.analyze(current, history)
    logger.debug(f"Analysis produced {len(analysis.insights)} insights")
    return analysis.to_dict()
