"""
Post-operative Risk Engine - FastAPI Application

API endpoints for:
- Risk scoring with recommendations, explanation and projection
- Explanation in clinician or patient register
- Temporal projection
- JSON report export
- Report extraction (via the external vision collaborator)

The API is stateless: every call is a fresh computation over its inputs.
"""
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response

from postop_risk import config
from postop_risk.core.assessment import Assessment
from postop_risk.core.guidance import CareRecommendationGenerator, explain
from postop_risk.core.intake import merge_assessments
from postop_risk.core.projection import TemporalProjector
from postop_risk.core.randomness import NumpyRandomSource
from postop_risk.core.reports import build_report, report_filename, report_to_json
from postop_risk.core.scoring import CATALOG, RiskScoringEngine
from postop_risk.models import (
    EvaluateRequest,
    EvaluationResponse,
    ExplainRequest,
    ExplanationResponse,
    ExportRequest,
    ExtractRequest,
    ExtractionResponse,
    HealthResponse,
    ProjectRequest,
)
from postop_risk.services import VisionServiceClient
from postop_risk.utils import AssessmentInputError, RiskEngineError, get_logger, setup_logging

setup_logging(config.LOG_LEVEL, config.LOG_FILE)
logger = get_logger(__name__)


# ---- Engine singletons (stateless apart from the random source) ----
_random_source = NumpyRandomSource(config.RISK_RANDOM_SEED)
_risk_engine = RiskScoringEngine(_random_source)
_recommender = CareRecommendationGenerator()
_projector = TemporalProjector(_random_source)
_vision_client = VisionServiceClient()

START_TIME = datetime.now()


def get_vision_client() -> VisionServiceClient:
    return _vision_client


# ---- Application Lifespan ----

@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        f"Risk engine API {config.API_VERSION} ready "
        f"(vision collaborator {'enabled' if _vision_client.enabled else 'disabled'})"
    )
    yield
    logger.info("Risk engine API shut down.")


# ---- FastAPI Application ----

app = FastAPI(
    title="Post-operative Eye Surgery Risk Engine",
    description="Complication risk scoring and decision support for post-operative eye assessments",
    version=config.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


_ERROR_STATUS = {
    "ASSESSMENT_INPUT_ERROR": 400,
    "MEDIA_ANALYSIS_ERROR": 502,
    "REPORT_EXTRACTION_ERROR": 502,
}


@app.exception_handler(RiskEngineError)
async def risk_engine_error_handler(request: Request, exc: RiskEngineError):
    status = _ERROR_STATUS.get(exc.code, 500)
    logger.error(f"{request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=status, content=exc.to_dict())


# ---- Utility Functions ----

async def _with_media(assessment: Assessment, image_base64: Optional[str], vision: VisionServiceClient) -> Assessment:
    """Attach image analysis when an image was supplied and no analysis is present yet."""
    if assessment.media_analysis is not None or not image_base64:
        return assessment
    media = await vision.analyze_eye_image(image_base64)
    if media is None:
        logger.info("Scoring without media analysis")
        return assessment
    return assessment.with_media(media)


def _evaluate(assessment: Assessment, simplified: bool) -> Dict[str, Any]:
    risk = _risk_engine.score(assessment)
    recommendations = _recommender.recommend(assessment, risk)
    projection = _projector.project(risk.overall_risk_score)
    return {
        "risk": risk,
        "recommendations": recommendations,
        "projection": projection,
        "explanation": explain(risk, simplified=simplified),
    }


# ---- Endpoints ----

@app.get("/", response_model=HealthResponse, tags=["Health"])
async def root():
    return await health_check()


@app.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check():
    now = datetime.now()
    return HealthResponse(
        status="healthy",
        version=config.API_VERSION,
        timestamp=now,
        uptime_seconds=(now - START_TIME).total_seconds(),
        vision_enabled=_vision_client.enabled,
    )


@app.post("/api/v1/assessments/evaluate", response_model=EvaluationResponse, tags=["Assessments"])
async def evaluate_assessment(
    request: EvaluateRequest,
    vision: VisionServiceClient = Depends(get_vision_client),
):
    """Score an assessment and return recommendations, explanation and projection."""
    assessment = await _with_media(request.assessment, request.image_base64, vision)
    result = _evaluate(assessment, request.simplified)
    media = assessment.media_analysis
    return EvaluationResponse(
        risk_assessment=result["risk"].to_dict(),
        recommendations=[r.to_dict() for r in result["recommendations"]],
        explanation=result["explanation"],
        temporal_projection=[p.to_dict() for p in result["projection"]],
        media_analysis=media.model_dump(mode="json", by_alias=True) if media else None,
    )


@app.post("/api/v1/assessments/explain", response_model=ExplanationResponse, tags=["Assessments"])
async def explain_assessment(request: ExplainRequest):
    risk = _risk_engine.score(request.assessment)
    return ExplanationResponse(
        explanation=explain(risk, simplified=request.simplified),
        simplified=request.simplified,
        overall_risk_score=risk.overall_risk_score,
    )


@app.post("/api/v1/assessments/project", tags=["Assessments"])
async def project_risk(request: ProjectRequest):
    points = _projector.project(request.base_risk_score)
    return {"temporal_projection": [p.to_dict() for p in points]}


@app.post("/api/v1/assessments/export", tags=["Reports"])
async def export_assessment(request: ExportRequest):
    """Score the assessment and return the full report as a JSON download."""
    result = _evaluate(request.assessment, request.simplified)
    report = build_report(
        assessment=request.assessment,
        risk=result["risk"],
        recommendations=result["recommendations"],
        projection=result["projection"],
        explanation=result["explanation"],
        human_confirmed=request.human_confirmed,
    )
    return Response(
        content=report_to_json(report),
        media_type="application/json",
        headers={"Content-Disposition": f'attachment; filename="{report_filename(report["report_id"])}"'},
    )


@app.post("/api/v1/reports/extract", response_model=ExtractionResponse, tags=["Reports"])
async def extract_report(
    request: ExtractRequest,
    vision: VisionServiceClient = Depends(get_vision_client),
):
    """Read assessment fields from a report and merge them into the base assessment."""
    if not request.file_base64.strip():
        raise AssessmentInputError("No file provided", section="report")
    if not vision.enabled:
        raise HTTPException(status_code=503, detail="Report extraction is not configured")

    extracted = await vision.extract_report(request.file_base64, request.file_type)
    if extracted is None:
        raise HTTPException(status_code=502, detail="Report extraction failed. Please enter data manually.")

    merged = merge_assessments(request.base_assessment or Assessment(), extracted)
    return ExtractionResponse(
        assessment=merged.model_dump(mode="json", by_alias=True, exclude_none=True),
        extraction_confidence=extracted.confidence,
        extraction_notes=extracted.notes,
        dropped_fields=list(extracted.dropped_fields),
    )


@app.get("/api/v1/catalog", tags=["Reference"])
async def list_catalog():
    """The factor catalog: every scoring rule with its points."""
    return {"rules": [entry.to_dict() for entry in CATALOG]}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
