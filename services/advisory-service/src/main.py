"""
Advisory Service exposes the deterministic financial analysis core over HTTP:
profile analysis, planning sub-engines, the full advisor report with session
snapshots, and the usage log behind the admin dashboard.
"""

from __future__ import annotations

import base64
import binascii
import hmac
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Literal, Optional
from uuid import uuid4

from fastapi import Depends, FastAPI, Query, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

SERVICE_SRC = Path(__file__).resolve().parent
if str(SERVICE_SRC) not in sys.path:
    sys.path.insert(0, str(SERVICE_SRC))

SERVICES_ROOT = SERVICE_SRC.parents[1]
if str(SERVICES_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICES_ROOT))

from shared.observability.privacy import hash_payload, mask_name, short_hash
from shared.observability.telemetry import bind_request_context, ensure_request_id, reset_request_context, setup_telemetry
from shared.service_settings import ServiceSettings, ServiceSettingsError, load_service_settings

from advisor import generate_advisor_report, report_summary
from aggregation import compute_aggregates, expense_breakdown
from allocation import compute_allocation, recommended_budget
from debt_planner import debt_analysis, payoff_strategy
from feasibility import assess_lifestyle_intent
from goal_planner import goal_plans
from health_metrics import emergency_fund_status, health_label, health_metrics, health_score
from investment import investment_recommendations, portfolio_risk_tier
from middleware.rate_limit import SimpleRateLimiter, build_rate_limiter, is_rate_limited_path
from narrative_intents import detect_narrative_intents
from payloads import FinancialProfilePayload, NarrativePayload, ReportPayload, UsagePayload
from persistence.database import get_session, init_db
from persistence.repository import AdvisorSessionRepository, UsageLogRepository
from profile_insights import profile_insights

logger = logging.getLogger(__name__)

app = FastAPI(title="Advisory Service")
setup_telemetry(app, service_name="advisory-service")

try:
    SERVICE_SETTINGS: ServiceSettings = load_service_settings()
except ServiceSettingsError as exc:
    logger.error({"event": "service_settings_invalid", "error": str(exc)})
    raise

app.state.settings = SERVICE_SETTINGS
app.state.rate_limiter = build_rate_limiter(SERVICE_SETTINGS)


def error_response(status_code: int, error_code: str, details: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error_code, "details": details},
    )


def _client_ip(request: Request) -> str | None:
    client = request.client
    if client:
        return client.host
    return None


def _log_event(event: str, request: Request, **extra: Any) -> None:
    logger.info(
        {
            "event": event,
            "request_id": getattr(request.state, "request_id", None),
            **extra,
        }
    )


@app.middleware("http")
async def rate_limit_middleware(request: Request, call_next):
    if not is_rate_limited_path(request.method, request.url.path):
        return await call_next(request)

    limiter: SimpleRateLimiter = app.state.rate_limiter
    client_id = _client_ip(request) or "unknown"
    allowed, retry_after = await limiter.allow(client_id)
    if allowed:
        return await call_next(request)

    logger.warning(
        {
            "event": "rate_limited",
            "request_id": getattr(request.state, "request_id", None),
            "path": request.url.path,
            "retry_after_seconds": retry_after,
        }
    )
    response = error_response(429, "rate_limit_exceeded", "Too many requests. Please retry shortly.")
    response.headers["Retry-After"] = str(max(1, int(retry_after or 1)))
    return response


# Registered last so it wraps the rate limiter and every response carries the id.
@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = ensure_request_id(request)
    token = bind_request_context(request_id)
    try:
        response = await call_next(request)
        response.headers.setdefault("x-request-id", request_id)
        return response
    finally:
        reset_request_context(token)


app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SERVICE_SETTINGS.cors_origins),
    allow_methods=["*"],
    allow_headers=["*"],
    allow_credentials=False,
)


@app.on_event("startup")
def on_startup() -> None:
    """Initialize persistence before serving requests."""
    init_db()


def _admin_password_from_header(header: str) -> str:
    """Accept `Bearer <password>`, `Basic base64(user:password)` or the bare password."""
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip()
    if header.startswith("Basic "):
        try:
            decoded = base64.b64decode(header[len("Basic "):].strip()).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return ""
        _, separator, password = decoded.partition(":")
        return password if separator else decoded
    return header.strip()


def _admin_error(request: Request) -> JSONResponse | None:
    settings: ServiceSettings = app.state.settings
    if not settings.admin_enabled:
        return error_response(503, "admin_disabled", "Admin password is not configured.")

    header = request.headers.get("authorization")
    if not header:
        return error_response(401, "authorization_required", "Authorization header required.")

    supplied = _admin_password_from_header(header)
    if not hmac.compare_digest(supplied.encode("utf-8"), settings.admin_password.encode("utf-8")):
        logger.warning({"event": "admin_auth_failed", "client_ip_hash": short_hash(_client_ip(request))})
        return error_response(401, "invalid_password", "Invalid password.")
    return None


@app.get("/health")
def health_check() -> dict:
    """Reports service availability so orchestrators can confirm this entrypoint is up."""
    return {"status": "ok", "service": "advisory-service"}


@app.post("/analyze")
def analyze_profile(request: Request, payload: FinancialProfilePayload) -> Dict[str, Any]:
    """
    Descriptive analysis of a profile: aggregates, ratios, score, emergency fund and budget views.
    """
    profile = payload.to_dataclass()
    aggregates = compute_aggregates(profile)
    score = health_score(profile)
    allocation = compute_allocation(profile)

    _log_event("analyze_completed", request, score=score.score, grade=score.grade, debt_count=len(profile.debts))
    return jsonable_encoder(
        {
            "aggregates": aggregates,
            "health_metrics": health_metrics(profile),
            "health_score": score,
            "health_label": health_label(score.score),
            "emergency_fund": emergency_fund_status(profile),
            "expense_breakdown": expense_breakdown(profile),
            "allocation": allocation,
            "recommended_budget": recommended_budget(profile, allocation),
            "debt_analysis": debt_analysis(profile),
            "insights": profile_insights(profile),
        }
    )


@app.post("/allocation")
def allocation_endpoint(
    request: Request,
    payload: FinancialProfilePayload,
    rental_upgrade_amount: Optional[float] = Query(default=None, ge=0),
) -> Dict[str, Any]:
    """Unified monthly allocation; matches the allocation embedded in `/report` when no upgrade is given."""
    profile = payload.to_dataclass()
    allocation = compute_allocation(profile, rental_upgrade_amount)
    _log_event("allocation_completed", request, debt_crisis=allocation.is_debt_crisis)
    return jsonable_encoder(
        {
            "allocation": allocation,
            "recommended_budget": recommended_budget(profile, allocation),
        }
    )


@app.post("/debt-plan")
def debt_plan_endpoint(
    request: Request,
    payload: FinancialProfilePayload,
    method: Literal["avalanche", "snowball"] = Query(default="avalanche"),
) -> Dict[str, Any]:
    profile = payload.to_dataclass()
    _log_event("debt_plan_completed", request, method=method, debt_count=len(profile.debts))
    return jsonable_encoder(
        {
            "strategy": payoff_strategy(profile, method),
            "analysis": debt_analysis(profile),
        }
    )


@app.post("/investment-recommendations")
def investment_endpoint(request: Request, payload: FinancialProfilePayload) -> Dict[str, Any]:
    profile = payload.to_dataclass()
    tier = portfolio_risk_tier(profile)
    _log_event("investment_recommendations_completed", request, risk_tier=tier)
    return jsonable_encoder({"risk_tier": tier, "recommendations": investment_recommendations(profile)})


@app.post("/goal-plans")
def goal_plans_endpoint(request: Request, payload: FinancialProfilePayload) -> Dict[str, Any]:
    profile = payload.to_dataclass()
    plans = goal_plans(profile)
    _log_event("goal_plans_completed", request, goal_count=len(plans))
    return jsonable_encoder({"goal_plans": plans})


@app.post("/narrative-intents")
def narrative_intents_endpoint(request: Request, payload: NarrativePayload) -> Dict[str, Any]:
    """
    Detect intents in a free-text story; with a profile attached, also assess the
    feasibility of any lifestyle upgrade it mentions.
    """
    intents = detect_narrative_intents(payload.narrative)
    feasibility = None
    if payload.profile is not None:
        feasibility = assess_lifestyle_intent(intents.lifestyle_upgrade, payload.profile.to_dataclass())

    _log_event(
        "narrative_intents_completed",
        request,
        story_hash=hash_payload(payload.narrative),
        keywords=intents.raw_keywords,
    )
    return jsonable_encoder({"intents": intents, "feasibility": feasibility})


@app.post("/report")
def report_endpoint(
    request: Request,
    payload: ReportPayload,
    db: Session = Depends(get_session),
) -> Dict[str, Any]:
    """
    Generate the full advisor report and store an immutable session snapshot.

    Returns the report, its summary and the `session_id` that `GET /sessions/{id}` resolves.
    """
    profile = payload.profile.to_dataclass()
    report = generate_advisor_report(profile)
    summary = report_summary(profile, report)

    report_json = jsonable_encoder(report)
    summary_json = jsonable_encoder(summary)
    session_id = str(uuid4())
    AdvisorSessionRepository(db).create_session(
        session_id,
        user_name=profile.personal.full_name,
        profile=payload.profile.model_dump(),
        report=report_json,
        summary=summary_json,
        pdf_file_name=payload.pdf_file_name,
        source_ip=_client_ip(request),
        details={"grade": summary.grade, "score": summary.score},
    )

    _log_event(
        "report_stored",
        request,
        session_id=session_id,
        user=mask_name(profile.personal.full_name),
        grade=summary.grade,
    )
    return {"session_id": session_id, "report": report_json, "summary": summary_json}


@app.get("/sessions/{session_id}", response_model=None)
def get_session_snapshot(
    session_id: str,
    request: Request,
    db: Session = Depends(get_session),
) -> Dict[str, Any] | JSONResponse:
    record = AdvisorSessionRepository(db).get_session(session_id)
    if record is None:
        return error_response(404, "session_not_found", f"Session {session_id} does not exist.")

    _log_event("session_fetched", request, session_id=session_id)
    return {
        "session_id": record.id,
        "user_name": record.user_name,
        "profile": record.profile,
        "report": record.report,
        "summary": record.summary,
        "pdf_file_name": record.pdf_file_name,
        "created_at": record.created_at.isoformat(),
    }


@app.post("/usage", response_model=None, status_code=201)
def log_usage(
    request: Request,
    payload: UsagePayload,
    db: Session = Depends(get_session),
) -> Dict[str, Any] | JSONResponse:
    """Record one completed analysis for the admin dashboard."""
    if not payload.name.strip():
        return error_response(400, "name_required", "Name is required.")
    if payload.monthly_income < 0:
        return error_response(400, "invalid_income", "Monthly income must be a non-negative number.")

    entry = UsageLogRepository(db).log_usage(
        name=payload.name,
        monthly_income=payload.monthly_income,
        health_score=payload.health_score,
        primary_focus=payload.primary_focus,
        source_ip=_client_ip(request),
    )
    _log_event("usage_logged", request, usage_id=entry.id, user=mask_name(entry.name))
    return {"success": True, "id": entry.id, "message": "Usage logged successfully"}


@app.get("/admin/verify", response_model=None)
def admin_verify(request: Request) -> Dict[str, Any] | JSONResponse:
    denied = _admin_error(request)
    if denied is not None:
        return denied
    return {"success": True, "message": "Password verified"}


@app.get("/admin/stats", response_model=None)
def admin_stats(request: Request, db: Session = Depends(get_session)) -> Dict[str, Any] | JSONResponse:
    denied = _admin_error(request)
    if denied is not None:
        return denied

    stats = UsageLogRepository(db).stats()
    _log_event("admin_stats_served", request, total_users=stats.total_users)
    return {
        "total_users": stats.total_users,
        "average_income": stats.average_income,
        "users_per_day": stats.users_per_day,
        "income_distribution": stats.income_distribution,
        "recent_entries": [
            {
                "id": entry.id,
                "name": entry.name,
                "monthly_income": entry.monthly_income,
                "health_score": entry.health_score,
                "primary_focus": entry.primary_focus,
                "created_at": entry.created_at.isoformat(),
            }
            for entry in stats.recent_entries
        ],
    }


@app.delete("/admin/usage/{entry_id}", response_model=None)
def delete_usage(entry_id: int, request: Request, db: Session = Depends(get_session)) -> Dict[str, Any] | JSONResponse:
    denied = _admin_error(request)
    if denied is not None:
        return denied

    if not UsageLogRepository(db).delete_entry(entry_id, source_ip=_client_ip(request)):
        return error_response(404, "entry_not_found", f"Usage entry {entry_id} does not exist.")

    _log_event("usage_deleted", request, usage_id=entry_id)
    return {"success": True, "message": "Entry deleted successfully"}
