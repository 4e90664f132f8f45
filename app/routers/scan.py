import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from slowapi import Limiter
from slowapi.util import get_remote_address

from app.config import get_settings
from app.dependencies import get_orchestrator
from app.models.scan_request import ScanRequest
from app.models.scan_response import ScanResult, ScanStatus
from app.services.orchestrator import ScanOrchestrator
from app.services.scan_guard import ScanInProgressError

logger = logging.getLogger(__name__)

limiter = Limiter(key_func=get_remote_address)
router = APIRouter(prefix="/spell-check", tags=["spell-check"])


@router.post(
    "",
    response_model=ScanResult,
    summary="Scan a site for spelling, SEO and link problems",
    description=(
        "Fetches the site's export endpoint and runs the requested checks "
        "(`spellCheck`, `brokenLinks`, `seoIndex`) on the header, the footer and "
        "every page.  Only one scan runs at a time; a request made while a scan "
        "is running is rejected with 409."
    ),
)
@limiter.limit(get_settings().SCAN_RATE_LIMIT)
async def scan_site(
    request: Request,
    body: ScanRequest,
    orchestrator: ScanOrchestrator = Depends(get_orchestrator),
) -> ScanResult:
    if orchestrator.is_scanning:
        raise HTTPException(status_code=409, detail="A scan is already in progress.")

    model = body.model or get_settings().DEFAULT_MODEL
    logger.info(
        "Scan request received",
        extra={"url": body.url, "model": model, "check_types": body.check_types},
    )

    try:
        return await orchestrator.run_scan(body.url, model, body.check_types)
    except ScanInProgressError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except Exception as exc:
        logger.error("Scan of %s failed: %s", body.url, exc)
        raise HTTPException(status_code=500, detail=f"Scan failed: {exc}")


@router.get("/status", response_model=ScanStatus, summary="Whether a scan is running")
async def scan_status(orchestrator: ScanOrchestrator = Depends(get_orchestrator)) -> ScanStatus:
    return ScanStatus(is_scanning=orchestrator.is_scanning)
