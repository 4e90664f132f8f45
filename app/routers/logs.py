from typing import Any, Dict, List

from fastapi import APIRouter, Depends, HTTPException

from app.dependencies import get_log_viewer
from app.models.scan_log import DomainLogIndex
from app.services.log_viewer import LogViewer

router = APIRouter(prefix="/logs", tags=["logs"])


@router.get("/domains", response_model=List[str], summary="List scan log directories")
async def list_domains(viewer: LogViewer = Depends(get_log_viewer)) -> List[str]:
    return viewer.list_domains()


@router.get("/urls/{domain}", response_model=DomainLogIndex, summary="List the pages logged for one scan")
async def list_urls(domain: str, viewer: LogViewer = Depends(get_log_viewer)) -> DomainLogIndex:
    try:
        return viewer.list_urls(domain)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.get("/content/{domain}/{filename}", summary="Fetch one log record")
async def get_log_content(
    domain: str, filename: str, viewer: LogViewer = Depends(get_log_viewer)
) -> Dict[str, Any]:
    try:
        record = viewer.read_log(domain, filename)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    if record is None:
        raise HTTPException(status_code=404, detail="Log file not found.")
    return record


@router.delete("/domain/{domain}", summary="Delete every log of one scan")
async def clear_domain_logs(domain: str, viewer: LogViewer = Depends(get_log_viewer)) -> Dict[str, str]:
    try:
        viewer.clear_domain(domain)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    except RuntimeError as exc:
        raise HTTPException(status_code=500, detail=str(exc))
    return {"message": f"Logs for domain {domain} cleared successfully"}
