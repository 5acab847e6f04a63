# status_relay/routers/health.py
from fastapi import APIRouter, Depends

from status_relay.core.registry import SubscriberRegistry
from status_relay.routers.deps import get_registry

router = APIRouter()

@router.get("/health")
async def health(registry: SubscriberRegistry = Depends(get_registry)):
    return {
        "status": "ok",
        "activeJobs": len(registry),
        "jobs": registry.job_ids(),
    }

@router.get("/jobs")
async def list_jobs(registry: SubscriberRegistry = Depends(get_registry)):
    jobs = registry.job_ids()
    return {"count": len(jobs), "jobs": jobs}
