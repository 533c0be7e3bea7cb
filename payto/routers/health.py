"""Health and readiness endpoints for deployment platforms."""
from fastapi import APIRouter, Depends
from datetime import datetime, timezone

from payto.dependencies import get_credential_store
from payto.infrastructure.repositories import CredentialRepository

router = APIRouter()


@router.get("/")
async def root():
    return {"message": "Payto", "status": "running", "version": "1.0.0"}


@router.get("/health")
async def health():
    """Simple liveness probe - always returns ok if service is running."""
    return {"status": "ok", "ts": datetime.now(timezone.utc).isoformat()}


@router.get("/readiness")
def readiness(store: CredentialRepository = Depends(get_credential_store)):
    """Readiness probe - checks the credential store."""
    try:
        store.ping()
        return {"ready": True, "ts": datetime.now(timezone.utc).isoformat(), "credential_store": "connected"}
    except Exception as e:
        return {"ready": False, "ts": datetime.now(timezone.utc).isoformat(), "credential_store": f"error: {str(e)}"}
