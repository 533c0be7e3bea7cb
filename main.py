"""
Payto - Slack slash commands for Interledger payments.
FastAPI app: Slack webhook → command dispatcher → Slack + ILP Kit APIs.
"""
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import uuid
from contextlib import asynccontextmanager
import logging

from payto import services
from payto.domain.errors import AuthorizationError
from payto.routers import all_routers

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("startup")


@asynccontextmanager
async def lifespan(app: FastAPI):  # pragma: no cover
    logger.info(f"🚀 Payto started ({services.settings.environment}), listening on port {services.settings.port}")
    yield
    logger.info("👋 Lifespan shutdown")


app = FastAPI(
    title="Payto",
    description="Send and receive Interledger payments from Slack",
    version="1.0.0",
    lifespan=lifespan,
)

for router in all_routers:
    app.include_router(router)


@app.middleware("http")
async def request_id_middleware(request: Request, call_next):
    rid = str(uuid.uuid4())
    request.state.request_id = rid
    response = await call_next(request)
    response.headers["X-Request-ID"] = rid
    return response


@app.exception_handler(AuthorizationError)
async def authorization_error_handler(request: Request, exc: AuthorizationError):
    return JSONResponse(status_code=403, content={"error": exc.user_message})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):  # pragma: no cover
    logger.exception("Unhandled error")
    return JSONResponse(status_code=500, content={
        "error": {"type": exc.__class__.__name__, "message": str(exc)},
        "request_id": getattr(request.state, "request_id", None)
    })


if __name__ == "__main__":  # pragma: no cover
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=services.settings.port)
