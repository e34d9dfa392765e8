from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
import logging
import uuid
import uvicorn

from procurement_api.core.config import settings
from procurement_api.modules.licitations.routes import router as licitations_router
from procurement_api.modules.quotations.routes import router as quotations_router
from procurement_api.modules.adjudications.routes import router as adjudications_router
from procurement_api.modules.deliveries.routes import router as deliveries_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-Id"

app = FastAPI(
    title=settings.APP_NAME,
    description="Procurement API: licitations, quotations, adjudications and deliveries",
    version=settings.VERSION,
    debug=settings.DEBUG
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def correlation_id_middleware(request: Request, call_next):
    """
    Reuses the caller's correlation id or generates one, echoes it in the response and logs the request.
    """
    correlation_id = request.headers.get(CORRELATION_ID_HEADER) or str(uuid.uuid4())
    request.state.correlation_id = correlation_id

    response = await call_next(request)
    response.headers[CORRELATION_ID_HEADER] = correlation_id
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} [{correlation_id}]")
    return response


# Include routers with API prefix
api_prefix = settings.API_PREFIX
app.include_router(licitations_router, prefix=f"{api_prefix}/licitations", tags=["Licitaciones"])
app.include_router(quotations_router, prefix=f"{api_prefix}/quotations", tags=["Cotizaciones"])
app.include_router(adjudications_router, prefix=f"{api_prefix}/adjudications", tags=["Adjudicaciones"])
app.include_router(deliveries_router, prefix=f"{api_prefix}/deliveries", tags=["Entregas"])


@app.get("/")
async def root():
    return {
        "app_name": settings.APP_NAME,
        "version": settings.VERSION,
        "message": "Welcome to the API"
    }

if __name__ == "__main__":
    uvicorn.run("procurement_api.main:app", host="0.0.0.0", port=8000, reload=True)
