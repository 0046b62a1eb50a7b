import logging
import os

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException

from copisteria import config
from copisteria.api import orders, quote
from copisteria.db.store import SQLOrderStore, get_order_store

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Copisteria",
    description="Print-shop quotes and order intake",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(quote.router, prefix="/api", tags=["quote"])
app.include_router(orders.router, prefix="/api", tags=["orders"])


@app.exception_handler(HTTPException)
async def http_error(request: Request, exc: HTTPException):
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    logger.warning("Invalid request to %s: %s", request.url.path, exc.errors())
    return JSONResponse({"error": "Richiesta non valida"}, status_code=400)


@app.on_event("startup")
def on_startup():
    os.makedirs(config.UPLOAD_DIR, exist_ok=True)
    store = get_order_store()
    if isinstance(store, SQLOrderStore):
        store.create_tables()
    logger.info("Copisteria starting on %s:%s (uploads in %s)", config.APP_HOST, config.APP_PORT, config.UPLOAD_DIR)


@app.get("/health")
def health():
    return {"status": "ok", "service": "copisteria"}


# Frontend (order form) served last so the API routes take precedence
if os.path.isdir(config.PUBLIC_DIR):
    app.mount("/", StaticFiles(directory=config.PUBLIC_DIR, html=True), name="public")


def run():
    import uvicorn

    uvicorn.run("copisteria.main:app", host=config.APP_HOST, port=config.APP_PORT)


if __name__ == "__main__":
    run()
