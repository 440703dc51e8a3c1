import logging
import traceback
from contextlib import asynccontextmanager
from typing import Any, Dict

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import database
import event_service
import settings_service
from config import PORT
from errors import CastError, DocumentValidationError, error
from routes import routers

# ----------------------- Logger configuration -----------------------
logger = logging.getLogger("hackathon-backend")
logger.setLevel(logging.INFO)
handler = logging.StreamHandler()
formatter = logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
handler.setFormatter(formatter)

if not logger.handlers:
    logger.addHandler(handler)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if database.db is not None:
        database.ensure_indexes()
        settings_service.create_singleton()
        event_service.get_current_event()
    else:
        logger.warning("DATABASE_URL / DATABASE_NAME not set, running without a database")
    yield


app = FastAPI(title="Hackathon API", version="1.0.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

for r in routers:
    app.include_router(r)


# ----------------------- Exception handlers -----------------------

@app.exception_handler(CastError)
@app.exception_handler(DocumentValidationError)
async def persistence_error_handler(request: Request, exc: Exception):
    logger.info("Bad request on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=400, content={"detail": "Bad request"})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [{"loc": list(e.get("loc", ())), "msg": e.get("msg")} for e in exc.errors()]
    return JSONResponse(status_code=400, content={"detail": "Bad request", "errors": errors})


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled exception on {request.url.path}: {exc}\n{traceback.format_exc()}")
    internal = error()
    return JSONResponse(status_code=internal.status_code, content={"detail": internal.detail})


# ----------------------- Diagnostics -----------------------

@app.get("/", response_model=dict)
def root():
    return {"message": "Hackathon backend is running"}


@app.get("/test", response_model=dict)
def test_database():
    response: Dict[str, Any] = {"backend": "✅ Running", "database": "❌ Not Available"}
    try:
        if database.db is not None:
            names = database.db.list_collection_names()
            response["database"] = "✅ Connected"
            response["collections"] = names[:10]
        else:
            response["database"] = "❌ Not Configured"
    except Exception as e:
        response["database"] = f"⚠️ {str(e)[:120]}"
    return response


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=PORT)
