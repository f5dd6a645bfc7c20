import os
import sys
import logging

# Ensure this directory is in the path for uvicorn and other runners
current_dir = os.path.dirname(os.path.abspath(__file__))
if current_dir not in sys.path:
    sys.path.append(current_dir)

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from config import APP_NAME, CORS_ORIGINS
from database import init_db
from errors import MindTrackerError, ValidationError
from routes.auth_routes import router as auth_router
from routes.habit_routes import router as habit_router
from routes.mood_routes import router as mood_router
from routes.goal_routes import router as goal_router
from routes.user_routes import router as user_router

logger = logging.getLogger(__name__)


def create_app(initialize_db: bool = True) -> FastAPI:
    if initialize_db:
        init_db()

    app = FastAPI(title=f"{APP_NAME} API")

    @app.exception_handler(MindTrackerError)
    async def handle_domain_error(request: Request, exc: MindTrackerError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_bad_request(request: Request, exc: RequestValidationError):
        # report the first failing field the same way services do
        first = exc.errors()[0]
        loc = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
        err = ValidationError(first.get("msg", "Invalid request"), field=".".join(loc) or None)
        return JSONResponse(status_code=err.status_code, content=err.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"detail": "Server error"})

    @app.get("/api/v1/health-check")
    async def health():
        return {"status": "ok", "message": "Backend is alive!"}

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(habit_router)
    app.include_router(mood_router)
    app.include_router(goal_router)
    app.include_router(user_router)
    return app


app = create_app(initialize_db=os.getenv("SKIP_DB_INIT") != "1")

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
