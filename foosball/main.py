from fastapi import FastAPI, Depends, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.trustedhost import TrustedHostMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from typing import List
from pathlib import Path
import uvicorn
import logging
import os
from dotenv import load_dotenv

# ✅ Load environment variables
load_dotenv()

from foosball.database import get_db, init_db
from foosball.errors import FoosballError
from foosball.schemas import PlayerResponse
from foosball.store import PlayerStore
from foosball.routers.players import router as players_router
from foosball.routers.games import router as games_router

# ✅ Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "INFO").upper())
logger = logging.getLogger(__name__)

STATIC_DIR = Path(__file__).parent / "static"


def _csv_env(name, default="*"):
    return [item.strip() for item in os.getenv(name, default).split(",") if item.strip()]


# ✅ Initialize FastAPI app with redirect_slashes=False to avoid automatic redirects
app = FastAPI(title="Foosball Elo Tracker", redirect_slashes=False)

app.add_middleware(TrustedHostMiddleware, allowed_hosts=_csv_env("ALLOWED_HOSTS"))
app.add_middleware(
    CORSMiddleware,
    allow_origins=_csv_env("CORS_ORIGINS"),
    allow_methods=["*"],
    allow_headers=["*"],
)


# ✅ Every error leaves as {"error": message}
@app.exception_handler(FoosballError)
async def foosball_error_handler(request: Request, exc: FoosballError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    message = "Invalid request body"
    errors = exc.errors()
    if errors and errors[0].get("type") == "json_invalid":
        message = "Request body must be valid JSON"
    elif errors and errors[0].get("loc", ("",))[0] == "path":
        message = "Player ID must be a valid integer"
    elif errors:
        cause = errors[0].get("ctx", {}).get("error")
        if cause is not None:
            message = str(cause)
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content={"error": "Database error"})


# ✅ Create DB tables on startup
@app.on_event("startup")
async def startup():
    await init_db()


# ✅ Health check
@app.get("/api/health")
async def health():
    return {"message": "Foosball Elo API is running!"}


# ✅ Leaderboard endpoint
@app.get("/api/leaderboard", response_model=List[PlayerResponse])
async def get_leaderboard(db: AsyncSession = Depends(get_db)):
    return await PlayerStore(db).list_by_rating_desc()


# ✅ Register routers
app.include_router(players_router, prefix="/api/players", tags=["Players"])
app.include_router(games_router, prefix="/api/games", tags=["Games"])

# ✅ Browser client
app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")


@app.get("/", include_in_schema=False)
async def index():
    return FileResponse(STATIC_DIR / "index.html")


def run():
    uvicorn.run(
        "foosball.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 3000)),
        proxy_headers=True,
        forwarded_allow_ips=os.getenv("FORWARDED_ALLOW_IPS", "*"),
    )


# ✅ Uvicorn entry point with proxy headers enabled
if __name__ == "__main__":
    run()
