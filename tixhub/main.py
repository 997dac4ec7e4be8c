# tixhub/main.py
from contextlib import asynccontextmanager
import logging

from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI

from tixhub.core.config import get_settings
from tixhub.services.auth_backend import create_auth_backend

# Routers
from tixhub.routers.auth import router as auth_router

settings = get_settings()

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger("uvicorn")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    Startup:
      - Build the auth backend (Supabase, or in-memory demo).
      - Restore and resolve any existing session before serving requests.

    Shutdown:
      - Drop the auth change subscription.
    """
    logger.info("🔄 Startup: restoring auth session...")
    auth = await create_auth_backend(get_settings())
    state = await auth.bootstrapper.start()
    app.state.auth = auth
    logger.info(f"✅ Startup: session {state.status}{' (demo mode)' if auth.demo_mode else ''}.")
    yield
    await auth.bootstrapper.stop()


app = FastAPI(
    title=settings.PROJECT_NAME or "TixHub API",
    version="0.1.0",
    lifespan=lifespan,
)


# --- CORS configuration ---
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Versioned API prefix, e.g. /api/v1
app.include_router(auth_router, prefix=settings.API_V1_STR)


@app.get("/")
def root():
    """Health check endpoint."""
    return {"status": "ok", "service": "tixhub-backend"}
