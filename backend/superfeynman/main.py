"""FastAPI application entry point."""
from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from superfeynman.api import concepts, courses, review_sessions, transcribe
from superfeynman.api.rate_limit import limiter, rate_limit_exceeded
from superfeynman.core.config import CORS_ORIGINS
from superfeynman.core.log_config import configure_logging
from superfeynman.persistence.db import init_db

configure_logging()

# ------------------------------------------------------------------
# App creation
# ------------------------------------------------------------------
app = FastAPI(
    title="Super Feynman API",
    description="Study aid: lecture notes in, concepts out, reviewed by explaining them to an AI persona",
    version="1.0.0",
)

# Default limit on every route; tighter ones are declared per endpoint
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded)
app.add_middleware(SlowAPIMiddleware)

# Outermost, so 429 responses carry CORS headers too
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Error-Kind"],
)


# ------------------------------------------------------------------
# Startup: initialise DB schema
# ------------------------------------------------------------------
@app.on_event("startup")
def on_startup():
    init_db()


# ------------------------------------------------------------------
# Routers
# ------------------------------------------------------------------
app.include_router(concepts.router)
app.include_router(courses.router)
app.include_router(review_sessions.router)
app.include_router(transcribe.router)
