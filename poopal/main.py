import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from poopal.config import settings
from poopal.api import auth, stools, meals, symptoms, stats, ai, chat

logging.getLogger("poopal").setLevel(settings.log_level.upper())

app = FastAPI(title="Poopal", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.cors_origin],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include routers
app.include_router(auth.router)
app.include_router(stools.router)
app.include_router(meals.router)
app.include_router(symptoms.router)
app.include_router(stats.router)
app.include_router(ai.router)
app.include_router(chat.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
