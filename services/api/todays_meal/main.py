# Today's Meal API Main Entry Point
import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded

from .settings import settings
from .db import SessionLocal, init_db
from .core.ai_client import build_clients
from .services.chat_pipeline import ChatPipeline
from .services.intent import IntentClassifier
from .services.knowledge import seed_knowledge_base
from .services.recipe_generator import RecipeGenerator
from .services.responder import ConversationalResponder
from .routers.ready import router as ready_router
from .routers.chat import router as chat_router
from .routers.history import router as history_router
from .routers.favorites import router as favorites_router
from .routers.preferences import router as preferences_router

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[logging.StreamHandler(sys.stdout)]
)
logger = logging.getLogger("todays_meal")


def build_pipeline(conversation_llm, recipe_llm) -> ChatPipeline:
    return ChatPipeline(
        classifier=IntentClassifier(conversation_llm),
        generator=RecipeGenerator(
            recipe_llm,
            max_attempts=settings.max_recipe_attempts,
            target_count=settings.target_recipe_count,
            quick_cooking_max_minutes=settings.quick_cooking_max_minutes,
            reference_limit=settings.reference_recipe_limit,
            image_base_url=settings.recipe_image_base_url,
        ),
        responder=ConversationalResponder(conversation_llm),
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    db = SessionLocal()()
    try:
        seed_knowledge_base(db)
    finally:
        db.close()

    conversation_llm, recipe_llm = build_clients(settings)
    app.state.ai_mode = settings.ai_mode
    app.state.pipeline = build_pipeline(conversation_llm, recipe_llm)
    logger.info(f"Today's Meal API ready (ai_mode={settings.ai_mode})")
    yield


# Rate limiter (per-IP)
limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])

app = FastAPI(title="Today's Meal API", version="0.1.0", lifespan=lifespan)
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ready_router, prefix="/api", tags=["health"])
app.include_router(chat_router, prefix="/api", tags=["chat"])
app.include_router(history_router, prefix="/api", tags=["history"])
app.include_router(favorites_router, prefix="/api", tags=["favorites"])
app.include_router(preferences_router, prefix="/api", tags=["preferences"])
