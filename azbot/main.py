from fastapi import FastAPI

from azbot.config import settings
from azbot.database import Base, engine
from azbot.logging_config import get_logger, setup_logging
from azbot.routers import messages

setup_logging(settings.log_level)

logger = get_logger("main")

app = FastAPI(
    title="Azbot API",
    description="Webhook backend for the Azure subscription chatbot",
    version="0.1.0",
)

app.include_router(messages.router)


@app.on_event("startup")
def create_tables() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


@app.get("/health")
async def health():
    return {"status": "ok"}
