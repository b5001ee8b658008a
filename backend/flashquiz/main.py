from pathlib import Path

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.responses import RedirectResponse
from .logging_config import configure_logging
from .settings import settings
from .routers import health, quiz

FRONTEND_DIR = Path(__file__).resolve().parent / "frontend"

logger = configure_logging(settings.log_level)

app = FastAPI(title="FlashQuiz API")
app.include_router(health.router)
app.include_router(quiz.router)

# Static frontend at /app (absolute path so cwd doesn't matter when launching)
app.mount("/app", StaticFiles(directory=FRONTEND_DIR, html=True), name="frontend")

@app.get("/", include_in_schema=False)
async def redirect_root_to_app():
	return RedirectResponse(url="/app")

@app.get("/info")
def root():
	return {"status": "ok", "gemini_configured": bool(settings.gemini_api_key), "model": settings.gemini_model}


def run() -> None:
	import uvicorn

	logger.info("Starting FlashQuiz with model %s", settings.gemini_model)
	uvicorn.run(app, host="127.0.0.1", port=8000)
