from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from fastapi import Depends, FastAPI

from .dependencies import get_history_store, get_pipeline
from .errors import setup_exception_handlers
from .history import HistoryStore
from .models import AnalyzeRequest, AnalyzeResponse, HistoryResponse
from .pipeline import AnalyzePipeline


# Load environment variables from the repo root .env (TURNSTILE_SECRET, GEMINI_API_KEY, ...)
_HERE = Path(__file__).resolve()
_REPO_ROOT = _HERE.parents[1]
load_dotenv(_REPO_ROOT / ".env", override=False)

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(title="Internet Guardian Agent", version="2.0.0")
setup_exception_handlers(app)


# Sync handlers run in FastAPI's threadpool; every outbound call carries its own timeout.
@app.post("/analyze", response_model=AnalyzeResponse)
def analyze_endpoint(req: AnalyzeRequest, pipeline: AnalyzePipeline = Depends(get_pipeline)):
    return pipeline.run(req)


@app.get("/history", response_model=HistoryResponse)
def history_endpoint(history: HistoryStore = Depends(get_history_store)):
    return HistoryResponse(history=history.list())
