import os
import sys
import time
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

load_dotenv()

from agent import WalletInsightsAgent
from config import Settings
from errors import UnresolvableIdentity
from models import AnalyticsResponse, AnalyzeRequest, HealthResponse, StoryResponse
from wallet_analyzer import WalletAnalyzer

VERSION = "1.0.0"

logger.remove()
logger.add(sys.stderr, level=os.getenv("LOG_LEVEL", "INFO"))


# ── Lifespan ──────────────────────────────────────────────────────────────────

analyzer: WalletAnalyzer | None = None
insights_agent: WalletInsightsAgent | None = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    global analyzer, insights_agent
    active_analyzer = WalletAnalyzer.from_settings(Settings.from_env())
    analyzer = active_analyzer
    try:
        insights_agent = WalletInsightsAgent()
    except Exception as e:
        logger.warning("AI summaries disabled: {}", e)
        insights_agent = None
    logger.info("Onchain Wallet Analytics ready")
    yield
    logger.info("Shutting down.")
    await active_analyzer.aclose()


# ── App ───────────────────────────────────────────────────────────────────────

app = FastAPI(
    title="Onchain Wallet Analytics",
    description=(
        "Resolves a wallet address or ENS name, collects its incoming transfers on "
        "Ethereum and Base, and returns an activity timeline, top counterparties, "
        "wallet age and Base launch participation, with optional AI summaries."
    ),
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Info ──────────────────────────────────────────────────────────────────────


@app.get("/", tags=["Info"])
def root(request: Request):
    base = str(request.base_url).rstrip("/")
    return {
        "name": "Onchain Wallet Analytics",
        "version": VERSION,
        "networks": ["Ethereum", "Base"],
        "endpoints": {
            "docs": f"{base}/docs",
            "health": f"{base}/health",
            "analytics": f"{base}/analytics",
            "story": f"{base}/story",
        },
    }


@app.get("/health", response_model=HealthResponse, tags=["Info"])
def health():
    return HealthResponse(status="ok", version=VERSION)


# ── Wallet ────────────────────────────────────────────────────────────────────


@app.post("/analytics", response_model=AnalyticsResponse, tags=["Wallet"])
async def generate_analytics(
    req: AnalyzeRequest,
    include_insights: bool = Query(
        default=True,
        description="Include an AI-generated summary of the analytics",
    ),
):
    """
    Analyze a wallet given as a 0x address, 40 bare hex characters, or an ENS name.

    Returns the wallet overview, a 12-month transfer history (oldest first) and
    the five most frequent counterparties across Ethereum and Base.
    """
    start = time.time()

    try:
        analytics = await analyzer.analyze(req.wallet_address)
    except UnresolvableIdentity as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Analytics failed for {!r}", req.wallet_address)
        elapsed = int((time.time() - start) * 1000)
        return AnalyticsResponse(
            success=False, input=req.wallet_address, error=str(e),
            processing_time_ms=elapsed,
        )

    insights = None
    if include_insights and insights_agent:
        try:
            insights = insights_agent.generate_insights(analytics)
        except Exception as e:
            insights = f"AI insights generation failed: {e}"

    elapsed = int((time.time() - start) * 1000)
    return AnalyticsResponse(
        success=True,
        input=req.wallet_address,
        ens_name=analytics.identity.display_label,
        key_insights=insights,
        analytics=analytics,
        processing_time_ms=elapsed,
    )


@app.post("/story", response_model=StoryResponse, tags=["Wallet"])
async def generate_story(req: AnalyzeRequest):
    """Narrate a wallet's history on Ethereum and Base."""
    start = time.time()

    try:
        analytics = await analyzer.analyze(req.wallet_address)
    except UnresolvableIdentity as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("Story failed for {!r}", req.wallet_address)
        elapsed = int((time.time() - start) * 1000)
        return StoryResponse(
            success=False, input=req.wallet_address, error=str(e),
            processing_time_ms=elapsed,
        )

    if insights_agent:
        try:
            story = insights_agent.generate_story(analytics)
        except Exception as e:
            story = f"Story generation failed: {e}"
    else:
        story = "Story generation unavailable: no AI provider configured."

    elapsed = int((time.time() - start) * 1000)
    return StoryResponse(
        success=True,
        input=req.wallet_address,
        ens_name=analytics.identity.display_label,
        story_text=story,
        processing_time_ms=elapsed,
    )


# ── Entry point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=os.getenv("APP_ENV", "development") == "development",
    )
