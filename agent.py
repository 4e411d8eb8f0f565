import json
import os

from loguru import logger

from config import Settings
from models import WalletAnalytics
from prompts import INSIGHTS_PROMPT, INSIGHTS_SYSTEM_PROMPT, STORY_PROMPT, STORY_SYSTEM_PROMPT
from utils import counterparty_label

STORY_ASSET_FALLBACK = "a unique digital artifact"


def insights_payload(analytics: WalletAnalytics) -> dict:
    o = analytics.overview
    return {
        "wallet_age_days": o.wallet_age_days,
        "total_transactions": o.total_transactions,
        "estimated_cost_eth": f"{o.estimated_cost_native:.4f}",
        "base_launch_participant": o.secondary_network_launch_participant,
        "base_transactions": o.secondary_network_transactions,
        "top_dapps": ", ".join(
            f"{r.label} ({r.interaction_count} interactions)"
            for r in analytics.top_counterparties
        ),
        "notable_nft": o.notable_asset,
    }


def story_payload(analytics: WalletAnalytics, asset_placeholder: str = "N/A") -> dict:
    o = analytics.overview
    h = analytics.highlights

    notable_nft = o.notable_asset
    if not notable_nft or notable_nft == asset_placeholder:
        notable_nft = STORY_ASSET_FALLBACK

    activity_peak = "various periods of innovation"
    if h.activity_peak_year:
        activity_peak = f"the year {h.activity_peak_year}"

    mainnet_quest = "exploring decentralized finance and digital collectibles"
    if h.top_primary_counterparty:
        mainnet_quest = (
            "interacting with key protocols like "
            f"{counterparty_label(h.top_primary_counterparty)} on Ethereum Mainnet"
        )

    top_base_dapp = "various emerging protocols"
    if h.top_secondary_counterparty:
        top_base_dapp = (
            f"a prominent dApp like {counterparty_label(h.top_secondary_counterparty)} on Base"
        )

    return {
        "wallet_age_days": o.wallet_age_days,
        "total_transactions": o.total_transactions,
        "activity_peak": activity_peak,
        "mainnet_quest": mainnet_quest,
        "estimated_cost_eth": f"{o.estimated_cost_native:.2f}",
        "base_launch_participant": o.secondary_network_launch_participant,
        "base_transactions": o.secondary_network_transactions,
        "top_base_dapp": top_base_dapp,
        "notable_nft": notable_nft,
    }


class WalletInsightsAgent:
    """Black-box summarizer: turns an analytics record into prose via an LLM."""

    def __init__(self):
        self.provider = os.getenv("AI_PROVIDER", "anthropic").lower()
        self.asset_placeholder = Settings.from_env().notable_asset_default

        if self.provider == "anthropic":
            self._init_anthropic()
        elif self.provider == "gemini":
            self._init_gemini()
        elif self.provider == "openai":
            self._init_openai()
        else:
            raise ValueError(
                f"Unknown AI_PROVIDER '{self.provider}'. "
                "Set AI_PROVIDER to 'anthropic', 'openai', or 'gemini'."
            )

    # ── Provider Init ─────────────────────────────────────────────────────

    def _init_anthropic(self):
        import anthropic

        api_key = os.getenv("ANTHROPIC_API_KEY")
        if not api_key:
            raise EnvironmentError("ANTHROPIC_API_KEY is not set.")
        self.client = anthropic.Anthropic(api_key=api_key)
        self.model = os.getenv("CLAUDE_MODEL", "claude-sonnet-4-6")
        logger.info("AI Provider: Anthropic | Model: {}", self.model)

    def _init_gemini(self):
        import google.generativeai as genai

        api_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        if not api_key:
            raise EnvironmentError("GEMINI_API_KEY (or GOOGLE_API_KEY) is not set.")
        genai.configure(api_key=api_key)
        self.model = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
        self.client = genai.GenerativeModel(self.model)
        logger.info("AI Provider: Gemini | Model: {}", self.model)

    def _init_openai(self):
        from openai import OpenAI

        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            raise EnvironmentError("OPENAI_API_KEY is not set.")
        self.client = OpenAI(api_key=api_key)
        self.model = os.getenv("OPENAI_MODEL", "gpt-4o")
        logger.info("AI Provider: OpenAI | Model: {}", self.model)

    # ── Generate ──────────────────────────────────────────────────────────

    def generate_insights(self, analytics: WalletAnalytics) -> str:
        """Two-paragraph analytical summary."""
        wallet_data = json.dumps(insights_payload(analytics), indent=2)
        return self._complete(
            INSIGHTS_SYSTEM_PROMPT, INSIGHTS_PROMPT.format(wallet_data=wallet_data)
        )

    def generate_story(self, analytics: WalletAnalytics) -> str:
        """Three-paragraph narrative of the wallet's history."""
        wallet_data = json.dumps(story_payload(analytics, self.asset_placeholder), indent=2)
        return self._complete(
            STORY_SYSTEM_PROMPT, STORY_PROMPT.format(wallet_data=wallet_data)
        )

    def _complete(self, system: str, prompt: str) -> str:
        if self.provider == "anthropic":
            return self._call_anthropic(system, prompt)
        elif self.provider == "gemini":
            return self._call_gemini(system, prompt)
        elif self.provider == "openai":
            return self._call_openai(system, prompt)
        return ""

    def _call_anthropic(self, system: str, prompt: str) -> str:
        message = self.client.messages.create(
            model=self.model,
            max_tokens=2048,
            system=system,
            messages=[{"role": "user", "content": prompt}],
        )
        return message.content[0].text

    def _call_gemini(self, system: str, prompt: str) -> str:
        response = self.client.generate_content(f"{system}\n\n{prompt}")
        return response.text

    def _call_openai(self, system: str, prompt: str) -> str:
        response = self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system},
                {"role": "user", "content": prompt},
            ],
            max_tokens=2048,
        )
        return response.choices[0].message.content
