import asyncio
import json
import logging
from typing import Any

import google.generativeai as genai  # type: ignore[import-untyped]
from fastapi import HTTPException
from pydantic import ValidationError

from ..schemas import CarbonSummary, InsightsResponse
from ..settings import settings

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = """
You are a construction-site sustainability advisor.
You receive a carbon summary for one site (emissions and savings in kg CO2e,
a per-activity trend and a short forecast) plus rule-based observations that
were already computed from it.

Write 3 to 6 short, concrete recommendations a site manager can act on this
month. Base every number you mention on the input; do not invent new figures.
Prefer the activity types that dominate emissions.

Return ONLY JSON:
{
  "insights": ["<recommendation>", "..."]
}
""".strip()


def _get_model() -> genai.GenerativeModel:
    if not settings.gemini_api_key:
        raise HTTPException(status_code=500, detail="GEMINI_API_KEY is not configured")

    try:
        genai.configure(api_key=settings.gemini_api_key)
        return genai.GenerativeModel(
            model_name=settings.gemini_model,
            generation_config={"response_mime_type": "application/json"},
        )
    except Exception as exc:
        logger.exception("Gemini init failed: %s", exc)
        raise HTTPException(status_code=500, detail="Failed to initialize Gemini client") from exc


def _extract_text(response: Any) -> str:
    try:
        return response.text
    except Exception as exc:
        logger.exception("Failed to extract .text: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to parse Gemini response")


def _clean_json(text: str) -> str:
    cleaned = text.strip()

    # remove ```json and ```
    if cleaned.startswith("```"):
        cleaned = cleaned.replace("```json", "")
        cleaned = cleaned.replace("```", "").strip()

    return cleaned


def _summary_payload(summary: CarbonSummary, observations: list[str]) -> str:
    data = summary.model_dump(mode="json", exclude={"activities"})
    data["observations"] = observations
    return json.dumps(data, ensure_ascii=False, indent=2)


async def narrate_insights(summary: CarbonSummary, observations: list[str]) -> InsightsResponse:
    model = _get_model()
    user_prompt = f"Site carbon summary:\n{_summary_payload(summary, observations)}"

    try:
        response = await asyncio.to_thread(
            model.generate_content,
            [SYSTEM_PROMPT, user_prompt],
        )
    except Exception as exc:
        logger.exception("Gemini request failed: %s", exc)
        raise HTTPException(status_code=502, detail="Failed to contact Gemini")

    raw_text = _extract_text(response)
    clean = _clean_json(raw_text)

    try:
        parsed = json.loads(clean)
    except json.JSONDecodeError:
        logger.exception("Gemini returned invalid JSON\nRAW:\n%s\nCLEAN:\n%s", raw_text, clean)
        raise HTTPException(status_code=502, detail="Gemini returned invalid JSON")

    if not isinstance(parsed, dict):
        logger.error("Schema mismatch: %s", parsed)
        raise HTTPException(status_code=502, detail="Gemini JSON schema mismatch")

    try:
        return InsightsResponse.model_validate({**parsed, "sourceModel": settings.gemini_model})
    except ValidationError:
        logger.exception("Schema mismatch: %s", parsed)
        raise HTTPException(status_code=502, detail="Gemini JSON schema mismatch")
