"""
Explanation Service - plain-language summary of an already computed result.

The LLM is a narrator only. Risk label, severity, diplotype and clinical
action are fixed before it is called; it turns them into 3-4 sentences.
On any failure the static fallback summary is returned, so a narrative
problem can never fail or alter an analysis.
"""
import logging
import time
from typing import Optional

from app.schemas.internal_contracts import ExplanationFacts
from app.services.llm.groq_client import GroqClient
from app.services.pharmacogenomics.config import get_llm_config

logger = logging.getLogger(__name__)

FALLBACK_SUMMARY = (
    "Explanation unavailable — pharmacogenomic profile and risk assessment "
    "are provided in the structured fields above."
)

SYSTEM_PROMPT = (
    "You are a clinical pharmacogenomics assistant. "
    "Write a single concise paragraph of 3-4 sentences that explains "
    "in plain English why this patient's genetic profile affects the named drug "
    "and what the clinical consequence of the stated risk label is. "
    "Use only the facts given to you — do NOT suggest a different risk level, "
    "severity, or treatment action. Do NOT use bullet points or disclaimers."
)


def _safe(value: Optional[str]) -> str:
    return value if value and value.strip() else "Unknown"


def build_prompt(facts: ExplanationFacts) -> str:
    """Structured fact block passed as the user message."""
    return (
        f"Drug: {facts.drug}\n"
        f"Governing gene: {_safe(facts.gene)}\n"
        f"Patient diplotype: {_safe(facts.diplotype)}\n"
        f"Phenotype: {_safe(facts.phenotype)}\n"
        f"Risk label: {_safe(facts.risk_label)}\n"
        f"Severity: {_safe(facts.severity)}\n"
        f"Advised clinical action: {_safe(facts.action)}\n\n"
        "Summarise why this genetic profile affects this drug and what "
        "the clinical consequence of the risk label is."
    )


async def generate_explanation(
    facts: ExplanationFacts, client: Optional[GroqClient] = None
) -> str:
    """Summary for one drug result. Never raises."""
    if not get_llm_config().enabled:
        return FALLBACK_SUMMARY

    start = time.time()
    try:
        client = client or GroqClient()
        text = await client.generate_text(SYSTEM_PROMPT, build_prompt(facts))
    except Exception as e:
        logger.error(f"Unexpected error in explanation service: {str(e)}")
        return FALLBACK_SUMMARY

    if text is None or not text.strip():
        logger.warning("LLM fallback triggered for %s: empty response", facts.drug)
        return FALLBACK_SUMMARY

    logger.info("LLM generation time for %s: %.2f seconds", facts.drug, time.time() - start)
    return text.strip()
