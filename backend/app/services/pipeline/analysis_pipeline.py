"""
Analysis Pipeline — Orchestrates VCF → profiles → drug risk → response.

validate → parse → interpret → evaluate drugs → explain → assemble.

The deterministic part (parse through scoring) is synchronous and pure;
narrative generation runs afterwards on the finished facts and cannot
change them.
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from app.schemas.internal_contracts import ExplanationFacts
from app.schemas.pharma_schema import PharmaGuardResponse
from app.services.llm.explanation_service import generate_explanation
from app.services.pharmacogenomics.config import get_upload_config
from app.services.pharmacogenomics.interpretation import InterpretationService
from app.services.pharmacogenomics.models import DrugRiskResult, GeneProfile
from app.services.pharmacogenomics.risk_engine import RiskEngine, parse_drugs
from app.services.pipeline.response_mapper import ResponseMapper
from app.services.vcf.parser import VcfParseResult, parse_vcf

logger = logging.getLogger(__name__)

Explainer = Callable[[ExplanationFacts], Awaitable[str]]


class UploadValidationError(ValueError):
    """Request rejected before parsing (HTTP 400)."""


@dataclass
class CoreAnalysis:
    """Everything the deterministic pipeline produced for one request."""
    parse_result: VcfParseResult
    gene_profiles: List[GeneProfile]
    drug_risks: List[DrugRiskResult]


def _format_size(num_bytes: int) -> str:
    mib = 1024 * 1024
    if num_bytes % mib == 0:
        return f"{num_bytes // mib} MB"
    return f"{num_bytes} byte"


def validate_upload(filename: Optional[str], content: Optional[bytes]) -> None:
    upload = get_upload_config()
    if not content:
        raise UploadValidationError("No file uploaded")
    if not filename or not any(filename.endswith(s) for s in upload.allowed_suffixes):
        raise UploadValidationError("File must be a .vcf file")
    if len(content) > upload.max_upload_bytes:
        raise UploadValidationError(f"File exceeds {_format_size(upload.max_upload_bytes)} limit")


def validate_drugs(drugs: Optional[str]) -> None:
    if not parse_drugs(drugs):
        raise UploadValidationError("At least one drug name is required")


def run_core_pipeline(
    content: bytes,
    drugs: Optional[str],
    interpreter: Optional[InterpretationService] = None,
    engine: Optional[RiskEngine] = None,
) -> CoreAnalysis:
    """Parse, interpret and evaluate. No I/O besides reading ``content``."""
    interpreter = interpreter or InterpretationService()
    engine = engine or RiskEngine()

    logger.info("Parsing VCF")
    parsed = parse_vcf(content)
    if parsed.errors:
        logger.warning("VCF had %d malformed lines", len(parsed.errors))

    logger.info("Interpreting %d variants", len(parsed.variants))
    profiles = interpreter.interpret(parsed.variants)

    logger.info("Evaluating drugs: %s", drugs)
    risks = engine.evaluate(profiles, drugs)

    return CoreAnalysis(parse_result=parsed, gene_profiles=profiles, drug_risks=risks)


async def run_analysis_pipeline(
    filename: Optional[str],
    content: Optional[bytes],
    drugs: Optional[str],
    explainer: Optional[Explainer] = None,
) -> List[PharmaGuardResponse]:
    """
    Full pipeline for one request. Returns one response per requested drug,
    in request order.

    Raises:
        UploadValidationError: bad file or empty drug list.
    """
    validate_upload(filename, content)
    validate_drugs(drugs)
    explainer = explainer or generate_explanation

    start_time = time.time()
    core = run_core_pipeline(content, drugs)

    mapper = ResponseMapper(
        core.gene_profiles, core.parse_result.variants, core.parse_result.success
    )
    prepared = [mapper.prepare(risk) for risk in core.drug_risks]

    logger.info("Generating LLM explanations")
    summaries = await asyncio.gather(*(explainer(facts) for _, _, facts in prepared))

    responses = [
        mapper.build(risk, pgx, guidance, summary)
        for risk, (pgx, guidance, _), summary in zip(core.drug_risks, prepared, summaries)
    ]

    logger.info("Pipeline execution time: %.2fs", time.time() - start_time)
    return responses


def parse_only(filename: Optional[str], content: Optional[bytes]) -> VcfParseResult:
    """Raw parse for the dev endpoint."""
    validate_upload(filename, content)
    return parse_vcf(content)
