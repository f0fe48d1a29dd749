"""
Response Mapper - assembles one PharmaGuardResponse per drug result.

Pure transformation: short phenotype codes, actionable detected variants,
guidance lookup and wiring. The explanation text is produced elsewhere
and passed in; nothing here feeds back into the computed facts.
"""
import uuid
from datetime import datetime, timezone
from typing import Dict, Optional, Sequence, Tuple

from app.schemas.internal_contracts import ExplanationFacts
from app.schemas.pharma_schema import (
    ClinicalRecommendation,
    DetectedVariant,
    LLMExplanation,
    PharmaGuardResponse,
    PharmacogenomicProfile,
    QualityMetrics,
    RiskAssessment,
)
from app.services.pharmacogenomics.models import DrugRiskResult, GeneProfile
from app.services.pharmacogenomics.phenotype_rules import is_unknown_phenotype
from app.services.pharmacogenomics.recommendation_engine import ClinicalGuidance, get_recommendation
from app.services.vcf.parser import VcfVariant

UNKNOWN_SHORT_CODE = "Unknown"

# Verbose phenotype prefix → CPIC short code, first match wins
PHENOTYPE_SHORT_CODES: Tuple[Tuple[str, str], ...] = (
    ("NM", "NM"),
    ("IM", "IM"),
    ("PM", "PM"),
    ("RM", "RM"),
    ("UM", "UM"),
    ("Normal Function", "NM"),     # SLCO1B1
    ("Decreased Function", "IM"),
    ("Poor Function", "PM"),
)


def to_short_phenotype(verbose: Optional[str]) -> str:
    """
    "IM – Intermediate Metabolizer"              → "IM"
    "Poor Function – High Statin Myopathy Risk"  → "PM"
    None or "UNKNOWN..."                         → "Unknown"
    """
    if is_unknown_phenotype(verbose):
        return UNKNOWN_SHORT_CODE
    for prefix, code in PHENOTYPE_SHORT_CODES:
        if verbose.startswith(prefix):
            return code
    return UNKNOWN_SHORT_CODE


def build_pgx_profile(
    gene: Optional[str],
    profile: Optional[GeneProfile],
    variants: Sequence[VcfVariant],
) -> PharmacogenomicProfile:
    if gene is None:
        return PharmacogenomicProfile()

    detected = [
        DetectedVariant(rsid=v.rsid, star_allele=v.star, genotype=v.gt)
        for v in variants
        if v.gene == gene and v.is_actionable
    ]
    return PharmacogenomicProfile(
        primary_gene=gene,
        diplotype=profile.diplotype if profile else None,
        phenotype=to_short_phenotype(profile.phenotype if profile else None),
        detected_variants=detected,
    )


def build_facts(
    risk: DrugRiskResult, pgx: PharmacogenomicProfile, guidance: ClinicalGuidance
) -> ExplanationFacts:
    return ExplanationFacts(
        drug=risk.drug,
        gene=risk.gene,
        diplotype=pgx.diplotype,
        phenotype=pgx.phenotype,
        risk_label=risk.risk_assessment.risk_label.value,
        severity=risk.risk_assessment.severity.value,
        action=guidance.action,
    )


class ResponseMapper:
    """Per-request assembler; patient id and timestamp are shared by all drugs."""

    def __init__(
        self,
        gene_profiles: Sequence[GeneProfile],
        variants: Sequence[VcfVariant],
        parse_success: bool,
    ):
        self.profiles_by_gene: Dict[str, GeneProfile] = {p.gene: p for p in gene_profiles}
        self.variants = list(variants)
        self.patient_id = str(uuid.uuid4())
        self.timestamp = datetime.now(timezone.utc).isoformat()
        self.quality = QualityMetrics(vcf_parsing_success=parse_success)

    def prepare(
        self, risk: DrugRiskResult
    ) -> Tuple[PharmacogenomicProfile, ClinicalGuidance, ExplanationFacts]:
        profile = self.profiles_by_gene.get(risk.gene) if risk.gene else None
        pgx = build_pgx_profile(risk.gene, profile, self.variants)
        guidance = get_recommendation(risk.drug, risk.risk_assessment.risk_label)
        return pgx, guidance, build_facts(risk, pgx, guidance)

    def build(
        self,
        risk: DrugRiskResult,
        pgx: PharmacogenomicProfile,
        guidance: ClinicalGuidance,
        summary: str,
    ) -> PharmaGuardResponse:
        assessment = risk.risk_assessment
        return PharmaGuardResponse(
            patient_id=self.patient_id,
            drug=risk.drug,
            timestamp=self.timestamp,
            risk_assessment=RiskAssessment(
                risk_label=assessment.risk_label.value,
                confidence_score=assessment.confidence_score,
                severity=assessment.severity.value,
            ),
            pharmacogenomic_profile=pgx,
            clinical_recommendation=ClinicalRecommendation(**guidance.model_dump()),
            llm_generated_explanation=LLMExplanation(summary=summary),
            quality_metrics=self.quality,
        )

