from pydantic import BaseModel, Field, field_validator
from typing import Dict, List, Optional
from datetime import datetime


class RiskAssessment(BaseModel):
    risk_label: str
    confidence_score: float
    severity: str


class DetectedVariant(BaseModel):
    rsid: Optional[str] = None
    star_allele: Optional[str] = None
    genotype: Optional[str] = None


class PharmacogenomicProfile(BaseModel):
    primary_gene: Optional[str] = None
    diplotype: Optional[str] = None
    phenotype: str = "Unknown"
    detected_variants: List[DetectedVariant] = Field(default_factory=list)


class ClinicalRecommendation(BaseModel):
    action: str
    recommendation: str
    monitoring: str


class LLMExplanation(BaseModel):
    summary: str


class QualityMetrics(BaseModel):
    vcf_parsing_success: bool = True


class PharmaGuardResponse(BaseModel):
    patient_id: str
    drug: str
    timestamp: str
    risk_assessment: RiskAssessment
    pharmacogenomic_profile: PharmacogenomicProfile
    clinical_recommendation: ClinicalRecommendation
    llm_generated_explanation: LLMExplanation
    quality_metrics: QualityMetrics

    @field_validator('timestamp')
    @classmethod
    def validate_timestamp(cls, v):
        try:
            datetime.fromisoformat(v.replace('Z', '+00:00'))
            return v
        except ValueError:
            raise ValueError("Timestamp must be a valid ISO 8601 string")


class ParsedVariant(BaseModel):
    chrom: str
    pos: int
    rsid: Optional[str] = None
    ref: str
    alt: str
    filter: Optional[str] = None
    gene: str = ""
    star: str = ""
    gt: Optional[str] = None
    zygosity: str
    info: Dict[str, str] = Field(default_factory=dict)


class VcfParseResponse(BaseModel):
    variants: List[ParsedVariant]
    metadata: Dict[str, str]
    errors: List[str]
