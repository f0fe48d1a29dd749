"""
Internal data models for pharmacogenomics service.
These models represent the per-request results of diplotype resolution,
phenotype lookup and drug risk evaluation. All are immutable once built.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import Optional
from enum import Enum


class RiskLabel(str, Enum):
    """Closed risk label vocabulary. No other value is ever produced."""
    SAFE = "Safe"
    ADJUST_DOSAGE = "Adjust Dosage"
    TOXIC = "Toxic"
    INEFFECTIVE = "Ineffective"
    UNKNOWN = "Unknown"


class Severity(str, Enum):
    """Closed severity vocabulary."""
    NONE = "none"
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"
    CRITICAL = "critical"


class Resolution(BaseModel):
    """Two alleles resolved for one gene. Consumed immediately by phenotype lookup."""
    model_config = ConfigDict(frozen=True)

    allele1: str = Field(..., description="First allele (e.g., *1)")
    allele2: str = Field(..., description="Second allele (e.g., *2)")
    hard_limit_exceeded: bool = Field(
        False, description="More than two distinct heterozygous alleles were seen"
    )


class GeneProfile(BaseModel):
    """Interpretation result for one gene of the required panel."""
    model_config = ConfigDict(frozen=True)

    gene: str = Field(..., description="Gene symbol (e.g., CYP2C19)")
    allele1: str = Field("*1", description="First allele")
    allele2: str = Field("*1", description="Second allele")
    phenotype: str = Field(..., description="Phenotype label (e.g., IM – Intermediate Metabolizer)")

    @computed_field
    @property
    def diplotype(self) -> str:
        # Resolution order, never re-sorted
        return f"{self.allele1}/{self.allele2}"


class RiskAssessment(BaseModel):
    """Risk assessment result for a drug-gene interaction."""
    model_config = ConfigDict(frozen=True)

    risk_label: RiskLabel = Field(..., description="Risk classification label")
    severity: Severity = Field(..., description="Severity: none, low, moderate, high, critical")
    confidence_score: float = Field(..., ge=0.0, le=1.0, description="Confidence score (0-1)")


class DrugRiskResult(BaseModel):
    """Evaluation of one requested drug."""
    model_config = ConfigDict(frozen=True)

    drug: str = Field(..., description="Uppercased drug name")
    gene: Optional[str] = Field(None, description="Governing gene; None for unsupported drugs")
    phenotype: Optional[str] = Field(None, description="Phenotype used for the decision")
    risk_assessment: RiskAssessment = Field(..., description="Risk assessment")
