from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class ExplanationFacts(BaseModel):
    """
    Internal contract between the deterministic risk pipeline and the
    narrative generator. Every value is already computed; the generator
    reads them and can never change them.
    """
    model_config = ConfigDict(frozen=True)

    drug: str = Field(..., description="Uppercased drug name (e.g., CODEINE)")
    gene: Optional[str] = Field(None, description="Governing gene (e.g., CYP2D6)")
    diplotype: Optional[str] = Field(None, description="Patient diplotype (e.g., *1/*4)")
    phenotype: Optional[str] = Field(None, description="Phenotype (e.g., IM)")
    risk_label: str = Field(..., description="Risk label (e.g., Adjust Dosage)")
    severity: str = Field(..., description="Severity (e.g., moderate)")
    action: Optional[str] = Field(None, description="Advised clinical action from the guidance table")
