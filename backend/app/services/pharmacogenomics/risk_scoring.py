"""
Risk Scoring - severity and confidence for one drug evaluation.

All logic is a pure function of its inputs.

SEVERITY
  Safe           → none
  Adjust Dosage  → moderate
  Ineffective    → moderate
  Toxic          → high
  anything else  → low

  Critical override (checked first): Toxic + PM phenotype for
  FLUOROURACIL/DPYD or AZATHIOPRINE/TPMT. Both are life-threatening
  toxicity scenarios at standard doses.

CONFIDENCE (first matching rule wins)
  0.40  drug unsupported
  0.50  phenotype missing or UNKNOWN
  0.85  gene absent, *1/*1 assumed
  0.95  explicit rule match
"""

from typing import Dict, FrozenSet, Optional, Tuple, Union

from .models import RiskAssessment, RiskLabel, Severity
from .phenotype_rules import is_unknown_phenotype

CONFIDENCE_EXPLICIT_RULE = 0.95
CONFIDENCE_FALLBACK_SAFE = 0.85
CONFIDENCE_UNKNOWN_PHENOTYPE = 0.50
CONFIDENCE_UNSUPPORTED = 0.40

POOR_METABOLIZER_PREFIX = "PM"

CRITICAL_PAIRS: FrozenSet[Tuple[str, str]] = frozenset({
    ("FLUOROURACIL", "DPYD"),
    ("AZATHIOPRINE", "TPMT"),
})

RISK_SEVERITY_TABLE: Dict[RiskLabel, Severity] = {
    RiskLabel.SAFE:          Severity.NONE,
    RiskLabel.ADJUST_DOSAGE: Severity.MODERATE,
    RiskLabel.INEFFECTIVE:   Severity.MODERATE,
    RiskLabel.TOXIC:         Severity.HIGH,
}


def resolve_confidence(
    phenotype: Optional[str], is_fallback: bool, is_unsupported: bool
) -> float:
    if is_unsupported:
        return CONFIDENCE_UNSUPPORTED
    if is_unknown_phenotype(phenotype):
        return CONFIDENCE_UNKNOWN_PHENOTYPE
    if is_fallback:
        return CONFIDENCE_FALLBACK_SAFE
    return CONFIDENCE_EXPLICIT_RULE


def resolve_severity(
    drug: str,
    gene: Optional[str],
    risk_label: RiskLabel,
    phenotype: Optional[str],
) -> Severity:
    if (
        risk_label == RiskLabel.TOXIC
        and gene is not None
        and phenotype is not None
        and phenotype.startswith(POOR_METABOLIZER_PREFIX)
        and (drug, gene) in CRITICAL_PAIRS
    ):
        return Severity.CRITICAL
    return RISK_SEVERITY_TABLE.get(risk_label, Severity.LOW)


def build_risk_assessment(
    drug: str,
    gene: Optional[str],
    risk_label: Union[RiskLabel, str],
    phenotype: Optional[str],
    is_fallback: bool = False,
    is_unsupported: bool = False,
) -> RiskAssessment:
    """
    Args:
        drug:           Uppercased drug name, e.g. "FLUOROURACIL".
        gene:           Governing gene, None for unsupported drugs.
        risk_label:     Label already resolved by the drug risk evaluator.
        phenotype:      Phenotype used for the decision, None if unavailable.
        is_fallback:    Gene was absent and *1/*1 assumed.
        is_unsupported: Drug is not in the supported set.
    """
    risk_label = RiskLabel(risk_label)
    return RiskAssessment(
        risk_label=risk_label,
        severity=resolve_severity(drug, gene, risk_label, phenotype),
        confidence_score=resolve_confidence(phenotype, is_fallback, is_unsupported),
    )
