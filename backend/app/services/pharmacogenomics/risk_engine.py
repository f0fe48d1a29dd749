"""
Risk Engine - Evaluates pharmacogenomic risk for each requested drug.

Each supported drug is governed by exactly one gene. The risk label comes
from that gene's phenotype: the phenotype's prefix ("PM", "IM", ...,
or SLCO1B1's "Poor Function" style labels) is matched against the drug's
rule table, so "PM – Poor Metabolizer" hits the "PM" rule without
comparing full strings. Prefixes within one drug's table are disjoint.

Outcomes per drug:
  - unsupported drug name       → Unknown, no gene, no phenotype
  - supported, gene not profiled → Safe, "*1/*1 assumed"
  - supported, phenotype UNKNOWN → Unknown
  - otherwise                    → first matching prefix rule, else Unknown
"""

import logging
from types import MappingProxyType
from typing import Dict, FrozenSet, List, Mapping, Optional, Sequence, Tuple

from .models import DrugRiskResult, GeneProfile, RiskLabel
from .phenotype_rules import is_unknown_phenotype
from .risk_scoring import build_risk_assessment

logger = logging.getLogger(__name__)

FALLBACK_PHENOTYPE = "*1/*1 assumed"

SUPPORTED_DRUGS: FrozenSet[str] = frozenset({
    "CODEINE",
    "WARFARIN",
    "CLOPIDOGREL",
    "SIMVASTATIN",
    "AZATHIOPRINE",
    "FLUOROURACIL",
})

DRUG_GENE_MAP: Mapping[str, str] = MappingProxyType({
    "CODEINE":      "CYP2D6",
    "WARFARIN":     "CYP2C9",
    "CLOPIDOGREL":  "CYP2C19",
    "SIMVASTATIN":  "SLCO1B1",
    "AZATHIOPRINE": "TPMT",
    "FLUOROURACIL": "DPYD",
})

# Phenotype prefix → risk label, checked in order
DRUG_RULES: Mapping[str, Tuple[Tuple[str, RiskLabel], ...]] = MappingProxyType({
    # CYP2D6 converts codeine → morphine: PM gets no effect, UM a toxic dose
    "CODEINE": (
        ("PM", RiskLabel.INEFFECTIVE),
        ("IM", RiskLabel.ADJUST_DOSAGE),
        ("NM", RiskLabel.SAFE),
        ("RM", RiskLabel.TOXIC),
        ("UM", RiskLabel.TOXIC),
    ),
    "WARFARIN": (
        ("PM", RiskLabel.TOXIC),
        ("IM", RiskLabel.ADJUST_DOSAGE),
        ("NM", RiskLabel.SAFE),
    ),
    # Prodrug: CYP2C19 PM cannot activate it
    "CLOPIDOGREL": (
        ("PM", RiskLabel.INEFFECTIVE),
        ("IM", RiskLabel.ADJUST_DOSAGE),
        ("NM", RiskLabel.SAFE),
        ("RM", RiskLabel.SAFE),
    ),
    "SIMVASTATIN": (
        ("Poor Function",      RiskLabel.TOXIC),
        ("Decreased Function", RiskLabel.ADJUST_DOSAGE),
        ("Normal Function",    RiskLabel.SAFE),
    ),
    "AZATHIOPRINE": (
        ("PM", RiskLabel.TOXIC),
        ("IM", RiskLabel.ADJUST_DOSAGE),
        ("NM", RiskLabel.SAFE),
    ),
    "FLUOROURACIL": (
        ("PM", RiskLabel.TOXIC),
        ("IM", RiskLabel.ADJUST_DOSAGE),
        ("NM", RiskLabel.SAFE),
    ),
})


def parse_drugs(drugs_param: Optional[str]) -> List[str]:
    """
    Split on commas, trim, uppercase, drop blanks.
    "CODEINE, warfarin , " → ["CODEINE", "WARFARIN"]
    """
    if drugs_param is None or not drugs_param.strip():
        return []
    tokens = (token.strip().upper() for token in drugs_param.split(","))
    return [t for t in tokens if t]


def resolve_risk_label(drug: str, phenotype: str) -> RiskLabel:
    for prefix, label in DRUG_RULES.get(drug, ()):
        if phenotype.startswith(prefix):
            return label
    return RiskLabel.UNKNOWN


class RiskEngine:
    """Evaluates requested drugs against interpreted gene profiles."""

    def evaluate(
        self, gene_profiles: Sequence[GeneProfile], drugs_param: Optional[str]
    ) -> List[DrugRiskResult]:
        """
        Args:
            gene_profiles: Profiles from InterpretationService.
            drugs_param:   Raw comma-separated drug list, e.g. "CODEINE, warfarin".

        Returns:
            One DrugRiskResult per requested drug, in request order.
        """
        requested = parse_drugs(drugs_param)
        if not requested:
            return []

        by_gene: Dict[str, GeneProfile] = {}
        for profile in gene_profiles or ():
            by_gene.setdefault(profile.gene, profile)

        results = [self.evaluate_drug(drug, by_gene) for drug in requested]
        logger.info(
            "Evaluated %d drugs: %s",
            len(results),
            ", ".join(f"{r.drug}={r.risk_assessment.risk_label.value}" for r in results),
        )
        return results

    def evaluate_drug(self, drug: str, profiles_by_gene: Mapping[str, GeneProfile]) -> DrugRiskResult:
        if drug not in SUPPORTED_DRUGS:
            assessment = build_risk_assessment(
                drug, None, RiskLabel.UNKNOWN, None, is_unsupported=True
            )
            return DrugRiskResult(drug=drug, risk_assessment=assessment)

        gene = DRUG_GENE_MAP[drug]
        profile = profiles_by_gene.get(gene)

        if profile is None:
            assessment = build_risk_assessment(
                drug, gene, RiskLabel.SAFE, FALLBACK_PHENOTYPE, is_fallback=True
            )
            return DrugRiskResult(
                drug=drug, gene=gene, phenotype=FALLBACK_PHENOTYPE, risk_assessment=assessment
            )

        phenotype = profile.phenotype
        if is_unknown_phenotype(phenotype):
            label = RiskLabel.UNKNOWN
        else:
            label = resolve_risk_label(drug, phenotype)

        assessment = build_risk_assessment(drug, gene, label, phenotype)
        return DrugRiskResult(
            drug=drug, gene=gene, phenotype=phenotype, risk_assessment=assessment
        )


def create_risk_engine() -> RiskEngine:
    """Factory function to create a RiskEngine instance."""
    return RiskEngine()
