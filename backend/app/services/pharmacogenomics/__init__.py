"""
Pharmacogenomics Service

Deterministic interpretation-and-risk pipeline: diplotype resolution,
phenotype lookup, drug risk evaluation and severity/confidence scoring.
"""

from .models import (
    RiskLabel,
    Severity,
    Resolution,
    GeneProfile,
    RiskAssessment,
    DrugRiskResult,
)
from .phenotype_rules import UNKNOWN_PHENOTYPE, lookup_phenotype
from .phenotype_mapper import DiplotypeResolver, PhenotypeMapper, normalize_allele
from .interpretation import InterpretationService, REQUIRED_PANEL
from .risk_engine import RiskEngine, create_risk_engine, parse_drugs
from .risk_scoring import build_risk_assessment
from .recommendation_engine import ClinicalGuidance, get_recommendation
from .config import (
    get_config,
    update_config,
    reset_config,
    load_config_from_file,
    save_config_to_file,
)

__all__ = [
    # Models
    'RiskLabel',
    'Severity',
    'Resolution',
    'GeneProfile',
    'RiskAssessment',
    'DrugRiskResult',

    # Phenotype Mapping
    'UNKNOWN_PHENOTYPE',
    'lookup_phenotype',
    'DiplotypeResolver',
    'PhenotypeMapper',
    'normalize_allele',

    # Interpretation
    'InterpretationService',
    'REQUIRED_PANEL',

    # Risk Engine
    'RiskEngine',
    'create_risk_engine',
    'parse_drugs',
    'build_risk_assessment',
    'ClinicalGuidance',
    'get_recommendation',

    # Configuration
    'get_config',
    'update_config',
    'reset_config',
    'load_config_from_file',
    'save_config_to_file',
]
