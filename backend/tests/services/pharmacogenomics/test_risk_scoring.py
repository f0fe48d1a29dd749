"""
Tests for severity and confidence scoring.
"""

import pytest
from pydantic import ValidationError

from app.services.pharmacogenomics.models import RiskLabel, Severity
from app.services.pharmacogenomics.phenotype_rules import IM, NM, PM, UNKNOWN_PHENOTYPE
from app.services.pharmacogenomics.risk_scoring import (
    CONFIDENCE_EXPLICIT_RULE,
    CONFIDENCE_FALLBACK_SAFE,
    CONFIDENCE_UNKNOWN_PHENOTYPE,
    CONFIDENCE_UNSUPPORTED,
    build_risk_assessment,
    resolve_confidence,
    resolve_severity,
)


class TestSeverity:

    @pytest.mark.parametrize("label,expected", [
        (RiskLabel.SAFE, Severity.NONE),
        (RiskLabel.ADJUST_DOSAGE, Severity.MODERATE),
        (RiskLabel.INEFFECTIVE, Severity.MODERATE),
        (RiskLabel.TOXIC, Severity.HIGH),
        (RiskLabel.UNKNOWN, Severity.LOW),
    ])
    def test_base_table(self, label, expected):
        assert resolve_severity("CODEINE", "CYP2D6", label, NM) == expected

    @pytest.mark.parametrize("drug,gene", [
        ("FLUOROURACIL", "DPYD"),
        ("AZATHIOPRINE", "TPMT"),
    ])
    def test_critical_override(self, drug, gene):
        assert resolve_severity(drug, gene, RiskLabel.TOXIC, PM) == Severity.CRITICAL

    @pytest.mark.parametrize("drug,gene,label,phenotype", [
        ("WARFARIN", "CYP2C9", RiskLabel.TOXIC, PM),
        ("SIMVASTATIN", "SLCO1B1", RiskLabel.TOXIC, "Poor Function – High Statin Myopathy Risk"),
        ("FLUOROURACIL", "DPYD", RiskLabel.TOXIC, IM),
        ("FLUOROURACIL", "DPYD", RiskLabel.ADJUST_DOSAGE, PM),
        ("FLUOROURACIL", "TPMT", RiskLabel.TOXIC, PM),
        ("AZATHIOPRINE", None, RiskLabel.TOXIC, PM),
        ("AZATHIOPRINE", "TPMT", RiskLabel.TOXIC, None),
    ])
    def test_no_override_outside_critical_pairs(self, drug, gene, label, phenotype):
        assert resolve_severity(drug, gene, label, phenotype) != Severity.CRITICAL


class TestConfidence:

    def test_explicit_rule(self):
        assert resolve_confidence(NM, False, False) == CONFIDENCE_EXPLICIT_RULE == 0.95

    def test_fallback(self):
        assert resolve_confidence("*1/*1 assumed", True, False) == CONFIDENCE_FALLBACK_SAFE == 0.85

    @pytest.mark.parametrize("phenotype", [None, UNKNOWN_PHENOTYPE])
    def test_unknown_phenotype(self, phenotype):
        assert resolve_confidence(phenotype, False, False) == CONFIDENCE_UNKNOWN_PHENOTYPE == 0.50

    def test_unsupported_takes_precedence(self):
        assert resolve_confidence(None, True, True) == CONFIDENCE_UNSUPPORTED == 0.40


class TestBuildRiskAssessment:

    def test_accepts_string_label(self):
        assessment = build_risk_assessment("FLUOROURACIL", "DPYD", "Toxic", PM)

        assert assessment.risk_label == RiskLabel.TOXIC
        assert assessment.severity == Severity.CRITICAL
        assert assessment.confidence_score == 0.95

    def test_rejects_unknown_label(self):
        with pytest.raises(ValueError):
            build_risk_assessment("CODEINE", "CYP2D6", "Dangerous", NM)

    def test_assessment_is_frozen(self):
        assessment = build_risk_assessment("CODEINE", "CYP2D6", RiskLabel.SAFE, NM)

        with pytest.raises(ValidationError):
            assessment.confidence_score = 0.1
