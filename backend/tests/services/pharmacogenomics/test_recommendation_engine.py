"""
Tests for the static clinical guidance table.
"""

import pytest
from app.services.pharmacogenomics.models import RiskLabel
from app.services.pharmacogenomics.recommendation_engine import (
    GUIDANCE_TABLE,
    UNKNOWN_GUIDANCE,
    get_recommendation,
)
from app.services.pharmacogenomics.risk_engine import SUPPORTED_DRUGS


class TestGuidanceTable:

    def test_complete_for_supported_drugs(self):
        for drug in SUPPORTED_DRUGS:
            for label in RiskLabel:
                assert (drug, label) in GUIDANCE_TABLE, f"missing {drug}/{label.value}"

    def test_entries_have_text(self):
        for key, guidance in GUIDANCE_TABLE.items():
            assert guidance.action.strip(), key
            assert guidance.recommendation.strip(), key
            assert guidance.monitoring.strip(), key


class TestGetRecommendation:

    def test_lookup_by_enum(self):
        guidance = get_recommendation("CODEINE", RiskLabel.INEFFECTIVE)

        assert "codeine" in guidance.action.lower()

    def test_lookup_by_string_and_lowercase_drug(self):
        assert get_recommendation("fluorouracil", "Toxic") == GUIDANCE_TABLE[("FLUOROURACIL", RiskLabel.TOXIC)]

    @pytest.mark.parametrize("drug,label", [
        ("ASPIRIN", RiskLabel.UNKNOWN),
        ("ASPIRIN", RiskLabel.SAFE),
        (None, RiskLabel.SAFE),
        ("CODEINE", None),
        ("CODEINE", "Dangerous"),
    ])
    def test_fallback(self, drug, label):
        assert get_recommendation(drug, label) == UNKNOWN_GUIDANCE
