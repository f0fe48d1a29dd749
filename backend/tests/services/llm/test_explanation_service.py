"""
Tests for the narrative explanation service. No network: the Groq client
is replaced with stubs.
"""

import asyncio

import httpx
import pytest
from app.schemas.internal_contracts import ExplanationFacts
from app.services.llm.explanation_service import FALLBACK_SUMMARY, build_prompt, generate_explanation
from app.services.llm.groq_client import GroqClient
from app.services.pharmacogenomics.config import update_config


class StubClient:
    def __init__(self, text=None, error=None):
        self.text = text
        self.error = error
        self.calls = []

    async def generate_text(self, system_prompt, prompt):
        self.calls.append((system_prompt, prompt))
        if self.error:
            raise self.error
        return self.text


@pytest.fixture
def facts():
    return ExplanationFacts(
        drug="CODEINE",
        gene="CYP2D6",
        diplotype="*4/*4",
        phenotype="PM",
        risk_label="Ineffective",
        severity="moderate",
        action="Avoid codeine — use alternative analgesic",
    )


class TestGenerateExplanation:

    def test_returns_generated_text(self, facts):
        client = StubClient(text="  Codeine will not work for this patient.  ")

        summary = asyncio.run(generate_explanation(facts, client=client))

        assert summary == "Codeine will not work for this patient."
        assert len(client.calls) == 1

    def test_prompt_carries_facts(self, facts):
        client = StubClient(text="ok")

        asyncio.run(generate_explanation(facts, client=client))

        _, prompt = client.calls[0]
        assert "Drug: CODEINE" in prompt
        assert "Patient diplotype: *4/*4" in prompt
        assert "Risk label: Ineffective" in prompt

    @pytest.mark.parametrize("text", [None, "", "   "])
    def test_empty_response_falls_back(self, facts, text):
        assert asyncio.run(generate_explanation(facts, client=StubClient(text=text))) == FALLBACK_SUMMARY

    def test_client_error_falls_back(self, facts):
        client = StubClient(error=RuntimeError("boom"))

        assert asyncio.run(generate_explanation(facts, client=client)) == FALLBACK_SUMMARY

    def test_disabled_skips_client(self, facts):
        update_config(**{"llm.enabled": False})
        client = StubClient(text="should not be used")

        assert asyncio.run(generate_explanation(facts, client=client)) == FALLBACK_SUMMARY
        assert client.calls == []

    def test_no_api_key_falls_back(self, facts):
        assert asyncio.run(generate_explanation(facts, client=GroqClient(api_key=""))) == FALLBACK_SUMMARY


class TestBuildPrompt:

    def test_missing_values_rendered_unknown(self):
        prompt = build_prompt(ExplanationFacts(drug="ASPIRIN", risk_label="Unknown", severity="low"))

        assert "Governing gene: Unknown" in prompt
        assert "Patient diplotype: Unknown" in prompt


class TestGroqClient:

    def test_not_configured_without_key(self):
        client = GroqClient(api_key="")

        assert not client.configured
        assert asyncio.run(client.generate_text("sys", "prompt")) is None

    def test_http_error_returns_none(self, monkeypatch):
        client = GroqClient(api_key="test-key")

        async def failing_post(payload):
            request = httpx.Request("POST", client.config.api_url)
            raise httpx.HTTPStatusError(
                "401", request=request, response=httpx.Response(401, request=request)
            )

        monkeypatch.setattr(client, "_post", failing_post)

        assert asyncio.run(client.generate_text("sys", "prompt")) is None

    def test_extracts_message_content(self, monkeypatch):
        client = GroqClient(api_key="test-key")

        async def fake_post(payload):
            assert payload["messages"][0] == {"role": "system", "content": "sys"}
            return {"choices": [{"message": {"content": "narrative"}}]}

        monkeypatch.setattr(client, "_post", fake_post)

        assert asyncio.run(client.generate_text("sys", "prompt")) == "narrative"

    def test_malformed_payload_returns_none(self, monkeypatch):
        client = GroqClient(api_key="test-key")

        async def fake_post(payload):
            return {"choices": []}

        monkeypatch.setattr(client, "_post", fake_post)

        assert asyncio.run(client.generate_text("sys", "prompt")) is None
