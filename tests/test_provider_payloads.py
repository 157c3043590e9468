"""Tests for provider payload parsing."""

from brandlens.schemas.providers import (
    GeminiPayload,
    PerplexityCitation,
    PerplexityPayload,
    TextOnlyPayload,
    parse_provider_payload,
)


def test_perplexity_mixed_citations():
    payload = parse_provider_payload("Perplexity", {
        "citations": ["https://a.com", {"link": "https://b.com", "title": "B"}],
    })

    assert isinstance(payload, PerplexityPayload)
    assert payload.citations[0] == "https://a.com"
    assert isinstance(payload.citations[1], PerplexityCitation)
    assert payload.citations[1].target == "https://b.com"
    assert payload.related_sources == []


def test_gemini_payload():
    payload = parse_provider_payload("gemini", {
        "candidates": [{
            "groundingMetadata": {
                "groundingAttributions": [{"sourceId": {"groundingChunkId": 2}}],
            },
        }],
    })

    assert isinstance(payload, GeminiPayload)
    attribution = payload.first_candidate.groundingMetadata.groundingAttributions[0]
    assert attribution.chunk_id == "2"
    assert attribution.web is None


def test_gemini_without_candidates():
    payload = parse_provider_payload("google", {})

    assert isinstance(payload, GeminiPayload)
    assert payload.first_candidate is None


def test_text_only_providers():
    assert isinstance(parse_provider_payload("openai", {"citations": ["https://a.com"]}), TextOnlyPayload)
    assert isinstance(parse_provider_payload("anthropic", None), TextOnlyPayload)
    assert isinstance(parse_provider_payload("", {}), TextOnlyPayload)


def test_invalid_payloads_fall_back():
    assert isinstance(parse_provider_payload("perplexity", "raw string"), TextOnlyPayload)
    assert isinstance(parse_provider_payload("perplexity", {"citations": 42}), TextOnlyPayload)
    assert isinstance(parse_provider_payload("google", {"candidates": "nope"}), TextOnlyPayload)
