"""Tests for the shopping assistant."""

import pytest

from blytz.catalog import CatalogSnapshot
from blytz.chat import DEFAULT_PERSONA, ChatAssistant
from blytz.errors import ValidationError


class RecordingGenerator:
    def __init__(self, reply="Grab the NeonX Runner Vapor for $149.99!"):
        self.reply = reply
        self.calls = []

    def generate_text(self, system, user):
        self.calls.append((system, user))
        return self.reply


class FailingGenerator:
    def __init__(self):
        self.calls = 0

    def generate_text(self, system, user):
        self.calls += 1
        raise RuntimeError("quota exceeded")


@pytest.fixture
def catalog():
    return CatalogSnapshot.fallback()


class TestChatAssistant:
    def test_one_request_per_turn(self, catalog):
        generator = RecordingGenerator()
        assistant = ChatAssistant(generator, catalog)

        reply = assistant.send("  running shoes?  ")

        assert reply.role == "assistant"
        assert reply.text == generator.reply
        assert len(generator.calls) == 1
        system, user = generator.calls[0]
        assert system == DEFAULT_PERSONA
        assert user.startswith("Catalog:\n- NeonX Runner Vapor: $149.99 (Active)")
        assert user.endswith("Customer: running shoes?")

    def test_transcript_alternates(self, catalog):
        assistant = ChatAssistant(RecordingGenerator(), catalog)
        assistant.send("hi")
        assistant.send("cheapest item?")

        assert [t.role for t in assistant.transcript] == ["user", "assistant", "user", "assistant"]
        assert assistant.transcript[2].text == "cheapest item?"

    def test_failure_returns_fallback_without_retry(self, catalog):
        generator = FailingGenerator()
        assistant = ChatAssistant(generator, catalog, fallback="Offline, sorry.")

        reply = assistant.send("hello")

        assert reply.text == "Offline, sorry."
        assert generator.calls == 1
        assert len(assistant.transcript) == 2

    def test_default_fallback_from_settings(self, catalog):
        assistant = ChatAssistant(FailingGenerator(), catalog)

        assert assistant.send("hello").text == "Connection to the network lost. Try again in a moment."

    def test_blank_message_rejected(self, catalog):
        generator = RecordingGenerator()
        assistant = ChatAssistant(generator, catalog)

        with pytest.raises(ValidationError):
            assistant.send("   ")

        assert generator.calls == []
        assert assistant.transcript == []

    def test_reset(self, catalog):
        assistant = ChatAssistant(RecordingGenerator(), catalog)
        assistant.send("hi")
        assistant.reset()

        assert assistant.transcript == []

    def test_storefront_wires_catalog(self, storefront, backend):
        generator = RecordingGenerator()
        assistant = storefront.chat(generator)
        assistant.send("drones?")

        assert assistant.catalog.source == "backend"
        assert "Velocity Drone MK-II: $899.00 (Tech)" in generator.calls[0][1]
