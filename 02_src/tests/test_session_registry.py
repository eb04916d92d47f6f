"""Tests for SessionRegistry."""

import pytest

from studio.errors import ConfigurationError
from studio.models import ModelVariant
from studio.sessions import (
    CODING_INSTRUCTION,
    DEFAULT_INSTRUCTION,
    LaneProfile,
    SessionRegistry,
)

from conftest import FakeProvider


class TestSessionRegistry:
    """Tests for SessionRegistry."""

    def test_open_uses_lane_profile(self, registry, fake_provider):
        chat = registry.open("chat")
        code = registry.open("code")

        assert chat.model_variant == ModelVariant.FLASH
        assert chat.system_instruction == DEFAULT_INSTRUCTION
        assert code.model_variant == ModelVariant.PRO
        assert code.system_instruction == CODING_INSTRUCTION
        assert len(fake_provider.created) == 2

    def test_open_unknown_lane_defaults(self, registry):
        session = registry.open("scratch")
        assert session.model_variant == ModelVariant.FLASH
        assert session.system_instruction == DEFAULT_INSTRUCTION

    def test_open_reuses_session(self, registry, fake_provider):
        """Repeated opens return the same session and create one chat."""
        first = registry.open("chat")
        second = registry.open("chat")

        assert first is second
        assert len(fake_provider.created) == 1

    def test_open_with_new_instruction_replaces_session(self, registry, fake_provider):
        first = registry.open("chat")
        second = registry.open("chat", system_instruction="Answer in French.")

        assert second is not first
        assert second.system_instruction == "Answer in French."
        assert second.model_variant == first.model_variant
        assert len(fake_provider.created) == 2

    def test_refresh_creates_fresh_session(self, registry, fake_provider):
        first = registry.open("chat")
        refreshed = registry.refresh("chat", ModelVariant.PRO)

        assert refreshed is not first
        assert refreshed.handle != first.handle
        assert refreshed.model_variant == ModelVariant.PRO
        assert refreshed.system_instruction == DEFAULT_INSTRUCTION
        assert registry.get("chat") is refreshed

    def test_open_after_refresh_keeps_variant(self, registry):
        refreshed = registry.refresh("chat", ModelVariant.FLASH_LITE)
        assert registry.open("chat") is refreshed

    def test_close(self, registry):
        registry.open("chat")
        registry.close("chat")

        assert registry.get("chat") is None
        assert registry.lanes() == []

    def test_close_unknown_lane_is_noop(self, registry):
        registry.close("nothing")

    def test_missing_credential(self):
        registry = SessionRegistry(FakeProvider(api_key=None))
        with pytest.raises(ConfigurationError):
            registry.open("chat")
        assert registry.get("chat") is None

    def test_custom_profiles(self, fake_provider):
        registry = SessionRegistry(
            fake_provider,
            profiles={"review": LaneProfile("review", ModelVariant.PRO, "Review code.")},
        )
        session = registry.open("review")

        assert session.model_variant == ModelVariant.PRO
        assert session.system_instruction == "Review code."
        assert registry.profile("chat") is None
