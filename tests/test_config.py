import pytest

from arcade_ai.config import AssistantSettings, ConfigProvider


class TestConfigProvider:
    """Settings validation, change notification and environment loading."""

    def test_defaults(self):
        settings = ConfigProvider().get_config()
        assert settings == AssistantSettings()
        assert settings.difficulty_level == 0.5
        assert settings.assistance_intensity == 0.7
        assert settings.educational_mode is True
        assert settings.debug_mode is False
        assert settings.show_confidence is True
        assert settings.show_alternatives is False

    def test_numbers_are_clamped(self, config):
        config.set_difficulty_level(3)
        assert config.get_config().difficulty_level == 1.0
        config.set_assistance_intensity(-1)
        assert config.get_config().assistance_intensity == 0.0

    @pytest.mark.parametrize("bad", [float("nan"), float("inf"), "high", None])
    def test_non_finite_values_are_dropped(self, config, bad):
        config.set_difficulty_level(0.2)
        config.set_difficulty_level(bad)
        assert config.get_config().difficulty_level == 0.2

    def test_unknown_key_raises(self, config):
        with pytest.raises(ValueError):
            config.update_config(speed=3)

    def test_overrides_at_construction(self):
        provider = ConfigProvider(debug_mode=True, difficulty_level=0.1)
        assert provider.get_config().debug_mode is True
        assert provider.get_config().difficulty_level == 0.1

    def test_listeners_fire_only_on_change(self, config):
        seen = []
        config.subscribe(seen.append)
        config.set_debug_mode(True)
        config.set_debug_mode(True)
        config.update_config(show_alternatives=True, educational_mode=False)
        assert len(seen) == 2
        assert seen[-1].show_alternatives is True
        assert seen[-1].educational_mode is False

    def test_unsubscribe(self, config):
        seen = []
        unsubscribe = config.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        config.set_debug_mode(True)
        assert seen == []

    def test_reset_restores_defaults(self, config):
        seen = []
        config.set_difficulty_level(0.9)
        config.subscribe(seen.append)
        config.reset()
        assert config.get_config() == AssistantSettings()
        assert len(seen) == 1

    def test_as_dict(self, config):
        assert config.as_dict()["difficulty_level"] == 0.5

    def test_from_env(self):
        provider = ConfigProvider.from_env({
            "ARCADE_AI_DIFFICULTY_LEVEL": "0.2",
            "ARCADE_AI_DEBUG_MODE": "yes",
            "ARCADE_AI_SHOW_CONFIDENCE": "0",
            "ARCADE_AI_ASSISTANCE_INTENSITY": "lots",
        })
        settings = provider.get_config()
        assert settings.difficulty_level == 0.2
        assert settings.debug_mode is True
        assert settings.show_confidence is False
        assert settings.assistance_intensity == 0.7
