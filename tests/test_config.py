"""Tests for runtime configuration."""

import pytest
from pydantic import ValidationError

from dircensus.config import DEFAULT_SPINNER_FRAMES, BrowserConfig, default_workers


class TestBrowserConfig:
    def test_defaults(self):
        config = BrowserConfig()
        assert config.workers == default_workers()
        assert config.poll_interval == 0.1
        assert config.spinner_frames == DEFAULT_SPINNER_FRAMES
        assert config.show_hidden is True

    def test_default_workers_positive(self):
        assert default_workers() >= 1

    def test_rejects_zero_workers(self):
        with pytest.raises(ValidationError):
            BrowserConfig(workers=0)

    def test_rejects_non_positive_poll_interval(self):
        with pytest.raises(ValidationError):
            BrowserConfig(poll_interval=0)

    def test_rejects_empty_spinner(self):
        with pytest.raises(ValidationError):
            BrowserConfig(spinner_frames=[])

    def test_spinner_default_not_shared(self):
        config = BrowserConfig()
        config.spinner_frames.append("!!!")
        assert BrowserConfig().spinner_frames == DEFAULT_SPINNER_FRAMES


class TestFromOptions:
    def test_none_options_use_defaults(self):
        config = BrowserConfig.from_options(workers=None, poll_interval=None)
        assert config.workers == default_workers()
        assert config.poll_interval == 0.1

    def test_given_options_applied(self):
        config = BrowserConfig.from_options(workers=3, poll_interval=0.5, show_hidden=False)
        assert config.workers == 3
        assert config.poll_interval == 0.5
        assert config.show_hidden is False
