"""Tests for the stealth context, executable discovery and page text fetching."""

import asyncio
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from scour.config.settings import BrowserConfig
from scour.core.exceptions import BrowserUnavailableError
from scour.infrastructure.browser import PageTextFetcher, StealthOptions, create_stealth_context, launcher
from scour.infrastructure.browser.stealth import build_init_scripts, clean_user_agent, platform_for_user_agent

HEADLESS_UA = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko) HeadlessChrome/120.0 Safari/537.36"
)


def _browser_with_probe(user_agent=HEADLESS_UA):
    probe_page = MagicMock()
    probe_page.evaluate = AsyncMock(return_value=user_agent)
    probe_page.close = AsyncMock()

    probe_context = MagicMock()
    probe_context.new_page = AsyncMock(return_value=probe_page)
    probe_context.close = AsyncMock()

    context = MagicMock()
    context.add_init_script = AsyncMock()

    browser = MagicMock()
    browser.new_context = AsyncMock(side_effect=[probe_context, context])
    return browser, probe_context, context


class TestStealthContext:
    def test_probes_and_cleans_user_agent(self):
        browser, probe_context, context = _browser_with_probe()

        result = asyncio.run(create_stealth_context(browser))

        assert result is context
        probe_context.close.assert_awaited_once()
        kwargs = browser.new_context.await_args_list[1].kwargs
        assert "HeadlessChrome" not in kwargs["user_agent"]
        assert "Chrome/120.0" in kwargs["user_agent"]
        assert kwargs["viewport"] == {"width": 1280, "height": 720}
        assert kwargs["device_scale_factor"] == 2.0
        assert kwargs["is_mobile"] is False
        assert kwargs["has_touch"] is False
        assert kwargs["locale"] == "en-US"
        assert context.add_init_script.await_count == 4

    def test_explicit_user_agent_skips_probe(self):
        context = MagicMock()
        context.add_init_script = AsyncMock()
        browser = MagicMock()
        browser.new_context = AsyncMock(return_value=context)

        options = StealthOptions(user_agent="Mozilla/5.0 (Windows NT 10.0) Chrome/119", viewport_width=1920)
        asyncio.run(create_stealth_context(browser, options))

        browser.new_context.assert_awaited_once()
        kwargs = browser.new_context.await_args.kwargs
        assert kwargs["viewport"]["width"] == 1920
        assert kwargs["user_agent"] == "Mozilla/5.0 (Windows NT 10.0) Chrome/119"

    def test_options_from_config(self):
        config = BrowserConfig(viewport_width=1440, device_scale_factor=1.0, locale="de-DE")
        options = StealthOptions.from_config(config)
        assert options.viewport_width == 1440
        assert options.device_scale_factor == 1.0
        assert options.locale == "de-DE"

    def test_init_scripts_cover_fingerprint_surfaces(self):
        scripts = build_init_scripts(StealthOptions(), HEADLESS_UA)
        combined = "\n".join(scripts)
        assert "'webdriver'" in combined
        assert "'plugins'" in combined
        assert '["en-US", "en"]' in combined
        assert "hardwareConcurrency" in combined
        assert '"Linux x86_64"' in combined
        assert "37445" in combined and "37446" in combined
        assert "WebGL2RenderingContext" in combined

    def test_user_agent_helpers(self):
        assert clean_user_agent(" HeadlessChrome/1 ") == "Chrome/1"
        assert platform_for_user_agent("Mozilla/5.0 (Windows NT 10.0)") == "Win32"
        assert platform_for_user_agent("Mozilla/5.0 (Macintosh; Intel Mac OS X 14_0)") == "MacIntel"


class TestLauncher:
    def test_configured_path_wins(self, tmp_path):
        exe = tmp_path / "chrome"
        exe.write_text("")
        assert launcher.find_browser_executable(BrowserConfig(executable_path=str(exe))) == str(exe)

    def test_missing_configured_path(self, tmp_path):
        config = BrowserConfig(executable_path=str(tmp_path / "nope"))
        assert launcher.find_browser_executable(config) is None

        playwright = MagicMock()
        playwright.chromium.executable_path = str(tmp_path)
        assert launcher.resolve_executable(playwright, config) is None

    def test_falls_back_to_bundled_chromium(self, tmp_path):
        bundled = tmp_path / "chromium"
        bundled.write_text("")
        playwright = MagicMock()
        playwright.chromium.executable_path = str(bundled)

        with patch.object(launcher, "_candidate_paths", return_value=[]):
            assert launcher.resolve_executable(playwright, BrowserConfig()) == str(bundled)

    def test_launch_without_executable_raises(self, tmp_path):
        playwright = MagicMock()
        playwright.chromium.executable_path = str(tmp_path / "missing")

        with patch.object(launcher, "_candidate_paths", return_value=[]):
            with pytest.raises(BrowserUnavailableError):
                asyncio.run(launcher.launch_browser(playwright, BrowserConfig()))

    def test_launch_passes_executable_and_headless(self, tmp_path):
        exe = tmp_path / "chrome"
        exe.write_text("")
        playwright = MagicMock()
        playwright.chromium.launch = AsyncMock(return_value="browser")

        config = BrowserConfig(executable_path=str(exe))
        result = asyncio.run(launcher.launch_browser(playwright, config, headless=True))

        assert result == "browser"
        playwright.chromium.launch.assert_awaited_once_with(executable_path=str(exe), headless=True)


class TestPageTextFetcher:
    def test_failure_returns_empty_string(self):
        fetcher = PageTextFetcher(BrowserConfig())
        failing = AsyncMock(side_effect=RuntimeError("net::ERR_NAME_NOT_RESOLVED"))
        with patch.object(fetcher, "_fetch_async", failing):
            assert fetcher.fetch_text("https://nowhere.invalid") == ""

    def test_returns_page_text(self):
        fetcher = PageTextFetcher(BrowserConfig())
        with patch.object(fetcher, "_fetch_async", AsyncMock(return_value="Hello")):
            assert fetcher.fetch_text("https://example.com") == "Hello"
