"""Chromium executable discovery and launch."""

import logging
import os
import sys
from pathlib import Path

from playwright.async_api import Error as PlaywrightError

from scour.config.settings import BrowserConfig
from scour.core.exceptions import BrowserUnavailableError

logger = logging.getLogger(__name__)


def _candidate_paths() -> list[Path]:
    """Well-known Chrome install locations for the current platform."""
    candidates: list[Path] = []
    if sys.platform == "darwin":
        candidates.append(Path("/Applications/Google Chrome.app/Contents/MacOS/Google Chrome"))
        candidates.append(Path.home() / "Applications" / "Google Chrome.app" / "Contents" / "MacOS" / "Google Chrome")
    elif sys.platform == "win32":
        for env_var in ("PROGRAMFILES", "PROGRAMFILES(X86)", "LOCALAPPDATA"):
            root = os.environ.get(env_var)
            if root:
                candidates.append(Path(root) / "Google" / "Chrome" / "Application" / "chrome.exe")
    else:
        candidates.extend(
            Path(p)
            for p in (
                "/usr/bin/google-chrome",
                "/usr/bin/google-chrome-stable",
                "/opt/google/chrome/chrome",
                "/usr/bin/chromium",
                "/usr/bin/chromium-browser",
            )
        )
    return candidates


def find_browser_executable(config: BrowserConfig) -> str | None:
    """Return a local Chromium-family executable, or None.

    The configured path wins; otherwise well-known install locations are tried.
    """
    if config.executable_path:
        path = Path(config.executable_path).expanduser()
        if path.exists():
            return str(path)
        logger.warning("Configured browser executable does not exist: %s", path)
        return None

    for candidate in _candidate_paths():
        if candidate.exists():
            logger.debug("Found Chrome at %s", candidate)
            return str(candidate)
    return None


def resolve_executable(playwright, config: BrowserConfig) -> str | None:
    """Resolve the executable to launch, falling back to Playwright's bundled Chromium."""
    executable = find_browser_executable(config)
    if executable:
        return executable
    if config.executable_path:
        return None

    bundled = playwright.chromium.executable_path
    if bundled and Path(bundled).exists():
        logger.debug("Using Playwright's bundled Chromium at %s", bundled)
        return bundled
    return None


async def launch_browser(playwright, config: BrowserConfig, headless: bool | None = None):
    """Launch Chromium.

    Raises:
        BrowserUnavailableError: If no executable exists or launching fails.
    """
    executable = resolve_executable(playwright, config)
    if executable is None:
        raise BrowserUnavailableError(
            "Failed to find a Chromium executable. Install Chrome or run 'playwright install chromium'."
        )

    try:
        return await playwright.chromium.launch(
            executable_path=executable,
            headless=config.headless if headless is None else headless,
        )
    except PlaywrightError as exc:
        raise BrowserUnavailableError(f"Failed to launch Chromium at {executable}: {exc}") from exc


__all__ = ["find_browser_executable", "resolve_executable", "launch_browser"]
