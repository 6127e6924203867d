"""Browser automation: launching, stealth contexts and page text fetching."""

from .fetch import PageTextFetcher
from .launcher import find_browser_executable, launch_browser, resolve_executable
from .stealth import StealthOptions, create_stealth_context

__all__ = [
    "PageTextFetcher",
    "StealthOptions",
    "create_stealth_context",
    "find_browser_executable",
    "launch_browser",
    "resolve_executable",
]
