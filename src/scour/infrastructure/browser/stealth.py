"""Browser context hardening against automation fingerprinting.

Builds a Playwright context that resembles an ordinary desktop session:
realistic viewport and user agent, populated navigator properties, and
plausible WebGL vendor strings. This reduces, but does not remove,
automation signals.
"""

import json
import logging
from dataclasses import dataclass, field

from scour.config.settings import BrowserConfig

logger = logging.getLogger(__name__)

# WebGL debug extension constants
UNMASKED_VENDOR_WEBGL = 37445
UNMASKED_RENDERER_WEBGL = 37446


@dataclass
class StealthOptions:
    """Overrides for the stealth browsing context."""

    viewport_width: int = 1280
    viewport_height: int = 720
    user_agent: str | None = None  # Probed from the browser when unset
    is_mobile: bool = False
    device_scale_factor: float = 2.0
    has_touch: bool = False
    locale: str = "en-US"
    languages: list[str] = field(default_factory=lambda: ["en-US", "en"])
    hardware_concurrency: int = 8
    webgl_vendor: str = "Intel Inc."
    webgl_renderer: str = "Intel Iris OpenGL Engine"

    @classmethod
    def from_config(cls, config: BrowserConfig) -> "StealthOptions":
        return cls(
            viewport_width=config.viewport_width,
            viewport_height=config.viewport_height,
            device_scale_factor=config.device_scale_factor,
            locale=config.locale,
        )


def clean_user_agent(user_agent: str) -> str:
    """Strip headless automation markers from a user-agent string."""
    return user_agent.replace("HeadlessChrome", "Chrome").strip()


def platform_for_user_agent(user_agent: str) -> str:
    """Return a navigator.platform value consistent with the user agent."""
    if "Windows" in user_agent:
        return "Win32"
    if "Mac OS X" in user_agent or "Macintosh" in user_agent:
        return "MacIntel"
    return "Linux x86_64"


def build_init_scripts(options: StealthOptions, user_agent: str) -> list[str]:
    """Return the JavaScript patches installed before any page script runs."""
    languages = json.dumps(options.languages)
    platform = json.dumps(platform_for_user_agent(user_agent))
    vendor = json.dumps(options.webgl_vendor)
    renderer = json.dumps(options.webgl_renderer)

    webdriver = """
Object.defineProperty(Navigator.prototype, 'webdriver', {
  get: () => undefined,
  configurable: true
});
"""

    plugins = """
Object.defineProperty(navigator, 'plugins', {
  get: () => [
    {name: 'PDF Viewer', filename: 'internal-pdf-viewer', description: 'Portable Document Format', length: 1},
    {name: 'Chrome PDF Viewer', filename: 'internal-pdf-viewer', description: 'Portable Document Format', length: 1},
    {name: 'Chromium PDF Viewer', filename: 'internal-pdf-viewer', description: 'Portable Document Format', length: 1}
  ],
  configurable: true
});
"""

    navigator_props = f"""
Object.defineProperty(navigator, 'languages', {{
  get: () => {languages},
  configurable: true
}});
Object.defineProperty(navigator, 'hardwareConcurrency', {{
  get: () => {int(options.hardware_concurrency)},
  configurable: true
}});
Object.defineProperty(navigator, 'platform', {{
  get: () => {platform},
  configurable: true
}});
"""

    webgl = f"""
(() => {{
  const patch = (proto) => {{
    if (!proto) return;
    const getParameter = proto.getParameter;
    proto.getParameter = function (parameter) {{
      if (parameter === {UNMASKED_VENDOR_WEBGL}) return {vendor};
      if (parameter === {UNMASKED_RENDERER_WEBGL}) return {renderer};
      return getParameter.call(this, parameter);
    }};
  }};
  patch(window.WebGLRenderingContext && WebGLRenderingContext.prototype);
  patch(window.WebGL2RenderingContext && WebGL2RenderingContext.prototype);
}})();
"""

    return [webdriver, plugins, navigator_props, webgl]


async def probe_user_agent(browser) -> str:
    """Read the browser's default user agent from a throwaway context."""
    context = await browser.new_context()
    try:
        page = await context.new_page()
        user_agent = await page.evaluate("() => navigator.userAgent")
        await page.close()
    finally:
        await context.close()
    return user_agent


async def create_stealth_context(browser, options: StealthOptions | None = None):
    """Create a browsing context configured to resemble an organic session.

    Args:
        browser: Launched Playwright browser.
        options: Optional overrides for viewport, user agent and navigator values.

    Returns:
        Playwright BrowserContext with stealth init scripts installed.
    """
    options = options or StealthOptions()

    user_agent = options.user_agent or await probe_user_agent(browser)
    user_agent = clean_user_agent(user_agent)

    context = await browser.new_context(
        viewport={"width": options.viewport_width, "height": options.viewport_height},
        user_agent=user_agent,
        is_mobile=options.is_mobile,
        device_scale_factor=options.device_scale_factor,
        has_touch=options.has_touch,
        locale=options.locale,
    )

    for script in build_init_scripts(options, user_agent):
        await context.add_init_script(script)

    logger.debug("Stealth context created (user agent: %s)", user_agent)
    return context


__all__ = [
    "StealthOptions",
    "create_stealth_context",
    "build_init_scripts",
    "clean_user_agent",
    "platform_for_user_agent",
    "probe_user_agent",
]
