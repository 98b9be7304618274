"""
Browser lifecycle for inspections.

Launches Chromium through Playwright, opens one page at the requested
viewport and waits for it to settle before handing it to the engine.
"""

import logging
import time
from contextlib import contextmanager
from typing import Dict, Iterator, Optional

from playwright.sync_api import Page, sync_playwright
from playwright.sync_api import Error as PlaywrightError

from fontseek.errors import BrowserError
from fontseek.util import DEFAULT_VIEWPORT

logger = logging.getLogger('fontseek.browser')

PAGE_LOAD_TIMEOUT = 60000
BODY_TIMEOUT = 15000
NETWORK_IDLE_TIMEOUT = 15000
SETTLE_MS = 1000


@contextmanager
def open_page(
    url: str,
    viewport: Optional[Dict[str, int]] = None,
    headless: bool = True,
) -> Iterator[Page]:
    start = time.time()
    with sync_playwright() as p:
        try:
            browser = p.chromium.launch(headless=headless)
        except PlaywrightError as exc:
            raise BrowserError(f"Browser launch failed: {exc}") from exc
        try:
            context = browser.new_context(
                viewport=viewport or DEFAULT_VIEWPORT,
                device_scale_factor=1,
            )
            page = context.new_page()
            stage = "goto"
            try:
                page.goto(url, wait_until="domcontentloaded", timeout=PAGE_LOAD_TIMEOUT)
                stage = "wait_body"
                page.wait_for_selector("body", state="attached", timeout=BODY_TIMEOUT)
            except PlaywrightError as exc:
                raise BrowserError(f"Failed to open {url} at {stage}: {exc}") from exc
            try:
                page.wait_for_load_state("networkidle", timeout=NETWORK_IDLE_TIMEOUT)
            except PlaywrightError:
                logger.debug(f"{url} never reached networkidle; continuing")
            page.wait_for_timeout(SETTLE_MS)
            logger.info(f"Page ready in {time.time() - start:.2f}s: {url}")
            yield page
        finally:
            browser.close()
