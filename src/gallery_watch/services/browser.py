"""Render client-side pages with Selenium and hand them to Scrapy selectors."""

from __future__ import annotations

from typing import Optional
import logging

from scrapy.http import HtmlResponse
from selenium import webdriver
from selenium.webdriver.chrome.options import Options
from selenium.webdriver.common.by import By
from selenium.webdriver.support import expected_conditions as EC
from selenium.webdriver.support.ui import WebDriverWait


logger = logging.getLogger(__name__)


class BrowserRenderer:
    """Loads a page in headless Chrome, local or behind a remote WebDriver URL."""

    def __init__(self, webdriver_url: Optional[str] = None, timeout: float = 30.0) -> None:
        self.webdriver_url = webdriver_url
        self.timeout = timeout

    def _launch(self) -> webdriver.Remote:
        options = Options()
        options.add_argument("--headless")
        if self.webdriver_url:
            logger.debug("Connecting to remote WebDriver at %s", self.webdriver_url)
            return webdriver.Remote(command_executor=self.webdriver_url, options=options)
        return webdriver.Chrome(options=options)

    def render(self, url: str, wait_selector: Optional[str] = None) -> HtmlResponse:
        """Navigate to ``url``, wait for ``wait_selector`` and return the rendered DOM."""
        driver = self._launch()
        try:
            driver.get(url)
            if wait_selector:
                # The shop is client-side rendered; wait until the app mounts content
                WebDriverWait(driver, self.timeout).until(
                    EC.presence_of_element_located((By.CSS_SELECTOR, wait_selector))
                )
            return HtmlResponse(
                url=str(driver.current_url or url),
                body=str(driver.page_source),
                encoding="utf-8",
            )
        finally:
            driver.quit()
