import logging
import os

import requests

from ..config import FAVICON_PROVIDERS
from ..models import SavedArtifact
from ..utils import http as http_utils
from ..utils import url as url_utils

logger = logging.getLogger(__name__)


class FaviconProviderExtractor:
    """
    Last-resort logo source backed by third-party favicon services

    Responses are small favicons already, so they are written verbatim.
    """

    def __init__(self, website_url, providers=None):
        self.domain = url_utils.get_domain_name(website_url)
        self.referer = f"https://{self.domain}"
        self.providers = providers if providers is not None else FAVICON_PROVIDERS

    def download_fallbacks(self, output_dir):
        """
        Query every provider once, independently

        Args:
            output_dir (str): Directory to write into

        Returns:
            list: SavedArtifact for each provider that succeeded
        """
        os.makedirs(output_dir, exist_ok=True)
        saved = []

        for provider in self.providers:
            artifact = self._download_provider(provider, output_dir)
            if artifact:
                saved.append(artifact)

        return saved

    def _download_provider(self, provider, output_dir):
        provider_url = provider["url"].format(domain=self.domain)
        image_format = provider["format"]

        try:
            response = http_utils.download_with_fallback(provider_url, self.referer)
        except requests.RequestException as e:
            logger.warning(f"Favicon provider {provider['source']} failed for {self.domain}: {e}")
            return None

        filename = f"{self.domain}-logo-fallback.{image_format}"
        filepath = os.path.join(output_dir, filename)
        try:
            with open(filepath, 'wb') as f:
                f.write(response.content)
        except OSError as e:
            logger.warning(f"Could not write {filepath}: {e}")
            return None

        logger.info(f"Saved {provider['source']} favicon for {self.domain} to {filepath}")
        return SavedArtifact(
            url=provider_url,
            local_path=filepath,
            filename=filename,
            format=image_format,
            source=provider["source"],
            content_type=response.headers.get('Content-Type'),
        )
