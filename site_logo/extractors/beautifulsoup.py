import json
import logging

import requests
from bs4 import BeautifulSoup

from .base import BaseExtractor
from ..utils import http as http_utils
from ..utils import url as url_utils
from ..config import (
    PRIORITY_ALT_LOGO,
    PRIORITY_HEADER,
    PRIORITY_LD_JSON,
    PRIORITY_LINK,
    PRIORITY_LOGO_SECTION,
    PRIORITY_MANIFEST,
    PRIORITY_META,
)

logger = logging.getLogger(__name__)

DEFAULT_PARSER = 'html5lib'

META_IMAGE_SELECTOR = (
    'meta[property="og:image"][content], '
    'meta[name="twitter:image"][content], '
    'meta[itemprop="image"][content], '
    'meta[name="msapplication-TileImage"][content]'
)

LINK_ICON_SELECTOR = (
    'link[rel="apple-touch-icon"], '
    'link[rel="apple-touch-icon-precomposed"], '
    'link[rel="icon"], '
    'link[rel="shortcut icon"], '
    'link[rel="mask-icon"]'
)

HEADER_LOGO_SELECTOR = (
    'header .logo img[src], '
    'header #logo img[src], '
    'header img[alt*="logo" i][src]'
)

LOGO_SECTION_SELECTOR = '.logo img[src], #logo img[src]'

ALT_LOGO_SELECTOR = 'img[alt*="logo" i][src]'


class BeautifulSoupExtractor(BaseExtractor):
    """
    Candidate extractor using BeautifulSoup to analyze HTML

    Collects logo candidates from head metadata, icon links, JSON-LD,
    header and logo-classed sections, alt text, and the web app manifest.
    """

    def _perform_extraction(self, candidates, html):
        """
        Extract candidates from a fetched page

        Args:
            candidates (CandidateSet): Shared accumulator
            html (str): Page markup
        """
        soup = BeautifulSoup(html, DEFAULT_PARSER)
        head = soup.head or soup

        # Meta image tags
        for meta in head.select(META_IMAGE_SELECTOR):
            candidates.add(meta.get('content'), PRIORITY_META, 'meta')

        # Link icon tags, possibly in several sizes
        for link in head.select(LINK_ICON_SELECTOR):
            candidates.add(link.get('href'), PRIORITY_LINK, 'link', sizes=link.get('sizes'))

        # schema.org Organization logo
        for logo in self._extract_ld_json_logos(soup):
            candidates.add(logo, PRIORITY_LD_JSON, 'ld+json')

        # Page header region
        for img in soup.select(HEADER_LOGO_SELECTOR):
            candidates.add(img.get('src'), PRIORITY_HEADER, 'header')

        # Generic logo containers anywhere
        for img in soup.select(LOGO_SECTION_SELECTOR):
            candidates.add(img.get('src'), PRIORITY_LOGO_SECTION, 'logo-section')

        for img in soup.select(ALT_LOGO_SELECTOR):
            candidates.add(img.get('src'), PRIORITY_ALT_LOGO, 'img[alt*=logo]')

        # Web app manifest icons
        manifest = head.select_one('link[rel="manifest"][href]')
        if manifest:
            for icon in self._fetch_manifest_icons(manifest.get('href')):
                candidates.add(icon.get('src'), PRIORITY_MANIFEST, 'manifest', sizes=icon.get('sizes'))

    def _fetch_manifest_icons(self, href):
        """
        Fetch the icons array of a web app manifest

        Args:
            href (str): Manifest reference from the link tag

        Returns:
            list: Icon dicts with 'src' and optional 'sizes', empty on any failure
        """
        manifest_url = url_utils.normalize_url(href, self.base_url)
        if not manifest_url:
            return []

        try:
            data = http_utils.fetch_json(manifest_url, self.website_url)
        except (requests.RequestException, ValueError) as e:
            logger.debug(f"Ignoring manifest {manifest_url}: {e}")
            return []

        icons = data.get('icons') if isinstance(data, dict) else None
        if not isinstance(icons, list):
            return []

        return [icon for icon in icons if isinstance(icon, dict) and icon.get('src')]

    def _extract_ld_json_logos(self, soup):
        """
        Extract logo references from schema.org JSON-LD blocks

        Returns:
            list: Logo URLs in document order
        """
        logos = []

        for script in soup.find_all('script', {'type': 'application/ld+json'}):
            if not script.string:
                continue
            try:
                data = json.loads(script.string)
            except ValueError as e:
                logger.debug(f"Skipping malformed JSON-LD block: {e}")
                continue

            items = data if isinstance(data, list) else [data]
            expanded = []
            for item in items:
                if isinstance(item, dict) and isinstance(item.get('@graph'), list):
                    expanded.extend(item['@graph'])
                else:
                    expanded.append(item)

            for item in expanded:
                if not isinstance(item, dict):
                    continue
                for holder in (item, item.get('publisher'), item.get('organization')):
                    if isinstance(holder, dict):
                        logo = _logo_url(holder.get('logo'))
                        if logo:
                            logos.append(logo)

        return logos


def _logo_url(logo):
    # logo may be a URL, an ImageObject, or a list of either
    if isinstance(logo, str):
        return logo
    if isinstance(logo, dict):
        value = logo.get('url') or logo.get('contentUrl')
        return value if isinstance(value, str) else None
    if isinstance(logo, list) and logo:
        return _logo_url(logo[0])
    return None
