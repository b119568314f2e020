import logging
import os

import requests

from .extractors.base import CandidateSet
from .extractors.beautifulsoup import BeautifulSoupExtractor
from .extractors.common_paths import CommonPathExtractor
from .models import SavedArtifact
from .utils import http as http_utils
from .utils import image as image_utils
from .utils import url as url_utils

logger = logging.getLogger(__name__)


def fetch_page(website_url):
    """
    Fetch page markup, best effort

    Args:
        website_url (str): Page to fetch

    Returns:
        str: Page HTML, or None if the page could not be fetched
    """
    try:
        response = http_utils.fetch_html_with_fallback(website_url)
    except requests.RequestException as e:
        logger.info(f"Could not fetch {website_url}, continuing without markup: {e}")
        return None
    return response.text


def collect_candidates(website_url, html=None):
    """
    Gather logo candidates for a site, sorted by priority

    Markup rules run only when the page is available; conventional
    paths are always included.

    Args:
        website_url (str): Site to inspect
        html (str): Already fetched markup; fetched here when omitted

    Returns:
        list: Candidate objects, lowest priority value first
    """
    website_url = url_utils.add_scheme(website_url)
    candidates = CandidateSet(url_utils.get_base_url(website_url))

    if html is None:
        html = fetch_page(website_url)

    if html:
        BeautifulSoupExtractor(website_url).find_candidates(candidates, html)

    CommonPathExtractor(website_url).find_candidates(candidates)

    ordered = candidates.sorted()
    logger.info(f"Collected {len(ordered)} logo candidates for {website_url}")
    return ordered


def build_filename(domain, index, image_format):
    """First save gets no suffix, later saves get -2, -3, ..."""
    suffix = "" if index == 1 else f"-{index}"
    return f"{domain}-logo{suffix}.{image_format}"


def download_candidates(candidates, domain, output_dir, page_url):
    """
    Download and persist every obtainable candidate

    Failures skip to the next candidate; the loop does not stop at the
    first success. Existing files with the same name are overwritten.

    Args:
        candidates (list): Candidates in attempt order
        domain (str): Domain used in file names
        output_dir (str): Directory to write into
        page_url (str): Referring page for downloads

    Returns:
        list: SavedArtifact objects in save order
    """
    saved = []
    index = 1

    for candidate in candidates:
        try:
            artifact = _save_candidate(candidate, domain, output_dir, page_url, index)
        except requests.RequestException as e:
            logger.debug(f"Skipping {candidate.url}: {e}")
            continue
        except OSError as e:
            logger.warning(f"Could not write logo from {candidate.url}: {e}")
            continue
        except Exception:
            logger.exception(f"Unexpected error saving {candidate.url}, skipping")
            continue

        logger.info(f"Saved {artifact.source} logo from {artifact.url} to {artifact.local_path}")
        saved.append(artifact)
        index += 1

    return saved


def _save_candidate(candidate, domain, output_dir, page_url, index):
    response = http_utils.download_with_fallback(candidate.url, page_url)

    content_type = response.headers.get('Content-Type')
    image_format = image_utils.detect_image_format(candidate.url, content_type)
    filename = build_filename(domain, index, image_format)
    filepath = os.path.join(output_dir, filename)

    image_utils.save_image(response.content, image_format, filepath)

    return SavedArtifact(
        url=candidate.url,
        local_path=filepath,
        filename=filename,
        format=image_format,
        source=candidate.source,
        content_type=content_type,
    )
