import logging

import requests

from . import url as url_utils
from ..config import (
    ACCEPT_HEADERS,
    COMMON_HEADERS,
    MANIFEST_TIMEOUT,
    PAGE_TIMEOUT,
    RESOURCE_TIMEOUT,
)

logger = logging.getLogger(__name__)


def build_headers(kind="html", referer=None):
    """
    Build browser-like request headers

    Args:
        kind (str): One of 'html', 'image' or 'json'
        referer (str): Referring URL; its origin is also sent when it parses

    Returns:
        dict: Header map
    """
    headers = dict(COMMON_HEADERS)

    if referer:
        origin = url_utils.get_base_url(referer) if referer.startswith(('http://', 'https://')) else None
        if origin:
            headers['Origin'] = origin
        headers['Referer'] = referer

    headers['Accept'] = ACCEPT_HEADERS.get(kind, ACCEPT_HEADERS['html'])
    if kind == 'html':
        headers['Upgrade-Insecure-Requests'] = '1'

    return headers


def _get(url, headers, timeout):
    response = requests.get(url, headers=headers, timeout=timeout, allow_redirects=True)
    response.raise_for_status()
    return response


def fetch_html_with_fallback(page_url):
    """
    Fetch a page, retrying once with the protocol swapped

    Args:
        page_url (str): Page to fetch

    Returns:
        requests.Response: Successful response

    Raises:
        requests.RequestException: The error of the first attempt when both fail
    """
    headers = build_headers("html", url_utils.get_base_url(page_url))
    try:
        return _get(page_url, headers, PAGE_TIMEOUT)
    except requests.RequestException as err:
        logger.debug(f"Page fetch failed for {page_url}: {err}")
        swapped = url_utils.swap_protocol(page_url)
        if swapped:
            try:
                return _get(swapped, headers, PAGE_TIMEOUT)
            except requests.RequestException as swap_err:
                logger.debug(f"Page fetch failed for {swapped}: {swap_err}")
        raise err


def download_with_fallback(resource_url, referer):
    """
    Download a binary resource with referer and protocol fallbacks

    Attempts, in order: the full referer, the referer's origin only,
    and the protocol-swapped resource URL with the origin referer.

    Args:
        resource_url (str): Image URL to download
        referer (str): URL of the referring page

    Returns:
        requests.Response: Successful response (bytes in .content)

    Raises:
        requests.RequestException: The error of the origin-referer attempt
    """
    try:
        origin_referer = url_utils.get_base_url(referer)
    except ValueError:
        origin_referer = referer

    try:
        return _get(resource_url, build_headers("image", referer), RESOURCE_TIMEOUT)
    except requests.RequestException as err1:
        logger.debug(f"Download with page referer failed for {resource_url}: {err1}")

    try:
        return _get(resource_url, build_headers("image", origin_referer), RESOURCE_TIMEOUT)
    except requests.RequestException as err2:
        logger.debug(f"Download with origin referer failed for {resource_url}: {err2}")
        swapped = url_utils.swap_protocol(resource_url)
        if swapped:
            try:
                return _get(swapped, build_headers("image", origin_referer), RESOURCE_TIMEOUT)
            except requests.RequestException as err3:
                logger.debug(f"Download failed for {swapped}: {err3}")
        raise err2


def fetch_json(url, referer, timeout=MANIFEST_TIMEOUT):
    """
    Fetch and decode a JSON document such as a web app manifest

    Raises:
        requests.RequestException: On transport or HTTP errors
        ValueError: If the body is not valid JSON
    """
    response = _get(url, build_headers("json", referer), timeout)
    return response.json()
