from urllib.parse import urlparse, urlunparse


def add_scheme(url):
    """
    Add https:// prefix to a bare host reference

    Args:
        url (str): URL or hostname

    Returns:
        str: URL with a scheme
    """
    if url and not url.startswith(('http://', 'https://')):
        return 'https://' + url
    return url


def normalize_url(url, base_url):
    """
    Resolve a candidate reference against a page origin

    Protocol-relative references get https, root-relative and bare
    references are joined to the origin. No path-segment resolution
    is performed.

    Args:
        url (str): Raw reference taken from markup or a manifest
        base_url (str): Origin of the page (scheme://host)

    Returns:
        str: Absolute URL, or None for empty input
    """
    if not url:
        return None

    if url.startswith('//'):
        return 'https:' + url
    elif url.startswith('/'):
        return base_url + url
    elif url.startswith('http'):
        return url
    else:
        return base_url + '/' + url


def get_base_url(url):
    """
    Get base URL (scheme + netloc) from a URL

    Args:
        url (str): URL to get base from

    Returns:
        str: Base URL
    """
    parsed = urlparse(add_scheme(url))
    return f"{parsed.scheme}://{parsed.netloc}"


def get_domain_name(url):
    """
    Extract the bare hostname from a URL, without a leading www.

    Args:
        url (str): URL to extract domain from

    Returns:
        str: Domain name
    """
    try:
        hostname = urlparse(add_scheme(url)).hostname or ''
    except ValueError:
        return ''
    if hostname.startswith('www.'):
        hostname = hostname[4:]
    return hostname


def swap_protocol(url):
    """
    Flip the scheme of a URL between https and http

    Args:
        url (str): URL to flip

    Returns:
        str: Same URL with the other scheme, or None if the scheme is neither
    """
    try:
        parsed = urlparse(url)
    except (TypeError, ValueError):
        return None

    if parsed.scheme == 'https':
        return urlunparse(parsed._replace(scheme='http'))
    if parsed.scheme == 'http':
        return urlunparse(parsed._replace(scheme='https'))
    return None
