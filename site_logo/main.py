#!/usr/bin/env python3
import argparse
import json
import logging
import os
import sys
import time

import uvicorn

from . import pipeline
from .config import BATCH_DELAY, FALLBACK_ATTEMPTS, OUTPUT_DIR
from .extractors.providers import FaviconProviderExtractor
from .models import ExtractionResult
from .utils import url as url_utils

logger = logging.getLogger(__name__)


def ensure_artifacts(saved, website_url, output_dir, attempts=FALLBACK_ATTEMPTS):
    """
    Make sure at least one artifact exists, using favicon providers

    Does nothing when artifacts were already saved. Otherwise the
    providers are queried, up to `attempts` passes, until one succeeds.

    Args:
        saved (list): Artifacts saved so far
        website_url (str): Site being processed
        output_dir (str): Directory to write into
        attempts (int): Passes over the provider list

    Returns:
        list: The artifacts passed in, or the provider artifacts
    """
    if saved:
        return saved

    providers = FaviconProviderExtractor(website_url)
    for attempt in range(attempts):
        logger.info(f"No logo saved for {providers.domain}, trying favicon providers (pass {attempt + 1}/{attempts})")
        try:
            fallback = providers.download_fallbacks(output_dir)
        except OSError as e:
            logger.warning(f"Favicon fallback could not prepare {output_dir}: {e}")
            continue
        if fallback:
            return fallback

    return []


def extract_logo(url, output_dir=None):
    """
    Extract and save logos for a website

    Runs page fetch, candidate collection and the download loop, then the
    provider fallback when nothing was saved. Never raises.

    Args:
        url (str): URL of the website
        output_dir (str): Directory for the logo files (created if absent)

    Returns:
        ExtractionResult: Outcome for the site
    """
    output_dir = output_dir or OUTPUT_DIR
    website_url = url_utils.add_scheme(url)
    domain = url_utils.get_domain_name(website_url)
    saved = []
    error = None

    try:
        os.makedirs(output_dir, exist_ok=True)
        candidates = pipeline.collect_candidates(website_url)
        saved = pipeline.download_candidates(candidates, domain, output_dir, website_url)
        if not saved:
            error = "Failed to download any logos"
    except Exception as e:
        logger.exception(f"Logo extraction failed for {website_url}")
        error = str(e) or e.__class__.__name__

    saved = ensure_artifacts(saved, website_url, output_dir)

    if not saved:
        return ExtractionResult(success=False, domain=domain, error=error)

    return ExtractionResult(success=True, domain=domain, logos=saved)


def batch_extract_logos(urls, output_dir=None, delay=BATCH_DELAY):
    """
    Extract logos for several sites, one after another

    Args:
        urls (list): Website URLs
        output_dir (str): Directory for the logo files
        delay (float): Pause in seconds between sites

    Returns:
        list: ExtractionResult per URL, in input order
    """
    results = []

    for i, url in enumerate(urls):
        if i > 0 and delay:
            time.sleep(delay)

        try:
            result = extract_logo(url, output_dir)
        except Exception as e:
            logger.exception(f"Unexpected failure for {url}")
            result = ExtractionResult(success=False, domain=url_utils.get_domain_name(url), error=str(e))

        if result.success:
            logger.info(f"{result.domain}: saved {result.count} logo(s)")
        else:
            logger.warning(f"{result.domain}: failed ({result.error})")
        results.append(result)

    return results


def main_cli(argv=None):
    """
    Main CLI entry point for the application
    """
    parser = argparse.ArgumentParser(description="Extract and download logos for websites")
    parser.add_argument("urls", nargs="*", help="URLs of the websites to extract logos from")
    parser.add_argument("--output-dir", default=OUTPUT_DIR, help="Directory to save logos to")
    parser.add_argument("--delay", type=float, default=BATCH_DELAY, help="Seconds to wait between sites")
    parser.add_argument("--json", action="store_true", help="Print result records as JSON")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--api", action="store_true", help="Start the API server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind the API server to")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind the API server to")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )

    if args.api:
        main_api(args.host, args.port)
        return 0

    if not args.urls:
        parser.error("at least one URL is required unless --api is given")

    results = batch_extract_logos(args.urls, args.output_dir, args.delay)

    if args.json:
        print(json.dumps([result.to_dict() for result in results], indent=2))
    else:
        for result in results:
            if result.success:
                print(f"{result.domain}: saved {result.count} logo(s), primary {result.primary.local_path}")
            else:
                print(f"{result.domain}: failed - {result.error}")

    return 0 if all(result.success for result in results) else 1


def main_api(host: str = "127.0.0.1", port: int = 8000):
    """
    Start the API server

    Args:
        host (str): Host to bind the API server to
        port (int): Port to bind the API server to
    """
    uvicorn.run("site_logo.api.routes:app", host=host, port=port)


if __name__ == "__main__":
    sys.exit(main_cli())
