import os
from pathlib import Path

from dotenv import load_dotenv
from requests.utils import DEFAULT_ACCEPT_ENCODING

# Load overrides from a local .env file
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).resolve().parent

# Output directory for logo files (created on demand, not at import)
OUTPUT_DIR = os.getenv("SITE_LOGO_OUTPUT_DIR", "./logos")

# Pause between sites when processing a batch
BATCH_DELAY = float(os.getenv("SITE_LOGO_BATCH_DELAY", "1.0"))

# Browser-like identity sent with every request
USER_AGENT = 'Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/123.0.0.0 Safari/537.36'

COMMON_HEADERS = {
    'User-Agent': USER_AGENT,
    'Accept-Language': 'en-US,en;q=0.9',
    # Only encodings urllib3 can decode (br once brotli is installed)
    'Accept-Encoding': DEFAULT_ACCEPT_ENCODING,
    'Connection': 'keep-alive',
}

ACCEPT_HEADERS = {
    'html': 'text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8',
    'image': 'image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8',
    'json': 'application/json,text/plain;q=0.9,*/*;q=0.8',
}

# Timeouts in seconds
PAGE_TIMEOUT = 12
RESOURCE_TIMEOUT = 15
MANIFEST_TIMEOUT = 7

# Raster normalization
MAX_DIMENSION = 512
JPEG_QUALITY = 90
WEBP_QUALITY = 90

# Candidate priorities (lower is attempted first)
PRIORITY_META = 1
PRIORITY_LINK = 2
PRIORITY_MANIFEST = 3
PRIORITY_LD_JSON = 4
PRIORITY_HEADER = 6
PRIORITY_LOGO_SECTION = 7
PRIORITY_ALT_LOGO = 8
PRIORITY_COMMON_PATH = 10

# Well-known static paths probed on every site
COMMON_PATHS = [
    "/favicon.svg",
    "/logo.svg",
    "/favicon.ico",
    "/favicon.png",
    "/favicon.jpg",
    "/favicon.jpeg",
    "/favicon.gif",
    "/favicon.webp",
    "/logo.png",
    "/apple-touch-icon.png",
    "/apple-touch-icon-precomposed.png",
    "/android-chrome-192x192.png",
    "/android-chrome-512x512.png",
    "/mstile-150x150.png",
]

# Third-party favicon services used when nothing site-hosted could be saved
FAVICON_PROVIDERS = [
    {
        "url": "https://www.google.com/s2/favicons?sz=256&domain_url=https://{domain}",
        "format": "png",
        "source": "google-favicons",
    },
    {
        "url": "https://icons.duckduckgo.com/ip3/{domain}.ico",
        "format": "ico",
        "source": "duckduckgo-favicons",
    },
]

# Number of passes over the providers before reporting failure
FALLBACK_ATTEMPTS = 2
