from .base import BaseExtractor
from ..config import COMMON_PATHS, PRIORITY_COMMON_PATH


class CommonPathExtractor(BaseExtractor):
    """
    Candidate extractor for well-known static icon and logo paths

    Needs no markup, so it still produces candidates when the page
    itself could not be fetched.
    """

    def _perform_extraction(self, candidates):
        for path in COMMON_PATHS:
            candidates.add(self.base_url + path, PRIORITY_COMMON_PATH, 'common-path')
