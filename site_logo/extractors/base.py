from abc import ABC, abstractmethod
import logging
import time

from ..models import Candidate
from ..utils import url as url_utils
from ..utils import image as image_utils

logger = logging.getLogger(__name__)


class CandidateSet:
    """
    Ordered, de-duplicated collection of logo candidates

    The first insertion of a normalized URL wins; later duplicates are
    ignored even when they come from a higher priority rule.
    """

    def __init__(self, base_url):
        self.base_url = base_url
        self._candidates = []
        self._seen = set()

    def add(self, src, priority, source, sizes=None):
        """
        Normalize, filter and record a candidate reference

        Args:
            src (str): Raw reference from markup, a manifest or a path list
            priority (int): Priority of the extraction rule
            source (str): Tag of the extraction rule
            sizes (str): Optional declared sizes

        Returns:
            bool: True if the candidate was added
        """
        if not src or not isinstance(src, str):
            return False

        normalized = url_utils.normalize_url(src.strip(), self.base_url)
        if not normalized or not image_utils.is_valid_image_url(normalized):
            return False
        if normalized in self._seen:
            return False

        self._seen.add(normalized)
        self._candidates.append(Candidate(url=normalized, priority=priority, source=source, sizes=sizes))
        return True

    def sorted(self):
        """Candidates ordered by priority, insertion order breaking ties"""
        return sorted(self._candidates, key=lambda c: c.priority)

    def __len__(self):
        return len(self._candidates)

    def __iter__(self):
        return iter(self._candidates)


class BaseExtractor(ABC):
    """
    Base class for candidate extractors

    Concrete extractors add the candidates their rule finds to a shared
    CandidateSet.
    """

    def __init__(self, website_url):
        """
        Initialize the extractor

        Args:
            website_url (str): URL of the website to extract candidates from
        """
        self.website_url = url_utils.add_scheme(website_url)
        self.base_url = url_utils.get_base_url(self.website_url)
        self.domain = url_utils.get_domain_name(self.website_url)
        self.start_time = None

    def find_candidates(self, candidates, *args, **kwargs):
        """
        Add this extractor's candidates to the collection

        Args:
            candidates (CandidateSet): Shared accumulator

        Returns:
            int: Number of candidates added
        """
        self.start_time = time.time()
        before = len(candidates)
        self._perform_extraction(candidates, *args, **kwargs)
        added = len(candidates) - before
        logger.debug(f"{self._get_method_name()} added {added} candidates for {self.domain}")
        self._log_execution_time()
        return added

    @abstractmethod
    def _perform_extraction(self, candidates, *args, **kwargs):
        """
        Perform the actual candidate extraction

        This method should be implemented by concrete extractor classes.
        """

    def _get_method_name(self):
        return self.__class__.__name__.replace('Extractor', '').lower()

    def _log_execution_time(self):
        if self.start_time:
            execution_time = time.time() - self.start_time
            logger.debug(f"Execution time for {self._get_method_name()}: {execution_time:.2f} seconds")
