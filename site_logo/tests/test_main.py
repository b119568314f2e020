import os
import tempfile
import unittest
from unittest.mock import patch

import requests

from site_logo.main import batch_extract_logos, ensure_artifacts, extract_logo, main_cli
from site_logo.models import ExtractionResult, SavedArtifact

GOOGLE_FAVICON = "https://www.google.com/s2/favicons?sz=256&domain_url=https://example.com"
DDG_FAVICON = "https://icons.duckduckgo.com/ip3/example.com.ico"


def make_response(url, content, content_type):
    response = requests.Response()
    response.status_code = 200
    response._content = content
    response.url = url
    response.headers['Content-Type'] = content_type
    return response


class DownloadRecorder:
    """Serves a fixed URL map and records every requested URL"""

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    def __call__(self, url, referer):
        self.calls.append((url, referer))
        if url not in self.responses:
            raise requests.HTTPError(f"403 Client Error: Forbidden for url: {url}")
        content, content_type = self.responses[url]
        return make_response(url, content, content_type)


class TestExtractLogo(unittest.TestCase):
    """Test cases for the orchestrator"""

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.output_dir = os.path.join(self.temp_dir.name, "nested", "logos")

        page_patcher = patch('site_logo.utils.http.fetch_html_with_fallback',
                             side_effect=requests.HTTPError("403 Client Error: Forbidden"))
        self.mock_fetch_page = page_patcher.start()
        self.addCleanup(page_patcher.stop)

    def tearDown(self):
        self.temp_dir.cleanup()

    def _patch_downloads(self, responses):
        recorder = DownloadRecorder(responses)
        patcher = patch('site_logo.utils.http.download_with_fallback', side_effect=recorder)
        patcher.start()
        self.addCleanup(patcher.stop)
        return recorder

    def test_blocked_page_still_uses_common_paths(self):
        self._patch_downloads({
            "https://www.example.com/favicon.ico": (b"\x00\x00\x01\x00ico", "image/x-icon"),
        })

        result = extract_logo("https://www.example.com", self.output_dir)

        self.assertTrue(result.success)
        self.assertEqual(result.domain, "example.com")
        self.assertEqual(result.count, 1)
        self.assertEqual(result.primary.source, "common-path")
        self.assertEqual(result.primary.filename, "example.com-logo.ico")
        self.assertTrue(os.path.isfile(result.primary.local_path))

    def test_falls_through_to_providers(self):
        recorder = self._patch_downloads({
            GOOGLE_FAVICON: (b"\x89PNG\r\n\x1a\nfake", "image/png"),
        })

        result = extract_logo("https://example.com", self.output_dir)

        self.assertTrue(result.success)
        self.assertEqual([a.source for a in result.logos], ["google-favicons"])
        self.assertEqual(result.primary.filename, "example.com-logo-fallback.png")
        self.assertEqual(result.primary.url, GOOGLE_FAVICON)
        with open(result.primary.local_path, 'rb') as f:
            self.assertEqual(f.read(), b"\x89PNG\r\n\x1a\nfake")
        # Providers are fetched with the site as referer
        self.assertIn((DDG_FAVICON, "https://example.com"), recorder.calls)

    def test_both_providers_succeed(self):
        self._patch_downloads({
            GOOGLE_FAVICON: (b"png", "image/png"),
            DDG_FAVICON: (b"ico", "image/x-icon"),
        })

        result = extract_logo("https://example.com", self.output_dir)

        self.assertEqual([a.filename for a in result.logos],
                         ["example.com-logo-fallback.png", "example.com-logo-fallback.ico"])
        self.assertEqual(result.to_dict()["count"], 2)

    def test_total_failure(self):
        recorder = self._patch_downloads({})

        result = extract_logo("https://example.com", self.output_dir)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "Failed to download any logos")
        self.assertEqual(result.to_dict(), {
            "success": False,
            "domain": "example.com",
            "error": "Failed to download any logos",
        })
        # Two passes over the providers
        self.assertEqual([url for url, _ in recorder.calls].count(GOOGLE_FAVICON), 2)
        self.assertEqual([url for url, _ in recorder.calls].count(DDG_FAVICON), 2)

    def test_unexpected_error_still_tries_providers(self):
        self._patch_downloads({DDG_FAVICON: (b"ico", "image/x-icon")})

        with patch('site_logo.pipeline.collect_candidates', side_effect=RuntimeError("parser exploded")):
            result = extract_logo("https://example.com", self.output_dir)

        self.assertTrue(result.success)
        self.assertEqual(result.primary.source, "duckduckgo-favicons")

    def test_unexpected_error_reported(self):
        self._patch_downloads({})

        with patch('site_logo.pipeline.collect_candidates', side_effect=RuntimeError("parser exploded")):
            result = extract_logo("https://example.com", self.output_dir)

        self.assertFalse(result.success)
        self.assertEqual(result.error, "parser exploded")

    def test_success_record_mirrors_primary(self):
        self._patch_downloads({
            "https://example.com/logo.svg": (b"<svg></svg>", "image/svg+xml"),
            "https://example.com/favicon.ico": (b"ico", "image/x-icon"),
        })

        record = extract_logo("https://example.com", self.output_dir).to_dict()

        self.assertTrue(record["success"])
        self.assertEqual(record["count"], 2)
        self.assertEqual(record["logo_url"], "https://example.com/logo.svg")
        self.assertEqual(record["filename"], "example.com-logo.svg")
        self.assertEqual(record["format"], "svg")
        self.assertEqual(record["source"], "common-path")
        self.assertEqual(record["content_type"], "image/svg+xml")
        self.assertEqual(record["logos"][1]["filename"], "example.com-logo-2.ico")


class TestEnsureArtifacts(unittest.TestCase):
    """Test cases for the provider fallback step"""

    def test_existing_artifacts_skip_providers(self):
        saved = [SavedArtifact(url="https://example.com/logo.svg", local_path="/tmp/x.svg",
                               filename="x.svg", format="svg", source="link")]

        with patch('site_logo.utils.http.download_with_fallback') as mock_download:
            self.assertIs(ensure_artifacts(saved, "https://example.com", "/tmp"), saved)

        mock_download.assert_not_called()


class TestBatchExtractLogos(unittest.TestCase):
    """Test cases for batch processing"""

    @patch('site_logo.main.time.sleep')
    @patch('site_logo.main.extract_logo')
    def test_failures_do_not_abort_batch(self, mock_extract, mock_sleep):
        mock_extract.side_effect = [
            ExtractionResult(success=False, domain="a.com", error="Failed to download any logos"),
            RuntimeError("unexpected"),
            ExtractionResult(success=False, domain="c.com", error="Failed to download any logos"),
        ]

        results = batch_extract_logos(["https://a.com", "https://www.b.com", "https://c.com"], "/tmp/logos", delay=1.0)

        self.assertEqual([r.domain for r in results], ["a.com", "b.com", "c.com"])
        self.assertEqual(results[1].error, "unexpected")
        self.assertEqual(mock_sleep.call_count, 2)
        mock_sleep.assert_called_with(1.0)


class TestMainCli(unittest.TestCase):
    """Test cases for the command line entry point"""

    @patch('site_logo.main.batch_extract_logos')
    def test_exit_status(self, mock_batch):
        ok = ExtractionResult(success=True, domain="a.com", logos=[
            SavedArtifact(url="https://a.com/logo.svg", local_path="logos/a.com-logo.svg",
                          filename="a.com-logo.svg", format="svg", source="link")
        ])
        failed = ExtractionResult(success=False, domain="b.com", error="Failed to download any logos")

        mock_batch.return_value = [ok]
        self.assertEqual(main_cli(["https://a.com", "--output-dir", "logos", "--delay", "0"]), 0)
        mock_batch.assert_called_with(["https://a.com"], "logos", 0.0)

        mock_batch.return_value = [ok, failed]
        self.assertEqual(main_cli(["https://a.com", "https://b.com", "--json"]), 1)

    @patch('site_logo.main.uvicorn.run')
    def test_api_flag_starts_server(self, mock_run):
        self.assertEqual(main_cli(["--api", "--port", "9000"]), 0)
        mock_run.assert_called_once_with("site_logo.api.routes:app", host="127.0.0.1", port=9000)


if __name__ == '__main__':
    unittest.main()
