"""Tests for the KEGG HTTP gateway."""

from concurrent.futures import ThreadPoolExecutor
from unittest.mock import Mock, patch

import pytest
import requests

from kegg_tool.config import GatewayConfig
from kegg_tool.errors import RemoteCallFailure
from kegg_tool.gateway import KEGGGateway


def mock_response(content=b"", status_code=200):
    response = Mock()
    response.content = content
    response.status_code = status_code
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Client Error")
    else:
        response.raise_for_status.return_value = None
    return response


class TestKEGGGateway:
    """Test cases for KEGGGateway."""

    @pytest.fixture
    def gateway(self):
        return KEGGGateway(GatewayConfig(base_url="https://rest.example.org", timeout_seconds=5.0))

    def test_session_headers(self, gateway):
        assert gateway.session.headers['User-Agent'] == "KEGG-Tool/1.0.0"
        assert gateway.session.headers['Accept'] == 'text/plain'

    def test_retries_disabled(self, gateway):
        adapter = gateway.session.get_adapter("https://rest.example.org/info/kegg")

        assert adapter.max_retries.total == 0

    def test_url_for(self, gateway):
        assert gateway.url_for('/info/kegg') == "https://rest.example.org/info/kegg"

    @patch('requests.Session.get')
    def test_fetch_text(self, mock_get, gateway):
        mock_get.return_value = mock_response(b"cpd:C00031\tD-Glucose\n")

        text = gateway.fetch_text('/find/compound/glucose')

        assert text == "cpd:C00031\tD-Glucose\n"
        mock_get.assert_called_once_with("https://rest.example.org/find/compound/glucose", timeout=5.0)

    @patch('requests.Session.get')
    def test_fetch_bytes(self, mock_get, gateway):
        mock_get.return_value = mock_response(b'\x89PNG\r\n')

        assert gateway.fetch_bytes('/get/hsa00010/image') == b'\x89PNG\r\n'

    @patch('requests.Session.get')
    def test_empty_body_is_not_a_failure(self, mock_get, gateway):
        mock_get.return_value = mock_response(b"")

        assert gateway.fetch_text('/find/glycan/nothing') == ""

    @patch('requests.Session.get')
    def test_status_failure(self, mock_get, gateway):
        mock_get.return_value = mock_response(b"", status_code=404)

        with pytest.raises(RemoteCallFailure) as exc_info:
            gateway.fetch_text('/get/C99999')

        assert str(exc_info.value) == "Request failed with status code 404"
        assert exc_info.value.status_code == 404
        assert exc_info.value.endpoint == '/get/C99999'

    @patch('requests.Session.get')
    def test_timeout(self, mock_get, gateway):
        mock_get.side_effect = requests.exceptions.Timeout("read timed out")

        with pytest.raises(RemoteCallFailure, match="Request timed out after 5.0s"):
            gateway.fetch_text('/list/organism')

    @patch('requests.Session.get')
    def test_connection_error(self, mock_get, gateway):
        mock_get.side_effect = requests.exceptions.ConnectionError("Name or service not known")

        with pytest.raises(RemoteCallFailure, match="Name or service not known") as exc_info:
            gateway.fetch_text('/info/kegg')

        assert exc_info.value.status_code is None

    @patch('requests.Session.get')
    def test_no_retry_after_failure(self, mock_get, gateway):
        mock_get.return_value = mock_response(b"", status_code=503)

        with pytest.raises(RemoteCallFailure):
            gateway.fetch_text('/info/kegg')

        assert mock_get.call_count == 1

    @patch('requests.Session.get')
    def test_undecodable_body(self, mock_get, gateway):
        mock_get.return_value = mock_response(b'\xff\xfe\xfa')

        with pytest.raises(RemoteCallFailure, match="not valid UTF-8"):
            gateway.fetch_text('/get/C00031')

    def test_session_reused_within_thread(self, gateway):
        assert gateway.session is gateway.session

    def test_session_per_thread(self, gateway):
        """Test that worker threads never share the calling thread's session."""
        main_session = gateway.session

        with ThreadPoolExecutor(max_workers=1) as pool:
            worker_session = pool.submit(lambda: gateway.session).result()

        assert worker_session is not main_session
        assert worker_session.headers['User-Agent'] == "KEGG-Tool/1.0.0"

    def test_injected_session_shared_across_threads(self):
        session = Mock()
        gateway = KEGGGateway(session=session)

        with ThreadPoolExecutor(max_workers=1) as pool:
            assert pool.submit(lambda: gateway.session).result() is session
        assert gateway.session is session

    def test_injected_session(self):
        session = Mock()
        session.get.return_value = mock_response(b"ok")
        gateway = KEGGGateway(session=session)

        assert gateway.fetch_text('/info/kegg') == "ok"
        session.get.assert_called_once_with("https://rest.kegg.jp/info/kegg", timeout=30.0)
