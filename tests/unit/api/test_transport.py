"""Tests for RequestsTransport, including round trips against a local mock server."""

import json
import socket
import threading
import unittest
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from unittest.mock import MagicMock, PropertyMock

import requests

from jira_cloud_client.api import (
    HttpRequest,
    JiraApi,
    RequestsTransport,
    SubmitErrorKind,
    TransportError,
)
from jira_cloud_client.codec import JsonCodec
from jira_cloud_client.models import BuildApiResponse, BuildsRequest


class MockJiraHandler(BaseHTTPRequestHandler):
    """Records POSTs and answers with the server's canned reply."""

    def do_POST(self):
        length = int(self.headers.get('Content-Length', 0))
        self.server.received.append({
            'method': 'POST',
            'path': self.path,
            'headers': dict(self.headers),
            'body': self.rfile.read(length).decode('utf-8'),
        })
        status, body = self.server.reply
        self.send_response(status)
        self.send_header('Content-Type', 'application/json')
        if self.server.location:
            self.send_header('Location', self.server.location)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def do_GET(self):
        self.server.received.append({'method': 'GET', 'path': self.path, 'headers': dict(self.headers)})
        body = b'{"ok": true}'
        self.send_response(200)
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


class TestRequestsTransportAgainstServer(unittest.TestCase):

    def setUp(self):
        self.server = ThreadingHTTPServer(('127.0.0.1', 0), MockJiraHandler)
        self.server.received = []
        self.server.reply = (200, b'{}')
        self.server.location = None
        self.thread = threading.Thread(target=self.server.serve_forever, daemon=True)
        self.thread.start()
        port = self.server.server_address[1]
        self.template = f"http://127.0.0.1:{port}/jira/builds/0.1/cloud/%s/bulk"
        self.transport = RequestsTransport(timeout_seconds=5, user_agent='jira-cloud-client-tests')
        # Talk to the local server directly even if proxy variables are set
        self.transport.session.trust_env = False
        self.api = JiraApi(self.transport, JsonCodec(), self.template)

    def tearDown(self):
        self.transport.close()
        self.server.shutdown()
        self.server.server_close()

    def test_round_trip(self):
        self.server.reply = (202, json.dumps({
            "acceptedBuilds": [{"pipelineId": "pipe", "buildNumber": 12}],
            "rejectedBuilds": [],
            "unknownIssueKeys": [],
        }).encode())

        result = self.api.submit("cloud-1", "tok", "https://acme.atlassian.net",
                                 BuildsRequest(builds=[{"buildNumber": 12}]), BuildApiResponse)

        self.assertTrue(result.ok)
        self.assertEqual(result.value.accepted_builds[0].build_number, 12)

        received = self.server.received[0]
        self.assertEqual(received['path'], "/jira/builds/0.1/cloud/cloud-1/bulk")
        self.assertEqual(received['headers']['Authorization'], "Bearer tok")
        self.assertEqual(received['headers']['Content-Type'], "application/json; charset=utf-8")
        self.assertEqual(received['headers']['User-Agent'], "jira-cloud-client-tests")
        self.assertEqual(json.loads(received['body']), {"builds": [{"buildNumber": 12}]})

    def test_error_status_from_server(self):
        self.server.reply = (503, b'{"error":"unavailable"}')

        with self.assertLogs('jira_cloud_client', level='ERROR') as logs:
            result = self.api.submit("cloud-1", "tok", "https://acme.atlassian.net", {}, dict)

        self.assertEqual(result.error.kind, SubmitErrorKind.ERROR_RESPONSE)
        self.assertEqual(result.error.status_code, 503)
        self.assertTrue(any('{"error":"unavailable"}' in line for line in logs.output))

    def test_redirects_are_not_followed(self):
        for status in (302, 307):
            with self.subTest(status=status):
                self.server.received = []
                self.server.reply = (status, b'{"ok": true}')
                self.server.location = '/elsewhere'

                with self.assertLogs('jira_cloud_client', level='ERROR'):
                    result = self.api.submit("c1", "tok", "https://acme.atlassian.net", {}, dict)

                self.assertFalse(result.ok)
                self.assertEqual(result.error.kind, SubmitErrorKind.ERROR_RESPONSE)
                self.assertEqual(result.error.status_code, status)
                self.assertEqual(len(self.server.received), 1)
                self.assertEqual(self.server.received[0]['method'], 'POST')

    def test_raw_response_exposes_status_and_body(self):
        self.server.reply = (200, b'{"a": 1}')
        response = self.transport.execute(HttpRequest('POST', self.template % 'x', {}, '{}'))

        self.assertEqual(response.status_code, 200)
        self.assertTrue(response.is_successful)
        self.assertEqual(response.read(), b'{"a": 1}')


class TestRequestsTransportFailures(unittest.TestCase):

    def _unused_port(self):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
            sock.bind(('127.0.0.1', 0))
            return sock.getsockname()[1]

    def test_connection_refused_is_transport_error(self):
        transport = RequestsTransport(timeout_seconds=2)
        transport.session.trust_env = False
        url = f"http://127.0.0.1:{self._unused_port()}/cloud/x/bulk"

        with self.assertRaises(TransportError):
            transport.execute(HttpRequest('POST', url, {}, '{}'))

    def test_timeout_is_transport_error(self):
        session = MagicMock(spec=requests.Session)
        session.headers = {}
        session.request.side_effect = requests.Timeout("read timed out")
        transport = RequestsTransport(timeout_seconds=0.5, session=session)

        with self.assertRaises(TransportError) as ctx:
            transport.execute(HttpRequest('POST', 'https://x/cloud/a/bulk', {}, '{}'))

        self.assertIn('read timed out', str(ctx.exception))
        self.assertEqual(session.request.call_args.kwargs['timeout'], 0.5)
        self.assertFalse(session.request.call_args.kwargs['allow_redirects'])

    def test_body_read_failure_is_transport_error(self):
        raw = MagicMock()
        raw.status_code = 200
        raw.headers = {}
        type(raw).content = PropertyMock(
            side_effect=requests.exceptions.ChunkedEncodingError("connection broken"))
        session = MagicMock(spec=requests.Session)
        session.headers = {}
        session.request.return_value = raw

        response = RequestsTransport(session=session).execute(
            HttpRequest('POST', 'https://x/cloud/a/bulk', {}, '{}'))

        with self.assertRaises(TransportError):
            response.read()
        raw.close.assert_called_once()
