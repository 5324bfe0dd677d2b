"""Tests for the shared pooled HTTP client."""

import threading
import unittest
from concurrent.futures import ThreadPoolExecutor

from core import http_client
from core.app_config import AppConfig


class SharedClientTests(unittest.TestCase):
    def tearDown(self):
        http_client.close_shared_client()

    def test_client_is_shared_until_closed(self):
        config = AppConfig(http2=False, user_agent="tests/1.0", detect_timeout_seconds=4.0)
        first = http_client.get_shared_client(config)
        self.assertIs(http_client.get_shared_client(config), first)
        self.assertEqual(first.headers["User-Agent"], "tests/1.0")
        self.assertEqual(first.timeout.read, 4.0)

        http_client.close_shared_client()
        self.assertTrue(first.is_closed)
        self.assertIsNot(http_client.get_shared_client(config), first)

    def test_concurrent_first_use_creates_one_client(self):
        http_client.close_shared_client()
        config = AppConfig(http2=False)
        workers = 8
        barrier = threading.Barrier(workers)

        def grab(_):
            barrier.wait()
            return http_client.get_shared_client(config)

        with ThreadPoolExecutor(max_workers=workers) as pool:
            clients = list(pool.map(grab, range(workers)))

        self.assertEqual(len({id(client) for client in clients}), 1)
        self.assertIs(http_client.get_shared_client(config), clients[0])


if __name__ == "__main__":
    unittest.main()
