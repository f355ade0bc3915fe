import json
from collections import defaultdict

import httpx
import pytest

from briteverify import AsyncBriteVerify, BriteVerify

API_KEY = "I guess it's better to be lucky than good"
BASE_URL = "https://bpi.briteverify.test/api/v1"
BULK_BASE_URL = "https://bulk-api.briteverify.test/api/v3"


class MockApi:
    """Routes requests by (method, path) to queued responses.

    Each route replays its responses in order and repeats the last one.
    """

    def __init__(self) -> None:
        self.routes = defaultdict(list)
        self.requests = []

    def add(self, method, path, *responses):
        for response in responses:
            if isinstance(response, tuple):
                status, body = response
            else:
                status, body = 200, response
            self.routes[(method, path)].append((status, body))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        queue = self.routes.get((request.method, request.url.path))
        if not queue:
            return httpx.Response(404, json={"status": "not_found", "message": "No route"})
        status, body = queue[0] if len(queue) == 1 else queue.pop(0)
        if isinstance(body, Exception):
            raise body
        if body is None:
            return httpx.Response(status)
        if isinstance(body, bytes):
            return httpx.Response(status, content=body, headers={"Content-Type": "text/html"})
        return httpx.Response(status, json=body)

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def body(self, request):
        return json.loads(request.content)

    @property
    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def api():
    return MockApi()


@pytest.fixture
def client(api):
    with BriteVerify(
        API_KEY,
        base_url=BASE_URL,
        bulk_base_url=BULK_BASE_URL,
        transport=api.transport,
    ) as instance:
        yield instance


def make_async_client(api, **kwargs):
    return AsyncBriteVerify(
        API_KEY,
        base_url=BASE_URL,
        bulk_base_url=BULK_BASE_URL,
        transport=api.transport,
        **kwargs,
    )
