"""Stand-ins for httpx.AsyncClient, injected as ``http_client_class``."""

import httpx


class MockResponse:
    def __init__(
        self, *, json_data=None, status_code=200, headers: dict | None = None, invalid_json=False
    ):
        self._json_data = json_data
        self._invalid_json = invalid_json
        self.status_code = status_code
        self.headers = headers if headers is not None else {"content-type": "application/json"}

    def raise_for_status(self):
        if self.status_code >= 400:
            raise httpx.HTTPStatusError(
                f"HTTP {self.status_code}",
                request=httpx.Request("POST", "https://example.com"),
                response=httpx.Response(self.status_code),
            )

    def json(self):
        if self._invalid_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json_data


class MockHttpClient:
    """
    Usage:
        client = MockHttpClient(MockResponse(json_data={"id": "msg-1"}))
        service = ResendEmailService(config=config, http_client_class=client)

    Services call ``self._http_client_class()`` and enter the result, so
    ``__call__`` returns the client itself.
    """

    def __init__(self, response: MockResponse | None = None, raise_with: Exception | None = None):
        self.post_calls: list[dict] = []
        self._response = response or MockResponse(json_data={"id": "msg-1"})
        self._raise_with = raise_with

    async def post(self, url: str, **kwargs) -> MockResponse:
        self.post_calls.append({"url": url, **kwargs})
        if self._raise_with:
            raise self._raise_with
        return self._response

    async def __aenter__(self):
        return self

    async def __aexit__(self, *args):
        pass

    def __call__(self):
        return self
