import logging

import httpx
from tenacity import retry, retry_if_exception, stop_after_attempt, wait_random_exponential

from videoindexer.errors import ApiError

DEFAULT_TIMEOUT = httpx.Timeout(60.0, connect=10.0)
REDACTED = "***"
# query parameters that carry credentials: VI token, SAS signature, function key
SECRET_PARAMS = ("accessToken", "sig", "code")

# httpx logs every request URL at INFO, and ours carry the access token
logging.getLogger("httpx").setLevel(logging.WARNING)


def new_client() -> httpx.Client:
    # Video Indexer answers some calls with redirects to signed URLs, never follow them
    return httpx.Client(timeout=DEFAULT_TIMEOUT, follow_redirects=False)


def redact(url) -> str:
    url = httpx.URL(str(url))
    for name in SECRET_PARAMS:
        if name in url.params:
            url = url.copy_set_param(name, REDACTED)
    return str(url)


def verify_status(response: httpx.Response, expected_status_code: int = 200):
    if response.status_code != expected_status_code:
        raise ApiError(response.status_code, response.request.method, redact(response.request.url), response.text)
    return response


def _is_transient(exc: BaseException) -> bool:
    if isinstance(exc, ApiError):
        return exc.transient
    return isinstance(exc, httpx.TransportError)


def _is_transient_before_delivery(exc: BaseException) -> bool:
    # a read failure may come after the server acted on the request
    if isinstance(exc, ApiError):
        return exc.transient
    return isinstance(exc, (httpx.ConnectError, httpx.ConnectTimeout))


def _before_retry_sleep(retry_state):
    logging.warning(f"Transient failure calling the API, retrying (attempt {retry_state.attempt_number}): {retry_state.outcome.exception()}")


def _retrying(predicate):
    return retry(
        retry=retry_if_exception(predicate),
        wait=wait_random_exponential(min=1, max=30),
        stop=stop_after_attempt(4),
        before_sleep=_before_retry_sleep,
        reraise=True,
    )


def _request(client, method, url, expected_status_code, **kwargs):
    response = client.request(method, url, **kwargs)
    return verify_status(response, expected_status_code)


@_retrying(_is_transient)
def send(client: httpx.Client, method: str, url: str, expected_status_code: int = 200, **kwargs) -> httpx.Response:
    return _request(client, method, url, expected_status_code, **kwargs)


@_retrying(_is_transient_before_delivery)
def send_once(client: httpx.Client, method: str, url: str, expected_status_code: int = 200, **kwargs) -> httpx.Response:
    """Like send, for calls that must not be repeated once the server may have received them."""
    return _request(client, method, url, expected_status_code, **kwargs)
