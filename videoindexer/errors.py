class VideoIndexerError(Exception):
    pass


class ConfigurationError(VideoIndexerError):
    pass


class AccountNotFoundError(VideoIndexerError):
    pass


class ApiError(VideoIndexerError):
    """Raised when an API answers with a status other than the expected one."""

    def __init__(self, status_code, method, url, body=""):
        self.status_code = status_code
        self.method = method
        self.url = url
        self.body = body
        super().__init__(f"{method} {url} returned {status_code}: {body[:500]}")

    @property
    def transient(self):
        return self.status_code == 429 or self.status_code >= 500
