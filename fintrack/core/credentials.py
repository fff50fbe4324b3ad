"""Holder for the session's CSRF token.

One instance is shared by every resource client of a session. It is written
only by login/signup/logout and read by every mutation call.
"""


class CredentialContext:
    def __init__(self, csrf_token: str | None = None) -> None:
        self._csrf_token = csrf_token

    def get(self) -> str | None:
        return self._csrf_token

    def set(self, csrf_token: str) -> None:
        self._csrf_token = csrf_token

    def clear(self) -> None:
        self._csrf_token = None

    @property
    def is_set(self) -> bool:
        return self._csrf_token is not None
