from dataclasses import dataclass


@dataclass(frozen=True)
class CookieRecord:
    """One cookie to inject into a browser session.

    Exactly one of ``url`` or ``domain`` is set: prefixed cookies
    (``__Host-`` / ``__Secure-``) are scoped to the full URL, everything else
    to the bare host.
    """

    name: str
    value: str
    secure: bool
    path: str = "/"
    url: str | None = None
    domain: str | None = None

    @property
    def host_only(self) -> bool:
        return self.domain is None
