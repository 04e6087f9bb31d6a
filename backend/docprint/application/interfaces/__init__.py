from .page_session import PageSession, PageSessionFactory

__all__ = [
    "PageSession",
    "PageSessionFactory",
]
