"""Shared dependencies for the upload API."""

from intake.settings import get_settings

from .reference_gateway import ReferenceSetFetcher


def get_reference_fetcher() -> ReferenceSetFetcher:
    """Reference-set fetcher configured from settings (overridable in tests)."""
    return ReferenceSetFetcher.from_settings(get_settings())
