"""Shared DTOs used across service modules."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class PageMeta:
    """
    Output pagination metadata.

    :param page: Current page (1-based).
    :type page: int
    :param limit: Page size.
    :type limit: int
    :param total: Total rows available.
    :type total: int
    :param total_pages: Number of pages for ``limit``.
    :type total_pages: int
    """

    page: int
    limit: int
    total: int
    total_pages: int
