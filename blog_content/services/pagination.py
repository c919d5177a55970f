"""Offset pagination over a fully materialized listing."""

from collections.abc import Sequence
from dataclasses import dataclass
from math import ceil

from blog_content.errors.blog import MalformedInputError


@dataclass(frozen=True)
class Page[T]:
    """One page of a listing with its totals."""

    items: list[T]
    total_items: int
    total_pages: int
    has_more: bool


def paginate[T](listing: Sequence[T], page: int, page_size: int) -> Page[T]:
    """
    Slice ``listing`` into a 1-based page.

    The listing order is kept as given. A page past the end yields no items
    while still reporting the totals.

    Args:
        listing: Full ordered listing
        page: 1-based page number
        page_size: Items per page

    Returns:
        Page: The requested slice with total count, page count and has-more flag

    Raises:
        MalformedInputError: If ``page`` or ``page_size`` is below 1

    Examples
    --------
    >>> paginate(list(range(25)), 3, 9).items
    [18, 19, 20, 21, 22, 23, 24]
    """
    if page < 1:
        mssg = "Page must be a positive integer"
        raise MalformedInputError(mssg)
    if page_size < 1:
        mssg = "Page size must be a positive integer"
        raise MalformedInputError(mssg)

    total_items = len(listing)
    total_pages = ceil(total_items / page_size)
    offset = (page - 1) * page_size

    return Page(
        items=list(listing[offset : offset + page_size]),
        total_items=total_items,
        total_pages=total_pages,
        has_more=page < total_pages,
    )
