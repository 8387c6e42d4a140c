import math


def page_number(index: int, page_size: int) -> int:
    """1-based page on which the item at ``index`` falls."""
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return index // page_size + 1


def total_pages(total_items: int, page_size: int) -> int:
    return math.ceil(total_items / page_size) if total_items > 0 else 0


def clamp_page(page: int, total_items: int, page_size: int) -> int:
    return max(1, min(page, total_pages(total_items, page_size) or 1))


def page_bounds(page: int, page_size: int) -> tuple[int, int]:
    start = (page - 1) * page_size
    return start, start + page_size
