"""
Pagination Helpers

Parses page/pageSize query parameters and describes the surrounding pages
in a ``Link`` response header.
"""

import math
from typing import Dict, List, Tuple
from urllib.parse import urlencode

from flask import current_app


def _parse_positive_int(value, default: int, maximum: int = None) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    if number < 1 or (maximum is not None and number > maximum):
        return default
    return number


def get_pagination_parameters(args) -> Tuple[int, int]:
    """
    Read ``page`` and ``pageSize`` from the query string.
    
    Missing or out-of-range values fall back to page 1 and the configured
    default page size.
    
    Args:
        args: Request query parameters (``request.args``)
        
    Returns:
        Tuple of (page, page_size)
    """
    default_size = current_app.config.get('DEFAULT_PAGE_SIZE', 100)
    max_size = current_app.config.get('MAX_PAGE_SIZE', 100)
    
    page = _parse_positive_int(args.get('page'), 1)
    page_size = _parse_positive_int(args.get('pageSize'), default_size, max_size)
    return page, page_size


def last_page(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size))


def build_link_header(url: str, page: int, page_size: int, total: int,
                      extra_params: Dict[str, List[str]] = None) -> str:
    """
    Format the first/prev/next/last links for a paginated collection.
    
    Relations pointing to the same page share one link, e.g.
    ``<...?page=1&pageSize=10>; rel="first prev"``.
    """
    last = last_page(total, page_size)
    
    relations = [('first', 1)]
    if page > 1:
        relations.append(('prev', min(page - 1, last)))
    if page < last:
        relations.append(('next', page + 1))
    relations.append(('last', last))
    
    links = {}
    for rel, target in relations:
        links.setdefault(target, []).append(rel)
    
    parts = []
    for target, rels in links.items():
        query = [('page', target), ('pageSize', page_size)]
        for key, values in (extra_params or {}).items():
            query.extend((key, value) for value in values)
        parts.append(f'<{url}?{urlencode(query)}>; rel="{" ".join(rels)}"')
    return ', '.join(parts)


def add_link_header(response, url: str, page: int, page_size: int, total: int,
                    extra_params: Dict[str, List[str]] = None):
    """Set the pagination ``Link`` header on a response and return it."""
    response.headers['Link'] = build_link_header(url, page, page_size, total, extra_params)
    return response
