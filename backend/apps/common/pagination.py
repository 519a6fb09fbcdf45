from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

from .errors import ValidationError


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @staticmethod
    def from_raw(
        page: Any = None,
        limit: Any = None,
        *,
        default_limit: int = 10,
        max_limit: int = 50,
    ) -> "PageRequest":
        """Parse page/limit query values; blank values fall back to defaults."""
        try:
            page_value = int(page) if page not in (None, "") else 1
            limit_value = int(limit) if limit not in (None, "") else default_limit
        except (TypeError, ValueError):
            raise ValidationError(
                "page and limit must be integers",
                details={"page": page, "limit": limit},
            )
        if page_value < 1:
            raise ValidationError("page must be at least 1", details={"page": page})
        if not 1 <= limit_value <= max_limit:
            raise ValidationError(
                f"limit must be between 1 and {max_limit}", details={"limit": limit}
            )
        return PageRequest(page=page_value, limit=limit_value)


def pagination_payload(request: PageRequest, total_count: int) -> Dict[str, Any]:
    total_pages = math.ceil(total_count / request.limit) if total_count else 0
    return {
        "currentPage": request.page,
        "totalPages": total_pages,
        "totalCount": total_count,
        "hasNextPage": request.page < total_pages,
        "hasPrevPage": request.page > 1,
    }
