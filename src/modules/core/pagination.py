from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response


class StandardResultsSetPagination(PageNumberPagination):
    """``?page=`` / ``?limit=`` pagination wrapped in the API envelope."""

    page_size = 10
    page_size_query_param = "limit"
    max_page_size = 100
    results_key = "results"

    def get_paginated_response(self, data) -> Response:
        return Response(
            {
                "success": True,
                self.results_key: data,
                "total": self.page.paginator.count,
                "total_pages": self.page.paginator.num_pages,
                "current_page": self.page.number,
                "next": self.get_next_link(),
                "previous": self.get_previous_link(),
            }
        )
