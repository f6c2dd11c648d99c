"""
Tests for the query options shared by list and read endpoints.
"""

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from emis_party.core.query import DEFAULT_LIMIT, QueryOptions, get_query_options


def as_dict(options: QueryOptions) -> dict:
    return {
        "limit": options.limit,
        "skip": options.skip,
        "page": options.page,
        "sort": options.sort,
        "select": options.select,
        "q": options.q,
        "filters": options.filters,
    }


class TestQueryOptions:
    """Tests for the QueryOptions class."""

    def test_default_values(self):
        options = QueryOptions()
        assert options.limit == DEFAULT_LIMIT
        assert options.skip == 0
        assert options.page == 1
        assert options.sort == ["-updatedAt"]
        assert options.select == []
        assert options.q is None
        assert options.filters == {}

    def test_page_sets_skip(self):
        """Page wins over skip when both are given."""
        options = QueryOptions(limit=25, skip=5, page=3)
        assert options.skip == 50
        assert options.page == 3

    def test_page_from_skip(self):
        assert QueryOptions(limit=10, skip=20).page == 3
        assert QueryOptions(limit=10, skip=25).page == 3

    def test_pages(self):
        options = QueryOptions(limit=10)
        assert options.pages(0) == 0
        assert options.pages(10) == 1
        assert options.pages(11) == 2

    def test_sort_fields(self):
        options = QueryOptions(sort="-updatedAt, name,+phone")
        assert options.sort_fields() == [("updatedAt", True), ("name", False), ("phone", False)]

    def test_blank_search_is_ignored(self):
        assert QueryOptions(q="   ").q is None
        assert QueryOptions(q=" bed ").q == "bed"

    def test_with_filters(self):
        options = QueryOptions(filters={"type": "Agency"}).with_filters(party="abc")
        assert options.filters == {"type": "Agency", "party": "abc"}

    def test_select(self):
        options = QueryOptions(limit=5, select="name,phone")
        assert as_dict(options) == {
            "limit": 5,
            "skip": 0,
            "page": 1,
            "sort": ["-updatedAt"],
            "select": ["name", "phone"],
            "q": None,
            "filters": {},
        }


class TestGetQueryOptions:
    """Tests for parsing options from the query string."""

    def setup_method(self):
        app = FastAPI()

        @app.get("/options")
        def options(options: QueryOptions = Depends(get_query_options)):
            return as_dict(options)

        self.client = TestClient(app)

    def test_defaults(self):
        response = self.client.get("/options")
        assert response.status_code == 200
        assert response.json()["limit"] == DEFAULT_LIMIT

    def test_filters(self):
        response = self.client.get("/options?filter[type]=Agency&filter[party]=abc&other=1")
        assert response.json()["filters"] == {"type": "Agency", "party": "abc"}

    def test_page(self):
        response = self.client.get("/options?limit=5&page=2")
        body = response.json()
        assert body["skip"] == 5
        assert body["page"] == 2

    def test_limit_bounds(self):
        assert self.client.get("/options?limit=0").status_code == 422
        assert self.client.get("/options?limit=101").status_code == 422
        assert self.client.get("/options?limit=100").status_code == 200

    def test_negative_skip(self):
        assert self.client.get("/options?skip=-1").status_code == 422
