"""
Tests for app/api/pagination.py - Lenient page/size parsing and the page envelope.
"""
import pytest


class TestParsePagination:
    """Test query parameter parsing."""

    def test_defaults(self):
        from app.api.pagination import parse_pagination

        params = parse_pagination()

        assert params.page == 1
        assert params.size == 50
        assert params.search == ""
        assert params.offset == 0
        assert params.limit == 50

    @pytest.mark.parametrize("raw", ["0", "-3", "abc", "", "1.5"])
    def test_invalid_page_falls_back_to_default(self, raw):
        from app.api.pagination import parse_pagination

        assert parse_pagination(page=raw).page == 1

    @pytest.mark.parametrize("raw", ["0", "-1", "ten"])
    def test_invalid_size_falls_back_to_default(self, raw):
        from app.api.pagination import parse_pagination

        assert parse_pagination(size=raw).size == 50

    def test_size_clamped_to_maximum(self):
        from app.api.pagination import MAX_PAGE_SIZE, parse_pagination

        assert parse_pagination(size="5000").size == MAX_PAGE_SIZE

    def test_offset_from_page_and_size(self):
        from app.api.pagination import parse_pagination

        params = parse_pagination(page="3", size="20")

        assert params.offset == 40
        assert params.limit == 20

    def test_search_passed_through_unchanged(self):
        from app.api.pagination import parse_pagination

        assert parse_pagination(search=" patel ").search == " patel "

    def test_page_beyond_64_bit_offset_falls_back_to_default(self):
        from app.api.pagination import parse_pagination

        params = parse_pagination(page="100000000000000000000", size="10")

        assert params.page == 1
        assert params.offset == 0

    def test_largest_representable_offset_is_kept(self):
        from app.api.pagination import MAX_OFFSET, parse_pagination

        params = parse_pagination(page=str(MAX_OFFSET // 10 + 1), size="10")

        assert params.offset <= MAX_OFFSET
        assert params.page == MAX_OFFSET // 10 + 1


class TestBuildPage:
    """Test the {"data", "metadata"} envelope."""

    def test_total_pages_rounds_up(self):
        from app.api.pagination import build_page, parse_pagination

        page = build_page(["a", "b"], parse_pagination(page="1", size="2"), total=5)

        assert page["data"] == ["a", "b"]
        assert page["metadata"].total_pages == 3
        assert page["metadata"].total_count == 5
        assert page["metadata"].current_page == 1
        assert page["metadata"].page_size == 2

    def test_empty_result(self):
        from app.api.pagination import build_page, parse_pagination

        page = build_page([], parse_pagination(), total=0)

        assert page["data"] == []
        assert page["metadata"].total_pages == 0

    def test_metadata_serialises_camel_case(self):
        from app.api.pagination import build_page, parse_pagination

        page = build_page([], parse_pagination(size="10"), total=11)

        assert page["metadata"].model_dump(by_alias=True) == {
            "currentPage": 1,
            "pageSize": 10,
            "totalCount": 11,
            "totalPages": 2,
        }
