"""Unit tests for listing parameter parsing."""

import pytest

from user_directory.application.list_params import (
    InvalidListParamsError,
    RawListParams,
    parse_list_params,
)
from user_directory.domain.value_objects import SortOrder, UserField

pytestmark = pytest.mark.unit


class TestDefaults:
    def test_no_params(self):
        criteria = parse_list_params(RawListParams())

        assert criteria.search_term is None
        assert criteria.sort_field == UserField.FIRST_NAME
        assert criteria.sort_order == SortOrder.ASC
        assert criteria.page == 1
        assert criteria.limit == 10
        assert criteria.offset == 0

    def test_default_limit_is_configurable(self):
        criteria = parse_list_params(RawListParams(), default_limit=25)
        assert criteria.limit == 25

    def test_blank_values_are_ignored(self):
        criteria = parse_list_params(RawListParams(search="  ", page=""))
        assert criteria.search_term is None
        assert criteria.page == 1


class TestSearch:
    def test_global_search(self):
        criteria = parse_list_params(RawListParams(search="ada"))
        assert criteria.search_term == "ada"
        assert criteria.is_global_search

    def test_search_key_all_is_global(self):
        criteria = parse_list_params(
            RawListParams(search_key="ALL", search_value="ada")
        )
        assert criteria.is_global_search
        assert criteria.search_term == "ada"

    def test_field_search(self):
        criteria = parse_list_params(
            RawListParams(search_key="Email", search_value="example")
        )
        assert criteria.search_field == UserField.EMAIL
        assert criteria.search_term == "example"

    def test_field_search_wins_over_global(self):
        criteria = parse_list_params(
            RawListParams(search="x", search_key="gender", search_value="Male")
        )
        assert criteria.search_field == UserField.GENDER
        assert criteria.search_term == "Male"

    @pytest.mark.parametrize(
        "params",
        [
            RawListParams(search_key="email"),
            RawListParams(search_value="ada"),
        ],
    )
    def test_key_and_value_go_together(self, params):
        with pytest.raises(InvalidListParamsError, match="together"):
            parse_list_params(params)

    def test_unknown_search_key(self):
        with pytest.raises(InvalidListParamsError) as exc_info:
            parse_list_params(RawListParams(search_key="password", search_value="x"))

        assert "all" in exc_info.value.details[0]["allowed"]


class TestSort:
    def test_sort_field_and_order(self):
        criteria = parse_list_params(
            RawListParams(sort_field="last_name", sort_order="desc")
        )
        assert criteria.sort_field == UserField.LAST_NAME
        assert criteria.sort_order == SortOrder.DESC

    def test_bogus_sort_field(self):
        with pytest.raises(InvalidListParamsError, match="sortField") as exc_info:
            parse_list_params(RawListParams(sort_field="bogus"))

        assert exc_info.value.details[0]["allowed"] == [
            "first_name",
            "last_name",
            "email",
            "gender",
            "status",
        ]

    def test_all_is_not_a_sort_field(self):
        with pytest.raises(InvalidListParamsError):
            parse_list_params(RawListParams(sort_field="all"))

    def test_bogus_sort_order(self):
        with pytest.raises(InvalidListParamsError, match="sortOrder"):
            parse_list_params(RawListParams(sort_order="sideways"))


class TestPagination:
    def test_offset(self):
        criteria = parse_list_params(RawListParams(page="3", limit="20"))
        assert criteria.offset == 40

    @pytest.mark.parametrize("value", ["abc", "1.5", "0", "-2"])
    def test_invalid_page(self, value):
        with pytest.raises(InvalidListParamsError, match="page"):
            parse_list_params(RawListParams(page=value))

    @pytest.mark.parametrize("value", ["x", "0"])
    def test_invalid_limit(self, value):
        with pytest.raises(InvalidListParamsError, match="limit"):
            parse_list_params(RawListParams(limit=value))

    def test_limit_above_max(self):
        with pytest.raises(InvalidListParamsError, match="between 1 and 100"):
            parse_list_params(RawListParams(limit="101"), max_limit=100)


class TestStrictIntegers:
    @pytest.mark.parametrize("value", ["1_0", "٣", "+3", " 1 0", "0x10"])
    def test_only_ascii_digits(self, value):
        with pytest.raises(InvalidListParamsError, match="page must be a positive integer"):
            parse_list_params(RawListParams(page=value))

    def test_non_ascii_limit(self):
        with pytest.raises(InvalidListParamsError, match="limit"):
            parse_list_params(RawListParams(limit="٣"))

    def test_offset_beyond_bigint(self):
        with pytest.raises(InvalidListParamsError, match="page is out of range"):
            parse_list_params(RawListParams(page=str(10**30), limit="10"))

    def test_largest_offset_is_accepted(self):
        page = (2**63 - 1) // 10 + 1
        criteria = parse_list_params(RawListParams(page=str(page), limit="10"))
        assert criteria.offset <= 2**63 - 1

    def test_absurdly_long_page(self):
        with pytest.raises(InvalidListParamsError, match="page"):
            parse_list_params(RawListParams(page="9" * 5000))
