from __future__ import annotations

from urllib.parse import parse_qsl

from cqrs_ddd_searchable import (
    CombinationMode,
    QueryStringBuilder,
    Searchable,
    SearchableConfig,
    parse_query_string,
)


class TestParseQueryString:
    def test_single_values(self) -> None:
        assert parse_query_string("name=jo%25&age=(gt)18") == {
            "name": "jo%",
            "age": "(gt)18",
        }

    def test_leading_question_mark(self) -> None:
        assert parse_query_string("?a=1") == {"a": "1"}

    def test_repeated_keys_become_lists(self) -> None:
        assert parse_query_string("price=(gt)1&price=(lt)9") == {
            "price": ["(gt)1", "(lt)9"]
        }

    def test_bracket_suffix(self) -> None:
        assert parse_query_string("tag[]=a&tag[]=b") == {"tag": ["a", "b"]}
        assert parse_query_string("tag%5B%5D=a") == {"tag": ["a"]}

    def test_blank_values_kept(self) -> None:
        assert parse_query_string("name=&mode=or") == {"name": "", "mode": "or"}

    def test_negated_relation_key(self) -> None:
        assert parse_query_string("!posts:title=x") == {"!posts:title": "x"}

    def test_empty(self) -> None:
        assert parse_query_string("") == {}


class TestQueryStringBuilder:
    def test_round_trip_through_searchable(self) -> None:
        searchable = Searchable(SearchableConfig(searchable=frozenset({"*"})))
        plan = searchable.plan(
            parse_query_string("price=(gt)1&price=!(lt)9&name=!(null)&tag=a,b")
        )
        built = QueryStringBuilder().build(plan.constraints)
        assert parse_qsl(built) == [
            ("price", "(gt)1"),
            ("price", "!(lt)9"),
            ("name", "!(null)"),
            ("tag", "a,b"),
        ]

    def test_mode_and_extra(self) -> None:
        built = QueryStringBuilder().build(
            [],
            mode=CombinationMode.OR,
            mode_key="join",
            extra={"sort": "-name", "page": 2},
        )
        assert parse_qsl(built) == [("join", "or"), ("sort", "-name"), ("page", "2")]

    def test_nothing_to_build(self) -> None:
        assert QueryStringBuilder().build([]) == ""
