"""
Unit tests for traversal mode selection and query rendering.
"""

import pytest

from movies_graph.browse.models import FilterSet, RootedWalk, Unbounded
from movies_graph.browse.query_builder import (
    ROOTED_WALK_QUERY,
    UNBOUNDED_QUERY,
    build_query,
    select_mode,
)


# ─── Mode selection ──────────────────────────────────────────


class TestSelectMode:

    def test_no_root_is_unbounded_even_with_depth(self):
        assert select_mode(FilterSet(depth=3, rels=("ACTED_IN",))) == Unbounded()

    def test_root_with_zero_depth_is_unbounded(self):
        assert select_mode(FilterSet(root="The Matrix", depth=0)) == Unbounded()

    def test_root_and_depth_is_rooted_walk(self):
        assert select_mode(FilterSet(root="The Matrix", depth=2)) == RootedWalk(
            root="The Matrix", depth=2
        )


# ─── Rendering ───────────────────────────────────────────────


class TestBuildQuery:

    def test_unbounded_template_and_params(self):
        query = build_query(FilterSet(rels=("DIRECTED",), limit=50))

        assert query.text is UNBOUNDED_QUERY
        assert query.params == {
            "rels": ["DIRECTED"],
            "node_incl": [],
            "node_excl": [],
            "released_gte": None,
            "released_lte": None,
            "limit": 50,
        }

    def test_rooted_template_binds_root_and_depth(self):
        query = build_query(FilterSet(root="The Matrix", depth=2))

        assert query.text is ROOTED_WALK_QUERY
        assert query.params["root"] == "The Matrix"
        assert query.params["depth"] == 2
        assert isinstance(query.mode, RootedWalk)

    def test_user_values_never_reach_query_text(self):
        hostile = "x'}) DETACH DELETE n //"
        query = build_query(
            FilterSet(
                rels=(hostile.upper(),),
                node_incl=(hostile,),
                node_excl=(hostile,),
                root=hostile,
                depth=1,
            )
        )
        assert hostile not in query.text
        assert hostile.upper() not in query.text
        assert query.text in (UNBOUNDED_QUERY, ROOTED_WALK_QUERY)

    @pytest.mark.parametrize("template", [UNBOUNDED_QUERY, ROOTED_WALK_QUERY])
    def test_empty_collections_disable_predicates(self, template):
        assert "size($rels) = 0 OR rel IN $rels" in template
        assert "size($node_incl) = 0 OR" in template
        assert "size($node_excl) = 0 OR" in template

    @pytest.mark.parametrize("template", [UNBOUNDED_QUERY, ROOTED_WALK_QUERY])
    def test_year_bounds_let_endpoints_without_year_pass(self, template):
        for side in ("s", "t"):
            assert f"{side}.released IS NULL OR {side}.released >= $released_gte" in template
            assert f"{side}.released IS NULL OR {side}.released <= $released_lte" in template

    @pytest.mark.parametrize("template", [UNBOUNDED_QUERY, ROOTED_WALK_QUERY])
    def test_both_templates_cap_results(self, template):
        assert template.rstrip().endswith("LIMIT $limit")

    def test_unbounded_is_directed_single_hop(self):
        assert "MATCH (s)-[r]->(t)" in UNBOUNDED_QUERY

    def test_rooted_walk_is_undirected_and_not_deduplicated(self):
        assert "-[*1..6]-(n)" in ROOTED_WALK_QUERY
        assert "length(p) <= $depth" in ROOTED_WALK_QUERY
        assert "DISTINCT" not in ROOTED_WALK_QUERY

    def test_rooted_walk_resolves_single_root(self):
        assert "root.title = $root" in ROOTED_WALK_QUERY
        assert "root.name = $root" in ROOTED_WALK_QUERY
        assert "elementId(root) = $root" in ROOTED_WALK_QUERY
        assert "WITH root LIMIT 1" in ROOTED_WALK_QUERY
