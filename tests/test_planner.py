# ModSorter test scripts
from __future__ import annotations

from ms_platform.catalog import CatalogEntry
from ms_platform.planner import plan_distribution


def _e(name: str, client: str, server: str) -> CatalogEntry:
    return CatalogEntry(name, client_side=client, server_side=server)


def test_required_and_optional_ship_per_side() -> None:
    plan = plan_distribution([
        _e("both.jar", "required", "optional"),
        _e("client_only.jar", "required", "unsupported"),
        _e("server_only.jar", "unsupported", "required"),
    ])
    assert plan.server == {"both.jar", "server_only.jar"}
    assert plan.client == {"both.jar", "client_only.jar"}


def test_not_found_on_either_side_ships_everywhere() -> None:
    plan = plan_distribution([_e("half.jar", "required", "not_found")])
    assert "half.jar" in plan.server
    assert "half.jar" in plan.client


def test_error_and_unknown_ship_nowhere() -> None:
    plan = plan_distribution([
        _e("err.jar", "error", "error"),
        _e("unk.jar", "unknown", "unknown"),
        _e("mixed.jar", "error", "unknown"),
    ])
    assert plan.server == frozenset()
    assert plan.client == frozenset()


def test_error_does_not_block_the_other_side() -> None:
    plan = plan_distribution([_e("x.jar", "error", "required")])
    assert plan.server == {"x.jar"}
    assert plan.client == frozenset()


def test_counts() -> None:
    plan = plan_distribution([_e("a.jar", "required", "required"), _e("b.jar", "optional", "unsupported")])
    assert plan.counts() == {"server": 1, "client": 2}
