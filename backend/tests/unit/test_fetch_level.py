from club_registry.domain.common.fetch_level import Expansion, FetchLevel


def test_root_defaults_to_default_with_id_only_descendants():
    plan = Expansion.root(None, None, depth=2)
    assert plan.level is FetchLevel.DEFAULT
    assert plan.descendant is FetchLevel.ID_ONLY
    assert plan.effective_level is FetchLevel.DEFAULT


def test_nested_uses_descendant_and_spends_budget():
    plan = Expansion.root(FetchLevel.DEFAULT, FetchLevel.DEFAULT, depth=2)
    child = plan.nested()
    assert child.level is FetchLevel.DEFAULT
    assert child.descendant is FetchLevel.ID_ONLY
    assert child.depth == 1

    grandchild = child.nested()
    assert grandchild.level is FetchLevel.ID_ONLY
    assert grandchild.depth == 0


def test_default_without_budget_is_served_compact():
    plan = Expansion(level=FetchLevel.DEFAULT, depth=0)
    assert plan.effective_level is FetchLevel.COMPACT


def test_explicit_levels_are_not_rewritten():
    assert Expansion(level=FetchLevel.ID_ONLY, depth=0).effective_level is FetchLevel.ID_ONLY
    assert Expansion(level=FetchLevel.COMPACT, depth=5).effective_level is FetchLevel.COMPACT


def test_negative_depth_is_clamped():
    assert Expansion.root(None, None, depth=-3).depth == 0
    assert Expansion(depth=0).nested().depth == 0


def test_fetch_level_values_are_snake_case():
    assert {level.value for level in FetchLevel} == {"default", "compact", "id_only"}
