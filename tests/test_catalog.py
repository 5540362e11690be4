import pytest

from domain.catalog import (
    HedgeAction,
    RetailAction,
    Role,
    Sentiment,
    actions_for,
    hedge_impact,
    is_legal,
    multiplier,
    parse_action,
    parse_role,
    retail_impact,
)


def test_impacts_and_multipliers():
    assert [retail_impact(a) for a in RetailAction] == [3, 0, -2]
    assert [hedge_impact(a) for a in HedgeAction] == [-2, 3, 0]
    assert [multiplier(s) for s in Sentiment] == [0.7, 1.0, 1.5, 2.0]


def test_actions_for_role_in_canonical_order():
    assert actions_for(Role.RETAIL) == (RetailAction.BUY, RetailAction.HOLD, RetailAction.SELL)
    assert actions_for(Role.HEDGE) == (HedgeAction.SHORT, HedgeAction.COVER, HedgeAction.HOLD)


def test_hold_maps_to_the_acting_role():
    assert parse_action(Role.RETAIL, "hold") is RetailAction.HOLD
    assert parse_action(Role.HEDGE, "HOLD") is HedgeAction.HOLD
    assert parse_action(Role.HEDGE, RetailAction.HOLD) is HedgeAction.HOLD


@pytest.mark.parametrize("role,action", [
    (Role.RETAIL, "SHORT"),
    (Role.RETAIL, HedgeAction.COVER),
    (Role.HEDGE, "BUY"),
    (Role.HEDGE, None),
])
def test_illegal_actions_rejected(role, action):
    with pytest.raises(ValueError):
        parse_action(role, action)


def test_is_legal_and_parse_role():
    assert is_legal(Role.RETAIL, RetailAction.SELL)
    assert not is_legal(Role.RETAIL, HedgeAction.SHORT)
    assert parse_role("hedge") is Role.HEDGE
    with pytest.raises(ValueError):
        parse_role("MARKET_MAKER")


def test_parse_role_accepts_enum_members():
    assert parse_role(Role.RETAIL) is Role.RETAIL
    assert parse_role(Role.HEDGE) is Role.HEDGE
    assert parse_role("retail") is Role.RETAIL
