"""Tests for the pure status transition function."""

from types import SimpleNamespace

import pytest

from orderdesk.errors import ValidationError
from orderdesk.services.lifecycle import (
    LogAction, OrderStatus, apply_status, parse_status,
)


def _order(status):
    return SimpleNamespace(id="01ORDER", technician_id="01TECH", status=status)


@pytest.mark.parametrize("previous", ["pending", "in-progress", "on-hold", "incomplete"])
def test_entering_completed_yields_one_log_intent(previous):
    transition = apply_status(_order(previous), "completed")
    assert transition.changed
    assert transition.status is OrderStatus.COMPLETED
    assert len(transition.side_effects) == 1
    intent = transition.side_effects[0]
    assert intent.action is LogAction.COMPLETED
    assert intent.order_id == "01ORDER"
    assert intent.technician_id == "01TECH"


def test_completed_to_completed_is_idempotent():
    transition = apply_status(_order("completed"), OrderStatus.COMPLETED)
    assert not transition.changed
    assert transition.side_effects == []


def test_leaving_completed_is_allowed_without_side_effects():
    transition = apply_status(_order("completed"), "in-progress")
    assert transition.changed
    assert transition.previous is OrderStatus.COMPLETED
    assert transition.side_effects == []


def test_any_state_can_reach_any_other_state():
    for a in OrderStatus:
        for b in OrderStatus:
            transition = apply_status(_order(a.value), b)
            assert transition.status is b


def test_non_completing_moves_have_no_side_effects():
    transition = apply_status(_order("pending"), "on-hold")
    assert transition.side_effects == []


def test_completed_intent_can_be_attributed_to_new_owner():
    transition = apply_status(_order("pending"), "completed", technician_id="01NEWOWNER")
    assert transition.side_effects[0].technician_id == "01NEWOWNER"


def test_apply_status_does_not_mutate_order():
    order = _order("pending")
    apply_status(order, "completed")
    assert order.status == "pending"


def test_parse_status_rejects_unknown_values():
    with pytest.raises(ValidationError):
        parse_status("done")
    assert parse_status("on-hold") is OrderStatus.ON_HOLD
