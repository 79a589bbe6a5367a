from castle import Action, CastleState, JobCounts, UpgradeState, resolve_tick
from runtime.events import extract_events


def event_types(prev, actions=()):
    result = resolve_tick(prev, list(actions))
    return [event["type"] for event in extract_events(prev_state=prev, result=result)]


def test_quiet_tick_has_no_events():
    assert event_types(CastleState.default()) == []


def test_rejection_and_starvation_events():
    prev = CastleState(food=0, workers=4, jobs=JobCounts(miners=4))
    assert event_types(prev, [Action.buy_food(10)]) == ["ACTION_REJECTED", "WORKERS_STARVED"]


def test_losing_everyone_escalates():
    prev = CastleState(food=0, workers=1, jobs=JobCounts(miners=1))
    assert event_types(prev) == ["WORKFORCE_LOST"]


def test_upgrade_events():
    stalled = CastleState(
        food=10, workers=1, jobs=JobCounts(builders=1),
        upgrade=UpgradeState(active=True, target_level=1, progress=0, wood_required=12),
    )
    assert event_types(stalled) == ["UPGRADE_STALLED"]

    finishing = CastleState(
        food=10, wood=1, workers=1, jobs=JobCounts(builders=1),
        upgrade=UpgradeState(active=True, target_level=1, progress=11, wood_required=12),
    )
    assert event_types(finishing) == ["UPGRADE_COMPLETED"]
