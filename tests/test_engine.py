from castle import Action, CastleEngine, CastleState, JobCounts
from castle.core.economy import ECONOMY_PRESETS


def test_initial_state_is_the_documented_default():
    state = CastleEngine().get_state()
    assert state.to_dict() == {
        "turn": 0,
        "gold": 25,
        "food": 18,
        "wood": 0,
        "workers": 5,
        "castle_level": 0,
        "jobs": {"miners": 2, "farmers": 2, "lumberjacks": 1, "builders": 0},
        "upgrade": {"active": False},
    }


def test_enqueue_reports_next_turn_and_has_no_side_effect():
    engine = CastleEngine()
    before = engine.get_state()
    result = engine.enqueue(Action.hire(1))
    assert result.accepted
    assert result.applies_at_turn == 1
    assert engine.get_state() == before
    assert len(engine.pending_actions()) == 1

    engine.advance()
    assert engine.enqueue({"type": "BuyFood", "params": {"amount": 1}}).applies_at_turn == 2


def test_enqueue_refuses_malformed_input():
    engine = CastleEngine()
    result = engine.enqueue({"type": "Hire", "params": {"count": -3}})
    assert not result.accepted
    assert "non-negative" in result.reason
    assert engine.pending_actions() == []

    unknown = engine.enqueue({"type": "Raid", "params": {}})
    assert not unknown.accepted
    assert "Unknown action type" in unknown.reason


def test_get_state_returns_a_copy():
    engine = CastleEngine()
    snapshot = engine.get_state()
    snapshot.gold = 9999
    snapshot.jobs.miners = 100
    live = engine.get_state()
    assert live.gold == 25
    assert live.jobs.miners == 2

    result = engine.advance()
    result.state.gold = -50
    assert engine.get_state().gold >= 0


def test_queue_is_drained_even_when_everything_is_rejected():
    engine = CastleEngine()
    engine.enqueue(Action.fire(50))
    engine.enqueue(Action.assign_jobs(9, 9, 9, 9))
    result = engine.advance()
    assert result.applied == []
    assert len(result.rejected) == 2
    assert engine.pending_actions() == []

    # rejected actions are never retried
    assert engine.advance().rejected == []


def test_turn_increments_by_one_per_tick():
    engine = CastleEngine()
    for expected in range(1, 6):
        assert engine.advance().turn == expected
        assert engine.turn == expected


def test_tick_listeners_receive_each_result():
    engine = CastleEngine()
    seen = []
    engine.add_tick_listener(seen.append)
    engine.enqueue(Action.hire(1, requested_by="Accountant", command_id="h-1"))
    engine.advance()
    engine.remove_tick_listener(seen.append)
    engine.advance()

    assert len(seen) == 1
    record = seen[0].applied_record()
    assert record == {
        "turn": 1,
        "applied": [{"type": "Hire", "params": {"count": 1}, "requested_by": "Accountant", "command_id": "h-1"}],
    }
    state_record = seen[0].state_record()
    assert state_record["turn"] == 1
    assert "turn" not in state_record["state"]
    assert state_record["state"]["workers"] == 6


def test_custom_initial_state_is_copied():
    start = CastleState(gold=50, food=10, workers=2, jobs=JobCounts(farmers=2))
    engine = CastleEngine(initial_state=start)
    start.gold = 0
    assert engine.get_state().gold == 50


def test_same_actions_give_identical_state_sequences():
    script = [
        [Action.hire(2), Action.assign_jobs(3, 2, 2, 0)],
        [Action.start_upgrade()],
        [Action.assign_jobs(2, 2, 1, 2), Action.buy_food(4)],
        [],
        [Action.fire(1)],
    ]

    def run(economy):
        engine = CastleEngine(economy=economy)
        states = []
        for _ in range(3):
            for actions in script:
                for action in actions:
                    engine.enqueue(action)
                states.append(engine.advance().state.to_dict())
        return states

    assert run(ECONOMY_PRESETS["engine"]) == run(ECONOMY_PRESETS["engine"])
    assert run(ECONOMY_PRESETS["engine"]) != run(ECONOMY_PRESETS["documented"])


def test_enqueue_rechecks_action_objects_changed_after_construction():
    engine = CastleEngine()
    action = Action.hire(1)
    action.params["count"] = -3

    result = engine.enqueue(action)
    assert not result.accepted
    assert "non-negative" in result.reason
    assert engine.pending_actions() == []


def test_queued_action_is_not_affected_by_later_caller_changes():
    engine = CastleEngine()
    action = Action.buy_food(1)
    assert engine.enqueue(action).accepted

    action.params["amount"] = -20
    engine.pending_actions()[0].action.params["amount"] = -20
    assert engine.pending_actions()[0].action.params == {"amount": 1}

    result = engine.advance()
    assert result.applied[0].params == {"amount": 1}
    # 25 - 1 for food, + 2 miners * 2 gold
    assert result.state.gold == 28
    assert result.state.jobs.farmers >= 0
