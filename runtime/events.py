from typing import Dict, Any, List

from castle import CastleState, TickResult


def extract_events(
    *,
    prev_state: CastleState,
    result: TickResult,
) -> List[Dict[str, Any]]:
    """
    Extract notable events from one tick, for logs and front-ends.
    """
    events: List[Dict[str, Any]] = []
    state = result.state

    # ---------------------------------------------------------
    # 1. REJECTED ACTIONS (caller may want to resubmit)
    # ---------------------------------------------------------
    for rejection in result.rejected:
        events.append({
            "type": "ACTION_REJECTED",
            "turn": result.turn,
            "action": rejection.action.type.value,
            "error_code": rejection.error_code,
            "reason": rejection.reason,
            "requested_by": rejection.action.requested_by,
            "command_id": rejection.action.command_id,
            "severity": "LOW",
        })

    # ---------------------------------------------------------
    # 2. STARVATION (irreversible)
    # ---------------------------------------------------------
    if result.upkeep.starved:
        event = {
            "type": "WORKERS_STARVED",
            "turn": result.turn,
            "shortage": result.upkeep.shortage,
            "workers_lost": result.upkeep.workers_lost,
            "workers_left": state.workers,
            "irreversible": True,
            "severity": "HIGH",
        }

        # Escalate if the castle is empty
        if state.workers == 0 and prev_state.workers > 0:
            event["type"] = "WORKFORCE_LOST"
            event["severity"] = "CRITICAL"

        events.append(event)

    # ---------------------------------------------------------
    # 3. CONSTRUCTION
    # ---------------------------------------------------------
    if result.construction.completed:
        events.append({
            "type": "UPGRADE_COMPLETED",
            "turn": result.turn,
            "castle_level": result.construction.completed_level,
            "bonus": result.construction.bonus,
            "severity": "INFO",
        })
    elif result.construction.stalled:
        events.append({
            "type": "UPGRADE_STALLED",
            "turn": result.turn,
            "progress": state.upgrade.progress,
            "wood_required": state.upgrade.wood_required,
            "idle_builders": result.construction.idle_builders,
            "severity": "MEDIUM",
        })

    # ---------------------------------------------------------
    # 4. ENGINE FAULTS
    # ---------------------------------------------------------
    if result.clamped:
        events.append({
            "type": "RESOURCES_CLAMPED",
            "turn": result.turn,
            "clamped": dict(result.clamped),
            "severity": "CRITICAL",
        })

    return events
