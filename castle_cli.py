"""
Interactive command-line front-end for the castle.

Run with:  python castle_cli.py [--economy engine] [--turn-log PATH]
Replay a log:  python castle_cli.py --replay storage/turns/game.jsonl
"""

from __future__ import annotations

import argparse
import sys
from typing import Callable, Dict, List, Optional

from castle import Action, CastleState
from castle.core.economy import ECONOMY_PRESETS, get_economy
from infra.logger import configure_logging
from infra.settings import load_settings
from runtime.replay import replay_turn_log
from runtime.session import CastleSession

HELP = """
Game information:
  state                                   Show the current castle
  pending                                 Show actions queued for the next tick
  help                                    Show this help message

Actions (applied next tick):
  assign <miners> <farmers> <lumberjacks> <builders>
  hire <count>                            Hire workers
  fire <count>                            Fire workers
  buy <amount>                            Buy food
  upgrade                                 Start the next castle upgrade

Time control:
  tick                                    Advance one turn
  autotick start|stop|status              Automatic ticks

  quit, exit                              Leave the game
"""


def format_state(state: CastleState) -> str:
    lines = [
        f"Turn:         {state.turn}",
        f"Gold:         {state.gold}",
        f"Food:         {state.food}",
        f"Wood:         {state.wood}",
        f"Workers:      {state.workers}",
        f"Castle level: {state.castle_level}",
        "Jobs:",
        f"  Miners:       {state.jobs.miners}",
        f"  Farmers:      {state.jobs.farmers}",
        f"  Lumberjacks:  {state.jobs.lumberjacks}",
        f"  Builders:     {state.jobs.builders}",
    ]
    if state.upgrade.active:
        percent = 100.0 * state.upgrade.progress / state.upgrade.wood_required
        lines += [
            "Upgrade in progress:",
            f"  Target level: {state.upgrade.target_level}",
            f"  Progress:     {state.upgrade.progress}/{state.upgrade.wood_required} ({percent:.1f}%)",
        ]
    return "\n".join(lines)


def _parse_counts(args: List[str], expected: int, usage: str) -> List[int]:
    if len(args) != expected:
        raise ValueError(f"Usage: {usage}")
    try:
        return [int(arg) for arg in args]
    except ValueError:
        raise ValueError("All arguments must be integers") from None


class CastleShell:
    """Parses one command line at a time; returns the text to print."""

    def __init__(self, session: CastleSession, requested_by: str = "CLI"):
        self.session = session
        self.requested_by = requested_by
        self.done = False
        self._commands: Dict[str, Callable[[List[str]], str]] = {
            "help": lambda _args: HELP.strip("\n"),
            "state": lambda _args: format_state(self.session.state()),
            "pending": self._pending,
            "assign": self._assign,
            "hire": self._hire,
            "fire": self._fire,
            "buy": self._buy,
            "upgrade": self._upgrade,
            "tick": self._tick,
            "autotick": self._autotick,
            "quit": self._quit,
            "exit": self._quit,
        }

    def handle(self, line: str) -> str:
        parts = line.split()
        if not parts:
            return ""
        command, args = parts[0].lower(), parts[1:]
        handler = self._commands.get(command)
        if handler is None:
            return f"Unknown command: {command}. Type 'help' for available commands."
        try:
            return handler(args)
        except ValueError as exc:
            return str(exc)

    def _submit(self, action: Action, description: str) -> str:
        result = self.session.enqueue(action)
        if result.accepted:
            return f"OK {description} queued (applies at turn {result.applies_at_turn})"
        return f"Refused {description}: {result.reason}"

    def _assign(self, args: List[str]) -> str:
        miners, farmers, lumberjacks, builders = _parse_counts(
            args, 4, "assign <miners> <farmers> <lumberjacks> <builders>"
        )
        action = Action.assign_jobs(miners, farmers, lumberjacks, builders, requested_by=self.requested_by)
        return self._submit(action, "job assignment")

    def _hire(self, args: List[str]) -> str:
        (count,) = _parse_counts(args, 1, "hire <count>")
        return self._submit(Action.hire(count, requested_by=self.requested_by), f"hire {count}")

    def _fire(self, args: List[str]) -> str:
        (count,) = _parse_counts(args, 1, "fire <count>")
        return self._submit(Action.fire(count, requested_by=self.requested_by), f"fire {count}")

    def _buy(self, args: List[str]) -> str:
        (amount,) = _parse_counts(args, 1, "buy <amount>")
        return self._submit(Action.buy_food(amount, requested_by=self.requested_by), f"buy {amount} food")

    def _upgrade(self, args: List[str]) -> str:
        if args:
            raise ValueError("Usage: upgrade")
        return self._submit(Action.start_upgrade(requested_by=self.requested_by), "upgrade")

    def _pending(self, _args: List[str]) -> str:
        items = self.session.engine.pending_actions()
        if not items:
            return "No actions queued"
        return "\n".join(f"  {item.action}" for item in items)

    def _tick(self, _args: List[str]) -> str:
        result = self.session.advance()
        lines = [f"Advanced to turn {result.turn}"]
        lines += [f"  applied:  {action}" for action in result.applied]
        lines += [f"  rejected: {rejection.reason}" for rejection in result.rejected]
        return "\n".join(lines)

    def _autotick(self, args: List[str]) -> str:
        if len(args) != 1 or args[0].lower() not in {"start", "stop", "status"}:
            raise ValueError("Usage: autotick <start|stop|status>")
        sub = args[0].lower()
        if sub == "start":
            started = self.session.start_autotick()
            return "Auto-tick started" if started else "Auto-tick is already running"
        if sub == "stop":
            stopped = self.session.stop_autotick()
            return "Auto-tick stopped" if stopped else "Auto-tick was not running"
        return f"Auto-tick is {'enabled' if self.session.autotick_running else 'disabled'}"

    def _quit(self, _args: List[str]) -> str:
        self.done = True
        return "Goodbye!"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Castle economy simulator")
    parser.add_argument(
        "--economy",
        choices=sorted(ECONOMY_PRESETS),
        help="Economy preset (default: CASTLE_ECONOMY or 'engine')",
    )
    parser.add_argument("--turn-log", help="JSONL turn log path (default: CASTLE_TURN_LOG)")
    parser.add_argument("--no-turn-log", action="store_true", help="Do not write a turn log")
    parser.add_argument("--interval", type=float, help="Seconds between automatic ticks")
    parser.add_argument("--replay", metavar="PATH", help="Replay a turn log and report, then exit")
    parser.add_argument("--log-level", help="Logging level (default: WARNING; CASTLE_LOG_LEVEL only applies to the API)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.interval is not None and args.interval <= 0:
        parser.error(f"--interval must be positive, got {args.interval}")
    settings = load_settings()
    if args.economy:
        settings.economy = args.economy
    if args.interval is not None:
        settings.tick_interval = args.interval
    if args.turn_log:
        settings.turn_log = args.turn_log
    if args.no_turn_log:
        settings.turn_log = None

    configure_logging(args.log_level or "WARNING", json=settings.log_json, logfile=settings.log_file)

    if args.replay:
        report = replay_turn_log(args.replay, economy=get_economy(settings.economy))
        print(f"Replayed {report.ticks} ticks")
        if report.final_state is not None:
            print(format_state(report.final_state))
        if report.mismatch is not None:
            print(f"Diverged at turn {report.mismatch.turn}: {report.mismatch.differences()}")
        for turn, reason in report.rejected:
            print(f"Turn {turn}: logged action rejected on replay: {reason}")
        return 0 if report.ok else 1

    session = CastleSession.from_settings(settings)
    shell = CastleShell(session)
    print("Welcome to the castle! Type 'help' for available commands.\n")
    print(format_state(session.state()))
    try:
        while not shell.done:
            try:
                line = input("castle> ")
            except EOFError:
                break
            output = shell.handle(line)
            if output:
                print(output)
    except KeyboardInterrupt:
        print()
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
