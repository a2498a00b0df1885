"""CLI entrypoint for the Hunter Evolution progress tracker."""

from __future__ import annotations

import argparse
import json
import time
from collections.abc import Callable

from .checks import DAILY_CHECKS
from .config import HunterSettings
from .journal import MOODS
from .logging_config import setup_logging
from .models import DIFFICULTIES, DOMAIN_IDS, MAX_RATING, MIN_RATING, QUEST_TYPES
from .quests import QuestDraft, QuestValidationError
from .scoring import AnswerStore, AssessmentOutcome
from .service import HunterService, today_iso
from .state import Quest
from .timer import CountdownTimer, format_time

InputFn = Callable[[str], str]
PrintFn = Callable[[str], None]
SleepFn = Callable[[float], None]
BACK_COMMANDS = {":back", ":b", "back"}
MENU_QUIT_COMMANDS = {"q"}
FLOW_EXIT_COMMANDS = {":quit", ":exit", ":q"}
MENU_BACK_COMMANDS = {"b"}


class QuitApp(Exception):
    """Signal immediate app exit from nested menu flows."""


def _service(settings: HunterSettings | None = None) -> HunterService:
    """Create app service from settings."""
    active = settings if settings is not None else HunterSettings()
    return HunterService(
        db_path=active.db_path,
        max_xp_for_level=active.max_xp_for_level,
        questions_path=active.questions_path,
    )


def run(argv: list[str] | None = None) -> int:
    """Run the CLI application."""
    parser = argparse.ArgumentParser(prog="hunterevo", description="Life-domain assessment and quest tracker")
    parser.add_argument("--db", default=None, help="SQLite database path (default: HUNTEREVO_DB_PATH)")
    parser.add_argument("--log-level", default=None, help="Log level for JSON logs on stderr")
    parser.add_argument("--questions", default=None, help="Replacement question catalog JSON (default: bundled)")
    subparsers = parser.add_subparsers(dest="command")
    subparsers.add_parser("play", help="Interactive menu (default)")
    assess = subparsers.add_parser("assess", help="Score an answers JSON object and print the result")
    assess.add_argument("--answers", default=None, help='JSON object of question id -> rating, e.g. {"1": 5}')
    subparsers.add_parser("status", help="Print profile and domain progress")
    args = parser.parse_args(argv)

    overrides: dict[str, object] = {}
    if args.db is not None:
        overrides["db_path"] = args.db
    if args.log_level is not None:
        overrides["log_level"] = args.log_level
    if args.questions is not None:
        overrides["questions_path"] = args.questions
    settings = HunterSettings(**overrides)
    setup_logging(settings.log_level)

    if args.command == "assess":
        return assess_command(args.answers, settings)
    if args.command == "status":
        return status_command(settings)
    return play_shell(settings=settings)


def assess_command(answers: str | None, settings: HunterSettings | None = None, print_fn: PrintFn = print) -> int:
    """Score answers non-interactively."""
    service = _service(settings)
    try:
        outcome = service.evaluate_assessment(answers)
        _print_outcome(outcome, print_fn)
        return 0
    finally:
        service.close()


def status_command(settings: HunterSettings | None = None, print_fn: PrintFn = print) -> int:
    """Print profile status non-interactively."""
    service = _service(settings)
    try:
        _status_flow(service, print_fn)
        return 0
    finally:
        service.close()


def play_shell(
    input_fn: InputFn = input,
    print_fn: PrintFn = print,
    settings: HunterSettings | None = None,
    sleep_fn: SleepFn = time.sleep,
) -> int:
    """Run persistent menu-driven shell."""
    service = _service(settings)
    try:
        try:
            while True:
                profile = service.state.profile
                print_fn("\n=== Hunter Evolution ===")
                print_fn(f"Hunter: {profile.name} | Level {profile.level} | {profile.rank} | {profile.total_xp} XP")
                print_fn("1) Take assessment")
                print_fn("2) Quests")
                print_fn("3) Daily quests")
                print_fn("4) Create quest")
                print_fn("5) Journal")
                print_fn("6) System checks")
                print_fn("7) Status")
                print_fn("8) Analytics")
                print_fn("q) Quit")
                choice = input_fn("Choose: ").strip().lower()

                if choice == "1":
                    _assessment_flow(service, input_fn, print_fn)
                elif choice == "2":
                    _quests_flow(service, input_fn, print_fn, sleep_fn)
                elif choice == "3":
                    _daily_quests_flow(service, input_fn, print_fn, sleep_fn)
                elif choice == "4":
                    _create_quest_flow(service, input_fn, print_fn)
                elif choice == "5":
                    _journal_flow(service, input_fn, print_fn)
                elif choice == "6":
                    _system_checks_flow(service, input_fn, print_fn)
                elif choice == "7":
                    _status_flow(service, print_fn)
                elif choice == "8":
                    _analytics_flow(service, print_fn)
                elif choice in MENU_QUIT_COMMANDS:
                    return 0
                else:
                    print_fn("Invalid choice.")
        except QuitApp:
            return 0
    finally:
        service.close()


def _print_outcome(outcome: AssessmentOutcome, print_fn: PrintFn) -> None:
    """Print an assessment result table."""
    result = outcome.result
    if outcome.used_default:
        print_fn("Answers could not be read; showing a sample assessment instead.")
    print_fn(f"\nOverall: {result.overall_rank} ({result.overall_percentage}%)")
    print_fn(result.overall_description)
    name_width = max(len("Domain"), max(len(score.name) for score in result.domain_scores))
    header = f"{'Domain':<{name_width}} {'Score':>5} Rank"
    print_fn(header)
    print_fn("-" * len(header))
    for score in result.domain_scores:
        print_fn(f"{score.name:<{name_width}} {score.percentage:>4}% {score.rank}")
    print_fn("Strengths: " + ", ".join(score.name for score in result.strengths))
    print_fn("Focus next: " + ", ".join(score.name for score in result.improvements))


def _assessment_flow(service: HunterService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Ask every question in order and score the answers."""
    store: AnswerStore = service.new_answer_store()
    questions = [question for domain in service.domains.values() for question in domain.questions]
    print_fn("\n=== Assessment ===")
    print_fn(f"Rate each statement {MIN_RATING}-{MAX_RATING}. Type :b or :q to leave.")
    for number, question in enumerate(questions, start=1):
        print_fn(f"\n[{number}/{len(questions)}] {service.domains[question.domain].name}")
        print_fn(question.question)
        if question.description:
            print_fn(question.description)
        while True:
            raw = input_fn("Rating: ").strip().lower()
            if raw in BACK_COMMANDS or raw in FLOW_EXIT_COMMANDS:
                print_fn("Assessment abandoned.")
                return
            if raw.isdigit() and MIN_RATING <= int(raw) <= MAX_RATING:
                store.answer(question.id, int(raw))
                break
            print_fn(f"Enter a number from {MIN_RATING} to {MAX_RATING}.")
    outcome = service.evaluate_assessment(store.to_json())
    _print_outcome(outcome, print_fn)


def _quest_line(quest: Quest) -> str:
    mark = "x" if quest.completed else " "
    extra = ""
    if quest.type == "timer" and quest.duration:
        extra = f" [{format_time(quest.duration)}]"
    elif quest.subtasks:
        extra = f" [{len(quest.subtasks)} steps]"
    return f"[{mark}] #{quest.id} {quest.title} ({quest.domain}, {quest.difficulty}, {quest.xp} XP){extra}"


def _complete_flow(
    service: HunterService, quests: list[Quest], input_fn: InputFn, print_fn: PrintFn, sleep_fn: SleepFn
) -> None:
    """Pick a quest from a list and complete it."""
    pending = [quest for quest in quests if not quest.completed]
    if not pending:
        print_fn("Nothing left to complete.")
        return
    choice = input_fn("Quest id to complete (b = back): ").strip().lower()
    if choice in MENU_BACK_COMMANDS:
        return
    if choice in MENU_QUIT_COMMANDS:
        raise QuitApp()
    if not choice.isdigit():
        print_fn("Invalid choice.")
        return
    quest_id = int(choice)
    target = next((quest for quest in pending if quest.id == quest_id), None)
    if target is None:
        print_fn("Quest not found or already completed.")
        return
    if target.type == "timer" and target.duration:
        if not _run_timer(target.duration, input_fn, print_fn, sleep_fn):
            print_fn("Timer stopped. Quest not completed.")
            return
    if target.type == "checklist" and target.subtasks:
        for step in target.subtasks:
            answer = input_fn(f"Done: {step}? (y/n) ").strip().lower()
            if answer != "y":
                print_fn("Checklist incomplete. Quest not completed.")
                return
    completed = service.complete_quest(quest_id)
    if completed is None:
        print_fn("Quest not found or already completed.")
        return
    print_fn(f"Quest complete: {completed.title} (+{completed.xp} XP). Total XP: {service.state.profile.total_xp}")


def _run_timer(duration: int, input_fn: InputFn, print_fn: PrintFn, sleep_fn: SleepFn) -> bool:
    """Count a timed quest down; return True when it runs to zero."""
    answer = input_fn(f"Start {format_time(duration)} timer? (y/n) ").strip().lower()
    if answer != "y":
        return False
    timer = CountdownTimer(duration, on_complete=lambda: print_fn("Time is up."))
    timer.start()
    while not timer.finished:
        sleep_fn(1)
        timer.tick()
        if timer.remaining and timer.remaining % 60 == 0:
            print_fn(f"{timer} remaining")
    return True


def _quests_flow(service: HunterService, input_fn: InputFn, print_fn: PrintFn, sleep_fn: SleepFn) -> None:
    """Browse quests by status and domain, and complete one."""
    status = "pending"
    domain: str | None = None
    while True:
        quests = service.list_quests(status, domain)
        label = domain or "all domains"
        print_fn(f"\n=== Quests: {status}, {label} ===")
        if quests:
            for quest in quests:
                print_fn(_quest_line(quest))
        else:
            print_fn("No quests match.")
        print_fn("c) Complete a quest")
        print_fn("s) Cycle status filter")
        print_fn("d) Cycle domain filter")
        print_fn("b) Back")
        print_fn("q) Quit")
        choice = input_fn("Choose: ").strip().lower()
        if choice in MENU_BACK_COMMANDS:
            return
        if choice in MENU_QUIT_COMMANDS:
            raise QuitApp()
        if choice == "c":
            _complete_flow(service, quests, input_fn, print_fn, sleep_fn)
        elif choice == "s":
            order = ("pending", "completed", "all")
            status = order[(order.index(status) + 1) % len(order)]
        elif choice == "d":
            options: list[str | None] = [None, *DOMAIN_IDS]
            domain = options[(options.index(domain) + 1) % len(options)]
        else:
            print_fn("Invalid choice.")


def _daily_quests_flow(service: HunterService, input_fn: InputFn, print_fn: PrintFn, sleep_fn: SleepFn) -> None:
    """Show today's generated quests."""
    quests = service.generate_daily_quests()
    print_fn(f"\n=== Daily Quests ({today_iso()}) ===")
    done = sum(1 for quest in quests if quest.completed)
    print_fn(f"Completed {done}/{len(quests)}")
    for quest in quests:
        print_fn(_quest_line(quest))
    _complete_flow(service, quests, input_fn, print_fn, sleep_fn)


def _pick(options: tuple[str, ...], label: str, default: str, input_fn: InputFn) -> str:
    raw = input_fn(f"{label} ({'/'.join(options)}) [{default}]: ").strip()
    if not raw:
        return default
    for option in options:
        if option.lower() == raw.lower():
            return option
    return raw


def _create_quest_flow(service: HunterService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Collect a custom quest and save it."""
    print_fn("\n=== Create Quest ===")
    title = input_fn("Title: ").strip()
    description = input_fn("Description: ").strip()
    domain = _pick(DOMAIN_IDS, "Domain", "physical", input_fn)
    quest_type = _pick(QUEST_TYPES, "Type", "simple", input_fn)
    difficulty = _pick(DIFFICULTIES, "Difficulty", "Easy", input_fn)
    minutes_text = input_fn("Estimated minutes [15]: ").strip()
    if minutes_text and not minutes_text.isdigit():
        print_fn("Estimated minutes must be a whole number.")
        return
    estimated_time = int(minutes_text) if minutes_text else 15
    subtasks: list[str] = []
    duration: int | None = None
    if quest_type == "checklist":
        subtasks_text = input_fn("Subtasks (comma separated): ")
        subtasks = [item for item in subtasks_text.split(",") if item.strip()]
    if quest_type == "timer":
        duration_text = input_fn("Timer minutes: ").strip()
        duration = int(duration_text) * 60 if duration_text.isdigit() else None

    draft = QuestDraft(
        title=title,
        description=description,
        domain=domain,
        type=quest_type,
        difficulty=difficulty,
        estimated_time=estimated_time,
        subtasks=subtasks,
        duration=duration,
    )
    try:
        quest = service.create_quest(draft)
    except QuestValidationError as exc:
        print_fn(f"Could not create quest: {exc}")
        return
    print_fn(f"Created quest #{quest.id}: {quest.title} ({quest.xp} XP)")


def _journal_flow(service: HunterService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """List, add and delete journal entries."""
    while True:
        print_fn("\n=== Journal ===")
        entries = service.journal.entries()
        if entries:
            for entry in entries:
                print_fn(f"#{entry.id} {entry.date} [{entry.mood}] {entry.title}")
        else:
            print_fn("No entries yet.")
        print_fn("a) Add entry")
        print_fn("v) View entry")
        print_fn("d) Delete entry")
        print_fn("b) Back")
        print_fn("q) Quit")
        choice = input_fn("Choose: ").strip().lower()
        if choice in MENU_BACK_COMMANDS:
            return
        if choice in MENU_QUIT_COMMANDS:
            raise QuitApp()
        if choice == "a":
            title = input_fn("Title: ")
            content = input_fn("Entry: ")
            mood = _pick(MOODS, "Mood", "neutral", input_fn)
            try:
                entry = service.add_journal_entry(title, content, mood)
            except ValueError as exc:
                print_fn(f"Could not save entry: {exc}")
                continue
            print_fn(f"Saved entry #{entry.id}.")
        elif choice in {"v", "d"}:
            raw = input_fn("Entry id: ").strip()
            if not raw.isdigit():
                print_fn("Invalid choice.")
                continue
            entry_id = int(raw)
            if choice == "d":
                print_fn("Entry deleted." if service.delete_journal_entry(entry_id) else "Entry not found.")
                continue
            match = next((entry for entry in entries if entry.id == entry_id), None)
            if match is None:
                print_fn("Entry not found.")
                continue
            print_fn(f"\n{match.title} ({match.date}, {match.mood})")
            print_fn(match.content)
        else:
            print_fn("Invalid choice.")


def _system_checks_flow(service: HunterService, input_fn: InputFn, print_fn: PrintFn) -> None:
    """Toggle today's system checks."""
    today = today_iso()
    while True:
        checks = service.system.today_checks(today)
        print_fn("\n=== System Checks ===")
        print_fn(
            f"Streak: {service.system.data.system_streak} days | "
            f"Today: {service.system.completion_rate(today)}% | "
            f"Motivation mode: {'on' if service.system.data.motivation_mode else 'off'}"
        )
        for idx, (check, done) in enumerate(zip(DAILY_CHECKS, checks, strict=True), start=1):
            print_fn(f"{idx}) [{'x' if done else ' '}] {check.title} ({check.category})")
        print_fn("m) Toggle motivation mode")
        print_fn("b) Back")
        print_fn("q) Quit")
        choice = input_fn("Toggle check: ").strip().lower()
        if choice in MENU_BACK_COMMANDS:
            return
        if choice in MENU_QUIT_COMMANDS:
            raise QuitApp()
        if choice == "m":
            service.toggle_motivation_mode()
            continue
        if choice.isdigit() and 1 <= int(choice) <= len(DAILY_CHECKS):
            service.toggle_system_check(int(choice) - 1, today)
            continue
        print_fn("Invalid choice.")


def _status_flow(service: HunterService, print_fn: PrintFn) -> None:
    """Print profile, stats and domain progress."""
    state = service.state
    profile = state.profile
    stats = state.stats
    print_fn("\n=== Status ===")
    print_fn(f"{profile.name}: Level {profile.level}, {profile.rank}, {profile.total_xp} XP")
    print_fn(
        f"Streak {stats.streak} | Today {stats.today_completed}/{stats.today_total} | "
        f"Week {stats.weekly_completed}/{stats.weekly_goal}"
    )
    name_width = max(len("Domain"), max(len(domain.name) for domain in state.domains))
    header = f"{'Domain':<{name_width}} {'Rank':<7} {'XP':>6} {'Progress':>8} {'Quests':>6}"
    print_fn(header)
    print_fn("-" * len(header))
    for domain in state.domains:
        print_fn(
            f"{domain.name:<{name_width}} {domain.rank:<7} {domain.xp:>6} {domain.progress:>7}% {domain.quests:>6}"
        )
    earned = [achievement for achievement in state.achievements if achievement.earned]
    print_fn(f"Achievements: {len(earned)}/{len(state.achievements)}")
    last = service.last_assessment()
    if last is not None:
        print_fn(f"Last assessment: {last.get('overall_rank')} ({last.get('overall_percentage')}%)")


def _analytics_flow(service: HunterService, print_fn: PrintFn) -> None:
    """Print completion analytics from daily metrics."""
    summary = service.analytics()
    print_fn("\n=== Analytics (last 7 days) ===")
    print_fn(f"Success rate: {summary.success_rate}%")
    print_fn(f"Current streak: {summary.current_streak} | Best streak: {summary.best_streak}")
    print_fn(f"Trend: {summary.trend}")
    print_fn("By domain: " + json.dumps(summary.domain_rates))


def main_entry() -> None:
    """Console script entrypoint."""
    raise SystemExit(run())


if __name__ == "__main__":  # pragma: no cover
    main_entry()
