"""Command-line front end for the walk-in queue."""

import argparse
import logging
import sys
from pathlib import Path

from .announcements import AnnouncementBoard
from .audit import AuditLogger
from .clock import ShopClock
from .config import Settings
from .errors import WaitlistError
from .lifecycle import WaitlistManager
from .schedule_admin import ScheduleAdmin
from .store import WaitlistStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="walkin", description="Walk-in queue and business hours manager"
    )
    parser.add_argument("--location", help="Shop location id (default: $WALKIN_LOCATION_ID)")
    parser.add_argument("--data", type=Path, help="Path to the store JSON file")
    parser.add_argument("--timezone", help="IANA time zone of the shop")
    parser.add_argument("--audit-log", type=Path, help="Path to audit log file (optional)")
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Show open/closed status and queue position")
    status.add_argument("--customer", help="Customer id to show the position for")

    join = sub.add_parser("join", help="Join the queue")
    join.add_argument("--customer", required=True)
    join.add_argument("--guests", type=int, default=1, choices=[1, 2])
    join.add_argument("--email", help="Contact address for the position notice")

    leave = sub.add_parser("leave", help="Leave the queue")
    leave.add_argument("--customer", required=True)

    sub.add_parser("serve-next", help="Serve the next customer")
    sub.add_parser("queue", help="List the queue in serving order")

    promote = sub.add_parser("promote", help="Raise an entry's priority level")
    promote.add_argument("--entry", required=True)
    promote.add_argument("--level", type=int, default=1)

    demote = sub.add_parser("demote", help="Lower an entry's priority level")
    demote.add_argument("--entry", required=True)
    demote.add_argument("--level", type=int, default=0)

    hours = sub.add_parser("hours", help="Show or change business hours")
    hours_sub = hours.add_subparsers(dest="hours_command", required=True)
    hours_sub.add_parser("show", help="Weekly hours and upcoming closures")
    hours_set = hours_sub.add_parser("set", help="Set the hours for one weekday")
    hours_set.add_argument("--day", type=int, required=True, help="0 = Sunday .. 6 = Saturday")
    hours_set.add_argument("--closed", action="store_true", help="Closed all day")
    hours_set.add_argument("--start", help="Opening time, HH:MM (24h)")
    hours_set.add_argument("--end", help="Closing time, HH:MM (24h)")
    hours_load = hours_sub.add_parser("load", help="Import hours from a JSON file")
    hours_load.add_argument("file", type=Path)

    closure = sub.add_parser("closure", help="Close or reopen a specific date")
    closure.add_argument("--date", required=True, help="YYYY-MM-DD")
    closure.add_argument("--reopen", action="store_true", help="Remove the closure")
    closure.add_argument("--reason")

    announce = sub.add_parser("announce", help="Post an announcement")
    announce.add_argument("--title", required=True)
    announce.add_argument("--message", required=True)

    news = sub.add_parser("announcements", help="List announcements for a customer")
    news.add_argument("--customer", required=True)
    news.add_argument("--mark-read", action="store_true", help="Mark all as read")

    return parser


def _print_entry(prefix: str, entry) -> None:
    print(
        f"{prefix} {entry.id} customer={entry.customer_id} guests={entry.guest_count} "
        f"priority={entry.priority_level}"
    )


def run(args: argparse.Namespace) -> int:
    settings = Settings.from_env(
        location_id=args.location,
        data_path=args.data,
        timezone=args.timezone,
        audit_log=args.audit_log,
    )
    store = WaitlistStore(settings.data_path)
    audit = AuditLogger(settings.audit_log) if settings.audit_log else None
    clock = ShopClock(settings.timezone)
    location = settings.location_id

    if args.command == "hours":
        admin = ScheduleAdmin(store, audit)
        if args.hours_command == "set":
            rule = admin.set_weekly_hours(
                location, args.day, not args.closed, args.start, args.end
            )
            print(rule.model_dump_json())
        elif args.hours_command == "load":
            ok, errors = admin.load_shop_file(location, args.file)
            if not ok:
                for error in errors:
                    print(f"Error: {error}")
                return 1
            print(f"Loaded hours from {args.file}")
        else:
            today = clock.resolve(clock.now()).date
            print(admin.get_hours(location, today).model_dump_json(indent=2))
        return 0

    if args.command == "closure":
        closure = ScheduleAdmin(store, audit).set_closure(
            location, args.date, not args.reopen, args.reason
        )
        print(f"Closed on {closure.date}" if closure else f"Reopened {args.date}")
        return 0

    if args.command in ("announce", "announcements"):
        board = AnnouncementBoard(store, audit)
        if args.command == "announce":
            posted = board.post(location, args.title, args.message)
            print(f"Posted announcement {posted.id}")
            return 0
        for item in board.list_for(location, args.customer):
            marker = " " if item.read else "*"
            print(f"{marker} {item.created_at:%Y-%m-%d %H:%M} {item.title}: {item.message}")
        if args.mark_read:
            board.mark_all_read(location, args.customer)
        return 0

    with WaitlistManager(store, clock, settings.smtp.notifier(), audit) as manager:
        if args.command == "status":
            status = manager.get_schedule_status(location)
            print(status.today_hours_text + (" (open now)" if status.is_open_now else ""))
            if status.next_open_text:
                print(status.next_open_text)
            view = manager.get_queue_view(location, args.customer)
            print(f"In queue: {view.total_entries} entries, {view.total_people} people")
            if args.customer:
                if view.position is None:
                    print("You are not on the waitlist")
                else:
                    print(
                        f"Position {view.position}, {view.people_ahead} people ahead, "
                        f"about {view.estimated_wait_low_minutes}-"
                        f"{view.estimated_wait_high_minutes} minutes"
                    )
        elif args.command == "join":
            if args.email:
                manager.register_contact(location, args.customer, args.email)
            _print_entry("Joined", manager.join(location, args.customer, args.guests))
        elif args.command == "leave":
            _print_entry("Left", manager.leave(location, args.customer))
        elif args.command == "serve-next":
            _print_entry("Serving", manager.serve_next(location))
        elif args.command == "promote":
            _print_entry("Updated", manager.promote(location, args.entry, args.level))
        elif args.command == "demote":
            _print_entry("Updated", manager.demote(location, args.entry, args.level))
        elif args.command == "queue":
            for row in manager.list_queue(location):
                joined = row.joined_at.astimezone(clock.tz)
                print(
                    f"{row.position:>3}. {row.email} guests={row.guest_count} "
                    f"priority={row.priority_level} joined={joined:%H:%M} id={row.id}"
                )
    return 0


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )
    try:
        code = run(args)
    except (WaitlistError, ValueError) as e:
        print(f"Error: {e}")
        raise SystemExit(1)
    sys.exit(code)


if __name__ == "__main__":
    main()
