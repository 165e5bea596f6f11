#!/usr/bin/env python3
"""
AREABOARD - CLI Interface
=========================
Command-line access to the collaborative project board.

Usage:
    areaboard init
    areaboard areas
    areaboard add ai "Train model" -d "First pass" --user Ximena
    areaboard add ai "Deploy" --depends-on subpoint:ai:1718000000000 --user Ximena
    areaboard toggle subpoint:ai:1718000000000 --user Andres
    areaboard status ai
    areaboard watch ai --interval 5
"""

import argparse
import json
import logging
import sys
import time
from typing import List, Optional

from .api import ProjectBoard, Result
from .config import BoardSettings, build_store, load_settings
from .errors import AreaBoardError
from .schema import DashboardStats, SubPointEdit, SubPointState

logger = logging.getLogger("areaboard")

STATE_ICONS = {
    SubPointState.INCOMPLETE: "⬜",
    SubPointState.BLOCKED: "🟡",
    SubPointState.COMPLETE: "✅",
}


def progress_bar(percent: int) -> str:
    return f"{'█' * (percent // 10)}{'░' * (10 - percent // 10)} {percent}%"


def dump_json(result: Result) -> str:
    return json.dumps(result.model_dump(mode="json", by_alias=True), indent=2, ensure_ascii=False)


def dashboard_report(stats: DashboardStats) -> str:
    """Human-readable board overview"""
    lines = ["📋 Project Board", ""]
    for area in stats.areas:
        lines.append(f"  {area.name:<28} {progress_bar(area.progress)}")
    lines.extend([
        "",
        f"Sub-points: {stats.completed_subpoints}/{stats.total_subpoints} completed",
        f"Comments:   {stats.total_comments}",
    ])
    return "\n".join(lines)


def area_report(board: ProjectBoard, area_id: str) -> Result:
    """Human-readable area status: progress, tasks, recent comments"""
    area_result = board.get_area(area_id)
    if not area_result.success:
        return area_result
    statuses = board.subpoint_statuses(area_id)
    if not statuses.success:
        return statuses
    comments = board.list_comments(area_id)
    if not comments.success:
        return comments

    area = area_result.data
    lines = [
        f"📋 {area.name}",
        f"Progress: {progress_bar(area.progress)}",
        "",
        "Sub-points:",
    ]
    if not statuses.data:
        lines.append("  (none)")
    for row in statuses.data:
        sp = row.subpoint
        icon = STATE_ICONS.get(row.state, "❓")
        extra = ""
        if row.dangling:
            extra = " (dependency deleted)"
        elif sp.depends_on:
            extra = f" (depends on: {row.dependency_title} [{row.dependency_area}])"
        owner = f" @{sp.responsible_user}" if sp.responsible_user else ""
        lines.append(f"  {icon} [{sp.id}] {sp.title}{owner}{extra}")

    if comments.data:
        lines.extend(["", "Comments:"])
        for comment in comments.data[:5]:
            lines.append(f"  💬 {comment.username}: {comment.message}")

    return Result.ok("\n".join(lines))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="areaboard",
        description="AREABOARD - Collaborative project areas with task dependencies",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  areaboard init                               Create the default areas
  areaboard areas                              List areas with progress
  areaboard list ai                            List sub-points of an area
  areaboard add ai "Deploy" --depends-on ID    Add a gated sub-point
  areaboard edit ID --depends-on none          Drop a dependency
  areaboard toggle ID                          Complete / reopen
  areaboard claim ID                           Take responsibility
  areaboard comment ai "Looks good"            Add a comment
  areaboard status                             Board dashboard
  areaboard watch ai                           Re-fetch an area periodically
        """
    )
    parser.add_argument("--backend", choices=["file", "memory", "supabase"], help="Store backend")
    parser.add_argument("--data", dest="data_path", help="JSON store path (file backend)")
    parser.add_argument("--user", help="Acting username (default: $AREABOARD_USER)")
    parser.add_argument("--json", action="store_true", help="Output raw results as JSON")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at INFO level")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("init", help="Initialize the default project areas")
    subparsers.add_parser("areas", help="List project areas")

    list_parser = subparsers.add_parser("list", help="List sub-points of an area")
    list_parser.add_argument("area_id", nargs="?", help="Area ID (all areas if omitted)")

    add_parser = subparsers.add_parser("add", help="Add a sub-point")
    add_parser.add_argument("area_id", help="Area ID")
    add_parser.add_argument("title", help="Sub-point title")
    add_parser.add_argument("-d", "--description", default="", help="Description")
    add_parser.add_argument("--depends-on", help="ID of the sub-point this depends on")

    edit_parser = subparsers.add_parser("edit", help="Edit a sub-point you created")
    edit_parser.add_argument("subpoint_id", help="Sub-point ID")
    edit_parser.add_argument("--title", help="New title")
    edit_parser.add_argument("-d", "--description", help="New description")
    edit_parser.add_argument("--depends-on", help="New dependency ID, or 'none' to clear")

    for name, help_text in (
        ("toggle", "Complete or reopen a sub-point"),
        ("claim", "Take responsibility for a sub-point"),
        ("delete", "Delete a sub-point you created"),
    ):
        cmd_parser = subparsers.add_parser(name, help=help_text)
        cmd_parser.add_argument("subpoint_id", help="Sub-point ID")

    comments_parser = subparsers.add_parser("comments", help="List comments of an area")
    comments_parser.add_argument("area_id", help="Area ID")

    comment_parser = subparsers.add_parser("comment", help="Add a comment to an area")
    comment_parser.add_argument("area_id", help="Area ID")
    comment_parser.add_argument("message", help="Comment text")

    status_parser = subparsers.add_parser("status", help="Dashboard, or one area's report")
    status_parser.add_argument("area_id", nargs="?", help="Area ID")

    watch_parser = subparsers.add_parser("watch", help="Re-fetch status periodically")
    watch_parser.add_argument("area_id", nargs="?", help="Area ID")
    watch_parser.add_argument("-i", "--interval", type=float, help="Seconds between refreshes")
    watch_parser.add_argument("-n", "--iterations", type=int, help="Stop after N refreshes")

    return parser


def status_result(board: ProjectBoard, area_id: Optional[str]) -> Result:
    if area_id:
        return area_report(board, area_id)
    result = board.dashboard()
    if result.success:
        return Result.ok(dashboard_report(result.data))
    return result


def watch(board: ProjectBoard, area_id: Optional[str], interval: float, iterations: Optional[int]) -> int:
    """Polling refresh: each round supersedes the previous one"""
    logger.info(f"👀 Watching {area_id or 'board'} every {interval:g}s")
    count = 0
    try:
        while iterations is None or count < iterations:
            if count:
                time.sleep(interval)
            result = status_result(board, area_id)
            count += 1
            if not result.success:
                print(f"❌ {result.error}")
                return 1
            print(result.data)
            print(f"(refreshed {time.strftime('%H:%M:%S')} every {interval:g}s)")
    except KeyboardInterrupt:
        pass
    return 0


def render(result: Result, as_json: bool) -> str:
    if as_json:
        return dump_json(result)
    data = result.data
    if isinstance(data, str):
        return data
    if isinstance(data, list):
        lines = []
        for item in data:
            if hasattr(item, "progress"):
                lines.append(f"[{item.id}] {item.name}: {item.progress}%")
            elif hasattr(item, "title"):
                mark = "x" if item.completed else " "
                deps = f" -> {item.depends_on}" if item.depends_on else ""
                lines.append(f"[{mark}] {item.id} {item.title}{deps}")
            elif hasattr(item, "message"):
                lines.append(f"{item.username}: {item.message}")
        return "\n".join(lines) if lines else "(empty)"
    if data is None:
        return "✅ Done"
    if hasattr(data, "title"):
        state = "completed" if data.completed else "open"
        owner = f", responsible: {data.responsible_user}" if data.responsible_user else ""
        return f"✅ {data.id} {data.title} ({state}{owner})"
    if hasattr(data, "message"):
        return f"💬 {data.id} {data.username}: {data.message}"
    return f"✅ {data}"


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    try:
        settings: BoardSettings = load_settings(
            backend=args.backend,
            data_path=args.data_path,
            user=args.user,
        )
        logging.basicConfig(
            level=logging.INFO if args.verbose else settings.log_level.upper(),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
        board = ProjectBoard(build_store(settings))
    except AreaBoardError as e:
        print(f"❌ {e}")
        return 1

    user = settings.user or ""

    if args.command == "init":
        result = board.initialize()
    elif args.command == "areas":
        result = board.list_areas()
    elif args.command == "list":
        result = board.list_subpoints(args.area_id) if args.area_id else board.list_all_subpoints()
    elif args.command == "add":
        result = board.create_subpoint(
            args.area_id,
            args.title,
            created_by=user,
            description=args.description,
            depends_on=args.depends_on,
        )
    elif args.command == "edit":
        fields = {}
        if args.title is not None:
            fields["title"] = args.title
        if args.description is not None:
            fields["description"] = args.description
        if args.depends_on is not None:
            fields["depends_on"] = None if args.depends_on.lower() == "none" else args.depends_on
        result = board.edit_subpoint(args.subpoint_id, user, SubPointEdit(**fields))
    elif args.command == "toggle":
        result = board.toggle_complete(args.subpoint_id, user)
    elif args.command == "claim":
        result = board.claim_responsibility(args.subpoint_id, user)
    elif args.command == "delete":
        result = board.delete_subpoint(args.subpoint_id, user)
    elif args.command == "comments":
        result = board.list_comments(args.area_id)
    elif args.command == "comment":
        result = board.add_comment(args.area_id, user, args.message)
    elif args.command == "status":
        result = status_result(board, args.area_id)
    elif args.command == "watch":
        interval = args.interval or settings.poll_interval
        return watch(board, args.area_id, interval, args.iterations)
    else:
        parser.print_help()
        return 1

    if not result.success:
        if args.json:
            print(dump_json(result))
        else:
            print(f"❌ {result.error}")
        return 1

    print(render(result, args.json))
    return 0


if __name__ == "__main__":
    sys.exit(main())
