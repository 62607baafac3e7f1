from __future__ import annotations

import argparse

from .config import load_settings
from .core.models import CONTRIBUTOR_CLASSES
from .data.store import AgendaStore
from .logging_config import setup_logging


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="improv-agenda")
    sub = parser.add_subparsers(dest="command", required=True)

    list_cmd = sub.add_parser("list", help="List contributors")
    list_cmd.add_argument(
        "--kind", choices=sorted(CONTRIBUTOR_CLASSES), help="Only this kind"
    )

    agenda_cmd = sub.add_parser("agenda", help="Show the public open dates")
    agenda_cmd.add_argument("identifier", help="Contributor identifier")
    return parser


def main(argv: list[str] | None = None) -> int:
    settings = load_settings()
    log = setup_logging(settings.log_level)
    args = build_parser().parse_args(argv)
    store = AgendaStore(path=settings.data_path)

    if args.command == "list":
        for contributor in store.list_contributors(args.kind):
            print(f"{contributor.kind}\t{contributor.identifier}\t{contributor.name}")
        return 0

    contributor = store.get_contributor_by_identifier(args.identifier)
    if contributor is None:
        log.error("No contributor with identifier %r", args.identifier)
        return 2
    for open_date in store.public_owned_open_dates(contributor.id):
        when = open_date.date.isoformat() if open_date.date else "-"
        print(f"{when}\t{open_date.title}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
