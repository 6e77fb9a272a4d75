from __future__ import annotations

import argparse
import logging
import sys
from typing import Callable, Dict, Optional, TextIO

from sitewatch.config import FETCHERS, load_config
from sitewatch.errors import SiteWatchError
from sitewatch.logger import setup_logging
from sitewatch.session import CrawlSession

log = logging.getLogger("sitewatch")

HELP_TEXT = """commands:
  set-url <url>           set the listing root URL (alias: url)
  set-interval <minutes>  set the refresh period in minutes (alias: interval)
  start                   start crawling
  stop                    stop re-scheduling; queued pages still finish
  query <sql>             run a read query, print tab-separated rows
  export <path>           write every stored listing to a TSV file
  status                  show schedule state and crawl statistics
  help                    show this text
  quit                    stop and exit (alias: exit)"""


class CommandShell:
    """Reads operator commands line by line and forwards them to a CrawlSession."""

    PROMPT = "-> "

    def __init__(self, session: CrawlSession, out: TextIO = sys.stdout) -> None:
        self._session = session
        self._out = out
        self._commands: Dict[str, Callable[[str], bool]] = {
            "set-url": self._cmd_url,
            "url": self._cmd_url,
            "set-interval": self._cmd_interval,
            "interval": self._cmd_interval,
            "start": self._cmd_start,
            "stop": self._cmd_stop,
            "query": self._cmd_query,
            "export": self._cmd_export,
            "status": self._cmd_status,
            "help": self._cmd_help,
            "quit": self._cmd_quit,
            "exit": self._cmd_quit,
        }

    def execute(self, line: str) -> bool:
        """Run one command line; return False when the shell should exit."""
        parts = line.strip().split(None, 1)
        if not parts:
            return True
        name, arg = parts[0].lower(), (parts[1] if len(parts) > 1 else "")
        handler = self._commands.get(name)
        if handler is None:
            self._print(f"unknown command {name!r}; type 'help'")
            return True
        try:
            return handler(arg)
        except SiteWatchError as exc:
            self._print(f"error: {exc}")
            return True

    def run(self, stdin: TextIO = sys.stdin) -> None:
        self._print("Site watcher")
        self._print("---------------------")
        self._print("Add a time interval and a url to watch")
        while True:
            self._out.write(self.PROMPT)
            self._out.flush()
            try:
                line = stdin.readline()
            except KeyboardInterrupt:
                self._print("")
                break
            if not line:
                self._print("")
                break
            if not self.execute(line):
                break

    # --- handlers ---
    def _cmd_url(self, arg: str) -> bool:
        self._print(f"url set to {self._session.set_url(arg)}")
        return True

    def _cmd_interval(self, arg: str) -> bool:
        self._print(f"interval set to {self._session.set_interval(arg)} min")
        return True

    def _cmd_start(self, arg: str) -> bool:
        self._session.start()
        self._print("started")
        return True

    def _cmd_stop(self, arg: str) -> bool:
        self._session.stop()
        self._print("stopped")
        return True

    def _cmd_query(self, arg: str) -> bool:
        self._out.write(self._session.query(arg))
        self._out.flush()
        return True

    def _cmd_export(self, arg: str) -> bool:
        count = self._session.export(arg.strip())
        self._print(f"exported {count} rows to {arg.strip()}")
        return True

    def _cmd_status(self, arg: str) -> bool:
        self._print(self._session.status())
        return True

    def _cmd_help(self, arg: str) -> bool:
        self._print(HELP_TEXT)
        return True

    def _cmd_quit(self, arg: str) -> bool:
        return False

    def _print(self, text: str) -> None:
        self._out.write(text + "\n")
        self._out.flush()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Periodically crawl a paginated listing site into SQLite")
    parser.add_argument("--config", help="Path to a JSON config file")

    parser.add_argument("--url", help="Listing root URL")
    parser.add_argument("--interval", dest="interval_minutes", type=int, help="Refresh interval in minutes")
    parser.add_argument("--db", dest="db_path", help="SQLite database path (default: in memory)")

    parser.add_argument("--workers", type=int, help="Number of fetch workers")
    parser.add_argument("--rate-interval", dest="rate_interval_secs", type=float, help="Seconds between fetches, shared by all workers")
    parser.add_argument("--timeout", dest="fetch_timeout", type=float, help="Per-fetch timeout in seconds")
    parser.add_argument("--fetcher", choices=FETCHERS, help="HTTP client: plain requests or curl_cffi impersonation")

    parser.add_argument("--log-level", dest="log_level", help="DEBUG, INFO, WARNING or ERROR")
    parser.add_argument("--start", action="store_true", help="Start crawling immediately")
    return parser


def main(argv: Optional[list] = None) -> int:
    args = build_parser().parse_args(argv)
    overrides = {k: v for k, v in vars(args).items() if k not in ("config", "start")}
    try:
        config = load_config(args.config, **overrides)
    except (OSError, ValueError, TypeError, SiteWatchError) as exc:
        print(f"config error: {exc}", file=sys.stderr)
        return 2

    setup_logging(config.log_level)
    try:
        session = CrawlSession(config)
    except SiteWatchError as exc:
        log.error(f"startup failed error={exc}")
        return 1

    shell = CommandShell(session)
    try:
        if args.start:
            shell.execute("start")
        shell.run()
    finally:
        session.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
