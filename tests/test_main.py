"""Tests for the interactive command shell and the CLI entry point."""

import io
import unittest
from unittest import mock

import main as cli

from sitewatch.config import WatchConfig
from sitewatch.session import CrawlSession
from sitewatch.storage import SqliteListingStore


class TestCommandShell(unittest.TestCase):
    """Verify command dispatch and error reporting."""

    def setUp(self):
        self.out = io.StringIO()
        self.session = CrawlSession(WatchConfig(), store=SqliteListingStore(":memory:"))
        self.shell = cli.CommandShell(self.session, out=self.out)

    def tearDown(self):
        self.session.close()

    def test_blank_line_is_ignored(self):
        """An empty line keeps the shell running and prints nothing."""
        self.assertTrue(self.shell.execute("   \n"))
        self.assertEqual(self.out.getvalue(), "")

    def test_unknown_command_prints_hint(self):
        """Unknown commands are reported, not raised."""
        self.assertTrue(self.shell.execute("launch"))
        self.assertIn("unknown command 'launch'", self.out.getvalue())

    def test_invalid_interval_prints_error(self):
        """A rejected value is printed as an error line."""
        self.assertTrue(self.shell.execute("interval 0"))
        self.assertIn("error:", self.out.getvalue())
        self.assertEqual(self.session.state.interval_minutes, 0)

    def test_aliases_set_url_and_interval(self):
        """The short and long command names do the same thing."""
        self.shell.execute("url https://www.example.hu/auto")
        self.shell.execute("set-interval 5")
        self.assertEqual(self.session.state.url, "https://www.example.hu/auto")
        self.assertEqual(self.session.state.interval_minutes, 5)

    def test_start_without_settings_prints_error(self):
        """start is refused until a URL and interval are set."""
        self.shell.execute("start")
        self.assertIn("error: no URL set", self.out.getvalue())

    def test_stop_while_idle_prints_error(self):
        """stop without start is a reported state error."""
        self.shell.execute("stop")
        self.assertIn("error: not started", self.out.getvalue())

    def test_query_prints_tsv(self):
        """query writes the header and rows to the output."""
        self.shell.execute("query SELECT id, name FROM cars")
        self.assertEqual(self.out.getvalue(), "id\tname\n")

    def test_bad_query_prints_error(self):
        """A failing query is reported and the shell continues."""
        self.assertTrue(self.shell.execute("query SELECT * FROM nowhere"))
        self.assertIn("error: query failed", self.out.getvalue())

    def test_quit_ends_loop(self):
        """quit and exit return False."""
        self.assertFalse(self.shell.execute("quit"))
        self.assertFalse(self.shell.execute("EXIT"))

    def test_run_reads_until_quit(self):
        """run() processes lines until quit and prints the prompt each time."""
        self.shell.run(io.StringIO("help\ninterval 3\nquit\nstatus\n"))
        output = self.out.getvalue()
        self.assertIn("commands:", output)
        self.assertIn("interval set to 3 min", output)
        self.assertNotIn("state      :", output)
        self.assertEqual(output.count(cli.CommandShell.PROMPT), 3)

    def test_run_stops_at_end_of_input(self):
        """End of input ends the loop like quit."""
        self.shell.run(io.StringIO("help\n"))
        self.assertEqual(self.out.getvalue().count(cli.CommandShell.PROMPT), 2)


class TestMain(unittest.TestCase):
    """Verify argument handling of the entry point."""

    def test_parser_maps_flags_to_config_keys(self):
        """Flags use the config field names as destinations."""
        args = cli.build_parser().parse_args(["--interval", "5", "--db", "cars.db", "--fetcher", "curl"])
        self.assertEqual(args.interval_minutes, 5)
        self.assertEqual(args.db_path, "cars.db")
        self.assertEqual(args.fetcher, "curl")
        self.assertFalse(args.start)

    def test_bad_config_exits_with_code_2(self):
        """A config error is reported before anything starts."""
        with mock.patch("sys.stderr", new_callable=io.StringIO) as err:
            self.assertEqual(cli.main(["--workers", "0"]), 2)
        self.assertIn("config error", err.getvalue())

    def test_main_runs_shell_and_closes_session(self):
        """main() wires config, session and shell, and closes the session on exit."""
        with mock.patch.object(cli, "setup_logging"), \
                mock.patch.object(cli, "CrawlSession") as session_cls, \
                mock.patch.object(cli.CommandShell, "run") as run:
            self.assertEqual(cli.main(["--interval", "2"]), 0)
        config = session_cls.call_args[0][0]
        self.assertEqual(config.interval_minutes, 2)
        run.assert_called_once_with()
        session_cls.return_value.close.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
