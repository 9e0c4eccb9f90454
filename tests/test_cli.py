"""Tests for the dashboard command line."""

import json

from dashboard.cli import build_parser, main


class TestCli:
    """Argument handling and exit status."""

    def test_invalid_address_exits_with_error(self, capsys):
        code = main(["not-an-address", "--json"])

        assert code == 1
        view = json.loads(capsys.readouterr().out)
        assert view["status"] == "error"
        assert view["error"] == "Please enter a valid EVM address (0x…40 hex chars)."

    def test_invalid_address_table_output(self, capsys):
        code = main(["0x123"])

        assert code == 1
        assert "0x123" in capsys.readouterr().out

    def test_window_days_must_be_positive(self, capsys):
        code = main(["0x1111111111111111111111111111111111111111", "--window-days", "0"])

        assert code == 2
        assert "--window-days" in capsys.readouterr().err

    def test_parser_defaults(self):
        args = build_parser().parse_args(["0xabc"])
        assert args.address == "0xabc"
        assert args.api_url is None
        assert args.window_days is None
        assert args.json is False
