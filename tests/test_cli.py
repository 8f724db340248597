"""Tests for the command line entry point and sample data."""

import io
import sys
from unittest.mock import patch

from circulation_desk import cli
from circulation_desk.library import Library
from circulation_desk.seed import SAMPLE_BOOKS, SAMPLE_MEMBERS, preload_sample_data


class TestSampleData:
    def test_preload(self, library):
        preload_sample_data(library)

        assert len(library.books()) == len(SAMPLE_BOOKS)
        assert library.get_book("9780306406157").available_copies == 300
        assert library.get_book("9783161484100").total_copies == 600
        assert [m.name for m in library.members()] == [m["name"] for m in SAMPLE_MEMBERS]
        assert [m.id for m in library.members()] == [1, 2]


class TestParser:
    def test_default_command(self):
        args = cli.build_parser().parse_args([])
        assert args.command is None

    def test_no_preload_flag(self):
        args = cli.build_parser().parse_args(["serve", "--no-preload"])
        assert args.command == "serve"
        assert args.no_preload is True


class TestMain:
    def test_console_with_sample_data(self, clean_env, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("5\n0\n"))

        assert cli.main(["console"]) == 0

        out = capsys.readouterr().out
        assert "The Wizard's Adventures" in out
        assert "Goodbye." in out

    def test_console_without_sample_data(self, clean_env, monkeypatch, capsys):
        monkeypatch.setattr(sys, "stdin", io.StringIO("5\n0\n"))

        assert cli.main(["console", "--no-preload"]) == 0

        out = capsys.readouterr().out
        assert "The Wizard's Adventures" not in out

    def test_preload_disabled_by_environment(self, clean_env, monkeypatch, capsys):
        monkeypatch.setenv("CIRCULATION_DESK_PRELOAD_SAMPLE_DATA", "false")
        monkeypatch.setattr(sys, "stdin", io.StringIO("5\n0\n"))

        cli.main([])

        assert "ISBN:" not in capsys.readouterr().out

    def test_serve_builds_server_for_library(self, clean_env):
        with patch("circulation_desk.server.serve") as serve:
            assert cli.main(["serve", "--no-preload"]) == 0

        library, config = serve.call_args.args
        assert isinstance(library, Library)
        assert library.books() == []
        assert config.server_name == "circulation-desk"
