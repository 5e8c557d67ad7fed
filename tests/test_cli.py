"""Tests for the command-line export."""

from __future__ import annotations

import argparse
import logging

import pytest

from throttlemap.__main__ import main, parse_points
from throttlemap.model.points import Point


@pytest.fixture(autouse=True)
def restore_logging():
    """The export command installs a stderr handler on the package logger."""
    yield
    package_logger = logging.getLogger("throttlemap")
    package_logger.handlers.clear()
    package_logger.setLevel(logging.NOTSET)


class TestParsePoints:

    def test_parses_pairs(self):
        assert parse_points("0,0 512,16000 1023,32767") == [
            Point(0, 0), Point(512, 16000), Point(1023, 32767)
        ]

    @pytest.mark.parametrize("text", ["", "1;2", "a,b", "1,2,3"])
    def test_rejects_malformed(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_points(text)


class TestExportCommand:

    def test_prints_table(self, capsys):
        code = main(["export", "--points", "0,0 512,16000 1023,32767", "--method", "Cosine"])
        out = capsys.readouterr().out

        assert code == 0
        assert out.startswith("static const uint16_t driver_profile[1024] = {")
        assert out.rstrip().endswith("};")

    def test_writes_file(self, tmp_path):
        target = tmp_path / "profile.h"
        code = main(["export", "--points", "0,0 1023,32767", "--name", "pedal", "--out", str(target)])
        assert code == 0
        assert target.read_text(encoding="utf-8").startswith("static const uint16_t pedal[1024]")

    def test_unknown_method_fails(self, capsys):
        assert main(["export", "--points", "0,0 1023,32767", "--method", "Bezier"]) == 1
        assert capsys.readouterr().out == ""
