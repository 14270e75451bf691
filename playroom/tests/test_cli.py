"""
Tests for the command-line helpers.
"""

import pytest

from ..cli import main


def test_digits(capsys):
    main(["digits", "4821", "1824"])
    out = capsys.readouterr().out
    assert "correct digits: 4" in out
    assert "correct place:  2" in out


def test_digits_bad_input(capsys):
    with pytest.raises(SystemExit):
        main(["digits", "4821", "18"])
    assert "Error" in capsys.readouterr().out


def test_colors(capsys):
    main(["colors", "crane", "eerie"])
    lines = capsys.readouterr().out.splitlines()
    assert lines == ["E ABSENT", "E ABSENT", "R PARTIAL", "I ABSENT", "E EXACT"]


def test_variants(capsys):
    main(["variants"])
    out = capsys.readouterr().out
    assert "MR_WHITE" in out
    assert "3+" in out


def test_no_command():
    with pytest.raises(SystemExit):
        main([])
