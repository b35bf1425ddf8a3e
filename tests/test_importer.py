"""Tests for speki.importer."""

from speki.models import AudioSource
from speki.importer import read_csv


def test_read_csv(tmp_path):
    path = tmp_path / "import.csv"
    path.write_text(
        "hund,dog,http://a/1,,hund.mp3,\n"
        "katze,cat\n"
    )
    cards = read_csv(path)
    assert [c.front.text for c in cards] == ["hund", "katze"]
    assert cards[0].front.audio == AudioSource(local_name="hund.mp3", url_backup="http://a/1")
    assert cards[0].back.audio is None
    assert cards[1].front.audio is None
    assert cards[0].id != cards[1].id


def test_read_csv_skips_short_rows(tmp_path, capsys):
    path = tmp_path / "import.csv"
    path.write_text("only-front\n,\nq,a\n")
    cards = read_csv(path)
    assert [c.front.text for c in cards] == ["q"]
    assert "skipping" in capsys.readouterr().err
