from rsftool.cli import main

from rsf_samples import HELP_TEXT, raw_archive, sample_archive


def _archive(tmp_path):
    path = tmp_path / "GAME.RSF"
    path.write_bytes(sample_archive())
    return str(path)


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage:" in capsys.readouterr().out


def test_extract_command(tmp_path):
    out = tmp_path / "out"
    assert main(["extract", "--archive", _archive(tmp_path), "--output", str(out)]) == 0
    assert (out / "TXT" / "HELP.TXT").read_bytes() == HELP_TEXT


def test_extract_missing_archive(tmp_path):
    assert main(["extract", "--archive", str(tmp_path / "NOPE.RSF")]) == 1


def test_build_command(tmp_path):
    src = tmp_path / "src" / "DAT"
    src.mkdir(parents=True)
    (src / "A.DAT").write_bytes(b"abc")
    output = tmp_path / "OUT.RSF"

    assert main(["build", "--directory", str(tmp_path / "src"), "--output", str(output)]) == 0
    assert output.read_bytes()[0] == 0x41


def test_list_command(tmp_path, capsys):
    assert main(["list", "--archive", _archive(tmp_path), "-v"]) == 0
    out = capsys.readouterr().out
    assert "Name:        GAME" in out
    assert "TITLE.BMP" in out
    assert "bitmap" in out
    assert "0008 001A 0006 1A64 A26B" in out


def test_palette_command(tmp_path, capsys):
    archive = _archive(tmp_path)

    assert main(["palette", "--archive", archive]) == 0
    assert "TRUERGB.PAL, L23.PAL" in capsys.readouterr().out

    preview = tmp_path / "pal.png"
    assert main(["palette", "--archive", archive, "--output", str(preview)]) == 0
    assert preview.exists()


def test_missing_palette_is_an_error(tmp_path, capsys):
    code = main(["palette", "--archive", _archive(tmp_path),
                 "--name", "NONE.PAL", "--output", str(tmp_path / "p.png")])
    assert code == 1
    assert "[ERROR] Couldn't find requested PAL file: NONE.PAL" in capsys.readouterr().out


def test_legacy_archive_is_an_error(tmp_path, capsys):
    path = tmp_path / "OLD.RSF"
    path.write_bytes(raw_archive([("DAT", 1)], [("A.DAT", 0, b"a")], license="licensed"))

    assert main(["extract", "--archive", str(path)]) == 1
    assert "[ERROR] Cannot handle old-style RSF format" in capsys.readouterr().out
