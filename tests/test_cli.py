from loguru import logger

from prism_instance_installer.__main__ import build_parser, main

from conftest import make_zip, read_tree, write_tree


def test_parser_defaults():
    args = build_parser().parse_args([])

    assert args.instance_name is None
    assert args.archive is None
    assert not args.no_gui


def test_parser_flags():
    args = build_parser().parse_args(
        ["Pack", "--archive", "p.zip", "--app-data", "/x", "--no-gui", "--verbose"]
    )

    assert args.instance_name == "Pack"
    assert args.archive == "p.zip"
    assert args.app_data == "/x"
    assert args.no_gui and args.verbose


def test_headless_run(tmp_path, capsys):
    app_data = tmp_path / "appdata"
    write_tree(app_data / ".minecraft", {"mods/old.jar": b"old"})
    archive = make_zip(tmp_path / "pack.zip", {"Pack/mods/new.jar": b"new"})
    log_file = tmp_path / "run.log"

    code = main([
        "Pack",
        "--archive", str(archive),
        "--app-data", str(app_data),
        "--no-gui",
        "--log-file", str(log_file),
    ])

    assert code == 0
    assert read_tree(app_data / ".minecraft" / "mods") == {"new.jar": b"new"}
    out = capsys.readouterr().out
    assert "[INFO ] Installation completed successfully." in out
    assert "[WARN ]" in out
    logger.remove()
    assert log_file.read_text(encoding="utf-8")


def test_headless_run_missing_archive(tmp_path, capsys):
    app_data = tmp_path / "appdata"
    (app_data / ".minecraft").mkdir(parents=True)

    code = main([
        "--archive", str(tmp_path / "missing.zip"),
        "--app-data", str(app_data),
        "--no-gui",
    ])

    assert code == 1
    assert "ArchiveNotAccessible" in capsys.readouterr().out
