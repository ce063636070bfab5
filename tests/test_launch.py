import functools

import pytest

import launch
from crawler import Crawler
from launch import parse_target
from conftest import FakeSite, links_page, read_lines


@pytest.mark.parametrize("target, depth, expected", [
    ("https://a.test/|2", None, ("https://a.test/", 2)),
    ("https://a.test/", "3", ("https://a.test/", 3)),
    (" https://a.test/x |1", None, ("https://a.test/x", 1)),
])
def test_parse_target(target, depth, expected):
    assert parse_target(target, depth) == expected


@pytest.mark.parametrize("target, depth", [
    ("https://a.test/", None),
    ("https://a.test/|0", None),
    ("https://a.test/", "-2"),
    ("https://a.test/|two", None),
    ("https://a.test/|2", "2"),
    ("|2", None),
    ("a.test|2", None),
])
def test_parse_target_rejects(target, depth):
    with pytest.raises(ValueError):
        parse_target(target, depth)


@pytest.mark.parametrize("argv", [
    [],
    ["https://a.test/"],
    ["https://a.test/", "0"],
    ["https://a.test/|x"],
])
def test_main_rejects_bad_arguments(argv, tmp_path):
    with pytest.raises(SystemExit) as exit_info:
        launch.main(argv + ["--config_file", str(tmp_path / "none.ini")])
    assert exit_info.value.code != 0


def test_main_rejects_bad_thread_count(tmp_path):
    with pytest.raises(SystemExit) as exit_info:
        launch.main(["https://a.test/", "2", "--threads", "0",
                     "--config_file", str(tmp_path / "none.ini")])
    assert exit_info.value.code != 0


def test_main_reports_unopenable_output(tmp_path):
    code = launch.main([
        "https://a.test/", "2",
        "--config_file", str(tmp_path / "none.ini"),
        "--output", str(tmp_path / "no" / "such" / "dir.txt"),
        "--error_log", str(tmp_path / "errors.log"),
    ])
    assert code == 1


def test_main_runs_crawl(tmp_path, monkeypatch):
    site = FakeSite({
        "https://a.test/": links_page("/b"),
        "https://a.test/b": links_page(),
    })
    monkeypatch.setattr(launch, "Crawler", functools.partial(Crawler, fetcher=site))
    ini = tmp_path / "crawl.ini"
    ini.write_text("[CRAWLER]\nTHREADCOUNT = 2\n")
    output = tmp_path / "visited.txt"

    code = launch.main([
        "https://a.test/|2",
        "--config_file", str(ini),
        "--output", str(output),
        "--error_log", str(tmp_path / "errors.log"),
    ])

    assert code == 0
    assert sorted(read_lines(output)) == ["https://a.test/", "https://a.test/b"]


@pytest.mark.parametrize("contents", [
    "THREADCOUNT = 4\n",
    "[CRAWLER]\nTHREADCOUNT = 4\nTHREADCOUNT = 8\n",
    "[CRAWLER]\nnot an option line\n",
])
def test_main_rejects_malformed_config_file(tmp_path, contents, capsys):
    ini = tmp_path / "broken.ini"
    ini.write_text(contents)
    with pytest.raises(SystemExit) as exit_info:
        launch.main(["https://a.test/", "2", "--config_file", str(ini),
                     "--output", str(tmp_path / "visited.txt")])
    assert exit_info.value.code == 2
    assert "invalid configuration file" in capsys.readouterr().err
