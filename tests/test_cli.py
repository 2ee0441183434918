import pytest
from csim.cli.main import build_parser, main


def test_run_prints_summary(yi_trace_path, capsys):
    status = main(["run", "-s", "4", "-E", "1", "-b", "4", "-t", str(yi_trace_path)])

    assert status == 0
    out = capsys.readouterr().out
    assert out.strip().splitlines()[-1] == "hits:4 misses:5 evictions:3"
    assert "miss" not in out.replace("misses", "")


def test_run_verbose_annotations(yi_trace_path, capsys):
    main(["run", "-v", "-s", "4", "-E", "1", "-b", "4", "-t", str(yi_trace_path)])

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines == [
        "L 10,1 miss",
        "M 20,1 miss hit",
        "L 22,1 hit",
        "S 18,1 hit",
        "L 110,1 miss eviction",
        "L 210,1 miss eviction",
        "M 12,1 miss eviction hit",
        "hits:4 misses:5 evictions:3",
    ]


def test_run_with_yaml_config_and_override(yi_trace_path, tmp_path, capsys):
    config_file = tmp_path / "cfg.yaml"
    config_file.write_text(f"set_index_bits: 4\nlines_per_set: 1\nblock_offset_bits: 4\ntrace_file: {yi_trace_path}\n")

    # A fully associative 2-line set instead of the configured direct-mapped cache
    status = main(["run", "-c", str(config_file), "-s", "0", "-E", "2"])

    assert status == 0
    assert capsys.readouterr().out.strip().splitlines()[-1] == "hits:4 misses:5 evictions:3"


def test_run_writes_reports(yi_trace_path, tmp_path, capsys):
    report_dir = tmp_path / "out"
    main(["run", "-s", "4", "-E", "1", "-b", "4", "-t", str(yi_trace_path),
          "--report", str(report_dir), "--ascii-chart"])

    assert (report_dir / "report.json").exists()
    assert (report_dir / "report.html").exists()
    assert "ASCII Chart" in capsys.readouterr().out


def test_run_skips_malformed_lines(write_trace, capsys):
    path = write_trace(["I 0400d7d4,8", " L 10,1", " L nothex,1", " L 10,1"])
    with pytest.warns(UserWarning, match="line 3"):
        status = main(["run", "-s", "1", "-E", "1", "-b", "1", "-t", str(path)])

    assert status == 0
    assert capsys.readouterr().out.strip() == "hits:1 misses:1 evictions:0"


@pytest.mark.parametrize("argv, message", [
    (["run", "-s", "4", "-b", "4", "-t", "x.trace"], "Missing required cache parameters"),
    (["run", "-s", "4", "-E", "0", "-b", "4", "-t", "x.trace"], "greater than zero"),
    (["run", "-s", "64", "-E", "1", "-b", "4", "-t", "x.trace"], "set index bits"),
    (["run", "-s", "4", "-E", "1", "-b", "4"], "trace file is required"),
    (["run", "-s", "4", "-E", "1", "-b", "4", "-t", "/nonexistent/x.trace"], "Invalid trace file path"),
])
def test_run_configuration_errors(argv, message, capsys, caplog):
    assert main(argv) == 1
    assert message in caplog.text
    assert "usage: csim" in capsys.readouterr().err


def test_run_resource_error(yi_trace_path, caplog):
    status = main(["run", "-s", "20", "-E", "16", "-b", "4", "-t", str(yi_trace_path),
                   "--max-lines", "1024"])
    assert status == 1
    assert "exceeds the limit" in caplog.text


def test_decode_command(capsys):
    assert main(["decode", "-s", "3", "-b", "6", "1f6a", "0x40"]) == 0

    lines = capsys.readouterr().out.strip().splitlines()
    assert lines[0].split() == ["address", "tag", "set", "offset"]
    assert lines[1].split() == ["0x1f6a", "0xf", "5", "42"]
    assert lines[2].split() == ["0x40", "0x0", "1", "0"]


def test_decode_rejects_non_hex(caplog):
    assert main(["decode", "-s", "1", "-b", "1", "xyz"]) == 1
    assert "Not a hexadecimal address" in caplog.text


def test_parser_requires_subcommand():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


@pytest.mark.parametrize("bad_value", ["max_cache_lines: lots", "trace_file: 3"])
def test_run_rejects_mistyped_yaml_values(yi_trace_path, tmp_path, bad_value, capsys, caplog):
    config_file = tmp_path / "cfg.yaml"
    config_file.write_text(f"set_index_bits: 4\nlines_per_set: 1\nblock_offset_bits: 4\n{bad_value}\n")

    status = main(["run", "-c", str(config_file), "-t", str(yi_trace_path)])

    assert status == 1
    assert "must be of type" in caplog.text
    assert "usage: csim" in capsys.readouterr().err


def test_run_verbose_lines_precede_summary_for_streamed_trace(write_trace, capsys):
    path = write_trace([" L 0,1", " L 1,1", " L 0,1"])
    main(["run", "-v", "-s", "0", "-E", "1", "-b", "0", "-t", str(path)])

    assert capsys.readouterr().out.strip().splitlines() == [
        "L 0,1 miss",
        "L 1,1 miss eviction",
        "L 0,1 miss eviction",
        "hits:0 misses:3 evictions:2",
    ]
