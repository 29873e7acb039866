# tests/test_cli.py

import pytest

from gnr.cli import main


def test_toy_cli_prints_ranking(toy_dir, tmp_path, capsys):
    out_csv = tmp_path / "ranking.csv"
    graphml = tmp_path / "graph.graphml"

    main([
        "toy",
        "--toy-data-dir", str(toy_dir),
        "--genes", "TP53", "ATM",
        "--top-k", "3",
        "--output-csv", str(out_csv),
        "--graphml", str(graphml),
    ])

    out = capsys.readouterr().out
    assert "Top 3 genes" in out
    assert "Network weights" in out
    assert out_csv.exists()
    assert graphml.exists()


def test_describe_cli_prints_reports(toy_dir, capsys):
    main(["describe", "--toy-data-dir", str(toy_dir), "--genes", "TP53"])

    out = capsys.readouterr().out
    assert "Stark-Breitkreutz-2006\tDirect interaction|Curated from literature" in out


def test_cli_rejects_missing_directory(tmp_path):
    with pytest.raises(SystemExit):
        main(["toy", "--toy-data-dir", str(tmp_path / "nope"), "--genes", "TP53"])
