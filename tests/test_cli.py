"""Command line runs against files on disk."""

from __future__ import annotations

import json

import pandas as pd
import pytest

from app import cli


def _write_ballots(path, rows):
    pd.DataFrame(
        [
            {
                "verified_signature": "TRUE" if verified else "FALSE",
                "signed_payload": payload if isinstance(payload, str) else json.dumps(
                    [{"projectId": pid, "amount": amount} for pid, amount in payload]
                ),
            }
            for verified, payload in rows
        ]
    ).to_csv(path, index=False)
    return path


@pytest.fixture
def ballots_csv(tmp_path):
    rows = [(True, [("big", "9000"), ("small", "10"), ("mid", "3000")]) for _ in range(3)]
    rows.append((False, [("big", "1")]))
    return _write_ballots(tmp_path / "outputVerifySig.csv", rows)


def _args(ballots_csv, out, *extra):
    return [
        str(ballots_csv), "-o", str(out),
        "--quorum", "3", "--min-amount", "500", "--total-amount", "12000",
        *extra,
    ]


def test_run_with_yes_writes_results(tmp_path, ballots_csv, capsys) -> None:
    out = tmp_path / "results" / "outputResultsFinal.csv"
    assert cli.main(_args(ballots_csv, out, "--yes", "--summary")) == 0

    df = pd.read_csv(out).set_index("Project ID")
    assert df.loc["small", "Scaled Amount"] == 0.0
    assert bool(df.loc["small", "Is Cut"]) is True
    assert df.loc["big", "Scaled Amount"] == pytest.approx(9000.0)
    assert df.loc["mid", "Scaled Amount"] == pytest.approx(3000.0)

    printed = capsys.readouterr().out
    assert "Iteration 1, Projects for cut: small" in printed
    assert "Results saved in" in printed
    assert "Total Pool" in printed


def test_interactive_run_waits_after_new_cuts(tmp_path, ballots_csv, monkeypatch) -> None:
    prompts = []
    monkeypatch.setattr("builtins.input", lambda message="": prompts.append(message) or "")
    out = tmp_path / "out.csv"
    assert cli.main(_args(ballots_csv, out)) == 0
    assert prompts == ["Press Enter to continue..."]


def test_config_file_is_used(tmp_path, ballots_csv) -> None:
    out = tmp_path / "out.csv"
    params = tmp_path / "params.json"
    params.write_text(json.dumps({
        "quorum": 3, "min_amount": 0, "total_amount": 1000,
        "input_path": str(ballots_csv), "output_path": str(out),
    }))
    assert cli.main(["--config", str(params), "--yes"]) == 0
    df = pd.read_csv(out)
    assert df["Scaled Amount"].sum() == pytest.approx(1000.0)


def test_malformed_payload_fails(tmp_path, capsys) -> None:
    path = _write_ballots(tmp_path / "bad.csv", [(True, "[not json")])
    assert cli.main([str(path), "-o", str(tmp_path / "out.csv"), "--yes"]) == 1
    assert "Malformed signed payload" in capsys.readouterr().err
    assert not (tmp_path / "out.csv").exists()


def test_validation_failure(tmp_path, capsys) -> None:
    path = tmp_path / "ballots.csv"
    pd.DataFrame({"something": ["else"]}).to_csv(path, index=False)
    assert cli.main([str(path), "-o", str(tmp_path / "out.csv"), "--yes"]) == 1
    assert "Ballot validation failed" in capsys.readouterr().err


def test_missing_input_file(tmp_path, capsys) -> None:
    assert cli.main([str(tmp_path / "nope.csv"), "--yes"]) == 2
    assert "cannot read" in capsys.readouterr().err


def test_bad_parameters(tmp_path, ballots_csv, capsys) -> None:
    assert cli.main([str(ballots_csv), "--max-iterations", "0", "--yes"]) == 2
    assert "error" in capsys.readouterr().err
