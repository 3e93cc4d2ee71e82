from __future__ import annotations

from gptyped import main as demo


def test_demo_prints_ok_and_err_lines(capsys):
    demo.main()
    out = capsys.readouterr().out

    assert out.startswith("--- gptyped demo ---")
    assert out.count("-> Ok(") == 3
    assert "-> Err(failure_type='MALFORMED_RESPONSE')" in out
    assert "-> Err(failure_type='SCHEMA_MISMATCH')" in out
    assert "'name': 'Rohit'" in out
    assert out.rstrip().endswith("--- done ---")
