from __future__ import annotations

import _diag_seating_smoke as diag


def test_parser_carries_the_module_description(monkeypatch):
    monkeypatch.delenv("DIAG_GROUPS", raising=False)
    monkeypatch.delenv("DIAG_PER_GROUP", raising=False)
    parser = diag._build_parser()

    assert parser.description
    assert "synthetic exam roster" in parser.description
    args = parser.parse_args([])
    assert (args.groups, args.per_group, args.rooms, args.mode, args.seed) == (5, 60, 4, "COMPLEX", None)


def test_small_run_completes(capsys):
    code = diag._run(["--groups", "2", "--per-group", "5", "--rooms", "1", "--seed", "1"])

    assert code == 0
    assert "'status': 'COMPLETE'" in capsys.readouterr().out
