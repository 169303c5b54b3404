"""
Diagnostic: generate a synthetic exam roster and seat it through the HTTP API.

Goals:
- Build N groups of students with distinct subjects (roll numbers like 22CSE001)
- Pick the first few rooms from the configured catalog
- Run /api/seating/validate, then /api/seating/generate in the requested mode
- Print summary: seated/unplaced counts, per-room occupancy, conflict score, violations

Usage: python _diag_seating_smoke.py --groups 5 --per-group 60 --rooms 4 --mode COMPLEX --seed 42
"""

from __future__ import annotations

import argparse
import os
from typing import Any

from fastapi.testclient import TestClient

from main import app


GROUP_CODES = ["CSE", "ECE", "MEC", "CIV", "EEE", "IT", "AIML", "BIO"]


def _students(groups: int, per_group: int) -> list[dict[str, Any]]:
    out: list[dict[str, Any]] = []
    for g in range(groups):
        code = GROUP_CODES[g % len(GROUP_CODES)] + ("" if g < len(GROUP_CODES) else str(g))
        for i in range(1, per_group + 1):
            out.append({"roll": f"22{code}{i:03d}", "group": code, "subject": f"{code}-EXAM"})
    return out


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__, formatter_class=argparse.RawDescriptionHelpFormatter)
    parser.add_argument("--groups", type=int, default=int(os.environ.get("DIAG_GROUPS", "5")))
    parser.add_argument("--per-group", type=int, default=int(os.environ.get("DIAG_PER_GROUP", "60")))
    parser.add_argument("--rooms", type=int, default=4)
    parser.add_argument("--mode", choices=["SIMPLE", "COMPLEX"], default="COMPLEX")
    parser.add_argument("--even-type", choices=["DEFAULT", "MAX", "CUSTOM"], default="DEFAULT")
    parser.add_argument("--custom-count", type=int, default=None)
    parser.add_argument("--seed", type=int, default=None)
    return parser


def _run(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    client = TestClient(app)

    rooms = client.get("/api/rooms/")
    if rooms.status_code != 200:
        print({"step": "rooms", "status_code": rooms.status_code, "body": rooms.text})
        return 1
    room_ids = [r["id"] for r in rooms.json() if r["kind"] == "CLASSROOM"][: args.rooms]

    body: dict[str, Any] = {
        "students": _students(args.groups, args.per_group),
        "room_ids": room_ids,
        "policy": {"mode": "EVEN", "even_type": args.even_type, "custom_count": args.custom_count},
    }

    check = client.post("/api/seating/validate", json=body)
    print({"step": "validate", "status_code": check.status_code, "result": check.json()})
    if check.status_code != 200 or check.json()["status"] != "OK":
        return 1

    body.update({"mode": args.mode, "seed": args.seed})
    r = client.post("/api/seating/generate", json=body)
    if r.status_code != 200:
        print({"step": "generate", "status_code": r.status_code, "body": r.text})
        return 1

    data = r.json()
    summary = data.get("summary") or {}
    print({
        "status": data["status"],
        "mode": data["mode"],
        "seed": data["seed"],
        "total_students": summary.get("total_students"),
        "seated": summary.get("seated"),
        "unplaced": summary.get("unplaced"),
        "rooms_used": summary.get("rooms_used"),
        "conflict_score": summary.get("conflict_score"),
        "violations": summary.get("violations"),
        "rooms": [
            {
                "room": room["room_name"],
                "seated": room["seated"],
                "quota": room["seat_quota"],
                "groups": room["group_counts"],
                "violations": room["violations"],
            }
            for room in summary.get("rooms", [])
        ],
        "warnings": [c["conflict_type"] for c in data.get("conflicts", [])],
    })

    return 0 if data["status"] == "COMPLETE" else 2


if __name__ == "__main__":
    try:
        raise SystemExit(_run())
    except Exception as exc:
        print({"error": str(exc)})
        raise
