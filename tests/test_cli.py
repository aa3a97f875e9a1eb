"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from tests._fixtures.package_builder import PackageBuilder, dashboard, legacy_visualization
from visinventory.cli import _build_parser, main


def _populate(builder: PackageBuilder) -> None:
    builder.package("nginx", "name: nginx\nowner:\n  github: elastic/obs-team\n")
    builder.write_object("nginx", "dashboard", "d.json", dashboard("d", "Nginx", references=["v1"]))
    builder.write_object("nginx", "visualization", "v1.json", legacy_visualization("v1", "Hits"))
    builder.write_object("nginx", "visualization", "v2.json", legacy_visualization("v2", "Bytes"))


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "collect"])
    assert args.verbose is True
    assert args.command == "collect"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["check", "--verbose", "--limit", "3"])
    assert args.verbose is True
    assert args.limit == 3


def test_collect_writes_result_and_bulk_files(
    package_builder: PackageBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    _populate(package_builder)
    output = tmp_path / "out" / "result.json"
    bulk = tmp_path / "out" / "bulk.ndjson"

    main(["collect", str(package_builder.root), "--no-provenance", "--output", str(output), "--bulk", str(bulk)])

    records = json.loads(output.read_text(encoding="utf-8"))
    assert [r["dashboard"] for r in records] == ["Nginx", ""]
    assert records[0]["owning_group"] == "observability"
    assert len(bulk.read_text(encoding="utf-8").splitlines()) == 4
    assert "Collected 2 visualizations (2 legacy)" in capsys.readouterr().out


def test_check_exits_when_limit_exceeded(package_builder: PackageBuilder) -> None:
    _populate(package_builder)

    with pytest.raises(SystemExit) as excinfo:
        main(["check", str(package_builder.root), "--no-provenance", "--limit", "1"])

    assert excinfo.value.code == 1


def test_check_uses_configured_limit(
    package_builder: PackageBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    _populate(package_builder)
    (package_builder.root / ".visinventory.yml").write_text(
        "provenance: false\nlegacy:\n  limit: 5\n", encoding="utf-8"
    )

    main(["check", str(package_builder.root)])

    assert "2 legacy visualizations (limit 5)" in capsys.readouterr().out


def test_diff_prints_changed_apps(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    before = tmp_path / "before.json"
    after = tmp_path / "after.json"
    before.write_text(json.dumps([{"app": "nginx", "soType": "visualization"}] * 2), encoding="utf-8")
    after.write_text(json.dumps([{"app": "nginx", "soType": "visualization"}]), encoding="utf-8")

    main(["diff", str(before), str(after)])

    changes = json.loads(capsys.readouterr().out)
    assert changes == [{"name": "nginx", "beforeCount": 2, "afterCount": 1}]


def test_collect_writes_debug_run_log(package_builder: PackageBuilder, tmp_path: Path) -> None:
    _populate(package_builder)
    (package_builder.root / "packages" / "nginx" / "kibana" / "lens").mkdir()
    (package_builder.root / "packages" / "nginx" / "kibana" / "lens" / "bad.json").write_text(
        "{", encoding="utf-8"
    )
    log_file = tmp_path / "logs" / "run.log"

    main([
        "collect",
        str(package_builder.root),
        "--no-provenance",
        "--output",
        str(tmp_path / "result.json"),
        "--log-file",
        str(log_file),
    ])

    text = log_file.read_text(encoding="utf-8")
    assert "visinventory.walker: Collected 2 vis in nginx" in text
    assert "Skipping saved object" in text
