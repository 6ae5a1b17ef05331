from types import SimpleNamespace

import geokernel.__main__ as cli


def test_demo_prints_scene_before_and_after_move(capsys):
    cli.main(["demo"])
    out = capsys.readouterr().out
    assert "Initial scene:" in out
    assert "angA: 90.00 deg right=True" in out
    assert "lenBC: '5.00'" in out
    assert "After moving C:" in out
    assert "C: (40.000, 160.000)" in out


def test_snap_at_origin_reports_axes(capsys):
    cli.main(["snap", "0", "0"])
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "intersection: (0.000000, 0.000000)"
    assert "  label: origin" in out
    assert "  between: x-axis, y-axis" in out


def test_snap_far_away_reports_raw_position(capsys):
    cli.main(["snap", "1000", "1000", "--threshold", "5"])
    assert capsys.readouterr().out.strip() == "No snap: (1000.000000, 1000.000000)"


def test_snap_passes_threshold_through(capsys, monkeypatch):
    calls = []

    def _fake_snap(x, y, scene, threshold=None):
        calls.append((x, y, threshold))
        return SimpleNamespace(snapped=True, snap_type="point", x=x, y=y, label="A", snapped_to="A", intersection_elements=None)

    monkeypatch.setattr(cli, "get_snap_position", _fake_snap)
    cli.main(["snap", "3", "4", "--threshold", "2.5"])

    assert calls == [(3.0, 4.0, 2.5)]
    out = capsys.readouterr().out
    assert "point: (3.000000, 4.000000)" in out
    assert "  element: A" in out
