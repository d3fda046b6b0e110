import importlib.util
import json
import os

from wfc_dungeon.dungeon.debug_checks import analyze

from dungeon_test_utils import boxed

ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))


def _load_script():
    path = os.path.join(ROOT, "scripts", "diagnose_seeds.py")
    spec = importlib.util.spec_from_file_location("diagnose_seeds", path)
    mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(mod)
    return mod


def test_clean_map_ok():
    res = analyze(boxed(["...", ".#.", "..."]))
    assert res["ok"]
    assert res["region_count"] == 1
    assert res["dead_ends"] == []


def test_reports_each_problem():
    text = "#.##\n#  #\n#x+#\n####"
    res = analyze(text)
    assert not res["ok"]
    assert res["border_breaches"] == [(0, 1)]
    assert res["empty_cells"] == [(1, 1), (1, 2)]
    assert res["foreign_chars"] == [(2, 1, "x")]


def test_dead_ends_and_regions():
    res = analyze(boxed([".#.", "###", "..."]))
    assert res["region_count"] == 3
    assert (1, 1) in res["dead_ends"]
    assert not res["ok"]


def test_ragged_map_flagged():
    res = analyze("###\n##\n###")
    assert res["ragged"]
    assert not res["ok"]


def test_diagnose_script_passes_for_generated_maps(capsys):
    mod = _load_script()
    code = mod.main(["--width", "20", "--height", "14", "11", "12"])
    out = json.loads(capsys.readouterr().out)
    assert [r["seed"] for r in out["results"]] == [11, 12]
    assert code == 0
    assert all(r["ok"] for r in out["results"])
