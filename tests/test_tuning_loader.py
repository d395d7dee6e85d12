import types

from tuning_loader import apply_tuning, load_tuning, override_globals


def test_load_tuning_coerces_values(tmp_path):
    p = tmp_path / "params.csv"
    p.write_text("# comment\n\nLAUNCH_RADIUS_M,750\nSCALE = 1.5\nFLAG,true\nIGC_SUFFIX,.IGC\nnonsense line\n")
    assert load_tuning(p) == {"LAUNCH_RADIUS_M": 750, "SCALE": 1.5, "FLAG": True, "IGC_SUFFIX": ".IGC"}


def test_missing_file_means_defaults(tmp_path):
    assert load_tuning(tmp_path / "nope.csv") == {}


def test_override_respects_allow_list():
    mod = types.ModuleType("m")
    mod.A = 1
    applied = override_globals(mod, {"A": 2, "B": 3}, allowed={"A"})
    assert applied == {"A": 2}
    assert mod.A == 2 and not hasattr(mod, "B")


def test_apply_tuning_spreads_across_modules():
    m1 = types.ModuleType("m1")
    m2 = types.ModuleType("m2")
    apply_tuning({"X": 1, "Y": 2, "Z": 3}, {m1: {"X"}, m2: {"Y"}})
    assert m1.X == 1 and m2.Y == 2
    assert not hasattr(m1, "Z") and not hasattr(m2, "Z")
