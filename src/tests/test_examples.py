import os
import sys
import glob
import subprocess
import tempfile

import yaml
import pytest

thisfile = os.path.abspath(__file__)
thisdir = os.path.dirname(thisfile)
topdir = os.path.dirname(
            os.path.dirname(thisdir))
exdir = os.path.join(topdir, "examples")
examples = []
examples.extend(glob.glob(
    os.path.join(exdir,"command_line_problems","*.py")))
examples.extend(glob.glob(
    os.path.join(exdir,"scripts","*.py")))

assert os.path.exists(exdir)
assert thisfile not in examples

# expected results and the tolerance used to compare
# objective values
baselines = {}
baselines["trig_interval"] = \
    ({"end_state": "optimal",
      "solution_status": "optimal",
      "objective": -1.5,
      "bound": -1.5},
     1e-3,
     ["--absolute-tolerance=1e-3",
      "--relative-tolerance=none"])
baselines["qcqp_alpha_bb"] = \
    ({"end_state": "optimal",
      "solution_status": "optimal",
      "objective": -8.0,
      "bound": -8.0},
     2e-4,
     ["--absolute-tolerance=1e-4",
      "--relative-tolerance=none"])
baselines["solar_hybridization"] = \
    ({"solution_status": ("optimal", "feasible")},
     None,
     ["--relative-tolerance=1e-2",
      "--node-limit=200"])
baselines["quasiconvex_bisection"] = \
    ({"end_state": "optimal",
      "solution_status": "optimal",
      "objective": 1.0/3,
      "bound": 1.0/3,
      "nodes": 1},
     1e-5,
     [])

tdict = {}
for fname in examples:
    basename = os.path.basename(fname)
    assert basename.endswith(".py")
    assert len(basename) >= 3
    basename = basename[:-3]
    tdict["test_"+basename] = (fname,) + baselines[basename]
assert len(tdict) == len(baselines)

@pytest.mark.parametrize("example_name", sorted(tdict))
@pytest.mark.example
def test_example(example_name):
    filename, baseline, tol, options = tdict[example_name]
    cmd = [sys.executable, filename]
    if "command_line_problems" in filename:
        options = options + ["--disable-signal-handlers",
                             "--verbosity=0"]
    assert os.path.exists(filename)
    fid, results_filename = tempfile.mkstemp()
    os.close(fid)
    try:
        rc = subprocess.call(cmd + \
                             ["--results-filename",
                              results_filename] + \
                             options)
        assert rc == 0
        with open(results_filename) as f:
            results = yaml.safe_load(f)
        assert len(baseline) < len(results)
        for key in baseline:
            if type(baseline[key]) is tuple:
                # any of the listed values is accepted
                assert results[key] in baseline[key]
            elif type(baseline[key]) is float:
                assert abs(baseline[key] - results[key]) <= tol
            else:
                assert baseline[key] == results[key]
    finally:
        os.remove(results_filename)
