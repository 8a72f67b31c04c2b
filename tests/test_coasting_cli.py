import csv
import math
import pathlib
import re
import subprocess
import sys

REPO_ROOT = pathlib.Path(__file__).resolve().parents[1]

def run_cli(args, check=True):
    cmd = [sys.executable, "-m", "coasting_control"] + args
    result = subprocess.run(cmd, capture_output=True, text=True, cwd=str(REPO_ROOT))
    if check:
        assert result.returncode == 0, f"STDOUT:\n{result.stdout}\nSTDERR:\n{result.stderr}"
    return result

def extract(name: str, output: str) -> float:
    m = re.search(rf"{re.escape(name)}\s*=\s*([-0-9.]+|nan)", output)
    assert m, f"Impossible d'extraire {name} depuis: {output}"
    return float(m.group(1))

def test_cli_summary():
    out = run_cli(["--v0", "10", "--r", "0.95", "--vmin", "0.1"]).stdout
    assert abs(extract("t_stop", out) - math.log(0.01) / math.log(0.95)) < 1e-5
    assert abs(extract("distance_stop", out) - (0.1 - 10) / math.log(0.95)) < 1e-5

def test_cli_time_for_distance():
    out = run_cli(["--v0", "10", "--distance", "1000"]).stdout
    assert math.isnan(extract("t(distance=1000)", out))
    out = run_cli(["--v0", "10", "--distance", "50"]).stdout
    assert 0 < extract("t(distance=50)", out) < extract("t_stop", out)

def test_cli_end_after():
    out = run_cli(["--v0", "40", "--vmin", "0.1", "--end-after", "2.5"]).stdout
    r = extract("r", out)
    assert 0 < r < 1

def test_cli_end_after_with_max_speed():
    out = run_cli(["--end-after", "2.5", "--max-speed", "40", "--vmin", "0.1"]).stdout
    r = extract("r", out)
    assert 0 < r < 1
    assert abs(r - math.exp((math.log(0.1) - math.log(40)) / 2.5)) < 1e-6

def test_cli_end_after_prefers_v0_over_max_speed():
    out = run_cli(["--v0", "40", "--max-speed", "5", "--end-after", "2.5"]).stdout
    assert abs(extract("r", out) - math.exp((math.log(0.1) - math.log(40)) / 2.5)) < 1e-6

def test_cli_end_after_without_speed_is_usage_error():
    result = run_cli(["--end-after", "2.5"], check=False)
    assert result.returncode == 2
    assert "--max-speed" in result.stderr

def test_cli_end_after_unreachable_ratio_fails_quietly():
    # v0 sous vmin : aucun r dans (0, 1)
    result = run_cli(["--v0", "0.05", "--vmin", "0.1", "--end-after", "2.5"], check=False)
    assert result.returncode != 0
    assert "r =" not in result.stdout
    assert "no decay ratio" in result.stderr

def test_cli_invalid_environment():
    result = run_cli(["--v0", "10", "--r", "1.5"], check=False)
    assert result.returncode == 2
    assert "r=1.5" in result.stderr

def test_cli_requires_v0():
    result = run_cli([], check=False)
    assert result.returncode == 2

def test_cli_simulate():
    out = run_cli(["--v0", "2", "--r", "0.5", "--vmin", "0.5", "--simulate"]).stdout
    lines = [l for l in out.splitlines() if l.startswith("t = ")]
    assert len(lines) > 10
    assert "completed at t" in out

def test_cli_save_csv(tmp_path):
    path = tmp_path / "out" / "coast.csv"
    run_cli(["--v0", "10", "--points", "25", "--save-csv", str(path)])
    with path.open(newline="", encoding="utf-8") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 25
    assert set(rows[0]) == {"t", "velocity", "distance"}
    assert float(rows[0]["t"]) == 0.0
