from behave import given, when, then
import json
import os
import stat
import subprocess
import sys
import tempfile
from pathlib import Path

def find_project_root(start: Path) -> Path:
    cur = start
    for _ in range(10):
        if (cur / "pyproject.toml").exists() or (cur / "src").exists():
            return cur
        cur = cur.parent
    # Fallback: go up 4 levels which should normally be project root
    return start.parents[4]

PROJECT_ROOT = find_project_root(Path(__file__).resolve())
SRC_ENTRY = PROJECT_ROOT / "src" / "vslocate.py"

FAKE_VSWHERE = """#!{python}
import sys
sys.stdout.write({payload!r})
"""

def _resolve_placeholder(val, context):
    if val == "<sdk_dir>":
        return getattr(context, "sdk_dir")
    if val == "<vswhere>":
        return getattr(context, "vswhere_path")
    if val == "<vs_root>":
        return getattr(context, "vs_root")
    return val

@given("a Windows SDK folder with include versions:")
def step_sdk_folder(context):
    sdk_dir = Path(tempfile.mkdtemp(prefix="vsl-sdk-"))
    for row in context.table:
        version = row["version"].strip()
        complete = row["complete"].strip().lower() == "true"
        names = ["cppwinrt", "shared", "ucrt", "um", "winrt"] if complete else ["um"]
        for name in names:
            (sdk_dir / "Include" / version / name).mkdir(parents=True)
    context.sdk_dir = str(sdk_dir)

@given("a fake vswhere reporting installations:")
def step_fake_vswhere(context):
    tmp_dir = Path(tempfile.mkdtemp(prefix="vsl-vswhere-"))
    records = []
    for row in context.table:
        root = tmp_dir / row["name"].strip()
        (root / "MSBuild" / "Current" / "Bin").mkdir(parents=True)
        records.append({"installationPath": str(root), "installationVersion": row["version"].strip()})
    exe = tmp_dir / "vswhere.exe"
    exe.write_text(FAKE_VSWHERE.format(python=sys.executable, payload=json.dumps(records)), encoding="utf-8")
    exe.chmod(exe.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    context.vswhere_dir = tmp_dir
    context.vswhere_path = str(exe)

@given('the installation override points inside "{name}"')
def step_override(context, name):
    context.vs_root = str(context.vswhere_dir / name / "MSBuild")

@when('I run vslocate "{action}" with arguments:')
def step_run_vslocate(context, action):
    args = []
    for row in context.table:
        arg = row["arg"].strip()
        val = row["value"].strip()

        # Interpret boolean flags passed as "true"
        if val.lower() == "true":
            args.append(arg)
        else:
            args.extend([arg, _resolve_placeholder(val, context)])

    cmd = [sys.executable, str(SRC_ENTRY), action] + args

    env = os.environ.copy()
    env["PYTHONPATH"] = f"{PROJECT_ROOT / 'src'}:" + env.get("PYTHONPATH", "")
    for name in ("VS_WHERE_PATH", "VS_INSTALLATION_PATH", "WIN_SDK_PATH"):
        env.pop(name, None)

    proc = subprocess.run(
        cmd,
        cwd=str(PROJECT_ROOT),
        text=True,
        capture_output=True,
        env=env,
    )
    context.proc = proc

@then("the process exits with code {code:d}")
def step_exit_code(context, code):
    assert context.proc.returncode == code, f"Expected {code}, got {context.proc.returncode}\nSTDOUT:\n{context.proc.stdout}\nSTDERR:\n{context.proc.stderr}"

@then('stdout is empty or whitespace only')
def step_stdout_quiet(context):
    assert context.proc.stdout.strip() == "", f"Expected empty stdout, got:\n{context.proc.stdout}"

@then('stdout contains "{text}"')
def step_stdout_contains(context, text):
    assert text in context.proc.stdout, f"Expected {text!r} in stdout, got:\n{context.proc.stdout}"

@then('stderr contains "{text}"')
def step_stderr_contains(context, text):
    assert text in context.proc.stderr, f"Expected {text!r} in stderr, got:\n{context.proc.stderr}"

@then('the JSON output has fields:')
def step_json_fields(context):
    data = json.loads(context.proc.stdout)
    for row in context.table:
        field = row["field"].strip()
        expected = row["expected"].strip()
        cur = data
        for part in field.split("."):
            cur = cur.get(part) if isinstance(cur, dict) else None
        assert cur is not None and str(cur).endswith(expected), f"Field {field} expected to end with {expected}, got {cur}"
