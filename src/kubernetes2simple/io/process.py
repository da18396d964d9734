"""External tool invocation with structured results."""

import os
import subprocess

from kubernetes2simple.pacts.types import ToolResult


def run_tool(cmd: list, cwd=None, extra_path=None, capture: bool = True) -> ToolResult:
    """Run *cmd* to completion and return its ``ToolResult``.

    With ``capture=False`` the tool writes straight to the terminal and the
    result carries only the exit status. *extra_path* is prepended to PATH.
    An executable that cannot be started is reported as exit status 127.
    """
    env = None
    if extra_path:
        env = os.environ.copy()
        env["PATH"] = os.pathsep.join([str(extra_path), env.get("PATH", "")])
    cmd = [str(c) for c in cmd]
    try:
        proc = subprocess.run(cmd, cwd=cwd, env=env, check=False,
                              capture_output=capture, text=True)
    except OSError as exc:
        return ToolResult(cmd=cmd, returncode=127, stderr=str(exc))
    return ToolResult(cmd=cmd, returncode=proc.returncode,
                      stdout=proc.stdout or "", stderr=proc.stderr or "")
