"""Step runner — executes planned ffmpeg passes strictly in order.

The plan's "ffmpeg" command name is resolved to the ffmpeg on PATH,
falling back to the binary bundled with imageio-ffmpeg. A failing pass
raises subprocess.CalledProcessError with ffmpeg's exit code untouched;
later passes are not started.
"""

import subprocess
import sys
from pathlib import Path

from .common import ffmpeg_executable, ffmpeg_has_filter
from .pipeline import PipelineStep, intermediate_paths, pipeline_to_shell_commands


def resolve_command(args: tuple[str, ...] | list[str]) -> list[str]:
    """Swap a bare 'ffmpeg' command name for the resolved executable."""
    cmd = list(args)
    if cmd and cmd[0] == "ffmpeg":
        cmd[0] = ffmpeg_executable()
    return cmd


def run_step(step: PipelineStep, quiet: bool = False) -> None:
    """Run one pass, creating its output directory first."""
    Path(step.args[-1]).parent.mkdir(parents=True, exist_ok=True)
    subprocess.run(resolve_command(step.args), check=True, capture_output=quiet)


def run_steps(
    steps: list[PipelineStep],
    keep_intermediates: bool = True,
    quiet: bool = False,
) -> None:
    """Run every step in order, reporting progress.

    Args:
        steps: Planned passes, as returned by build_pipeline.
        keep_intermediates: If False, delete intermediate files after
            the final pass succeeds.
        quiet: Capture ffmpeg's output instead of streaming it.
    """
    uses_drawtext = any("drawtext=" in arg for step in steps for arg in step.args)
    if uses_drawtext and not ffmpeg_has_filter("drawtext"):
        print(
            f"WARNING: {ffmpeg_executable()} has no drawtext filter; "
            "text annotations will fail. Install an ffmpeg built with libfreetype.",
            file=sys.stderr,
        )

    n = len(steps)
    for i, step in enumerate(steps, start=1):
        print(f"[{i}/{n}] {step.description}", flush=True)
        run_step(step, quiet=quiet)

    if not keep_intermediates and steps:
        final_path = steps[-1].args[-1]
        for path in intermediate_paths(steps, final_path):
            Path(path).unlink(missing_ok=True)
            print(f"  CLEAN  {path}")


def execute_plan(
    steps: list[PipelineStep],
    dry_run: bool = False,
    keep_intermediates: bool = True,
) -> None:
    """CLI entry: print the plan as shell commands, or run it.

    An ffmpeg failure exits the process with ffmpeg's own exit code.
    """
    if dry_run:
        for i, (step, cmd) in enumerate(
            zip(steps, pipeline_to_shell_commands(steps)), start=1,
        ):
            print(f"# Step {i}: {step.description}")
            print(cmd)
            print()
        return

    try:
        run_steps(steps, keep_intermediates=keep_intermediates)
    except subprocess.CalledProcessError as e:
        print(f"ffmpeg failed with exit code {e.returncode}", file=sys.stderr)
        sys.exit(e.returncode)
