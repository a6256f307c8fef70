#!/usr/bin/env python3
"""
vuetsx - Vue single-file component to Vue TSX converter

Deterministically converts .vue files (template, <script setup> with
compiler macros, styles) into defineComponent modules whose setup()
returns a JSX render function, plus a companion stylesheet.

As an aside, this codebase leverages the ChRIS "plugin" concept/pattern as
general purpose python app development framework.

Philosophy:
    - Deterministic: the same input always produces the same output
    - Honest: anything without a faithful translation is left as a
      placeholder comment naming the original snippet
    - Optional remote help: placeholders can be resolved by a model in one
      batched request per component (--llm)

Usage:
    vuetsx inputdir/ outputdir/ [--pattern GLOB] [--llm] [--dryRun] [-v]

    Every .vue file matched under inputdir is converted; outputs mirror the
    relative path under outputdir (Card.vue -> Card.tsx + Card.css).

Examples:
    # Convert every component in a source tree
    vuetsx src/ converted/

    # Only the components folder, CSS modules, verbose
    VUETSX_CSS_MODULES=true vuetsx src/ converted/ --pattern "components/**/*.vue" -v

    # Preview without writing, resolving placeholders remotely
    vuetsx src/ converted/ --dryRun --llm -vv
"""

import sys
import asyncio
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config.settings import appsettings
from .lib import Compiler, __version__, LOG, WARN, component_context, logger_configure, state_connectToLogger
from .lib.highlight import text_highlight
from .lib.text import pascal_case
from .models import ProgramState, pipeline


DISPLAY_TITLE = r"""
                   _
 __ ___  _ ___ ___| |_ _____ __
 \ V / || / -_)___|  _(_-<\ \ /
  \_/ \_,_\___|    \__/__//_\_\

  Vue SFC to Vue TSX converter
"""

# Define CLI arguments
parser = ArgumentParser(
    description="vuetsx - Convert Vue single-file components to Vue TSX",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default="**/*.vue",
    type=str,
    help="Glob pattern (relative to inputdir) selecting the .vue files to convert",
)

parser.add_argument(
    "--llm",
    default=False,
    action="store_true",
    help="Resolve fallback placeholders with the remote model (needs ANTHROPIC_API_KEY)",
)

parser.add_argument(
    "--dryRun",
    default=False,
    action="store_true",
    help="Show what would be written without writing files",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv, -vvv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the environment.

    Verifies that the input directory exists and creates the output
    directory (unless this is a dry run).

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added field:
            - envOK: True if environment is valid

    Exits:
        1 if the input directory is missing
    """

    state = inputstate.copy()

    if state.verbosity >= 2:
        LOG(DISPLAY_TITLE, level=2)

    LOG("Checking environment...", level=2)

    if not state.inputdir or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    if not state.dryRun:
        state.outputdir.mkdir(parents=True, exist_ok=True)
    LOG(f"Output directory: {state.outputdir}", level=2)

    if state.llm and not state.dryRun:
        LOG("Remote fallback resolution enabled", level=2)

    state.envOK = True
    return state


def sources_find(inputstate: ProgramState) -> ProgramState:
    """
    Find the .vue files to convert.

    Args:
        inputstate: Program state with inputdir and pattern

    Returns:
        ProgramState with added field:
            - sourceFiles: Sorted list of matching .vue files

    Exits:
        1 if no file matches
    """

    state = inputstate.copy()

    LOG(f"Searching {state.inputdir} for {state.pattern}...", level=1)

    state.sourceFiles = sorted(
        path for path in state.inputdir.glob(state.pattern)
        if path.is_file() and path.suffix == ".vue"
    )

    if not state.sourceFiles:
        print("No .vue files found matching the given pattern.", file=sys.stderr)
        sys.exit(1)

    LOG(f"Found {len(state.sourceFiles)} component(s)", level=2)
    return state


def componentName_get(path: Path) -> str:
    """PascalCase component name from a file stem (my-card.vue -> MyCard)"""
    return pascal_case(path.stem)


def source_convert(state: ProgramState, source_file: Path) -> dict:
    """
    Convert one file and write (or preview) its outputs.

    Returns:
        Record with source, written paths, warning and fallback counts and
        an ok flag
    """
    component_name = componentName_get(source_file)
    relative = source_file.relative_to(state.inputdir)
    target_dir = state.outputdir / relative.parent

    record = {
        "source": str(relative),
        "component": component_name,
        "outputs": [],
        "warnings": 0,
        "fallbacks": 0,
        "ok": False,
    }

    try:
        source = source_file.read_text(encoding="utf-8")
    except OSError as e:
        print(f"Error reading {relative}: {e}", file=sys.stderr)
        return record

    compiler = Compiler(source, component_name, llm=state.llm)
    result = asyncio.run(compiler.convert_async())

    record["warnings"] = len(result.warnings)
    record["fallbacks"] = len(result.fallbacks)
    with component_context(component_name):
        for warning in result.warnings:
            WARN(f"{relative}: {warning.message}")

    if not result.tsx:
        print(f"Error: {relative} could not be converted", file=sys.stderr)
        return record

    outputs = [(target_dir / f"{source_file.stem}.tsx", result.tsx)]
    if result.css is not None and result.css_filename:
        outputs.append((target_dir / result.css_filename, result.css))

    for path, text in outputs:
        record["outputs"].append(str(path))
        if state.dryRun:
            LOG(f"Would write {path}", level=1)
            if state.verbosity >= 2:
                print(text_highlight(text, path.name))
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        LOG(f"Wrote {path}", level=2)

    record["ok"] = True
    return record


def sources_convert(inputstate: ProgramState) -> ProgramState:
    """
    Convert every found .vue file.

    Args:
        inputstate: Program state with sourceFiles

    Returns:
        ProgramState with added field:
            - convertResults: One record per source file
    """

    state = inputstate.copy()

    LOG("Converting components...", level=1)

    state.convertResults = [source_convert(state, path) for path in state.sourceFiles]
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display conversion results to the user.

    Args:
        inputstate: Program state with convertResults populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if any file failed to convert
    """
    state: ProgramState = inputstate.copy()
    results = state.convertResults or []

    converted = sum(1 for r in results if r["ok"])
    failed = len(results) - converted
    warnings = sum(r["warnings"] for r in results)
    fallbacks = sum(r["fallbacks"] for r in results)

    LOG(f"\n{'Dry run' if state.dryRun else 'Conversion'} complete", level=1)
    LOG(f"  Converted: {converted}", level=1)
    LOG(f"  Warnings:  {warnings}", level=1)
    LOG(f"  Fallbacks: {fallbacks}", level=1)

    if failed:
        print(f"Error: {failed} file(s) failed to convert", file=sys.stderr)
        sys.exit(1)
    return state


@chris_plugin(
    parser=parser,
    title="vuetsx - Vue SFC to Vue TSX converter",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - convert .vue components to .tsx modules.

    Orchestrates the conversion pipeline:
        1. env_check: Validate paths and environment
        2. sources_find: Glob the .vue files under inputdir
        3. sources_convert: Convert each file and write its outputs
        4. results_report: Summarize and set the exit status

    Args:
        options: CLI arguments from argparse
            - pattern: str - Glob pattern relative to inputdir
            - llm: bool - Resolve fallback placeholders remotely
            - dryRun: bool - Do not write files
            - verbosity: int - Logging verbosity level (1-3)
        inputdir: Directory containing .vue sources
        outputdir: Directory where converted files are written

    Note:
        This function is wrapped by @chris_plugin which handles CLI
        argument parsing and invokes this function with parsed values.
    """

    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    # Connect state to logger for entire pipeline
    logger_configure(debug=appsettings.debug_mode)
    state_connectToLogger(state)

    # Execute conversion pipeline
    pipeline(state, env_check, sources_find, sources_convert, results_report)


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
