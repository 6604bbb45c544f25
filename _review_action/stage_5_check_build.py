"""
Stage 5: Check Build - Review Request Action

PURPOSE:
    Before a code review the project must compile cleanly with every
    compiler and Javadoc warning treated as an error, and should not contain
    leftover debugging artifacts.

    Checks, in order:
        1. java, javac and mvn versions (logged for the reviewer)
        2. mvn dependency:go-offline, so later steps do not download
        3. mvn clean compile with -Xlint:all -Xdoclint:all/private -Werror,
           passed as the config.* properties the test pom.xml reads
        4. listing of the compiled classes
        5. TODO comments anywhere in src/main/java
        6. main methods in src/main/java outside ENTRY_POINT

    Steps 1-3 are fatal when they fail. Steps 5-6 only produce warnings: the
    review can go ahead, but the run is flagged so the student cleans up.

CALLED BY:
    review_request_main.py (main stage) - after the test repository is
    cloned next to the project.

RETURNS:
    dict with keys:
        - 'todoCount' (int): lines with a TODO marker
        - 'mainCount' (int): main methods outside the entry point
"""

import logging
import os

from . import actions_toolkit
from .command_runner import check_exec, run_command
from .config import ENTRY_POINT, MAIN_DIR, TEST_DIR
from .console_output import WarningCounter, show_success, show_warning
from .errors import CommandFailedError

logger = logging.getLogger(__name__)

# maven-compiler-plugin has no user property for compilerArgument(s), so the
# javac flags go through properties the test repository's pom.xml passes to
# <compilerArgs>: ${config.xlint}, ${config.xdoclint} and ${config.werror}.
COMPILE_FLAGS = [
    "-Dconfig.xlint=-Xlint:all",
    "-Dconfig.xdoclint=-Xdoclint:all/private",
    "-Dconfig.werror=true",
    "-Dmaven.compiler.showWarnings=true",
    "-Dmaven.compiler.showDeprecation=true",
    "-Dmaven.compiler.failOnWarning=true",
]

TODO_PATTERN = "TODO"
MAIN_PATTERN = r"public[[:space:]]+static[[:space:]]+void[[:space:]]+main[[:space:]]*\("

SOURCE_DIR = os.path.join("src", "main", "java")
CLASSES_DIR = os.path.join("target", "classes")


def check_build(
    counter: WarningCounter,
    main_dir: str = MAIN_DIR,
    test_dir: str = TEST_DIR,
    entry_point: str = ENTRY_POINT,
) -> dict:
    """
    Run the environment, compile and source checks.

    Args:
        counter: Warning counter for the current stage
        main_dir: Directory of the cloned project
        test_dir: Directory of the cloned test repository (has the pom.xml)
        entry_point: File name allowed to declare a main method

    Returns:
        dict with 'todoCount' and 'mainCount'.
    """
    with actions_toolkit.group("Checking environment..."):
        check_exec("java", ["--version"], title="Checking java version", error="Unable to run java")
        check_exec("javac", ["--version"], title="Checking javac version", error="Unable to run javac")
        check_exec("mvn", ["--version"], title="Checking maven version", error="Unable to run maven")

        check_exec(
            "mvn",
            ["-ntp", "-q", "dependency:go-offline"],
            title="Downloading dependencies",
            error="Unable to download dependencies",
            chdir=test_dir,
        )

    with actions_toolkit.group("Compiling project..."):
        check_exec(
            "mvn",
            ["-ntp", "clean", "compile", *COMPILE_FLAGS],
            title="Compiling with warnings enabled",
            error="Unable to compile without warnings",
            chdir=test_dir,
        )

        # Informational only; the pom decides where classes go
        check_exec("ls", ["-R", CLASSES_DIR], title="Listing compiled classes", chdir=test_dir)

        show_success("Compiled project without warnings.")

    with actions_toolkit.group("Checking source code..."):
        todo_count = _count_matches(
            ["-rnI", TODO_PATTERN, SOURCE_DIR],
            title="Checking for TODO comments",
            chdir=main_dir,
        )

        if todo_count > 0:
            show_warning(counter, f"Found {todo_count} TODO comment(s) in the main code.")
        else:
            show_success("No TODO comments found.")

        main_count = _count_matches(
            ["-rnIE", f"--exclude={entry_point}", MAIN_PATTERN, SOURCE_DIR],
            title=f"Checking for main methods outside {entry_point}",
            chdir=main_dir,
        )

        if main_count > 0:
            show_warning(
                counter,
                f"Found {main_count} main method(s) outside {entry_point}. "
                f"Only {entry_point} should have a main method.",
            )
        else:
            show_success(f"No main methods found outside {entry_point}.")

        logger.info("")

    return {"todoCount": todo_count, "mainCount": main_count}


def _count_matches(params: list, title: str, chdir: str) -> int:
    """Run grep and return the number of matching lines."""
    logger.info(f"\n{title}...")
    result = run_command("grep", params, chdir=chdir)

    # grep: 0 = matches, 1 = no matches, anything else = trouble
    if result.returncode > 1:
        raise CommandFailedError(f"Unable to scan source code ({title.lower()})", result.returncode)

    return len(result.lines) if result.returncode == 0 else 0
