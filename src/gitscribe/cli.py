"""
Command line interface for gitscribe.

This module defines the ``main`` click group used as the entry point of
the ``gitscribe`` command. ``init`` walks the user through creating
``gitscribe.json``; ``patch``, ``minor`` and ``major`` bump the version,
regenerate the changelogs from the commit history, sync the version into
manifest files, commit the release and optionally cut a release branch.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional

import click

from gitscribe import __version__
from gitscribe.changelog.renderer import RenderError, TemplateOption, generate_and_write_changelogs
from gitscribe.changes import ChangelogError, group_changes_by_release
from gitscribe.changes.change_classifier import DEFAULT_RULES
from gitscribe.config.loader import (
    CONFIG_FILE_NAME,
    ChangelogOutputOption,
    ConfigError,
    GitscribeConfig,
    create_default_config,
    load_config,
    save_config,
)
from gitscribe.vcs.git_client import FileChange, GitClient, GitError
from gitscribe.version import Version, VersionDesignation, VersionError
from gitscribe.version_sync.sync import SyncFileFormat, VersionSyncError, VersionSyncFile, sync_version_to_files

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())


# ---------------------------------------------------------------------------
# Exit codes
# ---------------------------------------------------------------------------
EXIT_SUCCESS = 0
EXIT_GENERIC_ERROR = 1
EXIT_NO_REPO = 3
EXIT_UNCOMMITTED_CHANGES = 4
EXIT_CONFIG_ERROR = 5
EXIT_VCS_FAILURE = 6
EXIT_CHANGELOG_FAILURE = 7
EXIT_SYNC_FAILURE = 8


# ---------------------------------------------------------------------------
# Status display utilities
# ---------------------------------------------------------------------------

def print_banner() -> None:
    click.echo("\n" + "=" * 60)
    click.echo(click.style("📝 gitscribe".center(60), fg="cyan", bold=True))
    click.echo("=" * 60)


def print_step(step_num: int, total_steps: int, message: str):
    """Print a step indicator."""
    click.echo(f"\n{'='*60}")
    click.echo(f"Step {step_num}/{total_steps}: {message}")
    click.echo(f"{'='*60}")


def print_info(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}ℹ {message}")


def print_success(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✓ {message}")


def print_error(message: str, indent: int = 0):
    prefix = "  " * indent
    click.echo(f"{prefix}✗ {message}", err=True)


def print_uncommitted_changes(changes: Iterable[FileChange]) -> None:
    """List working tree changes with a readable status label."""
    for change in changes:
        click.echo(f"   {click.style(change.label + ':', fg='yellow')} {change.path}")


# ---------------------------------------------------------------------------
# Core functionality
# ---------------------------------------------------------------------------

def release_branch_name(version: Version, commands_that_release: Iterable[str]) -> str:
    """Name of the branch cut for ``version``.

    Version parts below the smallest releasing command are replaced by
    ``X``: with only ``major`` releasing, 2.3.1 gives ``release/2.X.X``;
    with ``major`` and ``minor``, ``release/2.3.X``.
    """
    commands = set(commands_that_release)
    parts = [str(version.major), str(version.minor), str(version.patch)]
    if str(VersionDesignation.PATCH) not in commands:
        parts[2] = "X"
    if str(VersionDesignation.MINOR) not in commands:
        parts[1] = "X"
    return "release/" + ".".join(parts)


def _find_repo_root() -> Path:
    repo_root = GitClient.find_repo_root(Path.cwd())
    if repo_root is None:
        print_error("No Git repository found in current directory or parent directories.")
        raise click.exceptions.Exit(EXIT_NO_REPO)
    return repo_root


def run_release(designation: VersionDesignation, commit: bool = True) -> None:
    """Cut a release bumping the ``designation`` part of the version.

    Nothing is written until the changelog has been computed, so a
    malformed history aborts the release with the working tree untouched.
    """
    try:
        _cut_release(designation, commit)
    except click.exceptions.Exit:
        raise
    except Exception as exc:
        logging.exception("Unhandled error: %s", exc)
        print_error(f"Unexpected error: {exc}")
        raise click.exceptions.Exit(EXIT_GENERIC_ERROR)


def _cut_release(designation: VersionDesignation, commit: bool) -> None:
    total_steps = 8 if commit else 6
    current_step = 0

    repo_root = _find_repo_root()
    client = GitClient(repo_root)
    logger.debug("Repository root: %s", repo_root)

    # Step 1: Load configuration
    current_step += 1
    print_step(current_step, total_steps, "Loading Configuration")
    try:
        config = load_config(repo_root)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    print_success(f"Loaded {CONFIG_FILE_NAME}")
    print_info(f"Current version: {config.version}", indent=1)

    # Step 2: Working tree must be clean
    current_step += 1
    print_step(current_step, total_steps, "Checking Working Tree")
    try:
        pending = client.get_changes(include_untracked=True)
    except GitError as exc:
        print_error(f"VCS error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    if pending:
        print_error("There are uncommitted changes, please commit before trying again:")
        print_uncommitted_changes(pending)
        raise click.exceptions.Exit(EXIT_UNCOMMITTED_CHANGES)
    print_success("Working tree is clean")

    # Step 3: Compute the new version
    current_step += 1
    print_step(current_step, total_steps, "Bumping Version")
    new_version = Version.parse(config.version).bump(designation)
    print_success(f"New version: {click.style(str(new_version), fg='green', bold=True)}")

    # Step 4: Group history by release
    current_step += 1
    print_step(current_step, total_steps, "Reading Commit History")
    try:
        log_lines = client.get_log_lines()
        changes = group_changes_by_release(log_lines, str(new_version), config.project_repo)
    except GitError as exc:
        print_error(f"VCS error: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    except ChangelogError as exc:
        print_error(f"Cannot build changelog: {exc}")
        raise click.exceptions.Exit(EXIT_CHANGELOG_FAILURE)
    print_success(
        f"Grouped {changes.total_changes()} change(s) into {len(changes)} release(s)"
    )

    # Step 5: Persist version and sync manifests
    current_step += 1
    print_step(current_step, total_steps, "Updating Version Files")
    config.version = str(new_version)
    try:
        save_config(config, repo_root)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    print_success(f"Updated {CONFIG_FILE_NAME}")
    if config.version_sync_files:
        try:
            synced = sync_version_to_files(config.version_sync_files, config.version, repo_root)
        except VersionSyncError as exc:
            print_error(f"Failed to update version in files: {exc}")
            raise click.exceptions.Exit(EXIT_SYNC_FAILURE)
        for path in synced:
            print_success(f"Updated version in {path}", indent=1)

    # Step 6: Write changelogs
    current_step += 1
    print_step(current_step, total_steps, "Generating Changelogs")
    try:
        written = generate_and_write_changelogs(config, config.version, changes, repo_root)
    except RenderError as exc:
        print_error(str(exc))
        raise click.exceptions.Exit(EXIT_CHANGELOG_FAILURE)
    for path, selection in zip(written, config.changelog_output_selections):
        print_success(f"Generated {selection.template_option} changelog at {path}", indent=1)

    if not commit:
        click.echo("\n🚀 Version bumped and changelog updated; nothing was committed.\n")
        return

    # Step 7: Commit the release
    current_step += 1
    print_step(current_step, total_steps, "Committing Release")
    message = DEFAULT_RULES.release_message(config.version)
    try:
        client.stage_all()
        client.commit(message)
    except GitError as exc:
        print_error(f"Failed to commit release: {exc}")
        raise click.exceptions.Exit(EXIT_VCS_FAILURE)
    print_success(f"Committed: {message}")

    # Step 8: Release branch
    current_step += 1
    print_step(current_step, total_steps, "Release Branch")
    if config.branch_for_release and str(designation) in config.commands_that_release:
        branch = release_branch_name(new_version, config.commands_that_release)
        try:
            client.create_branch(branch)
        except GitError as exc:
            print_error(f"Failed to create {branch}: {exc}")
            raise click.exceptions.Exit(EXIT_VCS_FAILURE)
        print_success(f"Created branch {branch}")
        print_info("To publish your release run:", indent=1)
        click.echo(click.style(f"      git push origin {branch}", fg="cyan"))
    else:
        print_info(f"'{designation}' does not create a release branch")

    click.echo("\n✅ New version has been committed and the changelog has been updated.")
    click.echo("🚀 Don't forget to push your changes!\n")


# ---------------------------------------------------------------------------
# Interactive configuration
# ---------------------------------------------------------------------------

def _validate_version(value: str) -> str:
    try:
        return str(Version.parse(value))
    except VersionError as exc:
        raise click.BadParameter(str(exc))


def _validate_release_commands(value: str) -> List[str]:
    valid = [str(d) for d in VersionDesignation]
    commands = [part.strip().lower() for part in value.split(",") if part.strip()]
    unknown = [c for c in commands if c not in valid]
    if unknown:
        raise click.BadParameter(f"Unknown command(s): {', '.join(unknown)}")
    if str(VersionDesignation.MAJOR) not in commands:
        raise click.BadParameter("major must be selected")
    return [c for c in valid if c in commands]


def _prompt_output_selections() -> List[ChangelogOutputOption]:
    selections: List[ChangelogOutputOption] = []
    click.echo(click.style("----------------- Output Files -----------------", fg="green"))
    while True:
        option = TemplateOption(
            click.prompt(
                "Select a changelog template",
                type=click.Choice([str(o) for o in TemplateOption]),
                default=str(TemplateOption.MARKDOWN),
            )
        )
        path = click.prompt(
            "Enter the output filepath (relative to the project root)",
            default=option.default_output,
        ).strip()
        selections.append(ChangelogOutputOption(option, path))
        if not click.confirm("Add another changelog file output?", default=False):
            return selections


def _prompt_sync_files() -> Optional[List[VersionSyncFile]]:
    if not click.confirm("Add a file to sync the version with?", default=False):
        return None
    click.echo(click.style("----------------- Files To Sync -----------------", fg="green"))
    sync_files: List[VersionSyncFile] = []
    while True:
        path = click.prompt("Enter the file path (relative to the project root)").strip()
        fmt = SyncFileFormat(
            click.prompt(
                "Select a file format",
                type=click.Choice([str(f) for f in SyncFileFormat]),
            )
        )
        key = click.prompt("Enter the key to update with the new version", default="version")
        sync_files.append(VersionSyncFile(file_format=fmt, file_path=path, version_key=key))
        if not click.confirm("Add another version sync file?", default=False):
            return sync_files


def prompt_for_config() -> GitscribeConfig:
    """Walk the user through building a configuration."""
    config = create_default_config()
    config.version = click.prompt(
        "Enter the initial version", default=config.version, value_proc=_validate_version
    )
    project_repo = click.prompt(
        "Enter the project repository URL (used to link commits, blank for none)",
        default="",
        show_default=False,
    ).strip()
    config.project_repo = project_repo or None

    config.branch_for_release = click.confirm("Create a branch for releases?", default=False)
    if config.branch_for_release:
        config.commands_that_release = click.prompt(
            "Commands that create a release (comma separated)",
            default="major,minor",
            value_proc=_validate_release_commands,
        )

    config.changelog_output_selections = _prompt_output_selections()
    config.version_sync_files = _prompt_sync_files()
    return config


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

no_commit_option = click.option(
    "--no-commit",
    is_flag=True,
    help="Update the version files and changelogs without committing.",
)


@click.group()
@click.option("--verbose", is_flag=True, help="Enable verbose (debug) output.")
@click.version_option(version=__version__, prog_name="gitscribe")
def main(verbose: bool) -> None:
    """📝 Changelog generation and version bumping from your git history."""
    # force=True so repeated invocations (tests) reconfigure handlers
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s: %(message)s",
        force=True,
    )
    print_banner()


@main.command()
def init() -> None:
    """Initialize a new gitscribe configuration file."""
    repo_root = _find_repo_root()
    if (repo_root / CONFIG_FILE_NAME).exists():
        print_error(
            f"Config file already exists: {CONFIG_FILE_NAME}. "
            "Please remove it if you want to reinitialize."
        )
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)

    config = prompt_for_config()
    try:
        path = save_config(config, repo_root, create=True)
    except ConfigError as exc:
        print_error(f"Configuration error: {exc}")
        raise click.exceptions.Exit(EXIT_CONFIG_ERROR)
    print_success(f"Config file has been initialized at {path}")


@main.command()
@no_commit_option
def patch(no_commit: bool) -> None:
    """Bump the version by a patch, e.g. 1.0.0 -> 1.0.1."""
    run_release(VersionDesignation.PATCH, commit=not no_commit)


@main.command()
@no_commit_option
def minor(no_commit: bool) -> None:
    """Bump the version by a minor, e.g. 1.0.4 -> 1.1.0."""
    run_release(VersionDesignation.MINOR, commit=not no_commit)


@main.command()
@no_commit_option
def major(no_commit: bool) -> None:
    """Bump the version by a major, e.g. 1.0.4 -> 2.0.0."""
    run_release(VersionDesignation.MAJOR, commit=not no_commit)
