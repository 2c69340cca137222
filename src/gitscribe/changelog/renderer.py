"""
Rendering of a :class:`~gitscribe.changes.group_model.ChangeGroup` into
changelog documents.

Templates are Jinja2 files shipped in ``gitscribe/changelog/templates``.
They receive the version being released, the release date and the change
group itself; sections are emitted in the group's order, newest release
first.
"""

from __future__ import annotations

import enum
import logging
from datetime import date as date_type
from pathlib import Path
from typing import TYPE_CHECKING, List, Optional

from jinja2 import Environment, FileSystemLoader, StrictUndefined, TemplateError

from gitscribe.changes.group_model import ChangeGroup

if TYPE_CHECKING:
    from gitscribe.config.loader import GitscribeConfig

logger = logging.getLogger(__name__)
if not logger.handlers:
    logger.addHandler(logging.NullHandler())

TEMPLATE_DIR = Path(__file__).parent / "templates"


class RenderError(Exception):
    """Raised when a changelog cannot be rendered or written."""

    pass


class TemplateOption(str, enum.Enum):
    """Available changelog templates."""

    MARKDOWN = "Markdown"

    def __str__(self) -> str:
        return self.value

    @property
    def template_name(self) -> str:
        return _TEMPLATE_FILES[self]

    @property
    def default_output(self) -> str:
        return _DEFAULT_OUTPUTS[self]


_TEMPLATE_FILES = {TemplateOption.MARKDOWN: "changelog.md.j2"}
_DEFAULT_OUTPUTS = {TemplateOption.MARKDOWN: "./CHANGELOG.md"}


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(TEMPLATE_DIR)),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=StrictUndefined,
    )


def render_changelog(
    option: TemplateOption,
    version: str,
    changes: ChangeGroup,
    date: Optional[date_type] = None,
) -> str:
    """Render ``changes`` with the template for ``option``.

    Parameters
    ----------
    option : TemplateOption
        Which template to use.
    version : str
        The version being released.
    changes : ChangeGroup
        Changes grouped by release, newest first.
    date : Optional[date]
        Release date shown next to ``version``. Defaults to today.
    """
    release_date = (date or date_type.today()).strftime("%Y-%m-%d")
    try:
        template = _environment().get_template(option.template_name)
        return template.render(version=version, date=release_date, changes=changes)
    except TemplateError as exc:
        raise RenderError(f"Failed to render {option} changelog: {exc}") from exc


def write_changelog(output_filepath: Path, content: str) -> None:
    """Overwrite ``output_filepath`` with ``content``."""
    try:
        output_filepath.parent.mkdir(parents=True, exist_ok=True)
        output_filepath.write_text(content, encoding="utf-8")
    except OSError as exc:
        raise RenderError(f"Failed to write changelog to {output_filepath}: {exc}") from exc
    logger.debug("Wrote %d characters to %s", len(content), output_filepath)


def generate_and_write_changelogs(
    config: "GitscribeConfig",
    version: str,
    changes: ChangeGroup,
    repo_root: Path,
    date: Optional[date_type] = None,
) -> List[Path]:
    """Render and write every changelog output configured in ``config``.

    Returns
    -------
    List[Path]
        The files written, in configuration order.
    """
    written: List[Path] = []
    for selection in config.changelog_output_selections:
        content = render_changelog(selection.template_option, version, changes, date)
        path = Path(selection.output_filepath)
        if not path.is_absolute():
            path = repo_root / path
        write_changelog(path, content)
        written.append(path)
    return written
