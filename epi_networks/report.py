"""
Renders the primer as a markdown document. Figures are saved as PNG files and tables as CSV files next to it; tables
are also shown inline so the document can be read without opening them.

The output directory looks like::

    index.md
    figures/<section>-<n>.png
    tables/<section>-<n>.csv
"""
# pylint: disable=import-error
import logging
import re
from pathlib import Path
from typing import List, NamedTuple, Optional, Sequence, Tuple, Union

import pandas as pd  # type: ignore
from matplotlib import pyplot as plt  # type: ignore
from matplotlib.figure import Figure  # type: ignore

from epi_networks.common import Issue, IssueSeverity, RepoInfo

logger = logging.getLogger(__name__)


class Section(NamedTuple):
    """
    A section of the document: a title, some prose, and the figures and tables that illustrate it. Figures and tables
    are (caption, object) pairs and are rendered in the order given, figures first
    """
    title: str
    prose: str
    figures: Sequence[Tuple[str, Figure]] = ()
    tables: Sequence[Tuple[str, pd.DataFrame]] = ()


def slugify(text: str) -> str:
    """
    >>> slugify("Degree centrality: who has the most contacts?")
    'degree-centrality-who-has-the-most-contacts'
    """
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def _table_block(df: pd.DataFrame, float_format: str = "{:.3f}") -> str:
    text = df.to_string(index=False, float_format=float_format.format)
    return f"```\n{text}\n```"


def write_section(section: Section, outdir: Path, dpi: int = 100) -> str:
    """Saves the figures and tables of a section and returns its markdown.

    :param section: the section to write
    :param outdir: root directory of the document
    :param dpi: resolution of the figures
    :return: the markdown for the section
    """
    slug = slugify(section.title)
    lines = [f"## {section.title}", "", section.prose.strip(), ""]
    for i, (caption, fig) in enumerate(section.figures, start=1):
        path = Path("figures") / f"{slug}-{i}.png"
        fig.savefig(outdir / path, dpi=dpi)
        plt.close(fig)
        logger.debug("Saved %s", path)
        lines.extend([f"![{caption}]({path.as_posix()})", "", f"*{caption}*", ""])
    for i, (caption, df) in enumerate(section.tables, start=1):
        path = Path("tables") / f"{slug}-{i}.csv"
        df.to_csv(outdir / path, index=False)
        logger.debug("Saved %s", path)
        lines.extend([f"**{caption}** ([csv]({path.as_posix()}))", "", _table_block(df), ""])
    return "\n".join(lines)


def write_report(
        sections: List[Section],
        outdir: Union[str, Path],
        title: str,
        issues: Optional[List[Issue]] = None,
        info: Optional[RepoInfo] = None,
        dpi: int = 100,
) -> Path:
    """Writes the whole document.

    :param sections: the sections, in reading order
    :param outdir: directory in which to write the document; created if needed
    :param title: title of the document
    :param issues: caveats found while rendering, listed in a notes section at the end
    :param info: provenance of the code that rendered the document
    :param dpi: resolution of the figures
    :return: path of the markdown file
    """
    outdir = Path(outdir)
    (outdir / "figures").mkdir(parents=True, exist_ok=True)
    (outdir / "tables").mkdir(parents=True, exist_ok=True)

    parts = [f"# {title}", ""]
    for section in sections:
        logger.info("Writing section: %s", section.title)
        parts.append(write_section(section, outdir, dpi=dpi))

    if issues:
        parts.extend(["## Notes", ""])
        for issue in sorted(issues, key=lambda i: -i.severity):
            parts.append(f"* **{IssueSeverity(issue.severity).name.lower()}**: {issue.description}")
        parts.append("")

    if info is not None:
        sha = info.git_sha or "not a git repository"
        dirty = " (with uncommitted changes)" if info.is_dirty and info.git_sha else ""
        parts.extend(["---", "", f"Rendered from {info.uri} at {sha}{dirty}.", ""])

    path = outdir / "index.md"
    path.write_text("\n".join(parts), encoding="utf8")
    logger.info("Wrote %s sections to %s", len(sections), path)
    return path
