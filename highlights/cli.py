"""Developer CLI: inspect and validate highlight projects stored as JSON."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv
from pydantic import ValidationError
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from highlights.api.models import ProjectDocument
from highlights.editor import HighlightEditor
from highlights.engine.grouping import IntervalEntry
from highlights.utils.config import DEFAULT_CONFIG_YAML, load_config
from highlights.utils.logging import Verbosity, console, error, setup_logging, success, warn

load_dotenv()

app = typer.Typer(
    name="highlights",
    help="Inspect transcript highlights and AI suggestions.",
    rich_markup_mode="rich",
    no_args_is_help=True,
)


def _load_editor(project: Path, config: Optional[Path],
                 verbosity: Verbosity = Verbosity.NORMAL) -> HighlightEditor:
    cfg = load_config(config)
    setup_logging(verbosity, log_dir=Path(cfg.logging.log_dir), file_logging=cfg.logging.file_logging)
    try:
        doc = ProjectDocument.model_validate(json.loads(project.read_text(encoding="utf-8")))
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        error(f"Cannot read {project}: {e}")
        raise typer.Exit(2)
    return HighlightEditor.from_document(doc, config=cfg)


# ── SHOW ──────────────────────────────────────────────────────────────────────

@app.command()
def show(
    project: Annotated[Path, typer.Argument(help="Project JSON (words, highlights, suggestions)")],
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
    table: Annotated[bool, typer.Option("--table", help="List highlights as a table")] = False,
    verbose: Annotated[bool, typer.Option("--verbose", "-v")] = False,
):
    """Print the transcript with highlights as colored runs."""
    editor = _load_editor(project, config, Verbosity.VERBOSE if verbose else Verbosity.NORMAL)

    text = Text()
    for entry in editor.groups():
        if isinstance(entry, IntervalEntry):
            text.append(entry.text, style=f"black on {entry.interval.color}"
                        if entry.interval.color.startswith("#") else "reverse")
        else:
            style = "dim underline" if editor.suggestions.find_for_token(entry.index) else ""
            text.append(entry.token.text, style=style)
        text.append(" ")
    console.print(text)

    if table:
        t = Table(title="Highlights")
        t.add_column("id")
        t.add_column("start", justify="right")
        t.add_column("end", justify="right")
        t.add_column("color")
        t.add_column("text")
        for h in editor.intervals.sorted():
            t.add_row(h.id, f"{h.start:.2f}", f"{h.end:.2f}", h.color,
                      editor.tokens.text_in(h.start, h.end))
        console.print(t)


# ── CHECK ─────────────────────────────────────────────────────────────────────

@app.command()
def check(
    project: Annotated[Path, typer.Argument(help="Project JSON")],
    config: Annotated[Optional[Path], typer.Option("--config")] = None,
):
    """Report overlapping highlights; exits 1 if any are found."""
    editor = _load_editor(project, config)
    conflicts = editor.intervals.conflicts()
    if conflicts:
        for a, b in conflicts:
            warn(f"{a.id} [{a.start:.2f}-{a.end:.2f}] overlaps {b.id} [{b.start:.2f}-{b.end:.2f}]")
        raise typer.Exit(1)
    success(f"{len(editor.intervals)} highlights, no overlaps")


# ── INIT CONFIG ───────────────────────────────────────────────────────────────

@app.command(name="init")
def init_config(
    force: Annotated[bool, typer.Option("--force", help="Overwrite without asking")] = False,
):
    """Generate a default highlights.yaml in the current directory."""
    setup_logging(Verbosity.NORMAL)
    p = Path("highlights.yaml")
    if p.exists() and not force:
        if not Confirm.ask("highlights.yaml exists. Overwrite?", default=False):
            raise typer.Exit(0)
    p.write_text(DEFAULT_CONFIG_YAML)
    success(f"Created {p}")


# ── ENTRY POINT ───────────────────────────────────────────────────────────────

def app_entry():
    app()


if __name__ == "__main__":
    app_entry()
