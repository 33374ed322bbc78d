"""CLI entrypoints for VaultWeaver."""

from __future__ import annotations

from pathlib import Path

import typer

from vaultweaver.config import GenerationConfig, load_settings
from vaultweaver.core.estimator import planned_total
from vaultweaver.logging import configure_logging, get_logger
from vaultweaver.models.vault import GenerationStatus
from vaultweaver.orchestrator.runner import run_vault

app = typer.Typer(add_completion=False, help="VaultWeaver interlinked knowledge vault generator")
logger = get_logger(__name__)


@app.command()
def run(
    topics: str = typer.Argument(
        ...,
        help="Seed theme. In --mode moc, a comma-separated list of seed themes.",
    ),
    mode: str = typer.Option("single", "--mode", help="single | moc"),
    moc_title: str = typer.Option("Map of Contents", "--moc-title", help="Title of the MOC index file"),
    child_count: int = typer.Option(3, "--children", "-c", min=0, help="Follow-up themes per article"),
    max_depth: int = typer.Option(2, "--depth", "-d", min=0, help="Maximum expansion depth"),
    max_articles: int = typer.Option(0, "--max-articles", min=0, help="Article cap (0 = uncapped)"),
    workers: int = typer.Option(1, "--workers", "-w", min=1, help="Concurrent generation tasks"),
    model_name: str | None = typer.Option(None, "--model", help="Model override"),
    extra_prompt: str = typer.Option("", "--extra-prompt", help="Additional writing instructions"),
    web: bool = typer.Option(False, "--web/--model-only", help="Append a web research section"),
    artifacts_dir: Path | None = typer.Option(
        None,
        "--artifacts-dir",
        help="Artifacts directory (overrides VAULTWEAVER_ARTIFACTS_DIR)",
    ),
) -> None:
    """Generate a vault and print the directory it was written to."""

    if mode not in ("single", "moc"):
        raise typer.BadParameter("--mode must be 'single' or 'moc'.")

    settings = load_settings()
    if artifacts_dir is not None:
        settings.artifacts_dir = artifacts_dir

    configure_logging(settings.log_level)

    config = GenerationConfig(
        initial_topics=topics,
        mode=mode,
        moc_title=moc_title,
        child_count=child_count,
        max_depth=max_depth,
        max_articles=max_articles,
        parallel_mode=workers > 1,
        parallel_workers=workers,
        model_name=model_name,
        extra_prompt=extra_prompt,
        model_only=not web,
    )
    if not settings.openai_api_key:
        raise typer.BadParameter("VAULTWEAVER_OPENAI_API_KEY is not set.")

    logger.info("CLI run requested")
    state, vault_dir = run_vault(config=config, settings=settings)

    typer.echo(f"status={state.status.value} articles={state.progress.current}/{state.progress.total}")
    if vault_dir is not None:
        typer.echo(str(vault_dir))
    if state.status == GenerationStatus.ERROR:
        raise typer.Exit(code=1)


@app.command()
def estimate(
    seeds: int = typer.Argument(1, min=0, help="Number of seed themes"),
    child_count: int = typer.Option(3, "--children", "-c", help="Follow-up themes per article"),
    max_depth: int = typer.Option(2, "--depth", "-d", help="Maximum expansion depth"),
    max_articles: int = typer.Option(0, "--max-articles", min=0, help="Article cap (0 = uncapped)"),
) -> None:
    """Print the planned article count for the given tree shape."""

    typer.echo(str(planned_total(seeds, child_count, max_depth, max_articles)))


if __name__ == "__main__":
    app()
