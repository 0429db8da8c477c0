"""Command-line interface for ducky-learn.

Provides ``train``, ``predict``, ``evaluate`` and ``features`` commands with
rich terminal output using the ``click`` and ``rich`` libraries.

Usage::

    ducky-learn train corpus.tsv --model model.json
    ducky-learn predict model.json "cheap pills, buy now"
    ducky-learn evaluate corpus.tsv --folds 5
    ducky-learn features model.json spam --top 10
"""

from __future__ import annotations

import json
import logging
import sys
from pathlib import Path

import click
from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from .config import ClassifierConfig
from .corpus import load_corpus
from .errors import DuckyLearnError
from .evaluation import ClassificationMetrics
from .pipeline import TextClassifier

console = Console()
logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


def _fail(error: Exception) -> None:
    logger.debug("Command failed", exc_info=error)
    console.print(f"[bold red]Error:[/] {escape(str(error))}")
    sys.exit(1)


def _split_corpus(path: Path) -> tuple[list[str], list[str]]:
    records = load_corpus(path)
    labels = [label for label, _ in records]
    documents = [text for _, text in records]
    return documents, labels


@click.group()
@click.version_option(package_name="ducky-learn")
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging.")
def main(verbose: bool) -> None:
    """🦆 ducky-learn — multinomial Naive Bayes text classification."""
    load_dotenv()
    _setup_logging(verbose)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--model", "-m", "model_path", type=click.Path(dir_okay=False, path_type=Path),
              required=True, help="Where to write the trained model (JSON).")
@click.option("--smoothing", "-a", type=float, default=None,
              help="Additive smoothing stored as the model default.")
@click.option("--stopwords/--no-stopwords", default=None, help="Filter English stop words.")
@click.option("--ngram-max", type=click.IntRange(min=1), default=None,
              help="Largest n-gram size to extract.")
def train(
    corpus: Path,
    model_path: Path,
    smoothing: float | None,
    stopwords: bool | None,
    ngram_max: int | None,
) -> None:
    """Train a classifier on a labeled corpus.

    CORPUS is a ``label<TAB>text`` file or a ``.jsonl`` file.

    Example: ducky-learn train corpus.tsv --model model.json
    """
    try:
        config = ClassifierConfig.from_env(
            smoothing=smoothing,
            use_stopwords=stopwords,
            ngram_range=(1, ngram_max) if ngram_max else None,
        )
        documents, labels = _split_corpus(corpus)
        classifier = TextClassifier(config)
        with console.status("[bold blue]Training...", spinner="dots"):
            metrics = classifier.train(documents, labels)
        classifier.save(model_path)
    except (DuckyLearnError, ValueError, OSError) as e:
        _fail(e)

    model = classifier.model
    console.print(
        f"Trained on [bold]{model.total}[/] documents, "
        f"[bold]{len(model.labels)}[/] labels, "
        f"vocabulary of [bold]{model.vocabulary_size}[/]."
    )
    _render_metrics(metrics, title="Training set")
    console.print(f"[dim]Model saved to {model_path}[/]")


@main.command()
@click.argument("model_path", metavar="MODEL",
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("texts", nargs=-1, required=True)
@click.option("--smoothing", "-a", type=float, default=None,
              help="Override the model's smoothing for this prediction.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def predict(model_path: Path, texts: tuple[str, ...], smoothing: float | None, output: str) -> None:
    """Classify one or more TEXTS with a trained model.

    Example: ducky-learn predict model.json "buy now"
    """
    try:
        classifier = TextClassifier.load(model_path)
        results = classifier.classify_batch(list(texts), smoothing=smoothing)
    except (DuckyLearnError, ValueError, OSError) as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps([r.to_dict() for r in results], indent=2))
        return

    table = Table(title="Predictions", show_lines=True)
    table.add_column("#", justify="right", width=4)
    table.add_column("Text", style="white", max_width=60)
    table.add_column("Label", style="cyan")
    table.add_column("Conf.", justify="center", width=7)
    for i, (text, result) in enumerate(zip(texts, results), 1):
        excerpt = text[:120].replace("\n", " ") + ("..." if len(text) > 120 else "")
        table.add_row(
            str(i),
            escape(excerpt),
            escape(str(result.predicted_class)),
            f"{result.confidence:.0%}",
        )
    console.print(table)


@main.command()
@click.argument("corpus", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--folds", "-k", type=click.IntRange(min=2), default=5, help="Number of folds.")
@click.option("--seed", type=int, default=42, help="Shuffle seed for fold assignment.")
@click.option("--smoothing", "-a", type=float, default=None, help="Additive smoothing.")
@click.option("--output", "-o", type=click.Choice(["rich", "json"]), default="rich",
              help="Output format.")
def evaluate(corpus: Path, folds: int, seed: int, smoothing: float | None, output: str) -> None:
    """Cross-validate a classifier on a labeled corpus.

    Example: ducky-learn evaluate corpus.tsv --folds 5
    """
    try:
        config = ClassifierConfig.from_env(smoothing=smoothing)
        documents, labels = _split_corpus(corpus)
        with console.status("[bold blue]Cross-validating...", spinner="dots"):
            results = TextClassifier(config).evaluate(documents, labels, k=folds, seed=seed)
    except (DuckyLearnError, ValueError, OSError) as e:
        _fail(e)

    if output == "json":
        click.echo(json.dumps([m.to_dict() for m in results], indent=2))
        return

    table = Table(title=f"{folds}-fold cross-validation")
    table.add_column("Fold", justify="right")
    table.add_column("Accuracy", justify="right")
    table.add_column("Macro F1", justify="right")
    table.add_column("Weighted F1", justify="right")
    for i, m in enumerate(results, 1):
        table.add_row(str(i), f"{m.accuracy:.2%}", f"{m.macro_f1:.4f}", f"{m.weighted_f1:.4f}")
    console.print(table)

    if results:
        mean_acc = sum(m.accuracy for m in results) / len(results)
        console.print(f"Mean accuracy: [bold]{mean_acc:.2%}[/]")


def _resolve_label(label: str, known: list) -> object:
    """Match a command-line LABEL against the model's labels, which may be integers."""
    if label in known:
        return label
    try:
        number = int(label)
    except ValueError:
        return label
    return number if number in known else label


@main.command()
@click.argument("model_path", metavar="MODEL",
                type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("label")
@click.option("--top", "-n", type=click.IntRange(min=1), default=20,
              help="Number of features to show.")
def features(model_path: Path, label: str, top: int) -> None:
    """Show the most informative features for LABEL.

    Example: ducky-learn features model.json spam --top 10
    """
    try:
        classifier = TextClassifier.load(model_path)
        ranked = classifier.most_informative_features(
            _resolve_label(label, classifier.classes), top_n=top
        )
    except (DuckyLearnError, ValueError, KeyError, OSError) as e:
        _fail(e)

    table = Table(title=f"Most informative features — {label}")
    table.add_column("#", justify="right", width=4)
    table.add_column("Feature", style="cyan")
    table.add_column("Score", justify="right")
    for i, (token, score) in enumerate(ranked, 1):
        table.add_row(str(i), escape(str(token)), f"{score:.4f}")
    console.print(table)


# ------------------------------------------------------------------
# Rich rendering helpers
# ------------------------------------------------------------------

def _render_metrics(metrics: ClassificationMetrics, title: str) -> None:
    """Render per-label precision/recall/F1 as a rich table."""
    table = Table(title=f"{title} — accuracy {metrics.accuracy:.2%}")
    table.add_column("Label", style="cyan")
    table.add_column("Precision", justify="right")
    table.add_column("Recall", justify="right")
    table.add_column("F1", justify="right")
    table.add_column("Support", justify="right")
    for label, m in metrics.per_class.items():
        table.add_row(
            escape(str(label)),
            f"{m['precision']:.4f}",
            f"{m['recall']:.4f}",
            f"{m['f1']:.4f}",
            str(metrics.support.get(label, 0)),
        )
    console.print(table)


if __name__ == "__main__":
    main()
