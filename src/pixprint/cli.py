import json
from pathlib import Path
from typing import List

import typer

from .config import Settings
from .errors import InputError, PixprintError
from .fingerprint.scan import ScanDiagnostic, find_similar_pairs
from .fingerprint.similarity import similarity as compute_similarity
from .ingestion import fingerprint_file
from .logging import get_logger

app = typer.Typer(help="pixprint – average-hash image fingerprints and near-duplicate search", no_args_is_help=True)


def _settings(width: int, height: int, threshold: float = 0.9, workers: int = 1) -> Settings:
    try:
        return Settings(hash_width=width, hash_height=height, similarity_threshold=threshold, workers=workers)
    except InputError as exc:
        get_logger(__name__).error(f"Invalid options: {exc}")
        raise typer.Exit(code=2) from exc


@app.command()
def fingerprint(
    images: List[Path] = typer.Argument(..., exists=True, dir_okay=False, readable=True, help="Image files to fingerprint"),
    width: int = typer.Option(8, help="Hash grid columns"),
    height: int = typer.Option(8, help="Hash grid rows"),
) -> None:
    """
    Print the average-hash fingerprint of each image as hex.

    Images that cannot be decoded are reported and make the command exit
    with status 1 once every other image has been printed.
    """
    logger = get_logger(__name__)
    settings = _settings(width, height)

    failed = 0
    for image_path in images:
        try:
            fp = fingerprint_file(image_path, settings)
        except PixprintError as exc:
            logger.error(f"Failed to fingerprint {image_path}: {exc}")
            failed += 1
            continue
        typer.echo(f"{fp}  {image_path}")

    if failed:
        logger.error(f"{failed}/{len(images)} images could not be fingerprinted")
        raise typer.Exit(code=1)


@app.command()
def similarity(
    first: str = typer.Argument(..., help="First fingerprint (hex)"),
    second: str = typer.Argument(..., help="Second fingerprint (hex)"),
    width: int = typer.Option(8, help="Hash grid columns"),
    height: int = typer.Option(8, help="Hash grid rows"),
) -> None:
    """Print the normalized Hamming similarity of two hex fingerprints."""
    logger = get_logger(__name__)
    settings = _settings(width, height)

    try:
        score = compute_similarity(first, second, bits=settings.bits)
    except PixprintError as exc:
        logger.error(f"Cannot compare fingerprints: {exc}")
        raise typer.Exit(code=1) from exc

    typer.echo(f"{score:.6f}")


@app.command()
def scan(
    items: List[str] = typer.Argument(..., help="Image paths or hex fingerprints"),
    threshold: float = typer.Option(0.9, help="Report pairs with similarity strictly above this"),
    workers: int = typer.Option(1, help="Worker processes for pair comparison"),
    width: int = typer.Option(8, help="Hash grid columns"),
    height: int = typer.Option(8, help="Hash grid rows"),
    json_output: bool = typer.Option(False, "--json", help="Emit pairs as a JSON array"),
) -> None:
    """
    Find near-duplicate pairs among images and fingerprints.

    Each item that names an existing file is hashed as an image; anything
    else is taken as hex text. Invalid fingerprints are skipped with a warning.
    """
    logger = get_logger(__name__)
    settings = _settings(width, height, threshold, workers)

    labels: List[str] = []
    values: List[object] = []
    for item in items:
        if Path(item).is_file():
            try:
                values.append(fingerprint_file(item, settings))
            except PixprintError as exc:
                logger.warning(f"Skipping {item}: {exc}")
                continue
        else:
            values.append(item)
        labels.append(item)

    skipped: List[ScanDiagnostic] = []
    pairs = find_similar_pairs(
        values,
        settings.similarity_threshold,
        bits=settings.bits,
        on_diagnostic=skipped.append,
        workers=settings.workers,
    )
    logger.info(f"Compared {len(values) - len(skipped)} fingerprints, skipped {len(skipped)}, found {len(pairs)} pairs")

    if json_output:
        rows = []
        for pair in pairs:
            row = pair.to_dict()
            row["first_id"] = labels[pair.first_id]
            row["second_id"] = labels[pair.second_id]
            rows.append(row)
        typer.echo(json.dumps(rows, indent=2))
        return

    for pair in pairs:
        typer.echo(f"{labels[pair.first_id]}  {labels[pair.second_id]}  {pair.similarity:.6f}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
