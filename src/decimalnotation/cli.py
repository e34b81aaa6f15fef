"""Command-line interface for decimalnotation."""

from __future__ import annotations

from fractions import Fraction
from pathlib import Path
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from decimalnotation.config import load_settings
from decimalnotation.errors import DecimalNotationError, InvalidArgumentError
from decimalnotation.formatter import DecimalNotationFormatter, NotationStyle
from decimalnotation.logging import LOG_FORMATS, configure_logging, get_logger, log_context
from decimalnotation.numberformat import get_format_table, list_locales, load_format_table
from decimalnotation.rational import Rational
from decimalnotation.rounding import MidpointRounding, round_rational

app = typer.Typer(
    name="decimalnotation",
    help="Exact decimal notation for rational numbers",
    add_completion=False,
)

console = Console()
logger = get_logger(__name__)

_SPECIALS = {
    "nan": Rational.nan,
    "inf": Rational.positive_infinity,
    "+inf": Rational.positive_infinity,
    "infinity": Rational.positive_infinity,
    "-inf": Rational.negative_infinity,
    "-infinity": Rational.negative_infinity,
}

LEGACY_OVERRIDES = {
    "general": {"precision": 15},
    "currency": {"max_negative_pattern": 15},
}


def parse_rational(text: str) -> Rational:
    """Parse ``n/d``, an integer, a decimal literal or nan/inf/-inf.

    Example:
        >>> parse_rational("400/3")
        Rational(400, 3)
        >>> parse_rational("-1.25e2")
        Rational(-125, 1)
    """
    literal = text.strip()
    special = _SPECIALS.get(literal.lower())
    if special is not None:
        return special()

    if "/" in literal:
        numerator, _, denominator = literal.partition("/")
        try:
            n, d = int(numerator), int(denominator)
        except ValueError:
            raise InvalidArgumentError("value", f"not a fraction: {text!r}") from None
        if d == 0:
            raise InvalidArgumentError("value", "denominator must not be zero")
        return Rational(n, d)

    try:
        fraction = Fraction(literal)
    except ValueError:
        raise InvalidArgumentError("value", f"not a number: {text!r}") from None
    return Rational(fraction.numerator, fraction.denominator)


def _fail(error: Exception) -> None:
    typer.echo(f"Error: {error}", err=True)
    raise typer.Exit(1)


@app.callback()
def main(
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Settings file or directory"),
    ] = None,
    log_level: Annotated[
        Optional[str],
        typer.Option("--log-level", help="Log level (trace, debug, info, warning, error)"),
    ] = None,
    log_format: Annotated[
        Optional[str],
        typer.Option("--log-format", help=f"Log format ({', '.join(LOG_FORMATS)})"),
    ] = None,
    legacy: Annotated[
        bool,
        typer.Option("--legacy", help="Use the legacy revision (G precision 15, currency patterns 0-15)"),
    ] = False,
) -> None:
    """Format exact rationals as decimal text."""
    overrides: dict = {}
    if legacy:
        overrides.update(LEGACY_OVERRIDES)
    if log_level is not None or log_format is not None:
        overrides["logging"] = {
            key: value
            for key, value in (("level", log_level), ("format", log_format))
            if value is not None
        }

    try:
        settings = load_settings(config, overrides=overrides or None)
    except DecimalNotationError as e:
        _fail(e)

    configure_logging(level=settings.log_level, format=settings.log_format)
    logger.debug("Settings loaded", config=str(config) if config else None, locale=settings.default_locale)


@app.command(name="format")
def format_cmd(
    value: Annotated[str, typer.Argument(help="Value: n/d, integer, decimal, nan, inf or -inf")],
    spec: Annotated[str, typer.Argument(help="Format spec, e.g. G, F2, N0, E3, P1, C, S4, R")] = "G",
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Locale tag (default from settings)"),
    ] = None,
    table_file: Annotated[
        Optional[Path],
        typer.Option("--table", "-t", help="Format table file (YAML, JSON or TOML)"),
    ] = None,
    rounding: Annotated[
        Optional[str],
        typer.Option("--rounding", "-r", help="Midpoint rounding policy"),
    ] = None,
) -> None:
    """Format a value."""
    if table_file and not table_file.exists():
        typer.echo(f"Error: Table file not found: {table_file}", err=True)
        raise typer.Exit(1)

    try:
        with log_context(command="format", spec=spec):
            number = parse_rational(value)
            formatter = DecimalNotationFormatter(midpoint_rounding=rounding)
            table = load_format_table(table_file) if table_file else locale
            text = formatter.format(spec, number, table)
    except DecimalNotationError as e:
        _fail(e)
    typer.echo(text)


@app.command(name="styles")
def styles_cmd(
    value: Annotated[str, typer.Argument(help="Value to format")],
    precision: Annotated[
        Optional[int],
        typer.Option("--precision", "-p", min=0, help="Precision for every style"),
    ] = None,
    locale: Annotated[
        Optional[str],
        typer.Option("--locale", "-l", help="Locale tag"),
    ] = None,
) -> None:
    """Show a value in every standard style."""
    try:
        number = parse_rational(value)
        formatter = DecimalNotationFormatter()
        resolved = formatter.resolve_table(locale)
        rows = []
        for style in NotationStyle:
            spec = style.value if precision is None or style is NotationStyle.ROUND_TRIP else f"{style.value}{precision}"
            rows.append((spec, style.name.replace("_", " ").lower(), formatter.format(spec, number, resolved)))
    except DecimalNotationError as e:
        _fail(e)

    table = Table(title=f"{value} ({resolved.name})", show_header=True, header_style="bold magenta")
    table.add_column("Spec", style="cyan", no_wrap=True)
    table.add_column("Style")
    table.add_column("Text", justify="right")
    for row in rows:
        table.add_row(*row)
    console.print(table)


@app.command(name="round")
def round_cmd(
    value: Annotated[str, typer.Argument(help="Value to round")],
    decimals: Annotated[int, typer.Argument(min=0, help="Decimal places")],
    mode: Annotated[
        str,
        typer.Option("--mode", "-m", help="Midpoint policy (to_even, away_from_zero, to_zero, ...)"),
    ] = MidpointRounding.TO_EVEN.value,
) -> None:
    """Round a value to a number of decimal places and print it as n/d."""
    try:
        rounded = round_rational(parse_rational(value), decimals, MidpointRounding.from_string(mode))
    except DecimalNotationError as e:
        _fail(e)
    typer.echo(str(rounded))


@app.command(name="locales")
def locales_cmd() -> None:
    """List registered locale tables."""
    table = Table(title="Locales", show_header=True, header_style="bold magenta")
    table.add_column("Tag", style="cyan", no_wrap=True)
    table.add_column("Decimal", justify="center")
    table.add_column("Group", justify="center")
    table.add_column("Currency", justify="center")
    table.add_column("Example", justify="right")

    formatter = DecimalNotationFormatter()
    sample = Rational(-1234567, 1000)
    for tag in list_locales():
        info = get_format_table(tag)
        table.add_row(
            tag,
            repr(info.number_decimal_separator),
            repr(info.number_group_separator),
            info.currency_symbol,
            formatter.format("C", sample, info),
        )
    console.print(table)


if __name__ == "__main__":
    app()
