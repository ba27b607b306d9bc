import logging
import click

from cookiesmanager.config import load_rule_set
from cookiesmanager.cookies import parse_set_cookie_header, serialize_set_cookie
from cookiesmanager.rewriting import HeaderRewriter
from cookiesmanager.rules import MergeMode

logging.basicConfig(
    level=logging.INFO,
    format="[%(levelname)s] %(message)s",
)

MODES = [mode.value for mode in MergeMode]


@click.group()
@click.option("--verbose", is_flag=True)
def app(verbose: bool) -> None:
    if verbose:
        logging.getLogger("cookiesmanager").setLevel(logging.DEBUG)


@app.command()
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--cookie", default="", help="Value of the request Cookie header.")
@click.option("--set-cookie", "set_cookie", default=None, help="Value of the request Set-Cookie header.")
@click.option("--mode", type=click.Choice(MODES), default=None, help="Override the merge mode of the rules file.")
def rewrite(rules_file: str, cookie: str, set_cookie: str | None, mode: str | None) -> None:
    """Print cookie headers rewritten with the rules file."""
    rewriter = HeaderRewriter(load_rule_set(rules_file, mode=mode))
    headers = [(b"cookie", cookie.encode("latin-1"))]
    if set_cookie is not None:
        headers.append((b"set-cookie", set_cookie.encode("latin-1")))

    for key, value in rewriter.rewrite(headers):
        click.echo(f"{key.decode('latin-1').title()}: {value.decode('latin-1')}")


@app.command()
@click.argument("rules_file", type=click.Path(exists=True, dir_okay=False))
def show(rules_file: str) -> None:
    """Print the merge mode and every rule of the rules file."""
    rules = load_rule_set(rules_file)
    click.secho(f"mode: {rules.mode}", fg="cyan", bold=True)
    for label, items in (("adder", rules.adders), ("remover", rules.removers)):
        for rule in items:
            click.echo(f"{label}: {rule}")


@app.command()
@click.argument("header")
def parse(header: str) -> None:
    """Parse a Set-Cookie value and print it back in canonical form."""
    cookie = parse_set_cookie_header(header)
    if not cookie.name:
        raise click.ClickException("Set-Cookie value has no valid name=value pair.")
    click.echo(serialize_set_cookie(cookie))


def main() -> None:
    app()


if __name__ == "__main__":
    main()
