"""imgsign CLI application with Typer."""

import logging
from typing import Annotated

import typer

from imgsign import __version__
from imgsign.app.annotations import parse_annotation_args
from imgsign.bootstrap import bootstrap_application
from imgsign.config import get_settings, set_settings
from imgsign.errors import ImageSignError
from imgsign.utils.cli_output import json_response

app = typer.Typer(
    name="imgsign",
    help="Sign container images and submit the signatures to a signing service",
    add_completion=True,
    no_args_is_help=True,
)
image_app = typer.Typer(help="Image signing")
app.add_typer(image_app, name="image")


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        typer.echo(f"imgsign version {__version__}")
        raise typer.Exit()


def configure_logging(verbose: bool) -> None:
    """Route library logging to stderr, DEBUG when ``verbose``."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def fail(exc: Exception) -> typer.Exit:
    """Report ``exc`` on stderr and return the exit to raise."""
    typer.secho(f"Error: {exc}", fg=typer.colors.RED, err=True)
    return typer.Exit(code=1)


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option("--version", callback=version_callback, is_eager=True),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable debug logging"),
    ] = False,
    api_url: Annotated[
        str | None,
        typer.Option("--api-url", help="Override the signing service URL"),
    ] = None,
) -> None:
    """imgsign - container image signing CLI."""
    configure_logging(verbose)
    # Update settings with CLI flags
    settings = get_settings()
    if api_url:
        settings.api_url = api_url
    set_settings(settings)


@image_app.command("sign")
def image_sign(
    image: Annotated[str, typer.Argument(help="Image to sign (name, tag, digest or local ID)")],
    key: Annotated[
        str | None,
        typer.Option("--key", "-k", help="Key to use for signing (file path or inline PEM)"),
    ] = None,
    annotation: Annotated[
        list[str] | None,
        typer.Option(
            "--annotation",
            "-a",
            help="Annotation to add to the signature (KEY=VALUE, repeatable)",
        ),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output result as JSON"),
    ] = False,
) -> None:
    """Sign an image.

    The private key passphrase is read from $IMGSIGN_IMAGE_SIGN_PASSWORD, an
    interactive prompt, or piped stdin, in that order.

    Example: imgsign image sign my-image --key ./cosign.key -a team=platform
    """
    container = bootstrap_application()
    service = container.sign_service
    key_source = key or container.settings.signing_key

    try:
        overrides = parse_annotation_args(annotation)
        service.validate_request(key_source, overrides)

        target = service.resolve_target(image)
        if not json_output:
            typer.secho(
                f"Signing image {image} (digest: {target.digest_reference})",
                fg=typer.colors.CYAN,
            )

        result = service.sign(image, key_source, overrides, target=target)
    except ImageSignError as exc:
        raise fail(exc) from exc

    if json_output:
        typer.echo(
            json_response(
                "image_signature",
                1,
                image=result.image,
                digest_reference=result.digest_reference,
                signed_identity=result.signed_identity,
                signature_digest=result.signature_digest,
                signature_b64=result.signature_b64,
                annotations=result.annotations,
                public_key=result.public_key_pem,
            )
        )
        return

    typer.secho(f"Created signature {result.signature_digest}", fg=typer.colors.GREEN)


if __name__ == "__main__":
    app()
