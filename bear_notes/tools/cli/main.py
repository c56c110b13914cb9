"""
Entry point of `bear` CLI.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import dotenv
from click.exceptions import BadParameter
from pydantic import ValidationError
from typer import Context, Option

from ...core import FooterFlags, Session
from ..config import CONFIG_FILENAME, Config
from . import add_text, batch, create, search, update
from ._utils import MainTyper, logger, lookup_param

dotenv.load_dotenv()

app = MainTyper(
    "bear",
    help="CLI toolkit for Bear notes with footer-based note tracking",
)


@app.callback()
def main(
    ctx: Context,
    xcall: Path
    | None = Option(
        None,
        help="Path to xcall executable used to invoke Bear",
        envvar="BEAR_XCALL",
        dir_okay=False,
    ),
    token: str
    | None = Option(
        None,
        help="Bear API token, required for search",
        envvar="BEAR_TOKEN",
    ),
    config_file: Path
    | None = Option(
        None,
        help=f".yaml file containing defaults, '{CONFIG_FILENAME}' in working directory if it exists",
        envvar="BEAR_NOTES_CONFIG_FILE",
        dir_okay=False,
    ),
):
    # load environment variables from .env file if it exists
    dotenv.load_dotenv(Path(".env").resolve(), override=True)

    ctx.obj = RootContext.from_config(
        ctx=ctx, config_file=config_file, xcall=xcall, token=token
    )


app.command("create")(create.create)
app.command("add-text")(add_text.add_text)
app.command("update")(update.update)
app.command("search")(search.search)
app.command("batch-update")(batch.batch_update)


def run():
    app()


@dataclass(kw_only=True)
class RootContext:
    ctx: Context
    config: Config
    xcall: Path | None = None
    token: str | None = None

    @classmethod
    def from_config(
        cls,
        *,
        ctx: Context,
        config_file: Path | None,
        xcall: Path | None = None,
        token: str | None = None,
    ) -> RootContext:
        if config_file is None:
            default_file = Path(CONFIG_FILENAME)
            config_file = default_file if default_file.is_file() else None
        elif not config_file.is_file():
            raise BadParameter(
                message=f"file does not exist: {config_file}",
                ctx=ctx,
                param=lookup_param(ctx, "config_file"),
            )

        if config_file is None:
            return RootContext(ctx=ctx, config=Config(), xcall=xcall, token=token)

        try:
            config = Config.load_yaml(config_file)
        except (ValueError, ValidationError) as e:
            raise BadParameter(
                f"failed to load config file '{config_file}': {e}",
                ctx=ctx,
                param=lookup_param(ctx, "config_file"),
            )

        return RootContext(ctx=ctx, config=config, xcall=xcall, token=token)

    def create_session(self, *, token: str | None = None) -> Session:
        return self.config.create_session(
            xcall=self.xcall, token=token or self.token, logger=logger
        )

    def get_flags(
        self, *, creation_date: bool | None, add_id: bool | None
    ) -> FooterFlags:
        return self.config.footer.get_flags(
            creation_date=creation_date, add_id=add_id
        )


if __name__ == "__main__":
    app()
