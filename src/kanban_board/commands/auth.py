"""Local account commands."""

import typer

from kanban_board.services.auth_service import AuthService
from kanban_board.services.board_service import BoardSession, open_board
from kanban_board.services.config_service import ConfigService, get_config_service
from kanban_board.utils.typer_helpers import SuggestingGroup
from kanban_board.utils.ui.formatters import format_info, format_output, format_success

from .decorators import command_wrapper
from .options import output_format, output_option

app = typer.Typer(cls=SuggestingGroup, help="Local account commands")


def _auth_service(config_service: ConfigService, session: BoardSession) -> AuthService:
    auth = AuthService(
        config_service.data_dir,
        session.store,
        session.persistence,
        config_service.config.auth,
    )
    auth.resume(session.user)
    return auth


@app.command("signup")
@command_wrapper
async def signup(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(
        ..., "--password", prompt=True, hide_input=True, confirmation_prompt=True
    ),
) -> None:
    """Register a local account and switch to its (empty) board."""
    config_service = get_config_service()
    with open_board(config_service) as session:
        user = await _auth_service(config_service, session).signup(email, password)
        session.user = user.email

    config_service.set_current_user(user.email)
    format_success(f"Account created, logged in as {user.email}")


@app.command("login")
@command_wrapper
async def login(
    email: str = typer.Argument(..., help="Email address"),
    password: str = typer.Option(..., "--password", prompt=True, hide_input=True),
) -> None:
    """Log in and switch to your board."""
    config_service = get_config_service()
    with open_board(config_service) as session:
        user = await _auth_service(config_service, session).login(email, password)
        session.user = user.email

    config_service.set_current_user(user.email)
    format_success(f"Logged in as {user.email}")


@app.command("logout")
@command_wrapper
async def logout() -> None:
    """Save your board and return to the guest board."""
    config_service = get_config_service()
    current = config_service.config.session.current_user
    if current is None:
        format_info("Not logged in")
        return

    with open_board(config_service) as session:
        await _auth_service(config_service, session).logout()
        session.user = None
        session.load()

    config_service.set_current_user(None)
    format_success(f"Logged out {current}")


@app.command("whoami")
@command_wrapper
def whoami(output: str | None = output_option()) -> None:
    """Show the logged-in user."""
    fmt = output_format(output)
    current = get_config_service().config.session.current_user
    if fmt != "pretty":
        format_output({"user": current}, fmt)
    elif current is None:
        format_info("Not logged in (using the guest board)")
    else:
        format_info(f"Logged in as {current}")
