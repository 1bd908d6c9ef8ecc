"""Typer CLI application."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

import typer

app = typer.Typer(
    name="larp-ledger",
    help="Character and XP ledger for a LARP campaign",
    no_args_is_help=True,
)

_db_option = typer.Option(None, "--db", help="Database path (overrides config)")


def _ledger(db: Optional[str]):
    from larp_ledger.app import LedgerApp

    return LedgerApp(db_path=db)


@app.callback()
def main(
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level"),
) -> None:
    from larp_ledger.app import _load_config

    level = log_level or _load_config().get("logging", {}).get("level", "INFO")
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@app.command("init-db")
def init_db(db: Optional[str] = _db_option) -> None:
    """Create the database and apply migrations."""
    from larp_ledger.cli.display import Display

    ledger = _ledger(db)
    ledger.db.initialize()
    Display().success(f"Database ready at {ledger.db_path}")
    ledger.close()


@app.command()
def seed(db: Optional[str] = _db_option) -> None:
    """Load the shipped heritages, cultures, archetypes and skills into the database."""
    from larp_ledger.cli.display import Display

    ledger = _ledger(db)
    display = Display()
    if ledger.seed():
        ref = ledger.reference
        display.success(
            f"Seeded {len(ref.skills)} skills, {len(ref.heritages)} heritages, "
            f"{len(ref.cultures)} cultures, {len(ref.archetypes)} archetypes."
        )
    else:
        display.console.print("Reference tables already populated; nothing to do.")
    ledger.close()


@app.command("validate-content")
def validate_content(
    content_dir: Optional[Path] = typer.Option(None, "--content-dir", help="Directory of TOML content"),
) -> None:
    """Check the reference data for dangling skill ids and prerequisite cycles."""
    from larp_ledger.cli.display import Display
    from larp_ledger.content.loader import load_reference_data

    problems = load_reference_data(content_dir).validate()
    Display().show_problems(problems)
    if problems:
        raise typer.Exit(code=1)


@app.command("add-user")
def add_user(
    username: str = typer.Argument(..., help="Login name"),
    player_name: str = typer.Option(..., "--player-name", "-p", help="Display name"),
    email: str = typer.Option(..., "--email", "-e"),
    chapter_code: Optional[str] = typer.Option(None, "--chapter", "-c", help="Two-letter chapter code"),
    admin: bool = typer.Option(False, "--admin", help="Grant admin rights"),
    db: Optional[str] = _db_option,
) -> None:
    """Register a user; the first admin has to be created this way."""
    from larp_ledger.cli.display import Display
    from larp_ledger.errors import LedgerError

    ledger = _ledger(db)
    display = Display()
    try:
        chapter_id = None
        if chapter_code:
            chapter = ledger.chapters.users.get_chapter_by_code(chapter_code)
            if chapter is None:
                display.error(f"No chapter with code {chapter_code.upper()}")
                raise typer.Exit(code=1)
            chapter_id = chapter["id"]
        user = ledger.chapters.register_user(
            username, player_name, email, chapter_id=chapter_id, is_admin=admin,
        )
    except LedgerError as exc:
        display.error(exc.message)
        raise typer.Exit(code=1) from exc
    finally:
        ledger.close()
    display.success(f"Created user {user.username} ({user.id})")
    if user.player_number:
        display.console.print(f"Player number: {user.player_number}")


@app.command()
def quote(
    heritage: str = typer.Option(..., "--heritage", "-h", help="Heritage id"),
    archetype: str = typer.Option(..., "--archetype", "-a", help="Archetype id"),
    skills: List[str] = typer.Option([], "--skill", "-s", help="Skill id (repeatable)"),
    body: Optional[int] = typer.Option(None, "--body", help="Target Body"),
    stamina: Optional[int] = typer.Option(None, "--stamina", help="Target Stamina"),
    second_archetype: Optional[str] = typer.Option(None, "--second-archetype"),
) -> None:
    """Price a character-creation selection against the 25 XP budget."""
    from larp_ledger.cli.display import Display
    from larp_ledger.content.loader import load_reference_data
    from larp_ledger.mechanics.experience import summarize_experience
    from larp_ledger.mechanics.skills import classify_skill

    display = Display()
    reference = load_reference_data()
    her = reference.heritage(heritage)
    arch = reference.archetype(archetype)
    if her is None or arch is None:
        display.error(f"Unknown heritage or archetype: {heritage}, {archetype}")
        raise typer.Exit(code=1)
    body = her.body if body is None else body
    stamina = her.stamina if stamina is None else stamina
    if body < her.body or stamina < her.stamina:
        display.error(f"{her.name} starts at Body {her.body} / Stamina {her.stamina}")
        raise typer.Exit(code=1)

    prices = [
        classify_skill(sid, her, arch, reference.archetype(second_archetype))
        for sid in dict.fromkeys(skills)
    ]
    summary = summarize_experience([p.cost for p in prices], her.body, her.stamina, body, stamina)
    display.show_quote(prices, summary, reference)
    if summary.over_budget:
        raise typer.Exit(code=2)


@app.command()
def sheet(
    character_id: str = typer.Argument(..., help="Character id"),
    db: Optional[str] = _db_option,
) -> None:
    """Show a character and its experience ledger."""
    from larp_ledger.cli.display import Display
    from larp_ledger.errors import NotFoundError

    ledger = _ledger(db)
    display = Display()
    try:
        character = ledger.characters.get(character_id)
        entries = ledger.characters.experience_history(character_id)
        display.show_sheet(character, entries, ledger.reference)
    except NotFoundError as exc:
        display.error(exc.message)
        raise typer.Exit(code=1) from exc
    finally:
        ledger.close()


@app.command()
def serve(
    host: Optional[str] = typer.Option(None, "--host"),
    port: Optional[int] = typer.Option(None, "--port"),
    db: Optional[str] = _db_option,
) -> None:
    """Run the REST API with uvicorn."""
    import uvicorn

    from larp_ledger.web.app import create_app

    ledger = _ledger(db)
    web_cfg = ledger.config.get("web", {})
    uvicorn.run(
        create_app(ledger),
        host=host or web_cfg.get("host", "127.0.0.1"),
        port=port or web_cfg.get("port", 8000),
    )


if __name__ == "__main__":
    app()
