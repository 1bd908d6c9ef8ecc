"""Rich terminal display manager."""
from __future__ import annotations

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from larp_ledger.mechanics.experience import ExperienceSummary
from larp_ledger.mechanics.skills import SkillPrice, SkillTier
from larp_ledger.models.character import Character
from larp_ledger.models.ledger import ExperienceEntry
from larp_ledger.models.reference import ReferenceData

console = Console()

_TIER_STYLES = {
    SkillTier.PRIMARY: "green",
    SkillTier.SECONDARY: "yellow",
    SkillTier.OTHER: "red",
}


class Display:
    def __init__(self, width: int = 80):
        self.console = console
        self.width = width

    def success(self, message: str) -> None:
        self.console.print(f"[green]{message}[/green]")

    def error(self, message: str) -> None:
        self.console.print(f"[bold red]Error:[/bold red] {message}")

    def show_problems(self, problems: list[str]) -> None:
        if not problems:
            self.success("Reference data is consistent.")
            return
        table = Table(title="Reference data problems", box=box.SIMPLE, show_header=False)
        for problem in problems:
            table.add_row("[red]•[/red]", problem)
        self.console.print(table)

    def show_quote(
        self,
        prices: list[SkillPrice],
        summary: ExperienceSummary,
        reference: ReferenceData,
    ) -> None:
        table = Table(title="Skill selection", box=box.ROUNDED, width=self.width)
        table.add_column("Skill")
        table.add_column("Tier")
        table.add_column("XP", justify="right")
        for price in prices:
            style = _TIER_STYLES[price.tier]
            table.add_row(
                reference.skill_name(price.skill_id),
                f"[{style}]{price.tier.value}[/{style}]",
                str(price.cost),
            )
        self.console.print(table)

        text = Text()
        text.append(f"Skills:     {summary.used_experience} XP\n")
        text.append(f"Attributes: {summary.attribute_cost} XP\n")
        text.append(f"Total:      {summary.total_spent} XP\n", style="bold")
        style = "bold red" if summary.over_budget else "bold green"
        text.append(f"Remaining:  {summary.remaining} XP", style=style)
        self.console.print(Panel(text, title="Experience", border_style="cyan", width=self.width))

    def show_sheet(
        self,
        character: Character,
        entries: list[ExperienceEntry],
        reference: ReferenceData,
    ) -> None:
        heritage = reference.heritage(character.heritage_id)
        culture = reference.culture(character.culture_id)
        archetype = reference.archetype(character.archetype_id)
        second = reference.archetype(character.second_archetype_id)

        header = Text()
        header.append(f"{character.name}\n", style="bold yellow")
        header.append(f"Player: {character.player_name}   Status: {character.status.value}\n")
        header.append(
            f"{heritage.name if heritage else character.heritage_id} / "
            f"{culture.name if culture else character.culture_id} / "
            f"{archetype.name if archetype else character.archetype_id}"
        )
        if second:
            header.append(f" + {second.name}")
        header.append(
            f"\nBody {character.body}   Stamina {character.stamina}   "
            f"XP {character.experience} (spent {character.total_xp_spent})"
        )
        self.console.print(Panel(header, border_style="cyan", box=box.DOUBLE, width=self.width))

        if character.skills:
            skills = ", ".join(reference.skill_name(s) for s in character.skills)
            self.console.print(Panel(skills, title="Skills", border_style="green", width=self.width))

        table = Table(title="Experience ledger", box=box.SIMPLE, width=self.width)
        table.add_column("When", style="dim")
        table.add_column("Reason")
        table.add_column("XP", justify="right")
        for entry in entries:
            amount = f"[green]+{entry.amount}[/green]" if entry.amount > 0 else f"[red]{entry.amount}[/red]"
            table.add_row((entry.created_at or "")[:10], entry.reason, amount)
        self.console.print(table)
