from typing import Iterable, Optional

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.rule import Rule
from rich.table import Table
from rich.text import Text

from innosim.analysis import summarize_pages
from innosim.query import SimulationStep, StepType
from innosim.storage.engine import EngineState
from innosim.storage.event_log import LogKind
from innosim.storage.page import IndexType, LeafPage, Record

LOG_STYLES = {
    LogKind.INFO: ("ℹ", "bold cyan"),
    LogKind.SUCCESS: ("✓", "bold green"),
    LogKind.WARNING: ("⚠", "bold yellow"),
    LogKind.ERROR: ("✗", "bold red"),
}

STEP_STYLES = {
    StepType.START: "bold blue",
    StepType.SCAN_PAGE: "cyan",
    StepType.FOUND_INDEX_ENTRY: "bold yellow",
    StepType.JUMP_TO_PK: "bold magenta",
    StepType.FOUND_DATA: "bold green",
    StepType.FINISHED: "bold white",
}

CHAIN_TITLES = {
    IndexType.PRIMARY: "Clustered Index (PRIMARY, ordered by id)",
    IndexType.SECONDARY: "Secondary Index (name, ordered by value then id)",
}


class ConsoleRenderer:
    """Draws engine state, logs and query traces with Rich."""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def print_header(self, title: str, subtitle: str = "") -> None:
        if subtitle:
            full_title = f"[bold blue]{title}[/bold blue]\n[dim]{subtitle}[/dim]"
        else:
            full_title = f"[bold blue]{title}[/bold blue]"
        self.console.print(Panel(full_title, style="bright_blue",
                                 box=box.DOUBLE, padding=(1, 2)))

    def print_rule(self, title: str = "") -> None:
        self.console.print(Rule(title))

    def print_error(self, message: str) -> None:
        self._print_marked("✗", "bold red", message)

    def print_info(self, message: str) -> None:
        self._print_marked("ℹ", "bold cyan", message)

    def _print_marked(self, icon: str, style: str, message: str) -> None:
        line = Text(f"{icon} ", style=style)
        line.append(message)
        self.console.print(line)

    def chain_table(self, state: EngineState, index_type: IndexType,
                    step: Optional[SimulationStep] = None) -> Table:
        """One row per page, in chain order."""
        table = Table(title=CHAIN_TITLES[index_type], box=box.ROUNDED,
                      show_header=True, header_style="bold magenta")
        table.add_column("Page", justify="right", style="bold")
        table.add_column("Prev", justify="right", style="dim")
        table.add_column("Next", justify="right", style="dim")
        table.add_column("Records")
        table.add_column("Status", justify="center")

        capacity = state.config.page_capacity
        for page in state.chain(index_type):
            is_target = step is not None and step.target_page_id == page.page_id
            table.add_row(
                self._page_label(state, page, is_target),
                _link(page.prev_page_id),
                _link(page.next_page_id),
                self._records_text(state, page, step if is_target else None),
                f"{page.get_num_records()}/{capacity}"
                + (" FULL" if page.is_full() else ""),
            )
        return table

    def render_state(self, state: EngineState,
                     step: Optional[SimulationStep] = None) -> None:
        for index_type in IndexType:
            self.console.print(self.chain_table(state, index_type, step))

    def render_log(self, state: EngineState, limit: int = 10) -> None:
        """Most recent entries last, like a terminal scrollback."""
        entries = state.log.entries()[:limit]
        for entry in reversed(entries):
            icon, style = LOG_STYLES[entry.kind]
            self._print_marked(icon, style, entry.message)

    def render_step(self, step: SimulationStep) -> None:
        style = STEP_STYLES[step.step_type]
        line = Text(f"{step.step_id:>2} ", style="dim")
        line.append(f"{step.step_type.value:<17}", style=style)
        line.append(step.message)
        if step.target_page_id:
            line.append(f"  [page {step.target_page_id}]", style="dim")
        self.console.print(line)

    def render_steps(self, steps: Iterable[SimulationStep]) -> None:
        for step in steps:
            self.render_step(step)

    def render_summary(self, state: EngineState) -> None:
        self.console.print_json(data=summarize_pages(state))

    def _page_label(self, state: EngineState, page: LeafPage, is_target: bool) -> Text:
        style = ""
        if page.page_id in state.hints.splitting_pages:
            style = "bold yellow"
        elif page.page_id in state.hints.dirty_pages:
            style = "cyan"
        if is_target:
            style = "bold reverse magenta"
        return Text(str(page.page_id), style=style)

    def _records_text(self, state: EngineState, page: LeafPage,
                      step: Optional[SimulationStep]) -> Text:
        text = Text()
        for i, record in enumerate(page.records):
            if i:
                text.append("  ")
            style = ""
            if (page.page_id, record.id) in state.hints.new_records:
                style = "bold green"
            if step is not None and step.target_record_id == record.id:
                style = "bold reverse green"
            text.append(_record_label(page.index_type, record), style=style)
        if not page.records:
            text.append("(empty)", style="dim")
        return text


def _record_label(index_type: IndexType, record: Record) -> str:
    if index_type is IndexType.PRIMARY:
        return f"{record.id}:{record.value}"
    return f"{record.value}→{record.id}"


def _link(page_id: Optional[int]) -> str:
    return "—" if page_id is None else str(page_id)
