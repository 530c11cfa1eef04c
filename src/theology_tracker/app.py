"""Interactive CLI application."""
import logging
from dataclasses import dataclass
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt, Confirm

from theology_tracker.db import DEFAULT_DB_PATH
from theology_tracker.models import Category, ProgressState, ResourceType, TASK_FLAGS, WeekRecord
from theology_tracker.curriculum import (
    DAILY_SCHEDULE, DAILY_STUDY_HOURS, FIRST_WEEK, LAST_WEEK, PHASES, PHASE_TITLES, WEEKEND_NOTES,
    get_week, load_catalog, load_weeks, phase_range, weekly_study_hours,
)
from theology_tracker.store import (
    ProgressStore, SqliteBackend, load_or_init, reset_progress, toggle_task,
)
from theology_tracker.progress import (
    NOMINAL_WEEK_DAYS, completed_days, get_progress_color, overall_counts,
    overall_progress, phase_progress, task_score, week_progress, week_tasks,
    weeks_remaining,
)
from theology_tracker.resources import ALL_TYPES, filter_resources
from theology_tracker.catalog import count_materials, filter_catalog, icon_glyph
from theology_tracker.export import DEFAULT_EXPORT_NAME, export_catalog

console = Console()
logger = logging.getLogger(__name__)

LOG_FILE_NAME = "tracker.log"

FLAG_LABELS = {
    "study": "Estudo",
    "practice": "Prática",
    "test": "Teste",
    "review": "Revisão",
    "devotional": "Devocional",
}


@dataclass
class Session:
    store: ProgressStore
    weeks: list[WeekRecord]
    catalog: list[Category]
    state: ProgressState
    current_week: int = FIRST_WEEK
    catalog_query: str = ""
    resource_query: str = ""
    resource_type: str = ALL_TYPES
    goal: str = ""
    feedback: str = ""

    @property
    def week(self) -> WeekRecord | None:
        return get_week(self.weeks, self.current_week)


def setup_logging(log_path: Path) -> None:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        handlers=[logging.FileHandler(log_path, encoding="utf-8")],
    )


def resolve_flag(name: str) -> str:
    """Accept either the internal flag name or its Portuguese label."""
    key = name.strip().lower()
    if key in TASK_FLAGS:
        return key
    for flag, label in FLAG_LABELS.items():
        if label.lower() == key:
            return flag
    raise ValueError(f"Unknown activity {name!r}. Use one of: {', '.join(TASK_FLAGS)}")


def progress_bar(pct: float, width: int = 20) -> str:
    filled = int(round(pct) * width / 100)
    color = get_progress_color(pct)
    return f"[{color}]{'█' * filled}{'░' * (width - filled)}[/{color}]"


def show_welcome():
    console.print(Panel(
        "[bold]Sistema de Domínio em Teologia Cristã[/bold]\n[dim]32 semanas · 2 horas por dia[/dim]",
        title="Bem-vindo", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("week [n]", "Go to a week (or pick from the list)"),
        ("next / prev", "Move one week forward or back"),
        ("checklist", "Daily tasks of the current week"),
        ("task <id>", "Activity descriptions for one day"),
        ("toggle", "Tick or untick an activity: toggle <task-id> <activity>"),
        ("progress", "Progress by phase and by week"),
        ("schedule", "Suggested daily schedule"),
        ("resources", "Additional resources for the week"),
        ("goal", "Weekly goal"),
        ("feedback", "Personal feedback notes"),
        ("materials", "Search the study materials"),
        ("export", "Export the materials list as PDF"),
        ("reset", "Clear all progress"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def show_week_header(session: Session):
    week = session.week
    if week is None:
        console.print(f"[red]Semana {session.current_week} não existe.[/red]")
        return
    tasks = week_tasks(session.state, session.weeks, week.week)
    overall = overall_progress(session.state)
    checked, total = overall_counts(session.state)
    current = week_progress(session.state, session.weeks, week.week)
    console.print(Panel(
        f"[bold]Semana {week.week}[/bold] — {week.sub_area} [dim]({week.macro_area}, Fase {week.phase})[/dim]\n"
        f"[bold]Objetivo:[/bold] {week.objective}\n\n"
        f"Progresso Geral  {progress_bar(overall)} [bold]{round(overall)}%[/bold] "
        f"[dim]({checked} de {total} tarefas)[/dim]\n"
        f"Semana {week.week:<7} {progress_bar(current)} [bold]{round(current)}%[/bold]\n"
        f"Dias Completos   [bold]{completed_days(tasks)}/{NOMINAL_WEEK_DAYS}[/bold]",
        title="Navegação de Semanas", border_style="blue",
    ))


def cmd_week(session: Session, args: list[str]):
    if args:
        number = int(args[0])
    else:
        for week in session.weeks:
            console.print(f"  [cyan]{week.week:>2}[/cyan]) Semana {week.week} - {week.sub_area} (Fase {week.phase})")
        number = int(Prompt.ask("Semana", choices=[str(w.week) for w in session.weeks],
                                default=str(session.current_week)))
    if get_week(session.weeks, number) is None:
        console.print(f"[red]Semana {number} não existe.[/red]")
        return
    session.current_week = number
    show_week_header(session)


def cmd_next(session: Session):
    if session.current_week < LAST_WEEK:
        session.current_week += 1
    show_week_header(session)


def cmd_prev(session: Session):
    if session.current_week > FIRST_WEEK:
        session.current_week -= 1
    show_week_header(session)


def cmd_checklist(session: Session):
    week = session.week
    tasks = week_tasks(session.state, session.weeks, session.current_week)
    table = Table(title=f"Checklist Semanal - Semana {session.current_week}: {week.sub_area if week else ''}")
    table.add_column("ID", style="cyan")
    table.add_column("Dia")
    table.add_column("Conteúdo")
    for flag in TASK_FLAGS:
        table.add_column(FLAG_LABELS[flag], justify="center")
    table.add_column("Total", justify="right")
    for task in tasks:
        score = task_score(task)
        table.add_row(
            task.id,
            task.day,
            task.content,
            *("[green]✓[/green]" if getattr(task, flag) else "[dim]☐[/dim]" for flag in TASK_FLAGS),
            f"[{get_progress_color(score * 20)}]{score}/5[/{get_progress_color(score * 20)}]",
        )
    console.print(table)


def cmd_task(session: Session, args: list[str]):
    """Show the activity descriptions of one day."""
    task_id = args[0] if args else Prompt.ask("Task ID")
    for task in week_tasks(session.state, session.weeks, session.current_week):
        if task.id == task_id:
            lines = [f"[bold]{task.day}[/bold] — {task.content}\n"]
            for flag in TASK_FLAGS:
                mark = "[green]✓[/green]" if getattr(task, flag) else "☐"
                lines.append(f"{mark} [bold]{FLAG_LABELS[flag]}[/bold]: {getattr(task, f'{flag}_desc')}")
            console.print(Panel("\n".join(lines), title=task.id, border_style="cyan"))
            return
    console.print(f"[red]Tarefa {task_id} não encontrada na semana {session.current_week}.[/red]")


def cmd_toggle(session: Session, args: list[str]):
    task_id = args[0] if args else Prompt.ask("Task ID")
    flag = resolve_flag(args[1] if len(args) > 1 else Prompt.ask("Atividade", choices=list(TASK_FLAGS)))
    tasks = session.state.get(session.current_week, [])
    current = next((t for t in tasks if t.id == task_id), None)
    if current is None:
        console.print(f"[red]Tarefa {task_id} não encontrada na semana {session.current_week}.[/red]")
        return
    task = toggle_task(session.store, session.state, session.current_week, task_id, flag,
                       not getattr(current, flag))
    state_label = "[green]concluído[/green]" if getattr(task, flag) else "[yellow]pendente[/yellow]"
    console.print(f"{task.day} · {FLAG_LABELS[flag]}: {state_label} ({task_score(task)}/5)")


def cmd_progress(session: Session):
    table = Table(title="Progresso por Fase")
    table.add_column("Fase")
    table.add_column("Semanas")
    table.add_column("Progresso")
    table.add_column("%", justify="right")
    for phase in PHASES:
        pct = phase_progress(session.state, session.weeks, phase)
        span = phase_range(session.weeks, phase)
        table.add_row(
            f"Fase {phase} · {PHASE_TITLES.get(phase, '')}",
            f"{span[0]}-{span[1]}" if span else "-",
            progress_bar(pct),
            f"{round(pct)}%",
        )
    console.print(table)

    grid = Table(title="Progresso por Semana", show_header=False)
    per_row = 8
    for _ in range(per_row):
        grid.add_column(justify="center")
    cells = []
    for week in session.weeks:
        pct = week_progress(session.state, session.weeks, week.week)
        style = "bold reverse blue" if week.week == session.current_week else get_progress_color(pct)
        cells.append(f"[{style}]S{week.week}\n{round(pct)}%[/{style}]")
    for i in range(0, len(cells), per_row):
        row = cells[i:i + per_row]
        grid.add_row(*row, *[""] * (per_row - len(row)))
    console.print(grid)


def cmd_schedule(session: Session):
    table = Table(title="Cronograma Diário Sugerido (2 Horas)")
    table.add_column("Módulo", style="cyan")
    table.add_column("Foco")
    table.add_column("Tempo Sugerido", justify="right")
    for module, focus, minutes in DAILY_SCHEDULE:
        table.add_row(module, focus, f"{minutes} min")
    console.print(table)
    console.print(f"[bold]Total Diário:[/bold] {DAILY_STUDY_HOURS} horas ({weekly_study_hours()} horas semanais)")
    for day, note in WEEKEND_NOTES:
        console.print(f"  [bold]{day}:[/bold] {note}")


def cmd_resources(session: Session):
    week = session.week
    if week is None or not week.resources:
        console.print("[yellow]Nenhum Recurso Adicional Encontrado[/yellow]")
        console.print("[dim]Os recursos para esta semana serão adicionados em breve.[/dim]")
        return
    session.resource_query = Prompt.ask("Buscar por título", default=session.resource_query)
    session.resource_type = Prompt.ask(
        "Tipo", choices=[ALL_TYPES] + [t.value for t in ResourceType], default=session.resource_type,
    )
    found = filter_resources(week.resources, session.resource_query, session.resource_type)
    if not found:
        console.print("[yellow]Nenhum Recurso Encontrado[/yellow]")
        console.print("[dim]Ajuste os termos de busca ou o filtro de tipo.[/dim]")
        if Confirm.ask("Limpar filtros?", default=True):
            session.resource_query = ""
            session.resource_type = ALL_TYPES
            found = week.resources
        else:
            return
    table = Table(title=f"Recursos Adicionais para a Semana {week.week}")
    table.add_column("Tipo", style="cyan")
    table.add_column("Título")
    table.add_column("Link", style="dim")
    for resource in found:
        table.add_row(resource.type.value, resource.title, resource.url)
    console.print(table)


def cmd_goal(session: Session):
    week = session.week
    tasks = week_tasks(session.state, session.weeks, session.current_week)
    pct = week_progress(session.state, session.weeks, session.current_week)
    console.print(Panel(
        session.goal or f"[dim]Ex: {week.objective if week else 'Completar todos os estudos da semana'}[/dim]",
        title=f"Meta para a Semana {session.current_week}",
    ))
    console.print(f"  Dias Completos: [bold]{completed_days(tasks)}[/bold]  |  "
                  f"Progresso: [bold]{round(pct)}%[/bold]  |  "
                  f"Semana Atual: [bold]{session.current_week}[/bold]  |  "
                  f"Restantes: [bold]{weeks_remaining(session.current_week)}[/bold]")
    action = Prompt.ask("Meta", choices=["manter", "substituir", "limpar"], default="manter")
    if action == "manter":
        return
    session.goal = Prompt.ask("Nova meta") if action == "substituir" else ""
    session.store.save_weekly_goal(session.goal)
    console.print("[green]Meta salva.[/green]" if session.goal else "[green]Meta apagada.[/green]")


def cmd_feedback(session: Session):
    console.print(Panel(session.feedback or "[dim]Nenhum registro ainda.[/dim]", title="Feedback Pessoal"))
    console.print("[dim]O que foi mais desafiador hoje? Qual foi o insight mais importante?[/dim]")
    action = Prompt.ask("Feedback", choices=["adicionar", "substituir", "limpar", "sair"], default="adicionar")
    if action == "sair":
        return
    if action == "limpar":
        session.feedback = ""
    else:
        entry = Prompt.ask("Texto", default="")
        if not entry:
            return
        if action == "adicionar" and session.feedback:
            session.feedback = f"{session.feedback}\n{entry}"
        else:
            session.feedback = entry
    session.store.save_feedback(session.feedback)
    console.print("[green]Feedback salvo.[/green]")


def render_catalog(categories: list[Category]):
    for category in categories:
        table = Table(title=f"{icon_glyph(category.icon)}  {category.name}", caption=category.description,
                      show_lines=False)
        table.add_column("Subcategoria", style="cyan")
        table.add_column("Tópico", style="bold")
        table.add_column("Material (Título, Autor, Fonte)")
        for sub in category.subcategories:
            for i, material in enumerate(sub.materials):
                label = f"{sub.name} ({len(sub.materials)})" if i == 0 else ""
                table.add_row(label, material.name, material.details)
        console.print(table)


def cmd_materials(session: Session):
    session.catalog_query = Prompt.ask("Buscar por livro, autor ou tema", default=session.catalog_query)
    found = filter_catalog(session.catalog, session.catalog_query)
    if not found:
        console.print(f'[yellow]Nenhum material encontrado para "{session.catalog_query}".[/yellow]')
        if Confirm.ask("Limpar busca?", default=True):
            session.catalog_query = ""
            found = session.catalog
        else:
            return
    render_catalog(found)
    console.print(f"[dim]{count_materials(found)} materiais[/dim]")


def cmd_export(session: Session):
    found = filter_catalog(session.catalog, session.catalog_query)
    if not found:
        console.print("[yellow]Nada para exportar: a busca atual não encontrou materiais.[/yellow]")
        return
    target = Prompt.ask("Salvar como", default=DEFAULT_EXPORT_NAME)
    path = export_catalog(found, target)
    console.print(f"[green]PDF salvo em {path} ({count_materials(found)} materiais)[/green]")


def cmd_reset(session: Session):
    if not Confirm.ask("Apagar todo o progresso, metas e feedback?", default=False):
        return
    session.state = reset_progress(session.store, session.weeks)
    session.goal = ""
    session.feedback = ""
    console.print("[green]Progresso reiniciado.[/green]")


def open_session(db_path: str) -> Session:
    store = ProgressStore(SqliteBackend(db_path))
    weeks = load_weeks()
    return Session(
        store=store,
        weeks=weeks,
        catalog=load_catalog(),
        state=load_or_init(store, weeks),
        goal=store.load_weekly_goal(),
        feedback=store.load_feedback(),
    )


def dispatch(session: Session, line: str) -> bool:
    """Run one command line. Returns False when the user asked to quit."""
    parts = line.split()
    if not parts:
        return True
    cmd, args = parts[0].lower(), parts[1:]
    if cmd == "week":
        cmd_week(session, args)
    elif cmd == "next":
        cmd_next(session)
    elif cmd == "prev":
        cmd_prev(session)
    elif cmd == "checklist":
        cmd_checklist(session)
    elif cmd == "task":
        cmd_task(session, args)
    elif cmd == "toggle":
        cmd_toggle(session, args)
    elif cmd == "progress":
        cmd_progress(session)
    elif cmd == "schedule":
        cmd_schedule(session)
    elif cmd == "resources":
        cmd_resources(session)
    elif cmd == "goal":
        cmd_goal(session)
    elif cmd == "feedback":
        cmd_feedback(session)
    elif cmd == "materials":
        cmd_materials(session)
    elif cmd == "export":
        cmd_export(session)
    elif cmd == "reset":
        cmd_reset(session)
    elif cmd in ("quit", "exit", "q"):
        console.print("[dim]Bons estudos![/dim]")
        return False
    else:
        console.print("[red]Unknown command. Try again.[/red]")
    return True


def main(db_path: str = DEFAULT_DB_PATH):
    setup_logging(Path(db_path).parent / LOG_FILE_NAME)
    session = open_session(db_path)
    show_welcome()
    show_week_header(session)

    while True:
        show_menu()
        line = Prompt.ask("\n[bold]>[/bold]", default="checklist").strip()
        try:
            if not dispatch(session, line):
                break
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %r failed", line)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
