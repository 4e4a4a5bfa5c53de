"""Sequence the resolvers, the remote calls and the confirmation gate.

``EntryWorkflow.run`` resolves inputs before any network call, fetches the
user, workspace and projects, builds one ``TimeEntryRequest``, shows it,
asks for confirmation (unless skip mode is on) and submits it.
``SetupWorkflow.run`` picks a workspace and project and saves their ids.
"""
import json
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from .clockify import ClockifyClient, Project, TimeEntry, TimeEntryRequest, User, Workspace
from .config import Settings, write_config
from .errors import EmptyResultError, ResolutionError, RetryableSelectionError, TransportError
from .selection import (RULE, Selection, ensure_candidates, render_table, select_by_id,
                        select_presupplied, validate_choice)
from .ticket import git_branch, resolve_ticket
from .timewindow import LOCAL_DISPLAY, UTC_DISPLAY, TimeWindow, format_duration, resolve_window

DONE = "done"
CANCELLED = "cancelled"


def vprint(verbose: bool, *args, **kwargs):
    """Print arguments only when verbose is True."""
    if verbose:
        print(*args, **kwargs)


@dataclass(frozen=True)
class Outcome:
    status: str
    entry: Optional[TimeEntry] = None


def ask(prompt: Callable[[str], str], text: str, what: str) -> str:
    try:
        return prompt(text)
    except EOFError as e:
        raise ResolutionError(f"failed to read {what}: end of input", field=what) from e


def remote(step: str, call: Callable, *args):
    """Run one client call, naming the failed step in the error."""
    try:
        return call(*args)
    except TransportError as e:
        raise TransportError(f"failed to {step}: {e}", status_code=e.status_code, body=e.body) from e


def choose(candidates: Sequence, kind: str, title: str, presupplied: Optional[int] = None,
           interactive: bool = True, prompt: Callable[[str], str] = input,
           out: Callable[..., None] = print, field: str = "project") -> Selection:
    """Resolve one selection by index or by asking until the answer is valid."""
    ensure_candidates(candidates, kind)
    if presupplied is not None:
        return select_presupplied(candidates, presupplied, kind, field=field)
    if not interactive:
        raise ResolutionError(f"a {field} index is required when prompts are skipped", field=field)
    for line in render_table(candidates, title):
        out(line)
    while True:
        raw = ask(prompt, f"\nSelect a {field} (1-{len(candidates)}): ", field)
        try:
            return validate_choice(raw, candidates)
        except RetryableSelectionError as e:
            out(str(e))


class EntryWorkflow:
    def __init__(self, settings: Settings, client: ClockifyClient,
                 prompt: Callable[[str], str] = input, out: Callable[..., None] = print,
                 branch_reader: Callable[[], str] = git_branch, now=None, local_tz=None):
        self.settings = settings
        self.client = client
        self.prompt = prompt
        self.out = out
        self.branch_reader = branch_reader
        self.now = now
        self.local_tz = local_tz

    def resolve_inputs(self):
        s = self.settings
        window = resolve_window(s.start_time, s.end_time, s.date, now=self.now, local_tz=self.local_tz)
        vprint(s.verbose, f"Window (UTC): {window.start_utc.isoformat()} -> {window.end_utc.isoformat()}")
        if s.message:
            return window, s.message, None
        ticket = resolve_ticket(s.ticket_prefix, s.skip, branch_reader=self.branch_reader,
                                prompt=self.prompt, out=self.out)
        return window, ticket, ticket

    def fetch_workspace(self, user: User) -> str:
        if self.settings.workspace_id:
            vprint(self.settings.verbose, f"Using configured workspace: {self.settings.workspace_id}")
            return self.settings.workspace_id
        if user.default_workspace:
            return user.default_workspace
        self.out("No default workspace found, fetching workspaces...")
        workspaces: List[Workspace] = remote("get workspaces", self.client.get_workspaces)
        if not workspaces:
            raise EmptyResultError("no workspaces found for this user")
        self.out(f"Using workspace: {workspaces[0].name}")
        return workspaces[0].id

    def select_project(self, projects: List[Project]) -> Project:
        s = self.settings
        if not projects:
            raise EmptyResultError("no projects found for this user")
        if s.project is None and s.project_id:
            saved = select_by_id(projects, s.project_id)
            if saved is not None:
                self.out(f"\nUsing configured project: {saved.item.name}")
                return saved.item
            self.out(f"Configured project {s.project_id} not found in workspace")
        sel = choose(projects, "projects", "Projects", presupplied=s.project,
                     interactive=not s.skip, prompt=self.prompt, out=self.out)
        self.out(f"\n✓ Selected project: {sel.item.name}")
        return sel.item

    def render_summary(self, user: User, project: Project, window: TimeWindow,
                       request: TimeEntryRequest, ticket: Optional[str] = None) -> List[str]:
        d = window.duration
        lines = [
            "\n" + RULE,
            "Time Entry Details",
            RULE,
            f"Workspace ID:  {request.workspace_id}",
            f"Project Name:  {project.name}",
            f"User:          {user.name} ({user.email})",
        ]
        if ticket:
            lines.append(f"Ticket:        {ticket}")
        lines += [
            f"Description:   {request.description}",
            f"Start Time:    {window.start.strftime(LOCAL_DISPLAY)} (Local) / "
            f"{window.start_utc.strftime(UTC_DISPLAY)}",
            f"End Time:      {window.end.strftime(LOCAL_DISPLAY)} (Local) / "
            f"{window.end_utc.strftime(UTC_DISPLAY)}",
            f"Duration:      {format_duration(d)} ({window.hours:.2f} hours)",
            f"Billable:      {str(request.billable).lower()}",
            RULE,
            "\nAPI Request Payload:",
            json.dumps(request.to_payload(), indent=2),
            f"\nAPI Endpoint: POST {self.client.endpoint(request.workspace_id)}",
            RULE,
        ]
        return lines

    def confirm(self) -> bool:
        answer = ask(self.prompt, "\nDo you want to submit this time entry? (yes/no): ", "confirmation")
        return answer.strip().lower() in ("yes", "y")

    def run(self) -> Outcome:
        window, description, ticket = self.resolve_inputs()

        self.out("Fetching user information...")
        user = remote("get user info", self.client.get_user)
        workspace_id = self.fetch_workspace(user)
        projects = remote("get projects", self.client.get_projects, workspace_id)
        project = self.select_project(projects)

        request = TimeEntryRequest(
            start=window.start_utc,
            end=window.end_utc,
            description=description,
            project_id=project.id,
            workspace_id=workspace_id,
        )

        if not self.settings.skip:
            for line in self.render_summary(user, project, window, request, ticket):
                self.out(line)
            if not self.confirm():
                self.out("Time entry cancelled.")
                return Outcome(CANCELLED)

        self.out("\nSubmitting time entry...")
        entry = remote("create time entry", self.client.create_time_entry, workspace_id, request)
        self.out("\n✓ Time entry created successfully!")
        self.out(f"  Entry ID: {entry.id}")
        return Outcome(DONE, entry)


class SetupWorkflow:
    def __init__(self, client: ClockifyClient, config_path: str,
                 prompt: Callable[[str], str] = input, out: Callable[..., None] = print):
        self.client = client
        self.config_path = config_path
        self.prompt = prompt
        self.out = out

    def run(self):
        self.out("Fetching available workspaces...")
        workspaces = remote("get workspaces", self.client.get_workspaces)
        if not workspaces:
            raise EmptyResultError("no workspaces found for this user")
        ws = choose(workspaces, "workspaces", "Workspaces", prompt=self.prompt,
                    out=self.out, field="workspace").item
        self.out(f"\n✓ Selected workspace: {ws.name}")

        self.out("\nFetching available projects...")
        projects = remote("get projects", self.client.get_projects, ws.id)
        if not projects:
            raise EmptyResultError(f"no projects found in workspace '{ws.name}'")
        project = choose(projects, "projects", "Projects", prompt=self.prompt, out=self.out).item
        self.out(f"\n✓ Selected project: {project.name}")

        write_config(self.config_path, {"workspace_id": ws.id, "project_id": project.id})

        self.out("\n" + RULE)
        self.out("Configuration saved successfully!")
        self.out(RULE)
        self.out(f"Workspace:     {ws.name} ({ws.id})")
        self.out(f"Project:       {project.name} ({project.id})")
        self.out(f"Config file:   {self.config_path}")
        self.out(RULE)
        return ws, project
