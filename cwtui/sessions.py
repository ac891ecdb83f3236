"""Claude Code session history from ~/.claude/projects/*/*.jsonl.

Each session is one JSONL file named by its UUID. Only user messages that are
neither meta records nor slash-command echoes count as prompts.
"""

from __future__ import annotations

import json
import os
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, TextIO

import structlog

from cwtui.errors import SessionDataError

logger = structlog.get_logger(__name__)

DEFAULT_LIST_LIMIT = 20
TITLE_MAX_LEN = 80
_EPOCH = datetime.fromtimestamp(0, tz=timezone.utc)


@dataclass
class Prompt:
    content: str
    timestamp: datetime


@dataclass
class Session:
    id: str  # filename UUID
    project: str  # decoded project path, replaced by the first user record's cwd
    slug: str = ""
    title: str = ""  # first user message, truncated
    start_time: datetime = _EPOCH


def projects_dir(home: Optional[Path] = None) -> Path:
    if home is None:
        try:
            home = Path.home()
        except RuntimeError as exc:
            raise SessionDataError(f"cannot determine home directory: {exc}") from exc
    return home / ".claude" / "projects"


def encode_project_path(path: str) -> str:
    return path.replace("/", "-")


def decode_project_path(encoded: str) -> str:
    """Reverse Claude's directory encoding ("-Users-me-app" -> "/Users/me/app")."""
    if encoded.startswith("-"):
        return "/" + encoded[1:].replace("-", "/")
    return encoded.replace("-", "/")


def first_line(text: str, max_len: int) -> str:
    line = text.split("\n", 1)[0].strip()
    if len(line) > max_len:
        return line[: max_len - 3] + "..."
    return line


def extract_content(raw: object) -> str:
    """Text of a message body: a plain string, or the text blocks of a block list.

    Slash-command echoes (`<command-name>`, `<local-command...>`) yield "".
    """
    if isinstance(raw, str):
        text = raw.strip()
        if text.startswith("<command-name>") or text.startswith("<local-command"):
            return ""
        return text
    if isinstance(raw, list):
        parts = [
            block["text"]
            for block in raw
            if isinstance(block, dict) and block.get("type") == "text" and block.get("text")
        ]
        return "\n".join(parts).strip()
    return ""


def parse_timestamp(value: object) -> datetime:
    if not isinstance(value, str) or not value:
        return _EPOCH
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return _EPOCH
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _records(path: Path) -> Iterator[dict]:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        for line in f:
            try:
                record = json.loads(line)
            except json.JSONDecodeError:
                continue
            if isinstance(record, dict):
                yield record


def _user_prompt(record: dict) -> Optional[Prompt]:
    if record.get("type") != "user" or record.get("isMeta"):
        return None
    message = record.get("message") or {}
    content = extract_content(message.get("content") if isinstance(message, dict) else None)
    if not content:
        return None
    return Prompt(content=content, timestamp=parse_timestamp(record.get("timestamp")))


def parse_session_meta(path: Path, session_id: str, project: str) -> Session:
    """Read just enough of a session file for the list: slug, cwd, first prompt."""
    session = Session(id=session_id, project=project)
    for record in _records(path):
        slug = record.get("slug")
        if slug and not session.slug:
            session.slug = slug
        cwd = record.get("cwd")
        if record.get("type") == "user" and cwd and session.project == project:
            session.project = cwd
        prompt = _user_prompt(record)
        if prompt is None:
            continue
        session.title = first_line(prompt.content, TITLE_MAX_LEN)
        session.start_time = prompt.timestamp
        break
    return session


def parse_session_prompts(path: Path) -> tuple[list[Prompt], str]:
    """All user prompts of a session plus its slug."""
    prompts: list[Prompt] = []
    slug = ""
    for record in _records(path):
        if record.get("slug") and not slug:
            slug = record["slug"]
        prompt = _user_prompt(record)
        if prompt is not None:
            prompts.append(prompt)
    return prompts, slug


def scan_project_sessions(directory: Path, project_name: str) -> list[Session]:
    sessions: list[Session] = []
    for path in sorted(directory.glob("*.jsonl")):
        if not path.is_file():
            continue
        try:
            session = parse_session_meta(path, path.stem, project_name)
        except OSError as exc:
            logger.debug("Skipping unreadable session %s: %s", path, exc)
            continue
        if session.title:
            sessions.append(session)
    return sessions


def list_sessions(base: Path, limit: int, project_dirs: Optional[list[Path]] = None) -> list[Session]:
    """Sessions across `project_dirs` (default: every project), newest first.

    Raises:
        SessionDataError: `base` does not exist.
    """
    if not base.is_dir():
        raise SessionDataError("no Claude Code session data found")
    if project_dirs is None:
        project_dirs = sorted(p for p in base.iterdir() if p.is_dir())

    sessions: list[Session] = []
    for directory in project_dirs:
        try:
            sessions.extend(scan_project_sessions(directory, decode_project_path(directory.name)))
        except OSError as exc:
            logger.debug("Skipping unreadable project %s: %s", directory, exc)
    sessions.sort(key=lambda s: s.start_time, reverse=True)
    if limit > 0:
        sessions = sessions[:limit]
    return sessions


def find_session_file(base: Path, id_prefix: str) -> Optional[tuple[Path, str]]:
    """First session file whose id starts with `id_prefix`, with its decoded project."""
    if not base.is_dir():
        return None
    for project in sorted(p for p in base.iterdir() if p.is_dir()):
        for path in sorted(project.glob("*.jsonl")):
            if path.stem.startswith(id_prefix):
                return path, decode_project_path(project.name)
    return None


def load_session_prompts(base: Path, session: Session) -> tuple[list[Prompt], str]:
    found = find_session_file(base, session.id)
    if found is None:
        raise SessionDataError("session file not found")
    return parse_session_prompts(found[0])


# --- CLI ---


def _local(ts: datetime, fmt: str) -> str:
    return ts.astimezone().strftime(fmt)


def print_list(sessions: list[Session], all_projects: bool, out: TextIO) -> None:
    out.write(f"\n  {'ID':<10}  {'DATE':<12}  TITLE\n")
    out.write(f"  {'-' * 10:<10}  {'-' * 12:<12}  {'-' * 50}\n")
    for s in sessions:
        title = s.title
        if all_projects and s.project:
            title = f"[{os.path.basename(s.project)}] {title}"
        if len(title) > 70:
            title = title[:67] + "..."
        out.write(f"  {s.id[:8]:<10}  {_local(s.start_time, '%Y-%m-%d'):<12}  {title}\n")
    out.write(f"\n  {len(sessions)} session(s) shown. Use 'sessions show <id>' to view prompts.\n\n")


def print_prompts(session_id: str, project: str, prompts: list[Prompt], slug: str, out: TextIO) -> None:
    title = f"{slug} ({session_id[:8]})" if slug else session_id
    out.write(f"\n  {title}\n")
    out.write(f"  Project: {project}\n")
    out.write(f"  Prompts: {len(prompts)}\n\n")
    for i, p in enumerate(prompts, start=1):
        out.write(f"  [{i}] {_local(p.timestamp, '%H:%M:%S')}\n")
        for line in p.content.split("\n"):
            out.write(f"  {line}\n")
        out.write("\n")


def run(args: list[str], out: TextIO = sys.stdout, home: Optional[Path] = None) -> int:
    """`cwtui sessions [list [--all] [--limit N] | show <id> | <id>]`."""
    base = projects_dir(home)
    if args and args[0] != "list":
        if args[0] == "show":
            if len(args) < 2:
                raise SessionDataError("usage: cwtui sessions show <session-id>")
            id_prefix = args[1]
        else:
            id_prefix = args[0]
        found = find_session_file(base, id_prefix)
        if found is None:
            raise SessionDataError(f"no session found matching ID prefix {id_prefix!r}")
        path, project = found
        prompts, slug = parse_session_prompts(path)
        print_prompts(path.stem, project, prompts, slug, out)
        return 0

    rest = args[1:]
    all_projects = "--all" in rest
    limit = DEFAULT_LIST_LIMIT
    if "--limit" in rest:
        idx = rest.index("--limit")
        if idx + 1 < len(rest) and rest[idx + 1].isdigit() and int(rest[idx + 1]) > 0:
            limit = int(rest[idx + 1])

    project_dirs = None
    if not all_projects:
        current = base / encode_project_path(os.getcwd())
        if not current.is_dir():
            raise SessionDataError(f"no sessions found for project {os.getcwd()}")
        project_dirs = [current]

    sessions = list_sessions(base, limit, project_dirs)
    if not sessions:
        out.write("No sessions found.\n")
        return 0
    print_list(sessions, all_projects, out)
    return 0
