from datetime import datetime, timezone
from functools import lru_cache
from html import escape
from pathlib import Path
from string import Template
from urllib.parse import quote
from typing import List, Optional

import config
from analyzer import DELETE, INSERT, DiffOp
from timestamps import format_timestamp


@lru_cache(maxsize=None)
def template(name) -> Template:
    return Template((Path(config.TEMPLATE_DIR) / f"{name}.html").read_text(encoding="utf-8"))


def render(name, title, **values):
    """Fill templates/<name>.html and wrap it in the layout."""
    body = template(name).substitute(values)
    return template("layout").substitute(title=escape(title), body=body)


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _hours_since(t, now):
    return (now - t).total_seconds() / 3600


def ago(t: Optional[datetime], now: datetime = None, danger=None) -> str:
    if t is None:
        return "No backup"
    danger = config.DANGER_HOURS if danger is None else danger
    hours = _hours_since(t, now or _utcnow())
    if hours > danger:
        return f"{int(hours) // 24} days ago"
    return f"{int(hours)} hours ago"


def ago_status(t: Optional[datetime], now: datetime = None, warning=None, danger=None) -> str:
    if t is None:
        return "default"
    warning = config.WARNING_HOURS if warning is None else warning
    danger = config.DANGER_HOURS if danger is None else danger
    hours = _hours_since(t, now or _utcnow())
    if hours > danger:
        return "danger"
    if hours > warning:
        return "warning"
    return "success"


def render_dashboard(entries):
    rows = []
    for e in entries:
        last = format_timestamp(e["last_backup"]) if e["last_backup"] else ""
        rows.append(
            f'<tr><td><a href="/hosts/{quote(e["hostname"], safe="")}">{escape(e["hostname"])}</a></td>'
            f"<td>{escape(last)}</td>"
            f'<td class="status-{e["status"]}">{escape(e["ago"])}</td></tr>'
        )
    return render("dashboard", "Dashboard", rows="\n".join(rows))


def render_hosts(names: List[str]):
    items = "\n".join(f'<li><a href="/hosts/{quote(n, safe="")}">{escape(n)}</a></li>' for n in names)
    return render("hosts", "Hosts", items=items)


def render_dates(host: str, stamps: List[datetime]):
    if not stamps:
        return render("error", host, message="No backup")
    items = []
    for t in stamps:
        s = format_timestamp(t)
        items.append(f'<li><a href="/hosts/{quote(host, safe="")}/dates/{s}">{escape(str(t))}</a></li>')
    return render("dates", host, items="\n".join(items))


def render_entry(snap, requested: Optional[datetime] = None):
    note = ""
    if requested is not None and requested != snap.timestamp:
        note = f"<p>Nearest backup at or before {escape(str(requested))}</p>\n"
    return render("entry", f"{snap.host} @ {snap.timestamp}", note=note, content=escape(snap.content))


def diff_html(ops: List[DiffOp]) -> str:
    out = []
    for o in ops:
        text = escape(o.text).replace("\n", "&para;<br>")
        if o.op == INSERT:
            out.append(f'<ins style="background:#e6ffe6;">{text}</ins>')
        elif o.op == DELETE:
            out.append(f'<del style="background:#ffe6e6;">{text}</del>')
        else:
            out.append(f"<span>{text}</span>")
    return "".join(out)


def render_diff(host, t1, t2, ops):
    return render("diff", f"{host}: {t1} .. {t2}", diff=diff_html(ops))


def render_api_doc():
    return render("api", "API")


def render_error(status_code, message):
    return render("error", f"Error {status_code}", message=escape(message))
