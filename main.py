import logging
import os
import time

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.staticfiles import StaticFiles

import config
import views
from analyzer import summarize
from archive import Archive
from db import SqlStore
from errors import ArchiveError, HostNotFound
from filestore import FileStore
from timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)


def build_store(backend=None):
    backend = backend or config.BACKEND
    if backend == "file":
        return FileStore(config.DATA_DIR)
    if backend == "sql":
        store = SqlStore(config.DATABASE_URL)
        store.init_db()
        return store
    raise ValueError(f"unknown CONFIGSTORE_BACKEND: {backend!r}")


def wants_json(request: Request) -> bool:
    return "application/json" in request.headers.get("accept", "")


def get_archive(request: Request) -> Archive:
    return request.app.state.archive


def respond(request, data, html):
    if wants_json(request):
        return JSONResponse(data)
    return HTMLResponse(html)


async def archive_error(request: Request, exc: ArchiveError):
    if exc.status_code >= 500:
        logger.error("Error: %s", exc, exc_info=exc)
    else:
        logger.warning("%s %s: %s", request.method, request.url.path, exc)
    if wants_json(request):
        return JSONResponse({"error": str(exc)}, status_code=exc.status_code)
    return HTMLResponse(views.render_error(exc.status_code, str(exc)), status_code=exc.status_code)


def create_app(archive: Archive, static_dir=None) -> FastAPI:
    app = FastAPI(title="Config snapshot browser")
    app.state.archive = archive
    app.add_exception_handler(ArchiveError, archive_error)

    static_dir = static_dir or config.STATIC_DIR
    if os.path.isdir(static_dir):
        app.mount("/static", StaticFiles(directory=static_dir), name="static")

    @app.get("/")
    def index():
        return RedirectResponse("/dashboard", status_code=302)

    @app.get("/api")
    def api_doc():
        return HTMLResponse(views.render_api_doc())

    @app.get("/dashboard")
    def dashboard(request: Request, archive: Archive = Depends(get_archive)):
        entries = []
        for name in archive.list_hosts():
            try:
                last = archive.latest_timestamp(name)
            except HostNotFound:
                # removed between listing and lookup
                continue
            entries.append({
                "hostname": name,
                "last_backup": last,
                "ago": views.ago(last),
                "status": views.ago_status(last),
            })
        data = []
        for e in entries:
            item = {"hostname": e["hostname"]}
            if e["last_backup"] is not None:
                item["last_backup"] = format_timestamp(e["last_backup"])
            data.append(item)
        return respond(request, data, views.render_dashboard(entries))

    @app.get("/hosts")
    def list_hosts(request: Request, archive: Archive = Depends(get_archive)):
        names = archive.list_hosts()
        return respond(request, {"hostnames": names}, views.render_hosts(names))

    @app.get("/hosts/{hostname}")
    def list_dates(hostname: str, request: Request, archive: Archive = Depends(get_archive)):
        stamps = archive.list_timestamps(hostname)
        data = {"hostname": hostname, "dates": [format_timestamp(t) for t in stamps]}
        return respond(request, data, views.render_dates(hostname, stamps))

    @app.get("/hosts/{hostname}/dates/{date}")
    def host_backup(hostname: str, date: str, request: Request, archive: Archive = Depends(get_archive)):
        snap = archive.get_exact(hostname, parse_timestamp(date))
        data = {"hostname": snap.host, "date": format_timestamp(snap.timestamp), "content": snap.content}
        return respond(request, data, views.render_entry(snap))

    @app.get("/hosts/{hostname}/on/{date}")
    def show_backup_date(hostname: str, date: str, request: Request, archive: Archive = Depends(get_archive)):
        requested = parse_timestamp(date)
        deadline = time.monotonic() + config.REQUEST_TIMEOUT
        snap = archive.get_nearest(hostname, requested, deadline=deadline)
        data = {
            "hostname": snap.host,
            "requested": date,
            "date": format_timestamp(snap.timestamp),
            "content": snap.content,
        }
        return respond(request, data, views.render_entry(snap, requested=requested))

    @app.get("/hosts/{hostname}/diff/{date1}/{date2}")
    def diff_backup(hostname: str, date1: str, date2: str, request: Request,
                    archive: Archive = Depends(get_archive)):
        t1, t2 = parse_timestamp(date1), parse_timestamp(date2)
        ops = archive.diff(hostname, t1, t2)
        data = {
            "hostname": hostname,
            "date1": date1,
            "date2": date2,
            "summary": summarize(ops),
            "diff": [o._asdict() for o in ops],
        }
        return respond(request, data, views.render_diff(hostname, t1, t2, ops))

    return app


app = create_app(Archive(build_store()))


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=getattr(logging, config.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    uvicorn.run(app, host=config.HOST, port=config.PORT)
