from __future__ import annotations

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi import Body, FastAPI, Form, HTTPException
from fastapi.responses import HTMLResponse, RedirectResponse

from workouts import (
    HISTORY_MODES,
    WEEKDAYS,
    NoteStore,
    OutOfRangeError,
    ValidationError,
    aggregate,
    get_user_timezone,
    history_summary,
    load_profile,
    load_user_name,
    normalize_day,
    save_profile,
    save_user_name,
    start_session,
    workspace_root,
)
from workouts.checklist import ChecklistController
from workouts.reset import Session

app = FastAPI(title="Workout Checklist", version="0.1.0")


# ── Helpers ───────────────────────────────────────────────────

def _escape(s: str) -> str:
    return (
        s.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


def _session() -> Session:
    # Every request starts a session so a day rollover is noticed mid-run.
    return start_session(workspace_root())


def _day(day: str) -> str:
    canonical = normalize_day(day)
    if canonical is None:
        raise HTTPException(status_code=404, detail=f"Unknown weekday: {day}")
    return canonical


def _checklist(day: str) -> ChecklistController:
    return _session().checklist(_day(day))


def _items_payload(controller: ChecklistController, items: list | None = None) -> dict[str, Any]:
    if items is None:
        items = controller.items()
    return {"day": controller.day, "items": [item.to_dict() for item in items]}


def _text(payload: dict[str, Any], key: str) -> str:
    """String field from a JSON body; a missing key or null reads as empty."""
    value = payload.get(key)
    return "" if value is None else str(value)


def _run(fn, *args) -> Any:
    """Call a checklist operation, mapping its errors onto HTTP statuses."""
    try:
        return fn(*args)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    except OutOfRangeError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e


# ── JSON API ──────────────────────────────────────────────────

@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"ok": "true"}


@app.get("/api/session")
def api_session() -> dict[str, Any]:
    """Today, its weekday, whether a reset just ran, and the user's name."""
    session = _session()
    return {
        "today": session.today.isoformat(),
        "day": session.day,
        "resetPerformed": session.reset_performed,
        "userName": load_user_name(session.store.kv),
        "days": WEEKDAYS,
    }


@app.get("/api/days/{day}/items")
def api_list_items(day: str) -> dict[str, Any]:
    return _items_payload(_checklist(day))


@app.post("/api/days/{day}/items")
def api_add_item(day: str, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    controller = _checklist(day)
    items = _run(controller.add, _text(payload, "name"))
    return _items_payload(controller, items)


@app.post("/api/days/{day}/items/{item_id}/toggle")
def api_toggle_item(day: str, item_id: str) -> dict[str, Any]:
    controller = _checklist(day)
    return _items_payload(controller, _run(controller.toggle, item_id))


@app.delete("/api/days/{day}/items/{item_id}")
def api_remove_item(day: str, item_id: str) -> dict[str, Any]:
    controller = _checklist(day)
    return _items_payload(controller, _run(controller.remove, item_id))


@app.delete("/api/days/{day}/items")
def api_clear_items(day: str) -> dict[str, Any]:
    controller = _checklist(day)
    return _items_payload(controller, controller.clear_all())


@app.get("/api/days/{day}/note")
def api_get_note(day: str) -> dict[str, Any]:
    day = _day(day)
    return {"day": day, "note": NoteStore.open(workspace_root()).get(day)}


@app.put("/api/days/{day}/note")
def api_set_note(day: str, payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    day = _day(day)
    text = NoteStore.open(workspace_root()).set(day, _text(payload, "note"))
    return {"day": day, "note": text}


@app.get("/api/history")
def api_history(mode: str | None = None) -> dict[str, Any]:
    """Aggregated completion buckets; all three groupings when *mode* is omitted."""
    root = workspace_root()
    records = _session().store.load()
    tz = get_user_timezone(root)
    if mode is None:
        return history_summary(records, tz)
    buckets = _run(aggregate, records, mode, tz)
    return {"mode": mode.strip().lower(), "buckets": [b.to_dict() for b in buckets]}


@app.get("/api/user")
def api_get_user() -> dict[str, Any]:
    return {"userName": load_user_name(_session().store.kv)}


@app.put("/api/user")
def api_set_user(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    kv = _session().store.kv
    name = _run(save_user_name, kv, _text(payload, "userName"))
    return {"ok": True, "userName": name}


@app.get("/api/profile")
def api_get_profile() -> dict[str, Any]:
    return load_profile(workspace_root()).to_dict()


@app.put("/api/profile")
def api_set_profile(payload: dict[str, Any] = Body(...)) -> dict[str, Any]:
    """Update timezone and/or default history mode in profile.yaml."""
    root = workspace_root()
    profile = load_profile(root)
    if "timezone" in payload:
        tz_name = str(payload["timezone"] or "").strip()
        try:
            if not tz_name:
                raise ValueError("empty")
            ZoneInfo(tz_name)
        except (ZoneInfoNotFoundError, ValueError, OSError) as e:
            raise HTTPException(status_code=400, detail=f"Unknown timezone: {tz_name}") from e
        profile.timezone = tz_name
    if "default_history_mode" in payload:
        mode = str(payload["default_history_mode"] or "").strip().lower()
        if mode not in HISTORY_MODES:
            raise HTTPException(status_code=400, detail=f"Unknown history mode: {mode}")
        profile.default_history_mode = mode
    save_profile(profile, root)
    return {"ok": True, **profile.to_dict()}


# ── HTML page ─────────────────────────────────────────────────

@app.get("/", response_class=HTMLResponse)
def index(day: str | None = None) -> HTMLResponse:
    root = workspace_root()
    session = _session()
    selected = normalize_day(day or "") or session.day
    controller = session.checklist(selected)
    items = controller.items()
    note = NoteStore.open(root).get(selected)
    user = load_user_name(session.store.kv)

    tabs = "".join(
        f'<a class="tab{" active" if d == selected else ""}" href="/?day={d}">{d[:3]}</a>'
        for d in WEEKDAYS
    )

    rows = []
    for item in items:
        mark = "&#9745;" if item.checked else "&#9744;"
        rows.append(
            f'<li class="{"done" if item.checked else ""}">'
            f'<form method="post" action="/days/{selected}/toggle/{item.id}" class="inline">'
            f'<button class="check">{mark}</button></form> {_escape(item.name)} '
            f'<form method="post" action="/days/{selected}/remove/{item.id}" class="inline">'
            f'<button class="delete">&times;</button></form></li>'
        )
    items_html = "".join(rows) if rows else '<li class="muted">(no workouts yet)</li>'

    mode = load_profile(root).default_history_mode
    buckets = aggregate(session.store.load(), mode, get_user_timezone(root))
    hist_rows = "".join(
        f"<tr><td>{_escape(b.display_label)}</td><td>{b.total_count}</td>"
        f"<td>{b.completed_count}</td><td>{b.completion_pct()}%</td></tr>"
        for b in buckets
    )
    mode_links = " ".join(f'<a href="/api/history?mode={m}">{m}</a>' for m in HISTORY_MODES)

    greeting = f"Train hard, {_escape(user)}!" if user else "Track your daily workouts"
    html = f"""<!doctype html>
<html>
<head>
<meta charset="utf-8">
<title>Workout Checklist</title>
<style>
body {{ font-family: system-ui, sans-serif; max-width: 720px; margin: 2rem auto; }}
.tab {{ padding: .3rem .6rem; text-decoration: none; }}
.tab.active {{ font-weight: bold; border-bottom: 2px solid #333; }}
.inline {{ display: inline; }}
li.done {{ text-decoration: line-through; color: #777; }}
.muted {{ color: #999; }}
table {{ border-collapse: collapse; }}
td, th {{ padding: .2rem .6rem; border-bottom: 1px solid #eee; }}
</style>
</head>
<body>
<h1>Workout Checklist</h1>
<p>{greeting} &middot; today is {session.day} {session.today.isoformat()}</p>
<nav>{tabs}</nav>
<form method="post" action="/days/{selected}/add">
  <input name="name" placeholder="Add a workout" required>
  <button>Add</button>
</form>
<ul>{items_html}</ul>
<form method="post" action="/days/{selected}/clear"
      onsubmit="return confirm('Delete all workouts for {selected}?')">
  <button>Clear all workouts</button>
</form>
<h3>Legend</h3>
<form method="post" action="/days/{selected}/note">
  <textarea name="note" rows="5" cols="60">{_escape(note)}</textarea><br>
  <button>Save</button>
</form>
<h3>History ({mode})</h3>
<table><tr><th></th><th>Total</th><th>Completed</th><th>Rate</th></tr>{hist_rows}</table>
<p class="muted">JSON: {mode_links}</p>
</body>
</html>"""
    return HTMLResponse(html)


def _back(day: str) -> RedirectResponse:
    return RedirectResponse(url=f"/?day={day}", status_code=303)


@app.post("/days/{day}/add")
def form_add(day: str, name: str = Form("")) -> RedirectResponse:
    controller = _checklist(day)
    _run(controller.add, name)
    return _back(controller.day)


@app.post("/days/{day}/toggle/{item_id}")
def form_toggle(day: str, item_id: str) -> RedirectResponse:
    controller = _checklist(day)
    _run(controller.toggle, item_id)
    return _back(controller.day)


@app.post("/days/{day}/remove/{item_id}")
def form_remove(day: str, item_id: str) -> RedirectResponse:
    controller = _checklist(day)
    _run(controller.remove, item_id)
    return _back(controller.day)


@app.post("/days/{day}/clear")
def form_clear(day: str) -> RedirectResponse:
    controller = _checklist(day)
    controller.clear_all()
    return _back(controller.day)


@app.post("/days/{day}/note")
def form_note(day: str, note: str = Form("")) -> RedirectResponse:
    day = _day(day)
    NoteStore.open(workspace_root()).set(day, note)
    return _back(day)
