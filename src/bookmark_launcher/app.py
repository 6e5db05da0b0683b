# app.py - Flask front for the bookmark launcher
# Includes:
# - Start page: categories in order, tiles with resolved icon + gradient
# - Drag & drop inside a category (Sortable.js); the drop outcome is replayed
#   through DragReorderController on the server and persisted to the CSV store
# - JSON API for categories/bookmarks (create/edit/delete/duplicate)
#
# No auth: it is a personal launcher meant to run on localhost.

from __future__ import annotations

from flask import Flask, jsonify, render_template_string, request
from markupsafe import Markup

from .colors import gradient
from .config import Config, configure_logging
from .drag import DragReorderController
from .errors import NotFoundError, ValidationError
from .icons import GLYPH, IMAGE, SymbolLookup
from .models import Bookmark, Category
from .presentation import PresentationBinder
from .store import BookmarkStore

HEROICONS_CDN = "https://unpkg.com/heroicons@2.1.1/24/outline/{}.svg"


def _id_or_none(v):
    return None if v in (None, "") else str(v)


def _id_list(data, key):
    ids = data[key]
    if ids is None:
        return []
    if not isinstance(ids, list):
        raise ValidationError(f"{key} must be a list of ids")
    return [str(i) for i in ids]


def render_icon(icon) -> Markup:
    if icon.kind == IMAGE:
        return Markup('<img src="{}" alt="" loading="lazy" referrerpolicy="no-referrer">').format(icon.value)
    if icon.kind == GLYPH:
        return Markup('<span class="glyph">{}</span>').format(icon.value)
    return Markup('<img class="symbol" src="{}" alt="{}">').format(HEROICONS_CDN.format(icon.value), icon.value)


def create_app(config=Config, store=None):
    """Build the app; ``store`` overrides the CSV path from the config."""
    app = Flask(__name__)
    app.config.from_object(config)
    configure_logging(app.config.get("LOG_LEVEL", "INFO"))

    app.extensions["store"] = store or BookmarkStore(app.config["CSV_FILE"])
    app.extensions["binder"] = PresentationBinder(SymbolLookup(), shift=app.config.get("GRADIENT_SHIFT", 35))

    app.add_template_filter(render_icon, "icon")

    def get_store() -> BookmarkStore:
        return app.extensions["store"]

    def snapshot(categories):
        binder = app.extensions["binder"]
        out = []
        for c in categories:
            d = c.to_dict()
            for bd, b in zip(d["bookmarks"], c.bookmarks):
                bd["presentation"] = binder.bind(b, c).to_dict()
            out.append(d)
        return out

    def payload():
        data = request.get_json(force=True, silent=True)
        if not isinstance(data, dict):
            raise ValidationError("expected a JSON object")
        return data

    @app.errorhandler(ValidationError)
    def bad_request(e):
        return jsonify({"ok": False, "error": str(e)}), 400

    @app.errorhandler(NotFoundError)
    def not_found(e):
        return jsonify({"ok": False, "error": str(e)}), 404

    # ----------------------------
    # Page
    # ----------------------------
    @app.route("/", methods=["GET"])
    def index():
        categories = get_store().fetch_categories()
        binder = app.extensions["binder"]
        total_bookmarks = sum(len(c.bookmarks) for c in categories)
        return render_template_string(INDEX, categories=categories, present=binder.bind,
                                      total_bookmarks=total_bookmarks)

    # ----------------------------
    # API
    # ----------------------------
    @app.route("/api/bookmarks", methods=["GET"])
    def api_bookmarks():
        return jsonify(snapshot(get_store().fetch_categories()))

    @app.route("/api/bookmarks", methods=["POST"])
    def create_bookmark():
        b = get_store().create_bookmark(Bookmark.from_dict(payload()))
        return jsonify(b.to_dict()), 201

    @app.route("/api/bookmarks/<bid>", methods=["PUT"])
    def update_bookmark(bid):
        return jsonify(get_store().update_bookmark(bid, payload()).to_dict())

    @app.route("/api/bookmarks/<bid>", methods=["DELETE"])
    def delete_bookmark(bid):
        get_store().delete_bookmark(bid)
        return jsonify({"ok": True})

    @app.route("/api/bookmarks/<bid>/duplicate", methods=["POST"])
    def duplicate_bookmark(bid):
        return jsonify(get_store().duplicate_bookmark(bid).to_dict()), 201

    @app.route("/api/categories", methods=["POST"])
    def create_category():
        c = get_store().create_category(Category.from_dict(payload()))
        return jsonify(c.to_dict()), 201

    @app.route("/api/categories/<cid>", methods=["PUT"])
    def update_category(cid):
        return jsonify(get_store().update_category(cid, payload()).to_dict())

    @app.route("/api/categories/<cid>", methods=["DELETE"])
    def delete_category(cid):
        removed = get_store().delete_category(cid)
        return jsonify({"ok": True, "bookmarks_removed": removed})

    @app.route("/api/gradient", methods=["GET"])
    def api_gradient():
        hex_color = request.args.get("hex", "")
        shift = request.args.get("shift", type=float, default=app.config.get("GRADIENT_SHIFT", 35))
        pair = gradient(hex_color, shift)
        return jsonify({"start": pair.start, "end": pair.end})

    # ---- Drag & drop reorder ----
    @app.route("/reorder", methods=["POST"])
    def reorder():
        data = payload()
        store = get_store()

        if "categories" in data:
            cats = store.reorder_categories(_id_list(data, "categories"))
            return jsonify({"ok": True, "categories": snapshot(cats)})

        cid = _id_or_none(data.get("category_id"))
        if not cid:
            raise ValidationError("category_id required")

        if "ids" in data:
            category = store.reorder(cid, _id_list(data, "ids"))
            return jsonify({"ok": True, "moved": True, "category": snapshot([category])[0]})

        category = store.get_category(cid)
        ctl = DragReorderController.for_category(category, on_reorder=store.apply_intent)
        ctl.start(_id_or_none(data.get("active_id")))
        ctl.over(_id_or_none(data.get("over_id")))
        intent = ctl.drop()
        if intent is not None:
            category = store.get_category(cid)
        return jsonify({"ok": True, "moved": intent is not None, "category": snapshot([category])[0]})

    return app


# ----------------------------
# Templates
# ----------------------------
INDEX = r"""
<!doctype html>
<html>
<head>
  <meta charset="utf-8" />
  <title>Bookmarks</title>
  <style>
    :root{
      --gap: 0.7rem; --radius: 10px; --muted:#6b7280; --brand:#2b6cb0;
      --bg:#f5f7fb; --text:#0f172a; --card-bg:#ffffff; --header-bg:#253858; --border:#e5e7eb; --hover:#f3f4f6;
    }
    .dark{ --bg:#0b1220; --text:#e5e7eb; --card-bg:#0f172a; --header-bg:#0e223c; --border:#1f2937; --hover:#142036; --brand:#7aa2ff; --muted:#94a3b8; }
    *{ box-sizing: border-box; }
    body { font-family: system-ui, -apple-system, Segoe UI, Roboto, Helvetica, Arial, sans-serif; background:var(--bg); color:var(--text); margin:0; }
    header { background:var(--header-bg); color:#fff; padding:0.6rem 1rem; display:flex; justify-content:space-between; align-items:center; }
    .container { padding:0.8rem; max-width: min(1600px, 98vw); margin: 0 auto; }
    .category { margin-bottom: 1.2rem; }
    .category h2 { font-size:1rem; margin:.2rem 0 .6rem; border-left:4px solid var(--category-color); padding-left:.5rem; }
    .grid { display:grid; gap: var(--gap); grid-template-columns: repeat(auto-fill, minmax(110px, 1fr)); }
    .bookmark { display:flex; flex-direction:column; align-items:center; gap:.4rem; padding:.6rem .4rem; border-radius:var(--radius);
                background:var(--card-bg); border:1px solid var(--border); text-decoration:none; color:inherit; cursor:grab; }
    .bookmark:hover { background:var(--hover); }
    .bookmark-icon { width:44px; height:44px; border-radius:12px; display:flex; align-items:center; justify-content:center;
                     background: linear-gradient(135deg, var(--icon-color-start), var(--icon-color-end)); }
    .bookmark-icon img { width:24px; height:24px; }
    .bookmark-icon img.symbol { filter: invert(1); }
    .bookmark-icon .glyph { color:#fff; font-weight:700; font-size:1.2rem; }
    .title { font-size:.85rem; text-align:center; overflow:hidden; text-overflow:ellipsis; white-space:nowrap; max-width:100%; }
    .sortable-ghost { opacity:.35; }
    .pill { font-size:.75rem; padding:.05rem .45rem; border-radius:999px; background:rgba(255,255,255,.12); }
    .empty { color: var(--muted); }
    .btn { background:rgba(255,255,255,.12); color:#fff; border:0; padding:.3rem .55rem; border-radius:6px; cursor:pointer; }
  </style>
  <script src="https://cdn.jsdelivr.net/npm/sortablejs@1.15.2/Sortable.min.js"></script>
</head>
<body>
  <header>
    <strong>Bookmarks</strong>
    <div>
      <span class="pill" title="Total bookmarks">{{ total_bookmarks }}</span>
      <button id="themeToggle" class="btn" type="button">Dark</button>
    </div>
  </header>
  <div class="container">
    {% if not categories %}
      <p class="empty">No bookmarks yet. Add a category to get started.</p>
    {% endif %}
    {% for c in categories %}
    <section class="category" style="--category-color: {{ c.hex_color }}">
      <h2>{{ c.name }}</h2>
      <div class="grid" data-cid="{{ c.id }}">
        {% for b in c.bookmarks %}
          {% set p = present(b, c) %}
          <a class="bookmark" data-bid="{{ b.id }}" href="{{ b.url }}" target="_blank" rel="noopener noreferrer">
            <div class="bookmark-icon" style="--icon-color-start: {{ p.color_start }}; --icon-color-end: {{ p.color_end }}">{{ p.icon|icon }}</div>
            <span class="title">{{ b.title }}</span>
          </a>
        {% endfor %}
      </div>
    </section>
    {% endfor %}
  </div>
  <script>
  (function(){
    const btn = document.getElementById('themeToggle');
    if(localStorage.getItem('dark') === '1') document.documentElement.classList.add('dark');
    btn.addEventListener('click', ()=>{
      const on = document.documentElement.classList.toggle('dark');
      localStorage.setItem('dark', on ? '1' : '0');
    });
  })();

  // Drag & drop: send the drag outcome (dragged id + id it landed on)
  document.querySelectorAll(".grid[data-cid]").forEach((grid) => {
    let startIds = [];
    new Sortable(grid, {
      animation: 150, draggable: ".bookmark",
      onStart: () => { startIds = Array.from(grid.querySelectorAll(".bookmark")).map(el => el.dataset.bid); },
      onEnd: (evt) => {
        if(evt.oldIndex === evt.newIndex) return;
        fetch("{{ url_for('reorder') }}", {
          method: "POST",
          headers: {"Content-Type": "application/json"},
          body: JSON.stringify({category_id: grid.dataset.cid, active_id: evt.item.dataset.bid, over_id: startIds[evt.newIndex]})
        });
      }
    });
  });
  </script>
</body>
</html>
"""
