"""
main.py - Algorithm Visualizer Flask App
========================================
JSON API over the visualizer pages.  Drawing happens client-side; the
server produces snapshots and owns playback state.

Routes:
  GET  /                         – service index
  GET  /api/algorithms           – every registry card
  GET  /api/algorithms/<key>     – one card (params, pseudocode, complexity)
  POST /api/page                 – bootstrap a page {algo_key, params}
  POST /api/run                  – re-run with new params {params}
  POST /api/randomize            – random inputs, then run {seed}
  POST /api/step/next            – advance one step
  POST /api/step/prev            – rewind one step
  POST /api/step/goto            – jump to step {index} or {fraction}
  POST /api/step/reset           – back to step 0
  POST /api/step/end             – jump to the final step
  POST /api/play | /api/pause | /api/toggle
  POST /api/speed                – {multiplier} or {preset}
  POST /api/tick                 – run one playback frame, then the page view
  GET  /api/state                – the page view (read-only)
  GET  /api/export               – the loaded run, replayable

State management:
  Pages live in an in-memory PageStore (app.extensions["pages"]); the
  Flask session only holds the caller's page id.  Playback advances when
  the client posts /api/tick, which runs one Stepper.tick(); GET /api/state
  never changes the page.

Configuration (defaults < ALGOVIZ_* environment < create_app(config)):
  SECRET_KEY, LOG_LEVEL, MAX_PAGES, DEFAULT_ALGORITHM, PAUSE_ON_MANUAL_STEP
"""

import logging
import secrets

from flask import Flask, current_app, jsonify, request, session

from algorithms import CATEGORIES, get_algorithm, list_algorithms
from engine import PageStore, VisualizerPage

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

DEFAULT_CONFIG = {
    "LOG_LEVEL":            "INFO",
    "MAX_PAGES":            256,
    "DEFAULT_ALGORITHM":    "tower_of_hanoi",
    "PAUSE_ON_MANUAL_STEP": True,
}


# ---------------------------------------------------------------------------
# Application factory
# ---------------------------------------------------------------------------
def create_app(config=None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(DEFAULT_CONFIG, SECRET_KEY=secrets.token_hex(32))
    app.config.from_prefixed_env("ALGOVIZ")
    if config:
        app.config.from_mapping(config)

    logging.getLogger().setLevel(str(app.config["LOG_LEVEL"]).upper())
    app.extensions["pages"] = PageStore(app.config["MAX_PAGES"])

    register_routes(app)
    logger.debug("App created with %d algorithms", len(list_algorithms()))
    return app


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _pages() -> PageStore:
    return current_app.extensions["pages"]


def _payload() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _current_page():
    return _pages().get(session.get("page_id"))


def _no_page():
    return jsonify({"error": "No page: POST /api/page first"}), 400


def _unknown(key):
    return jsonify({"error": f"Unknown algorithm: {key}"}), 404


def _page_action(action):
    """Apply `action(page)` to the caller's page and return its view."""
    page = _current_page()
    if page is None:
        return _no_page()
    action(page)
    return jsonify(page.view())


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
def register_routes(app: Flask) -> None:

    @app.route("/")
    def index():
        return jsonify({
            "name":       "Algorithm Visualizer",
            "algorithms": [a.key for a in list_algorithms()],
            "categories": CATEGORIES,
            "default":    current_app.config["DEFAULT_ALGORITHM"],
        })

    # -- catalogue --------------------------------------------------------
    @app.route("/api/algorithms")
    def api_algorithms():
        return jsonify({"algorithms": [a.to_dict() for a in list_algorithms()]})

    @app.route("/api/algorithms/<key>")
    def api_algorithm(key):
        info = get_algorithm(key)
        if info is None:
            return _unknown(key)
        return jsonify(info.to_dict())

    # -- page lifecycle ---------------------------------------------------
    @app.route("/api/page", methods=["POST"])
    def api_page():
        data = _payload()
        key = data.get("algo_key") or current_app.config["DEFAULT_ALGORITHM"]
        info = get_algorithm(key)
        if info is None:
            return _unknown(key)

        raw = data.get("params") if isinstance(data.get("params"), dict) else {}
        params = {name: value for name, value in raw.items() if info.param(name)}
        page = VisualizerPage.bootstrap(
            key,
            pause_on_manual_step=bool(current_app.config["PAUSE_ON_MANUAL_STEP"]),
            **params,
        )
        session["page_id"] = _pages().add(page, session.get("page_id"))
        view = page.view()
        view["page_id"] = session["page_id"]
        return jsonify(view)

    @app.route("/api/run", methods=["POST"])
    def api_run():
        params = _payload().get("params")
        params = params if isinstance(params, dict) else {}

        def rerun(page):
            info = page.producer.info
            page.run(**{name: value for name, value in params.items() if info.param(name)})
        return _page_action(rerun)

    @app.route("/api/randomize", methods=["POST"])
    def api_randomize():
        seed = _payload().get("seed")
        return _page_action(lambda page: page.randomize(seed if isinstance(seed, int) else None))

    # -- navigation -------------------------------------------------------
    @app.route("/api/step/next", methods=["POST"])
    def api_step_next():
        return _page_action(lambda page: page.stepper.step_forward())

    @app.route("/api/step/prev", methods=["POST"])
    def api_step_prev():
        return _page_action(lambda page: page.stepper.step_backward())

    @app.route("/api/step/goto", methods=["POST"])
    def api_step_goto():
        data = _payload()

        def seek(page):
            if "fraction" in data:
                page.stepper.scrub(data["fraction"])
            else:
                page.stepper.go_to_step(data.get("index", 0))
        return _page_action(seek)

    @app.route("/api/step/reset", methods=["POST"])
    def api_step_reset():
        return _page_action(lambda page: page.stepper.reset())

    @app.route("/api/step/end", methods=["POST"])
    def api_step_end():
        return _page_action(lambda page: page.stepper.jump_to_end())

    # -- play state & speed -----------------------------------------------
    @app.route("/api/play", methods=["POST"])
    def api_play():
        return _page_action(lambda page: page.stepper.play())

    @app.route("/api/pause", methods=["POST"])
    def api_pause():
        return _page_action(lambda page: page.stepper.pause())

    @app.route("/api/toggle", methods=["POST"])
    def api_toggle():
        return _page_action(lambda page: page.stepper.toggle())

    @app.route("/api/speed", methods=["POST"])
    def api_speed():
        data = _payload()

        def set_speed(page):
            if "preset" in data:
                page.stepper.set_speed_preset(str(data["preset"]))
            else:
                page.stepper.set_speed(data.get("multiplier", 1.0))
        return _page_action(set_speed)

    # -- polling & export -------------------------------------------------
    @app.route("/api/tick", methods=["POST"])
    def api_tick():
        return _page_action(lambda page: page.stepper.tick())

    @app.route("/api/state")
    def api_state():
        page = _current_page()
        if page is None:
            return _no_page()
        return jsonify(page.view())

    @app.route("/api/export")
    def api_export():
        page = _current_page()
        if page is None:
            return _no_page()
        return jsonify(page.export())


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format=LOG_FORMAT)
    print("=" * 60)
    print("  Algorithm Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000")
    print("=" * 60)
    app.run(debug=True, host="0.0.0.0", port=5000)
