from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Mapping, Optional

from flask import Flask, jsonify, request

from morris import AIPlayer, Game, GameMode, IllegalMoveError

LOG = logging.getLogger(__name__)


class InvalidPayload(ValueError):
    pass


def _int_field(data: Mapping[str, Any], name: str) -> int:
    value = data.get(name)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidPayload(f"Missing or invalid '{name}'")
    return value


def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(AI_AUTOPLAY=True)
    app.config.from_prefixed_env("MORRIS")
    if config:
        app.config.update(config)

    game = Game()
    ai = AIPlayer()

    def ai_reply() -> Optional[dict]:
        # The computer answers inside the same request so the client only
        # has to render the returned snapshot.
        if not app.config["AI_AUTOPLAY"] or not game.ai_to_move():
            return None
        move = ai.choose_move(game.state)
        if move is None:
            LOG.info("AI (%s) has no legal move", game.state.current_player.value)
            return None
        game.apply(move)
        LOG.info("AI played %s", move.to_dict())
        return move.to_dict()

    def respond(ai_move: Optional[dict] = None):
        snap = game.snapshot()
        snap["ai_move"] = ai_move
        return jsonify(snap)

    @app.errorhandler(IllegalMoveError)
    @app.errorhandler(InvalidPayload)
    def handle_rejected(exc: ValueError):
        LOG.warning("Rejected %s: %s", request.path, exc)
        return jsonify({"error": str(exc)}), 400

    @app.get("/api/state")
    def api_state():
        return respond()

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        try:
            mode = GameMode(str(data.get("mode") or GameMode.TWO_PLAYER.value).lower())
        except ValueError:
            raise InvalidPayload(f"Unknown mode: {data.get('mode')}") from None
        ai_starts = data.get("ai_starts", False)
        if not isinstance(ai_starts, bool):
            raise InvalidPayload("'ai_starts' must be a boolean")
        game.reset(mode, ai_starts=ai_starts)

        # If the AI plays Red it opens immediately
        return respond(ai_reply())

    @app.post("/api/place")
    def api_place():
        data = request.get_json(silent=True) or {}
        game.place(_int_field(data, "node"))
        return respond(ai_reply())

    @app.post("/api/select")
    def api_select():
        data = request.get_json(silent=True) or {}
        game.select(_int_field(data, "node"))
        return respond()

    @app.post("/api/move")
    def api_move():
        data = request.get_json(silent=True) or {}
        game.move(_int_field(data, "from"), _int_field(data, "to"))
        return respond(ai_reply())

    @app.post("/api/undo")
    def api_undo():
        data = request.get_json(silent=True) or {}
        steps = data.get("steps", 1)
        if isinstance(steps, bool) or not isinstance(steps, int) or steps < 1:
            raise InvalidPayload("'steps' must be a positive integer")
        game.undo(steps)
        return respond(ai_reply())

    return app


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Serve a Three Men's Morris session over HTTP")
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=5000)
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))
    app = create_app()
    app.run(host=args.host, port=args.port)
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI invocation
    sys.exit(main())
