"""Flask REST API exposing the expense store."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, Optional

from flask import Flask, jsonify, request
from flask_cors import CORS

from common.config import Settings
from common.display import CHART_CAPTION, amount_tone, build_segments, format_currency
from common.exceptions import PersistenceError, RecordNotFoundError, ValidationError
from common.logging_setup import configure_logging
from common.models import ExpenseItem, ViewMode
from common.services import ExpenseStore
from common.storage import JSONStorage, KeyValueStorage
from common.validators import (
    CATEGORY_MAX_LENGTH,
    NAME_MAX_LENGTH,
    parse_amount,
    parse_positions,
    validate_str,
)


def create_app(
    data_dir: Optional[Path] = None,
    *,
    storage: Optional[KeyValueStorage] = None,
    settings: Optional[Settings] = None,
) -> Flask:
    app = Flask(__name__)
    settings = (settings or Settings.from_env()).with_data_dir(data_dir)
    configure_logging(settings.log_level)

    if settings.is_dev:
        CORS(app, resources={r"/*": {"origins": "*"}}, supports_credentials=True)
    elif settings.allowed_origins:
        CORS(app, resources={r"/*": {"origins": settings.allowed_origins}}, supports_credentials=True)
    else:
        CORS(app)

    if storage is None:
        storage = JSONStorage(settings.data_dir)
    store = ExpenseStore(storage, key=settings.storage_key)
    app.extensions["expense_store"] = store

    def _serialize(item: ExpenseItem) -> Dict[str, Any]:
        payload = item.to_dict()
        payload["category"] = item.category
        payload["display_amount"] = format_currency(item.amount, settings.currency)
        payload["tone"] = amount_tone(item.amount)
        return payload

    def _success(payload: Any, status: int = 200):
        if status == 204:
            return ("", status)
        return jsonify(payload), status

    def _handle_error(exc: Exception, status: int, message: str):
        app.logger.error("%s: %s", message, exc)
        return jsonify({"error": message, "details": str(exc)}), status

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return _handle_error(exc, 400, "Validation error")

    @app.errorhandler(RecordNotFoundError)
    def handle_not_found(exc: RecordNotFoundError):
        return _handle_error(exc, 404, "Record not found")

    @app.errorhandler(PersistenceError)
    def handle_persistence_error(exc: PersistenceError):
        return _handle_error(exc, 500, "Persistence error")

    def _json_body() -> Dict[str, Any]:
        if not request.is_json:
            raise ValidationError("Request content must be application/json")
        data = request.get_json(silent=True)
        if not isinstance(data, dict):
            raise ValidationError("Malformed JSON body")
        return data

    @app.get("/expenses")
    def list_expenses():
        mode = ViewMode.parse(request.args.get("mode"))
        items = [_serialize(item) for item in store.view(mode)]
        return _success({"items": items, "scope": store.scope_label(mode)})

    @app.post("/expenses")
    def create_expense():
        payload = _json_body()
        category = payload.get("category", payload.get("type"))
        item = ExpenseItem.create(
            name=validate_str(payload.get("name"), "name", NAME_MAX_LENGTH),
            category=validate_str(category, "category", CATEGORY_MAX_LENGTH),
            amount=parse_amount(payload.get("amount"), "amount"),
        )
        store.add(item)
        return _success(_serialize(item), 201)

    @app.get("/expenses/<expense_id>")
    def get_expense(expense_id: str):
        return _success(_serialize(store.get(expense_id)))

    @app.delete("/expenses/<expense_id>")
    def delete_expense(expense_id: str):
        store.remove_ids([expense_id])
        return _success({}, 204)

    @app.post("/expenses/remove")
    def remove_positions():
        payload = _json_body()
        mode = ViewMode.parse(payload.get("mode"))
        positions = parse_positions(payload.get("positions"), "positions")
        removed = store.remove(positions, mode)
        return _success({"removed": [_serialize(item) for item in removed]})

    @app.get("/chart")
    def chart():
        mode = ViewMode.parse(request.args.get("mode"))
        segments = build_segments(store.chart_items(mode), mode)
        return _success({
            "title": store.scope_label(mode),
            "caption": CHART_CAPTION,
            "segments": [segment.to_dict() for segment in segments],
        })

    return app
