from __future__ import annotations

from flask import Blueprint

from app.jsonfmt.auth import require_user
from app.jsonfmt.db import db_session
from app.jsonfmt.errors import bad_request
from app.jsonfmt.modules.transform_recipes.service import (
    create_recipe,
    get_owned_recipe,
    list_recipes,
    serialize_recipe,
    update_recipe,
    validate_recipe_payload,
)
from app.jsonfmt.utils import read_json_object, success

bp = Blueprint("transform_recipes", __name__)


@bp.post("/recipes")
def recipes_create():
    u = require_user()
    payload = read_json_object()
    errors = validate_recipe_payload(payload)
    if errors:
        raise bad_request(errors)

    s = db_session()
    recipe = create_recipe(s, payload, u)
    s.commit()
    return success(recipe=serialize_recipe(recipe))


@bp.patch("/recipes/<recipe_id>")
def recipes_update(recipe_id: str):
    u = require_user()
    payload = read_json_object()
    errors = validate_recipe_payload(payload, partial=True)
    if errors:
        raise bad_request(errors)

    s = db_session()
    recipe = get_owned_recipe(s, recipe_id, u.id)
    recipe = update_recipe(s, recipe, payload, u)
    s.commit()
    return success(recipe=serialize_recipe(recipe))


@bp.get("/recipes")
def recipes_list():
    u = require_user()
    recipes = list_recipes(db_session(), u)
    return success(items=[serialize_recipe(r) for r in recipes], total=len(recipes))
