from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from app.jsonfmt.errors import ActionError
from app.jsonfmt.utils import check_string, iso, utcnow

if TYPE_CHECKING:
    from sqlalchemy.orm import Session
    from app.jsonfmt.models import User
    from app.jsonfmt.modules.transform_recipes.models import JsonTransformRecipe

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = {
    "name": "name",
    "description": "description",
    "configJson": "config_json",
}


def validate_recipe_payload(payload: dict, *, partial: bool = False) -> list[str]:
    """Validate recipe create/update payload. Returns list of errors."""
    errors: list[str] = []
    check_string(payload, "name", errors, required=not partial, non_empty=not partial)
    check_string(payload, "description", errors)
    check_string(payload, "configJson", errors, required=not partial, non_empty=not partial)
    if partial and not any(k in payload for k in UPDATABLE_FIELDS):
        errors.append("At least one field must be provided to update.")
    return errors


def serialize_recipe(recipe: "JsonTransformRecipe") -> dict[str, Any]:
    return {
        "id": recipe.id,
        "userId": recipe.user_id,
        "name": recipe.name,
        "description": recipe.description,
        "configJson": recipe.config_json,
        "createdAt": iso(recipe.created_at),
        "updatedAt": iso(recipe.updated_at),
    }


def get_owned_recipe(s: "Session", recipe_id: str, user_id: str) -> "JsonTransformRecipe":
    from app.jsonfmt.modules.transform_recipes.models import JsonTransformRecipe

    recipe = (
        s.query(JsonTransformRecipe)
        .filter(JsonTransformRecipe.id == recipe_id, JsonTransformRecipe.user_id == user_id)
        .one_or_none()
    )
    if not recipe:
        raise ActionError("NOT_FOUND", "Transform recipe not found.")
    return recipe


def create_recipe(s: "Session", payload: dict, user: "User") -> "JsonTransformRecipe":
    from app.jsonfmt.modules.transform_recipes.models import JsonTransformRecipe

    now = utcnow()
    recipe = JsonTransformRecipe(
        user_id=user.id,
        name=payload["name"],
        description=payload.get("description"),
        config_json=payload["configJson"],
        created_at=now,
        updated_at=now,
    )
    s.add(recipe)
    s.flush()
    logger.info("recipe.create id=%s user_id=%s", recipe.id, user.id)
    return recipe


def update_recipe(s: "Session", recipe: "JsonTransformRecipe", payload: dict, user: "User") -> "JsonTransformRecipe":
    """Apply supplied fields and refresh updated_at."""
    changed = []
    for field, attr in UPDATABLE_FIELDS.items():
        if field in payload:
            setattr(recipe, attr, payload[field])
            changed.append(field)
    # Wall clock can step back; updated_at must not.
    now = utcnow()
    recipe.updated_at = max(now, recipe.updated_at) if recipe.updated_at else now
    s.flush()
    logger.info("recipe.update id=%s user_id=%s fields=%s", recipe.id, user.id, ",".join(changed))
    return recipe


def list_recipes(s: "Session", user: "User") -> list["JsonTransformRecipe"]:
    from app.jsonfmt.modules.transform_recipes.models import JsonTransformRecipe

    return (
        s.query(JsonTransformRecipe)
        .filter(JsonTransformRecipe.user_id == user.id)
        .order_by(JsonTransformRecipe.created_at.desc(), JsonTransformRecipe.id.asc())
        .all()
    )
