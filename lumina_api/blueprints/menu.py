from flask import Blueprint, jsonify
from sqlalchemy import func, select
from ..auth import admin_required
from ..errors import ConflictError, NotFoundError
from ..extensions import db
from ..http import load_body
from ..models import MenuItem
from ..schemas import MenuItemRequest

bp = Blueprint("menu", __name__)


def _check_unique_name(name: str, exclude_id: int | None = None):
    q = select(MenuItem.id).where(func.lower(MenuItem.name) == name.lower())
    if exclude_id is not None:
        q = q.where(MenuItem.id != exclude_id)
    if db.session.execute(q).first() is not None:
        raise ConflictError("A menu item with this name already exists.", code="DUPLICATE_NAME")


def _get_item(item_id: int) -> MenuItem:
    item = db.session.get(MenuItem, item_id)
    if item is None:
        raise NotFoundError("Menu item not found.")
    return item


@bp.get("/menu")
def get_menu():
    items = db.session.execute(
        select(MenuItem).where(MenuItem.is_active.is_(True)).order_by(MenuItem.category, MenuItem.name)
    ).scalars()
    return jsonify([i.to_dict() for i in items])


@bp.get("/admin/menu")
@admin_required
def get_all_menu():
    items = db.session.execute(select(MenuItem).order_by(MenuItem.category, MenuItem.name)).scalars()
    return jsonify([i.to_dict() for i in items])


@bp.post("/admin/menu")
@admin_required
def add_menu_item():
    data = load_body(MenuItemRequest)
    _check_unique_name(data.name)
    item = MenuItem(**data.model_dump())
    db.session.add(item)
    db.session.commit()
    return jsonify(id=item.id, message="Menu item added"), 201


@bp.patch("/admin/menu/<int:item_id>")
@admin_required
def update_menu_item(item_id: int):
    item = _get_item(item_id)
    data = load_body(MenuItemRequest)
    _check_unique_name(data.name, exclude_id=item_id)
    for key, value in data.model_dump().items():
        setattr(item, key, value)
    db.session.commit()
    return jsonify(message="Menu item updated")


@bp.delete("/admin/menu/<int:item_id>")
@admin_required
def delete_menu_item(item_id: int):
    db.session.delete(_get_item(item_id))
    db.session.commit()
    return jsonify(message="Menu item deleted")
