from flask import Blueprint, jsonify
from ..auth import admin_required
from ..engine import catalog
from ..http import load_body
from ..schemas import CreateTableRequest, UpdateTableRequest

bp = Blueprint("tables", __name__)


@bp.get("")
@admin_required
def list_tables():
    return jsonify([t.to_dict() for t in catalog.all_tables()])


@bp.post("")
@admin_required
def add_table():
    data = load_body(CreateTableRequest)
    table = catalog.add_table(data)
    return jsonify(id=table.id, message="Table added"), 201


@bp.patch("/<int:table_id>")
@admin_required
def update_table(table_id: int):
    data = load_body(UpdateTableRequest)
    table = catalog.update_table(table_id, data)
    return jsonify(message="Table updated successfully", table=table.to_dict())


@bp.delete("/<int:table_id>")
@admin_required
def delete_table(table_id: int):
    catalog.delete_table(table_id)
    return jsonify(message="Table deleted successfully")
