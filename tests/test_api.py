# tests/test_api.py

from __future__ import annotations

from areaboard.api import ProjectBoard
from areaboard.schema import DEFAULT_AREAS, SubPointEdit, SubPointState, area_key
from areaboard.store import MemoryStore, SupabaseStore

from .fakes import FakeSupabase


def test_train_and_deploy_scenario(board: ProjectBoard) -> None:
    train = board.create_subpoint("ai", "Train model", created_by="Ximena").data
    deploy = board.create_subpoint(
        "ai", "Deploy", created_by="Ximena", depends_on=train.id
    ).data
    assert board.get_area("ai").data.progress == 0

    blocked = board.toggle_complete(deploy.id, actor="Andres")
    assert blocked.success is False
    assert blocked.error_kind == "dependency_unmet"

    assert board.toggle_complete(train.id, actor="Andres").success
    assert board.get_area("ai").data.progress == 50
    states = {row.subpoint.id: row.state for row in board.subpoint_statuses("ai").data}
    assert states[deploy.id] == SubPointState.INCOMPLETE

    assert board.toggle_complete(deploy.id, actor="Andres").success
    assert board.get_area("ai").data.progress == 100


def test_failures_are_tagged(board: ProjectBoard) -> None:
    sp = board.create_subpoint("ai", "Train model", created_by="Ximena").data

    assert board.create_subpoint("ai", "", created_by="Ximena").error_kind == "validation"
    assert board.edit_subpoint(sp.id, "Andres", {"title": "x"}).error_kind == "authorization"
    assert board.delete_subpoint(sp.id, "Andres").error_kind == "authorization"
    assert board.edit_subpoint(sp.id, "Ximena", {"dependsOn": sp.id}).error_kind == "cycle"
    assert board.get_area("nowhere").error_kind == "not_found"

    claimed = board.claim_responsibility(sp.id, "Andres")
    assert claimed.success and claimed.data.responsible_user == "Andres"
    again = board.claim_responsibility(sp.id, "Jessy")
    assert again.success is False
    assert again.error_kind == "already_claimed"
    assert board.list_subpoints("ai").data[0].responsible_user == "Andres"


def test_edit_accepts_model_or_mapping(board: ProjectBoard) -> None:
    sp = board.create_subpoint("ai", "Train model", created_by="Ximena").data
    assert board.edit_subpoint(sp.id, "Ximena", SubPointEdit(description="a")).data.description == "a"
    assert board.edit_subpoint(sp.id, "Ximena", {"description": "b"}).data.description == "b"


def test_cross_area_status_labels(board: ProjectBoard) -> None:
    schema = board.create_subpoint("base-datos", "Schema", created_by="Jessy").data
    api = board.create_subpoint("interfaz", "API", created_by="Alfonso", depends_on=schema.id).data

    rows = board.subpoint_statuses("interfaz").data
    assert [r.subpoint.id for r in rows] == [api.id]
    assert rows[0].state == SubPointState.BLOCKED
    assert rows[0].dependency_title == "Schema"
    assert rows[0].dependency_area == "Base de Datos"

    board.delete_subpoint(schema.id, "Jessy")
    rows = board.subpoint_statuses("interfaz").data
    assert rows[0].dangling is True
    assert rows[0].state == SubPointState.BLOCKED


def test_areas_initialized_on_first_access(clock) -> None:
    board = ProjectBoard(MemoryStore(), clock=clock)
    areas = board.list_areas().data
    assert [a.id for a in areas] == [a["id"] for a in DEFAULT_AREAS]
    assert all(a.progress == 0 for a in areas)


def test_initialize_is_idempotent_and_keeps_progress(board: ProjectBoard, store: MemoryStore) -> None:
    sp = board.create_subpoint("ai", "Train model", created_by="Ximena").data
    board.toggle_complete(sp.id, "Ximena")

    board.initialize()
    board.initialize()

    assert board.get_area("ai").data.progress == 100
    assert len(store.scan_by_prefix("project-area:")) == len(DEFAULT_AREAS)


def test_reads_legacy_records(store: MemoryStore, clock) -> None:
    store.set(area_key("ai"), {"id": "ai", "name": "AI", "description": "IA", "progress": 0})
    store.set("subpoint:ai:1", {
        "title": "Legacy",
        "completed": True,
        "createdBy": "Juanito",
        "timestamp": 1,
    })
    board = ProjectBoard(store, clock=clock)

    legacy = board.list_subpoints("ai").data[0]
    assert legacy.created_by == "Juanito"
    assert legacy.description == ""
    assert legacy.depends_on is None


def test_comments_newest_first_and_validated(board: ProjectBoard) -> None:
    first = board.add_comment("ai", "Ximena", "hola").data
    second = board.add_comment("ai", "Andres", "qué tal").data

    listed = board.list_comments("ai").data
    assert [c.id for c in listed] == [second.id, first.id]
    assert first.id.startswith("comment:ai:")

    assert board.add_comment("ai", "Ximena", "  ").error_kind == "validation"
    assert board.add_comment("marte", "Ximena", "hola").error_kind == "not_found"


def test_comments_do_not_touch_progress(board: ProjectBoard, store: MemoryStore) -> None:
    store.set(area_key("ai"), {**store.get(area_key("ai")), "progress": 33})
    board.add_comment("ai", "Ximena", "hola")
    assert board.get_area("ai").data.progress == 33


def test_dashboard_totals(board: ProjectBoard) -> None:
    a = board.create_subpoint("ai", "A", created_by="Ximena").data
    board.create_subpoint("impresion", "B", created_by="Ximena")
    board.toggle_complete(a.id, "Ximena")
    board.add_comment("ai", "Ximena", "uno")
    board.add_comment("impresion", "Jessy", "dos")

    stats = board.dashboard().data
    assert stats.total_subpoints == 2
    assert stats.completed_subpoints == 1
    assert stats.total_comments == 2
    assert {area.id: area.progress for area in stats.areas}["ai"] == 100


def test_store_failures_surface_as_results(clock) -> None:
    board = ProjectBoard(SupabaseStore(FakeSupabase(fail=True)), clock=clock)

    result = board.create_subpoint("ai", "Train model", created_by="Ximena")

    assert result.success is False
    assert result.error_kind == "store"


def test_malformed_record_surfaces_as_store_failure(board: ProjectBoard, store: MemoryStore) -> None:
    good = board.create_subpoint("ai", "Train model", created_by="Ximena").data
    store.set("subpoint:ai:5", {"title": "x"})

    listed = board.list_subpoints("ai")
    assert listed.success is False
    assert listed.error_kind == "store"
    assert "subpoint:ai:5" in listed.error

    toggled = board.toggle_complete(good.id, "Andres")
    assert toggled.success is False
    assert toggled.error_kind == "store"

    assert board.dashboard().error_kind == "store"


def test_edit_with_wrongly_typed_fields_is_a_validation_failure(board: ProjectBoard) -> None:
    sp = board.create_subpoint("ai", "Train model", created_by="Ximena").data

    result = board.edit_subpoint(sp.id, "Ximena", {"title": 123})

    assert result.success is False
    assert result.error_kind == "validation"
    assert board.list_subpoints("ai").data[0].title == "Train model"
