"""
Tests de los endpoints de pedidos.
"""

from httpx import AsyncClient
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError

from app.config import get_settings
from app.models.dental_order import DentalOrder
from conftest import make_tooth

settings = get_settings()

ORDERS = f"{settings.API_PREFIX}/orders"


async def _submit(client: AsyncClient, payload: dict) -> dict:
    response = await client.post(ORDERS, json=payload)
    assert response.status_code == 200, response.text
    return response.json()["order"]


# ── Crear ─────────────────────────────────────────────

async def test_create_order(client: AsyncClient, order_payload):
    order_payload["timestamp"] = "2026-03-14T09:30:05Z"
    response = await client.post(ORDERS, json=order_payload)
    assert response.status_code == 200

    body = response.json()
    assert body["success"] is True
    order = body["order"]
    assert order["orderNumber"].startswith("ORD-")
    assert order["patientName"] == "Maria Silva"
    assert order["patientId"] == "P-001"
    assert order["status"] == "pending"
    assert order["observations"] is None
    assert [t["number"] for t in order["selectedTeeth"]] == ["11", "21"]
    assert order["toothConfigurations"] == {}
    assert "timestamp" not in order


async def test_create_order_stores_configuration(client: AsyncClient, order_payload):
    tooth_id = order_payload["selectedTeeth"][0]["id"]
    order_payload["toothConfigurations"] = {
        tooth_id: {"material": "zirconia", "articulator": True, "articulatorMM": 1.5}
    }
    order = await _submit(client, order_payload)
    assert order["toothConfigurations"][tooth_id] == {
        "material": "zirconia",
        "isFixed": False,
        "mirrorTooth": False,
        "standardLibrary": False,
        "articulator": True,
        "articulatorMM": 1.5,
    }


async def test_create_order_without_patient_name(client: AsyncClient, order_payload):
    order_payload["patientName"] = "   "
    order_payload["selectedTeeth"] = []
    response = await client.post(ORDERS, json=order_payload)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Patient name is required"}

    listing = await client.get(ORDERS)
    assert listing.json()["total"] == 0


async def test_create_order_without_teeth(client: AsyncClient, order_payload):
    order_payload["selectedTeeth"] = []
    response = await client.post(ORDERS, json=order_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "At least one tooth must be selected"


async def test_create_order_with_invalid_configuration(client: AsyncClient, order_payload):
    tooth_id = order_payload["selectedTeeth"][0]["id"]
    order_payload["toothConfigurations"] = {tooth_id: {"material": "gold"}}
    response = await client.post(ORDERS, json=order_payload)
    assert response.status_code == 400
    assert response.json()["success"] is False


async def test_create_order_rejects_non_object_body(client: AsyncClient):
    response = await client.post(ORDERS, json=["Maria"])
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid order payload"


# ── Listar ────────────────────────────────────────────

async def test_list_orders_newest_first(client: AsyncClient, order_payload):
    first = await _submit(client, order_payload)
    order_payload["patientName"] = "João Souza"
    second = await _submit(client, order_payload)

    response = await client.get(ORDERS)
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert [o["id"] for o in body["orders"]] == [second["id"], first["id"]]
    assert body["total"] == 2
    assert body["filteredTotal"] == 2
    assert body["limit"] == settings.ORDERS_DEFAULT_LIMIT
    assert body["offset"] == 0


async def test_list_orders_filters_keep_unfiltered_total(client: AsyncClient, order_payload):
    maria = await _submit(client, order_payload)
    order_payload["patientName"] = "João Souza"
    order_payload["patientId"] = None
    await _submit(client, order_payload)

    await client.patch(f"{ORDERS}/{maria['id']}/status", json={"status": "completed"})

    response = await client.get(ORDERS, params={"status": "completed"})
    body = response.json()
    assert [o["id"] for o in body["orders"]] == [maria["id"]]
    assert body["total"] == 2
    assert body["filteredTotal"] == 1

    response = await client.get(ORDERS, params={"search": "souza"})
    assert [o["patientName"] for o in response.json()["orders"]] == ["João Souza"]

    response = await client.get(ORDERS, params={"search": maria["orderNumber"]})
    assert [o["id"] for o in response.json()["orders"]] == [maria["id"]]


async def test_list_orders_clamps_limit(client: AsyncClient, order_payload):
    for _ in range(3):
        await _submit(client, order_payload)

    body = (await client.get(ORDERS, params={"limit": 0})).json()
    assert body["limit"] == 1
    assert len(body["orders"]) == 1

    body = (await client.get(ORDERS, params={"limit": 10_000, "offset": -5})).json()
    assert body["limit"] == settings.ORDERS_MAX_LIMIT
    assert body["offset"] == 0
    assert len(body["orders"]) == 3

    body = (await client.get(ORDERS, params={"limit": 2, "offset": 2})).json()
    assert len(body["orders"]) == 1
    assert body["filteredTotal"] == 3


async def test_list_orders_unknown_status_filter(client: AsyncClient):
    response = await client.get(ORDERS, params={"status": "shipped"})
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid status"}


# ── Detalle ───────────────────────────────────────────

async def test_get_order(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    response = await client.get(f"{ORDERS}/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True, "order": created}


async def test_get_order_not_found(client: AsyncClient):
    response = await client.get(f"{ORDERS}/999")
    assert response.status_code == 404
    assert response.json() == {"success": False, "error": "Order not found"}


# ── Estado ────────────────────────────────────────────

async def test_update_status(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    url = f"{ORDERS}/{created['id']}/status"

    response = await client.patch(url, json={"status": "in_progress"})
    assert response.status_code == 200
    order = response.json()["order"]
    assert order["status"] == "in_progress"
    assert order["orderNumber"] == created["orderNumber"]
    assert order["createdAt"] == created["createdAt"]

    response = await client.patch(url, json={"status": "completed"})
    assert response.json()["order"]["status"] == "completed"


async def test_update_status_invalid_value(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    url = f"{ORDERS}/{created['id']}/status"

    for bad in ({"status": "shipped"}, {"status": None}, {"status": 3}, {}):
        response = await client.patch(url, json=bad)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid status"}

    current = (await client.get(f"{ORDERS}/{created['id']}")).json()["order"]
    assert current["status"] == "pending"


async def test_update_status_not_found(client: AsyncClient):
    response = await client.patch(f"{ORDERS}/999/status", json={"status": "completed"})
    assert response.status_code == 404
    assert response.json()["error"] == "Order not found"


async def test_update_status_outside_intended_flow_is_allowed(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    url = f"{ORDERS}/{created['id']}/status"
    await client.patch(url, json={"status": "cancelled"})

    response = await client.patch(url, json={"status": "pending"})
    assert response.status_code == 200
    assert response.json()["order"]["status"] == "pending"


# ── PDF ───────────────────────────────────────────────

async def test_export_order_pdf(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    response = await client.get(f"{ORDERS}/{created['id']}/pdf")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="ordem_servico_Maria_Silva_IDP-001_')
    assert response.content.startswith(b"%PDF")


async def test_export_pdf_not_found(client: AsyncClient):
    response = await client.get(f"{ORDERS}/999/pdf")
    assert response.status_code == 404


async def test_pdf_preview_does_not_persist(client: AsyncClient, order_payload):
    order_payload["selectedTeeth"].append(make_tooth("36"))
    order_payload["orderNumber"] = "ORD-1700000000000-ABCDEFGHI"
    response = await client.post(f"{ORDERS}/pdf-preview", json=order_payload)

    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")

    listing = await client.get(ORDERS)
    assert listing.json()["total"] == 0


async def test_pdf_preview_validates_payload(client: AsyncClient, order_payload):
    order_payload["patientName"] = ""
    response = await client.post(f"{ORDERS}/pdf-preview", json=order_payload)
    assert response.status_code == 400
    assert response.json()["error"] == "Patient name is required"


async def test_pdf_preview_rejects_malformed_order_number(client: AsyncClient, order_payload):
    order_payload["orderNumber"] = "pedido-42"
    response = await client.post(f"{ORDERS}/pdf-preview", json=order_payload)
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid order number"}


async def test_export_pdf_with_draft_configurations(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    tooth_id = created["selectedTeeth"][0]["id"]

    response = await client.post(
        f"{ORDERS}/{created['id']}/pdf",
        json={"toothConfigurations": {tooth_id: {"material": "pmma"}}},
    )
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert response.content.startswith(b"%PDF")

    stored = (await client.get(f"{ORDERS}/{created['id']}")).json()["order"]
    assert stored["toothConfigurations"] == {}
    assert stored["updatedAt"] == created["updatedAt"]


async def test_export_pdf_without_body_uses_stored_configuration(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    response = await client.post(f"{ORDERS}/{created['id']}/pdf")
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


async def test_export_pdf_rejects_draft_for_unknown_tooth(client: AsyncClient, order_payload):
    created = await _submit(client, order_payload)
    response = await client.post(
        f"{ORDERS}/{created['id']}/pdf",
        json={"toothConfigurations": {"tooth_36_1": {"material": "pmma"}}},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Configuration references unknown tooth: tooth_36_1"


async def test_export_pdf_with_drafts_not_found(client: AsyncClient):
    response = await client.post(f"{ORDERS}/999/pdf", json={"toothConfigurations": {}})
    assert response.status_code == 404


# ── Catálogo de dientes ───────────────────────────────

async def test_tooth_catalog(client: AsyncClient):
    response = await client.get(f"{ORDERS}/teeth")
    assert response.status_code == 200

    body = response.json()
    assert body["success"] is True
    groups = body["groups"]
    assert [g["group"] for g in groups] == [
        "Quadrante Superior Direito",
        "Quadrante Superior Esquerdo",
        "Quadrante Inferior Esquerdo",
        "Quadrante Inferior Direito",
    ]
    assert sum(len(g["teeth"]) for g in groups) == 32

    first = groups[0]["teeth"][0]
    assert first["number"] == "11"
    assert first["name"] == "11 - Incisivo Central"
    assert first["id"].startswith("tooth_11_")


async def test_catalog_teeth_are_accepted_by_create(client: AsyncClient, order_payload):
    groups = (await client.get(f"{ORDERS}/teeth")).json()["groups"]
    order_payload["selectedTeeth"] = [groups[0]["teeth"][5], groups[3]["teeth"][7]]

    order = await _submit(client, order_payload)
    assert [t["number"] for t in order["selectedTeeth"]] == ["16", "48"]


# ── Fallas de almacenamiento ──────────────────────────

async def test_create_order_storage_failure(client: AsyncClient, db_session, order_payload, monkeypatch):
    async def failing_commit():
        raise OperationalError("INSERT INTO dental_orders", {}, Exception("disk I/O error"))

    monkeypatch.setattr(db_session, "commit", failing_commit)
    response = await client.post(ORDERS, json=order_payload)

    assert response.status_code == 500
    assert response.json() == {"success": False, "error": "Failed to create dental order"}
    monkeypatch.undo()

    count = (await db_session.execute(select(func.count(DentalOrder.id)))).scalar_one()
    assert count == 0
