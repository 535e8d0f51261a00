import asyncio
import uuid

import pytest

from trasporti.services import ImportService


@pytest.fixture
def imported(client, import_settings, make_workbook):
    """Register a schema with Date and Number fields through a real import."""
    make_workbook(
        ["CLIENTE", "TARGA", "DATA", "PAGAMENTO", "REGIONE CARICO", "AUTISTA CARICO", "AUTISTA SCARICO"],
        [
            ["Acme", "AB123CD", "2024-01-15", 100, "Lombardia", "Mario", "Luigi"],
            ["Beta", "EF456GH", "2024-02-20", 200, "Veneto", "Luigi", "Anna"],
            ["Gamma", "IJ789KL", "2024-03-05", 300, "Lombardia", "Paolo", "Mario"],
        ],
    )
    database = client.app.state.database
    return asyncio.run(ImportService(database, import_settings).run())


def create(client, headers, **body):
    return client.post("/api/trasporti", json=body, headers=headers)


def test_requires_token(client):
    assert client.get("/api/trasporti").status_code == 401
    assert client.post("/api/trasporti", json={"cliente": "Acme"}).status_code == 401


def test_create(client, admin_headers):
    response = create(client, admin_headers, cliente="Acme", targa="AB 123 CD", unknown="x")

    assert response.status_code == 201
    body = response.json()
    uuid.UUID(body["id"])
    assert body["created_at"] and body["updated_at"]
    assert body["cliente"] == "Acme"
    assert body["targa"] == "AB 123 CD"
    assert body["note"] is None
    assert body["row_color"] == ""
    assert "unknown" not in body


def test_create_rejects_bad_plate(client, admin_headers):
    response = create(client, admin_headers, cliente="Acme", targa="##")

    assert response.status_code == 400
    assert response.json()["error"]["details"]["field"] == "targa"


def test_create_validates_types(client, admin_headers, imported):
    assert create(client, admin_headers, cliente="Acme", data="not a date").status_code == 400
    assert create(client, admin_headers, cliente="Acme", pagamento="abc").status_code == 400

    response = create(client, admin_headers, cliente="Acme", data="05/04/2024", pagamento="12.5")
    assert response.status_code == 201
    assert response.json()["data"] == "2024-04-05T00:00:00"
    assert response.json()["pagamento"] == 12.5


def test_list_and_filters(client, admin_headers, imported):
    response = client.get("/api/trasporti", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["meta"] == {"total": 3, "page": 1, "limit": 50, "pages": 1}

    def clients(**params):
        resp = client.get("/api/trasporti", params=params, headers=admin_headers)
        assert resp.status_code == 200
        return sorted(r["cliente"] for r in resp.json()["data"])

    assert clients(cliente="acm") == ["Acme"]
    assert clients(targa="ef456") == ["Beta"]
    assert clients(regione="lombardia") == ["Acme", "Gamma"]
    assert clients(autista="mario") == ["Acme", "Gamma"]
    assert clients(autista="mario", regione="veneto") == []
    assert clients(data_from="2024-02-01") == ["Beta", "Gamma"]
    assert clients(data_from="2024-01-01", data_to="2024-02-20") == ["Acme", "Beta"]
    assert clients(q="ij789") == ["Gamma"]


def test_pagination_and_sort(client, admin_headers, imported):
    response = client.get(
        "/api/trasporti", params={"limit": 2, "page": 2, "sort": "cliente"}, headers=admin_headers
    )

    body = response.json()
    assert body["meta"] == {"total": 3, "page": 2, "limit": 2, "pages": 2}
    assert [r["cliente"] for r in body["data"]] == ["Gamma"]

    descending = client.get("/api/trasporti", params={"sort": "-pagamento"}, headers=admin_headers)
    assert [r["pagamento"] for r in descending.json()["data"]] == [300, 200, 100]


def test_sort_number_field_numerically(client, admin_headers, import_settings, make_workbook):
    make_workbook(
        ["CLIENTE", "PAGAMENTO"],
        [["Acme", 100], ["Beta", 50], ["Gamma", 9]],
    )
    asyncio.run(ImportService(client.app.state.database, import_settings).run())

    def amounts(sort):
        response = client.get("/api/trasporti", params={"sort": sort}, headers=admin_headers)
        assert response.status_code == 200
        return [r["pagamento"] for r in response.json()["data"]]

    assert amounts("pagamento") == [9, 50, 100]
    assert amounts("-pagamento") == [100, 50, 9]
    assert amounts("cliente") == [100, 50, 9]


def test_invalid_list_params(client, admin_headers):
    assert client.get("/api/trasporti", params={"limit": 500}, headers=admin_headers).status_code == 400
    assert client.get("/api/trasporti", params={"sort": "nope"}, headers=admin_headers).status_code == 400


def test_search_alias(client, admin_headers, imported):
    response = client.get("/api/trasporti/search", params={"cliente": "beta"}, headers=admin_headers)

    assert [r["cliente"] for r in response.json()["data"]] == ["Beta"]


def test_recent(client, admin_headers):
    create(client, admin_headers, cliente="Acme")

    response = client.get("/api/trasporti/recent", headers=admin_headers)

    assert response.status_code == 200
    assert [r["cliente"] for r in response.json()] == ["Acme"]


def test_schema_endpoint(client, admin_headers, imported):
    response = client.get("/api/trasporti/schema", headers=admin_headers)

    body = response.json()
    assert body["version"] == imported.schema_version
    types = {f["field"]: f["type"] for f in body["fields"]}
    assert types["data"] == "Date"
    assert types["pagamento"] == "Number"
    assert types["autista_carico"] == "Text"


def test_default_schema_before_import(client, admin_headers):
    body = client.get("/api/trasporti/schema", headers=admin_headers).json()

    assert body["version"] is None
    types = {f["field"]: f["type"] for f in body["fields"]}
    assert types.pop("data") == "Date"
    assert set(types.values()) == {"Text"}


def test_dates_validated_before_import(client, admin_headers):
    assert create(client, admin_headers, cliente="Acme", data="not a date").status_code == 400

    response = create(client, admin_headers, cliente="Acme", data="15/01/2024")
    assert response.status_code == 201
    assert response.json()["data"] == "2024-01-15T00:00:00"


def test_update_and_patch(client, admin_headers):
    record = create(client, admin_headers, cliente="Acme", targa="AB123CD", note="fragile").json()
    url = f"/api/trasporti/{record['id']}"

    patched = client.patch(url, json={"row_color": "#ff0000"}, headers=admin_headers)
    assert patched.status_code == 200
    assert patched.json()["cliente"] == "Acme"
    assert patched.json()["row_color"] == "#ff0000"

    replaced = client.put(url, json={"cliente": "Beta"}, headers=admin_headers)
    assert replaced.status_code == 200
    assert replaced.json()["cliente"] == "Beta"
    assert replaced.json()["targa"] is None
    assert replaced.json()["note"] is None

    assert client.patch(url, json={"targa": "##"}, headers=admin_headers).status_code == 400
    assert client.get(url, headers=admin_headers).json()["cliente"] == "Beta"


def test_missing_records(client, admin_headers):
    missing = f"/api/trasporti/{uuid.uuid4()}"

    assert client.get(missing, headers=admin_headers).status_code == 404
    assert client.put(missing, json={"cliente": "x"}, headers=admin_headers).status_code == 404
    assert client.patch(missing, json={"cliente": "x"}, headers=admin_headers).status_code == 404
    assert client.delete(missing, headers=admin_headers).status_code == 404
    assert client.get("/api/trasporti/not-an-id", headers=admin_headers).status_code == 404


def test_delete(client, admin_headers):
    record = create(client, admin_headers, cliente="Acme").json()
    url = f"/api/trasporti/{record['id']}"

    response = client.delete(url, headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"ok": True}
    assert client.get(url, headers=admin_headers).status_code == 404


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
