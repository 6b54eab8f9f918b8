import io


def _post_many(client, rows, clear=False):
    url = "/api/survey-data/bulk" + ("?clear=true" if clear else "")
    return client.post(url, json=rows)


ROWS = [
    {"gender": "Male", "ageGroup": "21-30", "companySize": "6-25", "year": "2014",
     "familyHistory": "Yes", "soughtTreatment": True, "location": "USA"},
    {"gender": "Female", "ageGroup": "31-40", "companySize": "1-5", "year": "2016",
     "familyHistory": "No", "soughtTreatment": False, "location": "Canada"},
]


def test_health(client):
    assert client.get("/api/v1/health").get_json() == {"status": "ok"}


def test_create_and_list(client):
    resp = client.post("/api/survey-data", json=ROWS[0])
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["id"] == 1
    assert body["ageGroup"] == "21-30"
    assert client.get("/api/survey-data").get_json() == [body]


def test_create_invalid_record(client):
    resp = client.post("/api/survey-data", json={"age": "old"})
    assert resp.status_code == 400
    assert resp.get_json()["error"] == "Invalid data format"


def test_bulk_upload(client, store):
    resp = _post_many(client, ROWS)
    assert resp.status_code == 201
    assert resp.get_json() == {"message": "Bulk upload successful", "count": 2}
    _post_many(client, ROWS, clear=True)
    assert len(store) == 2


def test_bulk_upload_rejects_empty_or_non_list(client):
    assert _post_many(client, []).status_code == 400
    assert client.post("/api/survey-data/bulk", json={"gender": "Male"}).status_code == 400


def test_bulk_upload_is_atomic(client, store):
    resp = _post_many(client, [ROWS[0], {"age": "old"}])
    assert resp.status_code == 400
    assert len(store) == 0


def test_delete_clears(client, store):
    _post_many(client, ROWS)
    assert client.delete("/api/survey-data").status_code == 200
    assert len(store) == 0


def test_upload_csv(client, store):
    data = {"file": (io.BytesIO(b"Gender,Age-Group\nMale,21-30\nFemale,31-40\n"), "survey.csv")}
    resp = client.post("/api/upload", data=data, content_type="multipart/form-data")
    assert resp.status_code == 201
    assert resp.get_json()["count"] == 2
    assert [r.gender for r in store.get_all()] == ["Male", "Female"]


def test_upload_rejects_bad_extension(client):
    data = {"file": (io.BytesIO(b"hello"), "notes.txt")}
    resp = client.post("/api/upload", data=data, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_export_csv_quotes_strings(client):
    client.post("/api/survey-data", json={"gender": "Male", "location": 'The "Big" Apple'})
    resp = client.get("/api/export")
    assert resp.status_code == 200
    assert resp.mimetype == "text/csv"
    text = resp.get_data(as_text=True)
    assert text.splitlines()[0].startswith('"id","familyHistory"')
    assert '"The ""Big"" Apple"' in text


def test_export_xlsx(client):
    _post_many(client, ROWS)
    resp = client.get("/api/export?format=xlsx")
    assert resp.status_code == 200
    assert resp.data[:2] == b"PK"


def test_summary_and_filters(client):
    _post_many(client, ROWS)
    summary = client.get("/api/analytics/summary").get_json()
    assert summary["total_respondents"] == 2
    assert summary["display"]["sought_treatment"] == "50%"
    female = client.get("/api/analytics/summary?gender=Female").get_json()
    assert female["total_respondents"] == 1
    filters = client.get("/api/analytics/filters?gender=Female").get_json()
    assert filters["gender"] == ["Female", "Male"]


def test_chart_list(client):
    names = [c["name"] for c in client.get("/api/charts").get_json()]
    assert "age-groups" in names and "network" in names


def test_chart_keeps_bucket_order(client):
    _post_many(client, list(reversed(ROWS)))
    body = client.get("/api/charts/age-groups?chartType=donut").get_json()
    assert body["chart_type"] == "donut"
    assert list(body["data"]) == ["21-30", "31-40"]
    assert body["layout"]["inner_radius"] > 0


def test_chart_with_filter_and_no_data(client):
    _post_many(client, ROWS)
    body = client.get("/api/charts/treatment-by-age?ageGroup=66-100").get_json()
    assert body["data"] == []
    assert body["layout"] == {"empty": True, "message": "No data available"}


def test_unknown_chart_and_type(client):
    assert client.get("/api/charts/nope").status_code == 404
    assert client.get("/api/charts/tree?chartType=pie").status_code == 400


def test_network_pinning(client):
    _post_many(client, ROWS)
    resp = client.post("/api/charts/network", json={"pinned": {"FamilyHistory": [12, 34]}})
    assert resp.status_code == 200
    node = next(n for n in resp.get_json()["layout"]["nodes"] if n["id"] == "FamilyHistory")
    assert (node["x"], node["y"], node["pinned"]) == (12.0, 34.0, True)
    bad = client.post("/api/charts/network", json={"pinned": {"Ghost": [1, 2]}})
    assert bad.status_code == 400


def test_api_404_is_json(client):
    resp = client.get("/api/missing")
    assert resp.status_code == 404
    assert resp.get_json()["error"] == "not found"


def test_empty_upload_keeps_existing_data(client, store):
    _post_many(client, ROWS)
    data = {"file": (io.BytesIO(b"Gender,Age-Group\n"), "survey.csv")}
    resp = client.post("/api/upload?clear=true", data=data, content_type="multipart/form-data")
    assert resp.status_code == 400
    assert "no survey records" in resp.get_json()["error"]
    assert len(store) == 2


def test_upload_rejects_xls(client):
    data = {"file": (io.BytesIO(b"whatever"), "survey.xls")}
    resp = client.post("/api/upload", data=data, content_type="multipart/form-data")
    assert resp.status_code == 400


def test_unexpected_error_is_json(app):
    def boom():
        raise RuntimeError("kaput")

    app.add_url_rule("/api/boom", "boom", boom)
    app.config["PROPAGATE_EXCEPTIONS"] = False
    resp = app.test_client().get("/api/boom")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Internal server error"}
