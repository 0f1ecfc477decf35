def _anime(client, title):
    return client.post("/api/admin/anime", json={"title": title}).get_json()


def _manga(client, title):
    return client.post("/api/admin/manga", json={"title": title}).get_json()


def test_tag_crud_and_duplicates(admin_client):
    _, client, _, _ = admin_client
    res = client.post("/api/admin/tags", json={"name": "Isekai", "category": "Genre"})
    assert res.status_code == 201
    tag = res.get_json()

    assert client.post("/api/admin/tags", json={"name": "Isekai"}).status_code == 400
    other = client.post("/api/admin/tags", json={"name": "Mecha"}).get_json()
    assert client.put(f"/api/admin/tags/{other['id']}", json={"name": "Isekai"}).status_code == 400

    renamed = client.put(f"/api/admin/tags/{tag['id']}", json={"name": "Portal", "category": "Genre"})
    assert renamed.get_json()["name"] == "Portal"

    listing = client.get("/api/admin/tags").get_json()
    assert {t["name"] for t in listing["tags"]} == {"Portal", "Mecha"}
    assert listing["categories"] == ["Genre"]

    found = client.get("/api/admin/tags/search?q=mec").get_json()["tags"]
    assert [t["name"] for t in found] == ["Mecha"]
    assert client.get("/api/admin/tags/999").status_code == 404


def test_tag_in_use_cannot_be_deleted(admin_client):
    _, client, _, _ = admin_client
    anime = _anime(client, "Tagged Show")
    tag = client.post("/api/admin/tags", json={"name": "Sports"}).get_json()

    first = client.post(f"/api/admin/anime/{anime['id']}/tags", json={"tag_id": tag["id"]})
    assert first.get_json()["message"] == "Tag added"
    again = client.post(f"/api/admin/anime/{anime['id']}/tags", json={"tag_id": tag["id"]})
    assert again.get_json()["message"] == "Tag already attached"

    res = client.delete(f"/api/admin/tags/{tag['id']}")
    assert res.status_code == 400
    assert res.get_json()["error"] == "Cannot delete: this tag is used by 1 anime/manga"

    client.delete(f"/api/admin/anime/{anime['id']}/tags/{tag['id']}")
    assert client.get(f"/api/admin/anime/{anime['id']}/tags").get_json()["tags"] == []
    assert client.delete(f"/api/admin/tags/{tag['id']}").status_code == 200

    actions = [log["action"] for log in client.get(f"/api/admin/anime/{anime['id']}/logs").get_json()["logs"]]
    assert actions.count("Modification des tags") == 2


def test_attach_tag_to_missing_content_is_404(admin_client):
    _, client, _, _ = admin_client
    tag = client.post("/api/admin/tags", json={"name": "Horror"}).get_json()
    res = client.post("/api/admin/manga/77/tags", json={"tag_id": tag["id"]})
    assert res.status_code == 404


def test_business_crud(admin_client):
    _, client, _, _ = admin_client
    res = client.post("/api/admin/business", json={"name": "Studio Pierrot", "type": "Studio"})
    assert res.status_code == 201
    business = res.get_json()
    assert business["nice_url"] == "studio-pierrot"

    assert client.post("/api/admin/business", json={"name": "studio pierrot"}).status_code == 400
    assert client.post("/api/admin/business", json={"type": "Studio"}).status_code == 400

    updated = client.put(f"/api/admin/business/{business['id']}", json={"origin": "Japon"}).get_json()
    assert updated["origin"] == "Japon"

    status = client.put(f"/api/admin/business/{business['id']}/status", json={"status": 0}).get_json()
    assert status["status"] == 0

    listing = client.get("/api/admin/business?type=Studio").get_json()
    assert listing["pagination"]["total"] == 1
    assert listing["pagination"]["limit"] == 20

    logs = client.get(f"/api/admin/business/{business['id']}/logs").get_json()["logs"]
    assert {log["action"] for log in logs} == {
        "Création fiche",
        "Modification infos principales",
        "Modification statut (0)",
    }

    assert client.delete(f"/api/admin/business/{business['id']}").status_code == 200
    assert client.get(f"/api/admin/business/{business['id']}").status_code == 404
    assert client.delete(f"/api/admin/business/{business['id']}").status_code == 404


def test_staff_by_name_creates_business_with_role_type(admin_client):
    _, client, _, _ = admin_client
    anime = _anime(client, "Staffed Show")

    res = client.post(
        f"/api/admin/anime/{anime['id']}/staff",
        json={"name": "Bones", "role": "Studio d'animation"},
    )
    assert res.status_code == 201
    client.post(f"/api/admin/anime/{anime['id']}/staff", json={"name": "Jane Doe", "role": "Réalisateur"})
    dup = client.post(f"/api/admin/anime/{anime['id']}/staff", json={"name": "Bones", "role": "Studio d'animation"})
    assert dup.get_json()["message"] == "Staff member already linked"

    staff = client.get(f"/api/admin/anime/{anime['id']}/staff").get_json()["staff"]
    assert {(s["name"], s["type"], s["role"]) for s in staff} == {
        ("Bones", "Studio", "Studio d'animation"),
        ("Jane Doe", "Personne", "Réalisateur"),
    }

    bones = next(s for s in staff if s["name"] == "Bones")
    res = client.delete(f"/api/admin/anime/{anime['id']}/staff/{bones['business_id']}")
    assert res.status_code == 200
    assert client.delete(f"/api/admin/anime/{anime['id']}/staff/{bones['business_id']}").status_code == 404


def test_staff_requires_name_and_role(admin_client):
    _, client, _, _ = admin_client
    anime = _anime(client, "Nameless")
    res = client.post(f"/api/admin/anime/{anime['id']}/staff", json={"name": "Someone"})
    assert res.status_code == 400


def test_relations_are_bidirectional(admin_client):
    _, client, _, _ = admin_client
    anime = _anime(client, "Adapted Show")
    manga = _manga(client, "Source Book")

    res = client.post(
        f"/api/admin/anime/{anime['id']}/relations",
        json={"related_type": "manga", "related_id": manga["id"]},
    )
    assert res.status_code == 201
    relation_id = res.get_json()["id"]

    reverse = client.post(
        f"/api/admin/manga/{manga['id']}/relations",
        json={"related_type": "anime", "related_id": anime["id"]},
    )
    assert reverse.get_json()["message"] == "Relationship already exists"

    from_manga = client.get(f"/api/admin/manga/{manga['id']}/relations").get_json()["relations"]
    assert [(r["related_type"], r["related_id"], r["related_title"]) for r in from_manga] == [
        ("anime", anime["id"], "Adapted Show")
    ]

    assert client.delete(f"/api/admin/relations/{relation_id}").status_code == 200
    assert client.delete(f"/api/admin/relations/{relation_id}").status_code == 404


def test_relation_with_missing_end_is_404(admin_client):
    _, client, _, _ = admin_client
    anime = _anime(client, "Lonely Show")
    res = client.post(
        f"/api/admin/anime/{anime['id']}/relations",
        json={"related_type": "manga", "related_id": 12345},
    )
    assert res.status_code == 404
    self_link = client.post(
        f"/api/admin/anime/{anime['id']}/relations",
        json={"related_type": "anime", "related_id": anime["id"]},
    )
    assert self_link.status_code == 400


def test_recent_logs_newest_first(admin_client):
    _, client, _, _ = admin_client
    first = _anime(client, "First")
    second = _manga(client, "Second")
    logs = client.get("/api/admin/logs?limit=10").get_json()["logs"]
    assert [(log["content_type"], log["content_id"]) for log in logs[:2]] == [
        ("manga", second["id"]),
        ("anime", first["id"]),
    ]


def test_dashboard_counts_and_health(admin_client):
    _, client, _, _ = admin_client
    pending = _anime(client, "Waiting")
    client.put(f"/api/admin/anime/{pending['id']}/status", json={"status": 2})
    _manga(client, "Draft")
    client.post("/api/admin/tags", json={"name": "Drama"})

    payload = client.get("/api/admin/dashboard").get_json()
    assert payload["health"]["status"] == "ok"
    assert payload["health"]["checks"]["database"]["status"] == "ok"
    assert payload["counts"]["anime"]["pending"] == 1
    assert payload["counts"]["manga"]["refused"] == 1
    assert payload["counts"]["tags"]["total"] == 1
    assert payload["counts"]["pending_total"] == 1


def test_dashboard_degrades_when_cache_fails(admin_client):
    app, client, _, _ = admin_client

    class BrokenCache:
        def ping(self):
            raise ConnectionError("cache down")

    app.extensions["catalog_cache"] = BrokenCache()
    res = client.get("/api/admin/dashboard")
    assert res.status_code == 200
    health = res.get_json()["health"]
    assert health["status"] == "degraded"
    assert health["checks"]["cache"] == {"status": "error", "error": "cache down"}
