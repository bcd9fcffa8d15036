"""Competition entries, item numbers and entry approval."""

API = "/api/v1"
ADMIN = {"Authorization": "Bearer test-super-admin"}


def test_unapproved_participant_is_forbidden(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo")
    dancer = register_dancer()
    response = client.post(f"{API}/event-entries", json=entry_payload(event, [dancer]))
    assert response.status_code == 403
    assert dancer["eodsaId"] in response.json()["detail"]


def test_one_unapproved_member_blocks_a_duet(client, register_dancer, create_event, entry_payload):
    event = create_event("Duet")
    approved = register_dancer(approve=True)
    pending = register_dancer()
    response = client.post(f"{API}/event-entries", json=entry_payload(event, [approved, pending]))
    assert response.status_code == 403


def test_solo_entry_recorded_pending(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo", entryFee=300)
    dancer = register_dancer(approve=True)
    response = client.post(f"{API}/event-entries", json=entry_payload(event, [dancer], paymentMethod="bank_transfer"))
    assert response.status_code == 201
    entry = response.json()
    assert entry["approved"] is False
    assert entry["paymentStatus"] == "pending"
    assert entry["paymentMethod"] == "bank_transfer"
    assert entry["calculatedFee"] == 300
    assert entry["participantIds"] == [dancer["id"]]
    assert entry["eodsaId"] == dancer["eodsaId"]
    assert entry["itemNumber"] is None


def test_participants_may_be_given_by_eodsa_id(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo")
    dancer = register_dancer(approve=True)
    payload = entry_payload(event, [dancer], contestant_id=dancer["eodsaId"], participantIds=[dancer["eodsaId"]])
    response = client.post(f"{API}/event-entries", json=payload)
    assert response.status_code == 201
    assert response.json()["contestantId"] == dancer["id"]


def test_participant_count_bounds(client, register_dancer, create_event, entry_payload):
    dancers = [register_dancer(approve=True) for _ in range(4)]

    solo = create_event("Solo")
    assert client.post(f"{API}/event-entries", json=entry_payload(solo, dancers[:2])).status_code == 400
    assert client.post(f"{API}/event-entries", json=entry_payload(solo, dancers[:1])).status_code == 201

    duet = create_event("Duet")
    assert client.post(f"{API}/event-entries", json=entry_payload(duet, dancers[:1])).status_code == 400
    assert client.post(f"{API}/event-entries", json=entry_payload(duet, dancers[:2])).status_code == 201

    trio = create_event("Trio")
    assert client.post(f"{API}/event-entries", json=entry_payload(trio, dancers[:4])).status_code == 400
    assert client.post(f"{API}/event-entries", json=entry_payload(trio, dancers[:3])).status_code == 201

    group = create_event("Group")
    assert client.post(f"{API}/event-entries", json=entry_payload(group, dancers[:3])).status_code == 400
    assert client.post(f"{API}/event-entries", json=entry_payload(group, dancers[:4])).status_code == 201


def test_group_upper_bound_with_roster_dancers(client, create_event, entry_payload):
    roster = [
        {"name": f"Member {n}", "age": 16, "style": "Contemporary", "nationalId": f"08010155550{n:02d}"}
        for n in range(31)
    ]
    contestant = client.post(
        f"{API}/contestants",
        json={"name": "Soweto Youth Troupe", "email": "troupe@example.com", "phone": "0114445555",
              "type": "private", "dancers": roster},
    )
    assert contestant.status_code == 201
    body = contestant.json()
    members = [{"id": d["id"]} for d in body["dancers"]]
    event = create_event("Group")

    full = entry_payload(event, members[:30], contestant_id=body["id"])
    response = client.post(f"{API}/event-entries", json=full)
    assert response.status_code == 201
    assert len(response.json()["participantIds"]) == 30

    too_many = entry_payload(event, members, contestant_id=body["id"])
    response = client.post(f"{API}/event-entries", json=too_many)
    assert response.status_code == 400
    assert "got 31" in response.json()["detail"]


def test_same_dancer_by_id_and_eodsa_id_counts_once(client, register_dancer, create_event, entry_payload):
    event = create_event("Duet")
    dancer = register_dancer(approve=True)
    payload = entry_payload(event, [dancer], participantIds=[dancer["id"], dancer["eodsaId"]])
    response = client.post(f"{API}/event-entries", json=payload)
    assert response.status_code == 400
    assert response.json()["detail"] == "Each participant may only be listed once per entry"
    assert client.get(f"{API}/event-entries", headers=ADMIN).json() == []


def test_entry_stores_canonical_dancer_ids(client, register_dancer, create_event, entry_payload):
    event = create_event("Duet")
    first, second = register_dancer(approve=True), register_dancer(approve=True)
    payload = entry_payload(event, [first, second], participantIds=[first["eodsaId"], second["id"]])
    response = client.post(f"{API}/event-entries", json=payload)
    assert response.status_code == 201
    assert response.json()["participantIds"] == [first["id"], second["id"]]


def test_empty_and_duplicate_participants(client, register_dancer, create_event, entry_payload):
    event = create_event("Duet")
    dancer = register_dancer(approve=True)
    empty = entry_payload(event, [dancer], participantIds=[])
    assert client.post(f"{API}/event-entries", json=empty).status_code == 400
    duplicated = entry_payload(event, [dancer, dancer])
    assert client.post(f"{API}/event-entries", json=duplicated).status_code == 400


def test_unknown_event_and_contestant(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo")
    dancer = register_dancer(approve=True)
    missing_event = entry_payload({"id": "evt_missing"}, [dancer])
    assert client.post(f"{API}/event-entries", json=missing_event).status_code == 404
    missing_contestant = entry_payload(event, [dancer], contestant_id="nobody")
    assert client.post(f"{API}/event-entries", json=missing_contestant).status_code == 404


def test_unknown_participant(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo")
    dancer = register_dancer(approve=True)
    payload = entry_payload(event, [dancer], participantIds=["dnc_ghost"])
    response = client.post(f"{API}/event-entries", json=payload)
    assert response.status_code == 400


def test_closed_event_and_type_mismatch(client, register_dancer, create_event, entry_payload):
    dancer = register_dancer(approve=True)
    closed = create_event("Solo", status="registration_closed")
    assert client.post(f"{API}/event-entries", json=entry_payload(closed, [dancer])).status_code == 400

    event = create_event("Solo")
    mismatch = entry_payload(event, [dancer], performanceType="Duet")
    assert client.post(f"{API}/event-entries", json=mismatch).status_code == 400


def test_invalid_item_details(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo")
    dancer = register_dancer(approve=True)
    assert client.post(f"{API}/event-entries", json=entry_payload(event, [dancer], mastery="Expert")).status_code == 400
    assert client.post(
        f"{API}/event-entries", json=entry_payload(event, [dancer], estimatedDuration=12)
    ).status_code == 400


def test_legacy_roster_participants(client, create_event, entry_payload):
    contestant = client.post(
        f"{API}/contestants",
        json={
            "name": "Sipho Mokoena",
            "email": "sipho@example.com",
            "phone": "0831112222",
            "type": "private",
            "dancers": [
                {"name": "Sipho Mokoena", "age": 19, "style": "Hip Hop", "nationalId": "0501015555081"},
                {"name": "Ayanda Mokoena", "age": 21, "style": "Hip Hop", "nationalId": "0301015555081"},
            ],
        },
    )
    assert contestant.status_code == 201
    body = contestant.json()
    roster_ids = [d["id"] for d in body["dancers"]]

    event = create_event("Duet")
    payload = entry_payload(
        event,
        [{"id": rid} for rid in roster_ids],
        contestant_id=body["id"],
        itemStyle="Hip Hop - New School",
    )
    response = client.post(f"{API}/event-entries", json=payload)
    assert response.status_code == 201
    assert response.json()["eodsaId"] == body["eodsaId"]

    performance = client.patch(f"{API}/event-entries/{response.json()['id']}/approve", headers=ADMIN)
    assert performance.json()["participantNames"] == ["Sipho Mokoena", "Ayanda Mokoena"]


def test_item_number_unique_per_event(client, register_dancer, create_event, entry_payload):
    first_event = create_event("Solo")
    second_event = create_event("Solo")
    a, b, c = (register_dancer(approve=True) for _ in range(3))
    entry_a = client.post(f"{API}/event-entries", json=entry_payload(first_event, [a])).json()
    entry_b = client.post(f"{API}/event-entries", json=entry_payload(first_event, [b])).json()
    entry_c = client.post(f"{API}/event-entries", json=entry_payload(second_event, [c])).json()

    url = f"{API}/admin/entries/{{}}/assign-item-number"
    first = client.put(url.format(entry_a["id"]), json={"itemNumber": 7}, headers=ADMIN)
    assert first.status_code == 200
    assert first.json()["itemNumber"] == 7

    clash = client.put(url.format(entry_b["id"]), json={"itemNumber": 7}, headers=ADMIN)
    assert clash.status_code == 409

    other_event = client.put(url.format(entry_c["id"]), json={"itemNumber": 7}, headers=ADMIN)
    assert other_event.status_code == 200

    # Re-assigning the same number to the same entry is not a clash.
    assert client.put(url.format(entry_a["id"]), json={"itemNumber": 7}, headers=ADMIN).status_code == 200

    assert client.put(url.format("ent_missing"), json={"itemNumber": 3}, headers=ADMIN).status_code == 404
    assert client.put(url.format(entry_b["id"]), json={"itemNumber": 0}, headers=ADMIN).status_code == 400
    assert client.put(url.format(entry_b["id"]), json={"itemNumber": 8}).status_code == 401


def test_approve_entry_creates_performance_once(client, register_dancer, create_event, entry_payload):
    event = create_event("Solo")
    dancer = register_dancer(approve=True, name="Lerato Molefe")
    entry = client.post(f"{API}/event-entries", json=entry_payload(event, [dancer])).json()
    client.put(f"{API}/admin/entries/{entry['id']}/assign-item-number", json={"itemNumber": 12}, headers=ADMIN)

    first = client.patch(f"{API}/event-entries/{entry['id']}/approve", headers=ADMIN)
    assert first.status_code == 200
    performance = first.json()
    assert performance["title"] == "Swan Variation"
    assert performance["participantNames"] == ["Lerato Molefe"]
    assert performance["itemNumber"] == 12

    second = client.patch(f"{API}/event-entries/{entry['id']}/approve", headers=ADMIN)
    assert second.json()["id"] == performance["id"]

    listed = client.get(f"{API}/events/{event['id']}/performances")
    assert [p["id"] for p in listed.json()] == [performance["id"]]

    entries = client.get(f"{API}/event-entries", params={"eventId": event["id"]}, headers=ADMIN).json()
    assert entries[0]["approved"] is True


def test_item_number_follows_onto_performance(client, create_performance):
    performance = create_performance()
    response = client.put(
        f"{API}/admin/entries/{performance['entryId']}/assign-item-number", json={"itemNumber": 4}, headers=ADMIN
    )
    assert response.status_code == 200
    listed = client.get(f"{API}/events/{performance['eventId']}/performances").json()
    assert listed[0]["itemNumber"] == 4


def test_event_validation(client, create_event):
    admin = {"Authorization": "Bearer test-super-admin"}
    base = {
        "name": "Bad event",
        "region": "Gauteng",
        "ageCategory": "18+ years",
        "performanceType": "Solo",
        "eventDate": "2030-06-15T09:00:00Z",
        "registrationDeadline": "2030-06-01T23:59:00Z",
        "venue": "Civic Theatre",
        "entryFee": 100,
    }
    assert client.post(f"{API}/events", json={**base, "region": "Atlantis"}, headers=admin).status_code == 400
    late = {**base, "registrationDeadline": "2030-06-20T00:00:00Z"}
    response = client.post(f"{API}/events", json=late, headers=admin)
    assert response.status_code == 400
    assert "Registration deadline must be before event date" in response.json()["detail"]
    assert client.post(f"{API}/events", json=base).status_code == 401

    event = create_event("Group")
    assert client.get(f"{API}/events/{event['id']}").json()["performanceType"] == "Group"
    assert client.get(f"{API}/events/evt_missing").status_code == 404
    assert [e["id"] for e in client.get(f"{API}/events", params={"performanceType": "Group"}).json()] == [event["id"]]
