"""Application and review flow over HTTP."""

import uuid

import pytest


@pytest.fixture
async def parties(seed):
    employer = await seed.employer("Corner Cafe")
    student = await seed.student("Aiko")
    job = await seed.job(employer)
    return {"employer": employer, "student": student, "job": job}


async def test_full_hiring_and_review_scenario(client, seed, parties, headers):
    employer, student, job = parties["employer"], parties["student"], parties["job"]

    response = await client.post(
        "/api/v1/applications",
        json={"jobId": str(job.id), "notes": "interested"},
        headers=headers(student),
    )
    assert response.status_code == 200
    application = response.json()
    assert application["status"] == "PENDING"
    assert application["isCompleted"] is False
    application_id = application["id"]

    response = await client.patch(
        f"/api/v1/applications/{application_id}",
        json={"status": "approved"},
        headers=headers(employer),
    )
    assert response.status_code == 200
    assert response.json()["status"] == "APPROVED"
    assert response.json()["isCompleted"] is False

    response = await client.patch(
        f"/api/v1/applications/{application_id}",
        json={"isCompleted": True},
        headers=headers(employer),
    )
    assert response.status_code == 200
    assert response.json()["isCompleted"] is True
    assert response.json()["completedAt"] is not None

    response = await client.post(
        "/api/v1/reviews",
        json={"applicationId": application_id, "type": "employer", "rating": 4.5},
        headers=headers(employer),
    )
    assert response.status_code == 200
    review = response.json()
    assert review["employerRating"] == 4.5
    assert review["studentRating"] is None

    response = await client.post(
        "/api/v1/reviews",
        json={"applicationId": application_id, "type": "student", "rating": 5, "comment": "Great"},
        headers=headers(student),
    )
    assert response.status_code == 200
    assert response.json()["id"] == review["id"]
    assert response.json()["employerRating"] == 4.5
    assert response.json()["studentRating"] == 5.0

    response = await client.get(
        f"/api/v1/students/{student.student.id}/reviews", headers=headers(student)
    )
    assert response.status_code == 200
    assert response.json()["averageRating"] == 4.5

    response = await client.get(
        f"/api/v1/employers/{employer.employer.id}/reviews", headers=headers(employer)
    )
    assert response.status_code == 200
    assert response.json()["averageRating"] == 5.0
    assert response.json()["reviews"][0]["reviewerName"] == "Aiko"


async def test_duplicate_application_is_conflict(client, parties, headers):
    body = {"jobId": str(parties["job"].id)}
    first = await client.post("/api/v1/applications", json=body, headers=headers(parties["student"]))
    second = await client.post("/api/v1/applications", json=body, headers=headers(parties["student"]))

    assert first.status_code == 200
    assert second.status_code == 400
    assert second.json()["error"] == "conflict"

    listed = await client.get("/api/v1/applications", headers=headers(parties["student"]))
    assert len(listed.json()) == 1


async def test_apply_to_missing_job(client, parties, headers):
    response = await client.post(
        "/api/v1/applications",
        json={"jobId": str(uuid.uuid4())},
        headers=headers(parties["student"]),
    )
    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


async def test_apply_requires_authentication(client, parties):
    response = await client.post("/api/v1/applications", json={"jobId": str(parties["job"].id)})
    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


async def test_employer_cannot_apply(client, parties, headers):
    response = await client.post(
        "/api/v1/applications",
        json={"jobId": str(parties["job"].id)},
        headers=headers(parties["employer"]),
    )
    assert response.status_code == 403


async def test_other_student_cannot_delete(client, seed, parties, headers):
    application = await seed.application(parties["job"], parties["student"])
    intruder = await seed.student("Bruno")

    response = await client.delete(f"/api/v1/applications/{application.id}", headers=headers(intruder))
    assert response.status_code == 403

    response = await client.get(
        f"/api/v1/applications/{application.id}", headers=headers(parties["student"])
    )
    assert response.status_code == 200


async def test_student_withdraws_application(client, seed, parties, headers):
    application = await seed.application(parties["job"], parties["student"])

    response = await client.delete(
        f"/api/v1/applications/{application.id}", headers=headers(parties["student"])
    )
    assert response.status_code == 200
    assert response.json() == {"success": True}


async def test_completing_pending_application_is_invalid_state(client, seed, parties, headers):
    application = await seed.application(parties["job"], parties["student"])

    response = await client.patch(
        f"/api/v1/applications/{application.id}",
        json={"isCompleted": True},
        headers=headers(parties["employer"]),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_state"

    detail = await client.get(
        f"/api/v1/applications/{application.id}", headers=headers(parties["employer"])
    )
    assert detail.json()["isCompleted"] is False


async def test_other_employer_patch_is_forbidden(client, seed, parties, headers):
    application = await seed.application(parties["job"], parties["student"])
    rival = await seed.employer("Book Shop")

    response = await client.patch(
        f"/api/v1/applications/{application.id}",
        json={"status": "APPROVED"},
        headers=headers(rival),
    )
    assert response.status_code == 403

    detail = await client.get(
        f"/api/v1/applications/{application.id}", headers=headers(parties["student"])
    )
    assert detail.json()["status"] == "PENDING"


async def test_invalid_status_value(client, seed, parties, headers):
    application = await seed.application(parties["job"], parties["student"])

    response = await client.patch(
        f"/api/v1/applications/{application.id}",
        json={"status": "maybe"},
        headers=headers(parties["employer"]),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"


async def test_list_output_variants(client, seed, parties, headers):
    pending = await seed.application(parties["job"], parties["student"])
    other_job = await seed.job(parties["employer"], title="Cashier")
    done = await seed.application(other_job, parties["student"], status="APPROVED", is_completed=True)

    regular = await client.get("/api/v1/applications", headers=headers(parties["employer"]))
    assert regular.status_code == 200
    items = {item["id"]: item for item in regular.json()}
    assert set(items) == {str(pending.id), str(done.id)}
    item = items[str(pending.id)]
    assert item["job"]["title"] == "Barista"
    assert item["job"]["employerName"] == "Corner Cafe"
    assert item["student"]["name"] == "Aiko"
    assert item["hasReview"] is False
    assert "hasEmployerReview" not in item
    # Unset base fields are still reported, as null
    assert item["notes"] is None
    assert item["completedAt"] is None

    completed = await client.get(
        "/api/v1/applications", params={"isCompleted": "true"}, headers=headers(parties["employer"])
    )
    items = completed.json()
    assert [item["id"] for item in items] == [str(done.id)]
    assert items[0]["hasEmployerReview"] is False
    assert items[0]["jobTitle"] == "Cashier"
    assert items[0]["notes"] is None
    assert "job" not in items[0]
    assert "hasReview" not in items[0]


async def test_employer_filtering_by_foreign_employer_gets_nothing(client, seed, parties, headers):
    await seed.application(parties["job"], parties["student"])
    rival = await seed.employer("Book Shop")

    response = await client.get(
        "/api/v1/applications",
        params={"employerId": str(parties["employer"].employer.id)},
        headers=headers(rival),
    )
    assert response.status_code == 200
    assert response.json() == []


async def test_check_application(client, seed, parties, headers):
    url = "/api/v1/applications/check"
    params = {"jobId": str(parties["job"].id)}

    before = await client.get(url, params=params, headers=headers(parties["student"]))
    assert before.json() == {"hasApplied": False, "applicationId": None}

    application = await seed.application(parties["job"], parties["student"])
    after = await client.get(url, params=params, headers=headers(parties["student"]))
    assert after.json() == {"hasApplied": True, "applicationId": str(application.id)}


async def test_review_before_completion_is_rejected(client, seed, parties, headers):
    application = await seed.application(parties["job"], parties["student"], status="APPROVED")

    response = await client.post(
        "/api/v1/reviews",
        json={"applicationId": str(application.id), "type": "student", "rating": 5},
        headers=headers(parties["student"]),
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_state"


async def test_review_by_wrong_party_is_forbidden(client, seed, parties, headers):
    application = await seed.application(
        parties["job"], parties["student"], status="APPROVED", is_completed=True
    )

    response = await client.post(
        "/api/v1/reviews",
        json={"applicationId": str(application.id), "type": "employer", "rating": 5},
        headers=headers(parties["student"]),
    )
    assert response.status_code == 403


async def test_review_listing_requires_authentication(client):
    response = await client.get("/api/v1/reviews")
    assert response.status_code == 401


async def test_malformed_body_is_invalid_input(client, parties, headers):
    response = await client.post(
        "/api/v1/applications", json={"jobId": "not-a-uuid"}, headers=headers(parties["student"])
    )
    assert response.status_code == 400
    assert response.json()["error"] == "invalid_input"
