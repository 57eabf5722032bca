"""Employer flagging, profile stats and verification."""

import pytest
from sqlalchemy import select

from shiftlink.core.exceptions import Conflict, Forbidden, InvalidInput, InvalidState
from shiftlink.models.employer import Employer
from shiftlink.services.employer_service import EmployerService, VerificationService


@pytest.fixture
async def employer(seed):
    return await seed.employer("Corner Cafe")


async def test_any_user_can_flag(client, seed, employer, headers):
    student = await seed.student()

    response = await client.post(
        f"/api/v1/employers/{employer.employer.id}/flag",
        json={"reason": "Unpaid wages"},
        headers=headers(student),
    )
    assert response.status_code == 200
    assert response.json()["isFlagged"] is True
    assert response.json()["flagReason"] == "Unpaid wages"


async def test_flag_requires_reason(client, seed, employer, headers):
    student = await seed.student()

    response = await client.post(
        f"/api/v1/employers/{employer.employer.id}/flag", json={"reason": ""}, headers=headers(student)
    )
    assert response.status_code == 400


async def test_only_admin_unflags(client, seed, employer, headers, session_factory):
    student = await seed.student()
    admin = await seed.admin()
    url = f"/api/v1/employers/{employer.employer.id}/flag"
    await client.post(url, json={"reason": "Suspicious"}, headers=headers(student))

    denied = await client.delete(url, headers=headers(student))
    assert denied.status_code == 403
    async with session_factory() as session:
        assert (await session.get(Employer, employer.employer.id)).is_flagged is True

    allowed = await client.delete(url, headers=headers(admin))
    assert allowed.status_code == 200
    assert allowed.json()["isFlagged"] is False
    assert allowed.json()["flagReason"] is None


async def test_flagged_list_is_admin_only(client, seed, employer, headers):
    admin = await seed.admin()
    await seed.job(employer)
    await seed.job(employer, title="Cashier")
    await client.post(
        f"/api/v1/employers/{employer.employer.id}/flag", json={"reason": "Spam"}, headers=headers(admin)
    )

    assert (await client.get("/api/v1/employers/flagged", headers=headers(employer))).status_code == 403

    response = await client.get("/api/v1/employers/flagged", headers=headers(admin))
    assert response.status_code == 200
    flagged = response.json()
    assert len(flagged) == 1
    assert flagged[0]["companyName"] == "Corner Cafe"
    assert flagged[0]["jobCount"] == 2


async def test_employer_profile_stats(client, seed, employer, headers):
    job = await seed.job(employer)
    await seed.job(employer, title="Cashier")
    await seed.application(job, await seed.student())
    await seed.application(job, await seed.student())

    response = await client.get(f"/api/v1/employers/{employer.employer.id}", headers=headers(employer))
    body = response.json()
    assert body["totalJobs"] == 2
    assert body["totalApplications"] == 2
    assert body["profile"]["companyName"] == "Corner Cafe"


async def test_only_owner_updates_profile(client, seed, employer, headers):
    rival = await seed.employer("Book Shop")
    url = f"/api/v1/employers/{employer.employer.id}"

    assert (await client.patch(url, json={"industry": "Food"}, headers=headers(rival))).status_code == 403

    response = await client.patch(url, json={"industry": "Food"}, headers=headers(employer))
    assert response.status_code == 200
    assert response.json()["industry"] == "Food"


async def test_verification_approval_marks_employer_verified(db, seed, employer, as_actor):
    admin = await seed.admin()
    service = VerificationService(db)

    request = await service.submit(as_actor(employer), business_license="BL-42")
    assert request.status == "PENDING"

    reviewed = await service.review(request.id, "approved", as_actor(admin))
    assert reviewed.status == "APPROVED"
    assert reviewed.reviewed_by == admin.id
    assert reviewed.reviewed_at is not None

    refreshed = (await db.execute(select(Employer).where(Employer.id == employer.employer.id))).scalar_one()
    assert refreshed.is_verified is True

    with pytest.raises(InvalidState):
        await service.review(request.id, "REJECTED", as_actor(admin))


async def test_rejection_leaves_employer_unverified(db, seed, employer, as_actor):
    admin = await seed.admin()
    service = VerificationService(db)
    request = await service.submit(as_actor(employer))

    await service.review(request.id, "REJECTED", as_actor(admin))
    profile = await EmployerService(db).get(employer.employer.id)
    assert profile.is_verified is False

    # A rejected employer may try again
    again = await service.submit(as_actor(employer))
    assert again.id != request.id


async def test_one_pending_request_per_employer(db, employer, as_actor):
    service = VerificationService(db)
    await service.submit(as_actor(employer))

    with pytest.raises(Conflict):
        await service.submit(as_actor(employer))


async def test_verified_employer_cannot_resubmit(db, seed, employer, as_actor):
    admin = await seed.admin()
    service = VerificationService(db)
    request = await service.submit(as_actor(employer))
    await service.review(request.id, "APPROVED", as_actor(admin))

    with pytest.raises(InvalidState):
        await service.submit(as_actor(employer))


async def test_verification_review_is_admin_only(db, employer, as_actor):
    service = VerificationService(db)
    request = await service.submit(as_actor(employer))

    with pytest.raises(Forbidden):
        await service.review(request.id, "APPROVED", as_actor(employer))


async def test_verification_decision_must_be_final(db, seed, employer, as_actor):
    admin = await seed.admin()
    service = VerificationService(db)
    request = await service.submit(as_actor(employer))

    with pytest.raises(InvalidInput):
        await service.review(request.id, "PENDING", as_actor(admin))


async def test_verification_over_http(client, seed, employer, headers):
    admin = await seed.admin()
    other = await seed.employer("Book Shop")

    created = await client.post(
        "/api/v1/verification",
        json={"businessLicense": "BL-1", "taxId": "TX-1", "verificationDocuments": ["license.pdf"]},
        headers=headers(employer),
    )
    assert created.status_code == 201
    request_id = created.json()["id"]
    assert created.json()["companyName"] == "Corner Cafe"

    duplicate = await client.post("/api/v1/verification", json={}, headers=headers(employer))
    assert duplicate.status_code == 400
    assert duplicate.json()["error"] == "conflict"

    assert (await client.get(f"/api/v1/verification/{request_id}", headers=headers(other))).status_code == 403
    assert (await client.get("/api/v1/verification", headers=headers(employer))).status_code == 403

    listed = await client.get("/api/v1/verification", params={"status": "pending"}, headers=headers(admin))
    assert [r["id"] for r in listed.json()] == [request_id]

    approved = await client.patch(
        f"/api/v1/verification/{request_id}", json={"status": "APPROVED"}, headers=headers(admin)
    )
    assert approved.status_code == 200
    assert approved.json()["status"] == "APPROVED"

    profile = await client.get(f"/api/v1/employers/{employer.employer.id}", headers=headers(admin))
    assert profile.json()["profile"]["isVerified"] is True

    second = await client.patch(
        f"/api/v1/verification/{request_id}", json={"status": "REJECTED"}, headers=headers(admin)
    )
    assert second.status_code == 400
    assert second.json()["error"] == "invalid_state"
