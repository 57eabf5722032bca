"""Review halves, rating averages and read scoping."""

import uuid

import pytest
from sqlalchemy import select

from shiftlink.core.exceptions import Forbidden, InvalidInput, InvalidState, NotFound
from shiftlink.core.security import Role
from shiftlink.models.review import Review
from shiftlink.services.review_service import ReviewService, round_rating


@pytest.fixture
async def completed(seed):
    employer = await seed.employer("Corner Cafe")
    student = await seed.student("Aiko")
    job = await seed.job(employer)
    application = await seed.application(job, student, status="APPROVED", is_completed=True)
    return {"employer": employer, "student": student, "job": job, "application": application}


@pytest.mark.parametrize(
    "value, expected",
    [(None, 0.0), (4.0, 4.0), (4.25, 4.3), (4.15, 4.2), (3.333333, 3.3)],
)
def test_round_rating(value, expected):
    assert round_rating(value) == expected


async def test_first_half_creates_row(db, completed, as_actor):
    review = await ReviewService(db).submit(
        completed["application"].id, "employer", 4.5, "Reliable", as_actor(completed["employer"])
    )

    assert review.employer_rating == 4.5
    assert review.employer_comment == "Reliable"
    assert review.employer_reviewed_at is not None
    assert review.student_rating is None
    assert review.student_reviewed_at is None
    assert review.student_id == completed["student"].student.id
    assert review.employer_id == completed["employer"].employer.id


async def test_second_half_updates_same_row(db, completed, as_actor):
    service = ReviewService(db)
    first = await service.submit(
        completed["application"].id, "employer", 4.5, None, as_actor(completed["employer"])
    )
    second = await service.submit(
        completed["application"].id, "student", 5, "Great boss", as_actor(completed["student"])
    )

    assert second.id == first.id
    assert second.employer_rating == 4.5
    assert second.student_rating == 5.0
    assert second.student_reviewed_at is not None
    assert second.employer_reviewed_at is not None


async def test_resubmitting_a_half_overwrites_it(db, completed, as_actor):
    service = ReviewService(db)
    student = as_actor(completed["student"])
    await service.submit(completed["application"].id, "student", 2, "Meh", student)
    review = await service.submit(completed["application"].id, "student", 4, "Better", student)

    assert review.student_rating == 4.0
    assert review.student_comment == "Better"


async def test_review_requires_completion(db, seed, as_actor):
    employer = await seed.employer()
    student = await seed.student()
    job = await seed.job(employer)
    application = await seed.application(job, student, status="APPROVED", is_completed=False)

    with pytest.raises(InvalidState):
        await ReviewService(db).submit(application.id, "student", 5, None, as_actor(student))


async def test_review_missing_application(db, completed, as_actor):
    with pytest.raises(NotFound):
        await ReviewService(db).submit(uuid.uuid4(), "student", 5, None, as_actor(completed["student"]))


async def test_review_authorship(db, seed, completed, as_actor):
    service = ReviewService(db)
    application_id = completed["application"].id

    # Each half belongs to exactly one party
    with pytest.raises(Forbidden):
        await service.submit(application_id, "student", 5, None, as_actor(completed["employer"]))
    with pytest.raises(Forbidden):
        await service.submit(application_id, "employer", 5, None, as_actor(completed["student"]))

    stranger = await seed.student("Carla")
    with pytest.raises(Forbidden):
        await service.submit(application_id, "student", 5, None, as_actor(stranger))


@pytest.mark.parametrize("rating", [0, 0.5, 5.5, -1, 10])
async def test_rating_out_of_bounds(db, completed, as_actor, rating):
    with pytest.raises(InvalidInput):
        await ReviewService(db).submit(
            completed["application"].id, "student", rating, None, as_actor(completed["student"])
        )


async def test_unknown_review_type(db, completed, as_actor):
    with pytest.raises(InvalidInput):
        await ReviewService(db).submit(
            completed["application"].id, "admin", 5, None, as_actor(completed["student"])
        )


async def test_average_with_no_reviews_is_zero(db, completed):
    service = ReviewService(db)
    assert await service.get_average_rating(completed["student"].student.id, Role.STUDENT) == 0.0
    assert await service.get_average_rating(completed["employer"].employer.id, Role.EMPLOYER) == 0.0


async def test_average_of_four_five_three(db, seed, as_actor):
    employer = await seed.employer()
    student = await seed.student()
    service = ReviewService(db)

    for rating in (4, 5, 3):
        job = await seed.job(employer, title=f"Shift {rating}")
        application = await seed.application(job, student, status="APPROVED", is_completed=True)
        await service.submit(application.id, "student", rating, None, as_actor(student))

    assert await service.get_average_rating(employer.employer.id, Role.EMPLOYER) == 4.0
    # Only the opposite half counts toward the student's own rating
    assert await service.get_average_rating(student.student.id, Role.STUDENT) == 0.0


async def test_reviewed_at_set_iff_rating_set(db, completed, as_actor):
    review = await ReviewService(db).submit(
        completed["application"].id, "student", 3, None, as_actor(completed["student"])
    )

    assert (review.student_reviewed_at is None) == (review.student_rating is None)
    assert (review.employer_reviewed_at is None) == (review.employer_rating is None)


async def test_list_is_scoped_to_the_caller(db, seed, completed, as_actor):
    service = ReviewService(db)
    await service.submit(completed["application"].id, "student", 5, None, as_actor(completed["student"]))

    other_employer = await seed.employer("Book Shop")
    other_student = await seed.student("Bruno")
    job = await seed.job(other_employer)
    other_application = await seed.application(job, other_student, status="APPROVED", is_completed=True)
    await service.submit(other_application.id, "employer", 4, None, as_actor(other_employer))

    mine = await service.list(as_actor(completed["student"]))
    assert [r.application_id for r in mine] == [completed["application"].id]

    # Filtering by someone else's id cannot widen the scope
    filtered = await service.list(as_actor(completed["student"]), student_id=other_student.student.id)
    assert filtered == []

    admin = await seed.admin()
    assert len(await service.list(as_actor(admin))) == 2


async def test_subject_reviews_visible_to_subject_and_admin(db, seed, completed, as_actor):
    service = ReviewService(db)
    await service.submit(completed["application"].id, "student", 5, "Kind", as_actor(completed["student"]))
    employer_id = completed["employer"].employer.id

    reviews, average = await service.for_subject(employer_id, Role.EMPLOYER, as_actor(completed["employer"]))
    assert len(reviews) == 1
    assert average == 5.0

    admin = await seed.admin()
    reviews, _ = await service.for_subject(employer_id, Role.EMPLOYER, as_actor(admin))
    assert len(reviews) == 1

    with pytest.raises(Forbidden):
        await service.for_subject(employer_id, Role.EMPLOYER, as_actor(completed["student"]))


async def test_flag_review(db, completed, as_actor):
    service = ReviewService(db)
    review = await service.submit(
        completed["application"].id, "student", 1, "Rude", as_actor(completed["student"])
    )

    flagged = await service.flag(review.id, "Abusive language", as_actor(completed["employer"]))
    assert flagged.is_flagged is True
    assert flagged.flag_reason == "Abusive language"


async def test_concurrent_first_write_merges_into_one_row(
    db, session_factory, completed, as_actor, monkeypatch
):
    application_id = completed["application"].id
    service = ReviewService(db)
    lookup = service._find_by_application
    calls = []

    async def lookup_then_lose_race(app_id):
        calls.append(app_id)
        if len(calls) == 1:
            # The employer's half lands from another request after our existence check
            async with session_factory() as other:
                await ReviewService(other).submit(
                    app_id, "employer", 4.0, "On time", as_actor(completed["employer"])
                )
            return None
        return await lookup(app_id)

    monkeypatch.setattr(service, "_find_by_application", lookup_then_lose_race)

    review = await service.submit(application_id, "student", 5, "Great", as_actor(completed["student"]))

    assert len(calls) == 2
    assert review.student_rating == 5.0
    assert review.employer_rating == 4.0
    assert review.employer_comment == "On time"

    async with session_factory() as fresh:
        rows = (await fresh.execute(select(Review).where(Review.application_id == application_id))).scalars().all()
    assert len(rows) == 1
    assert rows[0].id == review.id
    assert (rows[0].student_rating, rows[0].employer_rating) == (5.0, 4.0)
