import base64

import pytest
from sqlmodel import select

from campus_api import complaints
from campus_api.errors import BadRequestError
from campus_api.models import Complaint, StatusRecord

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


async def _all(session, model):
    result = await session.exec(select(model))
    return result.all()


@pytest.mark.asyncio
async def test_submit_creates_complaint_and_initial_status(client, database, complaint_form):
    resp = await client.post("/submit-complaint", data=complaint_form)
    assert resp.status_code == 201, resp.text
    assert resp.json() == {"message": "Complaint submitted successfully!"}

    async with database.session() as session:
        stored = await _all(session, Complaint)
        history = await _all(session, StatusRecord)

    assert len(stored) == 1
    assert len(history) == 1
    complaint = stored[0]
    assert complaint.status == "Yet to Begin"
    assert complaint.room_no == "A-204"
    assert history[0].status == "Yet to Begin"
    assert history[0].complaint_id == complaint.id
    assert history[0].complaint_text == complaint.complaint_text
    assert history[0].location == "hostel"
    assert history[0].sub_location == "Block A"


@pytest.mark.asyncio
@pytest.mark.parametrize("location", ["mess", "garden", "Mess"])
async def test_room_number_dropped_for_roomless_locations(client, complaint_form, location):
    complaint_form["location"] = location
    resp = await client.post("/submit-complaint", data=complaint_form)
    assert resp.status_code == 201, resp.text

    listed = (await client.get("/get-complaints")).json()
    assert listed[0]["roomNo"] is None
    assert listed[0]["location"] == location


@pytest.mark.asyncio
async def test_list_complaints_embeds_image_as_data_uri(client, complaint_form):
    resp = await client.post(
        "/submit-complaint",
        data=complaint_form,
        files={"image": ("fan.png", PNG_BYTES, "image/png")},
    )
    assert resp.status_code == 201, resp.text

    resp = await client.get("/get-complaints")
    assert resp.status_code == 200
    item = resp.json()[0]
    assert item["image"].startswith("data:image/png;base64,")
    assert base64.b64decode(item["image"].split(",", 1)[1]) == PNG_BYTES


@pytest.mark.asyncio
async def test_list_complaints_without_image(client, complaint_form):
    await client.post("/submit-complaint", data=complaint_form)

    items = (await client.get("/get-complaints")).json()
    assert len(items) == 1
    item = items[0]
    assert item["image"] is None
    assert item["username"] == "ravi"
    assert item["complaintText"] == "Ceiling fan not working"
    assert item["subLocation"] == "Block A"
    assert item["status"] == "Yet to Begin"
    assert item["id"]


@pytest.mark.asyncio
async def test_submit_rejects_unparseable_date(client, complaint_form):
    complaint_form["date"] = "last tuesday"
    resp = await client.post("/submit-complaint", data=complaint_form)
    assert resp.status_code == 400
    assert "Invalid date" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_submit_requires_complaint_text(client, complaint_form):
    del complaint_form["complaintText"]
    resp = await client.post("/submit-complaint", data=complaint_form)
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_identical_resubmission_creates_duplicates(client, complaint_form):
    await client.post("/submit-complaint", data=complaint_form)
    await client.post("/submit-complaint", data=complaint_form)

    items = (await client.get("/get-complaints")).json()
    assert len(items) == 2
    assert items[0]["id"] != items[1]["id"]


@pytest.mark.asyncio
async def test_list_complaints_is_single_pass(session):
    await complaints.submit_complaint(session, "ravi", "Leak", "2024-03-01", "hostel")

    views = await complaints.list_complaints(session)
    assert len(list(views)) == 1
    assert list(views) == []


@pytest.mark.asyncio
async def test_submit_stores_image_inline(session):
    image = complaints.ImageUpload(data=b"GIF89a", content_type="image/gif")
    complaint = await complaints.submit_complaint(
        session, "ravi", "Broken bench", "2024-03-02", "garden", room_no="12", image=image
    )

    assert complaint.room_no is None
    assert complaint.image_data == b"GIF89a"
    assert complaint.image_content_type == "image/gif"
    assert complaints.image_data_uri(complaint) == "data:image/gif;base64,R0lGODlh"


def test_parse_complaint_date_treats_naive_as_utc():
    assert complaints.parse_complaint_date("2024-03-01") == complaints.parse_complaint_date(
        "2024-03-01T00:00:00Z"
    )
    assert complaints.parse_complaint_date("2024-03-01T05:30:00+05:30") == complaints.parse_complaint_date(
        "2024-03-01T00:00:00"
    )


def test_parse_complaint_date_rejects_garbage():
    with pytest.raises(BadRequestError):
        complaints.parse_complaint_date("not-a-date")


def _broken_snapshot(complaint, timestamp):
    # complaint_text is NOT NULL, so the commit fails after both rows are staged
    return StatusRecord(
        complaint_id=complaint.id,
        complaint_text=None,
        location=complaint.location,
        sub_location=complaint.sub_location,
        status=complaint.status,
        updated_at=timestamp,
    )


@pytest.mark.asyncio
async def test_failed_submission_rolls_back_both_rows(client, database, complaint_form, monkeypatch):
    monkeypatch.setattr(complaints, "_snapshot", _broken_snapshot)

    resp = await client.post("/submit-complaint", data=complaint_form)
    assert resp.status_code == 500
    assert resp.json()["detail"] == "Failed to submit complaint"

    async with database.session() as session:
        assert await _all(session, Complaint) == []
        assert await _all(session, StatusRecord) == []


@pytest.mark.asyncio
async def test_empty_image_part_is_not_stored(client, complaint_form):
    resp = await client.post(
        "/submit-complaint",
        data=complaint_form,
        files={"image": ("empty.png", b"", "image/png")},
    )
    assert resp.status_code == 201, resp.text

    items = (await client.get("/get-complaints")).json()
    assert items[0]["image"] is None
