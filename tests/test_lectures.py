async def test_start_then_end_lecture(client, seeded):
    started = await client.post(f"/lectures/{seeded.lecture_id}/start")
    assert started.status_code == 200
    assert started.json()["status"] == "active"

    ended = await client.post(f"/lectures/{seeded.lecture_id}/end")
    assert ended.status_code == 200
    assert ended.json()["status"] == "completed"


async def test_cannot_end_a_scheduled_lecture(client, seeded):
    res = await client.post(f"/lectures/{seeded.lecture_id}/end")

    assert res.status_code == 409
    assert res.json()["detail"] == "cannot end a lecture that is scheduled"


async def test_cannot_start_twice(client, seeded):
    await client.post(f"/lectures/{seeded.lecture_id}/start")
    res = await client.post(f"/lectures/{seeded.lecture_id}/start")

    assert res.status_code == 409


async def test_unknown_lecture(client, seeded):
    res = await client.post("/lectures/does-not-exist/start")

    assert res.status_code == 404
    assert res.json()["detail"] == "Lecture not found."
