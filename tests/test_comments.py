import uuid

from tests.conftest import API


async def test_owner_flow_between_two_users(client, make_user, publish_video):
    _, a_headers = await make_user("alice")
    bob, b_headers = await make_user("bob")
    video = await publish_video(a_headers)

    created = await client.post(
        f"{API}/comments/{video['id']}", json={"content": "Nice one"}, headers=b_headers
    )
    assert created.status_code == 201
    comment = created.json()["data"]
    assert comment["ownerId"] == bob["id"]
    assert comment["owner"]["username"] == "bob"

    deleted = await client.delete(f"{API}/comments/{comment['id']}", headers=a_headers)
    assert deleted.status_code == 200

    listing = await client.get(f"{API}/comments/{video['id']}", headers=a_headers)
    assert listing.json()["data"]["totalItems"] == 0

    hijack = await client.delete(f"{API}/videos/{video['id']}", headers=b_headers)
    assert hijack.status_code == 403
    assert (await client.get(f"{API}/videos/{video['id']}", headers=a_headers)).status_code == 200


async def test_list_comments_paginates_newest_first(client, make_user, publish_video):
    _, headers = await make_user("alice")
    video = await publish_video(headers)
    for n in range(3):
        await client.post(f"{API}/comments/{video['id']}", json={"content": f"comment {n}"}, headers=headers)

    response = await client.get(f"{API}/comments/{video['id']}", params={"limit": 2}, headers=headers)

    page = response.json()["data"]
    assert page["totalItems"] == 3
    assert page["totalPages"] == 2
    assert len(page["items"]) == 2
    assert set(page["items"][0]["owner"]) == {"id", "username", "avatar"}


async def test_comments_on_missing_video(client, make_user):
    _, headers = await make_user("alice")
    missing = uuid.uuid4()

    listed = await client.get(f"{API}/comments/{missing}", headers=headers)
    added = await client.post(f"{API}/comments/{missing}", json={"content": "hi"}, headers=headers)

    assert listed.status_code == 404
    assert added.status_code == 404


async def test_blank_comment_rejected(client, make_user, publish_video):
    _, headers = await make_user("alice")
    video = await publish_video(headers)

    response = await client.post(f"{API}/comments/{video['id']}", json={"content": "   "}, headers=headers)

    assert response.status_code == 400


async def test_only_author_updates_comment(client, make_user, publish_video):
    _, a_headers = await make_user("alice")
    _, b_headers = await make_user("bob")
    video = await publish_video(a_headers)
    created = await client.post(f"{API}/comments/{video['id']}", json={"content": "first"}, headers=b_headers)
    comment_id = created.json()["data"]["id"]

    by_video_owner = await client.patch(f"{API}/comments/{comment_id}", json={"content": "edited"}, headers=a_headers)
    by_author = await client.patch(f"{API}/comments/{comment_id}", json={"content": "edited"}, headers=b_headers)

    assert by_video_owner.status_code == 403
    assert by_author.status_code == 200
    assert by_author.json()["data"]["content"] == "edited"


async def test_stranger_cannot_delete_comment(client, make_user, publish_video):
    _, a_headers = await make_user("alice")
    _, b_headers = await make_user("bob")
    _, c_headers = await make_user("carol")
    video = await publish_video(a_headers)
    created = await client.post(f"{API}/comments/{video['id']}", json={"content": "hello"}, headers=b_headers)
    comment_id = created.json()["data"]["id"]

    response = await client.delete(f"{API}/comments/{comment_id}", headers=c_headers)

    assert response.status_code == 403
    assert (await client.delete(f"{API}/comments/{comment_id}", headers=b_headers)).status_code == 200
    assert (await client.delete(f"{API}/comments/{comment_id}", headers=b_headers)).status_code == 404
