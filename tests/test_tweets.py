from tests.conftest import API


async def test_tweet_lifecycle(client, make_user):
    user, headers = await make_user("alice")
    _, other_headers = await make_user("bob")

    created = await client.post(f"{API}/tweets", json={"content": "first post"}, headers=headers)
    assert created.status_code == 201
    tweet = created.json()["data"]
    assert tweet["owner"]["username"] == "alice"

    listing = await client.get(f"{API}/tweets/user/{user['id']}", headers=other_headers)
    assert listing.json()["data"]["totalItems"] == 1

    forbidden = await client.patch(f"{API}/tweets/{tweet['id']}", json={"content": "hacked"}, headers=other_headers)
    assert forbidden.status_code == 403

    updated = await client.patch(f"{API}/tweets/{tweet['id']}", json={"content": "edited"}, headers=headers)
    assert updated.json()["data"]["content"] == "edited"

    assert (await client.delete(f"{API}/tweets/{tweet['id']}", headers=other_headers)).status_code == 403
    assert (await client.delete(f"{API}/tweets/{tweet['id']}", headers=headers)).status_code == 200

    listing = await client.get(f"{API}/tweets/user/{user['id']}", headers=headers)
    assert listing.json()["data"]["totalItems"] == 0


async def test_blank_tweet_rejected(client, make_user):
    _, headers = await make_user("alice")

    response = await client.post(f"{API}/tweets", json={"content": ""}, headers=headers)

    assert response.status_code == 400
