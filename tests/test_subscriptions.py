from tests.conftest import API


async def test_subscription_toggle_and_listings(client, make_user):
    alice, a_headers = await make_user("alice")
    bob, b_headers = await make_user("bob")

    first = await client.post(f"{API}/subscriptions/c/{alice['id']}", headers=b_headers)
    assert first.json()["data"] == {"isSubscribed": True}

    subscribers = await client.get(f"{API}/subscriptions/c/{alice['id']}", headers=a_headers)
    page = subscribers.json()["data"]
    assert page["totalItems"] == 1
    assert page["items"][0]["user"]["username"] == "bob"
    assert "email" not in page["items"][0]["user"]

    channels = await client.get(f"{API}/subscriptions/u/{bob['id']}", headers=b_headers)
    assert channels.json()["data"]["items"][0]["user"]["id"] == alice["id"]

    second = await client.post(f"{API}/subscriptions/c/{alice['id']}", headers=b_headers)
    assert second.json()["data"] == {"isSubscribed": False}

    subscribers = await client.get(f"{API}/subscriptions/c/{alice['id']}", headers=a_headers)
    assert subscribers.json()["data"]["totalItems"] == 0


async def test_cannot_subscribe_to_self(client, make_user):
    alice, headers = await make_user("alice")

    response = await client.post(f"{API}/subscriptions/c/{alice['id']}", headers=headers)

    assert response.status_code == 400
