"""API tests for releases: ownership, review workflow and cover uploads."""

import json

import pytest
from httpx import AsyncClient
from sqlmodel import select

from streamo.core.database.entities.notifications import Notification
from streamo.core.database.entities.releases import Release

pytestmark = pytest.mark.asyncio

RELEASES = "/api/v1/releases"
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


def release_payload(**overrides):
    payload = {
        "title": "First Light",
        "artist": "Test Artist",
        "release_type": "EP",
        "genre": "Pop",
        "release_date": "2024-03-01",
        "stores": ["Spotify", "Apple Music"],
        "tracks": [{"title": "Intro", "isrc": "US-ABC-24-00001"}],
    }
    payload.update(overrides)
    return payload


async def create_release(client: AsyncClient, headers, **overrides) -> dict:
    response = await client.post(f"{RELEASES}/json", json=release_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


class TestCreate:
    async def test_create_multipart_with_cover(self, client: AsyncClient, artist, artist_headers):
        response = await client.post(
            RELEASES,
            data={"data": json.dumps(release_payload())},
            files={"cover_art": ("cover.png", PNG, "image/png")},
            headers=artist_headers,
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "submitted"
        assert body["user_id"] == artist.id
        assert body["release_type"] == "EP"
        assert body["cover_art"].startswith("/uploads/covers/cover-")
        assert body["tracks"][0]["isrc"] == "US-ABC-24-00001"

    async def test_create_draft(self, client: AsyncClient, artist_headers):
        body = await create_release(client, artist_headers, draft=True)
        assert body["status"] == "draft"

    async def test_create_with_invalid_json_field(self, client: AsyncClient, artist_headers):
        response = await client.post(RELEASES, data={"data": json.dumps({"artist": "No Title"})}, headers=artist_headers)
        assert response.status_code == 422

    async def test_cover_must_be_an_image(self, client: AsyncClient, artist_headers):
        response = await client.post(
            RELEASES,
            data={"data": json.dumps(release_payload())},
            files={"cover_art": ("cover.pdf", b"%PDF-1.4", "application/pdf")},
            headers=artist_headers,
        )
        assert response.status_code == 400


class TestVisibility:
    async def test_owners_see_only_their_releases(self, client: AsyncClient, artist_headers, other_headers, admin_headers):
        mine = await create_release(client, artist_headers, title="Mine")
        await create_release(client, other_headers, title="Theirs")

        own_list = await client.get(RELEASES, headers=artist_headers)
        assert [r["title"] for r in own_list.json()["items"]] == ["Mine"]

        staff_list = await client.get(RELEASES, headers=admin_headers)
        assert staff_list.json()["total"] == 2

        hidden = await client.get(f"{RELEASES}/{mine['id']}", headers=other_headers)
        assert hidden.status_code == 404

    async def test_filters_and_search(self, client: AsyncClient, artist_headers):
        await create_release(client, artist_headers, title="Summer Album", release_type="Album")
        await create_release(client, artist_headers, title="Winter Single", release_type="Single", draft=True)

        albums = await client.get(RELEASES, params={"release_type": "Album"}, headers=artist_headers)
        assert [r["title"] for r in albums.json()["items"]] == ["Summer Album"]

        drafts = await client.get(RELEASES, params={"status": "draft"}, headers=artist_headers)
        assert [r["title"] for r in drafts.json()["items"]] == ["Winter Single"]

        search = await client.get(RELEASES, params={"search": "winter"}, headers=artist_headers)
        assert search.json()["total"] == 1

    async def test_latest(self, client: AsyncClient, artist_headers):
        for index in range(3):
            await create_release(client, artist_headers, title=f"Release {index}")
        response = await client.get(f"{RELEASES}/latest", params={"limit": 2}, headers=artist_headers)
        assert response.status_code == 200
        assert len(response.json()) == 2


class TestEditing:
    async def test_owner_updates_submitted_release(self, client: AsyncClient, artist_headers):
        release = await create_release(client, artist_headers)
        response = await client.put(
            f"{RELEASES}/{release['id']}",
            data={"data": json.dumps({"title": "Renamed", "genre": None})},
            headers=artist_headers,
        )
        assert response.status_code == 200
        assert response.json()["title"] == "Renamed"
        assert response.json()["genre"] is None

    async def test_approved_release_is_locked_for_owner(
        self, client: AsyncClient, artist_headers, admin_headers
    ):
        release = await create_release(client, artist_headers)
        await client.patch(f"{RELEASES}/{release['id']}/status", json={"status": "approved"}, headers=admin_headers)

        update = await client.put(
            f"{RELEASES}/{release['id']}", data={"data": json.dumps({"title": "Late"})}, headers=artist_headers
        )
        assert update.status_code == 403
        delete = await client.delete(f"{RELEASES}/{release['id']}", headers=artist_headers)
        assert delete.status_code == 403

    async def test_editing_rejected_release_resubmits(self, client: AsyncClient, artist_headers, admin_headers):
        release = await create_release(client, artist_headers)
        await client.patch(
            f"{RELEASES}/{release['id']}/status",
            json={"status": "rejected", "rejection_reason": "Blurry cover"},
            headers=admin_headers,
        )
        response = await client.put(
            f"{RELEASES}/{release['id']}", data={"data": json.dumps({"title": "Fixed"})}, headers=artist_headers
        )
        assert response.status_code == 200
        assert response.json()["status"] == "submitted"
        assert response.json()["rejection_reason"] is None

    async def test_delete_own_draft(self, client: AsyncClient, artist_headers, session_factory):
        release = await create_release(client, artist_headers, draft=True)
        response = await client.delete(f"{RELEASES}/{release['id']}", headers=artist_headers)
        assert response.status_code == 200
        async with session_factory() as session:
            assert await session.get(Release, release["id"]) is None


class TestReview:
    async def test_status_change_requires_staff(self, client: AsyncClient, artist_headers):
        release = await create_release(client, artist_headers)
        response = await client.patch(
            f"{RELEASES}/{release['id']}/status", json={"status": "approved"}, headers=artist_headers
        )
        assert response.status_code == 403

    async def test_rejection_notifies_owner(self, client: AsyncClient, artist, artist_headers, admin_headers, session_factory):
        release = await create_release(client, artist_headers)
        response = await client.patch(
            f"{RELEASES}/{release['id']}/status",
            json={"status": "rejected", "rejection_reason": "Missing ISRC"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["rejection_reason"] == "Missing ISRC"

        async with session_factory() as session:
            notes = (await session.exec(select(Notification).where(Notification.user_id == artist.id))).all()
        assert len(notes) == 1
        assert notes[0].type == "error"
        assert notes[0].related_to == "release"
        assert notes[0].related_item_id == release["id"]
        assert "Missing ISRC" in notes[0].message
