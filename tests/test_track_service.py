import unittest

from spotibye_api.app.core.errors import TrackNotFoundError
from spotibye_api.app.schemas.track import TrackCreate, TrackFilter, TrackUpdate
from spotibye_api.app.services.track_service import TrackService
from tests.support import TempDatabaseMixin, track_payload


class TestTrackService(TempDatabaseMixin, unittest.IsolatedAsyncioTestCase):
    async def _create(self, **overrides):
        return await TrackService.create_track(TrackCreate.model_validate(track_payload(**overrides)))

    async def test_create_forces_favorite_false(self) -> None:
        track = await self._create(isFavorite=True)

        self.assertIsNotNone(track.id)
        self.assertFalse(track.is_favorite)
        self.assertEqual(track.created_at, track.updated_at)
        self.assertEqual(track.audio_url, "http://x/a.mp3")

    async def test_get_track_unknown_id(self) -> None:
        with self.assertRaises(TrackNotFoundError) as ctx:
            await TrackService.get_track(404)
        self.assertIn("404", str(ctx.exception))

    async def test_update_changes_only_supplied_fields(self) -> None:
        track = await self._create(description="First")

        updated = await TrackService.update_track(track.id, TrackUpdate(category="Jazz"))

        self.assertEqual(updated.category, "Jazz")
        self.assertEqual(updated.title, "Test Track")
        self.assertEqual(updated.description, "First")
        self.assertEqual(updated.created_at, track.created_at)
        self.assertGreaterEqual(updated.updated_at, track.updated_at)

    async def test_update_ignores_audio_url_and_duration(self) -> None:
        track = await self._create()
        changes = TrackUpdate.model_validate({"audioUrl": "http://x/b.mp3", "duration": 1, "title": "New"})

        updated = await TrackService.update_track(track.id, changes)

        self.assertEqual(updated.title, "New")
        self.assertEqual(updated.audio_url, "http://x/a.mp3")
        self.assertEqual(updated.duration, 180)

    async def test_update_honors_explicit_false_favorite(self) -> None:
        track = await self._create()
        await TrackService.toggle_favorite(track.id)

        updated = await TrackService.update_track(track.id, TrackUpdate(is_favorite=False))
        self.assertFalse(updated.is_favorite)

        unchanged = await TrackService.update_track(track.id, TrackUpdate(title="Again"))
        self.assertFalse(unchanged.is_favorite)

    async def test_update_unknown_id(self) -> None:
        with self.assertRaises(TrackNotFoundError):
            await TrackService.update_track(7, TrackUpdate(title="x"))

    async def test_delete_unknown_id_leaves_store_unchanged(self) -> None:
        await self._create()

        with self.assertRaises(TrackNotFoundError):
            await TrackService.delete_track(999)
        self.assertEqual(len(await TrackService.list_tracks()), 1)

    async def test_delete_then_get_fails(self) -> None:
        track = await self._create()

        await TrackService.delete_track(track.id)

        with self.assertRaises(TrackNotFoundError):
            await TrackService.get_track(track.id)

    async def test_toggle_twice_restores_track(self) -> None:
        track = await self._create()

        once = await TrackService.toggle_favorite(track.id)
        twice = await TrackService.toggle_favorite(track.id)

        self.assertTrue(once.is_favorite)
        ignore = {"updated_at"}
        self.assertEqual(twice.model_dump(exclude=ignore), track.model_dump(exclude=ignore))

    async def test_toggle_unknown_id(self) -> None:
        with self.assertRaises(TrackNotFoundError):
            await TrackService.toggle_favorite(1)

    async def test_list_filter_precedence(self) -> None:
        pop = await self._create(title="Pop Song", artist="Singer", category="Pop")
        jazz = await self._create(title="Blue", artist="Trio", category="Jazz")
        await TrackService.toggle_favorite(jazz.id)

        async def titles(**kwargs):
            return [t.title for t in await TrackService.list_tracks(TrackFilter(**kwargs))]

        self.assertEqual(await titles(), ["Pop Song", "Blue"])
        self.assertEqual(await titles(category="Pop"), ["Pop Song"])
        self.assertEqual(await titles(category="pop"), [])
        self.assertEqual(await titles(search="singer", category="Jazz"), ["Pop Song"])
        self.assertEqual(await titles(favorites_only=True, search="singer"), ["Blue"])
        self.assertEqual(await titles(search="   ", category="Pop"), ["Pop Song"])
        self.assertEqual(await titles(search="", category=" "), ["Pop Song", "Blue"])
        self.assertEqual(pop.category, "Pop")


if __name__ == "__main__":
    unittest.main()
