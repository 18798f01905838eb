from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

import httpx

from fakes import FakeNotesService
from notes_sync.auth import AuthState
from notes_sync.config import ClientSettings
from notes_sync.session import MemorySessionStore, SessionStore
from notes_sync.sync import build_view


class TestViewSynchronizer(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.service = FakeNotesService()
        self.session = MemorySessionStore()
        self.rendered = []
        self.view = build_view(
            ClientSettings(base_url="http://notes.test"),
            self.session,
            transport=self.service.transport,
            render=self.rendered.append,
        )

    async def asyncTearDown(self) -> None:
        await self.view.aclose()

    def _server_contents(self):
        return [n["content"] for n in self.service._sorted()]

    async def test_create_then_list_shows_exactly_the_new_note(self) -> None:
        ok = await self.view.create("buy milk", False, ["errand"])

        self.assertTrue(ok)
        self.assertEqual(len(self.view.notes), 1)
        note = self.view.notes[0]
        self.assertEqual((note.content, note.tags, note.pinned), ("buy milk", ["errand"], False))
        self.assertEqual(self.view.status.message, "1 note")
        self.assertFalse(self.view.status.is_error)
        self.assertEqual(
            [(r.method, r.url.path) for r in self.service.requests],
            [("POST", "/api/notes"), ("GET", "/api/notes")],
        )

    async def test_toggle_pin_sends_patch_and_refetches(self) -> None:
        self.service.add_note("walk dog", id=7)
        await self.view.refresh()
        (note,) = self.view.notes
        self.assertFalse(note.pinned)

        self.assertTrue(await self.view.toggle_pin(note))

        (patch,) = self.service.requests_to("PATCH", "/api/notes/7")
        self.assertEqual(json.loads(patch.content), {"pinned": True})
        self.assertTrue(self.view.notes[0].pinned)
        self.assertEqual(self.view.notes[0].id, 7)

    async def test_rendered_list_is_replaced_by_server_state(self) -> None:
        self.service.add_note("a")
        await self.view.refresh()
        # someone else writes meanwhile
        self.service.add_note("b")
        self.service.notes.pop(0)

        await self.view.create("c")

        self.assertEqual([n.content for n in self.view.notes], self._server_contents())
        self.assertEqual([n.content for n in self.rendered[-1]], ["c", "b"])

    async def test_blank_create_sets_error_status_without_requests(self) -> None:
        self.assertFalse(await self.view.create("   "))
        self.assertTrue(self.view.status.is_error)
        self.assertEqual(self.view.status.message, "Content is empty")
        self.assertEqual(self.service.requests, [])

    async def test_failed_delete_keeps_previous_list(self) -> None:
        self.service.add_note("keep me", id=1)
        await self.view.refresh()
        before = list(self.view.notes)
        self.service.fail[("DELETE", "/api/notes/1")] = 500

        self.assertFalse(await self.view.delete(1))

        self.assertEqual(self.view.notes, before)
        self.assertTrue(self.view.status.is_error)
        self.assertEqual(len(self.service.requests_to("GET", "/api/notes")), 1)

    async def test_delete_204_refetches(self) -> None:
        self.service.add_note("bye", id=1)
        await self.view.refresh()
        self.assertTrue(await self.view.delete(1))
        self.assertEqual(self.view.notes, [])
        self.assertEqual(self.view.status.message, "0 notes")

    async def test_failed_refetch_after_mutation_keeps_list(self) -> None:
        self.service.add_note("a", id=1)
        await self.view.refresh()
        before = list(self.view.notes)
        self.service.fail[("GET", "/api/notes")] = 502

        self.assertFalse(await self.view.edit(1, "changed", ["t"]))

        self.assertEqual(self.view.notes, before)
        self.assertTrue(self.view.status.is_error)
        self.assertEqual(self.service.notes[0]["content"], "changed")

    async def test_changes_are_display_only(self) -> None:
        self.service.history["3"] = "edited twice"
        self.assertEqual(await self.view.changes(3), "edited twice")
        self.assertEqual(await self.view.changes(4), "")
        self.assertEqual(self.view.status.message, "No changes")
        self.service.fail[("GET", "/api/notes-changes/3")] = 500
        self.assertIsNone(await self.view.changes(3))
        self.assertTrue(self.view.status.is_error)


class TestSessionTransitions(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.service = FakeNotesService(require_auth=True)
        self.service.accounts["ada"] = "pw"
        self.session = MemorySessionStore()
        self.view = build_view(ClientSettings(base_url="http://notes.test"), self.session, transport=self.service.transport)

    async def asyncTearDown(self) -> None:
        await self.view.aclose()

    async def test_signin_then_list(self) -> None:
        self.service.add_note("private")
        self.assertEqual(self.view.auth_state, AuthState.SIGNED_OUT)

        self.assertTrue(await self.view.signin("ada", "pw"))

        self.assertEqual(self.view.auth_state, AuthState.SIGNED_IN)
        self.assertEqual([n.content for n in self.view.notes], ["private"])

    async def test_signout_clears_session_and_next_list_has_no_credential(self) -> None:
        await self.view.signin("ada", "pw")
        self.service.add_note("private")
        await self.view.refresh()
        rendered = list(self.view.notes)

        self.assertFalse(await self.view.signout())

        self.assertIsNone(self.session.get())
        self.assertEqual(self.view.auth_state, AuthState.SIGNED_OUT)
        last = self.service.requests[-1]
        self.assertEqual((last.method, last.url.path), ("GET", "/api/notes"))
        self.assertNotIn("Authorization", last.headers)
        # 401 is surfaced as-is; the last good list stays rendered
        self.assertTrue(self.view.status.is_error)
        self.assertIn("401", self.view.status.message)
        self.assertEqual(self.view.notes, rendered)

    async def test_signup_duplicate_reports_and_stays_signed_out(self) -> None:
        self.assertFalse(await self.view.signup("ada", "pw"))

        self.assertTrue(self.view.status.is_error)
        self.assertIn("signing in", self.view.status.message)
        self.assertEqual(self.view.auth_state, AuthState.SIGNED_OUT)
        self.assertEqual([r.url.path for r in self.service.requests], ["/api/signup"])

    async def test_signup_new_account_signs_in_and_lists(self) -> None:
        self.assertTrue(await self.view.signup("bob", "pw2"))
        self.assertEqual(self.view.auth_state, AuthState.SIGNED_IN)
        self.assertEqual(
            [r.url.path for r in self.service.requests],
            ["/api/signup", "/api/signin", "/api/notes"],
        )

    async def test_signin_that_cannot_save_the_session_reports_and_stays_signed_out(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "not-a-dir"
            blocker.write_text("")
            session = SessionStore(blocker / "session.json")
            view = build_view(ClientSettings(base_url="http://notes.test"), session, transport=self.service.transport)
            try:
                self.assertFalse(await view.signin("ada", "pw"))
            finally:
                await view.aclose()
        self.assertTrue(view.status.is_error)
        self.assertIn("Could not save session", view.status.message)
        self.assertEqual(view.auth_state, AuthState.SIGNED_OUT)

    async def test_signout_that_cannot_remove_the_session_reports(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            # a directory where the session file should be cannot be unlinked
            session = SessionStore(Path(tmp))
            view = build_view(ClientSettings(base_url="http://notes.test"), session, transport=self.service.transport)
            try:
                self.assertFalse(await view.signout())
            finally:
                await view.aclose()
        self.assertTrue(view.status.is_error)
        self.assertIn("Could not remove session", view.status.message)
        self.assertEqual(view.auth_state, AuthState.SIGNED_OUT)

    async def test_auth_transport_failure_reports_and_stays_signed_out(self) -> None:
        def unreachable(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        view = build_view(
            ClientSettings(base_url="http://notes.test"), self.session, transport=httpx.MockTransport(unreachable)
        )
        try:
            for action in (view.signin, view.signup):
                with self.subTest(action=action.__name__):
                    self.assertFalse(await action("ada", "pw"))
                    self.assertTrue(view.status.is_error)
                    self.assertIn("Request failed", view.status.message)
                    self.assertEqual(view.auth_state, AuthState.SIGNED_OUT)
        finally:
            await view.aclose()
        self.assertIsNone(self.session.get())


if __name__ == "__main__":
    unittest.main(verbosity=2)
