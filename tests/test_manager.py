import unittest

from docportal.auth import BackendTokenStore, MemoryTokenStore
from docportal.config import PortalSettings
from docportal.controller import PortalController
from docportal.errors import PreconditionError, ResolutionExhaustedError
from docportal.manager import PortalManager
from docportal.models import DirectoryEntry, JobState


class FakeBackend:
    """Records every invoke; handlers map command -> value or callable(args)."""

    def __init__(self, handlers=None) -> None:
        self.calls = []
        self.handlers = dict(handlers or {})

    async def invoke(self, command, args=None):
        self.calls.append((command, args))
        if command not in self.handlers:
            raise RuntimeError(f"command {command} not found")
        handler = self.handlers[command]
        if callable(handler):
            return handler(args)
        return handler


async def _no_sleep(delay):
    return None


def _manager(backend, token="tok", **kwargs):
    controller = PortalController.from_backend(backend)
    return PortalManager.from_controller(
        controller,
        MemoryTokenStore(token),
        sleep=_no_sleep,
        **kwargs,
    )


class TestPortalManagerWiring(unittest.IsolatedAsyncioTestCase):
    async def test_constructor_builds_stack_from_settings(self) -> None:
        backend = FakeBackend()
        settings = PortalSettings(poll_interval=0.25, session_key="k")

        mgr = PortalManager(backend, settings=settings)

        self.assertIs(mgr.settings, settings)
        self.assertEqual(mgr.poller.interval, 0.25)
        self.assertIsInstance(mgr.session.store, BackendTokenStore)
        self.assertEqual(mgr.session.store.key, "k")

    async def test_default_token_store_reads_backend_keyring(self) -> None:
        backend = FakeBackend({"session_store_get": "saved"})
        mgr = PortalManager.from_controller(PortalController.from_backend(backend))

        self.assertEqual(await mgr.session.get_token(), "saved")
        self.assertEqual(
            backend.calls,
            [("session_store_get", {"key": "vaultguard_session_token"})],
        )


class TestPortalManagerReads(unittest.IsolatedAsyncioTestCase):
    async def test_load_drives_stores_result(self) -> None:
        backend = FakeBackend({"list_drives": [{"id": "C:", "total_gb": 100, "free_gb": 40}]})
        mgr = _manager(backend)

        drives = await mgr.load_drives()

        self.assertEqual(drives[0].used_gb, 60.0)
        self.assertEqual(mgr.store.drives(), tuple(drives))

    async def test_reads_degrade_to_empty_results(self) -> None:
        mgr = _manager(FakeBackend())

        with self.assertLogs("docportal.manager", level="WARNING"):
            self.assertEqual(await mgr.load_drives(), [])
            self.assertEqual(await mgr.search("report"), [])
            self.assertEqual(await mgr.search_by_tag("star"), [])
            self.assertEqual(await mgr.paths_by_tag("star"), [])
            self.assertEqual(await mgr.storage_info(), [])
            self.assertEqual(await mgr.indexing_summary(), [])
            self.assertEqual(await mgr.refresh_directory("/data"), [])
        self.assertEqual(mgr.store.drives(), ())

    async def test_open_directory_is_cached(self) -> None:
        backend = FakeBackend({"read_dir": [{"path": "/data/a", "size": 1}]})
        mgr = _manager(backend)

        first = await mgr.open_directory("/data")
        second = await mgr.open_directory("/data/")

        self.assertEqual(first, second)
        self.assertEqual(len(backend.calls), 1)
        self.assertEqual(first, [DirectoryEntry.create("/data/a")])

    async def test_refresh_failure_keeps_cached_listing(self) -> None:
        mgr = _manager(FakeBackend())
        mgr.store.set_listing("/data", [DirectoryEntry.create("/data/a")])

        with self.assertLogs("docportal.manager", level="WARNING"):
            await mgr.refresh_directory("/data")

        self.assertEqual(len(mgr.store.listing("/data")), 1)

    async def test_search_uses_configured_limit(self) -> None:
        backend = FakeBackend({"search_files": []})
        mgr = _manager(backend, settings=PortalSettings(search_limit=25))

        await mgr.search("report")

        self.assertEqual(
            backend.calls[0],
            ("search_files", {"session_token": "tok", "q": "report", "limit": 25, "offset": 0}),
        )

    async def test_load_tags_failure_returns_cached(self) -> None:
        mgr = _manager(FakeBackend())
        mgr.store.set_tags("/data/a", ["imp"])

        with self.assertLogs("docportal.manager", level="WARNING"):
            self.assertEqual(await mgr.load_tags("/data/a"), ("imp",))
            self.assertEqual(await mgr.load_tags("/data/b"), ())

    async def test_load_tags_caches(self) -> None:
        backend = FakeBackend({"fs_list_tags_by_session": [["/data/a", "star"], ["/data/a", "imp"]]})
        mgr = _manager(backend)

        self.assertEqual(await mgr.load_tags("/data/a"), ("star", "imp"))
        self.assertEqual(mgr.store.tags_for("/data/a"), ("star", "imp"))


class TestPortalManagerSession(unittest.IsolatedAsyncioTestCase):
    async def test_restore_session_returns_profile(self) -> None:
        backend = FakeBackend({"validate_session": {"user": {"id": 1, "name": "Ana"}}})
        mgr = _manager(backend)

        self.assertEqual(await mgr.restore_session(), {"id": 1, "name": "Ana"})
        self.assertEqual(await mgr.session.get_token(), "tok")

    async def test_rejected_session_is_invalidated(self) -> None:
        backend = FakeBackend()
        mgr = _manager(backend)

        with self.assertLogs("docportal.manager", level="WARNING"):
            self.assertIsNone(await mgr.restore_session())

        self.assertIsNone(await mgr.session.get_token())
        with self.assertRaises(PreconditionError):
            await mgr.add_tag("/data/a", "star")

    async def test_rejection_clears_backend_keyring(self) -> None:
        backend = FakeBackend({"session_store_get": "stale", "session_store_clear": True})
        mgr = PortalManager.from_controller(PortalController.from_backend(backend))

        with self.assertLogs("docportal.manager", level="WARNING"):
            await mgr.restore_session()

        self.assertIn(
            ("session_store_clear", {"key": "vaultguard_session_token"}),
            backend.calls,
        )

    async def test_no_saved_token_calls_nothing(self) -> None:
        backend = FakeBackend()
        mgr = _manager(backend, token=None)

        self.assertIsNone(await mgr.restore_session())
        self.assertEqual(backend.calls, [])


class TestPortalManagerMutationsAndIndexing(unittest.IsolatedAsyncioTestCase):
    async def test_mutation_failure_raises(self) -> None:
        mgr = _manager(FakeBackend())
        with self.assertRaises(ResolutionExhaustedError):
            await mgr.delete("/data/a")

    async def test_mutations_require_session(self) -> None:
        backend = FakeBackend()
        mgr = _manager(backend, token=None)

        with self.assertRaises(PreconditionError):
            await mgr.add_tag("/data/a", "star")
        with self.assertRaises(PreconditionError):
            await mgr.index("/data")
        self.assertEqual(backend.calls, [])

    async def test_create_directory_relists_cached_parent(self) -> None:
        backend = FakeBackend(
            {
                "fs_mkdir_by_session": True,
                "read_dir": [{"path": "/data/new", "is_dir": True}],
            }
        )
        mgr = _manager(backend)
        mgr.store.set_listing("/data", [])

        outcome = await mgr.create_directory("/data/new")

        self.assertEqual(outcome.refreshed, ["/data"])
        self.assertTrue(mgr.store.listing("/data")[0].is_dir)

    async def test_index_all_drives(self) -> None:
        backend = FakeBackend(
            {
                "index_all_drives_start": "job-9",
                "get_index_status": {"Finished": {"processed": 4}},
                "get_files_per_drive": [["C:", 4]],
                "get_indexing_by_drive_and_type": [["C:", "pdf", 4]],
            }
        )
        mgr = _manager(backend)

        outcome = await mgr.index()

        self.assertEqual(outcome.job_id, "job-9")
        self.assertIs(outcome.state, JobState.FINISHED)
        self.assertEqual(backend.calls[0], ("index_all_drives_start", {"session_token": "tok"}))
        self.assertEqual(mgr.store.summaries().files_per_drive, [("C:", 4)])


if __name__ == "__main__":
    unittest.main()
