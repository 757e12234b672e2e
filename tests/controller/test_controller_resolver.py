import asyncio
import unittest

from docportal.controller import CommandResolver
from docportal.errors import (
    CandidateTimeoutError,
    InvalidArgumentError,
    ResolutionExhaustedError,
)


def _fail(exc: Exception):
    async def call():
        raise exc

    return call


def _ok(value):
    async def call():
        return value

    return call


class TestCommandResolver(unittest.IsolatedAsyncioTestCase):
    async def test_first_success_wins_and_later_candidates_never_run(self) -> None:
        calls = []

        def track(name, thunk):
            def call():
                calls.append(name)
                return thunk()

            return call

        resolver = CommandResolver()
        result = await resolver.resolve(
            "op",
            [
                track("c1", _fail(RuntimeError("no"))),
                track("c2", _ok("A")),
                track("c3", _ok("B")),
            ],
        )
        self.assertEqual(result, "A")
        self.assertEqual(calls, ["c1", "c2"])

    async def test_exhaustion_wraps_last_error(self) -> None:
        e1, e2, e3 = RuntimeError("e1"), RuntimeError("e2"), RuntimeError("e3")
        resolver = CommandResolver()
        with self.assertRaises(ResolutionExhaustedError) as cm:
            await resolver.resolve("op", [_fail(e1), _fail(e2), _fail(e3)])

        err = cm.exception
        self.assertIs(err.cause, e3)
        self.assertIs(err.__cause__, e3)
        self.assertEqual(err.errors, [e1, e2, e3])
        self.assertEqual(err.operation, "op")
        self.assertIn("e3", str(err))

    async def test_empty_candidate_list_fails_fast(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            await CommandResolver().resolve("op", [])

    async def test_sync_raise_counts_as_failure(self) -> None:
        def boom():
            raise ValueError("sync")

        result = await CommandResolver().resolve("op", [boom, lambda: "plain"])
        self.assertEqual(result, "plain")

    async def test_none_is_a_successful_result(self) -> None:
        result = await CommandResolver().resolve("op", [_ok(None), _ok("later")])
        self.assertIsNone(result)

    async def test_timeout_moves_on_to_next_candidate(self) -> None:
        async def slow():
            await asyncio.sleep(5)
            return "slow"

        resolver = CommandResolver(candidate_timeout=0.01)
        result = await resolver.resolve("op", [slow, _ok("fast")])
        self.assertEqual(result, "fast")

    async def test_timeout_is_retained_as_candidate_error(self) -> None:
        async def slow():
            await asyncio.sleep(5)

        resolver = CommandResolver(candidate_timeout=0.01)
        with self.assertRaises(ResolutionExhaustedError) as cm:
            await resolver.resolve("op", [slow])
        self.assertIsInstance(cm.exception.cause, CandidateTimeoutError)

    def test_timeout_must_be_positive(self) -> None:
        with self.assertRaises(InvalidArgumentError):
            CommandResolver(candidate_timeout=0)


if __name__ == "__main__":
    unittest.main()
