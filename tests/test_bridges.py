import asyncio
import threading
import unittest

from adtpy import Task, resolve, reject, from_async, to_future, from_callback, Failure
from adtpy import task as task_module


async def _async_const(x):
    await asyncio.sleep(0)
    return x


async def _async_fail(ex):
    await asyncio.sleep(0)
    raise ex


class TestAsyncBridges(unittest.IsolatedAsyncioTestCase):
    async def test_from_async_success(self):
        v = await to_future(from_async(lambda: _async_const(7)).map(lambda x: x + 1))
        self.assertEqual(v, 8)

    async def test_from_async_forwards_error_verbatim(self):
        boom = ValueError("bad")
        got = []
        done = asyncio.Event()

        def on_failure(e):
            got.append(e); done.set()

        from_async(lambda: _async_fail(boom)).fork(on_failure, lambda _: done.set())
        await done.wait()
        self.assertEqual(len(got), 1)
        self.assertIs(got[0], boom)

    async def test_round_trip_matches_direct_await(self):
        self.assertEqual(await to_future(from_async(lambda: _async_const(3))), await _async_const(3))
        boom = KeyError("k")
        with self.assertRaises(KeyError) as cm:
            await to_future(from_async(lambda: _async_fail(boom)))
        self.assertIs(cm.exception, boom)

    async def test_from_async_is_cold(self):
        box = {"n": 0}

        async def work():
            box["n"] += 1
            return box["n"]

        t = from_async(work)
        await asyncio.sleep(0)
        self.assertEqual(box["n"], 0)
        self.assertEqual(await to_future(t), 1)
        self.assertEqual(await to_future(t), 2)

    async def test_to_future_forks_immediately_once(self):
        box = {"n": 0}

        def run(_rej, res):
            box["n"] += 1
            res("v")

        fut = to_future(Task(run))
        self.assertEqual(box["n"], 1)
        self.assertEqual(await fut, "v")
        self.assertEqual(box["n"], 1)

    async def test_to_future_wraps_plain_failures(self):
        with self.assertRaises(Failure) as cm:
            await to_future(reject("plain"))
        self.assertEqual(cm.exception.error, "plain")

    async def test_to_future_captures_error_raised_while_forking(self):
        def bad(_):
            raise RuntimeError("in map")

        with self.assertRaises(RuntimeError):
            await to_future(resolve(1).map(bad))

    async def test_callback_from_other_thread(self):
        def read(done):
            threading.Thread(target=lambda: done(None, "from-thread")).start()

        v = await to_future(from_callback(read))
        self.assertEqual(v, "from-thread")

    async def test_chain_mixes_sync_and_async_steps(self):
        t = (
            resolve(2)
            .chain(lambda x: from_async(lambda: _async_const(x * 10)))
            .map(lambda x: x + 1)
        )
        self.assertEqual(await to_future(t), 21)

    async def test_from_async_step_error_becomes_failure(self):
        def bad(_):
            raise RuntimeError("after await")

        with self.assertRaises(RuntimeError) as cm:
            await asyncio.wait_for(to_future(from_async(lambda: _async_const(1)).map(bad)), 1)
        self.assertEqual(str(cm.exception), "after await")

    async def test_from_async_forwards_cancellation(self):
        async def never():
            await asyncio.Event().wait()

        got = []
        failed = asyncio.Event()

        def on_failure(e):
            got.append(e); failed.set()

        from_async(never).fork(on_failure, lambda _: None)
        await asyncio.sleep(0)
        for fut in list(task_module._in_flight):
            fut.cancel()
        await asyncio.wait_for(failed.wait(), 1)
        self.assertIsInstance(got[0], asyncio.CancelledError)

    async def test_from_async_releases_settled_futures(self):
        await to_future(from_async(lambda: _async_const(1)))
        await asyncio.sleep(0)
        self.assertEqual(len(task_module._in_flight), 0)

    async def test_callback_from_other_thread_with_failing_step(self):
        def read(done):
            threading.Thread(target=lambda: done(None, "from-thread")).start()

        def bad(_):
            raise RuntimeError("in thread step")

        with self.assertRaises(RuntimeError):
            await asyncio.wait_for(to_future(from_callback(read).map(bad)), 1)

    async def test_callback_from_other_thread_error(self):
        boom = OSError("disk")

        def read(done):
            threading.Thread(target=lambda: done(boom)).start()

        with self.assertRaises(OSError) as cm:
            await asyncio.wait_for(to_future(from_callback(read)), 1)
        self.assertIs(cm.exception, boom)

    async def test_callback_on_later_loop_iteration(self):
        def read(done):
            asyncio.get_running_loop().call_soon(done, None, 5)

        self.assertEqual(await to_future(from_callback(read).map(lambda x: x * 2)), 10)
