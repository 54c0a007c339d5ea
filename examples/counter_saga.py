"""Counter saga driven by SagaHost.

This example walks through every effect a saga can yield:
- render an intermediate "loading" artifact
- await an asynchronous value, cached by the saga's inputs
- hold local state and update it through the setter
- compute a memoized value keyed by the state

Each state update rebuilds the procedure from scratch. The awaited value is
replayed from history instead of being fetched again.

Run with: python examples/counter_saga.py
"""

import asyncio
import logging

from sagaflow import SagaHost, await_for, compute, render, saga, use_state

fetches = 0


async def fetch_start(label: str) -> int:
    global fetches
    fetches += 1
    await asyncio.sleep(0.05)
    return len(label)


@saga
def counter(label: str):
    yield render(f"[{label}] loading...")
    start = yield await_for(lambda: fetch_start(label), cache_by=[label])
    count, set_count = yield use_state(start)
    square = yield compute(lambda: count * count, [count])
    return {
        "text": f"[{label}] count={count} square={square}",
        "increment": lambda: set_count(count + 1),
    }


async def main() -> None:
    logging.basicConfig(level=logging.INFO)

    host = SagaHost(counter, on_update=lambda view: print("update:", view["text"] if isinstance(view, dict) else view))

    print("render:", host.render(label="clicks"))
    view = await host.settle()

    view["increment"]()
    host.view["increment"]()

    print("final:", host.view["text"])
    print("fetches:", fetches)


if __name__ == "__main__":
    asyncio.run(main())
