"""Example: coalescing in-process pub-sub with sync and async subscribers."""

import asyncio
import logging

from queued_pubsub import KeepNewest, Message, PubSub

logging.basicConfig(level=logging.INFO)


async def main() -> None:
    # Only the latest price per symbol survives while messages sit in the queue.
    pubsub = PubSub(KeepNewest(key=lambda m: m.symbol))

    def printer(message: Message) -> None:
        print(f"[printer] {message.topic}: {message.payload}")

    async def first_only(message: Message) -> bool:
        await asyncio.sleep(0)
        print(f"[first_only] {message.topic}: {message.payload}")
        return True

    pubsub.subscribe(printer)
    once_id = pubsub.subscribe(first_only)

    pubsub.add_to_queue(Message(topic="prices", symbol="ACME", price=10))
    pubsub.add_to_queue(Message(topic="prices", symbol="ACME", price=11))
    pubsub.add_to_queue(Message(topic="prices", symbol="INIT", price=3))
    pubsub.add_to_queue(Message(topic="orders", order_id=201))
    print(f"queued: {pubsub.get_queue_length()}")

    await pubsub.publish()
    print(f"queued after publish: {pubsub.get_queue_length()}")
    print(f"first_only still subscribed: {pubsub.is_subscribed(once_id)}")
    print(pubsub.metrics.snapshot())


if __name__ == "__main__":
    asyncio.run(main())
